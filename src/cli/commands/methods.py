"""List the methods a remote host exposes."""

import typer
from rich.console import Console

from src.cli.output import format_error, format_table, json_output
from src.cli.utils import ConfigError, open_session, resolve_config, validate_host

console = Console()


def methods_command(
    host: str = typer.Option(None, "--host", "-H", help="Endpoint URL (overrides config)"),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List remote methods via system.listMethods."""
    try:
        if host:
            host = validate_host(host)
        config = resolve_config(host, persist=False)
    except ValueError as e:
        format_error(console, str(e))
        raise typer.Exit(code=2)
    except ConfigError as e:
        format_error(console, str(e), hint="Run 'xmlrpc init' to configure the client")
        raise typer.Exit(code=1)

    with open_session(config) as session:
        response = session.system.listMethods().get_response()

    if response.is_failure:
        format_error(console, f"Failed to list methods: {response.error}")
        raise typer.Exit(code=3)

    methods = sorted(str(m) for m in response.value or [])
    if json_flag:
        json_output(console, {"host": config.host, "methods": methods})
    else:
        format_table(console, f"Methods on {config.host}", ["Method"], [(m,) for m in methods])

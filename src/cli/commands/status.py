"""Show effective client configuration."""

import typer
from rich.console import Console

from src.cli.output import format_error, format_key_value, json_output
from src.cli.utils import ConfigManager
from src.cli.utils.config import ConfigError, sanitize_dict
from src.client import default_host_identity

console = Console()


def _get_status() -> dict:
    manager = ConfigManager()
    config = manager.load_effective()
    status = sanitize_dict(config.to_dict())
    status["domain"] = config.domain or default_host_identity()
    status["persist"] = bool(config.api_key) if config.persist is None else config.persist
    status["config_path"] = str(manager.config_path) if manager.exists() else None
    return status


def status_command(
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the configuration calls will use, with secrets masked."""
    try:
        status = _get_status()
    except ConfigError as e:
        if json_flag:
            json_output(console, {"status": "not_initialized", "error": str(e)})
        else:
            format_error(
                console, str(e), hint="Run 'xmlrpc init' to configure the client"
            )
        raise typer.Exit(code=1)

    if json_flag:
        json_output(console, {"status": "initialized", **status})
        return

    console.print("[bold]Client Status[/bold]")
    console.print()
    format_key_value(console, status)

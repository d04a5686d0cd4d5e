"""Run a chain of calls from a YAML or JSON file on one session."""

from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console

from src.cli.output import format_error, format_success, format_table, format_value, json_output, response_to_dict
from src.cli.utils import ConfigError, open_session, resolve_config, validate_host, validate_steps

console = Console()


def _load_steps(path: Path) -> list[tuple[str, list]]:
    if not path.exists():
        raise ValueError(f"Chain file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid chain file: {e}") from e
    return validate_steps(data)


def run_command(
    chain_file: Path = typer.Argument(..., help="YAML/JSON list of {method, params} steps"),
    host: str = typer.Option(None, "--host", "-H", help="Endpoint URL (overrides config)"),
    api_key: str = typer.Option(None, "--api-key", "-k", help="API key (overrides config)"),
    persist: Optional[bool] = typer.Option(None, "--persist/--no-persist", help="Send key authentication"),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Run each step in order, e.g. system.connect, user.login, node.save, user.logout.

    With persist on, a failed step makes the remaining steps no-ops.
    """
    try:
        steps = _load_steps(chain_file)
        if host:
            host = validate_host(host)
        config = resolve_config(host, api_key, persist)
    except ValueError as e:
        format_error(console, str(e))
        raise typer.Exit(code=2)
    except ConfigError as e:
        format_error(console, str(e), hint="Run 'xmlrpc init' to configure the client")
        raise typer.Exit(code=1)

    results = []
    with open_session(config) as session:
        for method, params in steps:
            response = session.call(method, *params).get_response()
            results.append({"method": method, **response_to_dict(response)})
        final = session.get_response()

    if json_flag:
        json_output(console, {"steps": results, "response": response_to_dict(final)})
    else:
        format_table(console, "Chain", ["#", "Method", "State"],
                     [(str(i), r["method"], r["state"]) for i, r in enumerate(results, 1)])
        if final.is_success:
            format_success(console, "Chain completed")
            format_value(console, final.value)
        else:
            format_error(console, f"Chain failed: {final.error}")

    if final.is_failure:
        raise typer.Exit(code=4)

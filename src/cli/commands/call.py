"""Call a single remote method."""

from typing import Any, Optional

import typer
from rich.console import Console

from src.cli.output import format_error, format_value, json_output, response_to_dict
from src.cli.utils import ConfigError, open_session, parse_param, resolve_config, validate_host, validate_method
from src.client import Response

console = Console()


def _call(method: str, params: list[Any], host: Optional[str], api_key: Optional[str],
          persist: Optional[bool]) -> Response:
    config = resolve_config(host, api_key, persist)
    with open_session(config) as session:
        return session.call(method, *params).get_response()


def call_command(
    method: str = typer.Argument(..., help="Remote method name, e.g. system.listMethods"),
    params: Optional[list[str]] = typer.Argument(None, help="Parameters (JSON literals or strings)"),
    host: str = typer.Option(None, "--host", "-H", help="Endpoint URL (overrides config)"),
    api_key: str = typer.Option(None, "--api-key", "-k", help="API key (overrides config)"),
    persist: Optional[bool] = typer.Option(None, "--persist/--no-persist", help="Send key authentication"),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Call METHOD on the remote host and print the result."""
    try:
        method = validate_method(method)
        if host:
            host = validate_host(host)
        args = [parse_param(p) for p in params or []]
    except ValueError as e:
        format_error(console, str(e))
        raise typer.Exit(code=2)

    try:
        response = _call(method, args, host, api_key, persist)
    except ConfigError as e:
        format_error(console, str(e), hint="Run 'xmlrpc init' to configure the client")
        raise typer.Exit(code=1)

    if json_flag:
        json_output(console, {"method": method, **response_to_dict(response)})
    elif response.is_success:
        format_value(console, response.value)
    else:
        format_error(console, str(response.error))

    if response.is_failure:
        raise typer.Exit(code=3)

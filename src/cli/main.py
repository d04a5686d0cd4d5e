"""Main CLI entry point for the XML-RPC session client."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from src.cli.commands.call import call_command
from src.cli.commands.init import init_command
from src.cli.commands.methods import methods_command
from src.cli.commands.run import run_command
from src.cli.commands.status import status_command

app = typer.Typer(
    name="xmlrpc",
    help="XML-RPC client with key authentication and chained sessions",
    no_args_is_help=True,
    add_completion=False,
)
console = Console()


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Debug logging"),
) -> None:
    setup_logging(verbose)


@app.command("init")
def init(
    host: str = typer.Option(..., "-H", "--host", help="XML-RPC endpoint URL"),
    api_key: str = typer.Option(None, "-k", "--api-key", help="API key"),
    domain: str = typer.Option(None, "-d", "--domain", help="Domain bound to the key"),
    timeout: float = typer.Option(30.0, "--timeout", help="Request timeout (seconds)"),
    force: bool = typer.Option(False, "-f", "--force", help="Overwrite config"),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Save endpoint configuration."""
    init_command(host, api_key, domain, timeout, force, json_flag)


@app.command("status")
def status(
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """Show effective configuration."""
    status_command(json_flag)


@app.command("call")
def call(
    method: str = typer.Argument(..., help="Remote method name"),
    params: Optional[list[str]] = typer.Argument(None, help="Parameters (JSON or strings)"),
    host: str = typer.Option(None, "-H", "--host"),
    api_key: str = typer.Option(None, "-k", "--api-key"),
    persist: Optional[bool] = typer.Option(None, "--persist/--no-persist"),
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """Call a remote method."""
    call_command(method, params, host, api_key, persist, json_flag)


@app.command("methods")
def methods(
    host: str = typer.Option(None, "-H", "--host"),
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """List remote methods."""
    methods_command(host, json_flag)


@app.command("run")
def run(
    chain_file: Path = typer.Argument(..., help="Chain file (YAML or JSON)"),
    host: str = typer.Option(None, "-H", "--host"),
    api_key: str = typer.Option(None, "-k", "--api-key"),
    persist: Optional[bool] = typer.Option(None, "--persist/--no-persist"),
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """Run a chain of calls on one session."""
    run_command(chain_file, host, api_key, persist, json_flag)


def main() -> None:
    """Entry point."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled[/yellow]")
        raise typer.Exit(130)

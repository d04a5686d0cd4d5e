"""Initialize client configuration for an XML-RPC endpoint."""

import typer
from rich.console import Console

from src.cli.output import format_error, format_success, json_output
from src.cli.utils import ClientConfig, ConfigManager, validate_host

console = Console()


def init_command(
    host: str = typer.Option(..., "--host", "-H", help="XML-RPC endpoint URL"),
    api_key: str = typer.Option(None, "--api-key", "-k", help="Key authentication API key"),
    domain: str = typer.Option(None, "--domain", "-d", help="Domain the API key is bound to"),
    timeout: float = typer.Option(30.0, "--timeout", help="Request timeout (seconds)"),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite existing configuration"
    ),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Write endpoint settings to ~/.xmlrpc/config.yaml (chmod 600)."""
    try:
        host = validate_host(host)
        if timeout <= 0:
            raise ValueError("Timeout must be positive")
    except ValueError as e:
        format_error(console, str(e))
        raise typer.Exit(code=2)

    config = ConfigManager()

    if config.exists() and not force:
        format_error(
            console,
            f"Configuration already exists at {config.config_path}",
            hint="Use --force to overwrite existing configuration",
        )
        raise typer.Exit(code=1)

    config.save(ClientConfig(host=host, api_key=api_key or None, domain=domain or None, timeout=timeout))

    if json_flag:
        json_output(
            console,
            {
                "status": "initialized",
                "host": host,
                "key_auth": bool(api_key),
                "config_path": str(config.config_path),
            },
        )
    else:
        format_success(console, "Client initialized successfully")
        console.print(f"[cyan]Host:[/cyan]      {host}")
        console.print(f"[cyan]Key auth:[/cyan]  {'enabled' if api_key else 'disabled'}")
        console.print(f"[cyan]Config:[/cyan]    {config.config_path}")

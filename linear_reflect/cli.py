"""CLI for the Linear to Reflect relay."""

import os
import sys
from pathlib import Path

import click
import requests
from rich.console import Console
from rich.table import Table

from .common import compute_hmac_sha256, setup_logging
from .config import ConfigError, RelayConfig
from .handler import SIGNATURE_HEADER

console = Console()


def _load_config() -> RelayConfig:
    try:
        return RelayConfig.from_env()
    except ConfigError as e:
        console.print(f"❌ Failed to load configuration: {e}", style="red")
        sys.exit(1)


def _resolve_secret(secret):
    # Signing only needs the webhook secret, not the full relay config
    secret = secret or os.getenv("WEBHOOK_SECRET", "")
    if not secret:
        console.print("❌ No signing secret: pass --secret or set WEBHOOK_SECRET", style="red")
        sys.exit(1)
    return secret


@click.group()
def cli():
    """Relay newly created Linear issues into Reflect notes."""
    pass


@cli.command()
@click.option("--host", default=None, help="Host to bind to (defaults to LINEAR_REFLECT_HOST)")
@click.option("--port", default=None, type=int, help="Port to bind to (defaults to LINEAR_REFLECT_PORT)")
@click.option("--reload", is_flag=True, help="Enable auto-reload")
def serve(host, port, reload):
    """Start the webhook receiver."""
    # Refuse to start at all when the environment is incomplete
    config = _load_config()
    host = config.host if host is None else host
    port = config.port if port is None else port

    console.print("🚀 Starting Linear webhook receiver...")
    console.print(f"📡 Host: {host}")
    console.print(f"🔌 Port: {port}")
    console.print(f"🔄 Reload: {reload}")

    import uvicorn

    try:
        if reload:
            uvicorn.run(
                "linear_reflect.server:app_from_env",
                factory=True,
                host=host,
                port=port,
                reload=True,
                log_level="info"
            )
        else:
            from .server import create_app

            setup_logging(config.log_dir)
            uvicorn.run(create_app(config), host=host, port=port, log_level="info")
    except KeyboardInterrupt:
        console.print("⏹️  Server stopped by user")


@cli.command()
def config():
    """Show current configuration."""
    relay_config = _load_config()

    table = Table(title="Linear Reflect Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    for name, value in relay_config.masked().items():
        table.add_row(name, value)

    console.print(table)


@cli.command()
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--secret", default=None, help="Signing secret (defaults to WEBHOOK_SECRET)")
def sign(payload_file, secret):
    """Print the linear-signature value for PAYLOAD_FILE."""
    secret = _resolve_secret(secret)
    click.echo(compute_hmac_sha256(payload_file.read_bytes(), secret))


@cli.command()
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--url", default="http://localhost:8080/", show_default=True, help="Receiver URL")
@click.option("--secret", default=None, help="Signing secret (defaults to WEBHOOK_SECRET)")
def send(payload_file, url, secret):
    """Post PAYLOAD_FILE to a running receiver with a valid signature."""
    secret = _resolve_secret(secret)
    body = payload_file.read_bytes()

    try:
        response = requests.post(
            url,
            headers={
                SIGNATURE_HEADER: compute_hmac_sha256(body, secret),
                "Content-Type": "application/json",
            },
            data=body,
            timeout=10,
        )
    except requests.exceptions.ConnectionError:
        console.print(f"❌ Could not connect to {url}. Is the receiver running?", style="red")
        sys.exit(1)

    console.print(f"Response status: {response.status_code}")
    console.print(f"Response body: {response.text}")


if __name__ == "__main__":
    cli()

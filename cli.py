"""CLI entry point for keyvault-proxy."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import BACKEND_HOST_ENV, CONFIG_FILE, load_config, resolve_backend_url
from core.exceptions import ConfigurationError
from ui.dashboard import Dashboard
from ui.log_utils import clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    config = load_config()

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

        if arg == "--check":
            try:
                backend_url = resolve_backend_url(config)
            except ConfigurationError as e:
                console.print(f"[red][ERROR][/red] {e}")
                sys.exit(1)
            console.print(f"[green]Backend:[/green] {backend_url}")
            return

    # Clear previous logs and start dashboard
    clear_logs()
    dashboard = Dashboard(config)

    try:
        app = create_app(config, dashboard)
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        console.print(f"[dim]Set {BACKEND_HOST_ENV} or edit backend.host in {CONFIG_FILE}[/dim]")
        sys.exit(1)

    import uvicorn

    uvicorn_config = uvicorn.Config(
        app,
        host="127.0.0.1",
        port=config.proxy.port,
        log_level="warning",
    )
    server = uvicorn.Server(uvicorn_config)

    dashboard.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", port=config.proxy.port, backend=config.backend.host)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = f"""
[bold cyan]Key Vault Proxy[/bold cyan]

Forwards Key Vault REST calls to the backend named by {BACKEND_HOST_ENV},
rewriting Host and appending this hop to Via.

[bold]Usage:[/bold]
    keyvault-proxy              Start with live dashboard
    keyvault-proxy --check      Show the resolved backend
    keyvault-proxy --config     Show config location
    keyvault-proxy --help       Show this help
"""
    console.print(help_text)


if __name__ == "__main__":
    main()

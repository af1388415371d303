"""CLI entry point for m3u8-proxy."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import CONFIG_FILE, load_config
from core.protocols import RequestLogger
from ui.dashboard import ConsoleLogger, Dashboard
from ui.log_utils import CLI_LOG_FILE, clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    config = load_config()
    plain = False

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            console.print(f"[bold]Log:[/bold] {CLI_LOG_FILE}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

        if arg == "--plain":
            plain = True
        else:
            console.print(f"[red][ERROR][/red] Unknown argument: {arg}")
            _print_help()
            sys.exit(2)

    clear_logs()
    dashboard = None
    logger: RequestLogger
    if plain:
        logger = ConsoleLogger()
    else:
        dashboard = Dashboard(config)
        logger = dashboard

    import uvicorn

    app = create_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="info" if plain and config.proxy.debug else "warning",
        timeout_keep_alive=config.limits.keep_alive_timeout,
    )
    server = uvicorn.Server(uvicorn_config)

    if dashboard:
        dashboard.start()
    else:
        console.print(f"[bold cyan]m3u8 proxy[/bold cyan] listening on {config.proxy.host}:{config.proxy.port}")
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", port=config.proxy.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        if dashboard:
            dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]m3u8 proxy[/bold cyan]

Forwards GET/HEAD requests to a base64-encoded target URL and adds CORS headers.

[bold]Usage:[/bold]
    m3u8-proxy              Start with live dashboard
    m3u8-proxy --plain      Start with one log line per request
    m3u8-proxy --config     Show config locations
    m3u8-proxy --help       Show this help

[bold]Requests:[/bold]
    GET /?url=<base64 url>&h=<base64 JSON headers>
"""
    console.print(help_text)


if __name__ == "__main__":
    main()

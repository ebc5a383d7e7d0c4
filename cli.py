"""CLI entry point for the image generation proxy."""

import logging
import sys
from datetime import datetime

from pydantic import ValidationError
from rich.console import Console

from app import GENERATE_PATH, create_app
from core.config import ProxyConfig, load_config
from core.protocols import RequestLogger
from ui.dashboard import Dashboard, PlainLogger
from ui.log_utils import CLI_LOG_FILE, clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    args = sys.argv[1:]
    if "--help" in args or "-h" in args:
        _print_help()
        return

    try:
        config = load_config()
    except ValidationError as e:
        console.print(f"[red][ERROR][/red] Invalid environment: {e}")
        sys.exit(1)

    if "--config" in args:
        _print_config(config)
        return

    _warn_missing_secrets(config)

    # Request URLs carry the upstream key as a query parameter
    logging.getLogger("httpx").setLevel(logging.WARNING)

    clear_logs()
    plain = "--plain" in args
    dashboard = None if plain else Dashboard(config)
    logger: RequestLogger = PlainLogger() if dashboard is None else dashboard

    import uvicorn

    app = create_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level="warning",
    )
    server = uvicorn.Server(uvicorn_config)

    if dashboard:
        dashboard.start()
    else:
        console.print(
            f"Listening on http://{config.server.host}:{config.server.port}{GENERATE_PATH}"
        )
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", port=config.server.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        if dashboard:
            dashboard.stop()


def _warn_missing_secrets(config: ProxyConfig) -> None:
    if not config.backend_key.get_secret_value():
        console.print("[yellow]Warning:[/yellow] BACKEND_KEY not set, every POST will get 401")
    if not config.gen_api_key.get_secret_value():
        console.print("[yellow]Warning:[/yellow] GEN_API_KEY not set, every POST will get 500")


def _print_config(config: ProxyConfig) -> None:
    """Print effective configuration without secret values."""
    def state(secret) -> str:
        return "[green]set[/green]" if secret.get_secret_value() else "[red]unset[/red]"

    origins = "*" if config.allows_any_origin else ", ".join(config.allowed_origins)
    console.print(f"[bold]Listen:[/bold] {config.server.host}:{config.server.port}")
    console.print(f"[bold]Upstream:[/bold] {config.upstream.url}")
    console.print(f"[bold]Timeout:[/bold] {config.upstream.timeout:.0f}s")
    console.print(f"[bold]Allowed origins:[/bold] {origins}")
    console.print(f"[bold]BACKEND_KEY:[/bold] {state(config.backend_key)}")
    console.print(f"[bold]GEN_API_KEY:[/bold] {state(config.gen_api_key)}")
    console.print(f"[bold]Log file:[/bold] {CLI_LOG_FILE}")


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]Image Generation Proxy[/bold cyan]

Forwards browser POSTs to the Gemini image API, keeping the API key server-side.

[bold]Usage:[/bold]
    gen-proxy              Start with live dashboard
    gen-proxy --plain      Start without dashboard
    gen-proxy --config     Show effective configuration
    gen-proxy --help       Show this help

[bold]Environment:[/bold]
    BACKEND_KEY            Shared secret expected in the x-backend-key header
    GEN_API_KEY            Upstream API key
    ALLOWED_ORIGINS        Comma-separated origins, or * (default)
    HOST / PORT            Listen address (default 127.0.0.1:8080)
"""
    console.print(help_text)


if __name__ == "__main__":
    main()

"""CLI entry point for netsuite-url-proxy."""

import sys
from datetime import datetime

from rich.console import Console
from rich.panel import Panel

from app import create_app
from core.config import CONFIG_FILE, SERVICE_NAME, Config, load_config
from core.exceptions import ConfigurationError
from ui.dashboard import ConsoleLogger, Dashboard
from ui.log_utils import clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    args = sys.argv[1:]

    if "--help" in args or "-h" in args:
        _print_help()
        return

    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        sys.exit(1)

    if "--config" in args:
        console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
        console.print_json(config.model_dump_json())
        return

    clear_logs()
    plain = "--plain" in args or not console.is_terminal
    logger = ConsoleLogger(console) if plain else Dashboard(config)

    import uvicorn

    app = create_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
        timeout_keep_alive=config.limits.keep_alive_timeout,
    )
    server = uvicorn.Server(uvicorn_config)

    _print_banner(config)
    if isinstance(logger, Dashboard):
        logger.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", host=config.proxy.host, port=config.proxy.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        if isinstance(logger, Dashboard):
            logger.stop()


def _print_banner(config: Config):
    """Print where the proxy listens and how to call it."""
    base = f"http://{config.proxy.host}:{config.proxy.port}"
    banner = f"""[green]✓[/green] Server running at: {base}

[bold]Health check:[/bold]   {base}/health
[bold]Proxy endpoint:[/bold] {base}/proxy?url=<EXTERNAL_URL>

[bold]Example:[/bold]
    POST {base}/proxy?url=https://api.example.com/endpoint

[dim]Use this URL in NetSuite as custscript_proxy_url = {base}/proxy[/dim]
[yellow]Remember to put the proxy behind HTTPS when deployed to production.[/yellow]"""
    console.print(Panel(banner, title=f"[bold cyan]{SERVICE_NAME}[/bold cyan]", border_style="cyan"))


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]NetSuite External URL Proxy[/bold cyan]

Forwards /proxy?url=<EXTERNAL_URL> requests to the external URL and relays the response.

[bold]Usage:[/bold]
    netsuite-url-proxy              Start with live dashboard
    netsuite-url-proxy --plain      Start with line-per-request logging
    netsuite-url-proxy --config     Show config location and effective settings
    netsuite-url-proxy --help       Show this help

[bold]Environment:[/bold]
    HOST    Interface to bind (default: localhost)
    PORT    Port to listen on (default: 3000)
"""
    console.print(help_text)


if __name__ == "__main__":
    main()

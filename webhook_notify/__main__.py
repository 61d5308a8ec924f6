"""Command-line entry point: ``github-webhook-notify --cfg data/config.toml``."""

import asyncio
from pathlib import Path
from typing import Annotated

import structlog
import typer

from webhook_notify import __version__
from webhook_notify.config import DEFAULT_CONFIG_PATH, load_settings
from webhook_notify.logging_config import configure_logging
from webhook_notify.server import serve

app = typer.Typer(help="Relay GitHub webhook events to Telegram chats.", add_completion=False)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit


@app.command()
def main(
    cfg: Annotated[
        Path,
        typer.Option("--cfg", "-c", help="Specify configure file location"),
    ] = Path(DEFAULT_CONFIG_PATH),
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version and exit"),
    ] = False,
) -> None:
    """Start the webhook server."""
    settings = load_settings(cfg)
    configure_logging(json_logs=not settings.debug, log_level=settings.log_level)
    logger = structlog.get_logger()
    logger.info("server_starting", version=__version__, bind=f"{settings.server.bind}:{settings.server.port}")
    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        # uvicorn re-raises the shutdown signal once the server has stopped.
        pass


if __name__ == "__main__":
    app()

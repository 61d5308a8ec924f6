"""Run the application under uvicorn with graceful shutdown."""

import uvicorn

from webhook_notify.config import Settings
from webhook_notify.main import create_app


def build_server(settings: Settings) -> uvicorn.Server:
    """Create the app and a uvicorn server bound to the configured address.

    On the first interrupt uvicorn stops accepting connections and gives
    in-flight requests ``server.grace_period`` seconds; the app lifespan then
    drains the delivery worker. A second interrupt forces the exit.
    """
    app = create_app(settings)
    config = uvicorn.Config(
        app,
        host=settings.server.bind,
        port=settings.server.port,
        timeout_graceful_shutdown=settings.server.grace_period,
        log_config=None,
        # Request lines carry the ?token= credential.
        access_log=False,
        lifespan="on",
    )
    server = uvicorn.Server(config)
    app.state.server = server
    return server


async def serve(settings: Settings) -> None:
    await build_server(settings).serve()

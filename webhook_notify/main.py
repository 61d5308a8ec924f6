"""FastAPI application factory with lifespan context manager."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from webhook_notify import __version__
from webhook_notify.config import Settings
from webhook_notify.errors import WebhookError
from webhook_notify.middleware.token_auth import TokenAuthMiddleware
from webhook_notify.routers import health, webhooks
from webhook_notify.schemas.responses import StatusResponse
from webhook_notify.services.delivery_queue import AsyncioDeliveryQueue, TerminateCommand
from webhook_notify.services.delivery_worker import DeliveryWorker
from webhook_notify.services.repository_router import RepositoryRouter
from webhook_notify.services.telegram_client import MessagingClient, TelegramClient

logger = structlog.get_logger()

_FORCE_EXIT_POLL_SECONDS = 0.5


def _status_response(status_code: int, reason: str | None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=StatusResponse(status=status_code, reason=reason).model_dump(),
    )


async def _wait_for_worker(app: FastAPI, worker_task: asyncio.Task) -> None:
    """Wait for the worker to drain, unless the operator forces an exit.

    ``app.state.server`` is the running ``uvicorn.Server`` when started from
    the CLI; a second interrupt sets its ``force_exit`` flag.
    """
    while not worker_task.done():
        server = getattr(app.state, "server", None)
        if server is not None and server.force_exit:
            logger.warning("delivery_worker_force_exit")
            worker_task.cancel()
            break
        await asyncio.wait({worker_task}, timeout=_FORCE_EXIT_POLL_SECONDS)
    try:
        await worker_task
    except asyncio.CancelledError:
        pass


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run the delivery worker for the lifetime of the application.

    On shutdown, after the server has finished in-flight requests, a
    terminate command is enqueued and the worker is awaited before the
    messaging client is closed.
    """
    queue: AsyncioDeliveryQueue = app.state.delivery_queue
    client: MessagingClient | None = app.state.messaging_client
    worker = DeliveryWorker(queue, client)
    app.state.delivery_worker = worker
    worker_task = asyncio.create_task(worker.run(), name="delivery-worker")

    try:
        yield
    finally:
        await queue.put(TerminateCommand())
        await _wait_for_worker(app, worker_task)
        if client is not None:
            await client.aclose()
        logger.info("delivery_worker_stopped", state=worker.state.value)


async def webhook_error_handler(request: Request, exc: WebhookError) -> JSONResponse:
    """Render a pipeline rejection as the status envelope."""
    logger.warning(
        "webhook_rejected",
        path=request.url.path,
        status=exc.status_code,
        reason=exc.reason,
    )
    return _status_response(exc.status_code, exc.reason)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Answer unknown paths and methods with 403."""
    if exc.status_code in (404, 405):
        return _status_response(403, "forbidden")
    return _status_response(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for any unhandled exception."""
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return _status_response(500, "Internal server error")


def create_app(settings: Settings, messaging_client: MessagingClient | None = None) -> FastAPI:
    """Build the application from *settings*.

    The repository table, delivery queue and messaging client are created
    here, before any request is served. A Telegram client is built from the
    settings unless *messaging_client* is given; with an empty bot token
    there is no client and deliveries are discarded.

    Raises:
        ValueError: If the Telegram API server URL is invalid.
    """
    if messaging_client is None and settings.telegram.bot_token:
        messaging_client = TelegramClient(
            settings.telegram.bot_token,
            settings.telegram.api_server,
        )

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.repository_router = RepositoryRouter.from_settings(settings)
    app.state.delivery_queue = AsyncioDeliveryQueue()
    app.state.messaging_client = messaging_client

    if settings.server.token:
        app.add_middleware(TokenAuthMiddleware, token=settings.server.token)

    app.add_exception_handler(WebhookError, webhook_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health.router)
    app.include_router(webhooks.router)
    return app

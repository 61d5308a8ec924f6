"""Shared test fixtures: settings, app, in-memory doubles and HTTP client."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from helpers import make_settings
from httpx import ASGITransport, AsyncClient

from webhook_notify.config import Settings
from webhook_notify.dependencies import get_delivery_queue
from webhook_notify.main import create_app
from webhook_notify.services.delivery_queue import InMemoryDeliveryQueue
from webhook_notify.services.telegram_client import InMemoryMessagingClient


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def mock_messaging_client() -> InMemoryMessagingClient:
    """Create a fresh in-memory messaging client for test inspection."""
    return InMemoryMessagingClient()


@pytest.fixture
def mock_delivery_queue() -> InMemoryDeliveryQueue:
    """Create a fresh in-memory delivery queue for test inspection."""
    return InMemoryDeliveryQueue()


@pytest.fixture
def app(settings: Settings, mock_messaging_client: InMemoryMessagingClient) -> FastAPI:
    return create_app(settings, messaging_client=mock_messaging_client)


@pytest.fixture
async def client(
    app: FastAPI,
    mock_delivery_queue: InMemoryDeliveryQueue,
) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx AsyncClient with the delivery queue overridden.

    The in-memory queue lets tests inspect the commands a request produced
    without running the delivery worker.
    """
    app.dependency_overrides[get_delivery_queue] = lambda: mock_delivery_queue
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

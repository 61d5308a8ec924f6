"""Centralized FastAPI dependencies for use with Depends().

Everything here is built once by ``create_app`` and stored on
``app.state``; tests swap implementations through
``app.dependency_overrides``.
"""

from fastapi import Request

from webhook_notify.services.delivery_queue import DeliveryQueue
from webhook_notify.services.repository_router import RepositoryRouter


def get_repository_router(request: Request) -> RepositoryRouter:
    """Return the read-only repository routing table."""
    return request.app.state.repository_router


def get_delivery_queue(request: Request) -> DeliveryQueue:
    """Return the producer side of the delivery queue.

    Defaults to the ``AsyncioDeliveryQueue`` drained by the app's worker.
    """
    return request.app.state.delivery_queue


__all__ = [
    "get_delivery_queue",
    "get_repository_router",
]

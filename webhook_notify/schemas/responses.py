"""Pydantic model for the JSON status envelope returned by every route."""

from pydantic import BaseModel

from webhook_notify import __version__


class StatusResponse(BaseModel):
    """Response body: server version, HTTP status and an optional reason."""

    version: str = __version__
    status: int
    reason: str | None = None

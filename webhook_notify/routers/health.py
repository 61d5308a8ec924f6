"""Health check endpoint."""

from fastapi import APIRouter

from webhook_notify.schemas.responses import StatusResponse

router = APIRouter()


@router.get("/", response_model=StatusResponse)
async def health() -> StatusResponse:
    """Report that the server is up. Needs no credential."""
    return StatusResponse(status=200)

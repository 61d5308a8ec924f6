"""GitHub webhook ingress: capture, verify, classify, route and enqueue."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Header, Request, Response, status

from webhook_notify.dependencies import get_delivery_queue, get_repository_router
from webhook_notify.errors import PayloadTooLargeError, WebhookError
from webhook_notify.schemas.responses import StatusResponse
from webhook_notify.schemas.webhooks import PingEvent
from webhook_notify.services.delivery_queue import DeliveryQueue, SendCommand
from webhook_notify.services.events import classify, extract_full_name, is_zero_hash
from webhook_notify.services.formatting import format_event
from webhook_notify.services.repository_router import RepositoryRouter
from webhook_notify.services.signature import verify_signature

logger = structlog.get_logger()

router = APIRouter(tags=["webhooks"])

MAX_BODY_SIZE = 262_144


async def read_body(request: Request, limit: int = MAX_BODY_SIZE) -> bytes:
    """Read the request body chunk by chunk, stopping once it exceeds *limit*.

    Raises:
        PayloadTooLargeError: As soon as the accumulated size passes *limit*;
            the rest of the body is never read.
    """
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise PayloadTooLargeError
    return bytes(body)


@router.post("/", response_model=StatusResponse)
async def github_webhook(
    request: Request,
    repository_router: Annotated[RepositoryRouter, Depends(get_repository_router)],
    delivery_queue: Annotated[DeliveryQueue, Depends(get_delivery_queue)],
    x_github_event: Annotated[str | None, Header()] = None,
    x_hub_signature_256: Annotated[str | None, Header()] = None,
) -> StatusResponse | Response:
    """Receive a GitHub webhook event.

    Pings are acknowledged with their greeting. Pushes are formatted and
    enqueued for delivery unless they carry the all-zero hash or target an
    ignored branch, both of which are answered with 204.
    """
    body = await read_body(request)

    full_name = extract_full_name(body)
    delivery = repository_router.resolve(full_name)
    verify_signature(delivery.secret, body, x_hub_signature_256)

    if x_github_event is None:
        logger.error("webhook_event_header_missing", repository=full_name)
        raise WebhookError("event type header missing")

    event = classify(x_github_event, body)

    if isinstance(event, PingEvent):
        logger.info("webhook_ping", repository=full_name, hook_id=event.hook_id)
        return StatusResponse(status=status.HTTP_200_OK, reason=event.zen)

    if is_zero_hash(event.before) or is_zero_hash(event.after):
        logger.info("webhook_skipped_zero_hash", repository=full_name, ref=event.ref)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    if event.branch_name in delivery.branch_ignore:
        logger.info("webhook_skipped_branch", repository=full_name, branch=event.branch_name)
        return Response(
            status_code=status.HTTP_204_NO_CONTENT,
            headers={"X-Webhook-Status": "skipped"},
        )

    await delivery_queue.put(SendCommand(destinations=delivery.destinations, text=format_event(event)))
    logger.info(
        "webhook_enqueued",
        repository=full_name,
        branch=event.branch_name,
        commits=len(event.commits),
        destinations=len(delivery.destinations),
    )
    return StatusResponse(status=status.HTTP_200_OK)

"""Classify raw webhook bodies into typed GitHub events.

Parsing happens in two passes. ``extract_full_name`` only reads the
repository name so the right secret can be chosen before the signature is
checked; ``classify`` parses the full payload once the body is trusted.
"""

import structlog
from pydantic import ValidationError

from webhook_notify.errors import EventParseError, UnsupportedEventError
from webhook_notify.schemas.webhooks import EarlyParse, GitHubEvent, PingEvent, PushEvent

logger = structlog.get_logger()

EVENT_MODELS: dict[str, type[PingEvent] | type[PushEvent]] = {
    "ping": PingEvent,
    "push": PushEvent,
}


def _parse_error(stage: str, body: bytes, exc: ValidationError) -> EventParseError:
    logger.error("webhook_parse_failed", stage=stage, error=str(exc))
    logger.error("webhook_raw_body", body=body.decode("utf-8", errors="replace"))
    return EventParseError(str(exc))


def extract_full_name(body: bytes) -> str:
    """Return ``repository.full_name`` from *body*, or ``""`` when absent.

    Raises:
        EventParseError: If *body* is not a JSON object.
    """
    try:
        return EarlyParse.model_validate_json(body).full_name
    except ValidationError as exc:
        raise _parse_error("pre-check", body, exc) from None


def classify(event_kind: str, body: bytes) -> GitHubEvent:
    """Parse *body* as the event named by the ``X-GitHub-Event`` header.

    Raises:
        UnsupportedEventError: If *event_kind* is not ``ping`` or ``push``.
        EventParseError: If the payload does not match the event schema.
    """
    model = EVENT_MODELS.get(event_kind)
    if model is None:
        raise UnsupportedEventError(event_kind)
    try:
        return model.model_validate_json(body)
    except ValidationError as exc:
        raise _parse_error(event_kind, body, exc) from None


def is_zero_hash(commit_hash: str) -> bool:
    """True for the all-zero hash GitHub uses on branch creation and deletion."""
    return commit_hash.strip("0") == ""

"""Exceptions raised by the webhook pipeline.

Each exception carries the HTTP status and the ``reason`` string that the
ingress renders into the JSON response envelope.
"""


class WebhookError(Exception):
    """Base class for request failures answered with a status envelope."""

    status_code: int = 500

    def __init__(self, reason: str, *, status_code: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        if status_code is not None:
            self.status_code = status_code


class PayloadTooLargeError(WebhookError):
    """Request body exceeded the ingress size ceiling."""

    status_code = 400

    def __init__(self) -> None:
        super().__init__("overflow")


class SignatureError(WebhookError):
    """``X-Hub-Signature-256`` header missing or not matching the body."""

    status_code = 403


class UnsupportedEventError(WebhookError):
    status_code = 400

    def __init__(self, event_kind: str) -> None:
        super().__init__(f"Unsupported event type {event_kind!r}")
        self.event_kind = event_kind


class EventParseError(WebhookError):
    """Payload could not be parsed for a recognised event kind."""

    status_code = 500

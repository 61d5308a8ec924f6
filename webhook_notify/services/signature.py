"""HMAC-SHA256 verification of GitHub webhook payloads."""

import hashlib
import hmac

from webhook_notify.errors import SignatureError

SIGNATURE_PREFIX = "sha256="


def compute_signature(secret: str, body: bytes) -> str:
    """Return the ``sha256=<hex>`` signature GitHub sends for *body*."""
    digest = hmac.new(
        secret.encode("utf-8"),
        msg=body,
        digestmod=hashlib.sha256,
    ).hexdigest()
    return SIGNATURE_PREFIX + digest


def verify_signature(secret: str, body: bytes, signature: str | None) -> None:
    """Verify the ``X-Hub-Signature-256`` header value against the raw body.

    An empty *secret* means the repository does not require signed
    payloads, so nothing is checked. The hex digest is compared
    case-insensitively in constant time.

    Raises:
        SignatureError: If the header is absent or does not match.
    """
    if not secret:
        return
    if signature is None:
        raise SignatureError("signature header missing")
    expected = compute_signature(secret, body)
    if not hmac.compare_digest(expected.encode(), signature.strip().lower().encode()):
        raise SignatureError("signature mismatch")

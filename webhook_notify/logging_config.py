"""Structured logging configuration using structlog.

``configure_logging`` sets up one processor chain for structlog and for the
stdlib loggers that uvicorn and httpx write to. Every record passes through
``redact_credentials`` first, so webhook secrets, the query-string token and
the Telegram bot token never reach the output.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import Any

import structlog

REDACTED = "***"

_CREDENTIAL_KEYS = frozenset({"secret", "secrets", "token", "bot_token"})

# /bot<id>:<secret>/ in Bot API URLs, and token=<value> in query strings.
_CREDENTIAL_PATTERNS = (
    (re.compile(r"/bot\d+:[\w-]+"), f"/bot{REDACTED}"),
    (re.compile(r"([?&]token=)[^&\s\"']*"), rf"\g<1>{REDACTED}"),
)


def _scrub(text: str) -> str:
    for pattern, replacement in _CREDENTIAL_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def redact_credentials(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Mask credential-named fields and credentials embedded in strings."""
    for key, value in event_dict.items():
        if key in _CREDENTIAL_KEYS and value:
            event_dict[key] = REDACTED
        elif isinstance(value, str):
            event_dict[key] = _scrub(value)
    return event_dict


def configure_logging(*, json_logs: bool = True, log_level: str = "INFO") -> None:
    """Configure structlog and route the stdlib root logger through it.

    Args:
        json_logs: Render JSON (production) or console output (``debug = true``).
        log_level: Root log level name (e.g. ``"INFO"``, ``"DEBUG"``).
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            redact_credentials,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    logging.getLogger("httpx").setLevel(logging.WARNING)

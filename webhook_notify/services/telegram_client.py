"""Telegram Bot API client with protocol-based swappable implementations.

Production code uses ``TelegramClient`` which posts to the Bot API through a
shared ``httpx.AsyncClient``. Tests use ``InMemoryMessagingClient`` which
records messages and can be told to fail for specific chats.
"""

from __future__ import annotations

from typing import Protocol

import httpx

DEFAULT_API_SERVER = "https://api.telegram.org"


class TelegramAPIError(Exception):
    """The Bot API rejected a request.

    The message never includes the request URL, which embeds the bot token.
    """

    def __init__(self, chat_id: int, description: str, status_code: int | None = None) -> None:
        super().__init__(f"sendMessage to {chat_id} failed: {description}")
        self.chat_id = chat_id
        self.description = description
        self.status_code = status_code


class MessagingClient(Protocol):
    """Protocol for sending a text message to a chat."""

    async def send_message(self, chat_id: int, text: str) -> None:
        """Send *text* as HTML with link previews disabled."""
        ...

    async def aclose(self) -> None:
        ...


class TelegramClient:
    """Production client for the Telegram Bot API.

    *api_server* points at a self-hosted Bot API server instead of
    ``api.telegram.org``. The URL is parsed here so a bad value fails at
    startup rather than on the first delivery.
    """

    def __init__(
        self,
        bot_token: str,
        api_server: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        base_url = httpx.URL(api_server or DEFAULT_API_SERVER)
        if base_url.scheme not in ("http", "https") or not base_url.host:
            msg = f"Invalid Telegram API server URL: {api_server!r}"
            raise ValueError(msg)
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=30.0,
            transport=transport,
        )
        self._method_prefix = f"/bot{bot_token}"

    async def send_message(self, chat_id: int, text: str) -> None:
        """Call ``sendMessage``.

        Raises:
            TelegramAPIError: On a non-2xx response or an ``ok: false`` body.
            httpx.TransportError: If the Bot API cannot be reached.
        """
        resp = await self._client.post(
            f"{self._method_prefix}/sendMessage",
            json={
                "chat_id": chat_id,
                "text": text,
                "parse_mode": "HTML",
                "disable_web_page_preview": True,
            },
        )
        try:
            data = resp.json()
        except ValueError:
            data = {}
        if resp.is_error or not data.get("ok", False):
            description = data.get("description") or resp.reason_phrase
            raise TelegramAPIError(chat_id, description, status_code=resp.status_code)

    async def aclose(self) -> None:
        await self._client.aclose()


class InMemoryMessagingClient:
    """Test double that records sent messages."""

    def __init__(self, fail_for: set[int] | None = None) -> None:
        self.messages: list[dict] = []
        self.fail_for = fail_for or set()
        self.closed = False

    async def send_message(self, chat_id: int, text: str) -> None:
        """Record the message, or raise for chats listed in ``fail_for``."""
        if chat_id in self.fail_for:
            raise TelegramAPIError(chat_id, "Bad Request: chat not found")
        self.messages.append({"chat_id": chat_id, "text": text})

    async def aclose(self) -> None:
        self.closed = True

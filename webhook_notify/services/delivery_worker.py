"""Single consumer of the delivery queue.

The worker owns the messaging client and sends each ``SendCommand`` to every
destination chat in turn. A failed chat is logged and skipped; nothing is
retried. ``TerminateCommand`` stops the loop and drops whatever is still
queued behind it.
"""

from __future__ import annotations

import enum

import structlog

from webhook_notify.services.delivery_queue import (
    AsyncioDeliveryQueue,
    SendCommand,
    TerminateCommand,
)
from webhook_notify.services.telegram_client import MessagingClient

logger = structlog.get_logger()


class WorkerState(enum.Enum):
    RUNNING = "running"
    DRAINING = "draining"
    TERMINATED = "terminated"


class DeliveryWorker:
    """Consume delivery commands until terminated.

    When *client* is ``None`` (no bot token configured) delivery is
    disabled: send commands are discarded, but terminate is still honoured
    so shutdown never blocks on the worker.
    """

    def __init__(self, queue: AsyncioDeliveryQueue, client: MessagingClient | None) -> None:
        self._queue = queue
        self._client = client
        self.state = WorkerState.RUNNING
        self.sent = 0
        self.failed = 0
        self.discarded = 0

    async def run(self) -> None:
        if self._client is None:
            logger.warning("delivery_disabled", reason="bot token is empty")
        try:
            while True:
                command = await self._queue.get()
                if isinstance(command, TerminateCommand):
                    break
                if self._client is None:
                    self.discarded += 1
                    continue
                await self._deliver(self._client, command)
        finally:
            self.state = WorkerState.DRAINING
            dropped = self._queue.clear()
            if dropped:
                logger.warning("delivery_commands_dropped", count=dropped)
            self.state = WorkerState.TERMINATED
            logger.debug("delivery_worker_exited", sent=self.sent, failed=self.failed)

    async def _deliver(self, client: MessagingClient, command: SendCommand) -> None:
        for chat_id in command.destinations:
            try:
                await client.send_message(chat_id, command.text)
            except Exception as exc:
                self.failed += 1
                logger.error(
                    "delivery_failed",
                    chat_id=chat_id,
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
            else:
                self.sent += 1

"""Delivery command queue with protocol-based swappable implementations.

Request handlers are the producers and ``DeliveryWorker`` is the single
consumer. Production code uses ``AsyncioDeliveryQueue``, a bounded
``asyncio.Queue`` whose ``put`` suspends the handler while the queue is full.
Tests use ``InMemoryDeliveryQueue`` which records commands for assertion.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Protocol

QUEUE_CAPACITY = 1024


@dataclass(frozen=True)
class SendCommand:
    """Send *text* to every chat in *destinations*."""

    destinations: tuple[int, ...]
    text: str


@dataclass(frozen=True)
class TerminateCommand:
    """Stop the worker; commands still queued behind it are dropped."""


DeliveryCommand = SendCommand | TerminateCommand


class DeliveryQueue(Protocol):
    """Protocol for handing delivery commands to the worker."""

    async def put(self, command: DeliveryCommand) -> None:
        """Enqueue *command*, waiting for room if the queue is bounded."""
        ...


class AsyncioDeliveryQueue:
    """Bounded FIFO shared by many producers and one consumer."""

    def __init__(self, maxsize: int = QUEUE_CAPACITY) -> None:
        self._queue: asyncio.Queue[DeliveryCommand] = asyncio.Queue(maxsize=maxsize)

    async def put(self, command: DeliveryCommand) -> None:
        await self._queue.put(command)

    async def get(self) -> DeliveryCommand:
        return await self._queue.get()

    def qsize(self) -> int:
        return self._queue.qsize()

    def clear(self) -> int:
        """Discard every queued command and return how many were dropped."""
        dropped = 0
        while True:
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return dropped
            dropped += 1


class InMemoryDeliveryQueue:
    """Test double that records enqueued commands for assertions."""

    def __init__(self) -> None:
        self.commands: list[DeliveryCommand] = []

    async def put(self, command: DeliveryCommand) -> None:
        self.commands.append(command)

    @property
    def sends(self) -> list[SendCommand]:
        return [c for c in self.commands if isinstance(c, SendCommand)]

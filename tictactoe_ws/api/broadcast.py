"""
Broadcast Channel - Fan-out of server messages to live connections.

Connections come from the transport and only need an async
send_json(data) method. Every connection gets its own outbox queue,
drained by a writer task:

    send()/broadcast()   enqueue and return immediately
    writer task          awaits send_json() for one connection, in order
    close()              cancels the writer and drops the outbox

A slow or stalled connection only backs up its own outbox. Once the
outbox is full further messages to it are dropped; every update is a
full snapshot, so the next one that fits brings it up to date. There
are no retries, and send failures are logged by the writer.
"""

from __future__ import annotations
from typing import Any, Hashable, Iterable, Optional, Protocol
import asyncio
import logging

from pydantic import BaseModel

from ..session.registry import SessionRegistry

logger = logging.getLogger(__name__)

OUTBOX_LIMIT = 32


class Connection(Protocol):
    """Outbound side of a transport connection (e.g. a Starlette WebSocket)."""

    async def send_json(self, data: Any) -> None:
        ...


class _Outbox:
    """Queue plus the task that writes it to one connection."""

    def __init__(self, connection: Connection, limit: int):
        self.connection = connection
        self.queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=limit)
        self.writer = asyncio.create_task(self._write())

    async def _write(self) -> None:
        while True:
            payload = await self.queue.get()
            try:
                await self.connection.send_json(payload)
            except Exception:
                logger.warning(
                    "Failed to send %r message to %r", payload.get("type"), self.connection,
                    exc_info=True,
                )
            finally:
                self.queue.task_done()


class BroadcastChannel:
    """
    Sends messages to every connection known to the registry.

    The recipient list is copied when a broadcast starts, so a
    connection closing mid-broadcast cannot disturb the iteration.
    Outboxes are created on first use and must be released with
    close() when the transport reports the disconnect.
    """

    def __init__(self, registry: SessionRegistry, outbox_limit: int = OUTBOX_LIMIT):
        self.registry = registry
        self.outbox_limit = outbox_limit
        self._outboxes: dict[Hashable, _Outbox] = {}

    async def send(self, connection: Connection, message: BaseModel) -> bool:
        """Point-to-point send. Returns False if the message was dropped."""
        return self._enqueue(connection, message.model_dump(mode="json"))

    async def broadcast(self, message: BaseModel) -> int:
        """
        Queue the same message for every live connection.

        Returns:
            Number of connections the message was queued for
        """
        payload = message.model_dump(mode="json")
        queued = 0
        for connection in self.registry.connections():
            if self._enqueue(connection, payload):
                queued += 1
        return queued

    def close(self, connection: Hashable) -> None:
        """Stop writing to a connection. Unsent messages are discarded."""
        outbox = self._outboxes.pop(connection, None)
        if outbox is not None:
            outbox.writer.cancel()

    async def flush(self, connections: Optional[Iterable[Hashable]] = None) -> None:
        """Wait until the given connections (default: all) have no pending messages."""
        if connections is None:
            outboxes = list(self._outboxes.values())
        else:
            outboxes = [self._outboxes[c] for c in connections if c in self._outboxes]
        await asyncio.gather(*(outbox.queue.join() for outbox in outboxes))

    def _enqueue(self, connection: Connection, payload: dict[str, Any]) -> bool:
        outbox = self._outboxes.get(connection)
        if outbox is None:
            outbox = self._outboxes[connection] = _Outbox(connection, self.outbox_limit)
        try:
            outbox.queue.put_nowait(payload)
        except asyncio.QueueFull:
            logger.warning(
                "Outbox full, dropping %r message to %r", payload.get("type"), connection,
            )
            return False
        return True

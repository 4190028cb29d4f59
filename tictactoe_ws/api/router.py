"""
Message Router - Entry point for everything the transport delivers.

The transport calls three coroutines:
    connect(conn)          new connection: assign a role, send it the state
    handle(conn, raw)      inbound frame: decode, apply, broadcast
    disconnect(conn)       connection closed: free its role, stop its writer

All three run under one asyncio.Lock, so each event is processed to
completion (mutation + queued broadcast) before the next one starts, no
matter which connection it came from. Outbound writes happen in the
channel's writer tasks, outside the lock.
"""

from __future__ import annotations
from typing import Hashable
import asyncio
import logging

from ..engine_core.state import Role
from ..session.game_session import GameSession
from ..session.registry import SessionRegistry
from .broadcast import BroadcastChannel, Connection
from .schemas import (
    AssignMessage,
    MoveMessage,
    ProtocolError,
    ResetMessage,
    UpdateMessage,
    decode_client_message,
)

logger = logging.getLogger(__name__)


class MessageRouter:
    """
    Wires the registry, the game and the broadcast channel together.

    Usage:
        router = MessageRouter.create()

        role = await router.connect(websocket)
        await router.handle(websocket, text)
        await router.disconnect(websocket)
    """

    def __init__(
        self,
        registry: SessionRegistry,
        game: GameSession,
        channel: BroadcastChannel,
    ):
        self.registry = registry
        self.game = game
        self.channel = channel
        self._lock = asyncio.Lock()

    @classmethod
    def create(cls, players_only_reset: bool = False) -> MessageRouter:
        """Build a router with a fresh registry, game and channel."""
        registry = SessionRegistry()
        game = GameSession(registry, players_only_reset=players_only_reset)
        return cls(registry, game, BroadcastChannel(registry))

    def snapshot_message(self) -> UpdateMessage:
        """Current game state as an `update` message."""
        return UpdateMessage.from_snapshot(self.game.snapshot())

    async def connect(self, connection: Connection) -> Role | None:
        """
        Register a connection and tell it which role it got.

        The `assign` notice goes to this connection only, followed by
        the current snapshot so a late joiner sees the board.
        """
        async with self._lock:
            role = self.registry.on_connect(connection)
            await self.channel.send(
                connection, AssignMessage(player=role.value if role else None)
            )
            await self.channel.send(connection, self.snapshot_message())
            return role

    async def disconnect(self, connection: Hashable) -> None:
        async with self._lock:
            self.registry.on_disconnect(connection)
            self.channel.close(connection)

    async def handle(self, connection: Hashable, raw: str | bytes) -> bool:
        """
        Process one inbound frame.

        Returns:
            True if the game changed and a snapshot was broadcast
        """
        async with self._lock:
            try:
                message = decode_client_message(raw)
            except ProtocolError as e:
                logger.warning("Dropping message from %r: %s", connection, e)
                return False

            if message is None:
                logger.debug("Ignoring message with unknown type from %r", connection)
                return False

            if isinstance(message, MoveMessage):
                changed = self._on_move(connection, message)
            elif isinstance(message, ResetMessage):
                changed = self._on_reset(connection)
            else:
                raise TypeError(f"Unhandled message type: {type(message).__name__}")

            if changed:
                await self.channel.broadcast(self.snapshot_message())
            return changed

    def _on_move(self, connection: Hashable, message: MoveMessage) -> bool:
        result = self.game.apply_move(connection, message.x, message.y)
        if not result.accepted:
            logger.debug(
                "Rejected move (%d, %d) from %s: %s",
                message.x, message.y,
                result.role.value if result.role else "spectator",
                result.reason.value,
            )
        return result.accepted

    def _on_reset(self, connection: Hashable) -> bool:
        if not self.game.can_reset(connection):
            logger.debug("Rejected reset from %r (no role)", connection)
            return False
        self.game.reset()
        return True

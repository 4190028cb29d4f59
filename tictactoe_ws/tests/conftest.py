"""
Pytest fixtures for tictactoe-ws tests.
"""

import pytest

from ..engine_core.state import Board
from ..session import SessionRegistry, GameSession
from ..api.broadcast import BroadcastChannel
from ..api.router import MessageRouter


class FakeConnection:
    """Stand-in for a transport connection that records what it was sent."""

    def __init__(self, name: str, fail: bool = False):
        self.name = name
        self.fail = fail
        self.sent: list[dict] = []

    async def send_json(self, data):
        if self.fail:
            raise ConnectionError(f"{self.name} is gone")
        self.sent.append(data)

    def of_type(self, message_type: str) -> list[dict]:
        return [m for m in self.sent if m["type"] == message_type]

    def __repr__(self):
        return f"FakeConnection({self.name!r})"


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def game(registry: SessionRegistry) -> GameSession:
    return GameSession(registry)


@pytest.fixture
def players(registry: SessionRegistry) -> tuple[FakeConnection, FakeConnection]:
    """Two connections registered as X and O, in that order."""
    x, o = FakeConnection("x"), FakeConnection("o")
    registry.on_connect(x)
    registry.on_connect(o)
    return x, o


@pytest.fixture
def router(registry: SessionRegistry, game: GameSession) -> MessageRouter:
    return MessageRouter(registry, game, BroadcastChannel(registry))


@pytest.fixture
def draw_board() -> Board:
    """X O X / X O O / O X X - full, no line."""
    return Board.from_rows([
        ["X", "O", "X"],
        ["X", "O", "O"],
        ["O", "X", "X"],
    ])

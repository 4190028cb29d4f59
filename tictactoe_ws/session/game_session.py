"""
Game Session - The single shared match.

States mirror Outcome:
    IN_PROGRESS --move completes a line--> WON(role)
    IN_PROGRESS --move fills the board---> DRAW
    any state   --reset------------------> IN_PROGRESS (empty board, X to move)

There is no per-match object. reset() reuses the same instance, so the
application creates exactly one GameSession at startup.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Hashable
import logging

from ..engine_core.state import Board, Outcome, Role
from ..engine_core.rules import evaluate
from .registry import SessionRegistry

logger = logging.getLogger(__name__)


class RejectReason(Enum):
    """Why a move request left the game unchanged."""
    SPECTATOR = "spectator"
    GAME_OVER = "game_over"
    NOT_YOUR_TURN = "not_your_turn"
    CELL_OCCUPIED = "cell_occupied"


@dataclass(frozen=True)
class MoveResult:
    """Result of apply_move(). reason is set only for rejected moves."""
    accepted: bool
    role: Role | None = None
    reason: RejectReason | None = None

    @classmethod
    def ok(cls, role: Role) -> MoveResult:
        return cls(accepted=True, role=role)

    @classmethod
    def rejected(cls, reason: RejectReason, role: Role | None = None) -> MoveResult:
        return cls(accepted=False, role=role, reason=reason)


@dataclass(frozen=True)
class GameSnapshot:
    """Board, turn and outcome at one point in time."""
    board: list[list[str | None]]
    next: Role
    outcome: Outcome


class GameSession:
    """
    Owns the board, the turn pointer and the current outcome.

    Usage:
        registry = SessionRegistry()
        game = GameSession(registry)

        result = game.apply_move(connection, x=0, y=0)
        if result.accepted:
            broadcast(UpdateMessage.from_snapshot(game.snapshot()))
    """

    def __init__(self, registry: SessionRegistry, players_only_reset: bool = False):
        self.registry = registry
        self.players_only_reset = players_only_reset
        self.board = Board()
        self.turn = Role.X
        self.outcome = Outcome.in_progress()

    def apply_move(self, connection: Hashable, x: int, y: int) -> MoveResult:
        """
        Try to place the sender's mark at (x, y).

        Rejected moves change nothing. Accepted moves write the cell,
        recompute the outcome and hand the turn to the other role.

        Raises:
            ValueError: if x or y is outside 0..2
        """
        # Validates the coordinates before any rule is checked.
        occupied = not self.board.is_empty(x, y)

        role = self.registry.role_of(connection)
        if role is None:
            return MoveResult.rejected(RejectReason.SPECTATOR)
        if self.outcome.is_over:
            return MoveResult.rejected(RejectReason.GAME_OVER, role)
        if role is not self.turn:
            return MoveResult.rejected(RejectReason.NOT_YOUR_TURN, role)
        if occupied:
            return MoveResult.rejected(RejectReason.CELL_OCCUPIED, role)

        self.board.place(x, y, role)
        self.outcome = evaluate(self.board)
        self.turn = role.other

        logger.info("%s played (%d, %d)", role.value, x, y)
        if self.outcome.is_over:
            logger.info("Game over: %s", self.outcome.to_wire())
        return MoveResult.ok(role)

    def can_reset(self, connection: Hashable) -> bool:
        """Any connection may reset unless the players-only policy is on."""
        if not self.players_only_reset:
            return True
        return self.registry.role_of(connection) is not None

    def reset(self) -> None:
        """Return to the initial state: empty board, X to move, in progress."""
        self.board.clear()
        self.turn = Role.X
        self.outcome = Outcome.in_progress()
        logger.info("Game reset")

    def snapshot(self) -> GameSnapshot:
        """Copy of the current state. Later moves do not change it."""
        return GameSnapshot(
            board=self.board.to_rows(),
            next=self.turn,
            outcome=self.outcome,
        )

"""
Session Module - Connection roles and the shared match.

There is exactly one match per process:
- SessionRegistry maps each live connection to X, O or spectator
- GameSession owns the board and applies moves and resets

Nothing is persisted. Restarting the process starts a fresh game.
"""

from .registry import SessionRegistry
from .game_session import GameSession, GameSnapshot, MoveResult, RejectReason

__all__ = [
    "SessionRegistry",
    "GameSession",
    "GameSnapshot",
    "MoveResult",
    "RejectReason",
]

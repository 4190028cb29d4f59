"""
Engine Core - Board state and rule evaluation.

1. Board holds the 3x3 grid
2. Role and Outcome describe who plays and how the game stands
3. evaluate() derives the Outcome from a Board
"""

from .state import BOARD_SIZE, Board, Cell, Outcome, OutcomeStatus, Role
from .rules import evaluate, winning_line

__all__ = [
    "BOARD_SIZE",
    "Board",
    "Cell",
    "Outcome",
    "OutcomeStatus",
    "Role",
    "evaluate",
    "winning_line",
]

"""
Game State - Board, roles and outcomes.

Design principles:
- Board dimensions are fixed at 3x3 for the lifetime of the process
- Cells are addressed as (x, y), stored row-major (cells[y][x])
- Outcome is a value derived from the board, never stored independently
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

BOARD_SIZE = 3


class Role(str, Enum):
    """The two active roles. A spectator has no role (None)."""
    X = "X"
    O = "O"

    @property
    def other(self) -> Role:
        return Role.O if self is Role.X else Role.X


# A cell is either empty (None) or holds the role that claimed it.
Cell = Optional[Role]


class OutcomeStatus(Enum):
    """High-level game status."""
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


@dataclass(frozen=True)
class Outcome:
    """
    Result of evaluating a board.

    winner is set only when status is WON.
    """
    status: OutcomeStatus
    winner: Role | None = None

    @classmethod
    def in_progress(cls) -> Outcome:
        return cls(status=OutcomeStatus.IN_PROGRESS)

    @classmethod
    def won_by(cls, role: Role) -> Outcome:
        return cls(status=OutcomeStatus.WON, winner=role)

    @classmethod
    def draw(cls) -> Outcome:
        return cls(status=OutcomeStatus.DRAW)

    @property
    def is_over(self) -> bool:
        return self.status != OutcomeStatus.IN_PROGRESS

    def to_wire(self) -> str | None:
        """Value of the `winner` field in update messages."""
        if self.status == OutcomeStatus.WON:
            return self.winner.value
        if self.status == OutcomeStatus.DRAW:
            return "draw"
        return None


def _check_coordinate(value: int, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < BOARD_SIZE:
        raise ValueError(f"{name} must be an integer in 0..{BOARD_SIZE - 1}, got {value!r}")


def _empty_cells() -> list[list[Cell]]:
    return [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]


@dataclass
class Board:
    """
    The shared 3x3 grid.

    Only GameSession mutates a live board; everything else reads it
    or works on copies.
    """
    cells: list[list[Cell]] = field(default_factory=_empty_cells)

    def __post_init__(self):
        if len(self.cells) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in self.cells):
            raise ValueError(f"Board must be {BOARD_SIZE}x{BOARD_SIZE}")

    @classmethod
    def from_rows(cls, rows: list[list[str | None]]) -> Board:
        """Build a board from wire-style rows, e.g. [["X", None, "O"], ...]."""
        return cls(cells=[
            [Role(value) if value is not None else None for value in row]
            for row in rows
        ])

    def get(self, x: int, y: int) -> Cell:
        _check_coordinate(x, "x")
        _check_coordinate(y, "y")
        return self.cells[y][x]

    def is_empty(self, x: int, y: int) -> bool:
        return self.get(x, y) is None

    def place(self, x: int, y: int, role: Role) -> None:
        _check_coordinate(x, "x")
        _check_coordinate(y, "y")
        self.cells[y][x] = role

    def clear(self) -> None:
        for row in self.cells:
            for x in range(BOARD_SIZE):
                row[x] = None

    def is_full(self) -> bool:
        return all(cell is not None for row in self.cells for cell in row)

    def lines(self) -> list[tuple[tuple[int, int], ...]]:
        """
        The eight winning triples as (x, y) coordinates.

        Order: rows top-to-bottom, columns left-to-right,
        main diagonal, anti-diagonal.
        """
        rows = [tuple((x, y) for x in range(BOARD_SIZE)) for y in range(BOARD_SIZE)]
        columns = [tuple((x, y) for y in range(BOARD_SIZE)) for x in range(BOARD_SIZE)]
        main_diagonal = tuple((i, i) for i in range(BOARD_SIZE))
        anti_diagonal = tuple((BOARD_SIZE - 1 - i, i) for i in range(BOARD_SIZE))
        return rows + columns + [main_diagonal, anti_diagonal]

    def to_rows(self) -> list[list[str | None]]:
        """Copy of the grid with roles rendered as "X"/"O"."""
        return [
            [cell.value if cell is not None else None for cell in row]
            for row in self.cells
        ]

    def copy(self) -> Board:
        return Board(cells=[row.copy() for row in self.cells])

"""
Rule Engine - Win/draw detection.

Pure functions over a Board. Safe to call any number of times;
the board is never modified.
"""

from __future__ import annotations

from .state import Board, Outcome


def winning_line(board: Board) -> tuple[tuple[int, int], ...] | None:
    """
    Return the first completed triple, or None.

    Triples are checked in Board.lines() order so the result is
    deterministic even for boards no real game could reach.
    """
    for line in board.lines():
        first = board.get(*line[0])
        if first is not None and all(board.get(x, y) == first for x, y in line[1:]):
            return line
    return None


def evaluate(board: Board) -> Outcome:
    """
    Compute the outcome of a board.

    A completed line always wins, even on a full board.
    """
    line = winning_line(board)
    if line is not None:
        return Outcome.won_by(board.get(*line[0]))
    if board.is_full():
        return Outcome.draw()
    return Outcome.in_progress()

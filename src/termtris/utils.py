"""Utility helpers for the Tetris engine."""

from __future__ import annotations

from typing import Optional

from .board import Board
from .tetromino import Tetromino


BASE_GRAVITY_MS = 500
MIN_GRAVITY_MS = 20
GRAVITY_DECAY = 0.85

LINES_PER_LEVEL = 10

# Points for clearing N rows with a single lock, before the level multiplier.
LINE_CLEAR_POINTS = {0: 0, 1: 100, 2: 300, 3: 500, 4: 800}
QUICK_DROP_POINTS_PER_ROW = 2


def gravity_interval_ms(level: int) -> float:
    """Return the fall interval in milliseconds for ``level``.

    The interval decreases as the level rises, speeding up the falling
    pieces, and never drops below ``MIN_GRAVITY_MS``.
    """

    # Exponentially decrease the delay but keep a practical lower bound
    return max(float(MIN_GRAVITY_MS), BASE_GRAVITY_MS * (GRAVITY_DECAY ** max(level, 0)))


def line_clear_score(lines: int, level: int) -> int:
    """Return the points for clearing ``lines`` rows at once on ``level``.

    Raises:
        ValueError: If ``lines`` is not a count a single tetromino can clear
            or ``level`` is negative.
    """

    if lines not in LINE_CLEAR_POINTS:
        raise ValueError(f"Cannot score {lines} cleared rows")
    if level < 0:
        raise ValueError("Level must be non-negative")
    return LINE_CLEAR_POINTS[lines] * (level + 1)


def quick_drop_score(rows: int) -> int:
    """Bonus for a quick-drop that travelled ``rows`` rows."""

    return QUICK_DROP_POINTS_PER_ROW * max(rows, 0)


def level_for_lines(lines: int, start_level: int = 0) -> int:
    return start_level + lines // LINES_PER_LEVEL


def can_move(
    board: Board,
    tetromino: Tetromino,
    dx: int = 0,
    dy: int = 0,
    rotation: Optional[int] = None,
) -> bool:
    """Return ``True`` if ``tetromino`` fits after moving by ``dx``/``dy``.

    ``rotation`` optionally replaces the piece's rotation index for the check.
    The function is used by the engine to validate both movement and rotation
    attempts before they are committed.
    """

    return board.can_place(tetromino.cells_at(rotation, tetromino.shifted(dx, dy)))


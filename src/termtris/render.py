"""Terminal-independent layout for drawing a :class:`Snapshot`.

Everything here works on plain strings and integers so it can be exercised
without a terminal; :mod:`termtris.terminal` turns the results into curses
calls.  A board cell is ``CELL_WIDTH`` characters wide and one line tall at
scale 1; ``--display=double`` multiplies both by two.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .board import Grid
from .engine import Snapshot
from .tetromino import TetrominoType, shape_offsets

CELL_WIDTH = 2
FILLED = "[]"
EMPTY = " ."
PANEL_GAP = 2
PANEL_WIDTH = 20

# Eight-colour ANSI palette indices: 0 black, 1 red, 2 green, 3 yellow,
# 4 blue, 5 magenta, 6 cyan, 7 white.
TAG_COLORS = {
    TetrominoType.I.tag: 6,
    TetrominoType.O.tag: 3,
    TetrominoType.T.tag: 5,
    TetrominoType.S.tag: 2,
    TetrominoType.Z.tag: 1,
    TetrominoType.J.tag: 4,
    TetrominoType.L.tag: 7,
}

CONTROLS = (
    "Left/Right: move",
    "Up: rotate",
    "Down: drop",
    "Other keys: quit",
)


def compose_frame(snapshot: Snapshot) -> Grid:
    """Return the locked grid with the active piece drawn in."""

    frame = snapshot.grid.copy()
    if snapshot.active is not None:
        for col, row in snapshot.active_cells:
            frame[row, col] = snapshot.active.tag
    return frame


def cell_origin(col: int, row: int, scale: int = 1) -> Tuple[int, int]:
    """Screen ``(y, x)`` of a board cell relative to the board interior."""

    return row * scale, col * CELL_WIDTH * scale


def text_rows(frame: Grid, scale: int = 1) -> List[str]:
    """Render ``frame`` as monochrome text lines, ``scale`` times larger."""

    lines: List[str] = []
    for row in frame.tolist():
        line = "".join((FILLED if tag else EMPTY) * scale for tag in row)
        lines.extend([line] * scale)
    return lines


def preview_rows(variant: Optional[TetrominoType]) -> List[str]:
    """Two text lines showing ``variant`` in its spawn orientation."""

    if variant is None:
        return ["", ""]
    offsets = shape_offsets(variant, 0)
    width = max(c for c, _ in offsets) + 1
    rows = []
    for r in range(2):
        rows.append("".join(FILLED if (c, r) in offsets else "  " for c in range(width)))
    return rows


def panel_lines(snapshot: Snapshot) -> List[str]:
    """Side panel text: counters, next piece and key help."""

    lines = [
        f"Score: {snapshot.score}",
        f"Lines: {snapshot.lines}",
        f"Level: {snapshot.level}",
        "",
        "Next:",
    ]
    lines.extend("  " + row for row in preview_rows(snapshot.upcoming))
    lines.append("")
    lines.extend(CONTROLS)
    return [line[:PANEL_WIDTH] for line in lines]


PANEL_HEIGHT = 5 + 2 + 1 + len(CONTROLS)


def required_size(width: int, height: int, scale: int = 1) -> Tuple[int, int]:
    """Minimum terminal ``(rows, cols)`` for a board of the given size."""

    rows = max(height * scale + 2, PANEL_HEIGHT + 1)
    cols = width * CELL_WIDTH * scale + 2 + PANEL_GAP + PANEL_WIDTH
    return rows, cols

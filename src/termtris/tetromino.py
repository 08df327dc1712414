"""Tetromino definitions and basic behaviour.

Each of the seven variants carries a static table of four rotation states.  A
rotation state is a list of ``(col, row)`` offsets relative to the piece's
anchor, with row ``0`` at the top of the board.  Pieces never look at the board
themselves: validating a move or rotation is the engine's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

Cell = Tuple[int, int]
RotationState = List[Cell]

# Every variant exposes exactly this many rotation indices, even when some of
# them share the same offsets (the O piece uses one shape for all four).
ROTATIONS = 4


class TetrominoType(str, Enum):
    """Enumeration of the seven standard tetromino shapes."""

    I = "I"
    O = "O"
    T = "T"
    S = "S"
    Z = "Z"
    J = "J"
    L = "L"

    @property
    def tag(self) -> int:
        """Non-zero integer stored in the board grid for this variant."""

        return _TAGS[self]

    @classmethod
    def from_tag(cls, tag: int) -> "TetrominoType":
        for t_type, value in _TAGS.items():
            if value == tag:
                return t_type
        raise ValueError(f"Unknown piece tag: {tag}")


_TAGS: Dict[TetrominoType, int] = {t: i + 1 for i, t in enumerate(TetrominoType)}


def _rotate(state: RotationState) -> RotationState:
    """Return ``state`` rotated 90 degrees clockwise.

    Rows grow downwards, so a clockwise turn maps ``(col, row)`` to
    ``(-row, col)``.  The result is normalised so that the minimum column and
    row are zero, which keeps it usable as offsets from an anchor.
    """

    rotated = [(-r, c) for c, r in state]
    min_c = min(c for c, _ in rotated)
    min_r = min(r for _, r in rotated)
    return sorted((c - min_c, r - min_r) for c, r in rotated)


def _generate_rotations(state: RotationState) -> List[RotationState]:
    """Generate the four rotation states for a piece starting from ``state``."""

    rotations = [sorted(state)]
    for _ in range(ROTATIONS - 1):
        state = _rotate(state)
        rotations.append(state)
    return rotations


# Spawn orientation of each tetromino as (col, row) offsets.  The remaining
# rotation states are derived via ``_generate_rotations``.
_BASE_SHAPES: Dict[TetrominoType, RotationState] = {
    TetrominoType.I: [(0, 0), (1, 0), (2, 0), (3, 0)],
    TetrominoType.O: [(0, 0), (1, 0), (0, 1), (1, 1)],
    TetrominoType.T: [(0, 0), (1, 0), (2, 0), (1, 1)],
    TetrominoType.S: [(1, 0), (2, 0), (0, 1), (1, 1)],
    TetrominoType.Z: [(0, 0), (1, 0), (1, 1), (2, 1)],
    TetrominoType.J: [(0, 0), (0, 1), (1, 1), (2, 1)],
    TetrominoType.L: [(2, 0), (0, 1), (1, 1), (2, 1)],
}


TETROMINO_SHAPES: Dict[TetrominoType, List[RotationState]] = {
    t_type: _generate_rotations(shape) for t_type, shape in _BASE_SHAPES.items()
}


def shape_offsets(shape: TetrominoType, rotation: int) -> RotationState:
    """Return the ``(col, row)`` offsets for ``shape`` at ``rotation``.

    Parameters
    ----------
    shape:
        The :class:`TetrominoType` to query.
    rotation:
        Index of the desired rotation state.  Values are wrapped so any integer
        is accepted.
    """

    states = TETROMINO_SHAPES[shape]
    return states[rotation % len(states)]


def shape_width(shape: TetrominoType, rotation: int = 0) -> int:
    return max(c for c, _ in shape_offsets(shape, rotation)) + 1


def spawn_anchor(shape: TetrominoType, board_width: int) -> Cell:
    """Anchor that centres ``shape``'s spawn orientation on the top row."""

    return ((board_width - shape_width(shape)) // 2, 0)


@dataclass
class Tetromino:
    """Active falling piece in the game."""

    shape: TetrominoType
    rotation: int = 0
    anchor: Cell = (0, 0)  # (col, row)

    def rotate(self, direction: int = 1) -> int:
        """Return the candidate rotation index one step in ``direction``.

        Positive values mean clockwise and negative values counter-clockwise;
        only the sign matters.  The piece itself is left untouched so that the
        caller can validate the candidate before committing it.
        """

        step = 1 if direction >= 0 else -1
        return (self.rotation + step) % ROTATIONS

    def shifted(self, dx: int, dy: int) -> Cell:
        """Return the anchor moved by ``dx`` columns and ``dy`` rows."""

        col, row = self.anchor
        return (col + dx, row + dy)

    def cells_at(
        self, rotation: Optional[int] = None, anchor: Optional[Cell] = None
    ) -> FrozenSet[Cell]:
        """Return the absolute cells for a candidate rotation and anchor.

        Either argument defaults to the piece's current value.
        """

        if rotation is None:
            rotation = self.rotation
        if anchor is None:
            anchor = self.anchor
        col, row = anchor
        return frozenset((col + dc, row + dr) for dc, dr in shape_offsets(self.shape, rotation))

    def cells(self) -> FrozenSet[Cell]:
        """Return the board cells currently covered by this piece."""

        return self.cells_at()

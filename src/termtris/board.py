"""Board representation for the Tetris playfield."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Tuple

import numpy as np
from numpy.typing import NDArray


# Dimensions of the standard Tetris board.
WIDTH = 10
HEIGHT = 20

Grid = NDArray[np.uint8]
Cell = Tuple[int, int]


def create_empty_grid(width: int = WIDTH, height: int = HEIGHT) -> Grid:
    """Return a new empty board grid filled with zeros."""

    return np.zeros((height, width), dtype=np.uint8)


class Board:
    """Tetris board holding the locked cells.

    Coordinates are ``(col, row)`` with row ``0`` at the top; the grid itself
    is indexed ``[row, col]``.
    """

    def __init__(self, width: int = WIDTH, height: int = HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Board dimensions must be positive")
        self.width = width
        self.height = height
        self.grid: Grid = create_empty_grid(width, height)

    def in_bounds(self, col: int, row: int) -> bool:
        """Return ``True`` if ``(col, row)`` lies on the board."""

        return 0 <= col < self.width and 0 <= row < self.height

    def cell(self, col: int, row: int) -> int:
        """Return the tag stored at ``(col, row)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if not self.in_bounds(col, row):
            raise IndexError("Cell out of bounds")
        return int(self.grid[row, col])

    def is_occupied(self, col: int, row: int) -> bool:
        """Return ``True`` if the cell at ``(col, row)`` holds a locked block.

        Callers must check :meth:`in_bounds` first.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        return self.cell(col, row) != 0

    def can_place(self, cells: Iterable[Cell]) -> bool:
        """Return ``True`` if every cell is on the board and unoccupied."""

        for col, row in cells:
            if not self.in_bounds(col, row):
                return False
            if self.grid[row, col] != 0:
                return False
        return True

    def lock(self, cells: Iterable[Cell], tag: int) -> None:
        """Write ``tag`` into each of ``cells``.

        Raises:
            ValueError: If ``tag`` is zero or any cell is off the board or
                already occupied.
        """
        cells = list(cells)
        if tag == 0:
            raise ValueError("Cannot lock cells with the empty tag")
        if not self.can_place(cells):
            raise ValueError(f"Cannot lock cells {sorted(cells)}")
        if not cells:
            return
        cols, rows = np.asarray(cells, dtype=np.int16).T
        self.grid[rows, cols] = np.uint8(tag)

    def clear_full_rows(self) -> List[int]:
        """Remove completed rows and return their indices, top to bottom.

        All rows are checked before any are removed, so adjacent and
        non-contiguous full rows are handled in the same pass.  The remaining
        rows keep their order and drop by the number of cleared rows below
        them; empty rows are inserted at the top.
        """

        full = np.all(self.grid != 0, axis=1)
        cleared = np.flatnonzero(full).tolist()
        if cleared:
            remaining = self.grid[~full]
            new_rows = np.zeros((len(cleared), self.width), dtype=self.grid.dtype)
            self.grid = np.vstack((new_rows, remaining))
        return cleared

    def occupied_cells(self) -> Iterator[Tuple[int, int, int]]:
        """Yield ``(col, row, tag)`` for every locked block."""

        rows, cols = np.nonzero(self.grid)
        for row, col in zip(rows.tolist(), cols.tolist()):
            yield col, row, int(self.grid[row, col])

    def copy(self) -> "Board":
        clone = Board(self.width, self.height)
        clone.grid = self.grid.copy()
        return clone

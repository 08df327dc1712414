"""High level game state container."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
import random

from .board import Board
from .tetromino import Tetromino, TetrominoType, spawn_anchor
from .utils import can_move, level_for_lines, line_clear_score


@dataclass
class GameState:
    """Mutable state for a Tetris game session."""

    board: Board = field(default_factory=Board)
    active: Optional[Tetromino] = None
    upcoming: Optional[TetrominoType] = None
    score: int = 0
    lines: int = 0
    level: int = 0
    start_level: int = 0
    pieces: int = 0
    game_over: bool = False
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def _random_type(self) -> TetrominoType:
        """Return a tetromino type chosen uniformly at random."""

        return self.rng.choice(list(TetrominoType))

    def spawn_tetromino(self) -> Optional[Tetromino]:
        """Spawn and return a new active tetromino.

        The piece in ``upcoming`` becomes active and a new upcoming piece is
        randomly selected.  The new piece spawns centred on the top row in its
        first rotation state.  If those cells are already taken the session is
        over: ``active`` is cleared, ``game_over`` is set and ``None`` is
        returned.
        """

        shape = self.upcoming or self._random_type()
        self.upcoming = self._random_type()
        piece = Tetromino(shape, anchor=spawn_anchor(shape, self.board.width))
        if not can_move(self.board, piece):
            self.active = None
            self.game_over = True
            return None
        self.active = piece
        return piece

    def piece_locked(self, cleared: int = 0) -> int:
        """Update the counters after a piece locks and return the points won.

        Points are scored at the level the rows were cleared on; the level is
        recomputed afterwards.
        """

        points = line_clear_score(cleared, self.level)
        self.score += points
        self.lines += cleared
        self.pieces += 1
        self.level = level_for_lines(self.lines, self.start_level)
        return points

    def reset_game(self, board: Optional[Board] = None) -> None:
        """Reset the entire game state for a new game.

        A fresh board of the same size is used unless ``board`` is given.  The
        random generator is kept so a seeded sequence carries on.
        """

        self.board = board if board is not None else Board(self.board.width, self.board.height)
        self.score = 0
        self.lines = 0
        self.level = self.start_level
        self.pieces = 0
        self.active = None
        self.upcoming = None
        self.game_over = False
        self.spawn_tetromino()

"""Falling-piece state machine.

The engine owns a :class:`~termtris.game_state.GameState` and moves it through
``SPAWNING -> FALLING -> LOCKING -> ROW_CLEARING -> SPAWNING`` until a spawn
collides (or the player quits), which ends in ``GAME_OVER``.  Front-ends feed it
one :class:`Command` or gravity tick at a time and read back a
:class:`StepResult` plus an immutable :class:`Snapshot` for drawing.

Illegal moves are ordinary input: they are rejected by returning an empty
result and leave the active piece exactly as it was.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from .board import Board, Grid
from .config import GameConfig
from .game_state import GameState
from .tetromino import Cell, TetrominoType
from .utils import can_move, quick_drop_score


LOGGER = logging.getLogger(__name__)


class Command(str, Enum):
    """Logical player commands accepted by :meth:`GameEngine.apply`."""

    LEFT = "left"
    RIGHT = "right"
    ROTATE = "rotate"
    DROP = "drop"
    QUIT = "quit"


class Phase(str, Enum):
    SPAWNING = "spawning"
    FALLING = "falling"
    LOCKING = "locking"
    ROW_CLEARING = "row_clearing"
    GAME_OVER = "game_over"


_SHIFTS = {
    Command.LEFT: (-1, 0),
    Command.RIGHT: (1, 0),
}


@dataclass(frozen=True)
class StepResult:
    """Events produced by a single command or gravity tick.

    ``game_over`` is only set on the step that ended the session.
    """

    moved: bool = False
    locked: bool = False
    cleared_rows: Tuple[int, ...] = ()
    score_delta: int = 0
    game_over: bool = False
    quit: bool = False

    @property
    def changed(self) -> bool:
        return self.moved or self.locked or self.game_over


@dataclass(frozen=True, eq=False)
class Snapshot:
    """Read-only view of everything a renderer needs."""

    grid: Grid
    active_cells: FrozenSet[Cell]
    active: Optional[TetrominoType]
    upcoming: Optional[TetrominoType]
    score: int
    lines: int
    level: int
    phase: Phase
    game_over: bool

    @property
    def height(self) -> int:
        return int(self.grid.shape[0])

    @property
    def width(self) -> int:
        return int(self.grid.shape[1])


class GameEngine:
    """Drive one game session from spawn to game over."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        *,
        board: Optional[Board] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or GameConfig()
        if board is None:
            board = Board(self.config.width, self.config.height)
        if rng is None:
            rng = random.Random(self.config.seed)
        self.state = GameState(
            board=board,
            rng=rng,
            level=self.config.start_level,
            start_level=self.config.start_level,
        )
        self.phase = Phase.SPAWNING
        self._spawn()

    # Properties -------------------------------------------------------
    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def game_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def level(self) -> int:
        return self.state.level

    @property
    def final_score(self) -> Optional[int]:
        """The session's score once it has ended, otherwise ``None``."""

        return self.state.score if self.game_over else None

    # Public API -------------------------------------------------------
    def apply(self, command: Command) -> StepResult:
        """Apply one player command.

        Commands received after game over are ignored.
        """

        command = Command(command)
        if self.game_over:
            return StepResult()
        if command is Command.QUIT:
            return self._quit()
        if command is Command.DROP:
            return self._quick_drop()
        if command is Command.ROTATE:
            return self._rotate()
        dx, dy = _SHIFTS[command]
        return self._shift(dx, dy)

    def tick(self) -> StepResult:
        """Gravity step: move down one row, or lock if that is not possible."""

        if self.game_over:
            return StepResult()
        if self._step_down():
            return StepResult(moved=True)
        return self._lock()

    def snapshot(self) -> Snapshot:
        grid = self.state.board.grid.copy()
        grid.setflags(write=False)
        active = self.state.active
        return Snapshot(
            grid=grid,
            active_cells=active.cells() if active is not None else frozenset(),
            active=active.shape if active is not None else None,
            upcoming=self.state.upcoming,
            score=self.state.score,
            lines=self.state.lines,
            level=self.state.level,
            phase=self.phase,
            game_over=self.game_over,
        )

    def reset(self) -> None:
        """Start a new session on an empty board."""

        self.state.reset_game()
        self.phase = Phase.GAME_OVER if self.state.game_over else Phase.FALLING

    # State machine ----------------------------------------------------
    def _spawn(self) -> bool:
        self.phase = Phase.SPAWNING
        state = self.state
        if state.spawn_tetromino() is None:
            self.phase = Phase.GAME_OVER
            LOGGER.debug("Spawn collision after %d pieces; final score %d", state.pieces, state.score)
            return False
        self.phase = Phase.FALLING
        return True

    def _shift(self, dx: int, dy: int) -> StepResult:
        piece = self.state.active
        if not can_move(self.state.board, piece, dx, dy):
            return StepResult()
        piece.anchor = piece.shifted(dx, dy)
        return StepResult(moved=True)

    def _rotate(self) -> StepResult:
        piece = self.state.active
        candidate = piece.rotate(1)
        if not can_move(self.state.board, piece, rotation=candidate):
            return StepResult()
        piece.rotation = candidate
        return StepResult(moved=True)

    def _step_down(self) -> bool:
        return self._shift(0, 1).moved

    def _quick_drop(self) -> StepResult:
        rows = 0
        while self._step_down():
            rows += 1
        bonus = quick_drop_score(rows)
        self.state.score += bonus
        result = self._lock()
        return replace(result, moved=rows > 0, score_delta=result.score_delta + bonus)

    def _lock(self) -> StepResult:
        state = self.state
        piece = state.active
        self.phase = Phase.LOCKING
        state.board.lock(piece.cells(), piece.shape.tag)
        state.active = None

        self.phase = Phase.ROW_CLEARING
        cleared = state.board.clear_full_rows()
        points = state.piece_locked(len(cleared))
        if cleared:
            LOGGER.debug(
                "Cleared rows %s for %d points; score %d, level %d",
                cleared,
                points,
                state.score,
                state.level,
            )

        spawned = self._spawn()
        return StepResult(
            locked=True,
            cleared_rows=tuple(cleared),
            score_delta=points,
            game_over=not spawned,
        )

    def _quit(self) -> StepResult:
        self.state.active = None
        self.state.game_over = True
        self.phase = Phase.GAME_OVER
        LOGGER.debug("Session quit with score %d", self.state.score)
        return StepResult(game_over=True, quit=True)

from __future__ import annotations

import random

import numpy as np
import pytest

from termtris.board import Board
from termtris.config import GameConfig
from termtris.engine import Command, GameEngine, Phase, StepResult
from termtris.tetromino import Tetromino, TetrominoType


def _blocked_board() -> Board:
    """Board filled from row 2 down, leaving column 9 open so nothing clears."""

    board = Board()
    board.grid[2:, :9] = 1
    return board


def test_engine_spawns_piece_on_start():
    engine = GameEngine(GameConfig(seed=1))
    snap = engine.snapshot()
    assert engine.phase is Phase.FALLING
    assert not snap.game_over
    assert snap.active is not None
    assert snap.upcoming is not None
    assert len(snap.active_cells) == 4
    assert min(r for _, r in snap.active_cells) == 0
    assert engine.final_score is None


def test_spawn_collision_is_game_over():
    board = Board()
    board.grid[0:2, :] = 1
    engine = GameEngine(board=board)
    snap = engine.snapshot()
    assert engine.game_over
    assert engine.phase is Phase.GAME_OVER
    assert snap.active is None
    assert snap.active_cells == frozenset()
    assert engine.final_score == 0


def test_lock_then_spawn_collision_ends_game():
    engine = GameEngine(board=_blocked_board())
    engine.state.active = Tetromino(TetrominoType.O, anchor=(4, 0))
    result = engine.tick()
    assert result.locked
    assert result.game_over
    assert engine.state.active is None
    assert engine.board.cell(4, 0) == TetrominoType.O.tag
    # Nothing more happens once the game is over.
    assert engine.tick() == StepResult()
    assert engine.apply(Command.LEFT) == StepResult()


def test_moves_and_rotation_are_committed_when_legal():
    engine = GameEngine()
    engine.state.active = Tetromino(TetrominoType.T, anchor=(4, 5))
    assert engine.apply(Command.LEFT).moved
    assert engine.state.active.anchor == (3, 5)
    assert engine.apply(Command.RIGHT).moved
    assert engine.apply(Command.RIGHT).moved
    assert engine.state.active.anchor == (5, 5)
    assert engine.apply(Command.ROTATE).moved
    assert engine.state.active.rotation == 1
    assert engine.apply("left").moved


def test_rejected_moves_leave_piece_unchanged():
    engine = GameEngine()
    piece = Tetromino(TetrominoType.I, rotation=0, anchor=(0, 19))
    engine.state.active = piece
    for command in (Command.LEFT, Command.ROTATE):
        result = engine.apply(command)
        assert result == StepResult()
        assert not result.changed
        assert engine.state.active is piece
        assert piece.anchor == (0, 19)
        assert piece.rotation == 0

    piece.anchor = (6, 19)
    assert not engine.apply(Command.RIGHT).moved
    assert piece.anchor == (6, 19)


def test_gravity_tick_moves_then_locks():
    engine = GameEngine()
    engine.state.active = Tetromino(TetrominoType.O, anchor=(0, 17))
    assert engine.tick() == StepResult(moved=True)
    result = engine.tick()
    assert result.locked and not result.game_over
    assert engine.board.cell(0, 19) == TetrominoType.O.tag
    assert engine.state.pieces == 1
    assert engine.phase is Phase.FALLING
    assert engine.state.active is not None


def test_quick_drop_clears_row_and_scores():
    board = Board()
    board.grid[19, 4:] = 2
    engine = GameEngine(board=board)
    engine.state.active = Tetromino(TetrominoType.I, anchor=(0, 0))
    result = engine.apply(Command.DROP)
    assert result.moved
    assert result.locked
    assert result.cleared_rows == (19,)
    # 100 for a single at level 0 plus 2 per row dropped.
    assert result.score_delta == 100 + 2 * 19
    assert engine.score == 138
    assert engine.state.lines == 1
    assert not engine.board.grid.any()


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_quick_drop_matches_repeated_gravity(seed: int):
    def make() -> GameEngine:
        board = Board()
        board.grid[19, :7] = 3
        board.grid[18, 2] = 5
        return GameEngine(board=board, rng=random.Random(seed))

    dropped = make()
    ticked = make()
    start_row = dropped.state.active.anchor[1]

    drop_result = dropped.apply(Command.DROP)
    rows = 0
    while True:
        result = ticked.tick()
        if result.locked:
            break
        rows += 1

    assert np.array_equal(dropped.board.grid, ticked.board.grid)
    assert drop_result.cleared_rows == result.cleared_rows
    assert dropped.score - ticked.score == 2 * rows
    assert rows >= start_row


def test_quit_ends_session():
    engine = GameEngine()
    result = engine.apply(Command.QUIT)
    assert result.quit and result.game_over
    assert engine.game_over
    assert engine.snapshot().active is None
    assert engine.final_score == 0
    assert engine.apply(Command.DROP) == StepResult()


def test_snapshot_is_read_only_copy():
    engine = GameEngine()
    snap = engine.snapshot()
    with pytest.raises(ValueError):
        snap.grid[0, 0] = 1
    engine.board.grid[19, 0] = 4
    assert snap.grid[19, 0] == 0
    assert (snap.width, snap.height) == (10, 20)


def test_reset_starts_a_fresh_game():
    engine = GameEngine(board=_blocked_board())
    engine.state.active = Tetromino(TetrominoType.O, anchor=(4, 0))
    engine.tick()
    assert engine.game_over
    engine.reset()
    assert not engine.game_over
    assert engine.phase is Phase.FALLING
    assert engine.score == 0
    assert not engine.board.grid.any()
    assert engine.snapshot().active is not None


def test_starting_level_multiplies_line_score():
    board = Board()
    board.grid[19, 4:] = 2
    engine = GameEngine(GameConfig(start_level=2), board=board)
    engine.state.active = Tetromino(TetrominoType.I, anchor=(0, 19))
    result = engine.tick()
    assert result.cleared_rows == (19,)
    assert result.score_delta == 300
    assert engine.level == 2


def test_random_play_keeps_invariants():
    rng = random.Random(1234)
    engine = GameEngine(GameConfig(seed=99))
    commands = [Command.LEFT, Command.RIGHT, Command.ROTATE, Command.DROP]
    for _ in range(3000):
        if engine.game_over:
            engine.reset()
        if rng.random() < 0.5:
            engine.tick()
        else:
            engine.apply(rng.choice(commands))
        snap = engine.snapshot()
        assert snap.grid.shape == (20, 10)
        if snap.game_over:
            assert snap.active is None
            continue
        assert snap.active is not None
        assert engine.board.can_place(snap.active_cells)

from __future__ import annotations

import pytest

from termtris.board import Board
from termtris.tetromino import (
    ROTATIONS,
    TETROMINO_SHAPES,
    Tetromino,
    TetrominoType,
    shape_offsets,
    spawn_anchor,
)


def test_every_variant_has_four_rotations_of_four_cells():
    assert len(TETROMINO_SHAPES) == 7
    for shape, states in TETROMINO_SHAPES.items():
        assert len(states) == ROTATIONS
        distinct = {tuple(sorted(state)) for state in states}
        assert 1 <= len(distinct) <= 4
        for state in states:
            assert len(set(state)) == 4
            assert min(c for c, _ in state) == 0
            assert min(r for _, r in state) == 0


def test_distinct_rotation_counts():
    def distinct(shape: TetrominoType) -> int:
        return len({tuple(sorted(s)) for s in TETROMINO_SHAPES[shape]})

    assert distinct(TetrominoType.O) == 1
    assert distinct(TetrominoType.I) == 2
    assert distinct(TetrominoType.S) == 2
    assert distinct(TetrominoType.T) == 4
    assert distinct(TetrominoType.L) == 4


def test_rotation_wraps_and_rotate_does_not_mutate():
    piece = Tetromino(TetrominoType.T, rotation=3, anchor=(2, 2))
    assert piece.rotate(1) == 0
    assert piece.rotate(-1) == 2
    assert piece.rotation == 3
    assert shape_offsets(TetrominoType.T, 5) == shape_offsets(TetrominoType.T, 1)


@pytest.mark.parametrize("shape", list(TetrominoType))
@pytest.mark.parametrize("direction", [1, -1])
def test_four_rotations_return_to_start(shape: TetrominoType, direction: int):
    piece = Tetromino(shape, anchor=(3, 4))
    start_cells = piece.cells()
    for _ in range(4):
        piece.rotation = piece.rotate(direction)
    assert piece.rotation == 0
    assert piece.cells() == start_cells


def test_cells_are_translation_invariant():
    piece = Tetromino(TetrominoType.L)
    for rotation in range(ROTATIONS):
        base = piece.cells_at(rotation, (0, 0))
        moved = piece.cells_at(rotation, (5, 7))
        assert moved == {(c + 5, r + 7) for c, r in base}


def test_tags_round_trip():
    tags = [t.tag for t in TetrominoType]
    assert sorted(tags) == list(range(1, 8))
    for t_type in TetrominoType:
        assert TetrominoType.from_tag(t_type.tag) is t_type
    with pytest.raises(ValueError):
        TetrominoType.from_tag(0)


def test_spawn_anchor_centres_piece():
    assert spawn_anchor(TetrominoType.I, 10) == (3, 0)
    assert spawn_anchor(TetrominoType.O, 10) == (4, 0)
    assert spawn_anchor(TetrominoType.T, 10) == (3, 0)


def test_can_place_agrees_with_cell_checks_for_all_placements():
    board = Board(6, 8)
    blocked = {(0, 7), (2, 5), (5, 3), (3, 0)}
    board.lock(blocked, 1)
    for shape in TetrominoType:
        piece = Tetromino(shape)
        for rotation in range(ROTATIONS):
            for col in range(-2, board.width + 1):
                for row in range(-2, board.height + 1):
                    cells = piece.cells_at(rotation, (col, row))
                    expected = all(
                        0 <= c < board.width and 0 <= r < board.height and (c, r) not in blocked
                        for c, r in cells
                    )
                    assert board.can_place(cells) is expected

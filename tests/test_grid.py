import random

import numpy as np
import pytest

from block_blast.game import FullLines, GameGrid, Piece, PreconditionViolation, find_full_lines


SINGLE = Piece.from_offsets([(0, 0)])
H_DOMINO = Piece.from_offsets([(0, 0), (1, 0)])
SQUARE = Piece.from_offsets([(0, 0), (1, 0), (0, 1), (1, 1)])


def _brute_force_lines(rows):
    size = len(rows)
    full_rows = tuple(y for y in range(size) if all(rows[y][x] == 1 for x in range(size)))
    full_cols = tuple(x for x in range(size) if all(rows[y][x] == 1 for y in range(size)))
    return full_rows, full_cols


def test_find_full_lines_detects_full_row_and_column():
    board = [
        [1, 1, 1],
        [1, 0, 1],
        [1, 0, 1],
    ]
    lines = find_full_lines(board)
    assert lines.rows == (0,)
    assert lines.cols == (0, 2)
    assert lines.count == 3


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_find_full_lines_matches_cell_by_cell_check(seed):
    rng = random.Random(seed)
    rows = [[1 if rng.random() < 0.85 else 0 for _ in range(8)] for _ in range(8)]
    rows[rng.randrange(8)] = [1] * 8
    col = rng.randrange(8)
    for row in rows:
        row[col] = 1
    grid = GameGrid.from_rows(rows)
    lines = grid.find_full_lines()
    assert (lines.rows, lines.cols) == _brute_force_lines(rows)
    assert list(lines.rows) == sorted(lines.rows)
    assert list(lines.cols) == sorted(lines.cols)


def test_find_full_lines_is_pure():
    grid = GameGrid(8)
    grid.grid[2, :] = 1
    grid.grid[:, 5] = 1
    before = grid.clone_state()
    assert grid.find_full_lines() == grid.find_full_lines()
    assert np.array_equal(grid.grid, before)


def test_empty_board_has_no_lines():
    lines = find_full_lines(GameGrid(8))
    assert not lines
    assert lines == FullLines()


def test_is_valid_placement_checks_bounds_and_occupancy():
    grid = GameGrid(8)
    assert grid.is_valid_placement(SQUARE, 6, 6)
    assert not grid.is_valid_placement(SQUARE, 7, 6)
    assert not grid.is_valid_placement(SQUARE, 6, 7)
    assert not grid.is_valid_placement(SINGLE, -1, 0)
    grid.grid[3, 4] = 1
    assert not grid.is_valid_placement(H_DOMINO, 3, 3)
    assert grid.is_valid_placement(H_DOMINO, 5, 3)


def test_place_fills_cells_and_reports_size():
    grid = GameGrid(8)
    assert grid.place(SQUARE, 2, 3) == 4
    assert grid.grid[3, 2] == grid.grid[3, 3] == grid.grid[4, 2] == grid.grid[4, 3] == 1
    assert int(grid.grid.sum()) == 4


def test_place_without_valid_target_raises_and_leaves_board_untouched():
    grid = GameGrid(8)
    grid.grid[1, 1] = 1
    before = grid.clone_state()
    with pytest.raises(PreconditionViolation):
        grid.place(SQUARE, 0, 0)
    with pytest.raises(PreconditionViolation):
        grid.place(H_DOMINO, 7, 0)
    assert np.array_equal(grid.grid, before)


def test_has_any_valid_move_on_nearly_full_board():
    grid = GameGrid(8)
    grid.grid[:, :] = 1
    grid.grid[4, 4] = 0
    assert grid.has_any_valid_move(SINGLE)
    assert not grid.has_any_valid_move(H_DOMINO)
    assert grid.valid_placements(SINGLE) == [(4, 4)]


def test_clear_lines_clears_intersection_once():
    grid = GameGrid(8)
    grid.grid[0, :] = 1
    grid.grid[:, 0] = 1
    grid.grid[5, 5] = 1
    lines = grid.find_full_lines()
    assert lines.rows == (0,)
    assert lines.cols == (0,)
    assert len(lines.cells(8)) == 15

    assert grid.clear_lines(lines) == 15
    assert not grid.grid[0, :].any()
    assert not grid.grid[:, 0].any()
    assert grid.grid[5, 5] == 1
    assert int(grid.grid.sum()) == 1


def test_clear_lines_without_lines_is_noop():
    grid = GameGrid(8)
    grid.grid[3, 3] = 1
    assert grid.clear_lines(FullLines()) == 0
    assert grid.grid[3, 3] == 1


def test_from_rows_validates_shape_and_values():
    with pytest.raises(ValueError):
        GameGrid.from_rows([[0, 1, 0], [0, 0, 0]])
    with pytest.raises(ValueError):
        GameGrid.from_rows([[0, 2], [0, 0]])
    with pytest.raises(ValueError):
        GameGrid(0)


def test_copy_is_independent():
    grid = GameGrid(4)
    clone = grid.copy()
    clone.place(SINGLE, 0, 0)
    assert grid.grid[0, 0] == 0
    assert clone.filled_ratio() == pytest.approx(1 / 16)

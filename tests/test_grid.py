"""Tests for grid helpers."""

import random

import pytest

from pixeltext.grid import (
    COLS,
    ROWS,
    active_cells,
    clamp_level,
    empty_grid,
    in_bounds,
    random_grid,
    set_cell,
    validate_grid,
)


def test_empty_grid_shape():
    grid = empty_grid()
    assert len(grid) == ROWS == 7
    assert all(len(row) == COLS == 53 for row in grid)
    assert active_cells(grid) == 0


def test_clamp_level():
    assert clamp_level(-3) == 0
    assert clamp_level(7.9) == 6
    assert clamp_level(3.99) == 3
    assert clamp_level(0.2, low=1) == 1


def test_set_cell_clamps_and_ignores_out_of_range():
    grid = empty_grid()
    set_cell(grid, 2, 10, 9)
    set_cell(grid, 7, 0, 3)
    set_cell(grid, 0, 53, 3)
    assert grid[2][10] == 6
    assert active_cells(grid) == 1
    assert in_bounds(6, 52) and not in_bounds(-1, 0)


def test_random_grid_levels():
    grid = random_grid(random.Random(7))
    validate_grid(grid)
    assert 0 < active_cells(grid) < ROWS * COLS


def test_validate_grid_rejects_bad_shapes():
    with pytest.raises(ValueError):
        validate_grid([[0] * COLS] * 6)
    with pytest.raises(ValueError):
        validate_grid([[0] * 52] + [[0] * COLS] * 6)
    bad = empty_grid()
    bad[3][3] = 7
    with pytest.raises(ValueError):
        validate_grid(bad)

"""The 7x53 intensity grid: rows are weekdays (0 = Sunday), columns are weeks."""

import random

ROWS, COLS = 7, 53
MAX_LEVEL = 6


def empty_grid():
    return [[0 for _ in range(COLS)] for _ in range(ROWS)]


def clamp_level(value, low=0):
    """Truncate ``value`` to an int level in ``[low, MAX_LEVEL]``."""
    return int(max(low, min(MAX_LEVEL, value)))


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < ROWS and 0 <= col < COLS


def set_cell(grid, row: int, col: int, level: int):
    if in_bounds(row, col):
        grid[row][col] = clamp_level(level)


def active_cells(grid) -> int:
    return sum(1 for row in grid for level in row if level > 0)


def column_sum(grid, col: int) -> int:
    return sum(grid[y][col] for y in range(ROWS))


def random_grid(rng=None, fill=0.3):
    """Scatter random levels over roughly ``fill`` of the cells."""
    rng = rng or random.Random()
    grid = empty_grid()
    for x in range(COLS):
        for y in range(ROWS):
            if rng.random() < fill:
                grid[y][x] = rng.randint(1, MAX_LEVEL)
    return grid


def validate_grid(grid):
    """Raise ``ValueError`` unless ``grid`` is a 7x53 grid of levels 0..6."""
    if len(grid) != ROWS:
        raise ValueError(f"grid must have {ROWS} rows, got {len(grid)}")
    for y, row in enumerate(grid):
        if len(row) != COLS:
            raise ValueError(f"row {y} must have {COLS} cells, got {len(row)}")
        for x, level in enumerate(row):
            if not 0 <= level <= MAX_LEVEL:
                raise ValueError(f"level {level} at ({y}, {x}) is outside 0..{MAX_LEVEL}")
    return grid

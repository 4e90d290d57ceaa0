"""Shared test fixtures."""

from __future__ import annotations

import shutil

import pytest

from pixeltext.grid import empty_grid

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


class FixedRandom:
    """Stands in for random.Random with a constant draw; 0.5 makes the jitter exactly 1.0."""

    def __init__(self, value: float = 0.5):
        self.value = value

    def random(self) -> float:
        return self.value


def grid_with(*cells):
    """Empty grid with (row, col, level) cells set."""
    grid = empty_grid()
    for row, col, level in cells:
        grid[row][col] = level
    return grid


@pytest.fixture
def fixed_rng() -> FixedRandom:
    return FixedRandom()


@pytest.fixture
def repo_dir(tmp_path):
    path = tmp_path / "art"
    path.mkdir()
    return path

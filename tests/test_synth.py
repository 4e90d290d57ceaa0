"""Tests for pattern synthesis."""

import random

import pytest

from pixeltext.glyphs import GlyphTable
from pixeltext.grid import COLS, ROWS, active_cells, empty_grid
from pixeltext.synth import (
    PatternSynthesizer,
    context_factor,
    neighbor_factor,
    synthesize,
    synthesize_custom,
    year_multiplier,
)

from conftest import FixedRandom, grid_with


def activity(grid):
    return {(y, x) for y in range(ROWS) for x in range(COLS) if grid[y][x] > 0}


@pytest.mark.parametrize("text", ["", "   ", None])
def test_blank_text_gives_empty_grid(text):
    grid = synthesize(text, 2024)
    assert grid == empty_grid()


def test_single_letter_lands_in_first_slot(fixed_rng):
    grid = synthesize("A", 2024, rng=fixed_rng)
    assert any(grid[y][x] > 0 for y in range(ROWS) for x in range(5, 9))
    assert all(0 <= v <= 6 for row in grid for v in row)
    active = activity(grid)
    assert all(1 <= grid[y][x] <= 6 for y, x in active)
    # 12 stamped cells plus their mirror images
    assert len(active) == 24
    assert active == {(y, 52 - x) for y, x in active}


def test_lowercase_and_padding_are_normalized(fixed_rng):
    assert synthesize("  a ", 2024, rng=fixed_rng) == synthesize("A", 2024, rng=FixedRandom())


def test_spaces_do_not_take_a_slot(fixed_rng):
    assert synthesize("A A", 2024, rng=fixed_rng) == synthesize("AA", 2024, rng=FixedRandom())


def test_stamping_stops_at_last_column():
    synth = PatternSynthesizer(rng=FixedRandom())
    grid = empty_grid()
    stamped = synth.stamp("ABCDEFGHIJKLMNOPQRST", grid)
    assert len(stamped) == 12
    assert all(grid[y][x] == 0 for y in range(ROWS) for x in range(5))
    assert all(v in (0, 1) for row in grid for v in row)


def test_non_letters_fall_through_to_blank_glyph():
    assert synthesize("123 !?", 2024) == empty_grid()


def test_unknown_letters_use_procedural_glyph():
    synth = PatternSynthesizer(glyphs=GlyphTable(bitmaps={}), rng=FixedRandom())
    grid = synth.synthesize("Q", 2024)
    assert active_cells(grid) > 0
    assert all(0 <= v <= 6 for row in grid for v in row)


def test_seeded_runs_repeat():
    a = synthesize("HELLO", 2024, rng=random.Random(42))
    b = synthesize("HELLO", 2024, rng=random.Random(42))
    assert a == b


def test_jitter_does_not_change_which_cells_are_active():
    low = synthesize("WORLD", 2022, rng=FixedRandom(0.0))
    high = synthesize("WORLD", 2022, rng=FixedRandom(0.999))
    assert activity(low) == activity(high)


def test_isolated_cell_score():
    synth = PatternSynthesizer(rng=FixedRandom())
    grid = grid_with((3, 5, 1))
    synth.predict_intensity(["A"], grid)
    # 3.0 * 1.0 (Wednesday) * 1.2 (vowel) * 0.7 (no active neighbours) * 1.0
    assert grid[3][5] == 2


def test_prediction_never_zeroes_an_active_cell():
    synth = PatternSynthesizer(rng=FixedRandom(0.0))
    grid = grid_with((6, 40, 1))
    synth.predict_intensity(["!"], grid)
    assert grid[6][40] == 1


def test_context_factor():
    assert context_factor("A") == 1.2
    assert context_factor("T") == 1.1
    assert context_factor("B") == 1.0
    assert context_factor("3") == 0.8
    assert context_factor("") == 0.8


def test_neighbor_factor():
    grid = grid_with((1, 1, 3), (0, 0, 3))
    # corner cell has three neighbours
    assert neighbor_factor(grid, 0, 0) == pytest.approx(0.7 + (3 / 3) * 0.3)
    assert neighbor_factor(grid, 3, 30) == pytest.approx(0.7)


@pytest.mark.parametrize("year,expected", [(2030, 1.2), (2023, 1.2), (2022, 1.1), (2020, 1.1),
                                           (2019, 1.0), (2015, 1.0), (2014, 0.9), (1970, 0.9)])
def test_year_multiplier(year, expected):
    assert year_multiplier(year) == expected


def test_activity_weekend_and_year():
    synth = PatternSynthesizer()
    grid = grid_with((0, 1, 5), (3, 1, 5), (4, 1, 6), (6, 2, 1))
    synth.apply_activity(grid, 2024)
    assert grid[0][1] == 3  # int(5 * 0.7) = 3, int(3 * 1.2) = 3
    assert grid[3][1] == 6
    assert grid[4][1] == 6
    assert grid[6][2] == 1
    assert grid[5][1] == 0


def test_activity_old_year_keeps_floor():
    synth = PatternSynthesizer()
    grid = grid_with((2, 2, 1))
    synth.apply_activity(grid, 2001)
    assert grid[2][2] == 1


def test_custom_density_rescales_active_cells():
    base = synthesize("HI", 2024, rng=FixedRandom())
    flat = synthesize_custom("HI", 2024, density=0.0, rng=FixedRandom())
    full = synthesize_custom("HI", 2024, density=10.0, rng=FixedRandom())
    assert activity(flat) == activity(base) == activity(full)
    assert {flat[y][x] for y, x in activity(flat)} == {1}
    assert {full[y][x] for y, x in activity(full)} == {6}


def test_custom_unit_density_without_passes_is_plain_synthesis():
    assert synthesize_custom("HI", 2024, rng=FixedRandom()) == synthesize("HI", 2024, rng=FixedRandom())


def test_custom_blank_text_uses_default_word():
    grid = synthesize_custom("", 2024, rng=FixedRandom())
    assert grid == synthesize("OPTIMIZED", 2024, rng=FixedRandom())


def test_custom_reruns_passes_above_half():
    grid = synthesize_custom("LONGERTEXT", 2021, density=1.0, symmetry=0.9, continuity=0.9, rng=FixedRandom())
    assert all(0 <= v <= 6 for row in grid for v in row)
    active = activity(grid)
    assert active == {(y, 52 - x) for y, x in active}

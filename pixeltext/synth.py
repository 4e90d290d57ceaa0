"""Text -> intensity grid.

Synthesis runs in four phases over a fresh grid:

1. base stamping: glyphs mark the active cells with level 1;
2. intensity prediction: each active cell gets a level from hand-tuned
   weights (weekday, letter, neighbourhood) and a small random jitter;
3. visual optimization (see :mod:`pixeltext.optimize`);
4. activity realism: quieter weekends, busier recent years.

The only source of randomness is ``rng``; pass a seeded ``random.Random``
(or anything with a ``random()`` method) to get repeatable grids.
"""

import logging
import random

from pixeltext.config import settings
from pixeltext.glyphs import GLYPH_COLS, GLYPH_ROWS, GLYPHS
from pixeltext.grid import COLS, ROWS, clamp_level, empty_grid, in_bounds, set_cell
from pixeltext.optimize import VisualOptimizer

logger = logging.getLogger(__name__)

BASE_INTENSITY = 3.0
# Sunday..Saturday, peaking mid-week
POSITION_WEIGHTS = (0.8, 0.9, 1.0, 1.0, 0.9, 0.8, 0.7)

VOWELS = "AEIOU"
COMMON_CONSONANTS = "LNRST"

WEEKEND_ROWS = (0, 6)
WEEKEND_FACTOR = 0.7

DEFAULT_CUSTOM_TEXT = "OPTIMIZED"


def year_multiplier(year: int) -> float:
    if year >= 2023:
        return 1.2
    if year >= 2020:
        return 1.1
    if year >= 2015:
        return 1.0
    return 0.9


def context_factor(char: str) -> float:
    if len(char) == 1 and "A" <= char <= "Z":
        if char in VOWELS:
            return 1.2
        if char in COMMON_CONSONANTS:
            return 1.1
        return 1.0
    return 0.8


def neighbor_factor(grid, day: int, week: int) -> float:
    total, count = 0, 0
    for dd in (-1, 0, 1):
        for dw in (-1, 0, 1):
            if dd == 0 and dw == 0:
                continue
            y, x = day + dd, week + dw
            if in_bounds(y, x):
                total += grid[y][x]
                count += 1
    if count:
        return 0.7 + (total / count) * 0.3
    return 1.0


class PatternSynthesizer:
    def __init__(self, glyphs=GLYPHS, optimizer=None, rng=None, start_column=None, glyph_threshold=None):
        self.glyphs = glyphs
        self.optimizer = optimizer or VisualOptimizer()
        self.rng = rng or random.Random()
        self.start_column = settings.start_column if start_column is None else start_column
        self.glyph_threshold = settings.glyph_threshold if glyph_threshold is None else glyph_threshold

    def synthesize(self, text, year: int):
        text = (text or "").upper().strip()
        grid = empty_grid()
        if not text:
            return grid

        stamped = self.stamp(text, grid)
        self.predict_intensity(stamped, grid)
        self.optimizer.optimize(grid)
        self.apply_activity(grid, year)
        logger.debug("synthesized %r for %d: %d glyphs", text, year, len(stamped))
        return grid

    def synthesize_custom(self, text, year: int, density=1.0, symmetry=0.0, continuity=0.0):
        """Synthesize, then rescale by ``density`` and optionally rerun symmetry/continuity."""
        if not text or not text.strip():
            text = DEFAULT_CUSTOM_TEXT
        grid = self.synthesize(text, year)

        for y in range(ROWS):
            for x in range(COLS):
                if grid[y][x] > 0:
                    grid[y][x] = clamp_level(grid[y][x] * density, low=1)
        if symmetry > 0.5:
            self.optimizer.symmetry(grid)
        if continuity > 0.5:
            self.optimizer.continuity(grid)
        return grid

    # ---------- phase 1 ----------
    def stamp(self, text: str, grid):
        """Stamp glyphs from ``start_column``; returns the characters that got a slot."""
        stamped = []
        for c in text:
            if c == " ":
                continue
            start = self.start_column + len(stamped) * GLYPH_COLS
            if start >= COLS:
                break
            glyph = self.glyphs.get(c)
            for day in range(GLYPH_ROWS):
                for week in range(GLYPH_COLS):
                    if glyph[day][week] > self.glyph_threshold:
                        set_cell(grid, day, start + week, 1)
            stamped.append(c)
        return stamped

    # ---------- phase 2 ----------
    def predict_intensity(self, stamped, grid):
        for week in range(COLS):
            for day in range(ROWS):
                if grid[day][week] > 0:
                    score = self.score(stamped, grid, day, week)
                    grid[day][week] = clamp_level(score, low=1)
        return grid

    def score(self, stamped, grid, day: int, week: int) -> float:
        slot = (week - self.start_column) // GLYPH_COLS
        char = stamped[max(0, min(len(stamped) - 1, slot))] if stamped else ""
        jitter = 0.8 + self.rng.random() * 0.4
        return (BASE_INTENSITY * POSITION_WEIGHTS[day] * context_factor(char)
                * neighbor_factor(grid, day, week) * jitter)

    # ---------- phase 4 ----------
    def apply_activity(self, grid, year: int):
        multiplier = year_multiplier(year)
        for week in range(COLS):
            for day in range(ROWS):
                level = grid[day][week]
                if level > 0:
                    if day in WEEKEND_ROWS:
                        level = max(1, int(level * WEEKEND_FACTOR))
                    grid[day][week] = clamp_level(level * multiplier, low=1)
        return grid


def synthesize(text, year: int, rng=None):
    return PatternSynthesizer(rng=rng).synthesize(text, year)


def synthesize_custom(text, year: int, density=1.0, symmetry=0.0, continuity=0.0, rng=None):
    return PatternSynthesizer(rng=rng).synthesize_custom(text, year, density, symmetry, continuity)

"""Smoothing passes run over a synthesized grid.

All passes work in place on the grid they are given and return it, so they
can be chained. Levels never leave [0, MAX_LEVEL].
"""

import logging

from pixeltext.config import settings
from pixeltext.grid import COLS, ROWS, column_sum

logger = logging.getLogger(__name__)


class VisualOptimizer:
    def __init__(self, density_limit=None, continuity_tolerance=None):
        self.density_limit = settings.density_limit if density_limit is None else density_limit
        self.continuity_tolerance = (
            settings.continuity_tolerance if continuity_tolerance is None else continuity_tolerance
        )

    def optimize(self, grid):
        self.symmetry(grid)
        self.density(grid)
        self.continuity(grid)
        return grid

    def symmetry(self, grid):
        """Raise each cell and its mirror (week <-> 52 - week) to their rounded-up mean."""
        for day in range(ROWS):
            for week in range(COLS // 2):
                mirror = COLS - 1 - week
                a, b = grid[day][week], grid[day][mirror]
                if a > 0 or b > 0:
                    avg = (a + b + 1) // 2
                    grid[day][week] = max(a, avg)
                    grid[day][mirror] = max(b, avg)
        return grid

    def density(self, grid):
        """One sweep: in a week summing above the limit, dim every cell above 3 by one."""
        for week in range(COLS):
            if column_sum(grid, week) > self.density_limit:
                logger.debug("week %d over density limit, dimming", week)
                for day in range(ROWS):
                    if grid[day][week] > 3:
                        grid[day][week] = max(1, grid[day][week] - 1)
        return grid

    def continuity(self, grid):
        """One left-to-right sweep snapping interior spikes to their neighbours' mean."""
        for week in range(1, COLS - 1):
            for day in range(ROWS):
                prev, cur, nxt = grid[day][week - 1], grid[day][week], grid[day][week + 1]
                if cur > 0 and prev > 0 and nxt > 0:
                    avg = (prev + nxt) // 2
                    if abs(cur - avg) > self.continuity_tolerance:
                        grid[day][week] = max(1, avg)
        return grid

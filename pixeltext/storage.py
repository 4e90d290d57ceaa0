"""Saved patterns: a plain text file of named grids.

Each entry is::

    PATTERN: <name>
    <source text>
    <year>
    <7 lines of 53 digits 0..6>
"""

import logging
import os
import tempfile
from dataclasses import dataclass

from pixeltext.config import settings
from pixeltext.grid import COLS, MAX_LEVEL, ROWS, empty_grid, validate_grid

logger = logging.getLogger(__name__)

HEADER = "PATTERN:"
LEVEL_DIGITS = "".join(str(n) for n in range(MAX_LEVEL + 1))


@dataclass
class SavedPattern:
    name: str
    text: str
    year: int
    grid: list


def dumps_grid(grid) -> str:
    return "\n".join("".join(str(level) for level in row) for row in grid) + "\n"


def loads_grid(lines):
    """Parse 7 digit rows; anything outside '0'..'6' reads as 0, short rows are zero-padded."""
    if isinstance(lines, str):
        lines = lines.splitlines()
    grid = empty_grid()
    for y, line in zip(range(ROWS), lines):
        for x, ch in enumerate(line.strip()[:COLS]):
            if ch in LEVEL_DIGITS:
                grid[y][x] = int(ch)
    return grid


def dumps_patterns(patterns) -> str:
    out = []
    for p in patterns:
        out.append(f"{HEADER} {p.name}\n{p.text}\n{p.year}\n")
        out.append(dumps_grid(p.grid))
    return "".join(out)


def loads_patterns(content: str):
    patterns = {}
    lines = iter(content.splitlines())
    for line in lines:
        line = line.strip()
        if not line.startswith(HEADER):
            continue
        name = line[len(HEADER):].strip()
        try:
            text = next(lines).strip()
            year = int(next(lines).strip())
            rows = [next(lines) for _ in range(ROWS)]
        except StopIteration:
            logger.warning("pattern %r is truncated, ignoring it", name)
            break
        patterns[name] = SavedPattern(name, text, year, loads_grid(rows))
    return patterns


class PatternStore:
    def __init__(self, path=None):
        self.path = path or settings.patterns_file

    def load_all(self):
        if not os.path.exists(self.path):
            return {}
        with open(self.path, encoding="utf-8") as f:
            return loads_patterns(f.read())

    def names(self):
        return list(self.load_all())

    def load(self, name: str) -> SavedPattern:
        patterns = self.load_all()
        if name not in patterns:
            raise KeyError(f"no saved pattern named {name!r}")
        return patterns[name]

    def save(self, pattern: SavedPattern):
        validate_grid(pattern.grid)
        patterns = self.load_all()
        patterns[pattern.name] = pattern
        self._write(patterns)
        logger.info("saved pattern %r to %s", pattern.name, self.path)

    def delete(self, name: str) -> bool:
        patterns = self.load_all()
        if patterns.pop(name, None) is None:
            return False
        self._write(patterns)
        return True

    def _write(self, patterns):
        folder = os.path.dirname(os.path.abspath(self.path))
        fd, tmp = tempfile.mkstemp(dir=folder, prefix=".patterns-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(dumps_patterns(patterns.values()))
            os.replace(tmp, self.path)
        except OSError:
            os.unlink(tmp)
            raise

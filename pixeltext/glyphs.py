"""Letterforms stamped onto the grid.

Each glyph is 7 rows (Sunday..Saturday) by 4 week columns of weights in
[0, 1]. The bitmaps below sit on Monday..Friday so a word reads on the
weekdays and leaves the weekend rows free.
"""

import math
from types import MappingProxyType

GLYPH_ROWS, GLYPH_COLS = 7, 4

_BLANK = "...."

_BITMAPS = {
    "A": (".##.", "#..#", "####", "#..#", "#..#"),
    "B": ("###.", "#..#", "###.", "#..#", "###."),
    "C": (".###", "#...", "#...", "#...", ".###"),
    "D": ("###.", "#..#", "#..#", "#..#", "###."),
    "E": ("####", "#...", "###.", "#...", "####"),
    "F": ("####", "#...", "###.", "#...", "#..."),
    "G": (".###", "#...", "#.##", "#..#", ".###"),
    "H": ("#..#", "#..#", "####", "#..#", "#..#"),
    "I": ("###.", ".#..", ".#..", ".#..", "###."),
    "J": ("..##", "...#", "...#", "#..#", ".##."),
    "K": ("#..#", "#.#.", "##..", "#.#.", "#..#"),
    "L": ("#...", "#...", "#...", "#...", "####"),
    "M": ("#..#", "####", "####", "#..#", "#..#"),
    "N": ("#..#", "##.#", "#.##", "#..#", "#..#"),
    "O": (".##.", "#..#", "#..#", "#..#", ".##."),
    "P": ("###.", "#..#", "###.", "#...", "#..."),
    "Q": (".##.", "#..#", "#..#", "#.##", ".###"),
    "R": ("###.", "#..#", "###.", "#.#.", "#..#"),
    "S": (".###", "#...", ".##.", "...#", "###."),
    "T": ("###.", ".#..", ".#..", ".#..", ".#.."),
    "U": ("#..#", "#..#", "#..#", "#..#", ".##."),
    "V": ("#..#", "#..#", "#..#", ".##.", ".##."),
    "W": ("#..#", "#..#", "####", "####", "#..#"),
    "X": ("#..#", "#..#", ".##.", "#..#", "#..#"),
    "Y": ("#.#.", "#.#.", ".#..", ".#..", ".#.."),
    "Z": ("####", "..#.", ".#..", "#...", "####"),
}


def bitmap_to_glyph(rows):
    """Turn 5 rows of '#'/'.' into a 7x4 weight matrix, padded with blank weekend rows."""
    rows = (_BLANK,) + tuple(rows) + (_BLANK,)
    if len(rows) != GLYPH_ROWS or any(len(r) != GLYPH_COLS for r in rows):
        raise ValueError(f"glyph bitmap must be {GLYPH_ROWS - 2}x{GLYPH_COLS}")
    return tuple(tuple(1.0 if ch == "#" else 0.0 for ch in r) for r in rows)


def procedural_glyph(char: str):
    """Glyph for a character with no bitmap.

    Letters get a smooth periodic blob keyed on their alphabet position;
    anything else stamps nothing.
    """
    if len(char) != 1 or not "A" <= char <= "Z":
        return tuple((0.0,) * GLYPH_COLS for _ in range(GLYPH_ROWS))
    v = ord(char) - ord("A")
    return tuple(
        tuple(math.sin(v * 0.3 + day * 0.5 + week * 0.2) * 0.5 + 0.5 for week in range(GLYPH_COLS))
        for day in range(GLYPH_ROWS)
    )


class GlyphTable:
    """Read-only character -> glyph lookup with a procedural fallback."""

    def __init__(self, bitmaps=None):
        bitmaps = _BITMAPS if bitmaps is None else bitmaps
        self._glyphs = MappingProxyType({c.upper(): bitmap_to_glyph(rows) for c, rows in bitmaps.items()})

    def __contains__(self, char):
        return char in self._glyphs

    def __len__(self):
        return len(self._glyphs)

    def get(self, char: str):
        glyph = self._glyphs.get(char)
        if glyph is None:
            glyph = procedural_glyph(char)
        return glyph


GLYPHS = GlyphTable()

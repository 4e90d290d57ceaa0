"""Terminal rendering of a grid, laid out like the contribution graph."""

import datetime as dt

from pixeltext.dates import (
    MONTH_LABEL_COLS,
    MONTH_LABEL_GAP,
    month_label_positions,
    saturday_of_week,
    sunday_of_week,
)
from pixeltext.grid import COLS, MAX_LEVEL, ROWS

# level 0..6, light to dark
PALETTE = "·░░▒▒▓█"
LEFT_MARGIN = 4
WEEKDAY_LABELS = {1: "Mon", 3: "Wed", 5: "Fri"}


def cell_char(level: int) -> str:
    return PALETTE[level] if 0 <= level <= MAX_LEVEL else PALETTE[0]


def month_header(start: dt.date, end: dt.date) -> str:
    header = [" "] * (LEFT_MARGIN + COLS + 3)
    last_end = -999
    for x, label in month_label_positions(start, end):
        if x >= last_end + MONTH_LABEL_GAP:
            pos = LEFT_MARGIN + x
            header[pos:pos + len(label)] = label
            last_end = x + MONTH_LABEL_COLS
    return "".join(header).rstrip()


def date_span(start: dt.date):
    """(first Sunday, last Saturday) of the 53 weeks from ``start``; None past year 9999."""
    try:
        first = sunday_of_week(start)
        return first, saturday_of_week(first + dt.timedelta(weeks=COLS - 1))
    except OverflowError:
        return None


def render_grid(grid, start: dt.date = None) -> str:
    span = date_span(start) if start is not None else None
    lines = []
    if span:
        lines.append(month_header(*span))
    for y in range(ROWS):
        label = WEEKDAY_LABELS.get(y, "")
        lines.append(f"{label:<{LEFT_MARGIN}}" + "".join(cell_char(level) for level in grid[y]))
    if span:
        lines.append(f"{'':<{LEFT_MARGIN}}{span[0]:%Y-%m-%d} … {span[1]:%Y-%m-%d}")
    lines.append(f"{'':<{LEFT_MARGIN}}Less {PALETTE} More")
    return "\n".join(lines) + "\n"

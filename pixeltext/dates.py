import datetime as dt

from pixeltext.grid import COLS

# «visual width» of a month label and the minimum gap between labels (in columns)
MONTH_LABEL_COLS = 2
MONTH_LABEL_GAP = 2


# ===== week helpers =====
def sunday_of_week(d: dt.date) -> dt.date:
    return d - dt.timedelta(days=(d.weekday() + 1) % 7)


def saturday_of_week(d: dt.date) -> dt.date:
    return sunday_of_week(d) + dt.timedelta(days=6)


# ===== grid anchor =====
def first_sunday(year: int) -> dt.date:
    """First Sunday on or after January 1 of ``year``; column 0, row 0 of the grid."""
    jan1 = dt.date(year, 1, 1)
    anchor = jan1 + dt.timedelta(days=(6 - jan1.weekday()) % 7)
    if anchor.year < year:
        anchor += dt.timedelta(weeks=1)
    return anchor


def cell_to_date(row: int, col: int, anchor: dt.date) -> dt.date:
    return anchor + dt.timedelta(weeks=col, days=row)


class CalendarMapper:
    """Maps (row, col) cells of a year's grid to calendar dates."""

    def __init__(self, year: int, anchor: dt.date = None):
        self.year = year
        self.anchor = anchor or first_sunday(year)

    @property
    def end(self) -> dt.date:
        return cell_to_date(6, COLS - 1, self.anchor)

    def cell_to_date(self, row: int, col: int) -> dt.date:
        return cell_to_date(row, col, self.anchor)


def month_label_positions(start_date: dt.date, end_date: dt.date):
    """(col_index, 'Jan') for the column holding the 1st of each month."""
    labels = []
    y, m = start_date.year, start_date.month
    if dt.date(y, m, 1) < start_date:
        y, m = (y + 1, 1) if m == 12 else (y, m + 1)
    while True:
        d = dt.date(y, m, 1)
        if d > end_date:
            break
        x = (d - start_date).days // 7
        if 0 <= x < COLS:
            labels.append((x, d.strftime("%b")))
        y, m = (y + 1, 1) if m == 12 else (y, m + 1)
    return labels

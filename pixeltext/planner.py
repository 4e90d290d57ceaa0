"""Intensity grid -> ordered, dated commit plan.

The plan is the single source for every consumer: the dry-run transcript,
the exported shell script and the applier all read the same events, so they
agree on which cells were dropped.
"""

import datetime as dt
import logging
import os
import shlex
from dataclasses import dataclass, field

from pixeltext.config import settings
from pixeltext.dates import cell_to_date, first_sunday
from pixeltext.grid import COLS, ROWS, active_cells

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitEvent:
    day: dt.date
    count: int
    row: int
    column: int

    @property
    def iso(self) -> str:
        return self.day.isoformat()


@dataclass
class CommitPlan:
    year: int
    anchor: dt.date = None
    events: list = field(default_factory=list)
    active: int = 0
    skipped: int = 0

    def __post_init__(self):
        self.total = sum(e.count for e in self.events)

    def __iter__(self):
        return iter(self.events)

    def __len__(self):
        return len(self.events)

    def weeks(self):
        """Week columns that hold at least one event, in order."""
        return sorted({e.column for e in self.events})

    def render(self, text: str = "") -> str:
        lines = [
            f"Year: {self.year}",
            f"Text: {text}",
            f"Pattern: {self.active} active cells, {self.skipped} skipped",
        ]
        if self.anchor is not None:
            lines.append(f"Grid starts on: {self.anchor:%Y-%m-%d} (week 0, Sunday)")
        lines.append("")
        for e in self.events:
            lines.append(f"{e.day:%Y-%m-%d} {e.day:%a}  x{e.count}")
        lines.append("")
        lines.append(f"Total commits to generate: {self.total}")
        return "\n".join(lines) + "\n"

    def commands(self, text: str = "", hour: int = None):
        """One ``git commit`` line per discrete commit.

        GitHub places a commit by its committer date, so both dates are set.
        """
        hour = settings.commit_hour if hour is None else hour
        for e in self.events:
            stamp = shlex.quote(commit_timestamp(e.day, hour))
            msg = shlex.quote(commit_message(text, e))
            for _ in range(e.count):
                yield f"GIT_COMMITTER_DATE={stamp} git commit --allow-empty --quiet --date={stamp} -m {msg}"

    def write_script(self, path, text: str = "", hour: int = None):
        with open(path, "w", encoding="utf-8") as f:
            f.write("#!/bin/sh\n")
            f.write("set -e\n")
            if self.anchor is not None:
                f.write(f"echo 'Contribution graph starts from: {self.anchor:%Y-%m-%d}'\n")
            for line in self.commands(text, hour):
                f.write(line + "\n")
            f.write(f"echo 'Done: {self.total} commits.'\n")
        os.chmod(path, 0o755)
        logger.info("wrote %d commit commands to %s", self.total, path)
        return path


def commit_timestamp(day: dt.date, hour: int) -> str:
    """Commit date pinned to UTC so the graph day does not depend on the local zone."""
    return f"{day:%Y-%m-%d}T{hour:02d}:00:00+00:00"


def commit_message(text: str, event: CommitEvent) -> str:
    label = text or "pattern"
    return f"Commit for {label} pattern (intensity {event.count}) - {event.iso}"


def plan(grid, year: int, anchor: dt.date = None, today: dt.date = None) -> CommitPlan:
    """Walk the grid week by week and keep cells dated within ``year`` and not after ``today``."""
    today = today or dt.date.today()
    active = active_cells(grid)
    if anchor is None:
        if not dt.MINYEAR <= year <= dt.MAXYEAR:
            return CommitPlan(year=year, active=active, skipped=active)
        anchor = first_sunday(year)

    events, skipped = [], 0
    for week in range(COLS):
        for day in range(ROWS):
            level = grid[day][week]
            if level <= 0:
                continue
            try:
                d = cell_to_date(day, week, anchor)
            except OverflowError:
                skipped += 1
                continue
            if d > today or d.year != year:
                skipped += 1
                continue
            events.append(CommitEvent(day=d, count=level, row=day, column=week))

    if skipped:
        logger.debug("dropped %d cells outside %d or after %s", skipped, year, today)
    return CommitPlan(year=year, anchor=anchor, events=events, active=active, skipped=skipped)

"""Turn a piece of text into a GitHub contribution-graph commit schedule."""

from pixeltext.dates import CalendarMapper, cell_to_date, first_sunday
from pixeltext.grid import COLS, MAX_LEVEL, ROWS, empty_grid
from pixeltext.planner import CommitEvent, CommitPlan, plan
from pixeltext.synth import PatternSynthesizer, synthesize, synthesize_custom

__version__ = "0.3.0"

__all__ = [
    "COLS",
    "MAX_LEVEL",
    "ROWS",
    "CalendarMapper",
    "CommitEvent",
    "CommitPlan",
    "PatternSynthesizer",
    "cell_to_date",
    "empty_grid",
    "first_sunday",
    "plan",
    "synthesize",
    "synthesize_custom",
]

"""
Trailing rainfall totals for a dataset.

All samples of one date share the same rainfall context: the last seven
daily totals of the rain file, their sum in inches and the sum in mm.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Union
import logging

from ..ingest.csv_parser import RainfallRow

logger = logging.getLogger(__name__)

MM_PER_INCH = 25.4
RAIN_WINDOW_DAYS = 7


@dataclass
class RainfallSummary:
    rain_by_day: List[float] = field(default_factory=list)
    total_rain: float = 0.0
    rainfall_mm_7day: float = 0.0


def summarize_rainfall(
    rainfall: Union[Sequence[RainfallRow], Iterable[float]],
    window: int = RAIN_WINDOW_DAYS
) -> RainfallSummary:
    """Summarize the trailing window of daily rainfall.

    Args:
        rainfall: Parsed rainfall rows (ordered by date here) or plain daily
            values already in chronological order
        window: Number of trailing days kept

    Returns:
        RainfallSummary with at most `window` daily values
    """
    rainfall = list(rainfall)
    if rainfall and isinstance(rainfall[0], RainfallRow):
        # sorted() is stable, so same-day rows keep file order
        values = [row.rainfall for row in sorted(rainfall, key=lambda row: row.date)]
    else:
        values = [float(v) for v in rainfall]

    rain_by_day = values[-window:] if window > 0 else []
    total_rain = sum(rain_by_day)

    if len(rain_by_day) < window:
        logger.info(f"Only {len(rain_by_day)} days of rainfall available (window is {window})")

    return RainfallSummary(
        rain_by_day=rain_by_day,
        total_rain=total_rain,
        rainfall_mm_7day=total_rain * MM_PER_INCH,
    )

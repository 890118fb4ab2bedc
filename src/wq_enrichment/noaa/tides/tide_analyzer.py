"""
Tide state classification from a day of tide readings.

A sample's tide state is read off the reading closest in time to the
sample:

- the trend compares the reading just after with the reading just before
  the closest one (so the closest reading cannot be the first or last),
- High Tide / Low Tide are the top and bottom share (20% by default) of
  the day's observed height range, everything between is Mid Tide.

A "Low Tide" that is still falling, or a "High Tide" that is still
rising, is reported without the direction, e.g. "Low Tide (Battery)".
"""

from typing import Dict, List, Optional, Union
import logging

import pandas as pd

logger = logging.getLogger(__name__)

TIDE_UNAVAILABLE = "Tide info unavailable"

HIGH_TIDE = "High Tide"
MID_TIDE = "Mid Tide"
LOW_TIDE = "Low Tide"

RISING = "⬆️ Rising"
FALLING = "⬇️ Falling"

InstantLike = Union[str, pd.Timestamp]


def to_utc(instant: InstantLike) -> pd.Timestamp:
    """Coerce an ISO string or timestamp to a UTC timestamp."""
    ts = pd.Timestamp(instant)
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def readings_frame(readings: Optional[List[Dict]]) -> pd.DataFrame:
    """Convert raw NOAA {t, v} records into a time-sorted frame.

    Timestamps are read as UTC. Records with an unparseable time or height
    are dropped.
    """
    if not readings:
        return pd.DataFrame(columns=['time', 'height'])

    frame = pd.DataFrame.from_records(readings)
    if 't' not in frame.columns or 'v' not in frame.columns:
        logger.warning(f"Tide readings are missing t/v fields: {list(frame.columns)}")
        return pd.DataFrame(columns=['time', 'height'])

    frame = pd.DataFrame({
        'time': pd.to_datetime(frame['t'], utc=True, errors='coerce'),
        'height': pd.to_numeric(frame['v'], errors='coerce'),
    })
    frame = frame.dropna().sort_values('time', kind='stable').reset_index(drop=True)
    return frame


def _closest_position(frame: pd.DataFrame, instant: pd.Timestamp) -> int:
    deltas = (frame['time'] - instant).abs()
    # idxmin returns the first minimum, so earlier readings win ties
    return int(deltas.idxmin())


def closest_height(readings: Optional[List[Dict]], instant: InstantLike) -> Optional[float]:
    """Height of the reading closest in time to the instant, if any."""
    frame = readings_frame(readings)
    if frame.empty:
        return None
    return float(frame['height'].iloc[_closest_position(frame, to_utc(instant))])


def classify_tide(
    readings: Optional[List[Dict]],
    station_name: str,
    instant: InstantLike,
    min_readings: int = 4,
    extreme_fraction: float = 0.2,
    suppress_contradictory_trend: bool = True
) -> Optional[str]:
    """Describe the tide at the instant, e.g. "High Tide – ⬆️ Rising (Battery)".

    Args:
        readings: Raw NOAA prediction records ({t, v}) covering the day
        station_name: Station name shown in the description
        instant: Sample time (UTC ISO string or timestamp)
        min_readings: Minimum number of usable readings
        extreme_fraction: Share of the height range counted as high/low
        suppress_contradictory_trend: Drop the direction for "Low Tide"
            while falling and "High Tide" while rising

    Returns:
        Tide description, or None when there is not enough context
    """
    frame = readings_frame(readings)
    if len(frame) < min_readings:
        logger.debug(f"Only {len(frame)} usable tide readings, need {min_readings}")
        return None

    position = _closest_position(frame, to_utc(instant))
    if position < 1 or position >= len(frame) - 1:
        logger.debug("Closest tide reading is at the edge of the window, no trend available")
        return None

    heights = frame['height']
    before = heights.iloc[position - 1]
    after = heights.iloc[position + 1]
    current = heights.iloc[position]
    is_rising = after > before

    high, low = heights.max(), heights.min()
    span = high - low
    if current >= high - span * extreme_fraction:
        state = HIGH_TIDE
    elif current <= low + span * extreme_fraction:
        state = LOW_TIDE
    else:
        state = MID_TIDE

    contradictory = (state == LOW_TIDE and not is_rising) or (state == HIGH_TIDE and is_rising)
    if suppress_contradictory_trend and contradictory:
        return f"{state} ({station_name})"

    return f"{state} – {RISING if is_rising else FALLING} ({station_name})"

"""
Sample time normalization.

Field sheets record a time of day only ("9:02", "1:14 PM", "13:45"); the
calendar date comes from the dataset. The pair is read as US Eastern civil
time and converted to a UTC ISO-8601 instant. The UTC offset used for a
date is the zone's offset at local noon that day (EDT = UTC-4,
EST = UTC-5).

Missing or unreadable times fall back to local noon, converted with the
same offset, so the fallback is 16:00Z in summer and 17:00Z in winter.
"""

from datetime import datetime, timedelta
from typing import Optional, Tuple
import logging
import re

import pandas as pd

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "America/New_York"
DEFAULT_LOCAL_TIME = (12, 0)
ISO_UTC_FORMAT = "%Y-%m-%dT%H:%M:%S.000Z"

TIME_PATTERN = re.compile(
    r'^(?P<hour>\d{1,2})'
    r'(?::(?P<minute>\d{1,2}))?'
    r'(?::\d{1,2})?'
    r'\s*(?P<meridiem>[AaPp]\.?\s*[Mm]\.?)?$'
)


def parse_time_of_day(time_str: Optional[str]) -> Optional[Tuple[int, int]]:
    """Parse a free-form time of day into (hour, minute) on a 24h clock.

    Returns:
        (hour, minute), or None if the string is empty, unreadable or out
        of range
    """
    if not time_str:
        return None

    match = TIME_PATTERN.match(time_str.strip())
    if not match:
        return None

    hour = int(match.group('hour'))
    minute = int(match.group('minute') or 0)
    meridiem = match.group('meridiem')

    if meridiem:
        if not 1 <= hour <= 12:
            return None
        is_pm = meridiem.strip()[0].lower() == 'p'
        if is_pm and hour < 12:
            hour += 12
        elif not is_pm and hour == 12:
            hour = 0

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None

    return hour, minute


def utc_offset_for_date(date_str: str, timezone: str = DEFAULT_TIMEZONE) -> timedelta:
    """UTC offset of the zone on a calendar date, taken at local noon.

    Raises:
        ValueError: If date_str is not a valid YYYY-MM-DD date
    """
    day = datetime.strptime(date_str, "%Y-%m-%d")
    local_noon = pd.Timestamp(day.year, day.month, day.day, 12).tz_localize(timezone)
    logger.debug(f"{date_str} is on {local_noon.tzname()} in {timezone}")
    return local_noon.utcoffset()


def format_sample_time(
    date_str: str,
    time_str: Optional[str],
    timezone: str = DEFAULT_TIMEZONE,
    default_time: Tuple[int, int] = DEFAULT_LOCAL_TIME
) -> str:
    """Convert a local date and time of day into a UTC ISO-8601 timestamp.

    Args:
        date_str: Dataset date (YYYY-MM-DD)
        time_str: Time of day as written on the field sheet, may be empty
        timezone: Civil time zone the sheet times are recorded in
        default_time: Local (hour, minute) used when time_str is unusable

    Returns:
        Timestamp such as "2025-05-08T13:02:00.000Z"

    Raises:
        ValueError: If date_str is not a valid YYYY-MM-DD date
    """
    offset = utc_offset_for_date(date_str, timezone)

    parsed = parse_time_of_day(time_str)
    if parsed is None:
        if time_str and time_str.strip():
            logger.warning(f"Could not parse time: {time_str} for date {date_str}. Using default.")
        parsed = default_time

    hour, minute = parsed
    local = datetime.strptime(date_str, "%Y-%m-%d").replace(hour=hour, minute=minute)
    return (local - offset).strftime(ISO_UTC_FORMAT)


def parse_default_time(value: str) -> Tuple[int, int]:
    """Parse the configured default time, falling back to noon."""
    parsed = parse_time_of_day(value)
    if parsed is None:
        logger.warning(f"Invalid default sample time {value!r}, using 12:00")
        return DEFAULT_LOCAL_TIME
    return parsed

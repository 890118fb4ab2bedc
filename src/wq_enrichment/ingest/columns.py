"""
Accepted CSV header names.

Field exports come from several spreadsheets, so each logical column has
an ordered list of accepted header names. Matching ignores case and
surrounding/repeated whitespace; the first alias present wins.
"""

import re
from typing import Dict, Iterable, List, Optional, Sequence

SITE_NAME = 'site_name'
LATITUDE = 'latitude'
LONGITUDE = 'longitude'
SAMPLE_TIME = 'sample_time'
MPN = 'mpn'
RAIN_DATE = 'date'
RAINFALL = 'rainfall'

SAMPLE_COLUMN_ALIASES: Dict[str, List[str]] = {
    SITE_NAME: ['Site Name', 'site', 'site_name', 'sitename', 'name'],
    LATITUDE: ['Latitude', 'lat'],
    LONGITUDE: ['Longitude', 'lon', 'lng', 'long'],
    SAMPLE_TIME: ['Sample Time', 'time', 'sample_time', 'sampletime'],
    MPN: ['MPN', 'mpn_value', 'enterococci'],
}

RAIN_COLUMN_ALIASES: Dict[str, List[str]] = {
    # 'data' is what the rain gauge export actually writes
    RAIN_DATE: ['date', 'data', 'day'],
    RAINFALL: ['rainfall', 'precipitation', 'precip', 'rain'],
}

# Fallback for rain value headers such as "Precip (in)" or "Total Rain"
RAINFALL_SUBSTRINGS = ('precip', 'rain')

# Display names used in validation messages
CANONICAL_NAMES = {
    SITE_NAME: 'Site Name',
    LATITUDE: 'Latitude',
    LONGITUDE: 'Longitude',
    SAMPLE_TIME: 'Sample Time',
    MPN: 'MPN',
    RAIN_DATE: 'date',
    RAINFALL: 'rainfall',
}


def normalize_header(header: str) -> str:
    return re.sub(r'\s+', ' ', str(header)).strip().lower()


def find_column(headers: Iterable[str], aliases: Sequence[str]) -> Optional[str]:
    """Return the actual header matching the first alias, if any."""
    by_normalized = {}
    for header in headers:
        by_normalized.setdefault(normalize_header(header), header)
    for alias in aliases:
        match = by_normalized.get(normalize_header(alias))
        if match is not None:
            return match
    return None


def resolve_columns(headers: Sequence[str], alias_table: Dict[str, List[str]]) -> Dict[str, Optional[str]]:
    """Map each logical column to the header present in the file (or None)."""
    return {field: find_column(headers, aliases) for field, aliases in alias_table.items()}


def resolve_rain_columns(headers: Sequence[str]) -> Dict[str, Optional[str]]:
    columns = resolve_columns(headers, RAIN_COLUMN_ALIASES)
    if columns[RAINFALL] is None:
        date_header = columns[RAIN_DATE]
        for header in headers:
            if header == date_header:
                continue
            if any(token in normalize_header(header) for token in RAINFALL_SUBSTRINGS):
                columns[RAINFALL] = header
                break
    return columns

"""
Parsing and validation of the sample and rainfall CSV exports.

Both parsers take raw CSV text and never raise for malformed data.
File-level problems (no data, missing columns, nothing usable) are
reported in ValidationResult.errors and make the result invalid.
Row-level problems drop the row and are reported in
ValidationResult.warnings.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Dict, Generic, List, Optional, TypeVar
import io
import logging
import math
import re

import pandas as pd

from . import columns as cols

logger = logging.getLogger(__name__)

T = TypeVar('T')

RAIN_DATE_PATTERN = re.compile(r'^\d{1,2}/\d{1,2}/\d{4}$')


@dataclass
class ValidationResult(Generic[T]):
    """Outcome of parsing one CSV file."""
    rows: List[T] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    # Dropped row counts keyed by reason
    skip_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass
class MPNParseResult:
    value: float
    is_detection_limit: bool
    original: str


@dataclass
class SampleRow:
    """A validated water sample."""
    site_name: str
    latitude: float
    longitude: float
    mpn: float
    is_detection_limit: bool
    sample_time: str
    row_number: int


@dataclass
class RainfallRow:
    """A validated daily rainfall total (inches)."""
    date: date
    rainfall: float
    row_number: int


def parse_mpn(text: Optional[str]) -> MPNParseResult:
    """Parse an MPN value, including "<10" detection-limit notation.

    Returns:
        MPNParseResult whose value is NaN when nothing numeric is found
    """
    original = '' if text is None else str(text)
    trimmed = original.strip()

    if not trimmed:
        return MPNParseResult(math.nan, False, original)

    is_detection_limit = trimmed.startswith('<')
    numeric = trimmed[1:].strip() if is_detection_limit else trimmed

    try:
        value = float(numeric.replace(',', ''))
    except ValueError:
        value = math.nan
    if not math.isfinite(value):
        value = math.nan

    return MPNParseResult(value, is_detection_limit, original)


def _parse_coordinate(text: str, limit: float) -> Optional[float]:
    try:
        value = float(text)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or abs(value) > limit:
        return None
    return value


def _read_frame(csv_text: str, kind: str, errors: List[str]) -> Optional[pd.DataFrame]:
    """Load CSV text as an all-string frame, recording file-level errors."""
    try:
        frame = pd.read_csv(
            io.StringIO(csv_text.strip()),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            skipinitialspace=True,
        )
    except pd.errors.EmptyDataError:
        errors.append(f"No {kind} data found in CSV")
        return None
    except pd.errors.ParserError as e:
        errors.append(f"CSV Parse Error: {e}")
        return None

    frame.columns = [str(c).strip() for c in frame.columns]
    if frame.empty:
        errors.append(f"No {kind} data found in CSV")
        return None
    return frame


def parse_sample_csv(csv_text: str) -> ValidationResult[SampleRow]:
    """Parse a sample CSV into validated sample rows.

    Rows without a site name, with missing or out-of-range coordinates or
    without a parseable MPN are dropped.
    """
    result: ValidationResult[SampleRow] = ValidationResult()
    frame = _read_frame(csv_text, 'sample', result.errors)
    if frame is None:
        return result

    mapping = cols.resolve_columns(list(frame.columns), cols.SAMPLE_COLUMN_ALIASES)
    missing = [cols.CANONICAL_NAMES[name] for name, header in mapping.items() if header is None]
    if missing:
        result.errors.append(f"Missing required columns: {', '.join(missing)}")
        return result

    skipped = {"site": 0, "coordinates": 0, "mpn": 0}
    for index, record in enumerate(frame.to_dict('records')):
        row_number = index + 2
        site_name = str(record[mapping[cols.SITE_NAME]]).strip()
        if not site_name:
            skipped["site"] += 1
            result.warnings.append(f"Row {row_number}: missing site name")
            continue

        latitude = _parse_coordinate(str(record[mapping[cols.LATITUDE]]).strip(), 90.0)
        longitude = _parse_coordinate(str(record[mapping[cols.LONGITUDE]]).strip(), 180.0)
        if latitude is None or longitude is None:
            skipped["coordinates"] += 1
            result.warnings.append(f"Row {row_number}: missing or invalid coordinates for {site_name}")
            continue

        mpn = parse_mpn(record[mapping[cols.MPN]])
        if math.isnan(mpn.value):
            skipped["mpn"] += 1
            result.warnings.append(f"Row {row_number}: missing or invalid MPN for {site_name}")
            continue

        result.rows.append(SampleRow(
            site_name=site_name,
            latitude=latitude,
            longitude=longitude,
            mpn=mpn.value,
            is_detection_limit=mpn.is_detection_limit,
            sample_time=str(record[mapping[cols.SAMPLE_TIME]]).strip(),
            row_number=row_number,
        ))

    result.skip_counts = skipped
    logger.debug(f"Parsed {len(result.rows)} sample rows, dropped {len(result.warnings)}")
    return result


def parse_rain_date(text: str) -> Optional[date]:
    """Parse an M/D/YYYY date, returning None when invalid."""
    text = text.strip()
    if not RAIN_DATE_PATTERN.match(text):
        return None
    try:
        return datetime.strptime(text, '%m/%d/%Y').date()
    except ValueError:
        return None


def parse_rain_csv(csv_text: str) -> ValidationResult[RainfallRow]:
    """Parse a rainfall CSV into validated daily rainfall rows."""
    result: ValidationResult[RainfallRow] = ValidationResult()
    frame = _read_frame(csv_text, 'rainfall', result.errors)
    if frame is None:
        return result

    mapping = cols.resolve_rain_columns(list(frame.columns))
    if mapping[cols.RAIN_DATE] is None or mapping[cols.RAINFALL] is None:
        result.errors.append('Missing required columns. Expected a date column and a rainfall column')
        return result

    for index, record in enumerate(frame.to_dict('records')):
        row_number = index + 2
        raw_date = str(record[mapping[cols.RAIN_DATE]]).strip()
        raw_rain = str(record[mapping[cols.RAINFALL]]).strip()

        row_date = parse_rain_date(raw_date)
        if row_date is None:
            result.warnings.append(
                f"Row {row_number}: invalid date {raw_date!r}. Expected M/D/YYYY (e.g., 7/10/2025)"
            )
            continue

        try:
            rainfall = float(raw_rain)
        except ValueError:
            rainfall = math.nan
        if not math.isfinite(rainfall) or rainfall < 0:
            result.warnings.append(
                f"Row {row_number}: invalid rainfall value {raw_rain!r}. Must be a non-negative number"
            )
            continue

        result.rows.append(RainfallRow(date=row_date, rainfall=rainfall, row_number=row_number))

    if not result.rows:
        result.errors.append('No valid rainfall data rows found')

    return result


def read_csv_file(path: Path, parser: Callable[[str], ValidationResult]) -> ValidationResult:
    """Read a CSV file from disk and run a parser over it.

    Raises:
        OSError: If the file cannot be read
    """
    with open(path, encoding='utf-8-sig') as f:
        text = f.read()
    return parser(text)

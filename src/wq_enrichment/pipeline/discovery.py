"""
Discovery of date-paired input files.

Operators drop CSV exports into the input directory. A file takes part in
a run when its name contains a YYYY-MM-DD date and the word "sample" or
"rain" (case-insensitive), e.g. samples-2025-05-08.csv and
rain-2025-05-08.csv.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional
import logging
import re

logger = logging.getLogger(__name__)

DATE_TOKEN_PATTERN = re.compile(r'\d{4}-\d{2}-\d{2}')


class PipelineError(Exception):
    """Raised when the pipeline cannot run at all."""


@dataclass
class DateFiles:
    """Input files found for one dataset date."""
    date: str
    samples: Optional[Path] = None
    rain: Optional[Path] = None

    @property
    def is_complete(self) -> bool:
        return self.samples is not None and self.rain is not None


def extract_date_from_filename(filename: str) -> Optional[str]:
    """Return the first YYYY-MM-DD token in a file name, if any."""
    match = DATE_TOKEN_PATTERN.search(filename)
    return match.group(0) if match else None


def is_valid_date(date_str: str) -> bool:
    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def classify_input_file(filename: str) -> Optional[str]:
    """Return 'samples' or 'rain' for an input file name, else None."""
    lowered = filename.lower()
    if 'sample' in lowered:
        return 'samples'
    if 'rain' in lowered:
        return 'rain'
    return None


def discover_input_files(input_dir: Path) -> Dict[str, DateFiles]:
    """Group the input directory's files by dataset date.

    Args:
        input_dir: Directory holding the raw CSV exports

    Returns:
        Mapping of date to the sample/rain files found for it

    Raises:
        PipelineError: If the input directory cannot be listed
    """
    input_dir = Path(input_dir)
    try:
        entries = sorted(input_dir.iterdir())
    except OSError as e:
        raise PipelineError(f"Cannot read input directory {input_dir}: {e}") from e

    date_map: Dict[str, DateFiles] = {}

    for path in entries:
        if not path.is_file():
            continue

        date = extract_date_from_filename(path.name)
        if date is None:
            logger.debug(f"Ignoring {path.name}: no date in file name")
            continue
        if not is_valid_date(date):
            logger.warning(f"Ignoring {path.name}: {date} is not a valid date")
            continue

        kind = classify_input_file(path.name)
        if kind is None:
            logger.debug(f"Ignoring {path.name}: neither a sample nor a rain file")
            continue

        files = date_map.setdefault(date, DateFiles(date=date))
        current = getattr(files, kind)
        if current is not None:
            logger.warning(f"Multiple {kind} files for {date}; using {current.name}, ignoring {path.name}")
            continue
        setattr(files, kind, path)

    logger.info(f"Found input files for {len(date_map)} dates in {input_dir}")
    return date_map

"""
Artifact writers for the published dataset tree.

Layout of the output root:

    <output>/
        latest.txt              newest dataset date, no trailing newline
        dates.json              ascending list of dataset dates
        2025-05-08/
            enriched.geojson
            metadata.json

The JSON is read by the map UI, so numbers are written the way a
JavaScript serializer would write them (2.0 becomes 2) and short arrays
of scalars such as coordinates stay on one line.
"""

from pathlib import Path
from typing import Any, Dict, List
import json
import logging
import math
import shutil

from ..enrichment.quality import ENRICHED_FILENAME, dataset_directories

logger = logging.getLogger(__name__)

METADATA_FILENAME = 'metadata.json'
LATEST_FILENAME = 'latest.txt'
DATES_INDEX_FILENAME = 'dates.json'

_PLACEHOLDER = '@@compact-{}@@'


def _js_number(value: Any) -> Any:
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return value


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


def _prepare(value: Any, compact: Dict[str, str]) -> Any:
    """Normalize numbers and swap scalar arrays for placeholder tokens."""
    if isinstance(value, dict):
        return {key: _prepare(item, compact) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        items = [_prepare(item, compact) for item in value]
        if value and all(_is_scalar(item) for item in value):
            token = _PLACEHOLDER.format(len(compact))
            compact[token] = json.dumps(items, ensure_ascii=False, separators=(', ', ': '))
            return token
        return items
    return _js_number(value)


def format_geojson(data: Dict[str, Any]) -> str:
    """Serialize a GeoJSON document with two-space indentation.

    Arrays holding only scalars are written on a single line, e.g.
    "coordinates": [-74.01, 40.7].
    """
    compact: Dict[str, str] = {}
    prepared = _prepare(data, compact)
    text = json.dumps(prepared, indent=2, ensure_ascii=False)
    for token, rendered in compact.items():
        text = text.replace(json.dumps(token), rendered)
    return text


def write_dataset(
    output_root: Path,
    date: str,
    features: List[Dict[str, Any]],
    total_rain: float
) -> Path:
    """Write enriched.geojson and metadata.json for one dataset date.

    Raises:
        OSError: If the dataset directory or its files cannot be written
    """
    dataset_dir = Path(output_root) / date
    dataset_dir.mkdir(parents=True, exist_ok=True)

    collection = {'type': 'FeatureCollection', 'features': features}
    with open(dataset_dir / ENRICHED_FILENAME, 'w', encoding='utf-8') as f:
        f.write(format_geojson(collection))

    metadata = {
        'date': date,
        'totalRain': _js_number(total_rain),
        'sampleCount': len(features),
        'description': f"Water quality samples from {date}",
    }
    with open(dataset_dir / METADATA_FILENAME, 'w', encoding='utf-8') as f:
        json.dump(metadata, f, indent=2, ensure_ascii=False)

    logger.info(f"Wrote {len(features)} features to {dataset_dir}")
    return dataset_dir


def remove_dataset(output_root: Path, date: str) -> bool:
    """Delete a dataset directory so the date can be rebuilt from scratch.

    Returns:
        True if the directory is gone afterwards
    """
    dataset_dir = Path(output_root) / date
    if not dataset_dir.exists():
        return True
    try:
        shutil.rmtree(dataset_dir)
    except OSError as e:
        logger.warning(f"Could not remove existing dataset {dataset_dir}: {e}")
        return False
    logger.info(f"Removed existing dataset for {date}")
    return True


def list_dataset_dates(output_root: Path) -> List[str]:
    """Ascending dates of the dataset directories present on disk."""
    return [p.name for p in dataset_directories(Path(output_root))]


def write_latest(output_root: Path, date: str) -> Path:
    path = Path(output_root) / LATEST_FILENAME
    path.write_text(date, encoding='utf-8')
    logger.info(f"Updated {LATEST_FILENAME} to {date}")
    return path


def write_dates_index(output_root: Path, dates: List[str]) -> Path:
    path = Path(output_root) / DATES_INDEX_FILENAME
    path.write_text(json.dumps(sorted(dates), indent=2), encoding='utf-8')
    logger.info(f"Wrote {len(dates)} dates to {DATES_INDEX_FILENAME}")
    return path

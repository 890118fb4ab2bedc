"""
Water quality buckets and per-site history.

Enterococci MPN results are bucketed with fixed recreational water
thresholds:

- good: MPN below 35
- caution: MPN from 35 to 104 inclusive
- poor: MPN above 104

Per-site bucket counts are never stored on their own. They are rebuilt
on every run by folding over the enriched.geojson of every dataset
directory on disk, which keeps them consistent with the published data.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union
import json
import logging
import math
import re

logger = logging.getLogger(__name__)

MPN_THRESHOLD_LOW = 35
MPN_THRESHOLD_MEDIUM = 104

GOOD = 'good'
CAUTION = 'caution'
POOR = 'poor'

DATASET_DIR_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')
ENRICHED_FILENAME = 'enriched.geojson'


@dataclass
class QualityCounts:
    """Running bucket tally for one site."""
    good: int = 0
    caution: int = 0
    poor: int = 0

    @property
    def total(self) -> int:
        return self.good + self.caution + self.poor

    def add(self, bucket: str) -> None:
        setattr(self, bucket, getattr(self, bucket) + 1)

    def to_properties(self) -> Dict[str, int]:
        return {
            'goodCount': self.good,
            'cautionCount': self.caution,
            'poorCount': self.poor,
        }


def classify(mpn: float) -> str:
    """Quality bucket for an MPN value."""
    if mpn < MPN_THRESHOLD_LOW:
        return GOOD
    if mpn <= MPN_THRESHOLD_MEDIUM:
        return CAUTION
    return POOR


def dataset_directories(output_root: Path) -> List[Path]:
    """Dataset directories (named YYYY-MM-DD) under the output root, sorted."""
    output_root = Path(output_root)
    if not output_root.is_dir():
        return []
    return sorted(
        p for p in output_root.iterdir()
        if p.is_dir() and DATASET_DIR_PATTERN.match(p.name)
    )


def _as_mpn(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        mpn = float(value)
    except (TypeError, ValueError):
        return None
    return mpn if math.isfinite(mpn) else None


def record_sample(history: Dict[str, QualityCounts], site: str, mpn: float) -> QualityCounts:
    """Count one sample for a site and return the site's updated tally."""
    counts = history.setdefault(site, QualityCounts())
    counts.add(classify(mpn))
    return counts


def load_history(output_root: Union[str, Path]) -> Dict[str, QualityCounts]:
    """Rebuild per-site quality counts from every dataset on disk.

    Features without a site name or a numeric MPN are ignored. Files that
    cannot be read or decoded are logged and skipped.

    Args:
        output_root: Directory holding the per-date dataset directories

    Returns:
        Mapping of site name to its cumulative QualityCounts
    """
    history: Dict[str, QualityCounts] = {}

    for dataset_dir in dataset_directories(Path(output_root)):
        enriched_file = dataset_dir / ENRICHED_FILENAME
        if not enriched_file.exists():
            continue

        try:
            with open(enriched_file, encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load history from {enriched_file}: {e}")
            continue

        features = data.get('features') if isinstance(data, dict) else None
        if not features:
            continue
        if not isinstance(features, list):
            logger.warning(f"Ignoring {enriched_file}: 'features' is not a list")
            continue

        for feature in features:
            if not isinstance(feature, dict):
                continue
            props = feature.get('properties')
            if not isinstance(props, dict):
                continue
            site = props.get('siteName')
            mpn = _as_mpn(props.get('mpn'))
            if not isinstance(site, str) or not site or mpn is None:
                continue
            record_sample(history, site, mpn)

    logger.info(f"Loaded quality history for {len(history)} sites")
    return history

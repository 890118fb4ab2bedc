"""
Shared fixtures for the enrichment pipeline tests.
"""

from pathlib import Path
import sys

import pandas as pd
import pytest

# Allow running the tests from a checkout without installing the package
SRC_DIR = Path(__file__).parent.parent / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

STATIONS_URL = "https://api.tidesandcurrents.noaa.gov/mdapi/prod/webapi/stations.json"
DATAGETTER_URL = "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter"

BATTERY_STATION = {"id": "8518750", "name": "The Battery", "lat": 40.7006, "lng": -74.0142}

# Hourly heights (ft) over the local day of 2025-05-08, starting at local midnight
BATTERY_HEIGHTS = [
    4.0, 4.6, 4.5, 3.8, 2.7, 1.5, 0.6, 0.3, 0.8, 1.9, 3.1, 4.1,
    4.7, 4.6, 3.9, 2.8, 1.6, 0.7, 0.4, 0.9, 2.0, 3.2, 4.2, 4.8,
]


def make_predictions(start: str, heights):
    """Hourly NOAA prediction records ({t, v}) starting at a GMT time."""
    times = pd.date_range(start=start, periods=len(heights), freq="h")
    return [
        {"t": t.strftime("%Y-%m-%d %H:%M"), "v": f"{h:.3f}"}
        for t, h in zip(times, heights)
    ]


@pytest.fixture
def battery_predictions():
    """One local day of predictions at The Battery (EDT midnight is 04:00Z)."""
    return make_predictions("2025-05-08 04:00", BATTERY_HEIGHTS)


@pytest.fixture
def stations_payload():
    return {"stations": [BATTERY_STATION]}


@pytest.fixture
def prediction_factory():
    return make_predictions

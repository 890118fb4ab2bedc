"""
Tide context for water samples.

- Nearest station search (haversine, widening radius)
- Tide state classification from hourly predictions
- The lookup service combining both with the NOAA client
"""

from .station_finder import TideStation, haversine_km, nearest_station
from .tide_analyzer import TIDE_UNAVAILABLE, classify_tide, closest_height
from .tide_service import TideEnrichment, TideLookupService

__all__ = [
    'TideStation',
    'haversine_km',
    'nearest_station',
    'TIDE_UNAVAILABLE',
    'classify_tide',
    'closest_height',
    'TideEnrichment',
    'TideLookupService'
]

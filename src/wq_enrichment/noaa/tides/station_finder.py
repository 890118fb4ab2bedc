"""
Nearest tide station search.

Distances are great-circle (haversine) distances on a spherical Earth.
The search widens through a sequence of radii: the closest station within
the first radius wins, otherwise the closest within the next one, and so
on. With the default (5 km, 10 km) a sample with no station within 10 km
gets no tide context at all.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence
import logging

import numpy as np

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
DEFAULT_SEARCH_RADII_KM = (5.0, 10.0)


@dataclass
class TideStation:
    """A NOAA tide station matched to a sample location."""
    id: str
    name: str
    lat: float
    lon: float
    distance_km: float


def haversine_km(lat1, lon1, lat2, lon2):
    """Great-circle distance in kilometres.

    Accepts scalars or numpy arrays; array inputs broadcast.
    """
    lat1, lon1, lat2, lon2 = map(np.radians, (lat1, lon1, lat2, lon2))
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2) ** 2
    return EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def _station_coordinates(stations: List[Dict]):
    """Pull usable coordinates out of raw station records."""
    usable = []
    lats = []
    lons = []
    for station in stations:
        try:
            lat = float(station.get('lat'))
            lon = float(station.get('lng', station.get('lon')))
        except (TypeError, ValueError):
            continue
        if not (np.isfinite(lat) and np.isfinite(lon)):
            continue
        usable.append(station)
        lats.append(lat)
        lons.append(lon)
    return usable, np.array(lats, dtype=float), np.array(lons, dtype=float)


def nearest_station(
    stations: List[Dict],
    lat: float,
    lon: float,
    radii_km: Sequence[float] = DEFAULT_SEARCH_RADII_KM
) -> Optional[TideStation]:
    """Find the closest station, widening the search radius pass by pass.

    Args:
        stations: Raw station records with id, name, lat and lng
        lat: Query latitude
        lon: Query longitude
        radii_km: Search radii tried in order

    Returns:
        The closest station inside the first radius that contains any
        station, or None if no station lies within the largest radius
    """
    usable, lats, lons = _station_coordinates(stations)
    if not usable:
        return None

    distances = haversine_km(lat, lon, lats, lons)

    for radius in radii_km:
        within = np.flatnonzero(distances <= radius)
        if within.size == 0:
            logger.debug(f"No stations within {radius} km of {lat}, {lon}")
            continue

        best = within[np.argmin(distances[within])]
        station = usable[best]
        return TideStation(
            id=str(station['id']),
            name=str(station.get('name', station['id'])),
            lat=float(lats[best]),
            lon=float(lons[best]),
            distance_km=float(distances[best]),
        )

    return None

"""Tests for the nearest tide station search."""

import numpy as np
import pytest

from wq_enrichment.noaa.tides.station_finder import haversine_km, nearest_station

SAMPLE_LAT = 40.70
SAMPLE_LON = -74.01


def station(station_id, lat, lon, name=None):
    return {"id": station_id, "name": name or f"Station {station_id}", "lat": lat, "lng": lon}


class TestHaversine:

    def test_zero_distance(self):
        assert haversine_km(40.7, -74.0, 40.7, -74.0) == pytest.approx(0.0)

    def test_one_degree_of_latitude(self):
        # 2 * pi * 6371 / 360
        assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.195, abs=0.01)

    def test_broadcasts_over_arrays(self):
        distances = haversine_km(0.0, 0.0, np.array([0.0, 1.0]), np.array([0.0, 0.0]))
        assert distances.shape == (2,)
        assert distances[0] == pytest.approx(0.0)


class TestNearestStation:

    def test_returns_closest_within_first_radius(self):
        stations = [
            station("far", SAMPLE_LAT + 0.04, SAMPLE_LON),    # ~4.4 km
            station("near", SAMPLE_LAT + 0.01, SAMPLE_LON),   # ~1.1 km
        ]
        result = nearest_station(stations, SAMPLE_LAT, SAMPLE_LON)
        assert result.id == "near"
        assert result.distance_km == pytest.approx(1.11, abs=0.01)

    def test_widens_to_second_radius(self):
        stations = [
            station("seven", SAMPLE_LAT + 0.063, SAMPLE_LON),  # ~7.0 km
            station("nine", SAMPLE_LAT + 0.081, SAMPLE_LON),   # ~9.0 km
        ]
        result = nearest_station(stations, SAMPLE_LAT, SAMPLE_LON)
        assert result is not None
        assert result.id == "seven"
        assert 5.0 < result.distance_km < 10.0

    def test_nothing_within_largest_radius(self):
        stations = [station("twelve", SAMPLE_LAT + 0.108, SAMPLE_LON)]  # ~12 km
        assert nearest_station(stations, SAMPLE_LAT, SAMPLE_LON) is None

    def test_custom_radii(self):
        stations = [station("twelve", SAMPLE_LAT + 0.108, SAMPLE_LON)]
        result = nearest_station(stations, SAMPLE_LAT, SAMPLE_LON, radii_km=(5.0, 20.0))
        assert result.id == "twelve"

    def test_skips_records_without_coordinates(self):
        stations = [
            {"id": "broken", "name": "No coords", "lat": None, "lng": None},
            {"id": "text", "name": "Text coords", "lat": "n/a", "lng": "-74.0"},
            station("ok", SAMPLE_LAT + 0.01, SAMPLE_LON),
        ]
        assert nearest_station(stations, SAMPLE_LAT, SAMPLE_LON).id == "ok"

    def test_accepts_lon_key(self):
        stations = [{"id": "1", "name": "Lon key", "lat": SAMPLE_LAT, "lon": SAMPLE_LON}]
        result = nearest_station(stations, SAMPLE_LAT, SAMPLE_LON)
        assert result.lon == SAMPLE_LON

    def test_empty_station_list(self):
        assert nearest_station([], SAMPLE_LAT, SAMPLE_LON) is None

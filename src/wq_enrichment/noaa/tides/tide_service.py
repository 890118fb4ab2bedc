"""
Tide lookup service.

Resolves the tide context of a single water sample: the nearest NOAA
station, the day's hourly predictions at that station and the resulting
tide height and state. Every failure here degrades to sentinel values so
that a single sample never aborts a batch.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional
import logging

import pandas as pd

from ..core.noaa_client import NOAAClient, NOAAApiError, NOAA_DATE_FORMAT
from .station_finder import TideStation, nearest_station, DEFAULT_SEARCH_RADII_KM
from .tide_analyzer import TIDE_UNAVAILABLE, InstantLike, classify_tide, closest_height, to_utc

logger = logging.getLogger(__name__)

HEIGHT_UNAVAILABLE = "N/A"
NO_STATION_NEARBY = "No tide station nearby"

# NOAA "units" request parameter to the suffix shown after a height
HEIGHT_UNITS = {'english': "ft", 'metric': "m"}


def format_height(height: float, units: str = 'english') -> str:
    """Format a tide height to two decimals, rounding halves away from zero.

    The exact binary value is rounded, so 2.125 gives "2.13 ft" and 1.005
    (stored just below 1.005) gives "1.00 ft".
    """
    rounded = Decimal(height).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    return f"{rounded} {HEIGHT_UNITS.get(units, HEIGHT_UNITS['english'])}"


@dataclass
class TideEnrichment:
    """Tide properties attached to an enriched feature."""
    tide_height: str = HEIGHT_UNAVAILABLE
    tide_state: str = TIDE_UNAVAILABLE

    @property
    def available(self) -> bool:
        return self.tide_state != TIDE_UNAVAILABLE

    def to_properties(self) -> Dict[str, str]:
        # 'tide' is kept as an alias of tideState for older map builds
        return {
            'tideHeight': self.tide_height,
            'tideState': self.tide_state,
            'tide': self.tide_state,
        }


class TideLookupService:
    """Looks up tide station, height and state for sample locations."""

    def __init__(
        self,
        client: Optional[NOAAClient] = None,
        tide_settings: Optional[Dict[str, Any]] = None,
        timezone: str = "America/New_York"
    ):
        """Initialize the service.

        Args:
            client: NOAA API client. A default client is created if omitted.
            tide_settings: The 'tide' section of the pipeline settings
            timezone: Civil time zone whose calendar day bounds the readings
        """
        self.client = client or NOAAClient()
        settings = tide_settings or {}
        self.search_radii_km = tuple(settings.get('search_radii_km', DEFAULT_SEARCH_RADII_KM))
        self.datum = settings.get('datum', 'MLLW')
        self.units = settings.get('units', 'english')
        self.interval = settings.get('interval', 'h')
        self.min_readings = int(settings.get('min_readings', 4))
        self.extreme_fraction = float(settings.get('extreme_fraction', 0.2))
        self.suppress_contradictory_trend = bool(settings.get('suppress_contradictory_trend', True))
        self.timezone = timezone

    def find_nearest_station(self, lat: float, lon: float) -> Optional[TideStation]:
        """Find the nearest tide station to a location.

        The full station list is fetched on every call.

        Returns:
            Nearest station within the configured radii, or None if there is
            none or the station list cannot be fetched
        """
        try:
            stations = self.client.fetch_stations()
        except NOAAApiError as e:
            logger.error(f"Error fetching tide stations: {e}")
            return None

        station = nearest_station(stations, lat, lon, self.search_radii_km)
        if station is None:
            logger.info(f"No tide station within {max(self.search_radii_km)} km of {lat}, {lon}")
        else:
            logger.debug(f"Nearest tide station to {lat}, {lon}: {station.name} ({station.distance_km:.2f} km)")
        return station

    def day_window(self, instant: InstantLike):
        """GMT bounds of the local calendar day containing the instant.

        Returns:
            (begin, end) UTC timestamps for local 00:00 and 23:00
        """
        local = to_utc(instant).tz_convert(self.timezone)
        midnight = local.normalize()
        next_midnight = midnight + pd.DateOffset(days=1)
        begin = midnight.tz_convert("UTC")
        end = next_midnight.tz_convert("UTC") - pd.Timedelta(hours=1)
        return begin, end

    def fetch_tide_readings(self, station_id: str, instant: InstantLike) -> Optional[List[Dict]]:
        """Fetch hourly tide predictions for the day containing the instant.

        Returns:
            Raw prediction records ({t, v} with GMT timestamps), or None on
            any failure or an empty response
        """
        try:
            begin, end = self.day_window(instant)
            predictions = self.client.fetch_predictions(
                station=station_id,
                begin_date=begin.strftime(NOAA_DATE_FORMAT),
                end_date=end.strftime(NOAA_DATE_FORMAT),
                datum=self.datum,
                units=self.units,
                interval=self.interval,
                time_zone='gmt',
            )
        except NOAAApiError as e:
            logger.warning(f"Failed to fetch tide data for {station_id}: {e}")
            return None
        except (ValueError, TypeError) as e:
            logger.warning(f"Invalid sample time {instant!r} for tide lookup: {e}")
            return None

        if not predictions:
            logger.warning(f"No tide predictions for {station_id} around {instant}")
            return None

        return predictions

    def describe(self, lat: float, lon: float, instant: InstantLike) -> TideEnrichment:
        """Resolve tide height and state for one sample.

        Never raises; failures are reported through the sentinel values.
        """
        try:
            station = self.find_nearest_station(lat, lon)
            if station is None:
                return TideEnrichment(tide_height=NO_STATION_NEARBY)

            readings = self.fetch_tide_readings(station.id, instant)
            if readings is None:
                return TideEnrichment()

            height = closest_height(readings, instant)
            tide_height = format_height(height, self.units) if height is not None else HEIGHT_UNAVAILABLE

            summary = classify_tide(
                readings,
                station.name,
                instant,
                min_readings=self.min_readings,
                extreme_fraction=self.extreme_fraction,
                suppress_contradictory_trend=self.suppress_contradictory_trend,
            )
            if summary is None:
                logger.info(f"Could not determine tide status from station {station.name}")
                return TideEnrichment(tide_height=tide_height)

            return TideEnrichment(tide_height=tide_height, tide_state=summary)

        except Exception as e:
            logger.warning(f"Tide enrichment failed for {lat}, {lon}: {e}")
            return TideEnrichment()

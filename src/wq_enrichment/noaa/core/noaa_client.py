"""
NOAA CO-OPS API client for tide station metadata and tide predictions.
"""

from typing import Any, Dict, List, Optional
import logging

import requests

from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

DEFAULT_STATIONS_URL = "https://api.tidesandcurrents.noaa.gov/mdapi/prod/webapi/stations.json"
DEFAULT_DATAGETTER_URL = "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter"

# NOAA accepts "yyyyMMdd HH:mm" for begin_date/end_date
NOAA_DATE_FORMAT = "%Y%m%d %H:%M"

class NOAAApiError(Exception):
    """Exception raised when NOAA API request fails."""
    def __init__(self, message: str, response: Optional[requests.Response] = None):
        """Initialize the error.

        Args:
            message: Error message
            response: Optional response object that caused the error
        """
        self.message = message
        self.response = response
        super().__init__(self.message)

class NOAAClient:
    """Client for the NOAA Tides & Currents station list and data getter."""

    def __init__(
        self,
        stations_url: str = DEFAULT_STATIONS_URL,
        datagetter_url: str = DEFAULT_DATAGETTER_URL,
        requests_per_second: float = 2.0,
        timeout: float = 30.0,
        application: str = "nyc_water_app"
    ):
        """Initialize the NOAA API client.

        Args:
            stations_url: Metadata API endpoint listing all stations
            datagetter_url: Data API endpoint serving predictions
            requests_per_second: Maximum number of requests per second. Defaults to 2.0.
            timeout: Per-request timeout in seconds
            application: Application name reported to NOAA
        """
        self.stations_url = stations_url
        self.datagetter_url = datagetter_url
        self.timeout = timeout
        self.application = application
        self.rate_limiter = RateLimiter(requests_per_second)
        # Use session for connection pooling
        self._session = requests.Session()

    @classmethod
    def from_settings(cls, api_settings: Dict[str, Any]) -> "NOAAClient":
        """Build a client from the 'api' section of the pipeline settings."""
        return cls(
            stations_url=api_settings.get('stations_url', DEFAULT_STATIONS_URL),
            datagetter_url=api_settings.get('datagetter_url', DEFAULT_DATAGETTER_URL),
            requests_per_second=float(api_settings.get('requests_per_second', 2.0)),
            timeout=float(api_settings.get('timeout', 30.0)),
            application=api_settings.get('application', "nyc_water_app"),
        )

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict:
        """Issue a rate limited GET request and decode the JSON body.

        Raises:
            NOAAApiError: On transport errors, HTTP errors or a non-JSON body
        """
        logger.debug(f"Making API request to URL: {url}")
        logger.debug(f"Request parameters: {params}")

        try:
            self.rate_limiter.wait()
            response = self._session.get(url, params=params, timeout=self.timeout)
            logger.debug(f"API response status code: {response.status_code}")
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"NOAA API request to {url} failed: {str(e)}")
            raise NOAAApiError(f"Request failed: {str(e)}", response=getattr(e, 'response', None))

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Failed to parse NOAA API response from {url}: {str(e)}")
            raise NOAAApiError(f"Invalid response format: {str(e)}", response=response)

        if not isinstance(data, dict):
            raise NOAAApiError("Unexpected response payload (expected a JSON object)", response=response)

        return data

    def fetch_stations(self) -> List[Dict]:
        """Fetch the full NOAA station list.

        Returns:
            List of station records, each containing:
            - id: Station ID
            - name: Station name
            - lat: Latitude
            - lng: Longitude

        Raises:
            NOAAApiError: If the API request fails or the payload has no stations
        """
        data = self._get_json(self.stations_url)

        if "stations" not in data or not isinstance(data["stations"], list):
            logger.error(f"Missing stations in response. Response keys: {list(data.keys())}")
            raise NOAAApiError("No station data in response")

        logger.debug(f"Fetched {len(data['stations'])} stations")
        return data["stations"]

    def fetch_predictions(
        self,
        station: str,
        begin_date: str,
        end_date: str,
        datum: str = "MLLW",
        units: str = "english",
        interval: str = "h",
        time_zone: str = "gmt"
    ) -> List[Dict]:
        """Fetch tide predictions for a station and date range.

        Args:
            station: NOAA station identifier
            begin_date: Start of the range in NOAA_DATE_FORMAT (or yyyyMMdd)
            end_date: End of the range, inclusive
            datum: Vertical datum for heights
            units: 'english' (feet) or 'metric'
            interval: Prediction interval ('h' for hourly, 'hilo' for extremes)
            time_zone: Time zone of the returned timestamps

        Returns:
            List of prediction records, each containing:
            - t: Timestamp string ("YYYY-MM-DD HH:MM")
            - v: Water level as a string

        Raises:
            NOAAApiError: If the API request fails or NOAA reports an error
        """
        if not station:
            raise NOAAApiError("Station ID is required")

        params = {
            'product': 'predictions',
            'application': self.application,
            'station': station,
            'begin_date': begin_date,
            'end_date': end_date,
            'datum': datum,
            'units': units,
            'interval': interval,
            'time_zone': time_zone,
            'format': 'json',
        }

        data = self._get_json(self.datagetter_url, params=params)

        if "error" in data:
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            logger.warning(f"NOAA reported an error for station {station}: {message}")
            raise NOAAApiError(f"NOAA error for station {station}: {message}")

        if "predictions" not in data or not isinstance(data["predictions"], list):
            logger.error(f"Missing predictions in response. Response keys: {list(data.keys())}")
            raise NOAAApiError("No prediction data in response")

        logger.debug(f"Fetched {len(data['predictions'])} predictions for station {station}")
        return data["predictions"]

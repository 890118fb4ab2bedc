"""
Rate limiter for NOAA CO-OPS requests.

NOAA throttles clients without notice, so every request made by the
pipeline goes through a single limiter that spaces calls out.
"""

import time
from typing import Optional
import logging

logger = logging.getLogger(__name__)

class RateLimiter:
    """Enforces a minimum interval between consecutive requests."""

    def __init__(self, requests_per_second: float = 2.0):
        """Initialize the rate limiter.

        Args:
            requests_per_second: Maximum number of requests per second

        Raises:
            ValueError: If requests_per_second is not positive
        """
        if requests_per_second <= 0:
            raise ValueError(f"requests_per_second must be positive, got {requests_per_second}")
        self._requests_per_second = requests_per_second
        self._min_interval = 1.0 / requests_per_second
        self._last_request_time: Optional[float] = None
        self.request_count = 0

    @property
    def requests_per_second(self) -> float:
        """Get the configured requests per second limit."""
        return self._requests_per_second

    def wait(self) -> None:
        """Block until the next request is allowed, then record it."""
        now = time.monotonic()

        if self._last_request_time is not None:
            remaining = self._min_interval - (now - self._last_request_time)
            if remaining > 0:
                logger.debug(f"Rate limiting: sleeping for {remaining:.2f} seconds")
                time.sleep(remaining)

        self._last_request_time = time.monotonic()
        self.request_count += 1

"""
NOAA Core Functionality.

This module provides the HTTP client for the NOAA CO-OPS APIs and the
rate limiter shared by every request.
"""

from .noaa_client import NOAAClient, NOAAApiError
from .rate_limiter import RateLimiter

__all__ = [
    'NOAAClient',
    'NOAAApiError',
    'RateLimiter'
]

"""
NOAA tide data package.

This package provides access to NOAA CO-OPS station metadata and tide
predictions, and turns them into the tide context of a water sample.
"""

from . import core
from . import tides

# Import commonly used classes for convenience
from .core import NOAAClient, NOAAApiError
from .tides import TideEnrichment, TideLookupService, TideStation

__all__ = [
    # Submodules
    'core',
    'tides',

    # Core classes
    'NOAAClient',
    'NOAAApiError',

    # Tide lookup
    'TideEnrichment',
    'TideLookupService',
    'TideStation'
]

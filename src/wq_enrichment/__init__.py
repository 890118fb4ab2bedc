"""
Water quality data enrichment.

Turns raw sample and rainfall CSV exports into per-date GeoJSON datasets
enriched with rainfall totals, NOAA tide context and per-site water
quality history.
"""

__version__ = "0.3.0"

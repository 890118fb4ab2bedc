"""
Input parsing for the enrichment pipeline.

- Sample and rainfall CSV parsing with header aliasing
- MPN parsing with detection-limit notation
- Local sample time to UTC instant conversion
"""

from .csv_parser import (
    MPNParseResult,
    RainfallRow,
    SampleRow,
    ValidationResult,
    parse_mpn,
    parse_rain_csv,
    parse_sample_csv,
    read_csv_file
)
from .timestamps import format_sample_time, parse_time_of_day

__all__ = [
    'MPNParseResult',
    'RainfallRow',
    'SampleRow',
    'ValidationResult',
    'parse_mpn',
    'parse_rain_csv',
    'parse_sample_csv',
    'read_csv_file',
    'format_sample_time',
    'parse_time_of_day'
]

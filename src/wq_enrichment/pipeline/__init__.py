"""
Dataset pipeline: input discovery, per-date enrichment and publishing.
"""

from .discovery import DateFiles, PipelineError, discover_input_files
from .orchestrator import DatasetOrchestrator, DateResult, ProcessingStats, RunResult
from .writer import format_geojson, write_dataset, write_dates_index, write_latest

__all__ = [
    'DateFiles',
    'PipelineError',
    'discover_input_files',
    'DatasetOrchestrator',
    'DateResult',
    'ProcessingStats',
    'RunResult',
    'format_geojson',
    'write_dataset',
    'write_dates_index',
    'write_latest'
]

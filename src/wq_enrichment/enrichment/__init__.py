"""
Derived values attached to each enriched sample.
"""

from .quality import QualityCounts, classify, dataset_directories, load_history, record_sample
from .rainfall import RainfallSummary, summarize_rainfall

__all__ = [
    'QualityCounts',
    'classify',
    'dataset_directories',
    'load_history',
    'record_sample',
    'RainfallSummary',
    'summarize_rainfall'
]

"""
Search module for linear library-wide text search.

Provides match extraction, the observable result sink, and the
background scan controller.
"""

from .models import (
    SearchResult,
    ScanState,
    SinkEvent,
    RESULTS_CLEARED,
    RESULTS_APPENDED,
    PROGRESS_UPDATED,
    SEARCHING_CHANGED,
    BOOK_SKIPPED,
)
from .match_extractor import MatchExtractor
from .result_sink import ResultSink
from .scan_controller import ScanController

__all__ = [
    "SearchResult",
    "ScanState",
    "SinkEvent",
    "RESULTS_CLEARED",
    "RESULTS_APPENDED",
    "PROGRESS_UPDATED",
    "SEARCHING_CHANGED",
    "BOOK_SKIPPED",
    "MatchExtractor",
    "ResultSink",
    "ScanController"
]

"""
Data models for search functionality.

Defines the immutable search result, the mutable scan state, and the
events published to result sink subscribers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class SearchResult:
    """
    Represents a single match found in a book.

    Attributes:
        book_path: Path of the book containing the match.
        book_index: 0-based index of the line holding the match start.
        address: Human-readable location, e.g. "Genesis, Chapter 3".
        snippet: Context text around the match.
        query: The query that produced this match.
        offset: Character offset of the match start in the book text.
    """
    book_path: str
    book_index: int
    address: str
    snippet: str
    query: str
    offset: int = 0

    def open_request(self) -> Dict:
        """Parameters a viewer needs to open the book at this match."""
        return {
            "book_path": self.book_path,
            "book_index": self.book_index,
            "query": self.query
        }


@dataclass
class ScanState:
    """
    Progress and status of a scan.

    Attributes:
        query: Query of the current or last scan.
        is_searching: True while the scan unit is running.
        current_book_ordinal: Number of books fully processed.
        total_books: Number of books in the selection snapshot.
        started_at: When the scan started.
        finished_at: When the scan finished or was cancelled.
        cancelled: True if the scan stopped before visiting every book.
        skipped_books: Books whose text could not be loaded.
    """
    query: str = ""
    is_searching: bool = False
    current_book_ordinal: int = 0
    total_books: int = 0
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    cancelled: bool = False
    skipped_books: List[str] = field(default_factory=list)

    @property
    def progress(self) -> float:
        """Fraction of books processed, between 0 and 1."""
        if self.total_books <= 0:
            return 0.0
        return self.current_book_ordinal / self.total_books

    @property
    def elapsed_seconds(self) -> Optional[float]:
        """Duration of a finished scan, or None while running or never started."""
        if self.started_at is None or self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()

    @property
    def is_complete(self) -> bool:
        """True when a scan visited every selected book and finished normally."""
        return (
            self.finished_at is not None
            and not self.cancelled
            and self.current_book_ordinal == self.total_books
        )

    def copy(self) -> "ScanState":
        """Independent snapshot of this state."""
        return ScanState(
            query=self.query,
            is_searching=self.is_searching,
            current_book_ordinal=self.current_book_ordinal,
            total_books=self.total_books,
            started_at=self.started_at,
            finished_at=self.finished_at,
            cancelled=self.cancelled,
            skipped_books=list(self.skipped_books)
        )


# Event kinds
RESULTS_CLEARED = "results.cleared"
RESULTS_APPENDED = "results.appended"
PROGRESS_UPDATED = "progress.updated"
SEARCHING_CHANGED = "searching.changed"
BOOK_SKIPPED = "book.skipped"


@dataclass(frozen=True)
class SinkEvent:
    """
    A single change published by a ResultSink.

    Only the fields relevant to the event kind are meaningful:
    results/start_index for appends, current/total for progress,
    is_searching for status changes, book_path for skipped books.
    """
    kind: str
    results: Tuple[SearchResult, ...] = ()
    start_index: int = 0
    current: int = 0
    total: int = 0
    is_searching: bool = False
    book_path: Optional[str] = None

"""
Observable aggregation of search results and scan state.

The sink owns the ordered result sequence and the ScanState. Every
mutation publishes a SinkEvent to subscribers, synchronously and under
a single lock, so each subscriber sees every change once and in the
order it happened. Readers get snapshots and never mutate the sink.
"""

import queue
import threading
from datetime import datetime
from typing import Callable, Iterable, List, Tuple

from ..core import get_logger
from .models import (
    BOOK_SKIPPED,
    PROGRESS_UPDATED,
    RESULTS_APPENDED,
    RESULTS_CLEARED,
    SEARCHING_CHANGED,
    ScanState,
    SearchResult,
    SinkEvent,
)

logger = get_logger(__name__)

Listener = Callable[[SinkEvent], None]


class ResultSink:
    """
    Thread-safe, append-only result collection with change notifications.

    Mutated only by the scan controller. Full replacement happens only
    through clear() and reset().
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._results: List[SearchResult] = []
        self._state = ScanState()
        self._listeners: List[Listener] = []

    @property
    def results(self) -> Tuple[SearchResult, ...]:
        """Snapshot of the results found so far, in discovery order."""
        with self._lock:
            return tuple(self._results)

    @property
    def state(self) -> ScanState:
        """Snapshot of the current scan state."""
        with self._lock:
            return self._state.copy()

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with every subsequent SinkEvent.

        Listeners run on the thread performing the mutation and must not
        block for long.

        Args:
            listener: Callable taking a SinkEvent.

        Returns:
            A callable that removes the listener.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def subscribe_queue(self) -> Tuple["queue.Queue[SinkEvent]", Callable[[], None]]:
        """
        Subscribe through a queue, for consumers that poll.

        Returns:
            Tuple of (event queue, unsubscribe callable).
        """
        events: "queue.Queue[SinkEvent]" = queue.Queue()
        return events, self.subscribe(events.put)

    def clear(self) -> None:
        """Drop all results and return to an idle, never-started state."""
        with self._lock:
            was_searching = self._state.is_searching
            self._results.clear()
            self._state = ScanState()

            self._publish(SinkEvent(kind=RESULTS_CLEARED))
            if was_searching:
                self._publish(SinkEvent(kind=SEARCHING_CHANGED, is_searching=False))

    def reset(self, query: str, total_books: int, started_at: datetime) -> None:
        """
        Clear results and mark a new scan as running.

        Args:
            query: Query of the new scan.
            total_books: Size of the selection snapshot.
            started_at: Scan start time.
        """
        with self._lock:
            self._results.clear()
            self._state = ScanState(
                query=query,
                is_searching=True,
                current_book_ordinal=0,
                total_books=total_books,
                started_at=started_at
            )

            self._publish(SinkEvent(kind=RESULTS_CLEARED))
            self._publish(SinkEvent(kind=PROGRESS_UPDATED, current=0, total=total_books))
            self._publish(SinkEvent(kind=SEARCHING_CHANGED, is_searching=True))

    def append(self, results: Iterable[SearchResult]) -> int:
        """
        Append results to the sequence.

        Args:
            results: Results to append, in discovery order.

        Returns:
            Number of results appended.
        """
        batch = tuple(results)
        if not batch:
            return 0

        with self._lock:
            start_index = len(self._results)
            self._results.extend(batch)
            self._publish(SinkEvent(
                kind=RESULTS_APPENDED,
                results=batch,
                start_index=start_index
            ))

        return len(batch)

    def advance(self, ordinal: int) -> None:
        """
        Record that the first `ordinal` books have been processed.

        Raises:
            ValueError: If ordinal would move progress backwards.
        """
        with self._lock:
            if ordinal < self._state.current_book_ordinal:
                raise ValueError(
                    f"Progress cannot decrease: {ordinal} < {self._state.current_book_ordinal}"
                )

            self._state.current_book_ordinal = ordinal
            self._publish(SinkEvent(
                kind=PROGRESS_UPDATED,
                current=ordinal,
                total=self._state.total_books
            ))

    def record_skipped(self, book_path: str) -> None:
        """Remember a book whose text could not be loaded."""
        with self._lock:
            self._state.skipped_books.append(book_path)
            self._publish(SinkEvent(kind=BOOK_SKIPPED, book_path=book_path))

    def finish(self, finished_at: datetime, cancelled: bool = False) -> None:
        """
        Mark the running scan as finished. Has no effect if no scan is running.

        Args:
            finished_at: Completion or cancellation time.
            cancelled: Whether the scan stopped early.
        """
        with self._lock:
            if not self._state.is_searching:
                return

            started_at = self._state.started_at
            if started_at is not None and finished_at < started_at:
                finished_at = started_at

            self._state.is_searching = False
            self._state.finished_at = finished_at
            self._state.cancelled = cancelled
            self._publish(SinkEvent(kind=SEARCHING_CHANGED, is_searching=False))

    def _publish(self, event: SinkEvent) -> None:
        """Deliver an event to every listener. Caller holds the lock."""
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Result sink listener failed on {event.kind}: {e}")

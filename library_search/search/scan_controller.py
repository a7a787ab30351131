"""
Library-wide scan orchestration.

Walks a snapshot of the selected books in order on a single background
thread, loading each book, extracting matches, and publishing results
and progress to a ResultSink. Cancellation is cooperative and observed
between books only.
"""

import itertools
import threading
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from ..core import get_config, get_logger, AccessError, SearchError
from ..corpus import BookCorpusAccessor
from .match_extractor import MatchExtractor
from .result_sink import ResultSink

logger = get_logger(__name__)

BookPath = Union[str, Path]

_scan_counter = itertools.count(1)


class ScanController:
    """
    Runs at most one library scan at a time.

    Starting a new search cancels the active one and waits for its
    thread to exit before the sink is reset, so two scans never append
    to the same result sequence. A failing book is skipped, never
    fatal to the scan.
    """

    def __init__(
        self,
        accessor: BookCorpusAccessor = None,
        extractor: MatchExtractor = None,
        sink: ResultSink = None,
        append_batch_size: int = None,
        yield_seconds: float = None,
        log_progress_every: int = None
    ):
        """
        Initialize the controller.

        Args:
            accessor: Loads book text. Defaults to a BookCorpusAccessor.
            extractor: Finds matches. Defaults to a MatchExtractor.
            sink: Receives results and state. Defaults to a new ResultSink.
            append_batch_size: Results buffered before each append.
            yield_seconds: Pause at each between-book checkpoint.
            log_progress_every: Log progress every N books.
        """
        config = get_config()

        self.accessor = accessor or BookCorpusAccessor()
        self.extractor = extractor or MatchExtractor()
        self.sink = sink if sink is not None else ResultSink()

        self.append_batch_size = max(1, append_batch_size or config.scan.append_batch_size)
        self.yield_seconds = (
            config.scan.yield_seconds if yield_seconds is None else yield_seconds
        )
        self.log_every = max(1, log_progress_every or config.scan.log_progress_every)

        self._control_lock = threading.Lock()
        # Guards _thread, _cancel_event and the start flags; never held while joining
        self._state_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._cancel_event = threading.Event()
        self._starting = False
        self._cancel_pending = False

    @property
    def is_running(self) -> bool:
        """True while a scan thread is alive."""
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start_search(self, query: str, selection: Iterable[BookPath]) -> bool:
        """
        Start scanning the selected books for query.

        Any active scan is cancelled and joined first. Returns as soon as
        the new scan thread has started. Must not be called from a sink
        listener.

        Args:
            query: Case-sensitive text to find. An empty query clears the
                   results and leaves the controller idle.
            selection: Book paths in the order they should be scanned.
                       Snapshotted here; later changes are not observed.

        Returns:
            True if a scan thread was started.

        Raises:
            SearchError: If query is not a string.
        """
        if not isinstance(query, str):
            raise SearchError("Query must be a string", query=repr(query))

        books = _snapshot(selection)

        with self._control_lock:
            with self._state_lock:
                self._starting = True
                self._cancel_pending = False

            try:
                return self._start_locked(query, books)
            finally:
                with self._state_lock:
                    self._starting = False

    def _start_locked(self, query: str, books: Tuple[str, ...]) -> bool:
        """Replace the active scan. Caller holds the control lock."""
        self._stop_active()

        if not query.strip():
            logger.debug("Empty query, clearing results")
            self.sink.clear()
            return False

        self.sink.reset(query, len(books), datetime.now())

        if not books:
            logger.warning(f"Search '{query}' started with an empty selection")
            self.sink.finish(datetime.now())
            return False

        cancel_event = threading.Event()
        thread = threading.Thread(
            target=self._run,
            args=(query, books, cancel_event),
            daemon=True,
            name=f"library-scan-{next(_scan_counter)}"
        )

        with self._state_lock:
            # A cancel that arrived while the previous scan was being replaced
            # applies to the scan starting now
            if self._cancel_pending:
                logger.info(f"Cancellation requested before {thread.name} started")
                cancel_event.set()

            self._cancel_event = cancel_event
            self._thread = thread
            thread.start()

        return True

    def cancel(self, wait: bool = False, timeout: float = None) -> None:
        """
        Ask the active scan to stop after the book it is processing.

        No-op when idle. Safe to call from a sink listener with wait=False.
        A call made while start_search is replacing a scan also stops the
        scan being started.

        Args:
            wait: Block until the scan thread has exited.
            timeout: Maximum seconds to wait when wait is True.
        """
        with self._state_lock:
            if self._starting:
                self._cancel_pending = True

            thread = self._thread
            if thread is None or not thread.is_alive():
                return

            self._cancel_event.set()

        logger.info(f"Cancellation requested for {thread.name}")

        if wait and thread is not threading.current_thread():
            thread.join(timeout)

    def wait(self, timeout: float = None) -> bool:
        """
        Block until the active scan, if any, has exited.

        Returns:
            True if no scan is running afterwards.
        """
        thread = self._thread
        if thread is None:
            return True

        thread.join(timeout)
        return not thread.is_alive()

    def clear(self) -> None:
        """Stop any active scan and drop all results."""
        with self._control_lock:
            self._stop_active()
            self.sink.clear()

    def _stop_active(self) -> None:
        """Cancel and join the active scan thread. Caller holds the control lock."""
        with self._state_lock:
            thread = self._thread
            if thread is None:
                return

            if thread.is_alive():
                self._cancel_event.set()

        if thread.is_alive():
            logger.debug(f"Superseding active scan {thread.name}")
            thread.join()

        with self._state_lock:
            self._thread = None

    def _run(self, query: str, books: Tuple[str, ...], cancel_event: threading.Event) -> None:
        """Scan loop executed on the background thread."""
        total = len(books)
        found = 0
        cancelled = False

        logger.info(f"Scan started: '{query}' over {total} books")

        try:
            for ordinal, book_path in enumerate(books):
                if cancel_event.is_set():
                    cancelled = True
                    break

                found += self._scan_book(book_path, query)
                self.sink.advance(ordinal + 1)

                if (ordinal + 1) % self.log_every == 0:
                    logger.info(f"Progress: {ordinal + 1}/{total} books, {found} matches")

                # Checkpoint: give other threads a turn before the next book
                cancel_event.wait(self.yield_seconds)

        except Exception as e:
            cancelled = True
            logger.error(f"Scan '{query}' aborted by unexpected error: {e}")

        finally:
            self.sink.finish(datetime.now(), cancelled=cancelled)

        state = self.sink.state
        if cancelled:
            logger.info(
                f"Scan cancelled: '{query}' after {state.current_book_ordinal}/{total} books, "
                f"{found} matches"
            )
        else:
            logger.info(
                f"Scan complete: '{query}' {found} matches in {total} books, "
                f"{len(state.skipped_books)} skipped"
            )

    def _scan_book(self, book_path: str, query: str) -> int:
        """
        Load one book and append its matches to the sink.

        Returns:
            Number of results appended.
        """
        try:
            text = self.accessor.fetch_text(book_path)
        except AccessError as e:
            logger.warning(f"Skipping unreadable book {book_path}: {e.message}")
            self.sink.record_skipped(book_path)
            return 0
        except Exception as e:
            logger.error(f"Unexpected error loading {book_path}: {e}")
            self.sink.record_skipped(book_path)
            return 0

        found = 0
        batch = []

        try:
            for result in self.extractor.find_matches(book_path, text, query):
                batch.append(result)

                if len(batch) >= self.append_batch_size:
                    found += self.sink.append(batch)
                    batch = []

        except Exception as e:
            logger.error(f"Match extraction failed for {book_path}: {e}")

        found += self.sink.append(batch)

        logger.debug(f"Scanned {book_path}: {found} matches")
        return found


def _snapshot(selection: Optional[Iterable[BookPath]]) -> Tuple[str, ...]:
    """Freeze a selection into an ordered tuple of unique path strings."""
    if selection is None:
        return ()

    if isinstance(selection, (str, Path)):
        selection = [selection]

    return tuple(dict.fromkeys(str(path) for path in selection))

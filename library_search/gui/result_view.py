"""
Result rows kept by the page between refreshes.

The page does not copy the sink's results on every refresh. It keeps
its own rows and applies the events drained from its queue: a clear
empties them and an append adds the new results at their start index.
"""

from typing import Iterable, List

from ..core import get_logger
from ..corpus import BookCorpusAccessor
from ..search import RESULTS_APPENDED, RESULTS_CLEARED, ResultSink, SearchResult, SinkEvent

logger = get_logger(__name__)


class ResultView:
    """Rows rendered by the page, updated from sink events."""

    def __init__(self, sink: ResultSink):
        self.sink = sink
        self.rows: List[SearchResult] = list(sink.results)

    def apply(self, events: Iterable[SinkEvent]) -> int:
        """
        Apply drained events in the order they were published.

        An append that starts past the last known row means events were
        missed; the rows are then reloaded from the sink.

        Returns:
            Number of rows added (a clear counts as zero).
        """
        added = 0

        for event in events:
            if event.kind == RESULTS_CLEARED:
                self.rows = []

            elif event.kind == RESULTS_APPENDED:
                known = len(self.rows)

                if event.start_index > known:
                    logger.warning(
                        f"Result events missed at row {known}, reloading from the sink"
                    )
                    self.rows = list(self.sink.results)
                    added += len(self.rows) - known
                    continue

                # Rows already present (from a reload) are not added twice
                new_rows = event.results[known - event.start_index:]
                self.rows.extend(new_rows)
                added += len(new_rows)

        return added


def open_unit(accessor: BookCorpusAccessor, result: SearchResult) -> str:
    """
    Read the paragraph a result points at.

    Raises:
        AccessError: If the book cannot be opened.
    """
    request = result.open_request()
    unit = accessor.read_unit(request["book_path"], request["book_index"])
    return unit or ""

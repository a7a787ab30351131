"""
Match extraction over the text of a single book.

Finds every case-sensitive occurrence of a query, attributes it to the
line (paragraph) holding its start, and builds a context snippet and a
display address from the book title and the headings open at that line.
"""

import re
from bisect import bisect_right
from pathlib import Path
from typing import Dict, Iterator, List, Union

from ..core import get_config
from ..utils import book_title, collapse_whitespace, parse_heading, strip_markup
from .models import SearchResult

ELLIPSIS = "..."


class MatchExtractor:
    """
    Locates query matches in book text.

    Stateless between calls: each call to find_matches returns a new,
    finite generator and never modifies the text it scans.
    """

    def __init__(self, snippet_context_chars: int = None, strip_markup: bool = None):
        """
        Initialize the extractor.

        Args:
            snippet_context_chars: Characters of context kept on each side
                                   of a match. Defaults to config value.
            strip_markup: Remove tags from snippets. Defaults to config value.
        """
        config = get_config()

        self.snippet_context_chars = (
            config.search.snippet_context_chars
            if snippet_context_chars is None else snippet_context_chars
        )
        self.strip_markup = (
            config.search.strip_markup
            if strip_markup is None else strip_markup
        )

    def find_matches(
        self,
        book_path: Union[str, Path],
        text: str,
        query: str
    ) -> Iterator[SearchResult]:
        """
        Yield one SearchResult per occurrence of query in text.

        Overlapping occurrences are all reported. A match running over a
        line break belongs to the line where it starts.

        Args:
            book_path: Path of the book, recorded on each result.
            text: Full book text.
            query: Case-sensitive substring to look for.

        Yields:
            SearchResult objects in order of their offset in the text.
        """
        if not text or not query:
            return

        book_path = str(book_path)
        title = book_title(book_path)
        line_starts = _line_starts(text)

        headings: Dict[int, str] = {}
        next_line = 0

        start = text.find(query)
        while start != -1:
            line_index = bisect_right(line_starts, start) - 1

            # Headings are consumed in text order, matches arrive in offset order
            while next_line <= line_index:
                _update_headings(headings, _line_at(text, line_starts, next_line))
                next_line += 1

            yield SearchResult(
                book_path=book_path,
                book_index=line_index,
                address=_format_address(title, headings),
                snippet=self.build_snippet(text, start, start + len(query)),
                query=query,
                offset=start
            )

            start = text.find(query, start + 1)

    def build_snippet(self, text: str, start: int, end: int) -> str:
        """
        Cut a context window around text[start:end].

        Args:
            text: Full book text.
            start: Match start offset.
            end: Match end offset.

        Returns:
            Snippet with "..." marking truncated edges. Only the context
            around the match is cleaned; the matched text is kept as is.
        """
        window_start = max(0, start - self.snippet_context_chars)
        window_end = min(len(text), end + self.snippet_context_chars)

        before = text[window_start:start]
        after = text[end:window_end]

        if self.strip_markup:
            before = strip_markup(before, cut_start=window_start > 0)
            after = strip_markup(after, cut_end=window_end < len(text))

        before = collapse_whitespace(before).lstrip()
        after = collapse_whitespace(after).rstrip()
        snippet = before + text[start:end] + after

        if window_start > 0:
            snippet = ELLIPSIS + snippet
        if window_end < len(text):
            snippet = snippet + ELLIPSIS

        return snippet


def _line_starts(text: str) -> List[int]:
    """Offsets at which each line of text begins."""
    return [0] + [m.end() for m in re.finditer("\n", text)]


def _line_at(text: str, line_starts: List[int], index: int) -> str:
    start = line_starts[index]
    if index + 1 < len(line_starts):
        return text[start:line_starts[index + 1] - 1]
    return text[start:]


def _update_headings(headings: Dict[int, str], line: str) -> None:
    """A heading of level n closes every open heading of level n or deeper."""
    heading = parse_heading(line)
    if heading is None:
        return

    level, title = heading
    for open_level in [lvl for lvl in headings if lvl >= level]:
        del headings[open_level]
    headings[level] = title


def _format_address(title: str, headings: Dict[int, str]) -> str:
    parts = [title]
    for level in sorted(headings):
        # Books usually repeat their own title as the first heading
        if headings[level] and headings[level] != title:
            parts.append(headings[level])
    return ", ".join(parts)

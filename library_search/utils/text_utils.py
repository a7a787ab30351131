"""
Text utility functions for the library searcher.

Provides markup stripping, whitespace normalization, truncation,
heading detection, and page joining for book text.
"""

import re
from typing import Iterable, Optional, Tuple


_TAG_RE = re.compile(r"<[^>]*>")
_LEADING_PARTIAL_TAG_RE = re.compile(r"^[^<>\s]{1,20}>")
_TRAILING_PARTIAL_TAG_RE = re.compile(r"<[/a-zA-Z][^<>]*$")
_WHITESPACE_RE = re.compile(r"\s+")
_HEADING_RE = re.compile(r"^\s*<h([1-6])[^>]*>(.*?)</h\1\s*>", re.IGNORECASE | re.DOTALL)


def strip_markup(text: str, cut_start: bool = False, cut_end: bool = False) -> str:
    """
    Remove HTML-style tags from text.

    Args:
        text: Text possibly containing tags such as <b> or <h2>.
        cut_start: The text was cut out of a longer one at its start, so a
                   tag tail such as 'class="x">' there is removed too.
        cut_end: The text was cut at its end, so a tag head such as
                 "<h2" there is removed too.

    Returns:
        Text with all tags removed.
    """
    if not text:
        return ""

    text = _TAG_RE.sub("", text)
    if cut_start:
        text = _LEADING_PARTIAL_TAG_RE.sub("", text)
    if cut_end:
        text = _TRAILING_PARTIAL_TAG_RE.sub("", text)
    return text


def collapse_whitespace(text: str) -> str:
    """
    Replace runs of whitespace (including newlines) with a single space.

    Args:
        text: Text to normalize.

    Returns:
        Single-line text with collapsed whitespace.
    """
    if not text:
        return ""

    return _WHITESPACE_RE.sub(" ", text)


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    """
    Truncate text to maximum length with ellipsis.

    Args:
        text: Text to truncate.
        max_length: Maximum length including suffix.
        suffix: String to append when truncated.

    Returns:
        Truncated text or original if within limit.
    """
    if not text or len(text) <= max_length:
        return text

    truncate_at = max_length - len(suffix)
    if truncate_at <= 0:
        return suffix[:max_length]

    # Try to break at word boundary
    truncated = text[:truncate_at]
    last_space = truncated.rfind(" ")

    if last_space > truncate_at * 0.7:
        truncated = truncated[:last_space]

    return truncated + suffix


def parse_heading(line: str) -> Optional[Tuple[int, str]]:
    """
    Detect a heading line such as "<h2>Chapter 3</h2>".

    Args:
        line: A single line of book text.

    Returns:
        Tuple of (level, plain heading text), or None if the line
        is not a heading.
    """
    if not line:
        return None

    match = _HEADING_RE.match(line)
    if not match:
        return None

    title = collapse_whitespace(strip_markup(match.group(2))).strip()
    return int(match.group(1)), title


def join_pages(pages: Iterable[str]) -> str:
    """
    Join the page texts of a book into one text, one page after another.

    Pages with no visible text are dropped so that a scanned cover or a
    blank leaf does not add empty lines.
    """
    return "\n".join(page.strip("\n") for page in pages if page and page.strip())

"""
Utility module providing shared helper functions.

Contains file operations and text processing utilities used across
the application. Has no internal dependencies.
"""

from .file_utils import (
    get_file_size_mb,
    has_extension,
    book_display_name,
    ensure_directory,
    book_title
)
from .text_utils import (
    strip_markup,
    collapse_whitespace,
    truncate_text,
    parse_heading,
    join_pages
)

__all__ = [
    "get_file_size_mb",
    "has_extension",
    "book_display_name",
    "ensure_directory",
    "book_title",
    "strip_markup",
    "collapse_whitespace",
    "truncate_text",
    "parse_heading",
    "join_pages"
]

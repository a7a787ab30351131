"""
Book corpus module for the library searcher.

Provides library discovery and book text loading for plain-text
and PDF books (pypdf with pdfplumber fallback).
"""

from .book_scanner import BookEntry, BookScanner, order_selection
from .text_backend import PlainTextBackend
from .pypdf_backend import PyPDFBackend
from .pdfplumber_backend import PDFPlumberBackend
from .accessor import BookCorpusAccessor

__all__ = [
    "BookEntry",
    "BookScanner",
    "order_selection",
    "PlainTextBackend",
    "PyPDFBackend",
    "PDFPlumberBackend",
    "BookCorpusAccessor"
]

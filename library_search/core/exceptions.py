"""
Custom exception hierarchy for the library searcher.

Provides specific exception types for configuration problems,
unreadable books, and misuse of the search API.
"""


class LibrarySearchError(Exception):
    """Base exception for all library searcher errors."""

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(LibrarySearchError):
    """Raised when configuration is invalid or missing."""
    pass


class AccessError(LibrarySearchError):
    """Raised when the text of a book cannot be loaded."""

    def __init__(self, message: str, book_path: str = None, details: dict = None):
        """
        Initialize access error.

        Args:
            message: Error description.
            book_path: Path of the book that could not be read.
            details: Additional context.
        """
        super().__init__(message, details)
        self.book_path = book_path


class SearchError(LibrarySearchError):
    """Raised when the search API is called with invalid arguments."""

    def __init__(self, message: str, query: str = None, details: dict = None):
        """
        Initialize search error.

        Args:
            message: Error description.
            query: The problematic search query.
            details: Additional context.
        """
        super().__init__(message, details)
        self.query = query

"""
Library Text Search Package.

Scans a selected set of books for a query string, extracting context
snippets and reporting matches incrementally while the scan runs.
"""

__version__ = "1.0.0"

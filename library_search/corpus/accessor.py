"""
Unified book text access with format dispatch and PDF fallback.

Loads the raw text of a single book by path. Plain-text books are
decoded directly; PDF books go through the primary extraction backend
and fall back to the secondary one when it fails or returns nothing.
"""

from pathlib import Path
from typing import List, Optional, Union

from ..core import get_config, get_logger, AccessError
from .text_backend import PlainTextBackend
from .pypdf_backend import PyPDFBackend
from .pdfplumber_backend import PDFPlumberBackend

logger = get_logger(__name__)


PDF_BACKENDS = {
    "pypdf": PyPDFBackend,
    "pdfplumber": PDFPlumberBackend
}

TEXT_EXTENSIONS = {".txt"}
PDF_EXTENSIONS = {".pdf"}


class BookCorpusAccessor:
    """
    Loads book text from the file system.

    Every failure to produce text is reported as AccessError so the
    caller can skip the book.
    """

    def __init__(
        self,
        encoding: str = None,
        fallback_encodings: List[str] = None,
        pdf_primary_backend: str = None,
        pdf_fallback_backend: str = None
    ):
        """
        Initialize the accessor with configured backends.

        Args:
            encoding: Preferred text encoding.
            fallback_encodings: Encodings tried when the preferred one fails.
            pdf_primary_backend: Name of primary PDF backend ("pypdf" or "pdfplumber").
            pdf_fallback_backend: Name of fallback PDF backend, or "" for none.
        """
        config = get_config()

        primary_name = pdf_primary_backend or config.corpus.pdf_primary_backend
        fallback_name = (
            config.corpus.pdf_fallback_backend
            if pdf_fallback_backend is None else pdf_fallback_backend
        )

        if primary_name not in PDF_BACKENDS:
            raise AccessError(f"Unknown PDF backend: {primary_name}")

        self.text_backend = PlainTextBackend(
            encoding=encoding or config.corpus.encoding,
            fallback_encodings=(
                config.corpus.fallback_encodings
                if fallback_encodings is None else fallback_encodings
            )
        )
        self.pdf_primary = PDF_BACKENDS[primary_name]()
        fallback_cls = PDF_BACKENDS.get(fallback_name)
        self.pdf_fallback = fallback_cls() if fallback_cls else None

        logger.debug(
            f"Initialized accessor: pdf primary={primary_name}, fallback={fallback_name or None}"
        )

    def fetch_text(self, book_path: Union[str, Path]) -> str:
        """
        Load the full text of a book.

        Args:
            book_path: Path to the book file.

        Returns:
            The book text. PDF pages are joined with newlines.

        Raises:
            AccessError: If the book is missing, unsupported or unreadable.
        """
        filepath = Path(book_path)

        if not filepath.is_file():
            raise AccessError("Book not found", book_path=str(book_path))

        suffix = filepath.suffix.lower()

        if suffix in TEXT_EXTENSIONS:
            return self.text_backend.load(filepath)

        if suffix in PDF_EXTENSIONS:
            return self._fetch_pdf(filepath)

        raise AccessError(
            f"Unsupported book format: {suffix or '(none)'}",
            book_path=str(book_path)
        )

    def read_unit(self, book_path: Union[str, Path], book_index: int) -> Optional[str]:
        """
        Read a single line of a book, for previewing a search result.

        Args:
            book_path: Path to the book file.
            book_index: 0-based line index.

        Returns:
            The line text, or None if the index is out of range.

        Raises:
            AccessError: If the book cannot be loaded.
        """
        lines = self.fetch_text(book_path).split("\n")

        if 0 <= book_index < len(lines):
            return lines[book_index]
        return None

    def _fetch_pdf(self, filepath: Path) -> str:
        """
        Load a PDF with the primary backend, then the fallback.

        A backend that raises or finds no text hands over to the next one.
        If none succeeds, the first backend's error is raised.
        """
        first_error = None

        for backend in (self.pdf_primary, self.pdf_fallback):
            if backend is None:
                continue

            try:
                text = backend.load(filepath)
            except AccessError as e:
                logger.debug(f"{backend.name} could not load {filepath.name}: {e.message}")
                first_error = first_error or e
                continue

            if text.strip():
                return text

            logger.debug(f"{backend.name} found no text in {filepath.name}")

        if first_error:
            raise first_error

        raise AccessError("PDF book has no extractable text", book_path=str(filepath))

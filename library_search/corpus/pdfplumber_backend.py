"""
pdfplumber loading backend for PDF books.

Slower than pypdf but recovers text from multi-column and
irregular layouts, so it serves as the fallback.
"""

from pathlib import Path
from typing import Union

import pdfplumber

from ..core import get_logger, AccessError
from ..utils import join_pages

logger = get_logger(__name__)


class PDFPlumberBackend:
    """Loads the text of a PDF book with pdfplumber."""

    name = "pdfplumber"

    def load(self, filepath: Union[str, Path]) -> str:
        """
        Load the text of every page of a PDF book.

        Returns:
            Page texts joined by newlines. Empty if no page has text.

        Raises:
            AccessError: If pdfplumber cannot read the file.
        """
        filepath = Path(filepath)
        pages = []

        try:
            with pdfplumber.open(filepath) as pdf:
                for page_num, page in enumerate(pdf.pages, start=1):
                    try:
                        pages.append(page.extract_text() or "")
                    except Exception as e:
                        logger.warning(
                            f"pdfplumber skipped page {page_num} of {filepath.name}: {e}"
                        )
        except Exception as e:
            raise AccessError(f"pdfplumber extraction failed: {e}", book_path=str(filepath))

        return join_pages(pages)

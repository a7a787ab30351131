"""
pypdf loading backend for PDF books.

The default PDF backend: fast on books with a regular text layer.
"""

from pathlib import Path
from typing import Union

from pypdf import PdfReader

from ..core import get_logger, AccessError
from ..utils import join_pages

logger = get_logger(__name__)


class PyPDFBackend:
    """Loads the text layer of a PDF book with pypdf."""

    name = "pypdf"

    def load(self, filepath: Union[str, Path]) -> str:
        """
        Load the text of every page of a PDF book.

        A page that fails to extract is logged and left out.

        Args:
            filepath: Path to the PDF file.

        Returns:
            Page texts joined by newlines. Empty if no page has text.

        Raises:
            AccessError: If the file cannot be opened or decrypted.
        """
        filepath = Path(filepath)

        try:
            reader = PdfReader(filepath)
        except Exception as e:
            raise AccessError(f"pypdf cannot open book: {e}", book_path=str(filepath))

        if reader.is_encrypted and not _unlock(reader):
            raise AccessError(
                "PDF book is encrypted and cannot be decrypted",
                book_path=str(filepath)
            )

        pages = []
        try:
            for page_num, page in enumerate(reader.pages, start=1):
                try:
                    pages.append(page.extract_text() or "")
                except Exception as e:
                    logger.warning(f"pypdf skipped page {page_num} of {filepath.name}: {e}")
        except Exception as e:
            raise AccessError(f"pypdf extraction failed: {e}", book_path=str(filepath))

        logger.debug(f"pypdf read {len(pages)} pages: {filepath.name}")
        return join_pages(pages)


def _unlock(reader: PdfReader) -> bool:
    """Try the empty user password most protected books ship with."""
    try:
        return bool(reader.decrypt(""))
    except Exception:
        return False

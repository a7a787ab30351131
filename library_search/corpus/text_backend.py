"""
Plain text loading backend.

Reads a book stored as a text file, one paragraph per line, trying
the configured encoding first and then each fallback encoding.
"""

from pathlib import Path
from typing import List, Union

from ..core import get_logger, AccessError

logger = get_logger(__name__)


class PlainTextBackend:
    """
    Text loading for plain-text books.

    Decodes the raw bytes with the first encoding that succeeds.
    """

    name = "text"

    def __init__(self, encoding: str = "utf-8", fallback_encodings: List[str] = None):
        """
        Initialize the backend.

        Args:
            encoding: Preferred encoding.
            fallback_encodings: Encodings tried in order when the preferred one fails.
        """
        self.encodings = [encoding] + list(fallback_encodings or [])

    def load(self, filepath: Union[str, Path]) -> str:
        """
        Load the full text of a book.

        Args:
            filepath: Path to the text file.

        Returns:
            Decoded text. A UTF-8 byte order mark is dropped.

        Raises:
            AccessError: If the file cannot be read or decoded.
        """
        filepath = Path(filepath)

        try:
            raw = filepath.read_bytes()
        except OSError as e:
            raise AccessError(
                f"Cannot read book: {e}",
                book_path=str(filepath)
            )

        for encoding in self.encodings:
            try:
                text = raw.decode(encoding)
            except (UnicodeDecodeError, LookupError):
                continue

            if encoding != self.encodings[0]:
                logger.debug(f"Decoded {filepath.name} with fallback encoding {encoding}")

            return text.lstrip("\ufeff")

        raise AccessError(
            "Cannot decode book with any configured encoding",
            book_path=str(filepath),
            details={"encodings": self.encodings}
        )

"""
Library listing and book selection.

The scanner walks the library once per call and hands out BookEntry
records in a fixed order. A user's choice of books is turned back into
a scan selection in that same library order, so repeated searches over
the same choice visit books identically.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence, Union

from ..core import get_config, get_logger
from ..utils import book_display_name, get_file_size_mb, has_extension

logger = get_logger(__name__)


@dataclass(frozen=True)
class BookEntry:
    """A book found in the library."""
    path: str
    display_name: str


class BookScanner:
    """
    Lists the books of one library directory.

    Files are kept when their extension is supported and they are not
    larger than the configured limit. Entries are ordered by display
    name, which follows the folder structure of the library.
    """

    def __init__(
        self,
        root_directory: Union[str, Path] = None,
        extensions: List[str] = None,
        max_file_size_mb: float = None
    ):
        config = get_config()

        self.root_directory = Path(root_directory or config.paths.library_directory)
        self.extensions = extensions or config.corpus.supported_extensions
        self.max_file_size_mb = max_file_size_mb or config.corpus.max_file_size_mb

    def scan(self) -> List[BookEntry]:
        """
        List the books of the library.

        Returns:
            BookEntry records in library order. Empty if the directory
            does not exist.
        """
        if not self.root_directory.is_dir():
            logger.error(f"Library directory does not exist: {self.root_directory}")
            return []

        entries = []
        too_large = 0

        for filepath in self.root_directory.rglob("*"):
            if not filepath.is_file() or not has_extension(filepath, self.extensions):
                continue

            try:
                size_mb = get_file_size_mb(filepath)
            except OSError as e:
                logger.warning(f"Cannot access file {filepath}: {e}")
                continue

            if size_mb > self.max_file_size_mb:
                logger.debug(f"Leaving out large book ({size_mb}MB): {filepath.name}")
                too_large += 1
                continue

            entries.append(BookEntry(
                path=str(filepath),
                display_name=book_display_name(filepath, self.root_directory)
            ))

        entries.sort(key=lambda entry: (entry.display_name, entry.path))

        logger.info(
            f"Library {self.root_directory}: {len(entries)} books, "
            f"{too_large} left out as too large"
        )
        return entries


def order_selection(books: Sequence[BookEntry], chosen: Iterable[str]) -> List[str]:
    """
    Turn the paths a user picked into a scan selection.

    Args:
        books: Entries from BookScanner.scan().
        chosen: Picked book paths, in any order, possibly repeated.

    Returns:
        The picked paths that are in the library, once each, in library order.
    """
    picked = set(chosen)
    return [entry.path for entry in books if entry.path in picked]

"""
File helpers for locating and naming books.
"""

from pathlib import Path
from typing import Iterable, Union

BYTES_PER_MB = 1024 * 1024


def get_file_size_mb(filepath: Union[str, Path]) -> float:
    """Size of a file in MB, rounded to 2 decimal places."""
    return round(Path(filepath).stat().st_size / BYTES_PER_MB, 2)


def has_extension(filepath: Union[str, Path], extensions: Iterable[str]) -> bool:
    """
    Check a file name against a list of extensions, ignoring case.

    Args:
        filepath: File to check.
        extensions: Extensions with their leading dot, e.g. [".txt"].
    """
    suffix = Path(filepath).suffix.lower()
    return any(suffix == ext.lower() for ext in extensions)


def book_display_name(book_path: Union[str, Path], library_directory: Union[str, Path]) -> str:
    """
    Name of a book as shown in selection lists.

    The path relative to the library, using forward slashes, without the
    file extension. A book outside the library is shown by its title.

    Args:
        book_path: Path to the book file.
        library_directory: Root of the library.

    Returns:
        Display name such as "Torah/Genesis".
    """
    book_path = Path(book_path)

    try:
        relative = book_path.resolve().relative_to(Path(library_directory).resolve())
    except ValueError:
        return book_title(book_path)

    return relative.with_suffix("").as_posix()


def ensure_directory(path: Union[str, Path]) -> Path:
    """Create a directory and its parents if missing, returning it as a Path."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def book_title(book_path: Union[str, Path]) -> str:
    """Human-readable title of a book: its file name without extension."""
    return Path(book_path).stem

"""
Pytest fixtures and configuration for the test suite.

Provides temporary directories, a sample library of books, and
temporary configurations to keep tests isolated.
"""

import json
import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Dict, Generator

import sys
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


BOOK_A_TEXT = (
    "<h1>BookA</h1>\n"
    "<h2>Chapter 1</h2>\n"
    "In the beginning there was a word.\n"
    "And the word was shalom to all who came near.\n"
    "The end of the first chapter.\n"
)

BOOK_B_TEXT = (
    "<h1>BookB</h1>\n"
    "Nothing of interest is written here.\n"
    "Only plain sentences without the greeting.\n"
)

BOOK_C_TEXT = (
    "<h1>BookC</h1>\n"
    "<h2>Part One</h2>\n"
    "shalom at the start.\n"
    "<h2>Part Two</h2>\n"
    "<h3>Section A</h3>\n"
    "Another shalom and yet another shalom.\n"
)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory, cleaned up after test.
    """
    tmp = tempfile.mkdtemp(prefix="library_search_test_")
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def temp_config(temp_dir: Path) -> Generator[Path, None, None]:
    """
    Create a temporary config.json for testing.

    Args:
        temp_dir: Temporary directory fixture.

    Yields:
        Path to temporary config file.
    """
    config_dir = temp_dir / "config"
    config_dir.mkdir()

    library_dir = temp_dir / "library"
    library_dir.mkdir(exist_ok=True)

    logs_dir = temp_dir / "output" / "logs"
    logs_dir.mkdir(parents=True)

    config_data = {
        "paths": {
            "library_directory": str(library_dir),
            "logs_directory": str(logs_dir)
        },
        "corpus": {
            "supported_extensions": [".txt", ".pdf"],
            "encoding": "utf-8",
            "fallback_encodings": ["cp1255"],
            "max_file_size_mb": 10,
            "pdf_primary_backend": "pypdf",
            "pdf_fallback_backend": "pdfplumber"
        },
        "search": {
            "snippet_context_chars": 20,
            "strip_markup": True
        },
        "scan": {
            "append_batch_size": 2,
            "yield_seconds": 0.0,
            "log_progress_every": 1
        },
        "gui": {
            "page_title": "Test Library Search",
            "refresh_interval_seconds": 1.0,
            "max_rendered_results": 10
        },
        "logging": {
            "level": "DEBUG",
            "format": "%(levelname)s - %(message)s",
            "max_file_size_mb": 1,
            "backup_count": 1
        }
    }

    config_path = config_dir / "config.json"
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config_data, f)

    yield config_path


@pytest.fixture
def sample_books() -> Dict[str, str]:
    """Book file names mapped to their text."""
    return {
        "BookA.txt": BOOK_A_TEXT,
        "BookB.txt": BOOK_B_TEXT,
        "BookC.txt": BOOK_C_TEXT,
    }


@pytest.fixture
def sample_library(temp_dir: Path, sample_books: Dict[str, str]) -> Path:
    """
    Create a library directory with a few text books.

    Returns:
        Path to the library directory.
    """
    library_dir = temp_dir / "library"
    library_dir.mkdir(exist_ok=True)

    nested = library_dir / "nested"
    nested.mkdir()

    for name, text in sample_books.items():
        (library_dir / name).write_text(text, encoding="utf-8")

    (nested / "Deep.txt").write_text("A deep shalom.\n", encoding="utf-8")
    (library_dir / "cover.jpg").write_bytes(b"\xff\xd8\xff")

    return library_dir


@pytest.fixture
def reset_config_singleton():
    """
    Reset the config singleton between tests.

    This ensures each test gets a fresh config instance.
    """
    from library_search.core import config_loader
    config_loader._config_instance = None
    yield
    config_loader._config_instance = None


@pytest.fixture
def reset_logger_singleton():
    """
    Reset the logger initialization flag between tests.
    """
    import logging
    from library_search.core import logger

    root_logger = logging.getLogger()
    original_handlers = list(root_logger.handlers)
    original_level = root_logger.level

    logger._logger_initialized = False
    yield
    logger._logger_initialized = False

    for handler in list(root_logger.handlers):
        if handler not in original_handlers:
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(original_level)


@pytest.fixture
def configured(temp_config, reset_config_singleton):
    """Load the temporary config into the singleton for the test."""
    from library_search.core.config_loader import get_config
    yield get_config(temp_config)

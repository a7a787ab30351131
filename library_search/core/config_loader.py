"""
Configuration loader for the library searcher.

Reads config/config.json into one dataclass per section. Keys missing
from the file take the dataclass defaults and out-of-range values are
rejected at load time. A process-wide instance is served by get_config().
"""

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

from .exceptions import ConfigurationError

PDF_BACKEND_NAMES = ("pypdf", "pdfplumber")

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

Section = TypeVar("Section")


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigurationError(message)


@dataclass
class PathsConfig:
    """Library location and log output. Relative paths are resolved on load."""
    library_directory: Path = Path("library")
    logs_directory: Optional[Path] = Path("output/logs")


@dataclass
class CorpusConfig:
    """Which files count as books and how their text is decoded."""
    supported_extensions: List[str] = field(default_factory=lambda: [".txt", ".pdf"])
    encoding: str = "utf-8"
    fallback_encodings: List[str] = field(default_factory=lambda: ["cp1255", "latin-1"])
    max_file_size_mb: float = 200
    pdf_primary_backend: str = "pypdf"
    pdf_fallback_backend: str = "pdfplumber"

    def __post_init__(self):
        _require(
            all(ext.startswith(".") for ext in self.supported_extensions),
            f"Extensions must start with a dot: {self.supported_extensions}"
        )
        _require(self.max_file_size_mb > 0, "corpus.max_file_size_mb must be positive")
        _require(
            self.pdf_primary_backend in PDF_BACKEND_NAMES,
            f"Unknown PDF backend: {self.pdf_primary_backend}"
        )
        _require(
            self.pdf_fallback_backend in PDF_BACKEND_NAMES + ("",),
            f"Unknown PDF fallback backend: {self.pdf_fallback_backend}"
        )


@dataclass
class SearchConfig:
    """Snippet construction around each match."""
    snippet_context_chars: int = 40
    strip_markup: bool = True

    def __post_init__(self):
        _require(self.snippet_context_chars >= 0, "search.snippet_context_chars cannot be negative")


@dataclass
class ScanConfig:
    """Pacing of the background scan loop."""
    append_batch_size: int = 50
    yield_seconds: float = 0.0
    log_progress_every: int = 100

    def __post_init__(self):
        _require(self.append_batch_size >= 1, "scan.append_batch_size must be at least 1")
        _require(self.yield_seconds >= 0, "scan.yield_seconds cannot be negative")
        _require(self.log_progress_every >= 1, "scan.log_progress_every must be at least 1")


@dataclass
class GUIConfig:
    """Streamlit reference page."""
    page_title: str = "Library Search"
    refresh_interval_seconds: float = 0.5
    max_rendered_results: int = 500


@dataclass
class LoggingConfig:
    """Root logger level, format and file rotation."""
    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    max_file_size_mb: int = 10
    backup_count: int = 5


def _build_section(section_cls: Type[Section], name: str, data: Dict[str, Any]) -> Section:
    """Create a section from its JSON object, ignoring keys it does not define."""
    raw = data.get(name) or {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config section '{name}' must be a JSON object")

    known = {f.name for f in fields(section_cls)}
    return section_cls(**{key: value for key, value in raw.items() if key in known})


@dataclass
class Config:
    """
    All configuration sections plus the project root they were resolved against.

    Provides singleton access via get_config() function.
    """
    paths: PathsConfig
    corpus: CorpusConfig
    search: SearchConfig
    scan: ScanConfig
    gui: GUIConfig
    logging: LoggingConfig
    project_root: Path = field(default_factory=Path)

    @classmethod
    def from_file(cls, config_path: Path) -> "Config":
        """
        Load configuration from a JSON file.

        The project root is the parent of the directory holding the file.

        Raises:
            ConfigurationError: If the file is missing, is not a JSON object,
                                or holds an invalid value.
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                {"path": str(config_path)}
            )

        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config file: {e}", {"path": str(config_path)})

        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a JSON object", {"path": str(config_path)})

        return cls._parse_config(data, config_path.parent.parent)

    @classmethod
    def defaults(cls, project_root: Path = None) -> "Config":
        """Build a configuration from built-in defaults, without file logging."""
        return cls._parse_config(
            {"paths": {"logs_directory": None}},
            project_root or Path.cwd()
        )

    @classmethod
    def _parse_config(cls, data: dict, project_root: Path) -> "Config":
        """Build every section and anchor relative paths at project_root."""
        try:
            paths = _build_section(PathsConfig, "paths", data)
            sections = {
                "corpus": _build_section(CorpusConfig, "corpus", data),
                "search": _build_section(SearchConfig, "search", data),
                "scan": _build_section(ScanConfig, "scan", data),
                "gui": _build_section(GUIConfig, "gui", data),
                "logging": _build_section(LoggingConfig, "logging", data),
            }
        except TypeError as e:
            # Comparisons against values of the wrong JSON type
            raise ConfigurationError(f"Invalid config value: {e}")

        paths.library_directory = cls._resolve_path(paths.library_directory, project_root)
        paths.logs_directory = cls._resolve_path(paths.logs_directory, project_root)

        return cls(paths=paths, project_root=project_root, **sections)

    @staticmethod
    def _resolve_path(path_str: Optional[str], project_root: Path) -> Optional[Path]:
        """Resolve a path string, making relative paths absolute."""
        if path_str is None:
            return None
        path = Path(path_str)
        if path.is_absolute():
            return path
        return project_root / path


CONFIG_ENV_VAR = "LIBRARY_SEARCH_CONFIG"

_config_instance: Optional[Config] = None


def get_config(config_path: Path = None) -> Config:
    """
    Get the singleton Config instance.

    Args:
        config_path: Optional path to config file. If not provided,
                    searches upward from current directory and falls
                    back to built-in defaults when nothing is found.

    Returns:
        The global Config instance.

    Raises:
        ConfigurationError: If an explicit or discovered config cannot be loaded.
    """
    global _config_instance

    if _config_instance is None or config_path is not None:
        if config_path is None:
            config_path = _find_config_file()

        if config_path is None:
            _config_instance = Config.defaults()
        else:
            _config_instance = Config.from_file(config_path)

    return _config_instance


def _find_config_file() -> Optional[Path]:
    """
    Locate the config file: the LIBRARY_SEARCH_CONFIG environment variable
    if set, otherwise config/config.json searched upward from the current
    directory.
    """
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env)

    current = Path.cwd()

    for _ in range(10):
        config_path = current / "config" / "config.json"
        if config_path.exists():
            return config_path

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def reload_config(config_path: Path = None) -> Config:
    """
    Force reload of configuration.

    Args:
        config_path: Optional path to config file.

    Returns:
        Fresh Config instance.
    """
    global _config_instance
    _config_instance = None
    return get_config(config_path)

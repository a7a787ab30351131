"""
Tests for the configuration loader module.

Tests config loading, parsing, path resolution, defaults, and error handling.
"""

import json
import pytest
from pathlib import Path

from library_search.core import config_loader
from library_search.core.config_loader import (
    Config,
    PathsConfig,
    get_config,
    reload_config,
)
from library_search.core.exceptions import ConfigurationError


class TestPathsConfig:
    """Tests for PathsConfig dataclass."""

    def test_paths_config_creation(self, temp_dir: Path):
        """Test creating PathsConfig with valid paths."""
        config = PathsConfig(
            library_directory=temp_dir / "library",
            logs_directory=temp_dir / "logs"
        )

        assert config.library_directory == temp_dir / "library"
        assert config.logs_directory == temp_dir / "logs"


class TestConfigFromFile:
    """Tests for loading config from file."""

    def test_load_valid_config(self, temp_config: Path):
        """Test loading a valid configuration file."""
        config = Config.from_file(temp_config)

        assert config.corpus.pdf_primary_backend == "pypdf"
        assert config.search.snippet_context_chars == 20
        assert config.scan.append_batch_size == 2
        assert config.gui.page_title == "Test Library Search"

    def test_load_missing_config_raises_error(self, temp_dir: Path):
        """Test that loading non-existent config raises ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            Config.from_file(temp_dir / "nonexistent" / "config.json")

        assert "not found" in exc_info.value.message.lower()

    def test_load_invalid_json_raises_error(self, temp_dir: Path):
        """Test that invalid JSON raises ConfigurationError."""
        config_dir = temp_dir / "config"
        config_dir.mkdir()
        config_path = config_dir / "config.json"
        config_path.write_text("{ invalid json }")

        with pytest.raises(ConfigurationError) as exc_info:
            Config.from_file(config_path)

        assert "invalid json" in exc_info.value.message.lower()

    def test_load_non_object_raises_error(self, temp_dir: Path):
        """Test that a JSON array is rejected."""
        config_path = temp_dir / "config.json"
        config_path.write_text("[1, 2, 3]")

        with pytest.raises(ConfigurationError):
            Config.from_file(config_path)

    def test_relative_paths_resolved_against_project_root(self, temp_dir: Path):
        """Test that relative paths are resolved from the config's project root."""
        config_dir = temp_dir / "config"
        config_dir.mkdir()
        config_path = config_dir / "config.json"
        config_path.write_text(json.dumps({"paths": {"library_directory": "books"}}))

        config = Config.from_file(config_path)

        assert config.paths.library_directory == temp_dir / "books"
        assert config.paths.logs_directory == temp_dir / "output" / "logs"

    def test_config_default_values(self, temp_dir: Path):
        """Test that missing config values get defaults."""
        config_dir = temp_dir / "config"
        config_dir.mkdir()
        config_path = config_dir / "config.json"
        config_path.write_text(json.dumps({"paths": {}, "search": {}}))

        config = Config.from_file(config_path)

        assert config.corpus.supported_extensions == [".txt", ".pdf"]
        assert config.search.snippet_context_chars == 40
        assert config.scan.append_batch_size == 50
        assert config.scan.yield_seconds == 0.0


class TestValidation:
    """Tests for rejection of invalid values."""

    def _write(self, temp_dir: Path, data: dict) -> Path:
        config_dir = temp_dir / "config"
        config_dir.mkdir(exist_ok=True)
        config_path = config_dir / "config.json"
        config_path.write_text(json.dumps(data))
        return config_path

    @pytest.mark.parametrize("data", [
        {"scan": {"append_batch_size": 0}},
        {"scan": {"yield_seconds": -1}},
        {"search": {"snippet_context_chars": -5}},
        {"corpus": {"pdf_primary_backend": "ocr"}},
        {"corpus": {"supported_extensions": ["txt"]}},
        {"scan": {"append_batch_size": "many"}},
        {"search": []},
    ])
    def test_invalid_values_raise(self, temp_dir: Path, data):
        """Test that out-of-range or mistyped values are rejected on load."""
        with pytest.raises(ConfigurationError):
            Config.from_file(self._write(temp_dir, data))

    def test_empty_fallback_backend_allowed(self, temp_dir: Path):
        """Test that an empty fallback name is accepted."""
        config = Config.from_file(self._write(temp_dir, {"corpus": {"pdf_fallback_backend": ""}}))

        assert config.corpus.pdf_fallback_backend == ""

    def test_unknown_keys_ignored(self, temp_dir: Path):
        """Test that keys a section does not define are skipped."""
        config = Config.from_file(self._write(temp_dir, {"gui": {"theme": "dark"}}))

        assert config.gui.page_title == "Library Search"


class TestDefaults:
    """Tests for built-in defaults."""

    def test_defaults_disable_file_logging(self, temp_dir: Path):
        """Test that default config has no logs directory."""
        config = Config.defaults(temp_dir)

        assert config.paths.logs_directory is None
        assert config.paths.library_directory == temp_dir / "library"

    def test_get_config_falls_back_to_defaults(self, monkeypatch, reset_config_singleton):
        """Test that get_config works when no config file exists."""
        monkeypatch.setattr(config_loader, "_find_config_file", lambda: None)

        config = get_config()

        assert config.paths.logs_directory is None
        assert config.search.strip_markup is True


class TestGetConfig:
    """Tests for the get_config singleton function."""

    def test_get_config_returns_same_instance(self, temp_config: Path, reset_config_singleton):
        """Test that get_config returns singleton instance."""
        config1 = get_config(temp_config)
        config2 = get_config()

        assert config1 is config2

    def test_reload_config_creates_new_instance(self, temp_config: Path, reset_config_singleton):
        """Test that reload_config picks up file changes."""
        get_config(temp_config)

        with open(temp_config, "r") as f:
            data = json.load(f)
        data["gui"]["page_title"] = "Modified Title"
        with open(temp_config, "w") as f:
            json.dump(data, f)

        config2 = reload_config(temp_config)

        assert config2.gui.page_title == "Modified Title"

    def test_environment_variable_selects_config(
        self, temp_config: Path, monkeypatch, reset_config_singleton
    ):
        """Test that LIBRARY_SEARCH_CONFIG overrides the upward search."""
        monkeypatch.setenv(config_loader.CONFIG_ENV_VAR, str(temp_config))

        config = get_config()

        assert config.gui.page_title == "Test Library Search"

    def test_environment_variable_missing_file_raises(
        self, temp_dir: Path, monkeypatch, reset_config_singleton
    ):
        """Test that a config named by the environment must exist."""
        monkeypatch.setenv(config_loader.CONFIG_ENV_VAR, str(temp_dir / "nope.json"))

        with pytest.raises(ConfigurationError):
            get_config()

"""Tests for configuration management."""

from pathlib import Path

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_definitions_path,
    get_environment,
    get_environment_info,
    get_font_base_url,
    get_log_level,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("COMPONENT_LOG_LEVEL", raising=False)
        assert get_environment(EnvVar.LOG_LEVEL) == "INFO"

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("COMPONENT_LOG_LEVEL", "ERROR")
        assert get_environment(EnvVar.LOG_LEVEL, override="DEBUG") == "DEBUG"

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("COMPONENT_DEFAULT_LIBRARY", "material")
        assert get_environment(EnvVar.DEFAULT_LIBRARY) == "material"

    @pytest.mark.unit
    def test_bool_type_conversion_false(self, monkeypatch):
        """Boolean type conversion for false values."""
        for value in ("false", "0", "no", "FALSE", "No"):
            monkeypatch.setenv("COMPONENT_EXPORT_CSS_RESET", value)
            assert get_environment(EnvVar.EXPORT_CSS_RESET) is False

    @pytest.mark.unit
    def test_invalid_bool_returns_default(self, monkeypatch):
        """Unrecognized boolean text falls back to the default."""
        monkeypatch.setenv("COMPONENT_EXPORT_CSS_RESET", "maybe")
        assert get_environment(EnvVar.EXPORT_CSS_RESET) is True

    @pytest.mark.unit
    def test_path_type_conversion(self, monkeypatch):
        """Path variables are converted to Path objects."""
        monkeypatch.setenv("COMPONENT_DEFINITIONS_PATH", "defs/extra.json")
        result = get_environment(EnvVar.DEFINITIONS_PATH)
        assert result == Path("defs/extra.json")


class TestGetEnvironmentInfo:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.EXPORT_CSS_RESET)
        assert isinstance(info, EnvConfig)
        assert info.name == "COMPONENT_EXPORT_CSS_RESET"
        assert info.default is True
        assert info.var_type is bool
        assert info.category == "export"


class TestListEnvironmentVariables:
    """Tests for listing environment variables."""

    @pytest.mark.unit
    def test_returns_all_variables(self):
        """Returns all EnvVar members when no category."""
        result = list_environment_variables()
        assert len(result) == len(EnvVar)

    @pytest.mark.unit
    def test_filter_by_category(self):
        """Filters by category correctly."""
        export_vars = list_environment_variables("export")
        assert EnvVar.FONT_BASE_URL in export_vars
        assert EnvVar.LOG_LEVEL not in export_vars


# =============================================================================
# Tests for convenience functions
# =============================================================================


class TestConvenienceFunctions:
    """Tests for the typed convenience accessors."""

    @pytest.mark.unit
    def test_log_level_is_upper_cased(self, monkeypatch):
        """Log level names are normalized to upper case."""
        monkeypatch.setenv("COMPONENT_LOG_LEVEL", "warning")
        assert get_log_level() == "WARNING"

    @pytest.mark.unit
    def test_font_base_url_strips_trailing_slash(self, monkeypatch):
        """A trailing slash on the font URL is removed."""
        monkeypatch.setenv("COMPONENT_FONT_BASE_URL", "https://fonts.example.com/css/")
        assert get_font_base_url() == "https://fonts.example.com/css"

    @pytest.mark.unit
    def test_definitions_path_defaults_to_none(self, monkeypatch):
        """No definitions file is configured by default."""
        monkeypatch.delenv("COMPONENT_DEFINITIONS_PATH", raising=False)
        assert get_definitions_path() is None

    @pytest.mark.unit
    def test_definitions_path_override(self):
        """Override wins over the environment."""
        assert get_definitions_path("a.json") == Path("a.json")

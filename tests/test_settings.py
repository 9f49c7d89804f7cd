"""
==============================================================================
Settings Tests
==============================================================================

Tests for environment-driven configuration.

==============================================================================
"""

import pytest
from pydantic import ValidationError

from zbars.config import ZBarsSettings, get_settings, parse_version


class TestDefaults:
    """Tests for default settings."""

    def test_defaults(self):
        """Test defaults without environment overrides."""
        settings = ZBarsSettings()
        assert settings.library_path is None
        assert settings.enable_controls is False
        assert settings.library_version_floor == (0, 10)
        assert settings.control_version_floor == (0, 20)
        assert settings.default_timeout_ms == -1

    def test_singleton(self):
        """Test get_settings returns the cached instance."""
        assert get_settings() is get_settings()


class TestEnvironment:
    """Tests for ZBARS_ environment variables."""

    def test_env_overrides(self, monkeypatch):
        """Test values are read from prefixed variables."""
        monkeypatch.setenv("ZBARS_ENABLE_CONTROLS", "true")
        monkeypatch.setenv("ZBARS_MIN_CONTROL_VERSION", "0.23")
        monkeypatch.setenv("ZBARS_VERBOSITY", "2")
        monkeypatch.setenv("ZBARS_LIBRARY_PATH", "/opt/zbar/libzbar.so.0")

        settings = get_settings()
        assert settings.enable_controls is True
        assert settings.control_version_floor == (0, 23)
        assert settings.verbosity == 2
        assert settings.library_path == "/opt/zbar/libzbar.so.0"

    def test_invalid_version(self, monkeypatch):
        """Test malformed version strings are rejected."""
        monkeypatch.setenv("ZBARS_MIN_LIBRARY_VERSION", "latest")
        with pytest.raises(ValidationError):
            ZBarsSettings()

    def test_verbosity_range(self):
        """Test verbosity outside 0..4 is rejected."""
        with pytest.raises(ValidationError):
            ZBarsSettings(verbosity=5)


class TestParseVersion:
    """Tests for version string parsing."""

    @pytest.mark.parametrize("value, expected", [
        ("0.10", (0, 10)),
        ("0.23.90", (0, 23)),
        (" 1.2 ", (1, 2)),
    ])
    def test_valid(self, value, expected):
        """Test major and minor are extracted."""
        assert parse_version(value) == expected

    @pytest.mark.parametrize("value", ["1", "a.b", ""])
    def test_invalid(self, value):
        """Test versions without numeric major and minor fail."""
        with pytest.raises(ValueError):
            parse_version(value)

"""
test_config.py

Tests for settings and logging configuration.
"""

import logging

import pytest
from pydantic import ValidationError

from capmix import (
    CapmixSettings,
    Monoid,
    configure_logging,
    get_settings,
    mixin,
    reload_settings,
    satisfies,
    surface_of,
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("CAPMIX_MAX_RESOLUTION_DEPTH", "CAPMIX_SURFACE_ATTRIBUTE", "CAPMIX_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch
    monkeypatch.undo()
    reload_settings()


class Record:
    pass


class TestSettings:
    """Settings come from CAPMIX_* environment variables."""

    def test_defaults(self, clean_env):
        settings = reload_settings()
        assert settings.max_resolution_depth == 64
        assert settings.surface_attribute == "__capabilities__"
        assert settings.log_level == "WARNING"

    def test_get_settings_is_cached(self, clean_env):
        reload_settings()
        assert get_settings() is get_settings()

    def test_environment_override(self, clean_env):
        clean_env.setenv("CAPMIX_MAX_RESOLUTION_DEPTH", "5")
        assert reload_settings().max_resolution_depth == 5

    def test_invalid_depth_rejected(self, clean_env):
        clean_env.setenv("CAPMIX_MAX_RESOLUTION_DEPTH", "0")
        with pytest.raises(ValidationError):
            CapmixSettings()

    def test_custom_surface_attribute(self, clean_env):
        clean_env.setenv("CAPMIX_SURFACE_ATTRIBUTE", "_typeclass_table")
        reload_settings()
        record = mixin(Record(), Monoid)
        assert "_typeclass_table" in vars(record)
        assert "__capabilities__" not in vars(record)
        assert satisfies(record, Monoid)
        assert surface_of(record).names() == ["empty"]


class TestConfigureLogging:
    """configure_logging applies the level without adding handlers."""

    def test_level_applied(self, clean_env):
        logger = configure_logging(CapmixSettings(log_level="debug"))
        try:
            assert logger.name == "capmix"
            assert logger.level == logging.DEBUG
            assert logger.handlers == []
        finally:
            logger.setLevel(logging.NOTSET)

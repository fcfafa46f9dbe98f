"""
config.py

Settings for capmix, loaded from environment variables (prefix ``CAPMIX_``)
or a ``.env`` file.
"""

import logging
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class CapmixSettings(BaseSettings):
    """Settings loaded from environment variables or .env file."""

    max_resolution_depth: int = Field(
        default=64,
        ge=1,
        description="Deepest precondition chain the resolver will follow",
    )
    surface_attribute: str = Field(
        default="__capabilities__",
        min_length=1,
        description="Attribute name under which a record carries its capability surface",
    )
    log_level: str = Field(default="WARNING", description="Level for the 'capmix' logger")

    model_config = {"env_prefix": "CAPMIX_", "env_file": ".env", "extra": "ignore"}


_settings: Optional[CapmixSettings] = None


def get_settings() -> CapmixSettings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = CapmixSettings()
    return _settings


def reload_settings() -> CapmixSettings:
    """Re-read settings from the environment."""
    global _settings
    _settings = CapmixSettings()
    return _settings


def configure_logging(settings: Optional[CapmixSettings] = None) -> logging.Logger:
    """Apply the configured level to the 'capmix' logger. No handlers are added."""
    settings = settings or get_settings()
    logger = logging.getLogger("capmix")
    logger.setLevel(settings.log_level.upper())
    return logger

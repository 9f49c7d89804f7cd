"""
==============================================================================
Library Settings Module
==============================================================================

Configuration management for the native binding using Pydantic Settings.

This module implements the Singleton pattern to ensure a single global
configuration instance, read once before the native library is loaded.

Features:
---------
- Environment variable loading with type validation (prefix ``ZBARS_``)
- .env file support for local development
- Explicit library path override for platforms without pkg-config
- Opt-in switch for the extended device-control API

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

==============================================================================
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Module logger
logger = logging.getLogger(__name__)


class ZBarsSettings(BaseSettings):
    """
    Binding settings loaded from environment variables.

    Attributes:
        library_path: Explicit path to the native shared library
        enable_controls: Opt in to the extended device-control API
        min_control_version: Lowest native (major, minor) with device controls
        min_library_version: Lowest native (major, minor) accepted at load time
        verbosity: Native debug verbosity applied when the library loads
        debug: Enable DEBUG logging for the package logger
        default_timeout_ms: Timeout used when a blocking call gets ``None``

    Example:
        >>> settings = ZBarsSettings(enable_controls=True)
        >>> settings.control_version_floor
        (0, 20)
    """

    # =========================================================================
    # PYDANTIC SETTINGS CONFIGURATION
    # =========================================================================
    model_config = SettingsConfigDict(
        env_prefix="ZBARS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # NATIVE LIBRARY DISCOVERY
    # =========================================================================
    library_path: Optional[str] = Field(
        default=None,
        description="Explicit path to the native zbar shared library"
    )

    min_library_version: str = Field(
        default="0.10",
        description="Minimum native (major, minor) version"
    )

    # =========================================================================
    # CAPABILITIES
    # =========================================================================
    enable_controls: bool = Field(
        default=False,
        description="Expose device controls when the native build has them"
    )

    min_control_version: str = Field(
        default="0.20",
        description="Minimum native (major, minor) exposing device controls"
    )

    # =========================================================================
    # RUNTIME SETTINGS
    # =========================================================================
    verbosity: int = Field(
        default=0,
        ge=0,
        le=4,
        description="Native debug verbosity"
    )

    debug: bool = Field(
        default=False,
        description="Enable DEBUG logging for the zbars logger"
    )

    default_timeout_ms: int = Field(
        default=-1,
        description="Timeout for blocking calls when none is given (<0 = infinite)"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("min_library_version", "min_control_version")
    @classmethod
    def validate_version(cls, value: str) -> str:
        """
        Validate a dotted version string such as ``"0.20"`` or ``"0.23.90"``.

        Raises:
            ValueError: If the value has no numeric major/minor component
        """
        parse_version(value)
        return value.strip()

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def library_version_floor(self) -> Tuple[int, int]:
        """Minimum native version as a (major, minor) tuple."""
        return parse_version(self.min_library_version)

    @property
    def control_version_floor(self) -> Tuple[int, int]:
        """Device-control version threshold as a (major, minor) tuple."""
        return parse_version(self.min_control_version)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"ZBarsSettings(library_path={self.library_path!r}, "
            f"enable_controls={self.enable_controls}, "
            f"verbosity={self.verbosity})"
        )


def parse_version(value: str) -> Tuple[int, int]:
    """
    Reduce a dotted version string to its (major, minor) pair.

    Example:
        >>> parse_version("0.23.90")
        (0, 23)
    """
    parts = [part for part in str(value).strip().split(".") if part]
    if len(parts) < 2 or not all(part.isdigit() for part in parts[:2]):
        raise ValueError(f"Version needs numeric major and minor parts: {value!r}")

    return int(parts[0]), int(parts[1])


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> ZBarsSettings:
    """
    Get the global ZBarsSettings instance (singleton pattern).

    Returns:
        Global ZBarsSettings instance
    """
    settings = ZBarsSettings()

    if settings.debug:
        logging.getLogger("zbars").setLevel(logging.DEBUG)
        logger.info(f"Configuration loaded: {settings}")

    return settings

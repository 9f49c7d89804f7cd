"""
==============================================================================
Configuration Package
==============================================================================

Centralized configuration management using Pydantic Settings.

Usage:
------
    from zbars.config import get_settings

    settings = get_settings()
    print(settings.enable_controls)

==============================================================================
"""

from .settings import ZBarsSettings, get_settings, parse_version

__all__ = [
    "ZBarsSettings",
    "get_settings",
    "parse_version",
]

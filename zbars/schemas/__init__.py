"""
==============================================================================
Schemas Package
==============================================================================

Pydantic models for builder options.

==============================================================================
"""

from .options import (
    ConfigEntry,
    ProcessorOptions,
    ScannerConfig,
    VideoInterface,
    VideoIOMode,
)

__all__ = [
    "ConfigEntry",
    "ProcessorOptions",
    "ScannerConfig",
    "VideoInterface",
    "VideoIOMode",
]

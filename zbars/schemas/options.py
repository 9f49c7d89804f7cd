"""
==============================================================================
Builder Option Schemas Module
==============================================================================

Declarative options collected by the scanner and processor builders.

Includes:
- Per-symbology config entries, applied in insertion order
- Video I/O mode and interface enums
- Processor request options (size, interface, I/O mode, forced formats)

==============================================================================
"""

import enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from zbars.image.format import Format
from zbars.symbols.types import ZBarConfig, ZBarSymbolType


class VideoIOMode(enum.IntEnum):
    """Capture I/O strategy requested from the video layer."""
    AUTO = 0
    READ = 1
    MMAP = 2
    USERPTR = 3


class VideoInterface(enum.IntEnum):
    """Video interface version (Linux: V4L1 / V4L2)."""
    AUTO = 0
    V4L1 = 1
    V4L2 = 2


# =============================================================================
# CONFIG SCHEMAS
# =============================================================================

class ConfigEntry(BaseModel):
    """One symbology configuration call."""
    model_config = ConfigDict(frozen=True)

    symbol_type: ZBarSymbolType
    config: ZBarConfig
    value: int


class ScannerConfig(BaseModel):
    """Options applied to a freshly created image scanner."""
    model_config = ConfigDict(validate_assignment=True)

    configs: List[ConfigEntry] = Field(default_factory=list)
    cache: Optional[bool] = Field(default=None)


class ProcessorOptions(BaseModel):
    """Options applied, in fixed order, to a freshly created processor."""
    model_config = ConfigDict(validate_assignment=True, arbitrary_types_allowed=True)

    threaded: bool = Field(default=False)
    size: Optional[Tuple[int, int]] = Field(default=None)
    interface_version: Optional[VideoInterface] = Field(default=None)
    iomode: Optional[VideoIOMode] = Field(default=None)
    formats: Optional[Tuple[Format, Format]] = Field(default=None)
    configs: List[ConfigEntry] = Field(default_factory=list)

    @field_validator("size")
    @classmethod
    def validate_size(cls, v: Optional[Tuple[int, int]]) -> Optional[Tuple[int, int]]:
        if v is not None and (v[0] <= 0 or v[1] <= 0):
            raise ValueError("Requested size must be positive")
        return v

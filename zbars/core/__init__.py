"""
==============================================================================
Core Package
==============================================================================

Core infrastructure shared by every wrapper type.

Modules:
--------
- exceptions: ZBarError hierarchy and error factory functions
- status: native status conventions mapped onto typed errors
- ffi: native library discovery, prototypes and capabilities

Usage:
------
    from zbars.core import ZBarError, get_library

    from zbars.core import exceptions
    raise exceptions.scan_failed(-1)

==============================================================================
"""

from .exceptions import (
    CapabilityUnavailable,
    ConfigurationFailed,
    DecodeTextFailed,
    HandleClosed,
    InvalidBufferSize,
    LibraryLoadFailed,
    ResultInvalidated,
    ScanFailed,
    VideoInitFailed,
    WaitFailed,
    ZBarError,
)
from .status import ZBarNativeError, ZBarSeverity
from .ffi import ZBarLibrary, get_library, native_available

__all__ = [
    # Exceptions
    "ZBarError",
    "ConfigurationFailed",
    "InvalidBufferSize",
    "VideoInitFailed",
    "ScanFailed",
    "WaitFailed",
    "DecodeTextFailed",
    "ResultInvalidated",
    "HandleClosed",
    "LibraryLoadFailed",
    "CapabilityUnavailable",
    # Status
    "ZBarNativeError",
    "ZBarSeverity",
    # Library
    "ZBarLibrary",
    "get_library",
    "native_available",
]

"""
==============================================================================
zbars - Memory-Safe Bindings for the zbar Barcode Library
==============================================================================

Wraps the native zbar engine so that every native handle is released
exactly once and no decoded result can be read after the memory behind it
has been recycled.

Quick Start:
-----------
    from zbars import Format, ZBarConfig, ZBarImage, ZBarImageScanner, ZBarSymbolType

    scanner = (
        ZBarImageScanner.builder()
        .with_config(ZBarSymbolType.QRCODE, ZBarConfig.ENABLE, 1)
        .build()
    )
    with ZBarImage.from_path("qr.png") as image:
        for symbol in scanner.scan_image(image):
            print(symbol.symbol_type.name, symbol.data())

Configuration is read from ``ZBARS_*`` environment variables (see
``zbars.config.ZBarsSettings``). The package logs to the ``zbars`` logger
and installs no handlers; call ``configure_logging()`` for console output.

==============================================================================
"""

import logging

from zbars.config import ZBarsSettings, get_settings
from zbars.core import (
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
    native_available,
)
from zbars.image import Format, PixelFormat, Y800, ZBarImage
from zbars.processor import ZBarControlProcessor, ZBarProcessor, ZBarProcessorBuilder
from zbars.scanner import ZBarImageScanner, ZBarImageScannerBuilder
from zbars.schemas import VideoInterface, VideoIOMode
from zbars.symbols import (
    Point,
    ZBarConfig,
    ZBarOrientation,
    ZBarSymbol,
    ZBarSymbolSet,
    ZBarSymbolType,
)
from zbars.utils import configure_logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Images
    "Format",
    "PixelFormat",
    "Y800",
    "ZBarImage",
    # Scanning
    "ZBarImageScanner",
    "ZBarImageScannerBuilder",
    "ZBarProcessor",
    "ZBarControlProcessor",
    "ZBarProcessorBuilder",
    "VideoInterface",
    "VideoIOMode",
    # Results
    "Point",
    "ZBarConfig",
    "ZBarOrientation",
    "ZBarSymbol",
    "ZBarSymbolSet",
    "ZBarSymbolType",
    # Errors
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
    # Setup
    "ZBarsSettings",
    "configure_logging",
    "get_settings",
    "native_available",
]

"""
==============================================================================
Image Scanner Core Module
==============================================================================

Owning wrapper around a native image scanner.

Features:
---------
- Builder collecting per-symbology config calls, applied in call order
- Every symbology starts disabled; the builder enables what is asked for
- Scans attach results to the image and return the image's symbol set
- Optional inter-frame result cache for video-like input

The scanner is stateless across scans except for its configuration. It does
not hold on to images: each result belongs to the image it was scanned
into and is invalidated by that image's next scan.

==============================================================================
"""

from __future__ import annotations

import logging
import weakref
from typing import Optional

from zbars.core import exceptions, ffi
from zbars.core.exceptions import ZBarError
from zbars.core.status import expect_non_negative, expect_ok
from zbars.image.image import ZBarImage
from zbars.schemas.options import ConfigEntry, ScannerConfig
from zbars.symbols.symbol_set import ZBarSymbolSet
from zbars.symbols.types import ZBarConfig, ZBarSymbolType


# Module logger
logger = logging.getLogger(__name__)


def _release_scanner(lib: ffi.ZBarLibrary, handle: int) -> None:
    lib.zbar_image_scanner_destroy(handle)
    logger.debug(f"Image scanner {handle:#x} destroyed")


class ZBarImageScanner:
    """
    Barcode scanner for still images.

    Example:
        >>> scanner = (
        ...     ZBarImageScanner.builder()
        ...     .with_config(ZBarSymbolType.QRCODE, ZBarConfig.ENABLE, 1)
        ...     .build()
        ... )
        >>> symbols = scanner.scan_image(image)
        >>> symbols.first_symbol().data()
        'Hello World'
    """

    def __init__(self) -> None:
        """
        Create a scanner with every symbology disabled.

        Raises:
            ConfigurationFailed: If the native layer rejects the reset
        """
        self._lib = ffi.get_library()
        handle = self._lib.zbar_image_scanner_create()
        if not handle:
            raise MemoryError("zbar_image_scanner_create returned NULL")

        self._handle = handle
        self._finalizer = weakref.finalize(self, _release_scanner, self._lib, handle)
        logger.debug(f"Image scanner {handle:#x} created")

        try:
            self.set_config(ZBarSymbolType.NONE, ZBarConfig.ENABLE, 0)
        except ZBarError:
            self.close()
            raise

    @staticmethod
    def builder() -> ZBarImageScannerBuilder:
        return ZBarImageScannerBuilder()

    # =========================================================================
    # HANDLE MANAGEMENT
    # =========================================================================

    def _checked(self) -> int:
        if not self._finalizer.alive:
            raise exceptions.handle_closed("Image scanner")
        return self._handle

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def close(self) -> None:
        """Release the native scanner. Safe to call more than once."""
        self._finalizer()

    def __enter__(self) -> ZBarImageScanner:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def set_config(self, symbol_type: ZBarSymbolType, config: ZBarConfig, value: int) -> None:
        """
        Set one symbology configuration value.

        Raises:
            ConfigurationFailed: If the native layer rejects the value
        """
        status = self._lib.zbar_image_scanner_set_config(
            self._checked(), int(symbol_type), int(config), value
        )
        expect_ok(status, lambda s: exceptions.configuration_failed(
            "set_config", s,
            {"symbol_type": int(symbol_type), "config": int(config), "value": value}
        ))

    def enable_cache(self, enable: bool = True) -> None:
        """Enable or disable the inter-image result cache."""
        self._lib.zbar_image_scanner_enable_cache(self._checked(), int(enable))

    # =========================================================================
    # SCANNING
    # =========================================================================

    def scan_image(self, image: ZBarImage) -> ZBarSymbolSet:
        """
        Scan an image and attach the results to it.

        Results of the image's previous scan are invalidated as soon as the
        scan starts, whatever its outcome.

        Returns:
            The symbol set now attached to the image (possibly empty)

        Raises:
            ScanFailed: If the native scan returns a negative status
        """
        handle = self._checked()
        image_handle = image._begin_scan()

        status = self._lib.zbar_scan_image(handle, image_handle)
        found = expect_non_negative(status, exceptions.scan_failed)
        logger.debug(f"Scanned image {image_handle:#x}: {found} symbol(s)")

        return image._attached_symbols()

    def __repr__(self) -> str:
        return f"<ZBarImageScanner {'closed' if self.closed else 'open'}>"


class ZBarImageScannerBuilder:
    """
    Declarative scanner construction.

    Config calls are recorded and applied in call order by ``build()``;
    the first rejected call aborts the build and the partially configured
    scanner is released before the error propagates.
    """

    def __init__(self) -> None:
        self._config = ScannerConfig()

    def with_config(
        self,
        symbol_type: ZBarSymbolType,
        config: ZBarConfig,
        value: int
    ) -> ZBarImageScannerBuilder:
        self._config.configs.append(
            ConfigEntry(symbol_type=symbol_type, config=config, value=value)
        )
        return self

    def with_cache(self, enable: Optional[bool]) -> ZBarImageScannerBuilder:
        self._config.cache = enable
        return self

    def build(self) -> ZBarImageScanner:
        """
        Create and configure the scanner.

        Raises:
            ConfigurationFailed: From the first rejected config call
        """
        scanner = ZBarImageScanner()
        try:
            for entry in self._config.configs:
                scanner.set_config(entry.symbol_type, entry.config, entry.value)
        except ZBarError as e:
            logger.warning(f"Image scanner build aborted: {e.message}")
            scanner.close()
            raise

        if self._config.cache is not None:
            scanner.enable_cache(self._config.cache)

        return scanner

"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides the fake native library, the real native library, and generated
barcode images.

==============================================================================
"""

import itertools
from typing import Generator
from unittest.mock import MagicMock

import cv2
import numpy as np
import pytest

from zbars.config import get_settings
from zbars.core import ffi
from zbars.scanner import ZBarImageScanner
from zbars.symbols import ZBarConfig, ZBarSymbolType


# ============================================================================
# SETTINGS FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    """Re-read settings from the environment for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================================
# LIBRARY FIXTURES
# ============================================================================

# Entry points returning a status the wrappers map; 0 is success for all
_STATUS_ENTRY_POINTS = (
    "zbar_image_scanner_set_config",
    "zbar_scan_image",
    "zbar_processor_init",
    "zbar_processor_request_size",
    "zbar_processor_request_interface",
    "zbar_processor_request_iomode",
    "zbar_processor_force_format",
    "zbar_processor_set_config",
    "zbar_processor_is_visible",
    "zbar_processor_set_visible",
    "zbar_processor_set_active",
    "zbar_processor_user_wait",
    "zbar_process_one",
    "zbar_process_image",
    "zbar_processor_set_control",
    "zbar_processor_get_control",
)


@pytest.fixture
def fake_lib(monkeypatch) -> MagicMock:
    """MagicMock standing in for ZBarLibrary, returned by ffi.get_library()."""
    lib = MagicMock(name="ZBarLibrary")
    lib.version = (0, 23, 90)
    lib.controls_available = False
    lib.missing = set()
    lib.has.side_effect = lambda name: name not in lib.missing
    lib.error_details.return_value = {}

    handles = itertools.count(0x1000, 0x10)
    for name in ("zbar_image_create", "zbar_image_scanner_create", "zbar_processor_create"):
        getattr(lib, name).side_effect = lambda *args: next(handles)

    for name in _STATUS_ENTRY_POINTS:
        getattr(lib, name).return_value = 0

    lib.zbar_image_get_symbols.return_value = None
    lib.zbar_processor_get_results.return_value = None
    lib.zbar_symbol_set_first_symbol.return_value = None

    monkeypatch.setattr(ffi, "get_library", lambda: lib)
    return lib


@pytest.fixture(scope="session")
def native_lib() -> ffi.ZBarLibrary:
    """The real native library; skips the test when it cannot be loaded."""
    if not ffi.native_available():
        pytest.skip("zbar shared library not available")
    return ffi.get_library()


# ============================================================================
# IMAGE FIXTURES
# ============================================================================

@pytest.fixture(scope="session")
def qr_hello_world() -> np.ndarray:
    """Greyscale QR code encoding 'Hello World', 8 pixels per module."""
    modules = cv2.QRCodeEncoder.create().encode("Hello World")
    bordered = cv2.copyMakeBorder(modules, 4, 4, 4, 4, cv2.BORDER_CONSTANT, value=255)
    return cv2.resize(bordered, None, fx=8, fy=8, interpolation=cv2.INTER_NEAREST)


@pytest.fixture(scope="session")
def qr_png(tmp_path_factory, qr_hello_world: np.ndarray):
    """The 'Hello World' QR code written to a PNG file."""
    path = tmp_path_factory.mktemp("images") / "qr_hello-world.png"
    cv2.imwrite(str(path), qr_hello_world)
    return path


# ============================================================================
# SCANNER FIXTURES
# ============================================================================

@pytest.fixture
def qr_scanner(native_lib) -> Generator[ZBarImageScanner, None, None]:
    """Native scanner with QR codes enabled."""
    scanner = (
        ZBarImageScanner.builder()
        .with_config(ZBarSymbolType.QRCODE, ZBarConfig.ENABLE, 1)
        .build()
    )
    yield scanner
    scanner.close()

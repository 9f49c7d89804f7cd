"""
==============================================================================
Native Library Binding Module
==============================================================================

Locates the zbar shared library, declares the ctypes prototype of every
entry point the package uses, and decides once, at load time, which
optional capabilities are linked in.

Discovery:
----------
1. ``ZBARS_LIBRARY_PATH`` (explicit path, used as-is)
2. ``pyzbar.zbar_library.load()`` (``find_library`` on Unix, the bundled
   DLL on Windows)

Capabilities:
-------------
- device controls: native version >= ``min_control_version`` AND
  ``enable_controls`` is set AND the control entry points are exported
- crop region / orientation: present from zbar 0.11 onwards

Native handles are plain integers (``c_void_p`` values). ctypes releases
the GIL around every call, so blocking native calls never stall other
Python threads.

==============================================================================
"""

from __future__ import annotations

import ctypes
import ctypes.util
import logging
import sys
from ctypes import POINTER, c_char_p, c_int, c_uint, c_ulong, c_void_p
from functools import lru_cache
from typing import Any, Dict, Optional, Set, Tuple

from pyzbar import zbar_library

from zbars.config import ZBarsSettings, get_settings
from zbars.core import exceptions
from zbars.core.status import ZBarNativeError, ZBarSeverity


# Module logger
logger = logging.getLogger(__name__)


# =============================================================================
# PROTOTYPES
# =============================================================================

# void cleanup(zbar_image_t *image)
CLEANUP_HANDLER = ctypes.CFUNCTYPE(None, c_void_p)

# name -> (restype, argtypes)
_REQUIRED: Dict[str, Tuple[Any, list]] = {
    "zbar_version": (c_int, [POINTER(c_uint), POINTER(c_uint), POINTER(c_uint)]),
    "zbar_set_verbosity": (None, [c_int]),

    # image
    "zbar_image_create": (c_void_p, []),
    "zbar_image_destroy": (None, [c_void_p]),
    "zbar_image_set_format": (None, [c_void_p, c_ulong]),
    "zbar_image_get_format": (c_ulong, [c_void_p]),
    "zbar_image_set_size": (None, [c_void_p, c_uint, c_uint]),
    "zbar_image_get_width": (c_uint, [c_void_p]),
    "zbar_image_get_height": (c_uint, [c_void_p]),
    "zbar_image_set_sequence": (None, [c_void_p, c_uint]),
    "zbar_image_get_sequence": (c_uint, [c_void_p]),
    "zbar_image_set_data": (None, [c_void_p, c_void_p, c_ulong, CLEANUP_HANDLER]),
    "zbar_image_get_symbols": (c_void_p, [c_void_p]),

    # symbol set
    "zbar_symbol_set_ref": (None, [c_void_p, c_int]),
    "zbar_symbol_set_get_size": (c_int, [c_void_p]),
    "zbar_symbol_set_first_symbol": (c_void_p, [c_void_p]),

    # symbol
    "zbar_symbol_get_type": (c_int, [c_void_p]),
    "zbar_symbol_get_data": (c_void_p, [c_void_p]),
    "zbar_symbol_get_data_length": (c_uint, [c_void_p]),
    "zbar_symbol_get_quality": (c_int, [c_void_p]),
    "zbar_symbol_get_count": (c_int, [c_void_p]),
    "zbar_symbol_get_loc_size": (c_uint, [c_void_p]),
    "zbar_symbol_get_loc_x": (c_int, [c_void_p, c_uint]),
    "zbar_symbol_get_loc_y": (c_int, [c_void_p, c_uint]),
    "zbar_symbol_next": (c_void_p, [c_void_p]),
    "zbar_symbol_xml": (c_void_p, [c_void_p, POINTER(c_void_p), POINTER(c_uint)]),

    # image scanner
    "zbar_image_scanner_create": (c_void_p, []),
    "zbar_image_scanner_destroy": (None, [c_void_p]),
    "zbar_image_scanner_set_config": (c_int, [c_void_p, c_int, c_int, c_int]),
    "zbar_image_scanner_enable_cache": (None, [c_void_p, c_int]),
    "zbar_scan_image": (c_int, [c_void_p, c_void_p]),

    # processor
    "zbar_processor_create": (c_void_p, [c_int]),
    "zbar_processor_destroy": (None, [c_void_p]),
    "zbar_processor_init": (c_int, [c_void_p, c_char_p, c_int]),
    "zbar_processor_request_size": (c_int, [c_void_p, c_uint, c_uint]),
    "zbar_processor_request_interface": (c_int, [c_void_p, c_int]),
    "zbar_processor_request_iomode": (c_int, [c_void_p, c_int]),
    "zbar_processor_force_format": (c_int, [c_void_p, c_ulong, c_ulong]),
    "zbar_processor_set_config": (c_int, [c_void_p, c_int, c_int, c_int]),
    "zbar_processor_is_visible": (c_int, [c_void_p]),
    "zbar_processor_set_visible": (c_int, [c_void_p, c_int]),
    "zbar_processor_set_active": (c_int, [c_void_p, c_int]),
    "zbar_processor_get_results": (c_void_p, [c_void_p]),
    "zbar_processor_user_wait": (c_int, [c_void_p, c_int]),
    "zbar_process_one": (c_int, [c_void_p, c_int]),
    "zbar_process_image": (c_int, [c_void_p, c_void_p]),
}

_OPTIONAL: Dict[str, Tuple[Any, list]] = {
    "zbar_image_set_crop": (None, [c_void_p, c_uint, c_uint, c_uint, c_uint]),
    "zbar_symbol_get_orientation": (c_int, [c_void_p]),
    "zbar_processor_set_control": (c_int, [c_void_p, c_char_p, c_int]),
    "zbar_processor_get_control": (c_int, [c_void_p, c_char_p, POINTER(c_int)]),
    "_zbar_get_error_code": (c_int, [c_void_p]),
    "_zbar_error_string": (c_char_p, [c_void_p, c_int]),
}

_CONTROL_ENTRY_POINTS = ("zbar_processor_set_control", "zbar_processor_get_control")


class ZBarLibrary:
    """
    Loaded native library with declared prototypes.

    Attribute access for ``zbar_*`` names is forwarded to the underlying
    CDLL. Optional entry points the library does not export stay absent
    (``AttributeError``), they never turn into runtime failures.

    Attributes:
        version: Native (major, minor, patch) version
        controls_available: Device-control API linked in and opted into
        missing: Optional entry points the library does not export

    Example:
        >>> lib = get_library()
        >>> handle = lib.zbar_image_create()
        >>> lib.zbar_image_destroy(handle)
    """

    def __init__(self, cdll: ctypes.CDLL, settings: ZBarsSettings) -> None:
        """
        Declare prototypes and read the native version.

        Args:
            cdll: Loaded zbar library
            settings: Binding settings (version floors, control opt-in)

        Raises:
            LibraryLoadFailed: If a required entry point is missing or the
                library is older than ``min_library_version``
        """
        self._cdll = cdll
        self._libc = _load_libc()
        self.missing: Set[str] = set()

        for name, prototype in _REQUIRED.items():
            if not self._declare(name, prototype):
                raise exceptions.library_load_failed(f"missing entry point {name}")

        for name, prototype in _OPTIONAL.items():
            if not self._declare(name, prototype):
                self.missing.add(name)

        self.version = self._read_version()
        if self.version[:2] < settings.library_version_floor:
            raise exceptions.library_load_failed(
                f"version {self.version_label} is older than {settings.min_library_version}"
            )

        self.controls_available = (
            settings.enable_controls
            and self.version[:2] >= settings.control_version_floor
            and not self.missing.intersection(_CONTROL_ENTRY_POINTS)
        )

        self._cdll.zbar_set_verbosity(settings.verbosity)

    def __getattr__(self, name: str) -> Any:
        if not name.startswith(("zbar_", "_zbar_")) or name in self.__dict__.get("missing", ()):
            raise AttributeError(name)
        return getattr(self._cdll, name)

    def _declare(self, name: str, prototype: Tuple[Any, list]) -> bool:
        try:
            function = getattr(self._cdll, name)
        except AttributeError:
            return False

        function.restype, function.argtypes = prototype
        return True

    def _read_version(self) -> Tuple[int, int, int]:
        major, minor, patch = c_uint(0), c_uint(0), c_uint(0)
        self._cdll.zbar_version(ctypes.byref(major), ctypes.byref(minor), ctypes.byref(patch))
        return major.value, minor.value, patch.value

    @property
    def version_label(self) -> str:
        return ".".join(str(part) for part in self.version)

    def has(self, name: str) -> bool:
        """Check whether an optional entry point is exported."""
        return name not in self.missing

    def free(self, pointer: Optional[int]) -> None:
        """Release memory the native layer allocated with malloc."""
        if pointer:
            self._libc.free(pointer)

    def error_details(self, handle: Optional[int]) -> Dict[str, Any]:
        """
        Collect native error information recorded on a processor handle.

        Returns an empty dict when the library does not export the
        introspection entry points.
        """
        if not handle or not self.has("_zbar_get_error_code"):
            return {}

        details: Dict[str, Any] = {}
        kind = ZBarNativeError.from_native(self._cdll._zbar_get_error_code(handle))
        if kind is not None:
            details["native_error"] = kind.name

        if self.has("_zbar_error_string"):
            message = self._cdll._zbar_error_string(handle, 0)
            if message:
                text = message.decode("utf-8", "replace").strip()
                details["native_message"] = text

                # Native messages open with the severity label, e.g. "ERROR: zbar ..."
                severity = ZBarSeverity.from_label(text.partition(":")[0])
                if severity is not None:
                    details["native_severity"] = severity.name

        return details


def _load_libc() -> ctypes.CDLL:
    if sys.platform == "win32":
        libc = ctypes.cdll.msvcrt
    else:
        libc = ctypes.CDLL(ctypes.util.find_library("c"))

    libc.free.restype = None
    libc.free.argtypes = [c_void_p]
    return libc


def _load_cdll(settings: ZBarsSettings) -> ctypes.CDLL:
    if settings.library_path:
        logger.info(f"Loading zbar from {settings.library_path}")
        return ctypes.CDLL(settings.library_path)

    libzbar, dependencies = zbar_library.load()
    logger.info(f"Loaded zbar via pyzbar discovery ({len(dependencies)} dependencies)")
    return libzbar


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_library() -> ZBarLibrary:
    """
    Get the process-wide ZBarLibrary (loaded on first use).

    Raises:
        LibraryLoadFailed: If the library cannot be located or is unusable
    """
    settings = get_settings()

    try:
        cdll = _load_cdll(settings)
    except (ImportError, OSError) as e:
        raise exceptions.library_load_failed(str(e)) from e

    library = ZBarLibrary(cdll, settings)
    logger.info(
        f"zbar {library.version_label} ready "
        f"(device controls: {'on' if library.controls_available else 'off'})"
    )
    return library


def native_available() -> bool:
    """Check whether the native library can be loaded."""
    try:
        get_library()
    except exceptions.LibraryLoadFailed:
        return False
    return True

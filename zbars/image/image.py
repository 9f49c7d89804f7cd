"""
==============================================================================
Image Module
==============================================================================

Owning wrapper around a native image handle and its pixel buffer.

Buffer Ownership Modes:
----------------------
- owned: ``bytes`` input. The image keeps the (immutable) object and hands
  its storage to the native layer without copying. Read-only buffers of
  other types are copied into ``bytes`` first.
- borrowed: writable buffer input (``bytearray``, writable ``memoryview``,
  numpy array). The image exports the caller's buffer for as long as the
  native image lives, so the caller cannot resize or free it underneath
  the image (``bytearray`` resizing raises ``BufferError``).

In both modes the buffer is pinned until the native layer reports, through
its cleanup callback, that the image is gone. The buffer is therefore
released at the same point as the native image, never earlier.

Scan Results:
------------
Scanning attaches a symbol set to the image. Each scan renews the image's
ResultLease, which invalidates every symbol set and symbol handed out for
the previous scan.

==============================================================================
"""

from __future__ import annotations

import ctypes
import logging
import weakref
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import cv2
import numpy as np

from zbars.core import exceptions, ffi
from zbars.image.format import Format, PixelFormat, Y800
from zbars.symbols.lease import LeaseHolder
from zbars.symbols.symbol import ZBarSymbol
from zbars.symbols.symbol_set import ZBarSymbolSet


# Module logger
logger = logging.getLogger(__name__)

# Pixel buffers pinned for live native images, keyed by native handle
_pinned: Dict[int, Any] = {}


@ffi.CLEANUP_HANDLER
def _unpin_buffer(image_handle: int) -> None:
    _pinned.pop(image_handle, None)


def _release_image(lib: ffi.ZBarLibrary, handle: int) -> None:
    lib.zbar_image_destroy(handle)
    logger.debug(f"Image {handle:#x} destroyed")


def _pin(buffer: Any) -> Tuple[bool, int, int, Any]:
    """
    Resolve a caller buffer to (owned, address, length, keepalive).

    Raises:
        TypeError: If the object does not support the buffer protocol
    """
    view = memoryview(buffer)

    if isinstance(buffer, bytes):
        address = ctypes.cast(ctypes.c_char_p(buffer), ctypes.c_void_p).value
        return True, address, len(buffer), buffer

    if view.readonly or not view.c_contiguous:
        data = view.tobytes()
        address = ctypes.cast(ctypes.c_char_p(data), ctypes.c_void_p).value
        return True, address, len(data), data

    array = (ctypes.c_ubyte * view.nbytes).from_buffer(buffer)
    return False, ctypes.addressof(array), view.nbytes, array


class ZBarImage(LeaseHolder):
    """
    Image to be scanned, owning a native image handle.

    Attributes:
        width: Image width in pixels
        height: Image height in pixels
        format: Pixel format
        sequence_number: Frame sequence number
        crop_region: Region of interest (x, y, width, height), or None
        owns_buffer: True in owned mode, False when borrowing

    Example:
        >>> image = ZBarImage(640, 480, Format.from_label("Y800"), bytes(640 * 480))
        >>> image.symbols() is None
        True
        >>> image.close()
    """

    def __init__(
        self,
        width: int,
        height: int,
        format: Union[Format, PixelFormat, str],
        buffer: Any
    ) -> None:
        """
        Create an image over a pixel buffer.

        Args:
            width: Image width in pixels
            height: Image height in pixels
            format: Pixel format (Format, PixelFormat or fourcc label)
            buffer: ``bytes`` (owned) or a writable buffer (borrowed)

        Raises:
            InvalidBufferSize: If the buffer length does not match the
                size the format requires; no native call is made
        """
        if width < 0 or height < 0:
            raise ValueError(f"Image size must be non-negative, got {width}x{height}")

        fmt = format if isinstance(format, Format) else Format(format)
        length = memoryview(buffer).nbytes
        expected = fmt.frame_size(width, height)
        if expected is not None and length != expected:
            raise exceptions.invalid_buffer_size(expected, length, fmt.label)

        owned, address, length, keepalive = _pin(buffer)

        self._lib = ffi.get_library()
        handle = self._lib.zbar_image_create()
        if not handle:
            raise MemoryError("zbar_image_create returned NULL")

        self._handle = handle
        self._owns_buffer = owned
        self._crop: Optional[Tuple[int, int, int, int]] = None
        self._finalizer = weakref.finalize(self, _release_image, self._lib, handle)
        self._init_lease()

        _pinned[handle] = keepalive
        self._lib.zbar_image_set_format(handle, fmt.value)
        self._lib.zbar_image_set_size(handle, width, height)
        self._lib.zbar_image_set_data(handle, address, length, _unpin_buffer)

        logger.debug(
            f"Image {handle:#x} created: {width}x{height} {fmt.label} "
            f"({'owned' if owned else 'borrowed'} buffer)"
        )

    # =========================================================================
    # ALTERNATE CONSTRUCTORS
    # =========================================================================

    @classmethod
    def from_array(cls, array: np.ndarray) -> ZBarImage:
        """
        Create a Y800 image from a numpy array.

        2-D uint8 arrays are borrowed without copying when C-contiguous;
        3-channel BGR arrays are converted to greyscale first.

        Args:
            array: Greyscale (H, W) or BGR (H, W, 3) uint8 array
        """
        if array.ndim == 3 and array.shape[2] == 3:
            array = cv2.cvtColor(array, cv2.COLOR_BGR2GRAY)
        elif array.ndim == 3 and array.shape[2] == 1:
            array = array[:, :, 0]

        if array.ndim != 2 or array.dtype != np.uint8:
            raise ValueError(
                f"Expected a 2-D uint8 greyscale array, got shape {array.shape} "
                f"dtype {array.dtype}"
            )

        if not array.flags.c_contiguous:
            array = np.ascontiguousarray(array)

        height, width = array.shape
        return cls(width, height, Y800, array)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> ZBarImage:
        """
        Load an image file as an owned Y800 image.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If OpenCV cannot decode the file
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Image not found: {path}")

        gray = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
        if gray is None:
            raise ValueError(f"Could not read image: {path}")

        height, width = gray.shape
        return cls(width, height, Y800, gray.tobytes())

    # =========================================================================
    # HANDLE MANAGEMENT
    # =========================================================================

    def _checked(self) -> int:
        if not self._finalizer.alive:
            raise exceptions.handle_closed("Image")
        return self._handle

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def close(self) -> None:
        """Release the native image; symbol sets from it become invalid."""
        self._lease.expire()
        self._finalizer()

    def __enter__(self) -> ZBarImage:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _begin_scan(self) -> int:
        """Invalidate the previous result and return the handle to scan."""
        handle = self._checked()
        self._renew_lease()
        return handle

    def _attached_symbols(self) -> ZBarSymbolSet:
        symbols = self.symbols()
        if symbols is None:
            raise exceptions.internal_error("Successful scan attached no symbol set")
        return symbols

    # =========================================================================
    # ATTRIBUTES
    # =========================================================================

    @property
    def owns_buffer(self) -> bool:
        return self._owns_buffer

    @property
    def width(self) -> int:
        return self._lib.zbar_image_get_width(self._checked())

    @property
    def height(self) -> int:
        return self._lib.zbar_image_get_height(self._checked())

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def format(self) -> Format:
        return Format.from_value(self._lib.zbar_image_get_format(self._checked()))

    @property
    def sequence_number(self) -> int:
        return self._lib.zbar_image_get_sequence(self._checked())

    @property
    def crop_region(self) -> Optional[Tuple[int, int, int, int]]:
        return self._crop

    def set_format(self, format: Union[Format, PixelFormat, str]) -> None:
        """
        Change the declared pixel format.

        The pinned buffer is not re-validated against the new format; the
        native scan is the only guard against a size/buffer mismatch.
        """
        fmt = format if isinstance(format, Format) else Format(format)
        self._lib.zbar_image_set_format(self._checked(), fmt.value)

    def set_size(self, width: int, height: int) -> None:
        """
        Set the image size; the native layer resets the crop region.

        The pinned buffer is not re-validated against the new size; the
        native scan is the only guard against a size/buffer mismatch.
        """
        self._lib.zbar_image_set_size(self._checked(), width, height)
        self._crop = None

    def set_sequence_number(self, sequence_number: int) -> None:
        self._lib.zbar_image_set_sequence(self._checked(), sequence_number)

    def set_crop_region(self, x: int, y: int, width: int, height: int) -> None:
        """
        Limit scanning to a rectangle of the image.

        Native builds older than 0.11 have no crop support; the region is
        still recorded but scans cover the whole image.
        """
        handle = self._checked()
        self._crop = (x, y, width, height)
        if self._lib.has("zbar_image_set_crop"):
            self._lib.zbar_image_set_crop(handle, x, y, width, height)
        else:
            logger.warning("Native library has no crop support, scanning full image")

    # =========================================================================
    # RESULTS
    # =========================================================================

    def symbols(self) -> Optional[ZBarSymbolSet]:
        """Symbol set attached by the most recent scan, or None if never scanned."""
        handle = self._checked()
        return ZBarSymbolSet.from_raw(
            self._lib,
            self._lib.zbar_image_get_symbols(handle),
            self._lease,
            self,
        )

    def first_symbol(self) -> Optional[ZBarSymbol]:
        symbols = self.symbols()
        return symbols.first_symbol() if symbols is not None else None

    def __repr__(self) -> str:
        if self.closed:
            return "<ZBarImage (closed)>"
        return f"<ZBarImage {self.width}x{self.height} {self.format.label}>"

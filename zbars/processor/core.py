"""
==============================================================================
Processor Core Module
==============================================================================

Owning wrapper around a native processor: video capture, optional display
window and scanning, end to end.

Lifecycle:
---------
    created ──init(device)──▶ initialized ──set_visible / set_active──▶ ...
       │                                                               │
       └──────────────────────── close() ◀─────────────────────────────┘

Threading:
---------
A processor created with ``threaded=True`` runs a native capture/display
thread. The native layer serializes its own calls, so a processor may be
handed between Python threads. The wrapper adds no locking of its own (it
could deadlock against the native thread). Results are the exception:
every scan invalidates the results of the previous one, so concurrent
scanning calls on one processor must be serialized by the caller.

Blocking calls (``init``, ``user_wait``, ``process_one``) release the GIL
and are bounded only by their timeout; there is no mid-call cancellation.

Device Controls:
---------------
ZBarControlProcessor adds ``set_control`` / ``control``. It only exists
for native builds exposing the control API and only when the
``enable_controls`` setting opts in; ``ZBarProcessor.builder()`` returns
it automatically in that case.

==============================================================================
"""

from __future__ import annotations

import ctypes
import logging
import weakref
from typing import TYPE_CHECKING, Optional, Union

from zbars.config import get_settings
from zbars.core import exceptions, ffi
from zbars.core.exceptions import ZBarError
from zbars.core.status import expect_flag, expect_non_negative, expect_ok
from zbars.image.format import Format
from zbars.image.image import ZBarImage
from zbars.schemas.options import VideoInterface, VideoIOMode
from zbars.symbols.lease import LeaseHolder
from zbars.symbols.symbol_set import ZBarSymbolSet
from zbars.symbols.types import ZBarConfig, ZBarSymbolType
from zbars.utils.validators import DeviceNameValidator

if TYPE_CHECKING:
    from zbars.processor.builder import ZBarProcessorBuilder


# Module logger
logger = logging.getLogger(__name__)

_device_validator = DeviceNameValidator()


def _release_processor(lib: ffi.ZBarLibrary, handle: int) -> None:
    lib.zbar_processor_destroy(handle)
    logger.debug(f"Processor {handle:#x} destroyed")


class ZBarProcessor(LeaseHolder):
    """
    Video capture, display and scanning through one native handle.

    Attributes:
        threaded: Whether the native layer runs its own capture thread

    Example:
        >>> with ZBarProcessor.builder().threaded(True).build() as processor:
        ...     processor.init("/dev/video0", enable_display=True)
        ...     processor.set_visible(True)
        ...     symbols = processor.process_one(timeout=5000)
    """

    def __init__(self, threaded: bool = False) -> None:
        """
        Create a processor with every symbology disabled.

        Raises:
            ConfigurationFailed: If the native layer rejects the reset
        """
        self._lib = ffi.get_library()
        handle = self._lib.zbar_processor_create(int(threaded))
        if not handle:
            raise MemoryError("zbar_processor_create returned NULL")

        self._handle = handle
        self._threaded = threaded
        self._finalizer = weakref.finalize(self, _release_processor, self._lib, handle)
        self._init_lease()
        logger.debug(f"Processor {handle:#x} created (threaded={threaded})")

        try:
            self.set_config(ZBarSymbolType.NONE, ZBarConfig.ENABLE, 0)
        except ZBarError:
            self.close()
            raise

    @staticmethod
    def builder() -> ZBarProcessorBuilder:
        from zbars.processor.builder import ZBarProcessorBuilder

        return ZBarProcessorBuilder()

    # =========================================================================
    # HANDLE MANAGEMENT
    # =========================================================================

    def _checked(self) -> int:
        if not self._finalizer.alive:
            raise exceptions.handle_closed("Processor")
        return self._handle

    def _details(self, **extra) -> dict:
        return {**self._lib.error_details(self._handle), **extra}

    @property
    def threaded(self) -> bool:
        return self._threaded

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def close(self) -> None:
        """
        Invalidate results, then release the native processor.

        Stops the capture thread and closes the display. Safe to call more
        than once.
        """
        self._lease.expire()
        self._finalizer()

    def __enter__(self) -> ZBarProcessor:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # =========================================================================
    # DEVICE SETUP
    # =========================================================================

    def init(self, video_device: Optional[str] = None, enable_display: bool = False) -> None:
        """
        Open a video device and, optionally, the display window.

        Args:
            video_device: Platform device identifier, passed through
                unmodified. An empty string selects the platform default
                device; None opens no video device at all (display and
                ``process_image`` only)
            enable_display: Open a window showing the captured video

        Raises:
            VideoInitFailed: If the name contains NUL or the device
                cannot be opened
        """
        handle = self._checked()
        if video_device is None:
            device, label = None, "<none>"
        else:
            is_valid, _, error = _device_validator.validate(video_device)
            if not is_valid:
                raise exceptions.invalid_video_device(video_device, error)
            device, label = video_device.encode("utf-8"), video_device or "<default>"

        status = self._lib.zbar_processor_init(handle, device, int(enable_display))
        expect_ok(status, lambda s: exceptions.video_init_failed(
            label, s, self._details()
        ))
        logger.info(f"Processor {handle:#x} initialized on {label}")

    def request_size(self, width: int, height: int) -> None:
        """Request a capture size; the device picks the closest it supports."""
        status = self._lib.zbar_processor_request_size(self._checked(), width, height)
        expect_ok(status, lambda s: exceptions.configuration_failed(
            "request_size", s, self._details(width=width, height=height)
        ))

    def request_interface(self, version: Union[VideoInterface, int]) -> None:
        status = self._lib.zbar_processor_request_interface(self._checked(), int(version))
        expect_ok(status, lambda s: exceptions.configuration_failed(
            "request_interface", s, self._details(version=int(version))
        ))

    def request_iomode(self, iomode: Union[VideoIOMode, int]) -> None:
        status = self._lib.zbar_processor_request_iomode(self._checked(), int(iomode))
        expect_ok(status, lambda s: exceptions.configuration_failed(
            "request_iomode", s, self._details(iomode=int(iomode))
        ))

    def force_format(self, input_format: Format, output_format: Format) -> None:
        """Force the capture (input) and display (output) formats."""
        status = self._lib.zbar_processor_force_format(
            self._checked(), input_format.value, output_format.value
        )
        expect_ok(status, lambda s: exceptions.configuration_failed(
            "force_format", s,
            self._details(input=input_format.label, output=output_format.label)
        ))

    def set_config(self, symbol_type: ZBarSymbolType, config: ZBarConfig, value: int) -> None:
        status = self._lib.zbar_processor_set_config(
            self._checked(), int(symbol_type), int(config), value
        )
        expect_ok(status, lambda s: exceptions.configuration_failed(
            "set_config", s,
            {"symbol_type": int(symbol_type), "config": int(config), "value": value}
        ))

    # =========================================================================
    # DISPLAY AND ACTIVITY
    # =========================================================================

    def is_visible(self) -> bool:
        status = self._lib.zbar_processor_is_visible(self._checked())
        return expect_flag(status, lambda s: exceptions.wait_failed(
            "is_visible", s, self._details()
        ))

    def set_visible(self, visible: bool = True) -> bool:
        """Show or hide the display window; returns the native flag."""
        status = self._lib.zbar_processor_set_visible(self._checked(), int(visible))
        return expect_flag(status, lambda s: exceptions.wait_failed(
            "set_visible", s, self._details()
        ))

    def set_active(self, active: bool = True) -> bool:
        """Start or stop video streaming; returns the native flag."""
        status = self._lib.zbar_processor_set_active(self._checked(), int(active))
        return expect_flag(status, lambda s: exceptions.wait_failed(
            "set_active", s, self._details()
        ))

    def user_wait(self, timeout: Optional[int] = None) -> int:
        """
        Block until the user presses a key or closes the window.

        Args:
            timeout: Milliseconds to wait, negative for no limit, None for
                the configured default

        Returns:
            Key code (>0), or 0 when the timeout expired
        """
        timeout = self._timeout(timeout)
        status = self._lib.zbar_processor_user_wait(self._checked(), timeout)
        return expect_non_negative(status, lambda s: exceptions.wait_failed(
            "user_wait", s, self._details(timeout=timeout)
        ))

    # =========================================================================
    # SCANNING
    # =========================================================================

    def process_one(self, timeout: Optional[int] = None) -> Optional[ZBarSymbolSet]:
        """
        Capture frames until one decodes or the timeout expires.

        Returns:
            The decoded symbol set, or None if nothing was found in time

        Raises:
            ScanFailed: If the native call returns a negative status
        """
        handle = self._checked()
        timeout = self._timeout(timeout)
        self._renew_lease()

        status = self._lib.zbar_process_one(handle, timeout)
        found = expect_non_negative(status, lambda s: exceptions.scan_failed(
            s, self._details(timeout=timeout)
        ))
        if found == 0:
            return None
        return self.get_results()

    def process_image(self, image: ZBarImage) -> ZBarSymbolSet:
        """
        Scan a caller-supplied image with this processor's configuration.

        Invalidates both the image's and the processor's previous results.

        Returns:
            The symbol set now attached to the image (possibly empty)
        """
        handle = self._checked()
        image_handle = image._begin_scan()
        self._renew_lease()

        status = self._lib.zbar_process_image(handle, image_handle)
        expect_non_negative(status, lambda s: exceptions.scan_failed(s, self._details()))
        return image._attached_symbols()

    def get_results(self) -> Optional[ZBarSymbolSet]:
        """Most recent results without capturing, or None if there are none yet."""
        handle = self._checked()
        return ZBarSymbolSet.from_raw(
            self._lib,
            self._lib.zbar_processor_get_results(handle),
            self._lease,
            self,
            owns_reference=True,
        )

    def _timeout(self, timeout: Optional[int]) -> int:
        return get_settings().default_timeout_ms if timeout is None else timeout

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<{type(self).__name__} {state} threaded={self._threaded}>"


class ZBarControlProcessor(ZBarProcessor):
    """
    Processor with access to named device controls (brightness, contrast...).

    Example:
        >>> processor = ZBarProcessor.builder().build()
        >>> processor.init("/dev/video0")
        >>> processor.set_control("brightness", 75)
        >>> processor.control("contrast")
        50
    """

    def __init__(self, threaded: bool = False) -> None:
        """
        Raises:
            CapabilityUnavailable: If the control API is not linked in or
                not opted into
        """
        if not ffi.get_library().controls_available:
            raise exceptions.capability_unavailable("device controls")
        super().__init__(threaded)

    def set_control(self, control_name: str, value: int) -> None:
        status = self._lib.zbar_processor_set_control(
            self._checked(), control_name.encode("utf-8"), value
        )
        expect_ok(status, lambda s: exceptions.configuration_failed(
            "set_control", s, self._details(control=control_name, value=value)
        ))

    def control(self, control_name: str) -> int:
        value = ctypes.c_int(0)
        status = self._lib.zbar_processor_get_control(
            self._checked(), control_name.encode("utf-8"), ctypes.byref(value)
        )
        expect_ok(status, lambda s: exceptions.configuration_failed(
            "control", s, self._details(control=control_name)
        ))
        return value.value

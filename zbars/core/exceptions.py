"""
Binding Exception Handling

Single ZBarError hierarchy for every failure reported by the native layer,
plus factory functions that build each error from a preserved native status.
"""

from datetime import datetime
from typing import Any, Dict, Optional


class ZBarError(Exception):
    """
    Base exception for all binding error scenarios.

    Every error carries a machine-readable code and, when the failure came
    from a native call, the untouched native status integer.

    Usage:
        raise ZBarError("Scan failed", "SCAN_FAILED", status=-1)

    Error Codes:
        Native calls:
            - CONFIGURATION_FAILED
            - VIDEO_INIT_FAILED
            - SCAN_FAILED
            - WAIT_FAILED

        Caller input:
            - INVALID_BUFFER_SIZE
            - DECODE_TEXT_FAILED

        Lifetime:
            - RESULT_INVALIDATED
            - HANDLE_CLOSED

        Library:
            - LIBRARY_LOAD_FAILED
            - CAPABILITY_UNAVAILABLE
            - INTERNAL_ERROR
    """

    code = "ZBAR_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize binding exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (defaults to the class code)
            status: Native status integer, preserved verbatim
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code or type(self).code
        self.status = status
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for diagnostics."""
        error_dict = {
            "code": self.code,
            "message": self.message,
            "timestamp": self.timestamp
        }

        if self.status is not None:
            error_dict["status"] = self.status

        if self.details:
            error_dict["details"] = self.details

        return error_dict

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, status={self.status!r})"


class ConfigurationFailed(ZBarError):
    """A configuration call was rejected by the native layer."""
    code = "CONFIGURATION_FAILED"


class InvalidBufferSize(ZBarError):
    """Pixel buffer length does not match the format and size contract."""
    code = "INVALID_BUFFER_SIZE"


class VideoInitFailed(ZBarError):
    """The capture device could not be opened."""
    code = "VIDEO_INIT_FAILED"


class ScanFailed(ZBarError):
    """Decoding an image or a captured frame failed."""
    code = "SCAN_FAILED"


class WaitFailed(ZBarError):
    """A display/wait call returned a negative status."""
    code = "WAIT_FAILED"


class DecodeTextFailed(ZBarError):
    """A symbol payload is not valid UTF-8 text."""
    code = "DECODE_TEXT_FAILED"


class ResultInvalidated(ZBarError):
    """A symbol or symbol set was used after its parent re-scanned or closed."""
    code = "RESULT_INVALIDATED"


class HandleClosed(ZBarError):
    """A method was called on an object whose native handle is released."""
    code = "HANDLE_CLOSED"


class LibraryLoadFailed(ZBarError):
    """The native library is missing, incomplete or too old."""
    code = "LIBRARY_LOAD_FAILED"


class CapabilityUnavailable(ZBarError):
    """The linked native library does not expose the requested API."""
    code = "CAPABILITY_UNAVAILABLE"


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def configuration_failed(
    step: str,
    status: int,
    details: Optional[Dict[str, Any]] = None
) -> ConfigurationFailed:
    """Create configuration failure for a named step."""
    return ConfigurationFailed(
        f"Configuration step '{step}' failed with status {status}",
        status=status,
        details={"step": step, **(details or {})}
    )


def invalid_buffer_size(expected: int, actual: int, fourcc: str) -> InvalidBufferSize:
    """Create invalid buffer size exception."""
    return InvalidBufferSize(
        f"Buffer of {actual} bytes does not match expected {expected} bytes for {fourcc}",
        details={"expected": expected, "actual": actual, "format": fourcc}
    )


def video_init_failed(
    device: str,
    status: int,
    details: Optional[Dict[str, Any]] = None
) -> VideoInitFailed:
    """Create video init failure exception."""
    return VideoInitFailed(
        f"Unable to open video device '{device}' (status {status})",
        status=status,
        details={"device": device, **(details or {})}
    )


def invalid_video_device(device: str, reason: str) -> VideoInitFailed:
    """Create video init failure for a device name the native layer cannot accept."""
    return VideoInitFailed(
        f"Invalid video device {device!r}: {reason}",
        details={"device": device, "reason": reason}
    )


def scan_failed(status: int, details: Optional[Dict[str, Any]] = None) -> ScanFailed:
    """Create scan failure exception."""
    return ScanFailed(f"Scan failed with status {status}", status=status, details=details)


def wait_failed(
    operation: str,
    status: int,
    details: Optional[Dict[str, Any]] = None
) -> WaitFailed:
    """Create wait/display failure exception."""
    return WaitFailed(
        f"{operation} failed with status {status}",
        status=status,
        details={"operation": operation, **(details or {})}
    )


def decode_text_failed(error: UnicodeDecodeError) -> DecodeTextFailed:
    """Create payload decode exception from the underlying UnicodeDecodeError."""
    return DecodeTextFailed(
        f"Symbol data is not valid UTF-8: {error.reason} at byte {error.start}",
        details={"position": error.start, "reason": error.reason}
    )


def result_invalidated(what: str) -> ResultInvalidated:
    """Create stale result exception."""
    return ResultInvalidated(
        f"{what} is no longer valid: its parent was re-scanned or closed"
    )


def handle_closed(owner: str) -> HandleClosed:
    """Create closed handle exception."""
    return HandleClosed(f"{owner} has already been closed")


def library_load_failed(reason: str) -> LibraryLoadFailed:
    """Create library load exception."""
    return LibraryLoadFailed(f"Unable to load zbar: {reason}")


def capability_unavailable(capability: str) -> CapabilityUnavailable:
    """Create capability unavailable exception."""
    return CapabilityUnavailable(
        f"The linked zbar library does not provide {capability}",
        details={"capability": capability}
    )


def internal_error(message: str) -> ZBarError:
    """Create an error for a broken invariant inside the binding itself."""
    return ZBarError(message, "INTERNAL_ERROR")

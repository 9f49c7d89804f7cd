"""
==============================================================================
Native Status Mapping Module
==============================================================================

Reinterprets the integer statuses returned by the native layer.

Every wrapped call reports through one of three sentinel conventions:

- ``0`` is success, anything else is a failure     -> expect_ok
- ``0``/``1`` are false/true, negative is failure  -> expect_flag
- non-negative is a count or code, negative fails   -> expect_non_negative

The failing integer is always handed to the error factory untouched so the
raised ZBarError keeps the native code in ``status``. Failures are logged at
WARNING before they propagate.

==============================================================================
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, NoReturn, Optional

from zbars.core import exceptions
from zbars.core.exceptions import ZBarError


# Module logger
logger = logging.getLogger(__name__)


# Factory turning a native status into the error to raise
ErrorFactory = Callable[[int], ZBarError]


def _fail(status: int, error: ErrorFactory) -> NoReturn:
    exc = error(status)
    logger.warning(f"{exc.code}: {exc.message}")
    raise exc


class ZBarNativeError(enum.IntEnum):
    """Native error kinds reported by ``_zbar_get_error_code``."""

    OK = 0
    NOMEM = 1
    INTERNAL = 2
    UNSUPPORTED = 3
    INVALID = 4
    SYSTEM = 5
    LOCKING = 6
    BUSY = 7
    XDISPLAY = 8
    XPROTO = 9
    CLOSED = 10
    WINAPI = 11

    @classmethod
    def from_native(cls, value: int) -> Optional[ZBarNativeError]:
        """Return the matching member, or None for codes newer than this table."""
        try:
            return cls(value)
        except ValueError:
            return None


class ZBarSeverity(enum.IntEnum):
    """Native error severity levels."""

    FATAL = -2
    ERROR = -1
    OK = 0
    WARNING = 1
    NOTE = 2

    @classmethod
    def from_label(cls, label: str) -> Optional[ZBarSeverity]:
        """Return the level named by a native error-string prefix, e.g. "FATAL ERROR"."""
        return _SEVERITY_LABELS.get(label.strip().upper())


_SEVERITY_LABELS = {
    "FATAL ERROR": ZBarSeverity.FATAL,
    "ERROR": ZBarSeverity.ERROR,
    "OK": ZBarSeverity.OK,
    "WARNING": ZBarSeverity.WARNING,
    "NOTE": ZBarSeverity.NOTE,
}


def expect_ok(status: int, error: ErrorFactory) -> None:
    """Map a zero-means-success status; any other value raises."""
    if status != 0:
        _fail(status, error)


def expect_flag(status: int, error: ErrorFactory) -> bool:
    """Map a ternary status: 0 -> False, 1 -> True, negative raises."""
    if status == 0:
        return False
    if status == 1:
        return True
    if status < 0:
        _fail(status, error)

    raise exceptions.internal_error(f"Unexpected boolean status from native layer: {status}")


def expect_non_negative(status: int, error: ErrorFactory) -> int:
    """Pass through counts and event codes, raise on negative statuses."""
    if status < 0:
        _fail(status, error)
    return status

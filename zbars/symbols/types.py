"""
Symbology, configuration and orientation enums mirroring the native values.
"""

from __future__ import annotations

import enum


class ZBarSymbolType(enum.IntEnum):
    """Barcode families. NONE targets every symbology in config calls."""

    NONE = 0
    PARTIAL = 1
    EAN2 = 2
    EAN5 = 5
    EAN8 = 8
    UPCE = 9
    ISBN10 = 10
    UPCA = 12
    EAN13 = 13
    ISBN13 = 14
    COMPOSITE = 15
    I25 = 25
    DATABAR = 34
    DATABAR_EXP = 35
    CODABAR = 38
    CODE39 = 39
    PDF417 = 57
    QRCODE = 64
    SQCODE = 80
    CODE93 = 93
    CODE128 = 128

    @classmethod
    def from_native(cls, value: int) -> ZBarSymbolType:
        """Strip add-on flag bits; unknown families decode as PARTIAL."""
        try:
            return cls(value & 0xFF)
        except ValueError:
            return cls.PARTIAL


class ZBarConfig(enum.IntEnum):
    """Per-symbology configuration keys."""

    ENABLE = 0
    ADD_CHECK = 1
    EMIT_CHECK = 2
    ASCII = 3
    BINARY = 4
    MIN_LEN = 0x20
    MAX_LEN = 0x21
    UNCERTAINTY = 0x40
    POSITION = 0x80
    TEST_INVERTED = 0x81
    X_DENSITY = 0x100
    Y_DENSITY = 0x101


class ZBarOrientation(enum.IntEnum):
    """Coarse orientation of a decoded symbol."""

    UNKNOWN = -1
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    @classmethod
    def from_native(cls, value: int) -> ZBarOrientation:
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

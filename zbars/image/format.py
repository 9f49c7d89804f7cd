"""
==============================================================================
Pixel Format Module
==============================================================================

Four-character pixel format codes (fourcc) and their frame size rules.

A fourcc is packed little-endian into a 32-bit integer, the value the
native layer expects:

    "Y800" -> ord('Y') | ord('8') << 8 | ord('0') << 16 | ord('0') << 24

Known codes resolve to a PixelFormat variant, which also knows how many
bytes a frame of a given size occupies. Unknown codes are kept as custom
formats; the native layer decides whether it can convert them.

==============================================================================
"""

from __future__ import annotations

import enum
from typing import Callable, Dict, Optional, Union

from zbars.utils.validators import FourCCValidator


_validator = FourCCValidator()


def _half(value: int) -> int:
    return (value + 1) // 2


class PixelFormat(enum.Enum):
    """Named fourccs the binding recognizes."""

    # 8-bit greyscale
    GREY = "GREY"
    Y800 = "Y800"
    Y8 = "Y8  "

    # YUV 4:2:0 planar / semi-planar
    I420 = "I420"
    YU12 = "YU12"
    YV12 = "YV12"
    NV12 = "NV12"
    NV21 = "NV21"

    # YUV 4:2:2
    YUYV = "YUYV"
    YUY2 = "YUY2"
    UYVY = "UYVY"
    YVYU = "YVYU"
    P422 = "422P"

    # RGB
    RGB3 = "RGB3"
    BGR3 = "BGR3"
    RGB4 = "RGB4"
    BGR4 = "BGR4"
    RGBP = "RGBP"
    RGBO = "RGBO"
    BGR1 = "BGR1"

    # compressed
    JPEG = "JPEG"
    MJPG = "MJPG"


_FRAME_SIZES: Dict[PixelFormat, Callable[[int, int], int]] = {
    PixelFormat.GREY: lambda w, h: w * h,
    PixelFormat.Y800: lambda w, h: w * h,
    PixelFormat.Y8: lambda w, h: w * h,
    PixelFormat.I420: lambda w, h: w * h + 2 * _half(w) * _half(h),
    PixelFormat.YU12: lambda w, h: w * h + 2 * _half(w) * _half(h),
    PixelFormat.YV12: lambda w, h: w * h + 2 * _half(w) * _half(h),
    PixelFormat.NV12: lambda w, h: w * h + 2 * _half(w) * _half(h),
    PixelFormat.NV21: lambda w, h: w * h + 2 * _half(w) * _half(h),
    PixelFormat.YUYV: lambda w, h: 4 * _half(w) * h,
    PixelFormat.YUY2: lambda w, h: 4 * _half(w) * h,
    PixelFormat.UYVY: lambda w, h: 4 * _half(w) * h,
    PixelFormat.YVYU: lambda w, h: 4 * _half(w) * h,
    PixelFormat.P422: lambda w, h: w * h + 2 * _half(w) * h,
    PixelFormat.RGB3: lambda w, h: 3 * w * h,
    PixelFormat.BGR3: lambda w, h: 3 * w * h,
    PixelFormat.RGB4: lambda w, h: 4 * w * h,
    PixelFormat.BGR4: lambda w, h: 4 * w * h,
    PixelFormat.RGBP: lambda w, h: 2 * w * h,
    PixelFormat.RGBO: lambda w, h: 2 * w * h,
    PixelFormat.BGR1: lambda w, h: w * h,
}


def fourcc_value(label: str) -> int:
    """Pack a fourcc label into its 32-bit native value."""
    is_valid, normalized, error = _validator.validate(label)
    if not is_valid:
        raise ValueError(f"Invalid fourcc {label!r}: {error}")

    return sum(ord(char) << (8 * index) for index, char in enumerate(normalized))


def fourcc_label(value: int) -> str:
    """Unpack a 32-bit native value into its fourcc label."""
    return "".join(chr((value >> (8 * index)) & 0xFF) for index in range(4))


class Format:
    """
    Immutable pixel format value.

    Either a named PixelFormat variant or a custom fourcc the binding does
    not know. Equality and hashing follow the packed native value.

    Example:
        >>> fmt = Format.from_label("Y800")
        >>> fmt.variant
        <PixelFormat.Y800: 'Y800'>
        >>> fmt.frame_size(640, 480)
        307200
    """

    __slots__ = ("_value", "_variant")

    def __init__(self, code: Union[PixelFormat, str, int]) -> None:
        if isinstance(code, PixelFormat):
            variant = code
            value = fourcc_value(code.value)
        elif isinstance(code, str):
            value = fourcc_value(code)
            variant = _by_label(fourcc_label(value))
        else:
            value = int(code) & 0xFFFFFFFF
            variant = _by_label(fourcc_label(value))

        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_variant", variant)

    @classmethod
    def from_label(cls, label: str) -> Format:
        return cls(label)

    @classmethod
    def from_value(cls, value: int) -> Format:
        return cls(value)

    def __setattr__(self, name, value):
        raise AttributeError("Format is immutable")

    @property
    def value(self) -> int:
        """Packed 32-bit native value."""
        return self._value

    @property
    def label(self) -> str:
        return fourcc_label(self._value)

    @property
    def variant(self) -> Optional[PixelFormat]:
        """Named variant, or None for a custom code."""
        return self._variant

    @property
    def is_custom(self) -> bool:
        return self._variant is None

    def frame_size(self, width: int, height: int) -> Optional[int]:
        """
        Bytes occupied by one frame of this format.

        Returns:
            Expected buffer length, or None when the layout is not fixed
            (compressed or custom formats)
        """
        if self._variant is None or self._variant not in _FRAME_SIZES:
            return None
        return _FRAME_SIZES[self._variant](width, height)

    def __eq__(self, other) -> bool:
        if isinstance(other, Format):
            return self._value == other._value
        if isinstance(other, PixelFormat):
            return self._variant is other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        if self._variant is None:
            return f"Format(custom={self.label!r})"
        return f"Format({self._variant.name})"


def _by_label(label: str) -> Optional[PixelFormat]:
    try:
        return PixelFormat(label)
    except ValueError:
        return None


# Greyscale format every scanner accepts without conversion
Y800 = Format(PixelFormat.Y800)

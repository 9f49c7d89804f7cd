"""
==============================================================================
Image Package
==============================================================================

Images and the pixel formats they are described with.

Classes:
--------
- ZBarImage: native image handle plus owned or borrowed pixel buffer
- Format: immutable fourcc value
- PixelFormat: named fourccs with known frame sizes

==============================================================================
"""

from .format import Format, PixelFormat, Y800, fourcc_label, fourcc_value
from .image import ZBarImage

__all__ = [
    "Format",
    "PixelFormat",
    "Y800",
    "ZBarImage",
    "fourcc_label",
    "fourcc_value",
]

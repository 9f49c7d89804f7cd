"""
==============================================================================
Scanner Package - Still Image Decoding
==============================================================================

Barcode scanning of caller-supplied images through the native scanner.

Classes:
--------
- ZBarImageScanner: owning wrapper around a native image scanner
- ZBarImageScannerBuilder: declarative scanner configuration

==============================================================================
"""

from .core import ZBarImageScanner, ZBarImageScannerBuilder

__all__ = ["ZBarImageScanner", "ZBarImageScannerBuilder"]

"""
==============================================================================
Symbols Package - Decoding Results
==============================================================================

Borrowed views over the results a scan attaches to its parent.

Classes:
--------
- ZBarSymbolSet: collection produced by one scan
- ZBarSymbol: one decoded barcode
- Point: locator polygon vertex
- ResultLease: validity token shared by the views of one result

==============================================================================
"""

from .types import ZBarConfig, ZBarOrientation, ZBarSymbolType
from .lease import LeaseHolder, ResultLease
from .symbol import Point, ZBarSymbol
from .symbol_set import ZBarSymbolSet

__all__ = [
    "LeaseHolder",
    "Point",
    "ResultLease",
    "ZBarConfig",
    "ZBarOrientation",
    "ZBarSymbol",
    "ZBarSymbolSet",
    "ZBarSymbolType",
]

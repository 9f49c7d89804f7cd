"""
==============================================================================
Symbol Module
==============================================================================

Borrowed view of one decoded barcode.

A ZBarSymbol never owns native memory. It reads through to the symbol the
native layer attached to its parent's current result, and every accessor
first checks the result lease (see ``zbars.symbols.lease``).

==============================================================================
"""

from __future__ import annotations

import ctypes
from typing import TYPE_CHECKING, Iterator, NamedTuple, Optional

from zbars.core import exceptions
from zbars.core.ffi import ZBarLibrary
from zbars.symbols.types import ZBarOrientation, ZBarSymbolType

if TYPE_CHECKING:
    from zbars.symbols.symbol_set import ZBarSymbolSet


class Point(NamedTuple):
    """One vertex of a symbol's locator polygon, in image pixels."""

    x: int
    y: int


class ZBarSymbol:
    """
    One decoded barcode result.

    Valid exactly as long as the symbol set it came from: once the parent
    Image or Processor scans again or is closed, every accessor raises
    ResultInvalidated.

    Attributes:
        symbol_type: Barcode family
        quality: Relative confidence (larger is better)
        orientation: Coarse orientation, UNKNOWN on old native builds
        count: Times the symbol was seen while result caching is enabled

    Example:
        >>> symbol = symbol_set.first_symbol()
        >>> symbol.symbol_type
        <ZBarSymbolType.QRCODE: 64>
        >>> symbol.data()
        'Hello World'
    """

    def __init__(self, lib: ZBarLibrary, handle: int, symbol_set: ZBarSymbolSet) -> None:
        self._lib = lib
        self._handle = handle
        self._set = symbol_set

    def _checked(self) -> int:
        self._set.lease.check("Symbol")
        return self._handle

    @property
    def valid(self) -> bool:
        return self._set.lease.valid

    # =========================================================================
    # ATTRIBUTES
    # =========================================================================

    @property
    def symbol_type(self) -> ZBarSymbolType:
        return ZBarSymbolType.from_native(self._lib.zbar_symbol_get_type(self._checked()))

    @property
    def quality(self) -> int:
        return self._lib.zbar_symbol_get_quality(self._checked())

    @property
    def count(self) -> int:
        return self._lib.zbar_symbol_get_count(self._checked())

    @property
    def orientation(self) -> ZBarOrientation:
        handle = self._checked()
        if not self._lib.has("zbar_symbol_get_orientation"):
            return ZBarOrientation.UNKNOWN
        return ZBarOrientation.from_native(self._lib.zbar_symbol_get_orientation(handle))

    # =========================================================================
    # PAYLOAD
    # =========================================================================

    def raw_data(self) -> bytes:
        """Decoded payload as bytes, exactly as the native layer reports it."""
        handle = self._checked()
        pointer = self._lib.zbar_symbol_get_data(handle)
        if not pointer:
            return b""

        length = self._lib.zbar_symbol_get_data_length(handle)
        return ctypes.string_at(pointer, length)

    def data(self) -> str:
        """
        Decoded payload as text.

        Binary symbologies may carry payloads that are not text; use
        ``raw_data()`` for those.

        Raises:
            DecodeTextFailed: If the payload is not valid UTF-8
        """
        try:
            return self.raw_data().decode("utf-8")
        except UnicodeDecodeError as e:
            raise exceptions.decode_text_failed(e) from e

    # =========================================================================
    # GEOMETRY
    # =========================================================================

    def polygon(self) -> Iterator[Point]:
        """
        Yield the locator boundary points in native order.

        The generator reads each point from the native symbol as it goes;
        call ``polygon()`` again to walk the boundary a second time.
        """
        size = self._lib.zbar_symbol_get_loc_size(self._checked())
        for index in range(size):
            handle = self._checked()
            yield Point(
                self._lib.zbar_symbol_get_loc_x(handle, index),
                self._lib.zbar_symbol_get_loc_y(handle, index),
            )

    # =========================================================================
    # CHAIN
    # =========================================================================

    def next(self) -> Optional[ZBarSymbol]:
        """Following symbol in the set, or None at the tail."""
        handle = self._lib.zbar_symbol_next(self._checked())
        if not handle:
            return None
        return ZBarSymbol(self._lib, handle, self._set)

    def xml(self) -> str:
        """
        Render this symbol AND every symbol after it as XML.

        Note that a single call covers the whole tail of the chain, not
        only this symbol: calling it on the first symbol of a set renders
        the entire result. Each native buffer is freed before returning.
        """
        fragments = []
        symbol: Optional[ZBarSymbol] = self
        while symbol is not None:
            fragments.append(symbol._xml_fragment())
            symbol = symbol.next()
        return "".join(fragments)

    def _xml_fragment(self) -> str:
        handle = self._checked()
        buffer = ctypes.c_void_p(None)
        length = ctypes.c_uint(0)

        self._lib.zbar_symbol_xml(handle, ctypes.byref(buffer), ctypes.byref(length))
        try:
            if not buffer.value:
                return ""
            return ctypes.string_at(buffer.value).decode("utf-8", "replace")
        finally:
            self._lib.free(buffer.value)

    def __str__(self) -> str:
        return f"{self.symbol_type.name}: {self.raw_data()!r}"

    def __repr__(self) -> str:
        if not self.valid:
            return "<ZBarSymbol (invalidated)>"
        return f"<ZBarSymbol {self.symbol_type.name} quality={self.quality}>"

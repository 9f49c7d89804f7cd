"""
==============================================================================
Symbol Set Module
==============================================================================

Borrowed collection of the symbols produced by one scan.

A set is only valid while its parent (Image or Processor) is alive and has
not scanned again. Sets returned by ``ZBarProcessor.get_results()`` also
carry a native reference, which is dropped as soon as the set is
invalidated or garbage collected, whichever happens first.

==============================================================================
"""

from __future__ import annotations

import weakref
from typing import Any, Iterator, Optional

from zbars.core.ffi import ZBarLibrary
from zbars.symbols.lease import ResultLease
from zbars.symbols.symbol import ZBarSymbol


class ZBarSymbolSet:
    """
    Ordered, forward-only collection of decoded symbols.

    Iteration follows the native decode order. Iterators are single-use:
    call ``iter()`` again to restart.

    Example:
        >>> symbols = scanner.scan_image(image)
        >>> for symbol in symbols:
        ...     print(symbol.data())
    """

    def __init__(
        self,
        lib: ZBarLibrary,
        handle: int,
        lease: ResultLease,
        parent: Any,
        owns_reference: bool = False
    ) -> None:
        """
        Wrap a native symbol set.

        Args:
            lib: Loaded native library
            handle: Native symbol set handle (non-null)
            lease: Lease of the parent's current result
            parent: Image or Processor the set belongs to (kept alive)
            owns_reference: Whether a native reference must be released
        """
        self._lib = lib
        self._handle = handle
        self._lease = lease
        self._parent = parent

        if owns_reference:
            lease.on_expire(weakref.finalize(self, lib.zbar_symbol_set_ref, handle, -1))

    @classmethod
    def from_raw(
        cls,
        lib: ZBarLibrary,
        handle: Optional[int],
        lease: ResultLease,
        parent: Any,
        owns_reference: bool = False
    ) -> Optional[ZBarSymbolSet]:
        """Wrap a handle, mapping a null handle to None."""
        if not handle:
            return None
        return cls(lib, handle, lease, parent, owns_reference)

    @property
    def lease(self) -> ResultLease:
        return self._lease

    @property
    def valid(self) -> bool:
        return self._lease.valid

    def _checked(self) -> int:
        self._lease.check("Symbol set")
        return self._handle

    def __len__(self) -> int:
        return self._lib.zbar_symbol_set_get_size(self._checked())

    def first_symbol(self) -> Optional[ZBarSymbol]:
        """Head of the set, or None when the scan found nothing."""
        handle = self._lib.zbar_symbol_set_first_symbol(self._checked())
        if not handle:
            return None
        return ZBarSymbol(self._lib, handle, self)

    def iter(self) -> Iterator[ZBarSymbol]:
        """Lazily walk the symbols in decode order."""
        symbol = self.first_symbol()
        while symbol is not None:
            yield symbol
            symbol = symbol.next()

    def __iter__(self) -> Iterator[ZBarSymbol]:
        return self.iter()

    def __repr__(self) -> str:
        if not self.valid:
            return "<ZBarSymbolSet (invalidated)>"
        return f"<ZBarSymbolSet size={len(self)}>"

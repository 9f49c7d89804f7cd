"""
==============================================================================
Result Lease Module
==============================================================================

Structural invalidation of scan results.

Symbol sets and symbols are views into memory the native layer owns on
behalf of an Image or Processor. That memory is recycled by the next scan
on the same parent and released when the parent is destroyed. Each parent
therefore holds a ResultLease for its current result:

    ┌──────────────┐  renew on scan   ┌──────────────┐
    │ Image /      │ ───────────────▶ │ ResultLease  │ (one per result)
    │ Processor    │  expire on close └──────┬───────┘
    └──────────────┘                         │ shared by
                                    ┌────────▼────────┐
                                    │ SymbolSet,      │
                                    │ Symbol views    │
                                    └─────────────────┘

Every view checks its lease before touching native memory, so a view kept
past a re-scan or close raises ResultInvalidated instead of reading freed
memory. Views also hold a strong reference to their parent, so garbage
collection can never release the parent underneath them.

==============================================================================
"""

from __future__ import annotations

from typing import Callable, List

from zbars.core import exceptions


class ResultLease:
    """Validity token shared by every view of one scan result."""

    __slots__ = ("_valid", "_releases")

    def __init__(self) -> None:
        self._valid = True
        self._releases: List[Callable[[], None]] = []

    @property
    def valid(self) -> bool:
        return self._valid

    def check(self, what: str) -> None:
        """Raise ResultInvalidated if the lease has expired."""
        if not self._valid:
            raise exceptions.result_invalidated(what)

    def on_expire(self, release: Callable[[], None]) -> None:
        """
        Register a release callback run when the lease expires.

        Callbacks must be idempotent (``weakref.finalize`` objects are);
        finished ones are pruned as new ones arrive.
        """
        if not self._valid:
            release()
            return

        self._releases = [r for r in self._releases if getattr(r, "alive", True)]
        self._releases.append(release)

    def expire(self) -> None:
        """Invalidate every view and run pending release callbacks once."""
        if not self._valid:
            return

        self._valid = False
        releases, self._releases = self._releases, []
        for release in releases:
            release()


class LeaseHolder:
    """Mixin for parents whose scans produce leased results."""

    _lease: ResultLease

    def _init_lease(self) -> None:
        self._lease = ResultLease()

    def _renew_lease(self) -> ResultLease:
        """Expire the current result and start a fresh lease for the next one."""
        self._lease.expire()
        self._lease = ResultLease()
        return self._lease

"""Shared fix state between the ingestion and upload threads.

``FixStore`` is the only state both loops touch. It holds two slots,
``last_seen`` (written by ingestion) and ``last_uploaded`` (written by the
upload loop after a successful upload), plus a registry of fix observers.
Every slot access and registry mutation happens under one lock, and each
slot is replaced by a single reference assignment of an immutable
``StoredFix``, so a reader never sees a half-updated slot.
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import NamedTuple

from positioning.nmea import Fix

__all__ = ["FixObserver", "FixStore", "StoreSnapshot", "StoredFix"]

logger = logging.getLogger(__name__)

FixObserver = Callable[[Fix], None]


@dataclass(frozen=True)
class StoredFix:
    """A fix together with when and how often its slot was written.

    Attributes:
        fix: The stored fix.
        updated_at: Epoch seconds of the assignment.
        version: 1 for the first assignment of the slot, incremented on
            every subsequent one.
    """

    fix: Fix
    updated_at: float
    version: int


class StoreSnapshot(NamedTuple):
    """Both slots, read under a single lock acquisition."""

    last_seen: StoredFix | None
    last_uploaded: StoredFix | None


@dataclass
class _Registration:
    callback: FixObserver
    once: bool


class FixStore:
    """Thread-safe holder of ``last_seen``, ``last_uploaded`` and observers.

    Args:
        clock: Wall-clock source for ``StoredFix.updated_at``.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._last_seen: StoredFix | None = None
        self._last_uploaded: StoredFix | None = None
        self._observers: list[_Registration] = []

    def _next_slot(self, current: StoredFix | None, fix: Fix) -> StoredFix:
        version = 1 if current is None else current.version + 1
        return StoredFix(fix=fix, updated_at=self._clock(), version=version)

    # --- slots ---------------------------------------------------------------

    def get_last_seen(self) -> Fix | None:
        with self._lock:
            stored = self._last_seen
        return stored.fix if stored is not None else None

    def set_last_seen(self, fix: Fix) -> None:
        with self._lock:
            self._last_seen = self._next_slot(self._last_seen, fix)

    def get_last_uploaded(self) -> Fix | None:
        with self._lock:
            stored = self._last_uploaded
        return stored.fix if stored is not None else None

    def set_last_uploaded(self, fix: Fix) -> None:
        with self._lock:
            self._last_uploaded = self._next_slot(self._last_uploaded, fix)

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(self._last_seen, self._last_uploaded)

    # --- observers -----------------------------------------------------------

    def add_observer(self, callback: FixObserver, once: bool = False) -> None:
        """Register ``callback`` for significant fixes.

        Args:
            callback: Called with each significant fix on the ingestion thread.
            once: If True, the observer is removed after its first delivery.
        """
        with self._lock:
            self._observers.append(_Registration(callback, once))

    def register_first_fix_observer(self, callback: FixObserver) -> None:
        """Register ``callback`` to fire exactly once, on the next significant fix."""
        self.add_observer(callback, once=True)

    def remove_observer(self, callback: FixObserver) -> None:
        """Unregister every registration of ``callback``; unknown callbacks are ignored."""
        with self._lock:
            self._observers = [r for r in self._observers if r.callback != callback]

    @property
    def observer_count(self) -> int:
        with self._lock:
            return len(self._observers)

    def notify_observers(self, fix: Fix) -> None:
        """Deliver ``fix`` to every registered observer.

        One-shot observers are removed before delivery, under the lock, so
        each fires exactly once even if notifications race. Callbacks run
        outside the lock; a callback that raises is logged and skipped.
        """
        with self._lock:
            registrations = list(self._observers)
            self._observers = [r for r in self._observers if not r.once]

        for registration in registrations:
            try:
                registration.callback(fix)
            except Exception:
                logger.exception("Fix observer %r failed", registration.callback)

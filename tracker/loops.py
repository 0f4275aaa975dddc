"""Background ingestion and upload loops.

Both loops run on their own thread and share only a ``FixStore`` and a
shutdown ``threading.Event``. Neither holds the store lock while reading
the source or talking to the collector.
"""

import logging
import threading
import time
from collections.abc import Callable
from typing import Protocol

from positioning.geodesy import ChangeDetector
from positioning.nmea import Fix, parse_fix
from tracker.sink import UploadError, UploadSink
from tracker.store import FixStore

__all__ = ["IngestionLoop", "LineSource", "UploadLoop"]

logger = logging.getLogger(__name__)

_READ_ERROR_PAUSE = 0.5


class LineSource(Protocol):
    @property
    def is_open(self) -> bool: ...

    def read_line(self) -> str | None:
        """Return one line, or None if the read timed out."""
        ...


class IngestionLoop:
    """Read lines continuously and record significant fixes.

    The loop exits when ``shutdown`` is set, when the source reports it is
    no longer open, or when a read raises ``EOFError``. Other read failures
    are logged and the loop continues.

    Args:
        source: Open line source, owned by the caller.
        store: Shared fix state.
        detector: Significance policy against ``last_seen``.
        shutdown: Cooperative cancellation flag polled before every read.
    """

    def __init__(
        self,
        source: LineSource,
        store: FixStore,
        detector: ChangeDetector,
        shutdown: threading.Event,
    ) -> None:
        self._source = source
        self._store = store
        self._detector = detector
        self._shutdown = shutdown

    def process_line(self, line: str) -> bool:
        """Decode one line and store it if it is a significant fix.

        Returns:
            True if ``last_seen`` was updated and observers were notified.
        """
        candidate = parse_fix(line)
        if candidate is None or not candidate.fixed or not candidate.has_position:
            return False

        if not self._detector.is_significant(self._store.get_last_seen(), candidate):
            return False

        self._store.set_last_seen(candidate)
        logger.info("New position (%.6f, %.6f)", candidate.latitude, candidate.longitude)
        self._store.notify_observers(candidate)
        return True

    def run(self) -> None:
        while not self._shutdown.is_set() and self._source.is_open:
            try:
                line = self._source.read_line()
            except EOFError:
                break
            except OSError:
                logger.exception("Failed to read from position source")
                self._shutdown.wait(_READ_ERROR_PAUSE)
                continue

            if line is not None:
                self.process_line(line)

        logger.info("Ingestion stopped")


class UploadLoop:
    """Periodically forward ``last_seen`` when it moved since the last upload.

    Ticks run at a fixed rate starting immediately. ``trigger()`` requests
    an extra tick without shifting that schedule.

    Args:
        store: Shared fix state.
        sink: Destination for uploads.
        detector: Significance policy against ``last_uploaded``.
        device_name: Name sent with every upload.
        interval: Seconds between scheduled ticks.
        shutdown: Cooperative cancellation flag checked before every tick.
        clock: Epoch-seconds source for upload timestamps.
    """

    def __init__(
        self,
        store: FixStore,
        sink: UploadSink,
        detector: ChangeDetector,
        device_name: str,
        interval: float,
        shutdown: threading.Event,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._store = store
        self._sink = sink
        self._detector = detector
        self._device_name = device_name
        self._interval = interval
        self._shutdown = shutdown
        self._clock = clock
        self._wake = threading.Event()

    def _needs_upload(self, last_seen: Fix, last_uploaded: Fix | None) -> bool:
        if last_uploaded is None:
            return True
        return self._detector.is_significant(last_uploaded, last_seen)

    def tick(self) -> bool:
        """Evaluate the store once and upload if needed.

        Returns:
            True if a fix was uploaded successfully.
        """
        if self._shutdown.is_set():
            return False

        last_seen, last_uploaded = self._store.snapshot()
        if last_seen is None:
            return False

        fix = last_seen.fix
        previous = last_uploaded.fix if last_uploaded is not None else None
        if not self._needs_upload(fix, previous):
            return False

        try:
            self._sink.upload(self._device_name, fix, int(self._clock()))
        except (UploadError, OSError) as e:
            logger.warning("Upload failed: %s", e)
            return False

        self._store.set_last_uploaded(fix)
        logger.info("Uploaded position (%.5f, %.5f)", fix.latitude, fix.longitude)
        return True

    def trigger(self) -> None:
        """Request an immediate tick."""
        self._wake.set()

    def stop(self) -> None:
        """Wake the loop so it observes ``shutdown`` without waiting for the next tick."""
        self._wake.set()

    def run(self) -> None:
        next_tick = time.monotonic()
        while not self._shutdown.is_set():
            self._wake.wait(max(0.0, next_tick - time.monotonic()))
            self._wake.clear()
            if self._shutdown.is_set():
                break

            try:
                self.tick()
            except Exception:
                logger.exception("Upload tick failed")

            if time.monotonic() >= next_tick:
                next_tick += self._interval

        logger.info("Upload loop stopped")

"""GPS tracker process: ingest NMEA from a serial receiver, upload changes.

Start with::

    gps-tracker /dev/ttyUSB0 my-device https://collector.example/fixes 60

or list the serial ports first with ``gps-tracker --list``. The first
significant fix is uploaded immediately; afterwards the latest fix is
uploaded every ``interval`` seconds, but only once it has moved at least
``--threshold`` meters since the previous upload.
"""

import argparse
import concurrent.futures
import contextlib
import logging
import signal
import sys
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

import serial

from positioning.geodesy import ChangeDetector
from positioning.gnss import SerialReader, find_serial_port, list_serial_ports
from positioning.nmea import Fix
from tracker.config import TrackerConfig
from tracker.loops import IngestionLoop, LineSource, UploadLoop
from tracker.sink import HttpUploadSink, UploadSink
from tracker.store import FixStore

__all__ = ["GpsTracker", "main", "parse_args"]

logger = logging.getLogger(__name__)

_WAIT_POLL = 0.5


class CancellableSource(LineSource, Protocol):
    def cancel(self) -> None:
        """Unblock any pending read and close the source."""
        ...


class GpsTracker:
    """Owns the shared state and both loops for one receiver.

    Args:
        config: Resolved tracker settings.
        source: Open line source; ``stop()`` cancels it.
        sink: Upload destination.
        clock: Epoch-seconds source for upload timestamps.
    """

    def __init__(
        self,
        config: TrackerConfig,
        source: CancellableSource,
        sink: UploadSink,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._source = source
        self.shutdown = threading.Event()
        self.store = FixStore()
        detector = ChangeDetector(config.threshold_meters)
        self.ingestion = IngestionLoop(source, self.store, detector, self.shutdown)
        self.uploader = UploadLoop(
            self.store,
            sink,
            detector,
            config.device_name,
            config.interval_seconds,
            self.shutdown,
            clock,
        )
        self.store.register_first_fix_observer(self._on_first_fix)
        self._executor: ThreadPoolExecutor | None = None
        self._futures: list[concurrent.futures.Future[None]] = []

    def _on_first_fix(self, fix: Fix) -> None:
        logger.info("First fix at (%.6f, %.6f)", fix.latitude, fix.longitude)
        self.uploader.trigger()

    def start(self) -> None:
        """Start the ingestion and upload threads."""
        if self._executor is not None:
            raise RuntimeError("GpsTracker has already been started.")
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="gps-tracker")
        self._futures = [
            self._executor.submit(self.ingestion.run),
            self._executor.submit(self.uploader.run),
        ]

    def stop(self) -> None:
        """Signal both loops to exit and unblock the source read."""
        self.shutdown.set()
        self.uploader.stop()
        self._source.cancel()

    def wait(self, timeout: float | None = None) -> bool:
        """Wait for both threads to finish; return True if they did."""
        if self._executor is None:
            return True
        _, not_done = concurrent.futures.wait(self._futures, timeout)
        if not_done:
            return False
        self._executor.shutdown(wait=True)
        for future in self._futures:
            future.result()
        return True

    def run(self) -> None:
        """Run until the source closes or ``stop()`` is called."""
        self.start()
        ingestion = self._futures[0]
        try:
            while not ingestion.done():
                concurrent.futures.wait([ingestion], _WAIT_POLL)
        finally:
            self.stop()
            self.wait()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gps-tracker",
        description="Upload GPS position changes read from a serial NMEA receiver.",
    )
    parser.add_argument("port", nargs="?", help="serial device path or port name")
    parser.add_argument("device_name", nargs="?", help="name reported with uploads")
    parser.add_argument("upload_url", nargs="?", help="collector URL")
    parser.add_argument(
        "interval",
        nargs="?",
        type=float,
        default=60.0,
        help="seconds between uploads (default: 60)",
    )
    parser.add_argument("--list", action="store_true", help="list serial ports and exit")
    parser.add_argument("--baudrate", type=int, default=4800)
    parser.add_argument(
        "--threshold",
        type=float,
        default=33.0,
        help="minimum movement in meters (default: 33)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )

    args = parser.parse_args(argv)
    if not args.list and None in (args.port, args.device_name, args.upload_url):
        parser.error("port, device_name and upload_url are required")
    return args


def _install_signal_handlers(tracker: GpsTracker) -> None:
    def _handle(signum: int, _frame: object) -> None:
        logger.info("Received signal %d, shutting down", signum)
        tracker.stop()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list:
        for info in list_serial_ports():
            print(f"{info.device}\t{info.description}")
        return 0

    port = find_serial_port(args.port)
    if port is None:
        logger.error("Unable to locate serial port %r", args.port)
        return 1

    try:
        config = TrackerConfig(
            port=port.device,
            device_name=args.device_name,
            upload_url=args.upload_url,
            interval_seconds=args.interval,
            baudrate=args.baudrate,
            threshold_meters=args.threshold,
        ).validate()
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    with contextlib.ExitStack() as stack:
        try:
            source = stack.enter_context(
                SerialReader(
                    config.port,
                    baudrate=config.baudrate,
                    timeout=config.read_timeout_seconds,
                )
            )
        except serial.SerialException as e:
            logger.error("Unable to open serial port %s: %s", config.port, e)
            return 1
        sink = stack.enter_context(
            HttpUploadSink(config.upload_url, timeout=config.upload_timeout_seconds)
        )

        tracker = GpsTracker(config, source, sink)
        _install_signal_handlers(tracker)
        logger.info(
            "Tracking %s on %s, uploading to %s every %gs",
            config.device_name,
            config.port,
            config.upload_url,
            config.interval_seconds,
        )
        tracker.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Sentence builders and controllable fakes shared across tests."""

import functools
import operator
import queue

from positioning.nmea import Fix


def with_checksum(body: str) -> str:
    """Frame ``body`` as a sentence with its XOR checksum."""
    checksum = functools.reduce(operator.xor, (ord(c) for c in body), 0)
    return f"${body}*{checksum:02X}"


def make_gga(
    latitude: str = "4807.038",
    longitude: str = "01131.000",
    quality: int = 1,
    hemisphere: str = "N",
    meridian: str = "E",
) -> str:
    return with_checksum(
        f"GPGGA,123519.00,{latitude},{hemisphere},{longitude},{meridian},"
        f"{quality},08,0.9,545.4,M,47.0,M,,"
    )


def make_fix(latitude: float = 48.1173, longitude: float = 11.516667) -> Fix:
    return Fix(
        time_of_day=45319.0,
        latitude=latitude,
        longitude=longitude,
        quality=1,
        altitude=545.4,
    )


class ControlledSource:
    """Queue-backed line source; put None to simulate the port closing."""

    def __init__(self) -> None:
        self.line_queue: queue.Queue[str | None] = queue.Queue()
        self.cancelled = False
        self._open = True

    @property
    def is_open(self) -> bool:
        return self._open and not self.cancelled

    def feed(self, *lines: str) -> None:
        for line in lines:
            self.line_queue.put(line)

    def read_line(self, timeout: float = 0.01) -> str | None:
        if not self.is_open:
            raise EOFError("closed")
        try:
            item = self.line_queue.get(timeout=timeout)
        except queue.Empty:
            return None
        if item is None:
            self._open = False
            raise EOFError("closed")
        return item

    def cancel(self) -> None:
        self.cancelled = True


class RecordingSink:
    """Upload sink that remembers every call."""

    def __init__(self) -> None:
        self.uploads: list[tuple[str, Fix, int]] = []

    def upload(self, device_name: str, fix: Fix, timestamp: int) -> None:
        self.uploads.append((device_name, fix, timestamp))

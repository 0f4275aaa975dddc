"""SerialReader: line-oriented NMEA source over a serial port.

Reading strategy:
    The port is opened with a read timeout so that a blocked ``readline()``
    returns at least every ``timeout`` seconds. A line that has not been
    terminated by the time the read times out is buffered and completed by
    the next read, so callers only ever see whole lines. Unterminated data
    longer than any NMEA sentence, such as binary receiver output, is
    discarded. ``cancel()`` aborts a pending read and closes the port,
    after which every read raises ``EOFError``.
"""

import contextlib
import logging
from dataclasses import dataclass
from types import TracebackType

import serial
from serial.tools import list_ports

__all__ = ["SerialPortInfo", "SerialReader", "find_serial_port", "list_serial_ports"]

logger = logging.getLogger(__name__)

# --- serial defaults ----------------------------------------------------------

_BAUDRATE = 4800  # NMEA 0183 standard rate
_TIMEOUT = 2.0  # read timeout; determines maximum cancel() latency
_MAX_LINE_BYTES = 512  # well above the 82-character NMEA sentence limit


@dataclass(frozen=True)
class SerialPortInfo:
    """A serial port visible on this machine.

    Attributes:
        device: Path or name to open (e.g., ``/dev/ttyUSB0``, ``COM3``).
        description: Human-readable port description reported by the OS.
    """

    device: str
    description: str


def list_serial_ports() -> list[SerialPortInfo]:
    """Return the serial ports currently available, sorted by device."""
    return sorted(
        (SerialPortInfo(device=port.device, description=port.description)
         for port in list_ports.comports()),
        key=lambda info: info.device,
    )


def find_serial_port(name: str) -> SerialPortInfo | None:
    """Find a port by device path or by its descriptive name."""
    for info in list_serial_ports():
        if name in (info.device, info.description):
            return info
    return None


class SerialReader:
    """Context manager for reading NMEA lines from a serial port.

    Each read blocks for at most the timeout, so the ingestion loop can
    poll its shutdown flag between reads::

        with SerialReader("/dev/ttyUSB0") as source:
            line = source.read_line()  # None on timeout

    Args:
        port: Serial device to open.
        baudrate: Line speed (default: ``4800``).
        timeout: Read timeout in seconds (default: ``2.0``).
    """

    def __init__(
        self,
        port: str,
        baudrate: int = _BAUDRATE,
        timeout: float = _TIMEOUT,
    ) -> None:
        """Store port parameters; the port is opened in ``__enter__``."""
        self._port = port
        self._baudrate = baudrate
        self._timeout = timeout
        self._serial: serial.Serial | None = None
        self._partial = b""
        self._cancelled = False

    def __enter__(self) -> "SerialReader":
        """Open the serial port and reset internal state."""
        self._serial = serial.Serial(
            port=self._port,
            baudrate=self._baudrate,
            timeout=self._timeout,
        )
        self._partial = b""
        self._cancelled = False
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the serial port."""
        if self._serial is not None:
            self._serial.close()
            self._serial = None

    @property
    def is_open(self) -> bool:
        """True while the port is open and the reader has not been cancelled."""
        return (
            self._serial is not None
            and self._serial.is_open
            and not self._cancelled
        )

    def cancel(self) -> None:
        """Cancel pending blocking reads and close the port.

        Sets the cancellation flag, aborts any in-progress ``readline()``
        and closes the port so that a reader thread exits without waiting
        for the next timeout cycle.
        """
        self._cancelled = True
        if self._serial is None:
            return
        with contextlib.suppress(serial.SerialException, OSError):
            self._serial.cancel_read()
        with contextlib.suppress(serial.SerialException, OSError):
            self._serial.close()

    def _recv_raw(self, port: serial.Serial) -> bytes:
        """Read raw bytes up to a newline or the timeout.

        Raises:
            EOFError: If the read failed because the port was closed.
            serial.SerialException: For any other I/O failure.
        """
        try:
            return port.readline()
        except (serial.SerialException, OSError) as e:
            if self._cancelled or not port.is_open:
                raise EOFError("Serial port closed.") from e
            raise

    def read_line(self) -> str | None:
        """Read one complete line, blocking up to the read timeout.

        Returns:
            The line with surrounding whitespace removed, or None if no
            complete line arrived before the timeout.

        Raises:
            RuntimeError: If called outside a ``with`` block.
            EOFError: If the reader was cancelled or the port is closed.
            serial.SerialException: If the underlying read fails.
        """
        if self._serial is None:
            raise RuntimeError("SerialReader must be used as a context manager.")
        if not self.is_open:
            raise EOFError("Serial read cancelled.")

        raw = self._recv_raw(self._serial)
        if self._cancelled:
            raise EOFError("Serial read cancelled.")

        buffered = self._partial + raw
        if not buffered.endswith(b"\n"):
            if len(buffered) > _MAX_LINE_BYTES:
                logger.debug("Discarding %d bytes without a line terminator", len(buffered))
                buffered = b""
            self._partial = buffered
            return None

        self._partial = b""
        return buffered.decode("ascii", errors="replace").strip()

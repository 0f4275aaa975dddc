"""GNSS module for reading NMEA 0183 lines from a serial port."""

from positioning.gnss.reader import (
    SerialPortInfo,
    SerialReader,
    find_serial_port,
    list_serial_ports,
)

__all__ = ["SerialPortInfo", "SerialReader", "find_serial_port", "list_serial_ports"]

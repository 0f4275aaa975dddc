"""Positioning package for NMEA decoding and fix-significance policy."""

from positioning.geodesy import ChangeDetector, destination_point, haversine_distance
from positioning.gnss import SerialReader, list_serial_ports
from positioning.nmea import (
    ChecksumMismatchError,
    Fix,
    NumericParseError,
    Sentence,
    SentenceError,
    decode_sentence,
    extract_fix,
    parse_fix,
)

__all__ = [
    "ChangeDetector",
    "ChecksumMismatchError",
    "Fix",
    "NumericParseError",
    "Sentence",
    "SentenceError",
    "SerialReader",
    "decode_sentence",
    "destination_point",
    "extract_fix",
    "haversine_distance",
    "list_serial_ports",
    "parse_fix",
]

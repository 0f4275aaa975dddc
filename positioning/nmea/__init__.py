"""NMEA 0183 decoding into position fixes."""

from positioning.nmea.checksum import (
    calculate_checksum,
    decode_sentence,
)
from positioning.nmea.errors import (
    ChecksumMismatchError,
    MalformedSentenceError,
    NumericParseError,
    SentenceError,
)
from positioning.nmea.extractors import (
    SUPPORTED_SENTENCE_TYPES,
    extract_fix,
    parse_fix,
)
from positioning.nmea.types import Fix, Sentence

__all__ = [
    "SUPPORTED_SENTENCE_TYPES",
    "ChecksumMismatchError",
    "Fix",
    "MalformedSentenceError",
    "NumericParseError",
    "Sentence",
    "SentenceError",
    "calculate_checksum",
    "decode_sentence",
    "extract_fix",
    "parse_fix",
]

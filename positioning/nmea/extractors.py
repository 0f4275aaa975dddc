"""Sentence-type dispatch from decoded sentences to position fixes.

Each supported sentence type maps to one extraction rule. A rule reads the
fields its sentence type defines and returns the ``Fix`` attributes it sets.
An optional attribute whose field was empty is returned as None and keeps its
zero default; an empty time, quality or altitude field fails the sentence.
Adding a sentence type means adding one entry to ``_RULES``.

Supported sentence types:
    GGA  $GNGGA,123519.00,4807.038,N,01131.000,E,1,08,0.9,545.4,M,47.0,M,,*7F
         time, latitude, longitude, fix quality, altitude
    GLL  $GPGLL,4916.45,N,12311.12,W,225444,A,A*5C
         latitude, longitude, time
    RMC  $GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A
         time, latitude, longitude, speed (knots), course
    VTG  $GNVTG,054.7,T,034.4,M,005.5,N,010.2,K,A*3B
         course (true track)
    RMZ  $PGRMZ,246,f,3*1B
         altitude (feet converted to meters)
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from positioning.nmea.checksum import decode_sentence
from positioning.nmea.errors import MalformedSentenceError, SentenceError
from positioning.nmea.fields import (
    VALID_TALKER_IDS,
    convert_to_decimal_degrees,
    parse_float_field,
    parse_int_field,
    parse_time_of_day,
)
from positioning.nmea.types import Fix, Sentence

__all__ = ["SUPPORTED_SENTENCE_TYPES", "extract_fix", "parse_fix"]

logger = logging.getLogger(__name__)

_FEET_TO_METERS = 0.3048

FixValues = dict[str, float | int | None]


def _extract_gga(sentence: Sentence) -> FixValues:
    """Fields: 1 time, 2/3 latitude, 4/5 longitude, 6 quality, 9 altitude."""
    return {
        "time_of_day": parse_time_of_day(sentence.field(1), required=True),
        "latitude": convert_to_decimal_degrees(sentence.field(2), sentence.field(3)),
        "longitude": convert_to_decimal_degrees(sentence.field(4), sentence.field(5)),
        "quality": parse_int_field(sentence.field(6), required=True),
        "altitude": parse_float_field(sentence.field(9), required=True),
    }


def _extract_gll(sentence: Sentence) -> FixValues:
    """Fields: 1/2 latitude, 3/4 longitude, 5 time."""
    return {
        "latitude": convert_to_decimal_degrees(sentence.field(1), sentence.field(2)),
        "longitude": convert_to_decimal_degrees(sentence.field(3), sentence.field(4)),
        "time_of_day": parse_time_of_day(sentence.field(5), required=True),
    }


def _extract_rmc(sentence: Sentence) -> FixValues:
    """Fields: 1 time, 3/4 latitude, 5/6 longitude, 7 speed, 8 course.

    Field 2 (status A/V) is not consulted; RMC never sets ``quality``.
    """
    return {
        "time_of_day": parse_time_of_day(sentence.field(1), required=True),
        "latitude": convert_to_decimal_degrees(sentence.field(3), sentence.field(4)),
        "longitude": convert_to_decimal_degrees(sentence.field(5), sentence.field(6)),
        "speed": parse_float_field(sentence.field(7)),
        "course": parse_float_field(sentence.field(8)),
    }


def _extract_vtg(sentence: Sentence) -> FixValues:
    # Empty when stationary: no heading without movement
    return {"course": parse_float_field(sentence.field(1))}


def _extract_rmz(sentence: Sentence) -> FixValues:
    altitude = parse_float_field(sentence.field(1), required=True)
    unit = sentence.field(2) if len(sentence.fields) >= 2 else ""
    if unit.lower() == "f":
        altitude *= _FEET_TO_METERS
    return {"altitude": altitude}


@dataclass(frozen=True)
class _ExtractionRule:
    field_count: int
    extract: Callable[[Sentence], FixValues]


_RULES: dict[str, _ExtractionRule] = {
    "GGA": _ExtractionRule(field_count=9, extract=_extract_gga),
    "GLL": _ExtractionRule(field_count=5, extract=_extract_gll),
    "RMC": _ExtractionRule(field_count=8, extract=_extract_rmc),
    "VTG": _ExtractionRule(field_count=1, extract=_extract_vtg),
    "RMZ": _ExtractionRule(field_count=1, extract=_extract_rmz),
}

SUPPORTED_SENTENCE_TYPES = tuple(_RULES)


def extract_fix(sentence: Sentence) -> Fix | None:
    """Populate a ``Fix`` from a decoded sentence.

    Args:
        sentence: A checksum-validated sentence.

    Returns:
        A ``Fix`` carrying only the fields this sentence type defines, or
        None if the talker or sentence type is not supported.

    Raises:
        MalformedSentenceError: If the sentence has too few fields.
        NumericParseError: If a consumed field is present but malformed.
    """
    if sentence.talker_id not in VALID_TALKER_IDS:
        return None

    rule = _RULES.get(sentence.sentence_type)
    if rule is None:
        return None

    if len(sentence.fields) < rule.field_count:
        raise MalformedSentenceError(
            f"{sentence.tag} needs {rule.field_count} fields, "
            f"got {len(sentence.fields)}"
        )

    values = rule.extract(sentence)
    return Fix(**{name: value for name, value in values.items() if value is not None})


def parse_fix(line: str) -> Fix | None:
    """Decode one raw line into a ``Fix``.

    This is the main entry point for the ingestion path. It performs:
    1. Whitespace stripping (handles \\r\\n line endings)
    2. Framing and checksum validation
    3. Sentence-type dispatch and field extraction

    Returns:
        A ``Fix``, or None if the line is not a sentence, fails its
        checksum, has an unsupported type, or has a malformed field.
        Failures are logged at DEBUG level and never raised.

    Example:
        >>> fix = parse_fix("$GNGGA,123519.00,4807.038,N,01131.000,E,1,08,0.9,545.4,M,47.0,M,,*7F")
        >>> fix.latitude, fix.fixed
        (48.1173, True)
    """
    try:
        sentence = decode_sentence(line)
        if sentence is None:
            return None
        return extract_fix(sentence)
    except SentenceError as e:
        logger.debug("Dropped sentence %r: %s", line.strip(), e)
        return None

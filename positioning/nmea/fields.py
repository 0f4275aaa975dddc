"""NMEA field parsing utilities.

NMEA fields are comma-separated and may be empty (consecutive commas indicate
missing data). These utilities return None for an empty optional field,
allowing callers to keep their default, and raise ``NumericParseError`` for
a field that is present but malformed, or empty but required, which fails
the whole sentence.
"""

import math

from positioning.nmea.errors import NumericParseError

# Supported NMEA talker IDs for multi-constellation GNSS receivers.
# Each 2-character prefix identifies the satellite system:
#   GP = GPS (USA)
#   GN = Multi-GNSS (combined solution)
#   GL = GLONASS (Russia)
#   GA = Galileo (Europe)
#   GB = BeiDou (China)
#   GQ = QZSS (Japan)
#   PG = Garmin proprietary (PGRMZ altitude)
VALID_TALKER_IDS = ("GP", "GN", "GL", "GA", "GB", "GQ", "PG")

_SECONDS_PER_HOUR = 3600
_SECONDS_PER_MINUTE = 60


def _missing(value: str, required: bool, kind: str = "number") -> None:
    if required:
        raise NumericParseError(value, kind)
    return None


def _is_ascii_decimal(value: str) -> bool:
    return value.isascii() and value.isdecimal()


def parse_float_field(value: str, required: bool = False) -> float | None:
    """Parse a string field to float, returning None if empty.

    Args:
        value: String value from an NMEA field
        required: Treat an empty field as malformed instead of absent

    Returns:
        Parsed float value, or None if the field is empty

    Raises:
        NumericParseError: If the field is not a finite decimal number, or
            is empty and ``required`` is set.

    Example:
        >>> parse_float_field("545.4")
        545.4
        >>> parse_float_field("")  # empty field
        None
    """
    if not value:
        return _missing(value, required)
    if not value.isascii():
        raise NumericParseError(value)
    try:
        result = float(value)
    except ValueError as e:
        raise NumericParseError(value) from e
    if not math.isfinite(result):
        raise NumericParseError(value)
    return result


def parse_int_field(value: str, required: bool = False) -> int | None:
    """Parse a string field to int, returning None if empty.

    Used for indicators such as fix quality.

    Raises:
        NumericParseError: If the field is not an integer.
    """
    if not value:
        return _missing(value, required, "integer")
    if not value.isascii():
        raise NumericParseError(value, "integer")
    try:
        return int(value)
    except ValueError as e:
        raise NumericParseError(value, "integer") from e


def parse_time_of_day(value: str, required: bool = False) -> float | None:
    """Convert an NMEA UTC time field (HHMMSS.ss) to seconds since midnight.

    Example:
        >>> parse_time_of_day("123519.00")
        45319.0
        >>> parse_time_of_day("")
        None
    """
    if not value:
        return _missing(value, required, "time of day")
    if len(value) < 6 or not _is_ascii_decimal(value[:6]):
        raise NumericParseError(value, "time of day")

    hours = int(value[0:2])
    minutes = int(value[2:4])
    seconds = parse_float_field(value[4:])
    return hours * _SECONDS_PER_HOUR + minutes * _SECONDS_PER_MINUTE + seconds


def _parse_coordinate_parts(value: str) -> tuple[int, float]:
    """Parse NMEA coordinate into degrees and minutes components.

    NMEA coordinates use DDMM.MMMM (latitude) or DDDMM.MMMM (longitude)
    format. The 2 digits before the decimal point are always minutes,
    everything before them is degrees.

    Example:
        >>> _parse_coordinate_parts("4807.038")  # 48° 07.038'
        (48, 7.038)
        >>> _parse_coordinate_parts("01131.000")  # 11° 31.000'
        (11, 31.0)
    """
    dot_position = value.find(".")
    if dot_position == -1:
        dot_position = len(value)
    if dot_position < 2 or not _is_ascii_decimal(value[:dot_position]):
        raise NumericParseError(value, "coordinate")

    degrees = int(value[: dot_position - 2] or "0")
    minutes = parse_float_field(value[dot_position - 2 :])
    return degrees, minutes


def convert_to_decimal_degrees(
    value: str,
    direction: str,
) -> float | None:
    """Convert NMEA coordinate (DDDMM.MMMM) to decimal degrees.

    The conversion formula is:
        decimal_degrees = degrees + (minutes / 60)

    with South/West hemispheres negated.

    Args:
        value: Coordinate in DDMM.MMMM or DDDMM.MMMM format (e.g., "4807.038")
        direction: Hemisphere indicator ("N", "S", "E", or "W")

    Returns:
        Decimal degrees (positive for N/E, negative for S/W),
        or None if the coordinate field is empty

    Raises:
        NumericParseError: If the coordinate field is malformed.

    Example:
        >>> convert_to_decimal_degrees("4807.038", "N")
        48.1173  # 48° + 7.038'/60
        >>> convert_to_decimal_degrees("01131.000", "W")
        -11.5166667  # negative for West
    """
    if not value:
        return None

    degrees, minutes = _parse_coordinate_parts(value)
    decimal_degrees = degrees + minutes / 60.0

    if direction in ("S", "W"):
        return -decimal_degrees

    return decimal_degrees

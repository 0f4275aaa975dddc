"""NMEA framing and checksum validation.

NMEA 0183 sentences use a simple XOR checksum for data integrity verification.
The checksum is calculated over all characters between '$' and '*' (exclusive),
then represented as a two-digit hexadecimal number after the '*'.

Example sentence structure:
    $GNGGA,123519.00,4807.038,N,01131.000,E,1,08,0.9,545.4,M,47.0,M,,*7F
    ^                         checksum content                        ^^
    start                                                          checksum (0x7F = 127)

Decoding outcomes:
    - framing failure (no '$', no '*', truncated or non-hex checksum):
      ``decode_sentence`` returns None; the line simply is not a sentence.
    - checksum mismatch: ``ChecksumMismatchError`` is raised.
    - otherwise a ``Sentence`` with the tag and the positional fields.
"""

from positioning.nmea.errors import ChecksumMismatchError
from positioning.nmea.types import Sentence

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _extract_checksum_parts(sentence: str) -> tuple[str, str] | None:
    """Extract the payload content and provided checksum from an NMEA sentence.

    NMEA sentences follow the format: $<content>*<checksum>
    This function separates these components for validation.

    Args:
        sentence: Raw NMEA sentence string (e.g., "$GNGGA,...*7F")

    Returns:
        A tuple of (content, checksum_hex) if the sentence has valid structure,
        or None if:
        - Missing '$' start delimiter
        - Missing '*' checksum delimiter
        - Checksum is not exactly 2 hexadecimal characters

    Example:
        >>> _extract_checksum_parts("$GNGGA,123519*7F")
        ('GNGGA,123519', '7F')
    """
    if not sentence.startswith("$") or "*" not in sentence:
        return None

    end = sentence.index("*")
    content = sentence[1:end]
    provided = sentence[end + 1 :]

    if len(provided) != 2 or not _HEX_DIGITS.issuperset(provided):
        return None

    return content, provided


def calculate_checksum(content: str) -> int:
    """Calculate the XOR checksum of a content string.

    The NMEA checksum algorithm XORs the character code of each character
    in the content. A single changed character always changes the result.

    Args:
        content: The string between '$' and '*' (exclusive)

    Returns:
        Integer checksum value (0-255 for ASCII input)

    Example:
        >>> f"{calculate_checksum('GPXXX,bad'):02X}"
        '04'
    """
    result = 0
    for character in content:
        result ^= ord(character)
    return result


def decode_sentence(line: str) -> Sentence | None:
    """Validate framing and checksum of one line and split it into fields.

    Args:
        line: One line read from the receiver. Surrounding whitespace,
            including the ``\\r\\n`` terminator, is ignored.

    Returns:
        The decoded ``Sentence``, or None if the line is not framed as an
        NMEA sentence.

    Raises:
        ChecksumMismatchError: If the body does not match its checksum.

    Example:
        >>> decode_sentence("$GNVTG,054.7,T,034.4,M,005.5,N,010.2,K,A*3B").tag
        'GNVTG'
    """
    parts = _extract_checksum_parts(line.strip())
    if parts is None:
        return None

    content, provided = parts
    calculated = calculate_checksum(content)
    declared = int(provided, 16)
    if calculated != declared:
        raise ChecksumMismatchError(calculated, declared)

    tag, *fields = content.split(",")
    return Sentence(tag=tag, fields=tuple(fields))

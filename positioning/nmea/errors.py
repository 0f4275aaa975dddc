"""Exceptions raised while decoding NMEA sentences.

All of them derive from ``SentenceError`` so that the ingestion path can drop
a bad sentence with a single ``except`` clause and move on to the next line.
"""


class SentenceError(ValueError):
    """Base class for a sentence that cannot be turned into a fix."""


class ChecksumMismatchError(SentenceError):
    """The XOR of the sentence body does not match the declared checksum."""

    def __init__(self, calculated: int, declared: int) -> None:
        super().__init__(
            f"Checksum mismatch: calculated {calculated:02X}, declared {declared:02X}"
        )
        self.calculated = calculated
        self.declared = declared


class NumericParseError(SentenceError):
    """A field is present but cannot be parsed as a number."""

    def __init__(self, value: str, kind: str = "number") -> None:
        super().__init__(f"Cannot parse {value!r} as {kind}")
        self.value = value


class MalformedSentenceError(SentenceError):
    """A sentence has fewer fields than its type requires."""

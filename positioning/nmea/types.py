"""NMEA data types for decoded sentences and position fixes.

Design Decisions:
    1. Zero defaults instead of None: a ``Fix`` is produced by one sentence
       and only carries the fields that sentence type defines. Everything
       else stays at zero, so callers must not assume a ``Fix`` is complete.

    2. Derived ``fixed`` flag: navigation validity is computed from
       ``quality`` rather than stored, so it can never disagree with it.
       Sentence types without a quality field therefore never produce a
       fixed ``Fix``.

    3. Frozen dataclasses: a ``Fix`` is shared between the ingestion and
       upload threads and is never mutated after construction.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Sentence:
    """A checksum-validated NMEA sentence split into its fields.

    Attributes:
        tag: Field 0, the talker ID followed by the sentence type
            (e.g., "GNGGA", "GPRMC", "PGRMZ").
        fields: The positional fields after the tag. Fields may be empty
            strings; index 0 here is NMEA field 1.

    Example:
        >>> sentence = decode_sentence("$GNVTG,054.7,T,034.4,M,005.5,N,010.2,K,A*3B")
        >>> sentence.talker_id, sentence.sentence_type
        ('GN', 'VTG')
        >>> sentence.field(1)
        '054.7'
    """

    tag: str
    fields: tuple[str, ...]

    @property
    def talker_id(self) -> str:
        return self.tag[:-3]

    @property
    def sentence_type(self) -> str:
        return self.tag[-3:]

    def field(self, index: int) -> str:
        """Return NMEA field ``index`` (1-based, as in sentence diagrams)."""
        return self.fields[index - 1]


@dataclass(frozen=True)
class Fix:
    """A decoded, possibly partial position/time/quality snapshot.

    Attributes:
        time_of_day: UTC seconds since midnight, from HHMMSS.ss.
            0.0 if the sentence type does not carry a time.

        latitude: Decimal degrees, positive=North. 0.0 if unset.

        longitude: Decimal degrees, positive=East. 0.0 if unset.

        quality: GGA fix quality indicator:
            0 = Invalid (no fix, also the default for other sentence types)
            1 = GPS fix (SPS)
            2 = DGPS fix
            4 = RTK Fixed
            5 = RTK Float
            6 = Dead reckoning

        altitude: Altitude above mean sea level in meters.

        course: Course over ground in degrees relative to true north.

        speed: Speed over ground in knots.
    """

    time_of_day: float = 0.0
    latitude: float = 0.0
    longitude: float = 0.0
    quality: int = 0
    altitude: float = 0.0
    course: float = 0.0
    speed: float = 0.0

    @property
    def fixed(self) -> bool:
        """True only if the receiver reported a fix (quality > 0)."""
        return self.quality > 0

    @property
    def has_position(self) -> bool:
        """False for the (0, 0) no-fix sentinel."""
        return not (self.latitude == 0.0 and self.longitude == 0.0)

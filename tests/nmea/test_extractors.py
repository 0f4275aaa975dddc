"""Tests for sentence-type dispatch and fix extraction."""

import pytest

from positioning.nmea import (
    SUPPORTED_SENTENCE_TYPES,
    Fix,
    MalformedSentenceError,
    NumericParseError,
    decode_sentence,
    extract_fix,
    parse_fix,
)
from tests.helpers import with_checksum

GGA = "$GNGGA,123519.00,4807.038,N,01131.000,E,1,08,0.9,545.4,M,47.0,M,,*7F"
GLL = "$GPGLL,4916.45,N,12311.12,W,225444,A,A*5C"
RMC = "$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A"
RMC_NO_MOTION = "$GPRMC,123519,A,4807.038,N,01131.000,E,,,230394,003.1,W*66"
VTG = "$GNVTG,054.7,T,034.4,M,005.5,N,010.2,K,A*3B"
VTG_STATIONARY = "$GNVTG,,T,,M,0.0,N,0.0,K,A*3D"
RMZ_FEET = "$PGRMZ,246,f,3*1B"
RMZ_METERS = "$GPRMZ,93.4,M,3*10"


def _extract(line: str) -> Fix | None:
    sentence = decode_sentence(line)
    assert sentence is not None
    return extract_fix(sentence)


class TestSupportedTypes:
    def test_exactly_five_sentence_types(self):
        assert sorted(SUPPORTED_SENTENCE_TYPES) == ["GGA", "GLL", "RMC", "RMZ", "VTG"]


class TestGGA:
    def test_position_time_quality_altitude(self):
        fix = _extract(GGA)
        assert fix is not None
        assert fix.time_of_day == pytest.approx(45319.0)
        assert fix.latitude == pytest.approx(48.1173, abs=1e-4)
        assert fix.longitude == pytest.approx(11.516667, abs=1e-4)
        assert fix.quality == 1
        assert fix.altitude == pytest.approx(545.4)
        assert fix.fixed is True

    def test_leaves_course_and_speed_at_default(self):
        fix = _extract(GGA)
        assert fix is not None
        assert fix.course == 0.0 and fix.speed == 0.0

    def test_southern_western_hemispheres(self):
        fix = _extract("$GPGGA,123519.00,3356.123,S,15112.456,W,2,10,0.8,100.0,M,20.0,M,,*65")
        assert fix is not None
        assert fix.latitude == pytest.approx(-33.93538333, rel=1e-4)
        assert fix.longitude == pytest.approx(-151.20760, rel=1e-4)
        assert fix.quality == 2

    def test_no_fix_sentence_is_not_fixed(self):
        fix = _extract(with_checksum("GNGGA,123519.00,,,,,0,00,,0.0,M,,M,,"))
        assert fix is not None
        assert fix.fixed is False
        assert fix.has_position is False

    def test_quality_zero_is_not_fixed(self):
        fix = _extract("$GPGGA,123519.00,4807.038,N,01131.000,E,0,08,0.9,545.4,M,47.0,M,,*60")
        assert fix is not None
        assert fix.fixed is False

    @pytest.mark.parametrize(
        "body",
        [
            "GPGGA,123519.00,4807.038,N,01131.000,E,1,08,0.9,,M,47.0,M,,",
            "GPGGA,123519.00,4807.038,N,01131.000,E,,08,0.9,545.4,M,47.0,M,,",
            "GPGGA,,4807.038,N,01131.000,E,1,08,0.9,545.4,M,47.0,M,,",
        ],
    )
    def test_empty_required_field_raises(self, body):
        with pytest.raises(NumericParseError):
            _extract(with_checksum(body))

    def test_empty_altitude_is_never_a_fix(self):
        line = with_checksum("GPGGA,123519.00,4807.038,N,01131.000,E,1,08,0.9,,M,47.0,M,,")
        assert parse_fix(line) is None

    def test_no_fix_without_altitude_is_dropped(self):
        assert parse_fix("$GNGGA,123519.00,,,,,0,00,,,,,,,*5B") is None

    def test_non_ascii_digits_are_dropped(self):
        line = with_checksum(
            "GPGGA,1235\u00b29.00,4807.038,N,01131.000,E,1,08,0.9,545.4,M,47.0,M,,"
        )
        assert parse_fix(line) is None

    def test_unparseable_altitude_raises(self):
        line = "$GPGGA,123519.00,4807.038,N,01131.000,E,1,08,0.9,abc,M,47.0,M,,*2F"
        with pytest.raises(NumericParseError):
            _extract(line)

    def test_too_few_fields_raises(self):
        with pytest.raises(MalformedSentenceError):
            _extract(with_checksum("GNGGA,123519.00,4807.038,N"))

    def test_multi_constellation_talkers(self):
        for talker in ("GP", "GN", "GL", "GA", "GB", "GQ"):
            line = with_checksum(
                f"{talker}GGA,123519.00,4807.038,N,01131.000,E,1,08,0.9,545.4,M,47.0,M,,"
            )
            fix = _extract(line)
            assert fix is not None and fix.fixed, talker


class TestGLL:
    def test_position_and_time(self):
        fix = _extract(GLL)
        assert fix is not None
        assert fix.latitude == pytest.approx(49.274167, abs=1e-5)
        assert fix.longitude == pytest.approx(-123.185333, abs=1e-5)
        assert fix.time_of_day == pytest.approx(82484.0)

    def test_empty_time_raises(self):
        with pytest.raises(NumericParseError):
            _extract(with_checksum("GPGLL,4916.45,N,12311.12,W,,A,A"))

    def test_never_fixed_without_quality(self):
        fix = _extract(GLL)
        assert fix is not None
        assert fix.quality == 0 and fix.fixed is False


class TestRMC:
    def test_time_position_speed_course(self):
        fix = _extract(RMC)
        assert fix is not None
        assert fix.time_of_day == pytest.approx(45319.0)
        assert fix.latitude == pytest.approx(48.1173, abs=1e-4)
        assert fix.longitude == pytest.approx(11.516667, abs=1e-4)
        assert fix.speed == pytest.approx(22.4)
        assert fix.course == pytest.approx(84.4)
        assert fix.altitude == 0.0

    def test_empty_speed_and_course_keep_defaults(self):
        fix = _extract(RMC_NO_MOTION)
        assert fix is not None
        assert fix.speed == 0.0 and fix.course == 0.0
        assert fix.latitude == pytest.approx(48.1173, abs=1e-4)

    def test_empty_time_raises(self):
        with pytest.raises(NumericParseError):
            _extract(
                with_checksum("GPRMC,,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W")
            )

    def test_unparseable_speed_raises(self):
        line = "$GPRMC,123519,A,4807.038,N,01131.000,E,fast,084.4,230394,003.1,W*40"
        with pytest.raises(NumericParseError):
            _extract(line)


class TestVTG:
    def test_course_only(self):
        fix = _extract(VTG)
        assert fix == Fix(course=54.7)

    def test_stationary_empty_course(self):
        assert _extract(VTG_STATIONARY) == Fix()


class TestRMZ:
    def test_feet_converted_to_meters(self):
        fix = _extract(RMZ_FEET)
        assert fix is not None
        assert fix.altitude == pytest.approx(74.9808)

    def test_empty_altitude_raises(self):
        with pytest.raises(NumericParseError):
            _extract(with_checksum("PGRMZ,,f,3"))

    def test_meters_kept(self):
        fix = _extract(RMZ_METERS)
        assert fix == Fix(altitude=93.4)


class TestUnsupported:
    def test_unknown_sentence_type_returns_none(self):
        line = "$GPGSV,3,1,12,32,88,156,36,14,65,219,35,10,56,074,39,18,44,304,25*76"
        assert _extract(line) is None

    def test_unknown_talker_returns_none(self):
        line = with_checksum(
            "XXGGA,123519.00,4807.038,N,01131.000,E,1,08,0.9,545.4,M,47.0,M,,"
        )
        assert _extract(line) is None


class TestParseFix:
    def test_valid_line(self):
        fix = parse_fix(GGA + "\r\n")
        assert fix is not None and fix.fixed

    @pytest.mark.parametrize(
        "line",
        [
            "$GPXXX,bad*00",
            "$GPXXX,bad*04",
            GGA[:-2] + "00",
            "$GPGGA,123519.00,4807.038,N,01131.000,E,1,08,0.9,abc,M,47.0,M,,*2F",
            "not a sentence",
            "",
        ],
    )
    def test_failures_return_none_without_raising(self, line):
        assert parse_fix(line) is None

    def test_fix_is_immutable(self):
        fix = parse_fix(GGA)
        assert fix is not None
        with pytest.raises(AttributeError):
            fix.latitude = 0.0

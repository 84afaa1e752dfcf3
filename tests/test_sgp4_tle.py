"""Tests for SGP4 TLE parsing, formatting and gravity constants."""

from dataclasses import replace
from math import pi

import pytest

from orbitax.sgp4 import (
    GRAVITY_MODELS,
    WGS72,
    WGS72OLD,
    WGS84,
    TLEElements,
    TLEParseError,
    compute_checksum,
    format_tle,
    parse_tle,
    validate_tle_line,
)

# ISS TLE from the sgp4 reference test suite
ISS_LINE1 = "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927"
ISS_LINE2 = "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537"

# Starlink-era LEO with a classified marker and an implied-exponent "+0"
LEO_LINE1 = "1 44714C 19074B   24257.74770833  .00012054  00000+0  80755-3 0  2576"
LEO_LINE2 = "2 44714  53.0541  99.4927 0001373  86.0479  80.2511 15.06391223    18"

# Polar orbit with a mostly blank line 1
POLAR_LINE1 = "1     1U          20  1.00000000  .00000000  00000-0  00000-0 0    07"
POLAR_LINE2 = "2     1  90.0000   0.0000 0010000   0.0000   0.0000 15.21936719    07"


def _with_checksum(line: str) -> str:
    """Replace the checksum digit of a 69-column line."""
    return line[:68] + str(compute_checksum(line))


class TestEarthGravityConstants:
    """Test gravity constant sets match reference sgp4 library."""

    def test_wgs72old_values(self) -> None:
        assert WGS72OLD.mu == 398600.79964
        assert WGS72OLD.radiusearthkm == 6378.135
        assert WGS72OLD.xke == pytest.approx(0.0743669161, rel=1e-8)
        assert WGS72OLD.j3oj2 == pytest.approx(WGS72OLD.j3 / WGS72OLD.j2, rel=1e-12)

    def test_wgs72_values(self) -> None:
        assert WGS72.mu == 398600.8
        assert WGS72.radiusearthkm == 6378.135
        assert WGS72.j2 == 0.001082616
        assert WGS72.j3 == -0.00000253881
        assert WGS72.j4 == -0.00000165597

    def test_wgs84_values(self) -> None:
        assert WGS84.mu == 398600.5
        assert WGS84.radiusearthkm == 6378.137
        assert WGS84.j2 == 0.00108262998905

    def test_xke_derived(self) -> None:
        from math import sqrt

        for grav in (WGS72, WGS84):
            expected = 60.0 / sqrt(grav.radiusearthkm**3 / grav.mu)
            assert grav.xke == pytest.approx(expected, rel=1e-10)

    def test_tumin_is_inverse_xke(self) -> None:
        for grav in (WGS72OLD, WGS72, WGS84):
            assert grav.tumin == pytest.approx(1.0 / grav.xke, rel=1e-12)

    def test_models_by_name(self) -> None:
        assert GRAVITY_MODELS["wgs72"] is WGS72
        assert GRAVITY_MODELS["wgs72old"] is WGS72OLD
        assert GRAVITY_MODELS["wgs84"] is WGS84


class TestChecksum:
    """Test TLE checksum computation."""

    def test_iss_checksums(self) -> None:
        assert compute_checksum(ISS_LINE1) == 7
        assert compute_checksum(ISS_LINE2) == 7

    def test_leo_checksums(self) -> None:
        assert compute_checksum(LEO_LINE1) == 6
        assert compute_checksum(LEO_LINE2) == 8

    def test_digits_contribute_value(self) -> None:
        line = "1" + " " * 67
        assert compute_checksum(line) == 1

    def test_minus_contributes_one(self) -> None:
        line = "-" + " " * 67
        assert compute_checksum(line) == 1

    def test_plus_and_letters_ignored(self) -> None:
        line = "+ABC." + " " * 63
        assert compute_checksum(line) == 0


class TestValidateTleLine:
    """Test TLE line format validation."""

    def test_valid_lines(self) -> None:
        assert validate_tle_line(ISS_LINE1, 1) == ISS_LINE1
        assert validate_tle_line(ISS_LINE2, 2) == ISS_LINE2

    def test_trailing_whitespace_stripped(self) -> None:
        assert validate_tle_line(ISS_LINE1 + "  \n", 1) == ISS_LINE1

    def test_too_short_raises(self) -> None:
        with pytest.raises(TLEParseError, match="expected 69") as exc:
            validate_tle_line("1 25544", 1)
        assert exc.value.field == "length"

    def test_too_long_raises(self) -> None:
        with pytest.raises(TLEParseError, match="expected 69"):
            validate_tle_line(ISS_LINE1 + "0", 1)

    def test_wrong_line_number_raises(self) -> None:
        with pytest.raises(TLEParseError, match="does not start with"):
            validate_tle_line(ISS_LINE2, 1)

    def test_bad_checksum_raises(self) -> None:
        bad_line = ISS_LINE1[:68] + "0"
        with pytest.raises(TLEParseError, match="checksum mismatch") as exc:
            validate_tle_line(bad_line, 1)
        assert exc.value.line_number == 1
        assert exc.value.field == "checksum"

    def test_non_digit_checksum_raises(self) -> None:
        with pytest.raises(TLEParseError, match="non-digit checksum"):
            validate_tle_line(ISS_LINE1[:68] + "X", 1)

    def test_parse_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            validate_tle_line("garbage", 1)


class TestParseTle:
    """Test TLE field decoding."""

    def test_iss_identification(self) -> None:
        elem = parse_tle(ISS_LINE1, ISS_LINE2)
        assert elem.satnum == "25544"
        assert elem.classification == "U"
        assert elem.intldesg == "98067A"
        assert elem.ephemeris_type == 0
        assert elem.element_number == 292
        assert elem.rev_number == 56353

    def test_iss_epoch(self) -> None:
        elem = parse_tle(ISS_LINE1, ISS_LINE2)
        assert elem.epoch_year == 8
        assert elem.full_year == 2008
        assert elem.epoch_day == pytest.approx(264.51782528, rel=1e-12)

    def test_iss_drag_terms(self) -> None:
        elem = parse_tle(ISS_LINE1, ISS_LINE2)
        assert elem.ndot == pytest.approx(-0.00002182, rel=1e-12)
        assert elem.nddot == 0.0
        assert elem.bstar == pytest.approx(-0.11606e-4, rel=1e-12)

    def test_iss_orbital_elements(self) -> None:
        elem = parse_tle(ISS_LINE1, ISS_LINE2)
        assert elem.inclination == pytest.approx(51.6416, rel=1e-12)
        assert elem.raan == pytest.approx(247.4627, rel=1e-12)
        assert elem.eccentricity == pytest.approx(0.0006703, rel=1e-12)
        assert elem.arg_perigee == pytest.approx(130.5360, rel=1e-12)
        assert elem.mean_anomaly == pytest.approx(325.0288, rel=1e-12)
        assert elem.mean_motion == pytest.approx(15.72125391, rel=1e-12)

    def test_leo_classification_and_exponent(self) -> None:
        elem = parse_tle(LEO_LINE1, LEO_LINE2)
        assert elem.classification == "C"
        assert elem.full_year == 2024
        assert elem.bstar == pytest.approx(0.80755e-3, rel=1e-12)
        assert elem.rev_number == 1
        assert elem.period_minutes == pytest.approx(1440.0 / 15.06391223, rel=1e-12)

    def test_polar_orbit_blank_fields(self) -> None:
        elem = parse_tle(POLAR_LINE1, POLAR_LINE2)
        assert elem.satnum == "    1"
        assert elem.intldesg == ""
        assert elem.full_year == 2020
        assert elem.inclination == 90.0
        assert elem.eccentricity == pytest.approx(0.001, rel=1e-12)

    def test_matches_reference_sgp4(self) -> None:
        """Verify parsed elements agree with the python-sgp4 library."""
        from sgp4.api import WGS72 as SGP4_WGS72
        from sgp4.api import Satrec

        ref = Satrec.twoline2rv(ISS_LINE1, ISS_LINE2, SGP4_WGS72)
        elem = parse_tle(ISS_LINE1, ISS_LINE2)
        xpdotp = 1440.0 / (2.0 * pi)

        assert elem.epoch_day == pytest.approx(ref.epochdays, rel=1e-12)
        assert elem.bstar == pytest.approx(ref.bstar, rel=1e-10)
        assert elem.inclination * pi / 180.0 == pytest.approx(ref.inclo, rel=1e-10)
        assert elem.raan * pi / 180.0 == pytest.approx(ref.nodeo, rel=1e-10)
        assert elem.eccentricity == pytest.approx(ref.ecco, rel=1e-10)
        assert elem.arg_perigee * pi / 180.0 == pytest.approx(ref.argpo, rel=1e-10)
        assert elem.mean_anomaly * pi / 180.0 == pytest.approx(ref.mo, rel=1e-10)
        assert elem.mean_motion / xpdotp == pytest.approx(ref.no_kozai, rel=1e-10)
        jd, fraction = elem.epoch_jd
        assert jd == pytest.approx(ref.jdsatepoch, abs=1e-9)
        assert fraction == pytest.approx(ref.jdsatepochF, abs=1e-10)

    def test_two_digit_year_pivot(self) -> None:
        """Years 57-99 map to 1957-1999, 00-56 to 2000-2056."""
        for yy, expected in (("57", 1957), ("99", 1999), ("00", 2000), ("56", 2056)):
            line1 = _with_checksum(ISS_LINE1[:18] + yy + ISS_LINE1[20:])
            assert parse_tle(line1, ISS_LINE2).full_year == expected

    def test_frozen(self) -> None:
        elem = parse_tle(ISS_LINE1, ISS_LINE2)
        with pytest.raises(AttributeError):
            elem.eccentricity = 0.5


class TestParseTleErrors:
    """Every malformed card is rejected with the offending line and field."""

    def test_corrupt_checksum_line1(self) -> None:
        bad = ISS_LINE1[:68] + str((int(ISS_LINE1[68]) + 1) % 10)
        with pytest.raises(TLEParseError) as exc:
            parse_tle(bad, ISS_LINE2)
        assert exc.value.line_number == 1
        assert exc.value.field == "checksum"

    def test_corrupt_checksum_line2(self) -> None:
        bad = ISS_LINE2[:68] + str((int(ISS_LINE2[68]) + 1) % 10)
        with pytest.raises(TLEParseError) as exc:
            parse_tle(ISS_LINE1, bad)
        assert exc.value.line_number == 2
        assert exc.value.field == "checksum"

    def test_corrupt_digit_in_body(self) -> None:
        """Changing a digit without updating the checksum is caught."""
        bad = ISS_LINE2[:9] + "6" + ISS_LINE2[10:]
        with pytest.raises(TLEParseError, match="checksum"):
            parse_tle(ISS_LINE1, bad)

    def test_lines_swapped(self) -> None:
        with pytest.raises(TLEParseError, match="does not start with"):
            parse_tle(ISS_LINE2, ISS_LINE1)

    def test_mismatched_satnum(self) -> None:
        bad_line2 = _with_checksum("2 99999" + ISS_LINE2[7:])
        with pytest.raises(TLEParseError, match="do not match") as exc:
            parse_tle(ISS_LINE1, bad_line2)
        assert exc.value.field == "satnum"

    def test_blank_satnum(self) -> None:
        line1 = _with_checksum("1      " + ISS_LINE1[7:])
        line2 = _with_checksum("2      " + ISS_LINE2[7:])
        with pytest.raises(TLEParseError, match="blank satellite number"):
            parse_tle(line1, line2)

    def test_malformed_inclination(self) -> None:
        line2 = _with_checksum(ISS_LINE2[:8] + " 51.6a16" + ISS_LINE2[16:])
        with pytest.raises(TLEParseError, match="inclination") as exc:
            parse_tle(ISS_LINE1, line2)
        assert exc.value.line_number == 2
        assert exc.value.field == "inclination"

    def test_inclination_out_of_range(self) -> None:
        line2 = _with_checksum(ISS_LINE2[:8] + "191.6416" + ISS_LINE2[16:])
        with pytest.raises(TLEParseError, match="outside the range"):
            parse_tle(ISS_LINE1, line2)

    def test_malformed_bstar_exponent(self) -> None:
        line1 = _with_checksum(ISS_LINE1[:53] + "-11606x4" + ISS_LINE1[61:])
        with pytest.raises(TLEParseError) as exc:
            parse_tle(line1, ISS_LINE2)
        assert exc.value.field == "drag term"

    def test_blank_mean_motion(self) -> None:
        line2 = _with_checksum(ISS_LINE2[:52] + " " * 11 + ISS_LINE2[63:])
        with pytest.raises(TLEParseError, match="mean motion"):
            parse_tle(ISS_LINE1, line2)

    def test_epoch_day_out_of_range(self) -> None:
        line1 = _with_checksum(ISS_LINE1[:20] + "400.51782528" + ISS_LINE1[32:])
        with pytest.raises(TLEParseError, match="epoch day"):
            parse_tle(line1, ISS_LINE2)


class TestFormatTle:
    """Writing elements back out in the fixed-column format."""

    def test_leo_round_trips_exactly(self) -> None:
        assert format_tle(parse_tle(LEO_LINE1, LEO_LINE2)) == (LEO_LINE1, LEO_LINE2)

    def test_iss_line2_round_trips_exactly(self) -> None:
        _, line2 = format_tle(parse_tle(ISS_LINE1, ISS_LINE2))
        assert line2 == ISS_LINE2

    def test_iss_round_trips_values(self) -> None:
        elem = parse_tle(ISS_LINE1, ISS_LINE2)
        line1, line2 = format_tle(elem)
        assert len(line1) == 69
        assert len(line2) == 69
        assert parse_tle(line1, line2) == elem

    def test_zero_exponent_field(self) -> None:
        line1, _ = format_tle(parse_tle(ISS_LINE1, ISS_LINE2))
        assert line1[44:52] == " 00000+0"

    def test_modified_elements_reparse(self) -> None:
        elem = replace(parse_tle(ISS_LINE1, ISS_LINE2), bstar=0.12345e-2, eccentricity=0.1234567)
        again = parse_tle(*format_tle(elem))
        assert again.bstar == pytest.approx(0.12345e-2, rel=1e-12)
        assert again.eccentricity == pytest.approx(0.1234567, rel=1e-12)

    def test_tiny_drag_term_keeps_single_digit_exponent(self) -> None:
        elem = replace(parse_tle(ISS_LINE1, ISS_LINE2), bstar=1.2e-11)
        line1, line2 = format_tle(elem)
        assert len(line1) == 69
        assert line1[53:61] == " 01200-9"
        assert parse_tle(line1, line2).bstar == pytest.approx(1.2e-11, rel=1e-12)

    def test_drag_term_below_resolution_is_zero(self) -> None:
        elem = replace(parse_tle(ISS_LINE1, ISS_LINE2), bstar=1.0e-16)
        line1, _ = format_tle(elem)
        assert line1[53:61] == " 00000+0"

    @pytest.mark.parametrize("bstar", [1.0e10, float("nan"), float("inf")])
    def test_unrepresentable_drag_term_raises(self, bstar) -> None:
        elem = replace(parse_tle(ISS_LINE1, ISS_LINE2), bstar=bstar)
        with pytest.raises(ValueError, match="bstar"):
            format_tle(elem)

    def test_output_passes_validation(self) -> None:
        for l1, l2 in ((ISS_LINE1, ISS_LINE2), (POLAR_LINE1, POLAR_LINE2)):
            line1, line2 = format_tle(parse_tle(l1, l2))
            validate_tle_line(line1, 1)
            validate_tle_line(line2, 2)

    def test_elements_type(self) -> None:
        assert isinstance(parse_tle(ISS_LINE1, ISS_LINE2), TLEElements)

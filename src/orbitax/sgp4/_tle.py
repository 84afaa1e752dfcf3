"""
TLE parsing and formatting for the SGP4/SDP4 propagator.

Provides pure-Python functions to validate and parse Two-Line Element (TLE)
sets into :class:`TLEElements`, and to write element sets back out in the
fixed-column format.  Every field is checked; a malformed card raises
:class:`TLEParseError` naming the offending line and field instead of being
parsed on a best-effort basis.
"""

from __future__ import annotations

from collections.abc import Callable
from math import floor, isfinite, log10

from orbitax.sgp4._errors import TLEParseError
from orbitax.sgp4._types import TLEElements

TLE_LINE_LENGTH = 69


def compute_checksum(line: str) -> int:
    """Compute the TLE checksum for a line.

    The checksum is the sum of all digit characters plus 1 for each
    minus sign, modulo 10, computed over the first 68 characters.

    Args:
        line: A TLE line string (at least 68 characters).

    Returns:
        The checksum digit (0-9).
    """
    return sum((int(c) if c.isdigit() else c == "-") for c in line[:68]) % 10


def validate_tle_line(line: str, line_number: int) -> str:
    """Validate a TLE line's length, line number, and checksum.

    Args:
        line: A TLE line string. Trailing whitespace is ignored.
        line_number: Expected line number (1 or 2).

    Returns:
        The line with trailing whitespace removed.

    Raises:
        TLEParseError: If the line fails format or checksum validation.
    """
    line = line.rstrip()

    if len(line) != TLE_LINE_LENGTH:
        raise TLEParseError(
            f"TLE line {line_number} has {len(line)} characters, expected {TLE_LINE_LENGTH}: {line}",
            line_number,
            "length",
        )

    if line[0] != str(line_number) or line[1] != " ":
        raise TLEParseError(
            f"TLE line {line_number} does not start with '{line_number} ': {line}",
            line_number,
            "line_number",
        )

    checksum_char = line[68]
    if not checksum_char.isdigit():
        raise TLEParseError(
            f"TLE line {line_number} has non-digit checksum: {line}", line_number, "checksum"
        )

    expected = compute_checksum(line)
    actual = int(checksum_char)
    if expected != actual:
        raise TLEParseError(
            f"TLE line {line_number} checksum mismatch: computed {expected}, found {actual}: {line}",
            line_number,
            "checksum",
        )

    return line


def _exponent_field(text: str) -> float:
    """Decode an implied-decimal field such as ``-11606-4`` (= -0.11606e-4)."""
    sign = text[0]
    if sign not in " +-":
        raise ValueError(text)
    mantissa = float(sign.strip() + "0." + text[1:6])
    return mantissa * 10.0 ** int(text[6:8])


def _decimal_field(text: str) -> float:
    """Decode a decimal field, rejecting blanks that ``float`` would not."""
    if not text.strip():
        raise ValueError(text)
    return float(text)


def _field(
    line: str,
    line_number: int,
    name: str,
    columns: tuple[int, int],
    convert: Callable[[str], float | int],
):
    start, stop = columns
    text = line[start:stop]
    try:
        return convert(text)
    except ValueError:
        raise TLEParseError(
            f"TLE line {line_number} has invalid {name} {text!r} in columns {start + 1}-{stop}",
            line_number,
            name,
        ) from None


def _check_range(value: float, low: float, high: float, line_number: int, name: str) -> None:
    if not low <= value <= high:
        raise TLEParseError(
            f"TLE line {line_number} {name} {value} outside the range [{low}, {high}]",
            line_number,
            name,
        )


def parse_tle(line1: str, line2: str) -> TLEElements:
    """Parse a Two-Line Element set into raw orbital elements.

    Follows the fixed-column NORAD TLE format.  Values are returned in the
    units printed on the card; see :class:`TLEElements`.

    Args:
        line1: First TLE line (69 characters including checksum).
        line2: Second TLE line (69 characters including checksum).

    Returns:
        Parsed orbital elements.

    Raises:
        TLEParseError: If a line fails format validation or its checksum
            check, a field is malformed or out of range, or the satellite
            numbers do not match.
    """
    l1 = validate_tle_line(line1, 1)
    l2 = validate_tle_line(line2, 2)

    satnum = l1[2:7]
    if not satnum.strip():
        raise TLEParseError("TLE line 1 has a blank satellite number", 1, "satnum")
    if satnum != l2[2:7]:
        raise TLEParseError(
            f"Satellite numbers in lines 1 and 2 do not match: {satnum!r} != {l2[2:7]!r}",
            None,
            "satnum",
        )

    epoch_year = _field(l1, 1, "epoch year", (18, 20), lambda s: int(s.replace(" ", "0")))
    epoch_day = _field(l1, 1, "epoch day", (20, 32), _decimal_field)
    _check_range(epoch_day, 1.0, 367.0, 1, "epoch day")

    ephemeris_type = l1[62].strip() or "0"
    if not ephemeris_type.isdigit():
        raise TLEParseError(f"TLE line 1 has invalid ephemeris type {ephemeris_type!r}", 1, "ephemeris type")

    inclination = _field(l2, 2, "inclination", (8, 16), _decimal_field)
    raan = _field(l2, 2, "right ascension", (17, 25), _decimal_field)
    eccentricity = _field(
        l2, 2, "eccentricity", (26, 33), lambda s: float("0." + s.replace(" ", "0"))
    )
    arg_perigee = _field(l2, 2, "argument of perigee", (34, 42), _decimal_field)
    mean_anomaly = _field(l2, 2, "mean anomaly", (43, 51), _decimal_field)
    _check_range(inclination, 0.0, 180.0, 2, "inclination")
    _check_range(raan, 0.0, 360.0, 2, "right ascension")
    _check_range(arg_perigee, 0.0, 360.0, 2, "argument of perigee")
    _check_range(mean_anomaly, 0.0, 360.0, 2, "mean anomaly")

    return TLEElements(
        satnum=satnum,
        classification=l1[7].strip() or "U",
        intldesg=l1[9:17].rstrip(),
        epoch_year=epoch_year,
        epoch_day=epoch_day,
        ndot=_field(l1, 1, "mean motion first derivative", (33, 43), _decimal_field),
        nddot=_field(l1, 1, "mean motion second derivative", (44, 52), _exponent_field),
        bstar=_field(l1, 1, "drag term", (53, 61), _exponent_field),
        ephemeris_type=int(ephemeris_type),
        element_number=_field(l1, 1, "element number", (64, 68), lambda s: int(s.strip() or "0")),
        inclination=inclination,
        raan=raan,
        eccentricity=eccentricity,
        arg_perigee=arg_perigee,
        mean_anomaly=mean_anomaly,
        mean_motion=_field(l2, 2, "mean motion", (52, 63), _decimal_field),
        rev_number=_field(l2, 2, "revolution number", (63, 68), lambda s: int(s.strip() or "0")),
    )


def _format_exponent_field(value: float, name: str) -> str:
    """Encode a value in the 8-column implied-decimal form, e.g. ``-11606-4``.

    The exponent has a single digit.  Magnitudes below ``1e-9`` lose leading
    digits and round to zero below ``5e-15``; magnitudes of ``1e9`` or more
    cannot be written.
    """
    if not isfinite(value):
        raise ValueError(f"Cannot format {name} {value}: not finite")
    if value == 0.0:
        return " 00000+0"
    exponent = max(floor(log10(abs(value))) + 1, -9)
    digits = round(abs(value) / 10.0**exponent * 1e5)
    if digits >= 100000:
        digits //= 10
        exponent += 1
    if digits == 0:
        return " 00000+0"
    if exponent > 9:
        raise ValueError(f"Cannot format {name} {value}: exceeds the TLE exponent range")
    sign = "-" if value < 0.0 else " "
    exp_sign = "-" if exponent < 0 else "+"
    return f"{sign}{digits:05d}{exp_sign}{abs(exponent)}"


def _format_ndot(value: float) -> str:
    """Encode the first mean-motion derivative as ``-.00002182``."""
    sign = "-" if value < 0.0 else " "
    return sign + f"{abs(value):.8f}"[1:]


def _with_checksum(line: str) -> str:
    return line + str(compute_checksum(line))


def format_tle(elements: TLEElements) -> tuple[str, str]:
    """Write an element set back out as two fixed-column TLE lines.

    Numeric fields are rounded to the precision of their columns and fresh
    checksums are appended, so ``parse_tle(*format_tle(e))`` reproduces
    ``e`` to within the format's resolution.

    Args:
        elements: Element set to format.

    Returns:
        ``(line1, line2)``, each 69 characters long.

    Raises:
        ValueError: If ``nddot`` or ``bstar`` is not finite or is too large
            for the single-digit exponent field.
    """
    e = elements
    line1 = (
        f"1 {e.satnum:>5}{e.classification} {e.intldesg:<8} "
        f"{e.epoch_year:02d}{e.epoch_day:012.8f} {_format_ndot(e.ndot)} "
        f"{_format_exponent_field(e.nddot, 'nddot')} {_format_exponent_field(e.bstar, 'bstar')} "
        f"{e.ephemeris_type:1d} {e.element_number:4d}"
    )
    line2 = (
        f"2 {e.satnum:>5} {e.inclination:8.4f} {e.raan:8.4f} "
        f"{round(e.eccentricity * 1e7):07d} {e.arg_perigee:8.4f} {e.mean_anomaly:8.4f} "
        f"{e.mean_motion:11.8f}{e.rev_number:5d}"
    )
    return _with_checksum(line1), _with_checksum(line2)

"""Tests for calendar, Julian Date and sidereal time conversions."""

import math

import jax
import jax.numpy as jnp
import pytest
from sgp4.propagation import gstime

from orbitax.time import (
    days_to_mdhms,
    gmst,
    greenwich_sidereal_time,
    invjday,
    jday,
    tle_epoch_to_jd,
)


class TestJday:
    def test_j2000(self):
        assert jday(2000, 1, 1, 12) == (2451544.5, 0.5)

    def test_midnight_has_zero_fraction(self):
        jd, fraction = jday(2008, 9, 21)
        assert jd == 2454730.5
        assert fraction == 0.0

    def test_time_of_day(self):
        _, fraction = jday(2024, 3, 1, 6, 30, 15.5)
        assert fraction == pytest.approx((6 * 3600 + 30 * 60 + 15.5) / 86400.0, abs=1e-15)

    def test_leap_day(self):
        feb29, _ = jday(2024, 2, 29)
        mar1, _ = jday(2024, 3, 1)
        assert mar1 - feb29 == 1.0

    def test_matches_reference(self):
        from sgp4.api import jday as ref_jday

        assert jday(1995, 10, 1, 9, 0, 0.0) == pytest.approx(ref_jday(1995, 10, 1, 9, 0, 0.0))


class TestInvJday:
    @pytest.mark.parametrize(
        "calendar",
        [
            (2000, 1, 1, 12, 0, 0.0),
            (2008, 9, 20, 12, 25, 40.0),
            (1999, 12, 31, 23, 59, 30.0),
            (2024, 2, 29, 0, 0, 0.0),
        ],
    )
    def test_inverts_jday(self, calendar):
        jd, fraction = jday(*calendar)
        year, month, day, hour, minute, second = invjday(jd, fraction)
        assert (year, month, day, hour, minute) == calendar[:5]
        assert second == pytest.approx(calendar[5], abs=1e-4)

    def test_single_julian_date(self):
        assert invjday(2451545.0)[:4] == (2000, 1, 1, 12)


class TestDaysToMdhms:
    def test_iss_epoch(self):
        month, day, hour, minute, second = days_to_mdhms(2008, 264.51782528)
        assert (month, day, hour, minute) == (9, 20, 12, 25)
        assert second == pytest.approx(40.104192, abs=1e-5)

    def test_leap_year(self):
        assert days_to_mdhms(2000, 60.0)[:2] == (2, 29)
        assert days_to_mdhms(2001, 60.0)[:2] == (3, 1)

    def test_century_not_leap(self):
        assert days_to_mdhms(1900, 60.0)[:2] == (3, 1)

    def test_new_years_eve(self):
        assert days_to_mdhms(2023, 365.5)[:3] == (12, 31, 12)


class TestTleEpoch:
    def test_iss_epoch(self):
        jd, fraction = tle_epoch_to_jd(8, 264.51782528)
        assert jd == 2454729.5
        assert fraction == 0.51782528

    def test_pivot(self):
        assert tle_epoch_to_jd(57, 1.0)[0] == jday(1957, 1, 1)[0]
        assert tle_epoch_to_jd(56, 1.0)[0] == jday(2056, 1, 1)[0]

    def test_fraction_rounded(self):
        _, fraction = tle_epoch_to_jd(20, 100.123456789)
        assert fraction == 0.12345679


class TestGmst:
    def test_j2000(self):
        assert float(gmst(2451545.0)) == pytest.approx(4.894961212823, abs=1e-11)
        assert math.degrees(float(gmst(2451545.0))) == pytest.approx(280.46061837, abs=1e-7)

    @pytest.mark.parametrize("jd", [2433281.5, 2451545.0, 2454729.5 + 0.51782528, 2460566.25])
    def test_matches_reference(self, jd):
        assert float(gmst(jd)) == pytest.approx(gstime(jd), abs=1e-12)

    def test_range(self):
        values = gmst(jnp.linspace(2451545.0, 2451546.0, 97))
        assert jnp.all(values >= 0.0)
        assert jnp.all(values < 2.0 * math.pi)

    def test_sidereal_day(self):
        """The angle returns to itself after one sidereal day."""
        sidereal_day = 0.99726956633
        diff = float(gmst(2451545.0 + sidereal_day) - gmst(2451545.0))
        assert math.remainder(diff, 2.0 * math.pi) == pytest.approx(0.0, abs=1e-6)

    def test_alias(self):
        assert greenwich_sidereal_time is gmst

    def test_jit_vmap(self):
        jds = jnp.array([2451545.0, 2455000.5])
        out = jax.jit(jax.vmap(gmst))(jds)
        assert jnp.allclose(out, jnp.array([gstime(2451545.0), gstime(2455000.5)]), atol=1e-12)

"""Tests for SGP4/SDP4 initialization and the satellite record."""

import logging
from dataclasses import replace

import jax.numpy as jnp
import pytest
from sgp4.api import WGS72 as SGP4_WGS72
from sgp4.api import Satrec
from sgp4.earth_gravity import wgs72
from sgp4.io import twoline2rv

from orbitax.sgp4 import (
    WGS72,
    WGS84,
    DeepSpaceModel,
    NearEarthModel,
    PropagationError,
    SatelliteRecord,
    SGP4Error,
    parse_tle,
    sgp4_init,
)

ISS_LINE1 = "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927"
ISS_LINE2 = "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537"

# Molniya 2-14, 12 h resonant and highly eccentric
MOLNIYA_LINE1 = "1 08195U 75081A   06176.33215444  .00000099  00000-0  11873-3 0   813"
MOLNIYA_LINE2 = "2 08195  64.1586 279.0717 6877146 264.7651  20.2257  2.00491383225656"

# Geostationary, 24 h resonant
GEO_LINE1 = "1 28626U 05008A   06176.46683397 -.00000205  00000-0  10000-3 0  2190"
GEO_LINE2 = "2 28626   0.0019 286.9433 0000335  13.7918  55.6504  1.00271774  5156"


class TestRegimeSelection:
    """The orbit regime is fixed once at initialization."""

    def test_iss_is_near_earth(self) -> None:
        sat = SatelliteRecord.from_tle(ISS_LINE1, ISS_LINE2)
        assert isinstance(sat.model, NearEarthModel)
        assert not sat.is_deep_space
        assert sat.resonance_state is None
        assert sat.error == SGP4Error.NONE

    def test_molniya_is_half_day_resonant(self) -> None:
        sat = SatelliteRecord.from_tle(MOLNIYA_LINE1, MOLNIYA_LINE2)
        assert isinstance(sat.model, DeepSpaceModel)
        assert sat.is_deep_space
        assert float(sat.model.resonance.irez) == 2.0

    def test_geo_is_synchronous_resonant(self) -> None:
        sat = SatelliteRecord.from_tle(GEO_LINE1, GEO_LINE2)
        assert sat.is_deep_space
        assert float(sat.model.resonance.irez) == 1.0

    def test_deep_space_starts_at_epoch(self) -> None:
        sat = SatelliteRecord.from_tle(GEO_LINE1, GEO_LINE2)
        assert float(sat.resonance_state.atime) == 0.0
        assert float(sat.resonance_state.xni) == pytest.approx(sat.no_unkozai, rel=1e-14)

    @pytest.mark.parametrize(
        "mean_motion,deep_space",
        [(6.5, False), (6.3, True)],
    )
    def test_period_boundary(self, mean_motion, deep_space) -> None:
        """Periods of 225 minutes or more use the deep-space model."""
        elements = replace(parse_tle(ISS_LINE1, ISS_LINE2), mean_motion=mean_motion)
        sat = sgp4_init(elements)
        assert sat.is_deep_space is deep_space
        assert (sat.period_minutes >= 225.0) is deep_space

    def test_low_perigee_uses_simple_drag(self) -> None:
        elements = replace(parse_tle(ISS_LINE1, ISS_LINE2), mean_motion=16.2, eccentricity=0.001)
        sat = sgp4_init(elements)
        assert sat.perigee_km < 220.0
        assert float(sat.model.orbit.isimp) == 1.0

    def test_iss_uses_full_drag(self) -> None:
        sat = SatelliteRecord.from_tle(ISS_LINE1, ISS_LINE2)
        assert sat.perigee_km > 220.0
        assert float(sat.model.orbit.isimp) == 0.0


class TestInitMatchesReference:
    """Epoch quantities agree with the python-sgp4 library."""

    @pytest.mark.parametrize(
        "line1,line2",
        [(ISS_LINE1, ISS_LINE2), (MOLNIYA_LINE1, MOLNIYA_LINE2), (GEO_LINE1, GEO_LINE2)],
    )
    def test_recovered_mean_motion(self, line1, line2) -> None:
        # The compiled Satrec does not expose the recovered mean motion
        ref = twoline2rv(line1, line2, wgs72)
        sat = SatelliteRecord.from_tle(line1, line2)
        assert sat.no_unkozai == pytest.approx(ref.no_unkozai, rel=1e-12)
        assert sat.semi_major_axis == pytest.approx(ref.a, rel=1e-12)

    @pytest.mark.parametrize(
        "line1,line2",
        [(ISS_LINE1, ISS_LINE2), (MOLNIYA_LINE1, MOLNIYA_LINE2)],
    )
    def test_sidereal_time_at_epoch(self, line1, line2) -> None:
        ref = Satrec.twoline2rv(line1, line2, SGP4_WGS72)
        sat = SatelliteRecord.from_tle(line1, line2)
        assert float(sat.model.orbit.gsto) == pytest.approx(ref.gsto, abs=1e-10)

    def test_epoch_julian_date(self) -> None:
        ref = Satrec.twoline2rv(ISS_LINE1, ISS_LINE2, SGP4_WGS72)
        sat = SatelliteRecord.from_tle(ISS_LINE1, ISS_LINE2)
        assert sat.epoch_jd == pytest.approx(ref.jdsatepoch + ref.jdsatepochF, abs=1e-9)

    def test_secular_rates(self) -> None:
        ref = twoline2rv(ISS_LINE1, ISS_LINE2, wgs72)
        orbit = SatelliteRecord.from_tle(ISS_LINE1, ISS_LINE2).model.orbit
        assert float(orbit.mdot) == pytest.approx(ref.mdot, rel=1e-12)
        assert float(orbit.argpdot) == pytest.approx(ref.argpdot, rel=1e-12)
        assert float(orbit.nodedot) == pytest.approx(ref.nodedot, rel=1e-12)
        assert float(orbit.cc1) == pytest.approx(ref.cc1, rel=1e-10)


class TestSatelliteRecordProperties:
    """Derived orbit properties of a record."""

    def test_iss_geometry(self) -> None:
        sat = SatelliteRecord.from_tle(ISS_LINE1, ISS_LINE2)
        assert 6700.0 < sat.semi_major_axis_km < 6750.0
        assert 340.0 < sat.perigee_km < sat.apogee_km < 370.0
        assert 91.0 < sat.period_minutes < 92.0

    def test_satnum_and_repr(self) -> None:
        sat = SatelliteRecord.from_tle(ISS_LINE1, ISS_LINE2)
        assert sat.satnum == "25544"
        assert "25544" in repr(sat)
        assert "near-earth" in repr(sat)

    def test_epoch_split(self) -> None:
        sat = SatelliteRecord.from_tle(ISS_LINE1, ISS_LINE2)
        assert sat.jdsatepoch == pytest.approx(2454729.5)
        assert sat.jdsatepochF == pytest.approx(0.51782528, abs=1e-10)

    def test_gravity_by_name(self) -> None:
        sat = SatelliteRecord.from_tle(ISS_LINE1, ISS_LINE2, gravity="wgs84")
        assert sat.gravity is WGS84
        ref = SatelliteRecord.from_tle(ISS_LINE1, ISS_LINE2, gravity=WGS72)
        assert sat.no_unkozai != ref.no_unkozai

    def test_unknown_gravity_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown gravity model"):
            SatelliteRecord.from_tle(ISS_LINE1, ISS_LINE2, gravity="egm96")

    def test_unknown_opsmode_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown opsmode"):
            SatelliteRecord.from_tle(ISS_LINE1, ISS_LINE2, opsmode="x")

    def test_afspc_mode_close_to_improved(self) -> None:
        improved = SatelliteRecord.from_tle(ISS_LINE1, ISS_LINE2, opsmode="i")
        legacy = SatelliteRecord.from_tle(ISS_LINE1, ISS_LINE2, opsmode="a")
        assert float(legacy.model.orbit.afspc) == 1.0
        assert float(legacy.model.orbit.gsto) == pytest.approx(
            float(improved.model.orbit.gsto), abs=1e-5
        )


class TestInvalidEpochElements:
    """Element sets that do not describe an orbit are flagged, not raised."""

    @pytest.mark.parametrize(
        "changes",
        [
            {"eccentricity": 1.2},
            {"mean_motion": 0.0},
            {"mean_motion": -1.0},
            {"bstar": float("nan")},
        ],
    )
    def test_error_stored(self, changes) -> None:
        elements = replace(parse_tle(ISS_LINE1, ISS_LINE2), **changes)
        sat = sgp4_init(elements)
        assert sat.error == SGP4Error.EPOCH_ELEMENTS
        assert sat.model is None

    def test_propagation_raises(self) -> None:
        elements = replace(parse_tle(ISS_LINE1, ISS_LINE2), eccentricity=1.2)
        sat = sgp4_init(elements)
        with pytest.raises(PropagationError) as exc:
            sat.propagate(0.0)
        assert exc.value.code == SGP4Error.EPOCH_ELEMENTS
        assert exc.value.satnum == "25544"

    def test_warning_logged(self, caplog) -> None:
        elements = replace(parse_tle(ISS_LINE1, ISS_LINE2), mean_motion=0.0)
        with caplog.at_level(logging.WARNING, logger="orbitax.sgp4._satellite"):
            sgp4_init(elements)
        assert "error 5" in caplog.text

    def test_repr_shows_error(self) -> None:
        elements = replace(parse_tle(ISS_LINE1, ISS_LINE2), eccentricity=1.2)
        assert "EPOCH_ELEMENTS" in repr(sgp4_init(elements))

    def test_properties_without_model(self) -> None:
        elements = replace(parse_tle(ISS_LINE1, ISS_LINE2), eccentricity=1.2)
        sat = sgp4_init(elements)
        assert not sat.is_deep_space
        assert jnp.isnan(sat.no_unkozai)


class TestInitLogging:
    def test_regime_logged_at_debug(self, caplog) -> None:
        with caplog.at_level(logging.DEBUG, logger="orbitax.sgp4._initialize"):
            SatelliteRecord.from_tle(ISS_LINE1, ISS_LINE2)
            SatelliteRecord.from_tle(MOLNIYA_LINE1, MOLNIYA_LINE2)
        assert "near-earth model" in caplog.text
        assert "deep-space model" in caplog.text
        assert "resonance 2" in caplog.text

    def test_valid_record_logs_no_warning(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            SatelliteRecord.from_tle(ISS_LINE1, ISS_LINE2)
        assert not [r for r in caplog.records if r.name.startswith("orbitax")]

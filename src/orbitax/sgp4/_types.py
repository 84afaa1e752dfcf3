"""
Data types for the SGP4/SDP4 propagator.

``TLEElements`` is a plain Python dataclass holding the fields of a TLE in
the units printed on the card.  Everything the propagator consumes is a
``NamedTuple`` of scalars and therefore a JAX pytree: the model variants can
be passed straight through ``jax.jit`` and ``jax.vmap``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Union

from jax import Array

from orbitax.time import TLE_YEAR_PIVOT, tle_epoch_to_jd


@dataclass(frozen=True)
class TLEElements:
    """Raw orbital elements parsed from a Two-Line Element set.

    Values are kept in the units of the TLE format so that an element set
    can be written back out without loss.  Conversion to the propagator's
    working units happens in :func:`~orbitax.sgp4.sgp4_init`.

    Attributes:
        satnum: Satellite catalog number as printed (e.g. ``'25544'``).
        classification: Classification character (``'U'``, ``'C'``, or ``'S'``).
        intldesg: International designator (e.g. ``'98067A'``).
        epoch_year: Two-digit epoch year (0-99).
        epoch_day: Day of year with fractional day.
        ndot: First derivative of mean motion divided by 2 [rev/day^2].
        nddot: Second derivative of mean motion divided by 6 [rev/day^3].
        bstar: B* drag coefficient [1/earth_radii].
        ephemeris_type: Ephemeris type (typically 0).
        element_number: Element set number.
        inclination: Inclination [deg].
        raan: Right ascension of ascending node [deg].
        eccentricity: Eccentricity [dimensionless].
        arg_perigee: Argument of perigee [deg].
        mean_anomaly: Mean anomaly [deg].
        mean_motion: Mean motion [rev/day].
        rev_number: Revolution number at epoch.
    """

    satnum: str
    classification: str
    intldesg: str
    epoch_year: int
    epoch_day: float
    ndot: float
    nddot: float
    bstar: float
    ephemeris_type: int
    element_number: int
    inclination: float
    raan: float
    eccentricity: float
    arg_perigee: float
    mean_anomaly: float
    mean_motion: float
    rev_number: int

    @property
    def full_year(self) -> int:
        """Four-digit epoch year."""
        if self.epoch_year < TLE_YEAR_PIVOT:
            return self.epoch_year + 2000
        return self.epoch_year + 1900

    @property
    def epoch_jd(self) -> tuple[float, float]:
        """Epoch as a split Julian Date ``(jd, fraction)``."""
        return tle_epoch_to_jd(self.epoch_year, self.epoch_day)

    @property
    def period_minutes(self) -> float:
        """Orbital period implied by the (Kozai) mean motion [min]."""
        return 1440.0 / self.mean_motion


class OrbitCoefficients(NamedTuple):
    """Gravity constants, epoch elements, and secular coefficients shared by both models.

    Angles are in radians, mean motions in rad/min, and lengths in earth
    radii.  ``isimp`` is ``1.0`` when the truncated drag expansion is used and
    ``afspc`` is ``1.0`` for the legacy AFSPC operation mode.
    """

    radiusearthkm: Array
    xke: Array
    j2: Array
    j3oj2: Array
    bstar: Array
    ecco: Array
    argpo: Array
    inclo: Array
    mo: Array
    nodeo: Array
    no_unkozai: Array
    con41: Array
    gsto: Array
    cc1: Array
    cc4: Array
    cc5: Array
    d2: Array
    d3: Array
    d4: Array
    delmo: Array
    eta: Array
    argpdot: Array
    omgcof: Array
    sinmao: Array
    t2cof: Array
    t3cof: Array
    t4cof: Array
    t5cof: Array
    x1mth2: Array
    x7thm1: Array
    mdot: Array
    nodedot: Array
    xlcof: Array
    xmcof: Array
    nodecf: Array
    aycof: Array
    isimp: Array
    afspc: Array


class LunarSolarCoefficients(NamedTuple):
    """Lunar and solar periodic amplitudes and secular rates at epoch."""

    e3: Array
    ee2: Array
    peo: Array
    pgho: Array
    pho: Array
    pinco: Array
    plo: Array
    se2: Array
    se3: Array
    sgh2: Array
    sgh3: Array
    sgh4: Array
    sh2: Array
    sh3: Array
    si2: Array
    si3: Array
    sl2: Array
    sl3: Array
    sl4: Array
    xgh2: Array
    xgh3: Array
    xgh4: Array
    xh2: Array
    xh3: Array
    xi2: Array
    xi3: Array
    xl2: Array
    xl3: Array
    xl4: Array
    zmol: Array
    zmos: Array
    dedt: Array
    didt: Array
    dmdt: Array
    dnodt: Array
    domdt: Array


class ResonanceCoefficients(NamedTuple):
    """Geopotential resonance terms.

    ``irez`` is ``0.0`` for a non-resonant orbit, ``1.0`` for synchronous
    (24 h) and ``2.0`` for half-day (12 h) resonance.
    """

    irez: Array
    d2201: Array
    d2211: Array
    d3210: Array
    d3222: Array
    d4410: Array
    d4422: Array
    d5220: Array
    d5232: Array
    d5421: Array
    d5433: Array
    del1: Array
    del2: Array
    del3: Array
    xfact: Array
    xlamo: Array


class ResonanceState(NamedTuple):
    """State of the resonance integrator.

    Attributes:
        atime: Time since epoch reached by the integrator [min]. ``0`` means
            the integrator starts from epoch on the next call.
        xli: Integrated resonance longitude [rad].
        xni: Integrated mean motion [rad/min].
    """

    atime: Array
    xli: Array
    xni: Array


class NearEarthModel(NamedTuple):
    """SGP4 model for orbits with periods below 225 minutes."""

    orbit: OrbitCoefficients


class DeepSpaceModel(NamedTuple):
    """SDP4 model for orbits with periods of 225 minutes or more."""

    orbit: OrbitCoefficients
    lunar_solar: LunarSolarCoefficients
    resonance: ResonanceCoefficients


SGP4Model = Union[NearEarthModel, DeepSpaceModel]


class StateVector(NamedTuple):
    """Position and velocity in the TEME (true equator, mean equinox) frame.

    Attributes:
        position: Position ``[x, y, z]`` [km].
        velocity: Velocity ``[vx, vy, vz]`` [km/s].
        tsince: Time since the element set epoch [min].
        jd: Julian Date at which the state applies.
    """

    position: Array
    velocity: Array
    tsince: float
    jd: float

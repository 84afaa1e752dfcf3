"""
Earth gravity constants for the SGP4/SDP4 propagator.

Provides three standard gravity models: WGS72OLD, WGS72 (standard), and WGS84.
Values match the reference ``sgp4`` Python library exactly. The module
also holds the named thresholds and solver limits used by the propagator.
"""

from __future__ import annotations

from math import sqrt
from typing import NamedTuple


class EarthGravity(NamedTuple):
    """Earth gravity model constants for SGP4 propagation.

    Attributes:
        tumin: Time units per minute (1/xke).
        mu: Gravitational parameter [km^3/s^2].
        radiusearthkm: Earth equatorial radius [km].
        xke: Reciprocal of tumin (sqrt(GM) in SGP4 time units).
        j2: Second zonal harmonic.
        j3: Third zonal harmonic.
        j4: Fourth zonal harmonic.
        j3oj2: Ratio j3/j2.
    """

    tumin: float
    mu: float
    radiusearthkm: float
    xke: float
    j2: float
    j3: float
    j4: float
    j3oj2: float

    @classmethod
    def from_harmonics(
        cls,
        mu: float,
        radiusearthkm: float,
        j2: float,
        j3: float,
        j4: float,
        xke: float | None = None,
    ) -> EarthGravity:
        """Build a model from its defining constants.

        ``xke`` is derived as ``60 / sqrt(re^3 / mu)`` unless given explicitly,
        which only the legacy WGS72 set does.
        """
        if xke is None:
            xke = 60.0 / sqrt(radiusearthkm**3 / mu)
        return cls(
            tumin=1.0 / xke,
            mu=mu,
            radiusearthkm=radiusearthkm,
            xke=xke,
            j2=j2,
            j3=j3,
            j4=j4,
            j3oj2=j3 / j2,
        )


WGS72OLD = EarthGravity.from_harmonics(
    mu=398600.79964,
    radiusearthkm=6378.135,
    j2=0.001082616,
    j3=-0.00000253881,
    j4=-0.00000165597,
    xke=0.0743669161,
)
"""WGS 72 Old gravity model (legacy)."""

WGS72 = EarthGravity.from_harmonics(
    mu=398600.8,
    radiusearthkm=6378.135,
    j2=0.001082616,
    j3=-0.00000253881,
    j4=-0.00000165597,
)
"""WGS 72 gravity model (standard for SGP4)."""

WGS84 = EarthGravity.from_harmonics(
    mu=398600.5,
    radiusearthkm=6378.137,
    j2=0.00108262998905,
    j3=-0.00000253215306,
    j4=-0.00000161098761,
)
"""WGS 84 gravity model."""

GRAVITY_MODELS = {
    "wgs72old": WGS72OLD,
    "wgs72": WGS72,
    "wgs84": WGS84,
}
"""Mapping of gravity model names to ``EarthGravity`` instances."""


def resolve_gravity(gravity: str | EarthGravity) -> EarthGravity:
    """Look up a gravity model by name, passing instances through.

    Raises:
        ValueError: If the name is not one of ``GRAVITY_MODELS``.
    """
    if isinstance(gravity, EarthGravity):
        return gravity
    try:
        return GRAVITY_MODELS[gravity.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown gravity model '{gravity}'. Must be one of: {', '.join(GRAVITY_MODELS)}"
        ) from None


# Model selection and solver limits

DEEP_SPACE_PERIOD = 225.0
"""Orbital period at or above which the deep-space (SDP4) model is used [min]."""

SIMPLE_DRAG_PERIGEE = 220.0
"""Perigee altitude below which the truncated drag expansion is used [km]."""

KEPLER_MAX_ITERATIONS = 10
"""Iteration cap for the Kepler equation solver."""

KEPLER_TOLERANCE = 1.0e-12
"""Convergence threshold on the eccentric-anomaly step [rad]."""

KEPLER_MAX_STEP = 0.95
"""Largest Newton step taken by the Kepler solver [rad]."""

RESONANCE_STEP = 720.0
"""Fixed step of the deep-space resonance integrator [min]."""

RESONANCE_STEP2 = 259200.0
"""Second-order term of the resonance step, ``RESONANCE_STEP**2 / 2`` [min^2]."""

OPSMODES = ("i", "a")
"""Supported operation modes: improved (``'i'``) and legacy AFSPC (``'a'``)."""

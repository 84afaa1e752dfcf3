"""Geodetic (WGS84 ellipsoid) coordinate transformations.

Converts between geodetic coordinates (latitude, longitude, height) and
Earth-Centered Earth-Fixed (ECEF) Cartesian coordinates ``[x, y, z]``.

The geodetic model uses the WGS84 reference ellipsoid, which accounts for
Earth's oblateness.  The forward transformation is closed-form; the inverse
uses Bowring's iterative method implemented with ``jax.lax.while_loop``
for JAX traceability.

Lengths are in km and angles in radians.

References:
    1. NIMA Technical Report TR8350.2, *Department of Defense World Geodetic
       System 1984*.
    2. O. Montenbruck and E. Gill, *Satellite Orbits: Models, Methods
       and Applications*, Springer, 2012, Sec. 5.3.
"""

from __future__ import annotations

from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from orbitax.config import get_dtype
from orbitax.constants import WGS84_a, WGS84_e2
from orbitax.frames import rotation_eci_to_ecef

GEODETIC_MAX_ITERATIONS = 10
"""Iteration cap of the ECEF to geodetic conversion."""

GEODETIC_TOLERANCE = 1.0e-12
"""Change in the iterated height correction at which the conversion stops [km]."""


class GeodeticCoordinate(NamedTuple):
    """Position relative to the WGS84 ellipsoid.

    Attributes:
        latitude: Geodetic latitude [rad], in ``[-pi/2, pi/2]``.
        longitude: Longitude [rad], in ``(-pi, pi]``.
        height: Height above the ellipsoid [km].
    """

    latitude: Array
    longitude: Array
    height: Array


def position_geodetic_to_ecef(geodetic: GeodeticCoordinate) -> Array:
    """Convert a geodetic position to ECEF Cartesian coordinates.

    Uses the WGS84 prime vertical radius of curvature:

    .. math::

        N = \\frac{a}{\\sqrt{1 - e^2 \\sin^2 \\phi}}

    Args:
        geodetic: Geodetic position (latitude and longitude in *rad*,
            height in *km*).

    Returns:
        jax.Array: ECEF position ``[x, y, z]`` in *km*.

    Example:
        >>> from orbitax.coordinates import GeodeticCoordinate, position_geodetic_to_ecef
        >>> x_ecef = position_geodetic_to_ecef(GeodeticCoordinate(0.0, 0.0, 0.0))
        >>> float(x_ecef[0])  # WGS84_a on the equator
        6378.137
    """
    dtype = get_dtype()
    lat = jnp.asarray(geodetic.latitude, dtype=dtype)
    lon = jnp.asarray(geodetic.longitude, dtype=dtype)
    alt = jnp.asarray(geodetic.height, dtype=dtype)

    sin_lat = jnp.sin(lat)
    cos_lat = jnp.cos(lat)

    N = WGS84_a / jnp.sqrt(1.0 - WGS84_e2 * sin_lat * sin_lat)

    x = (N + alt) * cos_lat * jnp.cos(lon)
    y = (N + alt) * cos_lat * jnp.sin(lon)
    z = ((1.0 - WGS84_e2) * N + alt) * sin_lat

    return jnp.stack([x, y, z])


def position_ecef_to_geodetic(
    x_ecef: ArrayLike,
    max_iterations: int = GEODETIC_MAX_ITERATIONS,
    tolerance: float = GEODETIC_TOLERANCE,
) -> GeodeticCoordinate:
    """Convert ECEF Cartesian coordinates to a geodetic position.

    Iterates on the offset ``dz`` between the point's z coordinate and the
    intersection of its ellipsoid normal with the polar axis.  The loop
    stops when ``dz`` changes by less than ``tolerance`` or after
    ``max_iterations`` steps; in the latter case the last iterate is used.

    Args:
        x_ecef: ECEF position ``[x, y, z]`` in *km*.
        max_iterations: Iteration cap. Default: ``GEODETIC_MAX_ITERATIONS``
        tolerance: Convergence threshold on ``dz`` [km].
            Default: ``GEODETIC_TOLERANCE``

    Returns:
        GeodeticCoordinate: Latitude and longitude in *rad*, height in *km*.

    Example:
        >>> import jax.numpy as jnp
        >>> from orbitax.coordinates import position_ecef_to_geodetic
        >>> geod = position_ecef_to_geodetic(jnp.array([6378.137, 0.0, 0.0]))
        >>> float(geod.height)
        0.0
    """
    x_ecef = jnp.asarray(x_ecef, dtype=get_dtype())

    x = x_ecef[0]
    y = x_ecef[1]
    z = x_ecef[2]

    rho2 = x * x + y * y

    def cond(state):
        dz, dz_prev, i = state
        return (jnp.abs(dz - dz_prev) > tolerance) & (i < max_iterations)

    def body(state):
        dz, _, i = state
        zdz = z + dz
        Nh = jnp.sqrt(rho2 + zdz * zdz)
        sinphi = zdz / Nh
        N = WGS84_a / jnp.sqrt(1.0 - WGS84_e2 * sinphi * sinphi)
        return N * WGS84_e2 * sinphi, dz, i + 1

    # Force the first iteration by starting dz_prev far from dz
    dz0 = WGS84_e2 * z
    dz, _, _ = jax.lax.while_loop(cond, body, (dz0, dz0 + 1.0e10, jnp.int32(0)))

    zdz = z + dz
    Nh = jnp.sqrt(rho2 + zdz * zdz)
    sinphi = zdz / Nh
    N = WGS84_a / jnp.sqrt(1.0 - WGS84_e2 * sinphi * sinphi)

    return GeodeticCoordinate(
        latitude=jnp.arctan2(zdz, jnp.sqrt(rho2)),
        longitude=jnp.arctan2(y, x),
        height=Nh - N,
    )


def position_eci_to_geodetic(r_eci: ArrayLike, gmst: ArrayLike) -> GeodeticCoordinate:
    """Convert an inertial position to a geodetic position.

    Args:
        r_eci: ECI (TEME) position ``[x, y, z]`` in *km*.
        gmst: Greenwich mean sidereal angle [rad] at the time of ``r_eci``.

    Returns:
        GeodeticCoordinate: Sub-satellite latitude and longitude in *rad*
            and height in *km*.
    """
    r_eci = jnp.asarray(r_eci, dtype=get_dtype())
    return position_ecef_to_geodetic(rotation_eci_to_ecef(gmst) @ r_eci)

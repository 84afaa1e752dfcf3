"""Topocentric coordinate transformations and look angles.

Converts ECEF positions into local frames at an observer on the WGS84
ellipsoid and derives the look angles used to point a ground antenna:
azimuth, elevation, range and range rate.

Two local frames are provided.  Both are right-handed and share the
zenith axis:

- **SEZ**: South, East, Zenith.
- **ENZ**: East, North, Zenith.

Lengths are in km, velocities in km/s, and angles in radians.

References:
    1. D. Vallado, *Fundamentals of Astrodynamics and Applications*,
       4th ed., Microcosm Press, 2013, Sec. 4.4.
    2. T. S. Kelso, "Orbital Coordinate Systems, Part II", *Satellite Times*,
       1996.
"""

from __future__ import annotations

from typing import NamedTuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from orbitax.config import get_dtype
from orbitax.constants import C_LIGHT, OMEGA_EARTH
from orbitax.coordinates.geodetic import GeodeticCoordinate, position_geodetic_to_ecef


class LookAngle(NamedTuple):
    """Direction and distance from an observer to a target.

    Attributes:
        azimuth: Azimuth clockwise from north [rad], in ``[0, 2pi)``.
        elevation: Elevation above the local horizon [rad].
        range: Observer to target distance [km].
        range_rate: Rate of change of ``range`` [km/s]; NaN when no target
            velocity was supplied.
        jd: Julian Date the angles refer to.
    """

    azimuth: Array
    elevation: Array
    range: Array
    range_rate: Array
    jd: float


def rotation_ecef_to_sez(latitude: ArrayLike, longitude: ArrayLike) -> Array:
    """Compute the rotation matrix from ECEF to South-East-Zenith (SEZ).

    Args:
        latitude: Geodetic latitude of the observer [rad].
        longitude: Longitude of the observer [rad].

    Returns:
        3x3 rotation matrix (ECEF → SEZ).
    """
    dtype = get_dtype()
    lat = jnp.asarray(latitude, dtype=dtype)
    lon = jnp.asarray(longitude, dtype=dtype)

    sin_lon = jnp.sin(lon)
    cos_lon = jnp.cos(lon)
    sin_lat = jnp.sin(lat)
    cos_lat = jnp.cos(lat)

    # Rows are S, E, Z basis vectors expressed in ECEF
    return jnp.array([
        [sin_lat * cos_lon, sin_lat * sin_lon, -cos_lat],     # South
        [-sin_lon, cos_lon, 0.0],                             # East
        [cos_lat * cos_lon, cos_lat * sin_lon, sin_lat],      # Zenith
    ])


def rotation_ecef_to_enz(latitude: ArrayLike, longitude: ArrayLike) -> Array:
    """Compute the rotation matrix from ECEF to East-North-Zenith (ENZ).

    Args:
        latitude: Geodetic latitude of the observer [rad].
        longitude: Longitude of the observer [rad].

    Returns:
        3x3 rotation matrix (ECEF → ENZ).

    Examples:
        ```python
        import jax.numpy as jnp
        from orbitax.coordinates import rotation_ecef_to_enz
        rot = rotation_ecef_to_enz(jnp.deg2rad(60.0), jnp.deg2rad(30.0))
        ```
    """
    sez = rotation_ecef_to_sez(latitude, longitude)
    return jnp.stack([sez[1], -sez[0], sez[2]])


def topocentric_sez(observer: GeodeticCoordinate, r_ecef: ArrayLike) -> Array:
    """Express the observer-to-target vector in the observer's SEZ frame.

    Args:
        observer: Geodetic position of the observer.
        r_ecef: ECEF position of the target ``[x, y, z]`` in *km*.

    Returns:
        Relative position ``[south, east, zenith]`` in *km*.
    """
    r_ecef = jnp.asarray(r_ecef, dtype=get_dtype())
    rho = r_ecef - position_geodetic_to_ecef(observer)
    return rotation_ecef_to_sez(observer.latitude, observer.longitude) @ rho


def look_angles(
    observer: GeodeticCoordinate,
    jd: float,
    r_ecef: ArrayLike,
    v_ecef: ArrayLike | None = None,
) -> LookAngle:
    """Compute look angles from a ground observer to a target.

    At the zenith singularity (target straight overhead) azimuth is
    defined as 0.

    Args:
        observer: Geodetic position of the observer.
        jd: Julian Date of the observation, carried into the result.
        r_ecef: ECEF position of the target ``[x, y, z]`` in *km*.
        v_ecef: ECEF velocity of the target [km/s].  Needed for the range
            rate; the observer is fixed in ECEF.

    Returns:
        LookAngle: Azimuth, elevation, range and range rate.

    Examples:
        ```python
        from orbitax.coordinates import GeodeticCoordinate, look_angles
        from orbitax.frames import state_eci_to_ecef
        from orbitax.time import gmst

        state = record.propagate(30.0)
        r, v = state_eci_to_ecef(state.position, state.velocity, gmst(state.jd))
        observer = GeodeticCoordinate(latitude=0.6, longitude=-1.3, height=0.2)
        angles = look_angles(observer, state.jd, r, v)
        ```
    """
    dtype = get_dtype()
    r_ecef = jnp.asarray(r_ecef, dtype=dtype)
    rot = rotation_ecef_to_sez(observer.latitude, observer.longitude)
    rho = r_ecef - position_geodetic_to_ecef(observer)
    s, e, z = rot @ rho

    rng = jnp.sqrt(s * s + e * e + z * z)
    horiz = jnp.sqrt(s * s + e * e)
    el = jnp.arctan2(z, horiz)

    # Clockwise from north; north is -south
    az_raw = jnp.arctan2(e, -s)
    az = jnp.where(az_raw >= 0.0, az_raw, az_raw + 2.0 * jnp.pi)
    az = jnp.where(horiz == 0.0, 0.0, az)

    if v_ecef is None:
        range_rate = jnp.asarray(jnp.nan, dtype=dtype)
    else:
        v_ecef = jnp.asarray(v_ecef, dtype=dtype)
        range_rate = jnp.dot(rho, v_ecef) / rng

    return LookAngle(azimuth=az, elevation=el, range=rng, range_rate=range_rate, jd=jd)


def doppler_factor(observer_eci: ArrayLike, r_eci: ArrayLike, v_eci: ArrayLike) -> Array:
    """Ratio of received to transmitted frequency for a ground observer.

    The observer rotates with the Earth, so its inertial velocity
    ``omega x r_observer`` is removed from the target velocity before the
    range rate is formed.  The first-order factor is
    ``1 - range_rate / c``: above 1 while the target approaches, below 1
    while it recedes.

    This differs from the legacy tracking formula
    ``(1 + range_rate / c) * sign(range_rate)``, which inverts the shift and
    changes sign with the direction of motion.  The factor here is always
    positive and close to 1.

    Args:
        observer_eci: Inertial position of the observer [km].
        r_eci: Inertial position of the target [km].
        v_eci: Inertial velocity of the target [km/s].

    Returns:
        Doppler factor [dimensionless].
    """
    dtype = get_dtype()
    observer_eci = jnp.asarray(observer_eci, dtype=dtype)
    r_eci = jnp.asarray(r_eci, dtype=dtype)
    v_eci = jnp.asarray(v_eci, dtype=dtype)

    omega = jnp.array([0.0, 0.0, OMEGA_EARTH], dtype=dtype)
    rho = r_eci - observer_eci
    v_rel = v_eci - jnp.cross(omega, observer_eci)
    range_rate = jnp.dot(rho, v_rel) / jnp.linalg.norm(rho)

    return 1.0 - range_rate / C_LIGHT

"""Angle and unit conversion helpers.

``to_radians`` and ``from_radians`` wrap the ``use_degrees`` convention used
throughout orbitax, providing JAX-traceable degree/radian conversion via
``jnp.where``.  The latitude/longitude helpers are plain-Python validators
for user-facing input and raise on out-of-range values.
"""

from math import pi

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from orbitax.constants import DEG2RAD, RAD2DEG


def to_radians(angle: ArrayLike, use_degrees: bool) -> Array:
    """Convert angle to radians if ``use_degrees`` is True.

    Args:
        angle (ArrayLike): Angle value.
        use_degrees (bool): If ``True``, treat ``angle`` as degrees and convert.

    Returns:
        Angle in radians.
    """
    return jnp.where(use_degrees, jnp.deg2rad(angle), angle)


def from_radians(angle: ArrayLike, use_degrees: bool) -> Array:
    """Convert angle from radians to degrees if ``use_degrees`` is True.

    Args:
        angle (ArrayLike): Angle in radians.
        use_degrees (bool): If ``True``, convert to degrees.

    Returns:
        Angle in radians or degrees.
    """
    return jnp.where(use_degrees, jnp.rad2deg(angle), angle)


def degrees_lat(radians: float) -> float:
    """Convert a latitude from radians to degrees.

    Args:
        radians: Latitude in ``[-pi/2, pi/2]`` rad.

    Returns:
        Latitude in degrees.

    Raises:
        ValueError: If the latitude is out of range.
    """
    if radians < -pi / 2.0 or radians > pi / 2.0:
        raise ValueError(f"Latitude radians must be in range [-pi/2, pi/2], got {radians}")
    return radians * RAD2DEG


def degrees_long(radians: float) -> float:
    """Convert a longitude from radians to degrees.

    Args:
        radians: Longitude in ``[-pi, pi]`` rad.

    Returns:
        Longitude in degrees.

    Raises:
        ValueError: If the longitude is out of range.
    """
    if radians < -pi or radians > pi:
        raise ValueError(f"Longitude radians must be in range [-pi, pi], got {radians}")
    return radians * RAD2DEG


def radians_lat(degrees: float) -> float:
    """Convert a latitude from degrees to radians.

    Raises:
        ValueError: If the latitude is outside ``[-90, 90]`` degrees.
    """
    if degrees < -90.0 or degrees > 90.0:
        raise ValueError(f"Latitude degrees must be in range [-90, 90], got {degrees}")
    return degrees * DEG2RAD


def radians_long(degrees: float) -> float:
    """Convert a longitude from degrees to radians.

    Raises:
        ValueError: If the longitude is outside ``[-180, 180]`` degrees.
    """
    if degrees < -180.0 or degrees > 180.0:
        raise ValueError(f"Longitude degrees must be in range [-180, 180], got {degrees}")
    return degrees * DEG2RAD

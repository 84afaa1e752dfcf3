"""Coordinate transformations.

This sub-module provides functions for converting between the coordinate
representations used to interpret SGP4 output:

- **Geodetic**: WGS84 ellipsoid ``(latitude, longitude, height)`` ↔ ECEF
- **Topocentric**: South-East-Zenith and East-North-Zenith observer frames,
  look angles, and the Doppler factor for observer-relative tracking
"""

from .geodetic import (
    GEODETIC_MAX_ITERATIONS,
    GEODETIC_TOLERANCE,
    GeodeticCoordinate,
    position_ecef_to_geodetic,
    position_eci_to_geodetic,
    position_geodetic_to_ecef,
)
from .topocentric import (
    LookAngle,
    doppler_factor,
    look_angles,
    rotation_ecef_to_enz,
    rotation_ecef_to_sez,
    topocentric_sez,
)

__all__ = [
    "GEODETIC_MAX_ITERATIONS",
    "GEODETIC_TOLERANCE",
    "GeodeticCoordinate",
    "LookAngle",
    "position_geodetic_to_ecef",
    "position_ecef_to_geodetic",
    "position_eci_to_geodetic",
    "rotation_ecef_to_sez",
    "rotation_ecef_to_enz",
    "topocentric_sez",
    "look_angles",
    "doppler_factor",
]

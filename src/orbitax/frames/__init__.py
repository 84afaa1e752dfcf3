"""Frame transformations.

Rotations between the inertial frame of SGP4 output and the Earth-fixed
frame, driven by Greenwich mean sidereal time.
"""

from .eci_ecef import (
    Rz,
    rotation_ecef_to_eci,
    rotation_eci_to_ecef,
    state_ecef_to_eci,
    state_eci_to_ecef,
)

__all__ = [
    "Rz",
    "rotation_eci_to_ecef",
    "rotation_ecef_to_eci",
    "state_eci_to_ecef",
    "state_ecef_to_eci",
]

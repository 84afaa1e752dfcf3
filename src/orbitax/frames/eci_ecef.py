"""ECI to ECEF frame transformations using Earth rotation.

Provides rotation matrices and state-vector transformations between the
inertial frame of SGP4 output (TEME, treated here as ECI) and the
Earth-Centered Earth-Fixed (ECEF) frame.

The transformation uses only the Earth rotation component, a single
:math:`R_z(\\theta_{\\text{GMST}})` rotation.  Polar motion and the
equation of the equinoxes are not applied.

Positions are in km and velocities in km/s, matching SGP4 output.

References:
    1. D. Vallado, *Fundamentals of Astrodynamics and Applications*,
       4th ed., Microcosm Press, 2013, Sec. 3.7.
    2. O. Montenbruck and E. Gill, *Satellite Orbits: Models, Methods
       and Applications*, Springer, 2012, Sec. 5.2.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from orbitax.config import get_dtype
from orbitax.constants import OMEGA_EARTH
from orbitax.utils import to_radians


def Rz(angle: ArrayLike, use_degrees: bool = False) -> Array:
    """Rotation matrix, for a rotation about the z-axis.

    Args:
        angle (ArrayLike): Counter-clockwise angle of rotation as viewed
            looking back along the postive direction of the rotation axis.
        use_degrees (bool): Handle input in degrees. Default: ``False``

    Returns:
        jax.Array: Rotation matrix.

    References:

        1. O. Montenbruck, and E. Gill, *Satellite Orbits: Models, Methods and Applications*, 2012, p.27.
    """
    angle = to_radians(jnp.asarray(angle, dtype=get_dtype()), use_degrees)

    c = jnp.cos(angle)
    s = jnp.sin(angle)

    return jnp.array([[ +c,   +s,  0.0],
                      [ -s,   +c,  0.0],
                      [0.0,  0.0,  1.0]])


def rotation_eci_to_ecef(gmst: ArrayLike) -> Array:
    """Compute the 3x3 rotation matrix from the ECI frame to the ECEF frame.

    Args:
        gmst: Greenwich mean sidereal angle [rad], e.g. from
            :func:`orbitax.time.gmst`.

    Returns:
        jax.Array: 3x3 rotation matrix (ECI → ECEF).

    Example:
        >>> from orbitax.frames import rotation_eci_to_ecef
        >>> R = rotation_eci_to_ecef(1.0)
        >>> R.shape
        (3, 3)
    """
    return Rz(gmst)


def rotation_ecef_to_eci(gmst: ArrayLike) -> Array:
    """Compute the 3x3 rotation matrix from the ECEF frame to the ECI frame.

    This is the transpose of :func:`rotation_eci_to_ecef`.

    Args:
        gmst: Greenwich mean sidereal angle [rad].

    Returns:
        jax.Array: 3x3 rotation matrix (ECEF → ECI).
    """
    return Rz(gmst).T


def _omega(dtype) -> Array:
    return jnp.array([0.0, 0.0, OMEGA_EARTH], dtype=dtype)


def state_eci_to_ecef(r_eci: ArrayLike, v_eci: ArrayLike, gmst: ArrayLike) -> tuple[Array, Array]:
    """Transform a position/velocity pair from ECI to ECEF.

    Rotates position and velocity, and subtracts the velocity contribution
    from Earth's rotation:

    .. math::

        \\mathbf{r}_{\\text{ECEF}} &= R \\, \\mathbf{r}_{\\text{ECI}} \\\\
        \\mathbf{v}_{\\text{ECEF}} &= R \\, \\mathbf{v}_{\\text{ECI}}
            - \\boldsymbol{\\omega} \\times \\mathbf{r}_{\\text{ECEF}}

    where :math:`R = R_z(\\theta_{\\text{GMST}})` and
    :math:`\\boldsymbol{\\omega} = [0, 0, \\omega_\\oplus]^T`.

    Args:
        r_eci: ECI position ``[x, y, z]`` [km].
        v_eci: ECI velocity ``[vx, vy, vz]`` [km/s].
        gmst: Greenwich mean sidereal angle [rad].

    Returns:
        Tuple ``(r_ecef, v_ecef)`` in km and km/s.

    Example:
        >>> import jax.numpy as jnp
        >>> from orbitax.frames import state_eci_to_ecef
        >>> r, v = state_eci_to_ecef(jnp.array([7000.0, 0.0, 0.0]), jnp.array([0.0, 7.5, 0.0]), 0.0)
        >>> r.shape
        (3,)
    """
    dtype = get_dtype()
    r_eci = jnp.asarray(r_eci, dtype=dtype)
    v_eci = jnp.asarray(v_eci, dtype=dtype)

    R = rotation_eci_to_ecef(gmst)

    r_ecef = R @ r_eci
    v_ecef = R @ v_eci - jnp.cross(_omega(dtype), r_ecef)

    return r_ecef, v_ecef


def state_ecef_to_eci(r_ecef: ArrayLike, v_ecef: ArrayLike, gmst: ArrayLike) -> tuple[Array, Array]:
    """Transform a position/velocity pair from ECEF to ECI.

    Inverse of :func:`state_eci_to_ecef`: adds back the rotational velocity
    before rotating into the inertial frame.

    Args:
        r_ecef: ECEF position ``[x, y, z]`` [km].
        v_ecef: ECEF velocity ``[vx, vy, vz]`` [km/s].
        gmst: Greenwich mean sidereal angle [rad].

    Returns:
        Tuple ``(r_eci, v_eci)`` in km and km/s.
    """
    dtype = get_dtype()
    r_ecef = jnp.asarray(r_ecef, dtype=dtype)
    v_ecef = jnp.asarray(v_ecef, dtype=dtype)

    Rt = rotation_ecef_to_eci(gmst)

    r_eci = Rt @ r_ecef
    v_eci = Rt @ (v_ecef + jnp.cross(_omega(dtype), r_ecef))

    return r_eci, v_eci

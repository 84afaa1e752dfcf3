"""
Near-Earth (SGP4) propagation and the kernel shared with the deep-space path.

Everything here is a pure JAX function of a model and a time since epoch, so
it can be wrapped in ``jax.jit`` and mapped over time arrays with
``jax.vmap``.  Failures never raise: the functions return an ``int32`` error
code alongside position and velocity vectors that are NaN when the code is
non-zero.
"""

from __future__ import annotations

from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from orbitax.sgp4._constants import KEPLER_MAX_ITERATIONS, KEPLER_MAX_STEP, KEPLER_TOLERANCE
from orbitax.sgp4._errors import SGP4Error
from orbitax.sgp4._types import NearEarthModel, OrbitCoefficients

_twopi = 2.0 * jnp.pi
_x2o3 = 2.0 / 3.0


class KeplerSolution(NamedTuple):
    """Result of :func:`solve_kepler`.

    Attributes:
        eo1: Eccentric longitude ``E + omega`` [rad].
        iterations: Number of Newton steps taken.
        converged: Whether the last step fell below the tolerance.
    """

    eo1: Array
    iterations: Array
    converged: Array


def solve_kepler(
    u: ArrayLike,
    axnl: ArrayLike,
    aynl: ArrayLike,
    max_iterations: int = KEPLER_MAX_ITERATIONS,
    tolerance: float = KEPLER_TOLERANCE,
) -> KeplerSolution:
    """Solve the equinoctial form of Kepler's equation.

    Solves ``u = eo1 - axnl * sin(eo1) + aynl * cos(eo1)`` with Newton
    iterations whose step is clipped to ``KEPLER_MAX_STEP``.  Iteration stops
    when the step falls below ``tolerance`` or after ``max_iterations``
    steps.  A solve that hits the cap is not an error: the last iterate is
    returned with ``converged=False``.

    Args:
        u: Mean longitude measured from the node [rad].
        axnl: ``e * cos(omega)`` including long-period terms.
        aynl: ``e * sin(omega)`` including long-period terms.
        max_iterations: Iteration cap. Default: ``KEPLER_MAX_ITERATIONS``
        tolerance: Step size at which the solve is converged [rad].
            Default: ``KEPLER_TOLERANCE``

    Returns:
        KeplerSolution: The solution and its convergence status.
    """
    u = jnp.asarray(u)

    def cond(state):
        _, tem5, k = state
        return (jnp.abs(tem5) >= tolerance) & (k < max_iterations)

    def body(state):
        eo1, _, k = state
        sineo1 = jnp.sin(eo1)
        coseo1 = jnp.cos(eo1)
        tem5 = (u - aynl * coseo1 + axnl * sineo1 - eo1) / (1.0 - coseo1 * axnl - sineo1 * aynl)
        tem5 = jnp.clip(tem5, -KEPLER_MAX_STEP, KEPLER_MAX_STEP)
        return eo1 + tem5, tem5, k + 1

    init_state = (u, jnp.full_like(u, 9999.9), jnp.int32(0))
    eo1, tem5, k = jax.lax.while_loop(cond, body, init_state)
    return KeplerSolution(eo1=eo1, iterations=k, converged=jnp.abs(tem5) < tolerance)


def error_code(
    nm: ArrayLike,
    em: ArrayLike,
    ep: ArrayLike,
    pl: ArrayLike,
    mrt: ArrayLike,
) -> Array:
    """Combine the propagation guards into one code, earliest check first."""
    code = jnp.where(mrt < 1.0, int(SGP4Error.DECAYED), int(SGP4Error.NONE))
    code = jnp.where(pl < 0.0, int(SGP4Error.SEMI_LATUS_RECTUM), code)
    code = jnp.where((ep < 0.0) | (ep > 1.0), int(SGP4Error.PERTURBED_ECCENTRICITY), code)
    code = jnp.where((em >= 1.0) | (em < -0.001), int(SGP4Error.MEAN_ECCENTRICITY), code)
    code = jnp.where(nm <= 0.0, int(SGP4Error.MEAN_MOTION), code)
    return code.astype(jnp.int32)


def secular_update(orbit: OrbitCoefficients, t: ArrayLike) -> tuple[Array, ...]:
    """Apply secular gravity and atmospheric drag up to time ``t``.

    Returns:
        Tuple of ``(mm, argpm, nodem, tempa, tempe, templ)``: mean anomaly,
        argument of perigee and node [rad], and the drag factors applied to
        the semi-major axis, eccentricity and mean longitude.
    """
    xmdf = orbit.mo + orbit.mdot * t
    argpdf = orbit.argpo + orbit.argpdot * t
    nodedf = orbit.nodeo + orbit.nodedot * t
    t2 = t * t
    nodem = nodedf + orbit.nodecf * t2
    tempa = 1.0 - orbit.cc1 * t
    tempe = orbit.bstar * orbit.cc4 * t
    templ = orbit.t2cof * t2

    # Higher-order drag terms, only for the full (non-simple) expansion
    delomg = orbit.omgcof * t
    delmtemp = 1.0 + orbit.eta * jnp.cos(xmdf)
    delm = orbit.xmcof * (delmtemp * delmtemp * delmtemp - orbit.delmo)
    temp = delomg + delm
    mm_full = xmdf + temp
    t3 = t2 * t
    t4 = t3 * t

    full = orbit.isimp < 0.5
    mm = jnp.where(full, mm_full, xmdf)
    argpm = jnp.where(full, argpdf - temp, argpdf)
    tempa = jnp.where(full, tempa - orbit.d2 * t2 - orbit.d3 * t3 - orbit.d4 * t4, tempa)
    tempe = jnp.where(full, tempe + orbit.bstar * orbit.cc5 * (jnp.sin(mm_full) - orbit.sinmao), tempe)
    templ = jnp.where(full, templ + orbit.t3cof * t3 + t4 * (orbit.t4cof + t * orbit.t5cof), templ)

    return mm, argpm, nodem, tempa, tempe, templ


def mean_elements(
    orbit: OrbitCoefficients,
    nm: ArrayLike,
    em: ArrayLike,
    mm: ArrayLike,
    argpm: ArrayLike,
    nodem: ArrayLike,
    tempa: ArrayLike,
    tempe: ArrayLike,
    templ: ArrayLike,
) -> tuple[Array, ...]:
    """Apply the drag factors and wrap the angles of the secularly updated elements.

    Returns:
        Tuple of ``(am, nm, em, mm, argpm, nodem)``.  ``em`` is floored at
        ``1e-6`` after its range has been checked by the caller.
    """
    am = (orbit.xke / nm) ** _x2o3 * tempa * tempa
    nm = orbit.xke / am**1.5
    em = em - tempe

    mm = mm + orbit.no_unkozai * templ
    xlm = mm + argpm + nodem

    nodem = jnp.fmod(nodem, _twopi)
    argpm = jnp.fmod(argpm, _twopi)
    xlm = jnp.fmod(xlm, _twopi)
    mm = jnp.fmod(xlm - argpm - nodem, _twopi)

    return am, nm, em, mm, argpm, nodem


def periodics_to_state(
    orbit: OrbitCoefficients,
    nm: ArrayLike,
    am: ArrayLike,
    ep: ArrayLike,
    xincp: ArrayLike,
    argpp: ArrayLike,
    nodep: ArrayLike,
    mp: ArrayLike,
    aycof: ArrayLike,
    xlcof: ArrayLike,
    con41: ArrayLike,
    x1mth2: ArrayLike,
    x7thm1: ArrayLike,
) -> tuple[Array, Array, Array, Array]:
    """Add long- and short-period terms, solve Kepler's equation, and form r and v.

    The equinoctial variables ``axnl``/``aynl`` and the mean longitude keep
    the solution regular at small eccentricity.

    Returns:
        Tuple of ``(r, v, pl, mrt)``: TEME position [km], velocity [km/s],
        semi-latus rectum [er] and radius [er] used by the error guards.
    """
    sinip = jnp.sin(xincp)
    cosip = jnp.cos(xincp)

    # Long period periodics
    axnl = ep * jnp.cos(argpp)
    temp = 1.0 / (am * (1.0 - ep * ep))
    aynl = ep * jnp.sin(argpp) + temp * aycof
    xl = mp + argpp + nodep + temp * xlcof * axnl

    # Kepler's equation
    u = jnp.fmod(xl - nodep, _twopi)
    eo1 = solve_kepler(u, axnl, aynl).eo1
    sineo1 = jnp.sin(eo1)
    coseo1 = jnp.cos(eo1)

    # Short period preliminary quantities
    ecose = axnl * coseo1 + aynl * sineo1
    esine = axnl * sineo1 - aynl * coseo1
    el2 = axnl * axnl + aynl * aynl
    pl = am * (1.0 - el2)

    rl = am * (1.0 - ecose)
    rdotl = jnp.sqrt(am) * esine / rl
    rvdotl = jnp.sqrt(pl) / rl
    betal = jnp.sqrt(1.0 - el2)
    temp = esine / (1.0 + betal)
    sinu = am / rl * (sineo1 - aynl - axnl * temp)
    cosu = am / rl * (coseo1 - axnl + aynl * temp)
    su = jnp.arctan2(sinu, cosu)
    sin2u = (cosu + cosu) * sinu
    cos2u = 1.0 - 2.0 * sinu * sinu
    temp = 1.0 / pl
    temp1 = 0.5 * orbit.j2 * temp
    temp2 = temp1 * temp

    # Short period periodics
    mrt = rl * (1.0 - 1.5 * temp2 * betal * con41) + 0.5 * temp1 * x1mth2 * cos2u
    su = su - 0.25 * temp2 * x7thm1 * sin2u
    xnode = nodep + 1.5 * temp2 * cosip * sin2u
    xinc = xincp + 1.5 * temp2 * cosip * sinip * cos2u
    mvt = rdotl - nm * temp1 * x1mth2 * sin2u / orbit.xke
    rvdot = rvdotl + nm * temp1 * (x1mth2 * cos2u + 1.5 * con41) / orbit.xke

    # Orientation vectors
    sinsu = jnp.sin(su)
    cossu = jnp.cos(su)
    snod = jnp.sin(xnode)
    cnod = jnp.cos(xnode)
    sini = jnp.sin(xinc)
    cosi = jnp.cos(xinc)
    xmx = -snod * cosi
    xmy = cnod * cosi
    uvec = jnp.stack([xmx * sinsu + cnod * cossu, xmy * sinsu + snod * cossu, sini * sinsu])
    vvec = jnp.stack([xmx * cossu - cnod * sinsu, xmy * cossu - snod * sinsu, sini * cossu])

    vkmpersec = orbit.radiusearthkm * orbit.xke / 60.0
    r = mrt * orbit.radiusearthkm * uvec
    v = (mvt * uvec + rvdot * vvec) * vkmpersec

    return r, v, pl, mrt


def mask_invalid(r: Array, v: Array, code: Array) -> tuple[Array, Array]:
    """Replace r and v with NaN wherever ``code`` reports an error."""
    valid = code == int(SGP4Error.NONE)
    return jnp.where(valid, r, jnp.nan), jnp.where(valid, v, jnp.nan)


def sgp4_near_earth(model: NearEarthModel, tsince: ArrayLike) -> tuple[Array, Array, Array]:
    """Propagate a near-Earth orbit with SGP4 (JAX, JIT-compatible).

    Args:
        model: Near-Earth model from :func:`~orbitax.sgp4.sgp4_init`.
        tsince: Time since epoch [min]. Negative values propagate backward.

    Returns:
        Tuple of ``(r, v, error)`` where ``r`` is position [km] and ``v`` is
        velocity [km/s] in the TEME frame, and ``error`` is an ``int32``
        :class:`SGP4Error` code.  ``r`` and ``v`` are NaN when ``error`` is
        non-zero.
    """
    orbit = model.orbit
    t = jnp.asarray(tsince, dtype=orbit.no_unkozai.dtype)

    mm, argpm, nodem, tempa, tempe, templ = secular_update(orbit, t)
    nm = orbit.no_unkozai
    am, nm_out, em, mm, argpm, nodem = mean_elements(
        orbit, nm, orbit.ecco, mm, argpm, nodem, tempa, tempe, templ
    )
    em_checked = em
    em = jnp.maximum(em, 1.0e-6)

    r, v, pl, mrt = periodics_to_state(
        orbit,
        nm_out,
        am,
        em,
        orbit.inclo,
        argpm,
        nodem,
        mm,
        orbit.aycof,
        orbit.xlcof,
        orbit.con41,
        orbit.x1mth2,
        orbit.x7thm1,
    )

    code = error_code(nm, em_checked, em, pl, mrt)
    r, v = mask_invalid(r, v, code)
    return r, v, code

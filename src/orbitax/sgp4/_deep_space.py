"""
Deep-space (SDP4) propagation.

Adds three effects to the near-Earth secular update: lunar and solar secular
rates, numerically integrated geopotential resonance for 12 h and 24 h
orbits, and lunar and solar periodics.  The resonance integrator carries
state between calls; here that state is an explicit
:class:`ResonanceState` argument and return value, so the functions stay
pure and JIT-compatible.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from orbitax.sgp4._constants import RESONANCE_STEP, RESONANCE_STEP2
from orbitax.sgp4._deep_space_init import RPTIM, ZEL, ZES, ZNL, ZNS
from orbitax.sgp4._near_earth import (
    error_code,
    mask_invalid,
    mean_elements,
    periodics_to_state,
    secular_update,
)
from orbitax.sgp4._types import (
    DeepSpaceModel,
    LunarSolarCoefficients,
    ResonanceCoefficients,
    ResonanceState,
)

_twopi = 2.0 * jnp.pi

# Resonance phase constants [rad]
_FASX2 = 0.13130908
_FASX4 = 2.8843198
_FASX6 = 0.37448087
_G22 = 5.7686396
_G32 = 0.95240898
_G44 = 1.8014998
_G52 = 1.0508330
_G54 = 4.4108898

# Below this inclination the Lyddane form of the periodics is used [rad]
_LYDDANE_INCLINATION = 0.2


def _third_body_terms(zm, ecc):
    zf = zm + 2.0 * ecc * jnp.sin(zm)
    sinzf = jnp.sin(zf)
    f2 = 0.5 * sinzf * sinzf - 0.25
    f3 = -0.5 * sinzf * jnp.cos(zf)
    return f2, f3, sinzf


def dpper(
    ls: LunarSolarCoefficients,
    t: ArrayLike,
    ep: ArrayLike,
    inclp: ArrayLike,
    nodep: ArrayLike,
    argpp: ArrayLike,
    mp: ArrayLike,
    afspc: ArrayLike,
) -> tuple[Array, Array, Array, Array, Array]:
    """Apply lunar and solar periodics to the mean elements.

    Args:
        ls: Lunar/solar coefficients of the model.
        t: Time since epoch [min].
        ep: Eccentricity.
        inclp: Inclination [rad].
        nodep: Right ascension of the ascending node [rad].
        argpp: Argument of perigee [rad].
        mp: Mean anomaly [rad].
        afspc: ``1.0`` for the AFSPC operation mode, which keeps the node in
            ``[0, 2*pi)`` in the Lyddane branch.

    Returns:
        Tuple of ``(ep, inclp, nodep, argpp, mp)`` with the periodics applied.
    """
    # Solar terms
    f2, f3, sinzf = _third_body_terms(ls.zmos + ZNS * t, ZES)
    ses = ls.se2 * f2 + ls.se3 * f3
    sis = ls.si2 * f2 + ls.si3 * f3
    sls = ls.sl2 * f2 + ls.sl3 * f3 + ls.sl4 * sinzf
    sghs = ls.sgh2 * f2 + ls.sgh3 * f3 + ls.sgh4 * sinzf
    shs = ls.sh2 * f2 + ls.sh3 * f3

    # Lunar terms
    f2, f3, sinzf = _third_body_terms(ls.zmol + ZNL * t, ZEL)
    sel = ls.ee2 * f2 + ls.e3 * f3
    sil = ls.xi2 * f2 + ls.xi3 * f3
    sll = ls.xl2 * f2 + ls.xl3 * f3 + ls.xl4 * sinzf
    sghl = ls.xgh2 * f2 + ls.xgh3 * f3 + ls.xgh4 * sinzf
    shll = ls.xh2 * f2 + ls.xh3 * f3

    pe = ses + sel - ls.peo
    pinc = sis + sil - ls.pinco
    pl = sls + sll - ls.plo
    pgh = sghs + sghl - ls.pgho
    ph = shs + shll - ls.pho

    inclp = inclp + pinc
    ep = ep + pe
    sinip = jnp.sin(inclp)
    cosip = jnp.cos(inclp)

    # Direct application
    ph_direct = ph / sinip
    argpp_direct = argpp + pgh - cosip * ph_direct
    nodep_direct = nodep + ph_direct

    # Lyddane modification
    sinop = jnp.sin(nodep)
    cosop = jnp.cos(nodep)
    alfdp = sinip * sinop + ph * cosop + pinc * cosip * sinop
    betdp = sinip * cosop - ph * sinop + pinc * cosip * cosop
    afspc_mode = afspc > 0.5
    xnoh = jnp.fmod(nodep, _twopi)
    xnoh = jnp.where(afspc_mode & (xnoh < 0.0), xnoh + _twopi, xnoh)
    xls = mp + argpp + pl + pgh + (cosip - pinc * sinip) * xnoh
    nodep_lyd = jnp.arctan2(alfdp, betdp)
    nodep_lyd = jnp.where(afspc_mode & (nodep_lyd < 0.0), nodep_lyd + _twopi, nodep_lyd)
    nodep_lyd = jnp.where(
        jnp.abs(xnoh - nodep_lyd) > jnp.pi,
        jnp.where(nodep_lyd < xnoh, nodep_lyd + _twopi, nodep_lyd - _twopi),
        nodep_lyd,
    )
    mp = mp + pl
    argpp_lyd = xls - mp - cosip * nodep_lyd

    direct = inclp >= _LYDDANE_INCLINATION
    argpp = jnp.where(direct, argpp_direct, argpp_lyd)
    nodep = jnp.where(direct, nodep_direct, nodep_lyd)

    return ep, inclp, nodep, argpp, mp


def _resonance_rates(res: ResonanceCoefficients, argpo, argpdot, xli, xni, atime):
    """Return ``(xndt, xldot, xnddt)`` of the resonance equations at one step."""
    xldot = xni + res.xfact

    # Synchronous resonance
    xndt_sync = (
        res.del1 * jnp.sin(xli - _FASX2)
        + res.del2 * jnp.sin(2.0 * (xli - _FASX4))
        + res.del3 * jnp.sin(3.0 * (xli - _FASX6))
    )
    xnddt_sync = (
        res.del1 * jnp.cos(xli - _FASX2)
        + 2.0 * res.del2 * jnp.cos(2.0 * (xli - _FASX4))
        + 3.0 * res.del3 * jnp.cos(3.0 * (xli - _FASX6))
    )

    # Half-day resonance
    xomi = argpo + argpdot * atime
    x2omi = xomi + xomi
    x2li = xli + xli
    xndt_half = (
        res.d2201 * jnp.sin(x2omi + xli - _G22)
        + res.d2211 * jnp.sin(xli - _G22)
        + res.d3210 * jnp.sin(xomi + xli - _G32)
        + res.d3222 * jnp.sin(-xomi + xli - _G32)
        + res.d4410 * jnp.sin(x2omi + x2li - _G44)
        + res.d4422 * jnp.sin(x2li - _G44)
        + res.d5220 * jnp.sin(xomi + xli - _G52)
        + res.d5232 * jnp.sin(-xomi + xli - _G52)
        + res.d5421 * jnp.sin(xomi + x2li - _G54)
        + res.d5433 * jnp.sin(-xomi + x2li - _G54)
    )
    xnddt_half = (
        res.d2201 * jnp.cos(x2omi + xli - _G22)
        + res.d2211 * jnp.cos(xli - _G22)
        + res.d3210 * jnp.cos(xomi + xli - _G32)
        + res.d3222 * jnp.cos(-xomi + xli - _G32)
        + res.d5220 * jnp.cos(xomi + xli - _G52)
        + res.d5232 * jnp.cos(-xomi + xli - _G52)
        + 2.0
        * (
            res.d4410 * jnp.cos(x2omi + x2li - _G44)
            + res.d4422 * jnp.cos(x2li - _G44)
            + res.d5421 * jnp.cos(xomi + x2li - _G54)
            + res.d5433 * jnp.cos(-xomi + x2li - _G54)
        )
    )

    synchronous = res.irez < 1.5
    xndt = jnp.where(synchronous, xndt_sync, xndt_half)
    xnddt = jnp.where(synchronous, xnddt_sync, xnddt_half) * xldot
    return xndt, xldot, xnddt


def dspace(
    model: DeepSpaceModel,
    state: ResonanceState,
    t: ArrayLike,
    em: ArrayLike,
    argpm: ArrayLike,
    inclm: ArrayLike,
    mm: ArrayLike,
    nodem: ArrayLike,
) -> tuple[Array, Array, Array, Array, Array, Array, ResonanceState]:
    """Apply lunar/solar secular rates and integrate the resonance terms to ``t``.

    The integrator steps from ``state.atime`` towards ``t`` in 720 minute
    steps and interpolates the remainder with a second-order Taylor step.
    It restarts from epoch when the state is fresh (``atime == 0``), when
    ``t`` lies on the other side of epoch, or when ``t`` is closer to epoch
    than ``atime``.

    Returns:
        Tuple of ``(em, argpm, inclm, mm, nodem, nm, new_state)``.  For a
        non-resonant orbit ``nm`` is the un-Kozai mean motion and the state
        is returned unchanged.
    """
    orbit = model.orbit
    ls = model.lunar_solar
    res = model.resonance
    no = orbit.no_unkozai

    em = em + ls.dedt * t
    inclm = inclm + ls.didt * t
    argpm = argpm + ls.domdt * t
    nodem = nodem + ls.dnodt * t
    mm = mm + ls.dmdt * t

    resonant = res.irez > 0.5
    theta = jnp.fmod(orbit.gsto + t * RPTIM, _twopi)

    restart = (state.atime == 0.0) | (t * state.atime <= 0.0) | (jnp.abs(t) < jnp.abs(state.atime))
    atime = jnp.where(restart, 0.0, state.atime)
    xli = jnp.where(restart, res.xlamo, state.xli)
    xni = jnp.where(restart, no, state.xni)

    delt = jnp.where(t > 0.0, RESONANCE_STEP, -RESONANCE_STEP)

    def cond(carry):
        atime_s, _, _ = carry
        return resonant & (jnp.abs(t - atime_s) >= RESONANCE_STEP)

    def body(carry):
        atime_s, xli_s, xni_s = carry
        xndt, xldot, xnddt = _resonance_rates(res, orbit.argpo, orbit.argpdot, xli_s, xni_s, atime_s)
        xli_s = xli_s + xldot * delt + xndt * RESONANCE_STEP2
        xni_s = xni_s + xndt * delt + xnddt * RESONANCE_STEP2
        return atime_s + delt, xli_s, xni_s

    atime, xli, xni = jax.lax.while_loop(cond, body, (atime, xli, xni))

    ft = t - atime
    xndt, xldot, xnddt = _resonance_rates(res, orbit.argpo, orbit.argpdot, xli, xni, atime)
    nm_res = xni + xndt * ft + xnddt * ft * ft * 0.5
    xl = xli + xldot * ft + xndt * ft * ft * 0.5

    mm_res = jnp.where(
        res.irez < 1.5,
        xl - nodem - argpm + theta,
        xl - 2.0 * nodem + 2.0 * theta,
    )

    nm = jnp.where(resonant, nm_res, no)
    mm = jnp.where(resonant, mm_res, mm)
    new_state = ResonanceState(
        atime=jnp.where(resonant, atime, state.atime),
        xli=jnp.where(resonant, xli, state.xli),
        xni=jnp.where(resonant, xni, state.xni),
    )
    return em, argpm, inclm, mm, nodem, nm, new_state


def sdp4_propagate(
    model: DeepSpaceModel,
    tsince: ArrayLike,
    state: ResonanceState,
) -> tuple[Array, Array, Array, ResonanceState]:
    """Propagate a deep-space orbit with SDP4 (JAX, JIT-compatible).

    Args:
        model: Deep-space model from :func:`~orbitax.sgp4.sgp4_init`.
        tsince: Time since epoch [min].
        state: Resonance integrator state left by the previous call, or the
            initial state for a fresh model.

    Returns:
        Tuple of ``(r, v, error, new_state)``: TEME position [km] and
        velocity [km/s] (NaN on error), the ``int32`` error code, and the
        updated resonance state.
    """
    orbit = model.orbit
    t = jnp.asarray(tsince, dtype=orbit.no_unkozai.dtype)

    # The deep-space path always uses the truncated drag expansion
    mm, argpm, nodem, tempa, tempe, templ = secular_update(orbit, t)

    em, argpm, inclm, mm, nodem, nm, new_state = dspace(
        model, state, t, orbit.ecco, argpm, orbit.inclo, mm, nodem
    )

    am, nm_out, em, mm, argpm, nodem = mean_elements(
        orbit, nm, em, mm, argpm, nodem, tempa, tempe, templ
    )
    em_checked = em
    em = jnp.maximum(em, 1.0e-6)

    ep, xincp, nodep, argpp, mp = dpper(
        model.lunar_solar, t, em, inclm, nodem, argpm, mm, orbit.afspc
    )

    negative = xincp < 0.0
    xincp = jnp.where(negative, -xincp, xincp)
    nodep = jnp.where(negative, nodep + jnp.pi, nodep)
    argpp = jnp.where(negative, argpp - jnp.pi, argpp)

    # Inclination-dependent coefficients follow the perturbed inclination
    sinip = jnp.sin(xincp)
    cosip = jnp.cos(xincp)
    aycof = -0.5 * orbit.j3oj2 * sinip
    denom = jnp.where(jnp.abs(cosip + 1.0) > 1.5e-12, 1.0 + cosip, 1.5e-12)
    xlcof = -0.25 * orbit.j3oj2 * sinip * (3.0 + 5.0 * cosip) / denom
    cosisq = cosip * cosip

    r, v, pl, mrt = periodics_to_state(
        orbit,
        nm_out,
        am,
        ep,
        xincp,
        argpp,
        nodep,
        mp,
        aycof,
        xlcof,
        3.0 * cosisq - 1.0,
        1.0 - cosisq,
        7.0 * cosisq - 1.0,
    )

    code = error_code(nm, em_checked, ep, pl, mrt)
    r, v = mask_invalid(r, v, code)
    return r, v, code, new_state

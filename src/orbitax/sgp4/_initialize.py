"""
SGP4/SDP4 model initialization.

Converts raw TLE elements into working units and evaluates every quantity
that depends only on the element set: the recovered (un-Kozai) mean motion,
the secular rates due to J2/J3/J4, the drag coefficients and, for deep-space
orbits, the lunar/solar and resonance coefficients.  This runs once per
element set at Python time using ``math`` floats; the result is packed into
a :class:`NearEarthModel` or :class:`DeepSpaceModel` of JAX arrays.
"""

from __future__ import annotations

import logging
from math import cos, fabs, isfinite, pi, sin, sqrt
from typing import NamedTuple

import jax
import jax.numpy as jnp

from orbitax.config import get_dtype
from orbitax.constants import DEG2RAD, JD1950
from orbitax.sgp4._constants import (
    DEEP_SPACE_PERIOD,
    OPSMODES,
    SIMPLE_DRAG_PERIGEE,
    EarthGravity,
)
from orbitax.sgp4._deep_space_init import deep_space_init
from orbitax.sgp4._errors import SGP4Error
from orbitax.sgp4._types import (
    DeepSpaceModel,
    NearEarthModel,
    OrbitCoefficients,
    ResonanceState,
    SGP4Model,
    TLEElements,
)

logger = logging.getLogger(__name__)

_twopi = 2.0 * pi
_x2o3 = 2.0 / 3.0

# Revolutions per day to radians per minute
XPDOTP = 1440.0 / _twopi


def _gstime(jdut1: float) -> float:
    """Compute Greenwich Sidereal Time from Julian date (Python floats)."""
    tut1 = (jdut1 - 2451545.0) / 36525.0
    temp = (
        -6.2e-6 * tut1 * tut1 * tut1
        + 0.093104 * tut1 * tut1
        + (876600.0 * 3600 + 8640184.812866) * tut1
        + 67310.54841
    )
    temp = (temp * (pi / 180.0) / 240.0) % _twopi
    if temp < 0.0:
        temp += _twopi
    return temp


def _gstime_afspc(epoch: float) -> float:
    """Sidereal time at epoch using the legacy 1970-referenced AFSPC formula."""
    ts70 = epoch - 7305.0
    ds70 = (ts70 + 1.0e-8) // 1.0
    tfrac = ts70 - ds70
    c1 = 1.72027916940703639e-2
    thgr70 = 1.7321343856509374
    fk5r = 5.07551419432269442e-15
    c1p2p = c1 + _twopi
    gsto = (thgr70 + c1 * ds70 + c1p2p * tfrac + ts70 * ts70 * fk5r) % _twopi
    if gsto < 0.0:
        gsto = gsto + _twopi
    return gsto


class _Initl(NamedTuple):
    no_unkozai: float
    ao: float
    con41: float
    con42: float
    cosio: float
    cosio2: float
    eccsq: float
    omeosq: float
    posq: float
    rp: float
    rteosq: float
    sinio: float
    gsto: float


def _initl(
    xke: float,
    j2: float,
    ecco: float,
    epoch: float,
    inclo: float,
    no: float,
    opsmode: str,
) -> _Initl:
    """Recover the un-Kozai mean motion and the auxiliary epoch quantities.

    Args:
        xke: Gravity constant xke.
        j2: J2 zonal harmonic.
        ecco: Eccentricity.
        epoch: Days since 1950 Jan 0.
        inclo: Inclination [rad].
        no: Mean motion (Kozai) [rad/min].
        opsmode: Operation mode ('a' or 'i').
    """
    eccsq = ecco * ecco
    omeosq = 1.0 - eccsq
    rteosq = sqrt(omeosq)
    cosio = cos(inclo)
    cosio2 = cosio * cosio

    # Un-Kozai the mean motion
    ak = (xke / no) ** _x2o3
    d1 = 0.75 * j2 * (3.0 * cosio2 - 1.0) / (rteosq * omeosq)
    del_ = d1 / (ak * ak)
    adel = ak * (1.0 - del_ * del_ - del_ * (1.0 / 3.0 + 134.0 * del_ * del_ / 81.0))
    del_ = d1 / (adel * adel)
    no = no / (1.0 + del_)

    ao = (xke / no) ** _x2o3
    po = ao * omeosq
    con42 = 1.0 - 5.0 * cosio2

    if opsmode == "a":
        gsto = _gstime_afspc(epoch)
    else:
        gsto = _gstime(epoch + JD1950)

    return _Initl(
        no_unkozai=no,
        ao=ao,
        con41=-con42 - cosio2 - cosio2,
        con42=con42,
        cosio=cosio,
        cosio2=cosio2,
        eccsq=eccsq,
        omeosq=omeosq,
        posq=po * po,
        rp=ao * (1.0 - ecco),
        rteosq=rteosq,
        sinio=sin(inclo),
        gsto=gsto,
    )


def _epoch_elements_valid(ecco: float, no_kozai: float, bstar: float, angles: tuple[float, ...]) -> bool:
    if not all(isfinite(x) for x in (ecco, no_kozai, bstar, *angles)):
        return False
    return 0.0 <= ecco < 1.0 and no_kozai > 0.0


def _as_arrays(tree):
    dtype = get_dtype()
    return jax.tree_util.tree_map(lambda x: jnp.asarray(x, dtype=dtype), tree)


def build_model(
    elements: TLEElements,
    gravity: EarthGravity,
    opsmode: str = "i",
) -> tuple[SGP4Model | None, ResonanceState | None, SGP4Error]:
    """Evaluate the SGP4 or SDP4 model of an element set.

    The orbit regime is decided here, once, from the recovered mean motion:
    periods of 225 minutes or more select the deep-space model.

    Args:
        elements: Parsed TLE elements.
        gravity: Earth gravity model constants.
        opsmode: Operation mode ('i' for improved, 'a' for AFSPC).

    Returns:
        Tuple of ``(model, resonance_state, error)``.  ``resonance_state`` is
        only present for deep-space models.  When the epoch elements are
        invalid, ``model`` is ``None`` and ``error`` is
        :attr:`SGP4Error.EPOCH_ELEMENTS`.

    Raises:
        ValueError: If ``opsmode`` is not ``'i'`` or ``'a'``.
    """
    if opsmode not in OPSMODES:
        raise ValueError(f"Unknown opsmode '{opsmode}'. Must be one of: {', '.join(OPSMODES)}")

    # Working units: radians, rad/min, earth radii
    ecco = elements.eccentricity
    bstar = elements.bstar
    inclo = elements.inclination * DEG2RAD
    nodeo = elements.raan * DEG2RAD
    argpo = elements.arg_perigee * DEG2RAD
    mo = elements.mean_anomaly * DEG2RAD
    no_kozai = elements.mean_motion / XPDOTP

    if not _epoch_elements_valid(ecco, no_kozai, bstar, (inclo, nodeo, argpo, mo)):
        return None, None, SGP4Error.EPOCH_ELEMENTS

    jdsatepoch, jdsatepochF = elements.epoch_jd
    epoch = jdsatepoch + jdsatepochF - JD1950

    radiusearthkm = gravity.radiusearthkm
    j2 = gravity.j2
    j3oj2 = gravity.j3oj2
    temp4 = 1.5e-12

    ss = 78.0 / radiusearthkm + 1.0
    qzms2ttemp = (120.0 - 78.0) / radiusearthkm
    qzms2t = qzms2ttemp**4
    sfour = ss

    il = _initl(gravity.xke, j2, ecco, epoch, inclo, no_kozai, opsmode)
    no_unkozai = il.no_unkozai
    ao = il.ao
    cosio = il.cosio
    cosio2 = il.cosio2
    sinio = il.sinio
    omeosq = il.omeosq
    rteosq = il.rteosq
    con41 = il.con41

    if not (no_unkozai > 0.0 and isfinite(no_unkozai)):
        return None, None, SGP4Error.EPOCH_ELEMENTS

    isimp = 0
    if il.rp < SIMPLE_DRAG_PERIGEE / radiusearthkm + 1.0:
        isimp = 1

    # For perigees below 156 km, s and qoms2t are altered
    qzms24 = qzms2t
    perige = (il.rp - 1.0) * radiusearthkm
    if perige < 156.0:
        sfour = perige - 78.0
        if perige < 98.0:
            sfour = 20.0
        qzms24temp = (120.0 - sfour) / radiusearthkm
        qzms24 = qzms24temp**4
        sfour = sfour / radiusearthkm + 1.0

    pinvsq = 1.0 / il.posq
    tsi = 1.0 / (ao - sfour)
    eta = ao * ecco * tsi
    etasq = eta * eta
    eeta = ecco * eta
    psisq = fabs(1.0 - etasq)
    coef = qzms24 * tsi**4
    coef1 = coef / psisq**3.5
    cc2 = (
        coef1
        * no_unkozai
        * (
            ao * (1.0 + 1.5 * etasq + eeta * (4.0 + etasq))
            + 0.375 * j2 * tsi / psisq * con41 * (8.0 + 3.0 * etasq * (8.0 + etasq))
        )
    )
    cc1 = bstar * cc2
    cc3 = 0.0
    if ecco > 1.0e-4:
        cc3 = -2.0 * coef * tsi * j3oj2 * no_unkozai * sinio / ecco
    x1mth2 = 1.0 - cosio2
    cc4 = (
        2.0
        * no_unkozai
        * coef1
        * ao
        * omeosq
        * (
            eta * (2.0 + 0.5 * etasq)
            + ecco * (0.5 + 2.0 * etasq)
            - j2
            * tsi
            / (ao * psisq)
            * (
                -3.0 * con41 * (1.0 - 2.0 * eeta + etasq * (1.5 - 0.5 * eeta))
                + 0.75 * x1mth2 * (2.0 * etasq - eeta * (1.0 + etasq)) * cos(2.0 * argpo)
            )
        )
    )
    cc5 = 2.0 * coef1 * ao * omeosq * (1.0 + 2.75 * (etasq + eeta) + eeta * etasq)

    # Secular rates from J2, J4
    cosio4 = cosio2 * cosio2
    temp1 = 1.5 * j2 * pinvsq * no_unkozai
    temp2 = 0.5 * temp1 * j2 * pinvsq
    temp3 = -0.46875 * gravity.j4 * pinvsq * pinvsq * no_unkozai
    mdot = (
        no_unkozai
        + 0.5 * temp1 * rteosq * con41
        + 0.0625 * temp2 * rteosq * (13.0 - 78.0 * cosio2 + 137.0 * cosio4)
    )
    argpdot = (
        -0.5 * temp1 * il.con42
        + 0.0625 * temp2 * (7.0 - 114.0 * cosio2 + 395.0 * cosio4)
        + temp3 * (3.0 - 36.0 * cosio2 + 49.0 * cosio4)
    )
    xhdot1 = -temp1 * cosio
    nodedot = xhdot1 + (
        0.5 * temp2 * (4.0 - 19.0 * cosio2) + 2.0 * temp3 * (3.0 - 7.0 * cosio2)
    ) * cosio
    xpidot = argpdot + nodedot
    omgcof = bstar * cc3 * cos(argpo)
    xmcof = 0.0
    if ecco > 1.0e-4:
        xmcof = -_x2o3 * coef * bstar / eeta
    nodecf = 3.5 * omeosq * xhdot1 * cc1
    t2cof = 1.5 * cc1

    # Guard the division at an inclination of exactly 180 degrees
    if fabs(cosio + 1.0) > 1.5e-12:
        xlcof = -0.25 * j3oj2 * sinio * (3.0 + 5.0 * cosio) / (1.0 + cosio)
    else:
        xlcof = -0.25 * j3oj2 * sinio * (3.0 + 5.0 * cosio) / temp4

    aycof = -0.5 * j3oj2 * sinio
    delmotemp = 1.0 + eta * cos(mo)
    delmo = delmotemp * delmotemp * delmotemp

    deep_space = _twopi / no_unkozai >= DEEP_SPACE_PERIOD
    if deep_space:
        isimp = 1

    d2 = d3 = d4 = t3cof = t4cof = t5cof = 0.0
    if isimp != 1:
        cc1sq = cc1 * cc1
        d2 = 4.0 * ao * tsi * cc1sq
        temp = d2 * tsi * cc1 / 3.0
        d3 = (17.0 * ao + sfour) * temp
        d4 = 0.5 * temp * ao * tsi * (221.0 * ao + 31.0 * sfour) * cc1
        t3cof = d2 + 2.0 * cc1sq
        t4cof = 0.25 * (3.0 * d3 + cc1 * (12.0 * d2 + 10.0 * cc1sq))
        t5cof = 0.2 * (3.0 * d4 + 12.0 * cc1 * d3 + 6.0 * d2 * d2 + 15.0 * cc1sq * (2.0 * d2 + cc1sq))

    orbit = OrbitCoefficients(
        radiusearthkm=radiusearthkm,
        xke=gravity.xke,
        j2=j2,
        j3oj2=j3oj2,
        bstar=bstar,
        ecco=ecco,
        argpo=argpo,
        inclo=inclo,
        mo=mo,
        nodeo=nodeo,
        no_unkozai=no_unkozai,
        con41=con41,
        gsto=il.gsto,
        cc1=cc1,
        cc4=cc4,
        cc5=cc5,
        d2=d2,
        d3=d3,
        d4=d4,
        delmo=delmo,
        eta=eta,
        argpdot=argpdot,
        omgcof=omgcof,
        sinmao=sin(mo),
        t2cof=t2cof,
        t3cof=t3cof,
        t4cof=t4cof,
        t5cof=t5cof,
        x1mth2=x1mth2,
        x7thm1=7.0 * cosio2 - 1.0,
        mdot=mdot,
        nodedot=nodedot,
        xlcof=xlcof,
        xmcof=xmcof,
        nodecf=nodecf,
        aycof=aycof,
        isimp=float(isimp),
        afspc=1.0 if opsmode == "a" else 0.0,
    )

    if not deep_space:
        logger.debug(
            "Satellite %s: near-earth model (period %.2f min, %s drag)",
            elements.satnum.strip(),
            _twopi / no_unkozai,
            "simple" if isimp else "full",
        )
        return _as_arrays(NearEarthModel(orbit=orbit)), None, SGP4Error.NONE

    lunar_solar, resonance = deep_space_init(
        xke=gravity.xke,
        epoch=epoch,
        gsto=il.gsto,
        ecco=ecco,
        eccsq=il.eccsq,
        inclo=inclo,
        nodeo=nodeo,
        argpo=argpo,
        mo=mo,
        no=no_unkozai,
        mdot=mdot,
        nodedot=nodedot,
        xpidot=xpidot,
    )
    logger.debug(
        "Satellite %s: deep-space model (period %.2f min, resonance %d)",
        elements.satnum.strip(),
        _twopi / no_unkozai,
        int(resonance.irez),
    )

    model = _as_arrays(DeepSpaceModel(orbit=orbit, lunar_solar=lunar_solar, resonance=resonance))
    return model, initial_resonance_state(model), SGP4Error.NONE


def initial_resonance_state(model: DeepSpaceModel) -> ResonanceState:
    """Resonance integrator state at epoch for a deep-space model."""
    return ResonanceState(
        atime=jnp.zeros_like(model.orbit.no_unkozai),
        xli=model.resonance.xlamo,
        xni=model.orbit.no_unkozai,
    )

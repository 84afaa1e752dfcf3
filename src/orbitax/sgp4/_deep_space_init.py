"""
Deep-space (SDP4) initialization.

Evaluates the lunar and solar perturbation coefficients and the geopotential
resonance terms once, at Python time, for orbits with periods of 225 minutes
or more.  The results are returned as float-valued NamedTuples that the
initializer converts to arrays.

References:
    1. F. R. Hoots and R. L. Roehrich, *Spacetrack Report No. 3*, 1980.
    2. D. Vallado, P. Crawford, R. Hujsak, and T. S. Kelso, *Revisiting
       Spacetrack Report #3*, AIAA 2006-6753, 2006.
"""

from __future__ import annotations

from math import atan2, cos, pi, sin, sqrt
from typing import NamedTuple

from orbitax.sgp4._types import LunarSolarCoefficients, ResonanceCoefficients

_twopi = 2.0 * pi

# Solar and lunar eccentricities and mean motions [rad/min]
ZES = 0.01675
ZEL = 0.05490
ZNS = 1.19459e-5
ZNL = 1.5835218e-4

# Earth rotation rate in SGP4 time units [rad/min]
RPTIM = 4.37526908801129966e-3

# Mean-motion windows that select resonance [rad/min]
_SYNCHRONOUS_BAND = (0.0034906585, 0.0052359877)
_HALF_DAY_BAND = (8.26e-3, 9.24e-3)

# Inclination within this distance of 0 or pi drops the node rate terms [rad]
_SMALL_INCLINATION = 5.2359877e-2


class _Dscom(NamedTuple):
    """Intermediate lunar/solar geometry shared by the secular and resonance terms."""

    sinim: float
    cosim: float
    emsq: float
    s1: float
    s2: float
    s3: float
    s4: float
    s5: float
    ss1: float
    ss2: float
    ss3: float
    ss4: float
    ss5: float
    sz1: float
    sz3: float
    sz11: float
    sz13: float
    sz21: float
    sz23: float
    sz31: float
    sz33: float
    z1: float
    z3: float
    z11: float
    z13: float
    z21: float
    z23: float
    z31: float
    z33: float
    periodics: dict[str, float]


def _dscom(epoch: float, ep: float, argpp: float, inclp: float, nodep: float, np_: float) -> _Dscom:
    """Compute the lunar/solar terms common to the deep-space routines.

    Args:
        epoch: Days since 1950 Jan 0.
        ep: Eccentricity.
        argpp: Argument of perigee [rad].
        inclp: Inclination [rad].
        nodep: RAAN [rad].
        np_: Mean motion [rad/min].
    """
    c1ss = 2.9864797e-6
    c1l = 4.7968065e-7
    zsinis = 0.39785416
    zcosis = 0.91744867
    zcosgs = 0.1945905
    zsings = -0.98088458

    snodm = sin(nodep)
    cnodm = cos(nodep)
    sinomm = sin(argpp)
    cosomm = cos(argpp)
    sinim = sin(inclp)
    cosim = cos(inclp)
    emsq = ep * ep
    betasq = 1.0 - emsq
    rtemsq = sqrt(betasq)

    # Lunar orbit orientation at epoch
    day = epoch + 18261.5
    xnodce = (4.5236020 - 9.2422029e-4 * day) % _twopi
    stem = sin(xnodce)
    ctem = cos(xnodce)
    zcosil = 0.91375164 - 0.03568096 * ctem
    zsinil = sqrt(1.0 - zcosil * zcosil)
    zsinhl = 0.089683511 * stem / zsinil
    zcoshl = sqrt(1.0 - zsinhl * zsinhl)
    gam = 5.8351514 + 0.0019443680 * day
    zx = 0.39785416 * stem / zsinil
    zy = zcoshl * ctem + 0.91744867 * zsinhl * stem
    zx = gam + atan2(zx, zy) - xnodce
    zcosgl = cos(zx)
    zsingl = sin(zx)

    # First pass is the sun, second the moon
    zcosg, zsing, zcosi, zsini = zcosgs, zsings, zcosis, zsinis
    zcosh, zsinh = cnodm, snodm
    cc = c1ss
    xnoi = 1.0 / np_
    solar = None

    for body in ("sun", "moon"):
        a1 = zcosg * zcosh + zsing * zcosi * zsinh
        a3 = -zsing * zcosh + zcosg * zcosi * zsinh
        a7 = -zcosg * zsinh + zsing * zcosi * zcosh
        a8 = zsing * zsini
        a9 = zsing * zsinh + zcosg * zcosi * zcosh
        a10 = zcosg * zsini
        a2 = cosim * a7 + sinim * a8
        a4 = cosim * a9 + sinim * a10
        a5 = -sinim * a7 + cosim * a8
        a6 = -sinim * a9 + cosim * a10

        x1 = a1 * cosomm + a2 * sinomm
        x2 = a3 * cosomm + a4 * sinomm
        x3 = -a1 * sinomm + a2 * cosomm
        x4 = -a3 * sinomm + a4 * cosomm
        x5 = a5 * sinomm
        x6 = a6 * sinomm
        x7 = a5 * cosomm
        x8 = a6 * cosomm

        z31 = 12.0 * x1 * x1 - 3.0 * x3 * x3
        z32 = 24.0 * x1 * x2 - 6.0 * x3 * x4
        z33 = 12.0 * x2 * x2 - 3.0 * x4 * x4
        z1 = 3.0 * (a1 * a1 + a2 * a2) + z31 * emsq
        z2 = 6.0 * (a1 * a3 + a2 * a4) + z32 * emsq
        z3 = 3.0 * (a3 * a3 + a4 * a4) + z33 * emsq
        z11 = -6.0 * a1 * a5 + emsq * (-24.0 * x1 * x7 - 6.0 * x3 * x5)
        z12 = -6.0 * (a1 * a6 + a3 * a5) + emsq * (
            -24.0 * (x2 * x7 + x1 * x8) - 6.0 * (x3 * x6 + x4 * x5)
        )
        z13 = -6.0 * a3 * a6 + emsq * (-24.0 * x2 * x8 - 6.0 * x4 * x6)
        z21 = 6.0 * a2 * a5 + emsq * (24.0 * x1 * x5 - 6.0 * x3 * x7)
        z22 = 6.0 * (a4 * a5 + a2 * a6) + emsq * (
            24.0 * (x2 * x5 + x1 * x6) - 6.0 * (x4 * x7 + x3 * x8)
        )
        z23 = 6.0 * a4 * a6 + emsq * (24.0 * x2 * x6 - 6.0 * x4 * x8)
        z1 = z1 + z1 + betasq * z31
        z2 = z2 + z2 + betasq * z32
        z3 = z3 + z3 + betasq * z33
        s3 = cc * xnoi
        s2 = -0.5 * s3 / rtemsq
        s4 = s3 * rtemsq
        s1 = -15.0 * ep * s4
        s5 = x1 * x3 + x2 * x4
        s6 = x2 * x3 + x1 * x4
        s7 = x2 * x4 - x1 * x3

        if body == "sun":
            solar = (
                s1, s2, s3, s4, s5, s6, s7,
                z1, z2, z3, z11, z12, z13, z21, z22, z23, z31, z32, z33,
            )
            zcosg = zcosgl
            zsing = zsingl
            zcosi = zcosil
            zsini = zsinil
            zcosh = zcoshl * cnodm + zsinhl * snodm
            zsinh = snodm * zcoshl - cnodm * zsinhl
            cc = c1l

    (
        ss1, ss2, ss3, ss4, ss5, ss6, ss7,
        sz1, sz2, sz3, sz11, sz12, sz13, sz21, sz22, sz23, sz31, sz32, sz33,
    ) = solar

    periodics = {
        # Solar terms
        "se2": 2.0 * ss1 * ss6,
        "se3": 2.0 * ss1 * ss7,
        "si2": 2.0 * ss2 * sz12,
        "si3": 2.0 * ss2 * (sz13 - sz11),
        "sl2": -2.0 * ss3 * sz2,
        "sl3": -2.0 * ss3 * (sz3 - sz1),
        "sl4": -2.0 * ss3 * (-21.0 - 9.0 * emsq) * ZES,
        "sgh2": 2.0 * ss4 * sz32,
        "sgh3": 2.0 * ss4 * (sz33 - sz31),
        "sgh4": -18.0 * ss4 * ZES,
        "sh2": -2.0 * ss2 * sz22,
        "sh3": -2.0 * ss2 * (sz23 - sz21),
        # Lunar terms
        "ee2": 2.0 * s1 * s6,
        "e3": 2.0 * s1 * s7,
        "xi2": 2.0 * s2 * z12,
        "xi3": 2.0 * s2 * (z13 - z11),
        "xl2": -2.0 * s3 * z2,
        "xl3": -2.0 * s3 * (z3 - z1),
        "xl4": -2.0 * s3 * (-21.0 - 9.0 * emsq) * ZEL,
        "xgh2": 2.0 * s4 * z32,
        "xgh3": 2.0 * s4 * (z33 - z31),
        "xgh4": -18.0 * s4 * ZEL,
        "xh2": -2.0 * s2 * z22,
        "xh3": -2.0 * s2 * (z23 - z21),
        # Mean anomalies of the moon and sun at epoch
        "zmol": (4.7199672 + 0.22997150 * day - gam) % _twopi,
        "zmos": (6.2565837 + 0.017201977 * day) % _twopi,
    }

    return _Dscom(
        sinim=sinim, cosim=cosim, emsq=emsq,
        s1=s1, s2=s2, s3=s3, s4=s4, s5=s5,
        ss1=ss1, ss2=ss2, ss3=ss3, ss4=ss4, ss5=ss5,
        sz1=sz1, sz3=sz3, sz11=sz11, sz13=sz13, sz21=sz21, sz23=sz23, sz31=sz31, sz33=sz33,
        z1=z1, z3=z3, z11=z11, z13=z13, z21=z21, z23=z23, z31=z31, z33=z33,
        periodics=periodics,
    )


def _half_day_coefficients(
    ecco: float, eccsq: float, sinim: float, cosim: float, nm: float, aonv: float
) -> dict[str, float]:
    """Polynomial coefficients of the 12-hour resonance, fitted in eccentricity."""
    em = ecco
    emsq = eccsq
    eoc = em * emsq
    cosisq = cosim * cosim

    g201 = -0.306 - (em - 0.64) * 0.440

    if em <= 0.65:
        g211 = 3.616 - 13.2470 * em + 16.2900 * emsq
        g310 = -19.302 + 117.3900 * em - 228.4190 * emsq + 156.5910 * eoc
        g322 = -18.9068 + 109.7927 * em - 214.6334 * emsq + 146.5816 * eoc
        g410 = -41.122 + 242.6940 * em - 471.0940 * emsq + 313.9530 * eoc
        g422 = -146.407 + 841.8800 * em - 1629.014 * emsq + 1083.4350 * eoc
        g520 = -532.114 + 3017.977 * em - 5740.032 * emsq + 3708.2760 * eoc
    else:
        g211 = -72.099 + 331.819 * em - 508.738 * emsq + 266.724 * eoc
        g310 = -346.844 + 1582.851 * em - 2415.925 * emsq + 1246.113 * eoc
        g322 = -342.585 + 1554.908 * em - 2366.899 * emsq + 1215.972 * eoc
        g410 = -1052.797 + 4758.686 * em - 7193.992 * emsq + 3651.957 * eoc
        g422 = -3581.690 + 16178.110 * em - 24462.770 * emsq + 12422.520 * eoc
        if em > 0.715:
            g520 = -5149.66 + 29936.92 * em - 54087.36 * emsq + 31324.56 * eoc
        else:
            g520 = 1464.74 - 4664.75 * em + 3763.64 * emsq

    if em < 0.7:
        g533 = -919.22770 + 4988.6100 * em - 9064.7700 * emsq + 5542.21 * eoc
        g521 = -822.71072 + 4568.6173 * em - 8491.4146 * emsq + 5337.524 * eoc
        g532 = -853.66600 + 4690.2500 * em - 8624.7700 * emsq + 5341.4 * eoc
    else:
        g533 = -37995.780 + 161616.52 * em - 229838.20 * emsq + 109377.94 * eoc
        g521 = -51752.104 + 218913.95 * em - 309468.16 * emsq + 146349.42 * eoc
        g532 = -40023.880 + 170470.89 * em - 242699.48 * emsq + 115605.82 * eoc

    sini2 = sinim * sinim
    f220 = 0.75 * (1.0 + 2.0 * cosim + cosisq)
    f221 = 1.5 * sini2
    f321 = 1.875 * sinim * (1.0 - 2.0 * cosim - 3.0 * cosisq)
    f322 = -1.875 * sinim * (1.0 + 2.0 * cosim - 3.0 * cosisq)
    f441 = 35.0 * sini2 * f220
    f442 = 39.3750 * sini2 * sini2
    f522 = (
        9.84375
        * sinim
        * (
            sini2 * (1.0 - 2.0 * cosim - 5.0 * cosisq)
            + 0.33333333 * (-2.0 + 4.0 * cosim + 6.0 * cosisq)
        )
    )
    f523 = sinim * (
        4.92187512 * sini2 * (-2.0 - 4.0 * cosim + 10.0 * cosisq)
        + 6.56250012 * (1.0 + 2.0 * cosim - 3.0 * cosisq)
    )
    f542 = 29.53125 * sinim * (2.0 - 8.0 * cosim + cosisq * (-12.0 + 8.0 * cosim + 10.0 * cosisq))
    f543 = 29.53125 * sinim * (-2.0 - 8.0 * cosim + cosisq * (12.0 + 8.0 * cosim - 10.0 * cosisq))

    root22 = 1.7891679e-6
    root32 = 3.7393792e-7
    root44 = 7.3636953e-9
    root52 = 1.1428639e-7
    root54 = 2.1765803e-9

    temp1 = 3.0 * nm * nm * aonv * aonv
    temp = temp1 * root22
    d2201 = temp * f220 * g201
    d2211 = temp * f221 * g211
    temp1 = temp1 * aonv
    temp = temp1 * root32
    d3210 = temp * f321 * g310
    d3222 = temp * f322 * g322
    temp1 = temp1 * aonv
    temp = 2.0 * temp1 * root44
    d4410 = temp * f441 * g410
    d4422 = temp * f442 * g422
    temp1 = temp1 * aonv
    temp = temp1 * root52
    d5220 = temp * f522 * g520
    d5232 = temp * f523 * g532
    temp = 2.0 * temp1 * root54
    d5421 = temp * f542 * g521
    d5433 = temp * f543 * g533

    return {
        "d2201": d2201, "d2211": d2211, "d3210": d3210, "d3222": d3222,
        "d4410": d4410, "d4422": d4422, "d5220": d5220, "d5232": d5232,
        "d5421": d5421, "d5433": d5433,
    }


def deep_space_init(
    xke: float,
    epoch: float,
    gsto: float,
    ecco: float,
    eccsq: float,
    inclo: float,
    nodeo: float,
    argpo: float,
    mo: float,
    no: float,
    mdot: float,
    nodedot: float,
    xpidot: float,
) -> tuple[LunarSolarCoefficients, ResonanceCoefficients]:
    """Compute the deep-space coefficients of an element set.

    Args:
        xke: Gravity constant xke.
        epoch: Days since 1950 Jan 0.
        gsto: Greenwich sidereal time at epoch [rad].
        ecco: Eccentricity.
        eccsq: Eccentricity squared.
        inclo: Inclination [rad].
        nodeo: RAAN [rad].
        argpo: Argument of perigee [rad].
        mo: Mean anomaly [rad].
        no: Recovered (un-Kozai) mean motion [rad/min].
        mdot: Secular mean anomaly rate [rad/min].
        nodedot: Secular node rate [rad/min].
        xpidot: Secular rate of the longitude of perigee [rad/min].

    Returns:
        Tuple of ``(lunar_solar, resonance)`` coefficient sets as floats.
    """
    ds = _dscom(epoch, ecco, argpo, inclo, nodeo, no)
    sinim = ds.sinim
    cosim = ds.cosim
    emsq = ds.emsq

    # Solar secular rates
    ses = ds.ss1 * ZNS * ds.ss5
    sis = ds.ss2 * ZNS * (ds.sz11 + ds.sz13)
    sls = -ZNS * ds.ss3 * (ds.sz1 + ds.sz3 - 14.0 - 6.0 * emsq)
    sghs = ds.ss4 * ZNS * (ds.sz31 + ds.sz33 - 6.0)
    shs = -ZNS * ds.ss2 * (ds.sz21 + ds.sz23)
    near_equatorial = inclo < _SMALL_INCLINATION or inclo > pi - _SMALL_INCLINATION
    if near_equatorial:
        shs = 0.0
    if sinim != 0.0:
        shs = shs / sinim
    sgs = sghs - cosim * shs

    # Lunar secular rates
    dedt = ses + ds.s1 * ZNL * ds.s5
    didt = sis + ds.s2 * ZNL * (ds.z11 + ds.z13)
    dmdt = sls - ZNL * ds.s3 * (ds.z1 + ds.z3 - 14.0 - 6.0 * emsq)
    sghl = ds.s4 * ZNL * (ds.z31 + ds.z33 - 6.0)
    shll = -ZNL * ds.s2 * (ds.z21 + ds.z23)
    if near_equatorial:
        shll = 0.0
    domdt = sgs + sghl
    dnodt = shs
    if sinim != 0.0:
        domdt = domdt - cosim / sinim * shll
        dnodt = dnodt + shll / sinim

    lunar_solar = LunarSolarCoefficients(
        **ds.periodics,
        # Periodic offsets at epoch stay zero: the init pass does not apply them
        peo=0.0,
        pgho=0.0,
        pho=0.0,
        pinco=0.0,
        plo=0.0,
        dedt=dedt,
        didt=didt,
        dmdt=dmdt,
        dnodt=dnodt,
        domdt=domdt,
    )

    irez = 0
    if _SYNCHRONOUS_BAND[0] < no < _SYNCHRONOUS_BAND[1]:
        irez = 1
    if _HALF_DAY_BAND[0] <= no <= _HALF_DAY_BAND[1] and ecco >= 0.5:
        irez = 2

    terms = dict.fromkeys(ResonanceCoefficients._fields, 0.0)
    terms["irez"] = float(irez)
    theta = gsto % _twopi
    aonv = (no / xke) ** (2.0 / 3.0)

    if irez == 2:
        terms.update(_half_day_coefficients(ecco, eccsq, sinim, cosim, no, aonv))
        terms["xlamo"] = (mo + nodeo + nodeo - theta - theta) % _twopi
        terms["xfact"] = mdot + dmdt + 2.0 * (nodedot + dnodt - RPTIM) - no

    elif irez == 1:
        g200 = 1.0 + emsq * (-2.5 + 0.8125 * emsq)
        g310 = 1.0 + 2.0 * emsq
        g300 = 1.0 + emsq * (-6.0 + 6.60937 * emsq)
        f220 = 0.75 * (1.0 + cosim) * (1.0 + cosim)
        f311 = 0.9375 * sinim * sinim * (1.0 + 3.0 * cosim) - 0.75 * (1.0 + cosim)
        f330 = 1.0 + cosim
        f330 = 1.875 * f330 * f330 * f330
        q22 = 1.7891679e-6
        q31 = 2.1460748e-6
        q33 = 2.2123015e-7
        del1 = 3.0 * no * no * aonv * aonv
        terms["del2"] = 2.0 * del1 * f220 * g200 * q22
        terms["del3"] = 3.0 * del1 * f330 * g300 * q33 * aonv
        terms["del1"] = del1 * f311 * g310 * q31 * aonv
        terms["xlamo"] = (mo + nodeo + argpo - theta) % _twopi
        terms["xfact"] = mdot + xpidot - RPTIM + dmdt + domdt + dnodt - no

    return lunar_solar, ResonanceCoefficients(**terms)

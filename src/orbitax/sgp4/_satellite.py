"""
Satellite record: an initialized element set that can be propagated.

:class:`SatelliteRecord` owns the SGP4/SDP4 model of one element set, the
deep-space resonance integrator state, and a sticky error code.  Propagating
a deep-space record advances its resonance state, so one record must not be
propagated from several threads at once.  Use one record per thread, or the
pure :func:`~orbitax.sgp4.sgp4_propagate_model`, which takes and returns the
state explicitly.
"""

from __future__ import annotations

import logging
from math import pi as _py_pi

import jax.numpy as jnp

from orbitax.constants import MINUTES_PER_DAY
from orbitax.sgp4._constants import WGS72, EarthGravity, resolve_gravity
from orbitax.sgp4._errors import PropagationError, SGP4Error
from orbitax.sgp4._initialize import build_model, initial_resonance_state
from orbitax.sgp4._propagation import propagate_model_jit
from orbitax.sgp4._tle import parse_tle
from orbitax.sgp4._types import DeepSpaceModel, ResonanceState, SGP4Model, StateVector, TLEElements
from orbitax.time import jday

logger = logging.getLogger(__name__)

_x2o3 = 2.0 / 3.0


class SatelliteRecord:
    """An initialized SGP4/SDP4 satellite.

    Created by :func:`sgp4_init`.  The orbit regime and all epoch
    coefficients are fixed at creation.  Once ``error`` is set it is sticky:
    every later propagation raises the same :class:`PropagationError`
    without evaluating the model.

    Examples:
        ```python
        from orbitax.sgp4 import SatelliteRecord

        sat = SatelliteRecord.from_tle(line1, line2)
        state = sat.propagate(90.0)
        state.position  # TEME [km]
        ```

    Attributes:
        elements: Parsed element set.
        gravity: Gravity model used at initialization.
        opsmode: Operation mode, ``'i'`` or ``'a'``.
        jdsatepoch: Integer-plus-half part of the epoch Julian Date.
        jdsatepochF: Fractional part of the epoch Julian Date.
        model: :class:`NearEarthModel` or :class:`DeepSpaceModel`, or
            ``None`` when the epoch elements were invalid.
        resonance_state: Resonance integrator state (deep space only).
        error: Current :class:`SGP4Error`.
    """

    def __init__(
        self,
        elements: TLEElements,
        gravity: EarthGravity,
        opsmode: str,
        model: SGP4Model | None,
        resonance_state: ResonanceState | None = None,
        error: SGP4Error = SGP4Error.NONE,
    ) -> None:
        self.elements = elements
        self.gravity = gravity
        self.opsmode = opsmode
        self.jdsatepoch, self.jdsatepochF = elements.epoch_jd
        self.model = model
        self.resonance_state = resonance_state
        self.error = SGP4Error(error)

    @classmethod
    def from_tle(
        cls,
        line1: str,
        line2: str,
        gravity: str | EarthGravity = WGS72,
        opsmode: str = "i",
    ) -> SatelliteRecord:
        """Parse a TLE and initialize it in one step.

        Raises:
            TLEParseError: If the TLE text is malformed.
        """
        return sgp4_init(parse_tle(line1, line2), gravity=gravity, opsmode=opsmode)

    def __repr__(self) -> str:
        regime = "deep-space" if self.is_deep_space else "near-earth"
        return f"SatelliteRecord(satnum={self.satnum!r}, {regime}, error={self.error.name})"

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def is_deep_space(self) -> bool:
        """Whether the record uses the deep-space (SDP4) model."""
        return isinstance(self.model, DeepSpaceModel)

    @property
    def satnum(self) -> str:
        """Catalog number as printed on the TLE."""
        return self.elements.satnum.strip()

    @property
    def epoch_jd(self) -> float:
        """Epoch as a single Julian Date."""
        return self.jdsatepoch + self.jdsatepochF

    @property
    def no_unkozai(self) -> float:
        """Recovered (un-Kozai) mean motion [rad/min], NaN without a model."""
        if self.model is None:
            return float("nan")
        return float(self.model.orbit.no_unkozai)

    @property
    def semi_major_axis(self) -> float:
        """Recovered semi-major axis [earth radii]."""
        return (self.gravity.xke / self.no_unkozai) ** _x2o3

    @property
    def semi_major_axis_km(self) -> float:
        """Recovered semi-major axis [km]."""
        return self.semi_major_axis * self.gravity.radiusearthkm

    @property
    def perigee_km(self) -> float:
        """Perigee altitude above the gravity model's equatorial radius [km]."""
        return self.semi_major_axis_km * (1.0 - self.elements.eccentricity) - self.gravity.radiusearthkm

    @property
    def apogee_km(self) -> float:
        """Apogee altitude above the gravity model's equatorial radius [km]."""
        return self.semi_major_axis_km * (1.0 + self.elements.eccentricity) - self.gravity.radiusearthkm

    @property
    def period_minutes(self) -> float:
        """Orbital period from the recovered mean motion [min]."""
        return 2.0 * _py_pi / self.no_unkozai

    # ------------------------------------------------------------------
    # Propagation
    # ------------------------------------------------------------------

    def propagate(self, tsince: float) -> StateVector:
        """Propagate to a time since epoch.

        Deep-space records advance their resonance state.  Requests that
        move steadily away from epoch continue the integration; a request on
        the other side of epoch, or closer to it, restarts from epoch.

        Args:
            tsince: Time since epoch [min].

        Returns:
            TEME state at the requested time.

        Raises:
            PropagationError: If the record carries an error or the model
                reports one at ``tsince``.
        """
        tsince = float(tsince)
        if self.error != SGP4Error.NONE:
            raise PropagationError(self.error, self.satnum, tsince)

        r, v, code, state = propagate_model_jit(self.model, tsince, self.resonance_state)
        if state is not None:
            self._commit_resonance_state(state, tsince)

        code = SGP4Error(int(code))
        if code != SGP4Error.NONE:
            self._set_error(code, tsince)
            raise PropagationError(code, self.satnum, tsince)

        return StateVector(
            position=r,
            velocity=v,
            tsince=tsince,
            jd=self.epoch_jd + tsince / MINUTES_PER_DAY,
        )

    def propagate_jd(self, jd: float, fraction: float = 0.0) -> StateVector:
        """Propagate to a (split) Julian Date."""
        tsince = ((jd - self.jdsatepoch) + (fraction - self.jdsatepochF)) * MINUTES_PER_DAY
        return self.propagate(tsince)

    def propagate_at_calendar_time(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: float = 0.0,
    ) -> StateVector:
        """Propagate to a UTC calendar date and time."""
        jd, fraction = jday(year, month, day, hour, minute, second)
        return self.propagate_jd(jd, fraction)

    def reset_resonance(self) -> None:
        """Return the resonance integrator to its state at epoch."""
        if isinstance(self.model, DeepSpaceModel):
            self.resonance_state = initial_resonance_state(self.model)

    def _commit_resonance_state(self, state: ResonanceState, tsince: float) -> None:
        was_finite = self.resonance_state is None or _is_finite(self.resonance_state)
        self.resonance_state = state
        if was_finite and not _is_finite(state):
            logger.warning(
                "Satellite %s: resonance integration diverged at tsince=%s min",
                self.satnum,
                tsince,
            )

    def _set_error(self, code: SGP4Error, tsince: float | None) -> None:
        self.error = code
        logger.warning(
            "Satellite %s: %s (error %d) at tsince=%s min; record is no longer propagated",
            self.satnum,
            code.message,
            int(code),
            tsince,
        )


def _is_finite(state: ResonanceState) -> bool:
    return all(bool(jnp.all(jnp.isfinite(x))) for x in state)


def sgp4_init(
    elements: TLEElements,
    gravity: str | EarthGravity = WGS72,
    opsmode: str = "i",
) -> SatelliteRecord:
    """Initialize a satellite record from parsed TLE elements.

    The state at epoch is evaluated once so that orbits which are already
    invalid are flagged before the record is returned.  Numeric failures are
    stored on the record rather than raised.

    Args:
        elements: Parsed TLE elements from :func:`parse_tle`.
        gravity: Gravity model or its name (``'wgs72old'``, ``'wgs72'``,
            ``'wgs84'``). Default: ``WGS72``
        opsmode: ``'i'`` (improved) or ``'a'`` (legacy AFSPC). Default: ``'i'``

    Returns:
        SatelliteRecord: The initialized record. Check ``record.error``.

    Raises:
        ValueError: If ``gravity`` or ``opsmode`` is unknown.
    """
    gravity = resolve_gravity(gravity)
    model, resonance_state, error = build_model(elements, gravity, opsmode)
    record = SatelliteRecord(elements, gravity, opsmode, model, resonance_state)

    if error != SGP4Error.NONE:
        record._set_error(error, None)
        return record

    r, v, code, state = propagate_model_jit(model, 0.0, resonance_state)
    if state is not None:
        record.resonance_state = state
    code = SGP4Error(int(code))
    if code != SGP4Error.NONE:
        record._set_error(code, 0.0)
    return record


def propagate(record: SatelliteRecord, tsince: float) -> StateVector:
    """Propagate ``record`` to a time since epoch [min]. See :meth:`SatelliteRecord.propagate`."""
    return record.propagate(tsince)


def propagate_at_calendar_time(
    record: SatelliteRecord,
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: float = 0.0,
) -> StateVector:
    """Propagate ``record`` to a UTC calendar date and time."""
    return record.propagate_at_calendar_time(year, month, day, hour, minute, second)

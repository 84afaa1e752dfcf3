"""
SGP4/SDP4 orbit propagator implemented in JAX.

Parses Two-Line Element sets, initializes them into near-Earth (SGP4) or
deep-space (SDP4) models, and propagates them to TEME position and velocity.
:class:`SatelliteRecord` is the stateful, error-tracking interface;
:func:`sgp4_propagate_model` is the pure function underneath it, which
supports ``jax.jit`` and ``jax.vmap`` over time arrays.
"""

from orbitax.sgp4._constants import (
    DEEP_SPACE_PERIOD,
    GRAVITY_MODELS,
    KEPLER_MAX_ITERATIONS,
    KEPLER_TOLERANCE,
    RESONANCE_STEP,
    SIMPLE_DRAG_PERIGEE,
    WGS72,
    WGS72OLD,
    WGS84,
    EarthGravity,
)
from orbitax.sgp4._errors import PropagationError, SGP4Error, TLEParseError
from orbitax.sgp4._near_earth import KeplerSolution, solve_kepler
from orbitax.sgp4._propagation import sgp4_propagate_model
from orbitax.sgp4._satellite import (
    SatelliteRecord,
    propagate,
    propagate_at_calendar_time,
    sgp4_init,
)
from orbitax.sgp4._tle import compute_checksum, format_tle, parse_tle, validate_tle_line
from orbitax.sgp4._types import (
    DeepSpaceModel,
    NearEarthModel,
    ResonanceState,
    SGP4Model,
    StateVector,
    TLEElements,
)

__all__ = [
    # Types
    "TLEElements",
    "SatelliteRecord",
    "StateVector",
    "NearEarthModel",
    "DeepSpaceModel",
    "SGP4Model",
    "ResonanceState",
    "KeplerSolution",
    "EarthGravity",
    # Errors
    "SGP4Error",
    "TLEParseError",
    "PropagationError",
    # Constants
    "WGS72OLD",
    "WGS72",
    "WGS84",
    "GRAVITY_MODELS",
    "DEEP_SPACE_PERIOD",
    "SIMPLE_DRAG_PERIGEE",
    "KEPLER_MAX_ITERATIONS",
    "KEPLER_TOLERANCE",
    "RESONANCE_STEP",
    # TLE parsing
    "parse_tle",
    "format_tle",
    "compute_checksum",
    "validate_tle_line",
    # Initialization and propagation
    "sgp4_init",
    "propagate",
    "propagate_at_calendar_time",
    "sgp4_propagate_model",
    "solve_kepler",
]

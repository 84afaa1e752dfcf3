"""
Pure SGP4/SDP4 propagation entry point.

:func:`sgp4_propagate_model` dispatches on the model variant.  The variant
is part of the pytree structure, so the choice is made at trace time and the
function can be wrapped in ``jax.jit`` or mapped with ``jax.vmap`` over time.
"""

from __future__ import annotations

import jax
from jax import Array
from jax.typing import ArrayLike

from orbitax.sgp4._deep_space import sdp4_propagate
from orbitax.sgp4._initialize import initial_resonance_state
from orbitax.sgp4._near_earth import sgp4_near_earth
from orbitax.sgp4._types import DeepSpaceModel, ResonanceState, SGP4Model


def sgp4_propagate_model(
    model: SGP4Model,
    tsince: ArrayLike,
    resonance: ResonanceState | None = None,
) -> tuple[Array, Array, Array, ResonanceState | None]:
    """Propagate an SGP4/SDP4 model without touching any stored state.

    Args:
        model: :class:`NearEarthModel` or :class:`DeepSpaceModel`.
        tsince: Time since epoch [min].
        resonance: Resonance integrator state for a deep-space model.  When
            ``None`` the integration starts from epoch.  Ignored for
            near-Earth models.

    Returns:
        Tuple of ``(r, v, error, resonance)``: TEME position [km] and
        velocity [km/s] (NaN on error), the ``int32`` :class:`SGP4Error`
        code, and the resonance state after the call (``None`` for
        near-Earth models).

    Examples:
        ```python
        record = sgp4_init(parse_tle(line1, line2))
        times = jnp.linspace(0.0, 1440.0, 97)
        r, v, err, _ = jax.vmap(lambda t: sgp4_propagate_model(record.model, t))(times)
        ```
    """
    if isinstance(model, DeepSpaceModel):
        if resonance is None:
            resonance = initial_resonance_state(model)
        return sdp4_propagate(model, tsince, resonance)

    r, v, error = sgp4_near_earth(model, tsince)
    return r, v, error, None


propagate_model_jit = jax.jit(sgp4_propagate_model)

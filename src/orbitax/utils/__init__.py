"""Shared utility functions for orbitax.

Provides angle conversion helpers and range-checked latitude/longitude
conversions.
"""

from orbitax.utils._angle import (
    degrees_lat,
    degrees_long,
    from_radians,
    radians_lat,
    radians_long,
    to_radians,
)

__all__ = [
    "degrees_lat",
    "degrees_long",
    "from_radians",
    "radians_lat",
    "radians_long",
    "to_radians",
]

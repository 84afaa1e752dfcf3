import jax.numpy as jnp
import pytest

from orbitax.config import set_dtype


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    Tests that switch to float32 (e.g. test_config.py) would otherwise leak
    the setting into later tests in the same process.
    """
    set_dtype(jnp.float64)

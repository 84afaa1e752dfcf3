"""Tests for the SGP4 Kepler equation solver."""

import jax
import jax.numpy as jnp

from orbitax.sgp4 import KEPLER_MAX_ITERATIONS, KeplerSolution, solve_kepler


def _residual(sol: KeplerSolution, u, axnl, aynl):
    eo1 = sol.eo1
    return u - (eo1 - axnl * jnp.sin(eo1) + aynl * jnp.cos(eo1))


class TestSolveKepler:
    def test_circular_orbit_is_immediate(self) -> None:
        sol = solve_kepler(1.234, 0.0, 0.0)
        assert float(sol.eo1) == 1.234
        assert int(sol.iterations) == 1
        assert bool(sol.converged)

    def test_moderate_eccentricity(self) -> None:
        u, axnl, aynl = 2.0, 0.1, -0.05
        sol = solve_kepler(u, axnl, aynl)
        assert bool(sol.converged)
        assert int(sol.iterations) <= KEPLER_MAX_ITERATIONS
        assert abs(float(_residual(sol, u, axnl, aynl))) < 1e-12

    def test_high_eccentricity(self) -> None:
        u, axnl, aynl = 0.3, 0.7, 0.0
        sol = solve_kepler(u, axnl, aynl)
        assert bool(sol.converged)
        assert abs(float(_residual(sol, u, axnl, aynl))) < 1e-12

    def test_iteration_cap_reports_non_convergence(self) -> None:
        """Hitting the cap is not an error; the last iterate is returned."""
        sol = solve_kepler(0.3, 0.95, 0.0, max_iterations=1)
        assert int(sol.iterations) == 1
        assert not bool(sol.converged)
        assert jnp.isfinite(sol.eo1)

    def test_step_is_clipped(self) -> None:
        """The first Newton step never exceeds 0.95 rad."""
        sol = solve_kepler(0.01, 0.99, 0.0, max_iterations=1)
        assert abs(float(sol.eo1) - 0.01) <= 0.95 + 1e-15

    def test_custom_tolerance(self) -> None:
        loose = solve_kepler(2.0, 0.3, 0.2, tolerance=1e-3)
        tight = solve_kepler(2.0, 0.3, 0.2)
        assert int(loose.iterations) <= int(tight.iterations)

    def test_vmap(self) -> None:
        u = jnp.linspace(-3.0, 3.0, 7)
        sol = jax.vmap(lambda x: solve_kepler(x, 0.2, 0.1))(u)
        assert sol.eo1.shape == (7,)
        assert jnp.all(sol.converged)
        assert jnp.all(jnp.abs(_residual(sol, u, 0.2, 0.1)) < 1e-12)

    def test_jit(self) -> None:
        sol = jax.jit(solve_kepler)(1.0, 0.1, 0.1)
        assert bool(sol.converged)

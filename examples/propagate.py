# /// script
# requires-python = ">=3.11"
# dependencies = ["typer>=0.9.0", "orbitax"]
#
# [tool.uv.sources]
# orbitax = { path = ".." }
# ///
"""Propagate a file of TLEs with SGP4 and report visibility from a ground site.

Reads two- or three-line element sets, initializes one record per satellite,
and propagates each over a time grid with the pure, vmap'd propagator.  With
an observer location the script also reports the highest elevation reached
and the Doppler factor at that moment.

Requires orbitax to be installed (``uv pip install -e .`` from the repo root).

Usage:
    uv run examples/propagate.py TLE_FILE [OPTIONS]

Examples:
    # Positions only, one day at 60 s
    uv run examples/propagate.py stations.txt --duration 1.0 --timestep 60

    # Visibility from Boulder, CO
    uv run examples/propagate.py stations.txt --latitude 40.015 --longitude -105.27
"""

import sys
import time
from pathlib import Path
from typing import Annotated

import jax
import jax.numpy as jnp
import typer

from orbitax import set_dtype
from orbitax.constants import DEG2RAD, MINUTES_PER_DAY, RAD2DEG
from orbitax.coordinates import (
    GeodeticCoordinate,
    doppler_factor,
    look_angles,
    position_geodetic_to_ecef,
)
from orbitax.frames import rotation_ecef_to_eci, state_eci_to_ecef
from orbitax.sgp4 import SatelliteRecord, SGP4Error, TLEParseError, sgp4_propagate_model
from orbitax.time import gmst

set_dtype(jnp.float64)  # Must be before any JIT compilation


def read_tles(path: Path) -> list[tuple[str, str, str]]:
    """Split a TLE file into ``(name, line1, line2)`` triples."""
    lines = [line.rstrip() for line in path.read_text().splitlines() if line.strip()]
    triples = []
    i = 0
    while i < len(lines):
        if lines[i].startswith("1 ") and i + 1 < len(lines):
            triples.append(("", lines[i], lines[i + 1]))
            i += 2
        elif i + 2 < len(lines):
            triples.append((lines[i].strip(), lines[i + 1], lines[i + 2]))
            i += 3
        else:
            break
    return triples


def main(
    tle_file: Annotated[Path, typer.Argument(help="File of two- or three-line element sets")],
    timestep: Annotated[float, typer.Option(help="Propagation timestep in seconds")] = 60.0,
    duration: Annotated[float, typer.Option(help="Propagation duration in days")] = 1.0,
    latitude: Annotated[
        float | None, typer.Option(help="Observer geodetic latitude in degrees")
    ] = None,
    longitude: Annotated[float | None, typer.Option(help="Observer longitude in degrees")] = None,
    height: Annotated[float, typer.Option(help="Observer height above WGS84 in km")] = 0.0,
) -> None:
    """Propagate TLEs with SGP4 and optionally compute look angles."""
    triples = read_tles(tle_file)
    if not triples:
        print(f"ERROR: No element sets found in {tle_file}. Exiting.")
        sys.exit(1)

    # ── Stage 1: Parse and initialize ────────────────────────────────────
    print(f"── Stage 1: Initializing {len(triples)} element sets ──")
    t0 = time.perf_counter()
    records: list[tuple[str, SatelliteRecord]] = []
    n_failures = 0
    for name, line1, line2 in triples:
        try:
            sat = SatelliteRecord.from_tle(line1, line2)
        except TLEParseError as exc:
            print(f"  Skipping {name or line1[2:7]}: {exc}")
            n_failures += 1
            continue
        if sat.error != SGP4Error.NONE:
            n_failures += 1
            continue
        records.append((name or sat.satnum, sat))

    n_deep_space = sum(sat.is_deep_space for _, sat in records)
    print(
        f"  Initialized {len(records)} satellites "
        f"({len(records) - n_deep_space} near-earth, {n_deep_space} deep-space) "
        f"in {time.perf_counter() - t0:.1f}s"
    )
    if n_failures > 0:
        print(f"  Failed: {n_failures}")

    # ── Stage 2: Propagation ─────────────────────────────────────────────
    print("\n── Stage 2: SGP4 propagation ──")
    duration_minutes = duration * MINUTES_PER_DAY
    offsets = jnp.arange(0.0, duration_minutes, timestep / 60.0)
    print(f"  Duration: {duration} days, {offsets.shape[0]} timesteps")

    observer = None
    if latitude is not None and longitude is not None:
        observer = GeodeticCoordinate(
            latitude=jnp.asarray(latitude * DEG2RAD),
            longitude=jnp.asarray(longitude * DEG2RAD),
            height=jnp.asarray(height),
        )
        observer_ecef = position_geodetic_to_ecef(observer)

    # Every record starts the grid at its own epoch
    propagate_over_time = jax.jit(jax.vmap(sgp4_propagate_model, in_axes=(None, 0)))

    t_prop_start = time.perf_counter()
    for name, sat in records:
        r, v, err, _ = propagate_over_time(sat.model, offsets)
        n_bad = int(jnp.sum(err != 0))
        line = f"  {name:<24} period {sat.period_minutes:8.2f} min"
        if n_bad:
            first = int(jnp.argmax(err != 0))
            line += f", error {int(err[first])} from {float(offsets[first]):.1f} min"

        if observer is not None:
            jd = sat.epoch_jd + offsets / MINUTES_PER_DAY
            theta = gmst(jd)
            r_ecef, v_ecef = jax.vmap(state_eci_to_ecef)(r, v, theta)
            angles = jax.vmap(look_angles, in_axes=(None, 0, 0, 0))(observer, jd, r_ecef, v_ecef)
            elevation = jnp.where(err == 0, angles.elevation, -jnp.inf)
            best = int(jnp.argmax(elevation))
            if float(elevation[best]) > 0.0:
                observer_eci = rotation_ecef_to_eci(theta[best]) @ observer_ecef
                factor = doppler_factor(observer_eci, r[best], v[best])
                line += (
                    f", max elevation {float(elevation[best]) * RAD2DEG:5.1f} deg"
                    f" at +{float(offsets[best]):.1f} min (doppler {float(factor):.8f})"
                )
            else:
                line += ", never visible"
        print(line)

    elapsed = time.perf_counter() - t_prop_start
    total_propagations = len(records) * offsets.shape[0]
    print(f"\n  {total_propagations:,} evaluations in {elapsed:.1f}s")
    print("\nDone.")


if __name__ == "__main__":
    typer.run(main)

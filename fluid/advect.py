"""
advect.py — Semi-Lagrangian Advection
======================================
This is what makes fluid look like it's *actually flowing*.

The algorithm (per interior cell):
  1. Look at the cell position (x, y).
  2. Trace BACKWARD along the current velocity at that cell by one dt:
        px = x - velocity_x * dt
        py = y - velocity_y * dt
     → "Where did the stuff in this cell come FROM?"
  3. Sample the source field at (px, py) with bilinear interpolation
     (it'll land between lattice points).
  4. That sampled value becomes the new value for this cell.

Bilinear = linear interp in X (along the top pair, then the bottom pair),
then linear interp in Y between those two estimates.

The four lattice points around (px, py) are clamped into [0, n + 1], so a
trace that leaves the grid samples the border ring instead of indexing out
of range. When both points of a pair coincide (the trace sits exactly on a
lattice line, or was clamped) we take the value at that point instead of
dividing by zero. With zero velocity every trace lands exactly on its own
cell, so advection is an exact no-op.

Key reference: Jos Stam, "Stable Fluids" (SIGGRAPH 1999)
"""

import numpy as np

from .grid import FluidGrid


def surrounding_coords(px, py, n: int):
    """
    The four lattice points bounding (px, py), clamped into [0, n + 1].

    Returns [top_left, top_right, bottom_left, bottom_right], each (x, y).
    Works on scalars or on arrays of positions.
    """
    x0 = np.clip(np.floor(px), 0, n + 1)
    x1 = np.clip(np.ceil(px), 0, n + 1)
    y0 = np.clip(np.floor(py), 0, n + 1)
    y1 = np.clip(np.ceil(py), 0, n + 1)
    return [(x0, y0), (x1, y0), (x0, y1), (x1, y1)]


def interpolate(x0, v0, x1, v1, x):
    """
    Linear interpolation of (x0, v0)–(x1, v1) at x.
    If x0 == x1 the pair is degenerate and v0 is returned as-is.
    """
    span = x1 - x0
    degenerate = span == 0
    t = np.where(degenerate, 0.0, (x - x0) / np.where(degenerate, 1.0, span))
    return np.where(degenerate, v0, v0 * (1 - t) + v1 * t)


def _sample(grid: FluidGrid, source: np.ndarray, px, py):
    """Bilinear sample of `source` at back-traced position(s) (px, py)."""
    side = grid.n + 2
    (tl_x, tl_y), (tr_x, tr_y), (bl_x, bl_y), (br_x, br_y) = surrounding_coords(px, py, grid.n)

    def at(cx, cy):
        return source[(cx + side * cy).astype(np.intp)]

    top = interpolate(tl_x, at(tl_x, tl_y), tr_x, at(tr_x, tr_y), px)
    bottom = interpolate(bl_x, at(bl_x, bl_y), br_x, at(br_x, br_y), px)
    return interpolate(tl_y, top, bl_y, bottom, py)


def advect(grid: FluidGrid, x: int, y: int, source: np.ndarray) -> float:
    """
    Advected value of interior cell (x, y), sampled from `source` along the
    grid's CURRENT velocity. No bounds checks: (x, y) must be interior.
    """
    i = grid.index(x, y)
    px = np.float64(x) - grid.velocity_x[i] * grid.dt
    py = np.float64(y) - grid.velocity_y[i] * grid.dt
    return float(_sample(grid, source, px, py))


def _back_trace(grid: FluidGrid):
    """Back-traced positions of every interior cell, as two (n, n) arrays indexed [y, x]."""
    n = grid.n
    side = n + 2
    ys, xs = np.meshgrid(
        np.arange(1, n + 1, dtype=np.float64),
        np.arange(1, n + 1, dtype=np.float64),
        indexing='ij'
    )
    vx = grid.velocity_x.reshape(side, side)[1:-1, 1:-1]
    vy = grid.velocity_y.reshape(side, side)[1:-1, 1:-1]
    # New arrays, so later writes into the velocity buffers can't move the traces
    return xs - vx * grid.dt, ys - vy * grid.dt


def advect_field(grid: FluidGrid, source: np.ndarray, destination: np.ndarray, trace=None):
    """
    Advect every interior cell of `source` into `destination`.

    `trace` is an optional precomputed (px, py) pair from _back_trace(), so
    several fields can share one set of traces.

    Modifies: destination (interior only, in-place)
    """
    px, py = trace if trace is not None else _back_trace(grid)
    side = grid.n + 2
    destination.reshape(side, side)[1:-1, 1:-1] = _sample(grid, source, px, py)


def advect_density(grid: FluidGrid):
    """
    Advect density through the current velocity field:
    initial_density → density.

    Modifies: grid.density (interior, in-place)
    """
    advect_field(grid, grid.initial_density, grid.density)


def advect_velocity(grid: FluidGrid):
    """
    Advect the velocity field through itself (self-advection):
    initial_velocity_x → velocity_x, initial_velocity_y → velocity_y.

    The advecting field is the CURRENT velocity, which is also where the
    results go. Per cell, velocity_x is advected first and velocity_y is
    then traced with that cell's NEW velocity_x (and still-old velocity_y).
    A cell only ever reads its own velocity, so doing velocity_x for the
    whole field and re-tracing gives the same result as the cell loop.

    Modifies: grid.velocity_x, grid.velocity_y (interior, in-place)
    """
    advect_field(grid, grid.initial_velocity_x, grid.velocity_x, _back_trace(grid))
    advect_field(grid, grid.initial_velocity_y, grid.velocity_y, _back_trace(grid))

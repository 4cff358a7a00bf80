"""
diffuse.py — Per-Cell Implicit Diffusion
=========================================
Diffusion makes fields spread out over time.
  - High diffusion  → density spreads fast (watercolor bleed)
  - Low diffusion   → density stays tight
  - Zero diffusion  → exact no-op

The stiffness of one step is

    k = dt * diffusion

For every interior cell (x, y) we build a small LOCAL system: one equation
per lattice neighbor (east, west, north, south). Equation i is the implicit
update with that neighbor's source value as its constant:

    v_i = (F[neighbor_i] + k * mean(v0, v1, v2, v3)) / (1 + k)

The four unknowns are coupled through the shared mean, so we relax them
together with 10 Gauss-Seidel sweeps starting from zero (solver.py). The
cell's new value is the same update applied with its OWN source value:

    new = (F[x, y] + k * mean(solved)) / (1 + k)

Note the system is per cell: it reads only the four neighbor SOURCE values
and never sees neighbors' freshly diffused values. It is not a grid-wide
implicit solve, and it isn't meant to be one.

Because each cell is independent, diffuse_field() relaxes all of them at
once: each unknown becomes an (n, n) array and the neighbor constants are
shifted slices of the source field. No Python loops over cells.
"""

import numpy as np

from .grid import FluidGrid
from .solver import (
    DiffusionArgs,
    GaussSeidelEquation,
    gauss_seidel,
    value_after_diffusion,
    zeros_like_unknowns,
)

DIFFUSION_ITERATIONS = 10


def _relax(neighbors: tuple, center, k: float):
    """Solve the 4-equation neighbor system and apply the update to the center value."""
    equations = [
        GaussSeidelEquation(value_after_diffusion, DiffusionArgs(value, k))
        for value in neighbors
    ]
    like = center if isinstance(center, np.ndarray) else None
    solved = gauss_seidel(equations, zeros_like_unknowns(4, like), DIFFUSION_ITERATIONS)
    return value_after_diffusion(solved, DiffusionArgs(center, k))


def diffuse(grid: FluidGrid, x: int, y: int, source: np.ndarray) -> float:
    """
    Diffused value of interior cell (x, y), read from `source`.
    No bounds checks: (x, y) must be an interior cell.
    """
    k = grid.dt * grid.diffusion
    ix = grid.index
    neighbors = (
        source[ix(x + 1, y)],   # east
        source[ix(x - 1, y)],   # west
        source[ix(x, y + 1)],   # north
        source[ix(x, y - 1)],   # south
    )
    return float(_relax(neighbors, source[ix(x, y)], k))


def diffuse_field(grid: FluidGrid, source: np.ndarray, destination: np.ndarray):
    """
    Diffuse every interior cell of `source` into `destination`.

    `source` is only read; the border ring of `destination` is left untouched.
    Same arithmetic as diffuse(), cell for cell.

    Modifies: destination (interior only, in-place)
    """
    k = grid.dt * grid.diffusion
    side = grid.n + 2

    # [y, x] view, so slices line up with index(x, y) = x + side * y
    f = source.reshape(side, side)
    neighbors = (
        f[1:-1, 2:],    # east  (x + 1)
        f[1:-1, :-2],   # west  (x - 1)
        f[2:, 1:-1],    # north (y + 1)
        f[:-2, 1:-1],   # south (y - 1)
    )
    center = f[1:-1, 1:-1]

    destination.reshape(side, side)[1:-1, 1:-1] = _relax(neighbors, center, k)


def diffuse_density(grid: FluidGrid):
    """
    Diffuse density: initial_density → density.

    Modifies: grid.density (interior, in-place)
    """
    diffuse_field(grid, grid.initial_density, grid.density)


def diffuse_velocity(grid: FluidGrid):
    """
    Diffuse both velocity components independently with the same rate:
    initial_velocity_x → velocity_x, initial_velocity_y → velocity_y.

    Modifies: grid.velocity_x, grid.velocity_y (interior, in-place)
    """
    diffuse_field(grid, grid.initial_velocity_x, grid.velocity_x)
    diffuse_field(grid, grid.initial_velocity_y, grid.velocity_y)

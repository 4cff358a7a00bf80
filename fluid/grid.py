"""
grid.py — Flat Collocated Grid with a Border Ring
==================================================
The foundation of the entire simulation.

Layout:
  - The domain is an n × n block of INTERIOR cells.
  - A one-cell BORDER ring surrounds it → the lattice side is n + 2.
  - Every field is stored as a FLAT array of length (n + 2)², row-major:

        index(x, y) = x + (n + 2) * y        x, y ∈ [0, n + 1]

  - Density and both velocity components all live at cell centers
    (collocated, not staggered).

The border ring is never written by diffusion or advection, so it keeps
whatever was last put there (zero at construction). That is the only
boundary condition: an implicit Dirichlet-zero wall.

Each field comes in a pair:
  - current  (velocity_x, velocity_y, density)
  - initial  (initial_velocity_x, initial_velocity_y, initial_density)

Sources are injected into the INITIAL buffers. The physics passes read one
buffer of a pair and write the other, then swap the handles.
"""

import logging
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_DT = 0.1


@dataclass(frozen=True)
class FluidConfig:
    """
    Immutable simulation size and material.

    Args:
        n          : Interior side length (the lattice side is n + 2)
        diffusion  : Diffusion rate, applied to density AND velocity
    """

    n: int
    diffusion: float = 0.0

    def __post_init__(self):
        if self.n < 1:
            raise ValueError(f"Interior size must be at least 1, got n={self.n}")
        if self.diffusion < 0:
            raise ValueError(f"Diffusion rate must be non-negative, got {self.diffusion}")

    @property
    def side(self) -> int:
        return self.n + 2

    @property
    def size(self) -> int:
        return (self.n + 2) * (self.n + 2)


def index(n: int, x: int, y: int) -> int:
    """Flat offset of lattice point (x, y) on a grid with n interior cells per side."""
    return x + (n + 2) * y


def in_bounds(n: int, x: int, y: int) -> bool:
    """
    True when (x, y) is a valid lattice point, border ring included.
    The kernel never checks coordinates itself; hosts feeding it user input
    (mouse positions etc.) must filter with this first.
    """
    return 0 <= x <= n + 1 and 0 <= y <= n + 1


class FluidGrid:
    """
    The six field buffers plus the time step.
    This is the single source of truth passed between all physics steps.
    """

    def __init__(self, config: FluidConfig, dt: float = DEFAULT_DT):
        self.config = config
        self.n = config.n
        self.size = config.size
        self.dt = dt
        self.diffusion = config.diffusion

        # ── Current fields ─────────────────────────────────────────────────
        self.velocity_x = np.zeros(self.size, dtype=np.float64)
        self.velocity_y = np.zeros(self.size, dtype=np.float64)
        self.density    = np.zeros(self.size, dtype=np.float64)

        # ── Initial (source / previous-step) fields ────────────────────────
        self.initial_velocity_x = np.zeros(self.size, dtype=np.float64)
        self.initial_velocity_y = np.zeros(self.size, dtype=np.float64)
        self.initial_density    = np.zeros(self.size, dtype=np.float64)

    def index(self, x: int, y: int) -> int:
        return x + (self.n + 2) * y

    def in_bounds(self, x: int, y: int) -> bool:
        return in_bounds(self.n, x, y)

    def _check_index(self, i: int) -> int:
        # numpy would silently wrap a negative index to the far end of the
        # buffer, so flat indices coming from the host are checked here.
        if not 0 <= i < self.size:
            raise IndexError(f"Flat index {i} out of range for buffer of length {self.size}")
        return i

    def add_density(self, i: int, amount: float):
        """
        Inject density into the INITIAL buffer at flat index i.
        Scaled by dt and accumulated, so several calls in one frame add up
        until the next step consumes them.
        """
        self.initial_density[self._check_index(i)] += self.dt * amount

    def add_velocity(self, i: int, vx: float, vy: float):
        """
        Apply a velocity impulse to the INITIAL velocity buffers at flat index i.

        Args:
            i       : Flat index (see index())
            vx, vy  : Velocity components to add, scaled by dt
        """
        self._check_index(i)
        self.initial_velocity_x[i] += self.dt * vx
        self.initial_velocity_y[i] += self.dt * vy

    def density_at(self, i: int) -> float:
        return float(self.density[self._check_index(i)])

    # ── Double buffering ───────────────────────────────────────────────────
    # Handles are exchanged, never copied.

    def swap_density(self):
        self.density, self.initial_density = self.initial_density, self.density

    def swap_velocity(self):
        self.velocity_x, self.initial_velocity_x = self.initial_velocity_x, self.velocity_x
        self.velocity_y, self.initial_velocity_y = self.initial_velocity_y, self.velocity_y

    def buffers(self) -> dict:
        return {
            "velocity_x"         : self.velocity_x,
            "velocity_y"         : self.velocity_y,
            "density"            : self.density,
            "initial_velocity_x" : self.initial_velocity_x,
            "initial_velocity_y" : self.initial_velocity_y,
            "initial_density"    : self.initial_density,
        }

    def density_grid(self) -> np.ndarray:
        """
        Density as a (n + 2, n + 2) view indexed [y, x].
        Row-major flat storage means a plain reshape, no copy.
        Hand this to the visualizer.
        """
        side = self.n + 2
        return self.density.reshape(side, side)

    def total_density(self) -> float:
        return float(self.density.sum())

    def set_dt(self, dt: float):
        self.dt = dt
        logger.info("Time step set to %s", dt)

    def reset(self):
        """Zero out all fields in place. Useful for running multiple simulations."""
        for arr in self.buffers().values():
            arr[:] = 0.0
        logger.info("Grid reset (n=%d)", self.n)

    def __repr__(self):
        max_vel = max(np.abs(self.velocity_x).max(), np.abs(self.velocity_y).max())
        return (
            f"FluidGrid(n={self.n}, size={self.size}, dt={self.dt}, diffusion={self.diffusion})\n"
            f"  density  : max={self.density.max():.4f}, sum={self.density.sum():.2f}\n"
            f"  velocity : max_component={max_vel:.4f}"
        )

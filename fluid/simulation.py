"""
simulation.py — Master Physics Loop
====================================
This is the complete simulation step that ties everything together.
One call to `step()` advances the fluid by dt.

Physics pipeline per frame:
  Velocity step
    1. Diffuse velocity        initial → current
    2. Swap velocity buffers
    3. Advect velocity         initial → current, traced along current
    4. Swap velocity buffers back
  Density step
    5. Diffuse density         initial → current
    6. Swap density buffers
    7. Advect density          initial → current, traced along current velocity
    8. Swap density buffers back

The swap order matters: it decides which buffer advection traces along.
There is no pressure projection, so the velocity field is free to carry
divergence.

The host (visualizer, game loop, ...) drives it like this:
    sim = FluidSimulation(FluidConfig(n=64, diffusion=0.0001))
    for frame in range(100):
        sim.add_density(sim.index(32, 32), 100.0)
        sim.step()
        value = sim.density_at(sim.index(32, 32))
"""

import logging
import time

import numpy as np

from .advect import advect_density, advect_velocity
from .diffuse import diffuse_density, diffuse_velocity
from .grid import DEFAULT_DT, FluidConfig, FluidGrid

logger = logging.getLogger(__name__)


class FluidSimulation:
    """
    The complete 2D fluid simulation.

    Usage:
        sim = FluidSimulation(FluidConfig(n=64, diffusion=0.0001))
        sim.add_source(32, 4, density=50.0, velocity=(0.0, 20.0))
        for frame in range(100):
            sim.step()
            density = sim.density_grid()   # Hand to visualizer
    """

    def __init__(self, config: FluidConfig, dt: float = DEFAULT_DT):
        """
        Args:
            config : Interior size and diffusion rate (fixed for the lifetime)
            dt     : Initial timestep. 0.1 = 10 FPS physics update
        """
        self.config = config
        self.grid = FluidGrid(config, dt=dt)
        self.frame = 0
        self.perf_log = []   # stores timing data per frame
        logger.debug("Created simulation n=%d size=%d diffusion=%s",
                     config.n, config.size, config.diffusion)

    # ── Host API ───────────────────────────────────────────────────────────

    def index(self, x: int, y: int) -> int:
        return self.grid.index(x, y)

    def add_density(self, i: int, amount: float):
        self.grid.add_density(i, amount)

    def add_velocity(self, i: int, vx: float, vy: float):
        self.grid.add_velocity(i, vx, vy)

    def set_dt(self, dt: float):
        self.grid.set_dt(dt)

    @property
    def dt(self) -> float:
        return self.grid.dt

    def density_at(self, i: int) -> float:
        return self.grid.density_at(i)

    def interior_size(self) -> int:
        return self.config.n

    def buffer_length(self) -> int:
        return self.grid.size

    def density_grid(self) -> np.ndarray:
        return self.grid.density_grid()

    def add_source(self, x: int, y: int,
                   density: float = 0.0,
                   velocity: tuple = (0.0, 0.0)):
        """
        Inject density and velocity at lattice point (x, y) in one call.
        Call this before stepping to feed a continuous emitter each frame.

        Args:
            x, y     : Lattice coordinates (0 to n + 1)
            density  : Density to add (scaled by dt)
            velocity : (vx, vy) to add (scaled by dt)
        """
        if not self.grid.in_bounds(x, y):
            raise IndexError(f"Lattice point ({x}, {y}) outside grid with n={self.config.n}")
        i = self.grid.index(x, y)
        self.grid.add_density(i, density)
        self.grid.add_velocity(i, *velocity)

    # ── Stepping ───────────────────────────────────────────────────────────

    def velocity_step(self):
        """Diffuse → swap → advect (along the just-swapped current velocity) → swap back."""
        g = self.grid
        diffuse_velocity(g)
        g.swap_velocity()
        advect_velocity(g)
        g.swap_velocity()

    def density_step(self):
        g = self.grid
        diffuse_density(g)
        g.swap_density()
        advect_density(g)
        g.swap_density()

    def step(self) -> dict:
        """
        Advance simulation by one timestep (dt).

        Returns performance metrics dict for benchmarking.
        """
        t_total_start = time.perf_counter()
        g = self.grid

        # ── Velocity step (settles the field density is traced along) ──────
        t0 = time.perf_counter()
        self.velocity_step()
        t_velocity = (time.perf_counter() - t0) * 1000

        # ── Density step ───────────────────────────────────────────────────
        t0 = time.perf_counter()
        self.density_step()
        t_density = (time.perf_counter() - t0) * 1000

        # ── Frame bookkeeping ──────────────────────────────────────────────
        self.frame += 1
        t_total = (time.perf_counter() - t_total_start) * 1000

        metrics = {
            "frame"          : self.frame,
            "dt"             : g.dt,
            "total_ms"       : t_total,
            "fps"            : 1000.0 / t_total if t_total > 0 else 0,
            "velocity_ms"    : t_velocity,
            "density_ms"     : t_density,
            "density_total"  : g.total_density(),
        }
        self.perf_log.append(metrics)
        logger.debug("Frame %d stepped in %.2fms (density_total=%.4f)",
                     self.frame, t_total, metrics["density_total"])
        return metrics

    def reset(self):
        """Zero all fields and restart the frame counter. dt is kept."""
        self.grid.reset()
        self.frame = 0
        self.perf_log = []

    def print_status(self):
        """Pretty-print current simulation state."""
        g = self.grid
        print(f"\n{'='*50}")
        print(f"  Frame: {self.frame}  |  n={g.n}  |  dt={g.dt}")
        print(f"  Density   : max={g.density.max():.4f}, total={g.density.sum():.2f}")
        print(f"  Velocity  : max_x={np.abs(g.velocity_x).max():.4f}, max_y={np.abs(g.velocity_y).max():.4f}")
        if self.perf_log:
            last = self.perf_log[-1]
            print(f"  Perf      : {last['total_ms']:.1f}ms/frame ({last['fps']:.1f} FPS)")
        print(f"{'='*50}")

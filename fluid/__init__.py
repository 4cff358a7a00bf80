"""
fluid/ — 2D Stable Fluids Kernel
=================================
Exports the main interfaces a host (renderer, CLI, game loop) uses.

Visualizer imports: FluidSimulation → add_source(), step(), density_grid()
CLI imports       : FluidConfig, FluidSimulation
"""

from .grid import FluidConfig, FluidGrid, in_bounds, index
from .simulation import FluidSimulation
from .solver import GaussSeidelEquation, gauss_seidel

__all__ = [
    "FluidConfig",
    "FluidGrid",
    "FluidSimulation",
    "GaussSeidelEquation",
    "gauss_seidel",
    "in_bounds",
    "index",
]

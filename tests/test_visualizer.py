from types import SimpleNamespace

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from fluid import FluidConfig, FluidSimulation
from visualizer import EMITTER_DENSITY, MOUSE_DENSITY, MOUSE_FORCE, FluidVisualizer


@pytest.fixture
def viz():
    sim = FluidSimulation(FluidConfig(n=8, diffusion=0.0001))
    v = FluidVisualizer(sim)
    yield v
    plt.close(v.fig)


def _event(viz, x, y, button=1):
    return SimpleNamespace(inaxes=viz.ax, xdata=x, ydata=y, button=button)


def test_update_steps_and_redraws(viz):
    artists = viz.update(0)
    assert viz.sim.frame == 1
    assert viz.img in artists
    assert viz.img.get_array().shape == (10, 10)
    assert "Frame 1" in viz.title_text.get_text()


def test_drag_injects_density_then_velocity(viz):
    sim = viz.sim
    viz._on_drag(_event(viz, 3.2, 4.6))
    i = sim.index(3, 5)
    assert sim.grid.initial_density[i] == pytest.approx(sim.dt * MOUSE_DENSITY)
    assert sim.grid.initial_velocity_x[i] == 0.0

    viz._on_drag(_event(viz, 4.1, 5.0))
    j = sim.index(4, 5)
    assert sim.grid.initial_velocity_x[j] == pytest.approx(sim.dt * MOUSE_FORCE)
    assert sim.grid.initial_velocity_y[j] == 0.0


def test_drag_off_grid_is_ignored(viz):
    sim = viz.sim
    viz._on_drag(_event(viz, -4.0, 2.0))
    viz._on_drag(_event(viz, 2.0, 42.0))
    assert not sim.grid.initial_density.any()
    assert viz._last_mouse is None


def test_motion_without_button_is_ignored(viz):
    viz._on_drag(_event(viz, 3.0, 3.0, button=None))
    assert not viz.sim.grid.initial_density.any()


def test_release_forgets_last_point(viz):
    viz._on_drag(_event(viz, 3.0, 3.0))
    viz._on_release(None)
    assert viz._last_mouse is None


def test_color_scale_follows_one_frame_of_emitter(viz):
    assert viz.vmax == pytest.approx(viz.sim.dt * EMITTER_DENSITY)
    assert viz.img.get_clim() == pytest.approx((0.0, viz.vmax))


def test_explicit_vmax_wins():
    sim = FluidSimulation(FluidConfig(n=4))
    v = FluidVisualizer(sim, vmax=3.0)
    try:
        assert v.vmax == 3.0
    finally:
        plt.close(v.fig)

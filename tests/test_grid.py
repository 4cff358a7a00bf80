import numpy as np
import pytest

from fluid.grid import FluidConfig, FluidGrid, in_bounds, index


def test_index_is_bijection_onto_buffer():
    n = 3
    offsets = [index(n, x, y) for y in range(n + 2) for x in range(n + 2)]
    assert sorted(offsets) == list(range((n + 2) ** 2))
    assert index(n, 0, 0) == 0
    assert index(n, n + 1, n + 1) == (n + 2) ** 2 - 1


def test_grid_index_matches_module_index():
    grid = FluidGrid(FluidConfig(n=5))
    assert grid.index(2, 4) == index(5, 2, 4) == 2 + 7 * 4


def test_config_derived_sizes():
    config = FluidConfig(n=3, diffusion=0.5)
    assert config.side == 5
    assert config.size == 25


@pytest.mark.parametrize("kwargs", [{"n": 0}, {"n": -2}, {"n": 4, "diffusion": -0.1}])
def test_config_rejects_bad_values(kwargs):
    with pytest.raises(ValueError):
        FluidConfig(**kwargs)


def test_config_is_immutable():
    config = FluidConfig(n=3)
    with pytest.raises(AttributeError):
        config.n = 4


def test_new_grid_is_zero_filled_with_equal_lengths():
    grid = FluidGrid(FluidConfig(n=4))
    assert grid.dt == 0.1
    for name, buf in grid.buffers().items():
        assert buf.shape == (36,), name
        assert not buf.any(), name


def test_in_bounds():
    assert in_bounds(3, 0, 0)
    assert in_bounds(3, 4, 4)
    assert not in_bounds(3, -1, 2)
    assert not in_bounds(3, 2, 5)


def test_add_density_targets_initial_buffer_and_accumulates():
    grid = FluidGrid(FluidConfig(n=3))
    i = grid.index(2, 2)
    grid.add_density(i, 1.5)
    grid.add_density(i, 2.5)
    assert grid.initial_density[i] == pytest.approx(0.1 * 4.0)
    assert grid.density[i] == 0.0


def test_add_is_additive():
    a = FluidGrid(FluidConfig(n=3))
    b = FluidGrid(FluidConfig(n=3))
    i = a.index(1, 3)
    a.add_density(i, 3.0)
    a.add_density(i, -1.25)
    a.add_velocity(i, 2.0, -4.0)
    a.add_velocity(i, 0.5, 1.0)
    b.add_density(i, 1.75)
    b.add_velocity(i, 2.5, -3.0)
    assert np.allclose(a.initial_density, b.initial_density)
    assert np.allclose(a.initial_velocity_x, b.initial_velocity_x)
    assert np.allclose(a.initial_velocity_y, b.initial_velocity_y)
    assert not a.velocity_x.any() and not a.velocity_y.any()


@pytest.mark.parametrize("bad", [-1, 25, 100])
def test_flat_index_out_of_range_raises(bad):
    grid = FluidGrid(FluidConfig(n=3))
    with pytest.raises(IndexError):
        grid.add_density(bad, 1.0)
    with pytest.raises(IndexError):
        grid.add_velocity(bad, 1.0, 1.0)
    with pytest.raises(IndexError):
        grid.density_at(bad)
    assert not grid.initial_density.any()


def test_swaps_exchange_handles_without_copying():
    grid = FluidGrid(FluidConfig(n=3))
    density, initial_density = grid.density, grid.initial_density
    vx, ivx = grid.velocity_x, grid.initial_velocity_x
    vy, ivy = grid.velocity_y, grid.initial_velocity_y

    grid.swap_density()
    assert grid.density is initial_density and grid.initial_density is density

    grid.swap_velocity()
    assert grid.velocity_x is ivx and grid.initial_velocity_x is vx
    assert grid.velocity_y is ivy and grid.initial_velocity_y is vy


def test_density_grid_is_indexed_y_then_x():
    grid = FluidGrid(FluidConfig(n=3))
    grid.density[grid.index(1, 2)] = 5.0
    image = grid.density_grid()
    assert image.shape == (5, 5)
    assert image[2, 1] == 5.0
    assert grid.total_density() == 5.0


def test_reset_zeroes_in_place():
    grid = FluidGrid(FluidConfig(n=3))
    density = grid.density
    grid.density[7] = 1.0
    grid.initial_velocity_y[3] = 2.0
    grid.reset()
    assert grid.density is density
    assert all(not buf.any() for buf in grid.buffers().values())

import numpy as np
import pytest

from apic2d import Scene, Sim_Wrapper
from apic2d.pressure_solver import JacobiPressureSolver
from apic2d.sim_wrapper import sample_box
from apic2d.utils import ParcelBox, sample_grid, sample_jittered_grid, sample_random, sample_blue_noise
from conftest import DEVICE


def small_scene(**kwargs):
    scene = Scene(dt=0.02, size=[8, 8], cell_size=1.0, **kwargs)
    scene.add_parcel_box(n_particles=64, center=[2.0, 2.0], size=[4.0, 4.0])
    return scene


def test_scene_json_round_trip(tmp_path):
    scene = Scene(dt=0.01, size=[24, 12], cell_size=0.5, friction=0.3,
                  use_gauss_seidel=False, num_iterations=60, jacobi_alpha=0.7,
                  variable_density=True, frames_per_output=3)
    scene.add_parcel_box(100, [3.0, 3.0], [2.0, 2.0], sampling_type="random", k=7, velocity=[1.0, 0.0])
    scene.add_solid_box([6.0, 1.0], [1.0, 2.0])

    path = tmp_path / "scene.json"
    scene.to_json(str(path))
    loaded = Scene.from_json(str(path))

    assert loaded.to_dict() == scene.to_dict()
    assert loaded.parcel_boxes[0].velocity == [1.0, 0.0]
    assert loaded.solid_boxes == [([6.0, 1.0], [1.0, 2.0])]


def test_scene_defaults_from_empty_dict():
    scene = Scene.from_dict({})
    assert scene.size == [16, 16]
    assert scene.gravity == [0.0, -9.81]
    assert scene.use_gauss_seidel
    assert scene.parcel_boxes == []


@pytest.mark.parametrize("sampler", [sample_grid, sample_jittered_grid, sample_random, sample_blue_noise])
def test_samplers_stay_in_box(sampler):
    center, size = [3.0, 2.0], [2.0, 1.0]
    points = sampler(200, center, size, 30)

    assert points.ndim == 2 and points.shape[1] == 2
    assert 0 < points.shape[0]
    assert np.all(points >= np.array(center) - np.array(size) * 0.5 - 1e-9)
    assert np.all(points <= np.array(center) + np.array(size) * 0.5 + 1e-9)


def test_sample_counts():
    assert sample_random(50, [0.0, 0.0], [1.0, 1.0]).shape == (50, 2)
    assert sample_grid(50, [0.0, 0.0], [1.0, 1.0]).shape == (64, 2)
    assert sample_blue_noise(50, [0.0, 0.0], [1.0, 1.0]).shape[0] <= 50


def test_sample_box_rejects_unknown_sampling_type():
    with pytest.raises(ValueError):
        sample_box(ParcelBox(10, [1.0, 1.0], [1.0, 1.0], sampling_type="hexagonal"))


def test_wrapper_builds_from_scene():
    scene = small_scene()
    scene.add_solid_box([6.5, 1.5], [1.0, 1.0])
    sim = Sim_Wrapper(scene=scene, device=DEVICE)

    assert sim.solver.parcels.count == 64
    # Each parcel carries its share of the box's fluid mass
    assert sim.solver.total_parcel_mass() == pytest.approx(1000.0 * 16.0, rel=1e-5)
    assert len(sim.solver.grid.solid_boxes) == 1
    assert sim.get_positions().shape == (64, 2)
    assert sim.get_solid_occupancy().shape == (37, 2)


def test_wrapper_step_advances_frames():
    scene = small_scene(frames_per_output=3)
    sim = Sim_Wrapper(scene=scene, device=DEVICE)
    sim.step()

    assert sim.current_frame == 3
    assert sim.solver.time == pytest.approx(0.06)
    assert sim.get_fluid_occupancy().shape[0] > 0


def test_wrapper_selects_jacobi_solver():
    sim = Sim_Wrapper(scene=small_scene(use_gauss_seidel=False, jacobi_alpha=0.5), device=DEVICE)
    assert isinstance(sim.solver.pressure_solver, JacobiPressureSolver)
    assert sim.solver.pressure_solver.alpha == 0.5


def test_wrapper_clamps_seeded_parcels_into_domain():
    scene = Scene(size=[4, 4], cell_size=1.0)
    scene.add_parcel_box(n_particles=20, center=[0.0, 2.0], size=[2.0, 2.0], sampling_type="random")
    sim = Sim_Wrapper(scene=scene, device=DEVICE)

    positions = sim.get_positions()
    assert np.all(positions >= 0.01 - 1e-6)
    assert np.all(positions <= 4.0 - 0.01 + 1e-6)

import numpy as np
import pytest

from apic2d import APICSimulator, CellType, Grid, PressureSolver
from conftest import DEVICE, make_parcels, fluid_block


def test_construction_rejects_bad_layout():
    with pytest.raises(ValueError):
        Grid((0, 8), 1.0, device=DEVICE)
    with pytest.raises(ValueError):
        Grid((8, -1), 1.0, device=DEVICE)
    with pytest.raises(ValueError):
        Grid((8, 8), 0.0, device=DEVICE)
    with pytest.raises(ValueError):
        Grid((8, 8), 1.0, fluid_density=0.0, device=DEVICE)
    with pytest.raises(ValueError):
        Grid((8, 8), 1.0, air_density=-1.0, device=DEVICE)


@pytest.mark.parametrize("size", [8, (8,), (8, 8, 8), (8, 2.7), (4.5, 4)])
def test_construction_rejects_malformed_size(size):
    with pytest.raises(ValueError):
        Grid(size, 1.0, device=DEVICE)


def test_construction_accepts_integral_float_size():
    assert Grid((4.0, 3.0), 1.0, device=DEVICE).size == (4, 3)


def test_padded_shapes(grid8):
    assert grid8.cell_type.shape == (10, 10)
    assert grid8.mass.shape == (10, 10)
    assert grid8.pressure.shape == (10, 10)
    assert grid8.velocity_x.shape == (11, 10)
    assert grid8.velocity_y.shape == (10, 11)
    assert grid8.divergence.shape == (8, 8)
    assert grid8.extent == (8.0, 8.0)


def test_reset_classifies_border_solid_and_interior_air(grid8):
    cell_type = grid8.cell_type.numpy()
    assert np.all(cell_type[0, :] == CellType.SOLID)
    assert np.all(cell_type[-1, :] == CellType.SOLID)
    assert np.all(cell_type[:, 0] == CellType.SOLID)
    assert np.all(cell_type[:, -1] == CellType.SOLID)
    assert np.all(cell_type[1:-1, 1:-1] == CellType.AIR)


def test_reset_is_idempotent(grid8):
    parcels = make_parcels([[2.3, 4.1], [5.5, 1.7]], velocities=[[1.0, 2.0], [-1.0, 0.5]])
    grid8.transfer_mass(parcels)
    grid8.transfer_momentum(parcels)

    grid8.reset()
    first = [a.numpy().copy() for a in (grid8.cell_type, grid8.mass, grid8.mass_x, grid8.momentum_x,
                                        grid8.mass_y, grid8.momentum_y)]
    grid8.reset()
    second = [a.numpy() for a in (grid8.cell_type, grid8.mass, grid8.mass_x, grid8.momentum_x,
                                  grid8.mass_y, grid8.momentum_y)]
    for a, b in zip(first, second):
        np.testing.assert_array_equal(a, b)
    assert np.all(second[1] == 0.0)
    assert np.all(second[2] == 0.0)
    assert np.all(second[4] == 0.0)


def test_mass_transfer_conserves_mass(grid8):
    rng = np.random.default_rng(3)
    positions = rng.uniform(0.01, 7.99, size=(200, 2))
    masses = rng.uniform(0.5, 2.0, size=200)
    parcels = make_parcels(positions, masses=masses)

    grid8.transfer_mass(parcels)

    assert np.isclose(grid8.mass.numpy().sum(), masses.sum(), rtol=1e-5)


def test_mass_transfer_marks_enclosing_cells_fluid(grid8):
    parcels = make_parcels([[2.3, 4.1]])
    grid8.transfer_mass(parcels)

    cell_type = grid8.cell_type.numpy()
    assert cell_type[3, 5] == CellType.FLUID
    assert np.count_nonzero(cell_type == CellType.FLUID) == 1


def test_cell_centered_parcel_deposits_into_one_cell(grid4):
    parcels = make_parcels([[3.0, 3.0]], masses=[1.0])
    grid4.transfer_mass(parcels)

    mass = grid4.mass.numpy()
    assert mass[2, 2] == pytest.approx(1.0)
    assert np.isclose(mass.sum(), 1.0)


def test_corner_parcel_splits_mass_over_four_cells(grid4):
    parcels = make_parcels([[4.0, 4.0]], masses=[1.0])
    grid4.transfer_mass(parcels)

    mass = grid4.mass.numpy()
    for i, j in [(2, 2), (3, 2), (2, 3), (3, 3)]:
        assert mass[i, j] == pytest.approx(0.25)


@pytest.mark.parametrize("position", [[3.0, 3.0], [4.0, 4.0]])
def test_single_parcel_velocity_round_trip(grid4, position):
    parcels = make_parcels([position], velocities=[[0.0, 1.0]], masses=[1.0])

    grid4.transfer_mass(parcels)
    grid4.transfer_momentum(parcels)
    grid4.calculate_velocity()
    parcels.update_velocity(grid4)

    np.testing.assert_allclose(parcels.velocity.numpy()[0], [0.0, 1.0], atol=1e-6)


def transfer_and_sample(grid, parcels):
    grid.transfer_mass(parcels)
    grid.transfer_momentum(parcels)
    grid.calculate_velocity()
    grid.calculate_divergence()
    PressureSolver(0).solve(grid, 0.1)
    grid.correct_velocity(0.1)
    parcels.update_velocity(grid)


@pytest.mark.parametrize("position", [[3.0, 3.0], [4.0, 4.0]])
def test_single_parcel_round_trip_on_rectangular_grid(position):
    grid = Grid((4, 3), 2.0, device=DEVICE)
    parcels = make_parcels([position], velocities=[[0.0, 1.0]], masses=[1.0])

    transfer_and_sample(grid, parcels)

    np.testing.assert_allclose(parcels.velocity.numpy()[0], [0.0, 1.0], atol=1e-6)


def test_uniform_velocity_survives_round_trip():
    grid = Grid((4, 3), 2.0, device=DEVICE)
    rng = np.random.default_rng(17)
    positions = rng.uniform([0.02, 0.02], [7.98, 5.98], size=(300, 2))
    masses = rng.uniform(0.1, 5.0, size=300)
    velocities = np.tile([0.7, -0.3], (300, 1))
    parcels = make_parcels(positions, velocities=velocities, masses=masses)

    transfer_and_sample(grid, parcels)

    np.testing.assert_allclose(parcels.velocity.numpy(), velocities, atol=1e-5)


def test_affine_state_adds_linear_momentum(grid8):
    # A parcel carrying du/dy = 1 deposits larger x momentum on the edges above it
    parcels = make_parcels([[4.0, 4.0]], masses=[1.0], affine=[[[0.0, 1.0], [0.0, 0.0]]])
    grid8.transfer_mass(parcels)
    grid8.transfer_momentum(parcels)
    grid8.calculate_velocity()

    velocity_x = grid8.velocity_x.numpy()
    # x edges around (4, 4) sit at y = 3.5 and 4.5
    assert velocity_x[5, 5] == pytest.approx(0.5)
    assert velocity_x[5, 4] == pytest.approx(-0.5)


def test_edges_without_mass_have_zero_velocity(grid8):
    parcels = make_parcels([[1.5, 1.5]], velocities=[[3.0, 3.0]])
    grid8.transfer_mass(parcels)
    grid8.transfer_momentum(parcels)
    grid8.calculate_velocity()

    velocity_x = grid8.velocity_x.numpy()
    mass_x = grid8.mass_x.numpy()
    assert np.all(velocity_x[mass_x == 0.0] == 0.0)
    assert np.all(np.isfinite(velocity_x))


def test_zero_mass_parcels_transfer_and_step(grid8):
    positions = [[1.5, 1.5], [4.2, 6.3], [3.5, 3.5], [3.9, 3.1], [6.0, 2.0]]
    masses = [0.0, 0.0, 1000.0, 1000.0, 0.0]
    parcels = make_parcels(positions, velocities=np.full((5, 2), 0.5), masses=masses)

    grid8.transfer_mass(parcels)
    grid8.transfer_momentum(parcels)
    grid8.calculate_velocity()

    assert grid8.mass.numpy().sum() == pytest.approx(2000.0, rel=1e-6)
    assert np.all(np.isfinite(grid8.velocity_x.numpy()))
    assert np.all(np.isfinite(grid8.velocity_y.numpy()))

    sim = APICSimulator(grid8, parcels, PressureSolver(10))
    for _ in range(5):
        sim.step(0.02)

    assert sim.total_grid_mass() == pytest.approx(2000.0, rel=1e-5)
    assert np.all(np.isfinite(parcels.position.numpy()))
    assert np.all(np.isfinite(parcels.velocity.numpy()))
    assert np.all(np.isfinite(parcels.affine_state.numpy()))
    assert np.all(np.isfinite(grid8.pressure.numpy()))


def test_external_forces_accelerate_every_edge(grid8):
    grid8.apply_external_forces((1.0, -9.81), 0.1)
    np.testing.assert_allclose(grid8.velocity_x.numpy(), 0.1, rtol=1e-6)
    np.testing.assert_allclose(grid8.velocity_y.numpy(), -0.981, rtol=1e-6)


def test_enforce_boundaries_zeroes_wall_normal_velocity(grid8):
    grid8.velocity_x.fill_(1.0)
    grid8.velocity_y.fill_(1.0)
    grid8.enforce_boundaries()

    velocity_x = grid8.velocity_x.numpy()
    velocity_y = grid8.velocity_y.numpy()
    for i in (0, 1, 9, 10):
        assert np.all(velocity_x[i, :] == 0.0)
        assert np.all(velocity_y[:, i] == 0.0)
    assert np.all(velocity_x[2:9, 1:9] == 1.0)
    assert np.all(velocity_y[1:9, 2:9] == 1.0)


def test_solid_box_persists_across_reset(grid8):
    grid8.add_solid_box([4.0, 4.0], [2.0, 2.0])
    grid8.reset()

    cell_type = grid8.cell_type.numpy()
    # Cells centered at 3.5 and 4.5 lie inside [3, 5]
    assert np.all(cell_type[4:6, 4:6] == CellType.SOLID)
    assert cell_type[3, 4] == CellType.AIR
    assert len(grid8.solid_boxes) == 1


def test_mass_transfer_keeps_solid_cells_solid(grid8):
    grid8.add_solid_box([4.0, 4.0], [2.0, 2.0])
    parcels = make_parcels([[4.0, 4.0]])
    grid8.transfer_mass(parcels)

    assert grid8.cell_type.numpy()[5, 5] == CellType.SOLID


def test_enforce_boundaries_zeroes_obstacle_faces(grid8):
    grid8.add_solid_box([4.5, 4.5], [1.0, 1.0])
    grid8.velocity_x.fill_(1.0)
    grid8.velocity_y.fill_(1.0)
    grid8.enforce_boundaries()

    velocity_x = grid8.velocity_x.numpy()
    velocity_y = grid8.velocity_y.numpy()
    # Solid cell is padded (5, 5)
    assert velocity_x[5, 5] == 0.0
    assert velocity_x[6, 5] == 0.0
    assert velocity_y[5, 5] == 0.0
    assert velocity_y[5, 6] == 0.0
    assert velocity_x[4, 5] == 1.0


def test_divergence_of_single_outflow(grid8):
    velocity_x = np.zeros(grid8.x_edge_shape, dtype=np.float32)
    velocity_x[5, 4] = 2.0
    grid8.velocity_x.assign(velocity_x)
    grid8.calculate_divergence()

    divergence = grid8.divergence.numpy()
    # Edge (5, 4) is the right face of padded cell (4, 4) and the left face of (5, 4)
    assert divergence[3, 3] == pytest.approx(2.0)
    assert divergence[4, 3] == pytest.approx(-2.0)
    assert np.count_nonzero(divergence) == 2


def test_correct_velocity_leaves_non_fluid_edges_alone(grid8):
    pressure = np.random.default_rng(0).uniform(-5.0, 5.0, size=grid8.padded_size).astype(np.float32)
    grid8.pressure.assign(pressure)
    grid8.velocity_x.fill_(1.0)
    grid8.velocity_y.fill_(1.0)

    grid8.correct_velocity(0.1)

    assert np.all(grid8.velocity_x.numpy() == 1.0)
    assert np.all(grid8.velocity_y.numpy() == 1.0)


def test_correct_velocity_subtracts_pressure_gradient(grid8):
    parcels = fluid_block(grid8, 4, 5)
    grid8.transfer_mass(parcels)

    pressure = np.zeros(grid8.padded_size, dtype=np.float32)
    pressure[5, 4] = 100.0
    grid8.pressure.assign(pressure)
    grid8.correct_velocity(0.5)

    velocity_x = grid8.velocity_x.numpy()
    # dt / rho * dp / h = 0.5 / 1000 * 100
    assert velocity_x[5, 4] == pytest.approx(-0.05)
    assert velocity_x[6, 4] == pytest.approx(0.05)


def test_variable_density_uses_adjacent_cell_density():
    grid = Grid((8, 8), 1.0, variable_density=True, device=DEVICE)
    parcels = fluid_block(grid, 4, 5, density=500.0)
    grid.transfer_mass(parcels)

    pressure = np.zeros(grid.padded_size, dtype=np.float32)
    pressure[5, 4] = 100.0
    grid.pressure.assign(pressure)
    grid.correct_velocity(0.5)

    # Both cells hold 500 kg per unit area
    assert grid.velocity_x.numpy()[5, 4] == pytest.approx(-0.1)


def test_cell_centers_of_fluid_cells(grid4):
    parcels = make_parcels([[3.0, 3.0]])
    grid4.transfer_mass(parcels)

    centers = grid4.cell_centers(CellType.FLUID)
    np.testing.assert_allclose(centers, [[3.0, 3.0]])

import numpy as np

from apic2d.grid import Grid
from apic2d.parcels import ParcelSet
from apic2d.pressure_solver import PressureSolver, JacobiPressureSolver
from apic2d.simulator import APICSimulator
from apic2d.utils import *


SAMPLERS = {
    "grid": sample_grid,
    "jittered_grid": sample_jittered_grid,
    "blue_noise": sample_blue_noise,
    "random": sample_random,
}


def sample_box(box):
    """
    Sample one parcel box of a scene.

    Returns:
        (positions, masses, velocities) numpy arrays
    """
    if box.sampling_type not in SAMPLERS:
        raise ValueError(f"Unknown sampling_type: {box.sampling_type}. Must be one of: {', '.join(SAMPLERS)}")
    positions = SAMPLERS[box.sampling_type](box.n_particles, box.center, box.size, box.k)
    n = positions.shape[0]
    velocities = np.tile(np.asarray(box.velocity, dtype=np.float32), (n, 1))
    return positions, np.ones(n), velocities


class Sim_Wrapper:
    def __init__(self, scene=None, scene_file=None, device="cpu"):
        """
        Initialize simulation wrapper.

        Args:
            scene: Scene object to use (if provided)
            scene_file: Path to JSON scene file (if provided, scene is ignored)
            device: Device to use for simulation (default: "cpu")
        """
        self.device = device
        if scene_file:
            self.scene = Scene.from_json(scene_file)
            print(f"Scene loaded from: {scene_file}")
        elif scene:
            self.scene = scene
        else:
            # Default scene: a block of water falling in a box
            self.scene = Scene(dt=0.02, size=[32, 32], cell_size=1.0,
                               gravity=[0.0, -9.81], fluid_density=1000.0)
            self.scene.add_parcel_box(n_particles=4096, center=[8.0, 16.0], size=[12.0, 24.0],
                                      sampling_type="jittered_grid")

        grid = Grid(
            self.scene.size,
            self.scene.cell_size,
            self.scene.fluid_density,
            self.scene.air_density,
            variable_density=self.scene.variable_density,
            device=device,
        )
        for center, size in self.scene.solid_boxes:
            grid.add_solid_box(center, size)

        if self.scene.use_gauss_seidel:
            pressure_solver = PressureSolver(self.scene.num_iterations, self.scene.omega)
        else:
            pressure_solver = JacobiPressureSolver(self.scene.num_iterations, self.scene.jacobi_alpha)

        positions, masses, velocities = self._seed_parcels(grid)
        parcels = ParcelSet(positions.shape[0], self.scene.friction, device=device)
        parcels.load_from_array(positions, velocities, masses)

        self.solver = APICSimulator(grid, parcels, pressure_solver, self.scene.gravity)

        # Track current frame
        self.current_frame = 0

    def _seed_parcels(self, grid):
        all_positions = [np.zeros((0, 2))]
        all_masses = [np.zeros(0)]
        all_velocities = [np.zeros((0, 2))]
        for box in self.scene.parcel_boxes:
            positions, masses, velocities = sample_box(box)
            if positions.shape[0] > 0:
                box_area = box.size[0] * box.size[1]
                masses = masses * self.scene.fluid_density * box_area / positions.shape[0]
            all_positions.append(positions)
            all_masses.append(masses)
            all_velocities.append(velocities)

        # Keep seeded parcels strictly inside the domain
        eps = grid.cell_size * 0.01
        extent = np.asarray(grid.extent)
        positions = np.clip(np.concatenate(all_positions, axis=0), eps, extent - eps)
        return positions, np.concatenate(all_masses), np.concatenate(all_velocities, axis=0)

    def step(self):
        for i in range(self.scene.frames_per_output):
            self.solver.step(self.scene.dt)
            self.current_frame += 1

    def get_positions(self):
        return self.solver.export_particle_x_to_torch().cpu().numpy()

    def get_velocities(self):
        return self.solver.export_particle_v_to_torch().cpu().numpy()

    def get_fluid_occupancy(self):
        return self.solver.export_fluid_occupancy_to_torch().cpu().numpy()

    def get_solid_occupancy(self):
        return self.solver.export_solid_occupancy_to_torch().cpu().numpy()

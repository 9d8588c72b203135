import numpy as np
import torch
import warp as wp

from apic2d.grid import Grid
from apic2d.parcels import ParcelSet
from apic2d.pressure_solver import PressureSolver
from apic2d.utils.structs import CellType


class APICSimulator:
    """
    Affine Particle-In-Cell (APIC) 2D fluid simulation.

    One call to step() runs the whole pipeline for a time step:
    1. Advect parcels with their midpoint velocity
    2. Parcels to grid: reset, mass transfer, APIC momentum transfer, velocity
    3. Grid update: external forces, wall boundary conditions
    4. Pressure projection: divergence, Poisson solve, velocity correction
    5. Grid to parcels: velocity and affine matrix
    The order matters, every stage reads the output of the previous one.
    """

    def __init__(self, grid, parcels, pressure_solver=None, gravity=(0.0, -9.81)):
        self.grid = grid
        self.parcels = parcels
        self.pressure_solver = pressure_solver if pressure_solver is not None else PressureSolver(20)
        self.gravity = wp.vec2(float(gravity[0]), float(gravity[1]))
        self.time = 0.0

    @classmethod
    def create(cls, size, cell_size, n_parcels, fluid_density=1000.0, air_density=1.225,
               friction=0.0, max_iterations=20, gravity=(0.0, -9.81), device="cpu"):
        grid = Grid(size, cell_size, fluid_density, air_density, device=device)
        parcels = ParcelSet(n_parcels, friction, device=device)
        return cls(grid, parcels, PressureSolver(max_iterations), gravity)

    def advect_parcels(self, dt):
        self.parcels.move(self.grid, dt)

    def parcels_to_grid(self):
        self.grid.reset()
        self.grid.transfer_mass(self.parcels)
        self.grid.transfer_momentum(self.parcels)
        self.grid.calculate_velocity()

    def update_grid(self, dt):
        self.grid.apply_external_forces(self.gravity, dt)
        self.grid.enforce_boundaries()

    def project_pressure(self, dt):
        self.grid.calculate_divergence()
        self.pressure_solver.solve(self.grid, dt)
        self.grid.correct_velocity(dt)

    def grid_to_parcels(self):
        self.parcels.update_velocity(self.grid)
        self.parcels.update_affine_state(self.grid)

    def step(self, dt):
        self.advect_parcels(dt)
        self.parcels_to_grid()
        self.update_grid(dt)
        self.project_pressure(dt)
        self.grid_to_parcels()

        self.time = self.time + dt

    def export_particle_x_to_torch(self):
        return wp.to_torch(self.parcels.position)

    def export_particle_v_to_torch(self):
        return wp.to_torch(self.parcels.velocity)

    def export_fluid_occupancy_to_torch(self):
        """
        Export positions of all fluid cells as a torch tensor.
        Returns a (N, 2) torch tensor where each row is the world position of a fluid cell center.
        """
        return torch.from_numpy(self.grid.cell_centers(CellType.FLUID))

    def export_solid_occupancy_to_torch(self):
        """
        Export positions of all solid cells, ghost border included, as a torch tensor.
        Returns a (N, 2) torch tensor where each row is the world position of a solid cell center.
        """
        return torch.from_numpy(self.grid.cell_centers(CellType.SOLID))

    def total_parcel_mass(self):
        return float(np.sum(self.parcels.mass.numpy(), dtype=np.float64))

    def total_grid_mass(self):
        return float(np.sum(self.grid.mass.numpy(), dtype=np.float64))

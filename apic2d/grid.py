import numpy as np
import warp as wp

from apic2d.utils.structs import *
from apic2d.utils.given_kernels import zero_grid, set_solid_boxes
from apic2d.kernels import *


class Grid:
    """
    Staggered (MAC) grid of square cells with a one cell ghost border.

    Mass, pressure and cell type live at cell centers, X velocity on the left
    and right edges of a cell and Y velocity on its bottom and top edges. All
    arrays are padded so that 2x2 interpolation stencils never need bounds
    checks, see apic2d.utils.structs for the exact shapes.
    """

    def __init__(self, size, cell_size, fluid_density=1000.0, air_density=1.225,
                 variable_density=False, device="cpu"):
        if np.ndim(size) != 1 or len(size) != 2 or any(int(s) != s for s in size):
            raise ValueError(f"grid size must be two integers, got {size}")
        size = tuple(int(s) for s in size)
        if size[0] <= 0 or size[1] <= 0:
            raise ValueError(f"grid size must be two positive integers, got {size}")
        if cell_size <= 0.0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        if fluid_density <= 0.0:
            raise ValueError(f"fluid_density must be positive, got {fluid_density}")
        if air_density < 0.0:
            raise ValueError(f"air_density must be non-negative, got {air_density}")

        self.device = device
        self.size = size
        self.variable_density = variable_density
        self.solid_boxes = []  # List of (center, size) tuples re-applied on every reset

        self.model = GridModelStruct()
        self.model.size_x = size[0]
        self.model.size_y = size[1]
        self.model.cell_size = float(cell_size)
        self.model.inv_cell_size = float(1.0 / cell_size)
        self.model.cell_area = float(cell_size * cell_size)
        self.model.fluid_density = float(fluid_density)
        self.model.air_density = float(air_density)

        nx, ny = size
        self.state = GridStateStruct()
        self.state.cell_type = wp.zeros(shape=(nx + 2, ny + 2), dtype=int, device=device)
        self.state.mass = wp.zeros(shape=(nx + 2, ny + 2), dtype=float, device=device)
        self.state.pressure = wp.zeros(shape=(nx + 2, ny + 2), dtype=float, device=device)
        self.state.pressure_old = wp.zeros(shape=(nx + 2, ny + 2), dtype=float, device=device)

        self.state.mass_x = wp.zeros(shape=(nx + 3, ny + 2), dtype=float, device=device)
        self.state.momentum_x = wp.zeros(shape=(nx + 3, ny + 2), dtype=float, device=device)
        self.state.velocity_x = wp.zeros(shape=(nx + 3, ny + 2), dtype=float, device=device)

        self.state.mass_y = wp.zeros(shape=(nx + 2, ny + 3), dtype=float, device=device)
        self.state.momentum_y = wp.zeros(shape=(nx + 2, ny + 3), dtype=float, device=device)
        self.state.velocity_y = wp.zeros(shape=(nx + 2, ny + 3), dtype=float, device=device)

        self.state.divergence = wp.zeros(shape=(nx, ny), dtype=float, device=device)

        self.reset()

    @property
    def cell_size(self):
        return self.model.cell_size

    @property
    def cell_area(self):
        return self.model.cell_area

    @property
    def fluid_density(self):
        return self.model.fluid_density

    @property
    def air_density(self):
        return self.model.air_density

    @property
    def padded_size(self):
        return (self.size[0] + 2, self.size[1] + 2)

    @property
    def x_edge_shape(self):
        return (self.size[0] + 3, self.size[1] + 2)

    @property
    def y_edge_shape(self):
        return (self.size[0] + 2, self.size[1] + 3)

    @property
    def extent(self):
        """World space size of the simulated (non-ghost) area."""
        return (self.size[0] * self.cell_size, self.size[1] * self.cell_size)

    # Readable outputs
    @property
    def cell_type(self):
        return self.state.cell_type

    @property
    def mass(self):
        return self.state.mass

    @property
    def mass_x(self):
        return self.state.mass_x

    @property
    def mass_y(self):
        return self.state.mass_y

    @property
    def momentum_x(self):
        return self.state.momentum_x

    @property
    def momentum_y(self):
        return self.state.momentum_y

    @property
    def velocity_x(self):
        return self.state.velocity_x

    @property
    def velocity_y(self):
        return self.state.velocity_y

    @property
    def pressure(self):
        return self.state.pressure

    @property
    def divergence(self):
        return self.state.divergence

    def reset(self):
        """Zero the per-step accumulators and reclassify interior cells as air."""
        wp.launch(
            kernel=zero_grid,
            dim=self.padded_size,
            inputs=[self.state, self.model],
            device=self.device,
        )
        self.state.mass_x.zero_()
        self.state.mass_y.zero_()
        self.state.momentum_x.zero_()
        self.state.momentum_y.zero_()

        self._apply_solid_boxes()

    def transfer_mass(self, parcels):
        wp.launch(
            kernel=transfer_mass,
            dim=parcels.count,
            inputs=[parcels.state, self.state, self.model],
            device=self.device,
        )

    def transfer_momentum(self, parcels):
        wp.launch(
            kernel=transfer_momentum,
            dim=parcels.count,
            inputs=[parcels.state, self.state, self.model],
            device=self.device,
        )

    def calculate_velocity(self):
        wp.launch(
            kernel=calculate_velocity_x,
            dim=self.x_edge_shape,
            inputs=[self.state],
            device=self.device,
        )
        wp.launch(
            kernel=calculate_velocity_y,
            dim=self.y_edge_shape,
            inputs=[self.state],
            device=self.device,
        )

    def apply_external_forces(self, acceleration, dt):
        acceleration = wp.vec2(float(acceleration[0]), float(acceleration[1]))
        wp.launch(
            kernel=apply_external_forces_x,
            dim=self.x_edge_shape,
            inputs=[self.state, acceleration, dt],
            device=self.device,
        )
        wp.launch(
            kernel=apply_external_forces_y,
            dim=self.y_edge_shape,
            inputs=[self.state, acceleration, dt],
            device=self.device,
        )

    def enforce_boundaries(self):
        wp.launch(
            kernel=enforce_boundaries_x,
            dim=self.x_edge_shape,
            inputs=[self.state, self.model],
            device=self.device,
        )
        wp.launch(
            kernel=enforce_boundaries_y,
            dim=self.y_edge_shape,
            inputs=[self.state, self.model],
            device=self.device,
        )

    def calculate_divergence(self):
        wp.launch(
            kernel=calculate_divergence,
            dim=self.size,
            inputs=[self.state, self.model],
            device=self.device,
        )

    def correct_velocity(self, dt):
        variable_density = 1 if self.variable_density else 0
        wp.launch(
            kernel=correct_velocity_x,
            dim=self.x_edge_shape,
            inputs=[self.state, self.model, dt, variable_density],
            device=self.device,
        )
        wp.launch(
            kernel=correct_velocity_y,
            dim=self.y_edge_shape,
            inputs=[self.state, self.model, dt, variable_density],
            device=self.device,
        )

    def add_solid_box(self, center, size):
        """
        Add a solid axis-aligned box to the grid.
        The box is re-applied every time the grid is reset.

        Args:
            center: 2-vector (list, tuple, or numpy array) representing world space center
            size: 2-vector (list, tuple, or numpy array) representing size along each axis
        """
        center = np.asarray(center, dtype=np.float32)
        size = np.asarray(size, dtype=np.float32)

        if center.shape != (2,) or size.shape != (2,):
            raise ValueError("center and size must be 2-element arrays")

        self.solid_boxes.append((center.copy(), size.copy()))
        self._apply_solid_boxes()

    def _apply_solid_boxes(self):
        for center, size in self.solid_boxes:
            wp.launch(
                kernel=set_solid_boxes,
                dim=self.size,
                inputs=[
                    self.state,
                    self.model,
                    wp.vec2(float(center[0]), float(center[1])),
                    wp.vec2(float(size[0]), float(size[1])),
                ],
                device=self.device,
            )

    def cell_centers(self, cell_type):
        """
        World positions of the centers of all cells with the given type,
        ghost border included. Returns a (N, 2) numpy array.
        """
        indices = np.where(self.state.cell_type.numpy() == int(cell_type))
        positions = np.zeros((len(indices[0]), 2), dtype=np.float32)
        positions[:, 0] = (indices[0] - 0.5) * self.cell_size
        positions[:, 1] = (indices[1] - 0.5) * self.cell_size
        return positions

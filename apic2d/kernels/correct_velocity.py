import warp as wp
from apic2d.utils.structs import *
from apic2d.utils.given_kernels import cell_density


@wp.kernel
def correct_velocity_x(
    state: GridStateStruct,
    model: GridModelStruct,
    dt: float,
    variable_density: int,
):
    """
    Project velocity using pressure gradient to enforce incompressibility.

    PURPOSE:
    Subtract the pressure gradient from every X edge shared by two cells where at
    least one of them is fluid: u_new = u_old - dt / rho * (p_right - p_left) / h.
    Edges between two non-fluid cells have nothing to correct and are left as is.

    INPUT VARIABLES (from state):
    - pressure[x, y]: float - Pressure after the Poisson solve
    - cell_type[x, y]: int - 1 = fluid, 0 = air, -1 = solid
    - mass[x, y]: float - Only read when variable_density is set

    INPUT VARIABLES (function parameters):
    - dt: float - Time step size
    - variable_density: int - 0 uses the constant fluid density, otherwise the
        mean of the two adjacent cell densities (floored at the air density)

    OUTPUT VARIABLES (modified in state):
    - velocity_x[i, j]: float - Corrected velocity on edge (i, j)
    """
    i, j = wp.tid()

    # Outermost ghost edges have a cell on one side only
    if i == 0 or i == model.size_x + 2:
        return

    if state.cell_type[i - 1, j] != CELL_FLUID and state.cell_type[i, j] != CELL_FLUID:
        return

    density = model.fluid_density
    if variable_density != 0:
        density = 0.5 * (cell_density(state, model, i - 1, j) + cell_density(state, model, i, j))
    if density <= 0.0:
        return

    gradient = (state.pressure[i, j] - state.pressure[i - 1, j]) * model.inv_cell_size
    state.velocity_x[i, j] = state.velocity_x[i, j] - dt / density * gradient


@wp.kernel
def correct_velocity_y(
    state: GridStateStruct,
    model: GridModelStruct,
    dt: float,
    variable_density: int,
):
    i, j = wp.tid()

    if j == 0 or j == model.size_y + 2:
        return

    if state.cell_type[i, j - 1] != CELL_FLUID and state.cell_type[i, j] != CELL_FLUID:
        return

    density = model.fluid_density
    if variable_density != 0:
        density = 0.5 * (cell_density(state, model, i, j - 1) + cell_density(state, model, i, j))
    if density <= 0.0:
        return

    gradient = (state.pressure[i, j] - state.pressure[i, j - 1]) * model.inv_cell_size
    state.velocity_y[i, j] = state.velocity_y[i, j] - dt / density * gradient

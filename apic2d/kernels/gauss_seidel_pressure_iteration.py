import warp as wp
from apic2d.utils.structs import *


@wp.func
def neighbor_pressure(
    state: GridStateStruct,
    pressure: wp.array(dtype=float, ndim=2),
    i: int,
    j: int,
):
    # Air (free surface): Dirichlet, p = 0
    if state.cell_type[i, j] == CELL_AIR:
        return float(0.0)
    return pressure[i, j]


@wp.func
def fluid_pressure(
    state: GridStateStruct,
    model: GridModelStruct,
    pressure: wp.array(dtype=float, ndim=2),
    x: int,
    y: int,
    dt: float,
):
    p_neighbors = (
        neighbor_pressure(state, pressure, x - 1, y)
        + neighbor_pressure(state, pressure, x + 1, y)
        + neighbor_pressure(state, pressure, x, y - 1)
        + neighbor_pressure(state, pressure, x, y + 1)
    )

    # mass / (area * dt) is the density term of the variable density RHS
    rhs = state.mass[x, y] / (model.cell_area * dt) * state.divergence[x - 1, y - 1]

    # h^2 term from the Laplacian
    return (p_neighbors - model.cell_area * rhs) * 0.25


@wp.func
def solid_pressure(
    state: GridStateStruct,
    model: GridModelStruct,
    pressure: wp.array(dtype=float, ndim=2),
    x: int,
    y: int,
    dt: float,
):
    """
    Extrapolate pressure into a solid cell from its fluid neighbors so that the
    pressure gradient across the shared face reproduces the face velocity:
    u_face - dt / rho * (p_right - p_left) / h = 0.
    """
    scale = model.fluid_density * model.cell_size / dt
    total = float(0.0)
    count = int(0)

    if x > 0:
        if state.cell_type[x - 1, y] == CELL_FLUID:
            total = total + pressure[x - 1, y] + scale * state.velocity_x[x, y]
            count = count + 1
    if x < model.size_x + 1:
        if state.cell_type[x + 1, y] == CELL_FLUID:
            total = total + pressure[x + 1, y] - scale * state.velocity_x[x + 1, y]
            count = count + 1
    if y > 0:
        if state.cell_type[x, y - 1] == CELL_FLUID:
            total = total + pressure[x, y - 1] + scale * state.velocity_y[x, y]
            count = count + 1
    if y < model.size_y + 1:
        if state.cell_type[x, y + 1] == CELL_FLUID:
            total = total + pressure[x, y + 1] - scale * state.velocity_y[x, y + 1]
            count = count + 1

    if count == 0:
        return pressure[x, y]
    return total / float(count)


@wp.kernel
def gauss_seidel_pressure_iteration(
    state: GridStateStruct,
    model: GridModelStruct,
    dt: float,
    omega: float,
    color: int,
):
    """
    One relaxed Gauss-Seidel half sweep for the pressure Poisson equation
    div(dt / rho grad p) = divergence.

    PURPOSE:
    Red-black ordering is used to enable parallel execution: cells are divided
    into two colors based on (x + y) % 2 and only cells of the given color are
    processed. With a 5-point stencil a cell only reads neighbors of the other
    color, so pressure is updated in place and later cells see the values
    written by the previous color, which is what makes this Gauss-Seidel rather
    than Jacobi.

    INPUT VARIABLES (from state):
    - pressure[x, y]: float - Pressure at cell center, updated in place
    - divergence[i, j]: float - Velocity divergence of interior cell (i, j)
    - mass[x, y]: float - Cell mass, mass / area is the cell density
    - cell_type[x, y]: int - 1 = fluid, 0 = air (free surface), -1 = solid
        - Air cells: pressure = 0 (Dirichlet boundary condition)
        - Solid cells: pressure extrapolated from the fluid neighbors
        - Fluid cells: 5-point Laplacian solve

    INPUT VARIABLES (function parameters):
    - dt: float - Time step size
    - omega: float - Relaxation parameter, 1.0 is plain Gauss-Seidel, (1, 2) is SOR
    - color: int - 0 for red cells, 1 for black cells

    OUTPUT VARIABLES (modified in state):
    - pressure[x, y]: float - Updated pressure for interior cells of this color
    """
    i, j = wp.tid()

    # Launched over interior cells, shift by one due to the ghost layer
    x = i + 1
    y = j + 1
    if (x + y) % 2 != color:
        return

    cell = state.cell_type[x, y]
    if cell == CELL_AIR:
        state.pressure[x, y] = 0.0
        return

    if cell == CELL_SOLID:
        state.pressure[x, y] = solid_pressure(state, model, state.pressure, x, y, dt)
        return

    p_old = state.pressure[x, y]
    p_gs = fluid_pressure(state, model, state.pressure, x, y, dt)
    state.pressure[x, y] = omega * p_gs + (1.0 - omega) * p_old


@wp.kernel
def jacobi_pressure_iteration(
    state: GridStateStruct,
    model: GridModelStruct,
    dt: float,
    alpha: float,
):
    """
    One damped Jacobi iteration: same per-cell update as Gauss-Seidel, but every
    neighbor is read from pressure_old so cells can be updated in any order.
    p_new = alpha * p_jacobi + (1 - alpha) * p_old
    """
    i, j = wp.tid()
    x = i + 1
    y = j + 1

    cell = state.cell_type[x, y]
    if cell == CELL_AIR:
        state.pressure[x, y] = 0.0
        return

    if cell == CELL_SOLID:
        state.pressure[x, y] = solid_pressure(state, model, state.pressure_old, x, y, dt)
        return

    p_old = state.pressure_old[x, y]
    p_jacobi = fluid_pressure(state, model, state.pressure_old, x, y, dt)
    state.pressure[x, y] = alpha * p_jacobi + (1.0 - alpha) * p_old


@wp.kernel
def extrapolate_border_pressure(
    state: GridStateStruct,
    model: GridModelStruct,
    dt: float,
):
    """Refresh the solid ghost border from the adjacent interior cells (Neumann walls)."""
    x, y = wp.tid()
    if x > 0 and x < model.size_x + 1 and y > 0 and y < model.size_y + 1:
        return
    state.pressure[x, y] = solid_pressure(state, model, state.pressure, x, y, dt)

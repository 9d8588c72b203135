import warp as wp
from apic2d.utils.structs import *
from apic2d.utils.given_kernels import bilinear_weights


@wp.func
def deposit_x(
    state: GridStateStruct,
    model: GridModelStruct,
    i: int,
    j: int,
    weight: float,
    mass: float,
    velocity: float,
    affine_row: wp.vec2,
    position: wp.vec2,
):
    node = wp.vec2((float(i) - 1.0) * model.cell_size, (float(j) - 0.5) * model.cell_size)
    node_mass = weight * mass
    node_velocity = velocity + wp.dot(affine_row, node - position)
    wp.atomic_add(state.mass_x, i, j, node_mass)
    wp.atomic_add(state.momentum_x, i, j, node_mass * node_velocity)


@wp.func
def deposit_y(
    state: GridStateStruct,
    model: GridModelStruct,
    i: int,
    j: int,
    weight: float,
    mass: float,
    velocity: float,
    affine_row: wp.vec2,
    position: wp.vec2,
):
    node = wp.vec2((float(i) - 0.5) * model.cell_size, (float(j) - 1.0) * model.cell_size)
    node_mass = weight * mass
    node_velocity = velocity + wp.dot(affine_row, node - position)
    wp.atomic_add(state.mass_y, i, j, node_mass)
    wp.atomic_add(state.momentum_y, i, j, node_mass * node_velocity)


@wp.kernel
def transfer_momentum(
    parcels: ParcelStateStruct,
    state: GridStateStruct,
    model: GridModelStruct,
):
    """
    Parcel-to-Grid (P2G) APIC momentum transfer onto the staggered edges.

    PURPOSE:
    The X and Y staggered sub-grids are handled independently. For each one the
    parcel finds the enclosing 2x2 block of edges, and every edge receives
    weight * mass and weight * mass * (velocity + C_row . (node - position)).
    The affine term lets a single parcel carry a locally linear velocity field.

    INPUT VARIABLES (from parcels):
    - position[p]: vec2 - World-space position of parcel p
    - velocity[p]: vec2 - Velocity of parcel p
    - mass[p]: float - Mass of parcel p
    - affine_state[p]: mat22 - Velocity gradient C, C[r, c] = dv_r / dx_c

    OUTPUT VARIABLES (modified in state):
    - mass_x, momentum_x[i, j]: float - X edge accumulators (atomic_add)
    - mass_y, momentum_y[i, j]: float - Y edge accumulators (atomic_add)
    """
    p = wp.tid()

    position = parcels.position[p]
    velocity = parcels.velocity[p]
    affine = parcels.affine_state[p]
    m = parcels.mass[p]
    g = position * model.inv_cell_size

    # X edges sit at ((i - 1) h, (j - 0.5) h)
    gx = g[0] + 1.0
    gy = g[1] + 0.5
    ix = int(wp.floor(gx))
    iy = int(wp.floor(gy))
    w = bilinear_weights(gx - float(ix), gy - float(iy))
    row_x = wp.vec2(affine[0, 0], affine[0, 1])
    deposit_x(state, model, ix, iy, w[0], m, velocity[0], row_x, position)
    deposit_x(state, model, ix + 1, iy, w[1], m, velocity[0], row_x, position)
    deposit_x(state, model, ix, iy + 1, w[2], m, velocity[0], row_x, position)
    deposit_x(state, model, ix + 1, iy + 1, w[3], m, velocity[0], row_x, position)

    # Y edges sit at ((i - 0.5) h, (j - 1) h)
    gx = g[0] + 0.5
    gy = g[1] + 1.0
    ix = int(wp.floor(gx))
    iy = int(wp.floor(gy))
    w = bilinear_weights(gx - float(ix), gy - float(iy))
    row_y = wp.vec2(affine[1, 0], affine[1, 1])
    deposit_y(state, model, ix, iy, w[0], m, velocity[1], row_y, position)
    deposit_y(state, model, ix + 1, iy, w[1], m, velocity[1], row_y, position)
    deposit_y(state, model, ix, iy + 1, w[2], m, velocity[1], row_y, position)
    deposit_y(state, model, ix + 1, iy + 1, w[3], m, velocity[1], row_y, position)

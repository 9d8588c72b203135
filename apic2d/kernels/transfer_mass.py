import warp as wp
from apic2d.utils.structs import *
from apic2d.utils.given_kernels import bilinear_weights


@wp.kernel
def transfer_mass(
    parcels: ParcelStateStruct,
    state: GridStateStruct,
    model: GridModelStruct,
):
    """
    Parcel-to-Grid (P2G) mass transfer onto cell centers.

    PURPOSE:
    Each parcel marks the cell it sits in as fluid and spreads its mass over the
    2x2 block of cell centers that surrounds it using bilinear weights.

    INPUT VARIABLES (from parcels):
    - position[p]: vec2 - World-space position of parcel p
    - mass[p]: float - Mass of parcel p

    INPUT VARIABLES (from model):
    - inv_cell_size: float - Converts world coordinates to cell coordinates

    OUTPUT VARIABLES (modified in state):
    - cell_type[x, y]: int - Enclosing cell set to fluid unless it is solid
    - mass[x, y]: float - Cell mass (accumulated via atomic_add)

    PARALLELIZATION:
    - One thread per parcel, several parcels can hit the same cell so the mass is
      accumulated with atomic_add
    """
    p = wp.tid()

    position = parcels.position[p] * model.inv_cell_size

    # Enclosing cell, shifted by one due to the ghost layer
    cell_x = int(wp.floor(position[0])) + 1
    cell_y = int(wp.floor(position[1])) + 1
    if state.cell_type[cell_x, cell_y] != CELL_SOLID:
        state.cell_type[cell_x, cell_y] = CELL_FLUID

    # Cell centers sit at (index - 0.5) * cell_size in the padded layout
    gx = position[0] + 0.5
    gy = position[1] + 0.5
    ix = int(wp.floor(gx))
    iy = int(wp.floor(gy))
    w = bilinear_weights(gx - float(ix), gy - float(iy))

    m = parcels.mass[p]
    wp.atomic_add(state.mass, ix, iy, w[0] * m)
    wp.atomic_add(state.mass, ix + 1, iy, w[1] * m)
    wp.atomic_add(state.mass, ix, iy + 1, w[2] * m)
    wp.atomic_add(state.mass, ix + 1, iy + 1, w[3] * m)

import warp as wp
from apic2d.utils.structs import *
from apic2d.utils.given_kernels import sample_staggered


@wp.kernel
def update_parcel_velocity(
    parcels: ParcelStateStruct,
    state: GridStateStruct,
    model: GridModelStruct,
):
    """
    Grid-to-parcel (G2P) velocity transfer.

    PURPOSE:
    Each velocity component is interpolated bilinearly from its own staggered
    sub-grid, using the same 2x2 stencil the parcel deposited into during P2G.

    INPUT VARIABLES (from state):
    - velocity_x[i, j]: float - Corrected X edge velocity at ((i - 1) h, (j - 0.5) h)
    - velocity_y[i, j]: float - Corrected Y edge velocity at ((i - 0.5) h, (j - 1) h)

    OUTPUT VARIABLES (modified in parcels):
    - velocity[p]: vec2 - Interpolated grid velocity
    """
    p = wp.tid()
    g = parcels.position[p] * model.inv_cell_size

    vx = sample_staggered(state.velocity_x, g[0] + 1.0, g[1] + 0.5)
    vy = sample_staggered(state.velocity_y, g[0] + 0.5, g[1] + 1.0)
    parcels.velocity[p] = wp.vec2(vx, vy)

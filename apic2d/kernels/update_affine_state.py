import warp as wp
from apic2d.utils.structs import *
from apic2d.utils.given_kernels import sample_staggered


@wp.kernel
def update_affine_state(
    parcels: ParcelStateStruct,
    state: GridStateStruct,
    model: GridModelStruct,
):
    """
    Grid-to-parcel (G2P) transfer of the APIC affine matrix.

    PURPOSE:
    Rebuild the velocity gradient C of every parcel from the corrected grid.
    The diagonal terms are centered differences across the faces of the cell
    the parcel sits in. X velocity is not stored at Y offsets on a MAC grid, so
    du/dy is obtained by sampling velocity_x half a cell above and below the
    parcel and differencing the two samples, and dv/dx the same way along x.

    OUTPUT VARIABLES (modified in parcels):
    - affine_state[p]: mat22 - [[du/dx, du/dy], [dv/dx, dv/dy]]
    """
    p = wp.tid()
    g = parcels.position[p] * model.inv_cell_size

    # Enclosing cell, shifted by one due to the ghost layer
    x = int(wp.floor(g[0])) + 1
    y = int(wp.floor(g[1])) + 1

    du_dx = (state.velocity_x[x + 1, y] - state.velocity_x[x, y]) * model.inv_cell_size
    dv_dy = (state.velocity_y[x, y + 1] - state.velocity_y[x, y]) * model.inv_cell_size

    u_top = sample_staggered(state.velocity_x, g[0] + 1.0, g[1] + 1.0)
    u_bottom = sample_staggered(state.velocity_x, g[0] + 1.0, g[1])
    du_dy = (u_top - u_bottom) * model.inv_cell_size

    v_right = sample_staggered(state.velocity_y, g[0] + 1.0, g[1] + 1.0)
    v_left = sample_staggered(state.velocity_y, g[0], g[1] + 1.0)
    dv_dx = (v_right - v_left) * model.inv_cell_size

    parcels.affine_state[p] = wp.mat22(du_dx, du_dy, dv_dx, dv_dy)

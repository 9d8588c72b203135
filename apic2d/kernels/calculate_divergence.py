import warp as wp
from apic2d.utils.structs import *


@wp.kernel
def calculate_divergence(state: GridStateStruct, model: GridModelStruct):
    """
    Compute divergence of velocity field at cell centers using staggered grid (MAC).

    PURPOSE:
    div = (u_right - u_left) / h + (v_top - v_bottom) / h for every interior
    cell. The divergence array has no ghost border, so interior cell (i, j)
    maps to padded cell (i + 1, j + 1) whose left and bottom faces carry the
    same padded index.

    INPUT VARIABLES (from state):
    - velocity_x[i, j]: float - Left face of padded cell (i, j)
    - velocity_y[i, j]: float - Bottom face of padded cell (i, j)

    INPUT VARIABLES (from model):
    - inv_cell_size: float - Inverse of grid cell size (1/h)

    OUTPUT VARIABLES (modified in state):
    - divergence[i, j]: float - Velocity divergence of interior cell (i, j)
    """
    i, j = wp.tid()
    x = i + 1
    y = j + 1

    du = state.velocity_x[x + 1, y] - state.velocity_x[x, y]
    dv = state.velocity_y[x, y + 1] - state.velocity_y[x, y]
    state.divergence[i, j] = (du + dv) * model.inv_cell_size

import warp as wp
from apic2d.utils.structs import *


@wp.func
def separates_solid(a: int, b: int):
    if a == CELL_SOLID:
        return b != CELL_SOLID
    return b == CELL_SOLID


@wp.kernel
def enforce_boundaries_x(state: GridStateStruct, model: GridModelStruct):
    """
    No-penetration condition on the X edges.

    PURPOSE:
    Zero the wall-normal velocity on the left and right domain walls (edges 1
    and size_x + 1) and on their ghost neighbors (edges 0 and size_x + 2). Edges
    separating a solid obstacle cell from a non-solid cell are zeroed as well.
    Edges between two solid cells (the tangential ghost rows) are left alone.

    OUTPUT VARIABLES (modified in state):
    - velocity_x[i, j]: float - Set to 0 on wall and obstacle faces
    """
    i, j = wp.tid()

    if i <= 1 or i >= model.size_x + 1:
        state.velocity_x[i, j] = 0.0
        return

    if separates_solid(state.cell_type[i - 1, j], state.cell_type[i, j]):
        state.velocity_x[i, j] = 0.0


@wp.kernel
def enforce_boundaries_y(state: GridStateStruct, model: GridModelStruct):
    i, j = wp.tid()

    if j <= 1 or j >= model.size_y + 1:
        state.velocity_y[i, j] = 0.0
        return

    if separates_solid(state.cell_type[i, j - 1], state.cell_type[i, j]):
        state.velocity_y[i, j] = 0.0

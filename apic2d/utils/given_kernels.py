import warp as wp
from apic2d.utils.structs import *


@wp.func
def bilinear_weights(fx: float, fy: float):
    # Bottom-Left, Bottom-Right, Top-Left, Top-Right
    return wp.vec4(
        (1.0 - fx) * (1.0 - fy),
        fx * (1.0 - fy),
        (1.0 - fx) * fy,
        fx * fy,
    )


@wp.func
def sample_staggered(field: wp.array(dtype=float, ndim=2), gx: float, gy: float):
    """
    Bilinear sample of a padded field at fractional index coordinates (gx, gy).
    The ghost layer guarantees the 2x2 block is in range for every parcel
    kept inside the domain, so no clamping is done here.
    """
    ix = int(wp.floor(gx))
    iy = int(wp.floor(gy))
    w = bilinear_weights(gx - float(ix), gy - float(iy))
    return (
        w[0] * field[ix, iy]
        + w[1] * field[ix + 1, iy]
        + w[2] * field[ix, iy + 1]
        + w[3] * field[ix + 1, iy + 1]
    )


@wp.func
def cell_density(state: GridStateStruct, model: GridModelStruct, i: int, j: int):
    return wp.max(state.mass[i, j] / model.cell_area, model.air_density)


@wp.kernel
def zero_grid(state: GridStateStruct, model: GridModelStruct):
    """
    Clear cell-centered accumulators and reclassify cells: the ghost border
    is permanently solid, every interior cell goes back to air.
    """
    i, j = wp.tid()
    state.mass[i, j] = 0.0

    if i == 0 or i == model.size_x + 1 or j == 0 or j == model.size_y + 1:
        state.cell_type[i, j] = CELL_SOLID
    else:
        state.cell_type[i, j] = CELL_AIR


@wp.kernel
def copy_pressure_to_old(state: GridStateStruct):
    """Copy pressure grid to pressure_old grid for ping-pong buffer in Jacobi iteration."""
    i, j = wp.tid()
    state.pressure_old[i, j] = state.pressure[i, j]


@wp.kernel
def set_solid_boxes(
    state: GridStateStruct,
    model: GridModelStruct,
    center: wp.vec2,
    size: wp.vec2,
):
    """
    Mark interior cells inside an axis-aligned box as solid.

    Args:
        center: World space center of the box (vec2)
        size: World space size of the box along each axis (vec2)
    """
    i, j = wp.tid()

    # Launched over interior cells, shift by one for the ghost layer
    x = i + 1
    y = j + 1

    world_pos = wp.vec2(
        (float(i) + 0.5) * model.cell_size,
        (float(j) + 0.5) * model.cell_size,
    )

    half_size = size * 0.5
    min_bound = center - half_size
    max_bound = center + half_size

    if (world_pos[0] >= min_bound[0] and world_pos[0] <= max_bound[0] and
        world_pos[1] >= min_bound[1] and world_pos[1] <= max_bound[1]):
        state.cell_type[x, y] = CELL_SOLID

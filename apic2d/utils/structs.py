from enum import IntEnum

import warp as wp


class CellType(IntEnum):
    AIR = 0
    FLUID = 1
    SOLID = -1


CELL_AIR = wp.constant(int(CellType.AIR))
CELL_FLUID = wp.constant(int(CellType.FLUID))
CELL_SOLID = wp.constant(int(CellType.SOLID))


@wp.struct
class GridModelStruct:
    size_x: int  # logical cells, ghost border excluded
    size_y: int
    cell_size: float
    inv_cell_size: float
    cell_area: float
    fluid_density: float
    air_density: float


@wp.struct
class GridStateStruct:
    # cell centers, (size_x + 2, size_y + 2)
    cell_type: wp.array(dtype=int, ndim=2)
    mass: wp.array(dtype=float, ndim=2)
    pressure: wp.array(dtype=float, ndim=2)
    pressure_old: wp.array(dtype=float, ndim=2)

    # x edges, (size_x + 3, size_y + 2)
    mass_x: wp.array(dtype=float, ndim=2)
    momentum_x: wp.array(dtype=float, ndim=2)
    velocity_x: wp.array(dtype=float, ndim=2)

    # y edges, (size_x + 2, size_y + 3)
    mass_y: wp.array(dtype=float, ndim=2)
    momentum_y: wp.array(dtype=float, ndim=2)
    velocity_y: wp.array(dtype=float, ndim=2)

    # interior cells only, (size_x, size_y)
    divergence: wp.array(dtype=float, ndim=2)


@wp.struct
class ParcelStateStruct:
    position: wp.array(dtype=wp.vec2)
    velocity: wp.array(dtype=wp.vec2)
    mass: wp.array(dtype=float)
    affine_state: wp.array(dtype=wp.mat22)

import warp as wp
from apic2d.utils.structs import *


@wp.kernel
def calculate_velocity_x(state: GridStateStruct):
    """
    Grid X edge velocity from the accumulated mass and momentum.
    An edge no fluid touches (zero mass) gets zero velocity.
    """
    i, j = wp.tid()
    mass = state.mass_x[i, j]
    if mass != 0.0:
        state.velocity_x[i, j] = state.momentum_x[i, j] / mass
    else:
        state.velocity_x[i, j] = 0.0


@wp.kernel
def calculate_velocity_y(state: GridStateStruct):
    i, j = wp.tid()
    mass = state.mass_y[i, j]
    if mass != 0.0:
        state.velocity_y[i, j] = state.momentum_y[i, j] / mass
    else:
        state.velocity_y[i, j] = 0.0

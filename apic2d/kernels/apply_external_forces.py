import warp as wp
from apic2d.utils.structs import *


@wp.kernel
def apply_external_forces_x(state: GridStateStruct, acceleration: wp.vec2, dt: float):
    """
    Apply a uniform body force (gravity) to the grid velocity field via a
    forward Euler step.

    PURPOSE:
    Every X edge, ghost and solid edges included, is accelerated. Edges that must
    stay still are zeroed afterwards by enforce_boundaries.

    INPUT VARIABLES (function parameters):
    - acceleration: vec2 - Body acceleration, typically (0, -9.81)
    - dt: float - Time step size

    OUTPUT VARIABLES (modified in state):
    - velocity_x[i, j]: float - velocity_x += acceleration.x * dt
    """
    i, j = wp.tid()
    state.velocity_x[i, j] = state.velocity_x[i, j] + acceleration[0] * dt


@wp.kernel
def apply_external_forces_y(state: GridStateStruct, acceleration: wp.vec2, dt: float):
    i, j = wp.tid()
    state.velocity_y[i, j] = state.velocity_y[i, j] + acceleration[1] * dt

import warp as wp
from apic2d.utils.structs import *


@wp.kernel
def move_parcels(
    parcels: ParcelStateStruct,
    model: GridModelStruct,
    dt: float,
    friction: float,
):
    """
    Parcel advection with a midpoint velocity.

    PURPOSE:
    v_mid = v + C v dt / 2 and x += v_mid dt. A parcel whose unclamped position
    leaves the domain along one axis loses a friction fraction of its velocity
    along the other axis, then its position is clamped to
    [eps, size * cell_size - eps] with eps = 0.01 * cell_size.

    INPUT VARIABLES (function parameters):
    - dt: float - Time step size
    - friction: float - Fraction of tangential velocity removed on wall contact

    OUTPUT VARIABLES (modified in parcels):
    - position[p]: vec2 - Advected and clamped position
    - velocity[p]: vec2 - Velocity after the wall friction response
    """
    p = wp.tid()

    v = parcels.velocity[p]
    c = parcels.affine_state[p]
    cv = wp.vec2(c[0, 0] * v[0] + c[0, 1] * v[1], c[1, 0] * v[0] + c[1, 1] * v[1])
    v_mid = v + cv * (dt * 0.5)
    pos = parcels.position[p] + v_mid * dt

    size_x = float(model.size_x) * model.cell_size
    size_y = float(model.size_y) * model.cell_size

    vx = v[0]
    vy = v[1]
    if pos[0] < 0.0 or pos[0] > size_x:
        vy = vy * (1.0 - friction)
    if pos[1] < 0.0 or pos[1] > size_y:
        vx = vx * (1.0 - friction)

    eps = model.cell_size * 0.01
    parcels.position[p] = wp.vec2(
        wp.clamp(pos[0], eps, size_x - eps),
        wp.clamp(pos[1], eps, size_y - eps),
    )
    parcels.velocity[p] = wp.vec2(vx, vy)

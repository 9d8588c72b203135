import numpy as np
import warp as wp

from apic2d.utils.structs import *
from apic2d.kernels import update_parcel_velocity, update_affine_state, move_parcels


class ParcelSet:
    """
    Fluid macro-particles ("parcels").

    Each parcel carries a position, a velocity, a mass and the APIC affine
    matrix C (local velocity gradient) used to preserve angular momentum
    across grid transfers. The parcel count is fixed for the lifetime of the
    set.
    """

    def __init__(self, count, friction=0.0, device="cpu"):
        if count < 0:
            raise ValueError(f"parcel count must be non-negative, got {count}")
        if not 0.0 <= friction <= 1.0:
            raise ValueError(f"friction must be in [0, 1], got {friction}")

        self.count = int(count)
        self.friction = float(friction)
        self.device = device

        self.state = ParcelStateStruct()
        self.state.position = wp.zeros(shape=self.count, dtype=wp.vec2, device=device)
        self.state.velocity = wp.zeros(shape=self.count, dtype=wp.vec2, device=device)
        self.state.mass = wp.zeros(shape=self.count, dtype=float, device=device)
        self.state.affine_state = wp.zeros(shape=self.count, dtype=wp.mat22, device=device)

    @property
    def position(self):
        return self.state.position

    @property
    def velocity(self):
        return self.state.velocity

    @property
    def mass(self):
        return self.state.mass

    @property
    def affine_state(self):
        return self.state.affine_state

    def load_from_array(self, position, velocity=None, mass=None, affine_state=None):
        """
        Overwrite parcel state from numpy arrays.

        Args:
            position: array of shape (count, 2)
            velocity: array of shape (count, 2), zero when omitted
            mass: array of shape (count,), ones when omitted
            affine_state: array of shape (count, 2, 2), zero when omitted
        """
        position = np.asarray(position, dtype=np.float32).reshape(-1, 2)
        if position.shape[0] != self.count:
            raise ValueError(f"position must have shape ({self.count}, 2), got {position.shape}")

        if velocity is None:
            velocity = np.zeros((self.count, 2), dtype=np.float32)
        velocity = np.asarray(velocity, dtype=np.float32).reshape(-1, 2)
        if velocity.shape[0] != self.count:
            raise ValueError(f"velocity must have shape ({self.count}, 2), got {velocity.shape}")

        if mass is None:
            mass = np.ones(self.count, dtype=np.float32)
        mass = np.asarray(mass, dtype=np.float32).flatten()
        if mass.shape[0] != self.count:
            raise ValueError(f"mass must have shape ({self.count},), got {mass.shape}")

        if affine_state is None:
            affine_state = np.zeros((self.count, 2, 2), dtype=np.float32)
        affine_state = np.asarray(affine_state, dtype=np.float32).reshape(-1, 2, 2)
        if affine_state.shape[0] != self.count:
            raise ValueError(f"affine_state must have shape ({self.count}, 2, 2), got {affine_state.shape}")

        self.state.position.assign(wp.array(position, dtype=wp.vec2, device=self.device))
        self.state.velocity.assign(wp.array(velocity, dtype=wp.vec2, device=self.device))
        self.state.mass.assign(wp.array(mass, dtype=float, device=self.device))
        self.state.affine_state.assign(wp.array(affine_state, dtype=wp.mat22, device=self.device))

        print("Parcels loaded from arrays. Total parcels: ", self.count)

    def update_velocity(self, grid):
        wp.launch(
            kernel=update_parcel_velocity,
            dim=self.count,
            inputs=[self.state, grid.state, grid.model],
            device=self.device,
        )

    def update_affine_state(self, grid):
        wp.launch(
            kernel=update_affine_state,
            dim=self.count,
            inputs=[self.state, grid.state, grid.model],
            device=self.device,
        )

    def move(self, grid, dt):
        wp.launch(
            kernel=move_parcels,
            dim=self.count,
            inputs=[self.state, grid.model, dt, self.friction],
            device=self.device,
        )

"""
Warp kernels of the staggered-grid APIC solver.
"""
from .transfer_mass import transfer_mass
from .transfer_momentum import transfer_momentum
from .calculate_velocity import calculate_velocity_x, calculate_velocity_y
from .apply_external_forces import apply_external_forces_x, apply_external_forces_y
from .enforce_boundaries import enforce_boundaries_x, enforce_boundaries_y
from .calculate_divergence import calculate_divergence
from .gauss_seidel_pressure_iteration import (
    gauss_seidel_pressure_iteration,
    jacobi_pressure_iteration,
    extrapolate_border_pressure,
)
from .correct_velocity import correct_velocity_x, correct_velocity_y
from .update_parcel_velocity import update_parcel_velocity
from .update_affine_state import update_affine_state
from .move_parcels import move_parcels

__all__ = [
    'transfer_mass',
    'transfer_momentum',
    'calculate_velocity_x',
    'calculate_velocity_y',
    'apply_external_forces_x',
    'apply_external_forces_y',
    'enforce_boundaries_x',
    'enforce_boundaries_y',
    'calculate_divergence',
    'gauss_seidel_pressure_iteration',
    'jacobi_pressure_iteration',
    'extrapolate_border_pressure',
    'correct_velocity_x',
    'correct_velocity_y',
    'update_parcel_velocity',
    'update_affine_state',
    'move_parcels',
]

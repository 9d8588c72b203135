import warp as wp

from apic2d.utils.given_kernels import copy_pressure_to_old
from apic2d.kernels import (
    gauss_seidel_pressure_iteration,
    jacobi_pressure_iteration,
    extrapolate_border_pressure,
)


class PressureSolver:
    """
    Relaxed Gauss-Seidel solver for the pressure Poisson equation.

    Runs a fixed number of red-black sweeps over the interior cells of the
    grid, updating grid.pressure in place (the previous step's pressure is the
    warm start). There is no convergence check: the iteration count is the
    whole budget.
    """

    def __init__(self, max_iterations, omega=1.0):
        if max_iterations < 0:
            raise ValueError(f"max_iterations must be non-negative, got {max_iterations}")
        if not 0.0 < omega < 2.0:
            raise ValueError(f"omega must be in (0, 2), got {omega}")
        self.max_iterations = int(max_iterations)
        self.omega = float(omega)

    def solve(self, grid, dt):
        for iter in range(self.max_iterations):
            # Update red cells (color = 0)
            wp.launch(
                kernel=gauss_seidel_pressure_iteration,
                dim=grid.size,
                inputs=[grid.state, grid.model, dt, self.omega, 0],
                device=grid.device,
            )
            # Update black cells (color = 1)
            wp.launch(
                kernel=gauss_seidel_pressure_iteration,
                dim=grid.size,
                inputs=[grid.state, grid.model, dt, self.omega, 1],
                device=grid.device,
            )
            wp.launch(
                kernel=extrapolate_border_pressure,
                dim=grid.padded_size,
                inputs=[grid.state, grid.model, dt],
                device=grid.device,
            )


class JacobiPressureSolver:
    """Damped Jacobi variant; slower to converge, but order independent."""

    def __init__(self, max_iterations, alpha=1.0):
        if max_iterations < 0:
            raise ValueError(f"max_iterations must be non-negative, got {max_iterations}")
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self.max_iterations = int(max_iterations)
        self.alpha = float(alpha)

    def solve(self, grid, dt):
        for iter in range(self.max_iterations):
            # Copy current pressure to pressure_old for ping-pong buffer
            wp.launch(
                kernel=copy_pressure_to_old,
                dim=grid.padded_size,
                inputs=[grid.state],
                device=grid.device,
            )
            wp.launch(
                kernel=jacobi_pressure_iteration,
                dim=grid.size,
                inputs=[grid.state, grid.model, dt, self.alpha],
                device=grid.device,
            )
            wp.launch(
                kernel=extrapolate_border_pressure,
                dim=grid.padded_size,
                inputs=[grid.state, grid.model, dt],
                device=grid.device,
            )

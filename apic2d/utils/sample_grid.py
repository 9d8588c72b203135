import numpy as np

def sample_grid(n_points, center, size, k=30):
    """
    Generate approximately n grid samples in a 2D box.

    Samples sit at the centers of a regular lattice of sub-boxes, so a box whose
    edges line up with grid cells never puts a sample on a cell boundary.

    Args:
        n_points (int): Desired number of samples (approximate).
        center (array-like, shape (2,)): Center of the box.
        size (array-like, shape (2,)): Size of the box along each axis.
        k (int): Unused parameter (kept for interface compatibility).

    Returns:
        np.ndarray: Array of shape (m, 2) of sample positions, m = ceil(sqrt(n))^2.
    """
    center = np.array(center, dtype=float)
    size = np.array(size, dtype=float)

    mins = center - size * 0.5

    # n ≈ nx * ny, assuming roughly square spacing
    grid_points_per_dim = int(np.ceil(np.sqrt(n_points)))
    spacing = size / grid_points_per_dim

    x_vals = mins[0] + (np.arange(grid_points_per_dim) + 0.5) * spacing[0]
    y_vals = mins[1] + (np.arange(grid_points_per_dim) + 0.5) * spacing[1]

    xx, yy = np.meshgrid(x_vals, y_vals, indexing='ij')
    return np.stack([xx.flatten(), yy.flatten()], axis=1)

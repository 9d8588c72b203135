import numpy as np
from apic2d.utils.sample_grid import sample_grid

def sample_jittered_grid(n_points, center, size, k=30):
    """
    Generate approximately n jittered grid samples in a 2D box.
    Starts with a regular grid and adds random jitter to each point.

    Args:
        n_points (int): Desired number of samples (approximate).
        center (array-like, shape (2,)): Center of the box.
        size (array-like, shape (2,)): Size of the box along each axis.
        k (float): Jitter amount in percent of the lattice spacing (k=30 means 30% jitter).

    Returns:
        np.ndarray: Array of shape (m, 2) of sample positions.
    """
    grid_samples = sample_grid(n_points, center, size)

    center = np.array(center, dtype=float)
    size = np.array(size, dtype=float)

    grid_points_per_dim = int(np.ceil(np.sqrt(n_points)))
    cell_size = size / grid_points_per_dim

    # Jitter is uniformly distributed in [-k*cell_size/2, k*cell_size/2]
    jitter_scale = k / 100.0
    jitter = np.random.uniform(
        -jitter_scale * cell_size / 2.0,
        jitter_scale * cell_size / 2.0,
        size=grid_samples.shape
    )

    # Clamp to box bounds to ensure all points stay within the box
    mins = center - size * 0.5
    maxs = center + size * 0.5
    return np.clip(grid_samples + jitter, mins, maxs)

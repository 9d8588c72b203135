import numpy as np

def sample_blue_noise(n_points, center, size, k=30):
    """
    Poisson-disk (Bridson) sampling of a 2D box, stopping at n_points samples.

    Args:
        n_points (int): Desired number of samples (upper bound).
        center (array-like, shape (2,)): Center of the box.
        size (array-like, shape (2,)): Size of the box along each axis.
        k (int): Candidates tried around an active sample before it is retired.

    Returns:
        np.ndarray: Array of shape (m, 2) of sample positions, m <= n_points.
    """
    center = np.asarray(center, dtype=float)
    size = np.asarray(size, dtype=float)
    lo = center - size * 0.5
    hi = center + size * 0.5

    # Minimum distance chosen so that roughly n_points disks fill the box
    radius = 0.7 * np.sqrt(np.prod(size) / max(n_points, 1))
    bucket = radius / np.sqrt(2.0)
    shape = np.maximum(np.ceil(size / bucket).astype(int), 1)
    owner = np.full(shape, -1, dtype=int)

    rng = np.random.default_rng()
    points = []
    active = []

    def bucket_of(q):
        return tuple(np.minimum(((q - lo) / bucket).astype(int), shape - 1))

    def accept(q):
        bx, by = bucket_of(q)
        block = owner[max(bx - 2, 0):bx + 3, max(by - 2, 0):by + 3]
        for idx in block[block >= 0]:
            if np.linalg.norm(points[idx] - q) < radius:
                return False
        return True

    def insert(q):
        points.append(q)
        owner[bucket_of(q)] = len(points) - 1
        active.append(len(points) - 1)

    if n_points > 0:
        insert(rng.uniform(lo, hi))

    while active and len(points) < n_points:
        slot = rng.integers(len(active))
        base = points[active[slot]]

        angles = rng.uniform(0.0, 2.0 * np.pi, size=k)
        dists = rng.uniform(radius, 2.0 * radius, size=k)
        candidates = base + np.stack([np.cos(angles), np.sin(angles)], axis=1) * dists[:, None]

        for q in candidates:
            if np.all(q >= lo) and np.all(q <= hi) and accept(q):
                insert(q)
                break
        else:
            active.pop(slot)

    return np.array(points).reshape(-1, 2)

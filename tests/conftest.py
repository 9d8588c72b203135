import numpy as np
import pytest
import warp as wp

from apic2d import Grid, ParcelSet

wp.init()

DEVICE = "cpu"


def make_parcels(positions, velocities=None, masses=None, affine=None, friction=0.0):
    positions = np.asarray(positions, dtype=np.float32).reshape(-1, 2)
    parcels = ParcelSet(positions.shape[0], friction, device=DEVICE)
    parcels.load_from_array(positions, velocities, masses, affine)
    return parcels


def fluid_block(grid, lo, hi, density=None):
    """Parcels at the centers of padded cells lo..hi (inclusive), one cell's worth of mass each."""
    density = grid.fluid_density if density is None else density
    h = grid.cell_size
    idx = np.arange(lo, hi + 1)
    xx, yy = np.meshgrid(idx, idx, indexing="ij")
    positions = np.stack([(xx.flatten() - 0.5) * h, (yy.flatten() - 0.5) * h], axis=1)
    masses = np.full(positions.shape[0], density * grid.cell_area)
    return make_parcels(positions, masses=masses)


@pytest.fixture
def grid8():
    return Grid((8, 8), 1.0, device=DEVICE)


@pytest.fixture
def grid4():
    return Grid((4, 4), 2.0, device=DEVICE)

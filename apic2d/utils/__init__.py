"""
Utils package for warp structs, shared kernels, scene configuration and parcel sampling.
"""
from .structs import CellType
from .scene import Scene, ParcelBox
from .sample_random import sample_random
from .sample_grid import sample_grid
from .sample_jittered_grid import sample_jittered_grid
from .sample_blue_noise import sample_blue_noise

__all__ = ['CellType', 'Scene', 'ParcelBox', 'sample_random', 'sample_grid', 'sample_jittered_grid', 'sample_blue_noise']

"""
2D APIC fluid solver on a staggered (MAC) grid, built on NVIDIA Warp.
"""
import warp as wp

wp.init()  # initialize warp

from .utils.structs import CellType
from .utils.scene import Scene, ParcelBox
from .grid import Grid
from .parcels import ParcelSet
from .pressure_solver import PressureSolver, JacobiPressureSolver
from .simulator import APICSimulator
from .sim_wrapper import Sim_Wrapper

__all__ = [
    'CellType',
    'Scene',
    'ParcelBox',
    'Grid',
    'ParcelSet',
    'PressureSolver',
    'JacobiPressureSolver',
    'APICSimulator',
    'Sim_Wrapper',
]

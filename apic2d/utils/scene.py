"""
Scene data structure for managing simulation parameters, initial parcel boxes, and solid boundaries.
"""
import json
from typing import List, Dict, Optional


class ParcelBox:
    """Represents a box of parcels seeded before the first step."""
    def __init__(self, n_particles: int, center: List[float], size: List[float],
                 sampling_type: str = "grid", k: int = 30,
                 velocity: Optional[List[float]] = None):
        self.n_particles = n_particles
        self.center = center
        self.size = size
        self.sampling_type = sampling_type
        self.k = k
        self.velocity = velocity if velocity is not None else [0.0, 0.0]

    def to_dict(self) -> Dict:
        return {
            "n_particles": self.n_particles,
            "center": self.center,
            "size": self.size,
            "sampling_type": self.sampling_type,
            "k": self.k,
            "velocity": self.velocity,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'ParcelBox':
        return cls(
            n_particles=data["n_particles"],
            center=data["center"],
            size=data["size"],
            sampling_type=data.get("sampling_type", "grid"),
            k=data.get("k", 30),
            velocity=data.get("velocity", None),
        )


class Scene:
    """Scene data structure containing simulation parameters."""

    def __init__(self, dt: float = 0.02, size: Optional[List[int]] = None, cell_size: float = 1.0,
                 gravity: Optional[List[float]] = None,
                 fluid_density: float = 1000.0, air_density: float = 1.225,
                 friction: float = 0.1,
                 use_gauss_seidel: bool = True,
                 num_iterations: int = 20,
                 omega: float = 1.0,
                 jacobi_alpha: float = 1.0,
                 variable_density: bool = False,
                 frames_per_output: int = 1):
        """
        Initialize a scene.

        Args:
            dt: Time step size
            size: Grid resolution [nx, ny], ghost border excluded
            cell_size: Edge length of a square cell
            gravity: Gravity vector [x, y]
            fluid_density: Fluid density
            air_density: Air density, lower bound of cell densities
            friction: Fraction of tangential velocity removed on wall contact
            use_gauss_seidel: Use Gauss-Seidel solver (True) or Jacobi solver (False)
            num_iterations: Number of pressure solver iterations
            omega: Relaxation parameter for Gauss-Seidel (1.0 = standard GS, >1.0 = over-relaxation)
            jacobi_alpha: Relaxation parameter for Jacobi iteration (1.0 = standard Jacobi)
            variable_density: Use adjacent cell densities instead of fluid_density in the velocity correction
            frames_per_output: Number of simulation steps to run between outputs
        """
        self.dt = dt
        self.size = size if size is not None else [16, 16]
        self.cell_size = cell_size
        self.gravity = gravity if gravity is not None else [0.0, -9.81]
        self.fluid_density = fluid_density
        self.air_density = air_density
        self.friction = friction

        # Pressure solver parameters
        self.use_gauss_seidel = use_gauss_seidel
        self.num_iterations = num_iterations
        self.omega = omega
        self.jacobi_alpha = jacobi_alpha
        self.variable_density = variable_density
        self.frames_per_output = frames_per_output

        # Parcel boxes, all seeded at frame 0
        self.parcel_boxes: List[ParcelBox] = []

        # Solid bounding boxes: list of (center, size) tuples
        self.solid_boxes: List[tuple] = []

    def add_parcel_box(self, n_particles: int, center: List[float], size: List[float],
                       sampling_type: str = "grid", k: int = 30,
                       velocity: Optional[List[float]] = None):
        """Add a box of parcels seeded before the first step."""
        self.parcel_boxes.append(ParcelBox(n_particles, center, size, sampling_type, k, velocity))

    def add_solid_box(self, center: List[float], size: List[float]):
        """Add a solid bounding box."""
        self.solid_boxes.append((center, size))

    def to_dict(self) -> Dict:
        """Convert scene to dictionary for JSON serialization."""
        return {
            "dt": self.dt,
            "size": self.size,
            "cell_size": self.cell_size,
            "gravity": self.gravity,
            "fluid_density": self.fluid_density,
            "air_density": self.air_density,
            "friction": self.friction,
            "use_gauss_seidel": self.use_gauss_seidel,
            "num_iterations": self.num_iterations,
            "omega": self.omega,
            "jacobi_alpha": self.jacobi_alpha,
            "variable_density": self.variable_density,
            "frames_per_output": self.frames_per_output,
            "parcel_boxes": [box.to_dict() for box in self.parcel_boxes],
            "solid_boxes": [
                {"center": center, "size": size}
                for center, size in self.solid_boxes
            ]
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Scene':
        """Create scene from dictionary."""
        scene = cls(
            dt=data.get("dt", 0.02),
            size=data.get("size", [16, 16]),
            cell_size=data.get("cell_size", 1.0),
            gravity=data.get("gravity", [0.0, -9.81]),
            fluid_density=data.get("fluid_density", 1000.0),
            air_density=data.get("air_density", 1.225),
            friction=data.get("friction", 0.1),
            use_gauss_seidel=data.get("use_gauss_seidel", True),
            num_iterations=data.get("num_iterations", 20),
            omega=data.get("omega", 1.0),
            jacobi_alpha=data.get("jacobi_alpha", 1.0),
            variable_density=data.get("variable_density", False),
            frames_per_output=data.get("frames_per_output", 1)
        )

        for box_data in data.get("parcel_boxes", []):
            scene.parcel_boxes.append(ParcelBox.from_dict(box_data))

        for box_data in data.get("solid_boxes", []):
            scene.add_solid_box(box_data["center"], box_data["size"])

        return scene

    @classmethod
    def from_json(cls, filepath: str) -> 'Scene':
        """Load scene from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)

    def to_json(self, filepath: str):
        """Save scene to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

# Interactive viewer and headless runner for the 2D APIC fluid solver
import polyscope as ps
import polyscope.imgui as psim
import numpy as np
import warp as wp
import torch
import argparse
from apic2d import Sim_Wrapper

sim = None

#Global variables for UI
simulating = False
scene_file_path = None

# Point cloud point sizes
POINT_SIZE_PARTICLES = 0.1
POINT_SIZE_FLUID_OCCUPANCY = 0.2
POINT_SIZE_SOLID_OCCUPANCY = 0.2

#callback to run one simulation step
def simulation_step():
    sim.step()

def register_points(name, points, radius):
    if isinstance(points, torch.Tensor):
        points = points.detach().cpu().numpy()

    # Ensure positions are in the right shape (N x 2)
    points = np.asarray(points).reshape(-1, 2)

    ps.register_point_cloud(name, points)
    ps.get_point_cloud(name).set_radius(radius, relative=False)

def read_positions():
    register_points("parcels", sim.get_positions(), POINT_SIZE_PARTICLES)

def read_occupancy():
    register_points("fluid occupancy", sim.get_fluid_occupancy(), POINT_SIZE_FLUID_OCCUPANCY)
    register_points("solid occupancy", sim.get_solid_occupancy(), POINT_SIZE_SOLID_OCCUPANCY)

def simulation_init(scene_file=None, device="cpu"):
    global sim
    if scene_file:
        print(f"Loading scene from: {scene_file}")
        sim = Sim_Wrapper(scene_file=scene_file, device=device)
    else:
        sim = Sim_Wrapper(device=device)
    print("Initialized Sim")
    read_positions()
    read_occupancy()
    # Disable fluid occupancy point cloud by default (only once at initialization)
    ps.get_point_cloud("fluid occupancy").set_enabled(False)

def ui_callback():
    global simulating
    changed_sim, simulating = psim.Checkbox("Start Simulation", simulating)

    #button to run one step of the simulation
    if psim.Button("Step"):
        simulation_step()
        read_positions()
        read_occupancy()

    #reset button
    if psim.Button("Reset Simulation"):
        print("Resetting Simulation")
        device = sim.device if sim else "cpu"
        simulation_init(scene_file=scene_file_path, device=device)

    psim.TextUnformatted(f"Frame: {sim.current_frame}  Time: {sim.solver.time:.3f}")

    if simulating:
        simulation_step()
        read_positions()
        read_occupancy()

def run_headless(num_steps, output):
    """Run num_steps outputs without a window and store parcel positions per frame in an npz file."""
    frames = [sim.get_positions()]
    for k in range(num_steps):
        print("Step "+str(k))
        simulation_step()
        frames.append(sim.get_positions())

    np.savez_compressed(
        output,
        positions=np.stack(frames),
        dt=sim.scene.dt * sim.scene.frames_per_output,
        solid_occupancy=sim.get_solid_occupancy(),
    )
    print(f"Wrote {len(frames)} frames to {output}")

if __name__ == "__main__":
    #check arguments, load approriate scene and device
    parser = argparse.ArgumentParser(description="2D APIC fluid simulation")
    parser.add_argument("--scene", help="Path to the scene file")
    parser.add_argument("--output", help="Path to npz output file, requires num_steps parameter")
    parser.add_argument("--num_steps", help="Number of steps to simulate", type=int)
    parser.add_argument("--device", help="Device to use", type=str, default="cpu")
    args = parser.parse_args()

    print("CUDA available: ", torch.cuda.is_available())

    # Convert device format: "cuda" -> "cuda:0", "cpu" -> "cpu"
    device_str = args.device if args.device != "cuda" else "cuda:0"
    wp.set_device(device_str)

    # Store scene file globally for reset functionality
    scene_file_path = args.scene

    if args.output:
        if args.num_steps:
            sim = Sim_Wrapper(scene_file=args.scene, device=device_str)
            run_headless(args.num_steps, args.output)
        else:
            print("Num steps not provided, skipping output")
        exit()

    # initialize polyscope
    ps.init()
    ps.set_navigation_style("planar")

    simulation_init(scene_file=args.scene, device=device_str)

    ps.set_user_callback(ui_callback)

    #turn off polyscope ground plane
    ps.set_ground_plane_mode("none")
    ps.show()

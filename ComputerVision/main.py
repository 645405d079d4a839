import logging

import maze_image_processing as mip
import pathfinder as pf
import visualize
from maze_config import DetectionMethod, SolverConfig
from maze_solver import MazeSolver

# === CONFIG ===
image_path = "maze.jpg"
start = (10, 10)
goal = (400, 300)
pixel_sizes = [8, 4, 2, 1]
config = SolverConfig(
    pixel_size=pixel_sizes[0],
    edge_threshold=10,
    detection_method=DetectionMethod.EDGE_DETECT,
)

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

# === Load and process image ===
image = mip.load_image(image_path)
solver = MazeSolver(config)
processed = solver.load(image)

# === Solve ===
result = solver.solve_with_fallback(start, goal, pixel_sizes)
if not result.found:
    print(result.status.value, result.unresolved or "")
    visualize.show(visualize.draw_path(processed.mask, [], start, goal))
    raise SystemExit(1)

# === Show Maze ===
visualize.show(visualize.draw_result(processed, result))

# === Output Path ===
print(pf.path_turns(result.path))

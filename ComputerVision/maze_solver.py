import logging

import maze_image_processing as mip
import pathfinder as pf
from graph_builder import GraphCache
from maze_config import SolverConfig
from maze_errors import InvalidArgument

logger = logging.getLogger(__name__)


class MazeSolver:
    """Runs detection once per image and reuses the graph across endpoint changes."""

    def __init__(self, config=None):
        self.config = config or SolverConfig()
        self.processed = None
        self._cache = GraphCache()

    @property
    def mask(self):
        return None if self.processed is None else self.processed.mask

    def load(self, image):
        self.processed = mip.detect(image, self.config)
        self._cache.clear()
        height, width = self.processed.shape
        logger.debug("Loaded %s mask %dx%d", self.config.detection_method.value, width, height)
        return self.processed

    def graph(self, start=None, pixel_size=None):
        if self.processed is None:
            raise InvalidArgument("No image loaded")
        if pixel_size is None:
            pixel_size = self.config.pixel_size
        origin = (0, 0)
        if self.config.anchor_at_start and start is not None:
            origin = tuple(start)
        return self._cache.get(self.processed.mask, pixel_size, origin)

    def solve(self, start, end, pixel_size=None):
        graph = self.graph(start, pixel_size)
        return pf.solve(graph, start, end)

    def solve_with_fallback(self, start, end, pixel_sizes):
        result = None
        for pixel_size in pixel_sizes:
            result = self.solve(start, end, pixel_size)
            if result.found:
                return result
            logger.info("pixel_size=%d gave %s, retrying", pixel_size, result.status.value)
        if result is None:
            raise InvalidArgument("pixel_sizes must not be empty")
        return result


def solve_image(image, start, end, config=None):
    solver = MazeSolver(config)
    solver.load(image)
    return solver.solve(start, end)

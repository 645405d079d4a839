import logging
from collections import deque

import numpy as np

from maze_config import check_pixel_size
from maze_errors import InvalidArgument
from maze_types import MazeGraph

logger = logging.getLogger(__name__)

# lattice steps as (row, col)
STEPS = [(-1, 0), (1, 0), (0, -1), (0, 1)]


def lattice_offset(origin, pixel_size):
    return origin[0] % pixel_size, origin[1] % pixel_size


def open_blocks(mask, pixel_size, x0=0, y0=0):
    """Return a (rows, cols) array, True where the whole block of that lattice cell is open.

    A trailing partial row or column of blocks is dropped.
    """
    height, width = mask.shape
    num_cols = max((width - x0) // pixel_size, 0)
    num_rows = max((height - y0) // pixel_size, 0)
    region = mask[y0:y0 + num_rows * pixel_size, x0:x0 + num_cols * pixel_size]
    if num_rows == 0 or num_cols == 0:
        return np.zeros((num_rows, num_cols), dtype=bool)
    return region.reshape(num_rows, pixel_size, num_cols, pixel_size).all(axis=(1, 3))


def _expand(start, num_rows, num_cols):
    index = np.full((num_rows, num_cols), -1, dtype=np.int64)
    index[start] = 0
    cells = [start]
    queue = deque([start])
    while queue:
        i, j = queue.popleft()
        for di, dj in STEPS:
            ni, nj = i + di, j + dj
            if 0 <= ni < num_rows and 0 <= nj < num_cols and index[ni, nj] < 0:
                index[ni, nj] = len(cells)
                cells.append((ni, nj))
                queue.append((ni, nj))

    adjacency = []
    for i, j in cells:
        neighbors = []
        if i > 0:
            neighbors.append(int(index[i - 1, j]))
        if i < num_rows - 1:
            neighbors.append(int(index[i + 1, j]))
        if j > 0:
            neighbors.append(int(index[i, j - 1]))
        if j < num_cols - 1:
            neighbors.append(int(index[i, j + 1]))
        adjacency.append(neighbors)
    return cells, adjacency


def _prune(cells, adjacency, valid):
    keep = [bool(valid[cell]) for cell in cells]
    remap = [-1] * len(cells)
    count = 0
    for old, kept in enumerate(keep):
        if kept:
            remap[old] = count
            count += 1

    kept_cells = []
    kept_adjacency = []
    for old, neighbors in enumerate(adjacency):
        if not keep[old]:
            continue
        kept_cells.append(cells[old])
        kept_adjacency.append([remap[n] for n in neighbors if keep[n]])
    return kept_cells, kept_adjacency


def build_graph(mask, pixel_size, origin=(0, 0)):
    pixel_size = check_pixel_size(pixel_size)
    mask = np.asarray(mask, dtype=bool)
    if mask.ndim != 2:
        raise InvalidArgument(f"Mask must be 2-D, got shape {mask.shape}")
    height, width = mask.shape
    ox, oy = int(origin[0]), int(origin[1])
    if not (0 <= ox < width and 0 <= oy < height):
        raise InvalidArgument(f"Origin {(ox, oy)} is outside the {width}x{height} mask")

    x0, y0 = lattice_offset((ox, oy), pixel_size)
    valid = open_blocks(mask, pixel_size, x0, y0)
    num_rows, num_cols = valid.shape
    if num_rows == 0 or num_cols == 0:
        logger.debug("build_graph: no full %dpx block fits in %dx%d", pixel_size, width, height)
        return MazeGraph([], [], pixel_size, (ox, oy), mask.shape)

    start = (min((oy - y0) // pixel_size, num_rows - 1), min((ox - x0) // pixel_size, num_cols - 1))
    cells, adjacency = _expand(start, num_rows, num_cols)
    cells, adjacency = _prune(cells, adjacency, valid)

    anchors = [(x0 + j * pixel_size, y0 + i * pixel_size) for i, j in cells]
    graph = MazeGraph(anchors, adjacency, pixel_size, (ox, oy), mask.shape)
    logger.debug("build_graph: %d of %d candidates kept, %d edges",
                 len(graph), num_rows * num_cols, graph.edge_count())
    return graph


class GraphCache:
    """Keeps the last graph and rebuilds only when mask, step or origin change."""

    def __init__(self):
        self._key = None
        self._mask = None
        self._graph = None
        self.hits = 0
        self.builds = 0

    def get(self, mask, pixel_size, origin=(0, 0)):
        mask = np.asarray(mask, dtype=bool)
        key = (mask.shape, pixel_size, tuple(origin))
        if self._graph is not None and key == self._key and np.array_equal(mask, self._mask):
            self.hits += 1
            return self._graph

        graph = build_graph(mask, pixel_size, origin)
        self._key, self._mask, self._graph = key, mask.copy(), graph
        self.builds += 1
        return graph

    def clear(self):
        self._key = None
        self._mask = None
        self._graph = None

import logging
from collections import deque

import numpy as np

from graph_builder import lattice_offset
from maze_errors import EndpointUnresolved, InvalidArgument
from maze_types import SolveResult, SolveStatus

logger = logging.getLogger(__name__)


def _lattice_near(value, offset, pixel_size):
    base = value - (value - offset) % pixel_size
    if base == value:
        return [base]
    return [base, base + pixel_size]


def resolve_endpoint(graph, point, which=None):
    """Map a raw pixel to the closest node whose anchor is less than one step away on both axes.

    Ties on Euclidean distance go to the lowest node index.
    """
    x, y = int(point[0]), int(point[1])
    if not (0 <= x < graph.width and 0 <= y < graph.height):
        raise InvalidArgument(f"Point {(x, y)} is outside the {graph.width}x{graph.height} image")

    x0, y0 = lattice_offset(graph.origin, graph.pixel_size)
    best = None
    for ax in _lattice_near(x, x0, graph.pixel_size):
        for ay in _lattice_near(y, y0, graph.pixel_size):
            index = graph.index_of((ax, ay))
            if index is None:
                continue
            candidate = ((ax - x) ** 2 + (ay - y) ** 2, index)
            if best is None or candidate < best:
                best = candidate

    if best is None:
        logger.warning("No open node within %dpx of %s %s", graph.pixel_size, which or "point", (x, y))
        raise EndpointUnresolved((x, y), which)
    return best[1]


def _search(graph, start, goal):
    parent = np.full(len(graph), -1, dtype=np.int64)
    visited = np.zeros(len(graph), dtype=bool)
    visited[start] = True
    queue = deque([start])
    expanded = 0
    while queue:
        current = queue.popleft()
        expanded += 1
        if current == goal:
            break
        for neighbor in graph.neighbors(current):
            if not visited[neighbor]:
                visited[neighbor] = True
                parent[neighbor] = current
                queue.append(neighbor)
    return parent, expanded


def reconstruct(parent, start, goal):
    path = [goal]
    while path[-1] != start:
        previous = parent[path[-1]]
        if previous < 0:
            return []
        path.append(int(previous))
    path.reverse()
    return path


def bfs(graph, start, goal):
    parent, _ = _search(graph, start, goal)
    return reconstruct(parent, start, goal)


def solve(graph, start, end):
    start, end = tuple(start), tuple(end)
    try:
        start_node = resolve_endpoint(graph, start, "start")
        end_node = resolve_endpoint(graph, end, "end")
    except EndpointUnresolved as exc:
        return SolveResult(SolveStatus.ENDPOINT_UNRESOLVED, start, end,
                           unresolved=exc.which, pixel_size=graph.pixel_size)

    parent, expanded = _search(graph, start_node, end_node)
    nodes = reconstruct(parent, start_node, end_node)
    result = SolveResult(SolveStatus.FOUND if nodes else SolveStatus.NOT_FOUND, start, end,
                         path=[graph.anchor(i) for i in nodes],
                         start_node=start_node, end_node=end_node,
                         nodes_visited=expanded, pixel_size=graph.pixel_size)
    if result.found:
        logger.info("Path %s -> %s: %d hops, %d nodes expanded", start, end, result.hops, expanded)
    else:
        logger.info("No path %s -> %s after expanding %d nodes", start, end, expanded)
    return result


def path_turns(path):
    if len(path) <= 2:
        return list(path)
    turns = [path[0]]
    heading = None
    for k in range(1, len(path)):
        dx, dy = path[k][0] - path[k - 1][0], path[k][1] - path[k - 1][1]
        step = (int(np.sign(dx)), int(np.sign(dy)))
        if heading is not None and step != heading:
            turns.append(path[k - 1])
        heading = step
    turns.append(path[-1])
    return turns

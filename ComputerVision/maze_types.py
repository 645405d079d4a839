from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from maze_config import DetectionMethod
from maze_errors import EndpointUnresolved, PathNotFound

OPEN = True
WALL = False

Point = Tuple[int, int]


def freeze(array):
    array.flags.writeable = False
    return array


@dataclass(frozen=True)
class Node:
    index: int
    x: int
    y: int
    neighbors: Tuple[int, ...]

    @property
    def anchor(self):
        return (self.x, self.y)


class MazeGraph:
    """Sampled lattice of open blocks.

    Nodes live in a flat arena: ``anchors[i]`` is the (x, y) top-left corner of
    node ``i`` and ``adjacency[i]`` holds the indices of its axis neighbors.
    """

    def __init__(self, anchors, adjacency, pixel_size, origin, shape):
        self.anchors = freeze(np.asarray(anchors, dtype=np.int64).reshape(-1, 2))
        self.adjacency = [tuple(n) for n in adjacency]
        self.pixel_size = pixel_size
        self.origin = tuple(origin)
        self.shape = tuple(shape)
        self._index = {(int(x), int(y)): i for i, (x, y) in enumerate(self.anchors)}

    def __len__(self):
        return len(self.adjacency)

    def __repr__(self):
        return (f"MazeGraph(nodes={len(self)}, edges={self.edge_count()}, "
                f"pixel_size={self.pixel_size}, origin={self.origin})")

    @property
    def width(self):
        return self.shape[1]

    @property
    def height(self):
        return self.shape[0]

    def anchor(self, index):
        x, y = self.anchors[index]
        return (int(x), int(y))

    def neighbors(self, index):
        return self.adjacency[index]

    def index_of(self, anchor):
        return self._index.get((int(anchor[0]), int(anchor[1])))

    def node(self, index):
        x, y = self.anchor(index)
        return Node(index, x, y, self.adjacency[index])

    def nodes(self):
        for i in range(len(self)):
            yield self.node(i)

    def edge_count(self):
        return sum(len(n) for n in self.adjacency) // 2

    def is_symmetric(self):
        for i, neighbors in enumerate(self.adjacency):
            for j in neighbors:
                if i not in self.adjacency[j]:
                    return False
        return True


class SolveStatus(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ENDPOINT_UNRESOLVED = "endpoint_unresolved"


@dataclass
class SolveResult:
    status: SolveStatus
    start: Point
    end: Point
    path: List[Point] = field(default_factory=list)
    start_node: Optional[int] = None
    end_node: Optional[int] = None
    unresolved: Optional[str] = None
    nodes_visited: int = 0
    pixel_size: Optional[int] = None

    @property
    def found(self):
        return self.status is SolveStatus.FOUND

    @property
    def hops(self):
        return max(len(self.path) - 1, 0)

    def raise_for_status(self):
        if self.status is SolveStatus.ENDPOINT_UNRESOLVED:
            point = self.start if self.unresolved == "start" else self.end
            raise EndpointUnresolved(point, self.unresolved)
        if self.status is SolveStatus.NOT_FOUND:
            raise PathNotFound(self.start, self.end)
        return self


@dataclass(frozen=True)
class ProcessedImage:
    grayscale: np.ndarray
    filtered: np.ndarray
    mask: np.ndarray
    method: DetectionMethod

    @property
    def shape(self):
        return self.mask.shape

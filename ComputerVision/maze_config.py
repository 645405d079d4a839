import numbers
from dataclasses import dataclass, replace
from enum import Enum

from maze_errors import InvalidArgument

# === DEFAULTS ===
PIXEL_SIZE = 4
EDGE_THRESHOLD = 10
SIZE_CAP = 1500
MAX_SIDE = 800
PRE_BLUR = True
ANCHOR_AT_START = False


class DetectionMethod(Enum):
    EDGE_DETECT = "edge"
    CONTRAST_DETECT = "contrast"


@dataclass(frozen=True)
class SolverConfig:
    pixel_size: int = PIXEL_SIZE
    edge_threshold: int = EDGE_THRESHOLD
    max_side: int = MAX_SIDE
    size_cap: int = SIZE_CAP
    detection_method: DetectionMethod = DetectionMethod.EDGE_DETECT
    pre_blur: bool = PRE_BLUR
    anchor_at_start: bool = ANCHOR_AT_START

    def __post_init__(self):
        if isinstance(self.detection_method, str):
            object.__setattr__(self, "detection_method", DetectionMethod(self.detection_method))
        object.__setattr__(self, "pixel_size", check_pixel_size(self.pixel_size))
        if self.edge_threshold < 0:
            raise InvalidArgument(f"edge_threshold must be non-negative, got {self.edge_threshold}")
        if self.max_side < 1:
            raise InvalidArgument(f"max_side must be positive, got {self.max_side}")
        if self.size_cap < 1:
            raise InvalidArgument(f"size_cap must be positive, got {self.size_cap}")

    def with_pixel_size(self, pixel_size):
        return replace(self, pixel_size=pixel_size)


def check_pixel_size(pixel_size):
    if isinstance(pixel_size, bool) or not isinstance(pixel_size, numbers.Integral) or pixel_size < 1:
        raise InvalidArgument(f"pixel_size must be an integer >= 1, got {pixel_size!r}")
    return int(pixel_size)

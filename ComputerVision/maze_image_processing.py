import logging

import cv2
import numpy as np

from maze_config import DetectionMethod
from maze_errors import InvalidArgument
from maze_types import ProcessedImage, freeze

logger = logging.getLogger(__name__)

KERNEL_3 = np.array([
    [1, 2, 1],
    [2, 4, 2],
    [1, 2, 1],
], dtype=np.int64)
KERNEL_3_NORM = 16

KERNEL_5 = np.array([
    [1, 4, 7, 4, 1],
    [4, 16, 26, 16, 4],
    [7, 26, 41, 26, 7],
    [4, 16, 26, 16, 4],
    [1, 4, 7, 4, 1],
], dtype=np.int64)
KERNEL_5_NORM = 273


def load_image(image_path):
    image = cv2.imread(str(image_path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise FileNotFoundError(f"Could not load image: {image_path}")
    return image


def _check_not_empty(image):
    if image.ndim < 2 or image.shape[0] == 0 or image.shape[1] == 0:
        raise InvalidArgument(f"Image must be non-empty and 2-D, got shape {image.shape}")


def _as_grid(grid):
    grid = np.asarray(grid)
    _check_not_empty(grid)
    if grid.ndim != 2:
        raise InvalidArgument(f"Expected a single-channel grid, got shape {grid.shape}")
    return grid


def unpack_argb(packed):
    packed = np.asarray(packed, dtype=np.uint32)
    b = packed & 0xFF
    g = (packed >> 8) & 0xFF
    r = (packed >> 16) & 0xFF
    return np.dstack([b, g, r]).astype(np.uint8)


def grayscale(image):
    """Reduce a BGR, BGRA, packed ARGB or gray buffer to one 8-bit luminance channel."""
    image = np.asarray(image)
    _check_not_empty(image)
    if image.ndim == 2 and image.dtype in (np.uint32, np.int32):
        image = unpack_argb(image.view(np.uint32))

    if image.ndim == 2:
        gray = np.clip(image, 0, 255).astype(np.uint8)
    elif image.ndim == 3 and image.shape[2] == 1:
        gray = np.clip(image[:, :, 0], 0, 255).astype(np.uint8)
    elif image.ndim == 3 and image.shape[2] == 3:
        gray = cv2.cvtColor(np.array(image, dtype=np.uint8), cv2.COLOR_BGR2GRAY)
    elif image.ndim == 3 and image.shape[2] == 4:
        gray = cv2.cvtColor(np.array(image, dtype=np.uint8), cv2.COLOR_BGRA2GRAY)
    else:
        raise InvalidArgument(f"Unsupported image shape {image.shape}")
    return freeze(gray)


def _convolve_valid(grid, kernel, norm):
    grid = _as_grid(grid)
    k = kernel.shape[0]
    height, width = grid.shape
    if height < k or width < k:
        raise InvalidArgument(f"Grid {width}x{height} is smaller than the {k}x{k} kernel")
    out_h, out_w = height - k + 1, width - k + 1
    src = grid.astype(np.int64)
    acc = np.zeros((out_h, out_w), dtype=np.int64)
    for dy in range(k):
        for dx in range(k):
            acc += kernel[dy, dx] * src[dy:dy + out_h, dx:dx + out_w]
    return freeze((acc // norm).astype(np.uint8))


def gaussian_blur3(grid):
    return _convolve_valid(grid, KERNEL_3, KERNEL_3_NORM)


def gaussian_blur5(grid):
    return _convolve_valid(grid, KERNEL_5, KERNEL_5_NORM)


def _trunc_div(values, divisor):
    # integer division rounding toward zero
    return np.sign(values) * (np.abs(values) // divisor)


def edge_magnitude(grid):
    """Gradient magnitude from 3-row / 3-column difference-of-sums.

    Border pixels have no full neighbourhood and are left at 0.
    """
    grid = _as_grid(grid)
    height, width = grid.shape
    magnitude = np.zeros((height, width), dtype=np.int64)
    if height < 3 or width < 3:
        return freeze(magnitude)

    src = grid.astype(np.int64)
    top = src[:-2, :-2] + src[:-2, 1:-1] + src[:-2, 2:]
    bottom = src[2:, :-2] + src[2:, 1:-1] + src[2:, 2:]
    left = src[:-2, :-2] + src[1:-1, :-2] + src[2:, :-2]
    right = src[:-2, 2:] + src[1:-1, 2:] + src[2:, 2:]

    horiz = _trunc_div(top - bottom, 6)
    vert = _trunc_div(left - right, 6)
    magnitude[1:-1, 1:-1] = np.sqrt(horiz ** 2 + vert ** 2).astype(np.int64)
    return freeze(magnitude)


def edge_detect(grid, threshold):
    if threshold < 0:
        raise InvalidArgument(f"threshold must be non-negative, got {threshold}")
    magnitude = edge_magnitude(grid)
    height, width = magnitude.shape
    mask = np.zeros((height, width), dtype=bool)
    if height >= 3 and width >= 3:
        mask[1:-1, 1:-1] = magnitude[1:-1, 1:-1] < threshold
    logger.debug("edge_detect: %dx%d, threshold=%d, open=%d", width, height, threshold, int(mask.sum()))
    return freeze(mask)


def contrast_threshold(grid):
    grid = _as_grid(grid)
    return int(grid.astype(np.int64).sum()) // grid.size


def contrast_detect(grid):
    grid = _as_grid(grid)
    mean = contrast_threshold(grid)
    mask = grid > mean
    logger.debug("contrast_detect: mean=%d, open=%d of %d", mean, int(mask.sum()), mask.size)
    return freeze(mask)


def _area_resize(grid, width, height):
    return freeze(cv2.resize(np.array(grid, dtype=np.uint8), (width, height), interpolation=cv2.INTER_AREA))


def resize_to_max_side(grid, max_side):
    grid = _as_grid(grid)
    if max_side < 1:
        raise InvalidArgument(f"max_side must be positive, got {max_side}")
    height, width = grid.shape
    if height <= max_side and width <= max_side:
        raise InvalidArgument(f"Image {width}x{height} is already within {max_side}")
    if width >= height:
        new_w, new_h = max_side, max(1, int(height * max_side / width))
    else:
        new_w, new_h = max(1, int(width * max_side / height)), max_side
    logger.debug("resize_to_max_side: %dx%d -> %dx%d", width, height, new_w, new_h)
    return _area_resize(grid, new_w, new_h)


def resize_to(grid, width, height):
    grid = _as_grid(grid)
    if width < 1 or height < 1:
        raise InvalidArgument(f"Target size must be positive, got {width}x{height}")
    src_h, src_w = grid.shape
    if src_h <= height and src_w <= width:
        raise InvalidArgument(f"Image {src_w}x{src_h} is already within {width}x{height}")
    return _area_resize(grid, width, height)


def halve_until_below(grid, limit):
    grid = _as_grid(grid)
    if limit < 1:
        raise InvalidArgument(f"limit must be positive, got {limit}")
    height, width = grid.shape
    halvings = 0
    while max(height, width) > limit and min(height, width) >= 2:
        height, width = height // 2, width // 2
        grid = _area_resize(grid, width, height)
        halvings += 1
    if halvings == 0:
        return freeze(grid.copy())
    logger.debug("halve_until_below: %d halvings to %dx%d", halvings, width, height)
    return grid


def binarize_to_image(mask):
    return freeze(np.where(np.asarray(mask, dtype=bool), 255, 0).astype(np.uint8))


def process_image(image, config):
    gray = grayscale(image)
    filtered = gray
    if config.pre_blur:
        filtered = gaussian_blur5(gaussian_blur5(filtered))
    filtered = halve_until_below(filtered, config.size_cap)
    filtered = gaussian_blur3(filtered)
    mask = edge_detect(filtered, config.edge_threshold)
    return ProcessedImage(gray, filtered, mask, DetectionMethod.EDGE_DETECT)


def contrast_image(image, config):
    gray = grayscale(image)
    filtered = gray
    if max(gray.shape) > config.max_side:
        filtered = resize_to_max_side(gray, config.max_side)
    mask = contrast_detect(filtered)
    return ProcessedImage(gray, filtered, mask, DetectionMethod.CONTRAST_DETECT)


def detect(image, config):
    if config.detection_method is DetectionMethod.CONTRAST_DETECT:
        return contrast_image(image, config)
    return process_image(image, config)

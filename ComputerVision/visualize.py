import numpy as np
import cv2

import maze_image_processing as mip

START_COLOR = (0, 255, 0)
END_COLOR = (0, 0, 255)
PATH_COLOR = (255, 0, 0)
MARKER_SIZE = 10


def to_bgr(image):
    image = np.asarray(image)
    if image.dtype == bool:
        image = mip.binarize_to_image(image)
    if image.ndim == 2:
        return cv2.cvtColor(np.array(image, dtype=np.uint8), cv2.COLOR_GRAY2BGR)
    return np.array(image[:, :, :3], dtype=np.uint8)


def draw_marker(canvas, point, color, size=MARKER_SIZE):
    height, width = canvas.shape[:2]
    x, y = point
    canvas[max(y, 0):min(y + size, height), max(x, 0):min(x + size, width)] = color
    return canvas


def draw_path(image, path, start=None, end=None, pixel_size=1):
    """Return a BGR copy of ``image`` with the path through block centres and the endpoint markers."""
    canvas = to_bgr(image)
    half = pixel_size // 2
    if path:
        centres = np.array([(x + half, y + half) for x, y in path], dtype=np.int32)
        cv2.polylines(canvas, [centres.reshape(-1, 1, 2)], isClosed=False,
                      color=PATH_COLOR, thickness=max(1, pixel_size // 2))

    if start is not None:
        draw_marker(canvas, start, START_COLOR)
    if end is not None:
        draw_marker(canvas, end, END_COLOR)
    return canvas


def draw_result(processed, result):
    return draw_path(processed.mask, result.path, result.start, result.end,
                     result.pixel_size or 1)


def show(image, title="Maze Solution"):
    cv2.imshow(title, image)
    cv2.waitKey(0)
    cv2.destroyAllWindows()

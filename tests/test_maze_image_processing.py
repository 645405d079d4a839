import numpy as np
import pytest

import maze_image_processing as mip
from maze_config import DetectionMethod, SolverConfig
from maze_errors import InvalidArgument


def random_bgr(height=24, width=32, seed=0):
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)


# ============================================================
# grayscale
# ============================================================

def test_grayscale_keeps_dimensions():
    gray = mip.grayscale(random_bgr())
    assert gray.shape == (24, 32)
    assert gray.dtype == np.uint8


def test_grayscale_is_idempotent():
    once = mip.grayscale(random_bgr())
    twice = mip.grayscale(once)
    assert np.array_equal(once, twice)


def test_grayscale_output_is_read_only():
    gray = mip.grayscale(random_bgr())
    with pytest.raises(ValueError):
        gray[0, 0] = 1


def test_grayscale_of_neutral_colours_keeps_level():
    image = np.full((4, 4, 3), 128, dtype=np.uint8)
    assert np.all(mip.grayscale(image) == 128)


def test_grayscale_accepts_bgra_and_packed_argb():
    bgra = np.full((3, 5, 4), 200, dtype=np.uint8)
    assert np.all(mip.grayscale(bgra) == 200)

    packed = np.full((3, 5), 0xFF808080, dtype=np.uint32)
    assert np.all(mip.grayscale(packed) == 128)


def test_grayscale_accepts_signed_packed_argb():
    # 0xFF808080 as a signed 32-bit value, as Java getRGB returns it
    packed = np.full((3, 5), -0x7F7F80, dtype=np.int32)
    assert np.all(mip.grayscale(packed) == 128)

    mixed = np.array([[0xFF102030, 0x00FFFFFF]], dtype=np.uint32).view(np.int32)
    expected = mip.grayscale(mixed.view(np.uint32))
    assert np.array_equal(mip.grayscale(mixed), expected)


def test_unpack_argb_channel_order():
    packed = np.array([[0xFF102030]], dtype=np.uint32)
    bgr = mip.unpack_argb(packed)
    assert bgr[0, 0].tolist() == [0x30, 0x20, 0x10]


def test_grayscale_rejects_empty_image():
    with pytest.raises(InvalidArgument):
        mip.grayscale(np.zeros((0, 10), dtype=np.uint8))


# ============================================================
# blur
# ============================================================

def test_kernel_weights_sum_to_normalizer():
    assert mip.KERNEL_3.sum() == mip.KERNEL_3_NORM == 16
    assert mip.KERNEL_5.sum() == mip.KERNEL_5_NORM == 273


@pytest.mark.parametrize("blur, shrink", [(mip.gaussian_blur3, 2), (mip.gaussian_blur5, 4)])
def test_blur_uniform_image_unchanged_and_cropped(blur, shrink):
    grid = np.full((12, 10), 93, dtype=np.uint8)
    out = blur(grid)
    assert out.shape == (12 - shrink, 10 - shrink)
    assert np.all(out == 93)


def test_blur_does_not_touch_input():
    grid = np.arange(100, dtype=np.uint8).reshape(10, 10)
    before = grid.copy()
    out = mip.gaussian_blur3(grid)
    assert np.array_equal(grid, before)
    assert out is not grid
    assert not out.flags.writeable


def test_blur3_matches_hand_computed_value():
    grid = np.zeros((3, 3), dtype=np.uint8)
    grid[1, 1] = 160
    grid[0, 1] = 16
    out = mip.gaussian_blur3(grid)
    # (4 * 160 + 2 * 16) // 16
    assert out.shape == (1, 1)
    assert out[0, 0] == 42


def test_blur_rejects_grid_smaller_than_kernel():
    with pytest.raises(InvalidArgument):
        mip.gaussian_blur5(np.zeros((4, 10), dtype=np.uint8))


# ============================================================
# edge detection
# ============================================================

def test_edge_uniform_image_is_open_inside_and_wall_on_border():
    grid = np.full((8, 9), 170, dtype=np.uint8)
    assert np.all(mip.edge_magnitude(grid) == 0)

    mask = mip.edge_detect(grid, 1)
    assert mask.shape == grid.shape
    assert mask[1:-1, 1:-1].all()
    assert not mask[0, :].any()
    assert not mask[-1, :].any()
    assert not mask[:, 0].any()
    assert not mask[:, -1].any()


def test_edge_detect_marks_vertical_step():
    grid = np.zeros((6, 8), dtype=np.uint8)
    grid[:, 4:] = 255
    magnitude = mip.edge_magnitude(grid)
    # (0 - 3 * 255) / 6 truncated toward zero
    assert magnitude[2, 3] == 127
    mask = mip.edge_detect(grid, 10)
    assert not mask[2, 3]
    assert not mask[2, 4]
    assert mask[2, 1]
    assert mask[2, 6]


def test_edge_detect_threshold_zero_opens_nothing():
    grid = np.full((5, 5), 50, dtype=np.uint8)
    assert not mip.edge_detect(grid, 0).any()


def test_edge_detect_negative_threshold():
    with pytest.raises(InvalidArgument):
        mip.edge_detect(np.zeros((5, 5), dtype=np.uint8), -1)


# ============================================================
# contrast detection
# ============================================================

def test_contrast_threshold_is_truncated_mean():
    grid = np.array([[0, 1], [1, 1]], dtype=np.uint8)
    assert mip.contrast_threshold(grid) == 0
    assert mip.contrast_detect(grid).tolist() == [[False, True], [True, True]]


def test_contrast_pixels_equal_to_mean_are_walls():
    grid = np.array([[0, 10], [10, 20]], dtype=np.uint8)
    assert mip.contrast_threshold(grid) == 10
    assert mip.contrast_detect(grid).tolist() == [[False, False], [False, True]]


# ============================================================
# resize
# ============================================================

def test_resize_to_max_side_landscape_and_portrait():
    assert mip.resize_to_max_side(np.zeros((50, 100), dtype=np.uint8), 40).shape == (20, 40)
    assert mip.resize_to_max_side(np.zeros((90, 30), dtype=np.uint8), 45).shape == (45, 15)


def test_resize_keeps_uniform_level():
    out = mip.resize_to_max_side(np.full((64, 96), 77, dtype=np.uint8), 48)
    assert np.all(out == 77)


@pytest.mark.parametrize("shape", [(20, 30), (40, 40)])
def test_resize_rejects_image_already_within_target(shape):
    with pytest.raises(InvalidArgument):
        mip.resize_to_max_side(np.zeros(shape, dtype=np.uint8), 40)


def test_resize_to_explicit_dimensions():
    out = mip.resize_to(np.zeros((60, 80), dtype=np.uint8), 40, 30)
    assert out.shape == (30, 40)
    with pytest.raises(InvalidArgument):
        mip.resize_to(np.zeros((20, 20), dtype=np.uint8), 40, 30)


def test_halve_until_below():
    grid = np.full((1000, 3200), 9, dtype=np.uint8)
    out = mip.halve_until_below(grid, 1500)
    assert out.shape == (250, 800)
    assert np.all(out == 9)


def test_halve_until_below_small_image_is_copied():
    grid = np.zeros((10, 10), dtype=np.uint8)
    out = mip.halve_until_below(grid, 1500)
    assert out is not grid
    assert np.array_equal(out, grid)


# ============================================================
# pipelines
# ============================================================

def test_process_image_shapes():
    processed = mip.process_image(random_bgr(60, 80), SolverConfig())
    assert processed.grayscale.shape == (60, 80)
    assert processed.filtered.shape == (50, 70)
    assert processed.mask.shape == (50, 70)
    assert processed.mask.dtype == bool
    assert processed.method is DetectionMethod.EDGE_DETECT


def test_process_image_without_pre_blur():
    processed = mip.process_image(random_bgr(60, 80), SolverConfig(pre_blur=False))
    assert processed.mask.shape == (58, 78)


def test_contrast_image_resizes_over_max_side():
    image = np.zeros((100, 200, 3), dtype=np.uint8)
    image[:, 100:] = 255
    processed = mip.contrast_image(image, SolverConfig(max_side=50))
    assert processed.mask.shape == (25, 50)
    assert processed.mask[:, 30:].all()
    assert not processed.mask[:, :20].any()


def test_detect_dispatches_on_method():
    image = random_bgr(40, 40)
    edge = mip.detect(image, SolverConfig())
    contrast = mip.detect(image, SolverConfig(detection_method=DetectionMethod.CONTRAST_DETECT))
    assert edge.method is DetectionMethod.EDGE_DETECT
    assert contrast.method is DetectionMethod.CONTRAST_DETECT
    assert contrast.mask.shape == (40, 40)


def test_binarize_to_image():
    mask = np.array([[True, False]])
    assert mip.binarize_to_image(mask).tolist() == [[255, 0]]


def test_load_image_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        mip.load_image(tmp_path / "missing.png")

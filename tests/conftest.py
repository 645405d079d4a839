import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "ComputerVision"))

import numpy as np
import pytest


@pytest.fixture
def open_mask():
    def make(width, height):
        return np.ones((height, width), dtype=bool)
    return make


@pytest.fixture
def walled_mask():
    """5x5 mask with a wall row at y=2, open only at x=2."""
    mask = np.ones((5, 5), dtype=bool)
    mask[2, :] = False
    mask[2, 2] = True
    return mask


@pytest.fixture
def bisected_mask():
    mask = np.ones((5, 5), dtype=bool)
    mask[2, :] = False
    return mask

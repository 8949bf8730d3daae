"""
Shared fixtures. The example image is synthesised so that the tests need no data files:
smooth gradients with noise on top, so that JPEG compression visibly shrinks it.
"""

import sys
from os.path import abspath, dirname

import cv2
import numpy as np
import pytest

sys.path.append(dirname(dirname(dirname(abspath(__file__)))))

EXAMPLE_WIDTH  = 1200
EXAMPLE_HEIGHT = 800

def make_example(width=EXAMPLE_WIDTH, height=EXAMPLE_HEIGHT, seed=42):
    rng = np.random.default_rng(seed)
    (y, x) = np.mgrid[0:height, 0:width]
    base = np.dstack([x * 255 // width,
                      y * 255 // height,
                      (x + y) * 255 // (width + height)]).astype(np.int16)
    noise = rng.integers(-40, 41, size=(height, width, 3))
    bgr = np.clip(base + noise, 0, 255).astype(np.uint8)
    return cv2.cvtColor(bgr, cv2.COLOR_BGR2BGRA)


@pytest.fixture
def example():
    return make_example()


@pytest.fixture
def small_example():
    return make_example(width=120, height=80, seed=7)

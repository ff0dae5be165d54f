"""
Conftest: shared fixtures for all Wraith test modules.

1. Synthetic frames: uniform and split-brightness test frames
2. Seeded sketches: deterministic, small canvases for fast tests
"""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from PIL import Image

from core.sketch import Sketch

# Small enough to be fast, large enough to hold the whole figure
FIGURE_W = 200
FIGURE_H = 400


def make_uniform_frame(value=200, width=120, height=90):
    """Flat gray frame."""
    return np.full((height, width, 3), value, dtype=np.uint8)


def make_split_frame(dark=50, bright=220, width=120, height=90):
    """Left half dark (figure-like), right half bright (background-like)."""
    frame = np.full((height, width, 3), bright, dtype=np.uint8)
    frame[:, : width // 2] = dark
    return frame


@pytest.fixture
def sketch():
    """Seeded sketch at figure-test size, already set up."""
    s = Sketch(width=FIGURE_W, height=FIGURE_H, seed=7)
    assert s.setup(), f"setup failed: {s.error}"
    return s


@pytest.fixture
def tiny_sketch():
    """Seeded 120x160 sketch for render/CLI tests."""
    s = Sketch(width=120, height=160, seed=3)
    assert s.setup(), f"setup failed: {s.error}"
    return s


def load_png(path):
    """Read a written frame back as (H, W, 3) uint8 RGB."""
    return np.array(Image.open(str(path)).convert("RGB"))

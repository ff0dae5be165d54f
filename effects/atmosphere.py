"""
Wraith — Atmospheric Post Effects
Vignette, figure grain, and an overlay color wash.

Each effect is (frame: np.ndarray, **params) -> np.ndarray on (H, W, 3)
uint8 RGB frames and never modifies its input.
"""

import math

import numpy as np

from core.canvas import Canvas

SEED_MODULUS = 2 ** 32   # RandomState seeds must fit in 32 bits


def vignette(frame: np.ndarray, time: float = 0.0, intensity: float = 0.75,
             frame_index: int = 0) -> np.ndarray:
    """Soft dark falloff toward the edges, breathing slowly with time.

    Args:
        frame: (H, W, 3) uint8 RGB array.
        time: Global animation time.
        intensity: Emotional intensity (0.5-1.0). Higher = darker edges.

    Returns:
        Vignetted frame.
    """
    h, w = frame.shape[:2]
    inner = 150.0 + math.sin(time) * 5.0
    outer = 400.0 + math.sin(time * 0.5) * 10.0
    max_opacity = 0.08 + intensity * 0.04

    canvas = Canvas.from_array(frame)
    canvas.radial_gradient(w / 2.0, h / 2.0, inner, outer, [
        (0.0, (0, 0, 0, 0.0)),
        (0.7, (0, 0, 0, max_opacity * 0.3)),
        (1.0, (0, 0, 0, max_opacity)),
    ])
    return canvas.pixels


def figure_grain(frame: np.ndarray, intensity: float = 0.75, threshold: float = 180,
                 amount: float = 6.0, seed: int | None = None,
                 frame_index: int = 0) -> np.ndarray:
    """Film-like grain on dark pixels only, leaving the pale ground clean.

    Each affected pixel gets one uniform offset in [-amount, amount) * intensity,
    applied equally to R, G and B.

    Args:
        frame: (H, W, 3) uint8 RGB array.
        intensity: Emotional intensity, scales the grain.
        threshold: Mean RGB brightness below which a pixel counts as figure.
        amount: Maximum grain offset before intensity scaling.
        seed: Base seed (None = fresh grain every call).
        frame_index: Added to the seed so seeded grain still moves per frame.

    Returns:
        Grainy frame.
    """
    rng = np.random.RandomState(None if seed is None else (seed + frame_index) % SEED_MODULUS)
    dark = frame.sum(axis=2, dtype=np.uint16) < threshold * 3
    result = frame.astype(np.int16)
    offsets = rng.uniform(-amount, amount, int(dark.sum())) * intensity
    result[dark] += np.round(offsets).astype(np.int16)[:, np.newaxis]
    return np.clip(result, 0, 255).astype(np.uint8)


def emotional_glow(frame: np.ndarray, time: float = 0.0, intensity: float = 0.75,
                   frame_index: int = 0) -> np.ndarray:
    """Faint overlay-blended warm wash whose hue drifts with time."""
    canvas = Canvas.from_array(frame)
    canvas.blend_mode("overlay")
    canvas.wash(
        200 + math.sin(time) * 8,
        200 + math.sin(time * 1.1) * 8,
        190 + math.sin(time * 1.2) * 8,
        intensity * 0.04,
    )
    return canvas.pixels

"""
Wraith — Flow Field
Grid of time-varying direction vectors sampled from smooth noise.

The grid is regenerated every frame. Each cell holds a vector of fixed
magnitude (particle_speed) whose angle comes from 3D noise plus a slow
sinusoidal ripple across the grid.
"""

import math

import numpy as np

from core.noise import PerlinNoise
from core.vector import Vec2

DEFAULT_RESOLUTION = 20
PARTICLE_SPEED = 0.15
CELL_STEP = 0.1       # noise-space distance between neighbouring cells
TIME_SCALE = 0.015    # noise-space z per unit of global time
RIPPLE_RATE = 0.08
RIPPLE_AMOUNT = 0.3


class FlowField:
    """Velocity grid of shape (rows, cols, 2), indexed [row, col]."""

    def __init__(self, width: int, height: int, resolution: int = DEFAULT_RESOLUTION,
                 noise: PerlinNoise | None = None, particle_speed: float = PARTICLE_SPEED):
        if resolution < 1:
            raise ValueError(f"resolution must be >= 1, got {resolution}")
        self.resolution = int(resolution)
        self.particle_speed = particle_speed
        self.noise = noise if noise is not None else PerlinNoise()
        self.resize(width, height)

    def resize(self, width: int, height: int):
        """Reallocate the grid for a new canvas size. Vectors reset to zero."""
        self.cols = max(1, math.ceil(width / self.resolution))
        self.rows = max(1, math.ceil(height / self.resolution))
        self.field = np.zeros((self.rows, self.cols, 2), dtype=np.float64)
        yy, xx = np.mgrid[0:self.rows, 0:self.cols].astype(np.float64)
        self._xx = xx
        self._yy = yy

    def update(self, time: float):
        xx, yy = self._xx, self._yy
        n = self.noise(xx * CELL_STEP, yy * CELL_STEP, time * TIME_SCALE)
        angle = (n * 2.0 * np.pi * 2.0
                 + np.sin(time * RIPPLE_RATE + xx * CELL_STEP + yy * CELL_STEP) * RIPPLE_AMOUNT)
        self.field[:, :, 0] = np.cos(angle) * self.particle_speed
        self.field[:, :, 1] = np.sin(angle) * self.particle_speed

    def get_force(self, x: float, y: float, intensity: float = 1.0) -> Vec2:
        """Force at canvas position (x, y), scaled by intensity.

        Positions outside the canvas are clamped to the nearest edge cell.
        Returns a new vector; the field is never aliased.
        """
        col = int(math.floor(min(max(x / self.resolution, 0), self.cols - 1)))
        row = int(math.floor(min(max(y / self.resolution, 0), self.rows - 1)))
        fx, fy = self.field[row, col]
        return Vec2(fx, fy).mult(intensity)

    def get_forces(self, xs, ys, intensity: float = 1.0) -> np.ndarray:
        """Vectorized get_force for arrays of positions. Returns (N, 2)."""
        cols = np.floor(np.clip(np.asarray(xs, dtype=np.float64) / self.resolution,
                                0, self.cols - 1)).astype(np.int64)
        rows = np.floor(np.clip(np.asarray(ys, dtype=np.float64) / self.resolution,
                                0, self.rows - 1)).astype(np.int64)
        return self.field[rows, cols] * intensity

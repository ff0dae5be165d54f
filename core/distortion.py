"""
Wraith — Distortion Field
A fixed bank of sinusoidal oscillators producing per-point offsets.

Parameters are drawn once at construction and never change, so the
figure breathes with the same character for the whole run.
"""

from dataclasses import dataclass

import numpy as np

from core.vector import Vec2

OSCILLATOR_COUNT = 8
FREQUENCY_RANGE = (0.002, 0.003)
AMPLITUDE_RANGE = (1.5, 3.0)
SPEED_RANGE = (0.0005, 0.0008)


@dataclass(frozen=True)
class Oscillator:
    frequency: float
    amplitude: float
    phase: float
    speed: float


class DistortionField:
    """Sum of oscillators evaluated at a point and time.

    dx = sin(x * f + t * s + p) * a
    dy = cos(y * f + t * s + p + pi/4) * a
    """

    def __init__(self, count: int = OSCILLATOR_COUNT, seed=None):
        if count < 1:
            raise ValueError(f"count must be >= 1, got {count}")
        rng = np.random.RandomState(seed)
        self.oscillators = tuple(
            Oscillator(
                frequency=float(rng.uniform(*FREQUENCY_RANGE)),
                amplitude=float(rng.uniform(*AMPLITUDE_RANGE)),
                phase=float(rng.uniform(0.0, 2.0 * np.pi)),
                speed=float(rng.uniform(*SPEED_RANGE)),
            )
            for _ in range(count)
        )
        self._freq = np.array([o.frequency for o in self.oscillators])
        self._amp = np.array([o.amplitude for o in self.oscillators])
        self._phase = np.array([o.phase for o in self.oscillators])
        self._speed = np.array([o.speed for o in self.oscillators])

    def __len__(self):
        return len(self.oscillators)

    @property
    def max_offset(self) -> float:
        """Upper bound on |dx| and |dy|."""
        return float(self._amp.sum())

    def evaluate(self, x: float, y: float, time: float) -> Vec2:
        shared = time * self._speed + self._phase
        dx = np.sin(x * self._freq + shared) * self._amp
        dy = np.cos(y * self._freq + shared + np.pi / 4) * self._amp
        return Vec2(dx.sum(), dy.sum())

    __call__ = evaluate

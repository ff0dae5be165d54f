"""
Wraith — Animation State
Frame counter, global time, and the emotional intensity scalar.

Intensity drifts between 0.5 and 1.0 on a slow sine of time. Pointer
movement nudges it upward; the nudge is kept as a small boost that
decays over the following frames so it is visible on screen.
"""

import math

from core.vector import constrain, dist, remap

TIME_STEP = 0.008           # global time per frame
INTENSITY_MIN = 0.5
INTENSITY_MAX = 1.0
INTENSITY_DRIFT_RATE = 0.3  # sine frequency applied to global time
POINTER_SENSITIVITY = 0.0008
BOOST_DECAY = 0.9           # per-frame decay of the pointer boost
MAX_BOOST = 0.5


class AnimationState:
    """Process-wide scalars read and written once per frame."""

    def __init__(self, time_step: float = TIME_STEP):
        self.time_step = time_step
        self.frame_count = 0
        self.time = 0.0
        self.intensity = INTENSITY_MIN
        self.pointer_boost = 0.0

    def baseline_intensity(self) -> float:
        return remap(math.sin(self.time * INTENSITY_DRIFT_RATE), -1.0, 1.0,
                     INTENSITY_MIN, INTENSITY_MAX)

    def advance(self):
        """Step to the next frame and recompute time and intensity."""
        self.frame_count += 1
        self.time = self.frame_count * self.time_step
        self.intensity = constrain(self.baseline_intensity() + self.pointer_boost,
                                   INTENSITY_MIN, INTENSITY_MAX)
        self.pointer_boost *= BOOST_DECAY
        if self.pointer_boost < 1e-4:
            self.pointer_boost = 0.0

    def pointer_moved(self, x: float, y: float, prev_x: float, prev_y: float) -> float:
        """Nudge intensity by pointer speed (pixels moved since last event).

        Returns:
            The new intensity.
        """
        nudge = dist(x, y, prev_x, prev_y) * POINTER_SENSITIVITY
        self.intensity = constrain(self.intensity + nudge, INTENSITY_MIN, INTENSITY_MAX)
        self.pointer_boost = min(MAX_BOOST, self.pointer_boost + nudge)
        return self.intensity

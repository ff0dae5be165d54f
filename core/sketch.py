"""
Wraith — Sketch
Owns the animation state and renders one frame per draw() call.

Lifecycle:
    sketch = Sketch(seed=7)
    sketch.setup()
    while sketch.looping:
        frame = sketch.draw()   # (H, W, 3) uint8, or None once halted

Any failure in setup() or draw() is reported to stderr and halts the
sketch for good. There are no retries; call loop() to resume explicitly.
"""

import math
import sys

import numpy as np

from core.canvas import Canvas
from core.distortion import DistortionField, OSCILLATOR_COUNT
from core.figure import FrameContext, draw_main_figure, draw_shadow_layer
from core.flowfield import DEFAULT_RESOLUTION, FlowField
from core.noise import PerlinNoise
from core.palette import COLORS
from core.safety import clamp_canvas_size, validate_canvas_size, validate_seed
from core.state import AnimationState
from effects import apply_chain, atmosphere_chain

DEFAULT_WIDTH = 600
DEFAULT_HEIGHT = 800
DEFAULT_FPS = 30


class Sketch:
    """The ghost figure animation.

    Args:
        width, height: Canvas size in pixels.
        fps: Target frame rate for the host loop.
        seed: Seeds noise, distortion and grain. None = different every run.
        atmosphere: Apply the post-effect chain (vignette, grain, glow).
    """

    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT,
                 fps: int = DEFAULT_FPS, seed: int | None = None, atmosphere: bool = True):
        self.width = width
        self.height = height
        self.fps = fps
        self.seed = seed
        self.atmosphere = atmosphere

        self.state = AnimationState()
        self.canvas = None
        self.flowfield = None
        self.distortion = None

        self.looping = True
        self.error = None

    # --- Lifecycle ---------------------------------------------------------------

    def setup(self) -> bool:
        """Build canvas, flow field and distortion field. Returns success."""
        try:
            validate_canvas_size(self.width, self.height)
            validate_seed(self.seed)
            self.canvas = Canvas(self.width, self.height)
            noise = PerlinNoise(seed=self.seed)
            self.flowfield = FlowField(self.width, self.height, DEFAULT_RESOLUTION, noise=noise)
            self.distortion = DistortionField(OSCILLATOR_COUNT, seed=self.seed)
        except Exception as e:
            self._halt("Setup failed", e)
            return False
        return True

    def draw(self) -> np.ndarray | None:
        """Advance one frame and render it. Returns None when halted."""
        if not self.looping:
            return None

        try:
            if self.canvas is None or self.flowfield is None or self.distortion is None:
                self._halt("Critical components not initialized")
                return None

            state = self.state
            state.advance()
            t = state.time

            canvas = self.canvas
            canvas.reset_matrix()
            base = COLORS["BACKGROUND"]
            canvas.background(
                base[0] + math.sin(t) * 2,
                base[1] + math.sin(t * 1.1) * 2,
                base[2] + math.sin(t * 1.2) * 2,
            )

            self.flowfield.update(t)
            canvas.translate(canvas.width / 2, canvas.height / 2)

            frame = FrameContext(time=t, intensity=state.intensity,
                                 distortion=self.distortion, flowfield=self.flowfield)
            draw_shadow_layer(canvas, frame)
            draw_main_figure(canvas, frame)
            self.add_atmospheric_effects()

            return canvas.pixels.copy()
        except Exception as e:
            self._halt("Draw cycle failed", e)
            return None

    def add_atmospheric_effects(self):
        if not self.atmosphere:
            return
        state = self.state
        chain = atmosphere_chain(state.time, state.intensity, seed=self.seed)
        pixels = apply_chain(self.canvas.load_pixels(), chain, frame_index=state.frame_count)
        self.canvas.update_pixels(pixels)

    def no_loop(self):
        self.looping = False

    def loop(self):
        """Resume after no_loop() or a halt. Clears the recorded error."""
        self.error = None
        self.looping = True

    def _halt(self, message: str, error: Exception | None = None):
        self.error = error if error is not None else RuntimeError(message)
        if error is not None:
            print(f"  ERROR: {message}: {type(error).__name__}: {error}", file=sys.stderr)
        else:
            print(f"  ERROR: {message}", file=sys.stderr)
        self.no_loop()

    # --- Input -------------------------------------------------------------------

    def mouse_moved(self, x: float, y: float, prev_x: float, prev_y: float) -> float:
        """Pointer moved from (prev_x, prev_y) to (x, y). Returns new intensity."""
        return self.state.pointer_moved(x, y, prev_x, prev_y)

    def window_resized(self, window_width: float, window_height: float) -> tuple[int, int]:
        """Shrink the canvas to fit a resized window. Returns the new canvas size."""
        width, height = clamp_canvas_size(window_width, window_height)
        self.width, self.height = width, height
        if self.canvas is not None:
            self.canvas.resize(width, height)
        if self.flowfield is not None:
            self.flowfield.resize(width, height)
        return width, height

    # --- Accessors ----------------------------------------------------------------

    @property
    def frame_count(self) -> int:
        return self.state.frame_count

    @property
    def intensity(self) -> float:
        return self.state.intensity

    def seek(self, frame_count: int):
        """Jump the clock so the next draw() renders frame_count + 1.

        The pointer boost is dropped, so seeking gives the same frame a
        fresh run would at that index.
        """
        if frame_count < 0:
            raise ValueError(f"frame_count must be >= 0, got {frame_count}")
        self.state.frame_count = int(frame_count)
        self.state.time = frame_count * self.state.time_step
        self.state.pointer_boost = 0.0

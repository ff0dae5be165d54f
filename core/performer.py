"""
Wraith — Live Window

Real-time display of the sketch in a pygame window at a fixed frame rate.
Pointer movement feeds the intensity scalar; resizing the window shrinks
the canvas to fit (never past the design size).

Hotkeys:
  Space      = play/pause
  H          = toggle HUD (frame, fps, intensity)
  S          = save a snapshot PNG to the working directory
  Shift+Q    = quit (modifier required)
  Esc        = exit (double-tap within 500ms)
"""

import sys
import time
from pathlib import Path

try:
    import pygame
except ImportError:
    pygame = None

from core.palette import COLORS
from core.safety import validate_fps
from core.video_io import save_frame


class LiveEngine:
    """Drives a Sketch from the pygame event loop.

    Loop order:
      1. Handle events (pointer, resize, keys) before drawing
      2. Draw the next frame (unless paused or halted)
      3. Blit centered in the window + HUD
      4. Tick the clock at the sketch's fps
    """

    def __init__(self, sketch, show_hud: bool = False):
        if pygame is None:
            raise RuntimeError("pygame required for live mode. Install: pip install pygame")
        validate_fps(sketch.fps)
        self.sketch = sketch
        self.fps = sketch.fps
        self.show_hud = show_hud
        self.playing = True
        self.running = True

        self._frame = None
        self._screen = None
        self._clock = None
        self._font = None
        self._window_size = (sketch.width, sketch.height)
        self._last_esc_time = 0.0
        self._halt_reported = False

    def init_display(self):
        """Initialize pygame window at the canvas size."""
        pygame.init()
        self._screen = pygame.display.set_mode(self._window_size, pygame.RESIZABLE)
        pygame.display.set_caption("Wraith")
        self._clock = pygame.time.Clock()
        self._font = pygame.font.SysFont("monospace", 14)

    def handle_events(self, events):
        """Process one batch of pygame events."""
        for event in events:
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.MOUSEMOTION:
                x, y = event.pos
                dx, dy = event.rel
                self.sketch.mouse_moved(x, y, x - dx, y - dy)

            elif event.type == pygame.VIDEORESIZE:
                size = (event.w, event.h)
                if size != self._window_size:
                    self._window_size = size
                    w, h = self.sketch.window_resized(event.w, event.h)
                    self._frame = None
                    print(f"  [RESIZE] window {event.w}x{event.h} -> canvas {w}x{h}")

            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key, pygame.key.get_mods())

    def _handle_key(self, key, mods):
        # Esc = double-tap to exit
        if key == pygame.K_ESCAPE:
            now = time.monotonic()
            if now - self._last_esc_time < 0.5:
                self.running = False
            else:
                self._last_esc_time = now
                print("  [Press Esc again to exit]")

        # Shift+Q = quit (modifier required)
        elif key == pygame.K_q and (mods & pygame.KMOD_SHIFT):
            self.running = False

        elif key == pygame.K_SPACE:
            self.playing = not self.playing
            print(f"  [{'PLAYING' if self.playing else 'PAUSED'}]")

        elif key == pygame.K_h:
            self.show_hud = not self.show_hud

        elif key == pygame.K_s:
            self.save_snapshot()

    def save_snapshot(self, directory: str = ".") -> Path | None:
        if self._frame is None:
            print("  [SNAPSHOT] nothing rendered yet")
            return None
        path = Path(directory) / f"wraith_{self.sketch.frame_count:06d}.png"
        save_frame(self._frame, path)
        print(f"  [SNAPSHOT] {path}")
        return path

    def step(self):
        """Render one frame if playing. Returns the frame or None."""
        if not self.playing:
            return None
        frame = self.sketch.draw()
        if frame is None:
            if not self._halt_reported:
                print("  [HALTED] animation stopped; close the window to exit", file=sys.stderr)
                self._halt_reported = True
            return None
        self._frame = frame
        return frame

    def _render_to_screen(self):
        self._screen.fill(COLORS["BACKGROUND"])
        if self._frame is not None:
            surface = pygame.surfarray.make_surface(self._frame.swapaxes(0, 1))
            win_w, win_h = self._screen.get_size()
            x = (win_w - surface.get_width()) // 2
            y = (win_h - surface.get_height()) // 2
            self._screen.blit(surface, (x, y))
        if self.show_hud:
            self._draw_hud()
        pygame.display.flip()

    def _draw_hud(self):
        """Draw minimal status overlay. Uses cached font for performance."""
        sketch = self.sketch
        status = "HALTED" if not sketch.looping else ("PLAY" if self.playing else "PAUSE")
        lines = [
            f"F:{sketch.frame_count}  {self._clock.get_fps():.1f} fps  [{status}]",
            f"intensity {sketch.intensity:.3f}",
        ]
        y = 10
        for line in lines:
            surf = self._font.render(line, True, (40, 40, 40))
            self._screen.blit(surf, (10, y))
            y += 18

    def run(self):
        """Main loop. Returns the number of frames drawn."""
        if not self.sketch.setup():
            return 0
        self.init_display()

        print("\n  Wraith Live")
        print("  " + "─" * 40)
        print(f"  Canvas: {self.sketch.width}x{self.sketch.height} @ {self.fps} fps")
        print("  Space=Play/Pause  H=HUD  S=Snapshot  Shift+Q / Esc(x2)=Exit")
        print()

        try:
            while self.running:
                self.handle_events(pygame.event.get())
                self.step()
                self._render_to_screen()
                self._clock.tick(self.fps)
        except KeyboardInterrupt:
            print("\n  [INTERRUPTED]")
        finally:
            self._cleanup()
        return self.sketch.frame_count

    def _cleanup(self):
        if pygame and pygame.get_init():
            pygame.quit()

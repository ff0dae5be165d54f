"""
Wraith — Safety & Resource Guards
Checks run before allocating canvases or starting a render.
Prevents absurd canvas sizes, runaway renders, and unknown output formats.
"""

import os
import signal
from pathlib import Path

# --- Configurable Limits ---
MAX_CANVAS_WIDTH = 600     # Canvas never grows past the design size
MAX_CANVAS_HEIGHT = 800
WINDOW_FILL = 0.8          # Fraction of the window the canvas may occupy on resize
MAX_RENDER_FRAMES = 9000   # 5 minutes at 30fps
MAX_FPS = 120
MAX_CHAIN_DEPTH = 10       # Maximum post effects in a chain
MAX_SEED = 2 ** 32 - 1     # numpy RandomState seed range
TIMEOUT_SEC = 600          # 10 minute offline render timeout
VIDEO_EXTENSIONS = {".mp4", ".mov", ".mkv", ".webm"}
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg"}


class SafetyError(Exception):
    """Raised when a preflight check fails."""
    pass


def clamp_canvas_size(window_width: float, window_height: float) -> tuple[int, int]:
    """Canvas size for a resized window: 80% of the window, capped at the design size.

    Returns:
        (width, height), each at least 1.
    """
    width = min(window_width * WINDOW_FILL, MAX_CANVAS_WIDTH)
    height = min(window_height * WINDOW_FILL, MAX_CANVAS_HEIGHT)
    return max(1, int(width)), max(1, int(height))


def validate_canvas_size(width: int, height: int) -> None:
    """Raises SafetyError if the requested canvas is empty or oversized."""
    for name, value, limit in (("width", width, MAX_CANVAS_WIDTH), ("height", height, MAX_CANVAS_HEIGHT)):
        if not isinstance(value, int) or isinstance(value, bool):
            raise SafetyError(f"Canvas {name} must be an integer, got {value!r}")
        if value < 1 or value > limit:
            raise SafetyError(f"Canvas {name} {value} out of range (1-{limit})")


def validate_chain_depth(effects_list: list) -> None:
    """Check that effect chain isn't too deep.

    Raises:
        SafetyError: If chain exceeds MAX_CHAIN_DEPTH.
    """
    if len(effects_list) > MAX_CHAIN_DEPTH:
        raise SafetyError(
            f"Effect chain has {len(effects_list)} effects, max is {MAX_CHAIN_DEPTH}."
        )


def validate_render_request(frames: int, fps: int) -> None:
    """Raises SafetyError for non-positive or excessive frame counts / rates."""
    if frames < 1:
        raise SafetyError(f"Need at least 1 frame, got {frames}")
    if frames > MAX_RENDER_FRAMES:
        raise SafetyError(
            f"{frames} frames exceeds the {MAX_RENDER_FRAMES} frame limit. "
            f"Render a shorter clip."
        )
    validate_fps(fps)


def validate_fps(fps: int) -> None:
    """Raises SafetyError unless 1 <= fps <= MAX_FPS."""
    if fps < 1 or fps > MAX_FPS:
        raise SafetyError(f"fps {fps} out of range (1-{MAX_FPS})")


def validate_seed(seed) -> None:
    """Raises SafetyError unless seed is None or an int in [0, MAX_SEED]."""
    if seed is None:
        return
    if not isinstance(seed, int) or isinstance(seed, bool):
        raise SafetyError(f"Seed must be an integer, got {seed!r}")
    if seed < 0 or seed > MAX_SEED:
        raise SafetyError(f"Seed {seed} out of range (0-{MAX_SEED})")


def output_kind(output_path: str) -> str:
    """Classify a render destination.

    Returns:
        'video' for a known video extension, 'image' for a still image,
        'sequence' for a directory (existing or extension-less path).

    Raises:
        SafetyError: For unsupported extensions or a file's parent that is not a directory.
    """
    path = Path(output_path)
    ext = path.suffix.lower()
    if path.is_dir() or not ext:
        return "sequence"
    parent = path.parent if str(path.parent) else Path(".")
    if parent.exists() and not parent.is_dir():
        raise SafetyError(f"Output parent is not a directory: {parent}")
    if ext in VIDEO_EXTENSIONS:
        return "video"
    if ext in IMAGE_EXTENSIONS:
        return "image"
    raise SafetyError(
        f"Output type '{ext}' not supported. "
        f"Supported: {', '.join(sorted(VIDEO_EXTENSIONS | IMAGE_EXTENSIONS))} or a directory"
    )


def set_processing_timeout(seconds: int = TIMEOUT_SEC) -> None:
    """Set an alarm-based timeout for processing. Unix only.

    Call this before starting a long operation.
    The alarm will raise TimeoutError if processing exceeds the limit.
    """
    if not hasattr(signal, "SIGALRM"):
        return  # no SIGALRM on Windows

    def _timeout_handler(signum, frame):
        raise TimeoutError(
            f"Render exceeded {seconds}s timeout. "
            f"Try fewer frames or a smaller canvas."
        )

    signal.signal(signal.SIGALRM, _timeout_handler)
    signal.alarm(seconds)


def clear_processing_timeout() -> None:
    """Clear a previously set processing timeout."""
    if hasattr(signal, "SIGALRM"):
        signal.alarm(0)


def ensure_parent_dir(output_path: str) -> Path:
    """Create the parent directory of an output file. Returns the Path."""
    path = Path(os.path.expanduser(str(output_path)))
    path.parent.mkdir(parents=True, exist_ok=True)
    return path

"""
Wraith — Frame & Video Output
Writes rendered frames as images, or streams them into an FFmpeg encoder.
Uses FFmpeg subprocess for codec work.
"""

import shutil
import subprocess
from pathlib import Path

import numpy as np
from PIL import Image


def get_ffmpeg():
    """Find FFmpeg binary."""
    path = shutil.which("ffmpeg")
    if not path:
        raise RuntimeError("FFmpeg not found. Install with: brew install ffmpeg (or apt install ffmpeg)")
    return path


def save_frame(array: np.ndarray, output_path: str):
    """Save a numpy array (H, W, 3) as an image (format from the extension)."""
    img = Image.fromarray(np.clip(array, 0, 255).astype(np.uint8))
    img.save(str(output_path))


def sequence_path(output_dir: str, frame_number: int) -> Path:
    """Path of one frame in a PNG sequence: frame_000001.png, ..."""
    return Path(output_dir) / f"frame_{frame_number:06d}.png"


def open_output_pipe(output_path: str, width: int, height: int, fps: float = 30,
                     crf: int = 18) -> subprocess.Popen:
    """Start an FFmpeg process that encodes raw RGB frames from stdin.

    Write frame.tobytes() for each (height, width, 3) uint8 frame, then
    close stdin and wait(). Odd dimensions are padded to even for yuv420p.
    """
    cmd = [
        get_ffmpeg(),
        "-y",
        "-loglevel", "error",
        "-f", "rawvideo",
        "-vcodec", "rawvideo",
        "-s", f"{width}x{height}",
        "-pix_fmt", "rgb24",
        "-r", str(fps),
        "-i", "-",
        "-vf", "pad=ceil(iw/2)*2:ceil(ih/2)*2",
        "-c:v", "libx264",
        "-crf", str(crf),
        "-preset", "medium",
        "-pix_fmt", "yuv420p",
        str(output_path),
    ]
    return subprocess.Popen(cmd, stdin=subprocess.PIPE, stdout=subprocess.DEVNULL,
                            stderr=subprocess.PIPE)


def close_output_pipe(pipe: subprocess.Popen, timeout: float = 60) -> None:
    """Flush and finish an encoder started by open_output_pipe.

    Raises:
        RuntimeError: If FFmpeg exits non-zero.
    """
    if pipe.stdin and not pipe.stdin.closed:
        pipe.stdin.close()
    pipe.wait(timeout=timeout)
    if pipe.returncode != 0:
        err = pipe.stderr.read().decode(errors="replace") if pipe.stderr else ""
        raise RuntimeError(f"FFmpeg exited with code {pipe.returncode}: {err.strip()[:500]}")

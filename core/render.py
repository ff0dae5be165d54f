"""
Wraith — Offline Render Pipeline

Runs the sketch headless and writes the frames out:
  - a single still (PNG/JPEG)
  - a PNG sequence in a directory
  - an H.264 video through FFmpeg

The sketch clock is frame-based, so an offline render of N frames is
identical to the first N frames of a live session without pointer input.
"""

import time
from pathlib import Path

from core.safety import (
    SafetyError, clear_processing_timeout, ensure_parent_dir,
    set_processing_timeout, validate_render_request,
)
from core.video_io import close_output_pipe, open_output_pipe, save_frame, sequence_path


def render_frames(sketch, frames: int, start: int = 0):
    """Yield (frame_number, frame) for `frames` consecutive frames.

    frame_number is 1-based like the sketch's frame counter. Stops early if
    the sketch halts.
    """
    if start:
        sketch.seek(start)
    for _ in range(frames):
        frame = sketch.draw()
        if frame is None:
            return
        yield sketch.frame_count, frame


def _report(done: int, total: int, start_time: float, progress_callback=None):
    if progress_callback:
        progress_callback(done, total)
    elif done % 30 == 0 or done == total:
        elapsed = time.time() - start_time
        pct = done / total * 100
        fps_actual = done / max(elapsed, 0.001)
        eta = (total - done) / max(fps_actual, 0.001)
        print(f"\r  Rendering: {pct:.1f}% ({done}/{total}) "
              f"@ {fps_actual:.1f} fps, ETA {eta:.0f}s", end="", flush=True)


def _check_halt(sketch, written: int, frames: int):
    if written < frames:
        raise RuntimeError(
            f"Sketch halted after {written} of {frames} frames: {sketch.error}"
        )


def render_still(sketch, frame_number: int, output_path: str) -> Path:
    """Render the sketch at frame_number (1-based) and save it as an image."""
    if frame_number < 1:
        raise SafetyError(f"Frame number must be >= 1, got {frame_number}")
    output_path = ensure_parent_dir(output_path)
    sketch.seek(frame_number - 1)
    frame = sketch.draw()
    if frame is None:
        raise RuntimeError(f"Sketch halted before frame {frame_number}: {sketch.error}")
    save_frame(frame, output_path)
    print(f"  Saved frame {frame_number}: {output_path}")
    return output_path


def render_png_sequence(sketch, frames: int, output_dir: str, start: int = 0,
                        progress_callback=None) -> Path:
    """Write frames as output_dir/frame_000001.png, ..."""
    validate_render_request(frames, sketch.fps)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    start_time = time.time()
    written = 0
    set_processing_timeout()
    try:
        for frame_number, frame in render_frames(sketch, frames, start=start):
            save_frame(frame, sequence_path(output_dir, frame_number))
            written += 1
            _report(written, frames, start_time, progress_callback)
    finally:
        clear_processing_timeout()
        if not progress_callback:
            print()

    _check_halt(sketch, written, frames)
    elapsed = time.time() - start_time
    print(f"  Render complete: {written} frames in {elapsed:.1f}s")
    print(f"  Output: {output_dir}")
    return output_dir


def render_video(sketch, frames: int, output_path: str, start: int = 0, crf: int = 18,
                 progress_callback=None) -> Path:
    """Encode frames straight into an H.264 video via an FFmpeg pipe."""
    validate_render_request(frames, sketch.fps)
    output_path = ensure_parent_dir(output_path)

    pipe = open_output_pipe(output_path, sketch.width, sketch.height, fps=sketch.fps, crf=crf)
    start_time = time.time()
    written = 0
    set_processing_timeout()
    try:
        for _, frame in render_frames(sketch, frames, start=start):
            pipe.stdin.write(frame.tobytes())
            written += 1
            _report(written, frames, start_time, progress_callback)
    finally:
        clear_processing_timeout()
        close_output_pipe(pipe)
        if not progress_callback:
            print()

    _check_halt(sketch, written, frames)
    elapsed = time.time() - start_time
    print(f"  Render complete: {elapsed:.1f}s ({written / max(elapsed, 0.001):.1f} fps)")
    print(f"  Output: {output_path}")
    return output_path

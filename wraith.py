#!/usr/bin/env python3
"""
Wraith — Generative Ghost Figure
CLI entry point. Also importable as a library.

Usage:
    python wraith.py live
    python wraith.py live --seed 7 --fps 24 --hud
    python wraith.py still --frame 120 --output ghost.png
    python wraith.py render --frames 300 --output ghost.mp4
    python wraith.py render --frames 90 --output frames/
    python wraith.py list-effects
"""

import sys
import os
import argparse

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from core.sketch import Sketch, DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_FPS
from core.safety import SafetyError, output_kind, validate_canvas_size, validate_fps, validate_seed
from effects import list_effects

__version__ = "0.1.0"


def _build_sketch(args) -> Sketch:
    validate_canvas_size(args.width, args.height)
    validate_fps(args.fps)
    validate_seed(args.seed)
    return Sketch(
        width=args.width,
        height=args.height,
        fps=args.fps,
        seed=args.seed,
        atmosphere=not args.no_atmosphere,
    )


def _setup_or_exit(sketch: Sketch):
    if not sketch.setup():
        print(f"Error: setup failed: {sketch.error}", file=sys.stderr)
        sys.exit(1)


def cmd_live(args):
    """Open the live window."""
    from core.performer import LiveEngine

    engine = LiveEngine(_build_sketch(args), show_hud=args.hud)
    frames = engine.run()
    print(f"  Drew {frames} frames.")


def cmd_still(args):
    """Render one frame to an image."""
    from core.render import render_still

    if output_kind(args.output) != "image":
        print(f"Error: still output must be .png/.jpg, got {args.output}", file=sys.stderr)
        sys.exit(1)
    sketch = _build_sketch(args)
    _setup_or_exit(sketch)
    render_still(sketch, args.frame, args.output)


def cmd_render(args):
    """Render a clip to video or a PNG sequence."""
    from core.render import render_png_sequence, render_video

    kind = output_kind(args.output)
    if kind == "image":
        print("Error: use 'still' for single images, or give a directory / video path",
              file=sys.stderr)
        sys.exit(1)

    sketch = _build_sketch(args)
    _setup_or_exit(sketch)
    print(f"  Rendering {args.frames} frames at {sketch.width}x{sketch.height} @ {sketch.fps} fps")
    if kind == "video":
        render_video(sketch, args.frames, args.output, start=args.start, crf=args.crf)
    else:
        render_png_sequence(sketch, args.frames, args.output, start=args.start)


def cmd_list_effects(args):
    """List post effects applied to each frame."""
    for entry in list_effects():
        params_str = ", ".join(f"{k}={v}" for k, v in entry["params"].items())
        print(f"  {entry['name']:10s} {entry['description']}")
        print(f"  {'':10s} {params_str}")


def _add_sketch_args(p):
    p.add_argument("--width", type=int, default=DEFAULT_WIDTH, help=f"Canvas width (default: {DEFAULT_WIDTH})")
    p.add_argument("--height", type=int, default=DEFAULT_HEIGHT, help=f"Canvas height (default: {DEFAULT_HEIGHT})")
    p.add_argument("--fps", type=int, default=DEFAULT_FPS, help=f"Frame rate (default: {DEFAULT_FPS})")
    p.add_argument("--seed", type=int, default=None, help="Seed for noise, distortion and grain")
    p.add_argument("--no-atmosphere", action="store_true", help="Skip vignette, grain and glow")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="wraith",
        description="Wraith — generative ghost figure animation",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command")

    # live
    p = sub.add_parser("live", help="Open the animation in a window")
    _add_sketch_args(p)
    p.add_argument("--hud", action="store_true", help="Start with the HUD visible")

    # still
    p = sub.add_parser("still", help="Render a single frame to an image")
    _add_sketch_args(p)
    p.add_argument("--frame", type=int, default=1, help="Frame number, 1-based (default: 1)")
    p.add_argument("--output", "-o", required=True, help="Output .png/.jpg")

    # render
    p = sub.add_parser("render", help="Render frames to a video or PNG sequence")
    _add_sketch_args(p)
    p.add_argument("--frames", type=int, default=300, help="Number of frames (default: 300)")
    p.add_argument("--start", type=int, default=0, help="Frames to skip before the first output frame")
    p.add_argument("--output", "-o", required=True, help="Output video (.mp4/.mov/.mkv/.webm) or directory")
    p.add_argument("--crf", type=int, default=18, help="H.264 quality (lower=better, default: 18)")

    # list-effects
    sub.add_parser("list-effects", help="List post effects")

    args = parser.parse_args(argv)

    commands = {
        "live": cmd_live,
        "still": cmd_still,
        "render": cmd_render,
        "list-effects": cmd_list_effects,
    }

    if args.command in commands:
        try:
            commands[args.command](args)
        except (SafetyError, RuntimeError, ValueError, OSError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()

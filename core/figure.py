"""
Wraith — Figure Geometry & Drawing

Shape generators return (N, 2) point arrays in figure space (origin at the
canvas center, y down). Draw functions push those shapes through a Canvas
with the right colors and transforms.

Layers, back to front:
    shadow   : body only, offset and translucent
    body     : tapered column with a slow sway
    arms     : joint wedge + thick curved stroke per side
    head     : aura rings, elongated skull, hollow eyes, oval mouth

Every shape receives the same base distortion per frame, scaled down
the further it is from the body's center of mass.
"""

import math
from dataclasses import dataclass

import numpy as np

from core.canvas import Canvas
from core.distortion import DistortionField
from core.flowfield import FlowField
from core.palette import BLACK, COLORS
from core.vector import Vec2, remap

# Body
BODY_TOP = -120
BODY_BOTTOM = 180
BODY_SAMPLES = 51
BODY_MIN_HALF_WIDTH = 30
BODY_MAX_HALF_WIDTH = 40
SHADOW_ALPHA = 0.25

# Arms
ARM_SHOULDER_X = 32
ARM_SHOULDER_Y = -90
ARM_LENGTH = 120
ARM_POINTS = 8
ARM_WEIGHT = 9

# Head
HEAD_Y = -130
SKULL_RADIUS = 42
OUTLINE_STEP = 0.1
EYE_OFFSET_X = 15
EYE_OFFSET_Y = -10
MOUTH_Y = 20


@dataclass
class FrameContext:
    """Per-frame inputs shared by every draw call."""
    time: float
    intensity: float
    distortion: DistortionField
    flowfield: FlowField | None = None


def outline_angles() -> np.ndarray:
    """Angles 0, 0.1, ... below 2*pi used for the skull and mouth outlines."""
    return np.arange(0.0, 2.0 * np.pi, OUTLINE_STEP)


# --- Shape generators -----------------------------------------------------------

def body_outline(time: float, intensity: float, base: Vec2) -> np.ndarray:
    """Closed body outline: left edge top to bottom, then right edge back up."""
    t = np.linspace(0.0, 1.0, BODY_SAMPLES)
    y = remap(t, 0.0, 1.0, BODY_TOP, BODY_BOTTOM)
    half_width = remap(np.sin(t * np.pi), 0.0, 1.0, BODY_MIN_HALF_WIDTH, BODY_MAX_HALF_WIDTH)
    scale = 1.0 - t * 0.3
    sway = np.sin(t * np.pi + time) * (2.0 + intensity)

    left = np.stack([-half_width + sway + base.x * scale, y + base.y * scale], axis=1)
    right = np.stack([half_width + sway + base.x * scale, y + base.y * scale], axis=1)
    return np.concatenate([left, right[::-1]], axis=0)


def arm_joint(side: int) -> np.ndarray:
    """Wedge that blends the arm into the shoulder. side is -1 (left) or 1 (right)."""
    sx = side * ARM_SHOULDER_X
    sy = ARM_SHOULDER_Y
    return np.array([
        (sx - side * 10, sy - 5),
        (sx + side * 10, sy - 5),
        (sx + side * 12, sy + 15),
        (sx - side * 6, sy + 15),
    ], dtype=np.float64)


def arm_control_points(side: int, time: float, intensity: float, base: Vec2) -> np.ndarray:
    """Curve control points for one arm, with both ends repeated so the
    spline starts at the shoulder and ends at the hand."""
    sx = side * ARM_SHOULDER_X
    sy = ARM_SHOULDER_Y
    t = np.arange(ARM_POINTS) / (ARM_POINTS - 1)
    y = sy + t * ARM_LENGTH
    bow = np.sin(t * np.pi) * (35.0 + intensity * 4.0)
    wave = np.sin(y * 0.02 + time) * 3.0
    scale = 0.4 * (1.0 - t)

    x = sx + side * (bow + wave) + base.x * scale
    y = y + base.y * scale
    pts = np.stack([x, y], axis=1)
    return np.concatenate([pts[:1], pts, pts[-1:]], axis=0)


def skull_outline(base: Vec2) -> np.ndarray:
    """Elongated skull with a domed crown and slight temple hollows."""
    a = outline_angles()
    r = np.full_like(a, float(SKULL_RADIUS))
    upper = a < np.pi
    r[upper] += np.sin(a[upper] * 2.0) * 7.0
    temples = upper & (((a > np.pi / 4) & (a < np.pi / 2)) | ((a > np.pi / 2) & (a < 3 * np.pi / 4)))
    r[temples] -= 3.0
    r[~upper] += np.sin(a[~upper] * 1.5) * 5.0

    offset = base.copy().mult(0.4)
    return np.stack([np.cos(a) * r + offset.x, np.sin(a) * r * 1.35 + offset.y], axis=1)


def mouth_outline(time: float, intensity: float, base: Vec2) -> np.ndarray:
    """Wobbling vertical oval, three lobes rotating with time."""
    a = outline_angles()
    r = 9.0 + np.sin(a * 3.0 + time) * (1.0 + intensity * 0.5)
    offset = base.copy().mult(0.2)
    return np.stack([np.cos(a) * r + offset.x, np.sin(a) * r * 1.4 + MOUTH_Y + offset.y], axis=1)


def aura_rings(time: float, distortion: DistortionField) -> list[tuple]:
    """Three glow ellipses around the head, outermost first.

    Returns:
        List of (cx, cy, w, h, alpha).
    """
    rings = []
    pulse = math.sin(time * 1.5) * 3.0
    for i in range(3, 0, -1):
        alpha = remap(i, 3, 0, 0.04, 0.12)
        size = remap(i, 3, 0, 110, 85)
        offset = distortion.evaluate(0.0, HEAD_Y, time + i).mult(0.5)
        rings.append((offset.x, offset.y, size + pulse, size * 1.2 + pulse, alpha))
    return rings


def apply_flow(canvas: Canvas, points: np.ndarray, flowfield: FlowField | None,
               intensity: float) -> np.ndarray:
    """Push points along the flow field, sampled at their canvas position."""
    if flowfield is None:
        return points
    origin = np.array([canvas.style.origin_x, canvas.style.origin_y])
    device = points + origin
    return points + flowfield.get_forces(device[:, 0], device[:, 1], intensity)


# --- Draw routines --------------------------------------------------------------

def draw_shadow_layer(canvas: Canvas, frame: FrameContext):
    canvas.push()
    canvas.translate(2.0 + math.sin(frame.time * 0.7) * 1.5,
                     2.0 + math.cos(frame.time * 0.7) * 1.5)
    draw_figure(canvas, frame, is_shadow=True)
    canvas.pop()


def draw_main_figure(canvas: Canvas, frame: FrameContext):
    draw_figure(canvas, frame, is_shadow=False)


def draw_figure(canvas: Canvas, frame: FrameContext, is_shadow: bool):
    base = frame.distortion.evaluate(0.0, 0.0, frame.time)
    draw_body(canvas, frame, base, is_shadow)
    if not is_shadow:
        draw_arms(canvas, frame, base)
        draw_head(canvas, frame, base)


def draw_body(canvas: Canvas, frame: FrameContext, base: Vec2, is_shadow: bool):
    canvas.push()
    canvas.no_stroke()
    if is_shadow:
        canvas.fill(*COLORS["BODY"]["SHADOW"], SHADOW_ALPHA)
    else:
        canvas.fill(*COLORS["BODY"]["MAIN"], 0.95 + math.sin(frame.time * 0.5) * 0.05)
    pts = body_outline(frame.time, frame.intensity, base)
    canvas.shape(apply_flow(canvas, pts, frame.flowfield, frame.intensity))
    canvas.pop()


def draw_arms(canvas: Canvas, frame: FrameContext, base: Vec2):
    for side in (-1, 1):
        canvas.push()
        draw_arm_joint(canvas, side)

        canvas.stroke(*COLORS["ARMS"]["MAIN"])
        canvas.stroke_weight(ARM_WEIGHT)
        canvas.no_fill()
        pts = arm_control_points(side, frame.time, frame.intensity, base)
        canvas.curve(apply_flow(canvas, pts, frame.flowfield, frame.intensity))
        canvas.pop()


def draw_arm_joint(canvas: Canvas, side: int):
    canvas.no_stroke()
    canvas.fill(*COLORS["BODY"]["MAIN"])
    canvas.shape(arm_joint(side))


def draw_head(canvas: Canvas, frame: FrameContext, base: Vec2):
    canvas.push()
    canvas.translate(0, HEAD_Y)
    draw_head_aura(canvas, frame)
    draw_skull(canvas, base)
    draw_facial_features(canvas, frame, base)
    canvas.pop()


def draw_head_aura(canvas: Canvas, frame: FrameContext):
    canvas.no_stroke()
    for cx, cy, w, h, alpha in aura_rings(frame.time, frame.distortion):
        canvas.fill(*COLORS["HEAD"]["GLOW"], alpha)
        canvas.ellipse(cx, cy, w, h)


def draw_skull(canvas: Canvas, base: Vec2):
    canvas.fill(*COLORS["HEAD"]["MAIN"])
    canvas.no_stroke()
    canvas.shape(skull_outline(base))


def draw_facial_features(canvas: Canvas, frame: FrameContext, base: Vec2):
    intensity = frame.intensity
    for side in (-1, 1):
        canvas.push()
        canvas.translate(side * EYE_OFFSET_X, EYE_OFFSET_Y)

        # Socket
        canvas.fill(*BLACK, 0.35)
        socket = 18.0 + intensity * 2.0
        canvas.ellipse(0, 0, socket, socket * 1.15)

        # Eye
        canvas.fill(*BLACK)
        eye = base.copy().mult(0.3)
        canvas.ellipse(eye.x, eye.y, 13, 17)

        # Pupil
        canvas.ellipse(math.sin(frame.time) * intensity, math.cos(frame.time) * intensity, 5, 5)
        canvas.pop()

    draw_mouth(canvas, frame, base)


def draw_mouth(canvas: Canvas, frame: FrameContext, base: Vec2):
    canvas.fill(*BLACK)
    canvas.shape(mouth_outline(frame.time, frame.intensity, base))

    inner = base.copy().mult(0.3)
    canvas.ellipse(inner.x, MOUTH_Y + inner.y,
                   12.0 + frame.intensity * 2.0,
                   20.0 + frame.intensity * 3.0)

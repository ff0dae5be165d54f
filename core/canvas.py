"""
Wraith — Canvas
Immediate-mode drawing on a numpy RGB frame buffer.

Shapes are rasterized into an anti-aliased coverage mask with OpenCV
(fixed-point coordinates for sub-pixel accuracy), then alpha-composited
onto the frame inside the shape's bounding box only. Styles and the
translation origin live on a push/pop stack.

Colors follow an RGB 0-255 / alpha 0-1 model:
    canvas.fill(55, 45, 40, 0.95)
    canvas.fill(0)             # opaque black
    canvas.fill(0, 0, 0, 0.35)
"""

from dataclasses import dataclass, replace
from functools import lru_cache

import cv2
import numpy as np

# Fixed-point bits for cv2 drawing calls (1/16 px precision)
SHIFT = 4
_FIXED = 1 << SHIFT

ELLIPSE_SEGMENTS = 72
CURVE_SEGMENTS = 12


class CanvasError(Exception):
    """Raised on invalid drawing calls (bad stack use, bad buffers)."""
    pass


# Same formulas as the post-effect chain blend modes
BLEND_FNS = {
    "normal": lambda b, c: np.broadcast_to(c, b.shape),
    "overlay": lambda b, c: np.where(b < 128.0, 2.0 * b * c / 255.0,
                                     255.0 - 2.0 * (255.0 - b) * (255.0 - c) / 255.0),
    "multiply": lambda b, c: b * c / 255.0,
    "screen": lambda b, c: 255.0 - (255.0 - b) * (255.0 - c) / 255.0,
}


@dataclass
class Style:
    fill: tuple | None = (255.0, 255.0, 255.0, 1.0)
    stroke: tuple | None = (0.0, 0.0, 0.0, 1.0)
    stroke_weight: float = 1.0
    blend_mode: str = "normal"
    origin_x: float = 0.0
    origin_y: float = 0.0


def parse_color(*args) -> tuple:
    """Normalize (gray), (gray, a), (r, g, b) or (r, g, b, a) to an RGBA tuple.

    A single tuple/list argument is unpacked.
    """
    if len(args) == 1 and isinstance(args[0], (tuple, list)):
        args = tuple(args[0])
    if len(args) == 1:
        r = g = b = args[0]
        a = 1.0
    elif len(args) == 2:
        r = g = b = args[0]
        a = args[1]
    elif len(args) == 3:
        r, g, b = args
        a = 1.0
    elif len(args) == 4:
        r, g, b, a = args
    else:
        raise CanvasError(f"Color takes 1-4 components, got {len(args)}")
    return (
        float(np.clip(r, 0, 255)),
        float(np.clip(g, 0, 255)),
        float(np.clip(b, 0, 255)),
        float(np.clip(a, 0.0, 1.0)),
    )


def catmull_rom(control_points, segments: int = CURVE_SEGMENTS) -> np.ndarray:
    """Sample a Catmull-Rom spline through control points.

    The first and last control points only steer the curve; the spline
    passes through every point in between. Repeat the end points to make
    the curve reach them.

    Returns:
        (M, 2) float array of sampled points.
    """
    pts = np.asarray(control_points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 2 or len(pts) < 4:
        raise CanvasError(f"Curve needs at least 4 (x, y) control points, got shape {pts.shape}")

    t = np.linspace(0.0, 1.0, segments, endpoint=False)[:, np.newaxis]
    t2 = t * t
    t3 = t2 * t
    out = []
    for i in range(1, len(pts) - 2):
        p0, p1, p2, p3 = pts[i - 1], pts[i], pts[i + 1], pts[i + 2]
        seg = 0.5 * (
            2.0 * p1
            + (p2 - p0) * t
            + (2.0 * p0 - 5.0 * p1 + 4.0 * p2 - p3) * t2
            + (3.0 * p1 - p0 - 3.0 * p2 + p3) * t3
        )
        out.append(seg)
    out.append(pts[-2][np.newaxis, :])
    return np.concatenate(out, axis=0)


def ellipse_points(cx: float, cy: float, w: float, h: float,
                   segments: int = ELLIPSE_SEGMENTS) -> np.ndarray:
    """Polygon approximation of an ellipse given its center and diameters."""
    a = np.linspace(0.0, 2.0 * np.pi, segments, endpoint=False)
    return np.stack([cx + np.cos(a) * w / 2.0, cy + np.sin(a) * h / 2.0], axis=1)


@lru_cache(maxsize=8)
def distance_map(width: int, height: int, cx: float, cy: float) -> np.ndarray:
    """(height, width) float32 distances from pixel centers to (cx, cy).

    Cached per size and center and shared by every canvas, so per-frame
    gradients at a fixed center skip the full-frame sqrt. Read-only.
    """
    xs = np.arange(width, dtype=np.float32) + np.float32(0.5 - cx)
    ys = np.arange(height, dtype=np.float32) + np.float32(0.5 - cy)
    dist = np.hypot(xs[np.newaxis, :], ys[:, np.newaxis])
    dist.flags.writeable = False
    return dist


class Canvas:
    """RGB frame buffer with a p5-style drawing state machine."""

    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise CanvasError(f"Canvas must be at least 1x1, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        self._style = Style()
        self._stack = []

    @classmethod
    def from_array(cls, frame: np.ndarray) -> "Canvas":
        """Wrap a copy of an existing (H, W, 3) frame."""
        if frame.ndim != 3 or frame.shape[2] != 3:
            raise CanvasError(f"Expected (H, W, 3) frame, got shape {frame.shape}")
        canvas = cls(frame.shape[1], frame.shape[0])
        canvas.pixels = np.clip(frame, 0, 255).astype(np.uint8)
        return canvas

    # --- State ---------------------------------------------------------------

    @property
    def style(self) -> Style:
        return self._style

    def push(self):
        self._stack.append(replace(self._style))

    def pop(self):
        if not self._stack:
            raise CanvasError("pop() without matching push()")
        self._style = self._stack.pop()

    def reset_matrix(self):
        self._style.origin_x = 0.0
        self._style.origin_y = 0.0

    def translate(self, dx: float, dy: float):
        self._style.origin_x += float(dx)
        self._style.origin_y += float(dy)

    def fill(self, *args):
        self._style.fill = parse_color(*args)

    def no_fill(self):
        self._style.fill = None

    def stroke(self, *args):
        self._style.stroke = parse_color(*args)

    def no_stroke(self):
        self._style.stroke = None

    def stroke_weight(self, weight: float):
        self._style.stroke_weight = max(0.0, float(weight))

    def blend_mode(self, mode: str):
        if mode not in BLEND_FNS:
            raise CanvasError(f"Unknown blend mode: {mode}. Available: {', '.join(sorted(BLEND_FNS))}")
        self._style.blend_mode = mode

    def resize(self, width: int, height: int):
        """Reallocate the frame buffer. Contents are cleared."""
        if width < 1 or height < 1:
            raise CanvasError(f"Canvas must be at least 1x1, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.zeros((self.height, self.width, 3), dtype=np.uint8)

    # --- Pixel buffer ---------------------------------------------------------

    def load_pixels(self) -> np.ndarray:
        """Return a writable copy of the frame (H, W, 3) uint8."""
        return self.pixels.copy()

    def update_pixels(self, pixels: np.ndarray):
        pixels = np.asarray(pixels)
        if pixels.shape != self.pixels.shape:
            raise CanvasError(f"Pixel buffer shape {pixels.shape} does not match canvas {self.pixels.shape}")
        self.pixels = np.clip(pixels, 0, 255).astype(np.uint8)

    # --- Drawing --------------------------------------------------------------

    def background(self, *args):
        r, g, b, _ = parse_color(*args)
        self.pixels[:, :] = (int(round(r)), int(round(g)), int(round(b)))

    def shape(self, points, close: bool = True):
        """Fill and/or stroke a polygon given in local coordinates."""
        pts = self._to_device(points)
        if len(pts) == 0:
            return
        style = self._style
        if style.fill is not None and len(pts) >= 3:
            self._paint(pts, style.fill, mode="fill", closed=True)
        if style.stroke is not None and style.stroke_weight > 0:
            self._paint(pts, style.stroke, mode="stroke", closed=close)

    fill_polygon = shape

    def polyline(self, points, closed: bool = False):
        """Stroke only, regardless of fill state."""
        pts = self._to_device(points)
        style = self._style
        if style.stroke is not None and style.stroke_weight > 0 and len(pts) >= 2:
            self._paint(pts, style.stroke, mode="stroke", closed=closed)

    def curve(self, control_points, segments: int = CURVE_SEGMENTS):
        self.shape(catmull_rom(control_points, segments), close=False)

    def ellipse(self, cx: float, cy: float, w: float, h: float):
        self.shape(ellipse_points(cx, cy, w, h), close=True)

    def rect(self, x: float, y: float, w: float, h: float):
        self.shape([(x, y), (x + w, y), (x + w, y + h), (x, y + h)], close=True)

    def radial_gradient(self, cx: float, cy: float, r0: float, r1: float, stops):
        """Paint a concentric radial gradient over the whole canvas.

        Args:
            cx, cy: Center in local coordinates.
            r0, r1: Inner/outer radius. Inside r0 the first stop applies,
                beyond r1 the last.
            stops: Sequence of (offset 0-1, (r, g, b, a)) sorted by offset.
        """
        if r1 <= r0:
            raise CanvasError(f"Outer radius must exceed inner radius ({r0} >= {r1})")
        if not stops:
            return
        offsets = np.array([s[0] for s in stops], dtype=np.float64)
        colors = np.array([parse_color(s[1]) for s in stops], dtype=np.float64)

        dist = distance_map(self.width, self.height,
                            float(cx + self._style.origin_x), float(cy + self._style.origin_y))
        s = (dist - np.float32(r0)) * np.float32(1.0 / (r1 - r0))
        np.clip(s, 0.0, 1.0, out=s)
        alpha = np.interp(s, offsets, colors[:, 3]).astype(np.float32)[:, :, np.newaxis]
        if (colors[:, :3] == colors[0, :3]).all():
            rgb = colors[0, :3].astype(np.float32)
        else:
            rgb = np.stack(
                [np.interp(s, offsets, colors[:, c]) for c in range(3)], axis=2
            ).astype(np.float32)

        base = self.pixels.astype(np.float32)
        blended = BLEND_FNS[self._style.blend_mode](base, rgb)
        out = base + (blended - base) * alpha
        self.pixels = np.clip(out + 0.5, 0, 255).astype(np.uint8)

    def wash(self, *args):
        """Composite one color over every pixel with the current blend mode.

        Same result as a full-canvas rect, but the blend only depends on
        the base value, so it runs as a per-channel lookup table.
        """
        r, g, b, a = parse_color(*args)
        if a <= 0:
            return
        levels = np.repeat(np.arange(256, dtype=np.float32)[:, np.newaxis], 3, axis=1)
        paint = np.array([r, g, b], dtype=np.float32)
        blended = BLEND_FNS[self._style.blend_mode](levels, paint)
        lut = np.clip(levels + (blended - levels) * np.float32(a) + 0.5, 0, 255).astype(np.uint8)
        self.pixels = cv2.LUT(self.pixels, lut.reshape(256, 1, 3))

    # --- Internals -------------------------------------------------------------

    def _to_device(self, points) -> np.ndarray:
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        return pts + (self._style.origin_x, self._style.origin_y)

    def _paint(self, pts: np.ndarray, color: tuple, mode: str, closed: bool):
        """Rasterize into a coverage mask over the bounding box, then composite."""
        r, g, b, a = color
        if a <= 0:
            return
        pad = int(np.ceil(self._style.stroke_weight / 2.0)) + 2 if mode == "stroke" else 2
        x0 = max(0, int(np.floor(pts[:, 0].min())) - pad)
        y0 = max(0, int(np.floor(pts[:, 1].min())) - pad)
        x1 = min(self.width, int(np.ceil(pts[:, 0].max())) + pad + 1)
        y1 = min(self.height, int(np.ceil(pts[:, 1].max())) + pad + 1)
        if x0 >= x1 or y0 >= y1:
            return

        mask = np.zeros((y1 - y0, x1 - x0), dtype=np.uint8)
        # cv2 samples pixel centers at integer coords; shift by half a pixel
        local = pts - (x0 + 0.5, y0 + 0.5)
        fixed = np.round(local * _FIXED).astype(np.int32).reshape(-1, 1, 2)
        if mode == "fill":
            cv2.fillPoly(mask, [fixed], 255, lineType=cv2.LINE_AA, shift=SHIFT)
        else:
            thickness = max(1, int(round(self._style.stroke_weight)))
            cv2.polylines(mask, [fixed], closed, 255, thickness=thickness,
                          lineType=cv2.LINE_AA, shift=SHIFT)

        coverage = mask.astype(np.float32)[:, :, np.newaxis] * (a / 255.0)
        region = self.pixels[y0:y1, x0:x1].astype(np.float32)
        paint = np.array([r, g, b], dtype=np.float32)
        blended = BLEND_FNS[self._style.blend_mode](region, paint)
        out = region * (1.0 - coverage) + blended * coverage
        self.pixels[y0:y1, x0:x1] = np.clip(out + 0.5, 0, 255).astype(np.uint8)

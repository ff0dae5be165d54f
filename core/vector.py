"""
Wraith — 2D Vector Math
Small mutable vector used by the procedural geometry helpers.
"""

import math


class Vec2:
    """Mutable 2D vector. add() and mult() work in place and return self
    so calls can be chained: base.copy().mult(0.4).add(offset)."""

    __slots__ = ("x", "y")

    def __init__(self, x: float = 0.0, y: float = 0.0):
        self.x = float(x)
        self.y = float(y)

    @classmethod
    def from_angle(cls, angle: float, length: float = 1.0) -> "Vec2":
        return cls(math.cos(angle) * length, math.sin(angle) * length)

    def copy(self) -> "Vec2":
        return Vec2(self.x, self.y)

    def add(self, other) -> "Vec2":
        ox, oy = other
        self.x += ox
        self.y += oy
        return self

    def mult(self, scalar: float) -> "Vec2":
        self.x *= scalar
        self.y *= scalar
        return self

    def mag(self) -> float:
        return math.hypot(self.x, self.y)

    def __iter__(self):
        yield self.x
        yield self.y

    def __eq__(self, other):
        if not isinstance(other, Vec2):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __repr__(self):
        return f"Vec2({self.x:.4f}, {self.y:.4f})"


def dist(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(x2 - x1, y2 - y1)


def remap(value, in_lo, in_hi, out_lo, out_hi):
    """Linear remap from one range to another (no clamping)."""
    return out_lo + (value - in_lo) * (out_hi - out_lo) / (in_hi - in_lo)


def constrain(value, lo, hi):
    return max(lo, min(hi, value))

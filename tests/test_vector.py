"""
Wraith -- Vector Math Tests
"""

import math
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.vector import Vec2, constrain, dist, remap


def test_from_angle_unit_length():
    v = Vec2.from_angle(math.pi / 2)
    assert v.x == pytest.approx(0.0, abs=1e-12)
    assert v.y == pytest.approx(1.0)
    assert Vec2.from_angle(1.0, 0.15).mag() == pytest.approx(0.15)


def test_add_and_mult_chain_in_place():
    v = Vec2(1, 2)
    out = v.add(Vec2(3, 4)).mult(2)
    assert out is v
    assert (v.x, v.y) == (8.0, 12.0)


def test_add_accepts_tuples():
    assert Vec2(1, 1).add((0.5, -1)) == Vec2(1.5, 0)


def test_copy_is_independent():
    v = Vec2(1, 1)
    c = v.copy().mult(10)
    assert v == Vec2(1, 1)
    assert c == Vec2(10, 10)


def test_unpacking():
    x, y = Vec2(3, -4)
    assert (x, y) == (3.0, -4.0)


def test_helpers():
    assert dist(0, 0, 3, 4) == 5.0
    assert remap(0.0, -1, 1, 0.5, 1.0) == 0.75
    assert remap(3, 3, 0, 0.04, 0.12) == pytest.approx(0.04)
    assert constrain(5, 0, 1) == 1
    assert constrain(-5, 0, 1) == 0

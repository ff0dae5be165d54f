"""
Wraith -- Figure Geometry Tests
Shape generators (pure geometry) and the layered draw routines.
"""

import math
import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.canvas import Canvas
from core.distortion import DistortionField
from core.figure import (
    ARM_SHOULDER_Y, HEAD_Y, FrameContext, apply_flow, arm_control_points, arm_joint, aura_rings,
    body_outline, draw_body, draw_figure, draw_main_figure, draw_shadow_layer, mouth_outline,
    outline_angles, skull_outline,
)
from core.flowfield import FlowField
from core.palette import COLORS
from core.vector import Vec2

ZERO = Vec2(0, 0)


class TestBody:

    def test_outline_closed_loop(self):
        pts = body_outline(0.0, 0.75, ZERO)
        assert pts.shape == (102, 2)
        # Right side walks back up: first and last points share the top row
        assert pts[0][1] == pytest.approx(-120)
        assert pts[-1][1] == pytest.approx(-120)
        assert pts[50][1] == pytest.approx(180)

    def test_width_tapers_toward_ends(self):
        pts = body_outline(1.3, 0.9, ZERO)
        left, right = pts[:51], pts[51:][::-1]
        widths = right[:, 0] - left[:, 0]
        assert widths.min() == pytest.approx(60)
        assert widths.max() == pytest.approx(80)
        assert np.allclose(left[:, 1], right[:, 1])

    def test_distortion_fades_toward_feet(self):
        base = Vec2(10, 0)
        shifted = body_outline(0.0, 0.5, base) - body_outline(0.0, 0.5, ZERO)
        assert shifted[0][0] == pytest.approx(10.0)      # head end: full offset
        assert shifted[50][0] == pytest.approx(7.0)      # feet: 70%

    def test_sway_grows_with_intensity(self):
        calm = body_outline(math.pi / 2, 0.5, ZERO)
        agitated = body_outline(math.pi / 2, 1.0, ZERO)
        assert abs(agitated[0][0] - calm[0][0]) == pytest.approx(0.5)


class TestArms:

    def test_control_points_repeat_ends(self):
        pts = arm_control_points(1, 0.0, 0.75, ZERO)
        assert pts.shape == (10, 2)
        assert np.array_equal(pts[0], pts[1])
        assert np.array_equal(pts[-1], pts[-2])

    def test_starts_at_shoulder(self):
        t = 0.4
        pts = arm_control_points(-1, t, 0.75, ZERO)
        wave = math.sin(ARM_SHOULDER_Y * 0.02 + t) * 3
        assert pts[1] == pytest.approx([-32 - wave, ARM_SHOULDER_Y])
        assert pts[-1][1] == pytest.approx(ARM_SHOULDER_Y + 120)

    def test_sides_mirror_without_distortion(self):
        left = arm_control_points(-1, 2.0, 0.8, ZERO)
        right = arm_control_points(1, 2.0, 0.8, ZERO)
        assert np.allclose(left[:, 0], -right[:, 0])
        assert np.allclose(left[:, 1], right[:, 1])

    def test_bow_outward(self):
        pts = arm_control_points(1, 0.0, 1.0, ZERO)
        assert pts[4][0] > 32 + 30, "mid-arm should bow well clear of the body"

    def test_joint_wedge(self):
        wedge = arm_joint(1)
        assert wedge.tolist() == [[22, -95], [42, -95], [44, -75], [26, -75]]
        assert np.allclose(arm_joint(-1)[:, 0], -wedge[:, 0])


class TestHead:

    def test_outline_angles(self):
        a = outline_angles()
        assert len(a) == 63
        assert a[-1] < 2 * math.pi

    def test_skull_radius_profile(self):
        pts = skull_outline(ZERO)
        assert pts[0] == pytest.approx([42, 0])
        # angle 1.0 sits in the first temple hollow
        r = 42 + math.sin(2.0) * 7 - 3
        assert pts[10] == pytest.approx([math.cos(1.0) * r, math.sin(1.0) * r * 1.35])
        # angle 4.0 is on the lower half
        r = 42 + math.sin(6.0) * 5
        assert pts[40] == pytest.approx([math.cos(4.0) * r, math.sin(4.0) * r * 1.35])

    def test_skull_elongated(self):
        pts = skull_outline(ZERO)
        height = pts[:, 1].max() - pts[:, 1].min()
        width = pts[:, 0].max() - pts[:, 0].min()
        assert height > width

    def test_skull_follows_distortion(self):
        moved = skull_outline(Vec2(5, -5)) - skull_outline(ZERO)
        assert np.allclose(moved, [2.0, -2.0])

    def test_mouth_centered_below_eyes(self):
        pts = mouth_outline(0.0, 0.75, ZERO)
        assert pts[:, 1].mean() == pytest.approx(20, abs=0.5)
        assert pts[:, 0].max() < 12

    def test_aura_rings(self):
        rings = aura_rings(0.0, DistortionField(seed=1))
        assert len(rings) == 3
        alphas = [r[4] for r in rings]
        widths = [r[2] for r in rings]
        assert alphas == pytest.approx([0.04, 0.12 - 0.08 * 2 / 3, 0.12 - 0.08 / 3])
        assert widths == pytest.approx([110, 110 - 25 / 3, 110 - 50 / 3])
        for _, _, w, h, _ in rings:
            assert h == pytest.approx(w * 1.2)


class TestDraw:

    def _canvas(self):
        canvas = Canvas(200, 400)
        canvas.background(*COLORS["BACKGROUND"])
        canvas.translate(100, 200)
        return canvas

    def _frame(self):
        return FrameContext(time=1.0, intensity=0.75, distortion=DistortionField(seed=2))

    def test_shadow_is_body_only(self):
        canvas = self._canvas()
        draw_shadow_layer(canvas, self._frame())
        head_center = canvas.pixels[200 + HEAD_Y, 100]
        assert head_center.tolist() == list(COLORS["BACKGROUND"])
        body = canvas.pixels[250, 100]
        assert body.tolist() != list(COLORS["BACKGROUND"])

    def test_shadow_translucent(self):
        canvas = self._canvas()
        draw_shadow_layer(canvas, self._frame())
        body = canvas.pixels[250, 100].astype(int)
        # 25% shadow over the pale ground stays fairly light
        assert body[0] > 150

    def test_main_figure_layers(self):
        canvas = self._canvas()
        draw_main_figure(canvas, self._frame())
        skull = canvas.pixels[200 + HEAD_Y - 10, 100].astype(int)
        assert np.abs(skull - COLORS["HEAD"]["MAIN"]).max() <= 1
        body = canvas.pixels[250, 100].astype(int)
        assert body.max() < 100, f"body should be dark, got {body}"

    def test_eyes_are_dark(self):
        canvas = self._canvas()
        frame = self._frame()
        draw_main_figure(canvas, frame)
        base = frame.distortion.evaluate(0, 0, frame.time).mult(0.3)
        x = int(round(100 + 15 + base.x))
        y = int(round(200 + HEAD_Y - 10 + base.y))
        assert canvas.pixels[y, x].max() < 40

    def test_style_stack_balanced(self):
        canvas = self._canvas()
        draw_figure(canvas, self._frame(), is_shadow=False)
        draw_figure(canvas, self._frame(), is_shadow=True)
        assert canvas._stack == []
        assert (canvas.style.origin_x, canvas.style.origin_y) == (100.0, 200.0)


class TestFlow:

    def _canvas(self):
        canvas = Canvas(200, 400)
        canvas.background(*COLORS["BACKGROUND"])
        canvas.translate(100, 200)
        return canvas

    def test_no_field_leaves_points(self):
        pts = body_outline(0.0, 0.75, ZERO)
        assert apply_flow(self._canvas(), pts, None, 0.75) is pts

    def test_shift_is_force_times_intensity(self):
        ff = FlowField(200, 400)
        ff.field[:] = (0.15, 0.0)
        pts = body_outline(0.0, 0.5, ZERO)
        moved = apply_flow(self._canvas(), pts, ff, 0.5)
        assert np.allclose(moved - pts, [0.075, 0.0])

    def test_sampled_at_device_position(self):
        ff = FlowField(200, 400)
        ff.field[10, 5] = (0.0, -0.1)        # cell under the canvas center
        pts = np.array([[0.0, 0.0], [-100.0, -200.0]])
        moved = apply_flow(self._canvas(), pts, ff, 1.0)
        assert moved[0].tolist() == pytest.approx([0.0, -0.1])
        assert moved[1].tolist() == pytest.approx([-100.0, -200.0])

    def test_body_drawn_where_flow_pushes_it(self):
        frame = FrameContext(time=1.0, intensity=0.75, distortion=DistortionField(seed=2))
        still = self._canvas()
        draw_body(still, frame, ZERO, is_shadow=False)
        assert still.pixels[250, 80].max() < 100

        ff = FlowField(200, 400)
        ff.field[:] = (80.0, 0.0)            # 60px at intensity 0.75
        frame.flowfield = ff
        pushed = self._canvas()
        draw_body(pushed, frame, ZERO, is_shadow=False)
        assert pushed.pixels[250, 80].tolist() == list(COLORS["BACKGROUND"])
        assert pushed.pixels[250, 170].max() < 100

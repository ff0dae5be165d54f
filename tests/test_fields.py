"""
Wraith -- Flow Field & Distortion Field Tests
Grid layout, fixed magnitude, clamped lookups, oscillator bounds.
"""

import math
import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.distortion import (
    AMPLITUDE_RANGE, FREQUENCY_RANGE, SPEED_RANGE, DistortionField,
)
from core.flowfield import PARTICLE_SPEED, FlowField
from core.noise import PerlinNoise


# ---------------------------------------------------------------------------
# Flow field
# ---------------------------------------------------------------------------

class TestFlowField:

    def test_grid_size_rounds_up(self):
        assert (FlowField(600, 800, 20).cols, FlowField(600, 800, 20).rows) == (30, 40)
        ff = FlowField(610, 801, 20)
        assert (ff.cols, ff.rows) == (31, 41)
        assert ff.field.shape == (41, 31, 2)

    def test_zero_before_update(self):
        ff = FlowField(100, 100, 20, noise=PerlinNoise(seed=1))
        assert ff.get_force(50, 50).mag() == 0.0

    def test_every_cell_has_fixed_magnitude(self):
        ff = FlowField(600, 800, 20, noise=PerlinNoise(seed=1))
        for t in (0.0, 1.7, 40.0):
            ff.update(t)
            mags = np.hypot(ff.field[:, :, 0], ff.field[:, :, 1])
            assert np.allclose(mags, PARTICLE_SPEED), f"magnitudes drifted at t={t}"

    def test_cell_angle_formula(self):
        noise = PerlinNoise(seed=4)
        ff = FlowField(200, 200, 20, noise=noise)
        t = 2.0
        ff.update(t)
        x, y = 3, 5
        angle = (noise(x * 0.1, y * 0.1, t * 0.015) * math.pi * 4
                 + math.sin(t * 0.08 + x * 0.1 + y * 0.1) * 0.3)
        fx, fy = ff.field[y, x]
        assert fx == pytest.approx(math.cos(angle) * PARTICLE_SPEED)
        assert fy == pytest.approx(math.sin(angle) * PARTICLE_SPEED)

    def test_field_evolves_with_time(self):
        ff = FlowField(200, 200, 20, noise=PerlinNoise(seed=2))
        ff.update(0.0)
        before = ff.field.copy()
        ff.update(80.0)
        assert not np.allclose(before, ff.field)

    def test_get_force_clamps_out_of_range(self):
        ff = FlowField(200, 100, 20, noise=PerlinNoise(seed=2))
        ff.update(1.0)
        assert tuple(ff.get_force(-500, -500)) == tuple(ff.field[0, 0])
        assert tuple(ff.get_force(1e6, 1e6)) == tuple(ff.field[-1, -1])
        assert tuple(ff.get_force(45, 21)) == tuple(ff.field[1, 2])

    def test_get_force_returns_copy_scaled(self):
        ff = FlowField(200, 200, 20, noise=PerlinNoise(seed=2))
        ff.update(1.0)
        original = ff.field.copy()
        force = ff.get_force(30, 30, intensity=0.5)
        assert force.mag() == pytest.approx(PARTICLE_SPEED * 0.5)
        force.mult(1000)
        assert np.array_equal(original, ff.field), "get_force must not alias the grid"

    def test_get_forces_matches_get_force(self):
        ff = FlowField(200, 200, 20, noise=PerlinNoise(seed=2))
        ff.update(3.0)
        xs = np.array([-10.0, 15.0, 99.9, 500.0])
        ys = np.array([5.0, 199.0, 42.0, -3.0])
        batch = ff.get_forces(xs, ys, intensity=0.8)
        for i in range(len(xs)):
            single = ff.get_force(xs[i], ys[i], intensity=0.8)
            assert batch[i] == pytest.approx([single.x, single.y])

    def test_resize_reallocates(self):
        ff = FlowField(600, 800, 20, noise=PerlinNoise(seed=2))
        ff.update(1.0)
        ff.resize(400, 400)
        assert ff.field.shape == (20, 20, 2)
        assert not ff.field.any()
        ff.update(1.0)
        assert np.allclose(np.hypot(ff.field[..., 0], ff.field[..., 1]), PARTICLE_SPEED)

    def test_invalid_resolution(self):
        with pytest.raises(ValueError):
            FlowField(100, 100, 0)


# ---------------------------------------------------------------------------
# Distortion field
# ---------------------------------------------------------------------------

class TestDistortionField:

    def test_eight_oscillators_within_ranges(self):
        field = DistortionField(seed=1)
        assert len(field) == 8
        for osc in field.oscillators:
            assert FREQUENCY_RANGE[0] <= osc.frequency < FREQUENCY_RANGE[1]
            assert AMPLITUDE_RANGE[0] <= osc.amplitude < AMPLITUDE_RANGE[1]
            assert 0.0 <= osc.phase < 2 * math.pi
            assert SPEED_RANGE[0] <= osc.speed < SPEED_RANGE[1]

    def test_parameters_constant(self):
        field = DistortionField(seed=1)
        params = field.oscillators
        for t in range(50):
            field.evaluate(t, t, t)
        assert field.oscillators == params
        assert field.evaluate(10, 20, 3.0) == field.evaluate(10, 20, 3.0)

    def test_seed_reproducible(self):
        assert DistortionField(seed=5).oscillators == DistortionField(seed=5).oscillators
        assert DistortionField(seed=5).oscillators != DistortionField(seed=6).oscillators

    def test_matches_oscillator_sum(self):
        field = DistortionField(seed=2)
        x, y, t = 12.0, -130.0, 4.5
        dx = sum(math.sin(x * o.frequency + t * o.speed + o.phase) * o.amplitude
                 for o in field.oscillators)
        dy = sum(math.cos(y * o.frequency + t * o.speed + o.phase + math.pi / 4) * o.amplitude
                 for o in field.oscillators)
        out = field.evaluate(x, y, t)
        assert out.x == pytest.approx(dx)
        assert out.y == pytest.approx(dy)

    def test_bounded_by_amplitude_sum(self):
        field = DistortionField(seed=3)
        bound = field.max_offset
        assert 8 * 1.5 <= bound < 8 * 3.0
        for t in np.linspace(0, 5000, 200):
            d = field.evaluate(t * 0.3, -t, t)
            assert abs(d.x) <= bound and abs(d.y) <= bound

    def test_invalid_count(self):
        with pytest.raises(ValueError):
            DistortionField(count=0)

"""
Tests for the standardization shapes.
"""

import math

import pytest

from cpi_engine.shapes import (
    HIGHER,
    LOWER,
    clamp,
    deviation,
    evaluate,
    inverse_linear,
    linear,
    three_zone,
    transformed,
)


# =============================================================================
# LINEAR SHAPES
# =============================================================================

class TestThreeZone:

    def test_higher_is_better(self):
        assert three_zone(0, 10, 20, HIGHER) == 0
        assert three_zone(15, 10, 20, HIGHER) == pytest.approx(50)
        assert three_zone(25, 10, 20, HIGHER) == 100

    def test_lower_is_better(self):
        assert three_zone(5, 10, 20, LOWER) == 100
        assert three_zone(15, 10, 20, LOWER) == pytest.approx(50)
        assert three_zone(20, 10, 20, LOWER) == 0

    def test_zero_span_does_not_divide(self):
        assert three_zone(5, 10, 10, HIGHER) == 0
        assert three_zone(10, 10, 10, HIGHER) == 0
        assert three_zone(11, 10, 10, HIGHER) == 100

    def test_rejects_unknown_direction(self):
        with pytest.raises(ValueError):
            three_zone(1, 0, 2, "sideways")

    def test_linear_and_inverse(self):
        assert linear(30, 20, 40) == pytest.approx(50)
        assert inverse_linear(25, 20, 40) == pytest.approx(75)


class TestDeviation:

    def test_on_target(self):
        assert deviation(50, 50) == 100

    def test_symmetric(self):
        assert deviation(25, 50) == pytest.approx(50)
        assert deviation(75, 50) == pytest.approx(50)

    def test_far_off_target_clamps(self):
        assert deviation(200, 50) == 0

    def test_explicit_span(self):
        assert deviation(60, 100, span=100) == pytest.approx(60)

    def test_one_sided(self):
        assert deviation(10, 30, penalize="above") == 100
        assert deviation(45, 30, penalize="above") == pytest.approx(50)
        assert deviation(120, 80, penalize="below") == 100
        assert deviation(40, 80, penalize="below") == pytest.approx(50)

    def test_zero_span(self):
        assert deviation(0, 0) == 100
        assert deviation(0.1, 0) == 0

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            deviation(1, 1, penalize="sometimes")


# =============================================================================
# TRANSFORMED SHAPES
# =============================================================================

class TestTransformed:

    def test_raw_benchmarks_are_transformed(self):
        # midpoint in log space
        value = math.exp((math.log(10) + math.log(1000)) / 2)
        assert transformed(value, "log", min=10, max=1000) == pytest.approx(50)

    def test_pre_transformed_benchmarks(self):
        assert transformed(1.24 ** 5, "root5", t_min=0.39, t_max=2.09, better=LOWER) == pytest.approx(50)

    def test_flat_outer_zones(self):
        assert transformed(0.5, "sqrt", min=1, max=100) == 0
        assert transformed(400, "sqrt", min=1, max=100) == 100
        assert transformed(0.5, "sqrt", min=1, max=100, better=LOWER) == 100

    def test_log_of_zero_falls_in_flat_zone(self):
        assert transformed(0, "log", min=1, max=100) == 0
        assert transformed(0, "log", min=1, max=100, better=LOWER) == 100

    def test_separate_floor_and_ceiling(self):
        # inner zone [2, 4] but flat only beyond [1, 5]
        assert transformed(1.5 ** 2, "sqrt", t_min=2, t_max=4, t_floor=1, t_ceiling=5) == 0
        assert transformed(4.5 ** 2, "sqrt", t_min=2, t_max=4, t_floor=1, t_ceiling=5) == 100

    def test_scale(self):
        assert transformed(25, "sqrt", min=0, max=100, scale=1000) == 100

    def test_unknown_transform(self):
        with pytest.raises(ValueError):
            transformed(1, "cube", min=0, max=1)


class TestEvaluate:

    def test_dispatch(self):
        assert evaluate("linear", 5, min=0, max=10) == pytest.approx(50)

    def test_unknown_shape(self):
        with pytest.raises(ValueError):
            evaluate("sigmoid", 1)

    def test_clamp(self):
        assert clamp(-3) == 0
        assert clamp(140) == 100
        assert clamp(42.5) == 42.5

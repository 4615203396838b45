"""
Tests for consistency metrics and grading.
"""

import pytest

from core.errors import ValidationError
from schemas.analytics import ConsistencyGrade
from services.consistency_service import (
    coefficient_of_variation,
    consistency,
    consistency_by_window,
    consistency_grade,
    standard_deviation,
)


class TestConsistency:
    """Tests for consistency()."""

    def test_below_minimum_is_none(self):
        assert consistency([20.0, 22.0, 18.0, 21.0]) is None

    def test_identical_values_grade_a_plus(self):
        metric = consistency([20.0] * 5)
        assert metric.coefficient_of_variation == 0.0
        assert metric.std_dev == 0.0
        assert metric.grade == ConsistencyGrade.A_PLUS
        assert metric.games == 5

    def test_zero_mean_is_perfectly_consistent(self):
        metric = consistency([0.0] * 6)
        assert metric.coefficient_of_variation == 0.0
        assert metric.grade == ConsistencyGrade.A_PLUS

    def test_population_standard_deviation(self):
        metric = consistency([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0])
        assert metric.std_dev == 2.0
        assert metric.coefficient_of_variation == 0.4
        assert metric.grade == ConsistencyGrade.C_PLUS

    def test_negative_mean_keeps_sign(self):
        metric = consistency([-10.0, -10.0, -10.0, -10.0, -20.0])
        assert metric.std_dev == pytest.approx(4.0)
        assert metric.coefficient_of_variation == pytest.approx(4.0 / -12.0)
        assert metric.grade == ConsistencyGrade.A_PLUS

    def test_custom_minimum(self):
        assert consistency([10.0, 12.0], min_games=2) is not None

    def test_non_numeric_rejected(self):
        with pytest.raises(ValidationError):
            consistency([10.0, 10.0, None, 10.0, 10.0])


class TestGrades:
    """Tests for the CV-to-grade table."""

    @pytest.mark.parametrize(
        "cv, grade",
        [
            (0.0, ConsistencyGrade.A_PLUS),
            (0.10, ConsistencyGrade.A_PLUS),
            (0.11, ConsistencyGrade.A),
            (0.20, ConsistencyGrade.A_MINUS),
            (0.27, ConsistencyGrade.B),
            (0.45, ConsistencyGrade.C),
            (0.50, ConsistencyGrade.C_MINUS),
            (0.60, ConsistencyGrade.D),
            (0.61, ConsistencyGrade.F),
            (3.0, ConsistencyGrade.F),
        ],
    )
    def test_boundaries_resolve_to_better_grade(self, cv, grade):
        assert consistency_grade(cv) == grade

    def test_helpers_on_empty_input(self):
        assert standard_deviation([]) == 0.0
        assert coefficient_of_variation([]) == 0.0


class TestConsistencyByWindow:
    """Tests for multi-window consistency."""

    def test_each_window_gated_separately(self):
        values = [20.0, 22.0, 18.0, 20.0, 21.0, 19.0]
        result = consistency_by_window(values, (3, 5, 14))
        assert result[3] is None
        assert result[5].games == 5
        assert result[5].window == 5
        assert result[14].games == 6
        assert result[14].window == 14

import math

import pytest

from validation.comparators import (
    FieldType,
    compare_boolean,
    compare_category,
    compare_numeric,
    compare_values,
    infer_field_type,
)


@pytest.mark.parametrize(
    "expected, actual, score",
    [
        (5, 5, 1.0),
        (5, 6, 0.8),
        (5, 4, 0.8),
        (5, 7, 0.6),
        (5, 3, 0.6),
    ],
)
def test_numeric_tiers(expected, actual, score):
    assert compare_numeric(expected, actual) == pytest.approx(score)


def test_numeric_beyond_two_uses_relative_difference():
    # diff 3, magnitude 8 -> 0.6 * (1 - 3/8)
    assert compare_numeric(5, 8) == pytest.approx(0.6 * (1 - 3 / 8))
    # diff 10, magnitude 10 -> 0.0
    assert compare_numeric(0, 10) == 0.0


def test_numeric_denominator_floor_of_one():
    # Both below 1 in magnitude; denominator stays 1
    assert compare_numeric(0.0, 0.5) == pytest.approx(0.6 * (1 - 0.5))


def test_numeric_monotonic_in_distance():
    scores = [compare_numeric(10, 10 + d) for d in range(0, 25)]
    assert all(a >= b for a, b in zip(scores, scores[1:]))


def test_numeric_non_finite_falls_back_to_equality():
    assert compare_numeric(math.inf, math.inf) == 1.0
    assert compare_numeric(5, math.inf) == 0.0
    assert compare_numeric(5, math.nan) == 0.0


def test_boolean_and_category():
    assert compare_boolean(True, True) == 1.0
    assert compare_boolean(True, False) == 0.0
    assert compare_category("shallow", "shallow") == 1.0
    assert compare_category("shallow", "deep") == 0.0
    assert compare_category("Deep", "deep") == 0.0


def test_infer_field_type():
    assert infer_field_type(True) == FieldType.BOOLEAN
    assert infer_field_type(3) == FieldType.NUMBER
    assert infer_field_type(2.5) == FieldType.NUMBER
    assert infer_field_type(math.nan) == FieldType.CATEGORY
    assert infer_field_type("deep") == FieldType.STRING
    assert infer_field_type([1, 2]) == FieldType.CATEGORY


def test_compare_values_null_handling():
    assert compare_values(None, None) == 1.0
    assert compare_values(3, None) == 0.0
    assert compare_values(True, None) == 0.0


def test_compare_values_dispatches_on_expected_type():
    assert compare_values(True, False) == 0.0
    assert compare_values(4, 5) == pytest.approx(0.8)
    assert compare_values("deep", "deep") == 1.0
    # Wrong-typed actual never earns numeric partial credit
    assert compare_values(4, "4") == 0.0

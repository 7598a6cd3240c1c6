"""
Field Comparators

Pure functions that score agreement between an expected value and a
scout's actual value.

Scoring:
- Boolean: exact match only (1.0 or 0.0)
- Number: scaled distance (1.0, 0.8, 0.6, then relative falloff)
- Category/String: exact match only (1.0 or 0.0)

Field type is inferred at runtime from the expected value so the same
comparators work for every season's schema.
"""

import math
from enum import Enum
from typing import Any


class FieldType(str, Enum):
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    CATEGORY = "category"


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a numeric field
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def infer_field_type(value: Any) -> FieldType:
    """Infer the comparison type from a value."""
    if isinstance(value, bool):
        return FieldType.BOOLEAN
    if _is_number(value) and math.isfinite(value):
        return FieldType.NUMBER
    if isinstance(value, str):
        return FieldType.STRING
    return FieldType.CATEGORY


def compare_boolean(expected: bool, actual: bool) -> float:
    return 1.0 if expected == actual else 0.0


def compare_numeric(expected: float, actual: float) -> float:
    """
    Compare numeric fields using scaled distance.

    - Exact match: 1.0
    - Off by 1: 0.8
    - Off by 2: 0.6
    - Further: 0.6 * (1 - relative difference), floored at 0.0

    The relative difference divides by max(|expected|, |actual|, 1).
    Non-finite inputs fall back to exact equality.
    """
    if not _is_number(expected) or not _is_number(actual):
        return 0.0
    if not math.isfinite(expected) or not math.isfinite(actual):
        return 1.0 if expected == actual else 0.0

    diff = abs(expected - actual)

    if diff == 0:
        return 1.0
    if diff == 1:
        return 0.8
    if diff == 2:
        return 0.6

    magnitude = max(abs(expected), abs(actual), 1)
    relative_diff = diff / magnitude
    return max(0.0, 0.6 * (1 - relative_diff))


def compare_category(expected: Any, actual: Any) -> float:
    """Exact, case-sensitive equality for categories and strings."""
    return 1.0 if expected == actual else 0.0


def compare_values(expected: Any, actual: Any) -> float:
    """
    Score an actual value against an expected value.

    Args:
        expected: Consensus or official value (drives type inference)
        actual: Scout's observed value

    Returns:
        Accuracy score in [0.0, 1.0]
    """
    if actual is None:
        return 1.0 if expected is None else 0.0

    field_type = infer_field_type(expected)

    if field_type == FieldType.BOOLEAN:
        return compare_boolean(expected, actual)
    if field_type == FieldType.NUMBER:
        return compare_numeric(expected, actual)
    return compare_category(expected, actual)

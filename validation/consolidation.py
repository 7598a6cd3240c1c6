"""
Multi-Scout Consolidation

Merges several scouts' period payloads into one consensus payload:
- Majority vote for booleans (ties resolve to False)
- Median for numbers (rounded half-up to a whole count)
- Mode for categories (first-seen value wins ties)

A field reported by fewer than `min_field_support` scouts has no
consensus and consolidates to None.
"""

import math
from typing import Any, Callable, Dict, List, Optional, Sequence

from app.core.config import settings
from schemas.scouting import Payload
from validation.comparators import FieldType, infer_field_type

# Signature expected by the consensus strategy
Consolidator = Callable[[List[Payload]], Payload]

METADATA_KEYS = ("schema_version", "notes")


def majority_vote(values: Sequence[bool]) -> bool:
    true_count = sum(1 for v in values if v is True)
    false_count = sum(1 for v in values if v is False)
    return true_count > false_count


def median(values: Sequence[float]) -> Optional[float]:
    ordered = sorted(values)
    if not ordered:
        return None
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def mode(values: Sequence[Any]) -> Any:
    counts: Dict[Any, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1

    best, best_count = None, 0
    for value, count in counts.items():
        if count > best_count:
            best, best_count = value, count
    return best


def _is_non_finite(value: Any) -> bool:
    return isinstance(value, float) and not math.isfinite(value)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def consolidate_payloads(
    payloads: List[Payload],
    min_field_support: Optional[int] = None,
) -> Payload:
    """
    Consolidate one period's payloads from several scouts.

    Args:
        payloads: One payload per scout (None entries are ignored)
        min_field_support: Minimum non-null reports for a field to get a consensus

    Returns:
        Consensus payload
    """
    payloads = [p for p in payloads if p is not None]
    if not payloads:
        return {}
    if len(payloads) == 1:
        return dict(payloads[0])

    support = settings.consensus_min_field_support if min_field_support is None else min_field_support
    consolidated: Payload = {}

    keys: List[str] = []
    for payload in payloads:
        for key in payload:
            if key not in keys:
                keys.append(key)

    for key in keys:
        if key == "schema_version":
            consolidated[key] = payloads[0].get(key)
            continue
        if key == "notes":
            consolidated[key] = " | ".join(str(p[key]) for p in payloads if p.get(key))
            continue

        # NaN/inf reports count as unreported
        values = [p[key] for p in payloads if p.get(key) is not None and not _is_non_finite(p[key])]
        if not values or len(values) < support:
            consolidated[key] = None
            continue

        field_type = infer_field_type(values[0])
        if field_type == FieldType.BOOLEAN:
            consolidated[key] = majority_vote([v for v in values if isinstance(v, bool)])
        elif field_type == FieldType.NUMBER:
            numbers = [v for v in values if isinstance(v, (int, float)) and not isinstance(v, bool)]
            consolidated[key] = _round_half_up(median(numbers))
        elif field_type == FieldType.STRING:
            consolidated[key] = mode(values)
        else:
            # Complex values: first report wins
            consolidated[key] = values[0]

    return consolidated

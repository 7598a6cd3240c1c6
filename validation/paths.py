from typing import Any, Mapping


def get_value_at_path(obj: Any, path: str) -> Any:
    """
    Resolve a dot-notation path (e.g. "teleop_performance.coral_scored_L1").

    Returns None when any segment is missing or a non-mapping is reached.
    """
    current = obj
    for part in path.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        else:
            return None
    return current

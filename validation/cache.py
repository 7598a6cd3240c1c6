"""
Match Result Cache

Execution-scoped store for match-level validation results.

The official-record strategy validates all six teams of a match in one
pass while the executor asks for one team at a time. Results for the
whole match are kept here under (execution_id, match_key) so later
calls in the same execution only filter.

DESIGN RULES:
- Owned by the executor, one instance per execution
- Never attached to a strategy instance
- Cleared when the execution ends
"""

from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from schemas.validation import ValidationResult


CacheKey = Tuple[str, str]


class MatchResultCache:
    """
    In-process cache partitioned by execution id.

    Not thread-safe; executions run on a single event loop.
    """

    def __init__(self):
        self._entries: Dict[CacheKey, List["ValidationResult"]] = {}

    def get(self, execution_id: str, match_key: str) -> Optional[List["ValidationResult"]]:
        return self._entries.get((execution_id, match_key))

    def put(self, execution_id: str, match_key: str, results: List["ValidationResult"]) -> None:
        self._entries[(execution_id, match_key)] = list(results)

    def clear(self, execution_id: Optional[str] = None) -> None:
        """
        Drop cached results.

        Args:
            execution_id: Only drop this execution's entries. Drops everything if None.
        """
        if execution_id is None:
            self._entries.clear()
            return
        for key in [k for k in self._entries if k[0] == execution_id]:
            del self._entries[key]

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

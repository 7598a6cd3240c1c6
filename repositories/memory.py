"""
In-Memory Repositories

Process-local implementations of the repository interfaces.
Used by the API wiring for local runs and by tests.

DESIGN RULES:
- No persistence
- Enforces one observation per (match, team, scout)
"""

from typing import Dict, Iterable, List, Optional, Set, Tuple

from repositories.base import (
    DuplicateObservationError,
    MatchRepository,
    ObservationRepository,
    ValidationResultStore,
)
from schemas.scouting import MatchSchedule, Observation
from schemas.validation import ValidationResult


class InMemoryObservationRepository(ObservationRepository):

    def __init__(self, observations: Optional[Iterable[Observation]] = None):
        self._by_match: Dict[str, List[Observation]] = {}
        self._keys: Set[Tuple[str, int, str]] = set()
        for observation in observations or []:
            self.add(observation)

    def add(self, observation: Observation) -> None:
        """
        Store a submitted observation.

        Raises:
            DuplicateObservationError: The scout already submitted for this team and match.
        """
        key = (observation.match_key, observation.team_number, observation.observer or "")
        if observation.observer and key in self._keys:
            raise DuplicateObservationError(
                f"Scout {observation.observer} already observed team "
                f"{observation.team_number} in {observation.match_key}"
            )
        self._keys.add(key)
        self._by_match.setdefault(observation.match_key, []).append(observation)

    async def get_observations_for_match(self, match_key: str) -> List[Observation]:
        return list(self._by_match.get(match_key, []))


class InMemoryMatchRepository(MatchRepository):

    def __init__(self, matches: Optional[Iterable[MatchSchedule]] = None):
        self._matches: Dict[str, MatchSchedule] = {}
        for match in matches or []:
            self.add(match)

    def add(self, match: MatchSchedule) -> None:
        self._matches[match.match_key] = match

    async def find_by_match_key(self, match_key: str) -> Optional[MatchSchedule]:
        return self._matches.get(match_key)

    async def find_by_event_key(self, event_key: str) -> List[MatchSchedule]:
        return [m for m in self._matches.values() if m.event_key == event_key]


class InMemoryValidationResultStore(ValidationResultStore):

    def __init__(self):
        self._results: List[ValidationResult] = []

    def save_batch(self, results: List[ValidationResult]) -> None:
        self._results.extend(results)

    def find_by_match(self, match_key: str) -> List[ValidationResult]:
        return [r for r in self._results if r.match_key == match_key]

    def find_by_scouter(self, scouter_id: str) -> List[ValidationResult]:
        return [r for r in self._results if r.scouter_id == scouter_id]

    def __len__(self) -> int:
        return len(self._results)

"""
Repository Interfaces

Abstract contracts for the scouting record store and the validation
result store. Storage-agnostic - implementations can be in-memory,
file-based, or a hosted database.

DESIGN RULES:
- Strategies read through these interfaces only
- Observations and official results are never written by the engine
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from schemas.scouting import AllianceComposition, MatchSchedule, Observation, OfficialMatchResult
from schemas.validation import ValidationResult


class MatchNotFoundError(LookupError):
    """Raised when a match key is not in the schedule."""

    def __init__(self, match_key: str):
        super().__init__(f"Match not found: {match_key}")
        self.match_key = match_key


class DuplicateObservationError(ValueError):
    """Raised when a (match, team, scout) triple already has an observation."""


class ObservationRepository(ABC):

    @abstractmethod
    async def get_observations_for_match(self, match_key: str) -> List[Observation]:
        """
        All scouts' observations for a match (every team, both alliances).
        """
        pass


class MatchRepository(ABC):
    """
    Match schedule and official results.

    Implementations:
    - InMemoryMatchRepository
    - Hosted database repository (external)
    """

    @abstractmethod
    async def find_by_match_key(self, match_key: str) -> Optional[MatchSchedule]:
        pass

    @abstractmethod
    async def find_by_event_key(self, event_key: str) -> List[MatchSchedule]:
        pass

    async def get_alliance_composition(self, match_key: str) -> AllianceComposition:
        match = await self.find_by_match_key(match_key)
        if match is None:
            raise MatchNotFoundError(match_key)
        return match.alliances()

    async def get_official_result(self, match_key: str) -> Optional[OfficialMatchResult]:
        match = await self.find_by_match_key(match_key)
        if match is None:
            return None
        return match.official_result()


class ValidationResultStore(ABC):
    """
    Persistence for validation results (consumed by reliability scoring).
    """

    @abstractmethod
    def save_batch(self, results: List[ValidationResult]) -> None:
        """
        Persist results from one execution.

        Must not throw - failures should be logged and ignored.
        """
        pass

    @abstractmethod
    def find_by_match(self, match_key: str) -> List[ValidationResult]:
        pass

    @abstractmethod
    def find_by_scouter(self, scouter_id: str) -> List[ValidationResult]:
        pass

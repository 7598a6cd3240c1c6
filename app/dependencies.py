"""
FastAPI Dependencies

All object creation happens here, not per request.
This module provides dependency injection for the validation layer.

RULE: FastAPI routes call exactly one entry point, the ValidationExecutor.
Deployments backed by a hosted database override the repository
providers (app.dependency_overrides) instead of touching routes.
"""

from functools import lru_cache

from app.core.config import settings
from orchestration.executor import ValidationExecutor
from repositories.base import MatchRepository, ObservationRepository, ValidationResultStore
from repositories.file_store import FileValidationResultStore
from repositories.memory import InMemoryMatchRepository, InMemoryObservationRepository
from schemas.validation import ValidationStrategyType
from validation.strategies.consensus import ConsensusValidationStrategy
from validation.strategies.official_record import OfficialRecordValidationStrategy


@lru_cache(maxsize=1)
def get_observation_repository() -> ObservationRepository:
    return InMemoryObservationRepository()


@lru_cache(maxsize=1)
def get_match_repository() -> MatchRepository:
    return InMemoryMatchRepository()


@lru_cache(maxsize=1)
def get_result_store() -> ValidationResultStore:
    return FileValidationResultStore(settings.result_store_path)


def build_executor(
    observations: ObservationRepository,
    matches: MatchRepository,
    result_store: ValidationResultStore,
) -> ValidationExecutor:
    """
    Wire strategies and repositories into an executor.

    - ConsensusValidationStrategy: scouts vs. each other
    - OfficialRecordValidationStrategy: alliance totals vs. TBA
    """
    strategies = {
        ValidationStrategyType.CONSENSUS: ConsensusValidationStrategy(observations),
        ValidationStrategyType.TBA: OfficialRecordValidationStrategy(matches, observations),
    }
    return ValidationExecutor(strategies=strategies, match_repository=matches, result_store=result_store)


def get_validation_executor() -> ValidationExecutor:
    """
    Create the ValidationExecutor from the current repository providers.

    Returns:
        ValidationExecutor: The single entry point for validation runs.
    """
    return build_executor(get_observation_repository(), get_match_repository(), get_result_store())

# Repositories Package
from repositories.base import (
    DuplicateObservationError,
    MatchNotFoundError,
    MatchRepository,
    ObservationRepository,
    ValidationResultStore,
)
from repositories.memory import (
    InMemoryMatchRepository,
    InMemoryObservationRepository,
    InMemoryValidationResultStore,
)
from repositories.file_store import FileValidationResultStore

__all__ = [
    "DuplicateObservationError",
    "MatchNotFoundError",
    "MatchRepository",
    "ObservationRepository",
    "ValidationResultStore",
    "InMemoryMatchRepository",
    "InMemoryObservationRepository",
    "InMemoryValidationResultStore",
    "FileValidationResultStore",
]

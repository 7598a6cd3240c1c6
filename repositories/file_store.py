"""
File-based Validation Result Store

JSONL file-based storage for validation results.
Human-readable, easy to inspect, no external dependencies.

DESIGN RULES:
- Append-only (JSONL format)
- Never throws on write (graceful failure)
- One line per field-level result
"""

import json
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, List

from app.core.config import settings
from repositories.base import ValidationResultStore
from schemas.validation import ValidationResult

logger = logging.getLogger(__name__)


class FileValidationResultStore(ValidationResultStore):
    """
    JSONL file-based result storage.

    Each line is a serialized ValidationResult:
    - validation_id / execution_id
    - scouter_id, match_key, team_number
    - field_path, expected_value, actual_value
    - accuracy_score, outcome, confidence_level
    - validation_type, validation_method, notes, created_at
    """

    def __init__(self, path: str | None = None):
        """
        Initialize file store.

        Args:
            path: Path to JSONL file. Defaults to settings.result_store_path.
        """
        self._path = Path(path or settings.result_store_path)

        # Ensure parent directory exists
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def save_batch(self, results: List[ValidationResult]) -> None:
        """
        Append results to the JSONL file.

        Never throws - failures are logged and ignored.
        """
        if not results:
            return
        try:
            with open(self._path, "a", encoding="utf-8") as f:
                for result in results:
                    f.write(json.dumps(result.model_dump(), default=self._json_serializer) + "\n")
        except Exception as e:
            logger.error(f"[RESULT STORE ERROR] Failed to save {len(results)} results: {e}")

    def _json_serializer(self, obj: Any) -> Any:
        """Custom JSON serializer for special types."""
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return str(obj)

    def read_all(self) -> List[ValidationResult]:
        """
        Read all results from the file.

        Returns:
            List of validation results (unreadable lines are skipped)
        """
        results: List[ValidationResult] = []

        if not self._path.exists():
            return results

        with open(self._path, "r", encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    results.append(ValidationResult.model_validate(json.loads(line)))
                except ValueError as e:
                    logger.warning(f"[RESULT STORE] Skipping line {line_number}: {e}")

        return results

    def find_by_match(self, match_key: str) -> List[ValidationResult]:
        return [r for r in self.read_all() if r.match_key == match_key]

    def find_by_scouter(self, scouter_id: str) -> List[ValidationResult]:
        return [r for r in self.read_all() if r.scouter_id == scouter_id]

    def get_statistics(self) -> dict:
        """
        Compute basic statistics from stored results.

        Returns:
            Dict with count, avg_accuracy, and outcome counts
        """
        results = self.read_all()

        if not results:
            return {"count": 0}

        outcomes: dict = {}
        for r in results:
            outcomes[r.outcome.value] = outcomes.get(r.outcome.value, 0) + 1

        return {
            "count": len(results),
            "avg_accuracy": sum(r.accuracy_score for r in results) / len(results),
            "outcomes": outcomes,
        }

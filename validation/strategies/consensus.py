"""
Consensus Validation Strategy

Validates scouters by comparing each scout's submitted values against the
consensus of ALL scouts who observed the same team in the same match.

DESIGN RULES:
- Minimum scouts per team-in-match (default 3, overridable per context)
- Each period (auto/teleop/endgame) is consolidated independently
- Fields without a consensus value are never scored
- can_validate() fails closed on any repository error
"""

import logging
import math
import statistics
import uuid
from typing import Any, Dict, List, Optional, Tuple

from app.core.config import settings
from repositories.base import ObservationRepository
from schemas.scouting import PERIOD_NAMES, Observation, Payload
from schemas.validation import (
    ConsensusMethod,
    ConsensusValue,
    ValidationContext,
    ValidationResult,
    ValidationStrategyType,
)
from validation.comparators import FieldType, compare_values, infer_field_type
from validation.consolidation import METADATA_KEYS, Consolidator, consolidate_payloads
from validation.errors import ValidationError, ValidationErrorCode
from validation.outcomes import classify_consensus_outcome
from validation.paths import get_value_at_path
from validation.strategies.base import ValidationStrategy

logger = logging.getLogger(__name__)

MAX_CONFIDENCE = 0.95
BASE_CONFIDENCE = 0.5

_CONSENSUS_METHODS = {
    FieldType.BOOLEAN: ConsensusMethod.MAJORITY_VOTE,
    FieldType.NUMBER: ConsensusMethod.MEDIAN,
    FieldType.STRING: ConsensusMethod.MODE,
    FieldType.CATEGORY: ConsensusMethod.MODE,
}


def field_count_confidence(field_count: int) -> float:
    """
    Logarithmic confidence from the number of fields validated for a scout.

    10 fields -> ~0.73, 30 fields -> ~0.85, 100+ fields -> 0.95
    """
    if field_count <= 0:
        return BASE_CONFIDENCE
    return min(MAX_CONFIDENCE, BASE_CONFIDENCE + 0.45 * (math.log(field_count + 1) / math.log(100)))


class ConsensusValidationStrategy(ValidationStrategy):
    """
    Compares each scout against the consolidated consensus for a team-in-match.
    """
    name = "Consensus Validation"
    type = ValidationStrategyType.CONSENSUS

    def __init__(
        self,
        observation_repository: ObservationRepository,
        consolidator: Optional[Consolidator] = None,
        default_min_scouts: Optional[int] = None,
    ):
        """
        Args:
            observation_repository: Source of scout observations
            consolidator: Payload merge routine (defaults to majority/median/mode)
            default_min_scouts: Used when the context does not override it
        """
        self._repository = observation_repository
        self._consolidate = consolidator or consolidate_payloads
        self._default_min_scouts = default_min_scouts or settings.consensus_min_scouts

    def _min_scouts(self, context: ValidationContext) -> int:
        if context.min_scouts_required is not None:
            return context.min_scouts_required
        return self._default_min_scouts

    async def _team_observations(self, match_key: str, team_number: int) -> List[Observation]:
        observations = await self._repository.get_observations_for_match(match_key)
        return [obs for obs in observations if obs.team_number == team_number]

    async def can_validate(self, context: ValidationContext) -> bool:
        if not context.match_key or not context.team_number:
            return False

        try:
            observations = await self._team_observations(context.match_key, context.team_number)
        except Exception as e:
            logger.error(
                f"Error checking consensus validation for {context.match_key} "
                f"team {context.team_number}: {e}"
            )
            return False

        return len(observations) >= self._min_scouts(context)

    async def validate(self, context: ValidationContext) -> List[ValidationResult]:
        """
        Validate every scout of one team-in-match against consensus.

        Raises:
            ValidationError: A required context field is missing or too few scouts observed.
        """
        self._require_context(context)

        observations = await self._team_observations(context.match_key, context.team_number)

        min_scouts = self._min_scouts(context)
        if len(observations) < min_scouts:
            raise ValidationError(
                f"Insufficient scouts: found {len(observations)}, minimum required {min_scouts}",
                ValidationErrorCode.INSUFFICIENT_SCOUTS,
                {"found": len(observations), "required": min_scouts},
            )

        consensus: Dict[str, Payload] = {
            period: self._consolidate([getattr(obs, period) for obs in observations])
            for period in PERIOD_NAMES
        }

        execution_id = context.execution_id or str(uuid.uuid4())
        results: List[ValidationResult] = []

        for observation in observations:
            scouter_id = observation.observer
            if not scouter_id:
                logger.warning(
                    f"Skipping observation {observation.id} for {context.match_key} "
                    f"team {context.team_number}: no scouter id"
                )
                continue

            comparisons: List[Tuple[str, Any, Any, float]] = []
            for period in PERIOD_NAMES:
                comparisons.extend(
                    self._compare_period(period, getattr(observation, period), consensus[period])
                )

            confidence = field_count_confidence(len(comparisons))

            for field_path, expected, actual, accuracy in comparisons:
                results.append(
                    ValidationResult(
                        execution_id=execution_id,
                        scouter_id=scouter_id,
                        match_scouting_id=observation.id,
                        match_key=context.match_key,
                        team_number=context.team_number,
                        event_key=context.event_key,
                        season_year=context.season_year,
                        field_path=field_path,
                        expected_value=expected,
                        actual_value=actual,
                        accuracy_score=accuracy,
                        outcome=classify_consensus_outcome(accuracy),
                        confidence_level=confidence,
                        validation_type=self.type,
                        validation_method=self.validation_method,
                    )
                )

        logger.info(
            f"Consensus validation for {context.match_key} team {context.team_number}: "
            f"{len(observations)} scouts, {len(results)} results"
        )
        return results

    def _require_context(self, context: ValidationContext) -> None:
        required = (
            ("match_key", ValidationErrorCode.MISSING_MATCH_KEY),
            ("team_number", ValidationErrorCode.MISSING_TEAM_NUMBER),
            ("event_key", ValidationErrorCode.MISSING_EVENT_KEY),
            ("season_year", ValidationErrorCode.MISSING_SEASON_YEAR),
        )
        for field_name, code in required:
            if not getattr(context, field_name):
                raise ValidationError(f"{field_name} is required for consensus validation", code)

    def _compare_period(
        self,
        period: str,
        actual_data: Optional[Payload],
        consensus_data: Optional[Payload],
    ) -> List[Tuple[str, Any, Any, float]]:
        """
        Compare one scout's period payload against the consensus payload.

        Returns:
            (field_path, expected, actual, accuracy) for every scored field
        """
        if not actual_data or not consensus_data:
            return []

        keys = list(actual_data)
        keys.extend(k for k in consensus_data if k not in actual_data)

        comparisons = []
        for key in keys:
            if key in METADATA_KEYS:
                continue

            expected = consensus_data.get(key)
            # No consensus for this field
            if expected is None:
                continue

            actual = actual_data.get(key)
            comparisons.append((f"{period}.{key}", expected, actual, compare_values(expected, actual)))

        return comparisons

    def calculate_consensus_metadata(
        self,
        field_path: str,
        consensus_value: Any,
        observations: List[Observation],
    ) -> ConsensusValue:
        """
        Describe how strongly scouts agreed on a consensus value.

        Args:
            field_path: Dot path such as "teleop_performance.coral_scored_L1"
            consensus_value: The consolidated value for the field
            observations: Observations the consensus was built from

        Returns:
            ConsensusValue with agreement percentage and spread
        """
        values = [get_value_at_path(obs.periods(), field_path) for obs in observations]
        values = [v for v in values if v is not None]

        matching = sum(1 for v in values if v == consensus_value)
        agreement = (matching / len(values)) * 100 if values else 0.0

        field_type = infer_field_type(consensus_value)

        standard_deviation = None
        if field_type == FieldType.NUMBER:
            numbers = [v for v in values if isinstance(v, (int, float)) and not isinstance(v, bool)]
            if len(numbers) > 1:
                standard_deviation = statistics.pstdev(numbers)

        confidence = min(MAX_CONFIDENCE, BASE_CONFIDENCE + 0.45 * (math.log(len(values) + 1) / math.log(10)))

        return ConsensusValue(
            field_path=field_path,
            value=consensus_value,
            method=_CONSENSUS_METHODS[field_type],
            scout_count=len(values),
            agreement_percentage=round(agreement, 1),
            confidence_level=confidence,
            standard_deviation=standard_deviation,
        )

"""
Official-Record (TBA) Validation Strategy

Validates scouting data by comparing aggregated alliance totals against
The Blue Alliance official score breakdown. TBA reports alliance totals,
not per-robot numbers, so this strategy:

1. Aggregates the scouted contributions of each alliance's teams
2. Compares the alliance total against the official metric
3. Splits the alliance discrepancy EQUALLY across teams with data

A team scouted perfectly still shares an alliance-mate's error.

DESIGN RULES:
- Match-level computation, team-level results
- Whole-match results cached per execution (executor calls once per team)
- Best-effort: validate() never raises, it returns []
- Confidence fixed at 0.6 (coarser than consensus)
"""

import logging
import math
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from app.core.config import settings
from repositories.base import MatchRepository, ObservationRepository
from schemas.scouting import AllianceColor, Observation, OfficialMatchResult
from schemas.validation import ValidationContext, ValidationResult, ValidationStrategyType
from validation.field_mappings import AggregationMethod, FieldMapping, load_field_mappings
from validation.outcomes import classify_official_outcome
from validation.paths import get_value_at_path
from validation.strategies.base import ValidationStrategy

logger = logging.getLogger(__name__)


@dataclass
class TeamScoutingData:
    """One alliance slot and the observation (if any) scouted for it."""
    team_number: int
    observation: Optional[Observation] = None
    field_values: Dict[str, float] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return self.observation is not None


def _to_number(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def official_accuracy_score(official_value: float, per_team_error: float) -> float:
    """
    Score a team's share of the alliance error.

    1.0 when the share is zero, otherwise 1 - share / max(official, 1), floored at 0.
    """
    if per_team_error == 0:
        return 1.0
    relative_error = per_team_error / max(official_value, 1)
    return max(0.0, 1 - relative_error)


class OfficialRecordValidationStrategy(ValidationStrategy):
    """
    Compares alliance-aggregated scouting data against official match results.
    """
    name = "TBA Validation"
    type = ValidationStrategyType.TBA

    def __init__(
        self,
        match_repository: MatchRepository,
        observation_repository: ObservationRepository,
        field_mappings: Optional[List[FieldMapping]] = None,
        min_teams_required: Optional[int] = None,
        confidence_level: Optional[float] = None,
    ):
        """
        Args:
            match_repository: Schedule and official results
            observation_repository: Source of scout observations
            field_mappings: Fixed mappings. Loaded per season from YAML if None.
            min_teams_required: Teams with data needed per alliance (default 3)
            confidence_level: Confidence recorded on every result (default 0.6)
        """
        self._matches = match_repository
        self._observations = observation_repository
        self._field_mappings = field_mappings
        self._min_teams = min_teams_required or settings.official_min_teams
        self._confidence = confidence_level if confidence_level is not None else settings.official_confidence

    def _mappings_for(self, context: ValidationContext) -> List[FieldMapping]:
        if self._field_mappings is not None:
            return self._field_mappings
        return load_field_mappings(context.season_year)

    async def can_validate(self, context: ValidationContext) -> bool:
        """
        Requirements:
        1. Match key provided
        2. Official result exists with a score breakdown
        3. Results posted (match played)
        """
        if not context.match_key:
            return False
        try:
            official = await self._matches.get_official_result(context.match_key)
        except Exception as e:
            logger.error(f"Error checking official result for {context.match_key}: {e}")
            return False
        return official is not None and official.is_final

    async def validate(self, context: ValidationContext) -> List[ValidationResult]:
        """
        Validate the whole match once per execution, return the requested team's slice.

        Never raises - errors are logged and an empty list returned.
        """
        try:
            return await self._validate(context)
        except Exception as e:
            logger.error(f"Official-record validation failed for {context.match_key}: {e}")
            return []

    async def _validate(self, context: ValidationContext) -> List[ValidationResult]:
        if not context.match_key:
            raise ValueError("Match key is required for official-record validation")

        execution_id = context.execution_id or str(uuid.uuid4())
        cache = context.match_cache

        if cache is not None:
            cached = cache.get(execution_id, context.match_key)
            if cached is not None:
                logger.debug(f"Using cached results for {context.match_key} team {context.team_number}")
                return self._for_team(cached, context.team_number)

        all_results = await self._validate_match(context, execution_id)

        if cache is not None:
            cache.put(execution_id, context.match_key, all_results)

        return self._for_team(all_results, context.team_number)

    @staticmethod
    def _for_team(results: List[ValidationResult], team_number: Optional[int]) -> List[ValidationResult]:
        return [r for r in results if r.team_number == team_number]

    async def _validate_match(self, context: ValidationContext, execution_id: str) -> List[ValidationResult]:
        official = await self._matches.get_official_result(context.match_key)
        if official is None or not official.score_breakdown:
            raise ValueError(f"Official match data not available for {context.match_key}")

        alliances = await self._matches.get_alliance_composition(context.match_key)
        logger.info(
            f"Validating {context.match_key} against official record: "
            f"red={alliances.red} blue={alliances.blue}"
        )

        observations = await self._observations.get_observations_for_match(context.match_key)
        mappings = self._mappings_for(context)

        results: List[ValidationResult] = []
        for color in (AllianceColor.RED, AllianceColor.BLUE):
            alliance_data = self._build_alliance_data(alliances.for_color(color), observations, mappings)
            alliance_results = self._validate_alliance(
                color, alliance_data, official, mappings, context, execution_id
            )
            logger.info(f"{context.match_key} {color.value} alliance: {len(alliance_results)} results")
            results.extend(alliance_results)

        return results

    def _build_alliance_data(
        self,
        team_numbers: List[int],
        observations: List[Observation],
        mappings: List[FieldMapping],
    ) -> List[TeamScoutingData]:
        """
        Index the match's observations by team and extract mapped field values.

        When a team has several observations the last one listed is used.
        """
        by_team: Dict[int, Observation] = {}
        for observation in observations:
            by_team[observation.team_number] = observation

        paths = {path for mapping in mappings for path in mapping.observation_paths}

        alliance_data = []
        for team_number in team_numbers:
            observation = by_team.get(team_number)
            values: Dict[str, float] = {}
            if observation is not None:
                periods = observation.periods()
                for path in paths:
                    number = _to_number(get_value_at_path(periods, path))
                    if number is not None:
                        values[path] = number
            alliance_data.append(TeamScoutingData(team_number, observation, values))

        return alliance_data

    def _validate_alliance(
        self,
        color: AllianceColor,
        alliance_data: List[TeamScoutingData],
        official: OfficialMatchResult,
        mappings: List[FieldMapping],
        context: ValidationContext,
        execution_id: str,
    ) -> List[ValidationResult]:
        teams_with_data = [t for t in alliance_data if t.has_data]
        if len(teams_with_data) < self._min_teams:
            logger.info(
                f"Skipping {color.value} alliance of {context.match_key}: "
                f"{len(teams_with_data)} teams with data (need {self._min_teams})"
            )
            return []

        breakdown = official.breakdown_for(color)
        results: List[ValidationResult] = []

        for mapping in mappings:
            official_value = _to_number(mapping.official_value(breakdown))
            if official_value is None:
                continue

            contributions = self._aggregate(alliance_data, mapping)
            results.extend(
                self._compare_and_distribute(
                    mapping, official_value, contributions, teams_with_data, context, execution_id
                )
            )

        return results

    @staticmethod
    def _aggregate(alliance_data: List[TeamScoutingData], mapping: FieldMapping) -> Dict[int, float]:
        """Per-team contribution to one mapped metric."""
        contributions: Dict[int, float] = {}
        for team in alliance_data:
            contribution = 0.0
            for path in mapping.observation_paths:
                value = team.field_values.get(path)
                if value is None:
                    continue
                if mapping.aggregation == AggregationMethod.BOOLEAN_COUNT:
                    contribution += 1 if value else 0
                else:
                    contribution += value
            contributions[team.team_number] = contribution
        return contributions

    def _compare_and_distribute(
        self,
        mapping: FieldMapping,
        official_value: float,
        contributions: Mapping[int, float],
        teams_with_data: List[TeamScoutingData],
        context: ValidationContext,
        execution_id: str,
    ) -> List[ValidationResult]:
        scouted_total = sum(contributions.values())
        alliance_error = abs(official_value - scouted_total)
        per_team_error = alliance_error / len(teams_with_data)

        accuracy = official_accuracy_score(official_value, per_team_error)
        outcome = classify_official_outcome(accuracy)

        results = []
        for team in teams_with_data:
            if not team.observation.scouter_id:
                logger.warning(
                    f"Skipping {context.match_key} team {team.team_number} "
                    f"{mapping.official_field}: no scouter_id"
                )
                continue

            contribution = contributions.get(team.team_number, 0.0)
            results.append(
                ValidationResult(
                    execution_id=execution_id,
                    scouter_id=team.observation.scouter_id,
                    match_scouting_id=team.observation.id,
                    match_key=context.match_key,
                    team_number=team.team_number,
                    event_key=context.event_key,
                    season_year=context.season_year,
                    field_path=mapping.field_path,
                    expected_value=official_value,
                    actual_value=contribution,
                    accuracy_score=accuracy,
                    outcome=outcome,
                    confidence_level=self._confidence,
                    validation_type=self.type,
                    validation_method=self.validation_method,
                    notes=(
                        f"Alliance total from TBA: {official_value:g}, "
                        f"Scouted total: {scouted_total:g}, "
                        f"Team contribution: {contribution:g}, "
                        f"Equal error distribution: {per_team_error:.2f} "
                        f"({alliance_error:g} / {len(teams_with_data)} teams)"
                    ),
                )
            )

        return results

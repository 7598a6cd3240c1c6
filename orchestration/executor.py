import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from app.core.config import settings
from repositories.base import MatchRepository, ValidationResultStore
from schemas.scouting import MatchSchedule
from schemas.validation import (
    ValidationContext,
    ValidationExecutionSummary,
    ValidationResult,
    ValidationStrategyType,
)
from validation.cache import MatchResultCache
from validation.errors import ValidationError, ValidationErrorCode
from validation.strategies.base import ValidationStrategy

logger = logging.getLogger(__name__)


def season_year_from_event_key(event_key: str) -> Optional[int]:
    """Event keys start with the season year ('2025casj' -> 2025)."""
    try:
        return int(event_key[:4])
    except (TypeError, ValueError):
        return None


class ValidationExecutor:
    """
    The Engine.

    Runs validation strategies over matches:
    1. Each execution gets an id and its own match result cache
    2. Every team of every match is offered to each selected strategy
    3. Strategies that can validate produce field-level results
    4. Results are persisted and summarized

    A failing strategy or team is recorded and skipped, never fatal.
    """

    def __init__(
        self,
        strategies: Mapping[ValidationStrategyType, ValidationStrategy],
        match_repository: MatchRepository,
        result_store: Optional[ValidationResultStore] = None,
        batch_size: Optional[int] = None,
        min_scouts_required: Optional[int] = None,
    ):
        """
        Initialize the executor.

        Args:
            strategies: Available strategies keyed by type
            match_repository: Schedule lookup for matches and events
            result_store: Where results are persisted (optional)
            batch_size: Matches per batch during event validation
            min_scouts_required: Consensus minimum forced on every context.
                None leaves each strategy's own default in effect.
        """
        self._strategies = dict(strategies)
        self._matches = match_repository
        self._result_store = result_store
        self._batch_size = batch_size or settings.validation_batch_size
        self._min_scouts_required = min_scouts_required

    async def validate_event(
        self,
        event_key: str,
        strategy_types: Optional[Iterable[ValidationStrategyType]] = None,
    ) -> ValidationExecutionSummary:
        """
        Validate every match of an event.

        Args:
            event_key: Event key (e.g. '2025casj')
            strategy_types: Strategies to run (all registered if None)

        Returns:
            ValidationExecutionSummary
        """
        execution_id = str(uuid.uuid4())
        started_at = datetime.now()
        logger.info(f"[{execution_id}] Starting event validation: {event_key}")

        try:
            matches = await self._matches.find_by_event_key(event_key)
        except Exception as e:
            logger.exception(f"[{execution_id}] Event validation failed")
            raise ValidationError(
                f"Failed to validate event {event_key}",
                ValidationErrorCode.EVENT_VALIDATION_FAILED,
                {"event_key": event_key, "error": str(e)},
            ) from e

        if not matches:
            logger.warning(f"[{execution_id}] No matches found for event: {event_key}")
            return self._summarize(execution_id, event_key, [], [], started_at)

        return await self._run(execution_id, event_key, matches, strategy_types, started_at)

    async def validate_match(
        self,
        match_key: str,
        strategy_types: Optional[Iterable[ValidationStrategyType]] = None,
    ) -> ValidationExecutionSummary:
        """
        Validate a single match.

        Raises:
            ValidationError: MATCH_NOT_FOUND if the match is not scheduled.
        """
        execution_id = str(uuid.uuid4())
        started_at = datetime.now()
        logger.info(f"[{execution_id}] Starting match validation: {match_key}")

        match = await self._matches.find_by_match_key(match_key)
        if match is None:
            raise ValidationError(
                f"Match not found: {match_key}",
                ValidationErrorCode.MATCH_NOT_FOUND,
                {"match_key": match_key},
            )

        return await self._run(execution_id, match.event_key, [match], strategy_types, started_at)

    async def _run(
        self,
        execution_id: str,
        event_key: str,
        matches: List[MatchSchedule],
        strategy_types: Optional[Iterable[ValidationStrategyType]],
        started_at: datetime,
    ) -> ValidationExecutionSummary:
        strategies = self._select_strategies(strategy_types)
        cache = MatchResultCache()
        results: List[ValidationResult] = []
        errors: List[Dict[str, Any]] = []

        try:
            for i in range(0, len(matches), self._batch_size):
                batch = matches[i:i + self._batch_size]
                logger.info(
                    f"[{execution_id}] Processing batch {i // self._batch_size + 1}"
                    f"/{-(-len(matches) // self._batch_size)}"
                )
                for match in batch:
                    results.extend(
                        await self._validate_single_match(match, execution_id, strategies, cache, errors)
                    )
        finally:
            cache.clear()

        logger.info(f"[{execution_id}] Generated {len(results)} validation results")

        if results and self._result_store is not None:
            self._result_store.save_batch(results)

        if errors:
            logger.warning(f"[{execution_id}] Encountered {len(errors)} errors during validation")

        return self._summarize(execution_id, event_key, results, errors, started_at)

    async def _validate_single_match(
        self,
        match: MatchSchedule,
        execution_id: str,
        strategies: List[ValidationStrategy],
        cache: MatchResultCache,
        errors: List[Dict[str, Any]],
    ) -> List[ValidationResult]:
        results: List[ValidationResult] = []
        season_year = season_year_from_event_key(match.event_key)

        for team_number in match.alliances().all_teams():
            context = ValidationContext(
                match_key=match.match_key,
                team_number=team_number,
                event_key=match.event_key,
                season_year=season_year,
                execution_id=execution_id,
                min_scouts_required=self._min_scouts_required,
                match_cache=cache,
            )

            for strategy in strategies:
                try:
                    if not await strategy.can_validate(context):
                        logger.debug(
                            f"Strategy '{strategy.name}' cannot validate {match.match_key} team {team_number}"
                        )
                        continue

                    strategy_results = await strategy.validate(context)
                    results.extend(strategy_results)
                    logger.debug(
                        f"Strategy '{strategy.name}' generated {len(strategy_results)} results "
                        f"for {match.match_key} team {team_number}"
                    )
                except Exception as e:
                    logger.error(
                        f"Strategy '{strategy.name}' failed for {match.match_key} team {team_number}: {e}"
                    )
                    errors.append({
                        "match_key": match.match_key,
                        "team_number": team_number,
                        "strategy": strategy.type.value,
                        "error": str(e),
                    })

        return results

    def _select_strategies(
        self,
        strategy_types: Optional[Iterable[ValidationStrategyType]],
    ) -> List[ValidationStrategy]:
        if not strategy_types:
            return list(self._strategies.values())
        return [self._strategies[t] for t in strategy_types if t in self._strategies]

    def _summarize(
        self,
        execution_id: str,
        event_key: Optional[str],
        results: List[ValidationResult],
        errors: List[Dict[str, Any]],
        started_at: datetime,
    ) -> ValidationExecutionSummary:
        breakdown: Dict[ValidationStrategyType, int] = {}
        for result in results:
            breakdown[result.validation_type] = breakdown.get(result.validation_type, 0) + 1

        completed_at = datetime.now()
        return ValidationExecutionSummary(
            execution_id=execution_id,
            event_key=event_key,
            total_validations=len(results),
            scouters_affected=len({r.scouter_id for r in results}),
            strategy_breakdown=breakdown,
            errors=errors,
            started_at=started_at,
            completed_at=completed_at,
            duration_ms=int((completed_at - started_at).total_seconds() * 1000),
        )

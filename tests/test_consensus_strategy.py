import math

import pytest

from schemas.validation import ConsensusMethod, ValidationContext, ValidationOutcome, ValidationStrategyType
from validation.errors import ValidationError, ValidationErrorCode
from validation.strategies.consensus import ConsensusValidationStrategy, field_count_confidence

MATCH_KEY = "2025casj_qm1"
EVENT_KEY = "2025casj"


def _context(**overrides) -> ValidationContext:
    data = {
        "match_key": MATCH_KEY,
        "team_number": 930,
        "event_key": EVENT_KEY,
        "season_year": 2025,
        "execution_id": "exec-1",
    }
    data.update(overrides)
    return ValidationContext(**data)


def _agreeing_scouts(make_observation, count=3):
    return [
        make_observation(
            scouter_id=f"scout-{i}",
            auto={"left_starting_zone": True, "coral_scored_L1": 2},
            teleop={"coral_scored_L1": 4, "algae_scored_barge": 1},
            endgame={"cage_climb": "deep"},
        )
        for i in range(count)
    ]


@pytest.mark.asyncio
async def test_insufficient_scouts(observation_repo, make_observation):
    observation_repo.get_observations_for_match.return_value = _agreeing_scouts(make_observation, 2)
    strategy = ConsensusValidationStrategy(observation_repo)

    assert await strategy.can_validate(_context()) is False

    with pytest.raises(ValidationError) as exc_info:
        await strategy.validate(_context())

    assert exc_info.value.code == ValidationErrorCode.INSUFFICIENT_SCOUTS
    assert exc_info.value.details == {"found": 2, "required": 3}


@pytest.mark.asyncio
async def test_context_minimum_overrides_default(observation_repo, make_observation):
    observation_repo.get_observations_for_match.return_value = _agreeing_scouts(make_observation, 2)
    strategy = ConsensusValidationStrategy(observation_repo)

    assert await strategy.can_validate(_context(min_scouts_required=2)) is True


@pytest.mark.asyncio
async def test_agreeing_scouts_all_exact(observation_repo, make_observation):
    observation_repo.get_observations_for_match.return_value = _agreeing_scouts(make_observation)
    strategy = ConsensusValidationStrategy(observation_repo)

    assert await strategy.can_validate(_context()) is True
    results = await strategy.validate(_context())

    # 3 scouts x 5 fields
    assert len(results) == 15
    assert {r.scouter_id for r in results} == {"scout-0", "scout-1", "scout-2"}
    assert all(r.outcome == ValidationOutcome.EXACT_MATCH for r in results)
    assert all(r.accuracy_score == 1.0 for r in results)
    assert all(r.validation_type == ValidationStrategyType.CONSENSUS for r in results)
    assert all(r.validation_method == "ConsensusValidationStrategy" for r in results)
    assert all(r.execution_id == "exec-1" for r in results)
    assert "endgame_performance.cage_climb" in {r.field_path for r in results}

    expected_confidence = 0.5 + 0.45 * math.log(6) / math.log(100)
    assert all(r.confidence_level == pytest.approx(expected_confidence) for r in results)


@pytest.mark.asyncio
async def test_outlier_scored_against_median(observation_repo, make_observation):
    observation_repo.get_observations_for_match.return_value = [
        make_observation(scouter_id="a", teleop={"coral_scored_L1": 2}),
        make_observation(scouter_id="b", teleop={"coral_scored_L1": 3}),
        make_observation(scouter_id="c", teleop={"coral_scored_L1": 7}),
    ]
    strategy = ConsensusValidationStrategy(observation_repo)

    results = {r.scouter_id: r for r in await strategy.validate(_context())}

    assert results["a"].expected_value == 3
    assert results["a"].outcome == ValidationOutcome.CLOSE_MATCH
    assert results["b"].outcome == ValidationOutcome.EXACT_MATCH
    assert results["c"].accuracy_score == pytest.approx(0.6 * (1 - 4 / 7))
    assert results["c"].outcome == ValidationOutcome.MISMATCH


@pytest.mark.asyncio
async def test_fields_without_consensus_are_skipped(observation_repo, make_observation):
    observation_repo.get_observations_for_match.return_value = [
        make_observation(scouter_id="a", teleop={"coral_scored_L1": 2, "defense_played": True}),
        make_observation(scouter_id="b", teleop={"coral_scored_L1": 2}),
        make_observation(scouter_id="c", teleop={"coral_scored_L1": 2}),
    ]
    strategy = ConsensusValidationStrategy(observation_repo)

    results = await strategy.validate(_context())

    assert {r.field_path for r in results} == {"teleop_performance.coral_scored_L1"}


@pytest.mark.asyncio
async def test_unreported_field_scores_zero(observation_repo, make_observation):
    observation_repo.get_observations_for_match.return_value = [
        make_observation(scouter_id="a", teleop={"coral_scored_L1": 2, "algae_scored_barge": 2}),
        make_observation(scouter_id="b", teleop={"coral_scored_L1": 2, "algae_scored_barge": 2}),
        make_observation(scouter_id="c", teleop={"coral_scored_L1": 2}),
    ]
    strategy = ConsensusValidationStrategy(observation_repo)

    results = await strategy.validate(_context())
    missed = [r for r in results if r.scouter_id == "c" and r.field_path.endswith("algae_scored_barge")]

    assert len(missed) == 1
    assert missed[0].actual_value is None
    assert missed[0].accuracy_score == 0.0
    assert missed[0].outcome == ValidationOutcome.MISMATCH


@pytest.mark.asyncio
async def test_other_teams_are_ignored(observation_repo, make_observation):
    observation_repo.get_observations_for_match.return_value = [
        *_agreeing_scouts(make_observation, 2),
        make_observation(team_number=148, scouter_id="other", teleop={"coral_scored_L1": 4}),
    ]
    strategy = ConsensusValidationStrategy(observation_repo)

    assert await strategy.can_validate(_context()) is False


@pytest.mark.asyncio
async def test_scout_name_used_when_scouter_id_missing(observation_repo, make_observation):
    observations = _agreeing_scouts(make_observation, 2)
    observations.append(
        make_observation(
            scouter_id=None,
            scout_name="Jordan",
            auto={"left_starting_zone": True, "coral_scored_L1": 2},
            teleop={"coral_scored_L1": 4, "algae_scored_barge": 1},
            endgame={"cage_climb": "deep"},
        )
    )
    observation_repo.get_observations_for_match.return_value = observations
    strategy = ConsensusValidationStrategy(observation_repo)

    results = await strategy.validate(_context())

    assert "Jordan" in {r.scouter_id for r in results}


@pytest.mark.asyncio
async def test_validate_is_repeatable(observation_repo, make_observation):
    observation_repo.get_observations_for_match.return_value = [
        make_observation(scouter_id="a", teleop={"coral_scored_L1": 2}),
        make_observation(scouter_id="b", teleop={"coral_scored_L1": 3}),
        make_observation(scouter_id="c", teleop={"coral_scored_L1": 7}),
    ]
    strategy = ConsensusValidationStrategy(observation_repo)

    first = await strategy.validate(_context())
    second = await strategy.validate(_context())

    def key(r):
        return (r.scouter_id, r.field_path, r.expected_value, r.actual_value, r.accuracy_score, r.outcome)

    assert sorted(map(key, first)) == sorted(map(key, second))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "missing, code",
    [
        ("match_key", ValidationErrorCode.MISSING_MATCH_KEY),
        ("team_number", ValidationErrorCode.MISSING_TEAM_NUMBER),
        ("event_key", ValidationErrorCode.MISSING_EVENT_KEY),
        ("season_year", ValidationErrorCode.MISSING_SEASON_YEAR),
    ],
)
async def test_missing_context_fields(observation_repo, missing, code):
    strategy = ConsensusValidationStrategy(observation_repo)

    with pytest.raises(ValidationError) as exc_info:
        await strategy.validate(_context(**{missing: None}))

    assert exc_info.value.code == code
    observation_repo.get_observations_for_match.assert_not_awaited()


@pytest.mark.asyncio
async def test_can_validate_fails_closed(observation_repo):
    observation_repo.get_observations_for_match.side_effect = RuntimeError("database unavailable")
    strategy = ConsensusValidationStrategy(observation_repo)

    assert await strategy.can_validate(_context()) is False


def test_field_count_confidence():
    assert field_count_confidence(0) == 0.5
    assert field_count_confidence(10) == pytest.approx(0.5 + 0.45 * math.log(11) / math.log(100))
    assert field_count_confidence(500) == 0.95


def test_consensus_metadata(observation_repo, make_observation):
    observations = [
        make_observation(scouter_id="a", teleop={"coral_scored_L1": 2}),
        make_observation(scouter_id="b", teleop={"coral_scored_L1": 4}),
        make_observation(scouter_id="c", teleop={"coral_scored_L1": 4}),
    ]
    strategy = ConsensusValidationStrategy(observation_repo)

    metadata = strategy.calculate_consensus_metadata("teleop_performance.coral_scored_L1", 4, observations)

    assert metadata.method == ConsensusMethod.MEDIAN
    assert metadata.scout_count == 3
    assert metadata.agreement_percentage == pytest.approx(66.7)
    assert metadata.standard_deviation == pytest.approx(0.9428, abs=1e-3)
    assert metadata.confidence_level == pytest.approx(0.5 + 0.45 * math.log(4) / math.log(10))


@pytest.mark.asyncio
async def test_non_finite_report_does_not_break_consensus(observation_repo, make_observation):
    observation_repo.get_observations_for_match.return_value = [
        make_observation(scouter_id="a", teleop={"coral_scored_L1": 3}),
        make_observation(scouter_id="b", teleop={"coral_scored_L1": math.nan}),
        make_observation(scouter_id="c", teleop={"coral_scored_L1": 4}),
    ]
    strategy = ConsensusValidationStrategy(observation_repo)

    assert await strategy.can_validate(_context()) is True
    results = {r.scouter_id: r for r in await strategy.validate(_context())}

    assert set(results) == {"a", "b", "c"}
    assert results["a"].expected_value == 4
    assert results["c"].outcome == ValidationOutcome.EXACT_MATCH
    assert results["b"].accuracy_score == 0.0
    assert results["b"].outcome == ValidationOutcome.MISMATCH

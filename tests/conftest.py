import pytest
from unittest.mock import AsyncMock, MagicMock

from schemas.scouting import AllianceColor, AllianceComposition, MatchSchedule, Observation, OfficialMatchResult

RED_TEAMS = [930, 148, 1477]
BLUE_TEAMS = [254, 1678, 973]
MATCH_KEY = "2025casj_qm1"
EVENT_KEY = "2025casj"


@pytest.fixture
def make_observation():
    """Factory for observations with sensible defaults."""
    counter = {"n": 0}

    def _make(
        team_number: int = 930,
        scouter_id="scout-1",
        auto=None,
        teleop=None,
        endgame=None,
        match_key: str = MATCH_KEY,
        alliance_color: AllianceColor = AllianceColor.RED,
        scout_name=None,
    ) -> Observation:
        counter["n"] += 1
        return Observation(
            id=f"obs-{counter['n']}",
            match_key=match_key,
            team_number=team_number,
            scouter_id=scouter_id,
            scout_name=scout_name,
            alliance_color=alliance_color,
            auto_performance=auto or {},
            teleop_performance=teleop or {},
            endgame_performance=endgame or {},
        )

    return _make


@pytest.fixture
def alliances() -> AllianceComposition:
    return AllianceComposition(red=list(RED_TEAMS), blue=list(BLUE_TEAMS))


@pytest.fixture
def make_official_result():
    def _make(red=None, blue=None, post_result_time=1234567890, match_key: str = MATCH_KEY):
        return OfficialMatchResult(
            match_key=match_key,
            score_breakdown={"red": red or {}, "blue": blue or {}},
            post_result_time=post_result_time,
        )

    return _make


@pytest.fixture
def observation_repo():
    """Observation repository double; set .get_observations_for_match.return_value."""
    repo = MagicMock()
    repo.get_observations_for_match = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def match_repo(alliances):
    """Match repository double with the default alliances."""
    repo = MagicMock()
    repo.get_official_result = AsyncMock(return_value=None)
    repo.get_alliance_composition = AsyncMock(return_value=alliances)
    return repo


@pytest.fixture
def schedule() -> MatchSchedule:
    return MatchSchedule(
        match_key=MATCH_KEY,
        event_key=EVENT_KEY,
        match_number=1,
        red=list(RED_TEAMS),
        blue=list(BLUE_TEAMS),
    )

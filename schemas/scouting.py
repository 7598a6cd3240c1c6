"""
Scouting Schemas

Raw inputs the validation engine reads: per-scout observations and the
match schedule with its official (TBA) score breakdown.

DESIGN RULES:
- Observations are immutable once submitted
- Period payloads are open-ended (field schema changes every season)
- Official results are read-only input
"""

from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


# Period payload: field name -> bool | number | category string
Payload = Dict[str, Any]

PERIOD_NAMES = ("auto_performance", "teleop_performance", "endgame_performance")


class AllianceColor(str, Enum):
    RED = "red"
    BLUE = "blue"


class Observation(BaseModel):
    """
    One scout's record of one team in one match.
    """
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    match_key: str
    team_number: int
    scouter_id: Optional[str] = None
    scout_name: Optional[str] = None
    alliance_color: AllianceColor
    auto_performance: Payload = Field(default_factory=dict)
    teleop_performance: Payload = Field(default_factory=dict)
    endgame_performance: Payload = Field(default_factory=dict)
    notes: Optional[str] = None

    @property
    def observer(self) -> Optional[str]:
        """Identifier used to attribute results to a scout."""
        return self.scouter_id or self.scout_name

    def periods(self) -> Dict[str, Payload]:
        """Period payloads keyed by period name (the root for dot-path lookups)."""
        return {name: getattr(self, name) for name in PERIOD_NAMES}


class AllianceComposition(BaseModel):
    """Team numbers playing on each alliance."""
    red: List[int] = Field(default_factory=list)
    blue: List[int] = Field(default_factory=list)

    def for_color(self, color: AllianceColor) -> List[int]:
        return self.red if AllianceColor(color) == AllianceColor.RED else self.blue

    def all_teams(self) -> List[int]:
        return [*self.red, *self.blue]


class OfficialMatchResult(BaseModel):
    """
    Official alliance-level breakdown for one match.

    Only usable once results are posted (post_result_time set).
    """
    model_config = ConfigDict(frozen=True)

    match_key: str
    score_breakdown: Optional[Dict[str, Dict[str, Any]]] = None
    post_result_time: Optional[int] = None

    @property
    def is_final(self) -> bool:
        return bool(self.score_breakdown) and self.post_result_time is not None

    def breakdown_for(self, color: AllianceColor) -> Dict[str, Any]:
        if not self.score_breakdown:
            return {}
        return self.score_breakdown.get(AllianceColor(color).value) or {}


class MatchSchedule(BaseModel):
    """
    A scheduled match as stored after TBA import.
    """
    match_key: str
    event_key: str
    comp_level: str = "qm"
    match_number: int = 0
    red: List[int] = Field(default_factory=list)
    blue: List[int] = Field(default_factory=list)
    score_breakdown: Optional[Dict[str, Dict[str, Any]]] = None
    post_result_time: Optional[int] = None

    def alliances(self) -> AllianceComposition:
        return AllianceComposition(
            red=[t for t in self.red if t is not None],
            blue=[t for t in self.blue if t is not None],
        )

    def official_result(self) -> Optional[OfficialMatchResult]:
        if not self.score_breakdown:
            return None
        return OfficialMatchResult(
            match_key=self.match_key,
            score_breakdown=self.score_breakdown,
            post_result_time=self.post_result_time,
        )

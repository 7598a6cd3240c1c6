import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from validation.cache import MatchResultCache


class ValidationStrategyType(str, Enum):
    """Validation strategies available to the executor."""
    CONSENSUS = "consensus"
    TBA = "tba"
    MANUAL = "manual"


class ValidationOutcome(str, Enum):
    """Discrete classification of an accuracy score."""
    EXACT_MATCH = "exact_match"
    CLOSE_MATCH = "close_match"
    MISMATCH = "mismatch"


class ConsensusMethod(str, Enum):
    MODE = "mode"
    WEIGHTED_AVERAGE = "weighted_average"
    MAJORITY_VOTE = "majority_vote"
    MEDIAN = "median"


class ValidationContext(BaseModel):
    """
    Caller-supplied input for a single strategy invocation.

    Everything is optional so strategies can report exactly which
    field is missing.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    match_key: Optional[str] = None
    team_number: Optional[int] = None
    event_key: Optional[str] = None
    season_year: Optional[int] = None
    min_scouts_required: Optional[int] = None
    execution_id: Optional[str] = None
    match_cache: Optional[MatchResultCache] = Field(default=None, exclude=True)


class ValidationResult(BaseModel):
    """
    One field, one scout, one outcome.
    """
    model_config = ConfigDict(frozen=True)

    validation_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    execution_id: str
    scouter_id: str
    match_scouting_id: Optional[str] = None
    match_key: str
    team_number: int
    event_key: Optional[str] = None
    season_year: Optional[int] = None

    field_path: str
    expected_value: Any = None
    actual_value: Any = None

    accuracy_score: float = Field(..., ge=0.0, le=1.0)
    outcome: ValidationOutcome
    confidence_level: float = Field(default=0.5, ge=0.0, le=1.0)

    validation_type: ValidationStrategyType
    validation_method: str
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)


class ConsensusValue(BaseModel):
    """Consensus value for one field, with agreement statistics."""
    field_path: str
    value: Any = None
    method: ConsensusMethod
    scout_count: int
    agreement_percentage: float = Field(..., ge=0.0, le=100.0)
    confidence_level: float = Field(..., ge=0.0, le=1.0)
    standard_deviation: Optional[float] = None
    outlier_count: int = 0


class ValidationExecutionSummary(BaseModel):
    """
    Summary of one validation execution (a match or a whole event).
    """
    execution_id: str
    event_key: Optional[str] = None
    total_validations: int = 0
    scouters_affected: int = 0
    strategy_breakdown: Dict[ValidationStrategyType, int] = Field(default_factory=dict)
    errors: List[Dict[str, Any]] = Field(default_factory=list)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_ms: int = 0

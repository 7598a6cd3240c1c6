"""
Validation API Route

Thin delegation layer to the validation executor.
Contains NO scoring, consensus, or aggregation logic.

All intelligence lives in the validation strategies.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from app.dependencies import get_validation_executor
from orchestration.executor import ValidationExecutor
from schemas.validation import ValidationExecutionSummary, ValidationStrategyType
from validation.errors import ValidationError, ValidationErrorCode


router = APIRouter()

ALLOWED_STRATEGIES = (ValidationStrategyType.CONSENSUS, ValidationStrategyType.TBA)


class ExecuteValidationRequest(BaseModel):
    """API request for a validation run."""
    event_key: Optional[str] = Field(default=None, description="Event to validate")
    match_key: Optional[str] = Field(default=None, description="Validate a single match instead of the event")
    strategies: Optional[List[str]] = Field(default=None, description="Subset of: consensus, tba")


class ExecuteValidationResponse(BaseModel):
    """API response for a validation run."""
    success: bool = True
    data: ValidationExecutionSummary


def _parse_strategies(names: Optional[List[str]]) -> Optional[List[ValidationStrategyType]]:
    if not names:
        return None
    allowed = {s.value for s in ALLOWED_STRATEGIES}
    invalid = [n for n in names if n not in allowed]
    if invalid:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid strategies: {', '.join(invalid)}. Allowed: {', '.join(sorted(allowed))}",
        )
    return [ValidationStrategyType(n) for n in names]


@router.post("/validation/execute", response_model=ExecuteValidationResponse)
async def execute_validation(
    request: ExecuteValidationRequest,
    executor: ValidationExecutor = Depends(get_validation_executor),
) -> ExecuteValidationResponse:
    """
    Run validation for a match or a whole event.

    Flow:
    1. Request is checked (event_key or match_key, known strategies)
    2. Executor runs the selected strategies
    3. Execution summary returned
    """
    if not request.event_key and not request.match_key:
        raise HTTPException(status_code=400, detail="Either event_key or match_key is required")

    strategy_types = _parse_strategies(request.strategies)

    try:
        if request.match_key:
            summary = await executor.validate_match(request.match_key, strategy_types)
        else:
            summary = await executor.validate_event(request.event_key, strategy_types)
    except ValidationError as e:
        status = 404 if e.code == ValidationErrorCode.MATCH_NOT_FOUND else 500
        raise HTTPException(status_code=status, detail=e.message) from e

    return ExecuteValidationResponse(data=summary)

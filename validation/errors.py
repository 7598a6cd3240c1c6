from typing import Any, Dict, Optional


class ValidationErrorCode:
    """Machine-readable codes carried by ValidationError."""
    MISSING_MATCH_KEY = "MISSING_MATCH_KEY"
    MISSING_TEAM_NUMBER = "MISSING_TEAM_NUMBER"
    MISSING_EVENT_KEY = "MISSING_EVENT_KEY"
    MISSING_SEASON_YEAR = "MISSING_SEASON_YEAR"
    INSUFFICIENT_SCOUTS = "INSUFFICIENT_SCOUTS"
    MATCH_NOT_FOUND = "MATCH_NOT_FOUND"
    EVENT_VALIDATION_FAILED = "EVENT_VALIDATION_FAILED"
    MATCH_VALIDATION_FAILED = "MATCH_VALIDATION_FAILED"


class ValidationError(Exception):
    """
    Raised when a validation precondition is not met.

    Attributes:
        code: One of ValidationErrorCode
        details: Optional machine-readable payload (e.g. {"found": 2, "required": 3})
    """

    def __init__(self, message: str, code: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code, "details": self.details}

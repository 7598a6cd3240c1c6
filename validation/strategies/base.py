from abc import ABC, abstractmethod
from typing import List

from schemas.validation import ValidationContext, ValidationResult, ValidationStrategyType


class ValidationStrategy(ABC):
    """
    Pluggable source of expected values for scouting data.

    The executor always asks can_validate() before validate().
    """
    name: str
    type: ValidationStrategyType

    @property
    def validation_method(self) -> str:
        """Tag recorded on every result (the strategy class name)."""
        return type(self).__name__

    @abstractmethod
    async def can_validate(self, context: ValidationContext) -> bool:
        """
        Check whether this strategy applies to the context.

        Args:
            context: Validation context

        Returns:
            bool: True if validate() can produce results
        """
        pass

    @abstractmethod
    async def validate(self, context: ValidationContext) -> List[ValidationResult]:
        """
        Execute validation.

        Args:
            context: Validation context

        Returns:
            List[ValidationResult]: Field-level results
        """
        pass

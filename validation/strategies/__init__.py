# Validation Strategies Package
from validation.strategies.base import ValidationStrategy
from validation.strategies.consensus import ConsensusValidationStrategy
from validation.strategies.official_record import OfficialRecordValidationStrategy

__all__ = ["ValidationStrategy", "ConsensusValidationStrategy", "OfficialRecordValidationStrategy"]

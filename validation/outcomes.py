"""
Outcome Classifiers

Map a continuous accuracy score to a discrete outcome.

Consensus results compare one scout against other scouts. Official-record
results compare alliance totals and use their own thresholds.
"""

from schemas.validation import ValidationOutcome

# Consensus thresholds
CONSENSUS_CLOSE_MATCH_MIN = 0.7

# Official-record thresholds
OFFICIAL_EXACT_MATCH_MIN = 0.95
OFFICIAL_CLOSE_MATCH_MIN = 0.75


def classify_consensus_outcome(accuracy_score: float) -> ValidationOutcome:
    """
    - exact_match: 1.0
    - close_match: 0.7 - 0.99
    - mismatch: below 0.7
    """
    if accuracy_score == 1.0:
        return ValidationOutcome.EXACT_MATCH
    if accuracy_score >= CONSENSUS_CLOSE_MATCH_MIN:
        return ValidationOutcome.CLOSE_MATCH
    return ValidationOutcome.MISMATCH


def classify_official_outcome(accuracy_score: float) -> ValidationOutcome:
    """
    - exact_match: 0.95 and above
    - close_match: 0.75 - 0.95
    - mismatch: below 0.75
    """
    if accuracy_score >= OFFICIAL_EXACT_MATCH_MIN:
        return ValidationOutcome.EXACT_MATCH
    if accuracy_score >= OFFICIAL_CLOSE_MATCH_MIN:
        return ValidationOutcome.CLOSE_MATCH
    return ValidationOutcome.MISMATCH

"""Team Elo rating engine."""

from domain.ratings.elo.calculator import (
    EloParameters,
    ParticipantRatingEvent,
    RatingEngine,
    RecomputeSummary,
    calculate_expected_score,
)

__all__ = [
    "EloParameters",
    "ParticipantRatingEvent",
    "RatingEngine",
    "RecomputeSummary",
    "calculate_expected_score",
]

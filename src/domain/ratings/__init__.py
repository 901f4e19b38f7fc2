"""Rating domain modules."""

from domain.ratings.protocol import MatchHistory, RosterStore
from domain.ratings.elo import (
    EloParameters,
    ParticipantRatingEvent,
    RatingEngine,
    RecomputeSummary,
)

__all__ = [
    "EloParameters",
    "MatchHistory",
    "ParticipantRatingEvent",
    "RatingEngine",
    "RecomputeSummary",
    "RosterStore",
]

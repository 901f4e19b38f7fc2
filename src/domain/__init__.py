"""Team formation and rating domain modules."""

from domain.common import MatchRecord, Participant, Team
from domain.history import InMemoryMatchHistory
from domain.partition import PartitionParameters, partition
from domain.ratings import EloParameters, RatingEngine
from domain.roster import InMemoryRoster

__all__ = [
    "EloParameters",
    "InMemoryMatchHistory",
    "InMemoryRoster",
    "MatchRecord",
    "Participant",
    "PartitionParameters",
    "RatingEngine",
    "Team",
    "partition",
]

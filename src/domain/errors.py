"""Exception taxonomy raised by the team-formation and rating core."""

from __future__ import annotations


class TeamBalanceError(Exception):
    """Base class for every error the core raises on purpose."""


class PartitionError(TeamBalanceError):
    """Team formation could not run with the given input."""


class InvalidTeamCountError(PartitionError, ValueError):
    def __init__(self, team_count: int) -> None:
        super().__init__(f"team_count must be >= 1, got {team_count}")
        self.team_count = team_count


class EmptyRosterError(PartitionError, ValueError):
    def __init__(self) -> None:
        super().__init__("No participants to split into teams")


class InsufficientParticipantsError(PartitionError, ValueError):
    def __init__(self, participant_count: int, team_count: int) -> None:
        super().__init__(
            f"Need at least {team_count} participants for {team_count} teams, got {participant_count}"
        )
        self.participant_count = participant_count
        self.team_count = team_count


class RatingError(TeamBalanceError):
    """A match outcome could not be applied to the roster."""


class EmptyTeamsError(RatingError, ValueError):
    def __init__(self) -> None:
        super().__init__("A match needs at least one team")


class InvalidWinnerIndexError(RatingError, ValueError):
    def __init__(self, index: int, team_count: int) -> None:
        super().__init__(f"Invalid winner index {index} for a match with {team_count} teams")
        self.index = index
        self.team_count = team_count


class NumericInstabilityError(RatingError, ArithmeticError):
    """Weights or ratings became non-finite; nothing was written."""


class ParticipantNotFoundError(TeamBalanceError, KeyError):
    def __init__(self, participant_id: int) -> None:
        super().__init__(participant_id)
        self.participant_id = participant_id

    def __str__(self) -> str:
        return f"Participant {self.participant_id} not found"


class MatchNotFoundError(TeamBalanceError, IndexError):
    def __init__(self, index: int, history_size: int) -> None:
        super().__init__(f"Match index {index} out of range (history has {history_size} matches)")
        self.index = index
        self.history_size = history_size


class InvalidRatingError(TeamBalanceError, ValueError):
    def __init__(self, rating: float) -> None:
        super().__init__(f"rating must be a finite number >= 0, got {rating}")
        self.rating = rating


__all__ = [
    "EmptyRosterError",
    "EmptyTeamsError",
    "InsufficientParticipantsError",
    "InvalidRatingError",
    "InvalidTeamCountError",
    "InvalidWinnerIndexError",
    "MatchNotFoundError",
    "NumericInstabilityError",
    "ParticipantNotFoundError",
    "PartitionError",
    "RatingError",
    "TeamBalanceError",
]

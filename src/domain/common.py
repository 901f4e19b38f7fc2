"""Shared types for team formation and rating updates."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime

from domain.errors import InvalidWinnerIndexError


@dataclass
class Participant:
    """One rated person on the roster."""

    participant_id: int
    name: str
    rating: float
    baseline_rating: float
    wins: int = 0
    games: int = 0

    @property
    def losses(self) -> int:
        return self.games - self.wins

    @property
    def win_rate(self) -> float:
        return self.wins / self.games if self.games > 0 else 0.0

    def snapshot(self) -> Participant:
        """Return an independent copy safe to hand out or mutate speculatively."""
        return replace(self)


@dataclass(frozen=True)
class Team:
    """Participants assigned together for one match."""

    members: tuple[Participant, ...] = ()

    @property
    def total_rating(self) -> float:
        return sum(member.rating for member in self.members)

    @property
    def member_ids(self) -> tuple[int, ...]:
        return tuple(member.participant_id for member in self.members)

    @property
    def size(self) -> int:
        return len(self.members)


@dataclass(frozen=True)
class MatchRecord:
    """Stored match: id-only team membership plus the (possibly empty) winner set."""

    event_time: datetime
    teams: tuple[tuple[int, ...], ...]
    winning_teams: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        for index in sorted(self.winning_teams):
            if index < 0 or index >= len(self.teams):
                raise InvalidWinnerIndexError(index, len(self.teams))

    @classmethod
    def from_teams(
        cls,
        teams: Sequence[Team],
        event_time: datetime,
        winning_teams: Iterable[int] = (),
    ) -> MatchRecord:
        return cls(
            event_time=event_time,
            teams=tuple(team.member_ids for team in teams),
            winning_teams=frozenset(winning_teams),
        )

    @property
    def is_decided(self) -> bool:
        return bool(self.winning_teams)

    @property
    def participant_ids(self) -> tuple[int, ...]:
        return tuple(member_id for team in self.teams for member_id in team)

    def is_winner(self, team_index: int) -> bool:
        return team_index in self.winning_teams

    def with_winners(self, winning_teams: Iterable[int]) -> MatchRecord:
        return replace(self, winning_teams=frozenset(winning_teams))


def team_member_ids(team: Team | Sequence[int]) -> tuple[int, ...]:
    """Accept either a formed Team or a stored id tuple."""
    if isinstance(team, Team):
        return team.member_ids
    return tuple(int(member_id) for member_id in team)


def chronological(records: Sequence[MatchRecord]) -> list[MatchRecord]:
    """Stable sort by event time; equal timestamps keep their stored order."""
    return sorted(records, key=lambda record: record.event_time)


def spread_of(totals: Sequence[float]) -> float:
    """Max minus min of per-team totals (0.0 for no teams)."""
    if not totals:
        return 0.0
    return max(totals) - min(totals)


__all__ = ["MatchRecord", "Participant", "Team", "chronological", "spread_of", "team_member_ids"]

"""In-memory match history."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from domain.common import MatchRecord, Participant, Team, chronological
from domain.errors import MatchNotFoundError
from domain.ratings.protocol import RosterStore


class InMemoryMatchHistory:
    """Insertion-ordered list of match records.

    Indices are positions in insertion order; replay uses
    ``iterate_chronological`` instead.
    """

    def __init__(self, records: Iterable[MatchRecord] = ()) -> None:
        self._records: list[MatchRecord] = list(records)

    def __len__(self) -> int:
        return len(self._records)

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self._records):
            raise MatchNotFoundError(index, len(self._records))

    def append(self, record: MatchRecord) -> int:
        self._records.append(record)
        return len(self._records) - 1

    def get(self, index: int) -> MatchRecord:
        self._check_index(index)
        return self._records[index]

    def set_winner(self, index: int, winners: Iterable[int]) -> MatchRecord:
        """Replace the winner set of one match and return the previous record."""
        self._check_index(index)
        previous = self._records[index]
        self._records[index] = previous.with_winners(winners)
        return previous

    def replace(self, index: int, record: MatchRecord) -> MatchRecord:
        self._check_index(index)
        previous = self._records[index]
        self._records[index] = record
        return previous

    def insert(self, index: int, record: MatchRecord) -> None:
        if index < 0 or index > len(self._records):
            raise MatchNotFoundError(index, len(self._records))
        self._records.insert(index, record)

    def delete(self, index: int) -> MatchRecord:
        self._check_index(index)
        return self._records.pop(index)

    def iterate(self) -> list[MatchRecord]:
        return list(self._records)

    def iterate_chronological(self) -> list[MatchRecord]:
        return chronological(self._records)

    def recent(self, count: int) -> list[tuple[int, MatchRecord]]:
        """Newest-first ``(index, record)`` pairs, by insertion order."""
        if count <= 0:
            return []
        start = max(len(self._records) - count, 0)
        return [(index, self._records[index]) for index in range(len(self._records) - 1, start - 1, -1)]

    def copy(self) -> InMemoryMatchHistory:
        return InMemoryMatchHistory(self._records)


def hydrate_teams(record: MatchRecord, roster: RosterStore) -> tuple[Team, ...]:
    """Rebuild a record's teams from current roster state.

    Participants removed from the roster are left out of the view; the stored
    record itself is unaffected.
    """
    teams: list[Team] = []
    for member_ids in record.teams:
        members: list[Participant] = []
        for member_id in member_ids:
            participant = roster.find(member_id)
            if participant is not None:
                members.append(participant)
        teams.append(Team(members=tuple(members)))
    return tuple(teams)


__all__ = ["InMemoryMatchHistory", "chronological", "hydrate_teams"]

"""Match lifecycle: form teams, record matches, decide or drop them, replay ratings."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from domain.common import MatchRecord, Participant, Team
from domain.history import InMemoryMatchHistory, hydrate_teams
from domain.partition import PartitionParameters, partition
from domain.ratings.elo.calculator import EloParameters, RatingEngine, RecomputeSummary
from domain.roster import InMemoryRoster, SortKey
from logging_config import get_logger

log = get_logger(__name__)


class PersistenceAdapter(Protocol):
    def save(self, roster: InMemoryRoster, history: InMemoryMatchHistory) -> None: ...


@dataclass(frozen=True)
class MatchView:
    """A stored match with teams re-hydrated from the current roster."""

    index: int
    record: MatchRecord
    teams: tuple[Team, ...]


class MatchService:
    """Single-writer facade over one roster and its match history."""

    def __init__(
        self,
        roster: InMemoryRoster,
        history: InMemoryMatchHistory,
        *,
        elo_params: EloParameters | None = None,
        partition_params: PartitionParameters | None = None,
        persistence: PersistenceAdapter | None = None,
    ) -> None:
        self.roster = roster
        self.history = history
        self.engine = RatingEngine(roster, elo_params)
        self.partition_params = partition_params or PartitionParameters()
        self.persistence = persistence
        self._lock = threading.RLock()

    # Roster

    def register_participant(self, participant_id: int, name: str, rating: float) -> Participant:
        with self._lock:
            participant = self.roster.register(participant_id, name, rating)
        log.info("Registered participant id=%s name=%s rating=%.2f", participant_id, name, rating)
        return participant

    def remove_participant(self, participant_id: int) -> Participant:
        with self._lock:
            participant = self.roster.remove(participant_id)
        log.info("Removed participant id=%s", participant_id)
        return participant

    def list_participants(self, sort_by: SortKey = "rating") -> list[Participant]:
        with self._lock:
            return self.roster.ranked(sort_by)

    # Matches

    def form_teams(
        self,
        participant_ids: Sequence[int],
        team_count: int,
        seed: int | None = None,
    ) -> list[Team]:
        """Split the selected participants into balanced teams without recording anything."""
        with self._lock:
            participants = [self.roster.get(participant_id) for participant_id in dict.fromkeys(participant_ids)]
        return partition(participants, team_count, seed, parameters=self.partition_params)

    def add_match(self, teams: Sequence[Team], event_time: datetime | None = None) -> int:
        """Record formed teams as an undecided match."""
        record = MatchRecord.from_teams(teams, event_time or datetime.now(UTC).replace(tzinfo=None))
        with self._lock:
            index = self.history.append(record)
        log.info("Recorded match index=%s teams=%s", index, [list(team) for team in record.teams])
        return index

    def set_match_winner(self, index: int, winners: Iterable[int]) -> RecomputeSummary:
        """Decide a match and replay every rating; the edit is undone if the replay fails."""
        winners = frozenset(winners)
        with self._lock:
            previous = self.history.set_winner(index, winners)
            try:
                summary = self.engine.recompute_all_from_history(self.history)
            except Exception:
                self.history.replace(index, previous)
                log.warning("Rolled back winner update for match index=%s", index)
                raise
        log.info("Set winners=%s for match index=%s", sorted(winners), index)
        return summary

    def delete_match(self, index: int) -> RecomputeSummary:
        """Drop a match and replay every rating; the match is restored if the replay fails."""
        with self._lock:
            removed = self.history.delete(index)
            try:
                summary = self.engine.recompute_all_from_history(self.history)
            except Exception:
                self.history.insert(index, removed)
                log.warning("Rolled back deletion of match index=%s", index)
                raise
        log.info("Deleted match index=%s", index)
        return summary

    def recompute_ratings(self) -> RecomputeSummary:
        with self._lock:
            return self.engine.recompute_all_from_history(self.history)

    def recent_matches(self, count: int) -> list[MatchView]:
        with self._lock:
            return [
                MatchView(index=index, record=record, teams=hydrate_teams(record, self.roster))
                for index, record in self.history.recent(count)
            ]

    def match_by_index(self, index: int) -> MatchView:
        with self._lock:
            record = self.history.get(index)
            return MatchView(index=index, record=record, teams=hydrate_teams(record, self.roster))

    # Persistence

    def save(self) -> None:
        """Persist roster and history; failures propagate and in-memory state stays as is."""
        if self.persistence is None:
            return
        with self._lock:
            self.persistence.save(self.roster, self.history)


__all__ = ["MatchService", "MatchView", "PersistenceAdapter"]

"""In-memory roster store keyed by participant id."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from math import isfinite
from typing import Literal

from domain.common import Participant
from domain.errors import InvalidRatingError, ParticipantNotFoundError

SortKey = Literal["rating", "name"]


class InMemoryRoster:
    """Dict-backed participant store.

    Stored participants are never handed out directly: ``find``/``iterate``
    return snapshots, and ``upsert`` stores a snapshot of its argument.
    """

    def __init__(self, participants: Iterable[Participant] = ()) -> None:
        self._participants: dict[int, Participant] = {}
        for participant in participants:
            self.upsert(participant)

    def __len__(self) -> int:
        return len(self._participants)

    def __contains__(self, participant_id: object) -> bool:
        return participant_id in self._participants

    def __iter__(self) -> Iterator[Participant]:
        return iter(self.iterate())

    def find(self, participant_id: int) -> Participant | None:
        participant = self._participants.get(participant_id)
        return None if participant is None else participant.snapshot()

    def get(self, participant_id: int) -> Participant:
        participant = self.find(participant_id)
        if participant is None:
            raise ParticipantNotFoundError(participant_id)
        return participant

    def upsert(self, participant: Participant) -> None:
        self._participants[participant.participant_id] = participant.snapshot()

    def iterate(self) -> list[Participant]:
        return [participant.snapshot() for participant in self._participants.values()]

    def register(self, participant_id: int, name: str, rating: float) -> Participant:
        """Create or administratively re-rate a participant.

        Both the live rating and the replay baseline move to ``rating``; an
        existing participant keeps their win/game counters.
        """
        if not isfinite(rating) or rating < 0:
            raise InvalidRatingError(rating)
        existing = self._participants.get(participant_id)
        participant = Participant(
            participant_id=participant_id,
            name=name,
            rating=float(rating),
            baseline_rating=float(rating),
            wins=existing.wins if existing else 0,
            games=existing.games if existing else 0,
        )
        self._participants[participant_id] = participant
        return participant.snapshot()

    def remove(self, participant_id: int) -> Participant:
        try:
            return self._participants.pop(participant_id)
        except KeyError:
            raise ParticipantNotFoundError(participant_id) from None

    def ranked(self, sort_by: SortKey = "rating") -> list[Participant]:
        """Rating descending, or name ascending."""
        participants = self.iterate()
        if sort_by == "rating":
            participants.sort(key=lambda participant: participant.rating, reverse=True)
        elif sort_by == "name":
            participants.sort(key=lambda participant: participant.name)
        else:
            raise ValueError(f"Unsupported sort key: {sort_by!r}")
        return participants

    def copy(self) -> InMemoryRoster:
        return InMemoryRoster(self._participants.values())


__all__ = ["InMemoryRoster", "SortKey"]

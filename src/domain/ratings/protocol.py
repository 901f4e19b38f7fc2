"""Collaborator contracts the rating engine and match service rely on."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

from domain.common import MatchRecord, Participant


@runtime_checkable
class RosterStore(Protocol):
    """Keyed participant storage owned by the caller."""

    def find(self, participant_id: int) -> Participant | None: ...

    def upsert(self, participant: Participant) -> None: ...

    def iterate(self) -> list[Participant]: ...


@runtime_checkable
class MatchHistory(Protocol):
    """Append-only match log whose records can still be decided, edited or dropped."""

    def append(self, record: MatchRecord) -> int: ...

    def set_winner(self, index: int, winners: Iterable[int]) -> MatchRecord: ...

    def delete(self, index: int) -> MatchRecord: ...

    def iterate_chronological(self) -> Sequence[MatchRecord]: ...


__all__ = ["MatchHistory", "RosterStore"]

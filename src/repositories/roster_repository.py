"""Persistence helpers for the participants table."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, func, insert, select
from sqlalchemy.orm import Session

from domain.common import Participant
from models import RosterEntry


def fetch_participants(session: Session) -> list[Participant]:
    """Fetch every participant ordered by id."""
    statement = select(
        RosterEntry.participant_id,
        RosterEntry.name,
        RosterEntry.rating,
        RosterEntry.baseline_rating,
        RosterEntry.wins,
        RosterEntry.games,
    ).order_by(RosterEntry.participant_id)

    return [
        Participant(
            participant_id=int(row["participant_id"]),
            name=row["name"],
            rating=float(row["rating"]),
            baseline_rating=float(row["baseline_rating"]),
            wins=int(row["wins"]),
            games=int(row["games"]),
        )
        for row in session.execute(statement).mappings().all()
    ]


def replace_participants(session: Session, participants: Sequence[Participant]) -> None:
    """Hard-reset table contents to exactly ``participants``."""
    session.execute(delete(RosterEntry))
    if not participants:
        return

    payload = [
        {
            "participant_id": participant.participant_id,
            "name": participant.name,
            "rating": participant.rating,
            "baseline_rating": participant.baseline_rating,
            "wins": participant.wins,
            "games": participant.games,
        }
        for participant in participants
    ]
    session.execute(insert(RosterEntry), payload)


def count_participants(session: Session) -> int:
    result = session.scalar(select(func.count(RosterEntry.participant_id)))
    return int(result or 0)


__all__ = ["count_participants", "fetch_participants", "replace_participants"]

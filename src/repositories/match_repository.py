"""Persistence helpers for match history (matches + match_members)."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from domain.common import MatchRecord
from models import MatchEntry, MatchMember


def fetch_match_records(session: Session) -> list[MatchRecord]:
    """Fetch match records in insertion order."""
    match_rows = session.execute(
        select(
            MatchEntry.id,
            MatchEntry.position,
            MatchEntry.event_time,
            MatchEntry.team_count,
            MatchEntry.winning_teams,
        ).order_by(MatchEntry.position)
    ).mappings().all()

    member_rows = session.execute(
        select(
            MatchMember.match_id,
            MatchMember.team_index,
            MatchMember.participant_id,
        ).order_by(MatchMember.match_id, MatchMember.team_index, MatchMember.slot)
    ).mappings().all()

    members_by_match: dict[int, dict[int, list[int]]] = defaultdict(lambda: defaultdict(list))
    for row in member_rows:
        members_by_match[row["match_id"]][row["team_index"]].append(int(row["participant_id"]))

    records: list[MatchRecord] = []
    for row in match_rows:
        event_time = row["event_time"]
        if not isinstance(event_time, datetime):
            raise ValueError(f"match position={row['position']} has invalid event_time={event_time!r}")

        teams_by_index = members_by_match.get(row["id"], {})
        records.append(
            MatchRecord(
                event_time=event_time,
                teams=tuple(tuple(teams_by_index.get(index, ())) for index in range(row["team_count"])),
                winning_teams=frozenset(int(index) for index in row["winning_teams"] or ()),
            )
        )
    return records


def replace_match_records(session: Session, records: Sequence[MatchRecord]) -> None:
    """Hard-reset history contents to exactly ``records``, keeping their order."""
    session.execute(delete(MatchMember))
    session.execute(delete(MatchEntry))

    session.add_all(
        MatchEntry(
            position=position,
            event_time=record.event_time,
            team_count=len(record.teams),
            winning_teams=sorted(record.winning_teams),
            members=[
                MatchMember(team_index=team_index, slot=slot, participant_id=participant_id)
                for team_index, team in enumerate(record.teams)
                for slot, participant_id in enumerate(team)
            ],
        )
        for position, record in enumerate(records)
    )
    session.flush()


def count_matches(session: Session) -> int:
    result = session.scalar(select(func.count(MatchEntry.id)))
    return int(result or 0)


__all__ = ["count_matches", "fetch_match_records", "replace_match_records"]

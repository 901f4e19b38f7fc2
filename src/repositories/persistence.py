"""SQL-backed load/save of one roster and its match history."""

from __future__ import annotations

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db import create_db_engine, create_session_factory
from domain.history import InMemoryMatchHistory
from domain.roster import InMemoryRoster
from logging_config import get_logger
from models import Base, MatchEntry, MatchMember, RosterEntry
from repositories.match_repository import fetch_match_records, replace_match_records
from repositories.roster_repository import fetch_participants, replace_participants

log = get_logger(__name__)


def ensure_schema(engine: Engine) -> None:
    """Create the roster and history tables if they do not exist."""
    Base.metadata.create_all(
        bind=engine,
        tables=[RosterEntry.__table__, MatchEntry.__table__, MatchMember.__table__],
    )


class SqlPersistence:
    """Loads and saves full snapshots; each save replaces both tables in one transaction."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    @classmethod
    def from_url(cls, db_url: str) -> SqlPersistence:
        engine = create_db_engine(db_url)
        ensure_schema(engine)
        return cls(create_session_factory(engine))

    def load(self) -> tuple[InMemoryRoster, InMemoryMatchHistory]:
        with self.session_factory() as session:
            roster = InMemoryRoster(fetch_participants(session))
            history = InMemoryMatchHistory(fetch_match_records(session))
        log.debug("Loaded participants=%s matches=%s", len(roster), len(history))
        return roster, history

    def save(self, roster: InMemoryRoster, history: InMemoryMatchHistory) -> None:
        with self.session_factory() as session:
            try:
                replace_participants(session, roster.iterate())
                replace_match_records(session, history.iterate())
                session.commit()
            except Exception:
                session.rollback()
                raise
        log.debug("Saved participants=%s matches=%s", len(roster), len(history))


__all__ = ["SqlPersistence", "ensure_schema"]

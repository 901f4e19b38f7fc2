"""matches and match_members table models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    BigInteger,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base


class MatchEntry(Base):
    """One recorded match; ``position`` is its insertion-order index."""

    __tablename__ = "matches"
    __table_args__ = (
        UniqueConstraint("position", name="uq_matches_position"),
        Index("idx_matches_event_time", "event_time"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    event_time: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    team_count: Mapped[int] = mapped_column(Integer, nullable=False)
    winning_teams: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )

    members: Mapped[list[MatchMember]] = relationship(
        back_populates="match",
        cascade="all, delete-orphan",
    )


class MatchMember(Base):
    """Team membership snapshot by participant id.

    No foreign key to ``participants``: removing someone from the roster
    leaves past matches intact.
    """

    __tablename__ = "match_members"
    __table_args__ = (
        UniqueConstraint("match_id", "team_index", "slot", name="uq_match_members_slot"),
        Index("idx_match_members_participant", "participant_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id", ondelete="CASCADE"), nullable=False)
    team_index: Mapped[int] = mapped_column(Integer, nullable=False)
    slot: Mapped[int] = mapped_column(Integer, nullable=False)
    participant_id: Mapped[int] = mapped_column(BigInteger, nullable=False)

    match: Mapped[MatchEntry] = relationship(back_populates="members")

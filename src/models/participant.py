"""participants table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Float, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class RosterEntry(Base):
    """Current rating state for one participant."""

    __tablename__ = "participants"
    __table_args__ = (
        CheckConstraint("rating >= 0.0", name="ck_participants_rating"),
        CheckConstraint("baseline_rating >= 0.0", name="ck_participants_baseline_rating"),
        CheckConstraint("wins >= 0 AND wins <= games", name="ck_participants_wins"),
    )

    participant_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    rating: Mapped[float] = mapped_column(Float, nullable=False)
    baseline_rating: Mapped[float] = mapped_column(Float, nullable=False)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    games: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )

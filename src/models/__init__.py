"""ORM models."""

from models.base import Base
from models.match import MatchEntry, MatchMember
from models.participant import RosterEntry

__all__ = ["Base", "MatchEntry", "MatchMember", "RosterEntry"]

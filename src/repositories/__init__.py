"""Database repository helpers."""

from repositories.match_repository import count_matches, fetch_match_records, replace_match_records
from repositories.persistence import SqlPersistence, ensure_schema
from repositories.roster_repository import count_participants, fetch_participants, replace_participants

__all__ = [
    "SqlPersistence",
    "count_matches",
    "count_participants",
    "ensure_schema",
    "fetch_match_records",
    "fetch_participants",
    "replace_match_records",
    "replace_participants",
]

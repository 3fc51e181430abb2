"""League records and the storage boundary."""

from __future__ import annotations

from league_stats.ingest.repository import (
    DataFormatError,
    ParquetRepository,
    Repository,
    RepositoryError,
)
from league_stats.ingest.schema import (
    Match,
    Player,
    PlayerMatchStatLine,
    RosterAssignment,
    Team,
)

__all__ = [
    "DataFormatError",
    "Match",
    "ParquetRepository",
    "Player",
    "PlayerMatchStatLine",
    "Repository",
    "RepositoryError",
    "RosterAssignment",
    "Team",
]

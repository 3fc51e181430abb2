"""Storage boundary for league records.

`Repository` is the interface the stats engine's callers fetch from and
write to; the hosted database used in production implements it elsewhere.
`ParquetRepository` is a local implementation on Apache Parquet files used
by the CLI and the integration tests.

Stat lines are upserted on ``(match_id, player_id)``: re-submitting a line
replaces the stored one and never adds a second row for the pair.
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Callable, Hashable, Sequence
from pathlib import Path
from typing import TypeVar

import pandas as pd  # type: ignore[import-untyped]
import pandera.errors
import pyarrow as pa  # type: ignore[import-untyped]
import pyarrow.parquet as pq  # type: ignore[import-untyped]
from pydantic import BaseModel

from league_stats.ingest.schema import (
    COUNT_FIELDS,
    Match,
    MatchStatus,
    Player,
    PlayerMatchStatLine,
    RosterAssignment,
    Team,
)
from league_stats.utils.assertions import assert_columns, assert_no_nulls, assert_value_range

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class RepositoryError(Exception):
    """Base exception for storage failures."""


class DataFormatError(RepositoryError):
    """A stored table lacks required columns or holds nulls in key columns."""


# ---------------------------------------------------------------------------
# Abstract Repository
# ---------------------------------------------------------------------------


class Repository(abc.ABC):
    """Abstract base class for league data persistence."""

    @abc.abstractmethod
    def get_teams(self, league_id: str | None = None) -> list[Team]:
        """Return stored teams, optionally only those of *league_id*."""

    @abc.abstractmethod
    def get_matches(self, league_id: str | None = None, status: MatchStatus | None = None) -> list[Match]:
        """Return stored matches, optionally filtered by league and status."""

    @abc.abstractmethod
    def get_match(self, match_id: str) -> Match | None:
        """Return one match, or ``None`` if unknown."""

    @abc.abstractmethod
    def get_player(self, player_id: str) -> Player | None:
        """Return one player, or ``None`` if unknown."""

    @abc.abstractmethod
    def get_stat_lines_for_player(self, player_id: str) -> list[PlayerMatchStatLine]:
        """Return every stat line recorded for *player_id*."""

    @abc.abstractmethod
    def get_stat_lines_for_match(self, match_id: str) -> list[PlayerMatchStatLine]:
        """Return every stat line recorded in *match_id*."""

    @abc.abstractmethod
    def get_roster_assignments(self, team_id: str | None = None) -> list[RosterAssignment]:
        """Return player-team-season assignments, optionally of one team."""

    @abc.abstractmethod
    def save_teams(self, teams: Sequence[Team]) -> None:
        """Insert or replace teams by id."""

    @abc.abstractmethod
    def save_matches(self, matches: Sequence[Match]) -> None:
        """Insert or replace matches by id."""

    @abc.abstractmethod
    def save_players(self, players: Sequence[Player]) -> None:
        """Insert or replace players by id."""

    @abc.abstractmethod
    def save_roster_assignments(self, assignments: Sequence[RosterAssignment]) -> None:
        """Insert or replace assignments by ``(player_id, team_id, season)``."""

    @abc.abstractmethod
    def upsert_stat_lines(self, lines: Sequence[PlayerMatchStatLine]) -> None:
        """Insert or replace stat lines by ``(match_id, player_id)``."""


# ---------------------------------------------------------------------------
# Parquet Repository
# ---------------------------------------------------------------------------

_TEAM_SCHEMA = pa.schema([
    ("id", pa.string()),
    ("name", pa.string()),
    ("category", pa.string()),
    ("league_id", pa.string()),
    ("logo_url", pa.string()),
])

_MATCH_SCHEMA = pa.schema([
    ("id", pa.string()),
    ("league_id", pa.string()),
    ("category", pa.string()),
    ("home_team_id", pa.string()),
    ("away_team_id", pa.string()),
    ("match_date", pa.timestamp("us", tz="UTC")),
    ("home_score", pa.int64()),
    ("away_score", pa.int64()),
    ("status", pa.string()),
    ("is_walkover", pa.bool_()),
    ("winner_id", pa.string()),
])

_STAT_LINE_SCHEMA = pa.schema([
    ("id", pa.string()),
    ("match_id", pa.string()),
    ("player_id", pa.string()),
    ("team_id", pa.string()),
    *((field, pa.int64()) for field in COUNT_FIELDS),
    ("stats_recorded", pa.bool_()),
])

_PLAYER_SCHEMA = pa.schema([
    ("id", pa.string()),
    ("first_name", pa.string()),
    ("last_name", pa.string()),
    ("position", pa.string()),
    ("photo_url", pa.string()),
])

_ROSTER_SCHEMA = pa.schema([
    ("player_id", pa.string()),
    ("team_id", pa.string()),
    ("season", pa.string()),
    ("jersey_number", pa.string()),
])

_KEY_COLUMNS: dict[str, list[str]] = {
    "teams": ["id", "name"],
    "matches": ["id", "home_team_id", "away_team_id", "status"],
    "stat_lines": ["match_id", "player_id", "team_id"],
    "roster": ["player_id", "team_id"],
    "players": ["id"],
}


class ParquetRepository(Repository):
    """Repository implementation backed by one Parquet file per table.

    Directory layout::

        {base_path}/
            teams.parquet
            matches.parquet
            stat_lines.parquet
            players.parquet
            roster.parquet
    """

    def __init__(self, base_path: Path) -> None:
        self._base_path = base_path

    # -- internals -----------------------------------------------------------

    def _path(self, table: str) -> Path:
        return self._base_path / f"{table}.parquet"

    def _read(self, table: str, schema: pa.Schema) -> pd.DataFrame:
        path = self._path(table)
        if not path.exists():
            return pd.DataFrame(columns=schema.names)
        df = pd.read_parquet(path, engine="pyarrow")
        try:
            assert_columns(df, schema.names)
            assert_no_nulls(df, _KEY_COLUMNS[table])
            if table == "matches":
                assert_value_range(df, "home_score", min_val=0)
                assert_value_range(df, "away_score", min_val=0)
        except pandera.errors.SchemaError as exc:
            msg = f"{path}: {exc}"
            raise DataFormatError(msg) from exc
        if table == "stat_lines":
            df[list(COUNT_FIELDS)] = df[list(COUNT_FIELDS)].fillna(0)
        return df

    def _load(
        self, table: str, schema: pa.Schema, model: type[_M], df: pd.DataFrame | None = None
    ) -> list[_M]:
        frame = self._read(table, schema) if df is None else df
        if frame.empty:
            return []
        # Null cells are dropped so the model field defaults apply.
        frame = frame.astype(object).where(frame.notna(), None)
        return [
            model(**{k: v for k, v in row.items() if v is not None})
            for row in frame.to_dict(orient="records")
        ]

    def _write(self, table: str, schema: pa.Schema, records: Sequence[BaseModel]) -> None:
        self._base_path.mkdir(parents=True, exist_ok=True)
        data = {field: [getattr(r, field) for r in records] for field in schema.names}
        pq.write_table(pa.Table.from_pydict(data, schema=schema), self._path(table))
        logger.debug("repository: wrote %d rows to %s", len(records), table)

    def _merge(
        self,
        table: str,
        schema: pa.Schema,
        model: type[_M],
        incoming: Sequence[_M],
        key: Callable[[_M], Hashable],
        combine: Callable[[_M, _M], _M] | None = None,
    ) -> None:
        if not incoming:
            return
        merged: dict[Hashable, _M] = {key(r): r for r in self._load(table, schema, model)}
        for record in incoming:
            previous = merged.get(key(record))
            merged[key(record)] = combine(previous, record) if combine and previous is not None else record
        self._write(table, schema, list(merged.values()))

    # -- reads ---------------------------------------------------------------

    def get_teams(self, league_id: str | None = None) -> list[Team]:
        teams = self._load("teams", _TEAM_SCHEMA, Team)
        return teams if league_id is None else [t for t in teams if t.league_id == league_id]

    def get_matches(self, league_id: str | None = None, status: MatchStatus | None = None) -> list[Match]:
        matches = self._load("matches", _MATCH_SCHEMA, Match)
        if league_id is not None:
            matches = [m for m in matches if m.league_id == league_id]
        if status is not None:
            matches = [m for m in matches if m.status == status]
        return matches

    def get_match(self, match_id: str) -> Match | None:
        return next((m for m in self.get_matches() if m.id == match_id), None)

    def get_player(self, player_id: str) -> Player | None:
        players = self._load("players", _PLAYER_SCHEMA, Player)
        return next((p for p in players if p.id == player_id), None)

    def get_stat_lines_for_player(self, player_id: str) -> list[PlayerMatchStatLine]:
        df = self._read("stat_lines", _STAT_LINE_SCHEMA)
        selected = df[df["player_id"] == player_id]
        return self._load("stat_lines", _STAT_LINE_SCHEMA, PlayerMatchStatLine, selected)

    def get_stat_lines_for_match(self, match_id: str) -> list[PlayerMatchStatLine]:
        df = self._read("stat_lines", _STAT_LINE_SCHEMA)
        selected = df[df["match_id"] == match_id]
        return self._load("stat_lines", _STAT_LINE_SCHEMA, PlayerMatchStatLine, selected)

    def get_roster_assignments(self, team_id: str | None = None) -> list[RosterAssignment]:
        rows = self._load("roster", _ROSTER_SCHEMA, RosterAssignment)
        return rows if team_id is None else [r for r in rows if r.team_id == team_id]

    # -- writes --------------------------------------------------------------

    def save_teams(self, teams: Sequence[Team]) -> None:
        self._merge("teams", _TEAM_SCHEMA, Team, teams, key=lambda t: t.id)

    def save_matches(self, matches: Sequence[Match]) -> None:
        self._merge("matches", _MATCH_SCHEMA, Match, matches, key=lambda m: m.id)

    def save_players(self, players: Sequence[Player]) -> None:
        self._merge("players", _PLAYER_SCHEMA, Player, players, key=lambda p: p.id)

    def save_roster_assignments(self, assignments: Sequence[RosterAssignment]) -> None:
        self._merge(
            "roster",
            _ROSTER_SCHEMA,
            RosterAssignment,
            assignments,
            key=lambda a: (a.player_id, a.team_id, a.season),
        )

    def upsert_stat_lines(self, lines: Sequence[PlayerMatchStatLine]) -> None:
        self._merge(
            "stat_lines",
            _STAT_LINE_SCHEMA,
            PlayerMatchStatLine,
            lines,
            key=lambda line: line.key,
            combine=_keep_stored_id,
        )


def _keep_stored_id(stored: PlayerMatchStatLine, incoming: PlayerMatchStatLine) -> PlayerMatchStatLine:
    if incoming.id is None and stored.id is not None:
        return incoming.model_copy(update={"id": stored.id})
    return incoming


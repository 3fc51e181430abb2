"""Pydantic v2 models for the league records the stats engine consumes.

These are the only place where loosely-typed input is cleaned up: numeric
fields arriving as ``None``, ``""`` or ``"12"`` (as form controls and the
hosted store hand them over) are normalised here, so the calculators in
`league_stats.stats` can assume plain integers everywhere.
"""

from __future__ import annotations

import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

MatchStatus = Literal["scheduled", "finished"]

SHOT_TYPES: tuple[str, ...] = ("two_points", "three_points", "free_throws")
"""Prefixes of the ``*_made`` / ``*_attempted`` pairs on a stat line."""

COUNT_FIELDS: tuple[str, ...] = (
    "minutes_played",
    "two_points_made",
    "two_points_attempted",
    "three_points_made",
    "three_points_attempted",
    "free_throws_made",
    "free_throws_attempted",
    "rebounds",
    "assists",
    "steals",
    "blocks",
    "turnovers",
    "fouls",
    "points",
)
"""Every integer counter on `PlayerMatchStatLine`, in box-score order."""


def blank_to_zero(value: Any) -> Any:
    """Map ``None`` and blank strings to 0; strip padded numeric strings."""
    if value is None:
        return 0
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else 0
    return value


def as_utc(value: datetime.datetime) -> datetime.datetime:
    """Attach UTC to a naive timestamp, or convert an aware one to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc)


class Team(BaseModel):
    """A club entered in one category of a league."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category: str = ""
    league_id: str | None = None
    logo_url: str | None = None


class Match(BaseModel):
    """A scheduled or played fixture between two teams."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    league_id: str | None = None
    category: str = ""
    home_team_id: str = Field(..., min_length=1)
    away_team_id: str = Field(..., min_length=1)
    match_date: datetime.datetime | None = None
    home_score: int = Field(default=0, ge=0)
    away_score: int = Field(default=0, ge=0)
    status: MatchStatus = "scheduled"
    is_walkover: bool = False
    winner_id: str | None = None

    @field_validator("home_score", "away_score", mode="before")
    @classmethod
    def _default_scores(cls, value: Any) -> Any:
        return blank_to_zero(value)

    @field_validator("is_walkover", mode="before")
    @classmethod
    def _default_walkover(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("match_date", mode="after")
    @classmethod
    def _date_in_utc(cls, value: datetime.datetime | None) -> datetime.datetime | None:
        return as_utc(value) if value is not None else None

    @property
    def is_finished(self) -> bool:
        return self.status == "finished"


class PlayerMatchStatLine(BaseModel):
    """One player's box-score line for one match.

    ``(match_id, player_id)`` is the natural key; the store upserts on it.
    Counts are deliberately not bounded below: a negative value typed into
    the stat sheet flows through the arithmetic unchanged.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    match_id: str = Field(..., min_length=1)
    player_id: str = Field(..., min_length=1)
    team_id: str = Field(..., min_length=1)
    minutes_played: int = 0
    two_points_made: int = 0
    two_points_attempted: int = 0
    three_points_made: int = 0
    three_points_attempted: int = 0
    free_throws_made: int = 0
    free_throws_attempted: int = 0
    rebounds: int = 0
    assists: int = 0
    steals: int = 0
    blocks: int = 0
    turnovers: int = 0
    fouls: int = 0
    points: int = 0
    stats_recorded: bool = False

    @field_validator(*COUNT_FIELDS, mode="before")
    @classmethod
    def _default_counts(cls, value: Any) -> Any:
        return blank_to_zero(value)

    @field_validator("stats_recorded", mode="before")
    @classmethod
    def _default_recorded(cls, value: Any) -> Any:
        return False if value is None else value

    @property
    def key(self) -> tuple[str, str]:
        return (self.match_id, self.player_id)


class Player(BaseModel):
    """A registered player (identity only; team membership is per season)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    first_name: str = ""
    last_name: str = ""
    position: str | None = None
    photo_url: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class RosterAssignment(BaseModel):
    """A player's membership of a team for one season label (e.g. ``"2025"``)."""

    model_config = ConfigDict(frozen=True)

    player_id: str = Field(..., min_length=1)
    team_id: str = Field(..., min_length=1)
    season: str = ""
    jersey_number: str | None = None

    @field_validator("season", mode="before")
    @classmethod
    def _season_as_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        return str(value) if isinstance(value, int) else value

    @field_validator("jersey_number", mode="before")
    @classmethod
    def _jersey_as_text(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

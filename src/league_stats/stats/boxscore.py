"""Box-score arithmetic: line points, season averages, shooting splits.

Two numbers must agree across the codebase.  `compute_line_points` is what
the stat sheet stores in a line's ``points`` field, and
`compute_season_aggregate` later averages that stored field rather than
recomputing it.

Rounding is one decimal, half-up (``12.25 -> 12.3``), done in
`decimal.Decimal` so a float like ``0.15000000000000002`` never decides a
half.  Every quotient is guarded: zero games or zero attempts give ``0.0``.
"""

from __future__ import annotations

import dataclasses
import datetime
from collections.abc import Iterable, Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import TypeAdapter

from league_stats.ingest.schema import (
    COUNT_FIELDS,
    SHOT_TYPES,
    Match,
    PlayerMatchStatLine,
    as_utc,
    blank_to_zero,
)

_ONE_DECIMAL = Decimal("0.1")
_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
_SHOT_VALUES: dict[str, int] = {"two_points": 2, "three_points": 3, "free_throws": 1}
_COUNT = TypeAdapter(int)


def round_half_up(numerator: int, denominator: int, *, scale: int = 1) -> float:
    """Return ``scale * numerator / denominator`` to one decimal, or 0.0 if ``denominator == 0``."""
    if denominator == 0:
        return 0.0
    quotient = Decimal(numerator * scale) / Decimal(denominator)
    return float(quotient.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def _made(line: PlayerMatchStatLine | Mapping[str, Any], shot: str) -> int:
    field = f"{shot}_made"
    if isinstance(line, PlayerMatchStatLine):
        return int(getattr(line, field))
    return _COUNT.validate_python(blank_to_zero(line.get(field)))


def compute_line_points(line: PlayerMatchStatLine | Mapping[str, Any]) -> int:
    """Points scored on one line: ``2*2PM + 3*3PM + FTM``.

    Accepts a validated stat line or a raw mapping of form values, in which
    case missing or blank made-counts read as 0 and the rest are validated
    like the `PlayerMatchStatLine` counters.

    Raises:
        pydantic.ValidationError: If a raw made-count is not a whole number.

    >>> compute_line_points({"two_points_made": 5, "three_points_made": 2, "free_throws_made": 3})
    19
    """
    return sum(value * _made(line, shot) for shot, value in _SHOT_VALUES.items())


@dataclasses.dataclass(frozen=True)
class ShootingSplit:
    """Made/attempted totals for one shot type and the make percentage."""

    made: int = 0
    attempted: int = 0
    percentage: float = 0.0

    @classmethod
    def from_counts(cls, made: int, attempted: int) -> ShootingSplit:
        return cls(made=made, attempted=attempted, percentage=round_half_up(made, attempted, scale=100))

    def formatted(self) -> str:
        return f"{self.made}/{self.attempted}"


@dataclasses.dataclass(frozen=True)
class PlayerSeasonAggregate:
    """A player's per-game averages and shooting splits over their lines."""

    player_id: str | None
    games: int
    points_per_game: float
    rebounds_per_game: float
    assists_per_game: float
    two_points: ShootingSplit
    three_points: ShootingSplit
    free_throws: ShootingSplit

    def split(self, shot: str) -> ShootingSplit:
        """Return the split for *shot* (one of `SHOT_TYPES`)."""
        if shot not in SHOT_TYPES:
            msg = f"Unknown shot type {shot!r}. Valid: {', '.join(SHOT_TYPES)}"
            raise ValueError(msg)
        split: ShootingSplit = getattr(self, shot)
        return split

    def formatted(self) -> dict[str, str]:
        """Display strings, one decimal for every rate (``"15.0"``, ``"0.0"``)."""
        out = {
            "games": str(self.games),
            "points_per_game": f"{self.points_per_game:.1f}",
            "rebounds_per_game": f"{self.rebounds_per_game:.1f}",
            "assists_per_game": f"{self.assists_per_game:.1f}",
        }
        for shot in SHOT_TYPES:
            split = self.split(shot)
            out[shot] = split.formatted()
            out[f"{shot}_pct"] = f"{split.percentage:.1f}"
        return out


def compute_season_aggregate(
    lines: Sequence[PlayerMatchStatLine],
    *,
    player_id: str | None = None,
) -> PlayerSeasonAggregate:
    """Aggregate one player's stat lines (one per match) into season figures.

    Args:
        lines: That player's lines, already filtered to the player.
        player_id: Identity to report; defaults to the first line's player.

    Returns:
        The aggregate.  With no lines every rate and percentage is 0.0 and
        every split is ``0/0``.
    """
    games = len(lines)
    if player_id is None and lines:
        player_id = lines[0].player_id

    splits = {
        shot: ShootingSplit.from_counts(
            sum(getattr(line, f"{shot}_made") for line in lines),
            sum(getattr(line, f"{shot}_attempted") for line in lines),
        )
        for shot in SHOT_TYPES
    }
    return PlayerSeasonAggregate(
        player_id=player_id,
        games=games,
        points_per_game=round_half_up(sum(line.points for line in lines), games),
        rebounds_per_game=round_half_up(sum(line.rebounds for line in lines), games),
        assists_per_game=round_half_up(sum(line.assists for line in lines), games),
        two_points=splits["two_points"],
        three_points=splits["three_points"],
        free_throws=splits["free_throws"],
    )


@dataclasses.dataclass(frozen=True)
class GameLogEntry:
    """A stat line paired with the date of its match, for the player page."""

    line: PlayerMatchStatLine
    match_date: datetime.datetime | None = None


def game_log(lines: Iterable[PlayerMatchStatLine], matches: Iterable[Match]) -> list[GameLogEntry]:
    """Pair each line with its match date and order the log newest first."""
    dates = {m.id: m.match_date for m in matches}
    return sort_game_log(GameLogEntry(line=line, match_date=dates.get(line.match_id)) for line in lines)


def sort_game_log(entries: Iterable[GameLogEntry]) -> list[GameLogEntry]:
    """Order entries by match date, newest first.

    Entries without a date count as the earliest possible date, so they
    close the log in their original order.
    """
    dated: list[GameLogEntry] = []
    undated: list[GameLogEntry] = []
    for entry in entries:
        (dated if entry.match_date is not None else undated).append(entry)
    dated.sort(key=lambda e: as_utc(e.match_date or _EPOCH), reverse=True)
    return dated + undated


@dataclasses.dataclass(frozen=True)
class TeamBoxScore:
    """One side of a match box score."""

    team_id: str
    lines: list[PlayerMatchStatLine]
    totals: dict[str, int]


@dataclasses.dataclass(frozen=True)
class MatchBoxScore:
    match_id: str
    home: TeamBoxScore
    away: TeamBoxScore


def team_totals(lines: Iterable[PlayerMatchStatLine]) -> dict[str, int]:
    """Sum every counter in `COUNT_FIELDS` across *lines*."""
    totals = dict.fromkeys(COUNT_FIELDS, 0)
    for line in lines:
        for field in COUNT_FIELDS:
            totals[field] += getattr(line, field)
    return totals


def build_box_score(match: Match, lines: Iterable[PlayerMatchStatLine]) -> MatchBoxScore | None:
    """Split a finished match's lines into home and away box scores.

    Each side lists its players by stored points, highest first, and carries
    a totals row.  Lines of other matches or other teams are left out.

    Returns:
        ``None`` unless the match is finished.
    """
    if not match.is_finished:
        return None

    own = [line for line in lines if line.match_id == match.id]

    def side(team_id: str) -> TeamBoxScore:
        team_lines = sorted(
            (line for line in own if line.team_id == team_id),
            key=lambda line: line.points,
            reverse=True,
        )
        return TeamBoxScore(team_id=team_id, lines=team_lines, totals=team_totals(team_lines))

    return MatchBoxScore(
        match_id=match.id,
        home=side(match.home_team_id),
        away=side(match.away_team_id),
    )

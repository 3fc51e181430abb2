"""League standings table derived from finished match results.

`compute_standings` is a pure function of ``(teams, matches)``: it keeps no
state between calls and never raises on odd data.  Matches that are not
finished, or that reference a team outside the given team list, are
ignored.  The result is identical for any ordering of *matches*.

Ranking keys, in order: league-points, point differential, points scored.
Teams equal on all three keep the order they had in *teams*.
"""

from __future__ import annotations

import dataclasses
import datetime
import logging
from collections.abc import Iterable, Sequence

import pandas as pd  # type: ignore[import-untyped]

from league_stats.config import DEFAULT_POINTS_RULE, PointsRule
from league_stats.ingest.schema import Match, Team

logger = logging.getLogger(__name__)

_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)

STANDINGS_COLUMNS: list[str] = [
    "rank",
    "team_id",
    "team_name",
    "league_points",
    "played",
    "won",
    "lost",
    "walkover_losses",
    "points_for",
    "points_against",
    "point_diff",
]


@dataclasses.dataclass(frozen=True)
class TeamStandingRow:
    """One ranked line of the standings table."""

    rank: int
    team_id: str
    team_name: str
    logo_url: str | None
    played: int
    won: int
    lost: int
    walkover_losses: int
    points_for: int
    points_against: int
    point_diff: int
    league_points: int


@dataclasses.dataclass
class _Tally:
    played: int = 0
    won: int = 0
    lost: int = 0
    walkover_losses: int = 0
    points_for: int = 0
    points_against: int = 0
    league_points: int = 0

    def record_score(self, scored: int, conceded: int) -> None:
        self.played += 1
        self.points_for += scored
        self.points_against += conceded


def match_winner_id(match: Match) -> str | None:
    """Return the id of the side with the strictly higher score, else ``None``."""
    if match.home_score > match.away_score:
        return match.home_team_id
    if match.away_score > match.home_score:
        return match.away_team_id
    return None


def compute_standings(
    teams: Sequence[Team],
    matches: Iterable[Match],
    *,
    category: str | None = None,
    rule: PointsRule = DEFAULT_POINTS_RULE,
) -> list[TeamStandingRow]:
    """Rank *teams* by their results in the finished *matches*.

    Args:
        teams: Teams of one category.  Every team gets exactly one row,
            including teams that have not played.
        matches: Matches of the same category; only ``finished`` ones count.
        category: When given, both *teams* and *matches* are first narrowed
            to this category label.
        rule: League-points awarded per outcome.

    Returns:
        Rows sorted by rank (1-based).
    """
    if category is not None:
        teams = [t for t in teams if t.category == category]
        matches = [m for m in matches if m.category == category]

    tallies: dict[str, _Tally] = {}
    for team in teams:
        tallies.setdefault(team.id, _Tally())

    skipped = 0
    for match in matches:
        if not match.is_finished:
            continue
        home = tallies.get(match.home_team_id)
        away = tallies.get(match.away_team_id)
        if home is None or away is None:
            skipped += 1
            continue

        home.record_score(match.home_score, match.away_score)
        away.record_score(match.away_score, match.home_score)

        winner_id = match_winner_id(match)
        if winner_id is None:
            home.league_points += rule.tie
            away.league_points += rule.tie
            continue

        winner, loser = (home, away) if winner_id == match.home_team_id else (away, home)
        winner.won += 1
        winner.league_points += rule.win
        loser.lost += 1
        if match.is_walkover:
            loser.walkover_losses += 1
            loser.league_points += rule.walkover_loss
        else:
            loser.league_points += rule.loss

    if skipped:
        logger.debug("standings: skipped %d finished matches with unknown teams", skipped)

    # First occurrence wins when a team id is listed twice.
    unique_teams: dict[str, Team] = {}
    for team in teams:
        unique_teams.setdefault(team.id, team)

    ordered = sorted(
        unique_teams.values(),
        key=lambda t: (
            tallies[t.id].league_points,
            tallies[t.id].points_for - tallies[t.id].points_against,
            tallies[t.id].points_for,
        ),
        reverse=True,
    )
    rows: list[TeamStandingRow] = []
    for position, team in enumerate(ordered, start=1):
        tally = tallies[team.id]
        rows.append(
            TeamStandingRow(
                rank=position,
                team_id=team.id,
                team_name=team.name,
                logo_url=team.logo_url,
                played=tally.played,
                won=tally.won,
                lost=tally.lost,
                walkover_losses=tally.walkover_losses,
                points_for=tally.points_for,
                points_against=tally.points_against,
                point_diff=tally.points_for - tally.points_against,
                league_points=tally.league_points,
            )
        )
    return rows


def list_categories(teams: Iterable[Team], matches: Iterable[Match]) -> list[str]:
    """Sorted, de-duplicated non-empty category labels used by teams or matches."""
    labels = {m.category for m in matches if m.category}
    labels.update(t.category for t in teams if t.category)
    return sorted(labels)


def category_fixture(matches: Iterable[Match], category: str) -> list[Match]:
    """All matches of *category*, newest first; undated matches go last."""
    selected = [m for m in matches if m.category == category]
    dated = [m for m in selected if m.match_date is not None]
    undated = [m for m in selected if m.match_date is None]
    dated.sort(key=lambda m: m.match_date or _EPOCH, reverse=True)
    return dated + undated


def standings_frame(rows: Sequence[TeamStandingRow]) -> pd.DataFrame:
    """Render *rows* as a DataFrame with `STANDINGS_COLUMNS` in display order."""
    if not rows:
        return pd.DataFrame(columns=STANDINGS_COLUMNS)
    records = [dataclasses.asdict(row) for row in rows]
    return pd.DataFrame.from_records(records)[STANDINGS_COLUMNS]

"""Standings and box-score calculations."""

from __future__ import annotations

from league_stats.stats.boxscore import (
    GameLogEntry,
    MatchBoxScore,
    PlayerSeasonAggregate,
    ShootingSplit,
    TeamBoxScore,
    build_box_score,
    compute_line_points,
    compute_season_aggregate,
    game_log,
    round_half_up,
    sort_game_log,
    team_totals,
)
from league_stats.stats.entry import build_stat_lines, dedupe_stat_lines
from league_stats.stats.roster import current_assignment, jersey_sort_key, resolve_roster
from league_stats.stats.standings import (
    TeamStandingRow,
    category_fixture,
    compute_standings,
    list_categories,
    match_winner_id,
    standings_frame,
)

__all__ = [
    "GameLogEntry",
    "MatchBoxScore",
    "PlayerSeasonAggregate",
    "ShootingSplit",
    "TeamBoxScore",
    "TeamStandingRow",
    "build_box_score",
    "build_stat_lines",
    "category_fixture",
    "compute_line_points",
    "compute_season_aggregate",
    "compute_standings",
    "current_assignment",
    "dedupe_stat_lines",
    "game_log",
    "jersey_sort_key",
    "list_categories",
    "match_winner_id",
    "resolve_roster",
    "round_half_up",
    "sort_game_log",
    "standings_frame",
    "team_totals",
]

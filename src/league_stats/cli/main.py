"""Typer CLI for browsing standings and box scores from a local store."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from league_stats.config import default_data_dir
from league_stats.ingest import ParquetRepository, RepositoryError
from league_stats.ingest.schema import SHOT_TYPES
from league_stats.stats import (
    TeamBoxScore,
    build_box_score,
    build_stat_lines,
    compute_season_aggregate,
    compute_standings,
    game_log,
    list_categories,
    resolve_roster,
)
from league_stats.utils.logger import configure_logging, get_logger

app = typer.Typer(help="League standings and box-score CLI")
console = Console()
log = get_logger("cli")

_DATA_DIR_OPTION = typer.Option(
    None,
    "--data-dir",
    help="Local Parquet store (default: $LEAGUE_STATS_DATA_DIR or data/)",
)
_SHOT_LABELS: dict[str, str] = {"two_points": "2P", "three_points": "3P", "free_throws": "FT"}


@app.callback()
def _callback(
    log_level: str | None = typer.Option(None, "--log-level", help="QUIET | NORMAL | VERBOSE | DEBUG"),
) -> None:
    """League stats CLI: standings, player averages and box scores."""
    try:
        configure_logging(log_level)
    except ValueError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc


def _repository(data_dir: Path | None) -> ParquetRepository:
    return ParquetRepository(base_path=data_dir or default_data_dir())


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error: {escape(message)}[/red]")
    return typer.Exit(code=1)


def _signed(value: int) -> str:
    return f"+{value}" if value > 0 else str(value)


@app.command()
def standings(
    league: str = typer.Option(..., "--league", help="League id"),
    category: str | None = typer.Option(None, "--category", help="Only this category"),
    data_dir: Path | None = _DATA_DIR_OPTION,
) -> None:
    """Print the standings table of each category of a league."""
    repo = _repository(data_dir)
    try:
        teams = repo.get_teams(league)
        matches = repo.get_matches(league, status="finished")
    except RepositoryError as exc:
        raise _fail(str(exc)) from exc

    labels = [category] if category is not None else list_categories(teams, matches)
    if not labels:
        raise _fail(f"No teams or matches found for league {league!r}")

    for label in labels:
        rows = compute_standings(teams, matches, category=label)
        log.info("standings: %s has %d teams", label, len(rows))
        table = Table(title=label)
        for column in ("#", "Team", "PTS", "PJ", "G", "P", "WO", "PF", "PC", "DIF"):
            table.add_column(column, justify="left" if column == "Team" else "right")
        for row in rows:
            table.add_row(
                str(row.rank),
                row.team_name,
                str(row.league_points),
                str(row.played),
                str(row.won),
                str(row.lost),
                str(row.walkover_losses),
                str(row.points_for),
                str(row.points_against),
                _signed(row.point_diff),
            )
        console.print(table)


@app.command()
def categories(
    league: str = typer.Option(..., "--league", help="League id"),
    data_dir: Path | None = _DATA_DIR_OPTION,
) -> None:
    """List the category labels used in a league."""
    repo = _repository(data_dir)
    try:
        labels = list_categories(repo.get_teams(league), repo.get_matches(league))
    except RepositoryError as exc:
        raise _fail(str(exc)) from exc
    for label in labels:
        console.print(label)


@app.command()
def player(
    player_id: str = typer.Option(..., "--player", help="Player id"),
    data_dir: Path | None = _DATA_DIR_OPTION,
) -> None:
    """Print a player's season averages, shooting splits and game log."""
    repo = _repository(data_dir)
    try:
        profile = repo.get_player(player_id)
        lines = repo.get_stat_lines_for_player(player_id)
        matches = repo.get_matches() if lines else []
    except RepositoryError as exc:
        raise _fail(str(exc)) from exc
    if profile is None and not lines:
        raise _fail(f"Unknown player {player_id!r}")

    aggregate = compute_season_aggregate(lines, player_id=player_id).formatted()
    title = profile.full_name if profile is not None and profile.full_name else player_id
    summary = Table(title=title)
    for column in ("PJ", "PPG", "RPG", "APG", *(f"{_SHOT_LABELS[s]} / %" for s in SHOT_TYPES)):
        summary.add_column(column, justify="right")
    summary.add_row(
        aggregate["games"],
        aggregate["points_per_game"],
        aggregate["rebounds_per_game"],
        aggregate["assists_per_game"],
        *(f"{aggregate[s]} / {aggregate[f'{s}_pct']}" for s in SHOT_TYPES),
    )
    console.print(summary)

    if lines:
        log_table = Table(title="Game log")
        for column in ("Date", "Match", "PTS", "REB", "AST"):
            log_table.add_column(column)
        for entry in game_log(lines, matches):
            date = entry.match_date.date().isoformat() if entry.match_date else "TBD"
            log_table.add_row(
                date,
                entry.line.match_id,
                str(entry.line.points),
                str(entry.line.rebounds),
                str(entry.line.assists),
            )
        console.print(log_table)


def _box_table(title: str, side: TeamBoxScore, player_names: dict[str, str]) -> Table:
    table = Table(title=title)
    for column in ("Player", "MIN", "PTS", "2P", "3P", "FT", "REB", "AST", "ROB", "TAP", "PER", "FAL"):
        table.add_column(column, justify="left" if column == "Player" else "right")

    def shots(values: dict[str, int]) -> list[str]:
        return [f"{values[f'{s}_made']}/{values[f'{s}_attempted']}" for s in SHOT_TYPES]

    for line in side.lines:
        values = line.model_dump()
        table.add_row(
            player_names.get(line.player_id, line.player_id),
            str(line.minutes_played),
            str(line.points),
            *shots(values),
            str(line.rebounds),
            str(line.assists),
            str(line.steals),
            str(line.blocks),
            str(line.turnovers),
            str(line.fouls),
        )
    totals = side.totals
    table.add_row(
        "TOTAL",
        str(totals["minutes_played"]),
        str(totals["points"]),
        *shots(totals),
        *(str(totals[f]) for f in ("rebounds", "assists", "steals", "blocks", "turnovers", "fouls")),
    )
    return table


@app.command("box-score")
def box_score(
    match_id: str = typer.Option(..., "--match", help="Match id"),
    data_dir: Path | None = _DATA_DIR_OPTION,
) -> None:
    """Print the home and away box scores of a finished match."""
    repo = _repository(data_dir)
    try:
        match = repo.get_match(match_id)
        if match is None:
            raise _fail(f"Unknown match {match_id!r}")
        box = build_box_score(match, repo.get_stat_lines_for_match(match_id))
        if box is None:
            console.print(f"Match {match_id} has not been played yet.")
            return
        names = {t.id: t.name for t in repo.get_teams()}
        player_names: dict[str, str] = {}
        for line in [*box.home.lines, *box.away.lines]:
            profile = repo.get_player(line.player_id)
            if profile is not None and profile.full_name:
                player_names[line.player_id] = profile.full_name
    except RepositoryError as exc:
        raise _fail(str(exc)) from exc

    home_name = names.get(match.home_team_id, match.home_team_id)
    away_name = names.get(match.away_team_id, match.away_team_id)
    console.print(f"{home_name} {match.home_score} - {match.away_score} {away_name}")
    for side in (box.home, box.away):
        if side.lines:
            console.print(_box_table(names.get(side.team_id, side.team_id), side, player_names))


def _read_sheet(sheet_path: Path) -> dict[str, dict[str, Any]]:
    """Load a stat sheet: a JSON object mapping player ids to objects of stat values."""
    if not sheet_path.exists():
        raise _fail(f"Stat sheet not found: {sheet_path}")
    try:
        sheet = json.loads(sheet_path.read_text())
    except json.JSONDecodeError as exc:
        raise _fail(f"Invalid stat sheet: {sheet_path} is not valid JSON ({exc})") from exc
    if not isinstance(sheet, dict) or not all(isinstance(v, dict) for v in sheet.values()):
        raise _fail("Invalid stat sheet: expected an object of player id -> object of stat values")
    return {str(player_id): dict(values) for player_id, values in sheet.items()}


@app.command("record-stats")
def record_stats(
    match_id: str = typer.Option(..., "--match", help="Match id"),
    sheet_path: Path = typer.Option(..., "--sheet", help="JSON object: player id -> stat values"),
    season: str | None = typer.Option(None, "--season", help="Season label used to pick the rosters"),
    data_dir: Path | None = _DATA_DIR_OPTION,
) -> None:
    """Save a stat sheet for every rostered player of a match."""
    sheet = _read_sheet(sheet_path)
    repo = _repository(data_dir)
    try:
        match = repo.get_match(match_id)
        if match is None:
            raise _fail(f"Unknown match {match_id!r}")
        assignments = repo.get_roster_assignments()
        try:
            lines = build_stat_lines(
                match,
                resolve_roster(assignments, match.home_team_id, season),
                resolve_roster(assignments, match.away_team_id, season),
                sheet,
            )
        except ValidationError as exc:
            raise _fail(f"Invalid stat sheet: {exc}") from exc
        repo.upsert_stat_lines(lines)
    except RepositoryError as exc:
        raise _fail(str(exc)) from exc
    console.print(f"Saved {len(lines)} stat lines for match {match_id}")

"""Turn a filled-in match stat sheet into lines ready for the store's upsert."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from league_stats.ingest.schema import COUNT_FIELDS, Match, PlayerMatchStatLine, RosterAssignment
from league_stats.stats.boxscore import compute_line_points

_ENTERED_FIELDS: tuple[str, ...] = tuple(f for f in COUNT_FIELDS if f != "points")


def build_stat_lines(
    match: Match,
    home_roster: Sequence[RosterAssignment],
    away_roster: Sequence[RosterAssignment],
    sheet: Mapping[str, Mapping[str, Any]],
) -> list[PlayerMatchStatLine]:
    """Build one recorded stat line per rostered player of *match*.

    Args:
        match: The match the sheet belongs to.
        home_roster: Home players, in the order they should be saved.
        away_roster: Away players, likewise.
        sheet: Raw values keyed by player id, then by stat field.  Values may
            be missing, blank or numeric strings.  Any ``points`` entry is
            ignored; points are always derived from the made shots.

    Returns:
        Home lines then away lines.  Players missing from *sheet* get an
        all-zero line.

    Raises:
        pydantic.ValidationError: If a value is not a number.
    """
    lines: list[PlayerMatchStatLine] = []
    for team_id, roster in ((match.home_team_id, home_roster), (match.away_team_id, away_roster)):
        for assignment in roster:
            raw = sheet.get(assignment.player_id, {})
            values = {field: raw.get(field) for field in _ENTERED_FIELDS}
            line = PlayerMatchStatLine(
                match_id=match.id,
                player_id=assignment.player_id,
                team_id=team_id,
                stats_recorded=True,
                **values,
            )
            lines.append(line.model_copy(update={"points": compute_line_points(line)}))
    return lines


def dedupe_stat_lines(lines: Iterable[PlayerMatchStatLine]) -> list[PlayerMatchStatLine]:
    """Keep the last line for each ``(match_id, player_id)``, in first-seen order."""
    latest: dict[tuple[str, str], PlayerMatchStatLine] = {}
    for line in lines:
        latest[line.key] = line
    return list(latest.values())

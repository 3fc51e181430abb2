"""Which players belong to a team for a given season.

One rule is used everywhere a roster is needed (stat sheet, team page):

1. Take the team's assignments for exactly the requested season.
2. If that is empty, or no season was asked for, take every assignment the
   team ever had, newest season first, keeping each player's latest one.
3. Order by jersey number; a missing or non-numeric number sorts as 999.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from league_stats.ingest.schema import RosterAssignment

logger = logging.getLogger(__name__)

UNNUMBERED_JERSEY: int = 999

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def jersey_sort_key(assignment: RosterAssignment) -> int:
    """Leading integer of the jersey number (``"07"`` -> 7), else `UNNUMBERED_JERSEY`."""
    found = _LEADING_INT.match(assignment.jersey_number or "")
    return int(found.group(1)) if found else UNNUMBERED_JERSEY


def _first_per_player(assignments: Iterable[RosterAssignment]) -> list[RosterAssignment]:
    seen: set[str] = set()
    kept: list[RosterAssignment] = []
    for assignment in assignments:
        if assignment.player_id in seen:
            continue
        seen.add(assignment.player_id)
        kept.append(assignment)
    return kept


def _latest_first(assignments: Iterable[RosterAssignment]) -> list[RosterAssignment]:
    return sorted(assignments, key=lambda a: a.season, reverse=True)


def resolve_roster(
    assignments: Iterable[RosterAssignment],
    team_id: str,
    season: str | None = None,
) -> list[RosterAssignment]:
    """Return the roster of *team_id*, one assignment per player.

    Args:
        assignments: Assignments to choose from; other teams' are ignored.
        team_id: Team whose roster is wanted.
        season: Season label of the competition (e.g. the league's season).
            ``None`` or ``""`` goes straight to the all-time roster.
    """
    team_rows = [a for a in assignments if a.team_id == team_id]

    chosen: list[RosterAssignment] = []
    if season:
        chosen = _first_per_player(a for a in team_rows if a.season == season)
        if not chosen:
            logger.debug("roster: no %s assignments for team %s, using all-time roster", season, team_id)

    if not chosen:
        chosen = _first_per_player(_latest_first(team_rows))

    return sorted(chosen, key=jersey_sort_key)


def current_assignment(assignments: Iterable[RosterAssignment]) -> RosterAssignment | None:
    """A player's assignment with the greatest season label, if any."""
    ordered = _latest_first(assignments)
    return ordered[0] if ordered else None

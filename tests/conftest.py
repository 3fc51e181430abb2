"""Shared pytest fixtures for the league_stats test suite.

Fixtures defined here are available to all tests without explicit imports.
"""

from __future__ import annotations

import datetime
from pathlib import Path

import pytest

from league_stats.ingest.schema import Match, RosterAssignment, Team


@pytest.fixture
def temp_data_dir(tmp_path: Path) -> Path:
    """Provide an isolated directory for a Parquet store.

    Args:
        tmp_path: pytest built-in temporary directory fixture.

    Returns:
        Path: A directory that exists for the duration of the test.
    """
    data_dir = tmp_path / "test_data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def sample_teams() -> list[Team]:
    """Four Primera División teams and one Sub-20 team in league ``L1``."""
    return [
        Team(id="t-aguilas", name="Águilas", category="Primera División", league_id="L1"),
        Team(id="t-halcones", name="Halcones", category="Primera División", league_id="L1"),
        Team(id="t-toros", name="Toros", category="Primera División", league_id="L1"),
        Team(id="t-lobos", name="Lobos", category="Primera División", league_id="L1"),
        Team(id="t-cachorros", name="Cachorros", category="Sub-20", league_id="L1"),
    ]


@pytest.fixture
def sample_matches() -> list[Match]:
    """Finished and scheduled Primera División matches.

    Results: Águilas 80-70 Halcones, Toros 70-0 Lobos (walkover),
    Halcones 65-64 Toros, Águilas 60-60 Lobos (tie); plus one scheduled
    fixture and one finished match against a team outside the list.
    """
    day = datetime.datetime(2025, 3, 1, 20, 0, tzinfo=datetime.timezone.utc)

    def make(match_id: str, home: str, away: str, hs: int, as_: int, **kwargs: object) -> Match:
        return Match.model_validate({
            "id": match_id,
            "league_id": "L1",
            "category": "Primera División",
            "home_team_id": home,
            "away_team_id": away,
            "home_score": hs,
            "away_score": as_,
            "status": "finished",
            "match_date": day + datetime.timedelta(days=7 * int(match_id[1:])),
            **kwargs,
        })

    return [
        make("m1", "t-aguilas", "t-halcones", 80, 70),
        make("m2", "t-toros", "t-lobos", 70, 0, is_walkover=True),
        make("m3", "t-halcones", "t-toros", 65, 64),
        make("m4", "t-aguilas", "t-lobos", 60, 60),
        make("m5", "t-toros", "t-aguilas", 0, 0, status="scheduled"),
        make("m6", "t-aguilas", "t-deleted", 90, 10),
    ]


@pytest.fixture
def sample_roster() -> list[RosterAssignment]:
    """Assignments for Águilas (season 2025) and Halcones (2024 only)."""
    return [
        RosterAssignment(player_id="p-ana", team_id="t-aguilas", season="2025", jersey_number="10"),
        RosterAssignment(player_id="p-bea", team_id="t-aguilas", season="2025", jersey_number="4"),
        RosterAssignment(player_id="p-cris", team_id="t-aguilas", season="2025", jersey_number=None),
        RosterAssignment(player_id="p-dani", team_id="t-halcones", season="2023", jersey_number="8"),
        RosterAssignment(player_id="p-dani", team_id="t-halcones", season="2024", jersey_number="23"),
        RosterAssignment(player_id="p-eva", team_id="t-halcones", season="2024", jersey_number="5"),
    ]


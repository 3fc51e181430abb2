"""Unit tests for league_stats.stats.standings."""

from __future__ import annotations

import datetime

import pytest
from hypothesis import given, settings, strategies as st

from league_stats.config import PointsRule
from league_stats.ingest.schema import Match, Team
from league_stats.stats.standings import (
    STANDINGS_COLUMNS,
    TeamStandingRow,
    category_fixture,
    compute_standings,
    list_categories,
    match_winner_id,
    standings_frame,
)

_PRIMERA = "Primera División"


def _match(  # noqa: PLR0913
    match_id: str,
    home: str,
    away: str,
    home_score: int,
    away_score: int,
    *,
    status: str = "finished",
    is_walkover: bool = False,
    category: str = "",
    match_date: datetime.datetime | None = None,
) -> Match:
    return Match.model_validate({
        "id": match_id,
        "home_team_id": home,
        "away_team_id": away,
        "home_score": home_score,
        "away_score": away_score,
        "status": status,
        "is_walkover": is_walkover,
        "category": category,
        "match_date": match_date,
    })


def _two_teams() -> list[Team]:
    return [Team(id="home", name="Home"), Team(id="away", name="Away")]


def _row(rows: list[TeamStandingRow], team_id: str) -> TeamStandingRow:
    return next(r for r in rows if r.team_id == team_id)


# ---------------------------------------------------------------------------
# Single-match outcomes
# ---------------------------------------------------------------------------


class TestMatchOutcomes:
    """League-points, wins and losses for one match."""

    def test_decisive_home_win(self) -> None:
        rows = compute_standings(_two_teams(), [_match("m", "home", "away", 80, 70)])
        home, away = _row(rows, "home"), _row(rows, "away")
        assert (home.won, home.lost, home.league_points, home.point_diff) == (1, 0, 2, 10)
        assert (away.won, away.lost, away.league_points, away.point_diff) == (0, 1, 1, -10)

    def test_decisive_away_win(self) -> None:
        rows = compute_standings(_two_teams(), [_match("m", "home", "away", 55, 61)])
        assert _row(rows, "away").league_points == 2
        assert _row(rows, "home").league_points == 1
        assert _row(rows, "home").lost == 1

    def test_walkover_loser_gets_no_points(self) -> None:
        rows = compute_standings(_two_teams(), [_match("m", "home", "away", 70, 0, is_walkover=True)])
        home, away = _row(rows, "home"), _row(rows, "away")
        assert home.league_points == 2
        assert away.league_points == 0
        assert away.walkover_losses == 1
        assert away.lost == 1

    def test_walkover_winner_still_gets_two(self) -> None:
        rows = compute_standings(_two_teams(), [_match("m", "home", "away", 0, 20, is_walkover=True)])
        assert _row(rows, "away").league_points == 2
        assert _row(rows, "home").walkover_losses == 1

    def test_tie_only_counts_as_played(self) -> None:
        rows = compute_standings(_two_teams(), [_match("m", "home", "away", 60, 60)])
        for row in rows:
            assert row.played == 1
            assert row.won == 0
            assert row.lost == 0
            assert row.league_points == 0
            assert row.points_for == 60
            assert row.points_against == 60

    def test_scheduled_match_ignored(self) -> None:
        rows = compute_standings(_two_teams(), [_match("m", "home", "away", 0, 0, status="scheduled")])
        assert all(r.played == 0 for r in rows)

    def test_custom_points_rule(self) -> None:
        rule = PointsRule(win=3, loss=0, walkover_loss=-1, tie=1)
        rows = compute_standings(
            _two_teams(),
            [_match("a", "home", "away", 70, 0, is_walkover=True), _match("b", "home", "away", 50, 50)],
            rule=rule,
        )
        assert _row(rows, "home").league_points == 4
        assert _row(rows, "away").league_points == 0


class TestMatchWinnerId:
    def test_home(self) -> None:
        assert match_winner_id(_match("m", "h", "a", 3, 1)) == "h"

    def test_away(self) -> None:
        assert match_winner_id(_match("m", "h", "a", 1, 3)) == "a"

    def test_tie(self) -> None:
        assert match_winner_id(_match("m", "h", "a", 2, 2)) is None


# ---------------------------------------------------------------------------
# Full table
# ---------------------------------------------------------------------------


class TestComputeStandings:
    """Whole-table behaviour on the shared league fixtures."""

    def test_sample_league_order(self, sample_teams: list[Team], sample_matches: list[Match]) -> None:
        rows = compute_standings(sample_teams, sample_matches, category=_PRIMERA)
        assert [r.team_id for r in rows] == ["t-toros", "t-halcones", "t-aguilas", "t-lobos"]
        assert [r.rank for r in rows] == [1, 2, 3, 4]

    def test_sample_league_totals(self, sample_teams: list[Team], sample_matches: list[Match]) -> None:
        rows = compute_standings(sample_teams, sample_matches, category=_PRIMERA)
        toros = _row(rows, "t-toros")
        assert (toros.played, toros.won, toros.lost, toros.league_points) == (2, 1, 1, 3)
        assert (toros.points_for, toros.points_against, toros.point_diff) == (134, 65, 69)
        lobos = _row(rows, "t-lobos")
        assert (lobos.played, lobos.lost, lobos.walkover_losses, lobos.league_points) == (2, 1, 1, 0)
        aguilas = _row(rows, "t-aguilas")
        assert (aguilas.played, aguilas.won, aguilas.points_for) == (2, 1, 140)

    def test_unknown_team_match_skipped(self, sample_teams: list[Team], sample_matches: list[Match]) -> None:
        rows = compute_standings(sample_teams, sample_matches, category=_PRIMERA)
        assert {r.team_id for r in rows} == {"t-toros", "t-halcones", "t-aguilas", "t-lobos"}
        # m6 (Águilas 90-10 a deleted team) must not count.
        assert _row(rows, "t-aguilas").points_for == 140

    def test_category_filter(self, sample_teams: list[Team], sample_matches: list[Match]) -> None:
        rows = compute_standings(sample_teams, sample_matches, category="Sub-20")
        assert [r.team_id for r in rows] == ["t-cachorros"]
        assert rows[0].played == 0

    def test_teams_without_matches_get_zero_rows(self) -> None:
        teams = [Team(id="a", name="A"), Team(id="b", name="B"), Team(id="c", name="C")]
        rows = compute_standings(teams, [_match("m", "a", "b", 50, 40)])
        idle = _row(rows, "c")
        assert (idle.played, idle.league_points, idle.point_diff) == (0, 0, 0)
        assert sum(1 for r in rows if r.team_id == "c") == 1

    def test_empty_team_list(self) -> None:
        assert compute_standings([], [_match("m", "a", "b", 50, 40)]) == []

    def test_one_side_known_is_skipped(self) -> None:
        rows = compute_standings([Team(id="a", name="A")], [_match("m", "a", "ghost", 50, 40)])
        assert rows[0].played == 0

    def test_points_for_breaks_tie(self) -> None:
        teams = [Team(id="low", name="Low"), Team(id="high", name="High"), Team(id="x", name="X")]
        matches = [
            _match("1", "low", "x", 75, 70),
            _match("2", "high", "x", 80, 75),
        ]
        rows = compute_standings(teams, matches)
        # Both: 2 league-points, +5 diff; 80 scored beats 75.
        assert [r.team_id for r in rows[:2]] == ["high", "low"]

    def test_point_diff_breaks_tie(self) -> None:
        teams = [Team(id="a", name="A"), Team(id="b", name="B"), Team(id="x", name="X")]
        matches = [_match("1", "a", "x", 61, 60), _match("2", "b", "x", 90, 60)]
        rows = compute_standings(teams, matches)
        assert rows[0].team_id == "b"

    def test_full_tie_keeps_team_order(self) -> None:
        teams = [Team(id=c, name=c.upper()) for c in "dcba"]
        rows = compute_standings(teams, [])
        assert [r.team_id for r in rows] == ["d", "c", "b", "a"]

    def test_duplicate_team_listed_once(self) -> None:
        teams = [Team(id="a", name="A"), Team(id="a", name="A again"), Team(id="b", name="B")]
        rows = compute_standings(teams, [_match("m", "a", "b", 2, 1)])
        assert [r.team_id for r in rows] == ["a", "b"]
        assert rows[0].team_name == "A"
        assert rows[0].played == 1

    def test_logo_carried(self) -> None:
        teams = [Team(id="a", name="A", logo_url="https://cdn.example/a.png")]
        assert compute_standings(teams, [])[0].logo_url == "https://cdn.example/a.png"


_TEAM_IDS = ["t0", "t1", "t2", "t3", "t4"]

_finished_match = st.builds(
    lambda idx, home, away, hs, as_, wo: _match(f"m{idx}", home, away, hs, as_, is_walkover=wo),
    idx=st.integers(0, 10_000),
    home=st.sampled_from([*_TEAM_IDS, "ghost"]),
    away=st.sampled_from([*_TEAM_IDS, "ghost"]),
    hs=st.integers(0, 150),
    as_=st.integers(0, 150),
    wo=st.booleans(),
)


class TestStandingsProperties:
    """Property-based checks over random result sets."""

    @settings(max_examples=100)
    @given(matches=st.lists(_finished_match, max_size=25), data=st.data())
    def test_order_independent(self, matches: list[Match], data: st.DataObject) -> None:
        teams = [Team(id=t, name=t) for t in _TEAM_IDS]
        shuffled = data.draw(st.permutations(matches))
        assert compute_standings(teams, matches) == compute_standings(teams, shuffled)

    @settings(max_examples=100)
    @given(matches=st.lists(_finished_match, max_size=25))
    def test_row_invariants(self, matches: list[Match]) -> None:
        teams = [Team(id=t, name=t) for t in _TEAM_IDS]
        rows = compute_standings(teams, matches)
        assert sorted(r.team_id for r in rows) == sorted(_TEAM_IDS)
        for row in rows:
            assert row.point_diff == row.points_for - row.points_against
            assert row.won + row.lost <= row.played
            assert row.walkover_losses <= row.lost
            # 2 per win, 1 per non-walkover loss.
            assert row.league_points == 2 * row.won + (row.lost - row.walkover_losses)
        keys = [(r.league_points, r.point_diff, r.points_for) for r in rows]
        assert keys == sorted(keys, reverse=True)

    @given(matches=st.lists(_finished_match, max_size=25))
    def test_deterministic(self, matches: list[Match]) -> None:
        teams = [Team(id=t, name=t) for t in _TEAM_IDS]
        assert compute_standings(teams, matches) == compute_standings(teams, matches)


# ---------------------------------------------------------------------------
# Category helpers
# ---------------------------------------------------------------------------


class TestListCategories:
    def test_union_sorted(self, sample_teams: list[Team], sample_matches: list[Match]) -> None:
        assert list_categories(sample_teams, sample_matches) == ["Primera División", "Sub-20"]

    def test_blank_labels_dropped(self) -> None:
        teams = [Team(id="a", name="A", category=""), Team(id="b", name="B", category="Sub-17")]
        assert list_categories(teams, []) == ["Sub-17"]

    def test_empty(self) -> None:
        assert list_categories([], []) == []


class TestCategoryFixture:
    def test_newest_first_undated_last(self) -> None:
        jan = datetime.datetime(2025, 1, 10, tzinfo=datetime.timezone.utc)
        feb = datetime.datetime(2025, 2, 10, tzinfo=datetime.timezone.utc)
        matches = [
            _match("undated", "a", "b", 0, 0, status="scheduled", category="C"),
            _match("jan", "a", "b", 50, 40, category="C", match_date=jan),
            _match("feb", "a", "b", 0, 0, status="scheduled", category="C", match_date=feb),
            _match("other", "a", "b", 50, 40, category="D", match_date=feb),
        ]
        assert [m.id for m in category_fixture(matches, "C")] == ["feb", "jan", "undated"]

    def test_naive_and_aware_dates_mix(self) -> None:
        naive = datetime.datetime(2025, 5, 1, 12, 0)
        aware = datetime.datetime(2025, 5, 1, 10, 0, tzinfo=datetime.timezone.utc)
        matches = [
            _match("aware", "a", "b", 1, 0, category="C", match_date=aware),
            _match("naive", "a", "b", 1, 0, category="C", match_date=naive),
        ]
        assert [m.id for m in category_fixture(matches, "C")] == ["naive", "aware"]


class TestStandingsFrame:
    def test_columns_in_display_order(self, sample_teams: list[Team], sample_matches: list[Match]) -> None:
        df = standings_frame(compute_standings(sample_teams, sample_matches, category=_PRIMERA))
        assert list(df.columns) == STANDINGS_COLUMNS
        assert df["team_id"].tolist() == ["t-toros", "t-halcones", "t-aguilas", "t-lobos"]

    @pytest.mark.smoke
    def test_empty(self) -> None:
        df = standings_frame([])
        assert df.empty
        assert list(df.columns) == STANDINGS_COLUMNS

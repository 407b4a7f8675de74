from datetime import date, datetime

from ivitable.live import LiveSnapshot
from ivitable.normalizer import MatchRecord, MatchStatus, SetScore, normalize_rows
from ivitable.render import (
    STANDINGS_COLUMNS,
    build_html_report,
    build_round_list,
    build_standings_table,
    round_title,
)
from ivitable.rounds import FixtureNavigator, RoundGroup, group_by_round
from ivitable.standings import TeamStanding


def make_match(match_id, status=MatchStatus.SCHEDULED, sets=(), home="Alpha", away="Beta"):
    padded = tuple(SetScore(h, a) for h, a in sets)
    padded += (SetScore(),) * (3 - len(padded))
    return MatchRecord(
        match_id=match_id,
        round_number=4,
        home_team=home,
        away_team=away,
        date=date(2025, 10, 4),
        time="19:00",
        sets=padded,
        status=status,
    )


def test_standings_table_columns_and_ratios():
    row = TeamStanding(
        team="Alpha",
        games_played=1,
        wins=1,
        points=2,
        sets_won=2,
        sets_lost=1,
        points_for=68,
        points_against=67,
    )

    html = build_standings_table([row])

    for column in STANDINGS_COLUMNS:
        assert f"<th>{column}</th>" in html
    assert "<td>2-1</td>" in html
    assert "<td>2.00</td>" in html
    assert "<td>1.01</td>" in html
    assert "<td>68</td>" in html


def test_team_names_are_escaped():
    html = build_standings_table([TeamStanding(team="<Alpha & Co>")])

    assert "&lt;Alpha &amp; Co&gt;" in html
    assert "<Alpha" not in html


def test_round_list_shows_score_for_final_and_date_for_scheduled():
    matches = (
        make_match("done", MatchStatus.PLAYED, [(25, 20), (25, 18)]),
        make_match("next", home="Gamma", away="Delta"),
    )
    navigator = FixtureNavigator([RoundGroup(4, matches)], today=date(2025, 1, 1))

    html = build_round_list(navigator.render())

    assert "Final" in html
    assert "2 – 0" in html
    assert "Scheduled" in html
    assert "2025-10-04 19:00" in html
    assert "data-match-id=\"next\"" in html


def test_rows_without_ids_render_their_own_results():
    rows = [
        {"round": "4", "date": "2025-10-04", "home_team": "Alpha", "away_team": "Beta",
         "set1_h": "25", "set1_a": "20", "set2_h": "25", "set2_a": "20", "status": "played"},
        {"round": "4", "date": "2025-10-04", "home_team": "Gamma", "away_team": "Delta"},
    ]
    navigator = FixtureNavigator(group_by_round(normalize_rows(rows)), today=date(2025, 1, 1))

    view = navigator.render()
    html = build_round_list(view)

    assert [match.match_id for match in view.matches] == ["row-1", "row-2"]
    assert "Final" in html
    assert "2 – 0" in html
    assert "Scheduled" in html


def test_round_list_shows_live_score_with_date():
    navigator = FixtureNavigator([RoundGroup(4, (make_match("m"),))], today=date(2025, 1, 1))
    navigator.render()
    navigator.apply_snapshot("m", LiveSnapshot(MatchStatus.LIVE, (SetScore(21, 19),)))

    html = build_round_list(navigator.view())

    assert "status live" in html
    assert "1 – 0 · 2025-10-04 19:00" in html


def test_empty_round_view():
    view = FixtureNavigator([]).render()

    assert "No fixtures available." in build_round_list(view)
    assert round_title(view) == "Round –"


def test_html_report():
    navigator = FixtureNavigator([RoundGroup(4, (make_match("m"),))], today=date(2025, 1, 1))

    html = build_html_report(
        [TeamStanding(team="Alpha"), TeamStanding(team="Beta")],
        navigator.render(),
        title="Liga",
        generated_at=datetime(2025, 10, 1, 12, 30),
    )

    assert html.startswith("<!DOCTYPE html>")
    assert "<title>Liga</title>" in html
    assert "Round 4" in html
    assert "Updated: 01.10.2025 12:30" in html

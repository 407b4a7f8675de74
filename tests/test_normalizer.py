from datetime import date

import pytest

from ivitable.normalizer import (
    MatchStatus,
    SetScore,
    normalize_row,
    normalize_rows,
    parse_match_date,
    parse_number,
    parse_round,
)


def make_row(**overrides):
    row = {
        "id": "M1",
        "round": "1",
        "date": "2025-10-04",
        "time": "19:00",
        "home_team": "Alpha",
        "away_team": "Beta",
        "set1_h": "",
        "set1_a": "",
        "set2_h": "",
        "set2_a": "",
        "set3_h": "",
        "set3_a": "",
        "status": "",
    }
    row.update(overrides)
    return row


# ---------- NUMBERS ----------

@pytest.mark.parametrize("raw, expected", [
    ("25", 25),
    (" 18 ", 18),
    ("0", 0),
    ("25.0", 25),
    ("12.5", 12.5),
    ("", None),
    (None, None),
    ("abc", None),
    ("nan", None),
    ("inf", None),
    ("-3", None),
])
def test_parse_number(raw, expected):
    assert parse_number(raw) == expected


def test_parse_number_keeps_integers_as_int():
    assert isinstance(parse_number("25"), int)


@pytest.mark.parametrize("raw, expected", [
    ("3", 3),
    ("3.0", 3),
    ("3.5", None),
    ("", None),
    ("R3", None),
])
def test_parse_round(raw, expected):
    assert parse_round(raw) == expected


@pytest.mark.parametrize("raw, expected", [
    ("2025-10-04", date(2025, 10, 4)),
    ("04.10.2025", date(2025, 10, 4)),
    ("", None),
    ("someday", None),
    ("2025-13-40", None),
    ("2025", None),
    ("2025-10", None),
    ("2025-10-04T19:00", date(2025, 10, 4)),
])
def test_parse_match_date(raw, expected):
    assert parse_match_date(raw) == expected


# ---------- STATUS ----------

@pytest.mark.parametrize("raw, expected", [
    ("played", MatchStatus.PLAYED),
    ("PLAYED", MatchStatus.PLAYED),
    (" Forfeit ", MatchStatus.FORFEIT),
    ("live", MatchStatus.LIVE),
    ("", MatchStatus.SCHEDULED),
    (None, MatchStatus.SCHEDULED),
    ("postponed", MatchStatus.SCHEDULED),
])
def test_status_parsing(raw, expected):
    assert MatchStatus.parse(raw) is expected


# ---------- ROWS ----------

def test_normalize_full_row():
    record = normalize_row(make_row(
        set1_h="25", set1_a="20",
        set2_h="18", set2_a="25",
        set3_h="25", set3_a="22",
        status="Played",
    ))

    assert record.match_id == "M1"
    assert record.round_number == 1
    assert record.date == date(2025, 10, 4)
    assert record.time == "19:00"
    assert record.home_team == "Alpha"
    assert record.away_team == "Beta"
    assert record.status is MatchStatus.PLAYED
    assert record.sets == (SetScore(25, 20), SetScore(18, 25), SetScore(25, 22))


def test_missing_numbers_become_absent_not_zero():
    record = normalize_row(make_row(set1_h="25", set1_a=""))

    assert record.sets[0] == SetScore(25, None)
    assert record.sets[0].is_played is False
    assert record.sets[1] == SetScore(None, None)


def test_missing_fields_are_tolerated():
    record = normalize_row({"id": "X"})

    assert record.home_team == ""
    assert record.away_team == ""
    assert record.round_number is None
    assert record.date is None
    assert record.time is None
    assert record.status is MatchStatus.SCHEDULED
    assert len(record.sets) == 3


def test_no_row_is_dropped():
    rows = [make_row(id="A"), {"garbage": "yes"}, make_row(id="B", round="x")]

    records = normalize_rows(rows)

    assert [record.match_id for record in records] == ["A", "row-2", "B"]
    assert records[2].round_number is None


# ---------- SET SCORES ----------

@pytest.mark.parametrize("score, played, winner", [
    (SetScore(25, 20), True, "home"),
    (SetScore(18, 25), True, "away"),
    (SetScore(0, 0), False, None),
    (SetScore(None, None), False, None),
    (SetScore(25, None), False, None),
    (SetScore(20, 20), True, None),
    (SetScore(25, 0), True, "home"),
])
def test_set_score(score, played, winner):
    assert score.is_played is played
    assert score.winner == winner


def test_date_key_uses_sentinel_for_unknown_dates():
    assert normalize_row(make_row(date="")).date_key == "9999-12-31"
    assert normalize_row(make_row()).date_key == "2025-10-04"

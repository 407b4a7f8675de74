"""League table computation under best-of-three volleyball scoring."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .normalizer import MatchRecord, SetScore

LOGGER = logging.getLogger(__name__)

SETS_TO_WIN = 2

# (winner sets, loser sets) -> (winner points, loser points)
OUTCOME_POINTS: Dict[Tuple[int, int], Tuple[int, int]] = {
    (2, 0): (3, 0),
    (2, 1): (2, 1),
}


@dataclass(slots=True)
class TeamStanding:
    team: str
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    points: int = 0
    sets_won: int = 0
    sets_lost: int = 0
    points_for: float = 0
    points_against: float = 0

    @property
    def set_ratio(self) -> float:
        return _ratio(self.sets_won, self.sets_lost)

    @property
    def points_ratio(self) -> float:
        return _ratio(self.points_for, self.points_against)


def _ratio(numerator: float, denominator: float) -> float:
    if denominator:
        return numerator / denominator
    return numerator if numerator else 0


@dataclass(frozen=True, slots=True)
class SetTally:
    home_sets: int = 0
    away_sets: int = 0
    home_points: float = 0
    away_points: float = 0


def count_sets(sets: Iterable[SetScore]) -> SetTally:
    """Count won sets and rally points, skipping placeholder or partial sets.

    A drawn set is credited to neither side but its points still count.
    """

    home_sets = away_sets = 0
    home_points = away_points = 0
    for score in sets:
        if not score.is_played:
            continue
        winner = score.winner
        if winner == "home":
            home_sets += 1
        elif winner == "away":
            away_sets += 1
        home_points += score.home
        away_points += score.away
    return SetTally(home_sets, away_sets, home_points, away_points)


RankingKey = Tuple[Callable[[TeamStanding], Any], bool]

# Applied in order; each entry is (key extractor, descending).
RANKING_KEYS: Sequence[RankingKey] = (
    (lambda row: row.points, True),
    (lambda row: row.set_ratio, True),
    (lambda row: row.points_ratio, True),
    (lambda row: row.team, False),
)


def rank_standings(
    rows: Iterable[TeamStanding],
    keys: Sequence[RankingKey] = RANKING_KEYS,
) -> List[TeamStanding]:
    ranked = list(rows)
    # Sorting from the least to the most significant key relies on sort stability.
    for extractor, descending in reversed(keys):
        ranked.sort(key=extractor, reverse=descending)
    return ranked


def _apply_outcome(home: Optional[TeamStanding], away: Optional[TeamStanding], tally: SetTally) -> None:
    if tally.home_sets == SETS_TO_WIN:
        winner, loser = home, away
        awarded = OUTCOME_POINTS.get((tally.home_sets, tally.away_sets))
    elif tally.away_sets == SETS_TO_WIN:
        winner, loser = away, home
        awarded = OUTCOME_POINTS.get((tally.away_sets, tally.home_sets))
    else:
        return
    if awarded is None:
        return
    winner_points, loser_points = awarded
    if winner is not None:
        winner.wins += 1
        winner.points += winner_points
    if loser is not None:
        loser.losses += 1
        loser.points += loser_points


def fold_match(table: Dict[str, TeamStanding], match: MatchRecord) -> SetTally:
    """Add the result of a single non-scheduled match to ``table``."""

    home = table.get(match.home_team)
    away = table.get(match.away_team)
    tally = count_sets(match.sets)

    if home is not None:
        home.games_played += 1
        home.sets_won += tally.home_sets
        home.sets_lost += tally.away_sets
        home.points_for += tally.home_points
        home.points_against += tally.away_points
    if away is not None:
        away.games_played += 1
        away.sets_won += tally.away_sets
        away.sets_lost += tally.home_sets
        away.points_for += tally.away_points
        away.points_against += tally.home_points

    # Forfeits carry no forfeiting-side marker and are scored like played matches.
    _apply_outcome(home, away, tally)

    LOGGER.debug(
        "Match %s: %s vs %s, sets %d:%d, %s",
        match.match_id,
        match.home_team,
        match.away_team,
        tally.home_sets,
        tally.away_sets,
        [(score.home, score.away) for score in match.sets],
    )
    return tally


def compute_standings(
    matches: Iterable[MatchRecord],
    teams: Optional[Iterable[str]] = None,
) -> List[TeamStanding]:
    match_list = list(matches)
    table: Dict[str, TeamStanding] = {}
    for name in teams or ():
        table.setdefault(name, TeamStanding(team=name))
    for match in match_list:
        table.setdefault(match.home_team, TeamStanding(team=match.home_team))
        table.setdefault(match.away_team, TeamStanding(team=match.away_team))

    for match in match_list:
        if match.is_scheduled:
            continue
        fold_match(table, match)

    return rank_standings(table.values())


__all__ = [
    "OUTCOME_POINTS",
    "RANKING_KEYS",
    "SetTally",
    "TeamStanding",
    "compute_standings",
    "count_sets",
    "fold_match",
    "rank_standings",
]

"""Volleyball league table and fixture browser built from CSV exports."""

from .league import League, build_league, load_league
from .live import DisplayState, LiveFeedHub, LiveSnapshot, SubscriptionSet, reconcile
from .normalizer import MatchRecord, MatchStatus, SetScore, normalize_row, normalize_rows
from .rounds import (
    FixtureNavigator,
    RoundGroup,
    advance,
    group_by_round,
    locate_current_round,
)
from .standings import RANKING_KEYS, TeamStanding, compute_standings, rank_standings

__all__ = [
    "DisplayState",
    "FixtureNavigator",
    "League",
    "LiveFeedHub",
    "LiveSnapshot",
    "MatchRecord",
    "MatchStatus",
    "RANKING_KEYS",
    "RoundGroup",
    "SetScore",
    "SubscriptionSet",
    "TeamStanding",
    "advance",
    "build_league",
    "compute_standings",
    "group_by_round",
    "load_league",
    "locate_current_round",
    "normalize_row",
    "normalize_rows",
    "rank_standings",
    "reconcile",
]

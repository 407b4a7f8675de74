"""Load the league exports and derive the table and the round index."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence

from .config import AppConfig
from .normalizer import MatchRecord, normalize_rows
from .rounds import RoundGroup, group_by_round
from .schedule import load_rows, load_team_names
from .standings import TeamStanding, compute_standings

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class League:
    matches: Sequence[MatchRecord]
    standings: Sequence[TeamStanding]
    rounds: Sequence[RoundGroup]

    def find_match(self, match_id: str) -> Optional[MatchRecord]:
        for match in self.matches:
            if match.match_id == match_id:
                return match
        return None


def build_league(
    rows: Iterable[Mapping[str, str]],
    teams: Optional[Iterable[str]] = None,
) -> League:
    matches = normalize_rows(rows)
    return League(
        matches=tuple(matches),
        standings=tuple(compute_standings(matches, teams)),
        rounds=tuple(group_by_round(matches)),
    )


def load_league(config: AppConfig) -> League:
    """Fetch the configured exports and compute everything from scratch."""

    http = config.http
    rows = load_rows(
        config.sources.matches,
        delimiter=config.sources.delimiter,
        retries=http.retries,
        delay_seconds=http.delay_seconds,
    )
    teams: List[str] = []
    if config.sources.teams:
        try:
            teams = load_team_names(
                config.sources.teams,
                delimiter=config.sources.delimiter,
                retries=http.retries,
                delay_seconds=http.delay_seconds,
            )
        except (OSError, ValueError) as exc:
            # requests.RequestException is an OSError subclass.
            LOGGER.warning("Team roster %s could not be loaded: %s", config.sources.teams, exc)
    league = build_league(rows, teams)
    LOGGER.info(
        "Computed standings for %d teams across %d rounds",
        len(league.standings),
        len(league.rounds),
    )
    return league

"""Turn loosely typed CSV rows into :class:`MatchRecord` instances."""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import Iterable, List, Mapping, Optional, Tuple, Union

from dateutil import parser

LOGGER = logging.getLogger(__name__)

Number = Union[int, float]

SET_COUNT = 3

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}(?:[T ].*)?$")


class MatchStatus(str, Enum):
    SCHEDULED = "scheduled"
    PLAYED = "played"
    FORFEIT = "forfeit"
    LIVE = "live"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "MatchStatus":
        value = (raw or "").strip().lower()
        if not value:
            return cls.SCHEDULED
        try:
            return cls(value)
        except ValueError:
            LOGGER.warning("Unknown match status %r, treating it as scheduled", raw)
            return cls.SCHEDULED


@dataclass(frozen=True, slots=True)
class SetScore:
    home: Optional[Number] = None
    away: Optional[Number] = None

    @property
    def is_played(self) -> bool:
        # (0, 0) is a placeholder in the exports, not a played set.
        if self.home is None or self.away is None:
            return False
        return not (self.home == 0 and self.away == 0)

    @property
    def winner(self) -> Optional[str]:
        if not self.is_played:
            return None
        if self.home > self.away:
            return "home"
        if self.away > self.home:
            return "away"
        return None


EMPTY_SETS: Tuple[SetScore, ...] = (SetScore(),) * SET_COUNT


@dataclass(frozen=True, slots=True)
class MatchRecord:
    match_id: str
    round_number: Optional[int]
    home_team: str
    away_team: str
    date: Optional[date] = None
    time: Optional[str] = None
    sets: Tuple[SetScore, ...] = EMPTY_SETS
    status: MatchStatus = MatchStatus.SCHEDULED

    @property
    def is_scheduled(self) -> bool:
        return self.status is MatchStatus.SCHEDULED

    @property
    def date_key(self) -> str:
        """ISO date used for ordering, unknown dates sort after every real one."""

        return self.date.isoformat() if self.date else "9999-12-31"


def parse_number(raw: Optional[str]) -> Optional[Number]:
    """Parse a finite, non-negative number or return ``None``."""

    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return int(value) if value.is_integer() else value


def parse_round(raw: Optional[str]) -> Optional[int]:
    value = parse_number(raw)
    if value is None or not float(value).is_integer():
        return None
    return int(value)


def parse_match_date(raw: Optional[str]) -> Optional[date]:
    text = (raw or "").strip()
    if not text:
        return None
    # isoparse also accepts "2025" or "2025-10", which are not match dates.
    if ISO_DATE_PATTERN.match(text):
        try:
            return parser.isoparse(text).date()
        except (ValueError, OverflowError):
            LOGGER.debug("Could not parse match date: %s", raw)
            return None
    try:
        return datetime.strptime(text, "%d.%m.%Y").date()
    except ValueError:
        LOGGER.debug("Could not parse match date: %s", raw)
        return None


def _clean(row: Mapping[str, str], key: str) -> str:
    value = row.get(key)
    return str(value).strip() if value is not None else ""


def normalize_row(row: Mapping[str, str]) -> MatchRecord:
    sets = tuple(
        SetScore(
            home=parse_number(row.get(f"set{index}_h")),
            away=parse_number(row.get(f"set{index}_a")),
        )
        for index in range(1, SET_COUNT + 1)
    )
    return MatchRecord(
        match_id=_clean(row, "id"),
        round_number=parse_round(row.get("round")),
        home_team=_clean(row, "home_team"),
        away_team=_clean(row, "away_team"),
        date=parse_match_date(row.get("date")),
        time=_clean(row, "time") or None,
        sets=sets,
        status=MatchStatus.parse(row.get("status")),
    )


def normalize_rows(rows: Iterable[Mapping[str, str]]) -> List[MatchRecord]:
    """Normalize every row; rows without an id get ``row-<n>`` (1-based position)."""

    records: List[MatchRecord] = []
    for position, row in enumerate(rows, start=1):
        record = normalize_row(row)
        if not record.match_id:
            record = replace(record, match_id=f"row-{position}")
        records.append(record)
    return records


__all__ = [
    "EMPTY_SETS",
    "MatchRecord",
    "MatchStatus",
    "SetScore",
    "normalize_row",
    "normalize_rows",
    "parse_match_date",
    "parse_number",
    "parse_round",
]

"""Group fixtures into rounds and browse them one round at a time."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from .live import DisplayState, LiveSnapshot, LiveTransport, SubscriptionSet, reconcile
from .normalizer import MatchRecord

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RoundGroup:
    round_number: Optional[int]
    matches: Tuple[MatchRecord, ...]


def _round_sort_key(group: RoundGroup) -> Tuple[int, int]:
    # Malformed rounds come after every numbered one.
    if group.round_number is None:
        return (1, 0)
    return (0, group.round_number)


def group_by_round(matches: Iterable[MatchRecord]) -> List[RoundGroup]:
    buckets: Dict[Optional[int], List[MatchRecord]] = {}
    for match in matches:
        buckets.setdefault(match.round_number, []).append(match)
    groups = [
        RoundGroup(
            round_number=number,
            matches=tuple(sorted(items, key=lambda match: (match.date_key, match.time or ""))),
        )
        for number, items in buckets.items()
    ]
    groups.sort(key=_round_sort_key)
    return groups


def today_in(timezone: Optional[str] = None) -> date:
    if timezone:
        return datetime.now(tz=ZoneInfo(timezone)).date()
    return date.today()


def locate_current_round(groups: Sequence[RoundGroup], today: Optional[date] = None) -> int:
    """Index of the first round that still has an upcoming scheduled match."""

    reference = (today or date.today()).isoformat()
    for index, group in enumerate(groups):
        if any(match.is_scheduled and match.date_key >= reference for match in group.matches):
            return index
    return 0


def advance(groups: Sequence[RoundGroup], cursor: int, delta: int) -> int:
    return (cursor + delta) % len(groups)


@dataclass(frozen=True)
class RoundView:
    index: Optional[int]
    round_number: Optional[int]
    matches: Tuple[MatchRecord, ...] = ()
    # Aligned with ``matches`` by position.
    states: Tuple[DisplayState, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.index is None

    def entries(self) -> List[Tuple[MatchRecord, DisplayState]]:
        if len(self.states) != len(self.matches):
            # Not rendered yet, fall back to the source records.
            return [(match, reconcile(match)) for match in self.matches]
        return list(zip(self.matches, self.states))

    def state_for(self, match_id: str) -> Optional[DisplayState]:
        for match, state in self.entries():
            if match.match_id == match_id:
                return state
        return None


UpdateCallback = Callable[[MatchRecord, DisplayState], None]


class FixtureNavigator:
    """Cursor over the round groups plus the live subscriptions of the visible round."""

    def __init__(
        self,
        groups: Sequence[RoundGroup],
        *,
        transport: Optional[LiveTransport] = None,
        on_update: Optional[UpdateCallback] = None,
        today: Optional[date] = None,
    ) -> None:
        self.groups: List[RoundGroup] = list(groups)
        self.transport = transport
        self.on_update = on_update
        self.current_index: Optional[int] = (
            locate_current_round(self.groups, today) if self.groups else None
        )
        self._states: List[DisplayState] = []
        self._subscriptions = SubscriptionSet()
        self._positions: Dict[str, List[int]] = {}

    @property
    def can_navigate(self) -> bool:
        return bool(self.groups)

    @property
    def current_group(self) -> Optional[RoundGroup]:
        if self.current_index is None:
            return None
        return self.groups[self.current_index]

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    def view(self) -> RoundView:
        group = self.current_group
        if group is None:
            return RoundView(index=None, round_number=None)
        return RoundView(
            index=self.current_index,
            round_number=group.round_number,
            matches=group.matches,
            states=tuple(self._states),
        )

    def state_for(self, match_id: str) -> Optional[DisplayState]:
        positions = self._positions.get(match_id)
        if not positions:
            return None
        return self._states[positions[0]]

    def render(self) -> RoundView:
        self._subscriptions.dispose_all()
        self._positions = {}
        self._states = []
        group = self.current_group
        if group is None:
            return self.view()

        for position, match in enumerate(group.matches):
            self._positions.setdefault(match.match_id, []).append(position)
            self._states.append(reconcile(match))
        if self.transport is not None:
            for match_id in list(self._positions):
                self._subscriptions.add(
                    self.transport.subscribe(match_id, self._make_listener(match_id))
                )
        return self.view()

    def advance(self, delta: int) -> RoundView:
        if not self.can_navigate:
            return self.view()
        self.current_index = advance(self.groups, self.current_index or 0, delta)
        return self.render()

    def next(self) -> RoundView:
        return self.advance(1)

    def previous(self) -> RoundView:
        return self.advance(-1)

    def refresh(self, groups: Sequence[RoundGroup], today: Optional[date] = None) -> RoundView:
        """Swap in freshly computed rounds, keeping the cursor where possible."""

        self.groups = list(groups)
        if not self.groups:
            self.current_index = None
        elif self.current_index is None or self.current_index >= len(self.groups):
            self.current_index = locate_current_round(self.groups, today)
        return self.render()

    def close(self) -> None:
        self._subscriptions.dispose_all()
        self._positions = {}

    def _make_listener(self, match_id: str) -> Callable[[Optional[LiveSnapshot]], None]:
        def _listener(snapshot: Optional[LiveSnapshot]) -> None:
            self.apply_snapshot(match_id, snapshot)

        return _listener

    def apply_snapshot(self, match_id: str, snapshot: Optional[LiveSnapshot]) -> Optional[DisplayState]:
        positions = self._positions.get(match_id)
        group = self.current_group
        if not positions or group is None:
            LOGGER.debug("Dropping live snapshot for %s, not on the visible round", match_id)
            return None
        state: Optional[DisplayState] = None
        for position in positions:
            match = group.matches[position]
            state = reconcile(match, snapshot)
            self._states[position] = state
            if self.on_update is not None:
                self.on_update(match, state)
        return state


__all__ = [
    "FixtureNavigator",
    "RoundGroup",
    "RoundView",
    "advance",
    "group_by_round",
    "locate_current_round",
    "today_in",
]

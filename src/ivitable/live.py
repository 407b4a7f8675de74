"""Reconcile source match data with snapshots from a live score feed."""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, DefaultDict, Dict, Iterable, List, Mapping, Optional, Protocol, Tuple

from .normalizer import MatchRecord, MatchStatus, SET_COUNT, SetScore, parse_number
from .standings import count_sets

LOGGER = logging.getLogger(__name__)

LABEL_LIVE = "Live"
LABEL_FINAL = "Final"
LABEL_SCHEDULED = "Scheduled"


@dataclass(frozen=True, slots=True)
class LiveSnapshot:
    status: MatchStatus
    sets: Tuple[SetScore, ...] = ()


@dataclass(frozen=True, slots=True)
class DisplayState:
    status_label: str
    sets_won_home: int
    sets_won_away: int
    when_text: str

    @property
    def score_text(self) -> str:
        return f"{self.sets_won_home} – {self.sets_won_away}"


def format_when(match: MatchRecord) -> str:
    date_text = match.date.isoformat() if match.date else "TBD"
    return f"{date_text} {match.time or ''}".strip()


def reconcile(match: MatchRecord, snapshot: Optional[LiveSnapshot] = None) -> DisplayState:
    """Return what should be shown for ``match``.

    Without a snapshot the source record decides. A snapshot replaces both the
    status and the set scores; statuses other than ``live`` and ``played`` fall
    back to the scheduled label.
    """

    if snapshot is None:
        label = LABEL_FINAL if match.status is MatchStatus.PLAYED else LABEL_SCHEDULED
        sets: Iterable[SetScore] = match.sets
    else:
        if snapshot.status is MatchStatus.LIVE:
            label = LABEL_LIVE
        elif snapshot.status is MatchStatus.PLAYED:
            label = LABEL_FINAL
        else:
            label = LABEL_SCHEDULED
        sets = snapshot.sets
    tally = count_sets(sets)
    return DisplayState(
        status_label=label,
        sets_won_home=tally.home_sets,
        sets_won_away=tally.away_sets,
        when_text=format_when(match),
    )


def _parse_set(raw: Any) -> SetScore:
    if isinstance(raw, Mapping):
        return SetScore(home=parse_number(raw.get("home")), away=parse_number(raw.get("away")))
    if isinstance(raw, (list, tuple)) and len(raw) == 2:
        return SetScore(home=parse_number(raw[0]), away=parse_number(raw[1]))
    return SetScore()


def snapshot_from_mapping(payload: Mapping[str, Any]) -> LiveSnapshot:
    """Build a snapshot from a JSON-like payload, ignoring malformed sets."""

    raw_sets = payload.get("sets")
    sets: List[SetScore] = []
    if isinstance(raw_sets, (list, tuple)):
        sets = [_parse_set(item) for item in raw_sets[:SET_COUNT]]
    status_value = payload.get("status")
    return LiveSnapshot(
        status=MatchStatus.parse(str(status_value) if status_value is not None else None),
        sets=tuple(sets),
    )


SnapshotCallback = Callable[[Optional[LiveSnapshot]], None]


class Subscription(Protocol):
    def dispose(self) -> None:
        ...


class LiveTransport(Protocol):
    def subscribe(self, match_id: str, callback: SnapshotCallback) -> Subscription:
        ...


class SubscriptionSet:
    """Owns the live subscriptions of one rendered round."""

    def __init__(self) -> None:
        self._handles: List[Subscription] = []

    def add(self, handle: Subscription) -> Subscription:
        self._handles.append(handle)
        return handle

    def dispose_all(self) -> None:
        handles, self._handles = self._handles, []
        for handle in handles:
            handle.dispose()

    def __len__(self) -> int:
        return len(self._handles)

    def __enter__(self) -> "SubscriptionSet":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose_all()


class _HubSubscription:
    def __init__(self, hub: "LiveFeedHub", match_id: str, callback: SnapshotCallback) -> None:
        self._hub = hub
        self.match_id = match_id
        self.callback = callback
        self.active = True

    def dispose(self) -> None:
        if self.active:
            self.active = False
            self._hub._remove(self)


class LiveFeedHub:
    """In-process live transport: push snapshots to per-match listeners.

    The latest snapshot per match is kept, so a new subscriber immediately
    receives the current override.
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, List[_HubSubscription]] = defaultdict(list)
        self._latest: Dict[str, LiveSnapshot] = {}

    def subscribe(self, match_id: str, callback: SnapshotCallback) -> _HubSubscription:
        subscription = _HubSubscription(self, match_id, callback)
        self._listeners[match_id].append(subscription)
        latest = self._latest.get(match_id)
        if latest is not None:
            callback(latest)
        return subscription

    def publish(self, match_id: str, snapshot: Optional[LiveSnapshot]) -> int:
        if snapshot is None:
            self._latest.pop(match_id, None)
        else:
            self._latest[match_id] = snapshot
        listeners = list(self._listeners.get(match_id, ()))
        for subscription in listeners:
            subscription.callback(snapshot)
        return len(listeners)

    def clear(self, match_id: str) -> int:
        return self.publish(match_id, None)

    def latest(self, match_id: str) -> Optional[LiveSnapshot]:
        return self._latest.get(match_id)

    def listener_count(self, match_id: Optional[str] = None) -> int:
        if match_id is not None:
            return len(self._listeners.get(match_id, ()))
        return sum(len(items) for items in self._listeners.values())

    def _remove(self, subscription: _HubSubscription) -> None:
        listeners = self._listeners.get(subscription.match_id)
        if not listeners:
            return
        try:
            listeners.remove(subscription)
        except ValueError:
            LOGGER.debug("Subscription for %s already removed", subscription.match_id)
        if not listeners:
            del self._listeners[subscription.match_id]


__all__ = [
    "DisplayState",
    "LABEL_FINAL",
    "LABEL_LIVE",
    "LABEL_SCHEDULED",
    "LiveFeedHub",
    "LiveSnapshot",
    "LiveTransport",
    "Subscription",
    "SubscriptionSet",
    "format_when",
    "reconcile",
    "snapshot_from_mapping",
]

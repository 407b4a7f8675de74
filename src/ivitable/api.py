"""FastAPI application exposing the league table and the fixture browser."""
from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException

from .league import League
from .live import DisplayState, LiveFeedHub, snapshot_from_mapping
from .normalizer import MatchRecord
from .config import DEFAULT_TIMEZONE
from .rounds import FixtureNavigator, RoundGroup, RoundView, today_in
from .standings import TeamStanding


def _standing_payload(row: TeamStanding) -> Dict[str, Any]:
    payload = asdict(row)
    payload["set_ratio"] = row.set_ratio
    payload["points_ratio"] = row.points_ratio
    return payload


def _match_payload(match: MatchRecord, state: Optional[DisplayState] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": match.match_id,
        "round": match.round_number,
        "date": match.date.isoformat() if match.date else None,
        "time": match.time,
        "home_team": match.home_team,
        "away_team": match.away_team,
        "status": match.status.value,
    }
    if state is not None:
        payload["display"] = {
            "status": state.status_label,
            "sets_home": state.sets_won_home,
            "sets_away": state.sets_won_away,
            "score": state.score_text,
            "when": state.when_text,
        }
    return payload


def _view_payload(view: RoundView) -> Dict[str, Any]:
    return {
        "index": view.index,
        "round": view.round_number,
        "matches": [
            _match_payload(match, state) for match, state in view.entries()
        ],
    }


def _round_summary(index: int, group: RoundGroup) -> Dict[str, Any]:
    return {"index": index, "round": group.round_number, "matches": len(group.matches)}


def create_app(
    league: League,
    *,
    hub: Optional[LiveFeedHub] = None,
    today: Optional[date] = None,
    timezone: str = DEFAULT_TIMEZONE,
) -> FastAPI:
    """Build the API around an already loaded league.

    Navigation and live pushes share one navigator, so those handlers are
    coroutines and run on the event loop one at a time.
    """

    app = FastAPI(title="Volleyball league table API")
    feed = hub or LiveFeedHub()
    navigator = FixtureNavigator(
        league.rounds,
        transport=feed,
        today=today or today_in(timezone),
    )
    navigator.render()
    app.state.league = league
    app.state.hub = feed
    app.state.navigator = navigator

    @app.get("/standings")
    def get_standings() -> List[Dict[str, Any]]:
        """Return the ranked league table."""

        return [_standing_payload(row) for row in league.standings]

    @app.get("/rounds")
    def get_rounds() -> List[Dict[str, Any]]:
        return [_round_summary(index, group) for index, group in enumerate(league.rounds)]

    @app.get("/rounds/current")
    async def get_current_round() -> Dict[str, Any]:
        """Return the visible round with the effective display state per match."""

        return _view_payload(navigator.view())

    @app.post("/rounds/next")
    async def next_round() -> Dict[str, Any]:
        return _view_payload(navigator.next())

    @app.post("/rounds/previous")
    async def previous_round() -> Dict[str, Any]:
        return _view_payload(navigator.previous())

    @app.put("/live/{match_id}")
    async def put_live_snapshot(match_id: str, payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
        """Push a live snapshot for a match."""

        match = league.find_match(match_id)
        if match is None:
            raise HTTPException(status_code=404, detail=f"Unknown match '{match_id}'.")
        feed.publish(match_id, snapshot_from_mapping(payload))
        return _match_payload(match, navigator.state_for(match_id))

    @app.delete("/live/{match_id}")
    async def delete_live_snapshot(match_id: str) -> Dict[str, Any]:
        """Drop the live override so the source data is shown again."""

        match = league.find_match(match_id)
        if match is None:
            raise HTTPException(status_code=404, detail=f"Unknown match '{match_id}'.")
        feed.clear(match_id)
        return _match_payload(match, navigator.state_for(match_id))

    return app

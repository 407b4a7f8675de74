"""HTML rendering of the league table and the visible round."""
from __future__ import annotations

from datetime import datetime
from html import escape
from typing import List, Optional, Sequence, Tuple

from .live import LABEL_FINAL, LABEL_LIVE
from .rounds import RoundView
from .standings import TeamStanding

STANDINGS_COLUMNS: Tuple[str, ...] = (
    "Team",
    "GP",
    "W",
    "L",
    "Pts",
    "Sets W–L",
    "Set Ratio",
    "PF",
    "PA",
    "Pts Ratio",
)


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def format_standings_row(row: TeamStanding) -> str:
    cells = (
        escape(row.team),
        str(row.games_played),
        str(row.wins),
        str(row.losses),
        str(row.points),
        f"{row.sets_won}-{row.sets_lost}",
        f"{row.set_ratio:.2f}",
        _format_number(row.points_for),
        _format_number(row.points_against),
        f"{row.points_ratio:.2f}",
    )
    return "<tr>" + "".join(f"<td>{cell}</td>" for cell in cells) + "</tr>"


def build_standings_table(rows: Sequence[TeamStanding]) -> str:
    header = "".join(f"<th>{escape(name)}</th>" for name in STANDINGS_COLUMNS)
    body = "\n    ".join(format_standings_row(row) for row in rows)
    return "\n".join(
        [
            "<table class=\"table\">",
            f"  <thead><tr>{header}</tr></thead>",
            "  <tbody>",
            f"    {body}" if body else "",
            "  </tbody>",
            "</table>",
        ]
    )


def _status_class(label: str) -> str:
    if label == LABEL_LIVE:
        return "live"
    if label == LABEL_FINAL:
        return "played"
    return "scheduled"


def build_round_list(view: RoundView) -> str:
    if view.is_empty:
        return "<p class=\"note\">No fixtures available.</p>"

    items: List[str] = []
    for match, state in view.entries():
        if state.status_label == LABEL_LIVE:
            right = f"{state.score_text} · {state.when_text}"
        elif state.status_label == LABEL_FINAL:
            right = state.score_text
        else:
            right = state.when_text
        items.append(
            "\n".join(
                [
                    f"<li class=\"round-item\" data-match-id=\"{escape(match.match_id)}\">",
                    "  <div>",
                    (
                        f"    <div><strong>{escape(match.home_team)}</strong> vs "
                        f"<strong>{escape(match.away_team)}</strong></div>"
                    ),
                    (
                        f"    <div class=\"note\"><span class=\"status {_status_class(state.status_label)}\">"
                        f"{escape(state.status_label)}</span></div>"
                    ),
                    "  </div>",
                    f"  <div class=\"note\">{escape(right)}</div>",
                    "</li>",
                ]
            )
        )
    return "<ul id=\"roundList\">\n" + "\n".join(items) + "\n</ul>"


def round_title(view: RoundView) -> str:
    if view.is_empty:
        return "Round –"
    number = view.round_number if view.round_number is not None else "?"
    return f"Round {number}"


def build_html_report(
    standings: Sequence[TeamStanding],
    view: RoundView,
    *,
    title: str = "League table",
    generated_at: Optional[datetime] = None,
) -> str:
    generated = ""
    if generated_at is not None:
        generated = (
            f"<p class=\"note\">Updated: {escape(generated_at.strftime('%d.%m.%Y %H:%M'))}</p>"
        )
    return "\n".join(
        [
            "<!DOCTYPE html>",
            "<html lang=\"en\">",
            "<head>",
            "  <meta charset=\"utf-8\">",
            "  <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\">",
            f"  <title>{escape(title)}</title>",
            "</head>",
            "<body>",
            f"  <h1>{escape(title)}</h1>",
            "  <section id=\"standings\">",
            build_standings_table(standings),
            "  </section>",
            "  <section id=\"fixtures\">",
            f"  <h2 id=\"roundTitle\">{escape(round_title(view))}</h2>",
            build_round_list(view),
            "  </section>",
            f"  {generated}" if generated else "",
            "</body>",
            "</html>",
            "",
        ]
    )


__all__ = [
    "STANDINGS_COLUMNS",
    "build_html_report",
    "build_round_list",
    "build_standings_table",
    "format_standings_row",
    "round_title",
]

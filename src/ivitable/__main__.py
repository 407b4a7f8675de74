from __future__ import annotations

import argparse
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from .config import AppConfig, load_config
from .league import load_league
from .render import build_html_report
from .rounds import FixtureNavigator, today_in

DEFAULT_OUTPUT_PATH = Path("docs/index.html")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate the league table and fixture report")
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML configuration file with the data sources.",
    )
    parser.add_argument(
        "--matches",
        help="Path or URL of the matches CSV export (overrides the configuration).",
    )
    parser.add_argument(
        "--teams",
        help="Path or URL of the optional team roster CSV export.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT_PATH,
        help="Target HTML file path (default: docs/index.html).",
    )
    parser.add_argument(
        "--offset",
        type=int,
        default=0,
        help="Number of rounds to move from the current round (negative goes back).",
    )
    parser.add_argument(
        "--title",
        default="League table",
        help="Page title of the generated report.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every folded match.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config) if args.config else AppConfig()
    if args.matches:
        config.sources.matches = args.matches
    if args.teams:
        config.sources.teams = args.teams

    league = load_league(config)
    navigator = FixtureNavigator(league.rounds, today=today_in(config.timezone))
    view = navigator.render()
    if args.offset and navigator.can_navigate:
        view = navigator.advance(args.offset)

    html = build_html_report(
        league.standings,
        view,
        title=args.title,
        generated_at=datetime.now(tz=ZoneInfo(config.timezone)),
    )
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(html, encoding="utf-8")
    logging.getLogger(__name__).info("Report written to %s", args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

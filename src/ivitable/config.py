"""Configuration helpers for the ivitable toolkit."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

import yaml

DEFAULT_MATCHES_SOURCE = "matches.csv"
DEFAULT_TIMEZONE = "Europe/Berlin"


@dataclass(slots=True)
class SourceConfig:
    """Where the match and roster exports are read from."""

    matches: str = DEFAULT_MATCHES_SOURCE
    teams: Optional[str] = None
    delimiter: str = ","


@dataclass(slots=True)
class HttpConfig:
    retries: int = 5
    delay_seconds: float = 2.0


@dataclass(slots=True)
class AppConfig:
    """Root configuration model."""

    sources: SourceConfig = field(default_factory=SourceConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    timezone: str = DEFAULT_TIMEZONE

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object]) -> "AppConfig":
        sources = SourceConfig()
        sources_section = mapping.get("sources")
        if isinstance(sources_section, Mapping):
            matches = str(sources_section.get("matches") or "").strip()
            teams = str(sources_section.get("teams") or "").strip()
            delimiter = str(sources_section.get("delimiter") or "")
            sources = SourceConfig(
                matches=matches or DEFAULT_MATCHES_SOURCE,
                teams=teams or None,
                delimiter=delimiter if len(delimiter) == 1 else ",",
            )

        http = HttpConfig()
        http_section = mapping.get("http")
        if isinstance(http_section, Mapping):
            try:
                retries = int(http_section.get("retries", http.retries))
            except (TypeError, ValueError):
                retries = http.retries
            try:
                delay = float(http_section.get("delay_seconds", http.delay_seconds))
            except (TypeError, ValueError):
                delay = http.delay_seconds
            http = HttpConfig(retries=max(retries, 1), delay_seconds=max(delay, 0.0))

        timezone = str(mapping.get("timezone") or "").strip() or DEFAULT_TIMEZONE
        return cls(sources=sources, http=http, timezone=timezone)


def load_config(path: Path) -> AppConfig:
    """Load a configuration file from YAML."""

    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Configuration file must contain a mapping at the root.")
    return AppConfig.from_mapping(data)

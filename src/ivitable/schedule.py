"""Download and parse the league CSV exports."""
from __future__ import annotations

import csv
import logging
import time
from io import StringIO
from pathlib import Path
from typing import Dict, List, Union

import requests

LOGGER = logging.getLogger(__name__)

REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; ivitable/1.0)",
    "Accept": "text/csv,text/plain;q=0.9,*/*;q=0.5",
}

Row = Dict[str, str]


def is_remote(location: Union[str, Path]) -> bool:
    return str(location).lower().startswith(("http://", "https://"))


def _get_once(url: str) -> requests.Response:
    # Published sheets are cached aggressively unless asked not to.
    response = requests.get(
        url,
        timeout=30,
        headers={**REQUEST_HEADERS, "Cache-Control": "no-cache"},
    )
    response.raise_for_status()
    return response


def _http_get(
    url: str,
    *,
    retries: int = 5,
    delay_seconds: float = 2.0,
) -> requests.Response:
    if retries < 1:
        raise ValueError(f"retries must be at least 1, got {retries}.")
    for attempt in range(retries - 1):
        try:
            return _get_once(url)
        except requests.RequestException as exc:
            backoff = delay_seconds * (2 ** attempt)
            LOGGER.warning("Request to %s failed (%s), retrying in %.1fs", url, exc, backoff)
            time.sleep(backoff)
    return _get_once(url)


def fetch_csv_text(
    location: Union[str, Path],
    *,
    retries: int = 5,
    delay_seconds: float = 2.0,
) -> str:
    if is_remote(location):
        response = _http_get(str(location), retries=retries, delay_seconds=delay_seconds)
        return response.text
    return Path(location).read_text(encoding="utf-8")


def parse_csv_rows(csv_text: str, *, delimiter: str = ",") -> List[Row]:
    """Parse CSV text into rows keyed by the trimmed header names.

    Cells missing from short rows become empty strings. Surplus cells are
    dropped.
    """

    reader = csv.reader(StringIO(csv_text.lstrip("\ufeff").strip()), delimiter=delimiter, quotechar='"')
    try:
        headers = [header.strip() for header in next(reader)]
    except StopIteration:
        return []
    rows: List[Row] = []
    for values in reader:
        if not values:
            continue
        rows.append(
            {
                header: (values[index].strip() if index < len(values) else "")
                for index, header in enumerate(headers)
            }
        )
    return rows


def load_rows(
    location: Union[str, Path],
    *,
    delimiter: str = ",",
    retries: int = 5,
    delay_seconds: float = 2.0,
) -> List[Row]:
    csv_text = fetch_csv_text(location, retries=retries, delay_seconds=delay_seconds)
    rows = parse_csv_rows(csv_text, delimiter=delimiter)
    LOGGER.info("Loaded %d rows from %s", len(rows), location)
    return rows


def load_team_names(
    location: Union[str, Path],
    *,
    delimiter: str = ",",
    retries: int = 5,
    delay_seconds: float = 2.0,
) -> List[str]:
    """Read a roster export and return the team names it lists.

    The ``team`` column is used when present, otherwise the first column.
    """

    rows = load_rows(location, delimiter=delimiter, retries=retries, delay_seconds=delay_seconds)
    names: List[str] = []
    for row in rows:
        value = row.get("team")
        if value is None:
            value = next(iter(row.values()), "")
        if value and value not in names:
            names.append(value)
    return names


__all__ = [
    "REQUEST_HEADERS",
    "fetch_csv_text",
    "is_remote",
    "load_rows",
    "load_team_names",
    "parse_csv_rows",
]

"""CLI entry point for the league report generator."""

from __future__ import annotations

from typing import Optional, Sequence

from .__main__ import main as _run_main


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point used by the ``ivitable`` console script."""

    return _run_main(argv)


if __name__ == "__main__":  # pragma: no cover - manual execution helper
    raise SystemExit(main())

#!/usr/bin/env python3
# scripts/upload_window_cli.py
"""
Report whether photo upload is open on a given day.

Usage:
  python -m scripts.upload_window_cli
  python -m scripts.upload_window_cli --date 2026-02-14
"""
from __future__ import annotations

import argparse
from datetime import date
from typing import Any, Optional


def _get_repository() -> Any:
    from mesopust.db.repository import SupabaseSearchRepository

    return SupabaseSearchRepository.from_env()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Check the photo upload window.")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Day to check (YYYY-MM-DD). Default: today in TIMEZONE.",
    )
    args = parser.parse_args(argv)

    from mesopust.upload_window import load_upload_window, local_today

    day = args.date or local_today()
    is_open = load_upload_window(_get_repository(), day)

    print(f"[upload_window] date={day.isoformat()} open={'yes' if is_open else 'no'}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

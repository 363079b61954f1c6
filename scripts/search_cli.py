#!/usr/bin/env python3
# scripts/search_cli.py
"""
Run one search against the live Supabase project.

Usage:
  python -m scripts.search_cli sopila
  python -m scripts.search_cli "bubanj veli" --json
"""
from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Optional


def _get_repository() -> Any:
    from mesopust.db.repository import SupabaseSearchRepository

    return SupabaseSearchRepository.from_env()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Search Mesopust content.")
    parser.add_argument("query", help="Search text (at least 2 characters).")
    parser.add_argument("--json", action="store_true", help="Print results as JSON.")
    parser.add_argument("--verbose", action="store_true", help="Log per-table fetch details.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    # Import here so --help works without supabase deps
    from mesopust.search.navigation import navigation_target, result_type_label
    from mesopust.search.pipeline import search

    repository = _get_repository()
    results = search(repository, args.query)

    if args.json:
        print(json.dumps([r.model_dump(mode="json") for r in results], ensure_ascii=False, indent=2))
        return 0

    print(f"[search] query={args.query!r} results={len(results)}")
    for r in results:
        local = f" / {r.title_local}" if r.title_local else ""
        print(
            f"  {r.relevance:>4}  {result_type_label(r.entity_type):<18} "
            f"{r.title}{local}  → {navigation_target(r)}"
        )

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

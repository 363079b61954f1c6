# mesopust/search/pipeline.py
"""
Search pipeline: gate → fan-out → score/normalize → dedupe → rank.

Failure contract:
  - one table failing (exception, APIError, NULL data) contributes zero rows
  - one malformed row is skipped
  - anything else going wrong returns []
Nothing is raised to the caller; "no results" is the only failure state the
UI ever sees.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Sequence

from pydantic import ValidationError

from mesopust import config
from mesopust.db.repository import SearchRepository
from mesopust.models import ScoredResult
from mesopust.search.dedupe import dedupe_results, rank_results
from mesopust.search.entities import SEARCH_TABLES, EntityTable

logger = logging.getLogger(__name__)


def passes_query_gate(query: str) -> bool:
    """Raw length check; the query is not trimmed first."""
    return len(query) >= config.SEARCH_MIN_QUERY_LENGTH


def search_pattern(query: str) -> str:
    return f"%{query}%"


def _fetch_table(
    repository: SearchRepository,
    entity: EntityTable,
    pattern: str,
) -> list[dict[str, Any]]:
    """Fetch one table. Errors are logged and read as zero rows."""
    try:
        rows = repository.fetch_matching(
            entity.table, entity.columns, entity.search_columns, pattern,
        )
    except Exception as e:
        logger.error(
            "[search] fetch failed table=%s | %s: %s",
            entity.table, type(e).__name__, e,
        )
        return []
    return list(rows or [])


def _score_rows(
    entity: EntityTable,
    rows: Sequence[dict[str, Any]],
    query: str,
) -> list[ScoredResult]:
    out: list[ScoredResult] = []
    for raw in rows:
        try:
            row = entity.model.model_validate(raw)
        except ValidationError as e:
            logger.warning(
                "[search] SKIP malformed row table=%s id=%r | %d validation error(s)",
                entity.table, raw.get("id") if isinstance(raw, dict) else None, e.error_count(),
            )
            continue
        out.append(entity.normalize(row, query))
    return out


def fan_out(
    repository: SearchRepository,
    query: str,
    tables: Sequence[EntityTable] = SEARCH_TABLES,
) -> list[tuple[EntityTable, list[dict[str, Any]]]]:
    """
    Issue one lookup per table concurrently and wait for all of them.

    Returned in *tables* order, not completion order.
    """
    pattern = search_pattern(query)
    workers = max(1, min(config.SEARCH_FETCH_WORKERS, len(tables)))

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(_fetch_table, repository, entity, pattern) for entity in tables]
        return [(entity, fut.result()) for entity, fut in zip(tables, futures)]


def search(
    repository: SearchRepository,
    query: str,
    tables: Sequence[EntityTable] = SEARCH_TABLES,
) -> list[ScoredResult]:
    """
    Run the full pipeline for one query.

    Returns results ranked by relevance, at most one per normalized title.
    """
    try:
        if not passes_query_gate(query):
            return []

        fetched = fan_out(repository, query, tables)

        candidates: list[ScoredResult] = []
        for entity, rows in fetched:
            candidates.extend(_score_rows(entity, rows, query))

        deduped = dedupe_results(candidates)
        ranked = rank_results(deduped)

        logger.debug(
            "[search] query=%r candidates=%d deduped=%d",
            query, len(candidates), len(ranked),
        )
        return ranked

    except Exception:
        logger.exception("[search] pipeline failed query=%r", query)
        return []

# mesopust/search/dedupe.py
"""
Cross-type result deduplication and ranking.

Dedupe key: the display title, lowercased and stripped
(title_local if present, else title).

Collision policy, checked in this order:
  1. incoming instrument      → replaces the stored result (last instrument wins)
  2. stored instrument        → incoming result is discarded
  3. otherwise                → strictly higher relevance wins, ties keep stored

Instrument and glossary rows often describe the same object (a drum, a
horn); the instrument record is the richer one.

The key does not include the entity type: an event and a participant with
the same display name collide and only one survives.
"""
from __future__ import annotations

from typing import Iterable

from mesopust.models import EntityType, ScoredResult


def normalized_title(result: ScoredResult) -> str:
    """Lowercase, trimmed display title used as the dedupe key."""
    return (result.title_local or result.title or "").lower().strip()


def dedupe_results(results: Iterable[ScoredResult]) -> list[ScoredResult]:
    """Collapse results sharing a normalized title. Keeps first-seen key order."""
    by_title: dict[str, ScoredResult] = {}

    for result in results:
        key = normalized_title(result)
        existing = by_title.get(key)

        if existing is None:
            by_title[key] = result
        elif result.entity_type is EntityType.INSTRUMENT:
            by_title[key] = result
        elif existing.entity_type is EntityType.INSTRUMENT:
            continue
        elif result.relevance > existing.relevance:
            by_title[key] = result

    return list(by_title.values())


def rank_results(results: Iterable[ScoredResult]) -> list[ScoredResult]:
    """Stable sort, highest relevance first."""
    return sorted(results, key=lambda r: r.relevance, reverse=True)

# mesopust/search/scoring.py
"""
Deterministic text relevance for search results.

Pure utility: no DB access, no side effects.

Every searchable table exposes the same four text slots, whatever the
column names are called:

  name, name_local, description, description_local

Rule ladder (first matching rule wins):
  1000  name or name_local equals the query
   500  name or name_local starts with the query
   100  name or name_local contains the query
    50  every whitespace-separated query word appears in some slot
    20  at least one query word appears in some slot
    10  description or description_local contains the query
     0  nothing matched

Comparison is case-insensitive (str.lower on both sides). NULL slots are
treated as "". The query is not trimmed.
"""
from __future__ import annotations

from typing import Optional


# ---------------------------------------------------------------------------
# Scores (v1)
# ---------------------------------------------------------------------------

SCORE_EXACT: int = 1000
SCORE_PREFIX: int = 500
SCORE_NAME_CONTAINS: int = 100
SCORE_ALL_WORDS: int = 50
SCORE_SOME_WORDS: int = 20
SCORE_DESCRIPTION: int = 10
SCORE_NONE: int = 0

SCORE_LADDER: tuple[int, ...] = (
    SCORE_EXACT,
    SCORE_PREFIX,
    SCORE_NAME_CONTAINS,
    SCORE_ALL_WORDS,
    SCORE_SOME_WORDS,
    SCORE_DESCRIPTION,
    SCORE_NONE,
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def compute_relevance(
    query: str,
    *,
    name: Optional[str] = None,
    name_local: Optional[str] = None,
    description: Optional[str] = None,
    description_local: Optional[str] = None,
) -> int:
    """
    Score one record against the raw query.

    Same inputs always produce the same output.
    """
    q = query.lower()
    n = (name or "").lower()
    nl = (name_local or "").lower()
    d = (description or "").lower()
    dl = (description_local or "").lower()

    if n == q or nl == q:
        return SCORE_EXACT
    if n.startswith(q) or nl.startswith(q):
        return SCORE_PREFIX
    if q in n or q in nl:
        return SCORE_NAME_CONTAINS

    words = q.split()
    if words:
        matched = [w for w in words if w in n or w in nl or w in d or w in dl]
        if len(matched) == len(words):
            return SCORE_ALL_WORDS
        if matched:
            return SCORE_SOME_WORDS

    if q in d or q in dl:
        return SCORE_DESCRIPTION

    return SCORE_NONE

# mesopust/search/session.py
"""
Search-screen state with sequence-guarded publishing.

Every keystroke calls `submit()`. Each call takes the next sequence number;
when its search finishes, results are published only if no newer call has
been issued since. A slow earlier query therefore never overwrites the
results of a faster later one.

In-flight searches are not cancelled, their results are just dropped.
"""
from __future__ import annotations

import logging
import threading
from typing import Sequence

from mesopust.db.repository import SearchRepository
from mesopust.models import ScoredResult
from mesopust.search.entities import SEARCH_TABLES, EntityTable
from mesopust.search.pipeline import passes_query_gate, search

logger = logging.getLogger(__name__)


class SearchSession:
    def __init__(
        self,
        repository: SearchRepository,
        tables: Sequence[EntityTable] = SEARCH_TABLES,
    ) -> None:
        self.repository = repository
        self.tables = tables

        self._lock = threading.Lock()
        self._latest_seq = 0
        self._query = ""
        self._results: list[ScoredResult] = []
        self._loading = False

    # -- read side ---------------------------------------------------------

    @property
    def query(self) -> str:
        with self._lock:
            return self._query

    @property
    def results(self) -> list[ScoredResult]:
        with self._lock:
            return list(self._results)

    @property
    def loading(self) -> bool:
        with self._lock:
            return self._loading

    @property
    def latest_seq(self) -> int:
        with self._lock:
            return self._latest_seq

    # -- write side --------------------------------------------------------

    def _issue(self, query: str) -> int:
        with self._lock:
            self._latest_seq += 1
            self._query = query
            return self._latest_seq

    def _publish(self, seq: int, results: list[ScoredResult]) -> bool:
        with self._lock:
            if seq != self._latest_seq:
                return False
            self._results = results
            self._loading = False
            return True

    def submit(self, query: str) -> bool:
        """
        Run a search for *query* and publish it if it is still the latest.

        Returns True when this call's results were published.
        """
        seq = self._issue(query)

        if not passes_query_gate(query):
            return self._publish(seq, [])

        with self._lock:
            if seq == self._latest_seq:
                self._loading = True

        results = search(self.repository, query, self.tables)

        published = self._publish(seq, results)
        if not published:
            logger.debug(
                "[session] DROP stale results seq=%d query=%r",
                seq, query,
            )
        return published

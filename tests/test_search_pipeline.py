# tests/test_search_pipeline.py
"""
End-to-end search pipeline tests against in-memory repositories:

  Part 1: Query gate
  Part 2: Fan-out (one lookup per table, pattern, columns)
  Part 3: Normalization (types, participant/role split, descriptions)
  Part 4: Cross-table dedupe + ranking
  Part 5: Failure isolation
"""
from __future__ import annotations

import time
from typing import Any, Optional, Sequence
from unittest.mock import MagicMock

import pytest

from mesopust.models import EntityType
from mesopust.search import pipeline
from mesopust.search.entities import SEARCH_TABLES
from mesopust.search.pipeline import passes_query_gate, search


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------

class FakeRepository:
    """ilike-ish substring match over in-memory rows."""

    def __init__(
        self,
        tables: Optional[dict[str, list[dict[str, Any]]]] = None,
        *,
        failing: Sequence[str] = (),
        delays: Optional[dict[str, float]] = None,
    ) -> None:
        self.tables = tables or {}
        self.failing = set(failing)
        self.delays = delays or {}
        self.calls: list[tuple[str, tuple[str, ...], tuple[str, ...], str]] = []

    def fetch_matching(self, table, columns, search_columns, pattern):
        self.calls.append((table, tuple(columns), tuple(search_columns), pattern))
        if table in self.delays:
            time.sleep(self.delays[table])
        if table in self.failing:
            raise RuntimeError(f"{table} unavailable")

        needle = pattern.strip("%").lower()
        out = []
        for row in self.tables.get(table, []):
            if not isinstance(row, dict):
                out.append(row)  # garbage passes the filter untouched
            elif any(needle in (row.get(c) or "").lower() for c in search_columns):
                out.append(row)
        return out

    def list_rows(self, table, columns, order_by=None):
        return list(self.tables.get(table, []))


MESOPUST_ROWS: dict[str, list[dict[str, Any]]] = {
    "searchable_items": [
        {"id": "item-1", "name": "Mask", "name_local": "Maškara",
         "description": "Carved wooden mask", "description_local": None, "category": "costume"},
    ],
    "participants": [
        {"id": "par-1", "name": "Sopci", "name_croatian": "Sopci",
         "description": "Players of the sopila", "description_croatian": None,
         "show_in_main_menu": True},
        {"id": "par-2", "name": "Advitor", "name_croatian": "Advitor",
         "description": "Head of the carnival court", "description_croatian": None,
         "show_in_main_menu": False},
    ],
    "events": [
        {"id": "ev-1", "title": "Zeča", "title_local": None,
         "description": "Circle dance with sopila music"},
    ],
    "glossary_terms": [
        {"id": "gl-1", "term": "Sopila", "term_local": None,
         "definition": "Istrian folk oboe", "definition_local": None},
        {"id": "gl-2", "term": "Bubanj", "term_local": None,
         "definition": "Drum", "definition_local": None},
    ],
    "instruments": [
        {"id": "ins-1", "participant_id": "par-1", "name": "Big oboe",
         "name_croatian": "Vela Sopila", "description": None, "description_croatian": None},
        {"id": "ins-2", "participant_id": "par-1", "name": "Drum",
         "name_croatian": "Bubanj", "description": "Bass drum",
         "description_croatian": "Veliki bubanj"},
    ],
    "uniform_items": [
        {"id": "uni-1", "role_id": "role-1", "item_name": "Hat",
         "item_name_croatian": "Klobuk", "description": "Hat with sopila ribbon",
         "description_croatian": None},
    ],
    "hierarchy_roles": [
        {"id": "role-1", "participant_id": "par-1", "title": "Lead player",
         "title_croatian": "Prvi sopac", "description": "Leads the sopila pair",
         "description_croatian": None},
    ],
}


def _by_id(results):
    return {r.id: r for r in results}


# ===========================================================================
# Part 1: Query gate
# ===========================================================================

class TestQueryGate:

    @pytest.mark.parametrize("query", ["", "a", " ", "ž"])
    def test_short_query_returns_empty_without_fetch(self, query):
        repo = MagicMock()
        assert search(repo, query) == []
        repo.fetch_matching.assert_not_called()

    def test_two_characters_pass(self):
        assert passes_query_gate("ad") is True

    def test_gate_does_not_trim(self):
        """' a' is two characters raw and passes."""
        assert passes_query_gate(" a") is True

    def test_min_length_is_configurable(self, monkeypatch):
        from mesopust import config
        monkeypatch.setattr(config, "SEARCH_MIN_QUERY_LENGTH", 4)
        assert passes_query_gate("sop") is False
        assert passes_query_gate("sopi") is True


# ===========================================================================
# Part 2: Fan-out
# ===========================================================================

class TestFanOut:

    def test_one_lookup_per_table(self):
        repo = FakeRepository(MESOPUST_ROWS)
        search(repo, "ad")
        assert sorted(c[0] for c in repo.calls) == sorted(t.table for t in SEARCH_TABLES)
        assert len(repo.calls) == 7

    def test_pattern_wraps_raw_query(self):
        repo = FakeRepository(MESOPUST_ROWS)
        search(repo, "Sop ")
        assert {c[3] for c in repo.calls} == {"%Sop %"}

    def test_event_search_columns_have_no_local_description(self):
        repo = FakeRepository(MESOPUST_ROWS)
        search(repo, "zeča")
        events_call = next(c for c in repo.calls if c[0] == "events")
        assert events_call[2] == ("title", "title_local", "description")

    def test_instrument_columns_include_participant_id(self):
        repo = FakeRepository(MESOPUST_ROWS)
        search(repo, "bubanj")
        call = next(c for c in repo.calls if c[0] == "instruments")
        assert "participant_id" in call[1]

    def test_accumulation_ignores_completion_order(self):
        """Slow early tables still land in table order, so dedupe ties are stable."""
        rows = {
            "searchable_items": [{"id": "item-z", "name": "Zvono"}],
            "hierarchy_roles": [{"id": "role-z", "title": "Zvono"}],
        }
        slow_first = FakeRepository(rows, delays={"searchable_items": 0.05})
        slow_last = FakeRepository(rows, delays={"hierarchy_roles": 0.05})

        a = search(slow_first, "zvono")
        b = search(slow_last, "zvono")

        assert [r.id for r in a] == [r.id for r in b] == ["item-z"]


# ===========================================================================
# Part 3: Normalization
# ===========================================================================

class TestNormalization:

    def test_participant_vs_role_split(self):
        repo = FakeRepository(MESOPUST_ROWS)
        out = _by_id(search(repo, "sopci") + search(repo, "advitor"))
        assert out["par-1"].entity_type is EntityType.PARTICIPANT
        assert out["par-2"].entity_type is EntityType.ROLE

    def test_hierarchy_role_tagged_role_with_participant_id(self):
        repo = FakeRepository(MESOPUST_ROWS)
        out = _by_id(search(repo, "prvi sopac"))
        assert out["role-1"].entity_type is EntityType.ROLE
        assert out["role-1"].participant_id == "par-1"
        assert out["role-1"].relevance == 1000

    def test_item_carries_category(self):
        repo = FakeRepository(MESOPUST_ROWS)
        out = _by_id(search(repo, "maškara"))
        assert out["item-1"].category == "costume"
        assert out["item-1"].entity_type is EntityType.ITEM

    def test_description_prefers_local(self):
        repo = FakeRepository(MESOPUST_ROWS)
        out = _by_id(search(repo, "bass drum"))
        assert out["ins-2"].description == "Veliki bubanj"

    def test_null_description_becomes_empty_string(self):
        repo = FakeRepository(MESOPUST_ROWS)
        out = _by_id(search(repo, "vela sopila"))
        assert out["ins-1"].description == ""

    def test_advitor_prefix(self):
        """Scenario B."""
        repo = FakeRepository(MESOPUST_ROWS)
        out = _by_id(search(repo, "ad"))
        assert out["par-2"].relevance == 500


# ===========================================================================
# Part 4: Dedupe + ranking across tables
# ===========================================================================

class TestCrossTable:

    def test_sopila_scenario(self):
        """Scenario A: 'Sopila' term and 'Vela Sopila' instrument both appear."""
        repo = FakeRepository(MESOPUST_ROWS)
        results = search(repo, "sopila")
        out = _by_id(results)

        assert out["gl-1"].relevance == 1000
        assert out["ins-1"].relevance == 100
        assert results[0].id == "gl-1"

    def test_instrument_replaces_same_named_glossary_term(self):
        """Glossary 'Bubanj' (exact, 1000) loses to instrument 'Bubanj'."""
        repo = FakeRepository(MESOPUST_ROWS)
        results = search(repo, "bubanj")
        ids = [r.id for r in results]

        assert "ins-2" in ids
        assert "gl-2" not in ids
        assert _by_id(results)["ins-2"].relevance == 1000

    def test_sorted_descending(self):
        repo = FakeRepository(MESOPUST_ROWS)
        results = search(repo, "sopila")
        scores = [r.relevance for r in results]
        assert scores == sorted(scores, reverse=True)
        assert len(results) >= 4

    def test_unique_normalized_titles(self):
        from mesopust.search.dedupe import normalized_title

        repo = FakeRepository(MESOPUST_ROWS)
        results = search(repo, "so")
        keys = [normalized_title(r) for r in results]
        assert len(keys) == len(set(keys))

    def test_idempotent(self):
        repo = FakeRepository(MESOPUST_ROWS)
        first = search(repo, "sopila")
        second = search(repo, "sopila")
        assert [r.model_dump() for r in first] == [r.model_dump() for r in second]

    def test_no_match_is_empty(self):
        repo = FakeRepository(MESOPUST_ROWS)
        assert search(repo, "trumbeta") == []


# ===========================================================================
# Part 5: Failure isolation
# ===========================================================================

class TestFailures:

    def test_failed_table_does_not_block_others(self):
        """Scenario D: glossary fails, the other six still contribute."""
        repo = FakeRepository(MESOPUST_ROWS, failing=["glossary_terms"])
        results = search(repo, "sopila")
        ids = {r.id for r in results}

        assert "gl-1" not in ids
        assert {"ins-1", "ev-1", "uni-1", "role-1"} <= ids
        scores = [r.relevance for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_all_tables_failing_is_empty(self):
        repo = FakeRepository(MESOPUST_ROWS, failing=[t.table for t in SEARCH_TABLES])
        assert search(repo, "sopila") == []

    def test_none_data_is_zero_rows(self):
        repo = MagicMock()
        repo.fetch_matching.return_value = None
        assert search(repo, "sopila") == []
        assert repo.fetch_matching.call_count == 7

    def test_malformed_row_skipped(self):
        rows = {
            "glossary_terms": [
                {"term": "Sopila"},  # no id
                {"id": "gl-ok", "term": "Sopila mala"},
            ],
        }
        repo = FakeRepository(rows)
        assert [r.id for r in search(repo, "sopila")] == ["gl-ok"]

    def test_non_dict_rows_skipped(self):
        rows = {
            "glossary_terms": [
                "Sopila",
                ["gl-list", "Sopila"],
                {"id": "gl-ok", "term": "Sopila mala"},
            ],
        }
        repo = FakeRepository(rows)
        assert [r.id for r in search(repo, "sopila")] == ["gl-ok"]

    def test_pipeline_error_returns_empty(self, monkeypatch):
        def boom(results):
            raise RuntimeError("dedupe exploded")

        monkeypatch.setattr(pipeline, "dedupe_results", boom)
        repo = FakeRepository(MESOPUST_ROWS)
        assert search(repo, "sopila") == []

    def test_pipeline_error_is_logged(self, monkeypatch, caplog):
        monkeypatch.setattr(pipeline, "rank_results", MagicMock(side_effect=ValueError("x")))
        repo = FakeRepository(MESOPUST_ROWS)
        with caplog.at_level("ERROR", logger="mesopust.search.pipeline"):
            search(repo, "sopila")
        assert "[search] pipeline failed" in caplog.text

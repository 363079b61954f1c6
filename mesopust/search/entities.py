# mesopust/search/entities.py
"""
Per-table search configuration and row → result mapping.

Each searchable table gets one `EntityTable` entry naming:
  - the PostgREST table
  - the columns to select
  - the text columns OR-ed together in the ilike filter
  - the pydantic row model
  - a pure normalizer (row, query) → ScoredResult

Normalizers are total: any row that validated against its model maps to a
result, whatever fields are NULL.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Type

from pydantic import BaseModel

from mesopust.models import (
    EntityType,
    Event,
    GlossaryTerm,
    HierarchyRole,
    Instrument,
    Participant,
    ScoredResult,
    SearchableItem,
    UniformItem,
)
from mesopust.search.scoring import compute_relevance


@dataclass(frozen=True)
class EntityTable:
    table: str
    columns: tuple[str, ...]
    search_columns: tuple[str, ...]
    model: Type[BaseModel]
    normalize: Callable[[BaseModel, str], ScoredResult]


def _best_description(primary: str | None, local: str | None) -> str:
    return local or primary or ""


# ---------------------------------------------------------------------------
# Normalizers (one per table)
# ---------------------------------------------------------------------------

def normalize_item(row: SearchableItem, query: str) -> ScoredResult:
    return ScoredResult(
        id=row.id,
        entity_type=EntityType.ITEM,
        title=row.name or "",
        title_local=row.name_local,
        description=_best_description(row.description, row.description_local),
        relevance=compute_relevance(
            query,
            name=row.name,
            name_local=row.name_local,
            description=row.description,
            description_local=row.description_local,
        ),
        category=row.category,
    )


def normalize_participant(row: Participant, query: str) -> ScoredResult:
    # Same table holds main-menu groups and individual office-holders.
    entity_type = EntityType.PARTICIPANT if row.show_in_main_menu else EntityType.ROLE
    return ScoredResult(
        id=row.id,
        entity_type=entity_type,
        title=row.name or "",
        title_local=row.name_croatian,
        description=_best_description(row.description, row.description_croatian),
        relevance=compute_relevance(
            query,
            name=row.name,
            name_local=row.name_croatian,
            description=row.description,
            description_local=row.description_croatian,
        ),
    )


def normalize_event(row: Event, query: str) -> ScoredResult:
    return ScoredResult(
        id=row.id,
        entity_type=EntityType.EVENT,
        title=row.title or "",
        title_local=row.title_local,
        description=row.description or "",
        relevance=compute_relevance(
            query,
            name=row.title,
            name_local=row.title_local,
            description=row.description,
        ),
    )


def normalize_glossary_term(row: GlossaryTerm, query: str) -> ScoredResult:
    return ScoredResult(
        id=row.id,
        entity_type=EntityType.GLOSSARY_TERM,
        title=row.term or "",
        title_local=row.term_local,
        description=_best_description(row.definition, row.definition_local),
        relevance=compute_relevance(
            query,
            name=row.term,
            name_local=row.term_local,
            description=row.definition,
            description_local=row.definition_local,
        ),
    )


def normalize_instrument(row: Instrument, query: str) -> ScoredResult:
    return ScoredResult(
        id=row.id,
        entity_type=EntityType.INSTRUMENT,
        title=row.name or "",
        title_local=row.name_croatian,
        description=_best_description(row.description, row.description_croatian),
        relevance=compute_relevance(
            query,
            name=row.name,
            name_local=row.name_croatian,
            description=row.description,
            description_local=row.description_croatian,
        ),
        participant_id=row.participant_id,
    )


def normalize_uniform_item(row: UniformItem, query: str) -> ScoredResult:
    return ScoredResult(
        id=row.id,
        entity_type=EntityType.UNIFORM_ITEM,
        title=row.item_name or "",
        title_local=row.item_name_croatian,
        description=_best_description(row.description, row.description_croatian),
        relevance=compute_relevance(
            query,
            name=row.item_name,
            name_local=row.item_name_croatian,
            description=row.description,
            description_local=row.description_croatian,
        ),
    )


def normalize_hierarchy_role(row: HierarchyRole, query: str) -> ScoredResult:
    return ScoredResult(
        id=row.id,
        entity_type=EntityType.ROLE,
        title=row.title or "",
        title_local=row.title_croatian,
        description=_best_description(row.description, row.description_croatian),
        relevance=compute_relevance(
            query,
            name=row.title,
            name_local=row.title_croatian,
            description=row.description,
            description_local=row.description_croatian,
        ),
        participant_id=row.participant_id,
    )


# ---------------------------------------------------------------------------
# Table registry (order is the accumulation order, which dedupe ties depend on)
# ---------------------------------------------------------------------------

SEARCH_TABLES: tuple[EntityTable, ...] = (
    EntityTable(
        table="searchable_items",
        columns=("id", "name", "name_local", "description", "description_local", "category"),
        search_columns=("name", "name_local", "description", "description_local"),
        model=SearchableItem,
        normalize=normalize_item,
    ),
    EntityTable(
        table="participants",
        columns=(
            "id", "name", "name_croatian", "description",
            "description_croatian", "show_in_main_menu",
        ),
        search_columns=("name", "name_croatian", "description", "description_croatian"),
        model=Participant,
        normalize=normalize_participant,
    ),
    EntityTable(
        table="events",
        columns=("id", "title", "title_local", "description"),
        search_columns=("title", "title_local", "description"),
        model=Event,
        normalize=normalize_event,
    ),
    EntityTable(
        table="glossary_terms",
        columns=("id", "term", "term_local", "definition", "definition_local"),
        search_columns=("term", "term_local", "definition", "definition_local"),
        model=GlossaryTerm,
        normalize=normalize_glossary_term,
    ),
    EntityTable(
        table="instruments",
        columns=(
            "id", "participant_id", "name", "name_croatian",
            "description", "description_croatian",
        ),
        search_columns=("name", "name_croatian", "description", "description_croatian"),
        model=Instrument,
        normalize=normalize_instrument,
    ),
    EntityTable(
        table="uniform_items",
        columns=(
            "id", "role_id", "item_name", "item_name_croatian",
            "description", "description_croatian",
        ),
        search_columns=("item_name", "item_name_croatian", "description", "description_croatian"),
        model=UniformItem,
        normalize=normalize_uniform_item,
    ),
    EntityTable(
        table="hierarchy_roles",
        columns=(
            "id", "participant_id", "title", "title_croatian",
            "description", "description_croatian",
        ),
        search_columns=("title", "title_croatian", "description", "description_croatian"),
        model=HierarchyRole,
        normalize=normalize_hierarchy_role,
    ),
)

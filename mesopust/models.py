from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class EntityType(str, Enum):
    ITEM = "item"
    PARTICIPANT = "participant"
    ROLE = "role"                  # non-menu participant or hierarchy role
    EVENT = "event"
    GLOSSARY_TERM = "glossary_term"
    INSTRUMENT = "instrument"
    UNIFORM_ITEM = "uniform_item"


# ---------------------------------------------------------------------------
# Table rows (only the columns the app reads; everything but id may be NULL)
# ---------------------------------------------------------------------------

class SearchableItem(BaseModel):
    id: str
    name: Optional[str] = None
    name_local: Optional[str] = None
    description: Optional[str] = None
    description_local: Optional[str] = None
    category: Optional[str] = None


class Participant(BaseModel):
    id: str
    name: Optional[str] = None
    name_croatian: Optional[str] = None
    description: Optional[str] = None
    description_croatian: Optional[str] = None
    show_in_main_menu: Optional[bool] = False


class Event(BaseModel):
    id: str
    title: Optional[str] = None
    title_local: Optional[str] = None
    description: Optional[str] = None
    event_date: Optional[str] = None   # ISO date
    created_at: Optional[str] = None   # ISO timestamp
    parent_event_id: Optional[str] = None
    display_order: Optional[int] = None


class GlossaryTerm(BaseModel):
    id: str
    term: Optional[str] = None
    term_local: Optional[str] = None
    definition: Optional[str] = None
    definition_local: Optional[str] = None


class Instrument(BaseModel):
    id: str
    participant_id: Optional[str] = None
    name: Optional[str] = None
    name_croatian: Optional[str] = None
    description: Optional[str] = None
    description_croatian: Optional[str] = None


class UniformItem(BaseModel):
    id: str
    role_id: Optional[str] = None
    item_name: Optional[str] = None
    item_name_croatian: Optional[str] = None
    description: Optional[str] = None
    description_croatian: Optional[str] = None


class HierarchyRole(BaseModel):
    id: str
    participant_id: Optional[str] = None
    title: Optional[str] = None
    title_croatian: Optional[str] = None
    description: Optional[str] = None
    description_croatian: Optional[str] = None


# ---------------------------------------------------------------------------
# Search output
# ---------------------------------------------------------------------------

class ScoredResult(BaseModel):
    id: str
    entity_type: EntityType
    title: str = ""
    title_local: Optional[str] = None
    description: str = ""
    relevance: int = 0

    participant_id: Optional[str] = None  # instrument / hierarchy role
    category: Optional[str] = None        # searchable item

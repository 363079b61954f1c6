# mesopust/search/navigation.py
"""Where a tapped search result leads, and how its type is labelled."""
from __future__ import annotations

from mesopust.models import EntityType, ScoredResult

# Roles and uniform items share the uniform detail view.
ROUTE_TEMPLATES: dict[EntityType, str] = {
    EntityType.ITEM: "/item/{id}",
    EntityType.PARTICIPANT: "/participant/{id}",
    EntityType.EVENT: "/event/{id}",
    EntityType.INSTRUMENT: "/instrument/{id}",
    EntityType.UNIFORM_ITEM: "/uniform/{id}",
    EntityType.ROLE: "/uniform/{id}",
    EntityType.GLOSSARY_TERM: "/(tabs)/glossary#{id}",
}

TYPE_LABELS: dict[EntityType, str] = {
    EntityType.EVENT: "Događaj",
    EntityType.PARTICIPANT: "Skupina sudionika",
    EntityType.ITEM: "Predmet",
    EntityType.GLOSSARY_TERM: "Pojam",
    EntityType.INSTRUMENT: "Instrument",
    EntityType.UNIFORM_ITEM: "Odjeća",
    EntityType.ROLE: "Uloga",
}

DEFAULT_LABEL = "Predmet"


def navigation_target(result: ScoredResult) -> str:
    return ROUTE_TEMPLATES[result.entity_type].format(id=result.id)


def result_type_label(entity_type: EntityType | str) -> str:
    try:
        return TYPE_LABELS[EntityType(entity_type)]
    except ValueError:
        return DEFAULT_LABEL

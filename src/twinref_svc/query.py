"""Query types and the request-construction steps of the resolution pipeline."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class ListEntitiesFilter:
    """One filter for a catalog search. Only one field is normally set."""
    parent_entity_id: str | None = None
    component_type_id: str | None = None
    external_id: str | None = None

    def to_payload(self) -> dict[str, str]:
        if self.parent_entity_id:
            return {"parentEntityId": self.parent_entity_id}
        if self.component_type_id:
            return {"componentTypeId": self.component_type_id}
        return {"externalId": self.external_id or ""}


@dataclass(frozen=True, slots=True)
class PropertyFilter:
    """Value filter applied to a history query."""
    property_name: str
    operator: str
    value: Any


@dataclass(frozen=True, slots=True)
class TwinQuery:
    """
    Parameters for a directory or history lookup.

    Immutable: each pipeline stage derives the request it needs
    with search_query() / detail_query() instead of editing a shared one.
    """
    workspace_id: str = ""
    entity_id: str = ""
    component_name: str = ""
    component_type_id: str = ""
    properties: tuple[str, ...] = ()
    property_filter: tuple[PropertyFilter, ...] = ()
    list_entities_filter: tuple[ListEntitiesFilter, ...] = ()
    start_time: datetime | None = None
    end_time: datetime | None = None
    order: str = "ASCENDING"
    max_results: int | None = None
    next_token: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TwinQuery:
        """Build from a JSON-ish dict (API bodies, CLI fixtures)."""
        return cls(
            workspace_id=data.get("workspace_id", ""),
            entity_id=data.get("entity_id", ""),
            component_name=data.get("component_name", ""),
            component_type_id=data.get("component_type_id", ""),
            properties=tuple(data.get("properties") or ()),
            property_filter=tuple(
                PropertyFilter(**f) for f in data.get("property_filter") or ()
            ),
            list_entities_filter=tuple(
                ListEntitiesFilter(**f) for f in data.get("list_entities_filter") or ()
            ),
            start_time=_parse_time(data.get("start_time")),
            end_time=_parse_time(data.get("end_time")),
            order=data.get("order", "ASCENDING"),
            max_results=data.get("max_results"),
        )


def _parse_time(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def search_query(query: TwinQuery, external_id: str) -> TwinQuery:
    """Catalog search request: everything entity-specific cleared, exact external id filter."""
    return replace(
        query,
        entity_id="",
        properties=(),
        component_type_id="",
        list_entities_filter=(ListEntitiesFilter(external_id=external_id),),
        next_token=None,
    )


def detail_query(query: TwinQuery, entity_id: str) -> TwinQuery:
    """Entity detail request for one catalog hit."""
    return replace(query, entity_id=entity_id, next_token=None)

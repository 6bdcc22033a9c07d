"""In-memory twin service client - fixtures, demos, and tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ..catalog.types import ComponentDefinition, EntitySummary, PropertyValueBatch
from ..query import TwinQuery
from .base import AdapterError, AdapterNotFoundError, AdapterQueryError, TwinServiceClient


@dataclass
class StaticTwinClient(TwinServiceClient):
    """
    Client that answers from an in-memory fixture using the service's payload shape.

    Fixture:
        property_values: list of {values, entityPropertyReference} history batches
        entities: list of {entityId, entityName, components: {name: {...}}}
        failures: {operation: [keys]} where keys are external ids (list_entities),
                  entity ids (get_entity) or "*" (any call of that operation)

    Catalog search matches an entity when any of its components has an
    external-id flagged property whose stringValue equals the filter.
    """
    fixture: dict[str, Any] = field(default_factory=dict)

    # Recorded calls, in order: (operation, query)
    calls: list[tuple[str, TwinQuery]] = field(default_factory=list, init=False)

    @classmethod
    def from_yaml(cls, path: str | Path) -> StaticTwinClient:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls(fixture=data or {})

    def _check_failure(self, operation: str, key: str) -> None:
        failing = self.fixture.get("failures", {}).get(operation) or []
        if "*" in failing or key in failing:
            raise AdapterQueryError(f"{operation} failed for '{key}'")

    def _entity(self, entity_id: str) -> dict[str, Any]:
        for entity in self.fixture.get("entities", []):
            if entity.get("entityId") == entity_id:
                return entity
        raise AdapterNotFoundError(f"Entity not found: {entity_id}")

    async def get_property_value_history(self, query: TwinQuery) -> list[PropertyValueBatch]:
        self.calls.append(("get_property_value_history", query))
        self._check_failure("get_property_value_history", query.entity_id or "*")
        batches = [PropertyValueBatch.from_payload(p) for p in self.fixture.get("property_values", [])]
        if query.properties:
            batches = [
                b for b in batches
                if b.entity_property_reference.property_name in query.properties
            ]
        return batches

    async def list_entities(self, query: TwinQuery) -> list[EntitySummary]:
        self.calls.append(("list_entities", query))
        external_ids = {f.external_id for f in query.list_entities_filter if f.external_id is not None}
        for external_id in external_ids:
            self._check_failure("list_entities", external_id)

        summaries = []
        for entity in self.fixture.get("entities", []):
            if external_ids and not external_ids & self._external_ids(entity):
                continue
            summaries.append(EntitySummary.from_payload(entity))
        return summaries

    async def get_entity(self, query: TwinQuery) -> list[ComponentDefinition]:
        self.calls.append(("get_entity", query))
        if not query.entity_id:
            raise AdapterError("entity_id is required for get_entity")
        self._check_failure("get_entity", query.entity_id)
        entity = self._entity(query.entity_id)
        components = entity.get("components") or {}
        return [ComponentDefinition.from_payload(name, c) for name, c in components.items()]

    @staticmethod
    def _external_ids(entity: dict[str, Any]) -> set[str]:
        ids = set()
        for component in (entity.get("components") or {}).values():
            for prop in (component.get("properties") or {}).values():
                if (prop.get("definition") or {}).get("isExternalId"):
                    value = (prop.get("value") or {}).get("stringValue")
                    if value is not None:
                        ids.add(value)
        return ids

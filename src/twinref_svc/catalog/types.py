"""Catalog types - property references, entity summaries, and component definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ValueKind(str, Enum):
    """Kinds of value the twin service reports for a property."""
    STRING = "string"
    DOUBLE = "double"
    INTEGER = "integer"
    LONG = "long"
    BOOLEAN = "boolean"
    LIST = "list"
    MAP = "map"
    RELATIONSHIP = "relationship"
    EXPRESSION = "expression"
    NULL = "null"


# Payload keys used by the service for each value kind
_PAYLOAD_KEYS = {
    "stringValue": ValueKind.STRING,
    "doubleValue": ValueKind.DOUBLE,
    "integerValue": ValueKind.INTEGER,
    "longValue": ValueKind.LONG,
    "booleanValue": ValueKind.BOOLEAN,
    "listValue": ValueKind.LIST,
    "mapValue": ValueKind.MAP,
    "relationshipValue": ValueKind.RELATIONSHIP,
    "expression": ValueKind.EXPRESSION,
}


@dataclass(frozen=True, slots=True)
class DataValue:
    """
    A single tagged property value.

    Only one kind is ever set. Callers ask the value what it is
    (is_string, is_url) instead of inspecting the Python type.
    """
    kind: ValueKind
    value: Any = None

    @classmethod
    def string(cls, value: str) -> DataValue:
        return cls(kind=ValueKind.STRING, value=value)

    @classmethod
    def null(cls) -> DataValue:
        return cls(kind=ValueKind.NULL)

    @classmethod
    def from_payload(cls, payload: dict[str, Any] | None) -> DataValue:
        """Build from the service's `{"stringValue": "..."}` shape."""
        if not payload:
            return cls.null()
        for key, kind in _PAYLOAD_KEYS.items():
            if key in payload and payload[key] is not None:
                raw = payload[key]
                if kind == ValueKind.LIST:
                    raw = tuple(cls.from_payload(item) for item in raw)
                elif kind == ValueKind.MAP:
                    raw = {k: cls.from_payload(v) for k, v in raw.items()}
                return cls(kind=kind, value=raw)
        return cls.null()

    @property
    def is_string(self) -> bool:
        return self.kind in (ValueKind.STRING, ValueKind.EXPRESSION)

    def as_string(self) -> str | None:
        """The string payload, or None for non-string kinds."""
        if self.is_string:
            return self.value
        return None

    def is_url(self) -> bool:
        """True for string values that carry a URL scheme separator."""
        text = self.as_string()
        return text is not None and "://" in text

    def to_python(self) -> Any:
        """Unwrap into plain Python values (lists and dicts recursively)."""
        if self.kind == ValueKind.LIST:
            return [item.to_python() for item in self.value]
        if self.kind == ValueKind.MAP:
            return {k: v.to_python() for k, v in self.value.items()}
        return self.value


@dataclass(frozen=True, slots=True)
class PropertyValue:
    """One time-stamped observation of a property."""
    time: str
    value: DataValue

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> PropertyValue:
        return cls(
            time=payload.get("time", ""),
            value=DataValue.from_payload(payload.get("value")),
        )


@dataclass(frozen=True, slots=True)
class EntityPropertyReference:
    """
    Identifies a property on a component of an entity.

    Every field is optional because the history service only knows
    the external identifier for data ingested by external producers.
    The external id mapping is ordered; only its first entry is meaningful.
    """
    entity_id: str | None = None
    component_name: str | None = None
    external_id_property: dict[str, str] = field(default_factory=dict)
    property_name: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any] | None) -> EntityPropertyReference:
        payload = payload or {}
        return cls(
            entity_id=payload.get("entityId"),
            component_name=payload.get("componentName"),
            external_id_property=dict(payload.get("externalIdProperty") or {}),
            property_name=payload.get("propertyName"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity_id": self.entity_id,
            "component_name": self.component_name,
            "external_id_property": dict(self.external_id_property),
            "property_name": self.property_name,
        }


@dataclass(frozen=True, slots=True)
class PropertyValueBatch:
    """A property's value history plus the reference it was reported against."""
    values: tuple[PropertyValue, ...]
    entity_property_reference: EntityPropertyReference

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> PropertyValueBatch:
        return cls(
            values=tuple(PropertyValue.from_payload(v) for v in payload.get("values") or ()),
            entity_property_reference=EntityPropertyReference.from_payload(
                payload.get("entityPropertyReference")
            ),
        )


@dataclass(frozen=True, slots=True)
class EntitySummary:
    """A catalog search hit. Owned by the catalog service."""
    entity_id: str
    entity_name: str
    arn: str | None = None
    parent_entity_id: str | None = None
    status: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> EntitySummary:
        status = payload.get("status")
        if isinstance(status, dict):
            status = status.get("state")
        return cls(
            entity_id=payload["entityId"],
            entity_name=payload.get("entityName", ""),
            arn=payload.get("arn"),
            parent_entity_id=payload.get("parentEntityId"),
            status=status,
        )


@dataclass(frozen=True, slots=True)
class PropertyDefinition:
    """A property of a component with its current value."""
    name: str
    value: DataValue | None = None
    is_external_id: bool = False


@dataclass(frozen=True, slots=True)
class ComponentDefinition:
    """Full detail for one component of an entity."""
    component_name: str
    component_type_id: str
    properties: tuple[PropertyDefinition, ...] = ()

    @classmethod
    def from_payload(cls, name: str, payload: dict[str, Any]) -> ComponentDefinition:
        properties = []
        for prop_name, prop in (payload.get("properties") or {}).items():
            definition = prop.get("definition") or {}
            value = prop.get("value")
            properties.append(PropertyDefinition(
                name=prop_name,
                value=DataValue.from_payload(value) if value is not None else None,
                is_external_id=bool(definition.get("isExternalId", False)),
            ))
        return cls(
            component_name=payload.get("componentName", name),
            component_type_id=payload.get("componentTypeId", ""),
            properties=tuple(properties),
        )


@dataclass(frozen=True, slots=True)
class ResolvedReference:
    """
    Output of the resolver for one input batch.

    entity_id and component_name on the reference come from catalog data.
    component_name is "" when no matching component was found.
    """
    values: tuple[PropertyValue, ...]
    entity_property_reference: EntityPropertyReference
    entity_name: str

    @property
    def key(self) -> str:
        from .keys import derive_composite_key
        return derive_composite_key(self.entity_property_reference)

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "entity_name": self.entity_name,
            "entity_property_reference": self.entity_property_reference.to_dict(),
            "values": [
                {"time": v.time, "value": v.value.to_python(), "kind": v.value.kind.value}
                for v in self.values
            ],
        }

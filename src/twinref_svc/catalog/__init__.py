"""Catalog system - entity/component references and composite keys."""

from .types import (
    ComponentDefinition,
    DataValue,
    EntityPropertyReference,
    EntitySummary,
    PropertyDefinition,
    PropertyValue,
    PropertyValueBatch,
    ResolvedReference,
    ValueKind,
)
from .keys import derive_composite_key, extract_external_id

__all__ = [
    "ComponentDefinition",
    "DataValue",
    "EntityPropertyReference",
    "EntitySummary",
    "PropertyDefinition",
    "PropertyValue",
    "PropertyValueBatch",
    "ResolvedReference",
    "ValueKind",
    "derive_composite_key",
    "extract_external_id",
]

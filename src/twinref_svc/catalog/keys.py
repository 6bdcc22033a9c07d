"""Composite keys for entity property references."""

from __future__ import annotations

from .types import EntityPropertyReference

KEY_SEPARATOR = "_"


def extract_external_id(ref: EntityPropertyReference) -> str:
    """
    Return the external identifier embedded in a reference.

    The mapping holds one meaningful entry; the first in iteration
    order wins and the rest are ignored. Empty mapping gives "".
    """
    for value in ref.external_id_property.values():
        return value
    return ""


def derive_composite_key(ref: EntityPropertyReference) -> str:
    """
    Build entityId_componentName_externalId_propertyName.

    Absent fields contribute nothing (not even a separator), except the
    external id which always contributes its separator. Segments that
    themselves contain "_" can collide; callers rely on a fixed field order.
    """
    key = ""
    if ref.entity_id is not None:
        key += ref.entity_id + KEY_SEPARATOR
    if ref.component_name is not None:
        key += ref.component_name + KEY_SEPARATOR
    key += extract_external_id(ref) + KEY_SEPARATOR
    if ref.property_name is not None:
        key += ref.property_name
    return key

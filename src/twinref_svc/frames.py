"""Display conversion - resolved references to columnar frames."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .catalog.types import ResolvedReference


@dataclass(frozen=True, slots=True)
class DataLink:
    """Clickable link attached to a field's values."""
    title: str
    url: str
    target_blank: bool = False


# Link to the cell's own text; used for URL-valued string properties
URL_VALUE_LINK = DataLink(title="Link", url="${__value.text}", target_blank=True)


@dataclass
class FrameField:
    name: str
    values: list[Any] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)
    links: list[DataLink] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "values": self.values,
            "labels": self.labels,
            "links": [
                {"title": link.title, "url": link.url, "target_blank": link.target_blank}
                for link in self.links
            ],
        }


@dataclass
class Frame:
    name: str
    fields: list[FrameField] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "fields": [f.to_dict() for f in self.fields]}


def to_frame(resolved: ResolvedReference) -> Frame:
    """
    Build a time/value frame for one resolved reference.

    The frame is named by the composite key. String values that look like
    URLs get a data link on the value field.
    """
    ref = resolved.entity_property_reference
    labels = {
        "entity_id": ref.entity_id or "",
        "component_name": ref.component_name or "",
        "entity_name": resolved.entity_name,
    }

    time_field = FrameField(name="time", values=[v.time for v in resolved.values])
    value_field = FrameField(
        name=ref.property_name or "value",
        values=[v.value.to_python() for v in resolved.values],
        labels=labels,
    )
    if resolved.values and resolved.values[0].value.is_url():
        value_field.links.append(URL_VALUE_LINK)

    return Frame(name=resolved.key, fields=[time_field, value_field])

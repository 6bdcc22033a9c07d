"""Tests for display conversion."""

from twinref_svc.catalog.types import (
    DataValue,
    EntityPropertyReference,
    PropertyValue,
    ResolvedReference,
    ValueKind,
)
from twinref_svc.frames import URL_VALUE_LINK, to_frame


def resolved_with(values) -> ResolvedReference:
    return ResolvedReference(
        values=tuple(PropertyValue(time=f"t{i}", value=v) for i, v in enumerate(values)),
        entity_property_reference=EntityPropertyReference(
            entity_id="e1",
            component_name="camera",
            external_id_property={"cameraId": "cam-7"},
            property_name="stream",
        ),
        entity_name="Line 1",
    )


class TestToFrame:
    def test_fields_and_labels(self):
        frame = to_frame(resolved_with([DataValue(kind=ValueKind.DOUBLE, value=1.5)]))

        assert frame.name == "e1_camera_cam-7_stream"
        time_field, value_field = frame.fields
        assert time_field.values == ["t0"]
        assert value_field.name == "stream"
        assert value_field.values == [1.5]
        assert value_field.labels == {
            "entity_id": "e1",
            "component_name": "camera",
            "entity_name": "Line 1",
        }
        assert value_field.links == []

    def test_url_values_get_link(self):
        frame = to_frame(resolved_with([DataValue.string("rtsp://camera/7")]))

        assert frame.fields[1].links == [URL_VALUE_LINK]
        assert frame.to_dict()["fields"][1]["links"][0]["url"] == "${__value.text}"

    def test_plain_strings_get_no_link(self):
        frame = to_frame(resolved_with([DataValue.string("idle")]))
        assert frame.fields[1].links == []

    def test_empty_values(self):
        frame = to_frame(resolved_with([]))
        assert frame.fields[0].values == []
        assert frame.fields[1].links == []

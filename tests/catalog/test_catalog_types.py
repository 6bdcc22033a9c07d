"""Tests for catalog payload parsing and tagged values."""

from twinref_svc.catalog.types import (
    ComponentDefinition,
    DataValue,
    EntityPropertyReference,
    EntitySummary,
    PropertyValueBatch,
    ResolvedReference,
    ValueKind,
)

from factories import make_batch, sensor_component


class TestDataValue:
    def test_string_payload(self):
        value = DataValue.from_payload({"stringValue": "hello"})
        assert value.kind == ValueKind.STRING
        assert value.is_string
        assert value.as_string() == "hello"

    def test_double_is_not_string(self):
        value = DataValue.from_payload({"doubleValue": 1.5})
        assert value.kind == ValueKind.DOUBLE
        assert not value.is_string
        assert value.as_string() is None

    def test_empty_payload_is_null(self):
        assert DataValue.from_payload(None).kind == ValueKind.NULL
        assert DataValue.from_payload({}).kind == ValueKind.NULL

    def test_url_detection(self):
        assert DataValue.string("https://example.com/video").is_url()
        assert not DataValue.string("plain text").is_url()

    def test_non_string_is_never_url(self):
        assert not DataValue(kind=ValueKind.DOUBLE, value=3.0).is_url()

    def test_nested_list_and_map(self):
        value = DataValue.from_payload({
            "listValue": [{"integerValue": 1}, {"stringValue": "a"}],
        })
        assert value.to_python() == [1, "a"]

        value = DataValue.from_payload({"mapValue": {"k": {"booleanValue": True}}})
        assert value.to_python() == {"k": True}


class TestPayloadParsing:
    def test_history_batch(self):
        batch = PropertyValueBatch.from_payload(make_batch("ext-1", "temperature", [1.0, 2.0]))

        ref = batch.entity_property_reference
        assert ref.entity_id is None
        assert ref.component_name is None
        assert ref.external_id_property == {"sensorId": "ext-1"}
        assert ref.property_name == "temperature"
        assert [v.value.to_python() for v in batch.values] == [1.0, 2.0]

    def test_entity_summary(self):
        summary = EntitySummary.from_payload({
            "entityId": "e1",
            "entityName": "Boiler",
            "status": {"state": "ACTIVE"},
        })
        assert summary.entity_id == "e1"
        assert summary.entity_name == "Boiler"
        assert summary.status == "ACTIVE"

    def test_component_definition(self):
        component = ComponentDefinition.from_payload("s", sensor_component("tempSensor", "ext-42"))

        assert component.component_name == "tempSensor"
        assert component.component_type_id == "com.example.sensor"
        flagged = [(p.name, p.value.as_string()) for p in component.properties if p.is_external_id]
        assert flagged == [("sensorId", "ext-42")]

    def test_component_name_falls_back_to_map_key(self):
        component = ComponentDefinition.from_payload("fromKey", {"componentTypeId": "t"})
        assert component.component_name == "fromKey"
        assert component.properties == ()


class TestResolvedReference:
    def test_key_and_dict(self):
        resolved = ResolvedReference(
            values=(),
            entity_property_reference=EntityPropertyReference(
                entity_id="e1",
                component_name="tempSensor",
                external_id_property={"sensorId": "ext-42"},
                property_name="temperature",
            ),
            entity_name="Boiler",
        )

        assert resolved.key == "e1_tempSensor_ext-42_temperature"
        d = resolved.to_dict()
        assert d["entity_name"] == "Boiler"
        assert d["entity_property_reference"]["component_name"] == "tempSensor"
        assert d["values"] == []

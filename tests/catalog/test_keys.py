"""Tests for composite keys and external id extraction."""

import pytest

from twinref_svc.catalog.keys import derive_composite_key, extract_external_id
from twinref_svc.catalog.types import EntityPropertyReference


@pytest.fixture
def full_ref() -> EntityPropertyReference:
    return EntityPropertyReference(
        entity_id="e1",
        component_name="tempSensor",
        external_id_property={"sensorId": "ext-42"},
        property_name="temperature",
    )


class TestExtractExternalId:
    def test_single_entry(self, full_ref):
        assert extract_external_id(full_ref) == "ext-42"

    def test_empty_mapping(self):
        assert extract_external_id(EntityPropertyReference()) == ""

    def test_first_entry_wins(self):
        ref = EntityPropertyReference(external_id_property={"a": "first", "b": "second"})

        assert extract_external_id(ref) == "first"
        # Same answer every call for the same input order
        assert extract_external_id(ref) == extract_external_id(ref)

    def test_order_of_mapping_matters(self):
        ref = EntityPropertyReference(external_id_property={"b": "second", "a": "first"})
        assert extract_external_id(ref) == "second"


class TestDeriveCompositeKey:
    def test_all_fields(self, full_ref):
        assert derive_composite_key(full_ref) == "e1_tempSensor_ext-42_temperature"

    def test_deterministic(self, full_ref):
        assert derive_composite_key(full_ref) == derive_composite_key(full_ref)

    @pytest.mark.parametrize("field, value", [
        ("entity_id", "e2"),
        ("component_name", "otherSensor"),
        ("external_id_property", {"sensorId": "ext-43"}),
        ("property_name", "pressure"),
    ])
    def test_any_field_change_changes_key(self, full_ref, field, value):
        changed = EntityPropertyReference(**{**full_ref.to_dict(), field: value})
        assert derive_composite_key(changed) != derive_composite_key(full_ref)

    def test_order_sensitive(self):
        a = EntityPropertyReference(entity_id="x", component_name="y")
        b = EntityPropertyReference(entity_id="y", component_name="x")
        assert derive_composite_key(a) != derive_composite_key(b)

    def test_history_reference_without_entity(self):
        ref = EntityPropertyReference(
            external_id_property={"sensorId": "ext-42"},
            property_name="temperature",
        )
        assert derive_composite_key(ref) == "ext-42_temperature"

    def test_empty_reference(self):
        # The external id always contributes its separator
        assert derive_composite_key(EntityPropertyReference()) == "_"

    def test_empty_strings_still_contribute_separator(self):
        ref = EntityPropertyReference(entity_id="e1", component_name="", property_name="p")
        assert derive_composite_key(ref) == "e1___p"

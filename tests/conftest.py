"""Shared test fixtures for twin reference tests.

The fixture mirrors the twin service payload shape: three history batches
reported against external ids, and a catalog where each external id is
owned by one sensor component.
"""

import pytest

from factories import SENSOR_TYPE, make_batch, make_entity, sensor_component
from twinref_svc.adapters.static import StaticTwinClient
from twinref_svc.config import ResolverConfig
from twinref_svc.query import TwinQuery
from twinref_svc.resolver import ReferenceResolver


@pytest.fixture
def fixture_data() -> dict:
    return {
        "property_values": [
            make_batch("ext-1", "temperature", [20.5, 21.0]),
            make_batch("ext-2", "temperature", [30.0]),
            make_batch("ext-3", "temperature", [40.0, 41.5, 42.0]),
        ],
        "entities": [
            make_entity("e1", "Boiler", {"boilerSensor": sensor_component("boilerSensor", "ext-1")}),
            make_entity("e2", "Pump", {"pumpSensor": sensor_component("pumpSensor", "ext-2")}),
            make_entity("e3", "Valve", {"valveSensor": sensor_component("valveSensor", "ext-3")}),
        ],
    }


@pytest.fixture
def static_client(fixture_data) -> StaticTwinClient:
    return StaticTwinClient(fixture=fixture_data)


@pytest.fixture
def resolver(static_client) -> ReferenceResolver:
    return ReferenceResolver(client=static_client, config=ResolverConfig())


@pytest.fixture
def query() -> TwinQuery:
    return TwinQuery(
        workspace_id="factory",
        entity_id="site-entity",
        component_type_id=SENSOR_TYPE,
        properties=("temperature",),
    )

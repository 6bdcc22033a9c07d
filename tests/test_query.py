"""Tests for query construction steps."""

from datetime import datetime, timezone

from twinref_svc.query import ListEntitiesFilter, TwinQuery, detail_query, search_query


class TestSearchQuery:
    def test_clears_entity_specific_fields(self, query):
        search = search_query(query, "ext-42")

        assert search.entity_id == ""
        assert search.properties == ()
        assert search.component_type_id == ""
        assert search.list_entities_filter == (ListEntitiesFilter(external_id="ext-42"),)
        assert search.workspace_id == query.workspace_id

    def test_does_not_touch_original(self, query):
        search_query(query, "ext-42")

        assert query.entity_id == "site-entity"
        assert query.properties == ("temperature",)
        assert query.list_entities_filter == ()


class TestDetailQuery:
    def test_sets_entity(self, query):
        detail = detail_query(search_query(query, "ext-42"), "e1")

        assert detail.entity_id == "e1"
        assert detail.list_entities_filter == (ListEntitiesFilter(external_id="ext-42"),)


class TestFromDict:
    def test_parses_times_and_filters(self):
        q = TwinQuery.from_dict({
            "workspace_id": "ws",
            "properties": ["a", "b"],
            "start_time": "2026-01-01T00:00:00Z",
            "list_entities_filter": [{"external_id": "x"}],
        })

        assert q.workspace_id == "ws"
        assert q.properties == ("a", "b")
        assert q.start_time == datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert q.end_time is None
        assert q.list_entities_filter[0].external_id == "x"


class TestListEntitiesFilter:
    def test_payload(self):
        assert ListEntitiesFilter(external_id="x").to_payload() == {"externalId": "x"}
        assert ListEntitiesFilter(parent_entity_id="p").to_payload() == {"parentEntityId": "p"}
        assert ListEntitiesFilter(component_type_id="t").to_payload() == {"componentTypeId": "t"}

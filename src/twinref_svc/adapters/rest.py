"""REST client for the twin directory and history service."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..catalog.types import ComponentDefinition, EntitySummary, PropertyValueBatch
from ..query import TwinQuery
from .base import (
    AdapterConnectionError,
    AdapterError,
    AdapterNotFoundError,
    AdapterQueryError,
    TwinServiceClient,
)


logger = logging.getLogger(__name__)

# Safety limit on followed pagination tokens per call
MAX_PAGES = 50


@dataclass
class RestTwinClient(TwinServiceClient):
    """
    Client for the twin service REST API.

    Config:
        base_url: Service endpoint (e.g. https://api.iottwinmaker.us-east-1.amazonaws.com)
        workspace_id: Default workspace when the query carries none
        auth_type: none | bearer | basic | api_key
        auth_config: Auth-specific config (token, username/password, key/header)
        timeout: Request timeout in seconds
        headers: Additional headers
    """
    base_url: str
    workspace_id: str = ""
    auth_type: str = "none"
    auth_config: dict[str, Any] = field(default_factory=dict)
    timeout: float = 30.0
    headers: dict[str, str] = field(default_factory=dict)

    # Injected transport (tests use httpx.MockTransport)
    transport: httpx.AsyncBaseTransport | None = None

    _client: httpx.AsyncClient | None = field(default=None, init=False, repr=False)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Content-Type": "application/json", **self.headers}
            self._apply_auth(headers)
            self._client = httpx.AsyncClient(
                base_url=self.base_url.rstrip("/"),
                headers=headers,
                timeout=self.timeout,
                transport=self.transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _apply_auth(self, headers: dict) -> None:
        """Apply authentication to headers."""
        if self.auth_type == "bearer":
            token = self.auth_config.get("token")
            if token:
                headers["Authorization"] = f"Bearer {token}"
        elif self.auth_type == "api_key":
            key = self.auth_config.get("key")
            header_name = self.auth_config.get("header", "X-API-Key")
            if key:
                headers[header_name] = key
        elif self.auth_type == "basic":
            username = self.auth_config.get("username", "")
            password = self.auth_config.get("password", "")
            creds = base64.b64encode(f"{username}:{password}".encode()).decode()
            headers["Authorization"] = f"Basic {creds}"

    def _workspace_path(self, query: TwinQuery) -> str:
        workspace_id = query.workspace_id or self.workspace_id
        if not workspace_id:
            raise AdapterQueryError("workspace_id is required")
        return f"/workspaces/{workspace_id}"

    async def _request(self, method: str, path: str, body: dict | None = None) -> dict[str, Any]:
        client = self._get_client()
        try:
            response = await client.request(method, path, json=body)
        except httpx.ConnectError as e:
            raise AdapterConnectionError(f"Failed to connect to {self.base_url}: {e}") from e
        except httpx.TimeoutException as e:
            raise AdapterError(f"Request timeout: {path}") from e
        except httpx.HTTPError as e:
            raise AdapterError(f"Request failed: {e}") from e

        if response.status_code == 404:
            raise AdapterNotFoundError(f"Resource not found: {path}")
        if response.status_code >= 400:
            raise AdapterQueryError(
                f"Twin service error: {response.status_code} - {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise AdapterQueryError(f"Invalid JSON from {path}: {e}") from e
        if not isinstance(data, dict):
            raise AdapterQueryError(f"Malformed response from {path}: expected an object")
        return data

    async def _paginate(self, path: str, body: dict, items_key: str) -> list[dict]:
        items: list[dict] = []
        next_token = body.get("nextToken")
        for _page in range(MAX_PAGES):
            page_body = {**body, "nextToken": next_token} if next_token else body
            data = await self._request("POST", path, page_body)
            items.extend(data.get(items_key) or [])
            next_token = data.get("nextToken")
            if not next_token:
                break
        else:
            logger.warning(f"Stopped following {path} after {MAX_PAGES} pages")
        return items

    async def get_property_value_history(self, query: TwinQuery) -> list[PropertyValueBatch]:
        body: dict[str, Any] = {
            "selectedProperties": list(query.properties),
            "orderByTime": query.order,
        }
        if query.entity_id:
            body["entityId"] = query.entity_id
        if query.component_name:
            body["componentName"] = query.component_name
        if query.component_type_id:
            body["componentTypeId"] = query.component_type_id
        if query.start_time:
            body["startTime"] = query.start_time.isoformat()
        if query.end_time:
            body["endTime"] = query.end_time.isoformat()
        if query.property_filter:
            body["propertyFilters"] = [
                {
                    "propertyName": f.property_name,
                    "operator": f.operator,
                    "value": {"stringValue": str(f.value)},
                }
                for f in query.property_filter
            ]
        if query.max_results:
            body["maxResults"] = query.max_results
        if query.next_token:
            body["nextToken"] = query.next_token

        path = f"{self._workspace_path(query)}/entity-properties/history"
        raw = await self._paginate(path, body, "propertyValues")
        try:
            return [PropertyValueBatch.from_payload(item) for item in raw]
        except (KeyError, TypeError, AttributeError) as e:
            raise AdapterQueryError(f"Malformed response from {path}: {e!r}") from e

    async def list_entities(self, query: TwinQuery) -> list[EntitySummary]:
        body: dict[str, Any] = {
            "filters": [f.to_payload() for f in query.list_entities_filter],
        }
        if query.max_results:
            body["maxResults"] = query.max_results

        path = f"{self._workspace_path(query)}/entities-list"
        raw = await self._paginate(path, body, "entitySummaries")
        try:
            return [EntitySummary.from_payload(item) for item in raw]
        except (KeyError, TypeError, AttributeError) as e:
            raise AdapterQueryError(f"Malformed response from {path}: {e!r}") from e

    async def get_entity(self, query: TwinQuery) -> list[ComponentDefinition]:
        if not query.entity_id:
            raise AdapterQueryError("entity_id is required for get_entity")
        path = f"{self._workspace_path(query)}/entities/{query.entity_id}"
        data = await self._request("GET", path)
        try:
            components = data.get("components") or {}
            return [ComponentDefinition.from_payload(name, c) for name, c in components.items()]
        except (KeyError, TypeError, AttributeError) as e:
            raise AdapterQueryError(f"Malformed response from {path}: {e!r}") from e

    async def health_check(self) -> bool:
        """Check if the workspace is reachable."""
        try:
            await self._request("GET", f"/workspaces/{self.workspace_id}")
            return True
        except AdapterError:
            return False

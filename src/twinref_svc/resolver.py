"""Reference resolver - maps externally identified history onto catalog entities.

The history service reports values against an external identifier only.
There is no direct "external id -> owning component" lookup, so each
value batch is resolved with two further calls:

1. get_property_value_history(query)       -> value batches (fatal on error)
2. list_entities(external id filter)       -> entities carrying the id
3. get_entity(first hit)                   -> components; the one whose
   external-id property equals the id names the component

Steps 2 and 3 fail per batch: the error becomes a warning Notice and the
remaining batches are still resolved.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, TypeVar

from .adapters.base import AdapterError, TwinServiceClient
from .catalog.keys import extract_external_id
from .catalog.types import (
    ComponentDefinition,
    EntityPropertyReference,
    PropertyValueBatch,
    ResolvedReference,
)
from .config import ResolverConfig
from .notices import Notice
from .query import TwinQuery, detail_query, search_query


logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResolutionError(Exception):
    """Raised when reference resolution cannot produce any result."""
    pass


class HistoryFetchError(ResolutionError):
    """Raised when the initial history fetch fails."""
    pass


@dataclass
class ResolveResult:
    """
    Best-effort resolution output.

    resolved keeps input batch order. Batches that found no catalog entity
    or whose lookups failed are absent; failures are listed in notices.
    """
    resolved: list[ResolvedReference] = field(default_factory=list)
    notices: list[Notice] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "resolved": [r.to_dict() for r in self.resolved],
            "notices": [n.to_dict() for n in self.notices],
        }


def find_component_name(
    components: list[ComponentDefinition],
    component_type_id: str,
    external_id: str,
) -> str:
    """
    Name of the component that owns external_id, or "".

    Only the first component of the requested type is inspected.
    """
    for component in components:
        if component.component_type_id != component_type_id:
            continue
        for prop in component.properties:
            if prop.is_external_id and prop.value is not None:
                if prop.value.as_string() == external_id:
                    return component.component_name
        break
    return ""


@dataclass
class ReferenceResolver:
    """
    Resolves value batches reported against external ids into
    fully qualified entity/component references.

    Stateless across calls; nothing is cached.
    """
    client: TwinServiceClient
    config: ResolverConfig = field(default_factory=ResolverConfig)

    async def resolve_batch(self, query: TwinQuery) -> ResolveResult:
        """
        Run the resolution pipeline for a history query.

        Raises:
            HistoryFetchError: If the history fetch fails. No partial data.
        """
        try:
            batches = await self._call(self.client.get_property_value_history(query))
        except (AdapterError, asyncio.TimeoutError) as e:
            logger.warning(f"History fetch failed for entity '{query.entity_id}': {e}")
            raise HistoryFetchError(_error_text(e, "get_property_value_history")) from e

        result = ResolveResult()
        if not batches:
            return result

        semaphore = asyncio.Semaphore(max(1, self.config.max_concurrency))
        outcomes = await asyncio.gather(*(
            self._resolve_one(index, batch, query, semaphore)
            for index, batch in enumerate(batches)
        ))

        for resolved, notices in outcomes:
            if resolved is not None:
                result.resolved.append(resolved)
            result.notices.extend(notices)

        logger.debug(
            f"Resolved {len(result.resolved)}/{len(batches)} batches "
            f"({len(result.notices)} notices)"
        )
        return result

    async def _resolve_one(
        self,
        index: int,
        batch: PropertyValueBatch,
        query: TwinQuery,
        semaphore: asyncio.Semaphore,
    ) -> tuple[ResolvedReference | None, list[Notice]]:
        async with semaphore:
            return await self._resolve(index, batch, query)

    async def _resolve(
        self,
        index: int,
        batch: PropertyValueBatch,
        query: TwinQuery,
    ) -> tuple[ResolvedReference | None, list[Notice]]:
        notices: list[Notice] = []
        reference = batch.entity_property_reference
        external_id = extract_external_id(reference)

        search = search_query(query, external_id)
        try:
            summaries = await self._call(self.client.list_entities(search))
        except (AdapterError, asyncio.TimeoutError) as e:
            logger.warning(f"Entity search failed for external id '{external_id}': {e}")
            notices.append(Notice.warning(_error_text(e, "list_entities"), index))
            return None, notices

        if not summaries:
            if self.config.verbose_notices:
                notices.append(Notice.info(f"No entity found for external id '{external_id}'", index))
            return None, notices

        # First hit wins; the service's ordering is authoritative
        summary = summaries[0]
        try:
            components = await self._call(self.client.get_entity(detail_query(search, summary.entity_id)))
        except (AdapterError, asyncio.TimeoutError) as e:
            logger.warning(f"Entity detail failed for '{summary.entity_id}': {e}")
            notices.append(Notice.warning(_error_text(e, "get_entity"), index))
            return None, notices

        component_name = find_component_name(components, query.component_type_id, external_id)
        if not component_name and self.config.verbose_notices:
            notices.append(Notice.info(
                f"No '{query.component_type_id}' component of '{summary.entity_id}' "
                f"matches external id '{external_id}'",
                index,
            ))

        resolved = ResolvedReference(
            values=batch.values,
            entity_property_reference=EntityPropertyReference(
                entity_id=summary.entity_id,
                component_name=component_name,
                external_id_property=dict(reference.external_id_property),
                property_name=reference.property_name,
            ),
            entity_name=summary.entity_name,
        )
        return resolved, notices

    async def _call(self, awaitable: Awaitable[T]) -> T:
        timeout = self.config.call_timeout_seconds
        if timeout and timeout > 0:
            return await asyncio.wait_for(awaitable, timeout=timeout)
        return await awaitable


def _error_text(error: Exception, operation: str) -> str:
    text = str(error)
    if isinstance(error, asyncio.TimeoutError) and not text:
        return f"{operation} timed out"
    return text

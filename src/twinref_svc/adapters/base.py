"""Base client interface for the twin directory and history service."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..catalog.types import ComponentDefinition, EntitySummary, PropertyValueBatch
from ..query import TwinQuery


class AdapterError(Exception):
    """Base exception for service client errors."""
    pass


class AdapterConnectionError(AdapterError):
    """Raised when the service cannot be reached."""
    pass


class AdapterQueryError(AdapterError):
    """Raised when the service rejects or fails a request."""
    pass


class AdapterNotFoundError(AdapterError):
    """Raised when a requested entity or workspace does not exist."""
    pass


class TwinServiceClient(ABC):
    """
    Abstract client for the remote twin service.

    Three independent operations back the resolution pipeline. Implementations
    own transport concerns (auth, pagination, retries); the resolver only
    sees results or AdapterError.
    """

    @abstractmethod
    async def get_property_value_history(self, query: TwinQuery) -> list[PropertyValueBatch]:
        """
        Fetch time-series values for the query's properties.

        Raises:
            AdapterError: On fetch failure
        """
        ...

    @abstractmethod
    async def list_entities(self, query: TwinQuery) -> list[EntitySummary]:
        """
        Search the catalog using query.list_entities_filter.

        Results keep the service's ordering.
        """
        ...

    @abstractmethod
    async def get_entity(self, query: TwinQuery) -> list[ComponentDefinition]:
        """Fetch every component definition of query.entity_id."""
        ...

    async def health_check(self) -> bool:
        """
        Check if the service is reachable.

        Default returns True. Override for actual health checks.
        """
        return True

    async def close(self) -> None:
        """Release transport resources."""
        return None

"""Twin service clients."""

from .base import (
    AdapterConnectionError,
    AdapterError,
    AdapterNotFoundError,
    AdapterQueryError,
    TwinServiceClient,
)
from .rest import RestTwinClient
from .static import StaticTwinClient

__all__ = [
    "AdapterConnectionError",
    "AdapterError",
    "AdapterNotFoundError",
    "AdapterQueryError",
    "TwinServiceClient",
    "RestTwinClient",
    "StaticTwinClient",
]

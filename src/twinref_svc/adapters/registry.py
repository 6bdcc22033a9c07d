"""Client factory - maps configured client types to implementations."""

from __future__ import annotations

from ..config import ServiceConfig
from .base import AdapterError, TwinServiceClient
from .rest import RestTwinClient
from .static import StaticTwinClient


def create_client(config: ServiceConfig) -> TwinServiceClient:
    """
    Build the twin service client described by config.

    Raises:
        AdapterError: If the client type is unknown or misconfigured
    """
    if config.client_type == "rest":
        return RestTwinClient(
            base_url=config.base_url,
            workspace_id=config.workspace_id,
            auth_type=config.auth_type,
            auth_config=dict(config.auth_config),
            timeout=config.timeout,
            headers=dict(config.headers),
        )
    if config.client_type == "static":
        if not config.fixture_file:
            raise AdapterError("fixture_file is required for the static client")
        return StaticTwinClient.from_yaml(config.fixture_file)
    raise AdapterError(f"Unknown client type: {config.client_type}")

"""Configuration for the twin reference service."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ServerConfig:
    """HTTP server configuration."""
    host: str = "0.0.0.0"
    port: int = 8060
    workers: int = 1
    reload: bool = False


@dataclass
class ServiceConfig:
    """Remote twin service connection."""
    # rest | static
    client_type: str = "rest"
    base_url: str = field(
        default_factory=lambda: os.environ.get("TWINREF_SERVICE_URL", "http://localhost:8080")
    )
    workspace_id: str = field(
        default_factory=lambda: os.environ.get("TWINREF_WORKSPACE_ID", "")
    )
    auth_type: str = "none"  # none | bearer | basic | api_key
    auth_config: dict[str, Any] = field(default_factory=dict)
    timeout: float = 30.0
    headers: dict[str, str] = field(default_factory=dict)

    # YAML fixture for client_type=static
    fixture_file: str | None = None

    def __post_init__(self):
        token = os.environ.get("TWINREF_TOKEN")
        if token and self.auth_type == "none":
            self.auth_type = "bearer"
            self.auth_config = {"token": token}


@dataclass
class ResolverConfig:
    """Reference resolution behaviour."""
    # Batches resolved at once (1 = strictly sequential)
    max_concurrency: int = 1

    # Per remote call timeout in seconds (0 = none)
    call_timeout_seconds: float = 0.0

    # Emit info notices for batches dropped or left unmatched
    verbose_notices: bool = False


@dataclass
class PolicyConfig:
    """Access policy rendering."""
    # Custom policy template file; None uses the built-in template
    template_file: str | None = None


@dataclass
class Config:
    """Main configuration container."""
    server: ServerConfig = field(default_factory=ServerConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    policy: PolicyConfig = field(default_factory=PolicyConfig)

    @classmethod
    def from_dict(cls, data: dict) -> Config:
        """Create config from dictionary."""
        return cls(
            server=ServerConfig(**data.get("server", {})),
            service=ServiceConfig(**data.get("service", {})),
            resolver=ResolverConfig(**data.get("resolver", {})),
            policy=PolicyConfig(**data.get("policy", {})),
        )

    @classmethod
    def from_yaml(cls, path: str) -> Config:
        """Load config from YAML file."""
        import yaml
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str) -> Config:
        """Load config from JSON file."""
        import json
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

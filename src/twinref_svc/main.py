"""FastAPI application - Twin Reference Resolution Service.

Resolves history reported against external identifiers into entity and
component references, and renders the dashboard access policy.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .adapters.base import TwinServiceClient
from .adapters.registry import create_client
from .config import Config
from .frames import to_frame
from .policy import PolicyTemplateError, WorkspaceInfo, build_policy, load_policy_template, render_policy
from .query import TwinQuery
from .resolver import HistoryFetchError, ReferenceResolver, ResolutionError


logger = logging.getLogger(__name__)


# Request / response models
class ListEntitiesFilterModel(BaseModel):
    parent_entity_id: str | None = None
    component_type_id: str | None = None
    external_id: str | None = None


class PropertyFilterModel(BaseModel):
    property_name: str
    operator: str
    value: Any = None


class ResolveRequest(BaseModel):
    """History query whose batches should be resolved."""
    workspace_id: str = ""
    entity_id: str = ""
    component_name: str = ""
    component_type_id: str = ""
    properties: list[str] = []
    property_filter: list[PropertyFilterModel] = []
    list_entities_filter: list[ListEntitiesFilterModel] = []
    start_time: str | None = None
    end_time: str | None = None
    order: str = "ASCENDING"
    max_results: int | None = None
    include_frames: bool = False


class NoticeModel(BaseModel):
    severity: str
    text: str
    batch_index: int | None = None


class ResolveResponse(BaseModel):
    resolved: list[dict[str, Any]]
    notices: list[NoticeModel]
    frames: list[dict[str, Any]] | None = None


class WorkspaceRequest(BaseModel):
    workspace_id: str
    arn: str
    s3_location: str


class PolicyResponse(BaseModel):
    workspace_id: str
    policy: str


class HealthResponse(BaseModel):
    status: str
    service_reachable: bool
    resolver: dict[str, Any]


# Global state (initialized in lifespan)
_config: Config | None = None
_client: TwinServiceClient | None = None
_resolver: ReferenceResolver | None = None


def load_config() -> Config:
    """Config from TWINREF_CONFIG (YAML or JSON) or defaults."""
    path = os.environ.get("TWINREF_CONFIG")
    if not path:
        return Config()
    if path.endswith(".json"):
        return Config.from_json(path)
    return Config.from_yaml(path)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    global _config, _client, _resolver

    logger.info("Starting twin reference service...")

    _config = load_config()
    _client = create_client(_config.service)
    _resolver = ReferenceResolver(client=_client, config=_config.resolver)

    logger.info(
        f"Twin reference service started (client={_config.service.client_type}, "
        f"workspace={_config.service.workspace_id or '-'})"
    )

    yield

    logger.info("Shutting down twin reference service...")
    await _client.close()
    logger.info("Twin reference service stopped")


app = FastAPI(
    title="Twin Reference Resolution Service",
    description="Resolves externally identified property history into entity/component references.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(HistoryFetchError)
async def history_fetch_error_handler(request: Request, exc: HistoryFetchError):
    return JSONResponse(
        status_code=502,
        content={"error": "History fetch failed", "detail": str(exc)},
    )


@app.exception_handler(ResolutionError)
async def resolution_error_handler(request: Request, exc: ResolutionError):
    return JSONResponse(
        status_code=500,
        content={"error": "Resolution error", "detail": str(exc)},
    )


@app.exception_handler(PolicyTemplateError)
async def policy_template_error_handler(request: Request, exc: PolicyTemplateError):
    logger.error(f"Policy template error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Policy template error", "detail": str(exc)},
    )


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    reachable = await _client.health_check() if _client else False
    return HealthResponse(
        status="healthy" if _resolver else "starting",
        service_reachable=reachable,
        resolver={
            "max_concurrency": _resolver.config.max_concurrency,
            "verbose_notices": _resolver.config.verbose_notices,
        } if _resolver else {},
    )


@app.post("/resolve", response_model=ResolveResponse)
async def resolve(request: ResolveRequest):
    """
    Resolve the history batches of a query into entity/component references.

    Partial failures come back as notices next to whatever did resolve.
    """
    if not _resolver:
        raise HTTPException(status_code=503, detail="Service not initialized")

    data = request.model_dump(exclude={"include_frames"})
    try:
        query = TwinQuery.from_dict(data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid query: {e}")

    result = await _resolver.resolve_batch(query)

    return ResolveResponse(
        resolved=[r.to_dict() for r in result.resolved],
        notices=[NoticeModel(**n.to_dict()) for n in result.notices],
        frames=[to_frame(r).to_dict() for r in result.resolved] if request.include_frames else None,
    )


@app.post("/policy", response_model=PolicyResponse)
async def policy(request: WorkspaceRequest):
    """Render the dashboard role's access policy for a workspace."""
    workspace = WorkspaceInfo(
        workspace_id=request.workspace_id,
        arn=request.arn,
        s3_location=request.s3_location,
    )
    template_file = _config.policy.template_file if _config else None
    if template_file:
        document = render_policy(load_policy_template(template_file), workspace)
    else:
        document = build_policy(workspace)
    return PolicyResponse(workspace_id=workspace.workspace_id, policy=document)


def run():
    """Run the service with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config()
    uvicorn.run(
        "twinref_svc.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.reload,
    )


if __name__ == "__main__":
    run()

"""
Resilience router: read-only view of configured instances.

Endpoints:
    GET /resilience/{kind}         Configured instance names for a kind
    GET /resilience/{kind}/{name}  Resolved configuration for one instance

A kind whose endpoint is disabled in settings answers 404.  Unregistered
names return the kind's built-in defaults (``registered: false``); a
dangling ``base_config`` returns 500 with the error body.

Tags:
    api, resilience, configuration, read-only

Doc-Types: API_REFERENCE
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from fastapi import Path as PathParam
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from resilience_config.api.deps import Module
from resilience_config.core.enums import PrimitiveKind
from resilience_config.core.errors import ConfigError
from resilience_config.module import ResilienceModule
from resilience_config.properties.base import ConfigurationProperties

router = APIRouter(prefix="/resilience", tags=["resilience"])


class InstanceListResponse(BaseModel):
    kind: PrimitiveKind
    names: list[str] = Field(description="Configured instance names, sorted")


class ResolvedConfigResponse(BaseModel):
    kind: PrimitiveKind
    name: str
    registered: bool = Field(description="False when built-in defaults were returned")
    base_config: str | None = None
    event_consumer_buffer_size: int
    config: dict[str, Any] = Field(description="Resolved values; durations in seconds")


def _enabled_properties(module: ResilienceModule, kind: PrimitiveKind) -> ConfigurationProperties:
    if not module.settings.endpoints.is_enabled(kind):
        raise HTTPException(status_code=404, detail=f"Endpoint for {kind.value} is disabled")
    return module.settings.properties_for(kind)


@router.get("/{kind}", response_model=InstanceListResponse)
def list_instances(module: Module, kind: PrimitiveKind) -> InstanceListResponse:
    """List the instance names configured for *kind*."""
    properties = _enabled_properties(module, kind)
    return InstanceListResponse(kind=kind, names=sorted(properties.get_instances()))


@router.get("/{kind}/{name}", response_model=ResolvedConfigResponse)
def get_resolved_config(
    module: Module,
    kind: PrimitiveKind,
    name: str = PathParam(..., description="Instance name"),
) -> ResolvedConfigResponse | JSONResponse:
    """Resolve and return the configuration of one instance."""
    properties = _enabled_properties(module, kind)
    try:
        config = properties.create_config(name)
    except ConfigError as error:
        return JSONResponse(status_code=500, content=error.to_dict())

    instance = properties.get_instances().get(name)
    return ResolvedConfigResponse(
        kind=kind,
        name=name,
        registered=instance is not None,
        base_config=instance.base_config if instance is not None else None,
        event_consumer_buffer_size=properties.get_event_consumer_buffer_size(name),
        config=config.to_dict(),
    )

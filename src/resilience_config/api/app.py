"""FastAPI application factory for the resilience endpoints."""

from __future__ import annotations

from fastapi import FastAPI

from resilience_config.api.deps import get_module
from resilience_config.api.routers import router
from resilience_config.module import ResilienceModule


def create_app(
    *,
    module: ResilienceModule | None = None,
    prefix: str = "/actuator",
) -> FastAPI:
    """Build a FastAPI application exposing the resilience router.

    Parameters
    ----------
    module : ResilienceModule | None
        Started module to serve (useful for testing).  When ``None`` the
        cached module from :func:`get_module` is used.
    prefix : str
        Mount prefix for the router.
    """
    app = FastAPI(title="resilience-config")
    app.include_router(router, prefix=prefix)

    if module is not None:
        if not module.started:
            module.start()
        app.state.module = module
        app.dependency_overrides[get_module] = lambda: module

    return app

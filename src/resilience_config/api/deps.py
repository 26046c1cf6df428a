"""
FastAPI dependency injection for the resilience endpoints.

Usage in routers::

    from resilience_config.api.deps import Module

    @router.get("/things")
    def list_things(module: Module):
        ...

Tests and :func:`~resilience_config.api.app.create_app` replace
:func:`get_module` through ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from resilience_config.core.logging import configure_logging
from resilience_config.module import ResilienceModule


@lru_cache(maxsize=1)
def get_module() -> ResilienceModule:
    """Process-wide module built from the cached settings."""
    module = ResilienceModule()
    configure_logging(
        level=module.settings.log_level,
        json_format=module.settings.log_format == "json",
    )
    module.start()
    return module


Module = Annotated[ResilienceModule, Depends(get_module)]

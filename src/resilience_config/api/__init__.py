"""HTTP surface: read-only resilience endpoints (FastAPI)."""

from .app import create_app
from .routers import router

__all__ = ["create_app", "router"]

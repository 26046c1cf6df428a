"""Command-line interface (Typer)."""

from .app import app

__all__ = ["app"]

"""
Loading layer: settings object, TOML files and environment variables.

Quick start::

    from resilience_config.config import get_settings

    settings = get_settings("resilience.toml")
    config = settings.bulkhead.create_config("backendA")
"""

from .settings import (
    EndpointConfig,
    EndpointsConfig,
    ResilienceSettings,
    clear_settings_cache,
    get_settings,
    load_settings,
    read_toml,
)

__all__ = [
    "EndpointConfig",
    "EndpointsConfig",
    "ResilienceSettings",
    "clear_settings_cache",
    "get_settings",
    "load_settings",
    "read_toml",
]

"""
Startup wiring: resolve every configured instance and register it.

:class:`ResilienceModule` holds one :class:`PrimitiveRegistry` and one
:class:`EventConsumerRegistry` per primitive kind.  :meth:`start` walks
every configured instance of every kind, resolves its config, registers
the primitive and, when that kind's endpoint is enabled, creates its
event buffer sized from ``event_consumer_buffer_size`` (default 100).

Configuration errors are logged and re-raised; a dangling ``base_config``
stops startup.

Usage::

    from resilience_config import ResilienceModule, load_settings

    module = ResilienceModule(load_settings("resilience.toml"))
    module.start()
    config = module.registry(PrimitiveKind.BULKHEAD).get("backendA")

    # Or as a context manager:
    with ResilienceModule(settings) as module:
        ...
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from resilience_config.config.settings import ResilienceSettings, get_settings
from resilience_config.core.enums import PrimitiveKind
from resilience_config.core.errors import ConfigError
from resilience_config.core.logging import LogContext, get_logger
from resilience_config.registry import EventConsumerRegistry, PrimitiveRegistry

logger = get_logger(__name__)


class ResilienceModule:
    """Registries for every primitive kind, filled from settings on start.

    Parameters
    ----------
    settings:
        Loaded settings.  Defaults to :func:`get_settings` on first access.
    factories:
        Optional per-kind ``factory(name, config)`` building the primitive.
    """

    def __init__(
        self,
        settings: ResilienceSettings | None = None,
        factories: Mapping[PrimitiveKind, Callable[[str, Any], Any]] | None = None,
    ) -> None:
        self._settings = settings
        self._factories = dict(factories or {})
        self._registries: dict[PrimitiveKind, PrimitiveRegistry] = {}
        self._event_consumers: dict[PrimitiveKind, EventConsumerRegistry] = {}
        self._started = False

    # ── Properties (lazy) ────────────────────────────────────────

    @property
    def settings(self) -> ResilienceSettings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def started(self) -> bool:
        return self._started

    def registry(self, kind: PrimitiveKind) -> PrimitiveRegistry:
        if kind not in self._registries:
            properties = self.settings.properties_for(kind)
            factory = self._factories.get(kind)
            if factory is None:
                self._registries[kind] = PrimitiveRegistry(properties)
            else:
                self._registries[kind] = PrimitiveRegistry(properties, factory)
        return self._registries[kind]

    def event_consumers(self, kind: PrimitiveKind) -> EventConsumerRegistry:
        if kind not in self._event_consumers:
            self._event_consumers[kind] = EventConsumerRegistry()
        return self._event_consumers[kind]

    # ── Lifecycle ────────────────────────────────────────────────

    def start(self) -> None:
        """Resolve and register every configured instance.

        Raises:
            ConfigError: An instance's configuration cannot be resolved.
        """
        for kind, properties in self.settings.iter_properties():
            registry = self.registry(kind)
            endpoint_enabled = self.settings.endpoints.is_enabled(kind)
            with LogContext(kind=kind.value):
                for name in list(properties.get_instances()):
                    try:
                        registry.get_or_create(name)
                    except ConfigError as error:
                        logger.error("configuration_error", instance=name, error=error.to_dict())
                        raise
                    if endpoint_enabled:
                        self.event_consumers(kind).create_event_consumer(
                            name, properties.get_event_consumer_buffer_size(name)
                        )
                    logger.info("primitive_registered", instance=name)
        self._started = True

    def close(self) -> None:
        """Drop every registered primitive and event buffer."""
        for registry in self._registries.values():
            registry.clear()
        self._registries.clear()
        self._event_consumers.clear()
        self._started = False

    def __enter__(self) -> ResilienceModule:
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

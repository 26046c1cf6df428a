"""Primitive Registry: name → resolved primitive, created on first use.

Manifesto:
A primitive (bulkhead, retry ...) is built from its resolved config the
first time its name is asked for, then reused.  Resolution itself never
caches; the registry is the one place that does.

ARCHITECTURE
────────────
::

    PrimitiveRegistry(properties, factory)
      ├── .get_or_create(name)   ─ create_config(name) once, then factory(name, config)
      ├── .register(name, config)─ build from an already-resolved config
      ├── .get(name)             ─ lookup, None if absent
      ├── .names()               ─ registered names
      ├── .remove(name)
      └── .clear()

    EventConsumerRegistry
      ├── .create_event_consumer(name, buffer_size)
      ├── .get_event_consumer(name)
      └── .all_event_consumers()

    CircularEventConsumer      ─ bounded buffer, oldest event dropped first

BEST PRACTICES
──────────────
- Pass an explicit ``factory`` to build real primitives; the default
  stores the resolved config itself.
- All registries are thread-safe (internal RLock).

Related modules:
    properties/base.py - ConfigurationProperties.create_config
    module.py          - fills registries at startup

Tags:
    registry, resilience, event-buffer, thread-safe

Doc-Types:
    api-reference
"""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from resilience_config.core.logging import get_logger
from resilience_config.properties.base import (
    DEFAULT_EVENT_CONSUMER_BUFFER_SIZE,
    ConfigurationProperties,
)

logger = get_logger(__name__)

T = TypeVar("T")
E = TypeVar("E")


def _store_config(name: str, config: Any) -> Any:
    return config


class PrimitiveRegistry(Generic[T]):
    """Registry of named primitives for one kind."""

    def __init__(
        self,
        properties: ConfigurationProperties,
        factory: Callable[[str, Any], T] = _store_config,
    ):
        self._properties = properties
        self._factory = factory
        self._primitives: dict[str, T] = {}
        self._lock = threading.RLock()

    @property
    def properties(self) -> ConfigurationProperties:
        return self._properties

    def get_or_create(self, name: str) -> T:
        """Return the primitive for *name*, resolving its config on first use.

        Unknown names get the kind's built-in defaults.
        """
        with self._lock:
            if name not in self._primitives:
                config = self._properties.create_config(name)
                self._primitives[name] = self._factory(name, config)
            return self._primitives[name]

    def register(self, name: str, config: Any) -> T:
        """Build and store a primitive from an already-resolved config.

        An existing primitive with the same name is kept.
        """
        with self._lock:
            if name not in self._primitives:
                self._primitives[name] = self._factory(name, config)
            return self._primitives[name]

    def get(self, name: str) -> T | None:
        with self._lock:
            return self._primitives.get(name)

    def names(self) -> list[str]:
        with self._lock:
            return list(self._primitives.keys())

    def remove(self, name: str) -> None:
        with self._lock:
            self._primitives.pop(name, None)

    def clear(self) -> None:
        with self._lock:
            self._primitives.clear()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._primitives

    def __len__(self) -> int:
        with self._lock:
            return len(self._primitives)


class CircularEventConsumer(Generic[E]):
    """Keeps the most recent ``buffer_size`` events for one instance."""

    def __init__(self, name: str, buffer_size: int = DEFAULT_EVENT_CONSUMER_BUFFER_SIZE):
        if buffer_size < 1:
            raise ValueError(f"buffer_size must be >= 1, got {buffer_size}")
        self.name = name
        self._events: deque[E] = deque(maxlen=buffer_size)
        self._lock = threading.Lock()

    @property
    def buffer_size(self) -> int:
        return self._events.maxlen or 0

    def consume_event(self, event: E) -> None:
        with self._lock:
            self._events.append(event)

    def get_buffered_events(self) -> list[E]:
        with self._lock:
            return list(self._events)

    def __call__(self, event: E) -> None:
        self.consume_event(event)


class EventConsumerRegistry(Generic[E]):
    """Registry of per-instance event buffers."""

    def __init__(self) -> None:
        self._consumers: dict[str, CircularEventConsumer[E]] = {}
        self._lock = threading.RLock()

    def create_event_consumer(
        self,
        name: str,
        buffer_size: int = DEFAULT_EVENT_CONSUMER_BUFFER_SIZE,
    ) -> CircularEventConsumer[E]:
        """Create (or replace) the buffer for *name*."""
        consumer: CircularEventConsumer[E] = CircularEventConsumer(name, buffer_size)
        with self._lock:
            self._consumers[name] = consumer
        logger.debug("event_consumer_created", instance=name, buffer_size=buffer_size)
        return consumer

    def get_event_consumer(self, name: str) -> CircularEventConsumer[E] | None:
        with self._lock:
            return self._consumers.get(name)

    def all_event_consumers(self) -> list[CircularEventConsumer[E]]:
        with self._lock:
            return list(self._consumers.values())


__all__ = [
    "PrimitiveRegistry",
    "CircularEventConsumer",
    "EventConsumerRegistry",
]

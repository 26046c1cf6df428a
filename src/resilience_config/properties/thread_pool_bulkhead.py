"""
Thread-pool bulkhead configuration.

The pool sizing fields live on a nested :class:`ThreadPoolProperties`
group.  Each nested field is resolved on its own through the same
defaults → shared → instance chain, so a template can fix the queue
capacity while the instance only changes the core size::

    [thread_pool_bulkhead.configs.default.thread_pool_properties]
    core_thread_pool_size = 1
    queue_capacity = 1

    [thread_pool_bulkhead.instances.backendA]
    base_config = "default"

    [thread_pool_bulkhead.instances.backendA.thread_pool_properties]
    core_thread_pool_size = 3      # queue_capacity stays 1
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field

from resilience_config.core.enums import PrimitiveKind

from .base import (
    ConfigurationProperties,
    Duration,
    InstanceProperties,
    ResolvedConfig,
    _field_aliases,
)
from .resolver import ConfigKind, field_specs, nested

DEFAULT_QUEUE_CAPACITY = 100
DEFAULT_KEEP_ALIVE_DURATION = timedelta(milliseconds=20)
DEFAULT_WRITABLE_STACK_TRACE_ENABLED = True


def default_max_thread_pool_size() -> int:
    return os.cpu_count() or 1


def default_core_thread_pool_size() -> int:
    processors = os.cpu_count() or 1
    return processors - 1 if processors > 1 else 1


@dataclass(frozen=True)
class ThreadPoolBulkheadConfig(ResolvedConfig):
    """Resolved thread-pool bulkhead configuration."""

    core_thread_pool_size: int = field(default_factory=default_core_thread_pool_size)
    max_thread_pool_size: int = field(default_factory=default_max_thread_pool_size)
    queue_capacity: int = DEFAULT_QUEUE_CAPACITY
    keep_alive_duration: timedelta = DEFAULT_KEEP_ALIVE_DURATION
    writable_stack_trace_enabled: bool = DEFAULT_WRITABLE_STACK_TRACE_ENABLED

    def __post_init__(self) -> None:
        self._require(
            self.core_thread_pool_size >= 1,
            "core_thread_pool_size",
            "core_thread_pool_size must be a positive integer value >= 1",
        )
        self._require(
            self.max_thread_pool_size >= 1,
            "max_thread_pool_size",
            "max_thread_pool_size must be a positive integer value >= 1",
        )
        self._require(
            self.max_thread_pool_size >= self.core_thread_pool_size,
            "max_thread_pool_size",
            "max_thread_pool_size must be greater than or equal to core_thread_pool_size",
        )
        self._require(
            self.queue_capacity >= 1,
            "queue_capacity",
            "queue_capacity must be a positive integer value >= 1",
        )
        self._require(
            self.keep_alive_duration >= timedelta(0),
            "keep_alive_duration",
            "keep_alive_duration must be a positive duration or zero",
        )


class ThreadPoolProperties(BaseModel):
    """Nested pool sizing overrides; every field optional."""

    model_config = ConfigDict(
        alias_generator=AliasGenerator(validation_alias=_field_aliases),
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid",
    )

    core_thread_pool_size: int | None = None
    max_thread_pool_size: int | None = None
    queue_capacity: int | None = None
    keep_alive_duration: Duration | None = None
    keep_alive_time: int | None = Field(default=None, description="Legacy: keep-alive in milliseconds")

    def get_keep_alive_duration(self) -> timedelta | None:
        if self.keep_alive_duration is not None:
            return self.keep_alive_duration
        if self.keep_alive_time is not None:
            return timedelta(milliseconds=self.keep_alive_time)
        return None


class ThreadPoolBulkheadInstanceProperties(InstanceProperties):
    """Overrides for one thread-pool bulkhead instance or shared template."""

    writable_stack_trace_enabled: bool | None = None
    thread_pool_properties: ThreadPoolProperties | None = None


def _keep_alive(properties: ThreadPoolBulkheadInstanceProperties) -> timedelta | None:
    pool = properties.thread_pool_properties
    return None if pool is None else pool.get_keep_alive_duration()


THREAD_POOL_BULKHEAD = ConfigKind(
    kind=PrimitiveKind.THREAD_POOL_BULKHEAD,
    config_cls=ThreadPoolBulkheadConfig,
    fields=field_specs(
        ThreadPoolBulkheadConfig,
        {
            "core_thread_pool_size": nested("thread_pool_properties", "core_thread_pool_size"),
            "max_thread_pool_size": nested("thread_pool_properties", "max_thread_pool_size"),
            "queue_capacity": nested("thread_pool_properties", "queue_capacity"),
            "keep_alive_duration": _keep_alive,
        },
    ),
)


class ThreadPoolBulkheadConfigurationProperties(
    ConfigurationProperties[ThreadPoolBulkheadInstanceProperties]
):
    """Thread-pool bulkhead instances and shared configs."""

    kind = THREAD_POOL_BULKHEAD

    def create_thread_pool_bulkhead_config(
        self, target: str | ThreadPoolBulkheadInstanceProperties
    ) -> ThreadPoolBulkheadConfig:
        return self.create_config(target)

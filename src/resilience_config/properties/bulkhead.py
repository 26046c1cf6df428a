"""Semaphore bulkhead configuration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from pydantic import Field

from resilience_config.core.enums import PrimitiveKind

from .base import ConfigurationProperties, Duration, InstanceProperties, ResolvedConfig
from .resolver import ConfigKind, field_specs

DEFAULT_MAX_CONCURRENT_CALLS = 25
DEFAULT_MAX_WAIT_DURATION = timedelta(0)
DEFAULT_WRITABLE_STACK_TRACE_ENABLED = True


@dataclass(frozen=True)
class BulkheadConfig(ResolvedConfig):
    """Resolved bulkhead configuration."""

    max_concurrent_calls: int = DEFAULT_MAX_CONCURRENT_CALLS
    max_wait_duration: timedelta = DEFAULT_MAX_WAIT_DURATION
    writable_stack_trace_enabled: bool = DEFAULT_WRITABLE_STACK_TRACE_ENABLED

    def __post_init__(self) -> None:
        self._require(
            self.max_concurrent_calls >= 0,
            "max_concurrent_calls",
            "max_concurrent_calls must be an integer value >= 0",
        )
        self._require(
            self.max_wait_duration >= timedelta(0),
            "max_wait_duration",
            "max_wait_duration must be a positive duration or zero",
        )

    @property
    def max_wait_time(self) -> int:
        """Maximum wait in whole milliseconds."""
        return self.max_wait_duration // timedelta(milliseconds=1)


class BulkheadInstanceProperties(InstanceProperties):
    """Overrides for one bulkhead instance or shared template."""

    max_concurrent_calls: int | None = None
    max_wait_duration: Duration | None = None
    max_wait_time: int | None = Field(default=None, description="Legacy: max wait in milliseconds")
    writable_stack_trace_enabled: bool | None = None

    def get_max_wait_duration(self) -> timedelta | None:
        """``max_wait_duration``, falling back to the legacy millisecond field."""
        if self.max_wait_duration is not None:
            return self.max_wait_duration
        if self.max_wait_time is not None:
            return timedelta(milliseconds=self.max_wait_time)
        return None


BULKHEAD = ConfigKind(
    kind=PrimitiveKind.BULKHEAD,
    config_cls=BulkheadConfig,
    fields=field_specs(
        BulkheadConfig,
        {"max_wait_duration": BulkheadInstanceProperties.get_max_wait_duration},
    ),
)


class BulkheadConfigurationProperties(ConfigurationProperties[BulkheadInstanceProperties]):
    """Bulkhead instances and shared configs."""

    kind = BULKHEAD

    def create_bulkhead_config(self, target: str | BulkheadInstanceProperties) -> BulkheadConfig:
        return self.create_config(target)

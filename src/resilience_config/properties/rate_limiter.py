"""Rate limiter configuration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from resilience_config.core.enums import PrimitiveKind

from .base import ConfigurationProperties, Duration, InstanceProperties, ResolvedConfig
from .resolver import ConfigKind, field_specs

DEFAULT_LIMIT_FOR_PERIOD = 50
# Smallest positive timedelta; sub-microsecond periods are not representable.
DEFAULT_LIMIT_REFRESH_PERIOD = timedelta(microseconds=1)
DEFAULT_TIMEOUT_DURATION = timedelta(seconds=5)


@dataclass(frozen=True)
class RateLimiterConfig(ResolvedConfig):
    """Resolved rate limiter configuration."""

    limit_for_period: int = DEFAULT_LIMIT_FOR_PERIOD
    limit_refresh_period: timedelta = DEFAULT_LIMIT_REFRESH_PERIOD
    timeout_duration: timedelta = DEFAULT_TIMEOUT_DURATION
    writable_stack_trace_enabled: bool = True

    def __post_init__(self) -> None:
        self._require(
            self.limit_for_period >= 1,
            "limit_for_period",
            "limit_for_period must be greater than 0",
        )
        self._require(
            self.limit_refresh_period > timedelta(0),
            "limit_refresh_period",
            "limit_refresh_period must be a positive duration",
        )
        self._require(
            self.timeout_duration >= timedelta(0),
            "timeout_duration",
            "timeout_duration must be a positive duration or zero",
        )


class RateLimiterInstanceProperties(InstanceProperties):
    """Overrides for one rate limiter instance or shared template."""

    limit_for_period: int | None = None
    limit_refresh_period: Duration | None = None
    timeout_duration: Duration | None = None
    writable_stack_trace_enabled: bool | None = None


RATE_LIMITER = ConfigKind(
    kind=PrimitiveKind.RATE_LIMITER,
    config_cls=RateLimiterConfig,
    fields=field_specs(RateLimiterConfig),
)


class RateLimiterConfigurationProperties(ConfigurationProperties[RateLimiterInstanceProperties]):
    """Rate limiter instances and shared configs."""

    kind = RATE_LIMITER

    def create_rate_limiter_config(
        self, target: str | RateLimiterInstanceProperties
    ) -> RateLimiterConfig:
        return self.create_config(target)

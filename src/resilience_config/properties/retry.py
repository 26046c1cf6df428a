"""Retry configuration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from resilience_config.core.enums import PrimitiveKind

from .base import ConfigurationProperties, Duration, InstanceProperties, ResolvedConfig
from .resolver import ConfigKind, field_specs

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_WAIT_DURATION = timedelta(milliseconds=500)
DEFAULT_EXPONENTIAL_BACKOFF_MULTIPLIER = 1.5
DEFAULT_RANDOMIZED_WAIT_FACTOR = 0.5


@dataclass(frozen=True)
class RetryConfig(ResolvedConfig):
    """Resolved retry configuration.

    Attributes:
        max_attempts: Total attempts including the first call
        wait_duration: Base wait between attempts
        enable_exponential_backoff: Multiply the wait on every attempt
        exponential_backoff_multiplier: Factor used when backoff is enabled
        enable_randomized_wait: Jitter the wait by ``randomized_wait_factor``
        randomized_wait_factor: Fraction of the wait used as jitter range
        retry_exceptions: Dotted exception paths that trigger a retry
        ignore_exceptions: Dotted exception paths that never retry
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    wait_duration: timedelta = DEFAULT_WAIT_DURATION
    enable_exponential_backoff: bool = False
    exponential_backoff_multiplier: float = DEFAULT_EXPONENTIAL_BACKOFF_MULTIPLIER
    enable_randomized_wait: bool = False
    randomized_wait_factor: float = DEFAULT_RANDOMIZED_WAIT_FACTOR
    retry_exceptions: tuple[str, ...] = ()
    ignore_exceptions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        self._freeze("retry_exceptions", "ignore_exceptions")
        self._require(
            self.max_attempts >= 1,
            "max_attempts",
            "max_attempts must be greater than or equal to 1",
        )
        self._require(
            self.wait_duration >= timedelta(0),
            "wait_duration",
            "wait_duration must be a positive duration or zero",
        )
        self._require(
            self.exponential_backoff_multiplier >= 1.0,
            "exponential_backoff_multiplier",
            "exponential_backoff_multiplier must be >= 1.0",
        )
        self._require(
            0.0 <= self.randomized_wait_factor < 1.0,
            "randomized_wait_factor",
            "randomized_wait_factor must be in the range [0, 1)",
        )
        self._require(
            not (self.enable_exponential_backoff and self.enable_randomized_wait),
            "enable_randomized_wait",
            "enable_exponential_backoff and enable_randomized_wait can't both be enabled",
        )


class RetryInstanceProperties(InstanceProperties):
    """Overrides for one retry instance or shared template."""

    max_attempts: int | None = None
    wait_duration: Duration | None = None
    enable_exponential_backoff: bool | None = None
    exponential_backoff_multiplier: float | None = None
    enable_randomized_wait: bool | None = None
    randomized_wait_factor: float | None = None
    retry_exceptions: list[str] | None = None
    ignore_exceptions: list[str] | None = None


RETRY = ConfigKind(
    kind=PrimitiveKind.RETRY,
    config_cls=RetryConfig,
    fields=field_specs(RetryConfig),
)


class RetryConfigurationProperties(ConfigurationProperties[RetryInstanceProperties]):
    """Retry instances and shared configs."""

    kind = RETRY

    def create_retry_config(self, target: str | RetryInstanceProperties) -> RetryConfig:
        return self.create_config(target)

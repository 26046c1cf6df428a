"""Circuit breaker configuration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from resilience_config.core.enums import PrimitiveKind, SlidingWindowType

from .base import ConfigurationProperties, Duration, InstanceProperties, ResolvedConfig
from .resolver import ConfigKind, field_specs

DEFAULT_FAILURE_RATE_THRESHOLD = 50.0
DEFAULT_SLOW_CALL_RATE_THRESHOLD = 100.0
DEFAULT_SLOW_CALL_DURATION_THRESHOLD = timedelta(seconds=60)
DEFAULT_WAIT_DURATION_IN_OPEN_STATE = timedelta(seconds=60)
DEFAULT_SLIDING_WINDOW_TYPE = SlidingWindowType.COUNT_BASED
DEFAULT_SLIDING_WINDOW_SIZE = 100
DEFAULT_MINIMUM_NUMBER_OF_CALLS = 100
DEFAULT_PERMITTED_CALLS_IN_HALF_OPEN_STATE = 10


@dataclass(frozen=True)
class CircuitBreakerConfig(ResolvedConfig):
    """Resolved circuit breaker configuration.

    ``record_exceptions`` / ``ignore_exceptions`` hold dotted exception
    class paths (``"requests.Timeout"``); they are stored, not imported.
    """

    failure_rate_threshold: float = DEFAULT_FAILURE_RATE_THRESHOLD
    slow_call_rate_threshold: float = DEFAULT_SLOW_CALL_RATE_THRESHOLD
    slow_call_duration_threshold: timedelta = DEFAULT_SLOW_CALL_DURATION_THRESHOLD
    wait_duration_in_open_state: timedelta = DEFAULT_WAIT_DURATION_IN_OPEN_STATE
    sliding_window_type: SlidingWindowType = DEFAULT_SLIDING_WINDOW_TYPE
    sliding_window_size: int = DEFAULT_SLIDING_WINDOW_SIZE
    minimum_number_of_calls: int = DEFAULT_MINIMUM_NUMBER_OF_CALLS
    permitted_number_of_calls_in_half_open_state: int = DEFAULT_PERMITTED_CALLS_IN_HALF_OPEN_STATE
    automatic_transition_from_open_to_half_open_enabled: bool = False
    writable_stack_trace_enabled: bool = True
    record_exceptions: tuple[str, ...] = ()
    ignore_exceptions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        self._freeze("record_exceptions", "ignore_exceptions")
        for key in ("failure_rate_threshold", "slow_call_rate_threshold"):
            value = getattr(self, key)
            self._require(0 < value <= 100, key, f"{key} must be greater than 0 and at most 100")
        for key in ("slow_call_duration_threshold", "wait_duration_in_open_state"):
            self._require(
                getattr(self, key) > timedelta(0),
                key,
                f"{key} must be at least 1 microsecond",
            )
        self._require(
            self.sliding_window_size >= 1,
            "sliding_window_size",
            "sliding_window_size must be greater than 0",
        )
        self._require(
            self.minimum_number_of_calls >= 1,
            "minimum_number_of_calls",
            "minimum_number_of_calls must be greater than 0",
        )
        self._require(
            self.permitted_number_of_calls_in_half_open_state >= 1,
            "permitted_number_of_calls_in_half_open_state",
            "permitted_number_of_calls_in_half_open_state must be greater than 0",
        )


class CircuitBreakerInstanceProperties(InstanceProperties):
    """Overrides for one circuit breaker instance or shared template."""

    failure_rate_threshold: float | None = None
    slow_call_rate_threshold: float | None = None
    slow_call_duration_threshold: Duration | None = None
    wait_duration_in_open_state: Duration | None = None
    sliding_window_type: SlidingWindowType | None = None
    sliding_window_size: int | None = None
    minimum_number_of_calls: int | None = None
    permitted_number_of_calls_in_half_open_state: int | None = None
    automatic_transition_from_open_to_half_open_enabled: bool | None = None
    writable_stack_trace_enabled: bool | None = None
    record_exceptions: list[str] | None = None
    ignore_exceptions: list[str] | None = None


CIRCUIT_BREAKER = ConfigKind(
    kind=PrimitiveKind.CIRCUIT_BREAKER,
    config_cls=CircuitBreakerConfig,
    fields=field_specs(CircuitBreakerConfig),
)


class CircuitBreakerConfigurationProperties(
    ConfigurationProperties[CircuitBreakerInstanceProperties]
):
    """Circuit breaker instances and shared configs."""

    kind = CIRCUIT_BREAKER

    def create_circuit_breaker_config(
        self, target: str | CircuitBreakerInstanceProperties
    ) -> CircuitBreakerConfig:
        return self.create_config(target)

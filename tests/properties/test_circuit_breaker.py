"""Tests for resilience_config.properties.circuit_breaker."""

from __future__ import annotations

from datetime import timedelta

import pytest

from resilience_config.core.enums import SlidingWindowType
from resilience_config.core.errors import ConfigurationNotFoundError, InvalidConfigError
from resilience_config.properties import (
    CircuitBreakerConfig,
    CircuitBreakerConfigurationProperties,
    CircuitBreakerInstanceProperties,
)


class TestCircuitBreakerConfig:
    def test_defaults(self):
        config = CircuitBreakerConfig()
        assert config.failure_rate_threshold == 50.0
        assert config.slow_call_rate_threshold == 100.0
        assert config.slow_call_duration_threshold == timedelta(seconds=60)
        assert config.wait_duration_in_open_state == timedelta(seconds=60)
        assert config.sliding_window_type is SlidingWindowType.COUNT_BASED
        assert config.sliding_window_size == 100
        assert config.minimum_number_of_calls == 100
        assert config.permitted_number_of_calls_in_half_open_state == 10
        assert config.automatic_transition_from_open_to_half_open_enabled is False
        assert config.record_exceptions == ()

    @pytest.mark.parametrize("value", [0, -1, 100.5])
    def test_failure_rate_out_of_range(self, value):
        with pytest.raises(InvalidConfigError, match="greater than 0 and at most 100"):
            CircuitBreakerConfig(failure_rate_threshold=value)

    def test_failure_rate_upper_bound_inclusive(self):
        assert CircuitBreakerConfig(failure_rate_threshold=100).failure_rate_threshold == 100

    def test_zero_wait_in_open_state_rejected(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            CircuitBreakerConfig(wait_duration_in_open_state=timedelta(0))
        assert exc_info.value.key == "wait_duration_in_open_state"

    def test_sliding_window_size_must_be_positive(self):
        with pytest.raises(InvalidConfigError):
            CircuitBreakerConfig(sliding_window_size=0)

    def test_exception_lists_frozen(self):
        config = CircuitBreakerConfig(record_exceptions=["builtins.TimeoutError"])
        assert config.record_exceptions == ("builtins.TimeoutError",)

    def test_to_dict_serializes_enum(self):
        assert CircuitBreakerConfig().to_dict()["sliding_window_type"] == "COUNT_BASED"


class TestCircuitBreakerConfigurationProperties:
    def test_shared_and_instance_merge(self):
        properties = CircuitBreakerConfigurationProperties.model_validate(
            {
                "configs": {
                    "shared": {
                        "failureRateThreshold": 25,
                        "sliding_window_type": "TIME_BASED",
                        "record_exceptions": ["requests.Timeout"],
                    }
                },
                "instances": {
                    "payments": {"base_config": "shared", "wait-duration-in-open-state": "5s"},
                },
            }
        )
        config = properties.create_circuit_breaker_config("payments")
        assert config.failure_rate_threshold == 25.0
        assert config.sliding_window_type is SlidingWindowType.TIME_BASED
        assert config.wait_duration_in_open_state == timedelta(seconds=5)
        assert config.record_exceptions == ("requests.Timeout",)
        assert config.minimum_number_of_calls == 100

    def test_instance_list_replaces_template_list(self):
        properties = CircuitBreakerConfigurationProperties()
        properties.get_configs()["shared"] = CircuitBreakerInstanceProperties(ignore_exceptions=["a.A"])
        properties.get_instances()["x"] = CircuitBreakerInstanceProperties(
            base_config="shared", ignore_exceptions=["b.B"]
        )
        assert properties.create_config("x").ignore_exceptions == ("b.B",)

    def test_invalid_sliding_window_type(self):
        with pytest.raises(ValueError):
            CircuitBreakerInstanceProperties(sliding_window_type="SESSION_BASED")

    def test_unknown_config(self):
        properties = CircuitBreakerConfigurationProperties()
        properties.get_instances()["x"] = CircuitBreakerInstanceProperties(base_config="nope")
        with pytest.raises(ConfigurationNotFoundError):
            properties.create_config("x")

    def test_unknown_instance(self):
        assert CircuitBreakerConfigurationProperties().create_config("x") == CircuitBreakerConfig()

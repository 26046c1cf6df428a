"""Tests for resilience_config.properties.rate_limiter and .retry."""

from __future__ import annotations

from datetime import timedelta

import pytest

from resilience_config.core.errors import ConfigurationNotFoundError, InvalidConfigError
from resilience_config.properties import (
    RateLimiterConfig,
    RateLimiterConfigurationProperties,
    RateLimiterInstanceProperties,
    RetryConfig,
    RetryConfigurationProperties,
    RetryInstanceProperties,
)


# ── Rate limiter ────────────────────────────────────────────────────────


class TestRateLimiterConfig:
    def test_defaults(self):
        config = RateLimiterConfig()
        assert config.limit_for_period == 50
        assert config.limit_refresh_period == timedelta(microseconds=1)
        assert config.timeout_duration == timedelta(seconds=5)

    def test_limit_must_be_positive(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            RateLimiterConfig(limit_for_period=0)
        assert exc_info.value.key == "limit_for_period"

    def test_zero_refresh_period_rejected(self):
        with pytest.raises(InvalidConfigError):
            RateLimiterConfig(limit_refresh_period=timedelta(0))

    def test_zero_timeout_allowed(self):
        assert RateLimiterConfig(timeout_duration=timedelta(0)).timeout_duration == timedelta(0)


class TestRateLimiterConfigurationProperties:
    def test_shared_and_instance_merge(self):
        properties = RateLimiterConfigurationProperties()
        properties.get_configs()["default"] = RateLimiterInstanceProperties(
            limit_for_period=10, limit_refresh_period="1s"
        )
        properties.get_instances()["api"] = RateLimiterInstanceProperties(
            base_config="default", timeout_duration="0ms"
        )
        config = properties.create_rate_limiter_config("api")
        assert config.limit_for_period == 10
        assert config.limit_refresh_period == timedelta(seconds=1)
        assert config.timeout_duration == timedelta(0)

    def test_unknown_config(self):
        properties = RateLimiterConfigurationProperties()
        with pytest.raises(ConfigurationNotFoundError):
            properties.create_config(RateLimiterInstanceProperties(base_config="missing"))


# ── Retry ───────────────────────────────────────────────────────────────


class TestRetryConfig:
    def test_defaults(self):
        config = RetryConfig()
        assert config.max_attempts == 3
        assert config.wait_duration == timedelta(milliseconds=500)
        assert config.enable_exponential_backoff is False
        assert config.enable_randomized_wait is False

    def test_max_attempts_must_be_positive(self):
        with pytest.raises(InvalidConfigError):
            RetryConfig(max_attempts=0)

    def test_backoff_multiplier_lower_bound(self):
        with pytest.raises(InvalidConfigError):
            RetryConfig(exponential_backoff_multiplier=0.5)

    @pytest.mark.parametrize("factor", [-0.1, 1.0])
    def test_randomized_factor_range(self, factor):
        with pytest.raises(InvalidConfigError):
            RetryConfig(randomized_wait_factor=factor)

    def test_backoff_and_randomized_wait_exclusive(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            RetryConfig(enable_exponential_backoff=True, enable_randomized_wait=True)
        assert exc_info.value.key == "enable_randomized_wait"


class TestRetryConfigurationProperties:
    def test_merge_can_produce_conflict(self):
        properties = RetryConfigurationProperties()
        properties.get_configs()["backoff"] = RetryInstanceProperties(enable_exponential_backoff=True)
        properties.get_instances()["orders"] = RetryInstanceProperties(
            base_config="backoff", enable_randomized_wait=True
        )
        with pytest.raises(InvalidConfigError) as exc_info:
            properties.create_retry_config("orders")
        assert exc_info.value.context.instance == "orders"
        assert exc_info.value.context.kind == "retry"

    def test_instance_can_switch_off_template_flag(self):
        properties = RetryConfigurationProperties()
        properties.get_configs()["backoff"] = RetryInstanceProperties(
            enable_exponential_backoff=True, exponential_backoff_multiplier=2.0
        )
        properties.get_instances()["orders"] = RetryInstanceProperties(
            base_config="backoff", enable_exponential_backoff=False, enable_randomized_wait=True
        )
        config = properties.create_retry_config("orders")
        assert config.enable_exponential_backoff is False
        assert config.enable_randomized_wait is True
        assert config.exponential_backoff_multiplier == 2.0

    def test_retry_exceptions(self):
        properties = RetryConfigurationProperties.model_validate(
            {"instances": {"orders": {"retryExceptions": ["builtins.ConnectionError"], "maxAttempts": 5}}}
        )
        config = properties.create_config("orders")
        assert config.retry_exceptions == ("builtins.ConnectionError",)
        assert config.max_attempts == 5

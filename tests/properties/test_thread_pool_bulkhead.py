"""Tests for resilience_config.properties.thread_pool_bulkhead."""

from __future__ import annotations

from datetime import timedelta

import pytest

from resilience_config.core.errors import ConfigurationNotFoundError, InvalidConfigError
from resilience_config.properties import (
    ThreadPoolBulkheadConfig,
    ThreadPoolBulkheadConfigurationProperties,
    ThreadPoolBulkheadInstanceProperties,
    ThreadPoolProperties,
)
from resilience_config.properties.thread_pool_bulkhead import (
    default_core_thread_pool_size,
    default_max_thread_pool_size,
)


def _pool(**kwargs) -> ThreadPoolBulkheadInstanceProperties:
    base_config = kwargs.pop("base_config", None)
    return ThreadPoolBulkheadInstanceProperties(
        base_config=base_config,
        thread_pool_properties=ThreadPoolProperties(**kwargs),
    )


# ── Defaults ────────────────────────────────────────────────────────────


class TestDefaults:
    def test_cpu_based_defaults(self, cpu_count):
        assert default_core_thread_pool_size() == 7
        assert default_max_thread_pool_size() == 8

    def test_single_cpu(self, monkeypatch):
        monkeypatch.setattr("os.cpu_count", lambda: 1)
        assert default_core_thread_pool_size() == 1
        assert default_max_thread_pool_size() == 1

    def test_unknown_cpu_count(self, monkeypatch):
        monkeypatch.setattr("os.cpu_count", lambda: None)
        assert default_core_thread_pool_size() == 1
        assert default_max_thread_pool_size() == 1

    def test_config_defaults(self, cpu_count):
        config = ThreadPoolBulkheadConfig()
        assert config.core_thread_pool_size == 7
        assert config.max_thread_pool_size == 8
        assert config.queue_capacity == 100
        assert config.keep_alive_duration == timedelta(milliseconds=20)
        assert config.writable_stack_trace_enabled is True


class TestValidation:
    def test_core_must_be_positive(self, cpu_count):
        with pytest.raises(InvalidConfigError) as exc_info:
            ThreadPoolBulkheadConfig(core_thread_pool_size=0)
        assert exc_info.value.key == "core_thread_pool_size"

    def test_max_below_core_rejected(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            ThreadPoolBulkheadConfig(core_thread_pool_size=4, max_thread_pool_size=2)
        assert exc_info.value.key == "max_thread_pool_size"

    def test_queue_capacity_must_be_positive(self, cpu_count):
        with pytest.raises(InvalidConfigError):
            ThreadPoolBulkheadConfig(queue_capacity=0)

    def test_negative_keep_alive_rejected(self, cpu_count):
        with pytest.raises(InvalidConfigError):
            ThreadPoolBulkheadConfig(keep_alive_duration=timedelta(milliseconds=-5))


# ── Nested properties ───────────────────────────────────────────────────


class TestThreadPoolProperties:
    def test_legacy_keep_alive_time(self):
        assert ThreadPoolProperties(keep_alive_time=5).get_keep_alive_duration() == timedelta(milliseconds=5)

    def test_duration_string(self):
        props = ThreadPoolProperties.model_validate({"keepAliveDuration": "2s"})
        assert props.get_keep_alive_duration() == timedelta(seconds=2)

    def test_nested_kebab_keys(self):
        props = ThreadPoolBulkheadInstanceProperties.model_validate(
            {"thread-pool-properties": {"core-thread-pool-size": 2, "queue-capacity": 5}}
        )
        assert props.thread_pool_properties.core_thread_pool_size == 2
        assert props.thread_pool_properties.queue_capacity == 5


# ── Aggregate ───────────────────────────────────────────────────────────


class TestThreadPoolBulkheadConfigurationProperties:
    def test_fixed_thread_pool_properties(self, cpu_count):
        properties = ThreadPoolBulkheadConfigurationProperties()
        properties.backends["backend1"] = _pool(core_thread_pool_size=1)
        properties.backends["backend2"] = _pool(core_thread_pool_size=2)

        assert len(properties.backends) == 2
        assert len(properties.get_instances()) == 2
        assert properties.create_thread_pool_bulkhead_config("backend1").core_thread_pool_size == 1
        assert properties.create_thread_pool_bulkhead_config("backend2").core_thread_pool_size == 2

    def test_shared_configs(self, cpu_count):
        properties = ThreadPoolBulkheadConfigurationProperties()
        properties.get_configs()["default"] = _pool(
            core_thread_pool_size=1, queue_capacity=1, keep_alive_time=5, max_thread_pool_size=10
        )
        properties.get_configs()["sharedConfig"] = _pool(core_thread_pool_size=2, queue_capacity=2)
        properties.get_instances()["backendWithDefaultConfig"] = _pool(
            base_config="default", core_thread_pool_size=3
        )
        properties.get_instances()["backendWithSharedConfig"] = _pool(
            base_config="sharedConfig", core_thread_pool_size=4
        )

        config1 = properties.create_thread_pool_bulkhead_config("backendWithDefaultConfig")
        assert config1.core_thread_pool_size == 3
        assert config1.queue_capacity == 1
        assert config1.max_thread_pool_size == 10
        assert config1.keep_alive_duration == timedelta(milliseconds=5)

        config2 = properties.create_thread_pool_bulkhead_config("backendWithSharedConfig")
        assert config2.core_thread_pool_size == 4
        assert config2.queue_capacity == 2
        assert config2.max_thread_pool_size == 8

        config3 = properties.create_thread_pool_bulkhead_config("unknownBackend")
        assert config3.core_thread_pool_size == default_core_thread_pool_size()

    def test_instance_without_pool_group_inherits_template_pool(self, cpu_count):
        properties = ThreadPoolBulkheadConfigurationProperties()
        properties.get_configs()["default"] = _pool(queue_capacity=7)
        properties.get_instances()["a"] = ThreadPoolBulkheadInstanceProperties(
            base_config="default", writable_stack_trace_enabled=False
        )
        config = properties.create_config("a")
        assert config.queue_capacity == 7
        assert config.writable_stack_trace_enabled is False

    def test_unknown_config(self):
        properties = ThreadPoolBulkheadConfigurationProperties()
        properties.get_instances()["a"] = _pool(base_config="missing")
        with pytest.raises(ConfigurationNotFoundError, match="'missing'"):
            properties.create_config("a")

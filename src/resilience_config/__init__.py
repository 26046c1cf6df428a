"""Layered configuration for resilience primitives.

Manifesto:
    Bulkheads, thread-pool bulkheads, circuit breakers, rate limiters and
    retries are configured per named instance.  Many instances share most
    of their settings, so a record may point at a named shared template
    and override only what differs.  This package turns those partial
    records into one immutable, fully populated config per instance.

    Precedence, per field::

        built-in defaults  <  shared template  <  instance

Quick start::

    from resilience_config import BulkheadConfigurationProperties, BulkheadInstanceProperties

    properties = BulkheadConfigurationProperties()
    properties.get_configs()["default"] = BulkheadInstanceProperties(max_concurrent_calls=10)
    properties.get_instances()["backendA"] = BulkheadInstanceProperties(
        base_config="default", max_wait_duration="250ms"
    )
    config = properties.create_config("backendA")
    config.max_concurrent_calls   # 10

Architecture::

    core/          errors, structlog logging, enums
    properties/    per-kind records + generic ConfigResolver
    config/        ResilienceSettings (pydantic-settings) + TOML loading
    registry.py    PrimitiveRegistry, EventConsumerRegistry
    module.py      ResilienceModule (startup wiring)
    api/           FastAPI read-only endpoints
    cli/           Typer CLI

Tags:
    resilience, configuration, bulkhead, circuit-breaker, rate-limiter, retry

Doc-Types:
    package-overview, architecture-map, module-index
"""

from resilience_config.config import ResilienceSettings, get_settings, load_settings
from resilience_config.core import (
    ConfigError,
    ConfigurationNotFoundError,
    InvalidConfigError,
    MissingConfigError,
    PrimitiveKind,
    ResilienceConfigError,
    SlidingWindowType,
)
from resilience_config.module import ResilienceModule
from resilience_config.properties import (
    BulkheadConfig,
    BulkheadConfigurationProperties,
    BulkheadInstanceProperties,
    CircuitBreakerConfig,
    CircuitBreakerConfigurationProperties,
    CircuitBreakerInstanceProperties,
    ConfigResolver,
    RateLimiterConfig,
    RateLimiterConfigurationProperties,
    RateLimiterInstanceProperties,
    RetryConfig,
    RetryConfigurationProperties,
    RetryInstanceProperties,
    ThreadPoolBulkheadConfig,
    ThreadPoolBulkheadConfigurationProperties,
    ThreadPoolBulkheadInstanceProperties,
    ThreadPoolProperties,
)
from resilience_config.registry import EventConsumerRegistry, PrimitiveRegistry

__version__ = "0.1.0"

__all__ = [
    # Errors
    "ResilienceConfigError",
    "ConfigError",
    "ConfigurationNotFoundError",
    "InvalidConfigError",
    "MissingConfigError",
    # Enums
    "PrimitiveKind",
    "SlidingWindowType",
    # Engine
    "ConfigResolver",
    # Bulkhead
    "BulkheadConfig",
    "BulkheadConfigurationProperties",
    "BulkheadInstanceProperties",
    # Thread-pool bulkhead
    "ThreadPoolBulkheadConfig",
    "ThreadPoolBulkheadConfigurationProperties",
    "ThreadPoolBulkheadInstanceProperties",
    "ThreadPoolProperties",
    # Circuit breaker
    "CircuitBreakerConfig",
    "CircuitBreakerConfigurationProperties",
    "CircuitBreakerInstanceProperties",
    # Rate limiter
    "RateLimiterConfig",
    "RateLimiterConfigurationProperties",
    "RateLimiterInstanceProperties",
    # Retry
    "RetryConfig",
    "RetryConfigurationProperties",
    "RetryInstanceProperties",
    # Loading and wiring
    "ResilienceSettings",
    "get_settings",
    "load_settings",
    "ResilienceModule",
    "PrimitiveRegistry",
    "EventConsumerRegistry",
]

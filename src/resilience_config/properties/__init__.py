"""
Per-kind properties records, resolved configs and the resolution engine.

Architecture::

    resolver.py              FieldSpec, ConfigKind, ConfigResolver (generic)
    base.py                  InstanceProperties, ResolvedConfig, ConfigurationProperties
    bulkhead.py              BulkheadConfig + properties
    thread_pool_bulkhead.py  ThreadPoolBulkheadConfig + nested ThreadPoolProperties
    circuit_breaker.py       CircuitBreakerConfig + properties
    rate_limiter.py          RateLimiterConfig + properties
    retry.py                 RetryConfig + properties
"""

from .base import (
    DEFAULT_EVENT_CONSUMER_BUFFER_SIZE,
    ConfigurationProperties,
    InstanceProperties,
    ResolvedConfig,
)
from .bulkhead import (
    BULKHEAD,
    BulkheadConfig,
    BulkheadConfigurationProperties,
    BulkheadInstanceProperties,
)
from .circuit_breaker import (
    CIRCUIT_BREAKER,
    CircuitBreakerConfig,
    CircuitBreakerConfigurationProperties,
    CircuitBreakerInstanceProperties,
)
from .rate_limiter import (
    RATE_LIMITER,
    RateLimiterConfig,
    RateLimiterConfigurationProperties,
    RateLimiterInstanceProperties,
)
from .resolver import ConfigKind, ConfigResolver, FieldSpec, field_specs, nested
from .retry import (
    RETRY,
    RetryConfig,
    RetryConfigurationProperties,
    RetryInstanceProperties,
)
from .thread_pool_bulkhead import (
    THREAD_POOL_BULKHEAD,
    ThreadPoolBulkheadConfig,
    ThreadPoolBulkheadConfigurationProperties,
    ThreadPoolBulkheadInstanceProperties,
    ThreadPoolProperties,
)

__all__ = [
    # Engine
    "ConfigKind",
    "ConfigResolver",
    "FieldSpec",
    "field_specs",
    "nested",
    # Base
    "DEFAULT_EVENT_CONSUMER_BUFFER_SIZE",
    "ConfigurationProperties",
    "InstanceProperties",
    "ResolvedConfig",
    # Bulkhead
    "BULKHEAD",
    "BulkheadConfig",
    "BulkheadConfigurationProperties",
    "BulkheadInstanceProperties",
    # Thread-pool bulkhead
    "THREAD_POOL_BULKHEAD",
    "ThreadPoolBulkheadConfig",
    "ThreadPoolBulkheadConfigurationProperties",
    "ThreadPoolBulkheadInstanceProperties",
    "ThreadPoolProperties",
    # Circuit breaker
    "CIRCUIT_BREAKER",
    "CircuitBreakerConfig",
    "CircuitBreakerConfigurationProperties",
    "CircuitBreakerInstanceProperties",
    # Rate limiter
    "RATE_LIMITER",
    "RateLimiterConfig",
    "RateLimiterConfigurationProperties",
    "RateLimiterInstanceProperties",
    # Retry
    "RETRY",
    "RetryConfig",
    "RetryConfigurationProperties",
    "RetryInstanceProperties",
]

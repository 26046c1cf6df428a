"""
Shared enums for resilience-config.

STDLIB ONLY - NO PYDANTIC.
"""

from enum import Enum


class PrimitiveKind(str, Enum):
    """The resilience primitives a configuration can be resolved for."""

    BULKHEAD = "bulkhead"
    THREAD_POOL_BULKHEAD = "thread_pool_bulkhead"
    CIRCUIT_BREAKER = "circuit_breaker"
    RATE_LIMITER = "rate_limiter"
    RETRY = "retry"


class SlidingWindowType(str, Enum):
    """How a circuit breaker aggregates call outcomes."""

    COUNT_BASED = "COUNT_BASED"
    TIME_BASED = "TIME_BASED"

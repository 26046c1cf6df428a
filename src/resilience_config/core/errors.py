"""
Structured error types for resilience configuration.

Provides a small hierarchy of typed errors with metadata for reporting and
root cause analysis. Every error raised while loading or resolving a
resilience configuration extends :class:`ResilienceConfigError` and carries:

- **Category:** What kind of error (config, internal)
- **Retryable:** Always ``False`` here; resolution is pure computation
- **Context:** Which primitive kind and instance the error belongs to
- **Cause:** Chained underlying exception

Architecture:
    ::

        ┌──────────────────────────────────────────────────────┐
        │                ResilienceConfigError                  │
        │        (category, retryable, context, cause)          │
        ├──────────────────────────────────────────────────────┤
        │                                                       │
        │  ConfigError (CONFIG)                                 │
        │       │                                               │
        │  ConfigurationNotFoundError   dangling base_config    │
        │  InvalidConfigError           bad value / chain       │
        │  MissingConfigError           missing file or key     │
        └──────────────────────────────────────────────────────┘

Guardrails:
    ❌ DON'T: Recover from ConfigurationNotFoundError by falling back
    ✅ DO: Let it reach process startup; it is an authoring mistake

    ❌ DON'T: Swallow the original exception
    ✅ DO: Pass it as cause= for error chaining

Examples:
    >>> error = ConfigurationNotFoundError("shared")
    >>> str(error)
    "Configuration with name 'shared' does not exist"
    >>> error.retryable
    False

Tags:
    error-handling, exception-hierarchy, configuration, resilience

Doc-Types:
    api-reference
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories for classification and routing."""

    CONFIG = "CONFIG"
    VALIDATION = "VALIDATION"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        kind: Primitive kind being resolved (``bulkhead``, ``retry`` ...)
        instance: Instance name being resolved, if known
        source: Where the configuration came from (file path, ``env``)
        metadata: Additional key-value pairs
    """

    kind: str | None = None
    instance: str | None = None
    source: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Non-empty fields flattened into one dict (metadata keys last)."""
        result: dict[str, Any] = {}
        for key in ("kind", "instance", "source"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class ResilienceConfigError(Exception):
    """
    Base exception for all resilience configuration errors.

    Subclasses set ``default_category`` and ``default_retryable`` class
    attributes to provide defaults for their domain.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> ResilienceConfigError:
        """
        Attach kind / instance / source (other keys go to metadata) and return self.

        Usage:
            raise ConfigurationNotFoundError("shared").with_context(
                kind="bulkhead", instance="backendA"
            )
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe body used by log events and HTTP 500 responses."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(ResilienceConfigError):
    """
    Raised for anything wrong with authored configuration.

    Never retryable: the settings file has to be fixed.
    """

    default_category = ErrorCategory.CONFIG
    default_retryable = False


class ConfigurationNotFoundError(ConfigError):
    """An instance references a shared configuration that does not exist."""

    def __init__(self, name: str, **kwargs: Any):
        self.name = name
        super().__init__(f"Configuration with name '{name}' does not exist", **kwargs)


class InvalidConfigError(ConfigError):
    """A value (or merged combination of values) fails validation."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, key: str, value: Any, message: str | None = None, **kwargs: Any):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}", **kwargs)


class MissingConfigError(ConfigError):
    """A settings file or required key is absent."""

    def __init__(self, key: str, message: str | None = None, **kwargs: Any):
        self.key = key
        super().__init__(message or f"Missing required configuration: {key}", **kwargs)


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "ResilienceConfigError",
    "ConfigError",
    "ConfigurationNotFoundError",
    "InvalidConfigError",
    "MissingConfigError",
]

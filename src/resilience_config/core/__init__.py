"""Core building blocks: errors, logging and shared enums."""

from .enums import PrimitiveKind, SlidingWindowType
from .errors import (
    ConfigError,
    ConfigurationNotFoundError,
    ErrorCategory,
    ErrorContext,
    InvalidConfigError,
    MissingConfigError,
    ResilienceConfigError,
)
from .logging import configure_logging, get_logger

__all__ = [
    "PrimitiveKind",
    "SlidingWindowType",
    "ErrorCategory",
    "ErrorContext",
    "ResilienceConfigError",
    "ConfigError",
    "ConfigurationNotFoundError",
    "InvalidConfigError",
    "MissingConfigError",
    "configure_logging",
    "get_logger",
]

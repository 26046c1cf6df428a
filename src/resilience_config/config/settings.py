"""
Top-level settings: one configuration aggregate per primitive kind.

Manifesto:
    The resolution engine only sees in-memory maps.  This module is the
    loading layer that fills them: a validated pydantic-settings object
    built from a TOML file and ``RESILIENCE_*`` environment variables,
    cached per file so every caller sees the same instance.

Resolution order for a value::

    TOML file  →  RESILIENCE_* env vars (nested with ``__``)

Example TOML::

    log_level = "DEBUG"

    [bulkhead.configs.default]
    max_concurrent_calls = 10

    [bulkhead.instances.backendA]
    base_config = "default"
    max_wait_duration = "250ms"

    [endpoints.retry]
    enabled = false

Tags:
    configuration, settings, pydantic, toml, environment

Doc-Types:
    api-reference
"""

from __future__ import annotations

import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    InitSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from resilience_config.core.enums import PrimitiveKind
from resilience_config.core.errors import InvalidConfigError, MissingConfigError
from resilience_config.properties import (
    BulkheadConfigurationProperties,
    CircuitBreakerConfigurationProperties,
    ConfigurationProperties,
    RateLimiterConfigurationProperties,
    RetryConfigurationProperties,
    ThreadPoolBulkheadConfigurationProperties,
)


class EndpointConfig(BaseModel):
    """Whether the read-only endpoint and event buffers are enabled for a kind."""

    enabled: bool = True


class EndpointsConfig(BaseModel):
    """Endpoint switches, one per primitive kind."""

    bulkhead: EndpointConfig = Field(default_factory=EndpointConfig)
    thread_pool_bulkhead: EndpointConfig = Field(default_factory=EndpointConfig)
    circuit_breaker: EndpointConfig = Field(default_factory=EndpointConfig)
    rate_limiter: EndpointConfig = Field(default_factory=EndpointConfig)
    retry: EndpointConfig = Field(default_factory=EndpointConfig)

    def is_enabled(self, kind: PrimitiveKind) -> bool:
        return getattr(self, kind.value).enabled


# ── Environment source ───────────────────────────────────────────────────

_NAME_MAPS = {
    "instances": ("instances", "backends"),
    "backends": ("instances", "backends"),
    "configs": ("configs",),
}


def _match_names(env_props: Any, file_props: Any) -> None:
    """Rename lowercased env instance/config keys to the file's spelling, in place."""
    if not isinstance(env_props, dict) or not isinstance(file_props, dict):
        return
    for section, file_sections in _NAME_MAPS.items():
        env_names = env_props.get(section)
        if not isinstance(env_names, dict):
            continue
        spelled = {
            name.lower(): name
            for file_section in file_sections
            if isinstance(file_props.get(file_section), dict)
            for name in file_props[file_section]
        }
        for env_name in list(env_names):
            name = spelled.get(env_name.lower(), env_name)
            if name != env_name:
                env_names[name] = env_names.pop(env_name)


class _FileCasedEnvSource(PydanticBaseSettingsSource):
    """``RESILIENCE_*`` values keyed by the instance names the file declares.

    Env var names are case-insensitive, so ``..._INSTANCES__BACKENDA__...``
    arrives as ``backenda``.  When the file declares ``backendA`` the value
    is moved onto it; names the file does not declare stay lowercase.
    """

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        env_settings: PydanticBaseSettingsSource,
        init_settings: PydanticBaseSettingsSource,
    ):
        super().__init__(settings_cls)
        self._env_settings = env_settings
        self._init_settings = init_settings

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return self._env_settings.get_field_value(field, field_name)

    def __call__(self) -> dict[str, Any]:
        data = self._env_settings()
        file_data: dict[str, Any] = {}
        if isinstance(self._init_settings, InitSettingsSource):
            file_data = self._init_settings.init_kwargs
        for kind in PrimitiveKind:
            _match_names(data.get(kind.value), file_data.get(kind.value))
        return data


class ResilienceSettings(BaseSettings):
    """Resilience configuration for every primitive kind.

    All fields can be set via ``RESILIENCE_*`` environment variables (e.g.
    ``RESILIENCE_LOG_LEVEL=DEBUG``) or through a TOML file passed to
    :func:`load_settings`.
    """

    model_config = SettingsConfigDict(
        env_prefix="RESILIENCE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    bulkhead: BulkheadConfigurationProperties = Field(
        default_factory=BulkheadConfigurationProperties
    )
    thread_pool_bulkhead: ThreadPoolBulkheadConfigurationProperties = Field(
        default_factory=ThreadPoolBulkheadConfigurationProperties
    )
    circuit_breaker: CircuitBreakerConfigurationProperties = Field(
        default_factory=CircuitBreakerConfigurationProperties
    )
    rate_limiter: RateLimiterConfigurationProperties = Field(
        default_factory=RateLimiterConfigurationProperties
    )
    retry: RetryConfigurationProperties = Field(default_factory=RetryConfigurationProperties)

    endpoints: EndpointsConfig = Field(default_factory=EndpointsConfig)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Real env vars override file values.
        return _FileCasedEnvSource(settings_cls, env_settings, init_settings), init_settings

    def properties_for(self, kind: PrimitiveKind) -> ConfigurationProperties:
        """The configuration aggregate for *kind*."""
        return getattr(self, kind.value)

    def iter_properties(self) -> Iterator[tuple[PrimitiveKind, ConfigurationProperties]]:
        for kind in PrimitiveKind:
            yield kind, self.properties_for(kind)


# ── Loading ──────────────────────────────────────────────────────────────


def read_toml(path: Path) -> dict[str, Any]:
    """Read a settings file; a top-level ``[resilience]`` table is unwrapped."""
    if not path.is_file():
        raise MissingConfigError(str(path), f"Settings file not found: {path}")
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise InvalidConfigError(str(path), None, f"Invalid TOML in {path}: {exc}", cause=exc) from exc
    section = data.get("resilience")
    if isinstance(section, dict):
        return section
    return data


def load_settings(path: Path | str | None = None) -> ResilienceSettings:
    """Build settings from an optional TOML file plus the environment.

    Raises:
        MissingConfigError: *path* does not exist.
        InvalidConfigError: The file is not valid TOML or fails validation.
    """
    data: dict[str, Any] = {}
    if path is not None:
        data = read_toml(Path(path))
    try:
        return ResilienceSettings(**data)
    except ValidationError as exc:
        source = str(path) if path is not None else "env"
        raise InvalidConfigError(
            source,
            None,
            f"Invalid resilience settings in {source}: {exc.error_count()} validation error(s)",
            cause=exc,
        ).with_context(source=source) from exc


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, ResilienceSettings] = {}


def get_settings(
    path: Path | str | None = None,
    *,
    _force_reload: bool = False,
) -> ResilienceSettings:
    """Load, validate, and cache a :class:`ResilienceSettings` instance per file."""
    cache_key = str(Path(path).resolve()) if path is not None else ""
    if not _force_reload and cache_key in _settings_cache:
        return _settings_cache[cache_key]

    settings = load_settings(path)
    _settings_cache[cache_key] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()

"""
Properties records, resolved configs and the per-kind aggregate.

Three building blocks shared by every primitive kind:

* :class:`InstanceProperties`: pydantic model whose fields are all
  optional.  ``None`` means *inherit*; ``0`` / ``False`` are real values.
* :class:`ResolvedConfig`: frozen dataclass base for the fully populated
  output of resolution.
* :class:`ConfigurationProperties`: owns the instance registry and the
  shared template library for one kind and exposes ``create_config``.

Field keys are accepted in snake_case, camelCase or kebab-case so the same
records load from TOML, JSON or environment variables::

    [bulkhead.configs.default]
    max-concurrent-calls = 10

    [bulkhead.instances.backendA]
    baseConfig = "default"
    maxWaitDuration = "250ms"
"""

from __future__ import annotations

import dataclasses
import re
from datetime import timedelta
from enum import Enum
from typing import Annotated, Any, ClassVar, Generic, TypeVar

from pydantic import AliasChoices, AliasGenerator, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from resilience_config.core.errors import InvalidConfigError

from .resolver import ConfigKind, ConfigResolver

DEFAULT_EVENT_CONSUMER_BUFFER_SIZE = 100


# ── Durations ────────────────────────────────────────────────────────────

_DURATION_RE = re.compile(r"^\s*(?P<amount>\d+(?:\.\d+)?)\s*(?P<unit>ns|us|µs|ms|s|m|h|d)\s*$")

_DURATION_UNITS = {
    "us": "microseconds",
    "µs": "microseconds",
    "ms": "milliseconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}


def parse_duration(value: Any) -> Any:
    """Accept ``"500ms"`` style strings; anything else goes to pydantic."""
    if not isinstance(value, str):
        return value
    match = _DURATION_RE.match(value)
    if match is None:
        return value
    amount = float(match["amount"])
    unit = match["unit"]
    if unit == "ns":
        micros = amount / 1000
        # 1µs is the smallest positive timedelta
        if 0 < micros < 1:
            return timedelta(microseconds=1)
        if not micros.is_integer():
            raise ValueError(f"{value!r} is not a whole number of microseconds")
        return timedelta(microseconds=micros)
    return timedelta(**{_DURATION_UNITS[unit]: amount})


Duration = Annotated[timedelta, BeforeValidator(parse_duration)]


def _field_aliases(name: str) -> AliasChoices:
    return AliasChoices(name, to_camel(name), name.replace("_", "-"))


# ── Properties records ───────────────────────────────────────────────────


class InstanceProperties(BaseModel):
    """Optional, overridable fields for one primitive instance.

    Subclasses add the kind-specific fields, each typed ``X | None`` with a
    ``None`` default.
    """

    model_config = ConfigDict(
        alias_generator=AliasGenerator(validation_alias=_field_aliases),
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid",
    )

    base_config: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "base_config", "baseConfig", "base-config", "base_config_name", "baseConfigName"
        ),
        description="Name of the shared configuration this instance derives from",
    )
    event_consumer_buffer_size: int | None = Field(default=None, ge=1)

    def explicit_fields(self) -> set[str]:
        """Names of the fields holding a value (``None`` counts as unset)."""
        return {name for name in type(self).model_fields if getattr(self, name) is not None}


# ── Resolved configs ─────────────────────────────────────────────────────


def _jsonable(value: Any) -> Any:
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return list(value)
    return value


@dataclasses.dataclass(frozen=True)
class ResolvedConfig:
    """Base for the immutable output of resolution."""

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe dict (durations in seconds, enums as values)."""
        return {f.name: _jsonable(getattr(self, f.name)) for f in dataclasses.fields(self)}

    def _require(self, condition: bool, key: str, message: str) -> None:
        if not condition:
            raise InvalidConfigError(key, getattr(self, key), message)

    def _freeze(self, *names: str) -> None:
        for name in names:
            object.__setattr__(self, name, tuple(getattr(self, name)))


# ── Aggregate ────────────────────────────────────────────────────────────

PropsT = TypeVar("PropsT", bound=InstanceProperties)


class ConfigurationProperties(BaseModel, Generic[PropsT]):
    """Instance registry + shared template library for one primitive kind.

    ``instances`` and ``configs`` are plain mutable dicts; populate them
    during loading and resolve afterwards.  ``create_config`` builds a
    fresh resolver over the current maps on every call.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    kind: ClassVar[ConfigKind]

    instances: dict[str, PropsT] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("instances", "backends"),
    )
    configs: dict[str, PropsT] = Field(default_factory=dict)

    def get_instances(self) -> dict[str, PropsT]:
        return self.instances

    def get_configs(self) -> dict[str, PropsT]:
        return self.configs

    @property
    def backends(self) -> dict[str, PropsT]:
        """Legacy name for :attr:`instances`."""
        return self.instances

    def resolver(self) -> ConfigResolver:
        return ConfigResolver(self.kind, self.instances, self.configs)

    def create_config(self, target: str | PropsT) -> Any:
        """Resolve a registered instance name or an anonymous properties record."""
        return self.resolver().resolve(target)

    def get_event_consumer_buffer_size(self, name: str) -> int:
        """Event buffer size for *name*, defaulting to 100 when unset."""
        properties = self.instances.get(name)
        if properties is None or properties.event_consumer_buffer_size is None:
            return DEFAULT_EVENT_CONSUMER_BUFFER_SIZE
        return properties.event_consumer_buffer_size


__all__ = [
    "DEFAULT_EVENT_CONSUMER_BUFFER_SIZE",
    "Duration",
    "parse_duration",
    "InstanceProperties",
    "ResolvedConfig",
    "ConfigurationProperties",
]

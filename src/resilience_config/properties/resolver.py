"""
Layered configuration resolution engine.

Manifesto:
    Five resilience primitives share one resolution rule, so they share
    one engine.  Each primitive kind is described by a :class:`ConfigKind`:
    the concrete config class plus a tuple of :class:`FieldSpec` entries
    (field name, how to read the optional override from a properties
    record, built-in default).  :class:`ConfigResolver` walks that
    description and never knows which primitive it is resolving.

Precedence (highest wins)::

    built-in defaults  →  shared template (base_config)  →  instance

    values = kind.defaults()
    overlay(values, configs[instance.base_config])   # ConfigurationNotFoundError
    overlay(values, instance)
    return kind.config_cls(**values)

Merge is per field: a field set only by the template and another set only
by the instance both survive.  An unset field is ``None`` on the
properties record and never overwrites anything.

Resolution is a pure function of the maps passed in.  An unknown instance
name resolves to the built-in defaults; a dangling ``base_config`` is
always an error.

Tags:
    configuration, resolution, merge, precedence, resilience

Doc-Types:
    api-reference, architecture
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from operator import attrgetter
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from resilience_config.core.enums import PrimitiveKind
from resilience_config.core.errors import ConfigurationNotFoundError, InvalidConfigError
from resilience_config.core.logging import get_logger

if TYPE_CHECKING:
    from .base import InstanceProperties, ResolvedConfig

logger = get_logger(__name__)

ConfigT = TypeVar("ConfigT", bound="ResolvedConfig")
PropsT = TypeVar("PropsT", bound="InstanceProperties")


# ── Field descriptors ────────────────────────────────────────────────────


@dataclass(frozen=True)
class FieldSpec:
    """One resolvable field of a concrete config.

    Attributes:
        name: Attribute name on the concrete config
        accessor: Reads the override from a properties record; ``None`` = unset
        default: Built-in default value
        default_factory: Zero-arg callable producing the default (wins over ``default``)
    """

    name: str
    accessor: Callable[[Any], Any]
    default: Any = None
    default_factory: Callable[[], Any] | None = None

    def default_value(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return self.default

    def read(self, properties: Any) -> Any:
        return self.accessor(properties)


def nested(group: str, name: str) -> Callable[[Any], Any]:
    """Accessor for a field living on a nested properties group."""

    def accessor(properties: Any) -> Any:
        inner = getattr(properties, group)
        if inner is None:
            return None
        return getattr(inner, name)

    return accessor


def field_specs(
    config_cls: type,
    accessors: Mapping[str, Callable[[Any], Any]] | None = None,
) -> tuple[FieldSpec, ...]:
    """Derive field specs from a concrete config dataclass.

    Defaults come from the dataclass field defaults.  Every field is read
    from the same-named attribute of the properties record unless
    *accessors* supplies another reader.
    """
    accessors = accessors or {}
    specs: list[FieldSpec] = []
    for f in dataclasses.fields(config_cls):
        if not f.init:
            continue
        specs.append(
            FieldSpec(
                name=f.name,
                accessor=accessors.get(f.name, attrgetter(f.name)),
                default=None if f.default is dataclasses.MISSING else f.default,
                default_factory=None if f.default_factory is dataclasses.MISSING else f.default_factory,
            )
        )
    return tuple(specs)


@dataclass(frozen=True)
class ConfigKind(Generic[ConfigT]):
    """Describes how one primitive kind's config is resolved."""

    kind: PrimitiveKind
    config_cls: type[ConfigT]
    fields: tuple[FieldSpec, ...]

    def defaults(self) -> dict[str, Any]:
        """Fresh dict of built-in default values."""
        return {spec.name: spec.default_value() for spec in self.fields}

    def default_config(self) -> ConfigT:
        return self.config_cls(**self.defaults())


# ── Resolver ─────────────────────────────────────────────────────────────


class ConfigResolver(Generic[PropsT, ConfigT]):
    """Resolve instance properties into a concrete, immutable config.

    Parameters
    ----------
    kind:
        Field description of the primitive kind.
    instances:
        Instance name → properties.  Only consulted by name lookups.
    configs:
        Shared template name → properties.
    """

    def __init__(
        self,
        kind: ConfigKind[ConfigT],
        instances: Mapping[str, PropsT] | None = None,
        configs: Mapping[str, PropsT] | None = None,
    ):
        self._kind = kind
        self._instances: Mapping[str, PropsT] = instances if instances is not None else {}
        self._configs: Mapping[str, PropsT] = configs if configs is not None else {}

    @property
    def kind(self) -> ConfigKind[ConfigT]:
        return self._kind

    def resolve(self, target: str | PropsT) -> ConfigT:
        """Resolve an instance by name, or an anonymous properties record.

        Raises:
            ConfigurationNotFoundError: ``base_config`` names no shared template.
            InvalidConfigError: A merged value fails validation, or the
                shared template itself declares ``base_config``.
        """
        if isinstance(target, str):
            properties = self._instances.get(target)
            if properties is None:
                logger.debug(
                    "unknown_instance_fallback",
                    kind=self._kind.kind.value,
                    instance=target,
                )
                return self._kind.default_config()
            return self._resolve(properties, instance=target)
        return self._resolve(target, instance=None)

    def _resolve(self, properties: PropsT, instance: str | None) -> ConfigT:
        values = self._kind.defaults()

        if properties.base_config is not None:
            self._overlay(values, self._shared(properties.base_config, instance))
        self._overlay(values, properties)

        try:
            config = self._kind.config_cls(**values)
        except InvalidConfigError as error:
            error.with_context(kind=self._kind.kind.value, instance=instance)
            raise

        logger.debug(
            "config_resolved",
            kind=self._kind.kind.value,
            instance=instance,
            base_config=properties.base_config,
        )
        return config

    def _shared(self, name: str, instance: str | None) -> PropsT:
        shared = self._configs.get(name)
        if shared is None:
            raise ConfigurationNotFoundError(name).with_context(
                kind=self._kind.kind.value,
                instance=instance,
            )
        if shared.base_config is not None:
            raise InvalidConfigError(
                "base_config",
                shared.base_config,
                f"Shared configuration '{name}' must not reference another "
                f"configuration (base_config={shared.base_config!r})",
            ).with_context(kind=self._kind.kind.value, instance=instance)
        return shared

    def _overlay(self, values: dict[str, Any], properties: PropsT) -> None:
        for spec in self._kind.fields:
            value = spec.read(properties)
            if value is not None:
                values[spec.name] = value


__all__ = [
    "FieldSpec",
    "ConfigKind",
    "ConfigResolver",
    "field_specs",
    "nested",
]

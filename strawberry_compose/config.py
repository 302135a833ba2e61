"""Configuration of a composable schema and its upgrade steps."""

from __future__ import annotations

import copy
import dataclasses
from typing import Any, Callable, Dict, Iterable, List, Mapping, Tuple

#: Base entity fields enabled by `upgrade_new_configuration`.
DEFAULT_ENTITY_BASE_FIELDS: Tuple[str, ...] = (
    "uuid",
    "label",
    "langcode",
    "config_target",
    "uri_relationships",
    "referenced_entities",
    "entity_type_id",
    "is_new",
    "access_check",
)


def checked(options: Any) -> List[str]:
    """Return the keys of a checkbox mapping whose value is truthy.

    Lists are taken as already checked values.
    """
    if not options:
        return []

    if isinstance(options, Mapping):
        return [str(k) for k, v in options.items() if v]

    return [str(v) for v in options if v]


@dataclasses.dataclass(frozen=True)
class ComposableConfig:
    """Which entity types, bundles and fields a composable schema exposes."""

    enabled_entity_types: Tuple[str, ...] = ()
    enabled_fields: Mapping[str, Tuple[str, ...]] = dataclasses.field(
        default_factory=dict,
    )
    enabled_entity_fields: Tuple[str, ...] = ()
    enabled_entity_bundles: Mapping[str, Mapping[str, Any]] = dataclasses.field(
        default_factory=dict,
    )
    value_fields: bool = False

    @classmethod
    def from_configuration(cls, configuration: Mapping[str, Any]) -> ComposableConfig:
        base_fields = configuration.get("entity_base_fields") or {}
        return cls(
            enabled_entity_types=tuple(
                checked(configuration.get("enabled_entity_types")),
            ),
            enabled_fields={
                entity_type: tuple(checked(fields))
                for entity_type, fields in (configuration.get("fields") or {}).items()
            },
            enabled_entity_fields=tuple(checked(base_fields.get("fields"))),
            enabled_entity_bundles=dict(configuration.get("bundles") or {}),
            value_fields=bool(configuration.get("generate_value_fields")),
        )

    def get_enabled_entity_fields(self) -> List[str]:
        """Fields of the Entity interface. `id` is always enabled."""
        return [*self.enabled_entity_fields, "id"]

    def get_enabled_entity_bundles(self) -> Mapping[str, Mapping[str, Any]]:
        return self.enabled_entity_bundles

    def get_enabled_entity_types(self) -> Tuple[str, ...]:
        return self.enabled_entity_types

    def is_entity_type_enabled(self, entity_type: str) -> bool:
        return entity_type in self.enabled_entity_types

    def is_bundle_enabled(self, entity_type: str, bundle: str) -> bool:
        return bool(self.enabled_entity_bundles.get(entity_type, {}).get(bundle))

    def should_generate_value_fields(self) -> bool:
        return self.value_fields

    def field_is_enabled(self, entity_type: str, field_name: str) -> bool:
        fields = self.enabled_fields.get(entity_type)
        if not fields:
            return False
        return field_name in fields


ConfigurationMapping = Dict[str, Any]
BundleInfo = Callable[[str], Iterable[str]]


def upgrade_new_configuration(configuration: Mapping[str, Any]) -> ConfigurationMapping:
    """Enable the default base entity fields and value field generation."""
    upgraded = copy.deepcopy(dict(configuration))
    upgraded.setdefault("entity_base_fields", {})["fields"] = dict.fromkeys(
        DEFAULT_ENTITY_BASE_FIELDS,
        1,
    )
    upgraded["generate_value_fields"] = 1
    return upgraded


def upgrade_enable_all_bundles(
    configuration: Mapping[str, Any],
    bundle_info: BundleInfo,
    *,
    is_content_type: Callable[[str], bool] = lambda entity_type: True,
) -> ConfigurationMapping:
    """Enable every bundle of each enabled content entity type.

    Configurations written before bundles could be chosen exposed all of them,
    this keeps their schema unchanged.
    """
    upgraded = copy.deepcopy(dict(configuration))
    for entity_type in checked(upgraded.get("enabled_entity_types")):
        if not is_content_type(entity_type):
            continue

        bundles = list(bundle_info(entity_type))
        upgraded.setdefault("bundles", {})[entity_type] = dict(zip(bundles, bundles))

    return upgraded


def upgrade_configuration(
    configuration: Mapping[str, Any],
    bundle_info: BundleInfo,
    **kwargs: Any,
) -> ConfigurationMapping:
    """Run every upgrade step, in order."""
    return upgrade_enable_all_bundles(
        upgrade_new_configuration(configuration),
        bundle_info,
        **kwargs,
    )

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Mapping, Optional

from django.apps import apps
from django.core.exceptions import FieldDoesNotExist, ValidationError
from django.db import DatabaseError
from typing_extensions import Protocol

from strawberry_compose.context import static_language
from strawberry_compose.exceptions import UpstreamServiceError

from .base import DataProducer, InputSlot, ProducerDefinition

if TYPE_CHECKING:
    from django.db import models

    from strawberry_compose.config import ComposableConfig
    from strawberry_compose.context import FieldContext


class EntityStore(Protocol):
    def load(self, entity_type: str, entity_id: Any) -> Optional[Any]: ...

    def load_translation(self, entity: Any, language: str) -> Any: ...

    def bundle(self, entity_type: str, entity: Any) -> str: ...


def translate(entity: Any, language: Optional[str]) -> Any:
    """Return the translation of `entity` in `language`, if it has one.

    Entities opt into translations by implementing `has_translation(language)`
    and `get_translation(language)`.
    """
    if not language or not hasattr(entity, "get_translation"):
        return entity

    if not entity.has_translation(language):
        return entity

    return entity.get_translation(language)


class DjangoEntityStore:
    """Entity store over Django models.

    Entity type ids are mapped to model labels, e.g. `{"node": "app.Node"}`.
    Entities are looked up by `lookup_field`, and their bundle is read from
    `bundle_field` (models without it have a single bundle named after the
    entity type).
    """

    def __init__(
        self,
        models: Mapping[str, str],
        *,
        lookup_field: str = "pk",
        bundle_field: str = "bundle",
    ):
        self.models = dict(models)
        self.lookup_field = lookup_field
        self.bundle_field = bundle_field

    def get_model(self, entity_type: str) -> Optional[type[models.Model]]:
        label = self.models.get(entity_type)
        if label is None:
            return None
        return apps.get_model(label)

    def load(self, entity_type: str, entity_id: Any) -> Optional[Any]:
        model = self.get_model(entity_type)
        if model is None or entity_id is None:
            return None

        try:
            return (
                model._default_manager.filter(**{self.lookup_field: entity_id})
                .order_by()
                .first()
            )
        except (ValueError, ValidationError):
            # Malformed ids (e.g. not an uuid) can't match anything
            return None
        except DatabaseError as e:
            raise UpstreamServiceError(f"Could not load {entity_type} entity") from e

    def load_translation(self, entity: Any, language: str) -> Any:
        return translate(entity, language)

    def bundle(self, entity_type: str, entity: Any) -> str:
        return getattr(entity, self.bundle_field, None) or entity_type

    def bundles(self, entity_type: str) -> List[str]:
        """Every bundle known for an entity type, used to upgrade configurations."""
        model = self.get_model(entity_type)
        if model is None:
            return []

        try:
            field = model._meta.get_field(self.bundle_field)
        except FieldDoesNotExist:
            return [entity_type]

        if field.choices:
            return [str(value) for value, _label in field.flatchoices]

        return sorted(
            model._default_manager.order_by()
            .values_list(self.bundle_field, flat=True)
            .distinct(),
        )


class EntityLoad(DataProducer):
    """Load an entity by type and id, optionally in a given language.

    Entity types and bundles disabled in the schema configuration resolve to
    `None` as if they did not exist.
    """

    definition = ProducerDefinition(
        id="entity_load",
        produces="entity",
        name="Load entity",
        consumes=(
            InputSlot("type", type="string"),
            InputSlot("id", type="string"),
            InputSlot("language", type="string", required=False),
        ),
    )

    def __init__(self, store: EntityStore, config: ComposableConfig):
        self.store = store
        self.config = config

    def resolve(self, *, field_context: FieldContext, **inputs: Any) -> Any:
        entity_type = inputs["type"]
        language = inputs["language"]

        if not self.config.is_entity_type_enabled(entity_type):
            return None

        entity = self.store.load(entity_type, inputs["id"])
        if entity is None:
            return None

        bundle = self.store.bundle(entity_type, entity)
        if not self.config.is_bundle_enabled(entity_type, bundle):
            return None

        if language:
            translated = self.store.load_translation(entity, language)
            if translated is not entity:
                field_context.add_cache_contexts([static_language(language)])
            entity = translated

        return entity


class EntityField(DataProducer):
    """Read a field of an entity, if the field is exposed by the configuration."""

    definition = ProducerDefinition(
        id="entity_field",
        produces="any",
        name="Entity field",
        consumes=(
            InputSlot("entity", type="entity"),
            InputSlot("entity_type", type="string"),
            InputSlot("field", type="string"),
        ),
    )

    def __init__(self, config: ComposableConfig):
        self.config = config

    def resolve(self, *, field_context: FieldContext, **inputs: Any) -> Any:
        field = inputs["field"]
        if field not in self.config.get_enabled_entity_fields() and (
            not self.config.field_is_enabled(inputs["entity_type"], field)
        ):
            return None

        return getattr(inputs["entity"], field, None)

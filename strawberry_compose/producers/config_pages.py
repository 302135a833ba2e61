from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from django.apps import apps
from django.db import DatabaseError
from typing_extensions import Protocol

from strawberry_compose.context import static_language
from strawberry_compose.exceptions import UpstreamServiceError

from .base import DataProducer, InputSlot, ProducerDefinition

if TYPE_CHECKING:
    from strawberry_compose.context import FieldContext


class ConfigPageLoader(Protocol):
    def load_config(self, page_type: str) -> Optional[Any]: ...


class DjangoConfigPageLoader:
    """Load config pages from a model with a unique `type_field`."""

    def __init__(self, model: str, *, type_field: str = "type"):
        self.model = model
        self.type_field = type_field

    def load_config(self, page_type: str) -> Optional[Any]:
        model = apps.get_model(self.model)
        try:
            return model._default_manager.filter(
                **{self.type_field: page_type},
            ).first()
        except DatabaseError as e:
            raise UpstreamServiceError(f"Could not load config page {page_type!r}") from e


class TranslatableConfigPage(DataProducer):
    definition = ProducerDefinition(
        id="translatable_config_page",
        produces="entity",
        name="Translatable config page",
        description="Load a config page by type.",
        consumes=(
            InputSlot("page_type", type="string"),
            InputSlot("language", type="string", required=False),
        ),
    )

    def __init__(self, loader: ConfigPageLoader):
        self.loader = loader

    def resolve(self, *, field_context: FieldContext, **inputs: Any) -> Any:
        language = inputs["language"]

        config_page = self.loader.load_config(inputs["page_type"])
        if config_page is None:
            return None

        if language and config_page.has_translation(language):
            config_page = config_page.get_translation(language)
            field_context.add_cache_contexts([static_language(language)])

        # Everything resolved inside the page follows the requested language, even
        # when the page itself has no translation for it
        field_context.set_context_value("language", language or config_page.language)
        return config_page

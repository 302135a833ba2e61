from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from strawberry_compose.context import LANGUAGE_INTERFACE, USER

from .base import DataProducer, ProducerDefinition

if TYPE_CHECKING:
    from strawberry_compose.context import FieldContext


class CurrentLanguage(DataProducer):
    """The language fields below the current one should be resolved in.

    A language set on an ancestor field (e.g. by a translatable config page) wins
    over the negotiated request language.
    """

    definition = ProducerDefinition(
        id="current_language",
        produces="string",
        name="Current language",
    )

    def resolve(self, *, field_context: FieldContext, **inputs: Any) -> Optional[str]:
        field_context.add_cache_contexts([LANGUAGE_INTERFACE])
        return field_context.get_context_value("language")


class CurrentUser(DataProducer):
    definition = ProducerDefinition(
        id="current_user",
        produces="entity:user",
        name="Current user",
    )

    def resolve(self, *, field_context: FieldContext, **inputs: Any) -> Any:
        field_context.add_cache_contexts([USER])
        return field_context.get_context_value("user")

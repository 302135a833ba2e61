from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from strawberry_compose.context import USER_PERMISSIONS
from strawberry_compose.types import Environment

from .base import DataProducer, ProducerDefinition

if TYPE_CHECKING:
    from strawberry_compose.context import FieldContext
    from strawberry_compose.settings import EnvironmentIndicator


class ActiveEnvironment(DataProducer):
    """Return the currently active environment.

    Only users with the indicator permission see it, for everybody else, or when
    no named environment is configured, this resolves to `None`.
    """

    definition = ProducerDefinition(
        id="active_environment",
        produces="any",
        name="Active environment",
    )

    def __init__(self, environment: Optional[EnvironmentIndicator], permission: str):
        self.environment = environment
        self.permission = permission

    def resolve(
        self,
        *,
        field_context: FieldContext,
        **inputs: Any,
    ) -> Optional[Environment]:
        if not self.environment:
            return None

        field_context.add_cache_contexts([USER_PERMISSIONS])

        user = field_context.get_context_value("user")
        if not self.environment.get("name") or user is None:
            return None

        if not user.has_perm(self.permission):
            return None

        return Environment(
            name=self.environment["name"],
            fg_color=self.environment.get("fg_color"),
            bg_color=self.environment.get("bg_color"),
        )

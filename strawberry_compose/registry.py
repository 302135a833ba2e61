from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from strawberry import Schema

    from .builder import Pipeline

logger = logging.getLogger(__name__)

FieldKey = Tuple[str, str]


class ResolverRegistry:
    """Maps `(parent type, field name)` to a compiled resolver pipeline.

    Fields without a pipeline fall back to the default resolver. Registering a
    pipeline for a key that already has one replaces it.
    """

    def __init__(self):
        self._resolvers: Dict[FieldKey, Pipeline] = {}

    def add_field_resolver(
        self,
        parent_type: str,
        field_name: str,
        pipeline: Pipeline,
    ) -> None:
        key = (parent_type, field_name)
        if key in self._resolvers:
            logger.debug("Overriding resolver for %s.%s", parent_type, field_name)

        self._resolvers[key] = pipeline

    def get_field_resolver(
        self,
        parent_type: str,
        field_name: str,
    ) -> Optional[Pipeline]:
        return self._resolvers.get((parent_type, field_name))

    def field_keys(self) -> List[FieldKey]:
        return sorted(self._resolvers)

    def check_schema(self, schema: Schema) -> None:
        """Make sure every registered field exists in the given schema."""
        graphql_schema = schema._schema
        for parent_type, field_name in self.field_keys():
            type_ = graphql_schema.get_type(parent_type)
            fields = getattr(type_, "fields", None)
            if type_ is None:
                raise ConfigurationError(
                    f'Resolver registered for unknown type "{parent_type}"',
                )
            if fields is None or field_name not in fields:
                raise ConfigurationError(
                    f'Resolver registered for unknown field "{parent_type}.{field_name}"',
                )

    def __contains__(self, key: object) -> bool:
        return key in self._resolvers

    def __len__(self) -> int:
        return len(self._resolvers)

from __future__ import annotations

import logging
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    ClassVar,
    Dict,
    Iterator,
    Mapping,
    Optional,
    Type,
    cast,
)

from django.db import DatabaseError
from strawberry.extensions import SchemaExtension
from strawberry.types import ExecutionContext

from .context import FieldContext, RequestState, current_state, ensure_request_state
from .exceptions import UpstreamServiceError
from .resolvers import django_resolver
from .settings import strawberry_compose_settings

if TYPE_CHECKING:
    from graphql import GraphQLResolveInfo

    from .builder import Pipeline
    from .registry import ResolverRegistry

logger = logging.getLogger(__name__)


@django_resolver
def execute_pipeline(
    pipeline: Pipeline,
    parent: Any,
    arguments: Mapping[str, Any],
    field_context: FieldContext,
) -> Any:
    try:
        return pipeline.execute(parent, arguments, field_context)
    except DatabaseError as e:
        raise UpstreamServiceError("The entity store is unavailable") from e


class ResolverRegistryExtension(SchemaExtension):
    """Resolve fields through the pipelines of a resolver registry.

    Fields without a registered pipeline use their default resolver. The cache
    contexts collected while resolving are available on the request state and,
    when `EXPOSE_CACHE_CONTEXTS` is enabled, in the response extensions.

    Use `for_registry` to get an extension class to hand to the schema, so each
    operation gets its own instance.

    """

    registry: ClassVar[ResolverRegistry]

    def __init__(self, *, execution_context: Optional[ExecutionContext] = None):
        super().__init__(execution_context=cast(ExecutionContext, execution_context))
        self.state: Optional[RequestState] = None

    @classmethod
    def for_registry(cls, registry: ResolverRegistry) -> Type[ResolverRegistryExtension]:
        return type(cls.__name__, (cls,), {"registry": registry})

    def get_state(self) -> RequestState:
        if self.state is None:
            self.state = ensure_request_state(self.execution_context)
        return self.state

    def on_operation(self) -> Iterator[None]:
        token = current_state.set(self.get_state())
        try:
            yield
        finally:
            current_state.reset(token)

        result = self.execution_context.result
        if result is None or not result.errors:
            return

        upstream = [
            e for e in result.errors if isinstance(e.original_error, UpstreamServiceError)
        ]
        if upstream:
            # Partial data can't be trusted when the store went away mid request
            logger.error("Upstream service error: %s", upstream[0].original_error)
            result.data = None
            result.errors = upstream

    def resolve(
        self,
        _next: Callable,
        root: Any,
        info: GraphQLResolveInfo,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        pipeline = self.registry.get_field_resolver(info.parent_type.name, info.field_name)
        if pipeline is None:
            return _next(root, info, *args, **kwargs)

        field_context = FieldContext.for_path(self.get_state(), info.path)
        return execute_pipeline(pipeline, root, kwargs, field_context)

    def get_results(self) -> Dict[str, Any]:
        if not strawberry_compose_settings()["EXPOSE_CACHE_CONTEXTS"]:
            return {}

        return {"cacheContexts": sorted(self.get_state().cache_contexts.merge())}

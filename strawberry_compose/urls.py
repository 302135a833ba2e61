from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from django.urls import path
from strawberry.django.views import AsyncGraphQLView, GraphQLView

from .access import AccessGate
from .config import ComposableConfig
from .settings import strawberry_compose_settings
from .views import AsyncComposeGraphQLView, ComposeGraphQLView

if TYPE_CHECKING:
    from django.urls import URLPattern
    from strawberry.schema import BaseSchema


@dataclasses.dataclass(frozen=True)
class GraphQLServer:
    """A GraphQL endpoint serving one schema.

    Attributes
    ----------
        id:
            Used to name the route, `graphql.query.<id>`.
        schema:
            The strawberry schema to serve.
        endpoint:
            The route, e.g. `graphql/`.
        schema_plugin:
            The kind of schema. Endpoints of the kinds listed in
            `SECURED_SCHEMA_PLUGINS` are gated.
        configuration:
            The schema configuration.

    """

    id: str
    schema: BaseSchema
    endpoint: str = "graphql/"
    schema_plugin: str = "core_composable"
    configuration: Dict[str, Any] = dataclasses.field(default_factory=dict)
    is_async: bool = False

    @property
    def route_name(self) -> str:
        return f"graphql.query.{self.id}"

    def get_config(self) -> ComposableConfig:
        return ComposableConfig.from_configuration(self.configuration)


def is_secured(server: GraphQLServer) -> bool:
    return server.schema_plugin in strawberry_compose_settings()["SECURED_SCHEMA_PLUGINS"]


def graphql_urlpatterns(
    servers: Iterable[GraphQLServer],
    *,
    gate: Optional[AccessGate] = None,
) -> List[URLPattern]:
    """Build the routes of the given servers.

    Secured servers are served by the gated, JSON only views, the others by the
    plain strawberry views.
    """
    patterns = []
    for server in servers:
        if is_secured(server):
            view_class = AsyncComposeGraphQLView if server.is_async else ComposeGraphQLView
            view = view_class.as_view(schema=server.schema, gate=gate)
        else:
            view_class = AsyncGraphQLView if server.is_async else GraphQLView
            view = view_class.as_view(schema=server.schema)

        patterns.append(path(server.endpoint, view, name=server.route_name))

    return patterns

import pytest
from django.urls import resolve, reverse
from strawberry.django.views import AsyncGraphQLView, GraphQLView

from strawberry_compose.access import AccessGate
from strawberry_compose.urls import GraphQLServer, graphql_urlpatterns, is_secured
from strawberry_compose.views import AsyncComposeGraphQLView, ComposeGraphQLView
from tests.schema import schema


@pytest.mark.parametrize(
    ("name", "url"),
    [
        ("graphql.query.default", "/graphql/"),
        ("graphql.query.default_async", "/graphql_async/"),
        ("graphql.query.public", "/graphql_public/"),
    ],
)
def test_route_names(name, url):
    assert reverse(name) == url


@pytest.mark.parametrize(
    ("url", "view_class"),
    [
        ("/graphql/", ComposeGraphQLView),
        ("/graphql_async/", AsyncComposeGraphQLView),
        ("/graphql_public/", GraphQLView),
    ],
)
def test_secured_servers_are_gated(url, view_class):
    assert resolve(url).func.view_class is view_class


def test_is_secured(settings):
    server = GraphQLServer(id="custom", schema=schema, schema_plugin="custom")
    assert not is_secured(server)

    settings.STRAWBERRY_COMPOSE = {"SECURED_SCHEMA_PLUGINS": ["custom"]}
    assert is_secured(server)
    assert not is_secured(GraphQLServer(id="default", schema=schema))


def test_urlpatterns_pass_the_gate():
    gate = AccessGate("tests.view_node", token="other")
    patterns = graphql_urlpatterns(
        [
            GraphQLServer(id="a", schema=schema, endpoint="a/"),
            GraphQLServer(id="b", schema=schema, endpoint="b/", schema_plugin="x", is_async=True),
        ],
        gate=gate,
    )

    assert [p.name for p in patterns] == ["graphql.query.a", "graphql.query.b"]
    assert patterns[0].callback.view_initkwargs["gate"] is gate
    assert patterns[1].callback.view_class is AsyncGraphQLView
    assert "gate" not in patterns[1].callback.view_initkwargs


def test_server_config():
    server = GraphQLServer(
        id="default",
        schema=schema,
        configuration={"enabled_entity_types": {"node": 1, "menu": 0}},
    )

    config = server.get_config()

    assert config.is_entity_type_enabled("node")
    assert not config.is_entity_type_enabled("menu")
    assert GraphQLServer(id="empty", schema=schema).get_config().get_enabled_entity_types() == ()

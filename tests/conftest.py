import pytest
from django.test.client import AsyncClient, Client

from strawberry_compose.test.client import AsyncTestClient, TestClient

from . import factories, models
from . import schema as test_schema


@pytest.fixture
def gql_client():
    return TestClient("/graphql/", Client(), token="s3cr3t")


@pytest.fixture
def anonymous_gql_client():
    return TestClient("/graphql/", Client())


@pytest.fixture
def async_gql_client():
    return AsyncTestClient("/graphql_async/", AsyncClient(), token="s3cr3t")


@pytest.fixture
def greeting_spy(mocker):
    return mocker.spy(test_schema.greeting, "resolve")


@pytest.fixture
def global_config(db):
    page = factories.ConfigPageFactory.create(site_name="My site")
    factories.ConfigPageTranslationFactory.create(page=page, site_name="Meine Seite")
    return page


@pytest.fixture
def article(db):
    node = factories.NodeFactory.create(title="Hello world")
    factories.NodeTranslationFactory.create(node=node, title="Hallo Welt")
    return node


@pytest.fixture
def main_menu(db):
    menu = factories.MenuFactory.create()
    home = factories.MenuLinkFactory.create(menu=menu, title="Home", weight=0)
    about = factories.MenuLinkFactory.create(menu=menu, title="About", weight=10)
    factories.MenuLinkFactory.create(menu=menu, title="Team", weight=0, parent=about)
    factories.MenuLinkFactory.create(menu=menu, title="Contact", weight=0)
    factories.MenuLinkFactory.create(menu=menu, title="Hidden", weight=5, enabled=False)
    factories.MenuLinkFactory.create(
        menu=menu,
        title="Admin",
        weight=20,
        permission="tests.view_node",
    )
    return {
        "menu": menu,
        "home": home,
        "about": about,
        "links": list(models.MenuLink.objects.filter(menu=menu)),
    }

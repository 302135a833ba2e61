import pytest

from strawberry_compose.config import (
    DEFAULT_ENTITY_BASE_FIELDS,
    ComposableConfig,
    checked,
    upgrade_configuration,
    upgrade_enable_all_bundles,
    upgrade_new_configuration,
)
from strawberry_compose.producers import DjangoEntityStore

CONFIGURATION = {
    "enabled_entity_types": {"node": "node", "menu": 0, "config_page": 1},
    "bundles": {"node": {"article": "article", "page": 0}},
    "fields": {"node": ["title", "created"]},
    "entity_base_fields": {"fields": {"uuid": 1, "label": 0}},
    "generate_value_fields": 1,
}


@pytest.mark.parametrize(
    ("options", "expected"),
    [
        (None, []),
        ({}, []),
        ({"a": 1, "b": 0, "c": "c", "d": ""}, ["a", "c"]),
        (["a", "", "b"], ["a", "b"]),
    ],
)
def test_checked(options, expected):
    assert checked(options) == expected


def test_from_configuration():
    config = ComposableConfig.from_configuration(CONFIGURATION)

    assert config.get_enabled_entity_types() == ("node", "config_page")
    assert config.is_entity_type_enabled("node")
    assert not config.is_entity_type_enabled("menu")
    assert config.is_bundle_enabled("node", "article")
    assert not config.is_bundle_enabled("node", "page")
    assert not config.is_bundle_enabled("config_page", "global")
    assert config.get_enabled_entity_bundles() == CONFIGURATION["bundles"]
    assert config.field_is_enabled("node", "created")
    assert not config.field_is_enabled("node", "body")
    assert not config.field_is_enabled("menu", "title")
    assert config.should_generate_value_fields()


def test_entity_fields_always_include_id():
    config = ComposableConfig.from_configuration(CONFIGURATION)

    assert config.get_enabled_entity_fields() == ["uuid", "id"]
    assert ComposableConfig().get_enabled_entity_fields() == ["id"]


def test_unchecked_fields_are_disabled():
    config = ComposableConfig.from_configuration(
        {"fields": {"node": {"title": "title", "body": 0, "created": 1}}},
    )

    assert config.field_is_enabled("node", "title")
    assert config.field_is_enabled("node", "created")
    assert not config.field_is_enabled("node", "body")


def test_empty_configuration():
    config = ComposableConfig.from_configuration({})

    assert config.get_enabled_entity_types() == ()
    assert not config.should_generate_value_fields()


def test_upgrade_new_configuration():
    configuration = {"enabled_entity_types": {"node": 1}}

    upgraded = upgrade_new_configuration(configuration)

    assert upgraded["entity_base_fields"]["fields"] == dict.fromkeys(
        DEFAULT_ENTITY_BASE_FIELDS,
        1,
    )
    assert upgraded["generate_value_fields"] == 1
    assert configuration == {"enabled_entity_types": {"node": 1}}


def test_upgrade_enable_all_bundles():
    configuration = {
        "enabled_entity_types": {"node": 1, "menu": 1, "media": 0},
        "bundles": {"node": {"article": 0}},
    }
    bundles = {"node": ["article", "page"], "menu": ["menu"], "media": ["image"]}

    upgraded = upgrade_enable_all_bundles(
        configuration,
        bundles.__getitem__,
        is_content_type=lambda entity_type: entity_type != "menu",
    )

    assert upgraded["bundles"] == {"node": {"article": "article", "page": "page"}}
    assert configuration["bundles"] == {"node": {"article": 0}}


def test_upgrade_configuration():
    upgraded = upgrade_configuration(
        {"enabled_entity_types": {"node": 1}},
        lambda entity_type: ["article"],
    )
    config = ComposableConfig.from_configuration(upgraded)

    assert config.is_bundle_enabled("node", "article")
    assert config.should_generate_value_fields()
    assert "uuid" in config.get_enabled_entity_fields()


@pytest.mark.django_db
def test_upgrade_with_entity_store_bundles():
    store = DjangoEntityStore({"node": "tests.Node"})
    upgraded = upgrade_enable_all_bundles({"enabled_entity_types": {"node": 1}}, store.bundles)

    assert upgraded["bundles"] == {"node": {"article": "article", "page": "page"}}

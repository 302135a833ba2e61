"""Code for interacting with Django settings."""

from typing import List, Optional, cast

from django.conf import settings
from typing_extensions import TypedDict


class EnvironmentIndicator(TypedDict, total=False):
    """Shape of the `ENVIRONMENT_INDICATOR` setting."""

    name: str
    fg_color: str
    bg_color: str


class StrawberryComposeSettings(TypedDict):
    """Dictionary defining the shape `settings.STRAWBERRY_COMPOSE` should have.

    All settings are optional and have defaults as described in their docstrings and
    defined in `DEFAULT_COMPOSE_SETTINGS`.
    """

    #: Permission that allows a user to execute arbitrary GraphQL requests.
    ACCESS_PERMISSION: str

    #: Shared secret accepted in place of the permission. Disabled when empty.
    ACCESS_TOKEN: Optional[str]

    #: Request header carrying the shared secret.
    ACCESS_TOKEN_HEADER: str

    #: Schema plugins whose endpoints are routed through the access gate.
    SECURED_SCHEMA_PLUGINS: List[str]

    #: The active environment, exposed by the `active_environment` producer.
    ENVIRONMENT_INDICATOR: Optional[EnvironmentIndicator]

    #: Permission required to see the active environment.
    ENVIRONMENT_INDICATOR_PERMISSION: str

    #: If True, the merged cache contexts are added to the response extensions.
    EXPOSE_CACHE_CONTEXTS: bool

    #: Site timezone that timestamps and aware date-times are rendered in.
    DEFAULT_TIMEZONE: str


DEFAULT_COMPOSE_SETTINGS = StrawberryComposeSettings(
    ACCESS_PERMISSION="strawberry_compose.execute_graphql_requests",
    ACCESS_TOKEN=None,
    ACCESS_TOKEN_HEADER="x-graphql-token",
    SECURED_SCHEMA_PLUGINS=["core_composable"],
    ENVIRONMENT_INDICATOR=None,
    ENVIRONMENT_INDICATOR_PERMISSION="strawberry_compose.access_environment_indicator",
    EXPOSE_CACHE_CONTEXTS=False,
    DEFAULT_TIMEZONE="UTC",
)


def strawberry_compose_settings() -> StrawberryComposeSettings:
    """Get strawberry compose settings.

    Return the dictionary from `settings.STRAWBERRY_COMPOSE`, with defaults
    for missing keys.

    Preferred to direct access for the type hints and defaults.
    """
    defaults = DEFAULT_COMPOSE_SETTINGS
    return cast(
        "StrawberryComposeSettings",
        {**defaults, **getattr(settings, "STRAWBERRY_COMPOSE", {})},
    )

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from strawberry_compose.settings import strawberry_compose_settings

from .base import DataProducer, FunctionProducer, InputSlot, ProducerDefinition, data_producer
from .config_pages import ConfigPageLoader, DjangoConfigPageLoader, TranslatableConfigPage
from .context import CurrentLanguage, CurrentUser
from .dates import DateRangeProducer, DateTimeProducer
from .entity import DjangoEntityStore, EntityField, EntityLoad, EntityStore
from .environment import ActiveEnvironment
from .listing import Listing, ListingDisplay, ListingExecutable, ViewExecutable
from .menu import (
    DjangoMenuLinkTree,
    MenuLinks,
    MenuLinkTree,
    MenuLinkTreeElement,
    MenuTreeParameters,
)
from .registry import ProducerRegistry

if TYPE_CHECKING:
    from strawberry_compose.config import ComposableConfig


def default_producers(
    *,
    config: Optional[ComposableConfig] = None,
    entity_store: Optional[EntityStore] = None,
    config_page_loader: Optional[ConfigPageLoader] = None,
    menu_tree: Optional[MenuLinkTree] = None,
) -> List[DataProducer]:
    """Build the built-in producers.

    Producers backed by a collaborator are only included when that collaborator
    is given.
    """
    settings = strawberry_compose_settings()

    producers: List[DataProducer] = [
        CurrentLanguage(),
        CurrentUser(),
        ActiveEnvironment(
            settings["ENVIRONMENT_INDICATOR"],
            settings["ENVIRONMENT_INDICATOR_PERMISSION"],
        ),
        ViewExecutable(),
        DateTimeProducer(),
        DateRangeProducer(),
    ]

    if config is not None:
        producers.append(EntityField(config))
        if entity_store is not None:
            producers.append(EntityLoad(entity_store, config))

    if config_page_loader is not None:
        producers.append(TranslatableConfigPage(config_page_loader))

    if menu_tree is not None:
        producers.append(MenuLinks(menu_tree))

    return producers


__all__ = [
    "ActiveEnvironment",
    "ConfigPageLoader",
    "CurrentLanguage",
    "CurrentUser",
    "DataProducer",
    "DateRangeProducer",
    "DateTimeProducer",
    "DjangoConfigPageLoader",
    "DjangoEntityStore",
    "DjangoMenuLinkTree",
    "EntityField",
    "EntityLoad",
    "EntityStore",
    "FunctionProducer",
    "InputSlot",
    "Listing",
    "ListingDisplay",
    "ListingExecutable",
    "MenuLinkTree",
    "MenuLinkTreeElement",
    "MenuLinks",
    "MenuTreeParameters",
    "ProducerDefinition",
    "ProducerRegistry",
    "TranslatableConfigPage",
    "ViewExecutable",
    "data_producer",
    "default_producers",
]

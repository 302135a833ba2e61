from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any, Callable, Dict, FrozenSet, List, Optional

from strawberry_compose.exceptions import ProducerError

from .base import DataProducer, InputSlot, ProducerDefinition

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from strawberry_compose.context import FieldContext


@dataclasses.dataclass(frozen=True)
class ListingDisplay:
    """One way of displaying a listing, e.g. a page or a block."""

    id: str
    queryset: Callable[[], QuerySet]
    cache_contexts: FrozenSet[str] = frozenset()
    items_per_page: Optional[int] = None


@dataclasses.dataclass(frozen=True)
class Listing:
    """A named, configurable list of entities with one or more displays."""

    id: str
    displays: Dict[str, ListingDisplay]
    default_display: str = "default"

    def get_executable(self) -> ListingExecutable:
        return ListingExecutable(self)


class ListingExecutable:
    """Runtime object of a listing with its display and handlers set up."""

    def __init__(self, listing: Listing):
        self.listing = listing
        self.display: Optional[ListingDisplay] = None
        self.handlers_initialized = False

    def set_display(self, display_id: str) -> None:
        try:
            self.display = self.listing.displays[display_id]
        except KeyError:
            raise ProducerError(
                f'Listing "{self.listing.id}" has no display "{display_id}"',
            ) from None

    def init_display(self) -> None:
        if self.display is None:
            self.set_display(self.listing.default_display)

    def init_handlers(self) -> None:
        self.init_display()
        self.handlers_initialized = True

    @property
    def cache_contexts(self) -> FrozenSet[str]:
        return self.display.cache_contexts if self.display is not None else frozenset()

    def execute(self, page: int = 0) -> List[Any]:
        self.init_handlers()
        assert self.display is not None

        qs = self.display.queryset()
        limit = self.display.items_per_page
        if limit:
            qs = qs[page * limit : (page + 1) * limit]

        return list(qs)


class ViewExecutable(DataProducer):
    definition = ProducerDefinition(
        id="view_executable",
        produces="any",
        name="View executable",
        description="Return the view executable.",
        consumes=(
            InputSlot("view"),
            InputSlot("display_id", type="string", required=False),
        ),
    )

    def resolve(
        self,
        *,
        field_context: FieldContext,
        **inputs: Any,
    ) -> ListingExecutable:
        executable = inputs["view"].get_executable()

        if inputs["display_id"]:
            executable.set_display(inputs["display_id"])
        else:
            executable.init_display()

        executable.init_handlers()
        field_context.add_cacheable_dependency(executable)
        return executable

from __future__ import annotations

import dataclasses
import functools
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional, Sequence

from django.apps import apps
from typing_extensions import Protocol, TypeAlias

from strawberry_compose.context import USER_PERMISSIONS

from .base import DataProducer, InputSlot, ProducerDefinition

if TYPE_CHECKING:
    from strawberry_compose.context import FieldContext
    from strawberry_compose.utils.typing import UserType


@dataclasses.dataclass
class MenuTreeParameters:
    """Parameters used to load a menu tree.

    Depths are relative to the root, which is at depth 1.
    """

    root: Optional[Any] = None
    min_depth: Optional[int] = None
    max_depth: Optional[int] = None
    active_trail: Sequence[Any] = ()


@dataclasses.dataclass
class MenuLinkTreeElement:
    link: Optional[Any]
    depth: int
    subtree: List[MenuLinkTreeElement] = dataclasses.field(default_factory=list)
    in_active_trail: bool = False
    access: Optional[bool] = None


MenuTree: TypeAlias = List[MenuLinkTreeElement]
Manipulator: TypeAlias = Callable[[MenuTree], MenuTree]


class MenuLinkTree(Protocol):
    def load(self, menu_id: Any, parameters: MenuTreeParameters) -> MenuTree: ...

    def transform(self, tree: MenuTree, manipulators: Iterable[Manipulator]) -> MenuTree: ...


def check_access(tree: MenuTree, *, user: Optional[UserType]) -> MenuTree:
    """Mark each element's access and blank out links the user can't see.

    Links without a `permission` are public.
    """
    for element in tree:
        link = element.link
        permission = getattr(link, "permission", None) if link is not None else None
        element.access = not permission or (
            user is not None and user.has_perm(permission)
        )
        if not element.access:
            element.link = None
            element.subtree = []
        else:
            check_access(element.subtree, user=user)

    return tree


def visible_links(tree: MenuTree) -> MenuTree:
    """Drop the links the user can't access and the disabled ones, at every depth."""
    visible = []
    for element in tree:
        if element.link is None or not getattr(element.link, "enabled", True):
            continue
        element.subtree = visible_links(element.subtree)
        visible.append(element)
    return visible


def _sort_key(element: MenuLinkTreeElement):
    link = element.link
    if link is None:
        return (0, "")
    return (getattr(link, "weight", 0) or 0, getattr(link, "title", "") or "")


def generate_index_and_sort(tree: MenuTree) -> MenuTree:
    """Sort each level by weight, then title."""
    for element in tree:
        element.subtree = generate_index_and_sort(element.subtree)
    return sorted(tree, key=_sort_key)


class DjangoMenuLinkTree:
    """Menu link tree stored in a self referencing model.

    The model needs `menu_field`, `parent_field`, `weight`, `title` and
    `enabled` fields, plus an optional `permission` one.
    """

    def __init__(
        self,
        model: str,
        *,
        menu_field: str = "menu",
        parent_field: str = "parent",
    ):
        self.model = model
        self.menu_field = menu_field
        self.parent_field = parent_field

    def load(self, menu_id: Any, parameters: MenuTreeParameters) -> MenuTree:
        model = apps.get_model(self.model)
        links = list(
            model._default_manager.filter(**{self.menu_field: menu_id}).order_by("pk"),
        )

        parent_attname = model._meta.get_field(self.parent_field).attname
        children: Dict[Any, List[Any]] = {}
        for link in links:
            children.setdefault(getattr(link, parent_attname), []).append(link)

        if parameters.root is not None:
            top = [link for link in links if str(link.pk) == str(parameters.root)]
        else:
            top = children.get(None, [])

        active_trail = {str(pk) for pk in parameters.active_trail}
        return self._build(top, children, 1, parameters, active_trail)

    def _build(
        self,
        links: List[Any],
        children: Dict[Any, List[Any]],
        depth: int,
        parameters: MenuTreeParameters,
        active_trail: set,
    ) -> MenuTree:
        if parameters.max_depth is not None and depth > parameters.max_depth:
            return []

        tree: MenuTree = []
        for link in links:
            subtree = self._build(
                children.get(link.pk, []),
                children,
                depth + 1,
                parameters,
                active_trail,
            )
            if parameters.min_depth is not None and depth < parameters.min_depth:
                # Levels above the minimum depth are left out, their children move up
                tree.extend(subtree)
                continue

            tree.append(
                MenuLinkTreeElement(
                    link=link,
                    depth=depth,
                    subtree=subtree,
                    in_active_trail=str(link.pk) in active_trail,
                ),
            )

        return tree

    def transform(self, tree: MenuTree, manipulators: Iterable[Manipulator]) -> MenuTree:
        for manipulator in manipulators:
            tree = manipulator(tree)
        return tree


class MenuLinks(DataProducer):
    definition = ProducerDefinition(
        id="menu_links_with_params",
        produces="any",
        name="Menu links",
        description="Returns the menu links of a menu.",
        consumes=(
            InputSlot("menu", type="entity:menu"),
            InputSlot("root", type="string", required=False),
            InputSlot("active_trail_ids", required=False, multiple=True),
            InputSlot("min_depth", type="integer", required=False),
            InputSlot("max_depth", type="integer", required=False),
        ),
    )

    def __init__(self, menu_tree: MenuLinkTree):
        self.menu_tree = menu_tree

    def resolve(
        self,
        *,
        field_context: FieldContext,
        **inputs: Any,
    ) -> List[MenuLinkTreeElement]:
        menu = inputs["menu"]
        parameters = MenuTreeParameters(
            root=inputs["root"] or None,
            min_depth=inputs["min_depth"] or None,
            max_depth=inputs["max_depth"] or None,
            active_trail=inputs["active_trail_ids"] or (),
        )

        tree = self.menu_tree.load(getattr(menu, "pk", menu), parameters)

        field_context.add_cache_contexts([USER_PERMISSIONS])
        user = field_context.get_context_value("user")
        tree = self.menu_tree.transform(
            tree,
            [functools.partial(check_access, user=user), generate_index_and_sort],
        )

        return visible_links(tree)

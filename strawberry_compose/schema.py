from __future__ import annotations

import abc
import heapq
import logging
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    Iterable,
    List,
    Optional,
    Sequence,
    Set,
    Type,
    Union,
)

import strawberry

from .builder import ResolverBuilder
from .exceptions import ConfigurationError
from .extensions import ResolverRegistryExtension
from .producers.registry import ProducerRegistry
from .registry import ResolverRegistry

if TYPE_CHECKING:
    from strawberry.extensions import SchemaExtension

    from .config import ComposableConfig
    from .producers.base import DataProducer

logger = logging.getLogger(__name__)


class ComposeSchemaExtension(abc.ABC):
    """A unit contributing field resolvers to a composable schema.

    Extensions that depend on other extensions are registered after them, so
    they can override the resolvers those registered.
    """

    id: str

    def entity_type_dependencies(self) -> Sequence[str]:
        """Entity types that must be enabled for this extension to be used."""
        return ()

    def extension_dependencies(self) -> Sequence[str]:
        return ()

    @abc.abstractmethod
    def register_resolvers(
        self,
        registry: ResolverRegistry,
        builder: ResolverBuilder,
    ) -> None: ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.id!r}>"


def _sort_extensions(
    extensions: Iterable[ComposeSchemaExtension],
) -> List[ComposeSchemaExtension]:
    by_id: Dict[str, ComposeSchemaExtension] = {}
    for extension in extensions:
        if extension.id in by_id:
            raise ConfigurationError(
                f'Schema extension "{extension.id}" is registered twice',
            )
        by_id[extension.id] = extension

    dependents: Dict[str, List[str]] = {ext_id: [] for ext_id in by_id}
    pending: Dict[str, int] = {}
    for ext_id, extension in by_id.items():
        dependencies = set(extension.extension_dependencies())
        for dependency in dependencies:
            if dependency not in by_id:
                raise ConfigurationError(
                    f'Schema extension "{ext_id}" depends on unknown extension '
                    f'"{dependency}"',
                )
            dependents[dependency].append(ext_id)
        pending[ext_id] = len(dependencies)

    # Ties are broken by id so the order never depends on registration order
    ready = [ext_id for ext_id, count in pending.items() if count == 0]
    heapq.heapify(ready)

    ordered = []
    while ready:
        ext_id = heapq.heappop(ready)
        ordered.append(by_id[ext_id])
        for dependent in dependents[ext_id]:
            pending[dependent] -= 1
            if pending[dependent] == 0:
                heapq.heappush(ready, dependent)

    if len(ordered) != len(by_id):
        cyclic = sorted(ext_id for ext_id, count in pending.items() if count > 0)
        raise ConfigurationError(
            f"Schema extensions have cyclic dependencies: {', '.join(cyclic)}",
        )

    return ordered


def build_resolver_registry(
    extensions: Iterable[ComposeSchemaExtension],
    producers: Union[ProducerRegistry, Iterable[DataProducer]],
    config: Optional[ComposableConfig] = None,
) -> ResolverRegistry:
    """Let each usable extension register its resolvers.

    The producer registry gets frozen. Extensions whose entity types are not
    enabled in `config`, and the extensions depending on them, are skipped.
    Any wiring error raises a `ConfigurationError`.
    """
    if not isinstance(producers, ProducerRegistry):
        producers = ProducerRegistry(producers)
    producers.freeze()

    registry = ResolverRegistry()
    builder = ResolverBuilder(producers)

    skipped: Set[str] = set()
    for extension in _sort_extensions(extensions):
        missing_types = [
            entity_type
            for entity_type in extension.entity_type_dependencies()
            if config is not None and not config.is_entity_type_enabled(entity_type)
        ]
        missing_extensions = [
            ext_id for ext_id in extension.extension_dependencies() if ext_id in skipped
        ]
        if missing_types or missing_extensions:
            logger.info(
                "Skipping schema extension %r, missing dependencies: %s",
                extension.id,
                ", ".join([*missing_types, *missing_extensions]),
            )
            skipped.add(extension.id)
            continue

        extension.register_resolvers(registry, builder)

    return registry


def compose_schema(
    query: Type,
    registry: ResolverRegistry,
    *,
    mutation: Optional[Type] = None,
    extensions: Iterable[Union[Type[SchemaExtension], SchemaExtension]] = (),
    **kwargs: Any,
) -> strawberry.Schema:
    """Build a schema whose fields resolve through `registry`.

    Raises a `ConfigurationError` when a resolver is registered for a type or
    field the schema does not have.
    """
    schema = strawberry.Schema(
        query=query,
        mutation=mutation,
        extensions=[*extensions, ResolverRegistryExtension.for_registry(registry)],
        **kwargs,
    )
    registry.check_schema(schema)
    return schema


class TranslatableConfigPages(ComposeSchemaExtension):
    """Expose the global config page, in the language of the request."""

    id = "translatable_config_pages"
    parent_type = "Query"

    def entity_type_dependencies(self) -> Sequence[str]:
        return ("config_page",)

    def register_resolvers(
        self,
        registry: ResolverRegistry,
        builder: ResolverBuilder,
    ) -> None:
        registry.add_field_resolver(
            self.parent_type,
            "globalConfig",
            builder.compose(
                builder.produce("translatable_config_page")
                .map("page_type", builder.from_value("global"))
                .map("language", builder.produce("current_language")),
            ),
        )

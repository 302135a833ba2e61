from .access import AccessGate, AccessResult
from .builder import Pipeline, ResolverBuilder
from .config import ComposableConfig
from .context import CacheContexts, ComposeContext, FieldContext, RequestState
from .exceptions import (
    ConfigurationError,
    CyclicPipelineError,
    MissingProducerError,
    ProducerError,
    UnboundSlotError,
    UnknownSlotError,
    UpstreamServiceError,
)
from .extensions import ResolverRegistryExtension
from .producers import (
    DataProducer,
    InputSlot,
    ProducerDefinition,
    ProducerRegistry,
    data_producer,
    default_producers,
)
from .registry import ResolverRegistry
from .resolvers import django_resolver
from .schema import (
    ComposeSchemaExtension,
    TranslatableConfigPages,
    build_resolver_registry,
    compose_schema,
)

__all__ = [
    "AccessGate",
    "AccessResult",
    "CacheContexts",
    "ComposableConfig",
    "ComposeContext",
    "ComposeSchemaExtension",
    "ConfigurationError",
    "CyclicPipelineError",
    "DataProducer",
    "FieldContext",
    "InputSlot",
    "MissingProducerError",
    "Pipeline",
    "ProducerDefinition",
    "ProducerError",
    "ProducerRegistry",
    "RequestState",
    "ResolverBuilder",
    "ResolverRegistry",
    "ResolverRegistryExtension",
    "TranslatableConfigPages",
    "UnboundSlotError",
    "UnknownSlotError",
    "UpstreamServiceError",
    "build_resolver_registry",
    "compose_schema",
    "data_producer",
    "default_producers",
    "django_resolver",
]

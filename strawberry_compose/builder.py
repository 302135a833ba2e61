"""Declarative composition of data producers into field resolver pipelines.

Example:
-------
    >>> builder = ResolverBuilder(producers)
    >>> pipeline = builder.compose(
    ...     builder.produce("translatable_config_page")
    ...     .map("page_type", builder.from_value("global"))
    ...     .map("language", builder.produce("current_language")),
    ... )

Nothing is invoked while composing. The returned `Pipeline` is immutable and
is executed once per resolved field.

"""

from __future__ import annotations

import abc
import dataclasses
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Tuple

from .exceptions import CyclicPipelineError, UnboundSlotError, UnknownSlotError

if TYPE_CHECKING:
    from .context import FieldContext
    from .producers.base import DataProducer
    from .producers.registry import ProducerRegistry


class Binding(abc.ABC):
    """Source of a value fed to a producer input or used as a pipeline step."""

    @abc.abstractmethod
    def evaluate(
        self,
        parent: Any,
        arguments: Mapping[str, Any],
        field_context: FieldContext,
    ) -> Any: ...


@dataclasses.dataclass(frozen=True)
class FromValue(Binding):
    value: Any

    def evaluate(self, parent, arguments, field_context):
        return self.value


@dataclasses.dataclass(frozen=True)
class FromParent(Binding):
    def evaluate(self, parent, arguments, field_context):
        return parent


@dataclasses.dataclass(frozen=True)
class FromArgument(Binding):
    name: str

    def evaluate(self, parent, arguments, field_context):
        return arguments.get(self.name)


@dataclasses.dataclass(frozen=True)
class FromContext(Binding):
    name: str
    default: Any = None

    def evaluate(self, parent, arguments, field_context):
        return field_context.get_context_value(self.name, self.default)


@dataclasses.dataclass(frozen=True)
class FromCallback(Binding):
    func: Callable[[Any, Mapping[str, Any], FieldContext], Any]

    def evaluate(self, parent, arguments, field_context):
        return self.func(parent, arguments, field_context)


class ProducerNode:
    """A producer invocation being composed.

    Mutable until its pipeline is compiled. Mapping a node onto another node's
    slot makes the second node consume the output of the first.
    """

    def __init__(self, producer_id: str):
        self.producer_id = producer_id
        self.mappings: Dict[str, Any] = {}

    def map(self, slot: str, binding: Any) -> ProducerNode:
        if not isinstance(binding, (Binding, ProducerNode)):
            binding = FromValue(binding)

        self.mappings[slot] = binding
        return self

    def __repr__(self) -> str:
        return f"<ProducerNode {self.producer_id!r} {sorted(self.mappings)!r}>"


@dataclasses.dataclass(frozen=True)
class CompiledProducer(Binding):
    producer: DataProducer
    bindings: Tuple[Tuple[str, Binding], ...]

    def evaluate(self, parent, arguments, field_context):
        definition = self.producer.definition

        inputs: Dict[str, Any] = {}
        for slot, binding in self.bindings:
            value = binding.evaluate(parent, arguments, field_context)
            # A required input that resolved to nothing short circuits this producer
            if value is None and definition.slots[slot].required:
                return None
            inputs[slot] = value

        return self.producer.invoke(inputs, field_context)


@dataclasses.dataclass(frozen=True)
class Pipeline:
    """A compiled composition of producers resolving one schema field."""

    steps: Tuple[Binding, ...]
    resolution_order: Tuple[str, ...]
    literals: Tuple[Any, ...]

    @property
    def producer_ids(self) -> frozenset[str]:
        return frozenset(self.resolution_order)

    def execute(
        self,
        parent: Any,
        arguments: Optional[Mapping[str, Any]],
        field_context: FieldContext,
    ) -> Any:
        arguments = arguments or {}
        value = parent
        for step in self.steps:
            value = step.evaluate(value, arguments, field_context)
            if value is None:
                return None

        return value


class ResolverBuilder:
    def __init__(self, producers: ProducerRegistry):
        self.producers = producers

    def produce(self, producer_id: str) -> ProducerNode:
        return ProducerNode(producer_id)

    def from_value(self, value: Any) -> FromValue:
        return FromValue(value)

    def from_parent(self) -> FromParent:
        return FromParent()

    def from_argument(self, name: str) -> FromArgument:
        return FromArgument(name)

    def from_context(self, name: str, default: Any = None) -> FromContext:
        return FromContext(name, default)

    def callback(
        self,
        func: Callable[[Any, Mapping[str, Any], FieldContext], Any],
    ) -> FromCallback:
        return FromCallback(func)

    def compose(self, *steps: Any) -> Pipeline:
        """Compile steps into a pipeline, validating the whole producer graph.

        Raises a `ConfigurationError` subclass for an unknown producer, a slot the
        producer does not consume, an unbound required slot or a cycle.
        """
        compiler = _Compiler(self.producers)
        compiled = tuple(compiler.compile(step) for step in steps)
        return Pipeline(
            steps=compiled,
            resolution_order=tuple(compiler.order),
            literals=tuple(compiler.literals),
        )


class _Compiler:
    def __init__(self, producers: ProducerRegistry):
        self.producers = producers
        self.order: List[str] = []
        self.literals: List[Any] = []
        self._stack: List[ProducerNode] = []

    def compile(self, binding: Any) -> Binding:
        if isinstance(binding, ProducerNode):
            return self._compile_node(binding)

        if not isinstance(binding, Binding):
            binding = FromValue(binding)

        if isinstance(binding, FromValue):
            self.literals.append(binding.value)

        return binding

    def _compile_node(self, node: ProducerNode) -> CompiledProducer:
        for i, ancestor in enumerate(self._stack):
            if ancestor is node:
                cycle = [n.producer_id for n in self._stack[i:]]
                raise CyclicPipelineError([*cycle, node.producer_id])

        producer = self.producers.get(node.producer_id)
        definition = producer.definition

        for slot in node.mappings:
            if definition.slot(slot) is None:
                raise UnknownSlotError(definition.id, slot)

        for slot in definition.required_slots:
            if slot.name not in node.mappings:
                raise UnboundSlotError(definition.id, slot.name)

        self._stack.append(node)
        try:
            # Follow the declared slot order so compiling is deterministic
            bindings = tuple(
                (slot.name, self.compile(node.mappings[slot.name]))
                for slot in definition.consumes
                if slot.name in node.mappings
            )
        finally:
            self._stack.pop()

        self.order.append(definition.id)
        return CompiledProducer(producer=producer, bindings=bindings)

from __future__ import annotations

import abc
import dataclasses
import functools
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    ClassVar,
    Dict,
    Iterable,
    Mapping,
    Optional,
    Tuple,
)

from strawberry_compose.exceptions import ConfigurationError, ProducerError

if TYPE_CHECKING:
    from strawberry_compose.context import FieldContext


@dataclasses.dataclass(frozen=True)
class InputSlot:
    """An input consumed by a data producer.

    Attributes
    ----------
        name:
            The name used when mapping a binding onto this slot.
        type:
            A type tag, e.g. `string` or `entity:menu`. Informational only.
        required:
            If a binding must be provided when composing a pipeline.
        default:
            The value used for an optional slot when its binding is missing or
            resolves to `None`.
        multiple:
            If the slot takes a list of values.

    """

    name: str
    type: str = "any"
    required: bool = True
    default: Any = None
    multiple: bool = False
    description: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class ProducerDefinition:
    id: str
    consumes: Tuple[InputSlot, ...] = ()
    produces: str = "any"
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        seen = set()
        for slot in self.consumes:
            if slot.name in seen:
                raise ConfigurationError(
                    f'Data producer "{self.id}" declares input "{slot.name}" twice',
                    producer_id=self.id,
                )
            seen.add(slot.name)

    @functools.cached_property
    def slots(self) -> Dict[str, InputSlot]:
        return {slot.name: slot for slot in self.consumes}

    @property
    def required_slots(self) -> Tuple[InputSlot, ...]:
        return tuple(slot for slot in self.consumes if slot.required)

    def slot(self, name: str) -> Optional[InputSlot]:
        return self.slots.get(name)


class DataProducer(abc.ABC):
    """Base data producer.

    A producer consumes named inputs and produces one value. Dependencies are
    given to the constructor, and `resolve` receives the bound inputs as keyword
    arguments together with the `field_context` of the field being resolved.

    Producers must return `None` for "not found" conditions instead of raising,
    so that downstream producers can short circuit.
    """

    definition: ClassVar[ProducerDefinition]

    @property
    def id(self) -> str:
        return self.definition.id

    def invoke(self, inputs: Mapping[str, Any], field_context: FieldContext) -> Any:
        definition = self.definition

        unknown = set(inputs) - set(definition.slots)
        if unknown:
            raise ProducerError(
                f'Data producer "{definition.id}" got unexpected inputs: '
                f"{', '.join(sorted(unknown))}",
            )

        kwargs = {}
        for slot in definition.consumes:
            value = inputs.get(slot.name)
            if value is None and not slot.required:
                value = slot.default
            kwargs[slot.name] = value

        return self.resolve(field_context=field_context, **kwargs)

    @abc.abstractmethod
    def resolve(self, *, field_context: FieldContext, **inputs: Any) -> Any: ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.definition.id!r}>"


class FunctionProducer(DataProducer):
    def __init__(self, definition: ProducerDefinition, func: Callable[..., Any]):
        self.definition = definition  # type: ignore[misc]
        self.func = func
        functools.update_wrapper(self, func)

    def resolve(self, *, field_context: FieldContext, **inputs: Any) -> Any:
        return self.func(field_context=field_context, **inputs)


def data_producer(
    id: str,  # noqa: A002
    *,
    consumes: Iterable[InputSlot] = (),
    produces: str = "any",
    name: Optional[str] = None,
    description: Optional[str] = None,
) -> Callable[[Callable[..., Any]], FunctionProducer]:
    """Turn a plain function into a data producer.

    Examples
    --------
        >>> @data_producer("greeting", consumes=[InputSlot("lang", required=False, default="en")])
        ... def greeting(*, lang, field_context):
        ...     return {"en": "Hello", "de": "Hallo"}.get(lang)

    """

    def wrapper(func: Callable[..., Any]) -> FunctionProducer:
        definition = ProducerDefinition(
            id=id,
            consumes=tuple(consumes),
            produces=produces,
            name=name,
            description=description if description is not None else func.__doc__,
        )
        return FunctionProducer(definition, func)

    return wrapper

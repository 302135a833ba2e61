from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING

from strawberry.exceptions.exception import StrawberryException

if TYPE_CHECKING:
    from strawberry.exceptions.exception_source import ExceptionSource


class ConfigurationError(StrawberryException):
    """Raised while building the schema when the resolver wiring is invalid.

    A schema that raised this error must not be published.
    """

    def __init__(self, message: str, *, producer_id: str | None = None):
        self.producer_id = producer_id
        self.message = message
        self.rich_message = f"[bold red]{message}"
        self.annotation_message = "invalid resolver configuration"

        super().__init__(self.message)

    @cached_property
    def exception_source(self) -> ExceptionSource | None:  # pragma: no cover
        return None


class MissingProducerError(ConfigurationError):
    def __init__(self, producer_id: str):
        super().__init__(
            f'Data producer "{producer_id}" is not registered',
            producer_id=producer_id,
        )


class UnboundSlotError(ConfigurationError):
    def __init__(self, producer_id: str, slot: str):
        self.slot = slot
        super().__init__(
            f'Missing required input "{slot}" for data producer "{producer_id}"',
            producer_id=producer_id,
        )


class UnknownSlotError(ConfigurationError):
    def __init__(self, producer_id: str, slot: str):
        self.slot = slot
        super().__init__(
            f'Data producer "{producer_id}" does not consume "{slot}"',
            producer_id=producer_id,
        )


class CyclicPipelineError(ConfigurationError):
    def __init__(self, producer_ids: list[str]):
        self.producer_ids = producer_ids
        chain = " -> ".join(producer_ids)
        super().__init__(
            f"Data producers form a cycle: {chain}",
            producer_id=producer_ids[0] if producer_ids else None,
        )


class ProducerError(Exception):
    """Raised by a data producer for an invalid argument or unusable input.

    Recovered as a null field value plus a field level error.
    """


class UpstreamServiceError(Exception):
    """Raised when a storage backend used by a producer is unavailable.

    Surfaced as a request level error, the response carries no data.
    """

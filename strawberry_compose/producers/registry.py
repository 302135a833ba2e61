from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator

from strawberry_compose.exceptions import ConfigurationError, MissingProducerError

from .base import DataProducer

logger = logging.getLogger(__name__)


class ProducerRegistry:
    """Data producers available to resolver pipelines, keyed by id.

    Producers are registered explicitly during startup. Once the registry is
    frozen, which happens when a resolver registry gets built from it, no more
    producers can be added.
    """

    def __init__(self, producers: Iterable[DataProducer] = ()):
        self._producers: Dict[str, DataProducer] = {}
        self._frozen = False
        for producer in producers:
            self.register(producer)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, producer: DataProducer) -> DataProducer:
        producer_id = producer.definition.id
        if self._frozen:
            raise ConfigurationError(
                f'Cannot register data producer "{producer_id}" on a frozen registry',
                producer_id=producer_id,
            )

        if producer_id in self._producers:
            raise ConfigurationError(
                f'Data producer "{producer_id}" is already registered',
                producer_id=producer_id,
            )

        logger.debug("Registered data producer %r", producer_id)
        self._producers[producer_id] = producer
        return producer

    def freeze(self) -> ProducerRegistry:
        self._frozen = True
        return self

    def get(self, producer_id: str) -> DataProducer:
        try:
            return self._producers[producer_id]
        except KeyError:
            raise MissingProducerError(producer_id) from None

    def __contains__(self, producer_id: object) -> bool:
        return producer_id in self._producers

    def __iter__(self) -> Iterator[DataProducer]:
        return iter(self._producers[k] for k in sorted(self._producers))

    def __len__(self) -> int:
        return len(self._producers)

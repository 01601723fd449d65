"""In-memory entity store, the default target of a feed load."""

from __future__ import annotations

from collections import defaultdict
from itertools import count
from logging import getLogger
from typing import TYPE_CHECKING

from gtfsgraph.domain.model import SerialEntity

if TYPE_CHECKING:
    from collections.abc import Iterator

    from gtfsgraph.domain.model import EntityType, IdentityBean

log = getLogger(__name__)


class InMemoryEntityStore:
    """Dict-backed store keyed by entity type and id.

    Entities without a natural key get a per-type serial id on save. Saving an
    entity whose id is already stored replaces the earlier entity.
    """

    def __init__(self) -> None:
        self._entities: defaultdict[EntityType, dict[object, IdentityBean]] = defaultdict(dict)
        self._serials: defaultdict[EntityType, count[int]] = defaultdict(lambda: count(1))
        self.is_open = False
        self.open_count = 0
        self.flush_count = 0
        self.close_count = 0

    def open(self) -> None:
        self.is_open = True
        self.open_count += 1

    def save(self, entity: IdentityBean) -> None:
        if isinstance(entity, SerialEntity) and entity.id is None:
            entity.id = next(self._serials[entity.entity_type])
        self._entities[entity.entity_type][entity.id] = entity

    def fetch(self, entity_type: EntityType, entity_id: object) -> IdentityBean | None:
        return self._entities.get(entity_type, {}).get(entity_id)

    def flush(self) -> None:
        self.flush_count += 1

    def close(self) -> None:
        self.is_open = False
        self.close_count += 1
        log.debug("Closed in-memory store holding %s entities", sum(map(len, self._entities.values())))

    def all(self, entity_type: EntityType) -> list[IdentityBean]:
        return list(self._entities.get(entity_type, {}).values())

    def count(self, entity_type: EntityType) -> int:
        return len(self._entities.get(entity_type, {}))

    def __iter__(self) -> Iterator[IdentityBean]:
        for entities in self._entities.values():
            yield from entities.values()

"""Per-entity bookkeeping between decoding and the store.

Handlers are looked up by entity type in a map supplied at construction.
Types without a handler are saved as-is.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Final, TypeAlias, cast

from gtfsgraph.domain.failures import is_failure
from gtfsgraph.domain.model import EntityType, IdentityBean

if TYPE_CHECKING:
    from gtfsgraph.domain.failures import LoadFailure
    from gtfsgraph.domain.model import Agency, AgencyAndId
    from gtfsgraph.domain.ports import EntityStore
    from gtfsgraph.domain.reading.identity import IdentifierSpace

log = getLogger(__name__)


class Disposition(StrEnum):
    SAVE = "save"
    DISCARD = "discard"


EntityHandler: TypeAlias = "Callable[[IdentityBean], Disposition | LoadFailure]"

CLAIMED_ENTITY_TYPES: Final[frozenset[EntityType]] = frozenset(
    {
        EntityType.ROUTE,
        EntityType.TRIP,
        EntityType.STOP,
        EntityType.FARE_ATTRIBUTE,
        EntityType.NOTE,
        EntityType.AREA,
        EntityType.PATHWAY,
        EntityType.LEVEL,
    }
)


def agency_handler(identifiers: IdentifierSpace) -> EntityHandler:
    """Assign missing agency ids and drop agencies already accepted."""

    def handle(entity: IdentityBean) -> Disposition | LoadFailure:
        agency = cast("Agency", entity)
        if not agency.id:
            default_id = identifiers.resolve_default_agency_id()
            agency.id = agency.name if is_failure(default_id) else default_id
        if not identifiers.accept_agency(agency):
            log.debug("Discarding agency %r: already accepted", agency.id)
            return Disposition.DISCARD
        return Disposition.SAVE

    return handle


def claim_handler(identifiers: IdentifierSpace, *, overwrite_duplicates: bool) -> EntityHandler:
    """Register the entity's local id under its agency scope."""

    def handle(entity: IdentityBean) -> Disposition | LoadFailure:
        entity_id = cast("AgencyAndId", entity.id)
        duplicate = identifiers.register_claim(
            entity.entity_type,
            entity_id.id,
            entity_id.agency_id,
            overwrite_allowed=overwrite_duplicates,
        )
        if duplicate is not None:
            return duplicate
        return Disposition.SAVE

    return handle


def default_handlers(
    identifiers: IdentifierSpace, *, overwrite_duplicates: bool = False
) -> dict[EntityType, EntityHandler]:
    claim = claim_handler(identifiers, overwrite_duplicates=overwrite_duplicates)
    handlers: dict[EntityType, EntityHandler] = dict.fromkeys(CLAIMED_ENTITY_TYPES, claim)
    handlers[EntityType.AGENCY] = agency_handler(identifiers)
    return handlers


class EntityDispatcher:
    def __init__(self, store: EntityStore, handlers: Mapping[EntityType, EntityHandler]) -> None:
        self.store = store
        self._handlers = dict(handlers)

    def register_handler(self, entity_type: EntityType, handler: EntityHandler) -> None:
        self._handlers[entity_type] = handler

    def dispatch(self, entity: object) -> Disposition | LoadFailure:
        """Run the entity's handler, then save it unless the handler discarded it."""

        if not isinstance(entity, IdentityBean):
            return Disposition.DISCARD
        handler = self._handlers.get(entity.entity_type)
        disposition = Disposition.SAVE if handler is None else handler(entity)
        if disposition is Disposition.SAVE:
            self.store.save(entity)
        return disposition

"""Reference resolution: qualify bare ids and fetch previously loaded entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gtfsgraph.domain.failures import NoDefaultAgency, ReferenceNotFound, is_failure, require
from gtfsgraph.domain.model import AgencyAndId, EntityType

if TYPE_CHECKING:
    from gtfsgraph.domain.failures import Outcome
    from gtfsgraph.domain.model import Agency, IdentityBean
    from gtfsgraph.domain.ports import EntityStore
    from gtfsgraph.domain.reading.identity import IdentifierSpace


class ReferenceResolver:
    """Facade over the identifier space plus the store, used while decoding rows."""

    def __init__(self, identifiers: IdentifierSpace, store: EntityStore) -> None:
        self.identifiers = identifiers
        self.store = store

    def agency_for(self, entity_type: EntityType, local_id: str) -> Outcome[str]:
        return self.identifiers.agency_for(entity_type, local_id)

    def qualify(self, entity_type: EntityType, local_id: str) -> Outcome[AgencyAndId]:
        agency_id = self.agency_for(entity_type, local_id)
        if is_failure(agency_id):
            return agency_id
        return AgencyAndId(agency_id=agency_id, id=local_id)

    def resolve(self, entity_type: EntityType, local_id: str) -> Outcome[IdentityBean]:
        """Fetch the entity a bare id names, failing if it was never claimed."""

        if entity_type is EntityType.AGENCY:
            return self.resolve_agency(local_id)
        qualified = self.qualify(entity_type, local_id)
        if is_failure(qualified):
            return qualified
        entity = self.store.fetch(entity_type, qualified)
        if entity is None:
            return ReferenceNotFound(entity_type=entity_type, entity_id=local_id)
        return entity

    def resolve_agency(self, raw_id: str | None) -> Outcome[Agency]:
        """Accepted agency for an agency column; blank selects the default agency."""

        identifiers = self.identifiers
        if not raw_id:
            return self._default_agency()
        agency_id = identifiers.translate_agency_id(raw_id)
        agency = identifiers.agency_by_id(agency_id)
        if agency is not None:
            return agency
        if not identifiers.agencies:
            default_id = identifiers.resolve_default_agency_id()
            if is_failure(default_id):
                return default_id
        return ReferenceNotFound(entity_type=EntityType.AGENCY, entity_id=agency_id)

    def _default_agency(self) -> Outcome[Agency]:
        identifiers = self.identifiers
        default_id = identifiers.resolve_default_agency_id()
        if is_failure(default_id):
            return NoDefaultAgency()
        agency = identifiers.agency_by_id(require(default_id, "agency id"))
        if agency is not None:
            return agency
        if identifiers.agencies:
            return identifiers.agencies[0]
        return ReferenceNotFound(entity_type=EntityType.AGENCY, entity_id=default_id)

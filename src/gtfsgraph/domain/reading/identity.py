"""Identifier space: agency scopes, default agency and per-type claim ledgers.

One ``IdentifierSpace`` lives on a ``FeedReader`` and survives between runs,
so several feeds read by the same reader share their agencies and claims.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from gtfsgraph.domain.failures import (
    DuplicateIdentifier,
    NoDefaultAgency,
    ReferenceNotFound,
    require,
)

if TYPE_CHECKING:
    from gtfsgraph.domain.failures import Outcome
    from gtfsgraph.domain.model import Agency, EntityType

log = getLogger(__name__)


def default_agency_id(explicit: str | None, agencies: Sequence[Agency]) -> Outcome[str]:
    """Explicit configuration wins, else the first accepted agency's id."""

    if explicit:
        return explicit
    for agency in agencies:
        if agency.id:
            return agency.id
    return NoDefaultAgency()


@dataclass(slots=True)
class IdentifierSpace:
    default_agency_id: str | None = None
    agency_id_mapping: dict[str, str] = field(default_factory=dict[str, str])
    agencies: list[Agency] = field(default_factory=list["Agency"])
    _claims: dict[EntityType, dict[str, str]] = field(
        default_factory=dict["EntityType", dict[str, str]]
    )

    # agency ids ---------------------------------------------------------------

    def translate_agency_id(self, raw_id: str) -> str:
        return self.agency_id_mapping.get(raw_id, raw_id)

    def add_agency_id_mapping(self, from_id: str, to_id: str) -> None:
        self.agency_id_mapping[require(from_id, "agency id")] = require(to_id, "agency id")

    def resolve_default_agency_id(self) -> Outcome[str]:
        # recomputed on every call; the accepted list may grow between calls
        return default_agency_id(self.default_agency_id, self.agencies)

    # accepted agencies --------------------------------------------------------

    def has_agency(self, agency_id: str) -> bool:
        return self.agency_by_id(agency_id) is not None

    def agency_by_id(self, agency_id: str) -> Agency | None:
        require(agency_id, "agency id")
        for agency in self.agencies:
            if agency.id == agency_id:
                return agency
        return None

    def accept_agency(self, agency: Agency) -> bool:
        """Append ``agency`` unless one with an equal id was accepted before."""

        agency_id = require(agency.id, "agency id")
        if self.has_agency(agency_id):
            return False
        self.agencies.append(agency)
        return True

    # claims -------------------------------------------------------------------

    def register_claim(
        self,
        entity_type: EntityType,
        local_id: str,
        agency_id: str,
        *,
        overwrite_allowed: bool = False,
    ) -> DuplicateIdentifier | None:
        """Record that ``local_id`` of ``entity_type`` belongs to ``agency_id``.

        Any existing claim is a duplicate unless ``overwrite_allowed`` is set, in
        which case the new claim replaces it. A rejected claim leaves the ledger
        untouched.
        """

        require(entity_type, "entity type")
        require(local_id, "local id")
        require(agency_id, "agency id")
        ledger = self._claims.setdefault(entity_type, {})
        existing = ledger.get(local_id)
        if existing is not None:
            if not overwrite_allowed:
                return DuplicateIdentifier(
                    entity_type=entity_type,
                    entity_id=local_id,
                    agency_id=agency_id,
                    existing_agency_id=existing,
                )
            log.warning(
                "Overwriting %s claim %r: agency %r replaces %r",
                entity_type,
                local_id,
                agency_id,
                existing,
            )
        ledger[local_id] = agency_id
        return None

    def agency_for(self, entity_type: EntityType, local_id: str) -> Outcome[str]:
        require(entity_type, "entity type")
        require(local_id, "local id")
        agency_id = self._claims.get(entity_type, {}).get(local_id)
        if agency_id is None:
            return ReferenceNotFound(entity_type=entity_type, entity_id=local_id)
        return agency_id

    def claims_for(self, entity_type: EntityType) -> Mapping[str, str]:
        """Read-only view of one entity type's ledger (local id -> agency id)."""

        return dict(self._claims.get(require(entity_type, "entity type"), {}))

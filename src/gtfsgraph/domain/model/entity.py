"""
Base building blocks:
identity and agency-scope semantics shared by every feed entity.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from gtfsgraph.domain.model.enums import EntityType
    from gtfsgraph.domain.model.primitives import AgencyAndId


class IdentityBean:
    """An entity that carries an identifier and is persisted through the entity store."""

    # class-level discriminator; subclasses must override
    ENTITY_TYPE: ClassVar[EntityType]

    id: object

    @property
    def entity_type(self) -> EntityType:
        return self.ENTITY_TYPE

    @property
    def agency_scope(self) -> str | None:
        """Agency namespace the entity's id lives in, if the id is agency-scoped."""
        return None


@dataclass(eq=False, kw_only=True)
class ScopedEntity(IdentityBean):
    """Entity whose id is a local id qualified by its owning agency."""

    id: AgencyAndId

    @property
    def agency_scope(self) -> str | None:
        return self.id.agency_id


@dataclass(eq=False, kw_only=True)
class SerialEntity(IdentityBean):
    """Entity without a natural key; the store assigns a serial id on save."""

    id: int | None = None

"""Port for the entity store the feed reader writes into."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from gtfsgraph.domain.model import EntityType, IdentityBean


@runtime_checkable
class EntityStore(Protocol):
    """Save/fetch contract plus the open/flush/close lifecycle of one load.

    The reader calls ``open`` once, ``flush`` after every table and ``close``
    after the last table. A failed load never reaches ``close``.
    """

    def open(self) -> None: ...

    def save(self, entity: IdentityBean) -> None: ...

    def fetch(self, entity_type: EntityType, entity_id: object) -> IdentityBean | None: ...

    def flush(self) -> None: ...

    def close(self) -> None: ...


__all__ = ["EntityStore"]

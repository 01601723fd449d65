"""SQLAlchemy-backed entity store."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker

from gtfsgraph.config.storage import get_database_config
from gtfsgraph.domain.model import CLASS_BY_ENTITY_TYPE, SerialEntity

from .mappings import create_all_tables, start_mappers

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from gtfsgraph.domain.model import EntityType, IdentityBean

log = getLogger(__name__)


class StoreStateError(RuntimeError):
    """Raised when the store is used outside an open session."""


def create_store_engine(database_uri: str | None = None) -> Engine:
    """Engine for ``database_uri`` (``DATABASE_URI`` or the data-dir SQLite file by default)."""

    return create_engine(database_uri or get_database_config().uri)


class SqlAlchemyEntityStore:
    """Entity store writing every entity type to its own table.

    ``open`` starts a session, ``flush`` commits what the last table saved and
    ``close`` commits and releases the session. Entities with a natural key are
    merged into the session: ``fetch`` returns the session's instance, not the
    object handed to ``save``, and saving an id that is already stored
    overwrites that row's values.
    """

    def __init__(self, engine: Engine) -> None:
        start_mappers()
        create_all_tables(engine)
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        self._session: Session | None = None

    @classmethod
    def from_uri(cls, database_uri: str | None = None) -> SqlAlchemyEntityStore:
        return cls(create_store_engine(database_uri))

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StoreStateError("Entity store is not open")
        return self._session

    @property
    def is_open(self) -> bool:
        return self._session is not None

    def open(self) -> None:
        if self._session is not None:
            raise StoreStateError("Entity store is already open")
        self._session = self._session_factory()

    def save(self, entity: IdentityBean) -> None:
        session = self.session
        if isinstance(entity, SerialEntity) and entity.id is None:
            session.add(entity)
            return
        existing = session.get(type(entity), entity.id)
        if existing is entity:
            return
        if existing is not None:
            log.debug("Replacing stored %s %s", entity.entity_type, entity.id)
        # updates a stored row in place; references become the session's instances
        session.merge(entity)
        # later rows fetch the merged instance by id through the identity map
        session.flush()

    def fetch(self, entity_type: EntityType, entity_id: object) -> IdentityBean | None:
        return self.session.get(CLASS_BY_ENTITY_TYPE[entity_type], entity_id)

    def flush(self) -> None:
        self.session.commit()

    def close(self) -> None:
        session = self.session
        try:
            session.commit()
        finally:
            session.close()
            self._session = None

    def all(self, entity_type: EntityType) -> list[IdentityBean]:
        """Every stored entity of ``entity_type``; opens a short-lived session when closed."""

        entity_cls = CLASS_BY_ENTITY_TYPE[entity_type]
        if self._session is not None:
            return list(self._session.scalars(select(entity_cls)))
        with self._session_factory() as session:
            return list(session.scalars(select(entity_cls)))

    def count(self, entity_type: EntityType) -> int:
        return len(self.all(entity_type))

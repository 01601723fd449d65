"""SQLAlchemy adapter package for gtfsgraph."""

from __future__ import annotations

from .mappings import AgencyAndIdType, create_all_tables, mapper_registry, start_mappers
from .store import SqlAlchemyEntityStore, StoreStateError, create_store_engine

__all__ = [
    "AgencyAndIdType",
    "SqlAlchemyEntityStore",
    "StoreStateError",
    "create_all_tables",
    "create_store_engine",
    "mapper_registry",
    "start_mappers",
]

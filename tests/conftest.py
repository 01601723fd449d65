from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from gtfsgraph.adapters.memory import InMemoryEntityStore
from gtfsgraph.adapters.sqlalchemy import SqlAlchemyEntityStore
from gtfsgraph.domain.reading import IdentifierSpace, ReferenceResolver

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def memory_store() -> InMemoryEntityStore:
    store = InMemoryEntityStore()
    store.open()
    return store


@pytest.fixture
def identifiers() -> IdentifierSpace:
    return IdentifierSpace()


@pytest.fixture
def resolver(identifiers: IdentifierSpace, memory_store: InMemoryEntityStore) -> ReferenceResolver:
    return ReferenceResolver(identifiers, memory_store)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_store(sqlite_engine: Engine) -> SqlAlchemyEntityStore:
    return SqlAlchemyEntityStore(sqlite_engine)

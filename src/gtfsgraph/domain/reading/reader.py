"""Load orchestration: tables in dependency order, rows in file order."""

from __future__ import annotations

import csv
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING, NoReturn

from gtfsgraph.domain.failures import MissingTable, UnreadableTable, is_failure
from gtfsgraph.domain.reading.decoder import RowDecoder
from gtfsgraph.domain.reading.dispatch import Disposition, EntityDispatcher, default_handlers
from gtfsgraph.domain.reading.identity import IdentifierSpace
from gtfsgraph.domain.reading.resolver import ReferenceResolver
from gtfsgraph.domain.schema import DEFAULT_LOAD_ORDER, GTFS_REGISTRY

if TYPE_CHECKING:
    from gtfsgraph.domain.failures import LoadFailure
    from gtfsgraph.domain.model import Agency, EntityType
    from gtfsgraph.domain.ports import EntityStore, FeedSource
    from gtfsgraph.domain.schema import EntityDescriptor, SchemaRegistry

log = getLogger(__name__)

# header is line 1
_FIRST_DATA_LINE = 2


@dataclass(frozen=True, slots=True, kw_only=True)
class ReaderOptions:
    """Settings applied to the identifier space before the first run.

    ``agencies`` seeds the accepted-agency list, e.g. with the agencies of a
    feed read earlier into the same store.
    """

    default_agency_id: str | None = None
    agency_id_mapping: Mapping[str, str] = field(default_factory=dict[str, str])
    agencies: tuple[Agency, ...] = ()
    overwrite_duplicates: bool = False
    entity_types: tuple[EntityType, ...] = DEFAULT_LOAD_ORDER


class LoadState(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    CLOSED = "closed"


class LoadStateError(RuntimeError):
    """Raised when a load run is driven out of its Idle -> Loading -> Closed order."""


@dataclass(slots=True)
class LoadRun:
    """Lifecycle of one ``FeedReader.run`` against the store."""

    store: EntityStore
    state: LoadState = LoadState.IDLE
    counts: Counter[EntityType] = field(default_factory=Counter["EntityType"])
    skipped_tables: list[str] = field(default_factory=list[str])

    def open(self) -> None:
        self._expect(LoadState.IDLE, "open")
        self.store.open()
        self.state = LoadState.LOADING

    def flush(self) -> None:
        self._expect(LoadState.LOADING, "flush")
        self.store.flush()

    def close(self) -> None:
        self._expect(LoadState.LOADING, "close")
        self.store.close()
        self.state = LoadState.CLOSED

    def record(self, entity_type: EntityType, disposition: Disposition) -> None:
        if disposition is Disposition.SAVE:
            self.counts[entity_type] += 1

    def _expect(self, state: LoadState, action: str) -> None:
        if self.state is not state:
            raise LoadStateError(f"Cannot {action} a load run that is {self.state}")


@dataclass(frozen=True, slots=True)
class LoadSummary:
    counts: Mapping[EntityType, int]
    skipped_tables: tuple[str, ...]
    agencies: tuple[Agency, ...]

    @property
    def total(self) -> int:
        return sum(self.counts.values())


class FeedReader:
    """Reads feeds into an entity store.

    The identifier space (claims, accepted agencies, agency-id translations)
    belongs to the reader, not to a run: reading a second feed with the same
    reader merges it into the first one's identity state.
    """

    def __init__(
        self,
        store: EntityStore,
        options: ReaderOptions | None = None,
        *,
        registry: SchemaRegistry = GTFS_REGISTRY,
    ) -> None:
        self.options = options or ReaderOptions()
        self.store = store
        self.registry = registry
        self.identifiers = IdentifierSpace(
            default_agency_id=self.options.default_agency_id,
            agency_id_mapping=dict(self.options.agency_id_mapping),
        )
        for agency in self.options.agencies:
            self.identifiers.accept_agency(agency)
        self.resolver = ReferenceResolver(self.identifiers, store)
        self.decoder = RowDecoder(self.resolver)
        self.dispatcher = EntityDispatcher(
            store,
            default_handlers(
                self.identifiers, overwrite_duplicates=self.options.overwrite_duplicates
            ),
        )
        self.last_run: LoadRun | None = None

    @property
    def agencies(self) -> tuple[Agency, ...]:
        return tuple(self.identifiers.agencies)

    def run(self, source: FeedSource) -> LoadSummary:
        """Load every configured table of ``source`` into the store.

        Raises a ``FeedLoadError`` subclass on the first failure; the store is
        then left as the last per-table flush produced it and is not closed.
        """

        load = LoadRun(self.store)
        self.last_run = load
        load.open()
        for entity_type in self.options.entity_types:
            self._load_table(load, self.registry.descriptor_for(entity_type), source)
        load.close()
        log.info(
            "Finished feed load: %s entities, %s agencies, skipped %s",
            sum(load.counts.values()),
            len(self.identifiers.agencies),
            ", ".join(load.skipped_tables) or "nothing",
        )
        return LoadSummary(
            counts=MappingProxyType(dict(load.counts)),
            skipped_tables=tuple(load.skipped_tables),
            agencies=self.agencies,
        )

    def _load_table(self, load: LoadRun, descriptor: EntityDescriptor, source: FeedSource) -> None:
        filename = descriptor.filename
        if not source.has_table(filename):
            if descriptor.required:
                _abort(MissingTable(table=filename))
            log.debug("Skipping optional table %s: not present in feed", filename)
            load.skipped_tables.append(filename)
            return

        log.info("Reading %s", filename)
        line = _FIRST_DATA_LINE - 1
        try:
            for line, row in enumerate(source.read_table(filename), start=_FIRST_DATA_LINE):
                entity = self.decoder.decode(descriptor, row, line=line)
                if is_failure(entity):
                    _abort(entity)
                disposition = self.dispatcher.dispatch(entity)
                if is_failure(disposition):
                    _abort(disposition.located(table=filename, line=line))
                load.record(descriptor.entity_type, disposition)
        except (UnicodeDecodeError, csv.Error) as exc:
            failure = UnreadableTable(reason=str(exc), table=filename, line=line + 1)
            raise failure.to_error() from exc
        load.flush()
        log.info("Loaded %s %s entities", load.counts[descriptor.entity_type], descriptor.entity_type)


def _abort(failure: LoadFailure) -> NoReturn:
    raise failure.to_error()

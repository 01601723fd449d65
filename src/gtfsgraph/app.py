"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, TypeAlias

from gtfsgraph.adapters.csv_source import ZipFeedSource, open_feed_source
from gtfsgraph.adapters.http_feed import HttpFeedDownloader
from gtfsgraph.adapters.memory import InMemoryEntityStore
from gtfsgraph.domain.reading import FeedReader
from gtfsgraph.domain.schema import DEFAULT_LOAD_ORDER, GTFS_REGISTRY

if TYPE_CHECKING:
    from collections.abc import Sequence

    from gtfsgraph.domain.model import EntityType
    from gtfsgraph.domain.ports import EntityStore, FeedSource
    from gtfsgraph.domain.reading import LoadSummary, ReaderOptions

FeedDownloader: TypeAlias = "Callable[[str], FeedSource]"

log = getLogger(__name__)

_REMOTE_SCHEMES = ("http://", "https://")


@dataclass(frozen=True, slots=True)
class TableInfo:
    entity_type: EntityType
    filename: str
    required: bool


def is_remote(location: str | Path) -> bool:
    return isinstance(location, str) and location.lower().startswith(_REMOTE_SCHEMES)


def open_source(location: str | Path, *, downloader: FeedDownloader | None = None) -> FeedSource:
    """Feed source for a URL, a zip archive or a directory of tables."""

    if is_remote(location):
        return (downloader or HttpFeedDownloader())(str(location))
    return open_feed_source(Path(location))


def load_feed(
    location: str | Path,
    *,
    options: ReaderOptions | None = None,
    store: EntityStore | None = None,
    downloader: FeedDownloader | None = None,
) -> LoadSummary:
    """Read the feed at ``location`` into ``store`` (in memory by default)."""

    source = open_source(location, downloader=downloader)
    reader = FeedReader(store or InMemoryEntityStore(), options)
    log.info("Starting feed load from %s", location)
    try:
        summary = reader.run(source)
    finally:
        if isinstance(source, ZipFeedSource):
            source.close()
    log.info(
        "Finished feed load from %s: stored=%s, agencies=%s",
        location,
        summary.total,
        ", ".join(agency.id or "?" for agency in summary.agencies),
    )
    return summary


def table_overview(entity_types: Sequence[EntityType] = DEFAULT_LOAD_ORDER) -> list[TableInfo]:
    """Tables in load order with their filenames and whether the feed must provide them."""

    overview: list[TableInfo] = []
    for entity_type in entity_types:
        descriptor = GTFS_REGISTRY.descriptor_for(entity_type)
        overview.append(
            TableInfo(
                entity_type=entity_type,
                filename=descriptor.filename,
                required=descriptor.required,
            )
        )
    return overview

from __future__ import annotations

import zipfile
from typing import TYPE_CHECKING

import pytest

from gtfsgraph.adapters.csv_source import DirectoryFeedSource, InMemoryFeedSource
from gtfsgraph.adapters.memory import InMemoryEntityStore
from gtfsgraph.app import is_remote, load_feed, open_source, table_overview
from gtfsgraph.domain.failures import MissingTableError
from gtfsgraph.domain.model import EntityType
from gtfsgraph.domain.reading import ReaderOptions
from tests.helpers.feeds import MINIMAL_FEED

if TYPE_CHECKING:
    from pathlib import Path


def _write_zip(path: Path) -> Path:
    with zipfile.ZipFile(path, "w") as archive:
        for name, text in MINIMAL_FEED.items():
            archive.writestr(f"gtfs/{name}", text)
    return path


def test_remote_locations_are_urls_only(tmp_path: Path) -> None:
    assert is_remote("https://feeds.example/gtfs.zip")
    assert is_remote("HTTP://feeds.example/gtfs.zip")
    assert not is_remote("feeds/gtfs.zip")
    assert not is_remote(tmp_path)


def test_open_source_hands_urls_to_the_downloader(tmp_path: Path) -> None:
    requested: list[str] = []

    def downloader(url: str) -> InMemoryFeedSource:
        requested.append(url)
        return InMemoryFeedSource(MINIMAL_FEED)

    remote = open_source("https://feeds.example/gtfs.zip", downloader=downloader)

    assert isinstance(remote, InMemoryFeedSource)
    assert requested == ["https://feeds.example/gtfs.zip"]
    assert isinstance(open_source(tmp_path, downloader=downloader), DirectoryFeedSource)
    assert len(requested) == 1


def test_load_feed_from_zip_into_given_store(tmp_path: Path) -> None:
    store = InMemoryEntityStore()

    summary = load_feed(_write_zip(tmp_path / "feed.zip"), store=store)

    assert summary.total == 8
    assert store.count(EntityType.STOP) == 2
    assert store.close_count == 1


def test_load_feed_applies_options(tmp_path: Path) -> None:
    options = ReaderOptions(entity_types=(EntityType.AGENCY, EntityType.STOP))

    summary = load_feed(_write_zip(tmp_path / "feed.zip"), options=options)

    assert dict(summary.counts) == {EntityType.AGENCY: 1, EntityType.STOP: 2}


def test_load_feed_from_url_uses_the_downloader() -> None:
    summary = load_feed(
        "https://feeds.example/gtfs.zip",
        downloader=lambda url: InMemoryFeedSource(MINIMAL_FEED),
    )

    assert [agency.id for agency in summary.agencies] == ["A1"]


def test_load_feed_propagates_load_errors(tmp_path: Path) -> None:
    (tmp_path / "agency.txt").write_text(MINIMAL_FEED["agency.txt"], encoding="utf-8")

    with pytest.raises(MissingTableError):
        load_feed(tmp_path)


def test_table_overview_follows_load_order() -> None:
    overview = table_overview((EntityType.TRIP, EntityType.SHAPE_POINT))

    assert [(info.filename, info.required) for info in overview] == [
        ("trips.txt", True),
        ("shapes.txt", False),
    ]

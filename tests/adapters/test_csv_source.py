from __future__ import annotations

import io
import logging
import zipfile
from typing import TYPE_CHECKING

import pytest

from gtfsgraph.adapters.csv_source import (
    DirectoryFeedSource,
    InMemoryFeedSource,
    ZipFeedSource,
    iter_csv_rows,
    open_feed_source,
)
from tests.helpers.feeds import MINIMAL_FEED

if TYPE_CHECKING:
    from pathlib import Path


def _zip_bytes(members: dict[str, str]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, text in members.items():
            archive.writestr(name, text)
    return buffer.getvalue()


def test_rows_are_trimmed_and_keyed_by_header() -> None:
    rows = list(iter_csv_rows(["stop_id, stop_name\n", ' S1 , "Central Station"\n']))

    assert rows == [{"stop_id": "S1", "stop_name": "Central Station"}]


def test_quoted_values_keep_commas_and_newlines() -> None:
    text = 'stop_id,stop_desc\nS1,"north side, platform 2\nnear the clock"\n'

    (row,) = iter_csv_rows(io.StringIO(text, newline=""))

    assert row["stop_desc"] == "north side, platform 2\nnear the clock"


def test_blank_lines_are_skipped_and_short_rows_fill_with_none() -> None:
    rows = list(iter_csv_rows(["a,b,c\n", "\n", "1,2\n", " , \n", "4,5,6,7\n"]))

    assert rows == [{"a": "1", "b": "2", "c": None}, {"a": "4", "b": "5", "c": "6"}]


def test_byte_order_mark_is_stripped_from_the_header() -> None:
    source = InMemoryFeedSource({"stops.txt": "\ufeffstop_id\nS1\n"})

    assert list(source.read_table("stops.txt")) == [{"stop_id": "S1"}]


def test_directory_source_reads_tables(tmp_path: Path) -> None:
    (tmp_path / "agency.txt").write_text(MINIMAL_FEED["agency.txt"], encoding="utf-8-sig")
    source = DirectoryFeedSource(tmp_path)

    assert source.has_table("agency.txt")
    assert not source.has_table("shapes.txt")
    (row,) = source.read_table("agency.txt")
    assert row["agency_id"] == "A1"


def test_directory_source_requires_a_directory(tmp_path: Path) -> None:
    with pytest.raises(NotADirectoryError):
        DirectoryFeedSource(tmp_path / "missing")


def test_zip_source_finds_tables_inside_an_enclosing_folder() -> None:
    payload = _zip_bytes({"feed/": "", "feed/stops.txt": MINIMAL_FEED["stops.txt"]})

    with ZipFeedSource(payload) as source:
        assert source.has_table("stops.txt")
        assert [row["stop_id"] for row in source.read_table("stops.txt")] == ["S1", "S2"]


def test_zip_source_keeps_the_first_of_repeated_basenames(
    caplog: pytest.LogCaptureFixture,
) -> None:
    payload = _zip_bytes({"a/stops.txt": "stop_id\nFIRST\n", "b/stops.txt": "stop_id\nSECOND\n"})

    with caplog.at_level(logging.WARNING), ZipFeedSource(payload) as source:
        rows = list(source.read_table("stops.txt"))

    assert rows == [{"stop_id": "FIRST"}]
    assert "Ignoring b/stops.txt" in caplog.text


def test_open_feed_source_detects_directories_and_archives(tmp_path: Path) -> None:
    archive = tmp_path / "feed.zip"
    archive.write_bytes(_zip_bytes(MINIMAL_FEED))

    assert isinstance(open_feed_source(tmp_path), DirectoryFeedSource)
    source = open_feed_source(archive)
    assert isinstance(source, ZipFeedSource)
    source.close()


def test_open_feed_source_rejects_other_files(tmp_path: Path) -> None:
    plain = tmp_path / "feed.txt"
    plain.write_text("not a feed", encoding="utf-8")

    with pytest.raises(FileNotFoundError):
        open_feed_source(plain)
    with pytest.raises(FileNotFoundError):
        open_feed_source(tmp_path / "absent.zip")

"""Feed sources backed by CSV text: directories, zip archives and in-memory tables."""

from __future__ import annotations

import csv
import io
import zipfile
from logging import getLogger
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping
    from types import TracebackType

log = getLogger(__name__)

_BOM = "\ufeff"


def iter_csv_rows(lines: Iterable[str]) -> Iterator[dict[str, str | None]]:
    """Tokenize CSV text into column -> value rows.

    Leading whitespace is skipped and values are trimmed. Blank lines are
    ignored. A row shorter than the header maps the missing columns to
    ``None``; extra values beyond the header are dropped.
    """

    reader = csv.reader(lines, skipinitialspace=True)
    header: list[str] | None = None
    for record in reader:
        if not any(value.strip() for value in record):
            continue
        if header is None:
            header = [name.strip().removeprefix(_BOM) for name in record]
            continue
        row: dict[str, str | None] = dict.fromkeys(header)
        for name, value in zip(header, record, strict=False):
            row[name] = value.strip()
        yield row


class DirectoryFeedSource:
    """Tables stored as ``*.txt`` files in one directory."""

    def __init__(self, path: Path | str, *, encoding: str = "utf-8-sig") -> None:
        self.path = Path(path)
        self.encoding = encoding
        if not self.path.is_dir():
            raise NotADirectoryError(f"Feed directory not found: {self.path}")

    def has_table(self, filename: str) -> bool:
        return (self.path / filename).is_file()

    def read_table(self, filename: str) -> Iterator[dict[str, str | None]]:
        with (self.path / filename).open(encoding=self.encoding, newline="") as handle:
            yield from iter_csv_rows(handle)


class ZipFeedSource:
    """Tables stored in a zip archive, looked up by basename.

    Feeds are sometimes zipped with an enclosing folder; a table is found at
    any depth as long as its basename is unique.
    """

    def __init__(self, archive: Path | str | bytes, *, encoding: str = "utf-8-sig") -> None:
        target = io.BytesIO(archive) if isinstance(archive, bytes) else archive
        self._zip = zipfile.ZipFile(target)
        self.encoding = encoding
        self._members: dict[str, str] = {}
        for member in self._zip.namelist():
            if member.endswith("/"):
                continue
            basename = PurePosixPath(member).name
            if basename in self._members:
                log.warning(
                    "Ignoring %s: %s already provides %s", member, self._members[basename], basename
                )
                continue
            self._members[basename] = member

    def has_table(self, filename: str) -> bool:
        return filename in self._members

    def read_table(self, filename: str) -> Iterator[dict[str, str | None]]:
        with self._zip.open(self._members[filename]) as raw:
            text = io.TextIOWrapper(raw, encoding=self.encoding, newline="")
            yield from iter_csv_rows(text)

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> ZipFeedSource:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class InMemoryFeedSource:
    """Tables given as text, keyed by filename. Mostly useful in tests."""

    def __init__(self, tables: Mapping[str, str]) -> None:
        self._tables = dict(tables)

    def has_table(self, filename: str) -> bool:
        return filename in self._tables

    def read_table(self, filename: str) -> Iterator[dict[str, str | None]]:
        text = self._tables[filename].removeprefix(_BOM)
        return iter_csv_rows(io.StringIO(text, newline=""))


def open_feed_source(location: Path | str) -> DirectoryFeedSource | ZipFeedSource:
    """Open a local feed: a directory of tables or a zip archive."""

    path = Path(location)
    if path.is_dir():
        return DirectoryFeedSource(path)
    if zipfile.is_zipfile(path):
        return ZipFeedSource(path)
    raise FileNotFoundError(f"Not a feed directory or zip archive: {path}")

"""Adapters connecting the reading pipeline to feed sources and entity stores."""

from __future__ import annotations

from .csv_source import (
    DirectoryFeedSource,
    InMemoryFeedSource,
    ZipFeedSource,
    iter_csv_rows,
    open_feed_source,
)
from .memory import InMemoryEntityStore

__all__ = [
    "DirectoryFeedSource",
    "InMemoryEntityStore",
    "InMemoryFeedSource",
    "ZipFeedSource",
    "iter_csv_rows",
    "open_feed_source",
]

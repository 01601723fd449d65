"""Domain port definitions for adapters."""

from __future__ import annotations

from .source import FeedSource
from .store import EntityStore

__all__ = ["EntityStore", "FeedSource"]

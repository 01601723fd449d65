"""Port for reading the raw tables of a feed."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


@runtime_checkable
class FeedSource(Protocol):
    """A feed's tables, addressed by filename (``stops.txt``)."""

    def has_table(self, filename: str) -> bool: ...

    def read_table(self, filename: str) -> Iterator[Mapping[str, str | None]]:
        """Yield one column -> token mapping per data row, header excluded."""
        ...


__all__ = ["FeedSource"]

"""Feed reading pipeline.

Rows flow through four stages, each returning failure values rather than
raising:

1) ``RowDecoder`` turns a raw row into an entity using its descriptor
2) ``ReferenceResolver`` qualifies and fetches the entities a row references
3) ``EntityDispatcher`` claims ids and accepts agencies in the ``IdentifierSpace``
4) ``FeedReader`` drives tables in load order and raises on the first failure
"""

from __future__ import annotations

from .decoder import RowDecoder
from .dispatch import (
    CLAIMED_ENTITY_TYPES,
    Disposition,
    EntityDispatcher,
    EntityHandler,
    agency_handler,
    claim_handler,
    default_handlers,
)
from .identity import IdentifierSpace, default_agency_id
from .reader import FeedReader, LoadRun, LoadState, LoadStateError, LoadSummary, ReaderOptions
from .resolver import ReferenceResolver

__all__ = [
    "CLAIMED_ENTITY_TYPES",
    "Disposition",
    "EntityDispatcher",
    "EntityHandler",
    "FeedReader",
    "IdentifierSpace",
    "LoadRun",
    "LoadState",
    "LoadStateError",
    "LoadSummary",
    "ReaderOptions",
    "ReferenceResolver",
    "RowDecoder",
    "agency_handler",
    "claim_handler",
    "default_agency_id",
    "default_handlers",
]

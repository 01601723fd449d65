"""Failure values and the exceptions they turn into.

Components of the reading pipeline (decoder, identifier space, resolver,
dispatcher) return failure values instead of raising. Only the feed reader
converts a failure into an exception, which aborts the load.

Precondition violations (``None`` ids or entity types handed to lookups) are
programming errors and raise ``ValueError`` immediately.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar, Self, TypeAlias, TypeGuard, TypeVar

if TYPE_CHECKING:
    from gtfsgraph.domain.model import EntityType


class FailureKind(StrEnum):
    MISSING_COLUMN = "missing_column"
    INVALID_VALUE = "invalid_value"
    MISSING_TABLE = "missing_table"
    UNREADABLE_TABLE = "unreadable_table"
    DUPLICATE_IDENTIFIER = "duplicate_identifier"
    REFERENCE_NOT_FOUND = "reference_not_found"
    NO_DEFAULT_AGENCY = "no_default_agency"


# Exceptions -------------------------------------------------------------------


class FeedLoadError(RuntimeError):
    """Raised when a feed load is aborted."""

    def __init__(self, message: str, *, failure: LoadFailure | None = None) -> None:
        super().__init__(message)
        self.failure = failure


class StructuralDecodingError(FeedLoadError):
    """Raised when a table's text cannot be read or a row does not match its schema."""


class MissingColumnError(StructuralDecodingError):
    """Raised when a required column has no value."""


class InvalidValueError(StructuralDecodingError):
    """Raised when a value fails its column's type grammar."""


class MissingTableError(FeedLoadError):
    """Raised when a required table is absent from the feed."""


class DuplicateEntityError(FeedLoadError):
    """Raised when a local id is claimed twice within one entity type."""


class EntityReferenceNotFoundError(FeedLoadError):
    """Raised when a row references an id that has not been loaded."""


class NoDefaultAgencyIdError(FeedLoadError):
    """Raised when a default agency is needed but none is configured or loaded."""


class UnknownEntityTypeError(LookupError):
    """Raised when a column schema is requested for an unregistered entity type."""


# Failure values ---------------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class _Failure(ABC):
    KIND: ClassVar[FailureKind]

    table: str | None = None
    line: int | None = None

    @property
    def kind(self) -> FailureKind:
        return self.KIND

    @property
    @abstractmethod
    def detail(self) -> str: ...

    @property
    def message(self) -> str:
        location = ""
        if self.table is not None:
            location = f" in {self.table}"
            if self.line is not None:
                location += f" (line {self.line})"
        return f"{self.detail}{location}"

    def located(self, *, table: str, line: int | None = None) -> Self:
        """Return a copy pinned to ``table``/``line``; a location already set is kept."""

        if self.table is not None and (self.line is not None or line is None):
            return self
        return replace(
            self,
            table=self.table or table,
            line=self.line if self.line is not None else line,
        )

    @abstractmethod
    def to_error(self) -> FeedLoadError: ...


@dataclass(frozen=True, slots=True, kw_only=True)
class MissingColumn(_Failure):
    KIND: ClassVar[FailureKind] = FailureKind.MISSING_COLUMN

    column: str

    @property
    def detail(self) -> str:
        return f"missing required column {self.column!r}"

    def to_error(self) -> MissingColumnError:
        return MissingColumnError(self.message, failure=self)


@dataclass(frozen=True, slots=True, kw_only=True)
class InvalidValue(_Failure):
    KIND: ClassVar[FailureKind] = FailureKind.INVALID_VALUE

    column: str
    value: str
    reason: str

    @property
    def detail(self) -> str:
        return f"invalid value {self.value!r} for column {self.column!r}: {self.reason}"

    def to_error(self) -> InvalidValueError:
        return InvalidValueError(self.message, failure=self)


@dataclass(frozen=True, slots=True, kw_only=True)
class MissingTable(_Failure):
    KIND: ClassVar[FailureKind] = FailureKind.MISSING_TABLE

    @property
    def detail(self) -> str:
        return "missing required table"

    def to_error(self) -> MissingTableError:
        return MissingTableError(self.message, failure=self)


@dataclass(frozen=True, slots=True, kw_only=True)
class UnreadableTable(_Failure):
    """Table text that is not valid for its encoding or cannot be tokenized as CSV.

    ``line`` is the first line that could not be read.
    """

    KIND: ClassVar[FailureKind] = FailureKind.UNREADABLE_TABLE

    reason: str

    @property
    def detail(self) -> str:
        return f"unreadable table text: {self.reason}"

    def to_error(self) -> StructuralDecodingError:
        return StructuralDecodingError(self.message, failure=self)


@dataclass(frozen=True, slots=True, kw_only=True)
class DuplicateIdentifier(_Failure):
    KIND: ClassVar[FailureKind] = FailureKind.DUPLICATE_IDENTIFIER

    entity_type: EntityType
    entity_id: str
    agency_id: str
    existing_agency_id: str

    @property
    def detail(self) -> str:
        return (
            f"duplicate {self.entity_type} id {self.entity_id!r} for agency {self.agency_id!r} "
            f"(already claimed by agency {self.existing_agency_id!r})"
        )

    def to_error(self) -> DuplicateEntityError:
        return DuplicateEntityError(self.message, failure=self)


@dataclass(frozen=True, slots=True, kw_only=True)
class ReferenceNotFound(_Failure):
    KIND: ClassVar[FailureKind] = FailureKind.REFERENCE_NOT_FOUND

    entity_type: EntityType
    entity_id: str

    @property
    def detail(self) -> str:
        return f"{self.entity_type} not found for id {self.entity_id!r}"

    def to_error(self) -> EntityReferenceNotFoundError:
        return EntityReferenceNotFoundError(self.message, failure=self)


@dataclass(frozen=True, slots=True, kw_only=True)
class NoDefaultAgency(_Failure):
    KIND: ClassVar[FailureKind] = FailureKind.NO_DEFAULT_AGENCY

    @property
    def detail(self) -> str:
        return "no default agency id: none configured and no agency loaded"

    def to_error(self) -> NoDefaultAgencyIdError:
        return NoDefaultAgencyIdError(self.message, failure=self)


LoadFailure: TypeAlias = (
    MissingColumn
    | InvalidValue
    | MissingTable
    | UnreadableTable
    | DuplicateIdentifier
    | ReferenceNotFound
    | NoDefaultAgency
)
T = TypeVar("T")
Outcome: TypeAlias = T | LoadFailure


def is_failure(value: object) -> TypeGuard[LoadFailure]:
    return isinstance(value, _Failure)


def require(value: T | None, what: str) -> T:
    """Reject ``None`` arguments to lookups (contract violation, not bad data)."""

    if value is None:
        raise ValueError(f"{what} must not be None")
    return value

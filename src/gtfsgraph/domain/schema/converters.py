"""Column value converters.

A converter turns one raw text token into a typed value. It returns a failure
value when the token does not match the column's grammar. Each converter also
knows its zero value, which the decoder uses when an optional column is
missing.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Final, Protocol

from gtfsgraph.domain.failures import InvalidValue, is_failure
from gtfsgraph.domain.model import AgencyAndId

if TYPE_CHECKING:
    from gtfsgraph.domain.failures import LoadFailure, Outcome
    from gtfsgraph.domain.model import EntityType
    from gtfsgraph.domain.reading.resolver import ReferenceResolver

_INTEGER: Final = re.compile(r"[+-]?\d+")
_NUMBER: Final = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_SERVICE_DATE: Final = re.compile(r"(\d{4})(\d{2})(\d{2})")
_SERVICE_TIME: Final = re.compile(r"(\d{1,3}):([0-5]\d):([0-5]\d)")


@dataclass(frozen=True, slots=True)
class FieldInput:
    """One token plus the row context a converter may need."""

    table: str
    column: str
    token: str
    row: Mapping[str, str | None]
    decoded: Mapping[str, object]

    def invalid(self, reason: str) -> InvalidValue:
        return InvalidValue(table=self.table, column=self.column, value=self.token, reason=reason)


class Converter(ABC):
    """Typed conversion for one column."""

    __slots__ = ()

    empty: object

    def missing(self, context: ReferenceResolver) -> Outcome[object]:
        """Value used when an optional column has no token."""
        _ = context
        return self.empty

    @abstractmethod
    def __call__(self, value: FieldInput, context: ReferenceResolver) -> Outcome[object]: ...


# Scalar converters ------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Text(Converter):
    empty: str | None = ""

    def __call__(self, value: FieldInput, context: ReferenceResolver) -> Outcome[object]:
        return value.token


@dataclass(frozen=True, slots=True)
class Integer(Converter):
    empty: int | None = 0

    def __call__(self, value: FieldInput, context: ReferenceResolver) -> Outcome[object]:
        return parse_integer(value)


@dataclass(frozen=True, slots=True)
class Number(Converter):
    empty: float | None = 0.0

    def __call__(self, value: FieldInput, context: ReferenceResolver) -> Outcome[object]:
        if not _NUMBER.fullmatch(value.token):
            return value.invalid("expected a number")
        return float(value.token)


@dataclass(frozen=True, slots=True)
class Code(Converter):
    """Enumerated integer code restricted to ``allowed``."""

    allowed: frozenset[int]
    empty: int | None = 0

    def __call__(self, value: FieldInput, context: ReferenceResolver) -> Outcome[object]:
        parsed = parse_integer(value)
        if is_failure(parsed):
            return parsed
        if parsed not in self.allowed:
            choices = ", ".join(str(code) for code in sorted(self.allowed))
            return value.invalid(f"expected one of {choices}")
        return parsed


@dataclass(frozen=True, slots=True)
class ServiceDateValue(Converter):
    """``YYYYMMDD`` calendar date."""

    empty: date | None = None

    def __call__(self, value: FieldInput, context: ReferenceResolver) -> Outcome[object]:
        match = _SERVICE_DATE.fullmatch(value.token)
        if match is None:
            return value.invalid("expected a YYYYMMDD date")
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError as exc:
            return value.invalid(str(exc))


@dataclass(frozen=True, slots=True)
class ServiceTimeValue(Converter):
    """``H:MM:SS`` service time as seconds since midnight; hours may exceed 23."""

    empty: int | None = None

    def __call__(self, value: FieldInput, context: ReferenceResolver) -> Outcome[object]:
        match = _SERVICE_TIME.fullmatch(value.token)
        if match is None:
            return value.invalid("expected a H:MM:SS time")
        hours, minutes, seconds = (int(part) for part in match.groups())
        return hours * 3600 + minutes * 60 + seconds


def parse_integer(value: FieldInput) -> int | LoadFailure:
    if not _INTEGER.fullmatch(value.token):
        return value.invalid("expected an integer")
    return int(value.token)


# Identifier converters --------------------------------------------------------


class AgencyScope(Protocol):
    """Where a composite id takes its agency component from."""

    def agency_id(self, value: FieldInput, context: ReferenceResolver) -> Outcome[str]: ...


@dataclass(frozen=True, slots=True)
class DefaultScope:
    """The resolved default agency."""

    def agency_id(self, value: FieldInput, context: ReferenceResolver) -> Outcome[str]:
        return context.identifiers.resolve_default_agency_id()


@dataclass(frozen=True, slots=True)
class ScopeColumn:
    """An explicit (translated) agency column, falling back to the default agency."""

    column: str

    def agency_id(self, value: FieldInput, context: ReferenceResolver) -> Outcome[str]:
        raw = (value.row.get(self.column) or "").strip()
        if not raw:
            return context.identifiers.resolve_default_agency_id()
        return context.identifiers.translate_agency_id(raw)


@dataclass(frozen=True, slots=True)
class ScopeFromField:
    """The agency scope of an entity decoded earlier in the same row."""

    field: str

    def agency_id(self, value: FieldInput, context: ReferenceResolver) -> Outcome[str]:
        referenced = value.decoded.get(self.field)
        scope = getattr(referenced, "agency_scope", None)
        if scope:
            return scope
        return context.identifiers.resolve_default_agency_id()


@dataclass(frozen=True, slots=True)
class AgencyIdValue(Converter):
    """A raw agency id, passed through the agency-id translation table."""

    empty: str | None = None

    def __call__(self, value: FieldInput, context: ReferenceResolver) -> Outcome[object]:
        return context.identifiers.translate_agency_id(value.token)


@dataclass(frozen=True, slots=True)
class CompositeId(Converter):
    """Local id column combined with an agency scope into an ``AgencyAndId``."""

    scope: AgencyScope = DefaultScope()
    empty: AgencyAndId | None = None

    def __call__(self, value: FieldInput, context: ReferenceResolver) -> Outcome[object]:
        agency_id = self.scope.agency_id(value, context)
        if is_failure(agency_id):
            return agency_id
        return AgencyAndId(agency_id=agency_id, id=value.token)


@dataclass(frozen=True, slots=True)
class EntityRef(Converter):
    """Bare id of a previously loaded entity, resolved to the entity itself."""

    entity_type: EntityType
    empty: None = None

    def __call__(self, value: FieldInput, context: ReferenceResolver) -> Outcome[object]:
        return context.resolve(self.entity_type, value.token)


@dataclass(frozen=True, slots=True)
class AgencyRef(Converter):
    """Agency column resolved to an accepted agency; blank selects the default agency."""

    empty: None = None

    def missing(self, context: ReferenceResolver) -> Outcome[object]:
        return context.resolve_agency(None)

    def __call__(self, value: FieldInput, context: ReferenceResolver) -> Outcome[object]:
        return context.resolve_agency(value.token)

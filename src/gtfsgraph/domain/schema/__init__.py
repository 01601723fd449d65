"""Declarative column schemas for feed tables.

Each entity type owns one ``EntityDescriptor`` listing its fields, the column
each field is read from and the converter that types the raw token. The
registry is built once at import time and never mutated afterwards.
"""

from __future__ import annotations

from .converters import (
    AgencyIdValue,
    AgencyRef,
    Code,
    CompositeId,
    Converter,
    DefaultScope,
    EntityRef,
    FieldInput,
    Integer,
    Number,
    ScopeColumn,
    ScopeFromField,
    ServiceDateValue,
    ServiceTimeValue,
    Text,
)
from .descriptors import EntityDescriptor, FieldDescriptor, SchemaRegistry, optional, required
from .gtfs import DEFAULT_LOAD_ORDER, GTFS_REGISTRY, descriptor_for

__all__ = [
    "DEFAULT_LOAD_ORDER",
    "GTFS_REGISTRY",
    "AgencyIdValue",
    "AgencyRef",
    "Code",
    "CompositeId",
    "Converter",
    "DefaultScope",
    "EntityDescriptor",
    "EntityRef",
    "FieldDescriptor",
    "FieldInput",
    "Integer",
    "Number",
    "SchemaRegistry",
    "ScopeColumn",
    "ScopeFromField",
    "ServiceDateValue",
    "ServiceTimeValue",
    "Text",
    "descriptor_for",
    "optional",
    "required",
]

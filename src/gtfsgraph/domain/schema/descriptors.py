"""Declarative column schema: field and entity descriptors plus their registry."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from gtfsgraph.domain.failures import UnknownEntityTypeError, require

if TYPE_CHECKING:
    from gtfsgraph.domain.model import EntityType, IdentityBean
    from gtfsgraph.domain.schema.converters import Converter


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """One entity attribute and the source column it is decoded from."""

    name: str
    converter: Converter
    column: str | None = None
    optional: bool = False


@dataclass(frozen=True, slots=True)
class EntityDescriptor:
    """Column schema for one entity type / feed table."""

    entity_type: EntityType
    entity_cls: type[IdentityBean]
    filename: str
    fields: tuple[FieldDescriptor, ...]
    prefix: str = ""
    required: bool = False

    def column_for(self, field: FieldDescriptor) -> str:
        """Source column for ``field``: explicit name, else the entity prefix + field name."""

        return field.column or f"{self.prefix}{field.name}"

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(self.column_for(field) for field in self.fields)


def required(name: str, converter: Converter, *, column: str | None = None) -> FieldDescriptor:
    return FieldDescriptor(name=name, converter=converter, column=column)


def optional(name: str, converter: Converter, *, column: str | None = None) -> FieldDescriptor:
    return FieldDescriptor(name=name, converter=converter, column=column, optional=True)


class SchemaRegistry:
    """Immutable lookup of entity descriptors by entity type."""

    def __init__(self, descriptors: Iterable[EntityDescriptor]) -> None:
        by_type: dict[EntityType, EntityDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.entity_type in by_type:
                raise ValueError(f"Duplicate descriptor for {descriptor.entity_type}")
            by_type[descriptor.entity_type] = descriptor
        self._descriptors = MappingProxyType(by_type)

    def descriptor_for(self, entity_type: EntityType) -> EntityDescriptor:
        require(entity_type, "entity type")
        try:
            return self._descriptors[entity_type]
        except KeyError:
            raise UnknownEntityTypeError(f"No column schema registered for {entity_type}") from None

    def __contains__(self, entity_type: object) -> bool:
        return entity_type in self._descriptors

    def __iter__(self) -> Iterator[EntityDescriptor]:
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)

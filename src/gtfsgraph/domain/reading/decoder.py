"""Row decoding driven entirely by entity descriptors."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gtfsgraph.domain.failures import MissingColumn, is_failure
from gtfsgraph.domain.schema.converters import FieldInput

if TYPE_CHECKING:
    from collections.abc import Mapping

    from gtfsgraph.domain.failures import LoadFailure
    from gtfsgraph.domain.model import IdentityBean
    from gtfsgraph.domain.reading.resolver import ReferenceResolver
    from gtfsgraph.domain.schema import EntityDescriptor


class RowDecoder:
    def __init__(self, context: ReferenceResolver) -> None:
        self.context = context

    def decode(
        self,
        descriptor: EntityDescriptor,
        row: Mapping[str, str | None],
        *,
        line: int | None = None,
    ) -> IdentityBean | LoadFailure:
        """Build one entity from ``row``.

        Fields are decoded in declaration order so later converters can read
        values decoded earlier in the same row (a route's agency scopes the
        route id). The first failure stops decoding and is returned pinned to
        the table and line.
        """

        table = descriptor.filename
        decoded: dict[str, object] = {}
        for field in descriptor.fields:
            column = descriptor.column_for(field)
            token = (row.get(column) or "").strip()
            if token:
                value = field.converter(
                    FieldInput(table=table, column=column, token=token, row=row, decoded=decoded),
                    self.context,
                )
            elif field.optional:
                value = field.converter.missing(self.context)
            else:
                value = MissingColumn(column=column)
            if is_failure(value):
                return value.located(table=table, line=line)
            decoded[field.name] = value
        return descriptor.entity_cls(**decoded)

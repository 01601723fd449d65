"""Domain primitives: scalar aliases + small value objects."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import ClassVar, TypeAlias

ServiceDate: TypeAlias = date
ServiceTime: TypeAlias = int  # seconds since midnight of the service day, may exceed 24h


@dataclass(frozen=True, order=True, slots=True)
class AgencyAndId:
    """Composite identifier: a local id scoped to the agency that owns it.

    Local ids are only unique within their agency, so equality and hashing use
    both components.
    """

    SEPARATOR: ClassVar[str] = "_"

    agency_id: str
    id: str

    def __str__(self) -> str:
        return f"{self.agency_id}{self.SEPARATOR}{self.id}"

    @classmethod
    def parse(cls, value: str) -> AgencyAndId:
        """Parse the ``agency_id`` + ``_`` + ``id`` rendering produced by ``str()``.

        The first separator splits the value, so agency ids must not contain it.
        """

        agency_id, separator, local_id = value.partition(cls.SEPARATOR)
        if not separator:
            raise ValueError(f"Invalid composite id: {value!r}")
        return cls(agency_id=agency_id, id=local_id)

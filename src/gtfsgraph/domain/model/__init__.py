"""Public domain model surface."""

from __future__ import annotations

from gtfsgraph.domain.model.entity import IdentityBean, ScopedEntity, SerialEntity
from gtfsgraph.domain.model.enums import EntityType
from gtfsgraph.domain.model.primitives import AgencyAndId, ServiceDate, ServiceTime
from gtfsgraph.domain.model.transit import (
    CLASS_BY_ENTITY_TYPE,
    Agency,
    Area,
    FareAttribute,
    FareRule,
    FeedInfo,
    Frequency,
    Level,
    Note,
    Pathway,
    Route,
    ServiceCalendar,
    ServiceCalendarDate,
    ShapePoint,
    Stop,
    StopTime,
    Transfer,
    Translation,
    Trip,
    Zone,
)

__all__ = [  # noqa: RUF022
    # base
    "IdentityBean",
    "ScopedEntity",
    "SerialEntity",
    # primitives
    "AgencyAndId",
    "ServiceDate",
    "ServiceTime",
    # enums
    "EntityType",
    # entities
    "CLASS_BY_ENTITY_TYPE",
    "Agency",
    "Area",
    "FareAttribute",
    "FareRule",
    "FeedInfo",
    "Frequency",
    "Level",
    "Note",
    "Pathway",
    "Route",
    "ServiceCalendar",
    "ServiceCalendarDate",
    "ShapePoint",
    "Stop",
    "StopTime",
    "Transfer",
    "Translation",
    "Trip",
    "Zone",
]

"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    """Discriminator for the closed set of feed entity kinds (one per table)."""

    AGENCY = "agency"
    SHAPE_POINT = "shape_point"
    NOTE = "note"
    AREA = "area"
    ROUTE = "route"
    LEVEL = "level"
    STOP = "stop"
    TRIP = "trip"
    STOP_TIME = "stop_time"
    CALENDAR = "calendar"
    CALENDAR_DATE = "calendar_date"
    FARE_ATTRIBUTE = "fare_attribute"
    FARE_RULE = "fare_rule"
    FREQUENCY = "frequency"
    PATHWAY = "pathway"
    TRANSFER = "transfer"
    FEED_INFO = "feed_info"
    TRANSLATION = "translation"
    ZONE = "zone"

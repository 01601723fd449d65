"""Transit feed entities, one record type per feed table.

These are plain attribute holders. Decoding, identity bookkeeping and
persistence live in ``gtfsgraph.domain.reading`` and the store adapters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from gtfsgraph.domain.model.entity import IdentityBean, ScopedEntity, SerialEntity
from gtfsgraph.domain.model.enums import EntityType

if TYPE_CHECKING:
    from gtfsgraph.domain.model.primitives import AgencyAndId, ServiceDate, ServiceTime


@dataclass(eq=False, kw_only=True)
class Agency(IdentityBean):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.AGENCY

    # optional in the source; assigned during dispatch when absent
    id: str | None = None
    name: str = ""
    url: str = ""
    timezone: str = ""
    lang: str = ""
    phone: str = ""
    fare_url: str = ""
    email: str = ""

    @property
    def agency_scope(self) -> str | None:
        return self.id


@dataclass(eq=False, kw_only=True)
class ShapePoint(SerialEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.SHAPE_POINT

    shape_id: AgencyAndId
    lat: float = 0.0
    lon: float = 0.0
    sequence: int = 0
    dist_traveled: float | None = None


@dataclass(eq=False, kw_only=True)
class Note(ScopedEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.NOTE

    mark: str = ""
    title: str = ""
    desc: str = ""


@dataclass(eq=False, kw_only=True)
class Area(ScopedEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.AREA

    name: str = ""


@dataclass(eq=False, kw_only=True)
class Route(ScopedEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.ROUTE

    agency: Agency | None = None
    short_name: str = ""
    long_name: str = ""
    desc: str = ""
    type: int = 0
    url: str = ""
    color: str = ""
    text_color: str = ""
    sort_order: int | None = None
    continuous_pickup: int | None = None
    continuous_drop_off: int | None = None
    network_id: str = ""


@dataclass(eq=False, kw_only=True)
class Level(ScopedEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.LEVEL

    index: float = 0.0
    name: str = ""


@dataclass(eq=False, kw_only=True)
class Stop(ScopedEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.STOP

    code: str = ""
    name: str = ""
    desc: str = ""
    lat: float = 0.0
    lon: float = 0.0
    zone_id: str = ""
    url: str = ""
    location_type: int = 0
    parent_station: str = ""
    timezone: str = ""
    wheelchair_boarding: int = 0
    level: Level | None = None
    platform_code: str = ""
    tts_name: str = ""


@dataclass(eq=False, kw_only=True)
class Trip(ScopedEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.TRIP

    route: Route
    service_id: AgencyAndId
    headsign: str = ""
    short_name: str = ""
    direction_id: str = ""
    block_id: str = ""
    shape_id: AgencyAndId | None = None
    wheelchair_accessible: int = 0
    bikes_allowed: int = 0


@dataclass(eq=False, kw_only=True)
class StopTime(SerialEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.STOP_TIME

    trip: Trip
    stop: Stop
    stop_sequence: int
    arrival_time: ServiceTime | None = None
    departure_time: ServiceTime | None = None
    stop_headsign: str = ""
    pickup_type: int = 0
    drop_off_type: int = 0
    shape_dist_traveled: float | None = None
    timepoint: int | None = None


@dataclass(eq=False, kw_only=True)
class ServiceCalendar(SerialEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.CALENDAR

    service_id: AgencyAndId
    monday: int = 0
    tuesday: int = 0
    wednesday: int = 0
    thursday: int = 0
    friday: int = 0
    saturday: int = 0
    sunday: int = 0
    start_date: ServiceDate | None = None
    end_date: ServiceDate | None = None


@dataclass(eq=False, kw_only=True)
class ServiceCalendarDate(SerialEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.CALENDAR_DATE

    service_id: AgencyAndId
    date: ServiceDate | None = None
    exception_type: int = 0


@dataclass(eq=False, kw_only=True)
class FareAttribute(ScopedEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.FARE_ATTRIBUTE

    price: float = 0.0
    currency_type: str = ""
    payment_method: int = 0
    transfers: int | None = None  # None means unlimited
    transfer_duration: int | None = None


@dataclass(eq=False, kw_only=True)
class FareRule(SerialEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.FARE_RULE

    fare: FareAttribute
    route: Route | None = None
    origin_id: str = ""
    destination_id: str = ""
    contains_id: str = ""


@dataclass(eq=False, kw_only=True)
class Frequency(SerialEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.FREQUENCY

    trip: Trip
    start_time: ServiceTime | None = None
    end_time: ServiceTime | None = None
    headway_secs: int = 0
    exact_times: int = 0


@dataclass(eq=False, kw_only=True)
class Pathway(ScopedEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.PATHWAY

    from_stop: Stop
    to_stop: Stop
    mode: int = 0
    is_bidirectional: int = 0
    length: float | None = None
    traversal_time: int | None = None
    stair_count: int | None = None
    max_slope: float | None = None
    min_width: float | None = None
    signposted_as: str = ""
    reversed_signposted_as: str = ""


@dataclass(eq=False, kw_only=True)
class Transfer(SerialEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.TRANSFER

    from_stop: Stop | None = None
    to_stop: Stop | None = None
    from_route: Route | None = None
    to_route: Route | None = None
    from_trip: Trip | None = None
    to_trip: Trip | None = None
    transfer_type: int = 0
    min_transfer_time: int | None = None


@dataclass(eq=False, kw_only=True)
class FeedInfo(SerialEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.FEED_INFO

    publisher_name: str = ""
    publisher_url: str = ""
    lang: str = ""
    default_lang: str = ""
    start_date: ServiceDate | None = None
    end_date: ServiceDate | None = None
    version: str = ""
    contact_email: str = ""
    contact_url: str = ""


@dataclass(eq=False, kw_only=True)
class Translation(SerialEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.TRANSLATION

    table_name: str = ""
    field_name: str = ""
    language: str = ""
    translation: str = ""
    record_id: str = ""
    record_sub_id: str = ""
    field_value: str = ""


@dataclass(eq=False, kw_only=True)
class Zone(IdentityBean):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.ZONE

    id: str
    lat: float = 0.0
    lon: float = 0.0
    name: str = ""


CLASS_BY_ENTITY_TYPE: dict[EntityType, type[IdentityBean]] = {
    cls.ENTITY_TYPE: cls
    for cls in (
        Agency,
        ShapePoint,
        Note,
        Area,
        Route,
        Level,
        Stop,
        Trip,
        StopTime,
        ServiceCalendar,
        ServiceCalendarDate,
        FareAttribute,
        FareRule,
        Frequency,
        Pathway,
        Transfer,
        FeedInfo,
        Translation,
        Zone,
    )
}

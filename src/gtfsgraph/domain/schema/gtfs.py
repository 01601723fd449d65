"""Column schemas for the GTFS tables and the order they are loaded in."""

from __future__ import annotations

from typing import Final

from gtfsgraph.domain.model import (
    Agency,
    Area,
    EntityType,
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
from gtfsgraph.domain.schema.converters import (
    AgencyIdValue,
    AgencyRef,
    Code,
    CompositeId,
    EntityRef,
    Integer,
    Number,
    ScopeColumn,
    ScopeFromField,
    ServiceDateValue,
    ServiceTimeValue,
    Text,
)
from gtfsgraph.domain.schema.descriptors import (
    EntityDescriptor,
    SchemaRegistry,
    optional,
    required,
)

_BOOLEAN: Final = frozenset({0, 1})
_ACCESSIBILITY: Final = frozenset({0, 1, 2})
_PICKUP_DROP_OFF: Final = frozenset({0, 1, 2, 3})

# Referents come before the tables that reference them: a bare id can only be
# resolved once its owning table has been read.
DEFAULT_LOAD_ORDER: Final[tuple[EntityType, ...]] = (
    EntityType.AGENCY,
    EntityType.SHAPE_POINT,
    EntityType.NOTE,
    EntityType.AREA,
    EntityType.ROUTE,
    EntityType.LEVEL,
    EntityType.STOP,
    EntityType.TRIP,
    EntityType.STOP_TIME,
    EntityType.CALENDAR,
    EntityType.CALENDAR_DATE,
    EntityType.FARE_ATTRIBUTE,
    EntityType.FARE_RULE,
    EntityType.FREQUENCY,
    EntityType.PATHWAY,
    EntityType.TRANSFER,
    EntityType.FEED_INFO,
    EntityType.TRANSLATION,
    EntityType.ZONE,
)

AGENCY = EntityDescriptor(
    entity_type=EntityType.AGENCY,
    entity_cls=Agency,
    filename="agency.txt",
    prefix="agency_",
    required=True,
    fields=(
        optional("id", AgencyIdValue()),
        required("name", Text()),
        required("url", Text()),
        required("timezone", Text()),
        optional("lang", Text()),
        optional("phone", Text()),
        optional("fare_url", Text()),
        optional("email", Text()),
    ),
)

SHAPE_POINT = EntityDescriptor(
    entity_type=EntityType.SHAPE_POINT,
    entity_cls=ShapePoint,
    filename="shapes.txt",
    fields=(
        required("shape_id", CompositeId()),
        required("lat", Number(), column="shape_pt_lat"),
        required("lon", Number(), column="shape_pt_lon"),
        required("sequence", Integer(), column="shape_pt_sequence"),
        optional("dist_traveled", Number(empty=None), column="shape_dist_traveled"),
    ),
)

NOTE = EntityDescriptor(
    entity_type=EntityType.NOTE,
    entity_cls=Note,
    filename="notes.txt",
    prefix="note_",
    fields=(
        required("id", CompositeId()),
        optional("mark", Text()),
        optional("title", Text()),
        optional("desc", Text()),
    ),
)

AREA = EntityDescriptor(
    entity_type=EntityType.AREA,
    entity_cls=Area,
    filename="areas.txt",
    prefix="area_",
    fields=(
        required("id", CompositeId()),
        optional("name", Text()),
    ),
)

ROUTE = EntityDescriptor(
    entity_type=EntityType.ROUTE,
    entity_cls=Route,
    filename="routes.txt",
    prefix="route_",
    required=True,
    fields=(
        optional("agency", AgencyRef(), column="agency_id"),
        required("id", CompositeId(ScopeFromField("agency"))),
        optional("short_name", Text()),
        optional("long_name", Text()),
        optional("desc", Text()),
        required("type", Integer()),
        optional("url", Text()),
        optional("color", Text()),
        optional("text_color", Text()),
        optional("sort_order", Integer(empty=None)),
        optional("continuous_pickup", Code(_PICKUP_DROP_OFF, empty=None), column="continuous_pickup"),
        optional(
            "continuous_drop_off", Code(_PICKUP_DROP_OFF, empty=None), column="continuous_drop_off"
        ),
        optional("network_id", Text(), column="network_id"),
    ),
)

LEVEL = EntityDescriptor(
    entity_type=EntityType.LEVEL,
    entity_cls=Level,
    filename="levels.txt",
    prefix="level_",
    fields=(
        required("id", CompositeId()),
        required("index", Number()),
        optional("name", Text()),
    ),
)

STOP = EntityDescriptor(
    entity_type=EntityType.STOP,
    entity_cls=Stop,
    filename="stops.txt",
    prefix="stop_",
    required=True,
    fields=(
        required("id", CompositeId()),
        optional("code", Text()),
        optional("name", Text()),
        optional("desc", Text()),
        optional("lat", Number()),
        optional("lon", Number()),
        optional("zone_id", Text(), column="zone_id"),
        optional("url", Text()),
        optional("location_type", Code(frozenset({0, 1, 2, 3, 4})), column="location_type"),
        optional("parent_station", Text(), column="parent_station"),
        optional("timezone", Text()),
        optional("wheelchair_boarding", Code(_ACCESSIBILITY), column="wheelchair_boarding"),
        optional("level", EntityRef(EntityType.LEVEL), column="level_id"),
        optional("platform_code", Text(), column="platform_code"),
        optional("tts_name", Text(), column="tts_stop_name"),
    ),
)

TRIP = EntityDescriptor(
    entity_type=EntityType.TRIP,
    entity_cls=Trip,
    filename="trips.txt",
    prefix="trip_",
    required=True,
    fields=(
        required("route", EntityRef(EntityType.ROUTE), column="route_id"),
        required("service_id", CompositeId(), column="service_id"),
        required("id", CompositeId(ScopeFromField("route"))),
        optional("headsign", Text()),
        optional("short_name", Text()),
        optional("direction_id", Text(), column="direction_id"),
        optional("block_id", Text(), column="block_id"),
        optional("shape_id", CompositeId(), column="shape_id"),
        optional("wheelchair_accessible", Code(_ACCESSIBILITY), column="wheelchair_accessible"),
        optional("bikes_allowed", Code(_ACCESSIBILITY), column="bikes_allowed"),
    ),
)

STOP_TIME = EntityDescriptor(
    entity_type=EntityType.STOP_TIME,
    entity_cls=StopTime,
    filename="stop_times.txt",
    required=True,
    fields=(
        required("trip", EntityRef(EntityType.TRIP), column="trip_id"),
        optional("arrival_time", ServiceTimeValue()),
        optional("departure_time", ServiceTimeValue()),
        required("stop", EntityRef(EntityType.STOP), column="stop_id"),
        required("stop_sequence", Integer()),
        optional("stop_headsign", Text()),
        optional("pickup_type", Code(_PICKUP_DROP_OFF)),
        optional("drop_off_type", Code(_PICKUP_DROP_OFF)),
        optional("shape_dist_traveled", Number(empty=None)),
        optional("timepoint", Code(_BOOLEAN, empty=None)),
    ),
)

CALENDAR = EntityDescriptor(
    entity_type=EntityType.CALENDAR,
    entity_cls=ServiceCalendar,
    filename="calendar.txt",
    fields=(
        required("service_id", CompositeId()),
        required("monday", Code(_BOOLEAN)),
        required("tuesday", Code(_BOOLEAN)),
        required("wednesday", Code(_BOOLEAN)),
        required("thursday", Code(_BOOLEAN)),
        required("friday", Code(_BOOLEAN)),
        required("saturday", Code(_BOOLEAN)),
        required("sunday", Code(_BOOLEAN)),
        required("start_date", ServiceDateValue()),
        required("end_date", ServiceDateValue()),
    ),
)

CALENDAR_DATE = EntityDescriptor(
    entity_type=EntityType.CALENDAR_DATE,
    entity_cls=ServiceCalendarDate,
    filename="calendar_dates.txt",
    fields=(
        required("service_id", CompositeId()),
        required("date", ServiceDateValue()),
        required("exception_type", Code(frozenset({1, 2}))),
    ),
)

FARE_ATTRIBUTE = EntityDescriptor(
    entity_type=EntityType.FARE_ATTRIBUTE,
    entity_cls=FareAttribute,
    filename="fare_attributes.txt",
    fields=(
        required("id", CompositeId(ScopeColumn("agency_id")), column="fare_id"),
        required("price", Number()),
        required("currency_type", Text()),
        required("payment_method", Code(_BOOLEAN)),
        optional("transfers", Code(frozenset({0, 1, 2}), empty=None)),
        optional("transfer_duration", Integer(empty=None)),
    ),
)

FARE_RULE = EntityDescriptor(
    entity_type=EntityType.FARE_RULE,
    entity_cls=FareRule,
    filename="fare_rules.txt",
    fields=(
        required("fare", EntityRef(EntityType.FARE_ATTRIBUTE), column="fare_id"),
        optional("route", EntityRef(EntityType.ROUTE), column="route_id"),
        optional("origin_id", Text()),
        optional("destination_id", Text()),
        optional("contains_id", Text()),
    ),
)

FREQUENCY = EntityDescriptor(
    entity_type=EntityType.FREQUENCY,
    entity_cls=Frequency,
    filename="frequencies.txt",
    fields=(
        required("trip", EntityRef(EntityType.TRIP), column="trip_id"),
        required("start_time", ServiceTimeValue()),
        required("end_time", ServiceTimeValue()),
        required("headway_secs", Integer()),
        optional("exact_times", Code(_BOOLEAN)),
    ),
)

PATHWAY = EntityDescriptor(
    entity_type=EntityType.PATHWAY,
    entity_cls=Pathway,
    filename="pathways.txt",
    prefix="pathway_",
    fields=(
        required("id", CompositeId()),
        required("from_stop", EntityRef(EntityType.STOP), column="from_stop_id"),
        required("to_stop", EntityRef(EntityType.STOP), column="to_stop_id"),
        required("mode", Code(frozenset(range(1, 8)))),
        required("is_bidirectional", Code(_BOOLEAN), column="is_bidirectional"),
        optional("length", Number(empty=None), column="length"),
        optional("traversal_time", Integer(empty=None), column="traversal_time"),
        optional("stair_count", Integer(empty=None), column="stair_count"),
        optional("max_slope", Number(empty=None), column="max_slope"),
        optional("min_width", Number(empty=None), column="min_width"),
        optional("signposted_as", Text(), column="signposted_as"),
        optional("reversed_signposted_as", Text(), column="reversed_signposted_as"),
    ),
)

TRANSFER = EntityDescriptor(
    entity_type=EntityType.TRANSFER,
    entity_cls=Transfer,
    filename="transfers.txt",
    fields=(
        optional("from_stop", EntityRef(EntityType.STOP), column="from_stop_id"),
        optional("to_stop", EntityRef(EntityType.STOP), column="to_stop_id"),
        optional("from_route", EntityRef(EntityType.ROUTE), column="from_route_id"),
        optional("to_route", EntityRef(EntityType.ROUTE), column="to_route_id"),
        optional("from_trip", EntityRef(EntityType.TRIP), column="from_trip_id"),
        optional("to_trip", EntityRef(EntityType.TRIP), column="to_trip_id"),
        required("transfer_type", Code(frozenset(range(6)))),
        optional("min_transfer_time", Integer(empty=None)),
    ),
)

FEED_INFO = EntityDescriptor(
    entity_type=EntityType.FEED_INFO,
    entity_cls=FeedInfo,
    filename="feed_info.txt",
    prefix="feed_",
    fields=(
        required("publisher_name", Text()),
        required("publisher_url", Text()),
        required("lang", Text()),
        optional("default_lang", Text(), column="default_lang"),
        optional("start_date", ServiceDateValue()),
        optional("end_date", ServiceDateValue()),
        optional("version", Text()),
        optional("contact_email", Text()),
        optional("contact_url", Text()),
    ),
)

TRANSLATION = EntityDescriptor(
    entity_type=EntityType.TRANSLATION,
    entity_cls=Translation,
    filename="translations.txt",
    fields=(
        required("table_name", Text()),
        required("field_name", Text()),
        required("language", Text()),
        required("translation", Text()),
        optional("record_id", Text()),
        optional("record_sub_id", Text()),
        optional("field_value", Text()),
    ),
)

ZONE = EntityDescriptor(
    entity_type=EntityType.ZONE,
    entity_cls=Zone,
    filename="zones.txt",
    prefix="zone_",
    fields=(
        required("id", Text()),
        required("lat", Number()),
        required("lon", Number()),
        optional("name", Text()),
    ),
)

GTFS_REGISTRY: Final = SchemaRegistry(
    (
        AGENCY,
        SHAPE_POINT,
        NOTE,
        AREA,
        ROUTE,
        LEVEL,
        STOP,
        TRIP,
        STOP_TIME,
        CALENDAR,
        CALENDAR_DATE,
        FARE_ATTRIBUTE,
        FARE_RULE,
        FREQUENCY,
        PATHWAY,
        TRANSFER,
        FEED_INFO,
        TRANSLATION,
        ZONE,
    )
)


def descriptor_for(entity_type: EntityType) -> EntityDescriptor:
    """Look up the GTFS column schema for ``entity_type``."""

    return GTFS_REGISTRY.descriptor_for(entity_type)

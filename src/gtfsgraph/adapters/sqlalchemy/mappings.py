"""SQLAlchemy mapping metadata for the feed entity model.

Every entity class is mapped imperatively onto its own table. Agency-scoped
ids are stored in a single column through ``AgencyAndIdType`` so references
stay single-column foreign keys.
"""

from __future__ import annotations

import json
import logging
from functools import cache
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import (
    Column,
    Date,
    Dialect,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import configure_mappers, relationship

from gtfsgraph.domain.model import (
    Agency,
    AgencyAndId,
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

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class AgencyAndIdType(TypeDecorator[AgencyAndId]):
    """``AgencyAndId`` stored as a JSON ``[agency_id, id]`` pair."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: AgencyAndId | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps([value.agency_id, value.id])

    def process_result_value(self, value: str | None, dialect: Dialect) -> AgencyAndId | None:
        _ = dialect
        if value is None:
            return None
        loaded = json.loads(value)
        if not isinstance(loaded, list) or len(cast(list[Any], loaded)) != 2:
            raise ValueError(f"Malformed stored AgencyAndId: {value!r}")
        agency_id, local_id = cast(list[str], loaded)
        return AgencyAndId(agency_id=agency_id, id=local_id)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _serial_id() -> Column[int]:
    return Column("id", Integer, primary_key=True, autoincrement=True)


def _scoped_id() -> Column[AgencyAndId]:
    return Column("id", AgencyAndIdType, primary_key=True)


def _reference(name: str, target: str, *, nullable: bool = False) -> Column[AgencyAndId]:
    return Column(
        name, AgencyAndIdType, ForeignKey(f"{target}.id"), key=f"_{name}", nullable=nullable
    )


# Agencies and shapes ---------------------------------------------------------

agency_table = Table(
    "agency",
    mapper_registry.metadata,
    Column("id", String, primary_key=True),
    Column("name", String, nullable=False),
    Column("url", String, nullable=False),
    Column("timezone", String, nullable=False),
    Column("lang", String, nullable=False),
    Column("phone", String, nullable=False),
    Column("fare_url", String, nullable=False),
    Column("email", String, nullable=False),
)

shape_point_table = Table(
    "shape_point",
    mapper_registry.metadata,
    _serial_id(),
    Column("shape_id", AgencyAndIdType, nullable=False, index=True),
    Column("lat", Float, nullable=False),
    Column("lon", Float, nullable=False),
    Column("sequence", Integer, nullable=False),
    Column("dist_traveled", Float, nullable=True),
)

note_table = Table(
    "note",
    mapper_registry.metadata,
    _scoped_id(),
    Column("mark", String, nullable=False),
    Column("title", String, nullable=False),
    Column("desc", String, nullable=False),
)

area_table = Table(
    "area",
    mapper_registry.metadata,
    _scoped_id(),
    Column("name", String, nullable=False),
)

# Network ---------------------------------------------------------------------

route_table = Table(
    "route",
    mapper_registry.metadata,
    _scoped_id(),
    Column("agency_id", String, ForeignKey("agency.id"), key="_agency_id", nullable=True),
    Column("short_name", String, nullable=False),
    Column("long_name", String, nullable=False),
    Column("desc", String, nullable=False),
    Column("type", Integer, nullable=False),
    Column("url", String, nullable=False),
    Column("color", String, nullable=False),
    Column("text_color", String, nullable=False),
    Column("sort_order", Integer, nullable=True),
    Column("continuous_pickup", Integer, nullable=True),
    Column("continuous_drop_off", Integer, nullable=True),
    Column("network_id", String, nullable=False),
)

level_table = Table(
    "level",
    mapper_registry.metadata,
    _scoped_id(),
    Column("index", Float, nullable=False),
    Column("name", String, nullable=False),
)

stop_table = Table(
    "stop",
    mapper_registry.metadata,
    _scoped_id(),
    Column("code", String, nullable=False),
    Column("name", String, nullable=False),
    Column("desc", String, nullable=False),
    Column("lat", Float, nullable=False),
    Column("lon", Float, nullable=False),
    Column("zone_id", String, nullable=False),
    Column("url", String, nullable=False),
    Column("location_type", Integer, nullable=False),
    Column("parent_station", String, nullable=False),
    Column("timezone", String, nullable=False),
    Column("wheelchair_boarding", Integer, nullable=False),
    _reference("level_id", "level", nullable=True),
    Column("platform_code", String, nullable=False),
    Column("tts_name", String, nullable=False),
)

trip_table = Table(
    "trip",
    mapper_registry.metadata,
    _scoped_id(),
    _reference("route_id", "route"),
    Column("service_id", AgencyAndIdType, nullable=False, index=True),
    Column("headsign", String, nullable=False),
    Column("short_name", String, nullable=False),
    Column("direction_id", String, nullable=False),
    Column("block_id", String, nullable=False),
    Column("shape_id", AgencyAndIdType, nullable=True),
    Column("wheelchair_accessible", Integer, nullable=False),
    Column("bikes_allowed", Integer, nullable=False),
)

stop_time_table = Table(
    "stop_time",
    mapper_registry.metadata,
    _serial_id(),
    _reference("trip_id", "trip"),
    _reference("stop_id", "stop"),
    Column("stop_sequence", Integer, nullable=False),
    Column("arrival_time", Integer, nullable=True),
    Column("departure_time", Integer, nullable=True),
    Column("stop_headsign", String, nullable=False),
    Column("pickup_type", Integer, nullable=False),
    Column("drop_off_type", Integer, nullable=False),
    Column("shape_dist_traveled", Float, nullable=True),
    Column("timepoint", Integer, nullable=True),
)

# Service calendars -----------------------------------------------------------

calendar_table = Table(
    "calendar",
    mapper_registry.metadata,
    _serial_id(),
    Column("service_id", AgencyAndIdType, nullable=False, index=True),
    Column("monday", Integer, nullable=False),
    Column("tuesday", Integer, nullable=False),
    Column("wednesday", Integer, nullable=False),
    Column("thursday", Integer, nullable=False),
    Column("friday", Integer, nullable=False),
    Column("saturday", Integer, nullable=False),
    Column("sunday", Integer, nullable=False),
    Column("start_date", Date, nullable=True),
    Column("end_date", Date, nullable=True),
)

calendar_date_table = Table(
    "calendar_date",
    mapper_registry.metadata,
    _serial_id(),
    Column("service_id", AgencyAndIdType, nullable=False, index=True),
    Column("date", Date, nullable=True),
    Column("exception_type", Integer, nullable=False),
)

# Fares -----------------------------------------------------------------------

fare_attribute_table = Table(
    "fare_attribute",
    mapper_registry.metadata,
    _scoped_id(),
    Column("price", Float, nullable=False),
    Column("currency_type", String, nullable=False),
    Column("payment_method", Integer, nullable=False),
    Column("transfers", Integer, nullable=True),
    Column("transfer_duration", Integer, nullable=True),
)

fare_rule_table = Table(
    "fare_rule",
    mapper_registry.metadata,
    _serial_id(),
    _reference("fare_id", "fare_attribute"),
    _reference("route_id", "route", nullable=True),
    Column("origin_id", String, nullable=False),
    Column("destination_id", String, nullable=False),
    Column("contains_id", String, nullable=False),
)

# Trip extras, stations and transfers ------------------------------------------

frequency_table = Table(
    "frequency",
    mapper_registry.metadata,
    _serial_id(),
    _reference("trip_id", "trip"),
    Column("start_time", Integer, nullable=True),
    Column("end_time", Integer, nullable=True),
    Column("headway_secs", Integer, nullable=False),
    Column("exact_times", Integer, nullable=False),
)

pathway_table = Table(
    "pathway",
    mapper_registry.metadata,
    _scoped_id(),
    _reference("from_stop_id", "stop"),
    _reference("to_stop_id", "stop"),
    Column("mode", Integer, nullable=False),
    Column("is_bidirectional", Integer, nullable=False),
    Column("length", Float, nullable=True),
    Column("traversal_time", Integer, nullable=True),
    Column("stair_count", Integer, nullable=True),
    Column("max_slope", Float, nullable=True),
    Column("min_width", Float, nullable=True),
    Column("signposted_as", String, nullable=False),
    Column("reversed_signposted_as", String, nullable=False),
)

transfer_table = Table(
    "transfer",
    mapper_registry.metadata,
    _serial_id(),
    _reference("from_stop_id", "stop", nullable=True),
    _reference("to_stop_id", "stop", nullable=True),
    _reference("from_route_id", "route", nullable=True),
    _reference("to_route_id", "route", nullable=True),
    _reference("from_trip_id", "trip", nullable=True),
    _reference("to_trip_id", "trip", nullable=True),
    Column("transfer_type", Integer, nullable=False),
    Column("min_transfer_time", Integer, nullable=True),
)

# Feed metadata -----------------------------------------------------------------

feed_info_table = Table(
    "feed_info",
    mapper_registry.metadata,
    _serial_id(),
    Column("publisher_name", String, nullable=False),
    Column("publisher_url", String, nullable=False),
    Column("lang", String, nullable=False),
    Column("default_lang", String, nullable=False),
    Column("start_date", Date, nullable=True),
    Column("end_date", Date, nullable=True),
    Column("version", String, nullable=False),
    Column("contact_email", String, nullable=False),
    Column("contact_url", String, nullable=False),
)

translation_table = Table(
    "translation",
    mapper_registry.metadata,
    _serial_id(),
    Column("table_name", String, nullable=False),
    Column("field_name", String, nullable=False),
    Column("language", String, nullable=False),
    Column("translation", String, nullable=False),
    Column("record_id", String, nullable=False),
    Column("record_sub_id", String, nullable=False),
    Column("field_value", String, nullable=False),
)

zone_table = Table(
    "zone",
    mapper_registry.metadata,
    Column("id", String, primary_key=True),
    Column("lat", Float, nullable=False),
    Column("lon", Float, nullable=False),
    Column("name", String, nullable=False),
)


def _many_to_one(target: type, column: Column[Any]) -> orm.Relationship[Any]:
    return relationship(target, foreign_keys=[column])


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the feed entity model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Agency, agency_table)
    mapper_registry.map_imperatively(ShapePoint, shape_point_table)
    mapper_registry.map_imperatively(Note, note_table)
    mapper_registry.map_imperatively(Area, area_table)

    mapper_registry.map_imperatively(
        Route,
        route_table,
        properties={"agency": _many_to_one(Agency, route_table.c._agency_id)},  # noqa: SLF001
    )
    mapper_registry.map_imperatively(Level, level_table)
    mapper_registry.map_imperatively(
        Stop,
        stop_table,
        properties={"level": _many_to_one(Level, stop_table.c._level_id)},  # noqa: SLF001
    )
    mapper_registry.map_imperatively(
        Trip,
        trip_table,
        properties={"route": _many_to_one(Route, trip_table.c._route_id)},  # noqa: SLF001
    )
    mapper_registry.map_imperatively(
        StopTime,
        stop_time_table,
        properties={
            "trip": _many_to_one(Trip, stop_time_table.c._trip_id),  # noqa: SLF001
            "stop": _many_to_one(Stop, stop_time_table.c._stop_id),  # noqa: SLF001
        },
    )

    mapper_registry.map_imperatively(ServiceCalendar, calendar_table)
    mapper_registry.map_imperatively(ServiceCalendarDate, calendar_date_table)

    mapper_registry.map_imperatively(FareAttribute, fare_attribute_table)
    mapper_registry.map_imperatively(
        FareRule,
        fare_rule_table,
        properties={
            "fare": _many_to_one(FareAttribute, fare_rule_table.c._fare_id),  # noqa: SLF001
            "route": _many_to_one(Route, fare_rule_table.c._route_id),  # noqa: SLF001
        },
    )

    mapper_registry.map_imperatively(
        Frequency,
        frequency_table,
        properties={"trip": _many_to_one(Trip, frequency_table.c._trip_id)},  # noqa: SLF001
    )
    mapper_registry.map_imperatively(
        Pathway,
        pathway_table,
        properties={
            "from_stop": _many_to_one(Stop, pathway_table.c._from_stop_id),  # noqa: SLF001
            "to_stop": _many_to_one(Stop, pathway_table.c._to_stop_id),  # noqa: SLF001
        },
    )
    transfer_columns = transfer_table.c
    mapper_registry.map_imperatively(
        Transfer,
        transfer_table,
        properties={
            "from_stop": _many_to_one(Stop, transfer_columns._from_stop_id),  # noqa: SLF001
            "to_stop": _many_to_one(Stop, transfer_columns._to_stop_id),  # noqa: SLF001
            "from_route": _many_to_one(Route, transfer_columns._from_route_id),  # noqa: SLF001
            "to_route": _many_to_one(Route, transfer_columns._to_route_id),  # noqa: SLF001
            "from_trip": _many_to_one(Trip, transfer_columns._from_trip_id),  # noqa: SLF001
            "to_trip": _many_to_one(Trip, transfer_columns._to_trip_id),  # noqa: SLF001
        },
    )

    mapper_registry.map_imperatively(FeedInfo, feed_info_table)
    mapper_registry.map_imperatively(Translation, translation_table)
    mapper_registry.map_imperatively(Zone, zone_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)

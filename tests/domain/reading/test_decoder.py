from __future__ import annotations

import pytest

from gtfsgraph.adapters.memory import InMemoryEntityStore  # noqa: TC001
from gtfsgraph.domain.failures import InvalidValue, MissingColumn, ReferenceNotFound
from gtfsgraph.domain.model import (
    Agency,
    AgencyAndId,
    EntityType,
    FareAttribute,
    Route,
    Stop,
    StopTime,
    Trip,
)
from gtfsgraph.domain.reading import ReferenceResolver, RowDecoder
from gtfsgraph.domain.schema import descriptor_for


@pytest.fixture
def decoder(resolver: ReferenceResolver) -> RowDecoder:
    return RowDecoder(resolver)


@pytest.fixture
def metro(resolver: ReferenceResolver, memory_store: InMemoryEntityStore) -> Agency:
    agency = Agency(id="A1", name="Metro")
    resolver.identifiers.accept_agency(agency)
    memory_store.save(agency)
    return agency


def test_decodes_agency_with_zero_values_for_absent_columns(decoder: RowDecoder) -> None:
    agency = decoder.decode(
        descriptor_for(EntityType.AGENCY),
        {
            "agency_id": "A1",
            "agency_name": "Metro",
            "agency_url": "https://metro.example",
            "agency_timezone": "Europe/Berlin",
        },
    )

    assert isinstance(agency, Agency)
    assert agency.id == "A1"
    assert agency.name == "Metro"
    assert agency.phone == ""
    assert agency.lang == ""


def test_missing_required_column_names_column_table_and_line(decoder: RowDecoder) -> None:
    failure = decoder.decode(
        descriptor_for(EntityType.AGENCY),
        {"agency_id": "A1", "agency_name": "Metro", "agency_url": "https://metro.example"},
        line=7,
    )

    assert isinstance(failure, MissingColumn)
    assert failure.column == "agency_timezone"
    assert failure.table == "agency.txt"
    assert failure.line == 7
    assert failure.message == "missing required column 'agency_timezone' in agency.txt (line 7)"


def test_blank_token_counts_as_missing(decoder: RowDecoder, metro: Agency) -> None:
    failure = decoder.decode(
        descriptor_for(EntityType.ROUTE),
        {"route_id": "R1", "agency_id": "A1", "route_type": "  "},
    )

    assert isinstance(failure, MissingColumn)
    assert failure.column == "route_type"


def test_invalid_number_is_located(decoder: RowDecoder, metro: Agency) -> None:
    failure = decoder.decode(
        descriptor_for(EntityType.STOP),
        {"stop_id": "S1", "stop_lat": "north"},
        line=3,
    )

    assert isinstance(failure, InvalidValue)
    assert failure.table == "stops.txt"
    assert failure.line == 3
    assert failure.column == "stop_lat"


def test_route_is_scoped_by_its_agency(decoder: RowDecoder, metro: Agency) -> None:
    route = decoder.decode(
        descriptor_for(EntityType.ROUTE),
        {"route_id": "R1", "agency_id": "A1", "route_short_name": "1", "route_type": "3"},
    )

    assert isinstance(route, Route)
    assert route.agency is metro
    assert route.id == AgencyAndId(agency_id="A1", id="R1")
    assert route.type == 3
    assert route.sort_order is None


def test_references_decode_to_stored_entities(
    decoder: RowDecoder,
    resolver: ReferenceResolver,
    memory_store: InMemoryEntityStore,
    metro: Agency,
) -> None:
    route = Route(id=AgencyAndId(agency_id="A1", id="R1"), agency=metro)
    trip = Trip(
        id=AgencyAndId(agency_id="A1", id="T1"),
        route=route,
        service_id=AgencyAndId(agency_id="A1", id="WEEKDAY"),
    )
    stop = Stop(id=AgencyAndId(agency_id="A1", id="S1"))
    for entity in (route, trip, stop):
        resolver.identifiers.register_claim(entity.entity_type, entity.id.id, "A1")
        memory_store.save(entity)

    stop_time = decoder.decode(
        descriptor_for(EntityType.STOP_TIME),
        {
            "trip_id": "T1",
            "stop_id": "S1",
            "stop_sequence": "4",
            "arrival_time": "24:30:00",
            "departure_time": "",
        },
    )

    assert isinstance(stop_time, StopTime)
    assert stop_time.trip is trip
    assert stop_time.stop is stop
    assert stop_time.arrival_time == 24 * 3600 + 30 * 60
    assert stop_time.departure_time is None
    assert stop_time.shape_dist_traveled is None


def test_unclaimed_reference_fails(decoder: RowDecoder, metro: Agency) -> None:
    failure = decoder.decode(
        descriptor_for(EntityType.TRIP),
        {"route_id": "R404", "service_id": "WEEKDAY", "trip_id": "T1"},
        line=2,
    )

    assert isinstance(failure, ReferenceNotFound)
    assert failure.entity_type is EntityType.ROUTE
    assert failure.entity_id == "R404"
    assert failure.table == "trips.txt"


def test_fare_attribute_blank_transfers_means_unlimited(
    decoder: RowDecoder, metro: Agency
) -> None:
    fare = decoder.decode(
        descriptor_for(EntityType.FARE_ATTRIBUTE),
        {
            "fare_id": "F1",
            "price": "2.50",
            "currency_type": "EUR",
            "payment_method": "0",
            "transfers": "",
        },
    )

    assert isinstance(fare, FareAttribute)
    assert fare.transfers is None
    assert fare.id == AgencyAndId(agency_id="A1", id="F1")

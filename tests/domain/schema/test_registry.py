from __future__ import annotations

import pytest

from gtfsgraph.domain.failures import UnknownEntityTypeError
from gtfsgraph.domain.model import CLASS_BY_ENTITY_TYPE, EntityType, Route
from gtfsgraph.domain.schema import (
    DEFAULT_LOAD_ORDER,
    GTFS_REGISTRY,
    SchemaRegistry,
    Text,
    descriptor_for,
)
from gtfsgraph.domain.schema.descriptors import EntityDescriptor, optional, required


def test_every_entity_type_has_a_descriptor_for_its_class() -> None:
    assert len(GTFS_REGISTRY) == len(EntityType)
    for entity_type in EntityType:
        descriptor = descriptor_for(entity_type)
        assert descriptor.entity_type is entity_type
        assert descriptor.entity_cls is CLASS_BY_ENTITY_TYPE[entity_type]


def test_default_load_order_covers_each_type_once() -> None:
    assert len(DEFAULT_LOAD_ORDER) == len(set(DEFAULT_LOAD_ORDER)) == len(EntityType)


@pytest.mark.parametrize(
    ("referent", "dependent"),
    [
        (EntityType.AGENCY, EntityType.ROUTE),
        (EntityType.ROUTE, EntityType.TRIP),
        (EntityType.LEVEL, EntityType.STOP),
        (EntityType.STOP, EntityType.STOP_TIME),
        (EntityType.TRIP, EntityType.STOP_TIME),
        (EntityType.TRIP, EntityType.FREQUENCY),
        (EntityType.FARE_ATTRIBUTE, EntityType.FARE_RULE),
        (EntityType.STOP, EntityType.PATHWAY),
        (EntityType.TRIP, EntityType.TRANSFER),
    ],
)
def test_referents_load_before_dependents(referent: EntityType, dependent: EntityType) -> None:
    assert DEFAULT_LOAD_ORDER.index(referent) < DEFAULT_LOAD_ORDER.index(dependent)


def test_columns_use_prefix_unless_named_explicitly() -> None:
    route = descriptor_for(EntityType.ROUTE)

    assert route.columns[:3] == ("agency_id", "route_id", "route_short_name")
    assert "continuous_pickup" in route.columns


def test_required_tables() -> None:
    required_files = {descriptor.filename for descriptor in GTFS_REGISTRY if descriptor.required}

    assert required_files == {
        "agency.txt",
        "stops.txt",
        "routes.txt",
        "trips.txt",
        "stop_times.txt",
    }


def test_unknown_entity_type_is_rejected() -> None:
    registry = SchemaRegistry([descriptor_for(EntityType.AGENCY)])

    with pytest.raises(UnknownEntityTypeError):
        registry.descriptor_for(EntityType.STOP)


def test_none_entity_type_is_a_precondition_error() -> None:
    with pytest.raises(ValueError, match="entity type"):
        GTFS_REGISTRY.descriptor_for(None)  # type: ignore[arg-type]


def test_duplicate_registration_is_rejected() -> None:
    descriptor = EntityDescriptor(
        entity_type=EntityType.ROUTE,
        entity_cls=Route,
        filename="routes.txt",
        fields=(required("id", Text()), optional("desc", Text())),
        prefix="route_",
    )

    with pytest.raises(ValueError, match="Duplicate descriptor"):
        SchemaRegistry([descriptor, descriptor])

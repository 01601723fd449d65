from __future__ import annotations

from gtfsgraph.adapters.memory import InMemoryEntityStore
from gtfsgraph.domain.model import AgencyAndId, EntityType, ShapePoint, Stop
from gtfsgraph.domain.ports import EntityStore


def _shape_point(sequence: int) -> ShapePoint:
    return ShapePoint(
        shape_id=AgencyAndId(agency_id="A1", id="SH1"), lat=52.5, lon=13.4, sequence=sequence
    )


def test_satisfies_the_store_port() -> None:
    assert isinstance(InMemoryEntityStore(), EntityStore)


def test_serial_ids_are_per_entity_type() -> None:
    store = InMemoryEntityStore()
    points = [_shape_point(1), _shape_point(2)]

    for point in points:
        store.save(point)

    assert [point.id for point in points] == [1, 2]
    assert store.fetch(EntityType.SHAPE_POINT, 2) is points[1]
    assert store.fetch(EntityType.FREQUENCY, 1) is None
    assert store.count(EntityType.SHAPE_POINT) == 2


def test_existing_serial_id_is_kept() -> None:
    store = InMemoryEntityStore()
    point = _shape_point(1)
    point.id = 40

    store.save(point)

    assert store.fetch(EntityType.SHAPE_POINT, 40) is point


def test_saving_an_existing_id_replaces_the_entity() -> None:
    store = InMemoryEntityStore()
    stop_id = AgencyAndId(agency_id="A1", id="S1")
    first = Stop(id=stop_id, name="first")
    second = Stop(id=stop_id, name="second")

    store.save(first)
    store.save(second)

    assert store.fetch(EntityType.STOP, stop_id) is second
    assert store.all(EntityType.STOP) == [second]


def test_lifecycle_is_counted() -> None:
    store = InMemoryEntityStore()

    store.open()
    store.flush()
    store.flush()
    assert store.is_open
    store.close()

    assert not store.is_open
    assert (store.open_count, store.flush_count, store.close_count) == (1, 2, 1)


def test_iterates_over_all_entities() -> None:
    store = InMemoryEntityStore()
    stop = Stop(id=AgencyAndId(agency_id="A1", id="S1"))
    point = _shape_point(1)
    store.save(stop)
    store.save(point)

    assert set(map(id, store)) == {id(stop), id(point)}
    assert store.all(EntityType.ROUTE) == []

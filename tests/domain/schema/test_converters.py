from __future__ import annotations

from datetime import date

import pytest

from gtfsgraph.domain.failures import InvalidValue, NoDefaultAgency
from gtfsgraph.domain.model import Agency, AgencyAndId
from gtfsgraph.domain.reading import ReferenceResolver  # noqa: TC001
from gtfsgraph.domain.schema import (
    Code,
    CompositeId,
    FieldInput,
    Integer,
    Number,
    ScopeColumn,
    ScopeFromField,
    ServiceDateValue,
    ServiceTimeValue,
)


def _field(
    token: str,
    *,
    row: dict[str, str | None] | None = None,
    decoded: dict[str, object] | None = None,
) -> FieldInput:
    return FieldInput(
        table="stops.txt",
        column="stop_lat",
        token=token,
        row=row or {},
        decoded=decoded or {},
    )


@pytest.mark.parametrize(
    ("token", "expected"),
    [("52.52", 52.52), ("-0.5", -0.5), ("7", 7.0), (".25", 0.25), ("1e3", 1000.0)],
)
def test_number_accepts_strict_grammar(
    resolver: ReferenceResolver, token: str, expected: float
) -> None:
    assert Number()(_field(token), resolver) == expected


@pytest.mark.parametrize("token", ["north", "1,5", "nan", "inf", "1.2.3", "0x10"])
def test_number_rejects_malformed_text(resolver: ReferenceResolver, token: str) -> None:
    result = Number()(_field(token), resolver)

    assert isinstance(result, InvalidValue)
    assert result.column == "stop_lat"
    assert result.value == token


def test_integer_rejects_decimal(resolver: ReferenceResolver) -> None:
    assert isinstance(Integer()(_field("1.5"), resolver), InvalidValue)
    assert Integer()(_field("-3"), resolver) == -3


def test_code_restricts_values(resolver: ReferenceResolver) -> None:
    converter = Code(frozenset({0, 1}))

    assert converter(_field("1"), resolver) == 1
    failure = converter(_field("2"), resolver)
    assert isinstance(failure, InvalidValue)
    assert "0, 1" in failure.reason


def test_service_date(resolver: ReferenceResolver) -> None:
    assert ServiceDateValue()(_field("20240229"), resolver) == date(2024, 2, 29)
    assert isinstance(ServiceDateValue()(_field("20230229"), resolver), InvalidValue)
    assert isinstance(ServiceDateValue()(_field("2024-02-29"), resolver), InvalidValue)


def test_service_time_allows_hours_past_midnight(resolver: ReferenceResolver) -> None:
    assert ServiceTimeValue()(_field("8:05:09"), resolver) == 8 * 3600 + 5 * 60 + 9
    assert ServiceTimeValue()(_field("25:10:00"), resolver) == 25 * 3600 + 10 * 60
    assert isinstance(ServiceTimeValue()(_field("08:61:00"), resolver), InvalidValue)


def test_zero_values() -> None:
    assert Number().empty == 0.0
    assert Integer().empty == 0
    assert Number(empty=None).empty is None
    assert ServiceTimeValue().empty is None
    assert CompositeId().empty is None


def test_composite_id_uses_default_agency(resolver: ReferenceResolver) -> None:
    resolver.identifiers.default_agency_id = "DEF"

    assert CompositeId()(_field("S1"), resolver) == AgencyAndId(agency_id="DEF", id="S1")


def test_composite_id_without_default_agency_fails(resolver: ReferenceResolver) -> None:
    assert isinstance(CompositeId()(_field("S1"), resolver), NoDefaultAgency)


def test_scope_column_is_translated(resolver: ReferenceResolver) -> None:
    resolver.identifiers.add_agency_id_mapping("OLD", "NEW")
    converter = CompositeId(ScopeColumn("agency_id"))

    scoped = converter(_field("F1", row={"agency_id": "OLD"}), resolver)

    assert scoped == AgencyAndId(agency_id="NEW", id="F1")


def test_scope_column_blank_falls_back_to_default(resolver: ReferenceResolver) -> None:
    resolver.identifiers.default_agency_id = "DEF"
    converter = CompositeId(ScopeColumn("agency_id"))

    scoped = converter(_field("F1", row={"agency_id": ""}), resolver)

    assert scoped == AgencyAndId(agency_id="DEF", id="F1")


def test_scope_from_field_reads_previously_decoded_entity(resolver: ReferenceResolver) -> None:
    resolver.identifiers.default_agency_id = "DEF"
    agency = Agency(id="OTHER", name="Other")
    converter = CompositeId(ScopeFromField("agency"))

    scoped = converter(_field("R1", decoded={"agency": agency}), resolver)

    assert scoped == AgencyAndId(agency_id="OTHER", id="R1")

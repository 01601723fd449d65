"""Small GTFS feeds and store fakes shared across tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gtfsgraph.adapters.csv_source import InMemoryFeedSource
from gtfsgraph.adapters.memory import InMemoryEntityStore

if TYPE_CHECKING:
    from collections.abc import Mapping

    from gtfsgraph.domain.model import IdentityBean

AGENCY_HEADER = "agency_id,agency_name,agency_url,agency_timezone"

MINIMAL_FEED: dict[str, str] = {
    "agency.txt": f"{AGENCY_HEADER}\nA1,Metro,https://metro.example,Europe/Berlin\n",
    "routes.txt": "route_id,agency_id,route_short_name,route_type\nR1,A1,1,3\n",
    "stops.txt": (
        "stop_id,stop_name,stop_lat,stop_lon\n"
        "S1,Central,52.5200,13.4050\n"
        "S2,Harbour,52.5000,13.4200\n"
    ),
    "trips.txt": "route_id,service_id,trip_id,trip_headsign\nR1,WEEKDAY,T1,Harbour\n",
    "stop_times.txt": (
        "trip_id,arrival_time,departure_time,stop_id,stop_sequence\n"
        "T1,08:00:00,08:00:00,S1,1\n"
        "T1,25:10:00,25:10:30,S2,2\n"
    ),
    "calendar.txt": (
        "service_id,monday,tuesday,wednesday,thursday,friday,saturday,sunday,"
        "start_date,end_date\n"
        "WEEKDAY,1,1,1,1,1,0,0,20240101,20241231\n"
    ),
}


def csv_text(header: str, *rows: str) -> str:
    return "\n".join((header, *rows)) + "\n"


def feed_source(tables: Mapping[str, str] | None = None, **overrides: str) -> InMemoryFeedSource:
    """Minimal feed with ``overrides`` replacing tables (keys use ``_`` for ``.``)."""

    merged = dict(MINIMAL_FEED if tables is None else tables)
    for key, text in overrides.items():
        merged[key.replace("_txt", ".txt")] = text
    return InMemoryFeedSource(merged)


class RecordingStore(InMemoryEntityStore):
    """In-memory store that records the lifecycle calls it receives."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[str] = []

    def open(self) -> None:
        self.calls.append("open")
        super().open()

    def save(self, entity: IdentityBean) -> None:
        self.calls.append(f"save:{entity.entity_type}")
        super().save(entity)

    def flush(self) -> None:
        self.calls.append("flush")
        super().flush()

    def close(self) -> None:
        self.calls.append("close")
        super().close()

    @property
    def lifecycle(self) -> list[str]:
        return [call for call in self.calls if not call.startswith("save:")]

"""Shared fakes for the location lookup and journey provider."""

import asyncio
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from besserbahn_mcp.models import JourneyCandidate, Leg, Station, Stopover

BERLIN = ZoneInfo("Europe/Berlin")


def at(hhmm: str, day: int = 20) -> datetime:
    """Build an aware datetime on 2025-08-<day> from 'HH:MM'."""
    hours, minutes = (int(part) for part in hhmm.split(":"))
    return datetime(2025, 8, day, hours, minutes, tzinfo=BERLIN)


def station_id(name: str) -> str:
    return "id-" + name.lower().replace(" ", "-")


def station(name: str) -> Station:
    return Station(id=station_id(name), name=name)


def stopover(name: str, arrival: str, departure: str) -> Stopover:
    return Stopover(station=station(name), planned_arrival=at(arrival), planned_departure=at(departure))


def candidate(
    price,
    departure: str = "10:00",
    arrival: str = "14:00",
    origin: str = "Berlin",
    destination: str = "München",
    stopovers: list[Stopover] | None = None,
) -> JourneyCandidate:
    """A single-leg journey candidate."""
    leg = Leg(
        origin=station(origin),
        destination=station(destination),
        departure=at(departure),
        arrival=at(arrival),
        stopovers=stopovers or [],
    )
    return JourneyCandidate(legs=[leg], price=price)


class FakeLookup:
    """Resolves every name to one station unless it is listed as missing or failing."""

    def __init__(self, missing=(), failing=None):
        self.missing = set(missing)
        self.failing = failing or {}
        self.calls: list[tuple[str, int]] = []

    async def locations(self, query: str, max_results: int):
        self.calls.append((query, max_results))
        if query in self.failing:
            raise self.failing[query]
        if query in self.missing:
            return []
        return [{"id": station_id(query), "name": query}][:max_results]


class FakeProvider:
    """Answers journey queries from a {(origin_name, destination_name): result} table.

    A result is a list of candidates or an exception to raise. Unknown pairs
    return no journeys.
    """

    def __init__(self, routes=None, delay: float = 0.0):
        self.routes = {
            (station_id(a), station_id(b)): result for (a, b), result in (routes or {}).items()
        }
        self.delay = delay
        self.calls: list[tuple[str, str, datetime, dict]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def query(self, origin_id, destination_id, departure, **options):
        self.calls.append((origin_id, destination_id, departure, options))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            result = self.routes.get((origin_id, destination_id), [])
            if isinstance(result, Exception):
                raise result
            return list(result)
        finally:
            self.in_flight -= 1

    def departures_for(self, origin: str, destination: str) -> list[datetime]:
        pair = (station_id(origin), station_id(destination))
        return [call[2] for call in self.calls if (call[0], call[1]) == pair]


@pytest.fixture
def lookup():
    return FakeLookup()

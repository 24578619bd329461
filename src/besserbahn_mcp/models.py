"""Data models for stations, journeys and route options."""

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Station(BaseModel):
    """Represents a resolved railway station."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: str = "station"


class Stopover(BaseModel):
    """An intermediate scheduled stop within a leg."""

    model_config = ConfigDict(frozen=True)

    station: Station
    planned_arrival: datetime | None = None
    planned_departure: datetime | None = None

    @property
    def dwell(self) -> timedelta | None:
        """Return the scheduled standing time, or None if a time is missing."""
        if self.planned_arrival is None or self.planned_departure is None:
            return None
        return self.planned_departure - self.planned_arrival


class Leg(BaseModel):
    """One scheduled vehicle segment between two stations."""

    model_config = ConfigDict(frozen=True)

    origin: Station
    destination: Station
    departure: datetime
    arrival: datetime
    stopovers: tuple[Stopover, ...] = ()


class JourneyCandidate(BaseModel):
    """A priced, multi-leg itinerary returned by the journey provider.

    The price is kept as delivered by the provider (structured, bare number
    or absent); use pricing.extract_price to read it.
    """

    model_config = ConfigDict(frozen=True)

    legs: tuple[Leg, ...] = Field(min_length=1)
    price: Any = None

    @property
    def departure(self) -> datetime:
        return self.legs[0].departure

    @property
    def arrival(self) -> datetime:
        return self.legs[-1].arrival


class RouteOption(BaseModel):
    """One entry of a search result, ordered by price."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    label: str  # "Direct" or "Via <station>"
    price: float
    duration: str
    connection_count: int = Field(alias="connectionCount")
    savings_note: str | None = Field(default=None, alias="savingsNote")

    @property
    def is_direct(self) -> bool:
        return self.label == "Direct"


class SearchQuery(BaseModel):
    """A search request; compared field by field and used as the cache key."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_city: str = Field(alias="fromCity", min_length=1)
    to_city: str = Field(alias="toCity", min_length=1)
    date: str = Field(min_length=1)  # YYYY-MM-DD
    time: str = Field(min_length=1)  # HH:MM


class SearchResponse(BaseModel):
    """What a search returns to the surrounding application."""

    model_config = ConfigDict(populate_by_name=True)

    results: list[RouteOption]
    searched_at: datetime = Field(alias="searchedAt")
    query: SearchQuery
    from_cache: bool = Field(default=False, alias="fromCache")

"""Journey provider adapter: parses provider journeys into candidates."""

import logging
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from .db_client import DbClient
from .models import JourneyCandidate, Leg, Station, Stopover

logger = logging.getLogger(__name__)


def _parse_station(data: Any) -> Station:
    if not isinstance(data, dict):
        return Station(id="", name="Unknown")
    station_id = str(data.get("id") or "")
    return Station(
        id=station_id,
        name=data.get("name") or station_id or "Unknown",
        type=data.get("type") or "station",
    )


def _parse_stopover(data: dict[str, Any]) -> Stopover | None:
    # FPTF puts the station under "stop"
    station = _parse_station(data.get("stop") or data.get("station"))
    if not station.id:
        return None
    return Stopover(
        station=station,
        planned_arrival=data.get("plannedArrival"),
        planned_departure=data.get("plannedDeparture"),
    )


def _parse_leg(data: dict[str, Any]) -> Leg:
    return Leg(
        origin=_parse_station(data.get("origin")),
        destination=_parse_station(data.get("destination")),
        departure=data.get("departure") or data.get("plannedDeparture"),
        arrival=data.get("arrival") or data.get("plannedArrival"),
        stopovers=[
            stopover
            for stopover in (
                _parse_stopover(s) for s in data.get("stopovers") or [] if isinstance(s, dict)
            )
            if stopover is not None
        ],
    )


def parse_journey(data: dict[str, Any]) -> JourneyCandidate:
    """Parse one provider journey.

    Raises:
        ValidationError: The journey has no legs or unusable times.
    """
    legs = [_parse_leg(leg) for leg in data.get("legs") or [] if isinstance(leg, dict)]
    return JourneyCandidate(legs=legs, price=data.get("price"))


class JourneyProvider:
    """Queries priced journeys through a DbClient."""

    def __init__(self, client: DbClient):
        self.client = client

    async def query(
        self,
        origin_id: str,
        destination_id: str,
        departure: datetime,
        *,
        max_results: int = 3,
        allow_stopovers: bool = True,
        max_transfers: int = -1,
    ) -> list[JourneyCandidate]:
        """Return journey candidates in provider order, possibly empty."""
        logger.info(f"Searching journeys {origin_id} -> {destination_id} at {departure.isoformat()}")
        data = await self.client.journeys(
            origin_id,
            destination_id,
            departure,
            results=max_results,
            stopovers=allow_stopovers,
            transfers=max_transfers,
        )

        journeys = data.get("journeys") or []
        if not isinstance(journeys, list):
            journeys = []

        candidates = []
        for journey in journeys:
            if not isinstance(journey, dict):
                continue
            try:
                candidates.append(parse_journey(journey))
            except ValidationError as e:
                logger.warning(f"Skipping malformed journey: {e.error_count()} validation error(s)")

        logger.info(f"Found {len(candidates)} journeys")
        return candidates

"""Station resolution on top of the provider's location lookup.

The provider's ranking is trusted as-is: resolve() only normalizes shape and
resolve_one() takes the first match.
"""

import logging
from typing import Any

from .exceptions import NotFoundError
from .models import Station
from .ports import LocationLookup

logger = logging.getLogger(__name__)


def _to_station(location: Any) -> Station | None:
    """Normalize one raw location into a Station, or None if it has no id."""
    if not isinstance(location, dict):
        return None
    station_id = str(location.get("id") or "")
    if not station_id:
        return None
    return Station(
        id=station_id,
        name=location.get("name") or station_id,
        type=location.get("type") or "station",
    )


class StationResolver:
    """Turns free-text city or station names into stations."""

    def __init__(self, lookup: LocationLookup):
        self.lookup = lookup

    async def resolve(self, name: str, max_results: int = 5) -> list[Station]:
        """Return the provider's ranked matches for a name.

        Args:
            name: Free-text station or city name
            max_results: Maximum number of matches, at least 1

        Returns:
            Stations in provider order; empty if nothing matched.
        """
        if not name or not name.strip():
            raise ValueError("Station name must not be empty")
        if max_results < 1:
            raise ValueError("max_results must be at least 1")

        raw = await self.lookup.locations(name.strip(), max_results)
        stations = [s for s in (_to_station(loc) for loc in raw) if s is not None]
        return stations[:max_results]

    async def resolve_one(self, name: str) -> Station:
        """Resolve a name to its highest-ranked station.

        Raises:
            NotFoundError: The provider returned no match.
        """
        stations = await self.resolve(name, 1)
        if not stations:
            raise NotFoundError(name)
        station = stations[0]
        logger.info(f"{name} -> {station.name} ({station.id})")
        return station

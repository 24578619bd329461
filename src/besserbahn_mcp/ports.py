"""Ports for the external location and journey data provider."""

from datetime import datetime
from typing import Any, Protocol

from .models import JourneyCandidate


class LocationLookup(Protocol):
    """Port for free-text station lookup."""

    async def locations(self, query: str, max_results: int) -> list[dict[str, Any]]:
        """Return ranked raw matches shaped like {id, name, type?}."""
        ...


class JourneyQuery(Protocol):
    """Port for priced journey search between two station identifiers."""

    async def query(
        self,
        origin_id: str,
        destination_id: str,
        departure: datetime,
        *,
        max_results: int,
        allow_stopovers: bool,
        max_transfers: int,
    ) -> list[JourneyCandidate]:
        """Return zero or more journey candidates departing at or after `departure`."""
        ...

"""Search entry points for the surrounding application.

`RouteSearchService.search` puts the result cache in front of the route
aggregator; `lookup_stations` exposes plain station lookup.
"""

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from .aggregator import RouteAggregator
from .cache import ResultCache
from .config import SearchSettings, get_settings
from .db_client import DbClient
from .journeys import JourneyProvider
from .models import SearchQuery, SearchResponse, Station
from .stations import StationResolver

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"


def parse_departure(date_str: str, time_str: str, tz: str = "Europe/Berlin") -> datetime:
    """Combine "YYYY-MM-DD" and "HH:MM" into an aware departure datetime.

    Raises:
        ValueError: Either part is missing or not in the expected format.
    """
    if not date_str or not time_str:
        raise ValueError("Both date and time are required")
    try:
        day = datetime.strptime(date_str, DATE_FORMAT)
    except ValueError:
        raise ValueError(f"Invalid date '{date_str}', expected YYYY-MM-DD")
    try:
        clock = datetime.strptime(time_str, TIME_FORMAT)
    except ValueError:
        raise ValueError(f"Invalid time '{time_str}', expected HH:MM")
    return day.replace(hour=clock.hour, minute=clock.minute, tzinfo=ZoneInfo(tz))


class RouteSearchService:
    """Cached route search and station lookup."""

    def __init__(
        self,
        aggregator: RouteAggregator,
        resolver: StationResolver,
        cache: ResultCache,
        settings: SearchSettings | None = None,
    ):
        self.aggregator = aggregator
        self.resolver = resolver
        self.cache = cache
        self.settings = settings or get_settings()

    async def search(
        self, from_city: str, to_city: str, date: str, time: str
    ) -> SearchResponse:
        """Search all route options, serving repeated queries from the cache.

        Raises:
            ValueError: A field is missing or date/time are malformed.
            NotFoundError: Origin or destination could not be resolved.
            ProviderError: Origin or destination lookup failed upstream.
        """
        if not from_city or not to_city:
            raise ValueError("Both from_city and to_city are required")
        departure = parse_departure(date, time, self.settings.timezone)
        query = SearchQuery(from_city=from_city, to_city=to_city, date=date, time=time)

        entry = self.cache.get(query)
        if entry is not None:
            logger.info("Returning cached result")
            return SearchResponse(
                results=list(entry.payload),
                searched_at=entry.computed_at,
                query=query,
                from_cache=True,
            )

        logger.info(f"New search: {from_city} -> {to_city} on {date} at {time}")
        results = await self.aggregator.find_route_options(from_city, to_city, departure)
        entry = self.cache.put(query, results)
        return SearchResponse(
            results=list(entry.payload),
            searched_at=entry.computed_at,
            query=query,
            from_cache=False,
        )

    async def lookup_stations(self, query: str, max_results: int | None = None) -> list[Station]:
        """Return ranked station matches for free text."""
        if max_results is None:
            max_results = self.settings.station_results
        return await self.resolver.resolve(query, max_results)


def build_service(
    client: DbClient, cache: ResultCache, settings: SearchSettings | None = None
) -> RouteSearchService:
    """Wire a service around an open DbClient."""
    settings = settings or get_settings()
    resolver = StationResolver(client)
    aggregator = RouteAggregator(resolver, JourneyProvider(client), settings)
    return RouteSearchService(aggregator, resolver, cache, settings)

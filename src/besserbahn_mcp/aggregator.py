"""Route aggregation: direct search, split exploration and merging.

The search runs in three phases:

1. Direct: resolve origin and destination, query journeys and keep the
   cheapest one as the baseline.
2. Split points: take intermediate stations from the baseline's stopovers,
   or the head of the configured hub list when there is no baseline.
3. Splits: for every split station search origin -> station and, after a
   connection buffer, station -> destination. A split is kept only when it is
   strictly cheaper than the baseline.

Only an unresolvable origin or destination is raised to the caller. Every
other failure drops the affected phase or branch and is logged.
"""

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TypeVar

from .config import SearchSettings, get_settings
from .exceptions import NotFoundError, ProviderError
from .models import JourneyCandidate, RouteOption, Station
from .ports import JourneyQuery
from .pricing import cheapest, duration_between, duration_of, require_price
from .split_points import split_points
from .stations import StationResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")

DIRECT_LABEL = "Direct"


@dataclass(frozen=True)
class SplitTarget:
    """A station to split at, with the connection buffer that applies to it."""

    name: str
    buffer: timedelta


class RouteAggregator:
    """Finds the direct journey and all cheaper split journeys."""

    def __init__(
        self,
        resolver: StationResolver,
        provider: JourneyQuery,
        settings: SearchSettings | None = None,
    ):
        self.resolver = resolver
        self.provider = provider
        self.settings = settings or get_settings()
        self._semaphore = asyncio.Semaphore(self.settings.max_concurrent_queries)

    async def _call(self, description: str, awaitable: Awaitable[T]) -> T:
        """Run one external call under the concurrency cap and deadline."""
        async with self._semaphore:
            try:
                return await asyncio.wait_for(awaitable, timeout=self.settings.provider_timeout)
            except asyncio.TimeoutError as e:
                raise ProviderError(f"{description} timed out") from e

    async def _resolve(self, name: str) -> Station:
        return await self._call(f"Station lookup '{name}'", self.resolver.resolve_one(name))

    async def _cheapest_journey(
        self, origin: Station, destination: Station, departure: datetime
    ) -> JourneyCandidate | None:
        candidates = await self._call(
            f"Journey query {origin.name} -> {destination.name}",
            self.provider.query(
                origin.id,
                destination.id,
                departure,
                max_results=self.settings.journey_results,
                allow_stopovers=self.settings.allow_stopovers,
                max_transfers=self.settings.max_transfers,
            ),
        )
        return cheapest(candidates)

    async def _direct_phase(
        self, origin: Station, destination: Station, departure: datetime
    ) -> JourneyCandidate | None:
        try:
            return await self._cheapest_journey(origin, destination, departure)
        except ProviderError as e:
            logger.warning(f"Direct route failed: {e}")
            return None
        except (ValueError, TypeError):
            logger.warning("Direct route failed on malformed data", exc_info=True)
            return None

    def _split_targets(self, baseline: JourneyCandidate | None) -> list[SplitTarget]:
        if baseline is not None:
            buffer = timedelta(minutes=self.settings.stopover_buffer_minutes)
            names = split_points(
                baseline,
                max_points=self.settings.max_split_points,
                min_dwell_seconds=self.settings.min_dwell_seconds,
            )
        else:
            buffer = timedelta(minutes=self.settings.hub_buffer_minutes)
            names = self.settings.major_hubs[: self.settings.fallback_hub_count]
            logger.info(f"No direct journey, falling back to hubs: {', '.join(names) or 'none'}")
        return [SplitTarget(name=name, buffer=buffer) for name in names]

    async def _explore_split(
        self,
        origin: Station,
        destination: Station,
        target: SplitTarget,
        departure: datetime,
        baseline_price: float | None,
    ) -> RouteOption | None:
        """Search one split branch; failures and rejections yield None."""
        try:
            hub = await self._resolve(target.name)
            if hub.id in (origin.id, destination.id):
                logger.debug(f"Skipping split at {hub.name}: same as origin or destination")
                return None

            first = await self._cheapest_journey(origin, hub, departure)
            if first is None:
                return None

            connection_time = first.arrival + target.buffer
            second = await self._cheapest_journey(hub, destination, connection_time)
            if second is None:
                return None
        except (NotFoundError, ProviderError) as e:
            logger.warning(f"Split via {target.name} failed: {e}")
            return None
        except (ValueError, TypeError):
            # malformed provider data, e.g. a location or journey that fails validation
            logger.warning(f"Split via {target.name} failed on malformed data", exc_info=True)
            return None

        total = round(require_price(first) + require_price(second), 2)
        note = "1 connection"
        if baseline_price is not None:
            savings = round(baseline_price - total, 2)
            if savings <= 0:
                logger.info(f"Rejected split via {target.name}: {total:.2f} vs direct {baseline_price:.2f}")
                return None
            note = f"1 connection • Save €{savings:.2f}"

        return RouteOption(
            label=f"Via {target.name}",
            price=total,
            duration=duration_between(first, second),
            connection_count=1,
            savings_note=note,
        )

    async def find_route_options(
        self, from_city: str, to_city: str, departure: datetime
    ) -> list[RouteOption]:
        """Return the direct option and all cheaper split options, cheapest first.

        Raises:
            NotFoundError: Origin or destination did not match any station.
            ProviderError: Origin or destination lookup failed upstream.
        """
        origin = await self._resolve(from_city)
        destination = await self._resolve(to_city)

        options: list[RouteOption] = []
        baseline = await self._direct_phase(origin, destination, departure)
        baseline_price = None
        if baseline is not None:
            baseline_price = require_price(baseline)
            options.append(
                RouteOption(
                    label=DIRECT_LABEL,
                    price=baseline_price,
                    duration=duration_of(baseline.legs),
                    connection_count=0,
                )
            )

        targets = self._split_targets(baseline)
        branches = await asyncio.gather(
            *(
                self._explore_split(origin, destination, target, departure, baseline_price)
                for target in targets
            )
        )
        options.extend(option for option in branches if option is not None)

        options.sort(key=lambda option: option.price)
        logger.info(f"{from_city} -> {to_city}: {len(options)} route option(s)")
        return options

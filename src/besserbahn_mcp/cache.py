"""In-memory, time-limited cache for search results."""

import logging
from collections import OrderedDict
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from .models import RouteOption, SearchQuery

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(minutes=5)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    """A stored search result. Never mutated; a new computation makes a new entry."""

    key: SearchQuery
    payload: tuple[RouteOption, ...]
    computed_at: datetime
    ttl: timedelta

    def is_expired(self, now: datetime) -> bool:
        return now - self.computed_at >= self.ttl


class ResultCache:
    """Read-through cache keyed by search query.

    Entries expire after `ttl`; when `max_entries` is reached the least
    recently used entry is evicted. Concurrent computations of the same query
    are tolerated, the last put wins.
    """

    def __init__(
        self,
        ttl: timedelta = DEFAULT_TTL,
        max_entries: int = 256,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[SearchQuery, CacheEntry] = OrderedDict()

    def get(self, query: SearchQuery) -> CacheEntry | None:
        """Return the live entry for a query, or None on a miss."""
        entry = self._entries.get(query)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            logger.debug(f"Cache entry expired for {query}")
            self._entries.pop(query, None)
            return None
        self._entries.move_to_end(query)
        return entry

    def put(self, query: SearchQuery, payload: Iterable[RouteOption]) -> CacheEntry:
        """Store a freshly computed result and return its entry."""
        entry = CacheEntry(
            key=query,
            payload=tuple(payload),
            computed_at=self._clock(),
            ttl=self.ttl,
        )
        self._entries[query] = entry
        self._entries.move_to_end(query)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted cache entry for {evicted}")
        return entry

    def __len__(self) -> int:
        return len(self._entries)

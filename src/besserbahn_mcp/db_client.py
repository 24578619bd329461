"""DB transport REST client for station lookup and journey search.

Uses the public v6.db.transport.rest API.
API Documentation: https://v6.db.transport.rest/api.html
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Any

import httpx

from .config import SearchSettings, get_settings
from .exceptions import ProviderError

logger = logging.getLogger(__name__)


class RateLimiter:
    """Spaces out requests so the public API rate limit is respected."""

    def __init__(self, requests_per_second: float):
        self.delay = 1.0 / requests_per_second
        self.last_request = 0.0
        self._lock = asyncio.Lock()

    async def wait(self) -> None:
        """Wait if necessary to respect rate limit."""
        async with self._lock:
            elapsed = time.monotonic() - self.last_request
            if elapsed < self.delay:
                await asyncio.sleep(self.delay - elapsed)
            self.last_request = time.monotonic()


class DbClient:
    """Client for the DB transport REST API."""

    def __init__(
        self,
        settings: SearchSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self.client: httpx.AsyncClient | None = None
        self.rate_limiter = RateLimiter(self.settings.requests_per_second)
        self._transport = transport

    async def __aenter__(self):
        """Async context manager entry."""
        self.client = httpx.AsyncClient(
            base_url=self.settings.api_base_url,
            timeout=self.settings.http_timeout,
            headers={"User-Agent": self.settings.user_agent, "Accept": "application/json"},
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.client:
            await self.client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        """Make a rate-limited request and return the decoded JSON body."""
        if not self.client:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")

        await self.rate_limiter.wait()

        try:
            response = await self.client.request(method, path, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning(f"DB API returned status {status} for {path}: {e.response.text[:200]}")
            if status == 429:
                raise ProviderError("Rate limit exceeded. Please try again later.") from e
            elif status in (400, 404):
                raise ProviderError(f"Invalid station identifier or request ({status}).") from e
            elif status >= 500:
                raise ProviderError(
                    f"DB API server error ({status}). Please try again later."
                ) from e
            raise ProviderError(f"DB API request failed ({status}).") from e
        except httpx.RequestError as e:
            raise ProviderError(f"Could not reach DB API: {e}") from e
        except ValueError as e:
            raise ProviderError(f"DB API returned malformed JSON for {path}") from e

    async def locations(self, query: str, max_results: int = 5) -> list[dict[str, Any]]:
        """Search stations by free text.

        Args:
            query: Station or city name (e.g., "Berlin Hbf", "Köln")
            max_results: Maximum number of ranked matches

        Returns:
            Raw location dicts in provider ranking order.
        """
        params = {
            "query": query,
            "results": max_results,
            "stops": "true",
            "addresses": "false",
            "poi": "false",
        }
        data = await self._request("GET", "/locations", params=params)
        if not isinstance(data, list):
            raise ProviderError("Unexpected locations response shape")
        return data

    async def journeys(
        self,
        from_id: str,
        to_id: str,
        departure: datetime,
        results: int = 3,
        stopovers: bool = True,
        transfers: int = -1,
    ) -> dict[str, Any]:
        """Find journeys between two station identifiers.

        Args:
            from_id: Origin station ID
            to_id: Destination station ID
            departure: Earliest departure, timezone aware
            results: Number of journeys to request
            stopovers: Include intermediate stops for every leg
            transfers: Maximum transfers, -1 lets the backend decide

        Returns:
            Journeys document with a "journeys" list.
        """
        params: dict[str, str | int] = {
            "from": from_id,
            "to": to_id,
            "departure": departure.isoformat(),
            "results": results,
            "stopovers": "true" if stopovers else "false",
            "transfers": transfers,
            "tickets": "true",
        }
        data = await self._request("GET", "/journeys", params=params)
        if not isinstance(data, dict):
            raise ProviderError("Unexpected journeys response shape")
        return data

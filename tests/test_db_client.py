"""Tests for the DB transport REST client."""

import time

import httpx
import pytest

from besserbahn_mcp.config import SearchSettings
from besserbahn_mcp.db_client import DbClient, RateLimiter
from besserbahn_mcp.exceptions import ProviderError

from conftest import at


def make_client(handler) -> DbClient:
    settings = SearchSettings(requests_per_second=1000, api_base_url="https://db.test")
    return DbClient(settings, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_rate_limiter():
    """Test rate limiter functionality."""
    limiter = RateLimiter(10)  # 10 requests per second

    start = time.monotonic()
    for _ in range(5):
        await limiter.wait()

    # 4 intervals of 0.1s
    assert time.monotonic() - start >= 0.35


def test_rate_limiter_delay_calculation():
    assert RateLimiter(10).delay == pytest.approx(0.1, abs=0.001)
    assert RateLimiter(1.5).delay == pytest.approx(1 / 1.5, abs=0.001)


@pytest.mark.asyncio
async def test_client_initialization():
    """Test client context manager."""
    async with make_client(lambda request: httpx.Response(200, json=[])) as client:
        assert client.client is not None


@pytest.mark.asyncio
async def test_request_requires_context_manager():
    client = make_client(lambda request: httpx.Response(200, json=[]))
    with pytest.raises(RuntimeError):
        await client.locations("Berlin")


@pytest.mark.asyncio
async def test_locations_request():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"type": "stop", "id": "8011160", "name": "Berlin Hbf"}])

    async with make_client(handler) as client:
        result = await client.locations("Berlin", 1)

    assert result == [{"type": "stop", "id": "8011160", "name": "Berlin Hbf"}]
    request = seen[0]
    assert request.url.path == "/locations"
    assert request.url.params["query"] == "Berlin"
    assert request.url.params["results"] == "1"
    assert request.url.params["stops"] == "true"
    assert request.headers["User-Agent"].startswith("besserbahn-mcp")


@pytest.mark.asyncio
async def test_journeys_request():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"journeys": []})

    async with make_client(handler) as client:
        result = await client.journeys("8011160", "8000261", at("10:00"), results=3, stopovers=True, transfers=-1)

    assert result == {"journeys": []}
    params = seen[0].url.params
    assert seen[0].url.path == "/journeys"
    assert params["from"] == "8011160"
    assert params["to"] == "8000261"
    assert params["departure"] == "2025-08-20T10:00:00+02:00"
    assert params["results"] == "3"
    assert params["stopovers"] == "true"
    assert params["transfers"] == "-1"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, message",
    [
        (429, "Rate limit"),
        (400, "Invalid station identifier"),
        (404, "Invalid station identifier"),
        (503, "server error"),
        (418, "request failed"),
    ],
)
async def test_http_errors_become_provider_errors(status, message):
    async with make_client(lambda request: httpx.Response(status, text="nope")) as client:
        with pytest.raises(ProviderError, match=message):
            await client.locations("Berlin")


@pytest.mark.asyncio
async def test_transport_error_becomes_provider_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(ProviderError, match="Could not reach"):
            await client.journeys("a", "b", at("10:00"))


@pytest.mark.asyncio
async def test_unexpected_shapes_become_provider_errors():
    async with make_client(lambda request: httpx.Response(200, json={"not": "a list"})) as client:
        with pytest.raises(ProviderError):
            await client.locations("Berlin")

    async with make_client(lambda request: httpx.Response(200, text="<html>")) as client:
        with pytest.raises(ProviderError, match="malformed"):
            await client.journeys("a", "b", at("10:00"))


if __name__ == "__main__":
    pytest.main([__file__])

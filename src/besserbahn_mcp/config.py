"""
Centralized configuration for the BesserBahn route search.

Every search policy (buffers, dwell threshold, hub list, cache lifetime) is a
named setting so it can be tuned from the environment without touching the
algorithm. All settings can be overridden via variables prefixed with
BESSERBAHN_, e.g. BESSERBAHN_HUB_BUFFER_MINUTES=20.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HUBS = [
    "Frankfurt am Main",
    "Hannover",
    "Nürnberg",
    "Köln",
    "Hamburg",
]


class SearchSettings(BaseSettings):
    """Search engine configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BESSERBAHN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # Provider
    # =========================================================================

    api_base_url: str = Field(
        default="https://v6.db.transport.rest",
        description="Base URL of the DB transport REST API",
    )
    user_agent: str = Field(
        default="besserbahn-mcp/0.1.0",
        description="User-Agent header sent with every request",
    )
    http_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for a single HTTP request in seconds",
    )
    requests_per_second: float = Field(
        default=1.5,
        gt=0,
        description="Client side request rate towards the provider",
    )
    provider_timeout: float = Field(
        default=20.0,
        gt=0,
        description="Deadline for one resolver or journey call, including rate limiting",
    )
    max_concurrent_queries: int = Field(
        default=3,
        ge=1,
        le=16,
        description="Maximum number of external calls in flight during a search",
    )

    # =========================================================================
    # Journey query
    # =========================================================================

    journey_results: int = Field(default=3, ge=1, description="Journeys requested per query")
    allow_stopovers: bool = Field(default=True, description="Request stopovers for every leg")
    max_transfers: int = Field(default=-1, description="Transfer cap per query, -1 for no cap")

    # =========================================================================
    # Split search
    # =========================================================================

    min_dwell_seconds: int = Field(
        default=120,
        ge=0,
        description="Minimum stopover dwell time to count as an interchange",
    )
    max_split_points: int = Field(
        default=3,
        ge=0,
        description="Maximum split stations derived from the direct journey",
    )
    stopover_buffer_minutes: int = Field(
        default=15,
        ge=0,
        description="Connection buffer for split stations taken from stopovers",
    )
    hub_buffer_minutes: int = Field(
        default=30,
        ge=0,
        description="Connection buffer for split stations taken from the hub list",
    )
    major_hubs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_HUBS),
        description="Ordered interchange hubs used when no direct journey exists",
    )
    fallback_hub_count: int = Field(
        default=2,
        ge=0,
        description="How many hubs from the head of major_hubs are tried",
    )

    # =========================================================================
    # Cache
    # =========================================================================

    cache_ttl_seconds: int = Field(default=300, ge=1, description="Search result lifetime")
    cache_max_entries: int = Field(default=256, ge=1, description="Cached searches kept in memory")

    # =========================================================================
    # Misc
    # =========================================================================

    timezone: str = Field(
        default="Europe/Berlin",
        description="IANA timezone the requested date and time are expressed in",
    )
    station_results: int = Field(default=5, ge=1, description="Default station lookup size")
    log_level: str = Field(default="INFO", description="Application log level")


@lru_cache(maxsize=1)
def get_settings() -> SearchSettings:
    """Return the process-wide settings instance."""
    return SearchSettings()

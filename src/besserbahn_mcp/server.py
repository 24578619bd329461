"""BesserBahn MCP Server for split-ticket price search."""

import logging
from datetime import timedelta

from mcp.server import Server
from mcp.types import Tool, TextContent

from .cache import ResultCache
from .config import get_settings
from .db_client import DbClient
from .exceptions import BesserBahnError
from .models import RouteOption, SearchResponse, Station
from .service import build_service

logger = logging.getLogger(__name__)

# Create MCP server
app = Server("besserbahn-mcp")

# Shared across tool calls so repeated searches are served from memory
_settings = get_settings()
result_cache = ResultCache(
    ttl=timedelta(seconds=_settings.cache_ttl_seconds),
    max_entries=_settings.cache_max_entries,
)


def format_route_option(option: RouteOption) -> str:
    """Format a route option for display."""
    details = option.savings_note or (
        "No connections" if option.is_direct else f"{option.connection_count} connection"
    )
    return f"{option.label}: €{option.price:.2f}, {option.duration} ({details})"


def format_station(station: Station) -> str:
    """Format a station match for display."""
    return f"{station.name} [{station.type}] - ID: {station.id}"


def format_search_response(response: SearchResponse) -> str:
    """Format a full search response for display."""
    query = response.query
    cached = " (cached)" if response.from_cache else ""
    lines = [
        f"Route options from {query.from_city} to {query.to_city} "
        f"on {query.date} at {query.time}{cached}:\n"
    ]
    if not response.results:
        lines.append("No route options found.")
    else:
        for option in response.results:
            lines.append(f"  {format_route_option(option)}")
    lines.append(f"\nSearched at {response.searched_at.strftime('%Y-%m-%d %H:%M:%S %Z')}")
    return "\n".join(lines)


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="search_routes",
            description=(
                "Find the cheapest way between two German cities, comparing the direct "
                "journey with split tickets via intermediate stations"
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "from_city": {
                        "type": "string",
                        "description": "Departure city or station (e.g., 'Berlin')",
                    },
                    "to_city": {
                        "type": "string",
                        "description": "Destination city or station (e.g., 'München')",
                    },
                    "date": {
                        "type": "string",
                        "description": "Date in format YYYY-MM-DD",
                    },
                    "time": {
                        "type": "string",
                        "description": "Departure time in 24-hour format (e.g., '14:30')",
                    },
                },
                "required": ["from_city", "to_city", "date", "time"],
            },
        ),
        Tool(
            name="search_stations",
            description="Search for railway stations by name",
            inputSchema={
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": "Station name or partial name (e.g., 'Frankfurt')",
                    },
                    "results": {
                        "type": "integer",
                        "description": "Maximum number of matches (default: 5)",
                        "default": 5,
                        "minimum": 1,
                    },
                },
                "required": ["query"],
            },
        ),
    ]


@app.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool calls."""
    try:
        async with DbClient(_settings) as client:
            if name == "search_routes":
                result = await _search_routes(client, arguments)
            elif name == "search_stations":
                result = await _search_stations(client, arguments)
            else:
                result = f"Unknown tool: {name}"

        return [TextContent(type="text", text=result)]
    except Exception as e:
        error_msg = f"Error: {str(e)}"
        logger.error(error_msg, exc_info=True)
        return [TextContent(type="text", text=error_msg)]


async def _search_routes(client: DbClient, arguments: dict) -> str:
    """Search direct and split route options."""
    from_city = arguments.get("from_city", "")
    to_city = arguments.get("to_city", "")
    date_str = arguments.get("date", "")
    time_str = arguments.get("time", "")

    if not from_city or not to_city or not date_str or not time_str:
        return "Error: 'from_city', 'to_city', 'date' and 'time' parameters are required"

    service = build_service(client, result_cache, _settings)
    try:
        response = await service.search(from_city, to_city, date_str, time_str)
    except (ValueError, BesserBahnError) as e:
        return f"Error searching routes: {str(e)}"

    return format_search_response(response)


async def _search_stations(client: DbClient, arguments: dict) -> str:
    """Search for stations through the provider's location lookup."""
    query = arguments.get("query", "")
    results = arguments.get("results", _settings.station_results)

    if not query:
        return "Error: 'query' parameter is required"

    service = build_service(client, result_cache, _settings)
    try:
        stations = await service.lookup_stations(query, int(results))
    except (ValueError, BesserBahnError) as e:
        return f"Error searching stations: {str(e)}"

    if not stations:
        return f"No stations found matching '{query}'"

    lines = [f"Found {len(stations)} station(s) matching '{query}':\n"]
    for station in stations:
        lines.append(f"• {format_station(station)}")
    return "\n".join(lines)


async def main():
    """Run the MCP server."""
    from mcp.server.stdio import stdio_server

    logging.basicConfig(
        level=getattr(logging, _settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    async with stdio_server() as (read_stream, write_stream):
        init_options = app.create_initialization_options()
        await app.run(read_stream, write_stream, init_options)


def cli():
    """Entry point for console script."""
    import asyncio
    asyncio.run(main())


if __name__ == "__main__":
    cli()

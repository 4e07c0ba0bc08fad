"""
MCP Server for the NerdyChefs prompt library.

Exposes the read-only prompt catalog as MCP tools (search, lookup, packs,
tags, personas, random picks) and each category as an MCP resource. Catalog
failures are returned as tool results flagged with isError rather than
raised, so the calling model always gets a readable explanation.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from urllib.parse import unquote
from typing import Any

import httpx
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.shared.exceptions import McpError
from pydantic import AnyUrl

from core.config import get_settings
from shared.mcp_utils import load_instructions, load_tool_descriptions

from .api_client import create_http_client, fetch_document
from .cache import DocumentCache
from .catalog import PromptCatalog
from .exceptions import CatalogError, DataSourceError, NotFoundError
from .models import Document

logger = logging.getLogger(__name__)

_DIR = Path(__file__).parent
_TOOLS = load_tool_descriptions(_DIR)

CATEGORY_URI_PREFIX = "nerdychefs://category/"

# Create the MCP server
server = Server(
    "nerdychefs-prompts",
    version="1.0.0",
    instructions=load_instructions(_DIR),
)

# Module-level client and catalog shared by all requests
# Initialized by init_http_client() at startup, closed by cleanup()
_http_client: httpx.AsyncClient | None = None
_catalog: PromptCatalog | None = None


async def init_http_client() -> None:
    """
    Initialize the HTTP client and the document cache built on it.

    Called by the lifespan handler (HTTP transport) or run_stdio() in main.py
    at startup, so the catalog is ready before any requests arrive.
    """
    global _http_client, _catalog  # noqa: PLW0603
    if _http_client is None or _http_client.is_closed:
        client = create_http_client()

        async def fetch(name: str) -> Document:
            return await fetch_document(get_http_client(), name)

        cache: DocumentCache[Document] = DocumentCache(
            fetch,
            ttl_seconds=get_settings().cache_ttl_seconds,
        )
        _http_client = client
        _catalog = PromptCatalog(cache)
        logger.info(
            "catalog_initialized base_url=%s ttl=%ss",
            client.base_url,
            cache.ttl_seconds,
        )


async def cleanup() -> None:
    """
    Clean up resources on shutdown.

    Closes the HTTP client and drops the cached catalog.
    """
    global _http_client, _catalog  # noqa: PLW0603

    if _http_client is not None and not _http_client.is_closed:
        await _http_client.aclose()
    _http_client = None
    _catalog = None


def get_http_client() -> httpx.AsyncClient:
    """
    Get the HTTP client for API requests.

    Raises RuntimeError if called before init_http_client().
    """
    if _http_client is None or _http_client.is_closed:
        raise RuntimeError(
            "HTTP client not initialized. Call init_http_client() first.",
        )
    return _http_client


def get_catalog() -> PromptCatalog:
    """
    Get the prompt catalog.

    Raises RuntimeError if called before init_http_client().
    """
    if _catalog is None:
        raise RuntimeError(
            "Catalog not initialized. Call init_http_client() first.",
        )
    return _catalog


def _json_text(data: Any) -> list[types.TextContent]:
    """Wrap a JSON-serializable result as tool output."""
    return [types.TextContent(type="text", text=json.dumps(data, indent=2))]


def _make_error_result(message: str) -> types.CallToolResult:
    """Create a CallToolResult flagged as an error."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=message)],
        isError=True,
    )


def _error_message(error: CatalogError) -> str:
    """Render a catalog error for the calling model."""
    if isinstance(error, DataSourceError):
        return f"Error: {error.message}"
    return error.message


def _optional_string(description: str) -> dict[str, Any]:
    return {"type": ["string", "null"], "description": description}


def _optional_integer(description: str) -> dict[str, Any]:
    return {"type": ["integer", "null"], "description": description}


@server.list_tools()
async def handle_list_tools() -> list[types.Tool]:
    """List available tools."""
    _t = _TOOLS
    read_only = types.ToolAnnotations(readOnlyHint=True, openWorldHint=True)
    return [
        types.Tool(
            name="search_prompts",
            description=_t["search_prompts"]["description"],
            inputSchema={
                "type": "object",
                "properties": {
                    "query": _optional_string(_t["search_prompts"]["parameters"]["query"]),
                    "tag": _optional_string(_t["search_prompts"]["parameters"]["tag"]),
                    "category": _optional_string(_t["search_prompts"]["parameters"]["category"]),
                    "persona": _optional_string(_t["search_prompts"]["parameters"]["persona"]),
                    "limit": _optional_integer(_t["search_prompts"]["parameters"]["limit"]),
                },
                "required": [],
            },
            annotations=read_only,
        ),
        types.Tool(
            name="get_prompt",
            description=_t["get_prompt"]["description"],
            inputSchema={
                "type": "object",
                "properties": {
                    "id": {
                        "type": "integer",
                        "description": _t["get_prompt"]["parameters"]["id"],
                    },
                },
                "required": ["id"],
            },
            annotations=read_only,
        ),
        types.Tool(
            name="list_categories",
            description=_t["list_categories"]["description"],
            inputSchema={
                "type": "object",
                "properties": {},
                "required": [],
            },
            annotations=read_only,
        ),
        types.Tool(
            name="list_packs",
            description=_t["list_packs"]["description"],
            inputSchema={
                "type": "object",
                "properties": {
                    "category": _optional_string(_t["list_packs"]["parameters"]["category"]),
                },
                "required": [],
            },
            annotations=read_only,
        ),
        types.Tool(
            name="get_pack",
            description=_t["get_pack"]["description"],
            inputSchema={
                "type": "object",
                "properties": {
                    "pack_title": {
                        "type": "string",
                        "description": _t["get_pack"]["parameters"]["pack_title"],
                    },
                },
                "required": ["pack_title"],
            },
            annotations=read_only,
        ),
        types.Tool(
            name="list_tags",
            description=_t["list_tags"]["description"],
            inputSchema={
                "type": "object",
                "properties": {
                    "limit": _optional_integer(_t["list_tags"]["parameters"]["limit"]),
                },
                "required": [],
            },
            annotations=read_only,
        ),
        types.Tool(
            name="list_personas",
            description=_t["list_personas"]["description"],
            inputSchema={
                "type": "object",
                "properties": {
                    "limit": _optional_integer(_t["list_personas"]["parameters"]["limit"]),
                },
                "required": [],
            },
            annotations=read_only,
        ),
        types.Tool(
            name="get_random_prompts",
            description=_t["get_random_prompts"]["description"],
            inputSchema={
                "type": "object",
                "properties": {
                    "count": _optional_integer(_t["get_random_prompts"]["parameters"]["count"]),
                    "category": _optional_string(
                        _t["get_random_prompts"]["parameters"]["category"],
                    ),
                    "tag": _optional_string(_t["get_random_prompts"]["parameters"]["tag"]),
                },
                "required": [],
            },
            annotations=read_only,
        ),
    ]


@server.call_tool()
async def handle_call_tool(
    name: str,
    arguments: dict[str, Any] | None,
) -> list[types.TextContent] | types.CallToolResult:
    """Handle tool calls."""
    # Dispatch table for tool handlers
    handlers: dict[str, Callable[[dict[str, Any]], Awaitable[Any]]] = {
        "search_prompts": _handle_search_prompts,
        "get_prompt": _handle_get_prompt,
        "list_categories": lambda _: get_catalog().list_categories(),
        "list_packs": _handle_list_packs,
        "get_pack": _handle_get_pack,
        "list_tags": _handle_list_tags,
        "list_personas": _handle_list_personas,
        "get_random_prompts": _handle_get_random_prompts,
    }

    handler = handlers.get(name)
    if handler is None:
        return _make_error_result(f"Unknown tool: {name}")

    try:
        result = await handler(arguments or {})
    except CatalogError as e:
        if isinstance(e, DataSourceError):
            logger.warning("tool_failed name=%s error=%s", name, e)
        return _make_error_result(_error_message(e))

    return _json_text(result)


async def _handle_search_prompts(arguments: dict[str, Any]) -> dict[str, Any]:
    """Handle search_prompts tool call."""
    return await get_catalog().search(
        query=arguments.get("query"),
        tag=arguments.get("tag"),
        category=arguments.get("category"),
        persona=arguments.get("persona"),
        limit=arguments.get("limit"),
    )


async def _handle_get_prompt(arguments: dict[str, Any]) -> dict[str, Any]:
    """Handle get_prompt tool call."""
    return await get_catalog().get_prompt(arguments.get("id"))


async def _handle_list_packs(arguments: dict[str, Any]) -> dict[str, Any]:
    """Handle list_packs tool call."""
    return await get_catalog().list_packs(category=arguments.get("category"))


async def _handle_get_pack(arguments: dict[str, Any]) -> dict[str, Any]:
    """Handle get_pack tool call."""
    return await get_catalog().get_pack(arguments.get("pack_title"))


async def _handle_list_tags(arguments: dict[str, Any]) -> dict[str, Any]:
    """Handle list_tags tool call."""
    return await get_catalog().list_tags(limit=arguments.get("limit"))


async def _handle_list_personas(arguments: dict[str, Any]) -> dict[str, Any]:
    """Handle list_personas tool call."""
    return await get_catalog().list_personas(limit=arguments.get("limit"))


async def _handle_get_random_prompts(arguments: dict[str, Any]) -> dict[str, Any]:
    """Handle get_random_prompts tool call."""
    return await get_catalog().get_random_prompts(
        count=arguments.get("count"),
        category=arguments.get("category"),
        tag=arguments.get("tag"),
    )


@server.list_resources()
async def handle_list_resources() -> list[types.Resource]:
    """List each category as a browsable JSON resource."""
    try:
        categories = await get_catalog().list_category_resources()
    except DataSourceError as e:
        raise McpError(
            types.ErrorData(
                code=types.INTERNAL_ERROR,
                message=_error_message(e),
            ),
        ) from e

    return [
        types.Resource(
            uri=AnyUrl(f"{CATEGORY_URI_PREFIX}{c.id}"),
            name=c.name,
            description=f"{c.description} ({c.prompt_count} prompts)",
            mimeType="application/json",
        )
        for c in categories
    ]


@server.read_resource()
async def handle_read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
    """Read a category resource: the category and all of its prompts."""
    uri_str = str(uri)
    if not uri_str.startswith(CATEGORY_URI_PREFIX):
        raise McpError(
            types.ErrorData(
                code=types.INVALID_PARAMS,
                message=f"Unknown resource: {uri_str}",
            ),
        )

    # AnyUrl percent-encodes ids such as "Sales Team" when the URI is built
    category_id = unquote(uri_str.removeprefix(CATEGORY_URI_PREFIX))
    try:
        data = await get_catalog().get_category(category_id)
    except NotFoundError as e:
        raise McpError(
            types.ErrorData(code=types.INVALID_PARAMS, message=e.message),
        ) from e
    except DataSourceError as e:
        raise McpError(
            types.ErrorData(code=types.INTERNAL_ERROR, message=_error_message(e)),
        ) from e

    return [
        ReadResourceContents(
            content=json.dumps(data, indent=2),
            mime_type="application/json",
        ),
    ]

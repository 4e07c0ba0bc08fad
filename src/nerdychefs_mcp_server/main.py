"""
Transports for the NerdyChefs MCP server.

`app` is a Starlette application mounting the MCP server at /mcp over
streamable HTTP. `run_stdio()` serves a single client over stdin/stdout,
which is how desktop MCP clients launch the server.
"""

from contextlib import asynccontextmanager
from typing import Any

from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from .server import cleanup, init_http_client, server

# Create session manager for streamable HTTP transport
session_manager = StreamableHTTPSessionManager(
    app=server,
    event_store=None,
    json_response=True,
    stateless=True,
)


async def health_check(request: Request) -> JSONResponse:  # noqa: ARG001
    """Health check endpoint."""
    return JSONResponse({"status": "healthy"})


class MCPRouteHandler:
    """
    ASGI wrapper that routes /mcp and /mcp/* to the MCP session manager.

    This avoids Starlette's Mount redirect behavior (307 from /mcp to /mcp/)
    by handling path normalization ourselves.
    """

    def __init__(self, session_manager: StreamableHTTPSessionManager) -> None:
        self.session_manager = session_manager

    async def __call__(self, scope: dict, receive: Any, send: Any) -> None:
        """Route MCP requests, normalizing path for the session manager."""
        # The session manager expects paths relative to its mount point
        path = scope.get("path", "")
        if path == "/mcp":
            scope = {**scope, "path": "/"}
        elif path.startswith("/mcp/"):
            scope = {**scope, "path": path[4:]}  # Strip "/mcp" prefix

        await self.session_manager.handle_request(scope, receive, send)


@asynccontextmanager
async def lifespan(app: Starlette):  # noqa: ARG001, ANN201
    """
    Application lifespan handler.

    Initializes the HTTP client and catalog on startup, runs the MCP session
    manager, and closes the client on shutdown.
    """
    await init_http_client()

    async with session_manager.run():
        yield

    await cleanup()


async def run_stdio() -> None:
    """Serve the MCP server over stdin/stdout until the client disconnects."""
    await init_http_client()
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    finally:
        await cleanup()


# Create ASGI handler for MCP routes
mcp_handler = MCPRouteHandler(session_manager)

# Create the Starlette application
app = Starlette(
    routes=[
        Route("/health", health_check, methods=["GET"]),
        # Handle /mcp exactly (no trailing slash)
        Route("/mcp", mcp_handler, methods=["GET", "POST", "DELETE"]),
        # Handle /mcp/* with any sub-path
        Route("/mcp/{path:path}", mcp_handler, methods=["GET", "POST", "DELETE"]),
    ],
    lifespan=lifespan,
)

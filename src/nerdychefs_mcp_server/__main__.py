"""Entry point for running the NerdyChefs MCP server."""

import asyncio
import logging
import sys

import uvicorn

from core.config import get_settings

from .main import run_stdio


def main() -> None:
    """Run the server on the transport selected by MCP_TRANSPORT."""
    settings = get_settings()
    # Logs go to stderr; stdout carries the stdio transport
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    if settings.mcp_transport == "http":
        uvicorn.run(
            "nerdychefs_mcp_server.main:app",
            host=settings.mcp_host,
            port=settings.mcp_port,
            log_level=settings.log_level.lower(),
        )
    else:
        logging.getLogger(__name__).info("NerdyChefs MCP server running on stdio")
        asyncio.run(run_stdio())


if __name__ == "__main__":
    main()

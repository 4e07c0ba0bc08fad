"""MCP server for the NerdyChefs prompt library."""

from .cache import DocumentCache
from .catalog import PromptCatalog
from .exceptions import (
    CatalogError,
    DataSourceError,
    NotFoundError,
    ParseError,
    TransportError,
    ValidationError,
)

__all__ = [
    "CatalogError",
    "DataSourceError",
    "DocumentCache",
    "NotFoundError",
    "ParseError",
    "PromptCatalog",
    "TransportError",
    "ValidationError",
]

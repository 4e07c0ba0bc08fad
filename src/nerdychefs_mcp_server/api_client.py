"""HTTP client helpers for fetching catalog documents from the NerdyChefs API."""

import logging

import httpx
from pydantic import ValidationError as PydanticValidationError

from core.config import get_settings

from .exceptions import ParseError, TransportError
from .models import DOCUMENT_MODELS, Document

logger = logging.getLogger(__name__)

REQUEST_SOURCE = "mcp-nerdychefs"


def get_api_base_url() -> str:
    """Get the NerdyChefs API base URL from settings."""
    return get_settings().api_base_url


def get_default_timeout() -> float:
    """Get the default request timeout."""
    return get_settings().api_timeout


def create_http_client() -> httpx.AsyncClient:
    """Create an HTTP client configured for the NerdyChefs API."""
    return httpx.AsyncClient(
        base_url=get_api_base_url(),
        timeout=get_default_timeout(),
        headers={
            "Accept": "application/json",
            "X-Request-Source": REQUEST_SOURCE,
        },
        follow_redirects=True,
    )


async def fetch_document(client: httpx.AsyncClient, name: str) -> Document:
    """
    Fetch and parse one of the five catalog documents.

    Args:
        client: HTTP client whose base URL points at the NerdyChefs API.
        name: Document name ("prompts", "categories", "packs", "tags" or "personas").

    Returns:
        The validated document model.

    Raises:
        TransportError: The API could not be reached or answered with a non-2xx status.
        ParseError: The body is not JSON or does not match the document schema.
    """
    model = DOCUMENT_MODELS.get(name)
    if model is None:
        raise ValueError(f"Unknown document: {name}")

    try:
        response = await client.get(f"/{name}.json")
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        raise TransportError(name, f"API error {status} fetching {name}", status_code=status) from e
    except httpx.RequestError as e:
        raise TransportError(name, f"API unavailable: {e}") from e

    try:
        payload = response.json()
    except ValueError as e:
        raise ParseError(name, f"Invalid JSON response for {name}") from e

    if not isinstance(payload, dict) or name not in payload:
        raise ParseError(name, f"Malformed {name} document: missing '{name}' collection")

    try:
        document = model.model_validate(payload)
    except PydanticValidationError as e:
        raise ParseError(
            name,
            f"Malformed {name} document: {e.error_count()} invalid field(s)",
        ) from e

    logger.debug("document_fetched name=%s records=%s", name, len(getattr(document, name)))
    return document

"""Test fixtures for NerdyChefs MCP server tests."""

import random
from collections.abc import AsyncGenerator
from typing import Any

import pytest
import respx

from core.config import get_settings
from nerdychefs_mcp_server import server as server_module
from nerdychefs_mcp_server.cache import DocumentCache
from nerdychefs_mcp_server.catalog import PromptCatalog
from nerdychefs_mcp_server.models import DOCUMENT_MODELS


def _prompt(  # noqa: PLR0913
    prompt_id: int,
    title: str,
    category: str,
    subcategory: str,
    pack_title: str,
    tags: list[str],
    personas: list[str],
    **extra: Any,
) -> dict[str, Any]:
    return {
        "id": prompt_id,
        "title": title,
        "prompt": f"Act as an expert. {title}.",
        "use_case": f"Use when you need to {title.lower()}",
        "category": category,
        "subcategory": subcategory,
        "pack_title": pack_title,
        "tags": tags,
        "personas": personas,
        **extra,
    }


@pytest.fixture
def sample_prompts_document() -> dict[str, Any]:
    """
    Sample prompts.json response.

    "Sales Pack" has three prompts in two subcategories, interleaved with a
    prompt from another pack so section grouping is exercised.
    """
    return {
        "prompts": [
            _prompt(
                1, "Write a cold outreach email", "Sales", "Cold Email", "Sales Pack",
                ["sales", "email", "outreach"], ["Account Executive", "SDR"],
            ),
            _prompt(
                2, "Follow up after a demo", "Sales", "Follow-up", "Sales Pack",
                ["sales", "follow-up"], ["Account Executive"],
            ),
            _prompt(
                42, "Review a pull request", "Engineering", "Code Review",
                "AI for Software Engineers", ["code-review", "engineering"],
                ["Software Engineer", "Engineering Manager"],
                difficulty="intermediate",
            ),
            _prompt(
                3, "Cold email subject lines", "Sales", "Cold Email", "Sales Pack",
                ["email", "copywriting"], ["SDR"],
            ),
            _prompt(
                5, "Plan a holiday campaign", "Marketing", "Campaigns", "Marketing Pack",
                ["holiday", "marketing"], ["Marketing Manager"],
            ),
            _prompt(
                6, "Review the quarterly forecast", "Sales Operations", "Forecasting",
                "Revenue Ops Pack", ["forecasting", "salesforce"], ["Sales Manager"],
            ),
        ],
    }


@pytest.fixture
def sample_categories_document() -> dict[str, Any]:
    """Sample categories.json response."""
    return {
        "categories": [
            {
                "id": "sales",
                "name": "Sales",
                "description": "Prompts for sales teams",
                "icon": "briefcase",
                "prompt_count": 120,
                "subcategories": ["Sales", "Sales Operations"],
            },
            {
                "id": "engineering",
                "name": "Engineering",
                "description": "Prompts for software engineers",
                "icon": "code",
                "prompt_count": 80,
                "subcategories": ["Engineering"],
            },
            {
                "id": "legal",
                "name": "Legal",
                "description": "Prompts for legal teams",
                "icon": "scale",
                "prompt_count": 0,
                "subcategories": ["Legal"],
            },
        ],
    }


@pytest.fixture
def sample_packs_document() -> dict[str, Any]:
    """Sample packs.json response."""
    return {
        "packs": [
            {
                "id": "sales-pack",
                "title": "Sales Pack",
                "category": "Sales",
                "description": "Prospecting and follow-up prompts",
                "total_prompts": 3,
                "sections": [{"name": "Cold Email", "count": 2}, {"name": "Follow-up", "count": 1}],
            },
            {
                "id": "eng-pack",
                "title": "AI for Software Engineers",
                "category": "Engineering",
                "description": "Code review and design prompts",
                "total_prompts": 1,
                "sections": [{"name": "Code Review", "count": 1}],
            },
            {
                "id": "revops-pack",
                "title": "Revenue Ops Pack",
                "category": "Sales Operations",
                "description": "Forecasting prompts",
                "total_prompts": 1,
                "sections": [],
            },
        ],
    }


@pytest.fixture
def sample_tags_document() -> dict[str, Any]:
    """Sample tags.json response with a tie on the highest count."""
    return {
        "tags": [
            {"name": "a", "count": 5},
            {"name": "b", "count": 9},
            {"name": "c", "count": 9},
            {"name": "d", "count": 1},
        ],
    }


@pytest.fixture
def sample_personas_document() -> dict[str, Any]:
    """Sample personas.json response."""
    return {
        "personas": [
            {"name": "SDR", "count": 2},
            {"name": "Account Executive", "count": 2},
            {"name": "Software Engineer", "count": 1},
            {"name": "Marketing Manager", "count": 3},
        ],
    }


@pytest.fixture
def documents(
    sample_prompts_document: dict[str, Any],
    sample_categories_document: dict[str, Any],
    sample_packs_document: dict[str, Any],
    sample_tags_document: dict[str, Any],
    sample_personas_document: dict[str, Any],
) -> dict[str, dict[str, Any]]:
    """All five documents keyed by name, as served by the API."""
    return {
        "prompts": sample_prompts_document,
        "categories": sample_categories_document,
        "packs": sample_packs_document,
        "tags": sample_tags_document,
        "personas": sample_personas_document,
    }


@pytest.fixture
def catalog(documents: dict[str, dict[str, Any]]) -> PromptCatalog:
    """PromptCatalog backed by the sample documents, without HTTP."""

    async def fetch(name: str) -> Any:
        return DOCUMENT_MODELS[name].model_validate(documents[name])

    return PromptCatalog(DocumentCache(fetch), rng=random.Random(1234))


@pytest.fixture
def api_base_url() -> str:
    """Base URL the server's HTTP client is configured with."""
    return get_settings().api_base_url


@pytest.fixture
async def mock_api(api_base_url: str) -> AsyncGenerator[respx.MockRouter]:
    """Mock the NerdyChefs API and initialize the server against it."""
    # Reset module-level state so the new client is created inside the respx context
    await server_module.cleanup()
    # Not every test touches every mocked document
    with respx.mock(base_url=api_base_url, assert_all_called=False) as respx_mock:
        await server_module.init_http_client()
        yield respx_mock
        await server_module.cleanup()


@pytest.fixture
def mock_documents(
    mock_api: respx.MockRouter,
    documents: dict[str, dict[str, Any]],
) -> respx.MockRouter:
    """Serve all sample documents from the mocked API."""
    for name, body in documents.items():
        mock_api.get(f"/{name}.json").respond(200, json=body)
    return mock_api

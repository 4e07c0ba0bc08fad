"""
Query engine over the cached NerdyChefs documents.

All operations read whole documents through a DocumentCache and filter, sort
and truncate them in memory. Results are plain JSON-serializable dicts.
"""

import logging
import random
from typing import Any

from .cache import DocumentCache
from .exceptions import NotFoundError, ValidationError
from .matching import any_contains, any_equals_or_contains, contains
from .models import (
    CategoriesDocument,
    Category,
    Document,
    PacksDocument,
    PersonasDocument,
    Prompt,
    PromptsDocument,
    TagsDocument,
)

logger = logging.getLogger(__name__)

SEARCH_DEFAULT_LIMIT = 10
SEARCH_MAX_LIMIT = 50
TAGS_DEFAULT_LIMIT = 50
TAGS_MAX_LIMIT = 200
PERSONAS_DEFAULT_LIMIT = 50
PERSONAS_MAX_LIMIT = 500
RANDOM_DEFAULT_COUNT = 5
RANDOM_MAX_COUNT = 10


def clamp_limit(value: int | None, default: int, maximum: int) -> int:
    """Return value clamped to [1, maximum], or default when value is None."""
    if value is None:
        return default
    return max(1, min(int(value), maximum))


def _dump(record: Prompt) -> dict[str, Any]:
    """Return the full record, including fields the models do not declare."""
    return record.model_dump()


class PromptCatalog:
    """Read-only queries over prompts, categories, packs, tags and personas."""

    def __init__(
        self,
        cache: DocumentCache[Document],
        rng: random.Random | None = None,
    ) -> None:
        self._cache = cache
        self._rng = rng or random.Random()

    async def _prompts(self) -> list[Prompt]:
        document: PromptsDocument = await self._cache.get_or_fetch("prompts")
        return document.prompts

    async def _categories(self) -> list[Category]:
        document: CategoriesDocument = await self._cache.get_or_fetch("categories")
        return document.categories

    async def search(
        self,
        query: str | None = None,
        tag: str | None = None,
        category: str | None = None,
        persona: str | None = None,
        limit: int | None = None,
    ) -> dict[str, Any]:
        """
        Search prompts by keyword, tag, category and persona.

        Filters are combined with AND and applied in that order. The query
        matches title, any tag, category, subcategory or pack title. Results
        keep catalog order and are truncated to at most 50 prompts.
        """
        results = await self._prompts()

        if query:
            results = [
                p
                for p in results
                if contains(p.title, query)
                or any_contains(p.tags, query)
                or contains(p.category, query)
                or contains(p.subcategory, query)
                or contains(p.pack_title, query)
            ]
        if tag:
            results = [p for p in results if any_equals_or_contains(p.tags, tag)]
        if category:
            results = [p for p in results if contains(p.category, category)]
        if persona:
            results = [p for p in results if any_contains(p.personas, persona)]

        results = results[: clamp_limit(limit, SEARCH_DEFAULT_LIMIT, SEARCH_MAX_LIMIT)]
        return {
            "count": len(results),
            "prompts": [p.summary() for p in results],
        }

    async def get_prompt(self, prompt_id: int | None) -> dict[str, Any]:
        """
        Get a single prompt by id.

        Raises:
            ValidationError: No id was given.
            NotFoundError: No prompt has this id.
        """
        if prompt_id is None:
            raise ValidationError("id")

        for prompt in await self._prompts():
            if prompt.id == prompt_id:
                return _dump(prompt)
        raise NotFoundError(f"Prompt with ID {prompt_id} not found.")

    async def list_categories(self) -> dict[str, Any]:
        """List all categories with their descriptions and prompt counts."""
        categories = await self._categories()
        return {
            "count": len(categories),
            "categories": [
                {
                    "id": c.id,
                    "name": c.name,
                    "description": c.description,
                    "icon": c.icon,
                    "prompt_count": c.prompt_count,
                }
                for c in categories
            ],
        }

    async def list_packs(self, category: str | None = None) -> dict[str, Any]:
        """List packs, optionally only those whose category contains the given text."""
        document: PacksDocument = await self._cache.get_or_fetch("packs")
        packs = document.packs
        if category:
            packs = [p for p in packs if contains(p.category, category)]

        return {
            "count": len(packs),
            "packs": [
                {
                    "id": p.id,
                    "title": p.title,
                    "category": p.category,
                    "description": p.description,
                    "total_prompts": p.total_prompts,
                    "sections": p.sections,
                }
                for p in packs
            ],
        }

    async def get_pack(self, pack_title: str | None) -> dict[str, Any]:
        """
        Get every prompt of a pack, grouped into sections by subcategory.

        The title matches any prompt whose pack title contains it. Sections
        appear in the order their first prompt appears in the catalog. The
        returned pack_title is the one stored on the first matching prompt.

        Raises:
            ValidationError: No title was given.
            NotFoundError: No prompt belongs to a matching pack.
        """
        if not pack_title:
            raise ValidationError("pack_title")

        prompts = [p for p in await self._prompts() if contains(p.pack_title, pack_title)]
        if not prompts:
            raise NotFoundError(f'No prompts found for pack "{pack_title}".')

        sections: dict[str, list[dict[str, Any]]] = {}
        for prompt in prompts:
            sections.setdefault(prompt.subcategory, []).append(_dump(prompt))

        return {
            "pack_title": prompts[0].pack_title,
            "total_prompts": len(prompts),
            "sections": [
                {"name": name, "prompts": section_prompts}
                for name, section_prompts in sections.items()
            ],
        }

    async def list_tags(self, limit: int | None = None) -> dict[str, Any]:
        """List tags by descending usage count. Ties keep their catalog order."""
        document: TagsDocument = await self._cache.get_or_fetch("tags")
        tags = sorted(document.tags, key=lambda t: t.count, reverse=True)
        tags = tags[: clamp_limit(limit, TAGS_DEFAULT_LIMIT, TAGS_MAX_LIMIT)]
        return {
            "count": len(tags),
            "tags": [t.model_dump() for t in tags],
        }

    async def list_personas(self, limit: int | None = None) -> dict[str, Any]:
        """List personas by descending usage count. Ties keep their catalog order."""
        document: PersonasDocument = await self._cache.get_or_fetch("personas")
        personas = sorted(document.personas, key=lambda p: p.count, reverse=True)
        personas = personas[: clamp_limit(limit, PERSONAS_DEFAULT_LIMIT, PERSONAS_MAX_LIMIT)]
        return {
            "count": len(personas),
            "personas": [p.model_dump() for p in personas],
        }

    async def get_random_prompts(
        self,
        count: int | None = None,
        category: str | None = None,
        tag: str | None = None,
    ) -> dict[str, Any]:
        """
        Pick up to 10 distinct prompts uniformly at random.

        Category and tag narrow the pool first. A pool smaller than the
        requested count is returned whole, in random order.
        """
        prompts = await self._prompts()
        if category:
            prompts = [p for p in prompts if contains(p.category, category)]
        if tag:
            prompts = [p for p in prompts if any_contains(p.tags, tag)]

        k = min(clamp_limit(count, RANDOM_DEFAULT_COUNT, RANDOM_MAX_COUNT), len(prompts))
        selected = self._rng.sample(prompts, k)
        return {
            "count": len(selected),
            "prompts": [_dump(p) for p in selected],
        }

    async def list_category_resources(self) -> list[Category]:
        """Return all categories, for advertising them as browsable resources."""
        return list(await self._categories())

    async def get_category(self, category_id: str) -> dict[str, Any]:
        """
        Get a category with all prompts filed under one of its subcategories.

        The prompt_count in the result is the number of prompts actually
        matched, not the count reported by the categories document.

        Raises:
            NotFoundError: No category has this id.
        """
        category = next(
            (c for c in await self._categories() if str(c.id) == category_id),
            None,
        )
        if category is None:
            raise NotFoundError(f"Category not found: {category_id}")

        subcategories = set(category.subcategories)
        prompts = [_dump(p) for p in await self._prompts() if p.category in subcategories]
        logger.debug(
            "category_resolved id=%s subcategories=%s prompts=%s",
            category_id,
            len(subcategories),
            len(prompts),
        )
        return {
            "category": category.name,
            "description": category.description,
            "prompt_count": len(prompts),
            "prompts": prompts,
        }

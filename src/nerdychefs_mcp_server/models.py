"""
Pydantic models for the documents served by the NerdyChefs API.

Each endpoint returns a single object whose only key names the collection,
e.g. ``{"prompts": [...]}``. Records allow extra fields so that anything the
provider adds is passed through untouched to the caller.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class _Record(BaseModel):
    """Base for immutable catalog records."""

    model_config = ConfigDict(extra="allow", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def null_fields_use_defaults(cls, data: Any) -> Any:
        """
        Treat a JSON null in an optional declared field as if it were absent.

        One record with ``"tags": null`` would otherwise fail the whole document.
        Required fields and extra fields keep their null.
        """
        if not isinstance(data, dict):
            return data
        return {
            key: value
            for key, value in data.items()
            if value is not None
            or key not in cls.model_fields
            or cls.model_fields[key].is_required()
        }


class Prompt(_Record):
    """A single prompt template with its metadata."""

    id: int
    title: str = ""
    prompt: str = ""
    use_case: str = ""
    category: str = ""
    subcategory: str = ""
    pack_title: str = ""
    tags: list[str] = []
    personas: list[str] = []

    def summary(self) -> dict[str, Any]:
        """Return the fields exposed by search results."""
        return {
            "id": self.id,
            "title": self.title,
            "prompt": self.prompt,
            "use_case": self.use_case,
            "category": self.category,
            "subcategory": self.subcategory,
            "pack_title": self.pack_title,
            "tags": self.tags,
            "personas": self.personas,
        }


class Category(_Record):
    """A top-level category grouping one or more prompt categories."""

    id: str | int
    name: str = ""
    description: str = ""
    icon: str = ""
    prompt_count: int = 0
    subcategories: list[str] = []


class Pack(_Record):
    """A published pack of prompts. Linked to prompts by title, not id."""

    id: str | int
    title: str = ""
    category: str = ""
    description: str = ""
    total_prompts: int = 0
    sections: Any = []


class Tag(_Record):
    """A tag with its source-provided usage count."""

    name: str
    count: int = 0


class Persona(_Record):
    """A target job role with its source-provided usage count."""

    name: str
    count: int = 0


class PromptsDocument(BaseModel):
    """Schema for ``prompts.json``."""

    prompts: list[Prompt]


class CategoriesDocument(BaseModel):
    """Schema for ``categories.json``."""

    categories: list[Category]


class PacksDocument(BaseModel):
    """Schema for ``packs.json``."""

    packs: list[Pack]


class TagsDocument(BaseModel):
    """Schema for ``tags.json``."""

    tags: list[Tag]


class PersonasDocument(BaseModel):
    """Schema for ``personas.json``."""

    personas: list[Persona]


Document = PromptsDocument | CategoriesDocument | PacksDocument | TagsDocument | PersonasDocument

# Document name -> schema. The name is also the endpoint stem and collection key.
DOCUMENT_MODELS: dict[str, type[BaseModel]] = {
    "prompts": PromptsDocument,
    "categories": CategoriesDocument,
    "packs": PacksDocument,
    "tags": TagsDocument,
    "personas": PersonasDocument,
}

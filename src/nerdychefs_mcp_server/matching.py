"""
Case-insensitive string matching used to relate catalog records.

Prompts reference their category, pack, tags and personas by free text rather
than by id, so every join in the catalog goes through one of these functions.
"""

from collections.abc import Iterable


def contains(value: str, needle: str) -> bool:
    """Return True if needle occurs in value, ignoring case."""
    return needle.lower() in value.lower()


def any_contains(values: Iterable[str], needle: str) -> bool:
    """Return True if needle occurs in any of the values, ignoring case."""
    needle = needle.lower()
    return any(needle in value.lower() for value in values)


def any_equals_or_contains(values: Iterable[str], needle: str) -> bool:
    """
    Return True if any value equals or contains needle, ignoring case.

    Used by search's tag filter. Equality is a special case of containment, so
    this accepts the same tags as any_contains. It is kept separate so the
    search filter can be tightened to exact matching on its own.
    """
    needle = needle.lower()
    return any(value.lower() == needle or needle in value.lower() for value in values)

"""Loaders for the text an MCP server sends to clients: instructions and tool descriptions."""

from pathlib import Path
from typing import Any

import yaml


def load_instructions(directory: Path) -> str:
    """Load instructions.md from the given directory."""
    return (directory / "instructions.md").read_text().strip()


def _clean(text: Any, where: str) -> str:
    """Strip block-scalar whitespace, rejecting missing or blank text."""
    if not isinstance(text, str) or not text.strip():
        raise ValueError(f"tools.yaml: {where} needs a non-empty description")
    return text.strip()


def load_tool_descriptions(directory: Path) -> dict[str, dict[str, Any]]:
    """
    Load tool and parameter descriptions from tools.yaml.

    Each top-level key names a tool with a ``description`` and an optional
    ``parameters`` mapping of parameter name to description. A missing or
    null ``parameters`` becomes ``{}``.

    Raises:
        ValueError: The file is not a mapping of tools, or a tool or parameter
            has no description.
    """
    with (directory / "tools.yaml").open() as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError("tools.yaml: expected a mapping of tool name to tool")

    tools: dict[str, dict[str, Any]] = {}
    for name, tool in data.items():
        if not isinstance(tool, dict):
            raise ValueError(f"tools.yaml: {name} must be a mapping")
        parameters = tool.get("parameters") or {}
        tools[name] = {
            "description": _clean(tool.get("description"), name),
            "parameters": {
                param: _clean(text, f"{name}.{param}")
                for param, text in parameters.items()
            },
        }
    return tools

"""Tests for shared MCP utilities."""

from pathlib import Path

import pytest

import nerdychefs_mcp_server
from shared.mcp_utils import load_instructions, load_tool_descriptions


def test__load_tool_descriptions__strips_block_scalars(tmp_path: Path) -> None:
    (tmp_path / "tools.yaml").write_text(
        "my_tool:\n"
        "  description: |\n"
        "    Multi-line\n"
        "    description.\n"
        "  parameters:\n"
        "    limit: |\n"
        "      How many.\n",
    )

    tools = load_tool_descriptions(tmp_path)

    assert tools["my_tool"]["description"] == "Multi-line\ndescription."
    assert tools["my_tool"]["parameters"]["limit"] == "How many."


def test__load_tool_descriptions__empty_parameters(tmp_path: Path) -> None:
    (tmp_path / "tools.yaml").write_text("my_tool:\n  description: Lists things.\n  parameters: {}\n")

    tools = load_tool_descriptions(tmp_path)

    assert tools["my_tool"] == {"description": "Lists things.", "parameters": {}}


def test__load_tool_descriptions__missing_parameters_become_empty(tmp_path: Path) -> None:
    (tmp_path / "tools.yaml").write_text("my_tool:\n  description: Lists things.\n")

    tools = load_tool_descriptions(tmp_path)

    assert tools["my_tool"]["parameters"] == {}


@pytest.mark.parametrize(
    ("content", "where"),
    [
        ("my_tool:\n  parameters: {}\n", "my_tool"),
        ("my_tool:\n  description: '   '\n", "my_tool"),
        ("my_tool:\n  description: Lists.\n  parameters:\n    limit:\n", "my_tool.limit"),
    ],
)
def test__load_tool_descriptions__blank_description_raises(
    tmp_path: Path, content: str, where: str,
) -> None:
    (tmp_path / "tools.yaml").write_text(content)

    with pytest.raises(ValueError, match=rf"{where} needs a non-empty description"):
        load_tool_descriptions(tmp_path)


@pytest.mark.parametrize("content", ["- just\n- a list\n", "my_tool: Lists things.\n"])
def test__load_tool_descriptions__wrong_shape_raises(tmp_path: Path, content: str) -> None:
    (tmp_path / "tools.yaml").write_text(content)

    with pytest.raises(ValueError, match="tools.yaml"):
        load_tool_descriptions(tmp_path)


def test__load_instructions__strips_whitespace(tmp_path: Path) -> None:
    (tmp_path / "instructions.md").write_text("\n\nUse the tools.\n\n")

    assert load_instructions(tmp_path) == "Use the tools."


def test__packaged_tools_yaml__describes_every_parameter() -> None:
    """Every tool in the packaged tools.yaml has a description and described parameters."""
    tools = load_tool_descriptions(Path(nerdychefs_mcp_server.__file__).parent)

    assert set(tools) == {
        "search_prompts",
        "get_prompt",
        "list_categories",
        "list_packs",
        "get_pack",
        "list_tags",
        "list_personas",
        "get_random_prompts",
    }
    for tool in tools.values():
        assert tool["description"]
        assert all(tool["parameters"].values())

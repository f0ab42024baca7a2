"""Tool definition normalization across calling conventions.

Callers may describe tools in the OpenAI convention
(``{"type": "function", "function": {...}}``), the Anthropic convention
(``{"name", "description", "input_schema"}``), or as a bare function
descriptor. Everything is first reduced to one canonical shape and then
projected to whichever provider shape is needed.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from chat_adapter.types import ClaudeTool, FunctionDescriptor, ToolDefinition

_DEFAULT_PARAMETERS: dict[str, Any] = {"type": "object"}


def _normalize_function(fn: Mapping[str, Any]) -> FunctionDescriptor:
    """Reduce a function descriptor to name/description/parameters."""
    parameters = fn.get("parameters")
    if parameters is None:
        parameters = fn.get("input_schema")

    normal_fn: FunctionDescriptor = {
        "parameters": parameters if parameters is not None else dict(_DEFAULT_PARAMETERS)
    }
    if fn.get("name"):
        normal_fn["name"] = fn["name"]
    if fn.get("description"):
        normal_fn["description"] = fn["description"]
    return normal_fn


def normalize_tool(tool: Mapping[str, Any]) -> ToolDefinition:
    """Normalize a single tool definition to the canonical shape.

    Missing schemas default to ``{"type": "object"}`` and missing names or
    descriptions are simply omitted; nothing here raises.
    """
    if tool.get("input_schema") is not None:
        fn: Mapping[str, Any] = tool
    elif tool.get("type") == "function":
        nested = tool.get("function")
        fn = nested if isinstance(nested, Mapping) else {}
    else:
        fn = tool
    return {"type": "function", "function": _normalize_function(fn)}


def normalize_tools(tools: Iterable[Mapping[str, Any]]) -> list[ToolDefinition]:
    """Normalize every tool, preserving length and order."""
    return [normalize_tool(tool) for tool in tools]


def to_openai_tools(tools: list[ToolDefinition]) -> list[ToolDefinition]:
    """Canonical tools already match the OpenAI convention."""
    return tools


def to_claude_tools(tools: list[ToolDefinition] | None) -> list[ClaudeTool] | None:
    """Project canonical tools to Anthropic's ``input_schema`` shape."""
    if not tools:
        return None
    claude_tools: list[ClaudeTool] = []
    for tool in tools:
        fn = tool["function"]
        claude_tool: ClaudeTool = {"input_schema": fn["parameters"]}
        if "name" in fn:
            claude_tool["name"] = fn["name"]
        if "description" in fn:
            claude_tool["description"] = fn["description"]
        claude_tools.append(claude_tool)
    return claude_tools


def map_tool_choice(
    tool_choice: str | Mapping[str, Any] | None,
) -> dict[str, str] | None:
    """Map an OpenAI-style tool_choice to Anthropic format."""
    if tool_choice is None:
        return None
    if isinstance(tool_choice, str):
        if tool_choice == "required":
            return {"type": "any"}
        if tool_choice in ("auto", "none"):
            return {"type": tool_choice}
        return None
    if isinstance(tool_choice, Mapping):
        fn = tool_choice.get("function")
        name = fn.get("name") if isinstance(fn, Mapping) else tool_choice.get("name")
        if isinstance(name, str) and name:
            return {"type": "tool", "name": name}
    return None

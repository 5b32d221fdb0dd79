"""Tool definitions in OpenAI function calling format."""

from __future__ import annotations

from typing import Any

from vault_governance.tools.catalog import AGENT_TOOLS, AgentToolSchema


def tool_to_openai_function(tool: AgentToolSchema) -> dict[str, Any]:
    """
    Project a catalog tool into a function-calling descriptor.

    Returns:
        ``{"type": "function", "function": {"name", "description",
        "parameters": {"type": "object", "properties", "required"}}}``
    """
    properties: dict[str, Any] = {}
    required: list[str] = []

    for name, schema in tool.parameters.items():
        prop: dict[str, Any] = {"type": schema.type, "description": schema.description}
        if schema.has_default:
            prop["default"] = schema.default
        properties[name] = prop
        if schema.required:
            required.append(name)

    return {
        "type": "function",
        "function": {
            "name": tool.id,
            "description": tool.description,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": required,
            },
        },
    }


def get_all_tools_as_openai_functions() -> list[dict[str, Any]]:
    return [tool_to_openai_function(tool) for tool in AGENT_TOOLS.values()]

"""Agent tool catalog, input validation and function-calling definitions."""
from __future__ import annotations

from vault_governance.tools.catalog import (
    AGENT_TOOLS,
    AgentToolSchema,
    ToolParameterSchema,
    get_all_tool_schemas,
    get_tool_schema,
    get_tools_by_category,
    tool_categories,
)
from vault_governance.tools.definitions import (
    get_all_tools_as_openai_functions,
    tool_to_openai_function,
)
from vault_governance.tools.validation import (
    ValidationResult,
    apply_defaults,
    validate_tool_input,
)

__all__ = [
    "AGENT_TOOLS",
    "AgentToolSchema",
    "ToolParameterSchema",
    "ValidationResult",
    "apply_defaults",
    "get_all_tool_schemas",
    "get_all_tools_as_openai_functions",
    "get_tool_schema",
    "get_tools_by_category",
    "tool_categories",
    "tool_to_openai_function",
    "validate_tool_input",
]

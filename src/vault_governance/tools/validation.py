"""Validation of agent tool input against the catalog schemas."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from vault_governance.tools.catalog import AGENT_TOOLS, AgentToolSchema, ToolParameterSchema


@dataclass
class ValidationResult:
    """Every violation found in one input, so they can be reported together."""

    valid: bool
    errors: list[str] = field(default_factory=list)


def _type_error(name: str, schema: ToolParameterSchema, value: Any) -> str | None:
    """Return an error message if ``value`` does not match the declared type."""
    if schema.type == "string":
        ok = isinstance(value, str)
        article = "a"
    elif schema.type == "boolean":
        ok = isinstance(value, bool)
        article = "a"
    elif schema.type == "number":
        # bool is an int subclass but never a number here
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        article = "a"
    elif schema.type == "object":
        ok = isinstance(value, Mapping)
        article = "an"
    elif schema.type == "array":
        ok = isinstance(value, (list, tuple))
        article = "an"
    else:
        return None
    if ok:
        return None
    return f'Parameter "{name}" must be {article} {schema.type}'


def validate_tool_input(tool_id: str, input: Mapping[str, Any]) -> ValidationResult:
    """
    Check ``input`` against the schema of ``tool_id``.

    Required parameters must be present; present parameters must match their
    declared primitive type. Unknown parameters are ignored.
    """
    tool = AGENT_TOOLS.get(tool_id)
    if tool is None:
        return ValidationResult(valid=False, errors=[f'Tool "{tool_id}" not found'])

    errors: list[str] = []
    for name, schema in tool.parameters.items():
        if name not in input:
            if schema.required:
                errors.append(f"Missing required parameter: {name}")
            continue

        message = _type_error(name, schema, input[name])
        if message:
            errors.append(message)

    return ValidationResult(valid=not errors, errors=errors)


def apply_defaults(tool: AgentToolSchema, input: Mapping[str, Any]) -> dict[str, Any]:
    """Copy ``input``, filling absent parameters that declare a default."""
    params = dict(input)
    for name, schema in tool.parameters.items():
        if name not in params and schema.has_default:
            params[name] = schema.default
    return params

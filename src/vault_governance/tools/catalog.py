"""
Agent tool catalog.

Each tool is an agent-facing schema wrapping exactly one registered command.
The table is static and defined once at import time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

ParameterType = Literal["string", "boolean", "number", "object", "array"]

_NO_DEFAULT: Any = object()


@dataclass(frozen=True)
class ToolParameterSchema:
    """Schema for a single tool parameter."""

    type: ParameterType
    description: str
    required: bool = False
    default: Any = _NO_DEFAULT

    @property
    def has_default(self) -> bool:
        return self.default is not _NO_DEFAULT


@dataclass(frozen=True)
class AgentToolSchema:
    """Schema for an agent tool and the command it invokes."""

    id: str
    name: str
    description: str
    command_id: str
    parameters: dict[str, ToolParameterSchema] = field(default_factory=dict)
    read_only: bool = False  # True = never mutates the vault


def _tool(
    id: str,
    name: str,
    description: str,
    command_id: str,
    params: dict[str, ToolParameterSchema] | None = None,
    read_only: bool = False,
) -> AgentToolSchema:
    return AgentToolSchema(
        id=id,
        name=name,
        description=description,
        command_id=command_id,
        parameters=dict(params or {}),
        read_only=read_only,
    )


AGENT_TOOLS: dict[str, AgentToolSchema] = {
    tool.id: tool
    for tool in (
        # File operations
        _tool(
            "note_read",
            "Read Note",
            "Read the content of a note file",
            "file.read",
            read_only=True,
            params={
                "path": ToolParameterSchema("string", "Path to the note file", required=True),
            },
        ),
        _tool(
            "note_write",
            "Write Note",
            "Write content to an existing note file",
            "file.write",
            params={
                "path": ToolParameterSchema("string", "Path to the note file", required=True),
                "content": ToolParameterSchema("string", "Content to write to the file", required=True),
            },
        ),
        _tool(
            "note_create",
            "Create Note",
            "Create a new note file with content",
            "file.new",
            params={
                "path": ToolParameterSchema("string", "Path where the note should be created", required=True),
                "content": ToolParameterSchema("string", "Initial content for the note", default=""),
            },
        ),
        _tool(
            "note_rename",
            "Rename Note",
            "Rename or move a note file",
            "file.rename",
            params={
                "oldPath": ToolParameterSchema("string", "Current path of the note", required=True),
                "newPath": ToolParameterSchema("string", "New path for the note", required=True),
            },
        ),
        _tool(
            "note_delete",
            "Delete Note",
            "Delete a note file",
            "file.delete",
            params={
                "path": ToolParameterSchema("string", "Path to the note to delete", required=True),
            },
        ),
        # Search
        _tool(
            "search_query",
            "Search Notes",
            "Search for notes by content or title",
            "search.query",
            read_only=True,
            params={
                "query": ToolParameterSchema("string", "Search query string", required=True),
            },
        ),
        # Navigation
        _tool(
            "nav_open",
            "Open Note",
            "Open a note in the editor",
            "file.open",
            params={
                "path": ToolParameterSchema("string", "Path to the note to open", required=True),
                "newTab": ToolParameterSchema("boolean", "Whether to open in a new tab", default=False),
            },
        ),
        # Workspace
        _tool(
            "ws_split_horizontal",
            "Split Workspace Horizontal",
            "Split the workspace horizontally",
            "workspace.splitHorizontal",
        ),
        _tool(
            "ws_split_vertical",
            "Split Workspace Vertical",
            "Split the workspace vertically",
            "workspace.splitVertical",
        ),
        # Vault operations
        _tool(
            "vault_open",
            "Open Vault",
            "Open a vault by path",
            "vault.open",
            params={
                "path": ToolParameterSchema("string", "Path to the vault directory", required=True),
            },
        ),
        _tool(
            "vault_create",
            "Create Vault",
            "Create a new vault",
            "vault.create",
            params={
                "path": ToolParameterSchema("string", "Path where the vault should be created", required=True),
                "name": ToolParameterSchema("string", "Name for the vault", required=True),
            },
        ),
        # Templates
        _tool(
            "template_insert",
            "Insert Template",
            "Insert a template into the current note or create a new note from a template",
            "workspace.template",
            params={
                "templatePath": ToolParameterSchema("string", "Path to the template file", required=True),
                "fileName": ToolParameterSchema("string", "File name if creating a new note from template"),
            },
        ),
        # Daily notes
        _tool(
            "daily_note_open",
            "Open Daily Note",
            "Open or create today's daily note",
            "workspace.dailyNote",
        ),
    )
}

# Category name -> tool ID prefix
_CATEGORY_PREFIXES: dict[str, str] = {
    "file": "note_",
    "search": "search_",
    "nav": "nav_",
    "workspace": "ws_",
    "vault": "vault_",
    "template": "template_",
    "daily": "daily_",
}


def get_tool_schema(tool_id: str) -> AgentToolSchema | None:
    return AGENT_TOOLS.get(tool_id)


def get_all_tool_schemas() -> list[AgentToolSchema]:
    return list(AGENT_TOOLS.values())


def get_tools_by_category(category: str) -> list[AgentToolSchema]:
    """Tools whose ID carries the prefix for ``category``; unknown categories yield []."""
    prefix = _CATEGORY_PREFIXES.get(category)
    if prefix is None:
        return []
    return [tool for tool in AGENT_TOOLS.values() if tool.id.startswith(prefix)]


def tool_categories() -> list[str]:
    return list(_CATEGORY_PREFIXES)

"""
Vault Governance - the command governance core of a note-taking application.

The UI, plugins and an AI agent all invoke the same named commands through
one registry. Every invocation is published to listeners and recorded in a
bounded audit log, and agent invocations go through a
propose -> approve -> execute workflow before anything mutating runs.

Example:
    from vault_governance import Command, create_core

    core = create_core()
    core.registry.register(Command(id="file.new", name="New note", callback=create_note))

    plan = core.executor.create_plan(
        "Create a scratch note",
        [{"tool_id": "note_create", "input": {"path": "scratch.md", "content": "hi"}}],
    )
    core.executor.approve_all(plan.id)
    results = await core.executor.execute_plan(plan.id)

    print(core.audit_log.get_stats())
"""

from vault_governance.agent import (
    AgentExecutor,
    Plan,
    PlanStatus,
    ProposedStep,
    StepProposal,
    StepStatus,
)
from vault_governance.audit import AuditLog
from vault_governance.commands import CommandRegistry
from vault_governance.config import GovernanceConfig
from vault_governance.core import GovernanceCore, create_core
from vault_governance.errors import (
    CommandNotFoundError,
    GovernanceError,
    NotFoundError,
    PlanNotFoundError,
    PreconditionFailedError,
    StepNotFoundError,
    ValidationFailedError,
)
from vault_governance.events import (
    COMMAND_EXECUTED,
    CommandExecutedEvent,
    EventBus,
    EventRef,
)
from vault_governance.models import (
    AuditEvent,
    Command,
    CommandSource,
    Hotkey,
    HotkeyModifiers,
    ToolOutput,
    hotkey_to_string,
)
from vault_governance.tools import (
    AGENT_TOOLS,
    AgentToolSchema,
    ToolParameterSchema,
    ValidationResult,
    get_all_tool_schemas,
    get_all_tools_as_openai_functions,
    get_tool_schema,
    get_tools_by_category,
    tool_to_openai_function,
    validate_tool_input,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "GovernanceCore",
    "create_core",
    "GovernanceConfig",
    # Commands
    "Command",
    "CommandRegistry",
    "CommandSource",
    "Hotkey",
    "HotkeyModifiers",
    "hotkey_to_string",
    # Events
    "COMMAND_EXECUTED",
    "CommandExecutedEvent",
    "EventBus",
    "EventRef",
    # Audit
    "AuditEvent",
    "AuditLog",
    # Agent
    "AgentExecutor",
    "Plan",
    "PlanStatus",
    "ProposedStep",
    "StepProposal",
    "StepStatus",
    "ToolOutput",
    # Tools
    "AGENT_TOOLS",
    "AgentToolSchema",
    "ToolParameterSchema",
    "ValidationResult",
    "get_all_tool_schemas",
    "get_all_tools_as_openai_functions",
    "get_tool_schema",
    "get_tools_by_category",
    "tool_to_openai_function",
    "validate_tool_input",
    # Errors
    "GovernanceError",
    "NotFoundError",
    "CommandNotFoundError",
    "PlanNotFoundError",
    "StepNotFoundError",
    "PreconditionFailedError",
    "ValidationFailedError",
]

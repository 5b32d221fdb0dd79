"""
Wiring for one governance session.

The audit log, command registry and agent executor are plain instances built
once at startup and handed to every collaborator that registers or invokes
commands. Tests and embedded sessions each get their own.
"""

from __future__ import annotations

from dataclasses import dataclass

from vault_governance.agent.executor import AgentExecutor
from vault_governance.audit import AuditLog
from vault_governance.commands import CommandRegistry
from vault_governance.config import GovernanceConfig


@dataclass
class GovernanceCore:
    """The three governance components sharing one configuration."""

    config: GovernanceConfig
    audit_log: AuditLog
    registry: CommandRegistry
    executor: AgentExecutor


def create_core(config: GovernanceConfig | None = None) -> GovernanceCore:
    """Build an audit log, a registry writing to it, and an executor driving the registry."""
    config = config or GovernanceConfig()
    audit_log = AuditLog(
        max_events=config.max_audit_events,
        top_commands_limit=config.top_commands_limit,
    )
    registry = CommandRegistry(audit_log)
    executor = AgentExecutor(registry, config)
    return GovernanceCore(
        config=config,
        audit_log=audit_log,
        registry=registry,
        executor=executor,
    )

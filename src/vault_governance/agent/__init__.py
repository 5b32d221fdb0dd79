"""Agent plan/approve/execute workflow."""
from __future__ import annotations

from vault_governance.agent.diff import NO_DIFF
from vault_governance.agent.executor import AgentExecutor
from vault_governance.agent.plan import (
    Plan,
    PlanStatus,
    ProposedStep,
    StepProposal,
    StepStatus,
)

__all__ = [
    "NO_DIFF",
    "AgentExecutor",
    "Plan",
    "PlanStatus",
    "ProposedStep",
    "StepProposal",
    "StepStatus",
]

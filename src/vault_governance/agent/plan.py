"""
Plan and step models for the agent workflow.

A plan is an ordered list of proposed tool invocations. Each step moves
through ``pending -> approved -> executing -> completed | failed`` or
``pending -> rejected``; the plan status is a coarse aggregate of its steps.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from vault_governance.models import ToolOutput


class StepStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self in (StepStatus.COMPLETED, StepStatus.FAILED, StepStatus.REJECTED)


class PlanStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"
    REJECTED = "rejected"


@dataclass
class StepProposal:
    """A tool invocation proposed by the agent, before it becomes a step."""

    tool_id: str
    input: dict[str, Any] = field(default_factory=dict)
    description: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StepProposal:
        """Accept both ``tool_id`` and the camelCase ``toolId`` used by UI payloads."""
        tool_id = data.get("tool_id", data.get("toolId"))
        if not isinstance(tool_id, str) or not tool_id:
            raise ValueError("Step proposal requires a non-empty 'tool_id'")
        return cls(
            tool_id=tool_id,
            input=dict(data.get("input") or {}),
            description=data.get("description", ""),
        )


@dataclass
class ProposedStep:
    """One unit of work within a plan. ``order`` is fixed at creation."""

    id: str
    tool_id: str
    input: dict[str, Any]
    description: str
    order: int
    created_at: int
    status: StepStatus = StepStatus.PENDING
    readonly: bool = False
    result: ToolOutput | None = None
    error: str | None = None
    diff: str | None = None
    completed_at: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "toolId": self.tool_id,
            "input": self.input,
            "description": self.description,
            "status": self.status.value,
            "readonly": self.readonly,
            "result": self.result.to_dict() if self.result else None,
            "error": self.error,
            "diff": self.diff,
            "order": self.order,
            "createdAt": self.created_at,
            "completedAt": self.completed_at,
        }


@dataclass
class Plan:
    """An ordered workflow of proposed steps awaiting approval."""

    id: str
    description: str
    steps: list[ProposedStep]
    created_at: int
    status: PlanStatus = PlanStatus.PENDING
    started_at: int | None = None
    completed_at: int | None = None
    duration: int | None = None  # milliseconds from creation to completion

    def get_step(self, step_id: str) -> ProposedStep | None:
        return next((s for s in self.steps if s.id == step_id), None)

    @property
    def is_settled(self) -> bool:
        """True when no step can make further progress."""
        return all(s.status.is_terminal for s in self.steps)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "status": self.status.value,
            "steps": [s.to_dict() for s in self.steps],
            "createdAt": self.created_at,
            "startedAt": self.started_at,
            "completedAt": self.completed_at,
            "duration": self.duration,
        }

"""
Agent executor: the plan -> approve -> execute workflow.

Every agent action is proposed as a step in a plan, approved by a human or a
policy, and only then dispatched through the command registry with source
``agent``. Steps run strictly in order and the plan stops at the first
failure, since later steps usually depend on earlier ones (create a note,
then link to it).

Rejecting any single step rejects the whole plan. Steps cannot yet declare
that they are independent of each other, so there is no well-defined way to
skip one and continue.

Example:
    executor = AgentExecutor(registry)
    plan = executor.create_plan(
        "Create and link a note",
        [{"tool_id": "note_create", "input": {"path": "a.md", "content": "hi"}}],
    )
    executor.approve_all(plan.id)
    results = await executor.execute_plan(plan.id)
"""

from __future__ import annotations

import itertools
import time
from collections.abc import Iterable, Mapping
from typing import Any

from vault_governance.agent.diff import (
    NO_DIFF,
    render_content_diff,
    render_delete,
    render_new_file,
    render_rename,
)
from vault_governance.agent.plan import (
    Plan,
    PlanStatus,
    ProposedStep,
    StepProposal,
    StepStatus,
)
from vault_governance.commands import CommandRegistry
from vault_governance.config import GovernanceConfig
from vault_governance.errors import (
    NotFoundError,
    PlanNotFoundError,
    PreconditionFailedError,
    StepNotFoundError,
    ValidationFailedError,
)
from vault_governance.logging import get_logger
from vault_governance.models import CommandSource, ToolOutput, now_ms
from vault_governance.tools import apply_defaults, get_tool_schema, validate_tool_input

logger = get_logger("agent.executor")

_WRITE_TOOLS = ("note_write", "note_create")
_SETTLED_PLAN_STATUSES = (PlanStatus.COMPLETED, PlanStatus.FAILED, PlanStatus.REJECTED)


class AgentExecutor:
    """Creates plans from agent proposals and drives their execution."""

    def __init__(self, registry: CommandRegistry, config: GovernanceConfig | None = None) -> None:
        self.registry = registry
        self.config = config or GovernanceConfig()
        self._plans: dict[str, Plan] = {}
        self._plan_ids = itertools.count()

    # ------------------------------------------------------------------
    # Plan creation and lookup
    # ------------------------------------------------------------------

    def create_plan(
        self,
        description: str,
        steps: Iterable[StepProposal | Mapping[str, Any]],
    ) -> Plan:
        """
        Create a pending plan from proposed tool invocations.

        Steps keep the order in which they are given; step IDs are
        ``<plan_id>-step-<index>``.
        """
        proposals = [s if isinstance(s, StepProposal) else StepProposal.from_dict(s) for s in steps]
        plan_id = f"plan-{next(self._plan_ids)}"
        now = now_ms()

        plan_steps = []
        for index, proposal in enumerate(proposals):
            tool = get_tool_schema(proposal.tool_id)
            plan_steps.append(
                ProposedStep(
                    id=f"{plan_id}-step-{index}",
                    tool_id=proposal.tool_id,
                    input=dict(proposal.input),
                    description=proposal.description,
                    order=index,
                    created_at=now,
                    readonly=tool.read_only if tool else False,
                )
            )

        plan = Plan(id=plan_id, description=description, steps=plan_steps, created_at=now)
        self._plans[plan_id] = plan
        logger.info("Created %s with %d steps: %s", plan_id, len(plan_steps), description)
        return plan

    def get_plan(self, plan_id: str) -> Plan | None:
        return self._plans.get(plan_id)

    def get_all_plans(self) -> list[Plan]:
        """All plans, newest first."""
        # Reversed insertion order keeps newest-first among equal timestamps.
        return sorted(reversed(list(self._plans.values())), key=lambda p: p.created_at, reverse=True)

    def get_step(self, plan_id: str, step_id: str) -> ProposedStep | None:
        plan = self._plans.get(plan_id)
        if plan is None:
            return None
        return plan.get_step(step_id)

    def _require_plan(self, plan_id: str) -> Plan:
        plan = self._plans.get(plan_id)
        if plan is None:
            raise PlanNotFoundError(plan_id)
        return plan

    def _require_step(self, plan: Plan, step_id: str) -> ProposedStep:
        step = plan.get_step(step_id)
        if step is None:
            raise StepNotFoundError(plan.id, step_id)
        return step

    @staticmethod
    def _require_open(plan: Plan) -> None:
        if plan.status not in (PlanStatus.PENDING, PlanStatus.APPROVED):
            raise PreconditionFailedError(
                f'Plan "{plan.id}" can no longer be approved or rejected (status: {plan.status.value})'
            )

    # ------------------------------------------------------------------
    # Approval
    # ------------------------------------------------------------------

    def approve_step(self, plan_id: str, step_id: str) -> None:
        """
        Approve one step.

        The plan is promoted to ``approved`` once no step is left pending.

        Raises:
            PlanNotFoundError, StepNotFoundError: unknown IDs
            PreconditionFailedError: the plan or step is past approval
        """
        plan = self._require_plan(plan_id)
        step = self._require_step(plan, step_id)
        self._require_open(plan)
        if step.status not in (StepStatus.PENDING, StepStatus.APPROVED):
            raise PreconditionFailedError(
                f'Step "{step_id}" cannot be approved (status: {step.status.value})'
            )

        step.status = StepStatus.APPROVED

        if all(
            s.status in (StepStatus.APPROVED, StepStatus.COMPLETED, StepStatus.FAILED)
            for s in plan.steps
        ):
            plan.status = PlanStatus.APPROVED

    def reject_step(self, plan_id: str, step_id: str, reason: str | None = None) -> None:
        """
        Reject one step, which rejects the entire plan.

        Raises:
            PlanNotFoundError, StepNotFoundError: unknown IDs
            PreconditionFailedError: the plan is already executing or settled,
                or the step has already run
        """
        plan = self._require_plan(plan_id)
        step = self._require_step(plan, step_id)
        self._require_open(plan)
        if step.status not in (StepStatus.PENDING, StepStatus.APPROVED):
            raise PreconditionFailedError(
                f'Step "{step_id}" cannot be rejected (status: {step.status.value})'
            )

        step.status = StepStatus.REJECTED
        if reason:
            step.error = reason

        plan.status = PlanStatus.REJECTED
        plan.completed_at = now_ms()
        logger.info("Rejected %s via step %s: %s", plan_id, step_id, reason or "(no reason)")

    def approve_all(self, plan_id: str) -> None:
        """Approve every pending step and the plan itself."""
        plan = self._require_plan(plan_id)
        self._require_open(plan)

        for step in plan.steps:
            if step.status is StepStatus.PENDING:
                step.status = StepStatus.APPROVED

        plan.status = PlanStatus.APPROVED

    def reject_plan(self, plan_id: str, reason: str | None = None) -> None:
        """Reject every step that has not run yet, and the plan."""
        plan = self._require_plan(plan_id)
        self._require_open(plan)

        for step in plan.steps:
            if step.status in (StepStatus.PENDING, StepStatus.APPROVED):
                step.status = StepStatus.REJECTED
                if reason:
                    step.error = reason

        plan.status = PlanStatus.REJECTED
        plan.completed_at = now_ms()
        logger.info("Rejected %s: %s", plan_id, reason or "(no reason)")

    # ------------------------------------------------------------------
    # Diff preview
    # ------------------------------------------------------------------

    async def get_diff(self, step: ProposedStep) -> str:
        """
        Render a human-readable preview of what ``step`` will change.

        Never raises. If the current content cannot be read the step is
        previewed as creating a new file. The preview is also stored on
        ``step.diff``.
        """
        params = step.input
        max_lines = self.config.diff_max_lines

        if step.tool_id in _WRITE_TOOLS:
            path = str(params.get("path", ""))
            content = params.get("content")
            content = "" if content is None else str(content)
            current = await self._read_current(path)
            if current is None:
                diff = render_new_file(path, content, max_lines)
            else:
                diff = render_content_diff(path, current, content, max_lines)
        elif step.tool_id == "note_rename":
            diff = render_rename(str(params.get("oldPath", "")), str(params.get("newPath", "")))
        elif step.tool_id == "note_delete":
            diff = render_delete(str(params.get("path", "")))
        else:
            diff = NO_DIFF

        step.diff = diff
        return diff

    async def _read_current(self, path: str) -> str | None:
        """Current content of ``path`` via the read command, or None if unavailable."""
        read_command = self.config.read_command_id
        if not self.registry.has(read_command):
            return None
        try:
            content = await self.registry.execute(read_command, CommandSource.AGENT, path=path)
        except Exception as e:
            logger.debug("Could not read %s for diff preview: %s", path, e)
            return None
        return content if isinstance(content, str) else None

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _prepare_dispatch(self, step: ProposedStep) -> tuple[str, dict[str, Any]]:
        """
        Resolve the command for ``step`` and build its keyword arguments.

        A command registered under the tool ID itself wins; otherwise a
        catalog tool dispatches to its declared ``command_id``. Catalog tool
        input is checked against the schema and defaults are filled in. Input
        for any other tool ID is passed through unchanged.
        """
        tool = get_tool_schema(step.tool_id)
        if self.registry.has(step.tool_id):
            command_id = step.tool_id
        elif tool is not None and self.registry.has(tool.command_id):
            command_id = tool.command_id
        else:
            raise NotFoundError(f'Command "{step.tool_id}" not found in registry')

        if tool is None:
            return command_id, dict(step.input)

        validation = validate_tool_input(tool.id, step.input)
        if not validation.valid:
            raise ValidationFailedError(tool.id, validation.errors)
        return command_id, apply_defaults(tool, step.input)

    async def execute_step(self, plan_id: str, step_id: str) -> ToolOutput:
        """
        Execute one approved step.

        Failures, including unknown IDs and unapproved steps, come back as a
        failed :class:`ToolOutput` rather than an exception. Unknown IDs and
        unapproved steps leave all state untouched.
        """
        plan = self._plans.get(plan_id)
        if plan is None:
            return ToolOutput(success=False, error=str(PlanNotFoundError(plan_id)))

        step = plan.get_step(step_id)
        if step is None:
            return ToolOutput(success=False, error=str(StepNotFoundError(plan_id, step_id)))

        if plan.status in _SETTLED_PLAN_STATUSES:
            return ToolOutput(
                success=False,
                error=f'Plan "{plan_id}" is already {plan.status.value}',
            )

        if step.status is not StepStatus.APPROVED:
            return ToolOutput(
                success=False,
                error=f'Step "{step_id}" is not approved (status: {step.status.value})',
            )

        step.status = StepStatus.EXECUTING
        started = time.perf_counter()

        try:
            command_id, params = self._prepare_dispatch(step)
            data = await self.registry.execute(command_id, CommandSource.AGENT, **params)
        except Exception as e:
            message = str(e) or type(e).__name__
            result = ToolOutput(success=False, error=message, duration=_elapsed_ms(started))
            step.status = StepStatus.FAILED
            step.error = message
            step.result = result
            self._settle(plan, PlanStatus.FAILED)
            logger.warning("Step %s of %s failed: %s", step_id, plan_id, message)
        else:
            result = ToolOutput(success=True, data=data, duration=_elapsed_ms(started))
            step.status = StepStatus.COMPLETED
            step.result = result
            if plan.is_settled:
                self._settle(plan, PlanStatus.COMPLETED)
            logger.debug("Step %s of %s completed in %dms", step_id, plan_id, result.duration)

        step.completed_at = now_ms()
        return result

    async def execute_plan(self, plan_id: str) -> list[ToolOutput]:
        """
        Execute every approved step of an approved plan, in order.

        Stops at the first failed step; later steps stay ``approved`` and are
        never attempted. Returns the results of the steps attempted.
        """
        plan = self._plans.get(plan_id)
        if plan is None:
            return [ToolOutput(success=False, error=str(PlanNotFoundError(plan_id)))]

        if plan.status is not PlanStatus.APPROVED:
            return [
                ToolOutput(
                    success=False,
                    error=f'Plan "{plan_id}" is not approved (status: {plan.status.value})',
                )
            ]

        plan.status = PlanStatus.EXECUTING
        plan.started_at = now_ms()

        results: list[ToolOutput] = []
        for step in sorted(plan.steps, key=lambda s: s.order):
            if step.status is not StepStatus.APPROVED:
                continue
            result = await self.execute_step(plan_id, step.id)
            results.append(result)
            if not result.success:
                break

        # A plan with nothing left to run (e.g. no steps at all) is done.
        if plan.status is PlanStatus.EXECUTING and plan.is_settled:
            self._settle(plan, PlanStatus.COMPLETED)

        return results

    @staticmethod
    def _settle(plan: Plan, status: PlanStatus) -> None:
        plan.status = status
        plan.completed_at = now_ms()
        plan.duration = plan.completed_at - plan.created_at

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------

    def delete_plan(self, plan_id: str) -> bool:
        return self._plans.pop(plan_id, None) is not None

    def clear_plans(self) -> None:
        self._plans.clear()

    def get_stats(self) -> dict[str, int]:
        plans = list(self._plans.values())
        stats = {"total_plans": len(plans)}
        for status in PlanStatus:
            stats[f"{status.value}_plans"] = sum(1 for p in plans if p.status is status)
        return stats


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)

"""Exception types raised by the governance core."""

from __future__ import annotations


class GovernanceError(Exception):
    """Base class for errors raised by the registry and the agent executor."""


class NotFoundError(GovernanceError, LookupError):
    """A command, plan or step ID does not exist."""


class CommandNotFoundError(NotFoundError):
    def __init__(self, command_id: str) -> None:
        self.command_id = command_id
        super().__init__(f'Command "{command_id}" not found')


class PlanNotFoundError(NotFoundError):
    def __init__(self, plan_id: str) -> None:
        self.plan_id = plan_id
        super().__init__(f'Plan "{plan_id}" not found')


class StepNotFoundError(NotFoundError):
    def __init__(self, plan_id: str, step_id: str) -> None:
        self.plan_id = plan_id
        self.step_id = step_id
        super().__init__(f'Step "{step_id}" not found in plan "{plan_id}"')


class PreconditionFailedError(GovernanceError):
    """An operation was attempted on a step or plan in the wrong state."""


class ValidationFailedError(GovernanceError, ValueError):
    """Tool input does not match the tool's parameter schema.

    All violations are collected in ``errors`` so callers can report them
    together instead of one at a time.
    """

    def __init__(self, tool_id: str, errors: list[str]) -> None:
        self.tool_id = tool_id
        self.errors = list(errors)
        super().__init__(f'Invalid input for tool "{tool_id}": ' + "; ".join(self.errors))

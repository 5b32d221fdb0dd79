#!/usr/bin/env python3
"""
Vault Governance Demo

Registers a handful of in-memory note commands, proposes an agent plan,
previews its diffs, approves and executes it, then prints the audit trail.

Usage:
    python examples/plan_demo.py
"""

import asyncio
import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from vault_governance import Command, create_core
from vault_governance.logging import setup_logging

notes: dict[str, str] = {"inbox.md": "# Inbox\n- buy milk\n"}


async def read(path: str) -> str:
    return notes[path]


async def write(path: str, content: str) -> None:
    if path not in notes:
        raise FileNotFoundError(path)
    notes[path] = content


async def create(path: str, content: str = "") -> str:
    notes[path] = content
    return path


async def main():
    setup_logging("INFO")
    core = create_core()

    for command in (
        Command(id="file.read", name="Read note", callback=read, category="file"),
        Command(id="file.write", name="Write note", callback=write, category="file"),
        Command(id="file.new", name="New note", callback=create, category="file"),
    ):
        core.registry.register(command)

    core.registry.on_command_executed(
        lambda e: print(f"  [{e.source}] {e.command_id} -> {'ok' if e.success else 'failed'}")
    )

    plan = core.executor.create_plan(
        "Triage the inbox",
        [
            {"tool_id": "note_write", "input": {"path": "inbox.md", "content": "# Inbox\n"}},
            {"tool_id": "note_create", "input": {"path": "todo.md", "content": "- buy milk\n"}},
        ],
    )

    print("=" * 60)
    print(f"Plan {plan.id}: {plan.description}")
    print("=" * 60)
    for step in plan.steps:
        print(f"\n{step.id} ({step.tool_id}):")
        print(await core.executor.get_diff(step))

    print("\nApproving and executing...")
    core.executor.approve_all(plan.id)
    results = await core.executor.execute_plan(plan.id)

    print(f"\nPlan status: {plan.status.value}")
    for step, result in zip(plan.steps, results):
        print(f"  {step.id}: success={result.success} duration={result.duration}ms")

    print("\nAudit stats:")
    print(core.audit_log.get_stats())


if __name__ == "__main__":
    asyncio.run(main())

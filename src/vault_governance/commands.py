"""
Command registry for the note-taking application.

The single dispatch point shared by the UI, plugins and the agent. Every
execution attempt is published to listeners and, unless the command opts
out, written to the audit log.
"""

from __future__ import annotations

import asyncio
import time
from collections import Counter
from collections.abc import Callable
from typing import Any

from vault_governance.audit import AuditLog
from vault_governance.errors import CommandNotFoundError
from vault_governance.events import COMMAND_EXECUTED, CommandExecutedEvent, EventBus, EventRef
from vault_governance.logging import get_logger
from vault_governance.models import AuditEvent, Command, CommandSource, now_ms, source_value

logger = get_logger("commands")

CommandExecutedListener = Callable[[CommandExecutedEvent], Any]


class CommandRegistry:
    """
    Holds named commands and executes them on behalf of any caller.

    Usage:
        audit = AuditLog()
        registry = CommandRegistry(audit)
        registry.register(Command(id="file.new", name="New file", callback=create))
        await registry.execute("file.new", "ui", path="a.md")
    """

    def __init__(self, audit_log: AuditLog | None = None, bus: EventBus | None = None) -> None:
        self.audit_log = audit_log if audit_log is not None else AuditLog()
        self._bus = bus if bus is not None else EventBus()
        self._commands: dict[str, Command] = {}

    def register(self, command: Command) -> None:
        """
        Register a command.

        Registering an ID that is already present is a no-op: the first
        registration stays in place. UI re-mounts re-register freely.
        """
        if command.id in self._commands:
            logger.debug("Command %s already registered; keeping the first registration", command.id)
            return
        self._commands[command.id] = command

    def unregister(self, command_id: str) -> bool:
        """Remove a command. Returns True if it was registered."""
        return self._commands.pop(command_id, None) is not None

    async def execute(
        self,
        command_id: str,
        source: CommandSource | str = CommandSource.UI,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        """
        Execute a command by ID.

        Handles both sync and async callbacks. Listeners are notified and the
        audit entry is written whether the callback succeeds or raises; the
        callback's own exception is then re-raised unchanged.

        Raises:
            CommandNotFoundError: if no command is registered under ``command_id``
        """
        source = source_value(source)
        command = self._commands.get(command_id)

        if command is None:
            error = CommandNotFoundError(command_id)
            timestamp = now_ms()
            self._notify(
                CommandExecutedEvent(
                    command_id=command_id,
                    source=source,
                    timestamp=timestamp,
                    success=False,
                )
            )
            self.audit_log.log(
                AuditEvent(
                    timestamp=timestamp,
                    command_id=command_id,
                    source=source,
                    success=False,
                    error=str(error),
                )
            )
            logger.warning("Execution of unknown command %s (source=%s)", command_id, source)
            raise error

        timestamp = now_ms()
        started = time.perf_counter()
        success = True
        error_message: str | None = None

        try:
            result = command.callback(*args, **kwargs)
            if asyncio.iscoroutine(result) or asyncio.isfuture(result):
                result = await result
            return result
        except BaseException as e:
            # Includes CancelledError so a cancelled callback is still recorded.
            success = False
            error_message = str(e) or type(e).__name__
            raise
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.debug(
                "Executed %s (source=%s, success=%s, %.1fms)",
                command_id,
                source,
                success,
                elapsed_ms,
            )
            self._notify(
                CommandExecutedEvent(
                    command_id=command_id,
                    source=source,
                    timestamp=timestamp,
                    success=success,
                    args=list(args),
                    kwargs=dict(kwargs) if kwargs else None,
                )
            )
            if command.audit:
                self.audit_log.log(
                    AuditEvent(
                        timestamp=timestamp,
                        command_id=command_id,
                        source=source,
                        success=success,
                        error=error_message,
                        metadata=self._audit_metadata(args, kwargs),
                    )
                )

    @staticmethod
    def _audit_metadata(args: tuple[Any, ...], kwargs: dict[str, Any]) -> dict[str, Any] | None:
        metadata: dict[str, Any] = {}
        if args:
            metadata["args"] = list(args)
        if kwargs:
            metadata["kwargs"] = dict(kwargs)
        return metadata or None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, command_id: str) -> Command | None:
        return self._commands.get(command_id)

    def has(self, command_id: str) -> bool:
        return command_id in self._commands

    def get_all(self) -> list[Command]:
        """All registered commands, in registration order."""
        return list(self._commands.values())

    def get_by_category(self, category: str) -> list[Command]:
        return [c for c in self._commands.values() if c.category == category]

    def clear(self) -> None:
        """Remove all commands. Listeners stay registered."""
        self._commands.clear()

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def on_command_executed(self, listener: CommandExecutedListener, owner: str = "") -> EventRef:
        """
        Register a listener for execution events.

        Listeners are called synchronously, in registration order, for every
        execution attempt including unknown commands. A listener that raises
        is logged and skipped.
        """
        return self._bus.on(COMMAND_EXECUTED, listener, owner=owner)

    def remove_listeners(self, owner: str) -> int:
        """Drop every listener registered by ``owner`` (e.g. an unloaded plugin)."""
        return self._bus.off_by_owner(owner)

    def _notify(self, event: CommandExecutedEvent) -> None:
        self._bus.emit(COMMAND_EXECUTED, event)

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_stats(self) -> dict[str, Any]:
        by_category = Counter(c.category for c in self._commands.values() if c.category)
        return {
            "total_commands": len(self._commands),
            "commands_by_category": dict(by_category),
            "commands_with_hotkeys": sum(1 for c in self._commands.values() if c.hotkeys),
        }

"""
Shared data models for the governance core.

Commands, hotkeys, audit records and tool outputs. These are plain dataclasses
so collaborators can build them without importing any registry machinery.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


class CommandSource(str, Enum):
    """Caller category attached to every execution and audit entry."""

    UI = "ui"
    PLUGIN = "plugin"
    AGENT = "agent"


def source_value(source: CommandSource | str) -> str:
    """Return the plain string form of a source, recorded verbatim."""
    if isinstance(source, CommandSource):
        return source.value
    return str(source)


# ---------------------------------------------------------------------------
# Hotkeys
# ---------------------------------------------------------------------------


@dataclass
class HotkeyModifiers:
    """Modifier keys held together with a hotkey."""

    meta: bool = False
    ctrl: bool = False
    alt: bool = False
    shift: bool = False


@dataclass
class Hotkey:
    """A single key binding for a command."""

    key: str
    modifiers: HotkeyModifiers = field(default_factory=HotkeyModifiers)


def hotkey_to_string(hotkey: Hotkey) -> str:
    """Render a hotkey as e.g. ``Cmd+Shift+P``."""
    parts: list[str] = []
    if hotkey.modifiers.meta:
        parts.append("Cmd")
    if hotkey.modifiers.ctrl:
        parts.append("Ctrl")
    if hotkey.modifiers.alt:
        parts.append("Alt")
    if hotkey.modifiers.shift:
        parts.append("Shift")
    parts.append(hotkey.key)
    return "+".join(parts)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

# Sync or async; called with whatever the caller passes to execute().
CommandCallback = Callable[..., Any]


@dataclass
class Command:
    """
    A named operation invoked uniformly by the UI, plugins and the agent.

    The registry holds a reference keyed by ``id``; the collaborator that
    built the command owns the callback.
    """

    id: str
    name: str
    callback: CommandCallback
    label: str | None = None
    icon: str | None = None
    description: str | None = None
    hotkeys: list[Hotkey] = field(default_factory=list)
    category: str | None = None
    audit: bool = True  # False = invocations are not written to the audit log


# ---------------------------------------------------------------------------
# Audit records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AuditEvent:
    """
    Immutable record of one command execution attempt.

    Serialised with the field names ``timestamp``, ``commandId``, ``source``,
    ``success``, ``error`` and ``metadata``; optional fields are left out
    when unset.
    """

    timestamp: int
    command_id: str
    source: str
    success: bool
    error: str | None = None
    metadata: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "timestamp": self.timestamp,
            "commandId": self.command_id,
            "source": self.source,
            "success": self.success,
        }
        if self.error is not None:
            data["error"] = self.error
        if self.metadata is not None:
            data["metadata"] = self.metadata
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuditEvent:
        """
        Build an event from its JSON form.

        Raises :class:`ValueError` if a required field is missing or has the
        wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Audit event must be an object, got {type(data).__name__}")

        timestamp = data.get("timestamp")
        command_id = data.get("commandId")
        source = data.get("source")
        success = data.get("success")
        error = data.get("error")
        metadata = data.get("metadata")

        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise ValueError("Audit event 'timestamp' must be a number")
        if not isinstance(command_id, str):
            raise ValueError("Audit event 'commandId' must be a string")
        if not isinstance(source, str):
            raise ValueError("Audit event 'source' must be a string")
        if not isinstance(success, bool):
            raise ValueError("Audit event 'success' must be a boolean")
        if error is not None and not isinstance(error, str):
            raise ValueError("Audit event 'error' must be a string")
        if metadata is not None and not isinstance(metadata, dict):
            raise ValueError("Audit event 'metadata' must be an object")

        return cls(
            timestamp=timestamp,
            command_id=command_id,
            source=source,
            success=success,
            error=error,
            metadata=metadata,
        )


# ---------------------------------------------------------------------------
# Tool output
# ---------------------------------------------------------------------------


@dataclass
class ToolOutput:
    """Outcome of executing one agent step."""

    success: bool
    data: Any = None
    error: str | None = None
    duration: int | None = None  # milliseconds

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            data["data"] = self.data
        if self.error is not None:
            data["error"] = self.error
        if self.duration is not None:
            data["duration"] = self.duration
        return data

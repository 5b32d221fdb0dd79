"""
Event system for the governance core.

Provides the EventBus that the CommandRegistry uses to tell observers about
every execution attempt. Handlers run synchronously, in registration order,
and a handler that raises is logged and skipped so one faulty observer never
breaks dispatch for the others.

Example:
    from vault_governance.events import COMMAND_EXECUTED, EventBus

    bus = EventBus()
    bus.on(COMMAND_EXECUTED, lambda event: print(event.command_id, event.success))

    bus.emit(COMMAND_EXECUTED, CommandExecutedEvent(...))
"""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from vault_governance.logging import get_logger

logger = get_logger("events")


# ---------------------------------------------------------------------------
# Event types
# ---------------------------------------------------------------------------

COMMAND_EXECUTED = "command_executed"


@dataclass
class CommandExecutedEvent:
    """Emitted after (or, for an unknown command, instead of) an execution."""

    command_id: str
    source: str
    timestamp: int
    success: bool
    args: list[Any] | None = None
    kwargs: dict[str, Any] | None = None


@dataclass
class EventRef:
    """Handle returned for a registered listener."""

    id: str
    _unsubscribe: Callable[[], None] = field(repr=False)

    def unregister(self) -> None:
        """Stop delivering events to the listener. Safe to call twice."""
        self._unsubscribe()


# ---------------------------------------------------------------------------
# Handler types
# ---------------------------------------------------------------------------

EventHandler = Callable[[Any], Any]


@dataclass
class _HandlerEntry:
    """Internal: a registered handler with metadata."""

    id: str
    event: str
    handler: EventHandler
    owner: str = ""  # who registered it (plugin name, etc.)


# ---------------------------------------------------------------------------
# EventBus
# ---------------------------------------------------------------------------


class EventBus:
    """
    An ordered, synchronous publish step over a list of subscribers.

    Usage:
        bus = EventBus()
        ref = bus.on(COMMAND_EXECUTED, my_handler, owner="word-counter")
        bus.emit(COMMAND_EXECUTED, event)
        ref.unregister()
    """

    def __init__(self) -> None:
        self._handlers: list[_HandlerEntry] = []
        self._ids = itertools.count()

    def on(self, event: str, handler: EventHandler, owner: str = "") -> EventRef:
        """Register ``handler`` for ``event`` and return a handle that removes it."""
        entry = _HandlerEntry(
            id=f"listener-{next(self._ids)}",
            event=event,
            handler=handler,
            owner=owner,
        )
        self._handlers.append(entry)

        def unsubscribe() -> None:
            if entry in self._handlers:
                self._handlers.remove(entry)

        return EventRef(id=entry.id, _unsubscribe=unsubscribe)

    def off_by_owner(self, owner: str) -> int:
        """Remove all handlers registered by a given owner. Returns count removed."""
        before = len(self._handlers)
        self._handlers = [h for h in self._handlers if h.owner != owner]
        return before - len(self._handlers)

    def emit(self, event: str, data: Any = None) -> int:
        """
        Deliver ``data`` to every handler for ``event``, in registration order.

        Async handlers cannot be awaited from the synchronous dispatch path;
        their coroutine is closed and a warning is logged.

        Returns:
            Number of handlers that completed without raising
        """
        delivered = 0
        # Snapshot so a handler may unregister itself mid-dispatch.
        for entry in [h for h in self._handlers if h.event == event]:
            try:
                result = entry.handler(data)
                if asyncio.iscoroutine(result):
                    result.close()
                    logger.warning(
                        "Async handler skipped in sync emit (event=%s, listener=%s)",
                        event,
                        entry.id,
                    )
                    continue
                delivered += 1
            except Exception as e:
                logger.warning(
                    "Event handler error (event=%s, listener=%s, owner=%s): %s",
                    event,
                    entry.id,
                    entry.owner,
                    e,
                )
        return delivered

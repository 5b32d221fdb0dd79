"""
Audit log for command executions.

An append-only, size-bounded history of every audited execution attempt.
When the ceiling is exceeded the oldest events are dropped first. Events can
be exported to JSON and imported back without loss.
"""

from __future__ import annotations

import json
from collections import Counter, deque
from typing import Any

from vault_governance.config import DEFAULT_MAX_AUDIT_EVENTS, DEFAULT_TOP_COMMANDS_LIMIT
from vault_governance.logging import get_logger
from vault_governance.models import AuditEvent, CommandSource, source_value

logger = get_logger("audit")


class AuditLog:
    """Bounded, insertion-ordered record of command outcomes."""

    def __init__(
        self,
        max_events: int = DEFAULT_MAX_AUDIT_EVENTS,
        top_commands_limit: int = DEFAULT_TOP_COMMANDS_LIMIT,
    ) -> None:
        if max_events < 1:
            raise ValueError("max_events must be at least 1")
        self.max_events = max_events
        self.top_commands_limit = top_commands_limit
        self._events: deque[AuditEvent] = deque(maxlen=max_events)

    def log(self, event: AuditEvent) -> None:
        """Append an event, evicting the oldest ones beyond the ceiling."""
        self._events.append(event)

    # ------------------------------------------------------------------
    # Queries (most recent first)
    # ------------------------------------------------------------------

    def get_events(
        self,
        limit: int | None = None,
        command_id: str | None = None,
        source: CommandSource | str | None = None,
        failed_only: bool = False,
    ) -> list[AuditEvent]:
        """
        Return events newest first, optionally filtered.

        Args:
            limit: Maximum number of events to return (falsy = no cap)
            command_id: Only return events for this exact command ID
            source: Only return events from this caller category
            failed_only: Only return events whose execution failed

        Raises:
            ValueError: if ``limit`` is negative
        """
        if limit is not None and limit < 0:
            raise ValueError(f"limit must not be negative, got {limit}")

        wanted = source_value(source) if source is not None else None
        events = [
            e
            for e in reversed(self._events)
            if (command_id is None or e.command_id == command_id)
            and (wanted is None or e.source == wanted)
            and not (failed_only and e.success)
        ]
        return events[:limit] if limit else events

    def get_events_by_source(self, source: CommandSource | str, limit: int | None = None) -> list[AuditEvent]:
        return self.get_events(limit, source=source)

    def get_failed_events(self, limit: int | None = None) -> list[AuditEvent]:
        return self.get_events(limit, failed_only=True)

    def get_count(self) -> int:
        return len(self._events)

    def clear(self) -> None:
        self._events.clear()

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    def export_to_json(self) -> str:
        """Serialise all events, oldest first, as an indented JSON array."""
        return json.dumps([e.to_dict() for e in self._events], indent=2)

    def import_from_json(self, data: str) -> bool:
        """
        Replace the log with events parsed from ``data``.

        The whole document is parsed before anything is replaced, so a
        malformed document leaves the current events untouched.

        Returns:
            True if the import was applied
        """
        try:
            raw = json.loads(data)
            if not isinstance(raw, list):
                raise ValueError(f"Expected a JSON array, got {type(raw).__name__}")
            events = [AuditEvent.from_dict(item) for item in raw]
        except ValueError as e:
            # json.JSONDecodeError is a ValueError subclass
            logger.error("Failed to import audit log: %s", e)
            return False

        if len(events) > self.max_events:
            logger.warning(
                "Imported %d audit events; keeping the most recent %d",
                len(events),
                self.max_events,
            )
        self._events = deque(events, maxlen=self.max_events)
        return True

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_stats(self) -> dict[str, Any]:
        """
        Summarise the log.

        ``top_commands`` is ranked by descending count; commands with equal
        counts keep the order in which they were first seen.
        """
        by_source: dict[str, int] = {s.value: 0 for s in CommandSource}
        command_counts: Counter[str] = Counter()
        success_count = 0

        for event in self._events:
            by_source[event.source] = by_source.get(event.source, 0) + 1
            command_counts[event.command_id] += 1
            if event.success:
                success_count += 1

        # sorted() is stable and Counter preserves first-seen order
        ranked = sorted(command_counts.items(), key=lambda item: item[1], reverse=True)
        top_commands = [
            {"command_id": command_id, "count": count}
            for command_id, count in ranked[: self.top_commands_limit]
        ]

        total = len(self._events)
        return {
            "total": total,
            "by_source": by_source,
            "success_rate": success_count / total if total else 0,
            "top_commands": top_commands,
        }

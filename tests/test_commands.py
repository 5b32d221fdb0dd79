"""Tests for the command registry."""

from __future__ import annotations

import logging

import pytest

from vault_governance import (
    AuditLog,
    Command,
    CommandExecutedEvent,
    CommandNotFoundError,
    CommandRegistry,
    CommandSource,
    Hotkey,
    HotkeyModifiers,
    NotFoundError,
)


def _command(command_id: str, callback=None, **kwargs) -> Command:
    return Command(
        id=command_id,
        name=kwargs.pop("name", command_id),
        callback=callback or (lambda *a, **kw: None),
        **kwargs,
    )


class TestRegistration:
    def test_register_and_get(self, registry: CommandRegistry) -> None:
        cmd = _command("file.new")
        registry.register(cmd)

        assert registry.has("file.new")
        assert registry.get("file.new") is cmd
        assert registry.get("missing") is None

    def test_duplicate_registration_is_idempotent(self, registry: CommandRegistry) -> None:
        first = _command("file.new", name="First")
        second = _command("file.new", name="Second")

        registry.register(first)
        registry.register(second)

        assert len(registry.get_all()) == 1
        assert registry.get("file.new") is first

    def test_unregister(self, registry: CommandRegistry) -> None:
        registry.register(_command("file.new"))

        assert registry.unregister("file.new") is True
        assert registry.unregister("file.new") is False
        assert not registry.has("file.new")

    def test_get_all_keeps_registration_order(self, registry: CommandRegistry) -> None:
        for command_id in ["c", "a", "b"]:
            registry.register(_command(command_id))
        assert [c.id for c in registry.get_all()] == ["c", "a", "b"]

    def test_get_by_category(self, registry: CommandRegistry) -> None:
        registry.register(_command("file.new", category="file"))
        registry.register(_command("file.save", category="file"))
        registry.register(_command("nav.back", category="navigation"))
        registry.register(_command("misc"))

        assert [c.id for c in registry.get_by_category("file")] == ["file.new", "file.save"]
        assert registry.get_by_category("none") == []

    def test_clear(self, registry: CommandRegistry) -> None:
        registry.register(_command("a"))
        registry.register(_command("b"))
        registry.clear()
        assert registry.get_all() == []


class TestExecute:
    @pytest.mark.asyncio
    async def test_async_callback_result(self, registry: CommandRegistry) -> None:
        async def callback(name: str) -> str:
            return f"hello {name}"

        registry.register(_command("greet", callback))
        assert await registry.execute("greet", "ui", "world") == "hello world"

    @pytest.mark.asyncio
    async def test_sync_callback_result(self, registry: CommandRegistry) -> None:
        registry.register(_command("add", lambda a, b: a + b))
        assert await registry.execute("add", "plugin", 2, 3) == 5

    @pytest.mark.asyncio
    async def test_keyword_arguments(self, registry: CommandRegistry) -> None:
        received = {}

        async def callback(path: str, content: str = "") -> None:
            received.update(path=path, content=content)

        registry.register(_command("file.new", callback))
        await registry.execute("file.new", CommandSource.AGENT, content="hi", path="a.md")
        assert received == {"path": "a.md", "content": "hi"}

    @pytest.mark.asyncio
    async def test_default_source_is_ui(self, registry: CommandRegistry, audit_log: AuditLog) -> None:
        registry.register(_command("noop"))
        await registry.execute("noop")
        assert audit_log.get_events()[0].source == "ui"

    @pytest.mark.asyncio
    async def test_success_is_audited(self, registry: CommandRegistry, audit_log: AuditLog) -> None:
        registry.register(_command("file.new"))
        await registry.execute("file.new", "ui", "a.md")

        events = audit_log.get_events()
        assert len(events) == 1
        assert events[0].command_id == "file.new"
        assert events[0].success is True
        assert events[0].error is None
        assert events[0].metadata == {"args": ["a.md"]}

    @pytest.mark.asyncio
    async def test_no_args_means_no_metadata(self, registry: CommandRegistry, audit_log: AuditLog) -> None:
        registry.register(_command("noop"))
        await registry.execute("noop", "ui")
        assert audit_log.get_events()[0].metadata is None

    @pytest.mark.asyncio
    async def test_kwargs_recorded_in_metadata(self, registry: CommandRegistry, audit_log: AuditLog) -> None:
        registry.register(_command("file.new"))
        await registry.execute("file.new", "agent", path="a.md")
        assert audit_log.get_events()[0].metadata == {"kwargs": {"path": "a.md"}}

    @pytest.mark.asyncio
    async def test_callback_failure_is_recorded_then_reraised(
        self, registry: CommandRegistry, audit_log: AuditLog
    ) -> None:
        class DiskFull(Exception):
            pass

        async def callback() -> None:
            raise DiskFull("disk full")

        seen: list[CommandExecutedEvent] = []
        registry.on_command_executed(seen.append)
        registry.register(_command("file.save", callback))

        with pytest.raises(DiskFull, match="disk full"):
            await registry.execute("file.save", "ui")

        assert len(seen) == 1
        assert seen[0].success is False
        events = audit_log.get_events()
        assert events[0].success is False
        assert events[0].error == "disk full"

    @pytest.mark.asyncio
    async def test_audit_false_skips_audit_but_notifies(
        self, registry: CommandRegistry, audit_log: AuditLog
    ) -> None:
        seen: list[CommandExecutedEvent] = []
        registry.on_command_executed(seen.append)
        registry.register(_command("editor.cursor", audit=False))

        await registry.execute("editor.cursor", "ui")

        assert audit_log.get_count() == 0
        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_missing_command(self, registry: CommandRegistry, audit_log: AuditLog) -> None:
        seen: list[CommandExecutedEvent] = []
        registry.on_command_executed(seen.append)

        with pytest.raises(CommandNotFoundError, match='Command "missing.cmd" not found'):
            await registry.execute("missing.cmd", "ui")

        events = audit_log.get_events()
        assert len(events) == 1
        assert events[0].success is False
        assert events[0].error == 'Command "missing.cmd" not found'
        assert len(seen) == 1
        assert seen[0].command_id == "missing.cmd"
        assert seen[0].success is False
        assert seen[0].args is None

    @pytest.mark.asyncio
    async def test_missing_command_is_a_lookup_error(self, registry: CommandRegistry) -> None:
        with pytest.raises(NotFoundError):
            await registry.execute("missing.cmd", "agent")
        with pytest.raises(LookupError):
            await registry.execute("missing.cmd", "agent")

    @pytest.mark.asyncio
    async def test_unknown_source_recorded_verbatim(
        self, registry: CommandRegistry, audit_log: AuditLog
    ) -> None:
        registry.register(_command("noop"))
        await registry.execute("noop", "scheduler")
        assert audit_log.get_events()[0].source == "scheduler"
        assert audit_log.get_stats()["by_source"]["scheduler"] == 1


class TestListeners:
    @pytest.mark.asyncio
    async def test_listeners_called_in_registration_order(self, registry: CommandRegistry) -> None:
        order: list[str] = []
        registry.on_command_executed(lambda e: order.append("first"))
        registry.on_command_executed(lambda e: order.append("second"))
        registry.register(_command("noop"))

        await registry.execute("noop", "ui")
        assert order == ["first", "second"]

    @pytest.mark.asyncio
    async def test_event_contents(self, registry: CommandRegistry) -> None:
        seen: list[CommandExecutedEvent] = []
        registry.on_command_executed(seen.append)
        registry.register(_command("file.new"))

        await registry.execute("file.new", CommandSource.PLUGIN, "a.md", content="x")

        event = seen[0]
        assert event.command_id == "file.new"
        assert event.source == "plugin"
        assert event.success is True
        assert event.args == ["a.md"]
        assert event.kwargs == {"content": "x"}
        assert event.timestamp > 0

    @pytest.mark.asyncio
    async def test_unregister_listener(self, registry: CommandRegistry) -> None:
        seen: list[CommandExecutedEvent] = []
        ref = registry.on_command_executed(seen.append)
        registry.register(_command("noop"))

        await registry.execute("noop", "ui")
        ref.unregister()
        ref.unregister()
        await registry.execute("noop", "ui")

        assert len(seen) == 1
        assert ref.id.startswith("listener-")

    @pytest.mark.asyncio
    async def test_throwing_listener_does_not_abort_dispatch(
        self, registry: CommandRegistry, audit_log: AuditLog, caplog: pytest.LogCaptureFixture
    ) -> None:
        seen: list[str] = []

        def bad(event: CommandExecutedEvent) -> None:
            raise RuntimeError("observer bug")

        registry.on_command_executed(bad)
        registry.on_command_executed(lambda e: seen.append(e.command_id))
        registry.register(_command("noop", lambda: "ok"))

        with caplog.at_level(logging.WARNING, logger="vault_governance"):
            result = await registry.execute("noop", "ui")

        assert result == "ok"
        assert seen == ["noop"]
        assert audit_log.get_count() == 1
        assert "observer bug" in caplog.text

    @pytest.mark.asyncio
    async def test_remove_listeners_by_owner(self, registry: CommandRegistry) -> None:
        seen: list[str] = []
        registry.on_command_executed(lambda e: seen.append("plugin"), owner="word-counter")
        registry.on_command_executed(lambda e: seen.append("core"))
        registry.register(_command("noop"))

        assert registry.remove_listeners("word-counter") == 1
        await registry.execute("noop", "ui")
        assert seen == ["core"]


class TestStats:
    def test_stats(self) -> None:
        registry = CommandRegistry(AuditLog())
        registry.register(
            _command(
                "file.new",
                category="file",
                hotkeys=[Hotkey("n", HotkeyModifiers(meta=True))],
            )
        )
        registry.register(_command("file.save", category="file", hotkeys=[]))
        registry.register(
            _command("nav.back", category="navigation", hotkeys=[Hotkey("[", HotkeyModifiers(meta=True))])
        )
        registry.register(_command("misc"))

        assert registry.get_stats() == {
            "total_commands": 4,
            "commands_by_category": {"file": 2, "navigation": 1},
            "commands_with_hotkeys": 2,
        }

    def test_default_audit_log(self) -> None:
        registry = CommandRegistry()
        assert isinstance(registry.audit_log, AuditLog)

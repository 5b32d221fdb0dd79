"""Shared pytest fixtures for vault-governance tests."""

from __future__ import annotations

import pytest

from vault_governance import (
    AgentExecutor,
    AuditLog,
    Command,
    CommandRegistry,
    GovernanceConfig,
    GovernanceCore,
    create_core,
)


class FakeVault:
    """In-memory stand-in for the file-system bridge collaborator."""

    def __init__(self) -> None:
        self.files: dict[str, str] = {}
        self.calls: list[tuple[str, dict]] = []

    async def read(self, path: str) -> str:
        self.calls.append(("read", {"path": path}))
        if path not in self.files:
            raise FileNotFoundError(f"No such note: {path}")
        return self.files[path]

    async def write(self, path: str, content: str) -> None:
        self.calls.append(("write", {"path": path, "content": content}))
        if path not in self.files:
            raise FileNotFoundError(f"No such note: {path}")
        self.files[path] = content

    async def new(self, path: str, content: str = "") -> str:
        self.calls.append(("new", {"path": path, "content": content}))
        if path in self.files:
            raise FileExistsError(f"Note already exists: {path}")
        self.files[path] = content
        return path

    async def rename(self, oldPath: str, newPath: str) -> str:  # noqa: N803
        self.calls.append(("rename", {"oldPath": oldPath, "newPath": newPath}))
        self.files[newPath] = self.files.pop(oldPath)
        return newPath

    async def delete(self, path: str) -> bool:
        self.calls.append(("delete", {"path": path}))
        if path not in self.files:
            raise FileNotFoundError(f"No such note: {path}")
        del self.files[path]
        return True

    def commands(self) -> list[Command]:
        return [
            Command(id="file.read", name="Read file", callback=self.read, category="file"),
            Command(id="file.write", name="Write file", callback=self.write, category="file"),
            Command(id="file.new", name="New file", callback=self.new, category="file"),
            Command(id="file.rename", name="Rename file", callback=self.rename, category="file"),
            Command(id="file.delete", name="Delete file", callback=self.delete, category="file"),
        ]


@pytest.fixture
def config() -> GovernanceConfig:
    return GovernanceConfig()


@pytest.fixture
def core(config: GovernanceConfig) -> GovernanceCore:
    return create_core(config)


@pytest.fixture
def audit_log(core: GovernanceCore) -> AuditLog:
    return core.audit_log


@pytest.fixture
def registry(core: GovernanceCore) -> CommandRegistry:
    return core.registry


@pytest.fixture
def executor(core: GovernanceCore) -> AgentExecutor:
    return core.executor


@pytest.fixture
def vault(registry: CommandRegistry) -> FakeVault:
    """A fake vault whose file.* commands are registered on ``registry``."""
    fake = FakeVault()
    for command in fake.commands():
        registry.register(command)
    return fake

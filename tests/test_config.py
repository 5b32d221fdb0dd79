"""Tests for configuration and logging setup."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from textwrap import dedent

import pytest

from vault_governance import GovernanceConfig, create_core
from vault_governance.config import get_log_level
from vault_governance.logging import get_logger, resolve_level, setup_logging


class TestGovernanceConfig:
    def test_defaults(self) -> None:
        config = GovernanceConfig()
        assert config.max_audit_events == 1000
        assert config.top_commands_limit == 10
        assert config.diff_max_lines == 40
        assert config.read_command_id == "file.read"

    def test_from_yaml_string(self) -> None:
        config = GovernanceConfig.from_yaml_string(
            dedent(
                """
                max_audit_events: 200
                read_command_id: vault.read
                """
            )
        )
        assert config.max_audit_events == 200
        assert config.read_command_id == "vault.read"
        assert config.top_commands_limit == 10

    def test_empty_yaml(self) -> None:
        assert GovernanceConfig.from_yaml_string("") == GovernanceConfig()

    def test_from_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("diff_max_lines: 5\nlog_level: DEBUG\n")

        config = GovernanceConfig.from_yaml(path)
        assert config.diff_max_lines == 5
        assert config.log_level == "DEBUG"

    def test_round_trip_dict(self) -> None:
        config = GovernanceConfig(max_audit_events=10, top_commands_limit=3)
        assert GovernanceConfig.from_dict(config.to_dict()) == config

    @pytest.mark.parametrize("field", ["max_audit_events", "diff_max_lines"])
    def test_rejects_non_positive(self, field: str) -> None:
        with pytest.raises(ValueError):
            GovernanceConfig(**{field: 0})

    def test_core_uses_config(self) -> None:
        core = create_core(GovernanceConfig(max_audit_events=5, top_commands_limit=2))

        assert core.audit_log.max_events == 5
        assert core.audit_log.top_commands_limit == 2
        assert core.registry.audit_log is core.audit_log
        assert core.executor.registry is core.registry
        assert core.executor.config is core.config


class TestLogLevel:
    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VAULT_GOV_LOG_LEVEL", "debug")
        assert get_log_level() == "DEBUG"
        assert GovernanceConfig.from_env().log_level == "DEBUG"

    def test_invalid_value_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VAULT_GOV_LOG_LEVEL", "loud")
        assert get_log_level() == "WARNING"

    def test_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("VAULT_GOV_LOG_LEVEL", raising=False)
        assert get_log_level("INFO") == "INFO"


class TestLogging:
    def test_child_logger_names(self) -> None:
        assert get_logger("commands").name == "vault_governance.commands"
        assert get_logger("vault_governance.audit").name == "vault_governance.audit"

    def test_setup_logging_writes_to_stream(self) -> None:
        stream = io.StringIO()
        root = logging.getLogger("vault_governance")
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            setup_logging("INFO", format="%(name)s %(message)s", stream=stream)
            get_logger("audit").info("hello")
            get_logger("audit").debug("hidden")
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

        assert stream.getvalue() == "vault_governance.audit hello\n"

    def test_resolve_level(self) -> None:
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level(logging.ERROR) == logging.ERROR
        assert resolve_level("nonsense") == logging.INFO

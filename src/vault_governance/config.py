"""
Configuration for the governance core.

Settings can be loaded from YAML files or constructed programmatically.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

DEFAULT_MAX_AUDIT_EVENTS = 1000
DEFAULT_TOP_COMMANDS_LIMIT = 10


def get_log_level(default: str = "WARNING") -> str:
    """Get the log level from ``VAULT_GOV_LOG_LEVEL``, falling back to ``default``."""
    val = os.environ.get("VAULT_GOV_LOG_LEVEL", default).upper()
    if val in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        return val
    return default


@dataclass
class GovernanceConfig:
    """
    Main configuration for the governance core.

    Example YAML:
        max_audit_events: 1000
        top_commands_limit: 10
        diff_max_lines: 40
        read_command_id: file.read
        log_level: INFO
    """

    # Audit log
    max_audit_events: int = DEFAULT_MAX_AUDIT_EVENTS  # Oldest events are evicted beyond this
    top_commands_limit: int = DEFAULT_TOP_COMMANDS_LIMIT  # Entries in get_stats()["top_commands"]

    # Diff preview
    diff_max_lines: int = 40  # Lines kept in a rendered diff preview
    read_command_id: str = "file.read"  # Collaborator command used to read current content

    # Logging
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.max_audit_events < 1:
            raise ValueError("max_audit_events must be at least 1")
        if self.diff_max_lines < 1:
            raise ValueError("diff_max_lines must be at least 1")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GovernanceConfig:
        """Create config from a dictionary."""
        return cls(
            max_audit_events=data.get("max_audit_events", DEFAULT_MAX_AUDIT_EVENTS),
            top_commands_limit=data.get("top_commands_limit", DEFAULT_TOP_COMMANDS_LIMIT),
            diff_max_lines=data.get("diff_max_lines", 40),
            read_command_id=data.get("read_command_id", "file.read"),
            log_level=data.get("log_level", "WARNING"),
        )

    @classmethod
    def from_yaml(cls, path: Path) -> GovernanceConfig:
        """Load config from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_yaml_string(cls, content: str) -> GovernanceConfig:
        """Load config from a YAML string."""
        data = yaml.safe_load(content)
        return cls.from_dict(data or {})

    @classmethod
    def from_env(cls) -> GovernanceConfig:
        """Defaults, with the log level taken from the environment."""
        return cls(log_level=get_log_level())

    def to_dict(self) -> dict[str, Any]:
        """Convert config to a dictionary."""
        return {
            "max_audit_events": self.max_audit_events,
            "top_commands_limit": self.top_commands_limit,
            "diff_max_lines": self.diff_max_lines,
            "read_command_id": self.read_command_id,
            "log_level": self.log_level,
        }

"""
Logging utilities for the governance core.

Every module logs through a child of the ``vault_governance`` logger, so one
call to :func:`setup_logging` controls registry, audit and executor output.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

# Package root logger
_root_logger = logging.getLogger("vault_governance")

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def resolve_level(level: str | int) -> int:
    """Turn a level name such as ``"debug"`` into its number; unknown names mean INFO."""
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(
    level: str | int = "INFO",
    format: str | None = None,
    stream: TextIO | None = None,
    file: str | None = None,
) -> None:
    """
    Configure the package logger, replacing any handlers set up earlier.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL) or int
        format: Custom log format string
        stream: Output stream (defaults to stderr)
        file: Optional file path that also receives the records

    Example:
        setup_logging("DEBUG")
        setup_logging("INFO", file="governance.log")
    """
    level = resolve_level(level)
    formatter = logging.Formatter(format or DEFAULT_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if file:
        handlers.append(logging.FileHandler(file))

    _root_logger.setLevel(level)
    _root_logger.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        _root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger for a submodule.

    Args:
        name: Submodule name (e.g., "commands", "agent.executor")
    """
    if name.startswith("vault_governance."):
        return logging.getLogger(name)
    return logging.getLogger(f"vault_governance.{name}")

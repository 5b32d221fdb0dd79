"""Textual previews of what a write-shaped step will change."""

from __future__ import annotations

import difflib

NO_DIFF = "No diff available for this operation"


def _truncate(lines: list[str], max_lines: int) -> list[str]:
    if len(lines) <= max_lines:
        return lines
    hidden = len(lines) - max_lines
    return lines[:max_lines] + [f"... ({hidden} more lines)"]


def render_content_diff(path: str, current: str, proposed: str, max_lines: int = 40) -> str:
    """Unified diff between the current and the proposed content of ``path``."""
    diff_lines = list(
        difflib.unified_diff(
            current.splitlines(),
            proposed.splitlines(),
            fromfile=f"{path} (current)",
            tofile=f"{path} (proposed)",
            lineterm="",
        )
    )
    if not diff_lines:
        return f"{path} (no changes)"
    return "\n".join(_truncate(diff_lines, max_lines))


def render_new_file(path: str, content: str, max_lines: int = 40) -> str:
    """Preview for a file that does not exist yet."""
    lines = [f"+++ {path} (new file)"]
    lines.extend(f"+ {line}" for line in content.splitlines())
    return "\n".join(_truncate(lines, max_lines))


def render_rename(old_path: str, new_path: str) -> str:
    return f"- {old_path}\n+ {new_path}"


def render_delete(path: str) -> str:
    return f"- {path} (deleted)"

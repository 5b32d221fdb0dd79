"""
Command-line interface for the governance core.

Inspects the agent tool catalog and works on exported audit logs.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from vault_governance.audit import AuditLog
from vault_governance.config import GovernanceConfig, get_log_level
from vault_governance.logging import setup_logging
from vault_governance.models import now_ms
from vault_governance.tools import (
    get_all_tool_schemas,
    get_tools_by_category,
    tool_to_openai_function,
    validate_tool_input,
)

console = Console()

DEFAULT_CONFIG_PATHS = [
    Path.cwd() / "vault-governance.yaml",
    Path.home() / ".config" / "vault-governance" / "config.yaml",
]


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Vault command governance CLI",
        prog="vaultgov",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output (debug logging)",
    )
    parser.add_argument(
        "-c",
        "--config",
        help="Config file (defaults to the first of DEFAULT_CONFIG_PATHS that exists)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # tools
    tools_parser = subparsers.add_parser("tools", help="List agent tools")
    tools_parser.add_argument("-c", "--category", help="Only tools in this category")
    tools_parser.add_argument(
        "--json",
        action="store_true",
        help="Output in OpenAI function calling format",
    )

    # validate
    validate_parser = subparsers.add_parser("validate", help="Validate tool input")
    validate_parser.add_argument("tool_id", help="Tool ID")
    validate_parser.add_argument("input", help="Tool input as a JSON object")

    # audit
    audit_parser = subparsers.add_parser("audit", help="Inspect an exported audit log")
    audit_subparsers = audit_parser.add_subparsers(dest="audit_command", help="Audit commands")

    audit_stats_parser = audit_subparsers.add_parser("stats", help="Show audit statistics")
    audit_stats_parser.add_argument("file", help="Exported audit JSON file")

    audit_list_parser = audit_subparsers.add_parser("list", help="List audit events")
    audit_list_parser.add_argument("file", help="Exported audit JSON file")
    audit_list_parser.add_argument("-s", "--source", choices=["ui", "plugin", "agent"])
    audit_list_parser.add_argument("--failed", action="store_true", help="Only failed events")
    audit_list_parser.add_argument("--command-id", dest="command_id", help="Only this command")
    audit_list_parser.add_argument("-n", "--limit", type=int, default=20)

    # config
    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_subparsers = config_parser.add_subparsers(dest="config_command", help="Config commands")
    config_subparsers.add_parser("show", help="Show current configuration")
    config_init_parser = config_subparsers.add_parser("init", help="Initialize a new config file")
    config_init_parser.add_argument(
        "-o",
        "--output",
        default="vault-governance.yaml",
        help="Output file path",
    )

    args = parser.parse_args(argv)

    config, config_path = load_config(args.config)

    # VAULT_GOV_LOG_LEVEL overrides the configured level; --verbose overrides both
    if getattr(args, "verbose", False):
        setup_logging("DEBUG")
    else:
        setup_logging(get_log_level(config.log_level))

    if args.command == "tools":
        cmd_tools(args)
    elif args.command == "validate":
        cmd_validate(args)
    elif args.command == "audit":
        cmd_audit(args, config)
    elif args.command == "config":
        cmd_config(args, config, config_path)
    else:
        parser.print_help()


def cmd_tools(args: argparse.Namespace) -> None:
    """List agent tools."""
    tools = get_tools_by_category(args.category) if args.category else get_all_tool_schemas()

    if args.json:
        console.print_json(json.dumps([tool_to_openai_function(t) for t in tools]))
        return

    table = Table(title="Agent Tools")
    table.add_column("Tool", style="cyan")
    table.add_column("Command", style="magenta")
    table.add_column("Parameters")
    table.add_column("Description")

    for tool in tools:
        params = ", ".join(
            f"{name}{'' if schema.required else '?'}: {schema.type}"
            for name, schema in tool.parameters.items()
        )
        name = f"{tool.id} [dim](read-only)[/dim]" if tool.read_only else tool.id
        table.add_row(name, tool.command_id, params or "[dim]-[/dim]", tool.description)

    console.print(table)
    console.print(f"\n[dim]Total: {len(tools)} tools[/dim]")


def cmd_validate(args: argparse.Namespace) -> None:
    """Validate a tool input given on the command line."""
    try:
        tool_input = json.loads(args.input)
    except json.JSONDecodeError as e:
        console.print(f"[red]Input is not valid JSON: {e}[/red]")
        sys.exit(2)
    if not isinstance(tool_input, dict):
        console.print("[red]Input must be a JSON object[/red]")
        sys.exit(2)

    result = validate_tool_input(args.tool_id, tool_input)
    if result.valid:
        console.print(f"[green]✓[/green] Input is valid for {args.tool_id}")
        return

    console.print(f"[red]✗[/red] Input is invalid for {args.tool_id}:")
    for error in result.errors:
        console.print(f"  - {error}")
    sys.exit(1)


def load_config(path: str | None = None) -> tuple[GovernanceConfig, Path | None]:
    """
    Load the configuration from ``path`` or the first default location.

    Returns:
        The config and the file it came from (None when using defaults)
    """
    if path:
        file_path = Path(path)
        if not file_path.exists():
            console.print(f"[red]Config file not found: {file_path}[/red]")
            sys.exit(1)
        return GovernanceConfig.from_yaml(file_path), file_path

    for candidate in DEFAULT_CONFIG_PATHS:
        if candidate.exists():
            return GovernanceConfig.from_yaml(candidate), candidate

    return GovernanceConfig(), None


def _load_audit(path: str, config: GovernanceConfig) -> AuditLog:
    file_path = Path(path)
    if not file_path.exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        sys.exit(1)

    audit_log = AuditLog(
        max_events=config.max_audit_events,
        top_commands_limit=config.top_commands_limit,
    )
    if not audit_log.import_from_json(file_path.read_text(encoding="utf-8")):
        console.print(f"[red]Not a valid audit export: {file_path}[/red]")
        sys.exit(1)
    return audit_log


def cmd_audit(args: argparse.Namespace, config: GovernanceConfig | None = None) -> None:
    """Audit log inspection commands."""
    config = config or GovernanceConfig()
    if args.audit_command == "stats":
        _audit_stats(args.file, config)
    elif args.audit_command == "list":
        _audit_list(args, config)
    else:
        console.print("[yellow]Usage: vaultgov audit <stats|list> FILE[/yellow]")


def _audit_stats(path: str, config: GovernanceConfig) -> None:
    stats = _load_audit(path, config).get_stats()

    console.print("[bold]Audit Statistics:[/bold]\n")
    console.print(f"  Total events: {stats['total']}")
    console.print(f"  Success rate: {stats['success_rate']:.1%}")
    for source, count in stats["by_source"].items():
        console.print(f"  {source}: {count}")

    if stats["top_commands"]:
        table = Table(title="Top Commands")
        table.add_column("Command", style="cyan")
        table.add_column("Count", justify="right")
        for entry in stats["top_commands"]:
            table.add_row(entry["command_id"], str(entry["count"]))
        console.print(table)


def _audit_list(args: argparse.Namespace, config: GovernanceConfig) -> None:
    audit_log = _load_audit(args.file, config)

    if args.limit is not None and args.limit < 0:
        console.print("[red]--limit must not be negative[/red]")
        sys.exit(2)

    events = audit_log.get_events(
        limit=args.limit,
        command_id=args.command_id,
        source=args.source,
        failed_only=args.failed,
    )

    table = Table(title="Audit Events (newest first)")
    table.add_column("Age", justify="right", style="dim")
    table.add_column("Command", style="cyan")
    table.add_column("Source")
    table.add_column("Result")
    table.add_column("Error")

    now = now_ms()
    for event in events:
        age = f"{max(now - int(event.timestamp), 0) // 1000}s"
        status = "[green]ok[/green]" if event.success else "[red]failed[/red]"
        table.add_row(age, event.command_id, event.source, status, event.error or "")

    console.print(table)
    console.print(f"\n[dim]Showing {len(events)} of {audit_log.get_count()} events[/dim]")


def cmd_config(
    args: argparse.Namespace,
    config: GovernanceConfig | None = None,
    config_path: Path | None = None,
) -> None:
    """Configuration management commands."""
    if args.config_command == "show":
        _config_show(config or GovernanceConfig(), config_path)
    elif args.config_command == "init":
        _config_init(args.output)
    else:
        console.print("[yellow]Usage: vaultgov config <show|init>[/yellow]")


def _config_show(config: GovernanceConfig, config_path: Path | None) -> None:
    if config_path is not None:
        console.print(f"[dim]Loaded from: {config_path}[/dim]\n")
    else:
        console.print("[dim]No config file found. Using defaults.[/dim]\n")

    console.print("[bold]Current Configuration:[/bold]\n")
    console.print(yaml.dump(config.to_dict(), default_flow_style=False, sort_keys=False))


def _config_init(output: str) -> None:
    output_path = Path(output)

    if output_path.exists():
        console.print(f"[red]File already exists: {output_path}[/red]")
        sys.exit(1)

    with open(output_path, "w") as f:
        yaml.dump(GovernanceConfig().to_dict(), f, default_flow_style=False, sort_keys=False)

    console.print(f"[green]Created config file: {output_path}[/green]")


if __name__ == "__main__":
    main()

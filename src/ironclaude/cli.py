"""
iron-claude-hook - entry point the plugin host calls for every hook.

Usage:
    iron-claude-hook load-milestone
    iron-claude-hook rubocop-check app/models/user.rb
    echo '{"tool_input": {"file_path": "run.sh"}}' | iron-claude-hook shellcheck-lint
    iron-claude-hook brakeman-scan --strict
    iron-claude-hook milestone init "User authentication"
    iron-claude-hook hooks init
"""

import argparse
import os
import sys
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .catalog import discover
from .checks import analyze_queries, brakeman_scan, lint_shell
from .errors import IronClaudeError
from .hooks import load_milestone, rubocop_check, run_changed_test, shellcheck_lint
from .milestones import add_milestone, init_plan, read_plan, set_status
from .models.hook_config import DEFAULT_HOOK_COMMAND, default_hook_config, load_hook_config
from .models.hook_payload import HookPayload, parse_payload
from .models.milestone import MilestoneStatus
from .models.outcome import HookOutcome, MessageLevel
from .utils.config_loader import IronConfig, load_config
from .utils.structured_logging import setup_structured_logging

console = Console(highlight=False, emoji=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, emoji=False, soft_wrap=True)
logger = logging.getLogger(__name__)

PROJECT_DIR_VAR = "CLAUDE_PROJECT_DIR"
DEFAULT_HOOKS_FILE = Path("hooks") / "hooks.json"

LEVEL_PREFIX = {
    MessageLevel.INFO: "",
    MessageLevel.SUCCESS: "[green]✓[/green] ",
    MessageLevel.WARNING: "[yellow]⚠[/yellow] ",
    MessageLevel.ERROR: "[red]✗[/red] ",
}

FILE_HOOKS = {
    "rubocop-check": rubocop_check,
    "shellcheck-lint": shellcheck_lint,
    "test-changed": run_changed_test,
}


def render_outcome(outcome: HookOutcome, out: Console = console) -> None:
    """Print a hook's messages in order."""
    for message in outcome.messages:
        if message.level == MessageLevel.OUTPUT:
            out.print(message.text, markup=False)
        else:
            out.print(LEVEL_PREFIX[message.level] + escape(message.text))


def read_stdin_payload() -> HookPayload:
    """Hook payload from stdin; empty when run interactively."""
    stream = sys.stdin
    if stream is None:
        return HookPayload()
    try:
        if stream.isatty():
            return HookPayload()
        return parse_payload(stream.read())
    except (OSError, ValueError) as e:
        logger.debug(f"No hook payload on stdin: {e}")
        return HookPayload()


def resolve_project_dir(explicit: Optional[str], payload: Optional[HookPayload] = None) -> Path:
    """--project-dir, then payload cwd, then $CLAUDE_PROJECT_DIR, then cwd."""
    if explicit:
        return Path(explicit)
    if payload is not None and payload.cwd:
        return Path(payload.cwd)
    env_dir = os.getenv(PROJECT_DIR_VAR)
    if env_dir:
        return Path(env_dir)
    return Path.cwd()


# =================================================================
# Hook and check subcommands
# =================================================================

def cmd_load_milestone(args: argparse.Namespace, config: IronConfig, project_dir: Path) -> int:
    outcome = load_milestone(project_dir, config, env_file=args.env_file)
    render_outcome(outcome)
    return outcome.exit_code()


def cmd_file_hook(args: argparse.Namespace, config: IronConfig, project_dir: Path) -> int:
    hook = FILE_HOOKS[args.command]
    file_path = args.file or (args.payload.file_path if args.payload else None)

    outcome = hook(file_path, project_dir, config)
    render_outcome(outcome)
    return outcome.exit_code(strict=args.strict)


def cmd_brakeman(args: argparse.Namespace, config: IronConfig, project_dir: Path) -> int:
    outcome = brakeman_scan(project_dir, config)
    render_outcome(outcome)
    return outcome.exit_code(strict=args.strict)


def cmd_analyze_queries(args: argparse.Namespace, config: IronConfig, project_dir: Path) -> int:
    outcome = analyze_queries(project_dir, config)
    render_outcome(outcome)
    return outcome.exit_code()


def cmd_lint_shell(args: argparse.Namespace, config: IronConfig, project_dir: Path) -> int:
    root = project_dir / args.root if args.root else project_dir
    outcome = lint_shell(root, config)
    render_outcome(outcome)
    return outcome.exit_code(strict=args.strict)


# =================================================================
# Milestone management
# =================================================================

def cmd_milestone(args: argparse.Namespace, config: IronConfig, project_dir: Path) -> int:
    path = config.milestone_path(project_dir)

    if args.milestone_command == "init":
        plan = init_plan(path, args.name, description=args.description, force=args.force)
        console.print(f"[green]✓[/green] Created milestone plan: {escape(plan.name)}")
        console.print(f"  Saved to {escape(str(path))}")
        return 0

    if args.milestone_command == "add":
        milestone = add_milestone(
            path,
            args.name,
            milestone_id=args.id,
            acceptance_criteria=args.criterion,
            tdd_checklist=args.check,
        )
        console.print(f"[green]✓[/green] Added {escape(milestone.id)}: {escape(milestone.name)}")
        return 0

    if args.milestone_command == "set-status":
        milestone = set_status(path, args.id, args.status)
        console.print(f"[green]✓[/green] {escape(milestone.id)} is now {escape(milestone.status)}")
        return 0

    plan = read_plan(path)
    if plan is None:
        console.print("No active milestone. Use /milestone-planning to set one up.")
        return 0

    console.print(f"[bold]{escape(plan.name)}[/bold]")
    if plan.description:
        console.print(escape(plan.description))
    console.print(f"[dim]Started: {escape(plan.created_at)}[/dim]")

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Status")
    table.add_column("Criteria", justify="right")
    table.add_column("TDD", justify="right")
    for milestone in plan.milestones:
        table.add_row(
            escape(milestone.id),
            escape(milestone.name),
            escape(milestone.status),
            str(len(milestone.acceptance_criteria)),
            str(len(milestone.tdd_checklist)),
        )
    console.print(table)

    done, total = plan.progress()
    console.print(f"{done}/{total} milestones completed")
    return 0


# =================================================================
# Hook registration and catalog
# =================================================================

def cmd_hooks(args: argparse.Namespace, config: IronConfig, project_dir: Path) -> int:
    path = Path(args.file) if args.file else project_dir / DEFAULT_HOOKS_FILE

    if args.hooks_command == "init":
        if path.exists() and not args.force:
            raise IronClaudeError(f"Hook registration already exists: {path}", details="use --force to replace it")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(default_hook_config(args.hook_command).to_json(), encoding="utf-8")
        console.print(f"[green]✓[/green] Wrote {escape(str(path))}")
        return 0

    registration = load_hook_config(path)

    if args.hooks_command == "validate":
        count = sum(len(group.hooks) for groups in registration.hooks.values() for group in groups)
        console.print(f"[green]✓[/green] {escape(str(path))} is valid ({count} commands)")
        return 0

    table = Table(show_header=True, header_style="bold")
    table.add_column("Event")
    table.add_column("Matcher")
    table.add_column("Command")
    table.add_column("Timeout", justify="right")
    for event, groups in registration.hooks.items():
        for group in groups:
            for hook_command in group.hooks:
                table.add_row(
                    event.value,
                    escape(group.matcher or "*"),
                    escape(hook_command.command),
                    f"{hook_command.timeout}s" if hook_command.timeout else "-",
                )
    console.print(table)
    return 0


def cmd_catalog(args: argparse.Namespace, config: IronConfig, project_dir: Path) -> int:
    root = Path(args.plugin_root) if args.plugin_root else project_dir
    catalog = discover(root)

    console.print(
        f"[bold]{escape(catalog.manifest.name)}[/bold] {escape(catalog.manifest.version)}"
    )
    if catalog.manifest.description:
        console.print(escape(catalog.manifest.description))

    table = Table(show_header=True, header_style="bold")
    table.add_column("Kind")
    table.add_column("Name")
    table.add_column("Description")
    for entry in catalog.entries():
        name = f"/{entry.name}" if entry.kind == "command" else entry.name
        table.add_row(entry.kind, escape(name), escape(entry.description))
    console.print(table)
    return 0


# =================================================================
# Argument parsing
# =================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="iron-claude-hook",
        description="Iron Claude hooks - Rails tooling for AI-assisted TDD sessions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Every hook is non-blocking: a missing tool or a failing check is reported
and the command still exits 0. Pass --strict to fail on findings (CI).
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--project-dir", "-C", help="Project root (default: payload cwd, $CLAUDE_PROJECT_DIR, cwd)")
    parser.add_argument("--config", help="Path to config.yaml (default: .iron-claude/config.yaml)")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines on stderr")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("load-milestone", help="SessionStart: show the active milestone")
    p.add_argument("--env-file", help="Append exports here (default: $CLAUDE_ENV_FILE)")
    p.set_defaults(handler=cmd_load_milestone, reads_payload=True)

    for name, help_text in (
        ("rubocop-check", "PostToolUse: auto-format a Ruby file"),
        ("shellcheck-lint", "PostToolUse: lint a shell script"),
        ("test-changed", "PostToolUse: run an edited test file"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("file", nargs="?", help="Target file (default: tool_input.file_path from stdin)")
        p.add_argument("--strict", action="store_true", help="Exit 1 when issues are found")
        p.set_defaults(handler=cmd_file_hook, reads_payload=True)

    p = sub.add_parser("brakeman-scan", help="Run a Brakeman security scan")
    p.add_argument("--strict", action="store_true", help="Exit 1 when warnings are found")
    p.set_defaults(handler=cmd_brakeman)

    p = sub.add_parser("analyze-queries", help="Scan for likely N+1 query patterns")
    p.set_defaults(handler=cmd_analyze_queries)

    p = sub.add_parser("lint-shell", help="Run ShellCheck over every *.sh file")
    p.add_argument("root", nargs="?", help="Directory to scan (default: project dir)")
    p.add_argument("--strict", action="store_true", help="Exit 1 when any script fails")
    p.set_defaults(handler=cmd_lint_shell)

    p = sub.add_parser("milestone", help="Manage .iron-claude/milestone.json")
    p.set_defaults(handler=cmd_milestone)
    msub = p.add_subparsers(dest="milestone_command", required=True)
    msub.add_parser("show", help="Show the milestone plan")
    mp = msub.add_parser("init", help="Start a new milestone plan")
    mp.add_argument("name")
    mp.add_argument("--description", "-d", default="")
    mp.add_argument("--force", action="store_true", help="Replace an existing plan")
    mp = msub.add_parser("add", help="Append a milestone")
    mp.add_argument("name")
    mp.add_argument("--id", help="Milestone id (default: M<n>)")
    mp.add_argument("--criterion", "-a", action="append", default=[], help="Acceptance criterion (repeatable)")
    mp.add_argument("--check", "-t", action="append", default=[], help="TDD checklist item (repeatable)")
    mp = msub.add_parser("set-status", help="Change a milestone's status")
    mp.add_argument("id")
    mp.add_argument(
        "status",
        help=f"New status ({', '.join(s.value for s in MilestoneStatus)} or any label)",
    )

    p = sub.add_parser("hooks", help="Manage hooks/hooks.json")
    p.set_defaults(handler=cmd_hooks)
    p.add_argument("--file", "-f", help="Registration file (default: hooks/hooks.json)")
    hsub = p.add_subparsers(dest="hooks_command", required=True)
    hp = hsub.add_parser("init", help="Write the default registration")
    hp.add_argument("--force", action="store_true", help="Replace an existing file")
    hp.add_argument("--hook-command", default=DEFAULT_HOOK_COMMAND, help="Executable the host should call")
    hsub.add_parser("show", help="List registered commands")
    hsub.add_parser("validate", help="Validate the registration file")

    p = sub.add_parser("catalog", help="List the plugin's agents, commands and skills")
    p.add_argument("plugin_root", nargs="?", help="Plugin directory (default: project dir)")
    p.set_defaults(handler=cmd_catalog)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Hook commands get their payload before config so its cwd picks the project
    args.payload = None
    if getattr(args, "reads_payload", False) and not getattr(args, "file", None):
        args.payload = read_stdin_payload()

    try:
        project_dir = resolve_project_dir(args.project_dir, args.payload)
        config = load_config(args.config, project_dir=project_dir)
        setup_structured_logging(
            level=args.log_level or config.log_level,
            json_output=args.json_logs or config.json_logs,
        )
        return args.handler(args, config, project_dir)

    except IronClaudeError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Cancelled by user[/yellow]")
        return 130


if __name__ == "__main__":
    sys.exit(main())

"""PostToolUse hook - lint an edited shell script with ShellCheck."""

import logging
from pathlib import Path
from typing import Optional

from ..models.outcome import HookOutcome, HookStatus, MessageLevel
from ..utils.config_loader import IronConfig
from ..utils.tool_runner import find_tool, run_tool, tool_args
from .targets import resolve_target

logger = logging.getLogger(__name__)

HOOK_NAME = "shellcheck-lint"
SHELLCHECK_INSTALL_HINT = (
    "   Install with: brew install shellcheck (macOS) or apt-get install shellcheck (Linux)"
)


def shellcheck_lint(
    file_path: str | Path | None,
    project_dir: str | Path,
    config: Optional[IronConfig] = None,
) -> HookOutcome:
    """
    Run ShellCheck on one `.sh` file.

    Raises:
        HookInputError: If no file path was provided
    """
    config = config or IronConfig()
    outcome = HookOutcome(hook=HOOK_NAME)
    target = resolve_target(file_path, project_dir)

    if not target.is_file():
        return outcome.skip(f"File not found: {file_path}")

    settings = config.shellcheck
    if find_tool(settings.command) is None:
        outcome.skip("ShellCheck not found. Skipping linting.", MessageLevel.WARNING)
        return outcome.info(SHELLCHECK_INSTALL_HINT)

    if target.suffix != ".sh":
        return outcome.skip("Not a shell script. Skipping.")

    outcome.info("🔍 Linting with ShellCheck...")
    run = run_tool(
        tool_args(settings.command, settings.extra_args, str(target)),
        cwd=project_dir,
        timeout=settings.timeout,
    )
    outcome.relay(run.output)

    if run.ok:
        outcome.success("ShellCheck: No issues found")
    else:
        outcome.status = HookStatus.ISSUES
        outcome.warn(f"ShellCheck found issues in {file_path}")
        outcome.info("   Fix issues before committing")

    logger.info(
        f"shellcheck-lint finished: {outcome.status.value}",
        extra={"hook": HOOK_NAME, "file_path": str(target), "exit_code": run.returncode},
    )
    return outcome

"""PostToolUse hook - auto-format an edited Ruby file with RuboCop."""

import logging
from pathlib import Path
from typing import Optional

from ..models.outcome import HookOutcome, HookStatus, MessageLevel
from ..utils.config_loader import IronConfig
from ..utils.tool_runner import find_tool, run_tool, tool_args
from .targets import resolve_target

logger = logging.getLogger(__name__)

HOOK_NAME = "rubocop-check"
RUBOCOP_CONFIG = ".rubocop.yml"


def rubocop_check(
    file_path: str | Path | None,
    project_dir: str | Path,
    config: Optional[IronConfig] = None,
) -> HookOutcome:
    """
    Run `rubocop --auto-correct` on one file.

    Skips (exit 0) when the file is gone, RuboCop is not installed or the
    project has no .rubocop.yml. Findings are reported, never enforced.

    Raises:
        HookInputError: If no file path was provided
    """
    config = config or IronConfig()
    outcome = HookOutcome(hook=HOOK_NAME)
    target = resolve_target(file_path, project_dir)

    if not target.is_file():
        return outcome.skip(f"File not found: {file_path}")

    settings = config.rubocop
    if find_tool(settings.command) is None:
        outcome.skip("RuboCop not found. Skipping auto-format.", MessageLevel.WARNING)
        return outcome.info("   Install with: gem install rubocop")

    if not (Path(project_dir) / RUBOCOP_CONFIG).is_file():
        return outcome.skip(f"No {RUBOCOP_CONFIG} found. Skipping auto-format.")

    outcome.info("🔧 Auto-formatting with RuboCop...")
    run = run_tool(
        tool_args(settings.command, settings.extra_args, "--auto-correct", str(target)),
        cwd=project_dir,
        timeout=settings.timeout,
    )
    outcome.relay(run.output)

    if run.ok:
        outcome.success("RuboCop: No issues found")
    else:
        outcome.status = HookStatus.ISSUES
        if run.timed_out:
            outcome.warn(f"RuboCop timed out after {settings.timeout}s")
        else:
            outcome.warn("RuboCop found issues that couldn't be auto-corrected")
        outcome.info(f"   Run manually: rubocop {file_path}")

    logger.info(
        f"rubocop-check finished: {outcome.status.value}",
        extra={"hook": HOOK_NAME, "file_path": str(target), "exit_code": run.returncode},
    )
    return outcome

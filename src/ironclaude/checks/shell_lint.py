"""Project-wide ShellCheck run over every shell script."""

import logging
from pathlib import Path
from typing import Optional

from ..models.outcome import HookOutcome, HookStatus, MessageLevel
from ..utils.config_loader import IronConfig
from ..utils.tool_runner import find_tool, run_tool, tool_args

logger = logging.getLogger(__name__)

HOOK_NAME = "lint-shell"

INSTALL_HINTS = [
    "Install ShellCheck:",
    "  macOS:   brew install shellcheck",
    "  Ubuntu:  sudo apt-get install shellcheck",
    "  Fedora:  sudo dnf install shellcheck",
]


def find_shell_scripts(root: str | Path, exclude: list[str]) -> list[Path]:
    """All *.sh files under root, skipping any path through an excluded dir name."""
    root = Path(root)
    excluded = set(exclude)
    scripts = []
    for path in sorted(root.rglob("*.sh")):
        relative = path.relative_to(root)
        if excluded.intersection(relative.parts[:-1]):
            continue
        if path.is_file():
            scripts.append(path)
    return scripts


def lint_shell(
    root: str | Path,
    config: Optional[IronConfig] = None,
) -> HookOutcome:
    """
    Lint all shell scripts in a project.

    Returns:
        HookOutcome with total/failed counts in details
    """
    config = config or IronConfig()
    root = Path(root)
    outcome = HookOutcome(hook=HOOK_NAME)
    outcome.info("🔍 Linting shell scripts...")

    settings = config.shellcheck
    if find_tool(settings.command) is None:
        outcome.skip("ShellCheck not found", MessageLevel.WARNING)
        for line in INSTALL_HINTS:
            outcome.info(line)
        return outcome

    scripts = find_shell_scripts(root, config.lint_exclude)
    if not scripts:
        return outcome.skip("No shell scripts found", MessageLevel.WARNING)

    failed = 0
    for script in scripts:
        display = f"./{script.relative_to(root).as_posix()}"
        outcome.info(f"Checking {display}")
        run = run_tool(
            tool_args(settings.command, settings.extra_args, str(script)),
            cwd=root,
            timeout=settings.timeout,
        )
        if run.ok:
            outcome.success(f"Valid: {display}")
        else:
            failed += 1
            outcome.relay(run.output)

    total = len(scripts)
    outcome.details["total"] = total
    outcome.details["failed"] = failed

    outcome.info("")
    outcome.info(f"📊 Results: {total - failed}/{total} scripts passed")
    if failed:
        outcome.status = HookStatus.ISSUES
        outcome.error(f"{failed} script(s) failed ShellCheck")
    else:
        outcome.success("All scripts passed")

    logger.info(
        f"lint-shell checked {total} scripts, {failed} failed",
        extra={"hook": HOOK_NAME},
    )
    return outcome

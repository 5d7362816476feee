"""
SessionStart hook - surface the active milestone to the session.

Prints the milestone summary and exports MILESTONE / MILESTONE_DESCRIPTION
for later hooks. When the host provides CLAUDE_ENV_FILE the exports are
appended there as shell statements.
"""

import os
import shlex
import logging
from pathlib import Path
from typing import Optional

from ..errors import MilestoneError
from ..milestones import read_plan
from ..models.outcome import HookOutcome, HookStatus
from ..utils.config_loader import IronConfig

logger = logging.getLogger(__name__)

HOOK_NAME = "load-milestone"
NO_MILESTONE = "No milestone set"
ENV_FILE_VAR = "CLAUDE_ENV_FILE"


def load_milestone(
    project_dir: str | Path,
    config: Optional[IronConfig] = None,
    env_file: str | Path | None = None,
) -> HookOutcome:
    """
    Report the current milestone and compute its exports.

    Args:
        project_dir: Project root holding .iron-claude/
        config: Loaded configuration (defaults if None)
        env_file: Where to append export lines (defaults to $CLAUDE_ENV_FILE)

    Returns:
        HookOutcome with messages and exports
    """
    config = config or IronConfig()
    outcome = HookOutcome(hook=HOOK_NAME)
    path = config.milestone_path(project_dir)

    try:
        plan = read_plan(path)
    except MilestoneError as e:
        logger.warning(str(e), extra={"hook": HOOK_NAME})
        outcome.warn(f"Could not read {path}: {e.details or e.message}")
        plan = None

    if plan is None:
        outcome.status = HookStatus.SKIPPED
        outcome.info("No active milestone. Use /milestone-planning to set one up.")
        outcome.exports["MILESTONE"] = NO_MILESTONE
    else:
        outcome.exports["MILESTONE"] = plan.name
        outcome.exports["MILESTONE_DESCRIPTION"] = plan.description

        outcome.info(f"📍 Current Milestone: {plan.name}")
        if plan.description:
            outcome.info(f"   Description: {plan.description}")
        outcome.info(f"   Started: {plan.created_at}")

        done, total = plan.progress()
        if total:
            outcome.info(f"   Progress: {done}/{total} milestones completed")
            current = plan.current()
            if current is not None:
                outcome.info(f"   Next up: {current.id} {current.name} ({current.status})")
        outcome.details["completed"] = done
        outcome.details["total"] = total

        outcome.info("")
        outcome.info("🎯 Remember: TDD workflow (Red → Green → Refactor)")
        outcome.success("Four personas will review at completion")

    target = env_file or os.getenv(ENV_FILE_VAR)
    if target:
        try:
            write_exports(outcome.exports, target)
        except OSError as e:
            logger.warning(f"Could not write exports to {target}: {e}", extra={"hook": HOOK_NAME})
            outcome.warn(f"Could not write session exports to {target}: {e.strerror or e}")

    return outcome


def format_exports(exports: dict[str, str]) -> str:
    """Render exports as shell statements."""
    return "".join(f"export {key}={shlex.quote(value)}\n" for key, value in exports.items())


def write_exports(exports: dict[str, str], env_file: str | Path) -> None:
    """Append export statements to the host's env file."""
    env_file = Path(env_file)
    env_file.parent.mkdir(parents=True, exist_ok=True)
    with open(env_file, "a", encoding="utf-8") as f:
        f.write(format_exports(exports))
    logger.info(f"Wrote {len(exports)} exports to {env_file}", extra={"hook": HOOK_NAME})

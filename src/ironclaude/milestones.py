"""
Milestone store - read and write .iron-claude/milestone.json wholesale.

Whichever command ran last owns the file: every write replaces it.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .errors import MilestoneError
from .models.milestone import Milestone, MilestonePlan

logger = logging.getLogger(__name__)


def read_plan(path: str | Path) -> Optional[MilestonePlan]:
    """
    Load the milestone file.

    Args:
        path: Location of milestone.json

    Returns:
        MilestonePlan, or None when the file does not exist

    Raises:
        MilestoneError: If the file is not valid JSON or not a plan object
    """
    path = Path(path)
    if not path.exists():
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        raise MilestoneError(f"Cannot read milestone file {path}", details=str(e)) from e

    if not isinstance(data, dict):
        raise MilestoneError(f"Milestone file must contain a JSON object: {path}")

    try:
        return MilestonePlan(**data)
    except ValidationError as e:
        raise MilestoneError(f"Invalid milestone file {path}", details=str(e)) from e


def write_plan(plan: MilestonePlan, path: str | Path) -> Path:
    """Replace the milestone file with the given plan."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(plan.model_dump(mode="json"), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    logger.info(f"Saved milestone file: {path}")
    return path


def init_plan(
    path: str | Path,
    name: str,
    description: str = "",
    force: bool = False,
    now: Optional[datetime] = None,
) -> MilestonePlan:
    """
    Start a fresh milestone plan.

    Raises:
        MilestoneError: If a plan exists and force is not set
    """
    path = Path(path)
    if path.exists() and not force:
        raise MilestoneError(
            f"Milestone file already exists: {path}",
            details="use --force to replace it",
        )

    created = (now or datetime.now(timezone.utc)).replace(microsecond=0)
    plan = MilestonePlan(
        name=name,
        description=description,
        created_at=created.isoformat().replace("+00:00", "Z"),
    )
    write_plan(plan, path)
    return plan


def _require_plan(path: Path) -> MilestonePlan:
    plan = read_plan(path)
    if plan is None:
        raise MilestoneError(
            f"No milestone file at {path}",
            details="run 'milestone init' first",
        )
    return plan


def add_milestone(
    path: str | Path,
    name: str,
    milestone_id: Optional[str] = None,
    acceptance_criteria: Optional[list[str]] = None,
    tdd_checklist: Optional[list[str]] = None,
) -> Milestone:
    """Append a milestone record and save the plan."""
    path = Path(path)
    plan = _require_plan(path)

    milestone = Milestone(
        id=milestone_id or plan.next_id(),
        name=name,
        acceptance_criteria=acceptance_criteria or [],
        tdd_checklist=tdd_checklist or [],
    )
    plan.milestones.append(milestone)
    write_plan(plan, path)
    return milestone


def set_status(path: str | Path, milestone_id: str, status: str) -> Milestone:
    """
    Overwrite a milestone's status.

    Raises:
        MilestoneError: If no milestone has the given id
    """
    path = Path(path)
    plan = _require_plan(path)

    milestone = plan.find(milestone_id)
    if milestone is None:
        known = ", ".join(m.id for m in plan.milestones) or "none"
        raise MilestoneError(f"Unknown milestone id: {milestone_id}", details=f"known ids: {known}")

    milestone.status = status
    write_plan(plan, path)
    return milestone

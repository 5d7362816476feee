"""Milestone plan models (.iron-claude/milestone.json).

The file is a memory aid for the assistant, so loading is lenient. Null or
missing fields fall back to defaults and unknown keys are kept.
"""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

UNNAMED_MILESTONE = "Unnamed Milestone"


class MilestoneStatus(str, Enum):
    """Well-known milestone statuses. Other strings are accepted as-is."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


def _text_or_default(value: Any, default: str) -> str:
    if value is None:
        return default
    return str(value)


class Milestone(BaseModel):
    """A planned unit of feature work."""

    model_config = ConfigDict(extra="allow")

    id: str = Field("", description="Short identifier, e.g. M1")
    name: str = ""
    status: str = MilestoneStatus.PENDING.value
    acceptance_criteria: list[str] = Field(default_factory=list)
    tdd_checklist: list[str] = Field(default_factory=list)

    @field_validator("id", "name", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _text_or_default(value, "")

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> str:
        if isinstance(value, MilestoneStatus):
            return value.value
        return _text_or_default(value, MilestoneStatus.PENDING.value)

    @field_validator("acceptance_criteria", "tdd_checklist", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> list:
        if not isinstance(value, list):
            return []
        return [str(item) for item in value if item is not None]

    @property
    def is_completed(self) -> bool:
        return self.status == MilestoneStatus.COMPLETED.value


class MilestonePlan(BaseModel):
    """The whole milestone file."""

    model_config = ConfigDict(extra="allow")

    name: str = UNNAMED_MILESTONE
    description: str = ""
    created_at: str = ""
    milestones: list[Milestone] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return _text_or_default(value, UNNAMED_MILESTONE)

    @field_validator("description", "created_at", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _text_or_default(value, "")

    @field_validator("milestones", mode="before")
    @classmethod
    def _coerce_milestones(cls, value: Any) -> list:
        if value is None:
            return []
        if not isinstance(value, list):
            logger.warning(f"Ignoring milestones value of type {type(value).__name__}")
            return []
        records = [item for item in value if isinstance(item, (dict, Milestone))]
        if len(records) != len(value):
            logger.warning(f"Ignoring {len(value) - len(records)} milestone record(s) that are not objects")
        return records

    def find(self, milestone_id: str) -> Milestone | None:
        """First milestone with the given id, or None."""
        for milestone in self.milestones:
            if milestone.id == milestone_id:
                return milestone
        return None

    def next_id(self) -> str:
        """Next free id of the form M<n>."""
        taken = {m.id for m in self.milestones}
        n = len(self.milestones) + 1
        while f"M{n}" in taken:
            n += 1
        return f"M{n}"

    def progress(self) -> tuple[int, int]:
        """(completed, total) milestone counts."""
        done = sum(1 for m in self.milestones if m.is_completed)
        return done, len(self.milestones)

    def current(self) -> Milestone | None:
        """The milestone in progress, else the first one not completed."""
        for milestone in self.milestones:
            if milestone.status == MilestoneStatus.IN_PROGRESS.value:
                return milestone
        for milestone in self.milestones:
            if not milestone.is_completed:
                return milestone
        return None

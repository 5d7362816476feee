"""
Hook registration models (hooks/hooks.json).

The host maps lifecycle events to shell commands using this file. We only
read, validate and generate it; dispatch belongs to the host.
"""

import json
import re
import logging
from enum import Enum
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..errors import HookConfigError

logger = logging.getLogger(__name__)

DEFAULT_HOOK_COMMAND = "iron-claude-hook"
EDIT_TOOLS_MATCHER = "Write|Edit"


class HookEvent(str, Enum):
    """Lifecycle events the host can dispatch."""

    SESSION_START = "SessionStart"
    USER_PROMPT_SUBMIT = "UserPromptSubmit"
    PRE_TOOL_USE = "PreToolUse"
    POST_TOOL_USE = "PostToolUse"
    STOP = "Stop"
    SUBAGENT_STOP = "SubagentStop"
    SESSION_END = "SessionEnd"
    NOTIFICATION = "Notification"
    PRE_COMPACT = "PreCompact"


class HookCommand(BaseModel):
    """One shell command run for an event."""

    type: Literal["command"] = "command"
    command: str
    timeout: Optional[int] = Field(None, gt=0, description="Seconds")

    @field_validator("command")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("command must not be empty")
        return value


class MatcherGroup(BaseModel):
    """Commands sharing one tool-name matcher."""

    matcher: Optional[str] = None
    hooks: list[HookCommand] = Field(..., min_length=1)

    @field_validator("matcher")
    @classmethod
    def _valid_regex(cls, value: Optional[str]) -> Optional[str]:
        if value and value != "*":
            try:
                re.compile(value)
            except re.error as e:
                raise ValueError(f"invalid matcher regex: {e}") from e
        return value

    def matches(self, tool_name: Optional[str]) -> bool:
        """True when this group applies to the tool (or no tool given)."""
        if tool_name is None or not self.matcher or self.matcher == "*":
            return True
        return re.fullmatch(self.matcher, tool_name) is not None


class HookRegistration(BaseModel):
    """The whole hooks.json document."""

    hooks: dict[HookEvent, list[MatcherGroup]] = Field(default_factory=dict)

    def commands_for(self, event: HookEvent | str, tool_name: Optional[str] = None) -> list[HookCommand]:
        """Commands registered for an event, filtered by tool name."""
        event = HookEvent(event)
        commands: list[HookCommand] = []
        for group in self.hooks.get(event, []):
            if group.matches(tool_name):
                commands.extend(group.hooks)
        return commands

    def to_json(self) -> str:
        """Serialize to the on-disk JSON layout."""
        data = self.model_dump(mode="json", exclude_none=True)
        return json.dumps(data, indent=2) + "\n"


def default_hook_config(command: str = DEFAULT_HOOK_COMMAND) -> HookRegistration:
    """
    Registration wiring every iron-claude hook to its event.

    Args:
        command: Executable the host should call

    Returns:
        HookRegistration ready to be written to hooks.json
    """
    return HookRegistration(hooks={
        HookEvent.SESSION_START: [
            MatcherGroup(hooks=[HookCommand(command=f"{command} load-milestone", timeout=10)]),
        ],
        HookEvent.POST_TOOL_USE: [
            MatcherGroup(
                matcher=EDIT_TOOLS_MATCHER,
                hooks=[
                    HookCommand(command=f"{command} rubocop-check", timeout=60),
                    HookCommand(command=f"{command} shellcheck-lint", timeout=30),
                    HookCommand(command=f"{command} test-changed", timeout=120),
                ],
            ),
        ],
    })


def load_hook_config(path: str | Path) -> HookRegistration:
    """
    Load and validate a hooks.json file.

    Raises:
        HookConfigError: If the file is missing, not JSON or fails validation
    """
    path = Path(path)
    if not path.exists():
        raise HookConfigError(f"Hook registration not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise HookConfigError(f"Invalid JSON in {path}: {e}") from e

    try:
        registration = HookRegistration(**data) if isinstance(data, dict) else None
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise HookConfigError(f"Invalid hook registration in {path}: {first['msg']}", field=field) from e

    if registration is None:
        raise HookConfigError(f"Hook registration root must be an object: {path}")

    logger.debug(f"Loaded hook registration: {path}")
    return registration

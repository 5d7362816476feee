"""The JSON object the host writes to a hook's stdin."""

import json
import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class HookPayload(BaseModel):
    """Lifecycle event data. Every field is optional."""

    model_config = ConfigDict(extra="ignore")

    session_id: Optional[str] = None
    cwd: Optional[str] = None
    hook_event_name: Optional[str] = None
    tool_name: Optional[str] = None
    tool_input: dict[str, Any] = Field(default_factory=dict)

    @property
    def file_path(self) -> Optional[str]:
        """Target file of a Write/Edit style tool call."""
        value = self.tool_input.get("file_path") or self.tool_input.get("path")
        return str(value) if value else None


def parse_payload(raw: str) -> HookPayload:
    """
    Parse a stdin payload.

    Blank or malformed input yields an empty payload: a hook must still be
    able to run when invoked by hand.
    """
    if not raw or not raw.strip():
        return HookPayload()

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Ignoring malformed hook payload: {e}")
        return HookPayload()

    if not isinstance(data, dict):
        logger.warning("Ignoring hook payload that is not a JSON object")
        return HookPayload()

    try:
        return HookPayload(**data)
    except ValidationError as e:
        logger.warning(f"Ignoring invalid hook payload: {e}")
        return HookPayload()

"""Data models for milestones, hook registration, payloads and results."""

from .outcome import HookOutcome, HookStatus, HookMessage, MessageLevel
from .milestone import Milestone, MilestonePlan, MilestoneStatus, UNNAMED_MILESTONE
from .hook_payload import HookPayload, parse_payload
from .hook_config import (
    HookEvent,
    HookCommand,
    MatcherGroup,
    HookRegistration,
    default_hook_config,
    load_hook_config,
)
from .brakeman import BrakemanReport, BrakemanWarning

__all__ = [
    # Results
    "HookOutcome",
    "HookStatus",
    "HookMessage",
    "MessageLevel",
    # Milestones
    "Milestone",
    "MilestonePlan",
    "MilestoneStatus",
    "UNNAMED_MILESTONE",
    # Host I/O
    "HookPayload",
    "parse_payload",
    "HookEvent",
    "HookCommand",
    "MatcherGroup",
    "HookRegistration",
    "default_hook_config",
    "load_hook_config",
    # Brakeman
    "BrakemanReport",
    "BrakemanWarning",
]

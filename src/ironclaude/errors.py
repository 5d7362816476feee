"""Exceptions raised by iron-claude.

Tool absence and tool findings are never exceptions: they are reported as
HookOutcome values. These classes cover usage and data errors only.
"""

from typing import Optional


class IronClaudeError(Exception):
    """Base exception for all iron-claude errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class ConfigError(IronClaudeError):
    """Raised when the YAML configuration cannot be loaded or validated."""
    pass


class HookInputError(IronClaudeError):
    """Raised when a hook is invoked without the input it needs."""
    pass


class HookConfigError(IronClaudeError):
    """Raised when a hook registration file is invalid."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, details=f"field: {field}" if field else None)
        self.field = field


class MilestoneError(IronClaudeError):
    """Raised when a milestone write operation cannot proceed."""
    pass

"""Result model shared by every hook and check."""

from dataclasses import dataclass, field
from enum import Enum


class HookStatus(str, Enum):
    """How a hook run ended."""
    PASSED = "passed"      # Tool ran clean (or nothing to check)
    ISSUES = "issues"      # Tool ran and reported findings
    SKIPPED = "skipped"    # Precondition unmet: missing file, tool or project setup
    ERROR = "error"        # Tool could not produce a result


class MessageLevel(str, Enum):
    """Presentation level of a single output line."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    OUTPUT = "output"      # Raw text relayed from an external tool


@dataclass
class HookMessage:
    level: MessageLevel
    text: str


@dataclass
class HookOutcome:
    """
    Everything a hook wants to tell the session.

    Hooks never print. They collect messages here and the CLI renders them,
    which keeps hooks testable without capturing stdout.
    """

    hook: str
    status: HookStatus = HookStatus.PASSED
    messages: list[HookMessage] = field(default_factory=list)
    exports: dict[str, str] = field(default_factory=dict)
    details: dict = field(default_factory=dict)

    def info(self, text: str) -> "HookOutcome":
        self.messages.append(HookMessage(MessageLevel.INFO, text))
        return self

    def success(self, text: str) -> "HookOutcome":
        self.messages.append(HookMessage(MessageLevel.SUCCESS, text))
        return self

    def warn(self, text: str) -> "HookOutcome":
        self.messages.append(HookMessage(MessageLevel.WARNING, text))
        return self

    def error(self, text: str) -> "HookOutcome":
        self.messages.append(HookMessage(MessageLevel.ERROR, text))
        return self

    def relay(self, output: str) -> "HookOutcome":
        """Relay external tool output verbatim (ignored when blank)."""
        if output and output.strip():
            self.messages.append(HookMessage(MessageLevel.OUTPUT, output.rstrip()))
        return self

    def skip(self, text: str, level: MessageLevel = MessageLevel.INFO) -> "HookOutcome":
        """Mark the run as skipped with an explanatory line."""
        self.status = HookStatus.SKIPPED
        self.messages.append(HookMessage(level, text))
        return self

    @property
    def texts(self) -> list[str]:
        """Plain text of every message, for logs and assertions."""
        return [m.text for m in self.messages]

    def exit_code(self, strict: bool = False) -> int:
        """
        Exit code for the host.

        Hooks never block the session: only strict mode turns findings or
        tool failures into a non-zero exit.
        """
        if strict and self.status in (HookStatus.ISSUES, HookStatus.ERROR):
            return 1
        return 0

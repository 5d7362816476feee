"""Helpers for locating and running external command-line tools.

A tool run never raises for tool-side problems: a missing binary, a
timeout or a non-zero exit all come back as a ToolRun for the caller
to report.
"""

import shutil
import logging
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Conventional shell exit code for "command not found"
EXIT_NOT_FOUND = 127


@dataclass
class ToolRun:
    """Result of one external tool invocation."""

    args: list[str]
    returncode: Optional[int]
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        """True when the tool finished with exit code 0."""
        return self.returncode == 0 and not self.timed_out

    @property
    def output(self) -> str:
        """Combined stdout and stderr, stripped."""
        parts = [p.strip() for p in (self.stdout, self.stderr) if p and p.strip()]
        return "\n".join(parts)


def find_tool(name: str) -> Optional[str]:
    """Return the full path of an executable on PATH, or None."""
    path = shutil.which(name)
    if path is None:
        logger.debug(f"Tool not found on PATH: {name}", extra={"tool": name})
    return path


def run_tool(
    args: list[str],
    cwd: str | Path | None = None,
    timeout: int | None = None,
) -> ToolRun:
    """
    Run an external tool to completion and capture its output.

    Args:
        args: Command and arguments
        cwd: Working directory for the tool
        timeout: Seconds before the tool is killed

    Returns:
        ToolRun with exit code and captured output
    """
    logger.info(f"Running: {' '.join(args)}", extra={"tool": args[0]})
    started = time.monotonic()

    try:
        completed = subprocess.run(
            args,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        duration_ms = int((time.monotonic() - started) * 1000)
        logger.warning(
            f"{args[0]} timed out after {timeout}s",
            extra={"tool": args[0], "duration_ms": duration_ms},
        )
        return ToolRun(
            args=args,
            returncode=None,
            stdout=_as_text(e.stdout),
            stderr=_as_text(e.stderr),
            duration_ms=duration_ms,
            timed_out=True,
        )
    except FileNotFoundError as e:
        logger.warning(f"Could not start {args[0]}: {e}", extra={"tool": args[0]})
        return ToolRun(args=args, returncode=EXIT_NOT_FOUND, stderr=str(e))

    duration_ms = int((time.monotonic() - started) * 1000)
    logger.info(
        f"{args[0]} exited with {completed.returncode}",
        extra={"tool": args[0], "exit_code": completed.returncode, "duration_ms": duration_ms},
    )
    return ToolRun(
        args=args,
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        duration_ms=duration_ms,
    )


def _as_text(value) -> str:
    # TimeoutExpired carries bytes even when text=True was requested
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def tool_args(command: str, extra_args: list[str], *args: str) -> list[str]:
    """Command line: tool, configured extra args, then call-specific args."""
    return [command, *extra_args, *args]

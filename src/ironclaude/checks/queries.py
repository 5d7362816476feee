"""
Rails performance check - grep-style scan for likely N+1 query patterns.

This is a heuristic: it flags places worth a closer look, it does not
prove an N+1 exists.
"""

import re
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..models.outcome import HookOutcome, HookStatus, MessageLevel
from ..utils.config_loader import IronConfig
from .security import RAILS_MARKER

logger = logging.getLogger(__name__)

HOOK_NAME = "analyze-queries"

RECOMMENDATIONS = [
    "   - Use includes/preload for associations in loops",
    "   - Add counter_cache for .count on associations",
    "   - Run rails console with query logging to confirm",
]

CONSOLE_HINT = [
    "For detailed analysis, use:",
    "   rails console",
    "   > ActiveRecord::Base.logger = Logger.new(STDOUT)",
    "   > # Run your controller action code",
]


@dataclass
class QueryPattern:
    """A suspicious line pattern within one part of the app."""

    title: str
    directory: str
    glob: str
    regex: re.Pattern


@dataclass
class PatternMatch:
    path: str
    line_number: int
    text: str

    def format(self) -> str:
        return f"{self.path}:{self.line_number}:{self.text}"


@dataclass
class PatternFindings:
    pattern: QueryPattern
    matches: list[PatternMatch] = field(default_factory=list)


N_PLUS_ONE_PATTERNS = [
    QueryPattern(
        title="Found .all without eager loading in controllers:",
        directory="app/controllers",
        glob="*.rb",
        regex=re.compile(r"\.all$"),
    ),
    QueryPattern(
        title="Found iteration in views (potential N+1 if accessing associations):",
        directory="app/views",
        glob="*.erb",
        regex=re.compile(r"each do \|"),
    ),
]


def scan_pattern(project_dir: Path, pattern: QueryPattern, max_per_file: int) -> PatternFindings:
    """Collect matching lines, at most max_per_file from each file."""
    findings = PatternFindings(pattern=pattern)
    root = project_dir / pattern.directory
    if not root.is_dir():
        return findings

    for path in sorted(root.rglob(pattern.glob)):
        if not path.is_file():
            continue
        try:
            lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
        except OSError as e:
            logger.warning(f"Skipping unreadable file {path}: {e}", extra={"hook": HOOK_NAME})
            continue

        found = 0
        for number, line in enumerate(lines, start=1):
            if pattern.regex.search(line):
                findings.matches.append(PatternMatch(
                    path=path.relative_to(project_dir).as_posix(),
                    line_number=number,
                    text=line,
                ))
                found += 1
                if found >= max_per_file:
                    break

    return findings


def analyze_queries(
    project_dir: str | Path,
    config: Optional[IronConfig] = None,
) -> HookOutcome:
    """
    Scan controllers and views for common N+1 query patterns.

    Returns:
        HookOutcome; details["suspects"] counts pattern categories that matched
    """
    config = config or IronConfig()
    project_dir = Path(project_dir)
    outcome = HookOutcome(hook=HOOK_NAME)
    outcome.info("⚡ Analyzing Rails Queries for Performance Issues...")

    if not (project_dir / RAILS_MARKER).is_file():
        return outcome.skip("Not a Rails project.", MessageLevel.ERROR)

    outcome.info("🔍 Scanning for potential N+1 queries...")

    suspects = 0
    for pattern in N_PLUS_ONE_PATTERNS:
        findings = scan_pattern(project_dir, pattern, config.query_scan_max_matches)
        if not findings.matches:
            continue
        suspects += 1
        outcome.warn(pattern.title)
        outcome.relay("\n".join(match.format() for match in findings.matches))

    outcome.details["suspects"] = suspects
    if suspects:
        outcome.status = HookStatus.ISSUES

    outcome.info("")
    outcome.info("📋 Analysis Complete")
    outcome.info(f"   Potential N+1 patterns: {suspects}")
    outcome.info("")
    outcome.info("💡 Recommendations:")
    for line in RECOMMENDATIONS:
        outcome.info(line)
    outcome.info("")
    for line in CONSOLE_HINT:
        outcome.info(line)

    logger.info(f"analyze-queries found {suspects} suspect categories", extra={"hook": HOOK_NAME})
    return outcome

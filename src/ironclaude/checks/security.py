"""
Rails security audit - run Brakeman and summarize its JSON report.

Brakeman exits non-zero whenever it finds warnings, so its exit code alone
does not mean the scan failed: only an empty report does.
"""

import json
import os
import shutil
import logging
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..models.brakeman import BrakemanReport
from ..models.outcome import HookOutcome, HookStatus, MessageLevel
from ..utils.config_loader import IronConfig
from ..utils.tool_runner import find_tool, run_tool, tool_args

logger = logging.getLogger(__name__)

HOOK_NAME = "brakeman-scan"
RAILS_MARKER = Path("config") / "application.rb"


def brakeman_scan(
    project_dir: str | Path,
    config: Optional[IronConfig] = None,
) -> HookOutcome:
    """
    Scan a Rails app for security vulnerabilities.

    Args:
        project_dir: Rails application root
        config: Loaded configuration (defaults if None)

    Returns:
        HookOutcome with warning/error counts in details
    """
    config = config or IronConfig()
    project_dir = Path(project_dir)
    outcome = HookOutcome(hook=HOOK_NAME)
    outcome.info("🔍 Running Brakeman Security Scan...")

    settings = config.brakeman
    if find_tool(settings.command) is None:
        outcome.skip("Brakeman not installed.", MessageLevel.WARNING)
        outcome.info("   Install with: gem install brakeman")
        outcome.info("   Or add to Gemfile: gem 'brakeman', group: :development")
        return outcome

    if not (project_dir / RAILS_MARKER).is_file():
        return outcome.skip("Not a Rails project. Brakeman requires Rails.", MessageLevel.ERROR)

    outcome.info("Scanning for security vulnerabilities...")

    fd, temp_name = tempfile.mkstemp(prefix="brakeman-", suffix=".json")
    os.close(fd)
    temp_file = Path(temp_name)

    try:
        run = run_tool(
            tool_args(
                settings.command,
                settings.extra_args,
                "--format", "json",
                "--output", str(temp_file),
                "--quiet",
                "--no-pager",
            ),
            cwd=project_dir,
            timeout=settings.timeout,
        )

        raw = temp_file.read_text(encoding="utf-8") if temp_file.exists() else ""
        if not run.ok and not raw.strip():
            outcome.status = HookStatus.ERROR
            outcome.relay(run.output)
            outcome.error("Brakeman scan failed")
            return outcome

        _summarize(outcome, raw)

        report_path = project_dir / config.brakeman_report
        report_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(temp_file, report_path)
        outcome.details["report_path"] = str(report_path)
        outcome.info("")
        outcome.info(f"📋 Full report saved to: {config.brakeman_report}")
    finally:
        temp_file.unlink(missing_ok=True)

    logger.info(
        f"brakeman-scan finished: {outcome.status.value}",
        extra={"hook": HOOK_NAME, "exit_code": run.returncode, "duration_ms": run.duration_ms},
    )
    return outcome


def parse_report(raw: str) -> BrakemanReport:
    """
    Parse Brakeman JSON output.

    Raises:
        ValueError: If the text is not a Brakeman JSON report
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("report root is not an object")
    try:
        return BrakemanReport(**data)
    except ValidationError as e:
        raise ValueError(str(e)) from e


def _summarize(outcome: HookOutcome, raw: str) -> None:
    try:
        report = parse_report(raw)
    except ValueError as e:
        logger.warning(f"Unparseable Brakeman report: {e}", extra={"hook": HOOK_NAME})
        outcome.warn("Could not parse Brakeman report, showing raw results:")
        outcome.relay(raw)
        outcome.status = HookStatus.ERROR
        return

    outcome.details["warnings"] = len(report.warnings)
    outcome.details["errors"] = len(report.errors)

    outcome.info("📊 Scan Results:")
    outcome.info(f"   Warnings: {len(report.warnings)}")
    outcome.info(f"   Errors: {len(report.errors)}")

    if report.warnings:
        outcome.status = HookStatus.ISSUES
        outcome.warn("Security warnings found:")
        for warning in report.warnings:
            outcome.relay(warning.format())

    if report.errors:
        outcome.status = HookStatus.ISSUES
        outcome.error("Scan errors:")
        for error in report.errors:
            text = error if isinstance(error, str) else json.dumps(error, ensure_ascii=False)
            outcome.relay(text)

    if not report.warnings and not report.errors:
        outcome.success("No security warnings found!")

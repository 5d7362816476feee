"""Shared fixtures: fake project trees and a stand-in for external tools."""

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from ironclaude.utils.tool_runner import ToolRun


@dataclass
class FakeRunner:
    """Records tool invocations and replays a canned result."""

    returncode: int | None = 0
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False
    calls: list[dict] = field(default_factory=list)
    on_run: object = None  # Optional callable(args) for side effects

    def __call__(self, args, cwd=None, timeout=None) -> ToolRun:
        self.calls.append({"args": list(args), "cwd": cwd, "timeout": timeout})
        if self.on_run is not None:
            self.on_run(args)
        return ToolRun(
            args=list(args),
            returncode=self.returncode,
            stdout=self.stdout,
            stderr=self.stderr,
            timed_out=self.timed_out,
        )


@pytest.fixture
def fake_tools(monkeypatch):
    """
    Factory patching a module's find_tool / run_tool.

    Usage: runner = fake_tools(rubocop_check, returncode=1, stdout="...")
    """
    def install(module, available: bool = True, **runner_kwargs) -> FakeRunner:
        runner = FakeRunner(**runner_kwargs)
        monkeypatch.setattr(module, "find_tool", lambda name: f"/usr/bin/{name}" if available else None)
        monkeypatch.setattr(module, "run_tool", runner)
        return runner

    return install


@pytest.fixture
def rails_project(tmp_path: Path) -> Path:
    """Minimal Rails app layout with a RuboCop config."""
    (tmp_path / "bin").mkdir()
    (tmp_path / "bin" / "rails").write_text("#!/usr/bin/env ruby\n")
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "application.rb").write_text("module App; end\n")
    (tmp_path / ".rubocop.yml").write_text("AllCops:\n  NewCops: enable\n")
    return tmp_path


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep host variables from leaking into tests."""
    for var in (
        "CLAUDE_ENV_FILE",
        "CLAUDE_PROJECT_DIR",
        "IRON_CLAUDE_CONFIG",
        "IRON_CLAUDE_LOG_LEVEL",
        "IRON_CLAUDE_JSON_LOGS",
    ):
        monkeypatch.delenv(var, raising=False)

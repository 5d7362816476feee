"""Unit tests for external tool helpers."""

import subprocess
import sys

from ironclaude.utils import tool_runner
from ironclaude.utils.tool_runner import ToolRun, find_tool, run_tool, tool_args


class TestToolRun:
    def test_ok_requires_zero_exit(self):
        assert ToolRun(args=["x"], returncode=0).ok
        assert not ToolRun(args=["x"], returncode=1).ok

    def test_timed_out_is_never_ok(self):
        assert not ToolRun(args=["x"], returncode=0, timed_out=True).ok

    def test_output_joins_streams(self):
        run = ToolRun(args=["x"], returncode=1, stdout="out\n", stderr="  err  \n")

        assert run.output == "out\nerr"

    def test_output_skips_empty_streams(self):
        assert ToolRun(args=["x"], returncode=0, stderr="only err").output == "only err"


class TestFindTool:
    def test_found(self, monkeypatch):
        monkeypatch.setattr(tool_runner.shutil, "which", lambda name: f"/opt/bin/{name}")

        assert find_tool("rubocop") == "/opt/bin/rubocop"

    def test_missing(self, monkeypatch):
        monkeypatch.setattr(tool_runner.shutil, "which", lambda name: None)

        assert find_tool("rubocop") is None


class TestRunTool:
    """Tests for run_tool()."""

    def test_captures_output(self, monkeypatch, tmp_path):
        seen = {}

        def fake_run(args, **kwargs):
            seen.update(kwargs)
            return subprocess.CompletedProcess(args, 2, stdout="found\n", stderr="")

        monkeypatch.setattr(tool_runner.subprocess, "run", fake_run)

        run = run_tool(["shellcheck", "a.sh"], cwd=tmp_path, timeout=30)

        assert run.returncode == 2
        assert run.stdout == "found\n"
        assert not run.timed_out
        assert seen["cwd"] == str(tmp_path)
        assert seen["timeout"] == 30
        assert seen["capture_output"] is True
        assert seen["errors"] == "replace"

    def test_undecodable_output_is_replaced(self):
        """Tools echoing Latin-1 source lines still produce a result."""
        script = "import sys; sys.stdout.buffer.write(b'\\xe9cho\\n'); sys.exit(1)"

        run = run_tool([sys.executable, "-c", script], timeout=30)

        assert run.returncode == 1
        assert run.stdout == "\ufffdcho\n"
        assert run.output == "\ufffdcho"

    def test_timeout(self, monkeypatch):
        def fake_run(args, **kwargs):
            raise subprocess.TimeoutExpired(args, kwargs["timeout"], output=b"partial")

        monkeypatch.setattr(tool_runner.subprocess, "run", fake_run)

        run = run_tool(["bundle", "exec", "rspec"], timeout=1)

        assert run.timed_out
        assert run.returncode is None
        assert run.stdout == "partial"
        assert not run.ok

    def test_missing_executable(self, monkeypatch):
        def fake_run(args, **kwargs):
            raise FileNotFoundError(2, "No such file or directory", args[0])

        monkeypatch.setattr(tool_runner.subprocess, "run", fake_run)

        run = run_tool(["brakeman"])

        assert run.returncode == tool_runner.EXIT_NOT_FOUND
        assert "No such file" in run.stderr


def test_tool_args_order():
    assert tool_args("rubocop", ["--parallel"], "--auto-correct", "a.rb") == [
        "rubocop", "--parallel", "--auto-correct", "a.rb",
    ]

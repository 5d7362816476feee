"""Unit tests for the skill checks: Brakeman, N+1 scan, project ShellCheck."""

import json
from pathlib import Path

import pytest

from ironclaude.checks import analyze_queries, brakeman_scan, find_shell_scripts, lint_shell, parse_report
from ironclaude.checks import security, shell_lint
from ironclaude.models.outcome import HookStatus, MessageLevel
from ironclaude.utils.config_loader import IronConfig


BRAKEMAN_REPORT = {
    "scan_info": {"brakeman_version": "6.1.2"},
    "warnings": [
        {
            "warning_type": "SQL Injection",
            "message": "Possible SQL injection",
            "confidence": "High",
            "file": "app/models/user.rb",
            "line": 12,
            "code": "where(\"name = #{params[:name]}\")",
        }
    ],
    "errors": [],
}


def write_output(report):
    """Side effect writing a report to the path after --output."""
    def on_run(args):
        output = Path(args[args.index("--output") + 1])
        output.write_text(report if isinstance(report, str) else json.dumps(report))
    return on_run


class TestParseReport:
    def test_parses_warnings(self):
        report = parse_report(json.dumps(BRAKEMAN_REPORT))

        assert len(report.warnings) == 1
        assert report.warnings[0].format() == (
            "[High] SQL Injection: Possible SQL injection\n   File: app/models/user.rb:12"
        )

    def test_missing_sections_default_to_empty(self):
        report = parse_report("{}")

        assert report.warnings == []
        assert report.errors == []

    def test_invalid_json_raises_value_error(self):
        with pytest.raises(ValueError):
            parse_report("not json")


class TestBrakemanScan:
    """Tests for brakeman_scan()."""

    def test_missing_brakeman_is_soft(self, rails_project, fake_tools):
        fake_tools(security, available=False)

        outcome = brakeman_scan(rails_project)

        assert outcome.status == HookStatus.SKIPPED
        assert "   Install with: gem install brakeman" in outcome.texts
        assert outcome.exit_code(strict=True) == 0

    def test_non_rails_project(self, tmp_path, fake_tools):
        runner = fake_tools(security)

        outcome = brakeman_scan(tmp_path)

        assert outcome.status == HookStatus.SKIPPED
        assert "Not a Rails project. Brakeman requires Rails." in outcome.texts
        assert runner.calls == []

    def test_command_line(self, rails_project, fake_tools):
        runner = fake_tools(security, on_run=write_output({"warnings": [], "errors": []}))

        brakeman_scan(rails_project)

        args = runner.calls[0]["args"]
        assert args[:3] == ["brakeman", "--format", "json"]
        assert args[-2:] == ["--quiet", "--no-pager"]
        assert runner.calls[0]["cwd"] == rails_project

    def test_clean_scan_saves_report(self, rails_project, fake_tools):
        fake_tools(security, on_run=write_output({"warnings": [], "errors": []}))

        outcome = brakeman_scan(rails_project)

        assert outcome.status == HookStatus.PASSED
        assert "No security warnings found!" in outcome.texts
        report_path = rails_project / "tmp" / "brakeman-report.json"
        assert json.loads(report_path.read_text()) == {"warnings": [], "errors": []}
        assert "📋 Full report saved to: tmp/brakeman-report.json" in outcome.texts

    def test_warnings_are_listed(self, rails_project, fake_tools):
        # Brakeman exits non-zero when it finds warnings
        fake_tools(security, returncode=3, on_run=write_output(BRAKEMAN_REPORT))

        outcome = brakeman_scan(rails_project)

        assert outcome.status == HookStatus.ISSUES
        assert outcome.details["warnings"] == 1
        assert "   Warnings: 1" in outcome.texts
        assert any(text.startswith("[High] SQL Injection") for text in outcome.texts)
        assert outcome.exit_code() == 0
        assert outcome.exit_code(strict=True) == 1

    def test_failure_without_report(self, rails_project, fake_tools):
        fake_tools(security, returncode=1, stderr="Please supply the path to a Rails application")

        outcome = brakeman_scan(rails_project)

        assert outcome.status == HookStatus.ERROR
        assert outcome.texts[-1] == "Brakeman scan failed"
        assert not (rails_project / "tmp" / "brakeman-report.json").exists()

    def test_unparseable_report_is_relayed(self, rails_project, fake_tools):
        fake_tools(security, on_run=write_output("<html>oops</html>"))

        outcome = brakeman_scan(rails_project)

        assert outcome.status == HookStatus.ERROR
        assert "<html>oops</html>" in outcome.texts

    def test_custom_report_location(self, rails_project, fake_tools):
        fake_tools(security, on_run=write_output({"warnings": []}))
        config = IronConfig(brakeman_report="log/security/brakeman.json")

        outcome = brakeman_scan(rails_project, config)

        assert (rails_project / "log" / "security" / "brakeman.json").is_file()
        assert outcome.details["report_path"].endswith("brakeman.json")


class TestAnalyzeQueries:
    """Tests for analyze_queries()."""

    def test_non_rails_project(self, tmp_path):
        outcome = analyze_queries(tmp_path)

        assert outcome.status == HookStatus.SKIPPED
        assert outcome.messages[-1].level == MessageLevel.ERROR
        assert outcome.exit_code() == 0

    def test_clean_app(self, rails_project):
        outcome = analyze_queries(rails_project)

        assert outcome.details["suspects"] == 0
        assert "   Potential N+1 patterns: 0" in outcome.texts

    def test_controller_all_and_view_iteration(self, rails_project):
        controllers = rails_project / "app" / "controllers"
        controllers.mkdir(parents=True)
        (controllers / "users_controller.rb").write_text(
            "class UsersController\n  def index\n    @users = User.all\n  end\nend\n"
        )
        views = rails_project / "app" / "views" / "users"
        views.mkdir(parents=True)
        (views / "index.html.erb").write_text("<% @users.each do |user| %>\n<%= user.posts.count %>\n<% end %>\n")

        outcome = analyze_queries(rails_project)

        assert outcome.details["suspects"] == 2
        assert outcome.status == HookStatus.ISSUES
        assert "app/controllers/users_controller.rb:3:    @users = User.all" in outcome.texts
        assert "app/views/users/index.html.erb:1:<% @users.each do |user| %>" in outcome.texts

    def test_all_with_scope_is_not_flagged(self, rails_project):
        controllers = rails_project / "app" / "controllers"
        controllers.mkdir(parents=True)
        (controllers / "posts_controller.rb").write_text("@posts = Post.all.includes(:author)\n")

        outcome = analyze_queries(rails_project)

        assert outcome.details["suspects"] == 0

    def test_matches_capped_per_file(self, rails_project):
        controllers = rails_project / "app" / "controllers"
        controllers.mkdir(parents=True)
        (controllers / "big_controller.rb").write_text("x = Thing.all\n" * 5)

        outcome = analyze_queries(rails_project, IronConfig(query_scan_max_matches=2))

        listing = next(m.text for m in outcome.messages if m.level == MessageLevel.OUTPUT)
        assert len(listing.splitlines()) == 2


class TestLintShell:
    """Tests for lint_shell() and script discovery."""

    @pytest.fixture
    def repo(self, tmp_path):
        (tmp_path / "scripts").mkdir()
        (tmp_path / "scripts" / "a.sh").write_text("echo a\n")
        (tmp_path / "b.sh").write_text("echo b\n")
        (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
        (tmp_path / "node_modules" / "pkg" / "c.sh").write_text("echo c\n")
        (tmp_path / ".git" / "hooks").mkdir(parents=True)
        (tmp_path / ".git" / "hooks" / "d.sh").write_text("echo d\n")
        return tmp_path

    def test_discovery_skips_excluded_dirs(self, repo):
        scripts = find_shell_scripts(repo, ["node_modules", ".git"])

        assert [p.relative_to(repo).as_posix() for p in scripts] == ["b.sh", "scripts/a.sh"]

    def test_missing_shellcheck_is_soft(self, repo, fake_tools):
        fake_tools(shell_lint, available=False)

        outcome = lint_shell(repo)

        assert outcome.status == HookStatus.SKIPPED
        assert "  Fedora:  sudo dnf install shellcheck" in outcome.texts
        assert outcome.exit_code(strict=True) == 0

    def test_no_scripts(self, tmp_path, fake_tools):
        fake_tools(shell_lint)

        outcome = lint_shell(tmp_path)

        assert outcome.texts[-1] == "No shell scripts found"

    def test_all_pass(self, repo, fake_tools):
        runner = fake_tools(shell_lint)

        outcome = lint_shell(repo)

        assert len(runner.calls) == 2
        assert "Valid: ./b.sh" in outcome.texts
        assert "📊 Results: 2/2 scripts passed" in outcome.texts
        assert outcome.texts[-1] == "All scripts passed"

    def test_failures_counted(self, repo, fake_tools):
        fake_tools(shell_lint, returncode=1, stdout="SC2148: Tips depend on target shell")

        outcome = lint_shell(repo)

        assert outcome.details == {"total": 2, "failed": 2}
        assert "📊 Results: 0/2 scripts passed" in outcome.texts
        assert "2 script(s) failed ShellCheck" in outcome.texts
        assert outcome.exit_code() == 0
        assert outcome.exit_code(strict=True) == 1

"""
Lifecycle hooks run by the plugin host.

SessionStart:
- load_milestone()     - surface the active milestone, export MILESTONE

PostToolUse (Write|Edit):
- rubocop_check()      - auto-format Ruby files
- shellcheck_lint()    - lint shell scripts
- run_changed_test()   - run an edited Minitest/RSpec file
"""

from .milestone_context import load_milestone, format_exports, write_exports
from .rubocop import rubocop_check
from .shellcheck import shellcheck_lint
from .changed_tests import run_changed_test, runner_args_for
from .targets import resolve_target

__all__ = [
    # SessionStart
    "load_milestone",
    "format_exports",
    "write_exports",
    # PostToolUse
    "rubocop_check",
    "shellcheck_lint",
    "run_changed_test",
    "runner_args_for",
    "resolve_target",
]

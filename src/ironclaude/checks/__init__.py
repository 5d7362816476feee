"""
On-demand checks backing the plugin's skills and dev scripts.

- brakeman_scan()    - rails-security-audit skill
- analyze_queries()  - performance-analysis skill
- lint_shell()       - ShellCheck over every script in the repo
"""

from .security import brakeman_scan, parse_report
from .queries import analyze_queries, scan_pattern, N_PLUS_ONE_PATTERNS
from .shell_lint import lint_shell, find_shell_scripts

__all__ = [
    "brakeman_scan",
    "parse_report",
    "analyze_queries",
    "scan_pattern",
    "N_PLUS_ONE_PATTERNS",
    "lint_shell",
    "find_shell_scripts",
]

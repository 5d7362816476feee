"""
Iron Claude - hook and skill programs for a Rails TDD assistant plugin.

The plugin's personas, slash commands and skills are markdown read by the
host. This package implements the executable parts: lifecycle hooks, skill
checks and the milestone store they share.
"""

__version__ = "0.4.0"

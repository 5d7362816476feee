"""Utility functions."""

from .config_loader import IronConfig, ToolSettings, load_config
from .structured_logging import StructuredFormatter, setup_structured_logging
from .tool_runner import ToolRun, find_tool, run_tool, tool_args

__all__ = [
    "IronConfig",
    "ToolSettings",
    "load_config",
    "StructuredFormatter",
    "setup_structured_logging",
    "ToolRun",
    "find_tool",
    "run_tool",
    "tool_args",
]

"""
Entry point for running iron-claude as a module.

Usage:
    python -m ironclaude <command> [args...]
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())

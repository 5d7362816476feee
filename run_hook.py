#!/usr/bin/env python3
"""
Iron Claude hook runner for plugin checkouts without an installed package.

Usage:
    python3 run_hook.py load-milestone
    python3 run_hook.py rubocop-check app/models/user.rb
    python3 run_hook.py brakeman-scan --strict
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from ironclaude.cli import main

if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
roundme: rounding direction analysis for arithmetic formulas

Main entry point for the CLI interface.

Usage:
    python main.py init-sample [config.yaml]
    python main.py analyze [config.yaml] [--output-format text|pdf]
"""

import sys
from pathlib import Path

# Ensure project root is on sys.path
sys.path.insert(0, str(Path(__file__).parent.absolute()))

from roundme.cli.main import main

if __name__ == "__main__":
    sys.exit(main())

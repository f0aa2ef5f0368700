#!/usr/bin/env python3
"""
Batch verification entry point for running from a source checkout.
Equivalent to the installed ``mcmas-batch`` command.
"""

import sys
from pathlib import Path

# Add src to Python path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from mcmas_runner.presentation.cli import main

if __name__ == '__main__':
    sys.exit(main())

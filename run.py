#!/usr/bin/env python3
"""
ATM Simulator Entry Point

Starts an interactive ATM session against the configured data file.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from atm_simulator.cli import main


if __name__ == "__main__":
    try:
        sys.exit(main(sys.argv[1:]))
    except KeyboardInterrupt:
        print("\nThank you. Goodbye.")

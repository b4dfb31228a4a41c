#!/usr/bin/env python3
"""
Launcher for running from a checkout without installing.
Adds src/ to the path, then hands the CLI arguments to main().

    python run.py --source mock --rounds 5
"""
import os
import sys

# Add src to path FIRST
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

if __name__ == "__main__":
    from main import main

    sys.exit(main(sys.argv[1:]))

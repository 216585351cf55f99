#!/usr/bin/env python3
"""
Entry point for the Calculator application.

Run from the repository root:

    python main.py

or, after `pip install .`, use the `calcplot` command.
"""
import sys
from pathlib import Path

# Ensure the repo root is on sys.path so the calcplot package imports without installing
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from calcplot.frontend.gui import main

if __name__ == "__main__":
    main()

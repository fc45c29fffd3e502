#!/usr/bin/env python3
"""Domino - Standalone Desktop Application.

Launcher for running from a source checkout without installing.

Usage:
    python main.py [FILE] [--config PATH] [--debug]   # from project root
"""
import sys
from pathlib import Path

# Ensure the project root (this file's directory) is on sys.path so that
# `import domino` works regardless of the current directory.
_root = str(Path(__file__).resolve().parent)
if _root not in sys.path:
    sys.path.insert(0, _root)

from domino.main import main  # noqa: E402

if __name__ == '__main__':
    main()

#!/usr/bin/env python3
"""Domino - Standalone Desktop Application.

A node-diagram editor: boxes on an infinite canvas, connected by directed
edges, saved as JSON. Built with PySide6.

Usage:
    python -m domino.main [FILE] [--config PATH] [--debug]
    python domino/main.py [FILE] [--config PATH] [--debug]
"""
import argparse
import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

# Allow running as a script (python domino/main.py) in addition to running
# as a module (python -m domino.main).  When executed directly, __package__
# is None or empty, so we set it and ensure the parent directory is on
# sys.path so that relative imports within the package work.
if not __package__:
    _parent = str(Path(__file__).resolve().parent.parent)
    if _parent not in sys.path:
        sys.path.insert(0, _parent)
    __package__ = "domino"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Domino - node diagram editor')
    parser.add_argument('file', nargs='?', default=None,
                        help='Board file (.json) to open at start-up')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to settings.json (default: ~/.config/domino/settings.json)')
    parser.add_argument('--debug', action='store_true',
                        help='Log board operations at DEBUG level')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format='[%(name)s] %(levelname)s: %(message)s',
    )

    app = QApplication(sys.argv[:1])

    # Set application style
    app.setStyle('Fusion')
    app.setApplicationName('Domino')

    # Widgets are imported once the QApplication exists
    from .core.settings import Settings
    from .app import App
    main_window = App(settings=Settings(args.config), initial_path=args.file)
    main_window.show()

    sys.exit(app.exec())


if __name__ == '__main__':
    main()

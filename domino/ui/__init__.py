"""PySide6 widgets: the board canvas, the top bar and modal dialogs."""

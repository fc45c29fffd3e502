"""Modal dialogs for Domino."""

from typing import Optional

from PySide6.QtWidgets import QColorDialog, QMessageBox
from PySide6.QtGui import QColor


def confirm_discard(parent) -> bool:
    """Ask before throwing away unsaved changes. True = go ahead and discard."""
    answer = QMessageBox.warning(
        parent, 'Unsaved Changes',
        'The board has unsaved changes. Discard them?',
        QMessageBox.Discard | QMessageBox.Cancel,
        QMessageBox.Cancel,
    )
    return answer == QMessageBox.Discard


def pick_color(parent, initial_hex: Optional[str] = None) -> Optional[str]:
    """Show the system colour picker. Returns 'RRGGBB' or None if cancelled."""
    initial = QColor(f'#{initial_hex}') if initial_hex else QColor('#ffffff')
    color = QColorDialog.getColor(initial, parent, 'Node Color')
    if not color.isValid():
        return None
    return color.name()[1:].upper()


def show_load_error(parent, path: str):
    QMessageBox.warning(parent, 'Open Failed',
                        f'Could not open board:\n{path}\n\n'
                        'The file is missing, unreadable or not a Domino board.')


def show_save_error(parent, path: str):
    QMessageBox.critical(parent, 'Save Failed', f'Could not write board to:\n{path}')

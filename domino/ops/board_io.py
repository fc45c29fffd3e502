"""Board new/save/load operations."""

import logging

from ..state import BoardFormatError

log = logging.getLogger(__name__)


def new_board(state):
    """Discard the board and its history."""
    state.reset()
    state.notify('new_board')


def save_board(state, path: str) -> bool:
    """Write the board to a JSON file.

    Returns False if the file could not be written; the board is left dirty.
    """
    try:
        with open(path, 'w') as f:
            f.write(state.to_json())
    except OSError as e:
        log.warning("Failed to save board to %s: %s", path, e)
        return False
    state.file_path = str(path)
    state.dirty = False
    log.debug("Saved %d node(s) to %s", len(state.nodes), path)
    state.notify('save')
    return True


def load_board(state, path: str) -> bool:
    """Replace the board with the contents of a JSON file.

    An unreadable or malformed file leaves the live board untouched and
    returns False.
    """
    try:
        with open(path) as f:
            text = f.read()
        state.load_json(text)
    except (OSError, UnicodeDecodeError, BoardFormatError) as e:
        log.warning("Failed to load board from %s: %s", path, e)
        return False
    state.file_path = str(path)
    state.dirty = False
    log.debug("Loaded %d node(s) from %s", len(state.nodes), path)
    state.notify('file_loaded')
    return True

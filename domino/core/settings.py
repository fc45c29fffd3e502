"""User-facing settings - persisted to ~/.config/domino/settings.json.

Covers editing behaviour (history depth, add-child spacing, the size assumed
for nodes the canvas has not measured yet) and a couple of UI preferences
(last file-dialog directory, whether to confirm discarding unsaved work).
"""

import json
import logging
from pathlib import Path

log = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / '.config' / 'domino' / 'settings.json'

DEFAULTS = {
    'undo_depth': 50,
    'child_offset': 180.0,          # distance of a tapped-in child from its parent
    'default_node_width': 132.0,    # used until the canvas reports a real size
    'default_node_height': 44.0,
    'last_directory': '',           # empty string = let the dialog decide
    'confirm_discard': True,
}


class Settings:
    def __init__(self, path=None):
        self.path = Path(path) if path else CONFIG_PATH
        self.undo_depth: int = DEFAULTS['undo_depth']
        self.child_offset: float = DEFAULTS['child_offset']
        self.default_node_width: float = DEFAULTS['default_node_width']
        self.default_node_height: float = DEFAULTS['default_node_height']
        self.last_directory: str = DEFAULTS['last_directory']
        self.confirm_discard: bool = DEFAULTS['confirm_discard']
        self._load()

    def _load(self):
        if not self.path.exists():
            return
        try:
            with open(self.path) as f:
                d = json.load(f)
        except (OSError, ValueError) as e:
            # keep defaults on any parse error
            log.debug("Ignoring unreadable settings file %s: %s", self.path, e)
            return
        if not isinstance(d, dict):
            log.debug("Ignoring settings file %s: not a JSON object", self.path)
            return
        # Each key falls back to its default on its own
        self._read(d, 'undo_depth', lambda v: max(1, int(v)))
        self._read(d, 'child_offset', float)
        self._read(d, 'default_node_width', float)
        self._read(d, 'default_node_height', float)
        self._read(d, 'last_directory', str)
        self._read(d, 'confirm_discard', bool)

    def _read(self, d: dict, key: str, convert):
        if key not in d:
            return
        try:
            setattr(self, key, convert(d[key]))
        except (TypeError, ValueError) as e:
            log.debug("Bad value for %s in %s: %s", key, self.path, e)

    def save(self):
        """Persist current settings to the user config file."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w') as f:
                json.dump({
                    'undo_depth': self.undo_depth,
                    'child_offset': self.child_offset,
                    'default_node_width': self.default_node_width,
                    'default_node_height': self.default_node_height,
                    'last_directory': self.last_directory,
                    'confirm_discard': self.confirm_discard,
                }, f, indent=2)
        except OSError as e:
            log.warning("Could not write settings to %s: %s", self.path, e)  # non-fatal

"""Undo/redo system for the board.

Captures value snapshots of the node mapping and allows undo/redo navigation.
A snapshot is pushed *before* each committing mutation; undo swaps the live
graph with the newest snapshot and remembers the live graph for redo.
"""

from typing import Optional


class UndoStack:
    """Manages undo/redo history with snapshots."""

    def __init__(self, max_size: int = 50):
        self.max_size = max_size
        self.undo_stack = []  # oldest first
        self.redo_stack = []

    def can_undo(self) -> bool:
        """Check if undo is available."""
        return bool(self.undo_stack)

    def can_redo(self) -> bool:
        """Check if redo is available."""
        return bool(self.redo_stack)

    def push(self, snapshot: dict):
        """Record the state before a new mutation."""
        self.undo_stack.append(snapshot)

        # Enforce max size
        if len(self.undo_stack) > self.max_size:
            self.undo_stack.pop(0)

        # A new mutation invalidates anything we could redo
        self.redo_stack.clear()

    def undo(self, current: dict) -> Optional[dict]:
        """Stash current for redo and return the snapshot to install."""
        if not self.can_undo():
            return None
        self.redo_stack.append(current)
        return self.undo_stack.pop()

    def redo(self, current: dict) -> Optional[dict]:
        """Stash current for undo and return the snapshot to install."""
        if not self.can_redo():
            return None
        self.undo_stack.append(current)
        return self.redo_stack.pop()

    def clear(self):
        """Clear all history."""
        self.undo_stack = []
        self.redo_stack = []


def capture_state(state) -> dict:
    """Capture a value snapshot of the board's node mapping.

    Does NOT capture:
    - selection / editing state
    - drag offsets, measured sizes
    - file path and dirty flag
    """
    return {nid: node.copy() for nid, node in state.nodes.items()}


def restore_state(state, snapshot: dict):
    """Install a snapshot as the live graph.

    The snapshot is copied again so the history entry stays untouched by
    later edits.  Clears selection and editing state.
    """
    state.nodes = {nid: node.copy() for nid, node in snapshot.items()}
    state.editing_id = None
    state.selected_id = None
    state.selected_edge_id = None

    # Drop transient entries that reference vanished nodes
    for nid in list(state.drag_offsets):
        if nid not in state.nodes:
            del state.drag_offsets[nid]
    for nid in list(state.node_sizes):
        if nid not in state.nodes:
            del state.node_sizes[nid]
    if state.drop_target_id not in state.nodes:
        state.drop_target_id = None

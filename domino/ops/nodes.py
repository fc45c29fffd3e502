"""Node create / move / edit / delete operations.

Every committing operation snapshots history first (one undo step per
discrete action).  Text edits and drag frames do not: text changes arrive per
keystroke, and a drag only commits once, on release.

Unknown ids are a silent no-op: no snapshot, no notification, and a False /
None return so callers that care can tell.
"""

import logging
from typing import Optional

from ..core.routing import Side
from ..state import Node, normalize_hex

log = logging.getLogger(__name__)

_SIDE_VECTORS = {
    Side.TOP:    (0.0, -1.0),
    Side.BOTTOM: (0.0, 1.0),
    Side.LEFT:   (-1.0, 0.0),
    Side.RIGHT:  (1.0, 0.0),
}


def _commit(state, source):
    state.dirty = True
    state.notify(source)


def add_node(state, x, y):
    """Create an empty, parentless node at (x, y) and start editing it. Returns its id."""
    state.checkpoint()
    node = Node(x=float(x), y=float(y))
    state.nodes[node.node_id] = node
    state.editing_id = node.node_id
    log.debug("add_node %s at (%.1f, %.1f)", node.node_id, node.x, node.y)
    _commit(state, 'add_node')
    return node.node_id


def add_child_node(state, parent_id, side: Side, drop_point=None) -> Optional[str]:
    """Create a child of parent_id.

    Placed at drop_point if given, else state.child_offset away from the
    parent on the given side.  Returns the new id, or None if the parent is
    unknown.
    """
    parent = state.find_node(parent_id)
    if parent is None:
        return None
    state.checkpoint()

    if drop_point is not None:
        x, y = float(drop_point[0]), float(drop_point[1])
    else:
        vx, vy = _SIDE_VECTORS[Side(side)]
        x = parent.x + vx * state.child_offset
        y = parent.y + vy * state.child_offset

    child = Node(x=x, y=y, parent_ids={parent_id})
    state.nodes[child.node_id] = child
    state.editing_id = child.node_id
    log.debug("add_child_node %s under %s at (%.1f, %.1f)", child.node_id, parent_id, x, y)
    _commit(state, 'add_child_node')
    return child.node_id


def move_node(state, node_id, x, y) -> bool:
    """Commit a node's new position."""
    node = state.find_node(node_id)
    if node is None:
        return False
    state.checkpoint()
    node.x, node.y = float(x), float(y)
    _commit(state, 'move_node')
    return True


def set_color(state, node_id, hex_value) -> bool:
    """Set or clear (None / '') a node's colour override."""
    node = state.find_node(node_id)
    if node is None:
        return False
    state.checkpoint()
    node.color_hex = normalize_hex(hex_value)
    _commit(state, 'set_color')
    return True


def set_text(state, node_id, text) -> bool:
    """Overwrite a node's label. Not an undo step."""
    node = state.find_node(node_id)
    if node is None:
        return False
    node.text = text
    _commit(state, 'set_text')
    return True


def delete_node(state, node_id) -> bool:
    """Delete a node, reparenting its children onto its own parents.

    Every node that listed node_id as a parent gets node_id replaced by the
    deleted node's parent set, so ancestors still reach the grandchildren.
    """
    node = state.find_node(node_id)
    if node is None:
        return False
    state.checkpoint()

    grandparents = node.parent_ids - {node_id}
    for other in state.nodes.values():
        if other is not node and node_id in other.parent_ids:
            other.parent_ids.discard(node_id)
            other.parent_ids |= grandparents
    del state.nodes[node_id]

    if state.editing_id == node_id:
        state.editing_id = None
    if state.selected_id == node_id:
        state.selected_id = None
    if state.selected_edge_id and node_id in state.selected_edge_id.split('>'):
        state.selected_edge_id = None
    state.drag_offsets.pop(node_id, None)
    state.node_sizes.pop(node_id, None)

    log.debug("delete_node %s (reparented onto %d parent(s))", node_id, len(grandparents))
    _commit(state, 'delete_node')
    return True


def commit_editing(state):
    """Leave label-editing mode."""
    if state.editing_id is not None:
        state.editing_id = None
        state.notify('commit_editing')


# ---- Transient drag updates (no history) ----

def drag_node(state, node_id, dx, dy):
    """Record an in-flight drag translation for a node."""
    if node_id not in state.nodes:
        return
    state.drag_offsets[node_id] = (float(dx), float(dy))
    state.notify('transient')


def end_node_drag(state, node_id) -> bool:
    """Drop the drag offset and commit the final position, if it moved."""
    dx, dy = state.drag_offsets.pop(node_id, (0.0, 0.0))
    node = state.find_node(node_id)
    if node is None:
        return False
    if dx == 0 and dy == 0:
        state.notify('transient')
        return False
    return move_node(state, node_id, node.x + dx, node.y + dy)

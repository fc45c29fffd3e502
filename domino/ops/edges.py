"""Connection operations: toggle, drop-to-connect, delete, and edge drags.

Connections live on the child: an edge parent→child exists while the
parent's id is in child.parent_ids.  Nothing here rejects cycles.
"""

import logging
from typing import Optional

from ..core.routing import Side
from ..state import Edge, EdgeDrag
from .nodes import add_child_node, delete_node

log = logging.getLogger(__name__)


def toggle_connection(state, source_id, target_id) -> bool:
    """Connect source→target, or disconnect if already connected.

    Returns False (and does nothing) if either node is unknown or they are
    the same node.  Applying it twice restores the original adjacency.
    """
    if target_id is None or target_id == source_id:
        return False
    target = state.find_node(target_id)
    if target is None or source_id not in state.nodes:
        return False
    state.checkpoint()
    if source_id in target.parent_ids:
        target.parent_ids.discard(source_id)
        log.debug("disconnect %s -> %s", source_id, target_id)
    else:
        target.parent_ids.add(source_id)
        log.debug("connect %s -> %s", source_id, target_id)
    state.dirty = True
    state.notify('toggle_connection')
    return True


def handle_edge_drop(state, source_id, x, y) -> bool:
    """Toggle a connection to whichever node lies under (x, y).

    Returns False if the point is not over a node other than the source.
    """
    target_id = state.node_at((x, y), excluding=source_id)
    if target_id is None:
        return False
    return toggle_connection(state, source_id, target_id)


def delete_edge(state, parent_id, child_id) -> bool:
    """Remove the parent→child link if it exists."""
    child = state.find_node(child_id)
    if child is None or parent_id not in child.parent_ids:
        return False
    state.checkpoint()
    child.parent_ids.discard(parent_id)
    if state.selected_edge_id == Edge(parent_id, child_id).id:
        state.selected_edge_id = None
    log.debug("delete_edge %s -> %s", parent_id, child_id)
    state.dirty = True
    state.notify('delete_edge')
    return True


def delete_selection(state) -> bool:
    """Delete the selected node, else the selected edge. Ignored while editing."""
    if state.editing_id is not None:
        return False
    if state.selected_id is not None:
        nid = state.selected_id
        state.selected_id = None
        return delete_node(state, nid)
    if state.selected_edge_id is not None:
        edge = Edge.from_id(state.selected_edge_id)
        state.selected_edge_id = None
        if edge is None:
            return False
        return delete_edge(state, edge.parent_id, edge.child_id)
    return False


# ---- Edge drag from a node's plus handle (transient until release) ----

def update_edge_drag(state, source_id, side: Side, x, y):
    """Move the preview edge and track which node would receive the drop."""
    if source_id not in state.nodes:
        return
    state.edge_drag = EdgeDrag(source_id, Side(side), float(x), float(y))
    state.drop_target_id = state.node_at((x, y), excluding=source_id)
    state.notify('transient')


def cancel_edge_drag(state):
    if state.edge_drag is not None or state.drop_target_id is not None:
        state.edge_drag = None
        state.drop_target_id = None
        state.notify('transient')


def finish_edge_drag(state, source_id, side: Side, x, y) -> Optional[str]:
    """End an edge drag at (x, y).

    Dropped on a node: toggle the connection and return None.  Dropped on
    empty canvas: create a child of the source there and return its id.
    """
    state.edge_drag = None
    state.drop_target_id = None
    if handle_edge_drop(state, source_id, x, y):
        return None
    new_id = add_child_node(state, source_id, side, drop_point=(x, y))
    if new_id is None:
        state.notify('transient')
    return new_id

"""Degree (layering) computation for the board.

A node's degree is the minimum number of parent→child hops from any root.
Roots are nodes with no live parent; they have degree 0.  Nodes that no root
can reach (a parentless cycle, a node that is its own parent) get no degree
and are absent from the result.

Relaxation re-enqueues a node only when it is reached with a strictly
smaller degree, so degrees only ever decrease and the traversal terminates
even when parent links form a cycle.
"""

from __future__ import annotations

from collections import deque


def children_map(nodes: dict) -> dict[str, list[str]]:
    """Forward adjacency parent_id → [child_id], live parents only."""
    children: dict[str, list[str]] = {}
    for node in nodes.values():
        for pid in node.parent_ids:
            if pid in nodes:
                children.setdefault(pid, []).append(node.node_id)
    for kids in children.values():
        kids.sort()
    return children


def root_ids(nodes: dict) -> list[str]:
    return [nid for nid, n in nodes.items()
            if not any(pid in nodes for pid in n.parent_ids)]


def compute_degrees(nodes: dict) -> dict[str, int]:
    """Map node_id → degree for every node reachable from a root."""
    children = children_map(nodes)
    degrees: dict[str, int] = {}
    queue: deque[str] = deque()
    for rid in root_ids(nodes):
        degrees[rid] = 0
        queue.append(rid)

    while queue:
        current = queue.popleft()
        d = degrees[current] + 1
        for child in children.get(current, ()):
            if child not in degrees or d < degrees[child]:
                degrees[child] = d
                queue.append(child)
    return degrees

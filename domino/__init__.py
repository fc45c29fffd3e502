"""Domino node-diagram editor.

Public surface:
  BoardState, Node, Edge     – the live board and its primitives
  BoardFormatError           – raised for undecodable board files
  compute_degrees            – root distance per node
  route_edge, EdgeGeometry   – edge routing geometry
  node_at                    – point-in-node query
  UndoStack                  – snapshot history
"""

from .state import BoardState, Node, Edge, EdgeDrag, BoardFormatError, PRESET_COLORS
from .core.degrees import compute_degrees
from .core.routing import (
    Point, Size, Rect, Side, EdgeGeometry, route_edge, side_from_angle,
    border_point, DEFAULT_NODE_SIZE,
)
from .core.hit_test import node_at
from .undo import UndoStack

__all__ = [
    "BoardState", "Node", "Edge", "EdgeDrag", "BoardFormatError", "PRESET_COLORS",
    "compute_degrees", "Point", "Size", "Rect", "Side", "EdgeGeometry",
    "route_edge", "side_from_angle", "border_point", "DEFAULT_NODE_SIZE",
    "node_at", "UndoStack",
]

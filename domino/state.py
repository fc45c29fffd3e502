"""Central board state for Domino.

Owns the node mapping (the only persisted data), derives edges and degrees on
read, and carries the transient display state the canvas needs while a
gesture is in flight.  Supports an observer pattern for UI updates and JSON
serialization of the board file format.

Board file format, a JSON array of node records:

  [{"id": "<uuid>", "text": "...", "position": {"x": 0.0, "y": 0.0},
    "parentIDs": ["<uuid>", ...], "colorHex": "RRGGBB" | null}]
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable, Optional

from .core.degrees import compute_degrees
from .core.hit_test import node_at
from .core.routing import DEFAULT_NODE_SIZE, Point, Side, Size
from .undo import UndoStack, capture_state, restore_state

log = logging.getLogger(__name__)


# Preset node colours offered by the colour menu
PRESET_COLORS = [
    ('Green',  '61BD4F'),
    ('Yellow', 'F2D600'),
    ('Orange', 'FF9F1A'),
    ('Red',    'EB5A46'),
    ('Blue',   '0079BF'),
]


class BoardFormatError(ValueError):
    """Raised when a board file cannot be decoded."""


def normalize_hex(hex_value: Optional[str]) -> Optional[str]:
    """'#61bd4f' → '61BD4F'; None / '' → None."""
    if not hex_value:
        return None
    h = hex_value.strip().lstrip('#').upper()
    return h or None


@dataclass
class Node:
    node_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    text: str = ''
    x: float = 0.0
    y: float = 0.0
    parent_ids: set = field(default_factory=set)
    color_hex: Optional[str] = None

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)

    def copy(self) -> "Node":
        return Node(node_id=self.node_id, text=self.text, x=self.x, y=self.y,
                    parent_ids=set(self.parent_ids), color_hex=self.color_hex)

    def to_dict(self) -> dict:
        return {
            'id': self.node_id,
            'text': self.text,
            'position': {'x': self.x, 'y': self.y},
            'parentIDs': sorted(self.parent_ids),
            'colorHex': self.color_hex,
        }

    @staticmethod
    def from_dict(d: dict) -> "Node":
        """Build a Node from a file record. Raises BoardFormatError on bad input."""
        if not isinstance(d, dict):
            raise BoardFormatError(f"Node record must be an object, got {type(d).__name__}")
        try:
            node_id = d['id']
            pos = d['position']
            x, y = float(pos['x']), float(pos['y'])
        except (KeyError, TypeError, ValueError) as e:
            raise BoardFormatError(f"Bad node record {d!r}: {e}") from e
        text = d.get('text', '')
        parents = d.get('parentIDs', [])
        color = d.get('colorHex')
        if not isinstance(node_id, str) or not isinstance(text, str):
            raise BoardFormatError(f"Bad id or text in node record {d!r}")
        if not isinstance(parents, list) or not all(isinstance(p, str) for p in parents):
            raise BoardFormatError(f"parentIDs must be a list of strings in {node_id}")
        if color is not None and not isinstance(color, str):
            raise BoardFormatError(f"colorHex must be a string or null in {node_id}")
        return Node(node_id=node_id, text=text, x=x, y=y,
                    parent_ids=set(parents), color_hex=normalize_hex(color))


@dataclass(frozen=True)
class Edge:
    parent_id: str
    child_id: str

    @property
    def id(self) -> str:
        return f'{self.parent_id}>{self.child_id}'

    @staticmethod
    def from_id(edge_id: str) -> Optional["Edge"]:
        parts = edge_id.split('>')
        if len(parts) != 2 or not all(parts):
            return None
        return Edge(parts[0], parts[1])


@dataclass
class EdgeDrag:
    """A prospective edge being dragged out of a node's plus handle."""
    source_id: str
    side: Side
    x: float
    y: float


class BoardState:
    """The live board: nodes, history, transient gesture state, listeners."""

    def __init__(self, undo_depth: int = 50, default_node_size: Size = DEFAULT_NODE_SIZE,
                 child_offset: float = 180.0):
        self.nodes: dict[str, Node] = {}
        self.history = UndoStack(max_size=undo_depth)
        self.default_node_size = Size(*default_node_size)
        self.child_offset = child_offset

        # Transient / display-only
        self.editing_id: Optional[str] = None
        self.selected_id: Optional[str] = None
        self.selected_edge_id: Optional[str] = None
        self.drag_offsets: dict[str, tuple[float, float]] = {}
        self.node_sizes: dict[str, Size] = {}
        self.edge_drag: Optional[EdgeDrag] = None
        self.drop_target_id: Optional[str] = None

        self.file_path: Optional[str] = None
        self.dirty = False

        self._listeners: list[Callable] = []

    @classmethod
    def from_settings(cls, settings) -> "BoardState":
        return cls(
            undo_depth=settings.undo_depth,
            default_node_size=Size(settings.default_node_width,
                                   settings.default_node_height),
            child_offset=settings.child_offset,
        )

    # Observer
    def on_change(self, callback: Callable):
        self._listeners.append(callback)

    def notify(self, source=None):
        for cb in self._listeners:
            cb(source)

    def find_node(self, node_id) -> Optional[Node]:
        return self.nodes.get(node_id)

    # Derived views
    def edges(self) -> list[Edge]:
        """Parent→child pairs whose parent is live. Dangling parents are skipped."""
        return [Edge(pid, child.node_id)
                for child in self.nodes.values()
                for pid in sorted(child.parent_ids)
                if pid in self.nodes]

    def degrees(self) -> dict[str, int]:
        return compute_degrees(self.nodes)

    def effective_position(self, node_id) -> Point:
        node = self.nodes.get(node_id)
        if node is None:
            return Point(0.0, 0.0)
        dx, dy = self.drag_offsets.get(node_id, (0.0, 0.0))
        return Point(node.x + dx, node.y + dy)

    def node_size(self, node_id) -> Size:
        return self.node_sizes.get(node_id, self.default_node_size)

    def set_node_size(self, node_id, width: float, height: float):
        """Record the size the renderer measured for a node."""
        self.node_sizes[node_id] = Size(width, height)

    def node_at(self, point, excluding: Optional[str] = None) -> Optional[str]:
        rects = ((nid, self.effective_position(nid), self.node_size(nid))
                 for nid in self.nodes)
        return node_at(rects, point, excluding)

    # History
    def checkpoint(self):
        """Snapshot the graph before a committing mutation."""
        self.history.push(capture_state(self))

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def undo(self) -> bool:
        snapshot = self.history.undo(capture_state(self))
        if snapshot is None:
            return False
        restore_state(self, snapshot)
        self.dirty = True
        log.debug("undo (%d left)", len(self.history.undo_stack))
        self.notify('undo')
        return True

    def redo(self) -> bool:
        snapshot = self.history.redo(capture_state(self))
        if snapshot is None:
            return False
        restore_state(self, snapshot)
        self.dirty = True
        log.debug("redo (%d left)", len(self.history.redo_stack))
        self.notify('redo')
        return True

    def clear_transient(self):
        self.editing_id = None
        self.selected_id = None
        self.selected_edge_id = None
        self.drag_offsets.clear()
        self.edge_drag = None
        self.drop_target_id = None

    def reset(self):
        """Empty board, no history, no file."""
        self.nodes = {}
        self.history.clear()
        self.clear_transient()
        self.node_sizes.clear()
        self.file_path = None
        self.dirty = False

    # Serialization
    def to_json(self) -> str:
        return json.dumps([n.to_dict() for n in self.nodes.values()], indent=2)

    def load_json(self, text: str):
        """Replace the board with a decoded file.

        The whole document is decoded before anything is touched, so a
        BoardFormatError leaves the live board exactly as it was.
        Duplicate ids are rejected.
        """
        try:
            data = json.loads(text)
        except ValueError as e:
            raise BoardFormatError(f"Not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise BoardFormatError("Board file must contain a JSON array of nodes")
        nodes: dict[str, Node] = {}
        for record in data:
            node = Node.from_dict(record)
            if node.node_id in nodes:
                raise BoardFormatError(f"Duplicate node id {node.node_id}")
            nodes[node.node_id] = node

        self.nodes = nodes
        self.history.clear()
        self.clear_transient()
        self.node_sizes.clear()
        self.notify('load')

"""Board canvas widget.

A QWidget that renders and interacts with a BoardState.  Handles:
  - Pan (middle-mouse or click-drag on empty space)
  - Zoom (mouse wheel)
  - Double-click on empty space to add a node
  - Node click to select; click a selected node to edit its label
  - Node drag (transient offset while dragging, committed on release)
  - Plus handles on the hovered node: tap to add a child on that side,
    drag to preview an edge and drop on a node (toggle connection) or on
    empty space (new child at the drop point)
  - Edge click to select / deselect
  - Right-click on a node for the colour menu

Coordinate spaces:
  scene  – logical canvas coordinates stored in Node.x / .y (node centres)
  view   – screen pixels; scene_to_view / view_to_scene convert between them
"""

from __future__ import annotations

from typing import Optional

from PySide6.QtWidgets import QWidget, QSizePolicy, QMenu, QLineEdit
from PySide6.QtCore import Qt, QPointF, QRectF, Signal
from PySide6.QtGui import (
    QPainter, QPen, QBrush, QColor, QPainterPath,
    QFont, QFontMetrics, QMouseEvent, QWheelEvent, QCursor, QPixmap, QIcon,
    QPolygonF,
)

from ..core.routing import (
    Side, route_edge, EdgeGeometry,
    STROKE_WIDTH, SELECTED_STROKE_WIDTH, HIT_STROKE_WIDTH,
)
from ..ops import nodes as node_ops
from ..ops import edges as edge_ops
from ..state import BoardState, Edge, PRESET_COLORS
from .dialogs import pick_color


# ---------------------------------------------------------------------------
# Visual constants
# ---------------------------------------------------------------------------

NODE_MIN_W      = 100     # minimum label width (scene units)
NODE_PAD_X      = 16
NODE_PAD_Y      = 10
NODE_RADIUS     = 8
PLUS_R          = 9       # plus handle radius
BADGE_R         = 8
DRAG_THRESHOLD  = 3       # px before a press becomes a node drag
EDGE_DRAG_THRESHOLD = 5   # px before a plus-handle press becomes an edge drag
ZOOM_MIN        = 0.2
ZOOM_MAX        = 5.0

# Colours
C_BG            = QColor("#0d1117")
C_GRID          = QColor("#161c27")
C_NODE_BG       = QColor("#1a2236")
C_NODE_BORDER   = QColor("#2a3a5c")
C_ACCENT        = QColor("#3a7bd5")
C_EDGE          = QColor("#8b95a7")
C_PREVIEW       = QColor(58, 123, 213, 128)
C_TEXT          = QColor("#e6e6e6")
C_TEXT_DIM      = QColor("#888888")
C_PLUS_BG       = QColor(230, 230, 230, 40)
C_BADGE_BG      = QColor(230, 230, 230, 20)

FONT_FAMILY     = "Segoe UI"

_SIDES = (Side.TOP, Side.BOTTOM, Side.LEFT, Side.RIGHT)


# ---------------------------------------------------------------------------
# Hit-test result
# ---------------------------------------------------------------------------

class _Hit:
    NONE = "none"
    NODE = "node"
    PLUS = "plus"
    EDGE = "edge"

    def __init__(self, kind=NONE, node_id: str = None, side: Side = None,
                 edge: Edge = None):
        self.kind = kind
        self.node_id = node_id
        self.side = side          # plus handle side
        self.edge = edge


# ---------------------------------------------------------------------------
# Board canvas
# ---------------------------------------------------------------------------

class BoardCanvas(QWidget):
    """Interactive board canvas.

    Signals:
      status_message(str) – short hints for the window's status bar
    """

    status_message = Signal(str)

    def __init__(self, state: BoardState, parent=None):
        super().__init__(parent)
        self.state = state

        self.setFocusPolicy(Qt.StrongFocus)
        self.setMouseTracking(True)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMinimumSize(400, 300)

        # Viewport transform
        self._origin = QPointF(0.0, 0.0)  # scene point at canvas (0,0)
        self._scale  = 1.0

        # Interaction state
        self._pan_start: Optional[QPointF] = None
        self._pan_origin_start: Optional[QPointF] = None
        self._pan_moved = False

        self._press_node: Optional[str] = None
        self._press_scene: QPointF = QPointF()
        self._node_dragging = False

        self._plus_node: Optional[str] = None
        self._plus_side: Optional[Side] = None
        self._edge_dragging = False

        self._hover_node: Optional[str] = None

        # Inline label editor
        self._editor = QLineEdit(self)
        self._editor.setPlaceholderText("Type here...")
        self._editor.setAlignment(Qt.AlignCenter)
        self._editor.setFont(_label_font())
        self._editor.setStyleSheet(
            "background: #0d1117; color: #e6e6e6; "
            "border: 1.5px solid #3a7bd5; border-radius: 6px;")
        self._editor.hide()
        self._editor_node: Optional[str] = None
        self._editor.textEdited.connect(self._on_editor_text)
        self._editor.returnPressed.connect(lambda: node_ops.commit_editing(self.state))

        state.on_change(self._on_state_change)

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def center_on_nodes(self) -> None:
        """Reset zoom and centre the view on the mean node position."""
        self._scale = 1.0
        nodes = list(self.state.nodes.values())
        if not nodes:
            self._origin = QPointF(-self.width() / 2, -self.height() / 2)
        else:
            avg_x = sum(n.x for n in nodes) / len(nodes)
            avg_y = sum(n.y for n in nodes) / len(nodes)
            self._origin = QPointF(avg_x - self.width() / 2,
                                   avg_y - self.height() / 2)
        self.update()

    def zoom_by(self, factor: float) -> None:
        center = self.view_to_scene(QPointF(self.width() / 2, self.height() / 2))
        self._scale = max(ZOOM_MIN, min(ZOOM_MAX, self._scale * factor))
        self._origin = QPointF(center.x() - self.width() / 2 / self._scale,
                               center.y() - self.height() / 2 / self._scale)
        self.update()

    # -----------------------------------------------------------------------
    # Coordinate helpers
    # -----------------------------------------------------------------------

    def scene_to_view(self, p: QPointF) -> QPointF:
        return QPointF(
            (p.x() - self._origin.x()) * self._scale,
            (p.y() - self._origin.y()) * self._scale,
        )

    def view_to_scene(self, p: QPointF) -> QPointF:
        return QPointF(
            p.x() / self._scale + self._origin.x(),
            p.y() / self._scale + self._origin.y(),
        )

    # -----------------------------------------------------------------------
    # Node geometry (scene units)
    # -----------------------------------------------------------------------

    def _measure(self, node_id: str) -> None:
        """Measure a node's label and report its size to the state."""
        node = self.state.find_node(node_id)
        fm = QFontMetrics(_label_font())
        text_w = fm.horizontalAdvance(node.text or " ")
        w = max(text_w, NODE_MIN_W) + NODE_PAD_X * 2
        h = fm.height() + NODE_PAD_Y * 2
        self.state.set_node_size(node_id, w, h)

    def _node_rect(self, node_id: str) -> QRectF:
        c = self.state.effective_position(node_id)
        w, h = self.state.node_size(node_id)
        return QRectF(c.x - w / 2, c.y - h / 2, w, h)

    def _plus_center(self, node_id: str, side: Side) -> QPointF:
        r = self._node_rect(node_id)
        c = r.center()
        if side == Side.TOP:
            return QPointF(c.x(), r.top())
        if side == Side.BOTTOM:
            return QPointF(c.x(), r.bottom())
        if side == Side.LEFT:
            return QPointF(r.left(), c.y())
        return QPointF(r.right(), c.y())

    def _edge_geometry(self, edge: Edge) -> Optional[EdgeGeometry]:
        s = self.state
        return route_edge(s.effective_position(edge.parent_id), s.node_size(edge.parent_id),
                          s.effective_position(edge.child_id), s.node_size(edge.child_id))

    # -----------------------------------------------------------------------
    # Hit testing
    # -----------------------------------------------------------------------

    def _hit_test(self, scene_pos: QPointF) -> _Hit:
        # Plus handles of the hovered node take priority over bodies
        if self._hover_node in self.state.nodes and self.state.editing_id != self._hover_node:
            for side in _SIDES:
                pc = self._plus_center(self._hover_node, side)
                if (scene_pos - pc).manhattanLength() <= PLUS_R * 1.4:
                    return _Hit(_Hit.PLUS, self._hover_node, side)

        nid = self.state.node_at((scene_pos.x(), scene_pos.y()))
        if nid is not None:
            return _Hit(_Hit.NODE, nid)

        pt = (scene_pos.x(), scene_pos.y())
        for edge in self.state.edges():
            geo = self._edge_geometry(edge)
            if geo is not None and geo.hit_test(pt, HIT_STROKE_WIDTH):
                return _Hit(_Hit.EDGE, edge=edge)

        return _Hit()

    # -----------------------------------------------------------------------
    # State observer
    # -----------------------------------------------------------------------

    def _on_state_change(self, source=None) -> None:
        if source in ('file_loaded', 'new_board'):
            self.center_on_nodes()
        self._sync_editor()
        self.update()

    def _sync_editor(self) -> None:
        eid = self.state.editing_id
        if eid is None or eid not in self.state.nodes:
            if self._editor.isVisible():
                self._editor.hide()
                self.setFocus()
            self._editor_node = None
            return
        if self._editor_node != eid:
            self._editor_node = eid
            self._editor.setText(self.state.nodes[eid].text)
            self._editor.show()
            self._editor.setFocus()
        self._place_editor()

    def _place_editor(self) -> None:
        if self._editor_node is None:
            return
        r = self._node_rect(self._editor_node)
        tl = self.scene_to_view(r.topLeft())
        self._editor.setGeometry(int(tl.x()), int(tl.y()),
                                 int(r.width() * self._scale),
                                 int(r.height() * self._scale))

    def _on_editor_text(self, text: str) -> None:
        if self._editor_node is not None:
            node_ops.set_text(self.state, self._editor_node, text)

    # -----------------------------------------------------------------------
    # Paint
    # -----------------------------------------------------------------------

    def paintEvent(self, event):
        for nid in self.state.nodes:
            self._measure(nid)

        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        painter.fillRect(self.rect(), C_BG)
        self._draw_grid(painter)

        if not self.state.nodes:
            painter.setPen(QPen(C_TEXT_DIM))
            painter.setFont(QFont(FONT_FAMILY, 12, QFont.Weight.Medium))
            painter.drawText(self.rect(), Qt.AlignCenter, "Double-click to add a node")

        painter.save()
        painter.translate(-self._origin.x() * self._scale,
                          -self._origin.y() * self._scale)
        painter.scale(self._scale, self._scale)

        self._draw_edges(painter)
        self._draw_preview_edge(painter)
        self._draw_nodes(painter)

        painter.restore()
        self._place_editor()

    def _draw_grid(self, painter: QPainter) -> None:
        pen = QPen(C_GRID)
        pen.setWidth(1)
        painter.setPen(pen)
        step = 40 * self._scale
        ox = (-self._origin.x() * self._scale) % step
        oy = (-self._origin.y() * self._scale) % step
        x = ox
        while x < self.width():
            painter.drawLine(int(x), 0, int(x), self.height())
            x += step
        y = oy
        while y < self.height():
            painter.drawLine(0, int(y), self.width(), int(y))
            y += step

    def _draw_geometry(self, painter: QPainter, geo: EdgeGeometry, color: QColor,
                       width: float, dashed: bool = False) -> None:
        # Each edge paints in its own surface, positioned at its bounds
        b = geo.bounds
        painter.save()
        painter.translate(b.x, b.y)
        geo = geo.translated(-b.x, -b.y)

        pen = QPen(color, width)
        pen.setCapStyle(Qt.RoundCap)
        if dashed:
            pen.setDashPattern([6 / width, 4 / width])
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        painter.drawPath(_curve_path(geo))

        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(color))
        painter.drawPolygon(QPolygonF([QPointF(*p) for p in geo.arrow_polygon()]))
        painter.restore()

    def _draw_edges(self, painter: QPainter) -> None:
        for edge in self.state.edges():
            geo = self._edge_geometry(edge)
            if geo is None:
                continue
            selected = edge.id == self.state.selected_edge_id
            self._draw_geometry(painter, geo,
                                C_ACCENT if selected else C_EDGE,
                                SELECTED_STROKE_WIDTH if selected else STROKE_WIDTH)

    def _draw_preview_edge(self, painter: QPainter) -> None:
        drag = self.state.edge_drag
        if drag is None or drag.source_id not in self.state.nodes:
            return
        geo = route_edge(self.state.effective_position(drag.source_id),
                         self.state.node_size(drag.source_id),
                         (drag.x, drag.y))
        if geo is not None:
            self._draw_geometry(painter, geo, C_PREVIEW, STROKE_WIDTH, dashed=True)

    def _draw_nodes(self, painter: QPainter) -> None:
        degrees = self.state.degrees()
        # Sorted by id for a stable stacking order
        for nid in sorted(self.state.nodes):
            self._draw_node(painter, nid, degrees.get(nid))

    def _draw_node(self, painter: QPainter, nid: str, degree: Optional[int]) -> None:
        node = self.state.nodes[nid]
        r = self._node_rect(nid)
        highlighted = nid in (self.state.selected_id, self.state.drop_target_id)
        color = QColor(f"#{node.color_hex}") if node.color_hex else None

        base = color or (C_ACCENT if highlighted else QColor("#ffffff"))
        fill = QColor(base)
        fill.setAlphaF(0.12 if highlighted else 0.08)
        body = QPainterPath()
        body.addRoundedRect(r, NODE_RADIUS, NODE_RADIUS)
        painter.fillPath(body, C_NODE_BG)
        painter.fillPath(body, fill)

        border = QColor(color or (C_ACCENT if highlighted else C_NODE_BORDER))
        if color is not None:
            border.setAlphaF(0.6 if highlighted else 0.9)
        painter.setPen(QPen(border, 1.5 if color is not None or highlighted else 1.0))
        painter.setBrush(Qt.NoBrush)
        painter.drawRoundedRect(r, NODE_RADIUS, NODE_RADIUS)

        if self.state.editing_id != nid:
            painter.setFont(_label_font())
            painter.setPen(QPen(color or (C_ACCENT if highlighted else C_TEXT)))
            painter.drawText(r, Qt.AlignCenter, node.text or " ")

        if degree is not None:
            badge = QRectF(r.left() - 6, r.top() - 6, BADGE_R * 2, BADGE_R * 2)
            painter.setPen(Qt.NoPen)
            painter.setBrush(QBrush(C_BADGE_BG))
            painter.drawEllipse(badge)
            painter.setPen(QPen(C_TEXT_DIM))
            painter.setFont(_badge_font())
            painter.drawText(badge, Qt.AlignCenter, str(degree))

        if nid == self._hover_node and self.state.editing_id != nid:
            self._draw_plus_handles(painter, nid)

    def _draw_plus_handles(self, painter: QPainter, nid: str) -> None:
        for side in _SIDES:
            c = self._plus_center(nid, side)
            painter.setPen(Qt.NoPen)
            painter.setBrush(QBrush(C_PLUS_BG))
            painter.drawEllipse(c, PLUS_R, PLUS_R)
            painter.setPen(QPen(C_TEXT, 1.5))
            painter.drawLine(QPointF(c.x() - 4, c.y()), QPointF(c.x() + 4, c.y()))
            painter.drawLine(QPointF(c.x(), c.y() - 4), QPointF(c.x(), c.y() + 4))

    # -----------------------------------------------------------------------
    # Mouse events
    # -----------------------------------------------------------------------

    def mousePressEvent(self, event: QMouseEvent) -> None:
        scene_pos = self.view_to_scene(QPointF(event.position()))

        if event.button() == Qt.MiddleButton:
            self._start_pan(event)
            return

        hit = self._hit_test(scene_pos)

        if event.button() == Qt.RightButton:
            if hit.kind in (_Hit.NODE, _Hit.PLUS):
                self._show_color_menu(hit.node_id, event.globalPosition().toPoint())
            return

        if event.button() != Qt.LeftButton:
            return

        if hit.kind == _Hit.PLUS:
            self._plus_node = hit.node_id
            self._plus_side = hit.side
            self._press_scene = scene_pos
            self._edge_dragging = False
            return

        if hit.kind == _Hit.NODE:
            self._press_node = hit.node_id
            self._press_scene = scene_pos
            self._node_dragging = False
            return

        if hit.kind == _Hit.EDGE:
            node_ops.commit_editing(self.state)
            s = self.state
            s.selected_id = None
            s.selected_edge_id = None if s.selected_edge_id == hit.edge.id else hit.edge.id
            s.notify('select')
            return

        self._start_pan(event)

    def _start_pan(self, event: QMouseEvent) -> None:
        self._pan_start = QPointF(event.position())
        self._pan_origin_start = QPointF(self._origin)
        self._pan_moved = False
        self.setCursor(QCursor(Qt.ClosedHandCursor))

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        scene_pos = self.view_to_scene(QPointF(event.position()))

        # Pan
        if self._pan_start is not None:
            delta = event.position() - self._pan_start
            if delta.manhattanLength() >= DRAG_THRESHOLD:
                self._pan_moved = True
            self._origin = QPointF(
                self._pan_origin_start.x() - delta.x() / self._scale,
                self._pan_origin_start.y() - delta.y() / self._scale,
            )
            self.update()
            return

        # Edge drag from a plus handle
        if self._plus_node is not None:
            moved = (scene_pos - self._press_scene).manhattanLength() * self._scale
            if self._edge_dragging or moved >= EDGE_DRAG_THRESHOLD:
                self._edge_dragging = True
                edge_ops.update_edge_drag(self.state, self._plus_node, self._plus_side,
                                          scene_pos.x(), scene_pos.y())
            return

        # Node drag
        if self._press_node is not None:
            delta = scene_pos - self._press_scene
            if self._node_dragging or delta.manhattanLength() * self._scale >= DRAG_THRESHOLD:
                self._node_dragging = True
                node_ops.drag_node(self.state, self._press_node, delta.x(), delta.y())
            return

        # Hover: keep the handles of the node under (or just around) the pointer
        hover = self.state.node_at((scene_pos.x(), scene_pos.y()))
        if hover is None and self._hover_node is not None:
            if self._hit_test(scene_pos).kind == _Hit.PLUS:
                hover = self._hover_node
        if hover != self._hover_node:
            self._hover_node = hover
            self.update()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        scene_pos = self.view_to_scene(QPointF(event.position()))

        if self._pan_start is not None and event.button() in (Qt.LeftButton, Qt.MiddleButton):
            self._pan_start = None
            self.setCursor(QCursor(Qt.ArrowCursor))
            if event.button() == Qt.LeftButton and not self._pan_moved:
                # Plain click on empty canvas
                node_ops.commit_editing(self.state)
                if self.state.selected_id or self.state.selected_edge_id:
                    self.state.selected_id = None
                    self.state.selected_edge_id = None
                    self.state.notify('select')
            return

        if event.button() != Qt.LeftButton:
            return

        if self._plus_node is not None:
            nid, side = self._plus_node, self._plus_side
            self._plus_node = None
            self._plus_side = None
            if self._edge_dragging:
                self._edge_dragging = False
                edge_ops.finish_edge_drag(self.state, nid, side,
                                          scene_pos.x(), scene_pos.y())
            else:
                node_ops.add_child_node(self.state, nid, side)
            return

        if self._press_node is not None:
            nid = self._press_node
            self._press_node = None
            if self._node_dragging:
                self._node_dragging = False
                node_ops.end_node_drag(self.state, nid)
                return
            self._click_node(nid)

    def _click_node(self, nid: str) -> None:
        s = self.state
        if s.selected_id == nid:
            s.selected_id = None
            s.editing_id = nid
            s.notify('edit')
        else:
            node_ops.commit_editing(s)
            s.selected_id = nid
            s.selected_edge_id = None
            s.notify('select')

    def mouseDoubleClickEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.LeftButton:
            return
        scene_pos = self.view_to_scene(QPointF(event.position()))
        if self._hit_test(scene_pos).kind == _Hit.NONE:
            node_ops.add_node(self.state, scene_pos.x(), scene_pos.y())
            self.status_message.emit("Node added")

    def leaveEvent(self, event) -> None:
        if self._hover_node is not None and self._plus_node is None:
            self._hover_node = None
            self.update()
        super().leaveEvent(event)

    def wheelEvent(self, event: QWheelEvent) -> None:
        delta = event.angleDelta().y()
        factor = 1.12 if delta > 0 else 1 / 1.12
        mouse_scene = self.view_to_scene(QPointF(event.position()))
        self._scale = max(ZOOM_MIN, min(ZOOM_MAX, self._scale * factor))
        # Keep mouse point fixed
        self._origin = QPointF(
            mouse_scene.x() - event.position().x() / self._scale,
            mouse_scene.y() - event.position().y() / self._scale,
        )
        self.update()

    # -----------------------------------------------------------------------
    # Colour menu
    # -----------------------------------------------------------------------

    def _show_color_menu(self, nid: str, global_pos) -> None:
        node = self.state.find_node(nid)
        if node is None:
            return
        menu = QMenu(self)
        colors = menu.addMenu("Set Color")
        for name, hex_value in PRESET_COLORS:
            act = colors.addAction(_color_dot(hex_value), name)
            act.triggered.connect(
                lambda _=False, h=hex_value: node_ops.set_color(self.state, nid, h))
        colors.addSeparator()
        custom = colors.addAction("Custom...")

        def _custom():
            hex_value = pick_color(self, node.color_hex)
            if hex_value:
                node_ops.set_color(self.state, nid, hex_value)
        custom.triggered.connect(_custom)

        if node.color_hex is not None:
            colors.addSeparator()
            remove = colors.addAction("Remove Color")
            remove.triggered.connect(lambda: node_ops.set_color(self.state, nid, None))
        menu.exec(global_pos)


# ---------------------------------------------------------------------------
# Drawing helpers
# ---------------------------------------------------------------------------

def _curve_path(geo: EdgeGeometry) -> QPainterPath:
    """Cubic bezier from the source border to the arrow base."""
    path = QPainterPath(QPointF(*geo.source_exit))
    path.cubicTo(QPointF(*geo.cp1), QPointF(*geo.cp2), QPointF(*geo.arrow_base))
    return path


def _color_dot(hex_value: str) -> QIcon:
    pix = QPixmap(14, 14)
    pix.fill(Qt.transparent)
    p = QPainter(pix)
    p.setRenderHint(QPainter.Antialiasing)
    p.setPen(Qt.NoPen)
    p.setBrush(QBrush(QColor(f"#{hex_value}")))
    p.drawEllipse(1, 1, 12, 12)
    p.end()
    return QIcon(pix)


def _label_font() -> QFont:
    return QFont(FONT_FAMILY, 10, QFont.Weight.Medium)


def _badge_font() -> QFont:
    return QFont(FONT_FAMILY, 7, QFont.Weight.DemiBold)

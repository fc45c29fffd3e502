"""Edge routing geometry.

Pure Python + numpy, no Qt dependency.  Turns two node rectangles into the
drawable pieces of a directed edge:

  source_exit ──cp1┄┄┄┄cp2── arrow_base ▶ tip

The curve leaves the source through the border facing the target and enters
the target through the border facing the source.  Each control point sits a
fixed distance out along the normal of its border, so the curve always meets
a box edge at a right angle.  The curve stops at the arrowhead's base so the
stroke never pokes through the arrow.

Border selection buckets the centre-to-centre angle into four 90° sectors
(canvas y axis points down):

  right   [-45°,  45°)
  bottom  [ 45°, 135°)
  left    [135°, 225°)
  top     [225°, 315°)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional

import numpy as np


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

class Point(NamedTuple):
    x: float
    y: float


class Size(NamedTuple):
    width: float
    height: float


class Rect(NamedTuple):
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, p) -> bool:
        return self.x <= p[0] <= self.right and self.y <= p[1] <= self.bottom


class Side(Enum):
    TOP    = "top"
    BOTTOM = "bottom"
    LEFT   = "left"
    RIGHT  = "right"


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CP_DISTANCE           = 50.0
ARROW_LENGTH          = 10.0
ARROW_ANGLE           = math.pi / 6
BOUNDS_PADDING        = 8.0
STROKE_WIDTH          = 2.0
SELECTED_STROKE_WIDTH = 2.5
HIT_STROKE_WIDTH      = 12.0
DEFAULT_NODE_SIZE     = Size(132.0, 44.0)

# Unit outward normal per border
_NORMALS = {
    Side.TOP:    (0.0, -1.0),
    Side.BOTTOM: (0.0, 1.0),
    Side.LEFT:   (-1.0, 0.0),
    Side.RIGHT:  (1.0, 0.0),
}

# Direction the arrow travels when it enters through a given border
_ARROW_DIR = {
    Side.TOP:    math.pi / 2,
    Side.BOTTOM: -math.pi / 2,
    Side.LEFT:   0.0,
    Side.RIGHT:  math.pi,
}


def side_from_angle(angle: float) -> Side:
    """Map an angle in radians to the border it points through."""
    a = angle % (2 * math.pi)
    if a < math.pi / 4 or a >= 7 * math.pi / 4:
        return Side.RIGHT
    if a < 3 * math.pi / 4:
        return Side.BOTTOM
    if a < 5 * math.pi / 4:
        return Side.LEFT
    return Side.TOP


def border_point(center, side: Side, half_w: float, half_h: float) -> Point:
    """Midpoint of one border of a rectangle given by its centre and half-size."""
    nx, ny = _NORMALS[side]
    return Point(center[0] + nx * half_w, center[1] + ny * half_h)


def _offset(p: Point, side: Side, distance: float) -> Point:
    nx, ny = _NORMALS[side]
    return Point(p.x + nx * distance, p.y + ny * distance)


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EdgeGeometry:
    """Everything a renderer needs to draw and hit-test one edge.

    source_exit, cp1, cp2, arrow_base – the cubic Bézier (scene coords).
    tip, left_wing, right_wing         – the filled arrowhead triangle.
    arrow_dir                          – travel direction at the tip (radians).
    bounds                             – padded box around all of the above.
    """
    source_exit: Point
    cp1: Point
    cp2: Point
    arrow_base: Point
    tip: Point
    left_wing: Point
    right_wing: Point
    arrow_dir: float
    bounds: Rect
    source_side: Side
    target_side: Side

    def arrow_polygon(self) -> tuple[Point, Point, Point]:
        return (self.tip, self.left_wing, self.right_wing)

    def sample(self, samples: int = 48) -> np.ndarray:
        """(samples + 1, 2) array of points evenly spaced in t along the curve."""
        t = np.linspace(0.0, 1.0, samples + 1)[:, None]
        mt = 1.0 - t
        ctrl = np.array([self.source_exit, self.cp1, self.cp2, self.arrow_base],
                        dtype=float)
        return (mt ** 3 * ctrl[0] +
                3 * mt ** 2 * t * ctrl[1] +
                3 * mt * t ** 2 * ctrl[2] +
                t ** 3 * ctrl[3])

    def distance_to(self, point, samples: int = 48) -> float:
        """Minimum distance from point to the sampled curve, segment by segment."""
        pts = self.sample(samples)
        a, ab = pts[:-1], np.diff(pts, axis=0)
        p = np.asarray(point, dtype=float)
        seg_len2 = (ab * ab).sum(axis=1)
        t = ((p - a) * ab).sum(axis=1) / np.where(seg_len2 > 0, seg_len2, 1.0)
        nearest = a + np.clip(t, 0.0, 1.0)[:, None] * ab
        d = np.hypot(nearest[:, 0] - p[0], nearest[:, 1] - p[1])
        return float(d.min())

    def hit_test(self, point, stroke_width: float = HIT_STROKE_WIDTH) -> bool:
        """True if point falls inside the thick hit stroke around the curve."""
        b = self.bounds
        half = stroke_width / 2
        if not Rect(b.x - half, b.y - half, b.width + stroke_width,
                    b.height + stroke_width).contains(point):
            return False
        return self.distance_to(point) <= half

    def translated(self, dx: float, dy: float) -> "EdgeGeometry":
        """Same geometry shifted by (dx, dy), e.g. into a surface placed at bounds."""
        def mv(p: Point) -> Point:
            return Point(p.x + dx, p.y + dy)
        b = self.bounds
        return EdgeGeometry(
            source_exit=mv(self.source_exit), cp1=mv(self.cp1), cp2=mv(self.cp2),
            arrow_base=mv(self.arrow_base), tip=mv(self.tip),
            left_wing=mv(self.left_wing), right_wing=mv(self.right_wing),
            arrow_dir=self.arrow_dir,
            bounds=Rect(b.x + dx, b.y + dy, b.width, b.height),
            source_side=self.source_side, target_side=self.target_side,
        )


# ---------------------------------------------------------------------------
# Router
# ---------------------------------------------------------------------------

def route_edge(src_center, src_size, dst_center, dst_size=DEFAULT_NODE_SIZE, *,
               cp_distance: float = CP_DISTANCE,
               arrow_length: float = ARROW_LENGTH,
               arrow_angle: float = ARROW_ANGLE,
               padding: float = BOUNDS_PADDING) -> Optional[EdgeGeometry]:
    """Route an edge from the source rectangle to the target rectangle.

    Returns None when the centres coincide; there is no direction to route
    along and the caller should simply draw nothing.
    """
    dx = dst_center[0] - src_center[0]
    dy = dst_center[1] - src_center[1]
    if dx == 0 and dy == 0:
        return None

    angle = math.atan2(dy, dx)
    source_side = side_from_angle(angle)
    target_side = side_from_angle(angle + math.pi)

    source_exit = border_point(src_center, source_side,
                               src_size[0] / 2, src_size[1] / 2)
    tip = border_point(dst_center, target_side,
                       dst_size[0] / 2, dst_size[1] / 2)
    cp1 = _offset(source_exit, source_side, cp_distance)
    cp2 = _offset(tip, target_side, cp_distance)

    arrow_dir = _ARROW_DIR[target_side]
    arrow_base = Point(tip.x - arrow_length * math.cos(arrow_dir),
                       tip.y - arrow_length * math.sin(arrow_dir))
    left_wing = Point(tip.x - arrow_length * math.cos(arrow_dir - arrow_angle),
                      tip.y - arrow_length * math.sin(arrow_dir - arrow_angle))
    right_wing = Point(tip.x - arrow_length * math.cos(arrow_dir + arrow_angle),
                       tip.y - arrow_length * math.sin(arrow_dir + arrow_angle))

    pts = (source_exit, arrow_base, cp1, cp2, tip, left_wing, right_wing)
    min_x = min(p.x for p in pts) - padding
    min_y = min(p.y for p in pts) - padding
    max_x = max(p.x for p in pts) + padding
    max_y = max(p.y for p in pts) + padding

    return EdgeGeometry(
        source_exit=source_exit, cp1=cp1, cp2=cp2, arrow_base=arrow_base,
        tip=tip, left_wing=left_wing, right_wing=right_wing,
        arrow_dir=arrow_dir,
        bounds=Rect(min_x, min_y, max_x - min_x, max_y - min_y),
        source_side=source_side, target_side=target_side,
    )

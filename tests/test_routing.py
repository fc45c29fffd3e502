import math

import pytest

from domino.core.routing import (
    ARROW_LENGTH, BOUNDS_PADDING, CP_DISTANCE, DEFAULT_NODE_SIZE,
    HIT_STROKE_WIDTH, STROKE_WIDTH, Point, Rect, Side, Size,
    border_point, route_edge, side_from_angle,
)

BOX = Size(132, 44)


@pytest.mark.parametrize("degrees, side", [
    (0, Side.RIGHT),
    (-30, Side.RIGHT),
    (44.9, Side.RIGHT),
    (90, Side.BOTTOM),
    (180, Side.LEFT),
    (-180, Side.LEFT),
    (270, Side.TOP),
    (-90, Side.TOP),
    (330, Side.RIGHT),
    (720, Side.RIGHT),
])
def test_side_from_angle_sectors(degrees, side):
    assert side_from_angle(math.radians(degrees)) == side


def test_sector_boundaries_belong_to_the_next_side():
    assert side_from_angle(math.pi / 4) == Side.BOTTOM
    assert side_from_angle(3 * math.pi / 4) == Side.LEFT
    assert side_from_angle(5 * math.pi / 4) == Side.TOP
    assert side_from_angle(7 * math.pi / 4) == Side.RIGHT


def test_border_point_is_side_midpoint():
    assert border_point((10, 20), Side.TOP, 5, 3) == Point(10, 17)
    assert border_point((10, 20), Side.BOTTOM, 5, 3) == Point(10, 23)
    assert border_point((10, 20), Side.LEFT, 5, 3) == Point(5, 20)
    assert border_point((10, 20), Side.RIGHT, 5, 3) == Point(15, 20)


def test_horizontal_route():
    geo = route_edge((0, 0), BOX, (300, 0), BOX)
    assert geo.source_side == Side.RIGHT
    assert geo.target_side == Side.LEFT
    assert geo.source_exit == Point(66, 0)
    assert geo.tip == Point(234, 0)
    assert geo.cp1 == Point(66 + CP_DISTANCE, 0)
    assert geo.cp2 == Point(234 - CP_DISTANCE, 0)
    assert geo.arrow_dir == 0
    # the curve stops at the arrow base, not the tip
    assert geo.arrow_base == Point(234 - ARROW_LENGTH, 0)
    assert geo.left_wing.x == pytest.approx(234 - 10 * math.cos(math.pi / 6))
    assert geo.left_wing.y == pytest.approx(5)
    assert geo.right_wing.y == pytest.approx(-5)


def test_vertical_route_enters_through_top():
    geo = route_edge((0, 0), BOX, (0, 200), BOX)
    assert geo.source_side == Side.BOTTOM
    assert geo.target_side == Side.TOP
    assert geo.source_exit == Point(0, 22)
    assert geo.tip == Point(0, 178)
    assert geo.cp1 == Point(0, 22 + CP_DISTANCE)
    assert geo.cp2 == Point(0, 178 - CP_DISTANCE)
    assert geo.arrow_dir == pytest.approx(math.pi / 2)
    assert geo.arrow_base.x == pytest.approx(0)
    assert geo.arrow_base.y == pytest.approx(168)


def test_upward_and_leftward_routes():
    up = route_edge((0, 0), BOX, (0, -200), BOX)
    assert (up.source_side, up.target_side) == (Side.TOP, Side.BOTTOM)
    assert up.cp1 == Point(0, -22 - CP_DISTANCE)
    assert up.arrow_base.y == pytest.approx(up.tip.y + ARROW_LENGTH)

    left = route_edge((0, 0), BOX, (-300, 10), BOX)
    assert (left.source_side, left.target_side) == (Side.LEFT, Side.RIGHT)
    assert left.tip == Point(-300 + 66, 10)
    assert left.arrow_base.x == pytest.approx(left.tip.x + ARROW_LENGTH)


def test_sizes_of_each_end_are_respected():
    geo = route_edge((0, 0), Size(40, 20), (300, 0), Size(200, 100))
    assert geo.source_exit == Point(20, 0)
    assert geo.tip == Point(200, 0)


def test_coincident_centres_give_no_curve():
    assert route_edge((5, 5), BOX, (5, 5), BOX) is None


def test_routing_is_deterministic():
    a = route_edge((12.5, -3), BOX, (190, 240), Size(150, 50))
    b = route_edge((12.5, -3), BOX, (190, 240), Size(150, 50))
    assert a == b


def test_bounds_contain_every_point_with_padding():
    geo = route_edge((0, 0), BOX, (260, 140), BOX)
    pts = [geo.source_exit, geo.cp1, geo.cp2, geo.arrow_base, geo.tip,
           geo.left_wing, geo.right_wing]
    b = geo.bounds
    for p in pts:
        assert b.x + BOUNDS_PADDING <= p.x + 1e-9
        assert p.x <= b.right - BOUNDS_PADDING + 1e-9
        assert b.y + BOUNDS_PADDING <= p.y + 1e-9
        assert p.y <= b.bottom - BOUNDS_PADDING + 1e-9
    assert b.x == pytest.approx(min(p.x for p in pts) - BOUNDS_PADDING)
    assert b.bottom == pytest.approx(max(p.y for p in pts) + BOUNDS_PADDING)


def test_horizontal_bounds_exact():
    geo = route_edge((0, 0), BOX, (300, 0), BOX)
    assert geo.bounds.x == pytest.approx(58)
    assert geo.bounds.width == pytest.approx(184)
    assert geo.bounds.y == pytest.approx(-13)
    assert geo.bounds.height == pytest.approx(26)


def test_curve_endpoints():
    geo = route_edge((0, 0), BOX, (0, 200), BOX)
    pts = geo.sample(10)
    assert pts.shape == (11, 2)
    assert tuple(pts[0]) == pytest.approx(tuple(geo.source_exit))
    assert tuple(pts[-1]) == pytest.approx(tuple(geo.arrow_base))


def test_hit_region_is_wider_than_visible_stroke():
    geo = route_edge((0, 0), BOX, (300, 0), BOX)
    assert geo.hit_test((150, 0))
    assert geo.hit_test((150, 5))            # well outside a 2-unit stroke
    assert not geo.hit_test((150, 5), stroke_width=STROKE_WIDTH)
    assert not geo.hit_test((150, 7))        # beyond half of 12
    assert not geo.hit_test((500, 500))
    assert HIT_STROKE_WIDTH > STROKE_WIDTH


def test_long_edge_is_hittable_between_samples():
    geo = route_edge((0, 0), DEFAULT_NODE_SIZE, (3000, 0), DEFAULT_NODE_SIZE)
    pts = geo.sample()
    assert pts[25, 0] - pts[24, 0] > HIT_STROKE_WIDTH
    mid_x = (pts[24, 0] + pts[25, 0]) / 2
    assert geo.hit_test((mid_x, 0))
    assert geo.hit_test((mid_x, 5))
    assert not geo.hit_test((mid_x, 7))


def test_translated_into_local_surface():
    geo = route_edge((0, 0), BOX, (300, 0), BOX)
    local = geo.translated(-geo.bounds.x, -geo.bounds.y)
    assert local.bounds.x == 0 and local.bounds.y == 0
    assert local.bounds.width == geo.bounds.width
    assert local.tip == Point(geo.tip.x - geo.bounds.x, geo.tip.y - geo.bounds.y)
    assert local.arrow_dir == geo.arrow_dir
    assert local.hit_test((150 - geo.bounds.x, 4 - geo.bounds.y))


def test_preview_defaults_target_size():
    geo = route_edge((0, 0), BOX, (300, 0))
    assert geo.tip == Point(300 - DEFAULT_NODE_SIZE.width / 2, 0)


def test_rect_helpers():
    r = Rect(10, 20, 30, 40)
    assert r.right == 40 and r.bottom == 60
    assert r.contains((10, 20)) and r.contains((40, 60))
    assert not r.contains((41, 30))

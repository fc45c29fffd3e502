from domino.core.hit_test import node_at, node_rect_contains
from domino.core.routing import Size


def test_rect_edges_are_inclusive():
    size = Size(100, 40)
    assert node_rect_contains((0, 0), size, (50, 20))
    assert node_rect_contains((0, 0), size, (-50, -20))
    assert not node_rect_contains((0, 0), size, (50.5, 0))
    assert not node_rect_contains((0, 0), size, (0, -21))


def test_first_match_wins():
    rects = [('a', (0, 0), Size(100, 40)), ('b', (10, 0), Size(100, 40))]
    assert node_at(rects, (5, 0)) == 'a'
    assert node_at(rects, (5, 0), excluding='a') == 'b'
    assert node_at(rects, (500, 0)) is None


def test_board_uses_default_size_until_measured(board, make_node):
    make_node('n', x=100, y=100)
    assert board.node_at((100 + 66, 100)) == 'n'
    assert board.node_at((100 + 67, 100)) is None

    board.set_node_size('n', 200, 44)
    assert board.node_at((100 + 99, 100)) == 'n'


def test_board_hit_follows_drag_offset(board, make_node):
    make_node('n', x=0, y=0)
    board.drag_offsets['n'] = (300.0, 0.0)
    assert board.node_at((0, 0)) is None
    assert board.node_at((300, 0)) == 'n'


def test_excluding_the_source(board, make_node):
    make_node('src', x=0, y=0)
    assert board.node_at((0, 0), excluding='src') is None

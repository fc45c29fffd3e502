import pytest

from domino.core.routing import Side
from domino.ops.edges import toggle_connection
from domino.ops.nodes import (
    add_child_node, add_node, commit_editing, delete_node, drag_node,
    end_node_drag, move_node, set_color, set_text,
)


def test_add_node_starts_editing(board):
    nid = add_node(board, 10, 20)
    node = board.nodes[nid]
    assert (node.x, node.y) == (10.0, 20.0)
    assert node.text == '' and node.parent_ids == set() and node.color_hex is None
    assert board.editing_id == nid
    assert board.dirty
    assert board.can_undo()


def test_add_node_ids_are_unique(board):
    ids = {add_node(board, 0, 0) for _ in range(20)}
    assert len(ids) == 20


@pytest.mark.parametrize("side, expected", [
    (Side.RIGHT, (280.0, 50.0)),
    (Side.LEFT, (-80.0, 50.0)),
    (Side.TOP, (100.0, -130.0)),
    (Side.BOTTOM, (100.0, 230.0)),
])
def test_add_child_offsets_by_side(board, make_node, side, expected):
    make_node('p', x=100, y=50)
    cid = add_child_node(board, 'p', side)
    child = board.nodes[cid]
    assert (child.x, child.y) == expected
    assert child.parent_ids == {'p'}
    assert board.editing_id == cid


def test_add_child_at_drop_point(board, make_node):
    make_node('p')
    cid = add_child_node(board, 'p', Side.RIGHT, drop_point=(33, -7))
    assert board.nodes[cid].position == (33.0, -7.0)


def test_add_child_of_unknown_parent(board):
    assert add_child_node(board, 'nope', Side.RIGHT) is None
    assert board.nodes == {}
    assert not board.can_undo()


def test_move_and_color(board, make_node):
    make_node('n')
    assert move_node(board, 'n', 5, 6)
    assert board.nodes['n'].position == (5.0, 6.0)
    assert set_color(board, 'n', '#61bd4f')
    assert board.nodes['n'].color_hex == '61BD4F'
    assert set_color(board, 'n', None)
    assert board.nodes['n'].color_hex is None
    assert len(board.history.undo_stack) == 3


def test_unknown_ids_are_a_no_op(board):
    events = []
    board.on_change(events.append)
    assert not move_node(board, 'x', 1, 1)
    assert not set_color(board, 'x', 'FF0000')
    assert not set_text(board, 'x', 'hi')
    assert not delete_node(board, 'x')
    assert events == []
    assert not board.can_undo()
    assert not board.dirty


def test_set_text_is_not_an_undo_step(board, make_node):
    make_node('n')
    assert set_text(board, 'n', 'hello')
    assert board.nodes['n'].text == 'hello'
    assert not board.can_undo()
    assert board.dirty


def test_commit_editing(board):
    nid = add_node(board, 0, 0)
    commit_editing(board)
    assert board.editing_id is None
    assert nid in board.nodes


def test_delete_reparents_children(board, make_node):
    make_node('g1')
    make_node('g2')
    make_node('n', parents=['g1', 'g2'])
    make_node('c1', parents=['n'])
    make_node('c2', parents=['n', 'other'])
    make_node('other')
    assert delete_node(board, 'n')
    assert 'n' not in board.nodes
    assert board.nodes['c1'].parent_ids == {'g1', 'g2'}
    assert board.nodes['c2'].parent_ids == {'g1', 'g2', 'other'}
    assert board.nodes['g1'].parent_ids == set()


def test_delete_root_leaves_children_as_roots(board, make_node):
    make_node('r')
    make_node('c', parents=['r'])
    delete_node(board, 'r')
    assert board.nodes['c'].parent_ids == set()
    assert board.degrees() == {'c': 0}


def test_delete_node_that_is_its_own_parent(board, make_node):
    make_node('p')
    make_node('n', parents=['p', 'n'])
    make_node('c', parents=['n'])
    delete_node(board, 'n')
    assert board.nodes['c'].parent_ids == {'p'}


def test_delete_clears_transient_references(board, make_node):
    make_node('p')
    make_node('n', parents=['p'])
    board.editing_id = 'n'
    board.selected_edge_id = 'p>n'
    board.drag_offsets['n'] = (1.0, 1.0)
    board.set_node_size('n', 150, 44)
    delete_node(board, 'n')
    assert board.editing_id is None
    assert board.selected_edge_id is None
    assert 'n' not in board.drag_offsets
    assert 'n' not in board.node_sizes


def test_connect_then_delete_keeps_ancestor_link(board, make_node):
    make_node('A', x=0, y=0)
    make_node('B', x=200, y=0)
    make_node('C', x=200, y=200)
    child = add_child_node(board, 'A', Side.RIGHT)
    assert board.nodes[child].position == (180.0, 0.0)

    assert toggle_connection(board, child, 'B')
    assert board.nodes['B'].parent_ids == {child}

    assert delete_node(board, child)
    assert board.nodes['B'].parent_ids == {'A'}
    assert board.nodes['C'].parent_ids == set()


def test_drag_is_transient_until_release(board, make_node):
    make_node('n', x=10, y=10)
    events = []
    board.on_change(events.append)
    drag_node(board, 'n', 5, 0)
    drag_node(board, 'n', 25, -5)
    assert board.effective_position('n') == (35.0, 5.0)
    assert board.nodes['n'].position == (10.0, 10.0)
    assert not board.can_undo()
    assert events == ['transient', 'transient']

    assert end_node_drag(board, 'n')
    assert board.nodes['n'].position == (35.0, 5.0)
    assert board.drag_offsets == {}
    assert len(board.history.undo_stack) == 1


def test_zero_drag_does_not_commit(board, make_node):
    make_node('n')
    drag_node(board, 'n', 0, 0)
    assert not end_node_drag(board, 'n')
    assert not board.can_undo()
    assert not board.dirty


def test_drag_unknown_node(board):
    drag_node(board, 'ghost', 3, 3)
    assert board.drag_offsets == {}
    assert not end_node_drag(board, 'ghost')

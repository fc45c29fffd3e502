import pytest

from domino.state import BoardState, Node


@pytest.fixture
def board():
    return BoardState()


@pytest.fixture
def make_node(board):
    """Insert a node directly (no history) and return its id."""
    def _make(node_id, x=0.0, y=0.0, parents=(), text='', color=None):
        board.nodes[node_id] = Node(node_id=node_id, text=text, x=x, y=y,
                                    parent_ids=set(parents), color_hex=color)
        return node_id
    return _make

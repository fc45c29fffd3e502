import json

from domino.core.routing import Size
from domino.core.settings import DEFAULTS, Settings
from domino.state import BoardState


def test_defaults_when_missing(tmp_path):
    s = Settings(tmp_path / 'settings.json')
    assert s.undo_depth == 50
    assert s.child_offset == 180.0
    assert (s.default_node_width, s.default_node_height) == (132.0, 44.0)
    assert s.last_directory == ''
    assert s.confirm_discard is True


def test_overrides_are_read(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps({'undo_depth': 5, 'child_offset': 240,
                                'confirm_discard': False}))
    s = Settings(path)
    assert s.undo_depth == 5
    assert s.child_offset == 240.0
    assert s.confirm_discard is False
    assert s.default_node_width == DEFAULTS['default_node_width']


def test_undo_depth_floor(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps({'undo_depth': 0}))
    assert Settings(path).undo_depth == 1


def test_corrupt_file_keeps_defaults(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text('{ nope')
    s = Settings(path)
    assert s.undo_depth == DEFAULTS['undo_depth']
    assert s.child_offset == DEFAULTS['child_offset']


def test_save_then_reload(tmp_path):
    path = tmp_path / 'nested' / 'settings.json'
    s = Settings(path)
    s.last_directory = '/boards'
    s.undo_depth = 12
    s.save()
    again = Settings(path)
    assert again.last_directory == '/boards'
    assert again.undo_depth == 12


def test_board_state_from_settings(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps({'undo_depth': 3, 'child_offset': 90,
                                'default_node_width': 100, 'default_node_height': 30}))
    board = BoardState.from_settings(Settings(path))
    assert board.history.max_size == 3
    assert board.child_offset == 90.0
    assert board.node_size('anything') == Size(100.0, 30.0)


def test_bad_value_only_resets_its_own_key(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps({'undo_depth': 'x', 'child_offset': 240,
                                'default_node_width': None,
                                'last_directory': '/boards'}))
    s = Settings(path)
    assert s.undo_depth == DEFAULTS['undo_depth']
    assert s.default_node_width == DEFAULTS['default_node_width']
    assert s.child_offset == 240.0
    assert s.last_directory == '/boards'


def test_non_object_file_keeps_defaults(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text('[1, 2, 3]')
    s = Settings(path)
    assert s.undo_depth == DEFAULTS['undo_depth']
    assert s.confirm_discard is True

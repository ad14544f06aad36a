"""Test keyboard input handling."""

from unittest.mock import Mock

import pytest

from folio.keyboard import KeyboardHandler, KeyType


class MockTerminal:
    """Mock terminal interface for testing."""

    def __init__(self):
        self._key_queue = []

    def get_key(self, timeout=None):
        """Mock get_key that returns from queue."""
        if self._key_queue:
            return self._key_queue.pop(0)
        return None

    def add_key(self, key_str):
        self._key_queue.append(key_str)


@pytest.fixture
def handler():
    return KeyboardHandler(MockTerminal())


def test_no_key(handler):
    assert handler.get_key_event(timeout=0) is None


def test_queued_key(handler):
    handler.terminal.add_key('n')
    event = handler.get_key_event()
    assert event.key_type == KeyType.REGULAR
    assert event.value == 'n'


@pytest.mark.parametrize("token,value", [
    ('<LEFT>', 'left'),
    ('<RIGHT>', 'right'),
    ('<UP>', 'up'),
    ('<DOWN>', 'down'),
    ('<HOME>', 'home'),
    ('<END>', 'end'),
    ('<PAGEUP>', 'page_up'),
    ('<PAGEDOWN>', 'page_down'),
    ('<BACKSPACE>', 'backspace'),
    ('<F1>', 'f1'),
])
def test_special_tokens(handler, token, value):
    event = handler.parse_key(token)
    assert event.key_type == KeyType.SPECIAL
    assert event.value == value
    assert event.is_sequence


def test_space_token(handler):
    event = handler.parse_key('<SPACE>')
    assert event.key_type == KeyType.REGULAR
    assert event.value == ' '


def test_ctrl_token(handler):
    event = handler.parse_key('<Ctrl-q>')
    assert event.key_type == KeyType.CTRL
    assert event.value == 'q'
    assert event.is_ctrl


def test_ctrl_j_is_enter(handler):
    assert handler.parse_key('<Ctrl-j>').value == 'enter'
    assert handler.parse_key('\r').value == 'enter'
    assert handler.parse_key('\n').value == 'enter'


def test_raw_control_byte(handler):
    event = handler.parse_key('\x10')  # Ctrl-P
    assert event.key_type == KeyType.CTRL
    assert event.value == 'p'


@pytest.mark.parametrize("token", ['<Esc+f>', '<Meta-f>', '<Alt-f>'])
def test_alt_tokens(handler, token):
    event = handler.parse_key(token)
    assert event.key_type == KeyType.ALT
    assert event.value == 'f'
    assert event.is_alt


def test_escape(handler):
    assert handler.parse_key('\x1b').value == 'escape'
    assert handler.parse_key('<ESC>').value == 'escape'


def test_plain_characters(handler):
    for ch in ('+', '-', '?', 'q', '中'):
        event = handler.parse_key(ch)
        assert event.key_type == KeyType.REGULAR
        assert event.value == ch


def test_key_objects_are_stringified(handler):
    key = Mock()
    key.__str__ = lambda self: '<PAGEDOWN>'
    assert handler.parse_key(key).value == 'page_down'

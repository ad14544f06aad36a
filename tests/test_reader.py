"""Tests for the reader controller."""

import os
import tempfile
from contextlib import ExitStack
from unittest.mock import MagicMock, Mock, PropertyMock, patch

import pytest

from folio.constants import ReaderConstants
from folio.keyboard import KeyEvent, KeyType
from folio.model import PaginationConfig
from folio.reader import Reader
from folio.settings_persistence import SettingsKeys


def key(key_type, value):
    return KeyEvent(key_type=key_type, value=value, raw=value)


QUIT = KeyEvent(key_type=KeyType.CTRL, value='q', raw='\x11', is_ctrl=True)


@pytest.fixture
def persistence():
    persistence = Mock()
    persistence.load_settings.return_value = {}
    persistence.save_settings.return_value = True
    return persistence


@pytest.fixture
def reader(persistence):
    reader = Reader(persistence=persistence)
    with patch.object(type(reader.terminal), 'width', PropertyMock(return_value=80)):
        with patch.object(type(reader.terminal), 'height', PropertyMock(return_value=24)):
            yield reader


def test_set_text_paginates_for_terminal(reader):
    reader.set_text("\n".join(f"line {i}" for i in range(50)))
    # 24 rows minus the top margin
    assert reader.config.max_height == 23
    assert reader.config.max_width_units == 38
    assert len(reader.pages) == 3
    assert reader.position.page_count == 3
    assert not reader.error_mode


def test_terminal_too_small_enters_error_mode(reader):
    with patch.object(type(reader.terminal), 'width', PropertyMock(return_value=10)):
        reader.set_text("Hello")
        assert reader.error_mode
        assert not reader.repaginate()
    assert reader.pages == []
    assert reader.repaginate()
    assert not reader.error_mode


def test_repaginate_keeps_position_in_range(reader):
    reader.set_text("\n".join(f"line {i}" for i in range(100)))
    reader.position.last_page()
    with patch.object(type(reader.terminal), 'height', PropertyMock(return_value=60)):
        assert reader.repaginate()
    assert reader.position.page_index == reader.position.page_count - 1


def test_empty_book(reader):
    reader.set_text("")
    assert reader.position.indicator() == "1 / 1"
    assert reader.current_page()[0].text == ""


def test_load_file_restores_settings(reader, persistence):
    persistence.load_settings.return_value = {
        SettingsKeys.FONT_FAMILY: "serif",
        SettingsKeys.FONT_SIZE: 24,
        SettingsKeys.THEME: "dark",
        SettingsKeys.SHOW_LINE_NUMBERS: True,
        SettingsKeys.LAST_PAGE: 2,
    }
    with tempfile.NamedTemporaryFile('w', suffix='.md', encoding='utf-8', delete=False) as f:
        f.write("\n".join(f"line {i}" for i in range(100)))
    try:
        reader.load_file(f.name)
    finally:
        os.remove(f.name)

    assert reader.filename == f.name
    assert reader.font_family == "serif"
    assert reader.font_size == 24
    assert reader.theme == "dark"
    assert reader.show_line_numbers
    assert reader.position.page_index == 2
    persistence.load_settings.assert_called_once_with(f.name)


def test_load_missing_file_raises(reader):
    with pytest.raises(OSError):
        reader.load_file("/nonexistent/book.md")


def test_current_settings_round_trip(reader, persistence):
    reader.filename = "book.md"
    reader.set_text("a\n" * 60)
    reader.position.next_page()
    reader.theme = "eyecare"
    assert reader.save_settings()
    saved = persistence.save_settings.call_args[0][1]
    assert saved[SettingsKeys.LAST_PAGE] == 1
    assert saved[SettingsKeys.THEME] == "eyecare"


def test_set_font_size_clamps(reader):
    reader.set_font_size(100)
    assert reader.font_size == 40
    assert reader.status_message == "Font size: XL (40)"


def test_line_numbers_are_book_wide(reader):
    reader.show_line_numbers = True
    reader.set_text("\n".join(f"line {i}" for i in range(50)))
    reader.position.next_page()
    numbers = reader.current_line_numbers()
    assert numbers[0] == reader.config.max_height + 1
    assert len(numbers) == len(reader.current_page())


def test_no_line_numbers_when_hidden(reader):
    reader.set_text("Hello")
    assert reader.current_line_numbers() is None


def test_status_text(reader):
    reader.filename = "/books/novel.md"
    reader.set_text("\n".join(f"line {i}" for i in range(23 * 9)))
    reader.position.go_to(4)
    assert reader.status_text() == " novel.md  5 / 9  1 ⋯ 4 [5] 6 ⋯ 9"


def test_status_message_replaces_status(reader):
    reader.status_message = "Theme: dark"
    assert reader.status_text() == " Theme: dark"


def test_any_key_dismisses_help(reader):
    reader.set_text("a\n" * 60)
    reader.show_help()
    assert reader._handle_key_event(key(KeyType.SPECIAL, 'right'))
    assert not reader.help_visible
    assert reader.position.page_index == 0


def test_key_clears_status_message(reader):
    reader.set_text("Hello")
    reader.status_message = "Saved PDF to book.pdf"
    assert reader._handle_key_event(key(KeyType.REGULAR, 'z'))
    assert reader.status_message is None


def test_error_mode_only_quits(reader):
    reader.running = True
    reader.error_mode = True
    assert not reader._handle_key_event(key(KeyType.SPECIAL, 'right'))
    assert reader.running
    reader._handle_key_event(QUIT)
    assert not reader.running


def test_pdf_filename(reader):
    reader.filename = "/books/novel.md"
    assert reader.pdf_filename() == "/books/novel.pdf"
    reader.filename = None
    assert reader.pdf_filename() == "book.pdf"


def test_export_pdf(reader):
    reader.set_text("# 第一章\n\n这是中文。Some English.")
    with tempfile.TemporaryDirectory() as temp_dir:
        filename = os.path.join(temp_dir, "out.pdf")
        assert reader.export_pdf(filename)
        with open(filename, 'rb') as f:
            assert f.read(4) == b'%PDF'
    assert reader.status_message == ReaderConstants.PDF_SAVED_MESSAGE.format(filename)


def test_export_pdf_failure_is_reported(reader):
    reader.set_text("Hello")
    assert not reader.export_pdf("/nonexistent/dir/out.pdf")
    assert reader.status_message.startswith("PDF export failed")


def _run_patches(stack, reader):
    stack.enter_context(patch.object(reader.terminal, 'setup'))
    stack.enter_context(patch.object(reader.terminal, 'cleanup'))
    stack.enter_context(patch.object(reader.terminal.term, 'cbreak', MagicMock()))
    get_key_event = stack.enter_context(patch.object(reader.keyboard, 'get_key_event'))
    draw = stack.enter_context(patch.object(reader, '_draw'))
    select = stack.enter_context(patch('folio.reader.select.select'))
    return get_key_event, draw, select


def test_run_quits_and_saves(reader, persistence):
    reader.filename = "book.md"
    reader.set_text("a\n" * 60)
    with ExitStack() as stack:
        get_key_event, draw, select = _run_patches(stack, reader)
        select.return_value = ([0], [], [])
        get_key_event.side_effect = [key(KeyType.SPECIAL, 'right'), QUIT]

        reader.run()

        assert draw.call_count == 2
    assert reader.position.page_index == 1
    persistence.save_settings.assert_called_once()


def test_resize_signal_triggers_repaginate(reader):
    reader.set_text("Hello")
    with ExitStack() as stack:
        get_key_event, draw, select = _run_patches(stack, reader)
        repaginate = stack.enter_context(patch.object(reader, 'repaginate'))
        select.side_effect = [
            ([reader._resize_pipe_r], [], []),  # Resize pipe ready
            ([0], [], []),  # stdin ready
        ]
        get_key_event.return_value = QUIT

        os.write(reader._resize_pipe_w, ReaderConstants.RESIZE_PIPE_MARKER)
        reader.run()

        # Initial layout plus the resize
        assert repaginate.call_count == 2
        assert draw.call_count == 2


LONG_TEXT = "\n".join("中" * 30 for _ in range(40))


def test_manual_line_width(reader):
    reader.set_text(LONG_TEXT)
    reader.set_line_width(10)
    assert not reader.auto_width
    assert reader.status_message == "Line width: 10 / 38"
    reader.repaginate()
    assert reader.config.max_width_units == 10
    assert all(len(line.text) <= 10 for line in reader.current_page())


def test_line_width_clamped_to_terminal(reader):
    reader.set_text(LONG_TEXT)
    reader.set_line_width(500)
    assert reader.line_width == 38
    reader.set_line_width(-4)
    assert reader.line_width == 1


def test_manual_page_height(reader):
    reader.set_text(LONG_TEXT)
    reader.set_page_height(7)
    reader.repaginate()
    assert reader.config.max_height == 7
    assert len(reader.current_page()) == 7
    reader.set_page_height(100)
    assert reader.page_height == 23
    assert reader.status_message == "Page height: 23 / 23"


def test_manual_layout_shrinks_with_terminal(reader):
    reader.set_text(LONG_TEXT)
    reader.set_line_width(30)
    reader.set_page_height(20)
    with patch.object(type(reader.terminal), 'width', PropertyMock(return_value=44)):
        with patch.object(type(reader.terminal), 'height', PropertyMock(return_value=12)):
            assert reader.repaginate()
            # 40 columns -> 20 units; 11 rows
            assert reader.config == PaginationConfig(max_width_units=20, max_height=11)
    assert reader.repaginate()
    assert reader.config == PaginationConfig(max_width_units=30, max_height=20)


def test_toggle_auto_width(reader):
    reader.set_text(LONG_TEXT)
    reader.toggle_auto_width()
    assert not reader.auto_width
    assert reader.line_width == 38
    assert reader.status_message == "Auto width: off"
    reader.set_line_width(12)
    reader.toggle_auto_width()
    assert reader.auto_width
    assert reader.line_width is None
    reader.repaginate()
    assert reader.config.max_width_units == 38


def test_layout_keys_repaginate(reader):
    reader.set_text(LONG_TEXT)
    assert reader._handle_key_event(key(KeyType.REGULAR, '['))
    assert reader.config.max_width_units == 37
    assert reader._handle_key_event(key(KeyType.REGULAR, '{'))
    assert reader.config.max_height == 22
    assert reader._handle_key_event(key(KeyType.REGULAR, 'a'))
    assert reader.auto_width
    assert reader.config.max_width_units == 38


def test_manual_layout_is_saved_and_restored(reader, persistence):
    reader.filename = "book.md"
    reader.set_text(LONG_TEXT)
    reader.set_line_width(15)
    reader.set_page_height(9)
    reader.save_settings()
    saved = persistence.save_settings.call_args[0][1]
    assert saved[SettingsKeys.AUTO_WIDTH] is False
    assert saved[SettingsKeys.LINE_WIDTH] == 15
    assert saved[SettingsKeys.PAGE_HEIGHT] == 9

    restored = Reader(persistence=persistence)
    restored._apply_settings(saved)
    assert restored.config == PaginationConfig(max_width_units=15, max_height=9)

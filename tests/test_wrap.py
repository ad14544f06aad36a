"""Tests for greedy line wrapping."""

import types

from folio.char_width import text_width
from folio.model import DisplayLine
from folio.wrap import wrap_line


def test_short_line_fits():
    assert list(wrap_line("Hello", 100)) == [DisplayLine("Hello")]


def test_cjk_breaks_after_each_character():
    # 1.0 + 1.0 > 1.5 forces a break after the first character
    lines = list(wrap_line("姓名", 1.5))
    assert [line.text for line in lines] == ["姓", "名"]


def test_exact_fit_does_not_break():
    lines = list(wrap_line("姓名", 2.0))
    assert [line.text for line in lines] == ["姓名"]


def test_degenerate_glyph_gets_its_own_line():
    # Every glyph is wider than the bound
    lines = list(wrap_line("中文字", 0.5))
    assert [line.text for line in lines] == ["中", "文", "字"]


def test_degenerate_glyph_between_narrow_characters():
    lines = list(wrap_line(".中.", 0.6))
    assert [line.text for line in lines] == [".", "中", "."]


def test_empty_text_yields_nothing():
    assert list(wrap_line("", 10)) == []


def test_lines_respect_width():
    text = "The quick brown fox，跳过了懒狗。" * 5
    for line in wrap_line(text, 7.3):
        assert text_width(line.text) <= 7.3


def test_characters_preserved_in_order():
    text = "Mixed 中英文 text with “quotes” and (brackets)."
    assert "".join(line.text for line in wrap_line(text, 3)) == text


def test_wrapped_lines_are_not_headers():
    for line in wrap_line("# not parsed here", 2):
        assert not line.is_header
        assert line.header_level is None


def test_wrap_is_a_single_pass_generator():
    result = wrap_line("abc", 1)
    assert isinstance(result, types.GeneratorType)
    assert len(list(result)) == 3
    assert list(result) == []


def test_wrap_is_deterministic():
    text = "确定性 determinism " * 10
    assert list(wrap_line(text, 4.2)) == list(wrap_line(text, 4.2))

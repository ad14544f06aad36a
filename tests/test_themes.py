"""Tests for color themes."""

from unittest.mock import MagicMock

from folio.themes import (
    DEFAULT_THEME,
    THEME_STYLES,
    THEMES,
    get_theme_style,
    next_theme,
    resolve,
)


def test_all_themes_present():
    assert THEMES == ["light", "dark", "eyecare", "newyear", "system"]
    assert DEFAULT_THEME == "system"


def test_unknown_theme_falls_back_to_system():
    assert get_theme_style("neon") is THEME_STYLES["system"]


def test_next_theme_cycles():
    seen = []
    theme = THEMES[0]
    for _ in THEMES:
        seen.append(theme)
        theme = next_theme(theme)
    assert seen == THEMES
    assert theme == THEMES[0]
    assert next_theme("neon") == DEFAULT_THEME


def test_resolve_empty_name():
    term = MagicMock()
    assert resolve(term, "") == ""


def test_resolve_looks_up_terminal_attribute():
    term = MagicMock()
    term.bold_red = "\x1b[1;31m"
    assert resolve(term, "bold_red") == "\x1b[1;31m"


def test_theme_styles_resolve_on_blessed_terminal():
    import blessed

    term = blessed.Terminal(force_styling=None)
    for style in THEME_STYLES.values():
        for name in (style.text, style.subtext, style.header, style.status):
            # Styling is disabled, every formatter resolves to ''
            assert resolve(term, name) == ""

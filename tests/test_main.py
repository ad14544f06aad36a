"""Tests for the command line entry point."""

import os
import tempfile

import pytest

from folio.__main__ import build_parser, main


@pytest.fixture
def book():
    with tempfile.NamedTemporaryFile('w', suffix='.md', encoding='utf-8', delete=False) as f:
        f.write("# Title\n\nBody text.\n## Part\n" + "\n".join(f"line {i}" for i in range(8)))
    yield f.name
    os.remove(f.name)


def test_parser_accepts_equals_form():
    args = build_parser().parse_args(['--dump', '--width=12', '--height=4', 'book.md'])
    assert args.dump
    assert args.width == 12.0
    assert args.height == 4
    assert args.book == 'book.md'


def test_dump(book, capsys):
    assert main(['--dump', '--width', '40', '--height', '5', book]) == 0
    out = capsys.readouterr().out
    pages = out.split('\f')
    assert len(pages) == 3
    assert pages[0].startswith("# Title\n\nBody text.\n## Part\nline 0")


def test_options_after_book(book, capsys):
    assert main([book, '--dump', '--height=5']) == 0
    assert capsys.readouterr().out.count('\f') == 2


def test_dump_invalid_width(book, capsys):
    assert main(['--dump', '--width', '0', book]) == 2
    assert "max_width_units" in capsys.readouterr().err


def test_dump_non_numeric_height(book, capsys):
    with pytest.raises(SystemExit) as exc:
        main(['--dump', '--height', 'tall', book])
    assert exc.value.code == 2
    assert "usage:" in capsys.readouterr().err


@pytest.mark.parametrize("argv", [
    ['--width', '10'],
    ['--height', '10'],
    ['--dump', '--font-family', 'mono'],
    ['--dump', '--line-numbers'],
    ['--font-size', '20'],
])
def test_options_outside_their_mode_are_rejected(book, capsys, argv):
    with pytest.raises(SystemExit) as exc:
        main(argv + [book])
    assert exc.value.code == 2
    assert "only apply to" in capsys.readouterr().err


def test_dump_and_pdf_are_exclusive(book):
    with pytest.raises(SystemExit) as exc:
        main(['--dump', '--pdf', 'out.pdf', book])
    assert exc.value.code == 2


def test_missing_book(capsys):
    assert main(['--dump', '/nonexistent/book.md']) == 1
    assert "cannot read" in capsys.readouterr().err


def test_no_book(capsys):
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2
    assert "a book file is required" in capsys.readouterr().err


def test_stdin_needs_output_mode():
    with pytest.raises(SystemExit):
        main(['-'])


def test_pdf(book):
    with tempfile.TemporaryDirectory() as temp_dir:
        out = os.path.join(temp_dir, "book.pdf")
        assert main(['--pdf', out, '--font-family', 'mono', '--font-size', '24',
                     '--line-numbers', book]) == 0
        with open(out, 'rb') as f:
            assert f.read(4) == b'%PDF'


def test_pdf_unknown_family(book, capsys):
    with pytest.raises(SystemExit) as exc:
        main(['--pdf', 'out.pdf', '--font-family', 'fantasy', book])
    assert exc.value.code == 2
    assert "invalid choice" in capsys.readouterr().err


def test_pdf_font_size_out_of_range(book, capsys):
    with pytest.raises(SystemExit):
        main(['--pdf', 'out.pdf', '--font-size', '99', book])
    assert "font size must be between" in capsys.readouterr().err


@pytest.mark.parametrize("flag", ['--version', '-V'])
def test_version(capsys, flag):
    assert main([flag]) == 0
    assert capsys.readouterr().out.startswith("folio ")


def test_version_after_other_arguments(book, capsys):
    assert main(['--verbose', '--version']) == 0
    assert capsys.readouterr().out.startswith("folio ")

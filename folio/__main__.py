"""Folio CLI entry point.

Allows running via `python -m folio` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .constants import ReaderConstants
from .font_config import DEFAULT_FONT_FAMILY, DEFAULT_FONT_SIZE, FONT_FAMILIES, MAX_FONT_SIZE, MIN_FONT_SIZE
from .version import get_version_string


def _escape_bytes(s: str) -> str:
    """Return a printable representation of raw key string."""
    return s.encode('unicode_escape').decode('ascii')


def run_keyboard_test() -> None:
    """Run an interactive keyboard test using the reader's input stack.

    Quit with ESC.
    """
    from .terminal import TerminalInterface
    from .keyboard import KeyboardHandler, KeyEvent, KeyType

    print("Keyboard test mode - press keys to see parsed events.")
    print("Quit with ESC.")

    term = TerminalInterface()
    term.setup()
    kb = KeyboardHandler(term)

    try:
        while True:
            ev: KeyEvent | None = kb.get_key_event(timeout=None)
            if not ev:
                continue
            if ev.key_type == KeyType.SPECIAL and ev.value == 'escape':
                print("Exiting keyboard test.")
                break
            raw = _escape_bytes(ev.raw)
            parts = [f"type={ev.key_type.value}", f"value={ev.value}", f"raw='{raw}'"]
            flags = []
            if ev.is_alt:
                flags.append('alt')
            if ev.is_ctrl:
                flags.append('ctrl')
            if ev.is_sequence:
                flags.append('seq')
            if flags:
                parts.append(f"flags={'+'.join(flags)}")
            print(' '.join(parts))
    finally:
        term.cleanup()


def _font_size(value: str) -> int:
    try:
        size = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid font size: {value!r}")
    if not MIN_FONT_SIZE <= size <= MAX_FONT_SIZE:
        raise argparse.ArgumentTypeError(
            f"font size must be between {MIN_FONT_SIZE} and {MAX_FONT_SIZE}")
    return size


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="folio",
        description="Paginate Latin/CJK text and read it in the terminal.",
    )
    parser.add_argument(
        "book",
        nargs="?",
        help="UTF-8 text or markdown file; '-' reads stdin with --dump or --pdf",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--dump",
        action="store_true",
        help="print the pages of BOOK separated by form feeds",
    )
    mode.add_argument(
        "--pdf",
        metavar="OUT",
        help="write BOOK as a PDF to OUT",
    )
    mode.add_argument(
        "--keytest", "--keyboard-test",
        action="store_true",
        help="show the parsed key events of each keypress",
    )
    mode.add_argument(
        "--version", "-V",
        action="store_true",
        help="print the version and build information",
    )

    dump = parser.add_argument_group("--dump options")
    dump.add_argument(
        "--width",
        type=float,
        help=f"line width in width units (default {ReaderConstants.DEFAULT_DUMP_WIDTH_UNITS})",
    )
    dump.add_argument(
        "--height",
        type=int,
        help=f"lines per page (default {ReaderConstants.DEFAULT_DUMP_HEIGHT})",
    )

    pdf = parser.add_argument_group("--pdf options")
    pdf.add_argument(
        "--font-family",
        choices=FONT_FAMILIES,
        help=f"font family (default {DEFAULT_FONT_FAMILY})",
    )
    pdf.add_argument(
        "--font-size",
        type=_font_size,
        help=f"font size in points (default {DEFAULT_FONT_SIZE})",
    )
    pdf.add_argument(
        "--line-numbers",
        action="store_true",
        help="print book-wide line numbers",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="log debug messages to stderr",
    )
    return parser


def check_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    """Reject option combinations that do not apply to the chosen mode.

    Exits through parser.error() with status 2.
    """
    if args.version or args.keytest:
        return
    if args.book is None:
        parser.error("a book file is required")
    if not args.dump and (args.width is not None or args.height is not None):
        parser.error("--width and --height only apply to --dump")
    if args.pdf is None and (args.font_family or args.font_size is not None or args.line_numbers):
        parser.error("--font-family, --font-size and --line-numbers only apply to --pdf")
    if args.book == '-' and not (args.dump or args.pdf):
        parser.error("reading from stdin needs --dump or --pdf")


def _read_book(path: str) -> str:
    if path == '-':
        return sys.stdin.read()
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def dump_pages(text: str, width: float, height: int) -> None:
    """Print pages separated by form feeds."""
    from .model import PaginationConfig
    from .paginator import Paginator

    paginator = Paginator(text, PaginationConfig(max_width_units=width, max_height=height))
    paginator.format_pages()
    print(paginator.format_for_print())


def export_pdf(text: str, out: str, font_family: str, font_size: int,
               show_line_numbers: bool) -> Optional[str]:
    """Paginate for a PDF page and write out; returns any warning."""
    from .metrics import PdfMetricsProvider
    from .paginator import paginate_with_config
    from .pdf_generator import PDFGenerator

    generator = PDFGenerator(font_family, font_size, show_line_numbers)
    config = PdfMetricsProvider().measure_container(
        font_family, font_size, show_line_numbers).to_config()
    pages = paginate_with_config(text, config)
    generator.write_pdf(out, pages, config.max_height)
    return generator.get_unprintable_warning()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    check_args(parser, args)

    if args.version:
        print(get_version_string())
        return 0
    if args.keytest:
        run_keyboard_test()
        return 0

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    from .model import InvalidConfiguration
    from .pdf_generator import FontLoadError

    if args.dump or args.pdf:
        try:
            text = _read_book(args.book)
        except (OSError, UnicodeDecodeError) as e:
            print(f"folio: cannot read {args.book}: {e}", file=sys.stderr)
            return 1
        try:
            if args.pdf:
                warning = export_pdf(text, args.pdf,
                                     args.font_family or DEFAULT_FONT_FAMILY,
                                     args.font_size or DEFAULT_FONT_SIZE,
                                     args.line_numbers)
                if warning:
                    print(warning, file=sys.stderr)
            else:
                width = ReaderConstants.DEFAULT_DUMP_WIDTH_UNITS if args.width is None else args.width
                height = ReaderConstants.DEFAULT_DUMP_HEIGHT if args.height is None else args.height
                dump_pages(text, width, height)
        except (InvalidConfiguration, FontLoadError) as e:
            print(f"folio: {e}", file=sys.stderr)
            return 2
        except OSError as e:
            print(f"folio: cannot write output: {e}", file=sys.stderr)
            return 1
        return 0

    # Lazy import to avoid importing UI deps for --dump/--pdf
    from .reader import Reader
    reader = Reader()
    try:
        reader.load_file(args.book)
    except (OSError, UnicodeDecodeError) as e:
        print(f"folio: cannot read {args.book}: {e}", file=sys.stderr)
        return 1
    reader.run()
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

#!/usr/bin/env python3
"""Folio - a paginated terminal book reader.

Usage:
    python main.py BOOK

Controls:
    Right, PgDn, Space: Next page
    Left, PgUp: Previous page
    +/-, s: Font size, size presets
    [ ] { }: Line width, page height
    a: Auto line width
    Ctrl-P: Export PDF
    F1: Help
    q, Ctrl-Q: Quit
"""

import sys

from folio.__main__ import main


if __name__ == "__main__":
    sys.exit(main())

"""Terminal interface using Blessed for display and Curtsies for input."""

import blessed
from typing import List, Optional
import sys
import select

from .constants import ReaderConstants
from .model import DisplayLine
from .themes import ThemeStyle, get_theme_style, resolve


class TerminalInterface:
    """Handles terminal I/O using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None
        self._curtsies_active: bool = False

    def setup(self):
        """Enter fullscreen mode and prepare terminal."""
        print(self.term.enter_fullscreen)
        print(self.term.hide_cursor)
        print(self.term.clear)
        self.is_fullscreen = True
        if self._curtsies_input is None:
            try:
                from curtsies import Input  # type: ignore
                # Enter raw mode immediately so reads work
                self._curtsies_input = Input(keynames='curtsies')  # type: ignore
                self._curtsies_input.__enter__()
                self._curtsies_active = True
            except Exception:
                # Raw mode cannot be entered without a real tty (CI, pipes);
                # the reader then runs without keyboard input.
                self._curtsies_input = None
                self._curtsies_active = False

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self.is_fullscreen:
            print(self.term.exit_fullscreen)
            print(self.term.normal_cursor)
            self.is_fullscreen = False
        if self._curtsies_input is not None:
            try:
                if self._curtsies_active:
                    self._curtsies_input.__exit__(None, None, None)  # type: ignore
            except Exception:
                # Teardown must not crash the app; raw mode is left anyway.
                pass
            finally:
                self._curtsies_input = None
                self._curtsies_active = False

    def clear_screen(self):
        """Clear the entire screen."""
        print(self.term.clear)

    def compose_line(self, line: DisplayLine, page_width: int, theme: ThemeStyle,
                     number: Optional[int] = None) -> str:
        """Compose one page row with theme colors, padded to the page width.

        Args:
            line: Display line to draw.
            page_width: Width of the text column in cells.
            theme: Colors for text, headers and line numbers.
            number: Line number to show in the gutter, or None for no gutter.
        """
        out = []
        if number is not None:
            gutter = f"{number}.".rjust(ReaderConstants.LINE_NUMBER_GUTTER - 1) + " "
            out.append(resolve(self.term, theme.subtext) + gutter + self.term.normal)
        if line.is_header:
            fmt = resolve(self.term, theme.header)
            if (line.header_level or 1) <= 2:
                fmt += self.term.underline
        else:
            fmt = resolve(self.term, theme.text)
        # Glyphs the width table rates narrow can still take two cells
        text = self.term.truncate(line.text, page_width)
        out.append(fmt + self.term.ljust(text, page_width) + self.term.normal)
        return ''.join(out)

    def draw_page(self, lines: List[DisplayLine], left_margin: int, page_width: int,
                  theme: Optional[ThemeStyle] = None, line_numbers: Optional[List[int]] = None,
                  status: str = ""):
        """Draw a page of display lines and the status line.

        Args:
            lines: Lines of the current page.
            left_margin: Columns to indent the page from the left edge.
            page_width: Width of the text column in cells.
            theme: Colors to draw with (system theme if None).
            line_numbers: Numbers for each line, or None to hide the gutter.
            status: Text for the status line.
        """
        theme = theme or get_theme_style("")
        background = resolve(self.term, theme.text)
        print(self.term.home + background + self.term.clear, end='')

        top = ReaderConstants.TOP_MARGIN_ROWS
        for y, line in enumerate(lines):
            number = line_numbers[y] if line_numbers and y < len(line_numbers) else None
            print(self.term.move(top + y, left_margin) + self.compose_line(line, page_width, theme, number),
                  end='')

        if not lines:
            print(self.term.move(top, left_margin) + resolve(self.term, theme.subtext)
                  + ReaderConstants.EMPTY_BOOK_MESSAGE + self.term.normal, end='')

        self.draw_status(status, theme)

    def draw_status(self, status: str, theme: Optional[ThemeStyle] = None):
        """Draw the status line with "F1 for help" right-justified."""
        theme = theme or get_theme_style("")
        help_text = "F1 for help"
        width = self.term.width
        room = width - len(help_text) - 1
        text = status[:max(0, room)].ljust(max(0, room)) + help_text + " "
        print(self.term.move(self.term.height - 1, 0) + resolve(self.term, theme.status)
              + text[:width] + self.term.normal, end='', flush=True)

    def draw_lines(self, lines: List[str], status: str = ""):
        """Draw plain text lines centered horizontally (help screen)."""
        print(self.term.home + self.term.clear, end='')
        max_len = max((len(line) for line in lines), default=0)
        left_margin = max(0, (self.term.width - max_len) // 2)
        start_y = max(1, (self.term.height - len(lines)) // 2)
        for i, line in enumerate(lines):
            print(self.term.move(start_y + i, left_margin) + line, end='')
        print(self.term.move(self.term.height - 1, 0) + status, end='', flush=True)

    def draw_error_message(self, message1: str, message2: str = ""):
        """Draw an error message in the center of the screen.

        Args:
            message1: Primary error message
            message2: Secondary information
        """
        print(self.term.home + self.term.clear, end='')

        center_y = self.term.height // 2
        box_width = max(len(message1), len(message2)) + 4
        left_margin = max(0, (self.term.width - box_width) // 2)

        print(self.term.move(center_y - 2, left_margin) + "╔" + "═" * (box_width - 2) + "╗", end='')
        print(self.term.move(center_y - 1, left_margin) + "║ " + message1.center(box_width - 4) + " ║", end='')
        if message2:
            print(self.term.move(center_y, left_margin) + "║ " + message2.center(box_width - 4) + " ║", end='')
            print(self.term.move(center_y + 1, left_margin) + "╚" + "═" * (box_width - 2) + "╝", end='')
        else:
            print(self.term.move(center_y, left_margin) + "╚" + "═" * (box_width - 2) + "╝", end='')

        help_text = "q to quit | Resize terminal to continue"
        help_pos = max(0, (self.term.width - len(help_text)) // 2)
        print(self.term.move(self.term.height - 1, help_pos), end='')
        print(help_text, end='', flush=True)

    def get_key(self, timeout=None):
        """Get a single keypress from the user.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            The curtsies key name as a string, or None if no key is available.
        """
        if self._curtsies_input is None:
            return None
        if timeout is None:
            return str(next(self._curtsies_input))
        r, _, _ = select.select([sys.stdin], [], [], float(timeout))
        if not r:
            return None
        return str(next(self._curtsies_input))

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Terminal height in rows (excluding status line)."""
        return self.term.height - ReaderConstants.STATUS_ROWS

"""Main reader controller for the terminal book reader."""

import logging
import os
import sys
import select
import signal
import termios
from typing import List, Optional

from .commands import CommandRegistry
from .constants import ReaderConstants
from .font_config import DEFAULT_FONT_FAMILY, DEFAULT_FONT_SIZE, clamp_font_size, font_size_label
from .keyboard import KeyboardHandler, KeyEvent, KeyType
from .metrics import ContainerMetrics, PdfMetricsProvider, TerminalMetricsProvider
from .model import InvalidConfiguration, Page, PaginationConfig
from .navigation import ELLIPSIS, ReadingPosition, line_number, page_number_window
from .paginator import paginate_with_config
from .pdf_generator import FontLoadError, PDFGenerator
from .settings_persistence import SettingsKeys, get_persistence
from .terminal import TerminalInterface
from .themes import DEFAULT_THEME, get_theme_style

logger = logging.getLogger(__name__)

HELP_LINES = [
    "",
    "PAGES                        LAYOUT",
    "  →  PgDn  Space  n  Next     +  -     Font size",
    "  ←  PgUp  p         Previous f        Font family",
    "  Home               First    s        Size preset",
    "  End                Last     l        Line numbers",
    "                              t        Theme",
    "                              [  ]     Line width",
    "                              {  }     Page height",
    "                              a        Auto width",
    "",
    "OTHER",
    "  Ctrl-P    Export PDF",
    "  F1  ?     Help",
    "  q  Ctrl-Q Quit",
]


class Reader:
    """Main book reader application controller."""

    def __init__(self, persistence=None):
        """Initialize the reader components."""
        self.terminal = TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.metrics = TerminalMetricsProvider(self.terminal)
        self.persistence = persistence or get_persistence()
        self.command_registry = CommandRegistry()
        self.filename: Optional[str] = None
        self.text = ""
        self.pages: List[Page] = []
        self.config: Optional[PaginationConfig] = None
        self.position = ReadingPosition()
        # Font and display settings
        self.font_family = DEFAULT_FONT_FAMILY
        self.font_size = DEFAULT_FONT_SIZE
        self.theme = DEFAULT_THEME
        self.show_line_numbers = False
        # Manual layout; None follows the terminal
        self.auto_width = True
        self.line_width: Optional[int] = None
        self.page_height: Optional[int] = None
        self.running = False
        self.error_mode = False  # True when the terminal is too small
        self.status_message: Optional[str] = None
        self.help_visible = False
        # Create pipe for resize signaling
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame  # Unused
        # Write to pipe to wake up select()
        os.write(self._resize_pipe_w, ReaderConstants.RESIZE_PIPE_MARKER)

    def load_file(self, filename: str):
        """Load a book and restore the settings saved for it.

        Raises:
            OSError: If the file cannot be read.
            UnicodeDecodeError: If the file is not UTF-8 text.
        """
        with open(filename, 'r', encoding='utf-8') as f:
            text = f.read()
        self.filename = filename
        self.set_text(text)
        self._apply_settings(self.persistence.load_settings(filename))

    def set_text(self, text: str):
        """Replace the book text and re-paginate from the first page."""
        self.text = text
        self.position = ReadingPosition()
        self.repaginate()

    def _apply_settings(self, settings: dict):
        self.font_family = settings.get(SettingsKeys.FONT_FAMILY) or self.font_family
        self.font_size = settings.get(SettingsKeys.FONT_SIZE) or self.font_size
        self.theme = settings.get(SettingsKeys.THEME) or self.theme
        show = settings.get(SettingsKeys.SHOW_LINE_NUMBERS)
        if show is not None:
            self.show_line_numbers = show
        auto_width = settings.get(SettingsKeys.AUTO_WIDTH)
        if auto_width is not None:
            self.auto_width = auto_width
        self.line_width = settings.get(SettingsKeys.LINE_WIDTH) or self.line_width
        self.page_height = settings.get(SettingsKeys.PAGE_HEIGHT) or self.page_height
        self.repaginate()
        last_page = settings.get(SettingsKeys.LAST_PAGE)
        if last_page is not None:
            self.position.go_to(last_page)

    def current_settings(self) -> dict:
        return {
            SettingsKeys.FONT_FAMILY: self.font_family,
            SettingsKeys.FONT_SIZE: self.font_size,
            SettingsKeys.THEME: self.theme,
            SettingsKeys.SHOW_LINE_NUMBERS: self.show_line_numbers,
            SettingsKeys.LAST_PAGE: self.position.page_index,
            SettingsKeys.AUTO_WIDTH: self.auto_width,
            SettingsKeys.LINE_WIDTH: self.line_width,
            SettingsKeys.PAGE_HEIGHT: self.page_height,
        }

    def save_settings(self) -> bool:
        """Save the current settings for the open book."""
        return self.persistence.save_settings(self.filename, self.current_settings())

    def set_font_size(self, size: int):
        self.font_size = clamp_font_size(size)
        self.status_message = f"Font size: {font_size_label(self.font_size)}"

    def measure(self) -> ContainerMetrics:
        """Largest constraints the terminal allows for the current font."""
        return self.metrics.measure_container(self.font_family, self.font_size,
                                              self.show_line_numbers)

    def layout_config(self, measured: ContainerMetrics) -> PaginationConfig:
        """Apply the manual line width and page height to measured limits."""
        width = measured.max_width_units
        if not self.auto_width and self.line_width is not None:
            width = min(self.line_width, width)
        height = measured.max_height
        if self.page_height is not None:
            height = min(self.page_height, height)
        return PaginationConfig(max_width_units=width, max_height=height)

    def current_layout(self) -> PaginationConfig:
        """Constraints in effect, measuring if nothing was paginated yet."""
        return self.config or self.layout_config(self.measure())

    def set_line_width(self, units: int):
        """Set a manual line width, clamped to what the terminal fits."""
        limit = self.measure().max_width_units
        self.auto_width = False
        self.line_width = max(1, min(units, limit))
        self.status_message = f"Line width: {self.line_width} / {limit}"

    def set_page_height(self, lines: int):
        """Set a manual page height, clamped to what the terminal fits."""
        limit = self.measure().max_height
        self.page_height = max(1, min(lines, limit))
        self.status_message = f"Page height: {self.page_height} / {limit}"

    def toggle_auto_width(self):
        """Switch between the widest line that fits and a manual width."""
        if self.auto_width:
            # Keep the width currently shown as the manual one
            self.line_width = int(self.current_layout().max_width_units)
            self.auto_width = False
        else:
            self.line_width = None
            self.auto_width = True
        self.status_message = f"Auto width: {'on' if self.auto_width else 'off'}"

    def _terminal_too_small(self) -> bool:
        return (self.terminal.width < ReaderConstants.MIN_TERMINAL_WIDTH
                or self.terminal.height < ReaderConstants.MIN_TERMINAL_HEIGHT)

    def repaginate(self) -> bool:
        """Recompute constraints for the terminal and paginate from scratch.

        Returns:
            True if the text could be paginated, False if the reader went
            into error mode because the terminal is too small.
        """
        if self._terminal_too_small():
            self.error_mode = True
            return False
        metrics = self.measure()
        config = self.layout_config(metrics)
        try:
            pages = paginate_with_config(self.text, config)
        except InvalidConfiguration as e:
            logger.debug("Cannot paginate for %s: %s", metrics, e)
            self.error_mode = True
            return False
        self.error_mode = False
        self.config = config
        self.pages = pages
        self.position.set_page_count(len(pages))
        return True

    def current_page(self) -> Page:
        if not self.pages:
            return []
        return self.pages[self.position.page_index]

    def current_line_numbers(self) -> Optional[List[int]]:
        """Book-wide numbers for the lines of the current page, if shown."""
        if not self.show_line_numbers or self.config is None:
            return None
        page_index = self.position.page_index
        return [line_number(page_index, i, self.config.max_height)
                for i in range(len(self.current_page()))]

    def status_text(self) -> str:
        """Status line: book name, page indicator and page buttons."""
        if self.status_message:
            return f" {self.status_message}"
        name = os.path.basename(self.filename) if self.filename else "[no book]"
        current = self.position.page_index + 1
        buttons = []
        for number in page_number_window(current, self.position.page_count,
                                         ReaderConstants.VISIBLE_PAGE_BUTTONS):
            if number == ELLIPSIS:
                buttons.append("⋯")
            elif number == current:
                buttons.append(f"[{number}]")
            else:
                buttons.append(str(number))
        return f" {name}  {self.position.indicator()}  {' '.join(buttons)}"

    def run(self):
        """Run the main reader loop."""
        self.terminal.setup()
        self.running = True

        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)

        try:
            with self.terminal.term.cbreak():
                # Disable flow control AFTER entering cbreak mode so Ctrl-Q arrives
                old_settings = None
                try:
                    old_settings = termios.tcgetattr(sys.stdin)
                    new_settings = list(old_settings)
                    new_settings[0] &= ~(termios.IXON | termios.IXOFF)
                    termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
                except (termios.error, AttributeError, OSError):
                    old_settings = None

                self.repaginate()
                need_draw = True

                while self.running:
                    if need_draw:
                        self._draw()
                        need_draw = False

                    # Wait for input on stdin or resize pipe
                    ready, _, _ = select.select([0, self._resize_pipe_r], [], [])

                    if self._resize_pipe_r in ready:
                        os.read(self._resize_pipe_r, 1024)
                        if self.running:
                            self.repaginate()
                            need_draw = True
                    elif 0 in ready:
                        key_event = self.keyboard.get_key_event(timeout=0)
                        if key_event:
                            need_draw = self._handle_key_event(key_event)

                if old_settings is not None:
                    try:
                        termios.tcsetattr(sys.stdin, termios.TCSANOW, old_settings)
                    except (termios.error, OSError):
                        pass

        except KeyboardInterrupt:
            pass
        finally:
            signal.signal(signal.SIGWINCH, original_winch_handler)
            os.close(self._resize_pipe_r)
            os.close(self._resize_pipe_w)
            self.save_settings()
            self.terminal.cleanup()

    def _draw(self):
        """Draw the current reader state to terminal."""
        if self.help_visible:
            self._draw_help()
            return
        if self.error_mode:
            self._draw_error()
            return

        page_width = self.metrics.page_columns(self.show_line_numbers)
        if self.config is not None:
            # A manual line width draws a narrower page
            page_width = min(page_width, int(self.config.max_width_units * ReaderConstants.CELLS_PER_WIDTH_UNIT))
        total_width = page_width + (ReaderConstants.LINE_NUMBER_GUTTER if self.show_line_numbers else 0)
        left_margin = max(0, (self.terminal.width - total_width) // 2)
        self.terminal.draw_page(
            self.current_page(),
            left_margin=left_margin,
            page_width=page_width,
            theme=get_theme_style(self.theme),
            line_numbers=self.current_line_numbers(),
            status=self.status_text(),
        )

    def _draw_error(self):
        """Draw error message when the terminal is too small."""
        self.terminal.draw_error_message(
            ReaderConstants.TERMINAL_TOO_SMALL_MESSAGE.format(
                ReaderConstants.MIN_TERMINAL_WIDTH, ReaderConstants.MIN_TERMINAL_HEIGHT),
            ReaderConstants.CURRENT_SIZE_MESSAGE.format(self.terminal.width, self.terminal.height),
        )

    def _draw_help(self):
        self.terminal.draw_lines(["FOLIO HELP"] + HELP_LINES, status=" Press any key to continue")

    def show_help(self):
        """Show the help screen."""
        self.help_visible = True

    def hide_help(self):
        """Hide the help screen and return to the book."""
        self.help_visible = False

    def _handle_key_event(self, key_event: KeyEvent) -> bool:
        """Handle a keyboard event.

        Returns:
            True if the screen needs to be redrawn
        """
        # If help is visible, any key dismisses it
        if self.help_visible:
            self.hide_help()
            return True

        had_message = self.status_message is not None
        self.status_message = None

        # Only quitting works while the terminal is too small
        if self.error_mode:
            if key_event.value == 'q' and key_event.key_type in (KeyType.REGULAR, KeyType.CTRL):
                self.running = False
            return had_message

        return self.command_registry.execute(self, key_event) or had_message

    def pdf_filename(self) -> str:
        """Output path for PDF export, next to the book."""
        if self.filename:
            return os.path.splitext(self.filename)[0] + ".pdf"
        return "book.pdf"

    def export_pdf(self, filename: Optional[str] = None) -> bool:
        """Paginate for a PDF page and write the book as a PDF.

        Returns:
            True on success; the outcome is reported in status_message.
        """
        filename = filename or self.pdf_filename()
        try:
            config = PdfMetricsProvider().measure_container(
                self.font_family, self.font_size, self.show_line_numbers).to_config()
            pages = paginate_with_config(self.text, config)
            generator = PDFGenerator(self.font_family, self.font_size, self.show_line_numbers)
            generator.write_pdf(filename, pages, config.max_height)
        except (InvalidConfiguration, FontLoadError, OSError) as e:
            logger.warning("PDF export to %s failed: %s", filename, e)
            self.status_message = ReaderConstants.PDF_FAILED_MESSAGE.format(e)
            return False
        self.status_message = (generator.get_unprintable_warning()
                               or ReaderConstants.PDF_SAVED_MESSAGE.format(filename))
        return True

"""Generate a PDF of paginated book text.

This module renders pages produced by the paginator with reportlab, one
PDF page per book page. Latin text uses the standard PDF font of the
chosen family; CJK text uses reportlab's built-in STSong-Light CID font,
so no font files have to be installed.
"""

import io
import logging
import os
import tempfile
from typing import List, Optional, Tuple

from reportlab.lib.pagesizes import letter
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfgen import canvas

from .font_config import CJK_PDF_FONT, DEFAULT_FONT_FAMILY, DEFAULT_FONT_SIZE, LINE_SPACING, get_font_config
from .model import DisplayLine, Page
from .navigation import line_number, page_indicator

logger = logging.getLogger(__name__)

# Header size relative to body text, by level
HEADER_SCALE = {1: 1.5, 2: 1.25, 3: 1.125, 4: 1.0, 5: 0.875, 6: 0.75}

# Ranges drawn with the CJK font
_CJK_RANGES = (
    (0x2E80, 0x9FFF),  # radicals, punctuation, kana, ideographs
    (0xF900, 0xFAFF),  # compatibility ideographs
    (0xFF00, 0xFFEF),  # fullwidth forms
)

_BASE = 0
_CJK = 1


class FontLoadError(Exception):
    """Exception raised when a font cannot be loaded."""


def _is_cjk(char: str) -> bool:
    code = ord(char)
    return any(lo <= code <= hi for lo, hi in _CJK_RANGES)


class PDFGenerator:
    """Generate PDF files from paginated pages."""

    def __init__(self, font_family: str = DEFAULT_FONT_FAMILY, font_size: int = DEFAULT_FONT_SIZE,
                 show_line_numbers: bool = False,
                 page_size: Tuple[float, float] = letter, margin: float = 72.0):
        """Initialize PDF generator.

        Args:
            font_family: Family key ("mono", "sans" or "serif").
            font_size: Body font size in points.
            show_line_numbers: Whether to print book-wide line numbers.
            page_size: (width, height) in points.
            margin: Uniform page margin in points.

        Raises:
            FontLoadError: If the font family is unknown or the CJK font
                cannot be registered.
        """
        config = get_font_config(font_family)
        if config is None:
            raise FontLoadError(f"Unknown font family: {font_family}")
        self.font_name = config.pdf_name
        self.font_name_bold = config.pdf_bold_name
        self.font_size = font_size
        self.line_height = font_size * LINE_SPACING
        self.show_line_numbers = show_line_numbers
        self.page_width, self.page_height = page_size
        self.margin = margin
        self._register_cjk_font()

        # Track unprintable characters for warning
        self.unprintable_chars = set()
        self.has_unprintable = False

    def _register_cjk_font(self) -> None:
        """Register the CJK CID font if not already registered.

        Raises:
            FontLoadError: If reportlab cannot provide the font.
        """
        if CJK_PDF_FONT in pdfmetrics.getRegisteredFontNames():
            return
        try:
            pdfmetrics.registerFont(UnicodeCIDFont(CJK_PDF_FONT))
        except Exception as e:
            raise FontLoadError(f"Could not register {CJK_PDF_FONT} font: {e}")

    @property
    def gutter_width(self) -> float:
        """Width reserved for line numbers, 0 when they are off."""
        if not self.show_line_numbers:
            return 0.0
        return pdfmetrics.stringWidth("9999. ", self.font_name, self.font_size)

    @property
    def indicator_y(self) -> float:
        """Baseline of the page indicator, in the line reserved below the text."""
        return self.margin

    @property
    def text_width(self) -> float:
        """Width available to a line of text."""
        return self.page_width - 2 * self.margin - self.gutter_width

    def generate_pdf(self, pages: List[Page], max_height: Optional[int] = None) -> bytes:
        """Generate PDF from paginated pages.

        Args:
            pages: Pages from the paginator.
            max_height: Page height the pages were paginated with; used to
                number lines. Defaults to the length of the first page.

        Returns:
            Complete PDF document as bytes.
        """
        # Reset unprintable tracking for this generation
        self.unprintable_chars = set()
        self.has_unprintable = False
        if max_height is None:
            max_height = len(pages[0]) if pages else 0

        pdf_buffer = io.BytesIO()
        c = canvas.Canvas(pdf_buffer, pagesize=(self.page_width, self.page_height))

        for page_index, page in enumerate(pages):
            y_position = self.page_height - self.margin - self.font_size
            for line_index, line in enumerate(page):
                if self.show_line_numbers:
                    self._draw_line_number(c, y_position, line_number(page_index, line_index, max_height))
                self._draw_line(c, y_position, line)
                y_position -= self.line_height

            c.setFont(self.font_name, self.font_size * 0.75)
            c.drawCentredString(self.page_width / 2, self.indicator_y,
                                page_indicator(page_index, len(pages)))
            c.showPage()

        c.save()
        logger.debug("Generated PDF with %d pages", len(pages))
        pdf_buffer.seek(0)
        return pdf_buffer.read()

    def write_pdf(self, filename: str, pages: List[Page], max_height: Optional[int] = None) -> None:
        """Generate a PDF and write it to filename atomically.

        Raises:
            OSError: If the file cannot be written.
        """
        data = self.generate_pdf(pages, max_height)
        dir_name = os.path.dirname(filename) or '.'
        with tempfile.NamedTemporaryFile(mode='wb', dir=dir_name, suffix='.pdf',
                                         delete=False) as temp_file:
            temp_filename = temp_file.name
            try:
                temp_file.write(data)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            except OSError:
                temp_file.close()
                os.remove(temp_filename)
                raise
        os.replace(temp_filename, filename)

    def _draw_line_number(self, c, y_position: float, number: int) -> None:
        c.setFont(self.font_name, self.font_size)
        space = pdfmetrics.stringWidth(" ", self.font_name, self.font_size)
        c.drawRightString(self.margin + self.gutter_width - space, y_position, f"{number}.")

    def _draw_line(self, c, y_position: float, line: DisplayLine) -> None:
        if not line.text:
            return
        if line.is_header:
            base_font = self.font_name_bold
            size = self.font_size * HEADER_SCALE.get(line.header_level or 1, 1.0)
        else:
            base_font = self.font_name
            size = self.font_size

        runs = self._split_runs(line.text)
        fonts = {_BASE: base_font, _CJK: CJK_PDF_FONT}
        width = sum(pdfmetrics.stringWidth(seg, fonts[kind], size) for kind, seg in runs)

        text = c.beginText(self.margin + self.gutter_width, y_position)
        # Squeeze lines that the width estimate let run past the margin
        if width > self.text_width > 0:
            text.setHorizScale(100.0 * self.text_width / width)
        for kind, seg in runs:
            text.setFont(fonts[kind], size)
            text.textOut(seg)
        c.drawText(text)

    def _split_runs(self, text: str) -> List[Tuple[int, str]]:
        """Split text into runs drawn with the base font or the CJK font.

        The standard PDF fonts cover Windows-1252. CJK characters go to the
        CID font; anything else is replaced with '?' and tracked for
        warning messages.
        """
        runs: List[Tuple[int, List[str]]] = []
        for char in text:
            if _is_cjk(char):
                kind = _CJK
            else:
                kind = _BASE
                try:
                    char.encode('cp1252')
                except UnicodeEncodeError:
                    self.unprintable_chars.add(char)
                    self.has_unprintable = True
                    char = '?'
            if runs and runs[-1][0] == kind:
                runs[-1][1].append(char)
            else:
                runs.append((kind, [char]))
        return [(kind, ''.join(chars)) for kind, chars in runs]

    def get_unprintable_warning(self) -> Optional[str]:
        """Get warning message about unprintable characters.

        Returns:
            Warning message if unprintable chars were found, None otherwise.
        """
        if not self.has_unprintable:
            return None

        char_list = sorted(self.unprintable_chars)

        # Show unicode code point for non-displayable characters
        formatted_chars = []
        for char in char_list[:10]:
            if ord(char) < 32 or ord(char) == 127:
                formatted_chars.append(f"U+{ord(char):04X}")
            else:
                formatted_chars.append(f"'{char}' (U+{ord(char):04X})")

        if len(char_list) > 10:
            formatted_chars.append(f"... and {len(char_list) - 10} more")

        return (f"Warning: {len(self.unprintable_chars)} unique unprintable character(s) "
                f"were replaced with '?' in the PDF output: {', '.join(formatted_chars)}")

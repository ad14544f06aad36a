"""Metrics providers - translate font and container state into page constraints.

The pagination engine only understands a maximum line width in width
units and a maximum number of lines per page. A metrics provider owns
everything else: how big the container is, how wide one width unit is
for a font, and how tall a line is. Two providers ship with folio: one
for the terminal reader and one for PDF export.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import NamedTuple, Tuple

from reportlab.lib.pagesizes import letter
from reportlab.pdfbase import pdfmetrics

from .constants import ReaderConstants
from .font_config import FontConfig, LINE_SPACING, MONOSPACE_FAMILY, WIDTH_SAMPLE, get_font_config
from .model import PaginationConfig

logger = logging.getLogger(__name__)


class ContainerMetrics(NamedTuple):
    max_width_units: int
    max_height: int

    def to_config(self) -> PaginationConfig:
        return PaginationConfig(max_width_units=self.max_width_units, max_height=self.max_height)


def _fit(available: float, per_item: float) -> int:
    """Number of whole items of size per_item that fit in available.

    At least one item fits whenever there is any room at all.
    """
    if available <= 0 or per_item <= 0:
        return 0
    return max(1, math.floor(available / per_item))


class MetricsProvider(ABC):
    """Computes pagination constraints for a font in a container.

    Lengths are in whatever unit the provider works in (terminal cells,
    PDF points); only the ratios matter.
    """

    @abstractmethod
    def measure_glyph_width(self, font_family: str, font_size: int) -> float:
        """Width of one width unit: a representative wide (CJK) glyph."""

    @abstractmethod
    def measure_sample_width(self, font_family: str, font_size: int) -> float:
        """Width of the WIDTH_SAMPLE string set in font_family."""

    @abstractmethod
    def line_height(self, font_family: str, font_size: int) -> float:
        """Height of one display line."""

    @abstractmethod
    def available_area(self, font_family: str, font_size: int,
                       show_line_numbers: bool) -> Tuple[float, float]:
        """(width, height) of the area text may occupy."""

    def font_adjustment(self, font_family: str, font_size: int) -> float:
        """Ratio of monospace sample width to font_family sample width.

        Proportional families set Latin text narrower than monospace, so
        more width units fit on a line.
        """
        current = self.measure_sample_width(font_family, font_size)
        mono = self.measure_sample_width(MONOSPACE_FAMILY, font_size)
        if current <= 0:
            return 1.0
        return mono / current

    def measure_container(self, font_family: str, font_size: int,
                          show_line_numbers: bool = False) -> ContainerMetrics:
        """Compute the width/height constraints for the container."""
        width, height = self.available_area(font_family, font_size, show_line_numbers)
        glyph = self.measure_glyph_width(font_family, font_size)
        adjustment = self.font_adjustment(font_family, font_size)
        metrics = ContainerMetrics(
            max_width_units=_fit(width * adjustment, glyph),
            max_height=_fit(height, self.line_height(font_family, font_size)),
        )
        logger.debug("Container %.1fx%.1f for %s/%s -> %s",
                     width, height, font_family, font_size, metrics)
        return metrics


class TerminalMetricsProvider(MetricsProvider):
    """Constraints for a page drawn on a character-cell terminal.

    A terminal has one fixed cell size and one font, so the family and
    size do not change the result. One width unit is the two cells a CJK
    glyph occupies.
    """

    def __init__(self, terminal):
        """Initialize with a TerminalInterface (anything with width/height)."""
        self.terminal = terminal

    def measure_glyph_width(self, font_family: str, font_size: int) -> float:
        return float(ReaderConstants.CELLS_PER_WIDTH_UNIT)

    def measure_sample_width(self, font_family: str, font_size: int) -> float:
        return float(len(WIDTH_SAMPLE))

    def line_height(self, font_family: str, font_size: int) -> float:
        return 1.0

    def page_columns(self, show_line_numbers: bool = False) -> int:
        """Columns available for page text, excluding the line-number gutter."""
        columns = min(self.terminal.width - 2 * ReaderConstants.SIDE_MARGIN_COLUMNS,
                      ReaderConstants.MAX_PAGE_COLUMNS)
        if show_line_numbers:
            columns -= ReaderConstants.LINE_NUMBER_GUTTER
        return max(0, columns)

    def available_area(self, font_family: str, font_size: int,
                       show_line_numbers: bool) -> Tuple[float, float]:
        rows = self.terminal.height - ReaderConstants.TOP_MARGIN_ROWS
        return float(self.page_columns(show_line_numbers)), float(max(0, rows))


class PdfMetricsProvider(MetricsProvider):
    """Constraints for a page of a PDF document, measured with reportlab."""

    def __init__(self, page_size: Tuple[float, float] = letter, margin: float = 72.0):
        """Initialize with a page size and uniform margin, both in points."""
        self.page_width, self.page_height = page_size
        self.margin = margin

    def _font(self, font_family: str) -> FontConfig:
        # Unknown families measure like monospace
        return get_font_config(font_family) or get_font_config(MONOSPACE_FAMILY)

    def measure_glyph_width(self, font_family: str, font_size: int) -> float:
        # CJK ideographs fill the em square
        return float(font_size)

    def measure_sample_width(self, font_family: str, font_size: int) -> float:
        return pdfmetrics.stringWidth(WIDTH_SAMPLE, self._font(font_family).pdf_name, font_size)

    def line_height(self, font_family: str, font_size: int) -> float:
        return font_size * LINE_SPACING

    def gutter_width(self, font_family: str, font_size: int) -> float:
        """Width reserved on the left for line numbers."""
        return pdfmetrics.stringWidth("9999. ", self._font(font_family).pdf_name, font_size)

    def available_area(self, font_family: str, font_size: int,
                       show_line_numbers: bool) -> Tuple[float, float]:
        width = self.page_width - 2 * self.margin
        if show_line_numbers:
            width -= self.gutter_width(font_family, font_size)
        # One line at the bottom holds the page indicator
        height = self.page_height - 2 * self.margin - self.line_height(font_family, font_size)
        return width, height

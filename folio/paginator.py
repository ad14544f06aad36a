"""Pagination engine - reflows text into height-bounded pages of display lines.

The text is split into logical lines on '\\n'. Each logical line is a
blank line, a markdown heading, or body text; body text is wrapped by
width, and every produced display line is appended to the current page.
A page is closed as soon as it holds max_height lines, so only the last
page of a result can be shorter.

paginate() is a pure function of its arguments. Callers re-run it from
scratch whenever the text, the font or the container changes.
"""

import logging
from typing import List

from .headers import parse_header
from .model import DisplayLine, Page, PaginationConfig, validate_constraints
from .wrap import wrap_line

logger = logging.getLogger(__name__)


def paginate(text: str, max_width_units: float, max_height: int) -> List[Page]:
    """Split text into pages of display lines.

    Args:
        text: Source text; logical lines are separated by '\\n'.
        max_width_units: Maximum summed character width of a body line.
        max_height: Maximum number of display lines per page.

    Returns:
        List of pages in reading order.

    Raises:
        InvalidConfiguration: If either constraint is not positive. Nothing
            is processed in that case.
    """
    validate_constraints(max_width_units, max_height)

    pages: List[Page] = []
    page: Page = []

    def push(line: DisplayLine) -> None:
        nonlocal page
        page.append(line)
        if len(page) >= max_height:
            pages.append(page)
            page = []

    for line in text.split('\n'):
        if not line.strip():
            push(DisplayLine(''))
            continue

        header = parse_header(line)
        if header.is_header:
            push(DisplayLine(header.text, is_header=True, header_level=header.header_level))
            continue

        for display_line in wrap_line(line, max_width_units):
            push(display_line)

    if page:
        pages.append(page)

    logger.debug("Paginated %d characters into %d pages (width=%s, height=%s)",
                 len(text), len(pages), max_width_units, max_height)
    return pages


def paginate_with_config(text: str, config: PaginationConfig) -> List[Page]:
    """Paginate using constraints bundled in a PaginationConfig."""
    return paginate(text, config.max_width_units, config.max_height)


def page_text(page: Page) -> str:
    """Join a page's display lines into plain text, one row per line.

    Header rows get their '#' marker back so the output reads as the
    source did.
    """
    rows = []
    for line in page:
        if line.is_header:
            rows.append('#' * (line.header_level or 1) + ' ' + line.text)
        else:
            rows.append(line.text)
    return '\n'.join(rows)


class Paginator:
    """Formats one text into pages for a fixed set of constraints."""

    def __init__(self, text: str, config: PaginationConfig):
        """Initialize the paginator.

        Args:
            text: Source text to paginate.
            config: Width and height constraints.
        """
        self.text = text
        self.config = config
        self.pages: List[Page] = []

    def format_pages(self) -> List[Page]:
        """Paginate the text, replacing any previously formatted pages.

        Raises:
            InvalidConfiguration: If the config is unusable.
        """
        self.pages = paginate_with_config(self.text, self.config)
        return self.pages

    def get_page_count(self) -> int:
        """Return the total number of pages."""
        return len(self.pages)

    def get_page(self, page_num: int) -> Page:
        """Get a specific page (0-indexed), or an empty list if out of range."""
        if 0 <= page_num < len(self.pages):
            return self.pages[page_num]
        return []

    def format_for_print(self) -> str:
        """Format all pages as one string with form feeds between pages."""
        return '\n\f\n'.join(page_text(page) for page in self.pages)

"""Reading position and page-number helpers for the reader UI."""

from typing import List, Union

PageButton = Union[int, str]
ELLIPSIS = '...'


class ReadingPosition:
    """Current page index within a paginated book.

    The index is always valid for the current page count: 0 when there are
    no pages, otherwise in [0, page_count - 1].
    """

    def __init__(self, page_count: int = 0, page_index: int = 0):
        self.page_count = max(0, page_count)
        self.page_index = 0
        self.go_to(page_index)

    def set_page_count(self, page_count: int) -> None:
        """Update the page count after re-pagination, clamping the index."""
        self.page_count = max(0, page_count)
        self.go_to(self.page_index)

    def go_to(self, page_index: int) -> bool:
        """Move to page_index (clamped). Returns True if the index changed."""
        old = self.page_index
        if self.page_count == 0:
            self.page_index = 0
        else:
            self.page_index = max(0, min(page_index, self.page_count - 1))
        return self.page_index != old

    def next_page(self) -> bool:
        return self.go_to(self.page_index + 1)

    def prev_page(self) -> bool:
        return self.go_to(self.page_index - 1)

    def first_page(self) -> bool:
        return self.go_to(0)

    def last_page(self) -> bool:
        return self.go_to(self.page_count - 1)

    def indicator(self) -> str:
        return page_indicator(self.page_index, self.page_count)


def page_indicator(page_index: int, page_count: int) -> str:
    """Return the "current / total" label, 1-based; "0 / 0" when empty."""
    if page_count <= 0:
        return "0 / 0"
    return f"{page_index + 1} / {page_count}"


def page_number_window(current: int, total: int, visible: int = 5) -> List[PageButton]:
    """Return 1-based page numbers to show as buttons, with ELLIPSIS gaps.

    All pages are listed when they fit. Otherwise the first and last page
    are always present, with the current page and its neighbours between
    them.

    Args:
        current: Current page, 1-based.
        total: Number of pages.
        visible: Number of buttons that fit without collapsing.
    """
    if total <= visible:
        return list(range(1, total + 1))
    if current <= 3:
        return [1, 2, 3, 4, ELLIPSIS, total]
    if current >= total - 2:
        return [1, ELLIPSIS, total - 3, total - 2, total - 1, total]
    return [1, ELLIPSIS, current - 1, current, current + 1, ELLIPSIS, total]


def line_number(page_index: int, line_index: int, max_height: int) -> int:
    """Return the 1-based book-wide number of a line on a page."""
    return line_index + 1 + page_index * max_height

"""Constants and configuration for the folio reader."""

class ReaderConstants:
    """Central configuration constants for the reader."""

    # Screen layout
    TOP_MARGIN_ROWS = 1  # Blank rows above the page
    STATUS_ROWS = 1  # Status line at the bottom
    SIDE_MARGIN_COLUMNS = 2  # Columns kept free on each side of the page
    MAX_PAGE_COLUMNS = 96  # Page width cap on very wide terminals
    CELLS_PER_WIDTH_UNIT = 2  # A CJK glyph occupies two terminal cells
    LINE_NUMBER_GUTTER = 6  # Columns reserved for line numbers ("9999. ")

    # Page-number buttons shown in the status line
    VISIBLE_PAGE_BUTTONS = 5

    # Dump output defaults
    DEFAULT_DUMP_WIDTH_UNITS = 40
    DEFAULT_DUMP_HEIGHT = 30

    # Terminal requirements
    MIN_TERMINAL_WIDTH = 20  # Minimum terminal width required for display
    MIN_TERMINAL_HEIGHT = 4  # Minimum terminal height required for display

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize

    # Status messages
    TERMINAL_TOO_SMALL_MESSAGE = "Terminal too small! Need at least {}x{}."
    CURRENT_SIZE_MESSAGE = "Current size: {}x{}."
    EMPTY_BOOK_MESSAGE = "No content"
    PDF_SAVED_MESSAGE = "Saved PDF to {}"
    PDF_FAILED_MESSAGE = "PDF export failed: {}"

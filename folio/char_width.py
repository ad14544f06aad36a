"""Approximate visual width of characters, in width units.

One width unit is the footprint of a CJK ideograph. Latin letters and
digits are a bit wider than half of that; punctuation and spaces are
half. There is no font-metrics engine behind this, only character
classes checked in priority order.
"""

# Width table
WIDE_WIDTH = 1.0
CURLY_QUOTE_WIDTH = 0.5
ALNUM_WIDTH = 0.6
PUNCTUATION_WIDTH = 0.5
WHITESPACE_WIDTH = 0.5
DEFAULT_WIDTH = 0.5

CJK_FIRST = '一'
CJK_LAST = '龥'
FULLWIDTH_PUNCTUATION = frozenset('，。；：！？、')
CURLY_QUOTES = frozenset('“”‘’')
ASCII_PUNCTUATION = frozenset('.,!?;:\'"()[]{}')


def _is_ascii_alnum(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


def char_width(ch: str) -> float:
    """Return the width of a single character in width units.

    The first matching class wins:
    - CJK unified ideographs and fullwidth punctuation: 1.0
    - curly quotation marks: 0.5
    - ASCII letters and digits: 0.6
    - ASCII punctuation and brackets: 0.5
    - whitespace: 0.5
    - anything else: 0.5
    """
    if CJK_FIRST <= ch <= CJK_LAST or ch in FULLWIDTH_PUNCTUATION:
        return WIDE_WIDTH
    if ch in CURLY_QUOTES:
        return CURLY_QUOTE_WIDTH
    if _is_ascii_alnum(ch):
        return ALNUM_WIDTH
    if ch in ASCII_PUNCTUATION:
        return PUNCTUATION_WIDTH
    if ch.isspace():
        return WHITESPACE_WIDTH
    return DEFAULT_WIDTH


def text_width(text: str) -> float:
    """Sum of char_width over every character of text."""
    return sum(char_width(ch) for ch in text)

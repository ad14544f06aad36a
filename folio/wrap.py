"""Greedy character-level wrapping of body lines."""

from typing import Iterator, List

from .char_width import char_width
from .model import DisplayLine


def wrap_line(text: str, max_width_units: float) -> Iterator[DisplayLine]:
    """Pack the characters of a body line into width-bounded display lines.

    Characters are taken left to right. When the next character would push
    the running width past max_width_units and the line in progress is not
    empty, the line in progress is emitted and the character starts a new
    one. A character wider than the bound on its own therefore ends up
    alone on a line instead of stalling the scan.

    Yields:
        Non-header DisplayLines in order. An empty text yields nothing.
    """
    current: List[str] = []
    current_width = 0.0
    for ch in text:
        width = char_width(ch)
        if current and current_width + width > max_width_units:
            yield DisplayLine(''.join(current))
            current = []
            current_width = 0.0
        current.append(ch)
        current_width += width
    if current:
        yield DisplayLine(''.join(current))

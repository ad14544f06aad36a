"""Data model shared by the pagination engine and the reader.

A page is a plain list of display lines; a result is a list of pages.
Nothing here is cached or mutated by the engine once produced.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import List, Optional


class InvalidConfiguration(ValueError):
    """Raised when layout constraints leave no room to place text."""


@dataclass(frozen=True)
class DisplayLine:
    """One renderable row of a page.

    Attributes:
        text: Text of the row (empty for a blank-line marker)
        is_header: Whether the row came from a markdown heading
        header_level: Heading level 1-6, only set for header rows
    """
    text: str
    is_header: bool = False
    header_level: Optional[int] = None


Page = List[DisplayLine]


@dataclass(frozen=True)
class PaginationConfig:
    """Layout constraints consumed by the paginator.

    Recomputed by a metrics provider whenever the font or the container
    changes.
    """
    max_width_units: float
    max_height: int

    def validate(self) -> None:
        """Raise InvalidConfiguration unless both constraints are usable."""
        validate_constraints(self.max_width_units, self.max_height)


def validate_constraints(max_width_units: float, max_height: int) -> None:
    """Check raw pagination constraints.

    Raises:
        InvalidConfiguration: If the width is not a positive number or the
            height is not a positive integer.
    """
    if isinstance(max_width_units, bool) or not isinstance(max_width_units, numbers.Real):
        raise InvalidConfiguration(f"max_width_units must be a number, got {max_width_units!r}")
    if not max_width_units > 0:
        raise InvalidConfiguration(f"max_width_units must be positive, got {max_width_units!r}")
    if isinstance(max_height, bool) or not isinstance(max_height, numbers.Integral):
        raise InvalidConfiguration(f"max_height must be an integer, got {max_height!r}")
    if max_height <= 0:
        raise InvalidConfiguration(f"max_height must be positive, got {max_height!r}")

"""Font configuration for the folio reader.

This module defines the font families a reader can choose from, the
preset font sizes, and the PDF fonts used for each family. Fonts only
influence the constraints a metrics provider computes; the pagination
engine never sees them.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


# Font size bounds (pixels on screen, points in PDF output)
MIN_FONT_SIZE = 12
MAX_FONT_SIZE = 40
DEFAULT_FONT_SIZE = 18
FONT_SIZE_STEP = 2

# Line height as a multiple of the font size
LINE_SPACING = 1.75

# Representative characters used to compare families against monospace
WIDTH_SAMPLE = "Hello123.,"

# Built-in PDF font used for CJK text (no font file needed)
CJK_PDF_FONT = "STSong-Light"


@dataclass(frozen=True)
class FontConfig:
    """Configuration for a font family.

    Attributes:
        family: Family key ("mono", "sans" or "serif")
        label: Display name shown in the reader
        pdf_name: Built-in PDF font for regular text
        pdf_bold_name: Built-in PDF font for headers
        is_monospace: Whether every glyph has the same advance
    """
    family: str
    label: str
    pdf_name: str
    pdf_bold_name: str
    is_monospace: bool

    @classmethod
    def create_builtin(cls, family: str, label: str, pdf_name: str,
                       pdf_bold_name: str, is_monospace: bool = False) -> 'FontConfig':
        """Create a configuration backed by one of the standard 14 PDF fonts."""
        return cls(
            family=family,
            label=label,
            pdf_name=pdf_name,
            pdf_bold_name=pdf_bold_name,
            is_monospace=is_monospace,
        )


FONT_CONFIGS: Dict[str, FontConfig] = {
    "mono": FontConfig.create_builtin(
        family="mono",
        label="Monospace",
        pdf_name="Courier",
        pdf_bold_name="Courier-Bold",
        is_monospace=True,
    ),
    "sans": FontConfig.create_builtin(
        family="sans",
        label="Sans serif",
        pdf_name="Helvetica",
        pdf_bold_name="Helvetica-Bold",
    ),
    "serif": FontConfig.create_builtin(
        family="serif",
        label="Serif",
        pdf_name="Times-Roman",
        pdf_bold_name="Times-Bold",
    ),
}

FONT_FAMILIES: List[str] = list(FONT_CONFIGS)
DEFAULT_FONT_FAMILY = "sans"

# Reference family the others are compared against when measuring width
MONOSPACE_FAMILY = next(c.family for c in FONT_CONFIGS.values() if c.is_monospace)

# Font size presets, cycled with the preset key
FONT_SIZE_PRESETS: Dict[str, int] = {
    "XS": 16,
    "S": 20,
    "M": 24,
    "L": 32,
    "XL": 40,
}


def get_font_config(font_family: str) -> Optional[FontConfig]:
    """Get font configuration by family key.

    Args:
        font_family: Family key ("mono", "sans" or "serif")

    Returns:
        FontConfig if found, None otherwise
    """
    return FONT_CONFIGS.get(font_family)


def next_font_family(font_family: str) -> str:
    """Return the family after font_family in menu order, wrapping around."""
    if font_family not in FONT_CONFIGS:
        return FONT_FAMILIES[0]
    idx = FONT_FAMILIES.index(font_family)
    return FONT_FAMILIES[(idx + 1) % len(FONT_FAMILIES)]


def clamp_font_size(size: int) -> int:
    """Clamp a requested font size into [MIN_FONT_SIZE, MAX_FONT_SIZE]."""
    return max(MIN_FONT_SIZE, min(MAX_FONT_SIZE, int(size)))


def next_font_size_preset(size: int) -> Tuple[str, int]:
    """Return the (label, size) of the first preset larger than size.

    Wraps around to the smallest preset after the largest one.
    """
    for label, preset in FONT_SIZE_PRESETS.items():
        if preset > size:
            return label, preset
    return next(iter(FONT_SIZE_PRESETS.items()))


def font_size_label(size: int) -> str:
    """Status text for a font size, naming the preset when it is one."""
    for label, preset in FONT_SIZE_PRESETS.items():
        if preset == size:
            return f"{label} ({size})"
    return str(size)

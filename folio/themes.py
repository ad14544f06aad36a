"""Color themes for the terminal reader.

Each style value is a blessed formatting attribute name (for example
"black_on_white" or "bold_red"), resolved against a blessed Terminal at
draw time. An empty name means the terminal's own default rendition.
"""

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class ThemeStyle:
    """Formatting names for the parts of the reader screen."""
    text: str
    subtext: str
    header: str
    status: str


THEME_STYLES: Dict[str, ThemeStyle] = {
    "light": ThemeStyle(
        text="black_on_bright_white",
        subtext="bright_black_on_bright_white",
        header="bold_black_on_bright_white",
        status="black_on_white",
    ),
    "dark": ThemeStyle(
        text="bright_white_on_black",
        subtext="white_on_black",
        header="bold_bright_white_on_black",
        status="bright_white_on_bright_black",
    ),
    "eyecare": ThemeStyle(
        text="black_on_bright_yellow",
        subtext="bright_black_on_bright_yellow",
        header="bold_black_on_bright_yellow",
        status="black_on_yellow",
    ),
    "newyear": ThemeStyle(
        text="red_on_bright_white",
        subtext="bright_red_on_bright_white",
        header="bold_red_on_bright_white",
        status="bright_white_on_red",
    ),
    # Follow whatever colors the terminal is configured with
    "system": ThemeStyle(
        text="",
        subtext="",
        header="bold",
        status="reverse",
    ),
}

THEMES: List[str] = list(THEME_STYLES)
DEFAULT_THEME = "system"


def get_theme_style(theme: str) -> ThemeStyle:
    """Return the style for theme, falling back to the system theme."""
    return THEME_STYLES.get(theme, THEME_STYLES[DEFAULT_THEME])


def next_theme(theme: str) -> str:
    """Return the theme after theme in menu order, wrapping around."""
    if theme not in THEME_STYLES:
        return DEFAULT_THEME
    idx = THEMES.index(theme)
    return THEMES[(idx + 1) % len(THEMES)]


def resolve(term, name: str) -> str:
    """Resolve a formatting name to the escape sequence for term."""
    if not name:
        return ""
    return str(getattr(term, name))

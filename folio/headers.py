"""Markdown heading detection for logical lines."""

import re
from typing import NamedTuple, Optional

# One to six '#' then exactly one whitespace character. A seventh '#'
# cannot match the whitespace, so '####### x' stays body text.
_HEADER_RE = re.compile(r"^(#{1,6})\s")


class HeaderInfo(NamedTuple):
    is_header: bool
    header_level: Optional[int]
    text: str


def parse_header(line: str) -> HeaderInfo:
    """Parse a logical line for a heading prefix.

    Returns a HeaderInfo whose text is the remainder after the whitespace
    following the '#' run. Lines that do not match are returned unchanged
    as non-header text.
    """
    m = _HEADER_RE.match(line)
    if not m:
        return HeaderInfo(is_header=False, header_level=None, text=line)
    return HeaderInfo(
        is_header=True,
        header_level=len(m.group(1)),
        text=line[m.end():],
    )

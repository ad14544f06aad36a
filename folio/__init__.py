"""Folio - text pagination and a terminal book reader."""

from .char_width import char_width, text_width
from .headers import HeaderInfo, parse_header
from .model import DisplayLine, InvalidConfiguration, Page, PaginationConfig
from .paginator import Paginator, paginate, paginate_with_config
from .wrap import wrap_line

__all__ = [
    'DisplayLine',
    'HeaderInfo',
    'InvalidConfiguration',
    'Page',
    'PaginationConfig',
    'Paginator',
    'char_width',
    'paginate',
    'paginate_with_config',
    'parse_header',
    'text_width',
    'wrap_line',
]

"""Page-range parsing for the :mod:`localpdf` toolkit."""

from __future__ import annotations

from .ranges import (
    MAX_PAGE_NUMBER,
    PageSelection,
    clamp_pages,
    format_range_label,
    normalize_pages,
    parse_page_groups,
    parse_page_list,
)

__all__ = [
    "MAX_PAGE_NUMBER",
    "PageSelection",
    "clamp_pages",
    "format_range_label",
    "normalize_pages",
    "parse_page_groups",
    "parse_page_list",
]

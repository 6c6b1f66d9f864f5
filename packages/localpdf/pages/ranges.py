"""Utility helpers turning free-text page specifications into page sets."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

_RANGE_TOKEN = re.compile(r"^(\d+)\s*-\s*(\d+)$")
_SINGLE_TOKEN = re.compile(r"^\d+$")
_GROUP_SEPARATOR = re.compile(r"[;\n]")

# Highest page number a selection can name; larger numbers are ignored.
MAX_PAGE_NUMBER = 100_000


@dataclass(frozen=True)
class PageSelection:
    """A normalized flat page list plus the ordered groups it was built from."""

    pages: tuple[int, ...] = ()
    groups: tuple[tuple[int, ...], ...] = field(default_factory=tuple)

    @classmethod
    def from_pages(
        cls,
        pages: Iterable[int],
        groups: Iterable[Iterable[int]] | None = None,
    ) -> "PageSelection":
        """Build a selection from caller supplied page numbers.

        Groups are normalized individually and empty ones are dropped. When
        groups are given, the flat list is their union merged with ``pages``.
        """

        normalized_groups = tuple(
            tuple(group) for group in (normalize_pages(g) for g in groups or ()) if group
        )
        flat = set(normalize_pages(pages))
        for group in normalized_groups:
            flat.update(group)
        return cls(pages=tuple(sorted(flat)), groups=normalized_groups)

    def __bool__(self) -> bool:
        return bool(self.pages)


def normalize_pages(pages: Iterable[int]) -> List[int]:
    """Return ``pages`` deduplicated, sorted, and without non-positive numbers."""

    return sorted({int(page) for page in pages if int(page) >= 1})


def _expand_token(token: str) -> Iterable[int]:
    match = _RANGE_TOKEN.match(token)
    if match:
        first, second = int(match.group(1)), int(match.group(2))
        low, high = min(first, second), max(first, second)
        return range(max(low, 1), min(high, MAX_PAGE_NUMBER) + 1)
    if _SINGLE_TOKEN.match(token):
        number = int(token)
        return (number,) if 1 <= number <= MAX_PAGE_NUMBER else ()
    return ()


def parse_page_list(text: str | None) -> List[int]:
    """Parse comma separated page numbers and ranges.

    Tokens are either ``N`` or ``A-B`` (``7-5`` is the same as ``5-7``).
    Malformed or non-positive tokens are ignored rather than rejected, so an
    empty result means nothing usable was supplied. Pages above
    :data:`MAX_PAGE_NUMBER` are dropped.

    >>> parse_page_list("3, 1-2, x, 2")
    [1, 2, 3]
    """

    if not text:
        return []
    pages: set[int] = set()
    for part in text.split(","):
        token = part.strip()
        if token:
            pages.update(_expand_token(token))
    return sorted(pages)


def parse_page_groups(text: str | None) -> PageSelection:
    """Parse ``;`` or newline separated groups of page lists.

    Group order is kept because it names per-range outputs later on.
    """

    groups: list[tuple[int, ...]] = []
    for chunk in _GROUP_SEPARATOR.split(text or ""):
        pages = parse_page_list(chunk.strip())
        if pages:
            groups.append(tuple(pages))
    flat = sorted({page for group in groups for page in group})
    return PageSelection(pages=tuple(flat), groups=tuple(groups))


def clamp_pages(pages: Iterable[int], page_count: int) -> List[int]:
    """Drop pages outside ``1..page_count`` and normalize the remainder."""

    return [page for page in normalize_pages(pages) if page <= page_count]


def format_range_label(pages: Sequence[int]) -> str:
    """Collapse ``pages`` into a compact label such as ``p1-3_p10``."""

    ordered = normalize_pages(pages)
    if not ordered:
        return ""

    parts: list[str] = []
    start = previous = ordered[0]
    for number in ordered[1:]:
        if number == previous + 1:
            previous = number
            continue
        parts.append(f"p{start}" if start == previous else f"p{start}-{previous}")
        start = previous = number
    parts.append(f"p{start}" if start == previous else f"p{start}-{previous}")
    return "_".join(parts)


__all__ = [
    "MAX_PAGE_NUMBER",
    "PageSelection",
    "clamp_pages",
    "format_range_label",
    "normalize_pages",
    "parse_page_groups",
    "parse_page_list",
]

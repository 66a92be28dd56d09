"""Character offset → page number mapping over concatenated page texts."""

from __future__ import annotations

import bisect
from collections.abc import Iterable

from pagerag.documents.schemas import PageRecord


class OffsetPageIndex:
    """Sorted (start offset, page) breakpoints with binary-search lookup.

    Each page owns ``[start, start + len(text))`` in the flat text formed
    by concatenating the page texts in order. Empty pages own nothing.
    """

    __slots__ = ("_starts", "_pages", "_end")

    def __init__(self, starts: list[int], pages: list[int], end: int):
        self._starts = tuple(starts)
        self._pages = tuple(pages)
        self._end = end

    def page_at(self, offset: int) -> int | None:
        """Return the page containing ``offset``, or ``None`` if uncovered."""
        if offset < 0 or offset >= self._end:
            return None
        pos = bisect.bisect_right(self._starts, offset) - 1
        if pos < 0:
            return None
        return self._pages[pos]

    @property
    def covered_length(self) -> int:
        return self._end

    def __len__(self) -> int:
        return len(self._starts)

    def __bool__(self) -> bool:
        return bool(self._starts)


def build_page_index(pages: Iterable[PageRecord]) -> OffsetPageIndex:
    """Walk the page records in order, accumulating a running offset."""
    starts: list[int] = []
    numbers: list[int] = []
    running = 0
    for record in pages:
        length = len(record.text)
        if length == 0:
            continue
        starts.append(running)
        numbers.append(record.page_number)
        running += length
    return OffsetPageIndex(starts, numbers, running)
